"""Tests for the agent coordinator: dispatch, policy, catalog."""

from __future__ import annotations

import pytest

from supportdesk.agent.coordinator import (
    AGENT_CATALOG,
    AgentCoordinator,
    apply_reasoning_policy,
    build_router,
    create_coordinator,
)
from supportdesk.agent.llm_router import LLMRouter
from supportdesk.agent.router import KeywordRouter
from supportdesk.agent.schemas import (
    AgentResponse,
    ConversationContext,
    RouteDecision,
)
from supportdesk.api.dependencies import Repos
from supportdesk.config import Settings
from supportdesk.constants import (
    REASON_CONTINUITY,
    ROUTABLE_CATEGORIES,
    Category,
    ReasoningPolicy,
)
from tests.conftest import DEMO_USER


class _FixedRouter:
    """Router stub that always returns the same decision."""

    def __init__(self, decision: RouteDecision) -> None:
        self.decision = decision
        self.calls: list[str] = []

    async def route(
        self, message: str, context: ConversationContext | None = None
    ) -> RouteDecision:
        self.calls.append(message)
        return self.decision


def _ctx(
    category: Category = Category.ROUTER, **metadata: object
) -> ConversationContext:
    return ConversationContext(
        conversation_id="c1",
        user_id=DEMO_USER,
        category=category,
        metadata=dict(metadata),
    )


def _coordinator(
    repos: Repos,
    router: object,
    policy: ReasoningPolicy = ReasoningPolicy.ROUTER,
) -> AgentCoordinator:
    return create_coordinator(
        order_repo=repos.order,
        billing_repo=repos.billing,
        conversation_repo=repos.conversation,
        user_repo=repos.user,
        settings=Settings(reasoning_policy=policy),
        router=router,  # type: ignore[arg-type]
    )


class TestRegistry:
    def test_covers_every_routable_category(
        self, coordinator: AgentCoordinator
    ) -> None:
        assert set(coordinator.responders) == set(ROUTABLE_CATEGORIES)
        for category, responder in coordinator.responders.items():
            assert responder.category == category

    def test_router_category_falls_back_to_support(
        self, coordinator: AgentCoordinator
    ) -> None:
        responder = coordinator.responder_for(Category.ROUTER)
        assert responder.category == Category.SUPPORT


class TestDispatch:
    async def test_order_message(self, coordinator: AgentCoordinator) -> None:
        decision, response = await coordinator.dispatch(
            "Where is my order ORD-001?", _ctx()
        )
        assert decision.category == Category.ORDER
        assert response.category == Category.ORDER
        assert "TRK123456789" in response.content

    async def test_billing_message(
        self, coordinator: AgentCoordinator
    ) -> None:
        response = await coordinator.process_message(
            "what is the status of refund REF-001", _ctx()
        )
        assert response.category == Category.BILLING
        assert "PROCESSED" in response.content

    async def test_support_fallback(
        self, coordinator: AgentCoordinator
    ) -> None:
        response = await coordinator.process_message("Hello!", _ctx())
        assert response.category == Category.SUPPORT
        assert response.reasoning == "low confidence, default to support"

    async def test_continuity_with_remembered_order(
        self, coordinator: AgentCoordinator
    ) -> None:
        decision, response = await coordinator.dispatch(
            "has it shipped?",
            _ctx(Category.ORDER, last_order_number="ORD-001"),
        )
        assert decision.reasoning == REASON_CONTINUITY
        assert response.tool_calls[0].arguments == {
            "order_number": "ORD-001"
        }

    async def test_context_not_mutated(
        self, coordinator: AgentCoordinator
    ) -> None:
        ctx = _ctx()
        before = ctx.model_dump()
        await coordinator.process_message("cancel ORD-002", ctx)
        assert ctx.model_dump() == before

    async def test_router_category_decision_goes_to_support(
        self, seeded_repos: Repos
    ) -> None:
        router = _FixedRouter(
            RouteDecision(
                category=Category.ROUTER, confidence=0.4, reasoning="?"
            )
        )
        response = await _coordinator(seeded_repos, router).process_message(
            "hi", _ctx()
        )
        assert response.category == Category.SUPPORT
        assert router.calls == ["hi"]

    async def test_response_category_follows_decision(
        self, seeded_repos: Repos
    ) -> None:
        """The router's pick decides the responder, not the text."""
        router = _FixedRouter(
            RouteDecision(
                category=Category.BILLING, confidence=0.7, reasoning="llm"
            )
        )
        response = await _coordinator(seeded_repos, router).process_message(
            "Where is my order ORD-001?", _ctx()
        )
        assert response.category == Category.BILLING


class TestReasoningPolicy:
    async def test_router_policy_overwrites(
        self, seeded_repos: Repos
    ) -> None:
        coordinator = _coordinator(seeded_repos, KeywordRouter())
        response = await coordinator.process_message("Track ORD-001", _ctx())
        assert response.reasoning == "Matched ORDER keywords in message"

    async def test_responder_policy_keeps_responder_reasoning(
        self, seeded_repos: Repos
    ) -> None:
        coordinator = _coordinator(
            seeded_repos, KeywordRouter(), ReasoningPolicy.RESPONDER
        )
        response = await coordinator.process_message("Track ORD-001", _ctx())
        assert response.reasoning == "Provided tracking information"

    def test_responder_policy_falls_back_to_router(self) -> None:
        decision = RouteDecision(
            category=Category.ORDER, confidence=0.9, reasoning="routed"
        )
        response = AgentResponse(content="x", category=Category.ORDER)
        result = apply_reasoning_policy(
            response, decision, ReasoningPolicy.RESPONDER
        )
        assert result.reasoning == "routed"
        assert response.reasoning is None


class TestCatalog:
    def test_lists_all_agents(self, coordinator: AgentCoordinator) -> None:
        agents = coordinator.list_agents()
        assert [a.type for a in agents] == [
            Category.ROUTER,
            Category.ORDER,
            Category.BILLING,
            Category.SUPPORT,
        ]
        assert agents[1].name == "Order Agent"

    def test_capabilities(self, coordinator: AgentCoordinator) -> None:
        caps = coordinator.get_agent_capabilities(Category.BILLING)
        assert "process_refund" in caps.tools
        assert caps.name == "Billing Agent"

    def test_capabilities_are_copies(
        self, coordinator: AgentCoordinator
    ) -> None:
        caps = coordinator.get_agent_capabilities(Category.ORDER)
        caps.tools.append("rogue")
        assert "rogue" not in AGENT_CATALOG[Category.ORDER].tools


class TestEndToEndScenarios:
    async def test_track_my_order(
        self, coordinator: AgentCoordinator
    ) -> None:
        decision, response = await coordinator.dispatch(
            "Track my order ORD-001", _ctx()
        )
        assert decision.category == Category.ORDER
        assert response.tool_calls[0].name == "track_order"
        assert "ORD-001" in response.content
        assert "TRK123456789" in response.content

    async def test_refund_without_identifier(
        self, coordinator: AgentCoordinator
    ) -> None:
        response = await coordinator.process_message(
            "I want a refund", _ctx()
        )
        assert response.category == Category.BILLING
        assert "I don't see any refunds" in response.content

    async def test_hello_gets_greeting(
        self, coordinator: AgentCoordinator
    ) -> None:
        response = await coordinator.process_message("hello", _ctx())
        assert response.category == Category.SUPPORT
        assert response.content.startswith("Hello! Welcome")
        assert response.tool_calls == []


class TestBuildRouter:
    def test_keyword_strategy(self) -> None:
        router = build_router(Settings(router_strategy="keyword"))
        assert isinstance(router, KeywordRouter)

    def test_llm_strategy(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_MODEL_CHAIN", "test")
        router = build_router(Settings(router_strategy="llm"))
        assert isinstance(router, LLMRouter)
