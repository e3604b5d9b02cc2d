"""Dispatcher: route a message, hand it to the category's responder.

The responder registry covers every routable category; anything else
falls back to the support responder. Which reasoning string reaches
the caller is decided by the configured ReasoningPolicy.
"""

from __future__ import annotations

import logging

from supportdesk.agent.llm_router import LLMRouter
from supportdesk.agent.responders import (
    BillingResponder,
    OrderResponder,
    Responder,
    SupportResponder,
)
from supportdesk.agent.router import IntentRouter, KeywordRouter
from supportdesk.agent.schemas import (
    AgentCapabilities,
    AgentResponse,
    AgentSummary,
    ConversationContext,
    RouteDecision,
)
from supportdesk.agent.tools import (
    RepoBillingTools,
    RepoOrderTools,
    RepoSupportTools,
)
from supportdesk.config import Settings
from supportdesk.constants import Category, ReasoningPolicy
from supportdesk.repositories.protocols import (
    BillingRepository,
    ConversationRepository,
    OrderRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

# ── Agent catalog ─────────────────────────────────────

AGENT_CATALOG: dict[Category, AgentCapabilities] = {
    Category.ROUTER: AgentCapabilities(
        name="Router Agent",
        description=(
            "Analyzes incoming queries and delegates to the "
            "appropriate specialized agent"
        ),
        tools=["intent_classification"],
    ),
    Category.ORDER: AgentCapabilities(
        name="Order Agent",
        description=(
            "Handles order status, tracking, modifications, "
            "and cancellations"
        ),
        tools=[
            "get_order_details",
            "get_user_orders",
            "track_order",
            "cancel_order",
            "modify_order",
        ],
    ),
    Category.BILLING: AgentCapabilities(
        name="Billing Agent",
        description="Handles payments, refunds, invoices, and subscriptions",
        tools=[
            "get_invoice_details",
            "get_payment_history",
            "check_refund_status",
            "get_subscription_info",
            "process_refund",
        ],
    ),
    Category.SUPPORT: AgentCapabilities(
        name="Support Agent",
        description="Handles general inquiries, FAQs, and troubleshooting",
        tools=[
            "query_conversation_history",
            "search_faqs",
            "get_user_info",
            "get_recent_interactions",
        ],
    ),
}


def apply_reasoning_policy(
    response: AgentResponse,
    decision: RouteDecision,
    policy: ReasoningPolicy,
) -> AgentResponse:
    """Return *response* carrying the reasoning *policy* selects."""
    if policy == ReasoningPolicy.RESPONDER and response.reasoning:
        return response
    return response.model_copy(update={"reasoning": decision.reasoning})


class AgentCoordinator:
    """Routes each message and dispatches it to one responder."""

    def __init__(
        self,
        router: IntentRouter,
        order: Responder,
        billing: Responder,
        support: Responder,
        reasoning_policy: ReasoningPolicy = ReasoningPolicy.ROUTER,
    ) -> None:
        self._router = router
        self._support = support
        self._responders: dict[Category, Responder] = {
            Category.ORDER: order,
            Category.BILLING: billing,
            Category.SUPPORT: support,
        }
        self._policy = reasoning_policy

    @property
    def responders(self) -> dict[Category, Responder]:
        return dict(self._responders)

    def responder_for(self, category: Category) -> Responder:
        return self._responders.get(category, self._support)

    async def process_message(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        _, response = await self.dispatch(message, context)
        return response

    async def dispatch(
        self, message: str, context: ConversationContext
    ) -> tuple[RouteDecision, AgentResponse]:
        """Like process_message, also returning the routing decision."""
        decision = await self._router.route(message, context)
        routed = context.model_copy(update={"category": decision.category})
        responder = self.responder_for(decision.category)

        logger.debug(
            "event=message_routed category=%s confidence=%.2f "
            "responder=%s",
            decision.category,
            decision.confidence,
            responder.category,
        )

        response = await responder.handle(message, routed)
        return decision, apply_reasoning_policy(
            response, decision, self._policy
        )

    def list_agents(self) -> list[AgentSummary]:
        return [
            AgentSummary(
                type=category,
                name=entry.name,
                description=entry.description,
            )
            for category, entry in AGENT_CATALOG.items()
        ]

    def get_agent_capabilities(
        self, category: Category
    ) -> AgentCapabilities:
        return AGENT_CATALOG[category].model_copy(deep=True)


def build_router(settings: Settings) -> IntentRouter:
    if settings.router_strategy == "llm":
        return LLMRouter(timeout_seconds=settings.llm_timeout_seconds)
    return KeywordRouter()


def create_coordinator(
    *,
    order_repo: OrderRepository,
    billing_repo: BillingRepository,
    conversation_repo: ConversationRepository,
    user_repo: UserRepository,
    settings: Settings | None = None,
    router: IntentRouter | None = None,
) -> AgentCoordinator:
    """Wire repositories into tools, responders and a router."""
    settings = settings or Settings()
    return AgentCoordinator(
        router=router or build_router(settings),
        order=OrderResponder(RepoOrderTools(order_repo, billing_repo)),
        billing=BillingResponder(
            RepoBillingTools(order_repo, billing_repo)
        ),
        support=SupportResponder(
            RepoSupportTools(conversation_repo, user_repo, order_repo)
        ),
        reasoning_policy=settings.reasoning_policy,
    )
