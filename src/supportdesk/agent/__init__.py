"""Agent layer: intent routing and category responders."""

from supportdesk.agent.coordinator import (
    AgentCoordinator,
    create_coordinator,
)
from supportdesk.agent.llm_router import LLMRouter, resolve_model
from supportdesk.agent.router import IntentRouter, KeywordRouter
from supportdesk.agent.schemas import (
    AgentResponse,
    ConversationContext,
    RouteDecision,
)
from supportdesk.agent.scorer import score

__all__ = [
    "AgentCoordinator",
    "AgentResponse",
    "ConversationContext",
    "IntentRouter",
    "KeywordRouter",
    "LLMRouter",
    "RouteDecision",
    "create_coordinator",
    "resolve_model",
    "score",
]
