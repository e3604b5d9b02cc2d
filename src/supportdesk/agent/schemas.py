"""Pydantic models passed between the router, responders and caller."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from supportdesk.constants import Category, MessageRole


class RouteDecision(BaseModel):
    """Routing outcome for a single message."""

    category: Category
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str


class ChatMessage(BaseModel):
    """A prior message as seen by the router and responders."""

    role: MessageRole
    content: str
    category: Category | None = None


class ConversationContext(BaseModel):
    """Caller-owned conversation state, handed over by value per call."""

    conversation_id: str
    user_id: str
    previous_messages: list[ChatMessage] = Field(
        default_factory=lambda: list[ChatMessage]()
    )
    category: Category = Category.ROUTER
    metadata: dict[str, Any] = Field(
        default_factory=lambda: dict[str, Any]()
    )


class ToolCall(BaseModel):
    """Record of a data-tool invocation made by a responder."""

    name: str
    arguments: dict[str, Any] = Field(
        default_factory=lambda: dict[str, Any]()
    )
    success: bool | None = None


class AgentResponse(BaseModel):
    """Reply produced by a responder and surfaced by the coordinator."""

    content: str = Field(
        description="Natural language reply shown to the customer"
    )
    category: Category
    reasoning: str | None = None
    tool_calls: list[ToolCall] = Field(
        default_factory=lambda: list[ToolCall](),
        description="Data tools invoked while producing the reply",
    )


class AgentCapabilities(BaseModel):
    """Catalog entry describing one agent."""

    name: str
    description: str
    tools: list[str] = Field(default_factory=lambda: list[str]())


class AgentSummary(BaseModel):
    """Short listing entry for the agent catalog."""

    type: Category
    name: str
    description: str
