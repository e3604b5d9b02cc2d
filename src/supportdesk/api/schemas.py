"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    """Standard response envelope for all API endpoints."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ChatRequest(BaseModel):
    """Request body for POST /api/chat/messages."""

    message: str = Field(min_length=1, max_length=10_000)
    conversation_id: str | None = None
