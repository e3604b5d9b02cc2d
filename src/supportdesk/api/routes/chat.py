"""Chat routes: send messages and manage conversation history."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from supportdesk.api.dependencies import (
    get_conversation_service,
    get_user_id,
)
from supportdesk.api.schemas import APIResponse, ChatRequest
from supportdesk.constants import DEFAULT_PAGE_SIZE
from supportdesk.services.conversation_service import ConversationService

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/messages")
async def send_message(
    body: ChatRequest,
    user_id: str = Depends(get_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> APIResponse:
    """Process one user message and return the assistant reply."""
    turn = await service.send_message(
        user_id, body.message, body.conversation_id
    )
    return APIResponse(
        success=True,
        data=turn.to_dict(),
        metadata={"request_id": turn.request_id},
    )


@router.get("/conversations")
async def list_conversations(
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> APIResponse:
    """List the caller's conversations, most recently active first."""
    convs = await service.list_conversations(user_id, limit, offset)
    return APIResponse(
        success=True,
        data=[c.to_dict() for c in convs],
        metadata={"limit": limit, "offset": offset, "count": len(convs)},
    )


@router.get("/conversations/{conversation_id}")
async def get_conversation(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> APIResponse:
    """Get a conversation with its messages."""
    conv, messages = await service.get_conversation(
        conversation_id, user_id
    )
    return APIResponse(
        success=True,
        data={
            **conv.to_dict(),
            "messages": [m.to_dict() for m in messages],
        },
    )


@router.delete("/conversations/{conversation_id}")
async def delete_conversation(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> APIResponse:
    """Delete a conversation and its messages."""
    await service.delete_conversation(conversation_id, user_id)
    return APIResponse(success=True, data={"id": conversation_id})
