"""Conversation lifecycle: the caller around the coordinator.

Owns everything the coordinator treats as caller state: finding or
creating the conversation, ownership checks, assembling the context
from stored messages, and persisting both sides of a chat turn.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from supportdesk.agent.coordinator import AgentCoordinator
from supportdesk.agent.schemas import (
    AgentResponse,
    ChatMessage,
    ConversationContext,
    RouteDecision,
)
from supportdesk.constants import (
    CONVERSATION_TITLE_CHARS,
    DEFAULT_PAGE_SIZE,
    ERROR_TRUNCATION_CHARS,
    ID_HEX_LENGTH,
    META_LAST_CATEGORY,
    META_LAST_MESSAGE_AT,
    META_LAST_ORDER_NUMBER,
    Category,
    MessageRole,
)
from supportdesk.errors import (
    ConversationAccessError,
    ConversationNotFoundError,
)
from supportdesk.logger import AgentLogger
from supportdesk.models.conversation import Conversation, Message
from supportdesk.repositories.protocols import ConversationRepository

logger = logging.getLogger(__name__)


@dataclass
class ChatTurn:
    """Outcome of one processed user message."""

    request_id: str
    conversation: Conversation
    user_message: Message
    assistant_message: Message
    decision: RouteDecision
    response: AgentResponse

    def to_dict(self) -> dict[str, Any]:
        return {
            "conversation_id": self.conversation.id,
            "user_message": self.user_message.to_dict(),
            "message": self.assistant_message.to_dict(),
            "category": self.response.category,
            "confidence": self.decision.confidence,
            "reasoning": self.response.reasoning,
            "tool_calls": [
                c.model_dump() for c in self.response.tool_calls
            ],
        }


def conversation_title(message: str) -> str:
    """First 50 characters of the opening message."""
    text = message.strip()
    if len(text) <= CONVERSATION_TITLE_CHARS:
        return text
    return text[:CONVERSATION_TITLE_CHARS] + "..."


def last_order_number(response: AgentResponse) -> str | None:
    """Most recent order number a tool was called with, if any."""
    for call in reversed(response.tool_calls):
        number = call.arguments.get("order_number")
        if isinstance(number, str):
            return number
    return None


def _to_chat_message(message: Message) -> ChatMessage:
    category = (
        Category(message.category) if message.category else None
    )
    return ChatMessage(
        role=MessageRole(message.role),
        content=message.content,
        category=category,
    )


class ConversationService:
    def __init__(
        self,
        repo: ConversationRepository,
        coordinator: AgentCoordinator,
        agent_logger: AgentLogger | None = None,
        history_limit: int = 50,
    ) -> None:
        self._repo = repo
        self._coordinator = coordinator
        self._agent_logger = agent_logger
        self._history_limit = history_limit

    async def list_conversations(
        self,
        user_id: str,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Conversation]:
        return await self._repo.list_for_user(user_id, limit, offset)

    async def get_owned(
        self, conversation_id: str, user_id: str
    ) -> Conversation:
        """Load a conversation, enforcing that *user_id* owns it.

        Raises ConversationNotFoundError or ConversationAccessError.
        """
        conversation = await self._repo.get_conversation(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        if conversation.user_id != user_id:
            logger.warning(
                "event=conversation_access_denied conversation_id=%s",
                conversation_id,
            )
            raise ConversationAccessError(conversation_id)
        return conversation

    async def get_conversation(
        self, conversation_id: str, user_id: str
    ) -> tuple[Conversation, list[Message]]:
        conversation = await self.get_owned(conversation_id, user_id)
        messages = await self._repo.get_messages(conversation_id)
        return conversation, messages

    async def delete_conversation(
        self, conversation_id: str, user_id: str
    ) -> None:
        await self.get_owned(conversation_id, user_id)
        await self._repo.delete_conversation(conversation_id)
        logger.info(
            "event=conversation_deleted conversation_id=%s",
            conversation_id,
        )

    async def build_context(
        self, conversation: Conversation
    ) -> ConversationContext:
        """Snapshot stored state into the context the coordinator sees."""
        messages = await self._repo.get_messages(conversation.id)
        recent = messages[-self._history_limit :] if messages else []
        return ConversationContext(
            conversation_id=conversation.id,
            user_id=conversation.user_id,
            previous_messages=[_to_chat_message(m) for m in recent],
            category=Category(conversation.category),
            metadata=dict(conversation.context or {}),
        )

    async def send_message(
        self,
        user_id: str,
        message: str,
        conversation_id: str | None = None,
    ) -> ChatTurn:
        request_id = uuid.uuid4().hex[:ID_HEX_LENGTH]
        start = time.monotonic()

        if conversation_id is not None:
            conversation = await self.get_owned(conversation_id, user_id)
        else:
            conversation = await self._repo.create_conversation(
                Conversation(
                    user_id=user_id,
                    title=conversation_title(message),
                    category=Category.ROUTER,
                    context={},
                )
            )

        context = await self.build_context(conversation)

        user_message = await self._repo.add_message(
            Message(
                conversation_id=conversation.id,
                role=MessageRole.USER,
                content=message,
            )
        )

        try:
            decision, response = await self._coordinator.dispatch(
                message, context
            )
        except Exception as exc:
            logger.exception(
                "event=dispatch_failed request_id=%s conversation_id=%s",
                request_id,
                conversation.id,
            )
            if self._agent_logger is not None:
                self._agent_logger.log_error(
                    request_id=request_id,
                    component="coordinator",
                    error=str(exc)[:ERROR_TRUNCATION_CHARS],
                )
            raise

        assistant_message = await self._repo.add_message(
            Message(
                conversation_id=conversation.id,
                role=MessageRole.ASSISTANT,
                content=response.content,
                category=response.category,
                message_metadata={
                    "request_id": request_id,
                    "confidence": decision.confidence,
                    "reasoning": response.reasoning,
                    "tool_calls": [
                        c.model_dump() for c in response.tool_calls
                    ],
                },
            )
        )

        now = datetime.now(UTC)
        metadata = dict(conversation.context or {})
        metadata[META_LAST_CATEGORY] = str(response.category)
        metadata[META_LAST_MESSAGE_AT] = now.isoformat()
        order_number = last_order_number(response)
        if order_number is not None:
            metadata[META_LAST_ORDER_NUMBER] = order_number
        conversation.context = metadata
        conversation.category = response.category
        conversation.updated_at = now
        await self._repo.save_conversation(conversation)

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "event=message_processed request_id=%s category=%s "
            "confidence=%.2f duration_ms=%d",
            request_id,
            response.category,
            decision.confidence,
            duration_ms,
        )
        if self._agent_logger is not None:
            self._agent_logger.log_request(
                request_id=request_id,
                query=message,
                category=response.category,
                confidence=decision.confidence,
                tools_called=[c.name for c in response.tool_calls],
                duration_ms=duration_ms,
                conversation_id=conversation.id,
            )

        return ChatTurn(
            request_id=request_id,
            conversation=conversation,
            user_message=user_message,
            assistant_message=assistant_message,
            decision=decision,
            response=response,
        )
