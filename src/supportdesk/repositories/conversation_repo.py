"""SQL implementation of ConversationRepository."""

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from supportdesk.models.conversation import Conversation, Message


class SqlConversationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(
        self, user_id: str, limit: int, offset: int = 0
    ) -> list[Conversation]:
        result = await self._session.execute(
            select(Conversation)
            .where(Conversation.user_id == user_id)
            .order_by(Conversation.updated_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_conversation(
        self, conversation_id: str
    ) -> Conversation | None:
        result = await self._session.execute(
            select(Conversation).where(Conversation.id == conversation_id)
        )
        return result.scalar_one_or_none()

    async def create_conversation(
        self, conversation: Conversation
    ) -> Conversation:
        self._session.add(conversation)
        await self._session.flush()
        return conversation

    async def save_conversation(
        self, conversation: Conversation
    ) -> Conversation:
        await self._session.flush()
        return conversation

    async def delete_conversation(self, conversation_id: str) -> None:
        # SQLite does not enforce ON DELETE CASCADE without a pragma
        await self._session.execute(
            sa_delete(Message).where(
                Message.conversation_id == conversation_id
            )
        )
        await self._session.execute(
            sa_delete(Conversation).where(
                Conversation.id == conversation_id
            )
        )
        await self._session.flush()

    async def get_messages(
        self, conversation_id: str, limit: int | None = None
    ) -> list[Message]:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_last_message(
        self, conversation_id: str
    ) -> Message | None:
        result = await self._session.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count_messages(self, conversation_id: str) -> int:
        result = await self._session.execute(
            select(func.count())
            .select_from(Message)
            .where(Message.conversation_id == conversation_id)
        )
        return int(result.scalar_one())

    async def add_message(self, message: Message) -> Message:
        self._session.add(message)
        await self._session.flush()
        return message
