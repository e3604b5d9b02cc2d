"""CRUD tests for SqlConversationRepository."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from supportdesk.constants import Category, MessageRole
from supportdesk.models.conversation import Conversation, Message
from supportdesk.repositories.conversation_repo import (
    SqlConversationRepository,
)


@pytest.fixture
def repo(session: AsyncSession) -> SqlConversationRepository:
    return SqlConversationRepository(session)


async def _conversation(
    repo: SqlConversationRepository, user_id: str = "conv-user"
) -> Conversation:
    return await repo.create_conversation(
        Conversation(user_id=user_id, title="Chat 1", context={})
    )


async def _message(
    repo: SqlConversationRepository,
    conv: Conversation,
    content: str,
    role: MessageRole = MessageRole.USER,
) -> Message:
    return await repo.add_message(
        Message(conversation_id=conv.id, role=role, content=content)
    )


async def test_create_conversation_defaults(
    repo: SqlConversationRepository,
) -> None:
    conv = await _conversation(repo)
    assert conv.id
    assert conv.category == Category.ROUTER
    fetched = await repo.get_conversation(conv.id)
    assert fetched is not None
    assert fetched.title == "Chat 1"


async def test_messages_in_order(repo: SqlConversationRepository) -> None:
    conv = await _conversation(repo)
    await _message(repo, conv, "first")
    await asyncio.sleep(0.001)
    await _message(repo, conv, "second", MessageRole.ASSISTANT)

    messages = await repo.get_messages(conv.id)
    assert [m.content for m in messages] == ["first", "second"]
    assert [m.content for m in await repo.get_messages(conv.id, 1)] == [
        "first"
    ]
    last = await repo.get_last_message(conv.id)
    assert last is not None
    assert last.content == "second"
    assert await repo.count_messages(conv.id) == 2


async def test_message_metadata_column(
    repo: SqlConversationRepository,
) -> None:
    conv = await _conversation(repo)
    msg = await repo.add_message(
        Message(
            conversation_id=conv.id,
            role=MessageRole.ASSISTANT,
            content="hi",
            category=Category.SUPPORT,
            message_metadata={"confidence": 0.5},
        )
    )
    assert msg.to_dict()["metadata"] == {"confidence": 0.5}


async def test_save_conversation_context(
    repo: SqlConversationRepository, session: AsyncSession
) -> None:
    conv = await _conversation(repo)
    conv.context = {"last_order_number": "ORD-001"}
    conv.category = Category.ORDER
    await repo.save_conversation(conv)
    await session.commit()
    session.expire_all()
    reloaded = await repo.get_conversation(conv.id)
    assert reloaded is not None
    assert reloaded.context == {"last_order_number": "ORD-001"}
    assert reloaded.category == Category.ORDER


async def test_list_for_user_paginates(
    repo: SqlConversationRepository,
) -> None:
    for _ in range(3):
        await _conversation(repo, "pager")
    await _conversation(repo, "other")
    assert len(await repo.list_for_user("pager", 10)) == 3
    assert len(await repo.list_for_user("pager", 2)) == 2
    assert len(await repo.list_for_user("pager", 10, offset=2)) == 1


async def test_delete_removes_messages(
    repo: SqlConversationRepository,
) -> None:
    conv = await _conversation(repo)
    await _message(repo, conv, "bye")
    await repo.delete_conversation(conv.id)
    assert await repo.get_conversation(conv.id) is None
    assert await repo.count_messages(conv.id) == 0
