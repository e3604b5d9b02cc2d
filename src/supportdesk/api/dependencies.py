"""FastAPI dependency injection for repository and service access."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass

from fastapi import Depends, Header, Request

from supportdesk.agent.coordinator import (
    AgentCoordinator,
    create_coordinator,
)
from supportdesk.repositories.protocols import (
    BillingRepository,
    ConversationRepository,
    OrderRepository,
    UserRepository,
)
from supportdesk.services.conversation_service import ConversationService


@dataclass
class Repos:
    """Repository container resolved per-request via Depends.

    Bundles all 4 repository protocols into a single injectable
    unit. Routes receive this instead of touching session_factory.
    """

    user: UserRepository
    order: OrderRepository
    billing: BillingRepository
    conversation: ConversationRepository


async def get_repos(
    request: Request,
) -> AsyncIterator[Repos]:
    """Generator dep: session lives for entire request.

    Commits once after the route has finished; an exception in the
    route skips the commit and the session rolls back on close.
    """
    from supportdesk.repositories.billing_repo import (
        SqlBillingRepository,
    )
    from supportdesk.repositories.conversation_repo import (
        SqlConversationRepository,
    )
    from supportdesk.repositories.order_repo import SqlOrderRepository
    from supportdesk.repositories.user_repo import SqlUserRepository

    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield Repos(
            user=SqlUserRepository(session),
            order=SqlOrderRepository(session),
            billing=SqlBillingRepository(session),
            conversation=SqlConversationRepository(session),
        )
        await session.commit()


def get_user_id(
    request: Request,
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> str:
    """Caller identity from the X-User-Id header, else the demo user."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return request.app.state.settings.default_user_id  # type: ignore[no-any-return]


def get_coordinator(
    request: Request,
    repos: Repos = Depends(get_repos),
) -> AgentCoordinator:
    return create_coordinator(
        order_repo=repos.order,
        billing_repo=repos.billing,
        conversation_repo=repos.conversation,
        user_repo=repos.user,
        settings=request.app.state.settings,
        router=getattr(request.app.state, "router", None),
    )


def get_conversation_service(
    request: Request,
    repos: Repos = Depends(get_repos),
    coordinator: AgentCoordinator = Depends(get_coordinator),
) -> ConversationService:
    return ConversationService(
        repos.conversation,
        coordinator,
        agent_logger=getattr(request.app.state, "logger", None),
        history_limit=request.app.state.settings.history_limit,
    )
