"""CLI entry point: ``supportdesk serve``, ``seed`` and ``route``."""

from __future__ import annotations

# Singleton logging: before the app modules configure their loggers
from supportdesk.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import json  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import TYPE_CHECKING  # noqa: E402

from supportdesk import __version__  # noqa: E402
from supportdesk.config import Settings  # noqa: E402
from supportdesk.constants import Category  # noqa: E402

if TYPE_CHECKING:
    from supportdesk.seed import SeedSummary


def main() -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"supportdesk {__version__}")
        return

    if args.command == "serve":
        _run_serve(args)
    elif args.command == "seed":
        _run_seed(args)
    elif args.command == "route":
        _run_route(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="supportdesk",
        description=(
            "Customer support chat backend: "
            "routes messages to order, billing and support agents."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument(
        "--host",
        default="127.0.0.1",
        help="Bind address (default: 127.0.0.1)",
    )
    serve.add_argument(
        "--port",
        "-p",
        type=int,
        default=8000,
        help="Port (default: 8000)",
    )
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (development only)",
    )

    seed = sub.add_parser("seed", help="Load the demo dataset")
    seed.add_argument(
        "--db",
        default=None,
        help="SQLite file path override (default: from settings)",
    )
    seed.add_argument(
        "--user-id",
        default=None,
        help="Owner of the demo data (default: DEFAULT_USER_ID)",
    )

    route = sub.add_parser(
        "route",
        help="Classify a message without touching the database",
    )
    route.add_argument("message", help="Customer message to classify")
    route.add_argument(
        "--category",
        "-c",
        type=str.upper,
        choices=[c.value for c in Category],
        default=None,
        help="Category carried over from the previous message",
    )
    route.add_argument(
        "--strategy",
        choices=["keyword", "llm"],
        default=None,
        help="Router strategy override (default: from settings)",
    )

    return parser


def _run_serve(args: argparse.Namespace) -> None:
    """Start uvicorn with logging left to setup_logging()."""
    import uvicorn

    uvicorn.run(
        "supportdesk.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


def _run_seed(args: argparse.Namespace) -> None:
    """Create tables and insert the demo dataset."""
    settings = Settings()
    db_url = settings.database_url
    if args.db:
        db_url = f"sqlite:///{args.db}"
    user_id = args.user_id or settings.default_user_id

    if db_url.startswith("sqlite:///"):
        Path(db_url[len("sqlite:///"):]).parent.mkdir(
            parents=True, exist_ok=True
        )

    summary = asyncio.run(_seed(db_url, user_id))
    if summary.total() == 0:
        print(f"Demo data already present for user '{user_id}'")
        return
    print(
        f"Seeded {summary.orders} orders, {summary.payments} payments, "
        f"{summary.invoices} invoices, {summary.refunds} refunds, "
        f"{summary.conversations} conversations for user '{user_id}'"
    )


async def _seed(db_url: str, user_id: str) -> SeedSummary:
    from sqlalchemy.ext.asyncio import async_sessionmaker

    from supportdesk.config import create_app_engine
    from supportdesk.models.base import Base
    from supportdesk.repositories.billing_repo import (
        SqlBillingRepository,
    )
    from supportdesk.repositories.conversation_repo import (
        SqlConversationRepository,
    )
    from supportdesk.repositories.order_repo import SqlOrderRepository
    from supportdesk.repositories.user_repo import SqlUserRepository
    from supportdesk.seed import seed_demo_data

    engine = create_app_engine(db_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        session_factory = async_sessionmaker(
            engine, expire_on_commit=False
        )
        async with session_factory() as session:
            summary = await seed_demo_data(
                SqlUserRepository(session),
                SqlOrderRepository(session),
                SqlBillingRepository(session),
                SqlConversationRepository(session),
                user_id=user_id,
            )
            await session.commit()
        return summary
    finally:
        await engine.dispose()


def _run_route(args: argparse.Namespace) -> None:
    """Print the routing decision for a single message as JSON."""
    from supportdesk.agent.coordinator import build_router
    from supportdesk.agent.schemas import ConversationContext

    settings = Settings()
    if args.strategy:
        settings = settings.model_copy(
            update={"router_strategy": args.strategy}
        )

    context = None
    if args.category:
        context = ConversationContext(
            conversation_id="cli",
            user_id=settings.default_user_id,
            category=Category(args.category),
        )

    try:
        router = build_router(settings)
    except Exception as exc:
        print(f"Error: could not build router: {exc}", file=sys.stderr)
        sys.exit(1)

    decision = asyncio.run(router.route(args.message, context))
    print(json.dumps(decision.model_dump(mode="json"), indent=2))
