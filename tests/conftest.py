"""Shared test fixtures: in-memory SQLite, async session, fake repos."""

import os

# Force demo API keys for all tests: no real LLM calls.
# These are set unconditionally at import time, so even if you have
# real keys in your shell environment, pytest overwrites them before
# any Settings() is created.
os.environ["GOOGLE_API_KEY"] = "for-demo-purposes-only"
os.environ["OPENAI_API_KEY"] = "for-demo-purposes-only"
os.environ["ROUTER_STRATEGY"] = "keyword"

from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
)

from supportdesk.agent.coordinator import create_coordinator
from supportdesk.agent.router import KeywordRouter
from supportdesk.api.dependencies import Repos, get_repos
from supportdesk.config import Settings
from supportdesk.logger import AgentLogger
from supportdesk.main import app
from supportdesk.models.base import Base
from supportdesk.repositories.fakes import (
    FakeBillingRepository,
    FakeConversationRepository,
    FakeOrderRepository,
    FakeUserRepository,
)
from supportdesk.seed import seed_demo_data

DEMO_USER = "demo-user"


def make_fake_repos() -> Repos:
    return Repos(
        user=FakeUserRepository(),
        order=FakeOrderRepository(),
        billing=FakeBillingRepository(),
        conversation=FakeConversationRepository(),
    )


async def seed_fakes(repos: Repos, user_id: str = DEMO_USER) -> None:
    await seed_demo_data(
        repos.user,
        repos.order,
        repos.billing,
        repos.conversation,
        user_id=user_id,
    )


def setup_test_app(tmp_path: Path) -> Repos:
    """Common app-state setup for API test fixtures.

    Sets up fake repos, settings, logger, router and the get_repos
    override. Each test file's fixture calls this then adds its own
    specifics (e.g. seeded data).
    """
    fake_repos = make_fake_repos()

    app.state.settings = Settings(
        database_url="sqlite:///:memory:",
        default_user_id=DEMO_USER,
    )
    app.state.logger = AgentLogger(
        log_dir=Path(tmp_path / "logs"), level="WARNING"
    )
    app.state.router = KeywordRouter()

    app.dependency_overrides[get_repos] = lambda: fake_repos

    return fake_repos


@pytest.fixture
def repos() -> Repos:
    """Empty in-memory repositories."""
    return make_fake_repos()


@pytest.fixture
async def seeded_repos(repos: Repos) -> Repos:
    """In-memory repositories holding the demo dataset."""
    await seed_fakes(repos)
    return repos


@pytest.fixture
def coordinator(seeded_repos: Repos):
    """Keyword-routed coordinator over the seeded fakes."""
    return create_coordinator(
        order_repo=seeded_repos.order,
        billing_repo=seeded_repos.billing,
        conversation_repo=seeded_repos.conversation,
        user_repo=seeded_repos.user,
        settings=Settings(),
        router=KeywordRouter(),
    )


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def engine():
    """Session-scoped engine: one CREATE TABLE per test suite."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    """Function-scoped session with connection-level rollback.

    Wraps each test in a connection-level transaction so that
    even ``session.commit()`` calls inside tests are rolled
    back at teardown, keeping the shared engine clean.
    """
    async with engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(
            bind=connection, expire_on_commit=False
        )
        yield session
        await session.close()
        await transaction.rollback()
