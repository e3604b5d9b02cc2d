"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from supportdesk.logging_config import setup_logging

setup_logging()

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker  # noqa: E402

from supportdesk import __version__  # noqa: E402
from supportdesk.agent.coordinator import build_router  # noqa: E402
from supportdesk.api.routes import agents, chat, health  # noqa: E402
from supportdesk.api.schemas import APIResponse  # noqa: E402
from supportdesk.config import Settings, create_app_engine  # noqa: E402
from supportdesk.errors import SupportDeskError  # noqa: E402
from supportdesk.logger import AgentLogger  # noqa: E402
from supportdesk.models.base import Base  # noqa: E402

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # 1. Use module-level settings (single source of truth)
    settings = _settings

    # 2. Create async SQLite engine (WAL set via pool-connect listener)
    if settings.database_url.startswith("sqlite:///"):
        db_path = settings.database_url[len("sqlite:///"):]
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    engine = create_app_engine(
        settings.database_url, echo=settings.debug_mode
    )

    # 3. Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # 4. Create session factory
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    # 5. Initialize logger
    logger = AgentLogger(
        log_dir=settings.log_dir, level=settings.log_level
    )

    # 6. Store in app.state
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.logger = logger
    app.state.router = build_router(settings)

    _logger.info(
        "event=startup router_strategy=%s reasoning_policy=%s",
        settings.router_strategy,
        settings.reasoning_policy,
    )

    yield

    # Cleanup
    await engine.dispose()


app = FastAPI(
    title="Support Desk",
    description=(
        "Customer support chat backend --"
        " routes messages to order, billing and support agents"
    ),
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)


@app.exception_handler(SupportDeskError)
async def _support_desk_error(
    request: Request, exc: SupportDeskError
) -> JSONResponse:
    """Map domain errors onto their HTTP status with the envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=APIResponse(success=False, error=str(exc)).model_dump(),
    )


_settings = Settings()
_cors_origins = [
    o.strip()
    for o in _settings.cors_origins.split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-User-Id"],
    allow_credentials=False,
)

# Routes
app.include_router(health.router)
app.include_router(chat.router)
app.include_router(agents.router)
