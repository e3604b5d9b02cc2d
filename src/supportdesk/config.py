"""Environment-based configuration and application constants."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from supportdesk.constants import ReasoningPolicy

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # LLM Provider (only used by the "llm" router strategy)
    google_api_key: str = ""
    openai_api_key: str = ""

    # Routing
    router_strategy: Literal["keyword", "llm"] = "keyword"
    reasoning_policy: ReasoningPolicy = ReasoningPolicy.ROUTER

    # Model chain (first = primary, rest = fallbacks tried in order)
    llm_model_chain: Annotated[list[str], NoDecode] = [
        "google-gla/gemini-2.0-flash",
    ]
    llm_timeout_seconds: int = 30

    # Database
    database_url: str = "sqlite:///data/supportdesk.db"

    # Directories
    data_dir: Path = Path("data")
    log_dir: Path = Path("logs")

    # Logging
    log_level: str = "INFO"
    debug_mode: bool = False

    # API
    cors_origins: str = "http://localhost:3000"
    default_user_id: str = "demo-user"

    # Conversations
    history_limit: int = 50

    @field_validator("llm_model_chain", mode="before")
    @classmethod
    def _parse_chain(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("llm_model_chain")
    @classmethod
    def _validate_chain(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError(
                "llm_model_chain must contain at least one model"
            )
        seen: set[str] = set()
        dupes: list[str] = []
        for m in v:
            if m in seen:
                dupes.append(m)
            seen.add(m)
        if dupes:
            logger.warning(
                "Duplicate models in LLM_MODEL_CHAIN: %s",
                ", ".join(dupes),
            )
        return v

    @property
    def pydantic_ai_models(self) -> list[str]:
        """Full model chain in pydantic-ai provider:model format."""
        return [m.replace("/", ":", 1) for m in self.llm_model_chain]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }


def create_app_engine(
    url: str, *, echo: bool = False
) -> AsyncEngine:
    """Create async SQLite engine with WAL journal mode.

    Handles URL conversion (sqlite:/// → sqlite+aiosqlite:///)
    and sets WAL mode via a pool-connect event listener so it
    fires once per raw DBAPI connection, not per ORM session.
    """
    if url.startswith("sqlite:///"):
        db_url = "sqlite+aiosqlite:///" + url[len("sqlite:///"):]
    else:
        db_url = url
    engine = create_async_engine(db_url, echo=echo)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_wal_mode(
        dbapi_conn: object,
        _connection_record: object,
    ) -> None:
        cursor = dbapi_conn.cursor()  # type: ignore[union-attr]
        cursor.execute("PRAGMA journal_mode=WAL")  # pyright: ignore[reportUnknownMemberType]
        cursor.close()  # pyright: ignore[reportUnknownMemberType]

    return engine
