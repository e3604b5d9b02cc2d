"""Structured JSON logger for request and error tracking."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from supportdesk.constants import ERROR_TRUNCATION_CHARS
from supportdesk.logging_config import LOG_DATEFMT, LOG_FORMAT

__all__ = ["AgentLogger", "LOG_FORMAT", "LOG_DATEFMT"]


class AgentLogger:
    """Structured JSON logger with request_id correlation."""

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger("supportdesk.agent")
        self._logger.setLevel(getattr(logging, level.upper()))

        if not self._logger.handlers:
            handler = logging.FileHandler(log_dir / "agent.log")
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    def log_request(
        self,
        request_id: str,
        query: str,
        category: str,
        confidence: float,
        tools_called: list[str],
        duration_ms: float,
        conversation_id: str | None = None,
    ) -> None:
        self._logger.info(
            json.dumps({
                "type": "request",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "conversation_id": conversation_id,
                "query": query[:ERROR_TRUNCATION_CHARS],
                "category": category,
                "confidence": confidence,
                "tools_called": tools_called,
                "duration_ms": duration_ms,
            })
        )

    def log_error(
        self,
        request_id: str,
        component: str,
        error: str,
    ) -> None:
        self._logger.error(
            json.dumps({
                "type": "error",
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": request_id,
                "component": component,
                "error": error[:ERROR_TRUNCATION_CHARS],
            })
        )
