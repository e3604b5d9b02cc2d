"""Shared responder machinery: ordered sub-intent rules, first match wins.

A responder owns one category. Its rules are evaluated top to bottom;
the first predicate that matches picks the handler, otherwise the
default handler runs. Tool exceptions never escape ``handle``.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from supportdesk.agent.schemas import (
    AgentResponse,
    ConversationContext,
    ToolCall,
)
from supportdesk.constants import ERROR_TRUNCATION_CHARS, Category

logger = logging.getLogger(__name__)

Predicate: TypeAlias = Callable[[str], bool]
Handler: TypeAlias = Callable[[str, ConversationContext], Awaitable[AgentResponse]]

TOOL_FAILURE_REPLY = (
    "I'm sorry, I ran into a problem looking that up. "
    "Please try again in a moment."
)


def matches(*patterns: str) -> Predicate:
    """Case-insensitive predicate true when any pattern is found."""
    compiled = re.compile("|".join(patterns), re.IGNORECASE)

    def _predicate(message: str) -> bool:
        return compiled.search(message) is not None

    return _predicate


def extract(pattern: str, message: str) -> str | None:
    """First case-insensitive match of *pattern*, upper-cased."""
    found = re.search(pattern, message, re.IGNORECASE)
    return found.group(0).upper() if found else None


@dataclass(frozen=True)
class SubIntent:
    """One (predicate, handler) rule within a responder."""

    name: str
    predicate: Predicate
    handler: Handler


class Responder(ABC):
    """Base class for category responders.

    Subclasses set ``category``, return their rules from
    ``sub_intents`` in priority order and implement ``default``.
    """

    category: Category = Category.SUPPORT

    def sub_intents(self) -> Sequence[SubIntent]:
        return ()

    @abstractmethod
    async def default(
        self, message: str, context: ConversationContext
    ) -> AgentResponse: ...

    def match(self, message: str) -> SubIntent | None:
        """Return the first rule whose predicate accepts *message*."""
        for intent in self.sub_intents():
            if intent.predicate(message):
                return intent
        return None

    async def handle(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        intent = self.match(message)
        name = intent.name if intent else "default"
        handler = intent.handler if intent else self.default
        try:
            return await handler(message, context)
        except Exception as exc:
            logger.warning(
                "event=responder_failed category=%s intent=%s error=%s",
                self.category,
                name,
                str(exc)[:ERROR_TRUNCATION_CHARS],
                exc_info=True,
            )
            return self.reply(
                TOOL_FAILURE_REPLY,
                f"{name} lookup failed: {type(exc).__name__}",
            )

    def reply(
        self,
        content: str,
        reasoning: str,
        *tool_calls: ToolCall,
    ) -> AgentResponse:
        return AgentResponse(
            content=content,
            category=self.category,
            reasoning=reasoning,
            tool_calls=list(tool_calls),
        )


def tool_call(
    name: str, success: bool | None = None, **arguments: Any
) -> ToolCall:
    return ToolCall(name=name, arguments=arguments, success=success)
