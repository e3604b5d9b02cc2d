"""LLM-backed intent router: drop-in alternative to KeywordRouter.

Delegates classification to a pydantic-ai agent and expects a JSON
object back. Any failure (call, parse, validation) fails open to the
support category so a chat turn never breaks on classification.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_ai import Agent

from supportdesk.agent.schemas import ConversationContext, RouteDecision
from supportdesk.constants import (
    ERROR_TRUNCATION_CHARS,
    FALLBACK_CONFIDENCE,
    REASON_CLASSIFICATION_FAILED,
    ROUTABLE_CATEGORIES,
    Category,
)
from supportdesk.prompts import ROUTER_PROMPT, ROUTER_USER_TEMPLATE

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*|\s*```")


def resolve_model(model: Any = None) -> Any:
    """Return *model* unchanged, or build one from Settings.

    Multi-model chains are wrapped in a FallbackModel; a single
    model is passed through as its provider:model string.
    """
    if model is not None:
        return model

    from supportdesk.config import Settings

    models = Settings().pydantic_ai_models
    if len(models) > 1:
        from pydantic_ai.models.fallback import FallbackModel

        return FallbackModel(*models)
    return models[0]


class _LLMRouteReply(BaseModel):
    category: Category
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str = ""

    @field_validator("category", mode="before")
    @classmethod
    def _upper(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("category")
    @classmethod
    def _routable(cls, v: Category) -> Category:
        if v not in ROUTABLE_CATEGORIES:
            raise ValueError(f"{v} is not a routable category")
        return v


def parse_route_reply(text: str) -> RouteDecision:
    """Parse the model's JSON reply into a RouteDecision.

    Raises pydantic.ValidationError on malformed or out-of-range
    replies.
    """
    cleaned = _CODE_FENCE.sub("", text.strip()).strip()
    reply = _LLMRouteReply.model_validate_json(cleaned)
    return RouteDecision(
        category=reply.category,
        confidence=reply.confidence,
        reasoning=reply.reasoning or f"LLM classified as {reply.category}",
    )


def fallback_decision() -> RouteDecision:
    return RouteDecision(
        category=Category.SUPPORT,
        confidence=FALLBACK_CONFIDENCE,
        reasoning=REASON_CLASSIFICATION_FAILED,
    )


class LLMRouter:
    """Route via a text-generation model with a fixed instruction prompt."""

    def __init__(
        self,
        model: Any = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._agent: Agent[None, str] = Agent(
            resolve_model(model),
            output_type=str,
            instructions=ROUTER_PROMPT,
            model_settings={"temperature": 0.3},
        )
        self._timeout = timeout_seconds

    async def route(
        self,
        message: str,
        context: ConversationContext | None = None,
    ) -> RouteDecision:
        prompt = ROUTER_USER_TEMPLATE.format(message=message)
        try:
            async with asyncio.timeout(self._timeout):
                result = await self._agent.run(prompt)
            return parse_route_reply(result.output)
        except Exception as exc:
            logger.warning(
                "event=llm_routing_failed error_type=%s error=%s",
                type(exc).__name__,
                str(exc)[:ERROR_TRUNCATION_CHARS],
            )
            return fallback_decision()
