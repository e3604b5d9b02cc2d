"""Keyword intent router: picks the responder category for a message.

No LLM call; routing is deterministic. Prior conversation
category is reused when the new message still scores on its keywords.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from supportdesk.agent.schemas import ConversationContext, RouteDecision
from supportdesk.agent.scorer import score
from supportdesk.constants import (
    CONTINUITY_CONFIDENCE,
    CONTINUITY_THRESHOLD,
    FALLBACK_CONFIDENCE,
    LOW_CONFIDENCE_THRESHOLD,
    MAX_KEYWORD_CONFIDENCE,
    REASON_CONTINUITY,
    REASON_LOW_CONFIDENCE,
    ROUTABLE_CATEGORIES,
    Category,
)


class IntentRouter(Protocol):
    """Anything that can turn a message into a RouteDecision."""

    async def route(
        self,
        message: str,
        context: ConversationContext | None = None,
    ) -> RouteDecision: ...


CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.ORDER: (
        "order",
        "tracking",
        "shipped",
        "delivery",
        "cancel",
        "modify",
        "order number",
        "ord-",
        "where is my",
        "when will",
        "arrival",
        "shipping",
        "delivery status",
        "track my",
    ),
    Category.BILLING: (
        "payment",
        "refund",
        "invoice",
        "charge",
        "bill",
        "money",
        "subscription",
        "credit card",
        "pay",
        "transaction",
        "price",
        "receipt",
        "cost",
        "fee",
    ),
    Category.SUPPORT: (
        "help",
        "question",
        "problem",
        "issue",
        "faq",
        "how to",
        "support",
        "account",
        "login",
        "password",
        "reset",
        "return",
        "exchange",
        "warranty",
        "product",
    ),
}


class KeywordRouter:
    """Route by keyword overlap with optional category continuity.

    Scoring rules:
    1. If the context already carries a routable category and the
       message scores above 0.1 on that category's keywords, keep it
       (confidence 0.9) without scoring the others.
    2. Otherwise score ORDER, BILLING, SUPPORT; highest wins and ties
       go to the earlier category in that order.
    3. A best score below 0.2 falls back to SUPPORT at 0.5.
    4. Confidence is the score capped at 0.95.
    """

    def __init__(
        self,
        keywords: Mapping[Category, Sequence[str]] | None = None,
    ) -> None:
        self._keywords = dict(keywords or CATEGORY_KEYWORDS)

    def score_category(self, message: str, category: Category) -> float:
        return score(message.lower(), self._keywords.get(category, ()))

    def is_related(self, message: str, category: Category) -> bool:
        """True when *message* plausibly continues *category*."""
        if category not in ROUTABLE_CATEGORIES:
            return False
        return self.score_category(message, category) > CONTINUITY_THRESHOLD

    def classify(
        self,
        message: str,
        context: ConversationContext | None = None,
    ) -> RouteDecision:
        if (
            context is not None
            and context.category != Category.ROUTER
            and self.is_related(message, context.category)
        ):
            return RouteDecision(
                category=context.category,
                confidence=CONTINUITY_CONFIDENCE,
                reasoning=REASON_CONTINUITY,
            )

        lower = message.lower()
        scores = [
            (category, score(lower, self._keywords.get(category, ())))
            for category in ROUTABLE_CATEGORIES
        ]
        # max() keeps the first of equal elements
        best_category, best_score = max(scores, key=lambda s: s[1])

        if best_score < LOW_CONFIDENCE_THRESHOLD:
            return RouteDecision(
                category=Category.SUPPORT,
                confidence=FALLBACK_CONFIDENCE,
                reasoning=REASON_LOW_CONFIDENCE,
            )

        return RouteDecision(
            category=best_category,
            confidence=min(best_score, MAX_KEYWORD_CONFIDENCE),
            reasoning=f"Matched {best_category} keywords in message",
        )

    async def route(
        self,
        message: str,
        context: ConversationContext | None = None,
    ) -> RouteDecision:
        return self.classify(message, context)
