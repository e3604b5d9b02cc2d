"""Support data tools: conversation history, FAQ search, account info."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

from supportdesk.agent.tools.schemas import (
    ConversationHistoryResult,
    ConversationSnapshot,
    FAQResult,
    InteractionSummary,
    UserInfo,
    UserInfoResult,
)
from supportdesk.constants import (
    CONVERSATION_HISTORY_LIMIT,
    DEFAULT_CONVERSATION_TITLE,
    FAQ_MIN_WORD_LENGTH,
    FAQ_RESULT_LIMIT,
    INTERACTION_SUMMARY_CHARS,
    RECENT_INTERACTIONS_LIMIT,
)
from supportdesk.repositories.protocols import (
    ConversationRepository,
    OrderRepository,
    UserRepository,
)


@dataclass(frozen=True)
class FAQEntry:
    category: str
    question: str
    answer: str


FAQ_ENTRIES: tuple[FAQEntry, ...] = (
    FAQEntry(
        "General",
        "How do I track my order?",
        "You can track your order by logging into your account and "
        'visiting the "Orders" section. Each order will show its current '
        "status and tracking number if available.",
    ),
    FAQEntry(
        "General",
        "What is your return policy?",
        "We offer a 30-day return policy for most items. Items must be "
        "in their original condition with tags attached. Some items like "
        "personalized products cannot be returned.",
    ),
    FAQEntry(
        "General",
        "How can I contact customer support?",
        "You can reach our customer support team via email at "
        "support@example.com, through live chat on our website, or by "
        "calling 1-800-EXAMPLE between 9 AM and 6 PM EST.",
    ),
    FAQEntry(
        "Orders",
        "How do I cancel my order?",
        "Orders can only be cancelled before they are shipped. Go to "
        "your order history, find the order you want to cancel, and "
        'click the "Cancel Order" button. If the order has already '
        "shipped, you'll need to initiate a return instead.",
    ),
    FAQEntry(
        "Orders",
        "Can I modify my order after placing it?",
        "You can modify your order (like shipping address or item "
        "quantities) only before it begins processing. Once processing "
        "starts, modifications are not possible.",
    ),
    FAQEntry(
        "Billing",
        "What payment methods do you accept?",
        "We accept major credit cards (Visa, MasterCard, American "
        "Express), PayPal, Apple Pay, and Google Pay. We also offer "
        "buy-now-pay-later options through Klarna and Afterpay.",
    ),
    FAQEntry(
        "Billing",
        "How do I get a refund?",
        "Refunds are processed to the original payment method within "
        "5-7 business days after we receive and inspect the returned "
        "item. You'll receive an email confirmation once the refund is "
        "processed.",
    ),
    FAQEntry(
        "Billing",
        "Why was my payment declined?",
        "Payment declines can happen for various reasons: incorrect card "
        "information, insufficient funds, or your bank's fraud "
        "protection. Please check your card details or try a different "
        "payment method.",
    ),
)

# Words too common to signal relevance on their own
_STOPWORDS = frozenset(
    {
        "and", "are", "can", "did", "does", "for", "from", "get",
        "had", "has", "have", "how", "i'm", "its", "just", "not",
        "out", "the", "their", "them", "then", "there", "this",
        "was", "what", "when", "where", "which", "who", "why",
        "will", "with", "you", "your",
    }
)  # fmt: skip
_WORD = re.compile(r"[a-z0-9][a-z0-9'-]*")


def _query_terms(query: str) -> list[str]:
    seen: dict[str, None] = {}
    for word in _WORD.findall(query.lower()):
        if len(word) >= FAQ_MIN_WORD_LENGTH and word not in _STOPWORDS:
            seen.setdefault(word, None)
    return list(seen)


def faq_relevance(query: str, text: str) -> float:
    """+1 per query term found in *text*, +0.5 more if text starts with it."""
    haystack = text.lower()
    total = 0.0
    for term in _query_terms(query):
        if term in haystack:
            total += 1.0
            if haystack.startswith(term):
                total += 0.5
    return total


def search_faqs(
    query: str,
    entries: tuple[FAQEntry, ...] = FAQ_ENTRIES,
    limit: int = FAQ_RESULT_LIMIT,
) -> list[FAQResult]:
    """Rank FAQ entries against *query*; zero-relevance entries dropped.

    Ties keep table order.
    """
    scored = [
        FAQResult(
            question=e.question,
            answer=e.answer,
            category=e.category,
            relevance=faq_relevance(query, f"{e.question} {e.answer}"),
        )
        for e in entries
    ]
    ranked = sorted(
        (r for r in scored if r.relevance > 0),
        key=lambda r: r.relevance,
        reverse=True,
    )
    return ranked[:limit]


class SupportTools(Protocol):
    """Capability set the support responder depends on."""

    async def query_conversation_history(
        self, user_id: str, limit: int = CONVERSATION_HISTORY_LIMIT
    ) -> ConversationHistoryResult: ...
    def search_faqs(self, query: str) -> list[FAQResult]: ...
    async def get_user_info(self, user_id: str) -> UserInfoResult: ...
    async def get_recent_interactions(
        self, user_id: str
    ) -> list[InteractionSummary]: ...


async def do_query_conversation_history(
    user_id: str,
    conversation_repo: ConversationRepository,
    limit: int = CONVERSATION_HISTORY_LIMIT,
) -> ConversationHistoryResult:
    conversations = await conversation_repo.list_for_user(user_id, limit)
    snapshots: list[ConversationSnapshot] = []
    for conv in conversations:
        last = await conversation_repo.get_last_message(conv.id)
        snapshots.append(
            ConversationSnapshot(
                id=conv.id,
                title=conv.title or DEFAULT_CONVERSATION_TITLE,
                category=conv.category,
                created_at=conv.created_at,
                updated_at=conv.updated_at,
                last_message=last.content if last else None,
            )
        )
    return ConversationHistoryResult(success=True, conversations=snapshots)


async def do_get_user_info(
    user_id: str,
    user_repo: UserRepository,
    order_repo: OrderRepository,
) -> UserInfoResult:
    user = await user_repo.get_by_id(user_id)
    if user is None:
        return UserInfoResult(success=False, error="User not found")
    orders = await order_repo.list_by_user(user_id)
    return UserInfoResult(
        success=True,
        data=UserInfo(
            id=user.id,
            name=user.name,
            email=user.email,
            order_count=len(orders),
            total_spent=round(sum(o.total for o in orders), 2),
            member_since=user.created_at,
        ),
    )


async def do_get_recent_interactions(
    user_id: str,
    conversation_repo: ConversationRepository,
    limit: int = RECENT_INTERACTIONS_LIMIT,
) -> list[InteractionSummary]:
    conversations = await conversation_repo.list_for_user(user_id, limit)
    interactions: list[InteractionSummary] = []
    for conv in conversations:
        last = await conversation_repo.get_last_message(conv.id)
        interactions.append(
            InteractionSummary(
                id=conv.id,
                type="conversation",
                summary=(
                    last.content[:INTERACTION_SUMMARY_CHARS]
                    if last
                    else "No messages"
                ),
                date=conv.updated_at,
                status="completed",
            )
        )
    return interactions


class RepoSupportTools:
    """SupportTools backed by repositories and the static FAQ table."""

    def __init__(
        self,
        conversation_repo: ConversationRepository,
        user_repo: UserRepository,
        order_repo: OrderRepository,
    ) -> None:
        self._conversations = conversation_repo
        self._users = user_repo
        self._orders = order_repo

    async def query_conversation_history(
        self, user_id: str, limit: int = CONVERSATION_HISTORY_LIMIT
    ) -> ConversationHistoryResult:
        return await do_query_conversation_history(
            user_id, self._conversations, limit
        )

    def search_faqs(self, query: str) -> list[FAQResult]:
        return search_faqs(query)

    async def get_user_info(self, user_id: str) -> UserInfoResult:
        return await do_get_user_info(user_id, self._users, self._orders)

    async def get_recent_interactions(
        self, user_id: str
    ) -> list[InteractionSummary]:
        return await do_get_recent_interactions(
            user_id, self._conversations
        )
