"""Shared constants: single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON, SQL,
API payloads) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class Category(StrEnum):
    """Responder domains a message can be routed to.

    ROUTER is a meta marker for "not yet routed" and never appears
    as the category of a final response.
    """

    ROUTER = "ROUTER"
    ORDER = "ORDER"
    BILLING = "BILLING"
    SUPPORT = "SUPPORT"


# Routable categories in tie-break order (first wins on equal score)
ROUTABLE_CATEGORIES: tuple[Category, ...] = (
    Category.ORDER,
    Category.BILLING,
    Category.SUPPORT,
)


class MessageRole(StrEnum):
    """Author of a persisted chat message."""

    USER = "USER"
    ASSISTANT = "ASSISTANT"
    SYSTEM = "SYSTEM"
    TOOL = "TOOL"


class OrderStatus(StrEnum):
    """Order fulfilment lifecycle."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


# Orders in these states can still be cancelled
CANCELLABLE_STATUSES = frozenset({
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
})


class PaymentStatus(StrEnum):
    """Payment settlement status."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class RefundStatus(StrEnum):
    """Refund processing status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PROCESSED = "PROCESSED"
    REJECTED = "REJECTED"


class ReasoningPolicy(StrEnum):
    """Whose rationale ends up in AgentResponse.reasoning.

    ROUTER: the routing rationale overwrites whatever the responder set.
    RESPONDER: the responder's rationale wins; router's is the fallback.
    """

    ROUTER = "router"
    RESPONDER = "responder"


# ── Intent Router ──────────────────────────────────────

KEYWORD_SUBSTRING_WEIGHT = 0.2
KEYWORD_WORD_BONUS = 0.1
MAX_SCORE = 1.0

CONTINUITY_THRESHOLD = 0.1
CONTINUITY_CONFIDENCE = 0.9
LOW_CONFIDENCE_THRESHOLD = 0.2
FALLBACK_CONFIDENCE = 0.5
MAX_KEYWORD_CONFIDENCE = 0.95

REASON_CONTINUITY = "continuing same category from context"
REASON_LOW_CONFIDENCE = "low confidence, default to support"
REASON_CLASSIFICATION_FAILED = "classification failed, using fallback"

# ── Identifier Patterns ────────────────────────────────

ORDER_NUMBER_PATTERN = r"ORD-\d{3}"
REFUND_ID_PATTERN = r"REF-\d+"
INVOICE_ID_PATTERN = r"INV-\d+"

# ── Conversation Metadata Keys ─────────────────────────

META_LAST_ORDER_NUMBER = "last_order_number"
META_LAST_CATEGORY = "last_category"
META_LAST_MESSAGE_AT = "last_message_at"

# ── Tool Limits ────────────────────────────────────────

USER_ORDERS_LIMIT = 10
PAYMENT_HISTORY_LIMIT = 20
PAYMENT_LIST_DISPLAY = 10
INVOICE_LIST_DISPLAY = 5
CONVERSATION_HISTORY_LIMIT = 10
SUPPORT_HISTORY_LOOKBACK = 5
RECENT_INTERACTIONS_LIMIT = 5
FAQ_RESULT_LIMIT = 5
FAQ_MIN_WORD_LENGTH = 3
SUBSCRIPTION_PERIOD_DAYS = 30
INTERACTION_SUMMARY_CHARS = 100

# ── Conversation Service ───────────────────────────────

CONVERSATION_TITLE_CHARS = 50
DEFAULT_CONVERSATION_TITLE = "Untitled Conversation"
DEFAULT_PAGE_SIZE = 20

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200
ID_HEX_LENGTH = 12
DEFAULT_CURRENCY = "USD"
USER_ID_HEADER = "X-User-Id"
