"""Result models returned by data tools.

Lookups follow the ``{success, data?, error?}`` shape; writes carry
a human-readable ``message`` instead of ``error``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

# ── Orders ─────────────────────────────────────────────


class OrderItem(BaseModel):
    name: str
    quantity: int
    price: float


class OrderDetails(BaseModel):
    order_number: str
    status: str
    total: float
    currency: str
    items: list[OrderItem] = Field(
        default_factory=lambda: list[OrderItem]()
    )
    shipping_address: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime


class OrderDetailsResult(BaseModel):
    success: bool
    data: OrderDetails | None = None
    error: str | None = None


class OrderSummary(BaseModel):
    order_number: str
    status: str
    total: float
    currency: str
    item_count: int
    created_at: datetime


class TrackingResult(BaseModel):
    success: bool
    tracking_number: str | None = None
    tracking_url: str | None = None
    status: str | None = None
    error: str | None = None


class CancellationResult(BaseModel):
    success: bool
    order_number: str
    status: str | None = None
    refund_amount: float | None = None
    message: str


class OrderModification(BaseModel):
    shipping_address: dict[str, Any] | None = None
    add_items: list[OrderItem] = Field(
        default_factory=lambda: list[OrderItem]()
    )

    def is_empty(self) -> bool:
        return self.shipping_address is None and not self.add_items


class ModificationResult(BaseModel):
    success: bool
    order_number: str
    message: str
    updated_fields: list[str] = Field(
        default_factory=lambda: list[str]()
    )


# ── Billing ────────────────────────────────────────────


class InvoiceDetails(BaseModel):
    id: str
    invoice_url: str | None = None
    amount: float
    currency: str
    status: str
    order_number: str
    payment_method: str
    created_at: datetime


class InvoiceResult(BaseModel):
    success: bool
    data: InvoiceDetails | None = None
    error: str | None = None


class PaymentSummary(BaseModel):
    id: str
    order_number: str
    amount: float
    currency: str
    status: str
    payment_method: str
    transaction_id: str | None = None
    created_at: datetime


class RefundDetails(BaseModel):
    id: str
    order_number: str
    amount: float
    currency: str
    status: str
    reason: str | None = None
    created_at: datetime
    updated_at: datetime


class RefundResult(BaseModel):
    success: bool
    data: RefundDetails | None = None
    error: str | None = None


class SubscriptionResult(BaseModel):
    success: bool
    has_subscription: bool = False
    plan: str | None = None
    status: str | None = None
    next_billing_date: datetime | None = None
    error: str | None = None


class RefundProcessingResult(BaseModel):
    success: bool
    refund_id: str | None = None
    amount: float | None = None
    message: str


# ── Support ────────────────────────────────────────────


class ConversationSnapshot(BaseModel):
    id: str
    title: str
    category: str
    created_at: datetime
    updated_at: datetime
    last_message: str | None = None


class ConversationHistoryResult(BaseModel):
    success: bool
    conversations: list[ConversationSnapshot] = Field(
        default_factory=lambda: list[ConversationSnapshot]()
    )
    error: str | None = None


class FAQResult(BaseModel):
    question: str
    answer: str
    category: str
    relevance: float


class UserInfo(BaseModel):
    id: str
    name: str
    email: str
    order_count: int
    total_spent: float
    member_since: datetime


class UserInfoResult(BaseModel):
    success: bool
    data: UserInfo | None = None
    error: str | None = None


class InteractionSummary(BaseModel):
    id: str
    type: str
    summary: str
    date: datetime
    status: str
