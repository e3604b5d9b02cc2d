"""Payment, invoice and refund ORM models."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Float, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from supportdesk.constants import (
    DEFAULT_CURRENCY,
    PaymentStatus,
    RefundStatus,
)
from supportdesk.models.base import Base


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE")
    )
    amount: Mapped[float] = mapped_column(Float)
    currency: Mapped[str] = mapped_column(
        String(3), default=DEFAULT_CURRENCY
    )
    status: Mapped[str] = mapped_column(
        String(20), default=PaymentStatus.PENDING
    )
    payment_method: Mapped[str] = mapped_column(String(50))
    transaction_id: Mapped[str | None] = mapped_column(
        String(100), unique=True, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )


class Invoice(Base):
    __tablename__ = "invoices"

    # Human-facing ids look like INV-001
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    payment_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("payments.id", ondelete="CASCADE")
    )
    invoice_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )
    amount: Mapped[float] = mapped_column(Float)
    currency: Mapped[str] = mapped_column(
        String(3), default=DEFAULT_CURRENCY
    )
    status: Mapped[str] = mapped_column(String(20))
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )


class Refund(Base):
    __tablename__ = "refunds"

    # Human-facing ids look like REF-001
    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE")
    )
    amount: Mapped[float] = mapped_column(Float)
    currency: Mapped[str] = mapped_column(
        String(3), default=DEFAULT_CURRENCY
    )
    status: Mapped[str] = mapped_column(
        String(20), default=RefundStatus.PENDING
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        onupdate=lambda: datetime.now(UTC),
    )
