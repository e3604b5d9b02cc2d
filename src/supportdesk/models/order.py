"""Order ORM model."""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Float, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from supportdesk.constants import DEFAULT_CURRENCY, OrderStatus
from supportdesk.models.base import Base


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    order_number: Mapped[str] = mapped_column(String(20), unique=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE")
    )
    status: Mapped[str] = mapped_column(
        String(20), default=OrderStatus.PENDING
    )
    total: Mapped[float] = mapped_column(Float)
    currency: Mapped[str] = mapped_column(
        String(3), default=DEFAULT_CURRENCY
    )
    # [{"name": str, "quantity": int, "price": float}, ...]
    items: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, default=list
    )
    shipping_address: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True
    )
    tracking_number: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    tracking_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        onupdate=lambda: datetime.now(UTC),
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "order_number": self.order_number,
            "user_id": self.user_id,
            "status": self.status,
            "total": self.total,
            "currency": self.currency,
            "items": self.items,
            "shipping_address": self.shipping_address,
            "tracking_number": self.tracking_number,
            "tracking_url": self.tracking_url,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
