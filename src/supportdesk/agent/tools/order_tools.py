"""Order data tools: lookups and writes against the order store.

Each function accepts only the repository protocols it uses (ISP).
Not-found and rule violations come back as failed results; storage
exceptions propagate to the calling responder.
"""

from __future__ import annotations

from typing import Protocol

from supportdesk.agent.tools.schemas import (
    CancellationResult,
    ModificationResult,
    OrderDetails,
    OrderDetailsResult,
    OrderItem,
    OrderModification,
    OrderSummary,
    TrackingResult,
)
from supportdesk.constants import (
    CANCELLABLE_STATUSES,
    USER_ORDERS_LIMIT,
    OrderStatus,
    PaymentStatus,
)
from supportdesk.repositories.protocols import (
    BillingRepository,
    OrderRepository,
)


class OrderTools(Protocol):
    """Capability set the order responder depends on."""

    async def get_order_details(
        self, order_number: str
    ) -> OrderDetailsResult: ...
    async def get_user_orders(
        self, user_id: str, limit: int = USER_ORDERS_LIMIT
    ) -> list[OrderSummary]: ...
    async def track_order(self, order_number: str) -> TrackingResult: ...
    async def cancel_order(
        self, order_number: str, reason: str
    ) -> CancellationResult: ...
    async def modify_order(
        self, order_number: str, modifications: OrderModification
    ) -> ModificationResult: ...


async def do_get_order_details(
    order_number: str,
    order_repo: OrderRepository,
) -> OrderDetailsResult:
    order = await order_repo.get_by_number(order_number)
    if order is None:
        return OrderDetailsResult(
            success=False, error=f"Order {order_number} not found"
        )
    return OrderDetailsResult(
        success=True,
        data=OrderDetails(
            order_number=order.order_number,
            status=order.status,
            total=order.total,
            currency=order.currency,
            items=[OrderItem.model_validate(i) for i in order.items or []],
            shipping_address=order.shipping_address,
            created_at=order.created_at,
            updated_at=order.updated_at,
        ),
    )


async def do_get_user_orders(
    user_id: str,
    order_repo: OrderRepository,
    limit: int = USER_ORDERS_LIMIT,
) -> list[OrderSummary]:
    orders = await order_repo.list_by_user(user_id, limit=limit)
    return [
        OrderSummary(
            order_number=o.order_number,
            status=o.status,
            total=o.total,
            currency=o.currency,
            item_count=len(o.items or []),
            created_at=o.created_at,
        )
        for o in orders
    ]


async def do_track_order(
    order_number: str,
    order_repo: OrderRepository,
) -> TrackingResult:
    order = await order_repo.get_by_number(order_number)
    if order is None:
        return TrackingResult(
            success=False, error=f"Order {order_number} not found"
        )
    if not order.tracking_number:
        return TrackingResult(
            success=False,
            status=order.status,
            error=(
                f"Tracking information is not available yet "
                f"for order {order_number} "
                f"(current status: {order.status})."
            ),
        )
    return TrackingResult(
        success=True,
        tracking_number=order.tracking_number,
        tracking_url=order.tracking_url,
        status=order.status,
    )


async def do_cancel_order(
    order_number: str,
    reason: str,
    order_repo: OrderRepository,
    billing_repo: BillingRepository,
) -> CancellationResult:
    """Cancel a pending/confirmed order and report any refund due.

    *reason* is accepted for the audit trail but not stored yet.
    """
    order = await order_repo.get_by_number(order_number)
    if order is None:
        return CancellationResult(
            success=False,
            order_number=order_number,
            message=f"Order {order_number} not found",
        )
    if order.status not in CANCELLABLE_STATUSES:
        return CancellationResult(
            success=False,
            order_number=order_number,
            status=order.status,
            message=(
                f"Order cannot be cancelled. "
                f"Current status: {order.status}"
            ),
        )

    order.status = OrderStatus.CANCELLED
    await order_repo.save(order)

    payments = await billing_repo.list_payments_for_orders([order.id])
    completed = next(
        (p for p in payments if p.status == PaymentStatus.COMPLETED),
        None,
    )
    refund_amount = completed.amount if completed else 0.0
    if refund_amount > 0:
        return CancellationResult(
            success=True,
            order_number=order_number,
            status=order.status,
            refund_amount=refund_amount,
            message=(
                f"Order cancelled. Refund of ${refund_amount:.2f} will "
                "be processed within 5-7 business days."
            ),
        )
    return CancellationResult(
        success=True,
        order_number=order_number,
        status=order.status,
        message="Order cancelled successfully.",
    )


async def do_modify_order(
    order_number: str,
    modifications: OrderModification,
    order_repo: OrderRepository,
) -> ModificationResult:
    order = await order_repo.get_by_number(order_number)
    if order is None:
        return ModificationResult(
            success=False,
            order_number=order_number,
            message=f"Order {order_number} not found",
        )
    if modifications.is_empty():
        return ModificationResult(
            success=False,
            order_number=order_number,
            message="No valid modifications provided",
        )

    updated: list[str] = []
    if modifications.shipping_address is not None:
        order.shipping_address = modifications.shipping_address
        updated.append("shipping_address")
    if modifications.add_items:
        order.items = [
            *(order.items or []),
            *(i.model_dump() for i in modifications.add_items),
        ]
        updated.append("items")
    await order_repo.save(order)

    return ModificationResult(
        success=True,
        order_number=order_number,
        message="Order modified successfully",
        updated_fields=updated,
    )


class RepoOrderTools:
    """OrderTools backed by repositories."""

    def __init__(
        self,
        order_repo: OrderRepository,
        billing_repo: BillingRepository,
    ) -> None:
        self._orders = order_repo
        self._billing = billing_repo

    async def get_order_details(
        self, order_number: str
    ) -> OrderDetailsResult:
        return await do_get_order_details(order_number, self._orders)

    async def get_user_orders(
        self, user_id: str, limit: int = USER_ORDERS_LIMIT
    ) -> list[OrderSummary]:
        return await do_get_user_orders(user_id, self._orders, limit)

    async def track_order(self, order_number: str) -> TrackingResult:
        return await do_track_order(order_number, self._orders)

    async def cancel_order(
        self, order_number: str, reason: str
    ) -> CancellationResult:
        return await do_cancel_order(
            order_number, reason, self._orders, self._billing
        )

    async def modify_order(
        self, order_number: str, modifications: OrderModification
    ) -> ModificationResult:
        return await do_modify_order(
            order_number, modifications, self._orders
        )
