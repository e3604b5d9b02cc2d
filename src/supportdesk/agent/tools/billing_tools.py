"""Billing data tools: payments, invoices, refunds and subscription."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol

from supportdesk.agent.tools.schemas import (
    InvoiceDetails,
    InvoiceResult,
    PaymentSummary,
    RefundDetails,
    RefundProcessingResult,
    RefundResult,
    SubscriptionResult,
)
from supportdesk.constants import (
    PAYMENT_HISTORY_LIMIT,
    SUBSCRIPTION_PERIOD_DAYS,
    OrderStatus,
    PaymentStatus,
    RefundStatus,
)
from supportdesk.models.billing import Refund
from supportdesk.repositories.protocols import (
    BillingRepository,
    OrderRepository,
)

_SUBSCRIPTION_PLAN = "Premium"
_SUBSCRIPTION_STATUS = "active"


class BillingTools(Protocol):
    """Capability set the billing responder depends on."""

    async def get_invoice_details(self, invoice_id: str) -> InvoiceResult: ...
    async def get_payment_history(
        self, user_id: str, limit: int = PAYMENT_HISTORY_LIMIT
    ) -> list[PaymentSummary]: ...
    async def check_refund_status(self, refund_id: str) -> RefundResult: ...
    async def get_subscription_info(
        self, user_id: str
    ) -> SubscriptionResult: ...
    async def process_refund(
        self,
        order_number: str,
        reason: str,
        amount: float | None = None,
    ) -> RefundProcessingResult: ...


async def do_get_invoice_details(
    invoice_id: str,
    order_repo: OrderRepository,
    billing_repo: BillingRepository,
) -> InvoiceResult:
    invoice = await billing_repo.get_invoice(invoice_id)
    if invoice is None:
        return InvoiceResult(
            success=False, error=f"Invoice {invoice_id} not found"
        )
    payment = await billing_repo.get_payment(invoice.payment_id)
    order = (
        await order_repo.get_by_id(payment.order_id) if payment else None
    )
    if payment is None or order is None:
        return InvoiceResult(
            success=False,
            error=f"Invoice {invoice_id} has no matching payment",
        )
    return InvoiceResult(
        success=True,
        data=InvoiceDetails(
            id=invoice.id,
            invoice_url=invoice.invoice_url,
            amount=invoice.amount,
            currency=invoice.currency,
            status=invoice.status,
            order_number=order.order_number,
            payment_method=payment.payment_method,
            created_at=invoice.created_at,
        ),
    )


async def do_get_payment_history(
    user_id: str,
    order_repo: OrderRepository,
    billing_repo: BillingRepository,
    limit: int = PAYMENT_HISTORY_LIMIT,
) -> list[PaymentSummary]:
    """Newest-first payments across all of the user's orders."""
    orders = await order_repo.list_by_user(user_id)
    numbers = {o.id: o.order_number for o in orders}
    payments = await billing_repo.list_payments_for_orders(
        list(numbers), limit=limit
    )
    return [
        PaymentSummary(
            id=p.id,
            order_number=numbers[p.order_id],
            amount=p.amount,
            currency=p.currency,
            status=p.status,
            payment_method=p.payment_method,
            transaction_id=p.transaction_id,
            created_at=p.created_at,
        )
        for p in payments
    ]


async def do_check_refund_status(
    refund_id: str,
    order_repo: OrderRepository,
    billing_repo: BillingRepository,
) -> RefundResult:
    refund = await billing_repo.get_refund(refund_id)
    if refund is None:
        return RefundResult(
            success=False, error=f"Refund {refund_id} not found"
        )
    order = await order_repo.get_by_id(refund.order_id)
    return RefundResult(
        success=True,
        data=RefundDetails(
            id=refund.id,
            order_number=order.order_number if order else "unknown",
            amount=refund.amount,
            currency=refund.currency,
            status=refund.status,
            reason=refund.reason,
            created_at=refund.created_at,
            updated_at=refund.updated_at,
        ),
    )


async def do_get_subscription_info(
    user_id: str,
    order_repo: OrderRepository,
    billing_repo: BillingRepository,
) -> SubscriptionResult:
    """Derive a subscription from payment history.

    A user with at least one completed payment is treated as an
    active Premium subscriber billed every 30 days.
    """
    orders = await order_repo.list_by_user(user_id)
    payments = await billing_repo.list_payments_for_orders(
        [o.id for o in orders]
    )
    if not any(p.status == PaymentStatus.COMPLETED for p in payments):
        return SubscriptionResult(success=True, has_subscription=False)
    return SubscriptionResult(
        success=True,
        has_subscription=True,
        plan=_SUBSCRIPTION_PLAN,
        status=_SUBSCRIPTION_STATUS,
        next_billing_date=datetime.now(UTC)
        + timedelta(days=SUBSCRIPTION_PERIOD_DAYS),
    )


async def do_process_refund(
    order_number: str,
    reason: str,
    order_repo: OrderRepository,
    billing_repo: BillingRepository,
    amount: float | None = None,
) -> RefundProcessingResult:
    """Open a PENDING refund against the order's completed payment.

    *amount* defaults to everything not yet refunded. Refunding the
    full remainder moves the order to REFUNDED.
    """
    order = await order_repo.get_by_number(order_number)
    if order is None:
        return RefundProcessingResult(
            success=False, message=f"Order {order_number} not found"
        )

    payments = await billing_repo.list_payments_for_orders([order.id])
    completed = next(
        (p for p in payments if p.status == PaymentStatus.COMPLETED),
        None,
    )
    if completed is None:
        return RefundProcessingResult(
            success=False,
            message="No completed payment found for this order",
        )

    refunds = await billing_repo.list_refunds_for_order(order.id)
    refunded = sum(
        r.amount for r in refunds if r.status != RefundStatus.REJECTED
    )
    remaining = round(completed.amount - refunded, 2)
    if remaining <= 0:
        return RefundProcessingResult(
            success=False,
            message=f"Order {order_number} has already been fully refunded",
        )

    requested = remaining if amount is None else round(amount, 2)
    if requested <= 0:
        return RefundProcessingResult(
            success=False, message="Refund amount must be positive"
        )
    if requested > remaining:
        return RefundProcessingResult(
            success=False,
            message=(
                "Refund amount exceeds available refund. "
                f"Maximum refund: ${remaining:.2f}"
            ),
        )

    refund = await billing_repo.create_refund(
        Refund(
            order_id=order.id,
            amount=requested,
            currency=order.currency,
            status=RefundStatus.PENDING,
            reason=reason,
        )
    )
    if requested == remaining:
        order.status = OrderStatus.REFUNDED
        await order_repo.save(order)

    return RefundProcessingResult(
        success=True,
        refund_id=refund.id,
        amount=requested,
        message=f"Refund of ${requested:.2f} initiated successfully.",
    )


class RepoBillingTools:
    """BillingTools backed by repositories."""

    def __init__(
        self,
        order_repo: OrderRepository,
        billing_repo: BillingRepository,
    ) -> None:
        self._orders = order_repo
        self._billing = billing_repo

    async def get_invoice_details(self, invoice_id: str) -> InvoiceResult:
        return await do_get_invoice_details(
            invoice_id, self._orders, self._billing
        )

    async def get_payment_history(
        self, user_id: str, limit: int = PAYMENT_HISTORY_LIMIT
    ) -> list[PaymentSummary]:
        return await do_get_payment_history(
            user_id, self._orders, self._billing, limit
        )

    async def check_refund_status(self, refund_id: str) -> RefundResult:
        return await do_check_refund_status(
            refund_id, self._orders, self._billing
        )

    async def get_subscription_info(
        self, user_id: str
    ) -> SubscriptionResult:
        return await do_get_subscription_info(
            user_id, self._orders, self._billing
        )

    async def process_refund(
        self,
        order_number: str,
        reason: str,
        amount: float | None = None,
    ) -> RefundProcessingResult:
        return await do_process_refund(
            order_number, reason, self._orders, self._billing, amount
        )
