"""Tests for billing data tools over the seeded in-memory store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from supportdesk.agent.tools import RepoBillingTools
from supportdesk.agent.tools.billing_tools import (
    do_check_refund_status,
    do_get_invoice_details,
    do_get_payment_history,
    do_get_subscription_info,
    do_process_refund,
)
from supportdesk.api.dependencies import Repos
from supportdesk.constants import OrderStatus, RefundStatus
from supportdesk.models.billing import Invoice, Refund
from tests.conftest import DEMO_USER


class TestInvoiceDetails:
    async def test_found(self, seeded_repos: Repos) -> None:
        result = await do_get_invoice_details(
            "INV-001", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is True
        assert result.data is not None
        assert result.data.order_number == "ORD-001"
        assert result.data.payment_method == "credit_card"
        assert result.data.invoice_url == (
            "https://invoice.example.com/INV-001"
        )

    async def test_not_found(self, seeded_repos: Repos) -> None:
        result = await do_get_invoice_details(
            "INV-999", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is False
        assert result.error == "Invoice INV-999 not found"

    async def test_dangling_payment(self, repos: Repos) -> None:
        await repos.billing.create_invoice(
            Invoice(
                id="INV-050", payment_id="gone", amount=5.0, status="PAID"
            )
        )
        result = await do_get_invoice_details(
            "INV-050", repos.order, repos.billing
        )
        assert result.success is False
        assert result.error == "Invoice INV-050 has no matching payment"


class TestPaymentHistory:
    async def test_newest_first_with_order_numbers(
        self, seeded_repos: Repos
    ) -> None:
        payments = await do_get_payment_history(
            DEMO_USER, seeded_repos.order, seeded_repos.billing
        )
        assert [p.order_number for p in payments] == [
            "ORD-003",
            "ORD-002",
            "ORD-001",
        ]
        assert payments[0].transaction_id == "TXN-003"
        assert payments[0].payment_method == "paypal"

    async def test_limit(self, seeded_repos: Repos) -> None:
        payments = await do_get_payment_history(
            DEMO_USER, seeded_repos.order, seeded_repos.billing, limit=2
        )
        assert len(payments) == 2

    async def test_user_without_orders(self, seeded_repos: Repos) -> None:
        payments = await do_get_payment_history(
            "nobody", seeded_repos.order, seeded_repos.billing
        )
        assert payments == []


class TestRefundStatus:
    async def test_found(self, seeded_repos: Repos) -> None:
        result = await do_check_refund_status(
            "REF-001", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is True
        assert result.data is not None
        assert result.data.order_number == "ORD-001"
        assert result.data.amount == 50.0
        assert result.data.status == RefundStatus.PROCESSED
        assert result.data.reason == "Partial return"

    async def test_not_found(self, seeded_repos: Repos) -> None:
        result = await do_check_refund_status(
            "REF-404", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is False
        assert result.error == "Refund REF-404 not found"


class TestSubscriptionInfo:
    async def test_active_with_completed_payment(
        self, seeded_repos: Repos
    ) -> None:
        before = datetime.now(UTC)
        result = await do_get_subscription_info(
            DEMO_USER, seeded_repos.order, seeded_repos.billing
        )
        assert result.success is True
        assert result.has_subscription is True
        assert result.plan == "Premium"
        assert result.status == "active"
        assert result.next_billing_date is not None
        assert result.next_billing_date >= before + timedelta(days=30)

    async def test_none_without_payments(self, seeded_repos: Repos) -> None:
        result = await do_get_subscription_info(
            "nobody", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is True
        assert result.has_subscription is False
        assert result.plan is None


class TestProcessRefund:
    async def test_partial_refund(self, seeded_repos: Repos) -> None:
        result = await do_process_refund(
            "ORD-001",
            "damaged",
            seeded_repos.order,
            seeded_repos.billing,
            amount=100.0,
        )
        assert result.success is True
        assert result.amount == 100.0
        assert result.message == "Refund of $100.00 initiated successfully."
        assert result.refund_id is not None

        refund = await seeded_repos.billing.get_refund(result.refund_id)
        assert refund is not None
        assert refund.status == RefundStatus.PENDING
        assert refund.reason == "damaged"
        order = await seeded_repos.order.get_by_number("ORD-001")
        assert order is not None
        assert order.status == OrderStatus.SHIPPED

    async def test_default_refunds_remainder(
        self, seeded_repos: Repos
    ) -> None:
        """ORD-001 paid 299.99 with 50.00 already refunded."""
        result = await do_process_refund(
            "ORD-001", "r", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is True
        assert result.amount == pytest.approx(249.99)
        order = await seeded_repos.order.get_by_number("ORD-001")
        assert order is not None
        assert order.status == OrderStatus.REFUNDED

    async def test_amount_exceeds_remaining(
        self, seeded_repos: Repos
    ) -> None:
        result = await do_process_refund(
            "ORD-001",
            "r",
            seeded_repos.order,
            seeded_repos.billing,
            amount=260.0,
        )
        assert result.success is False
        assert result.message == (
            "Refund amount exceeds available refund. Maximum refund: $249.99"
        )

    async def test_non_positive_amount(self, seeded_repos: Repos) -> None:
        result = await do_process_refund(
            "ORD-001",
            "r",
            seeded_repos.order,
            seeded_repos.billing,
            amount=0,
        )
        assert result.success is False
        assert result.message == "Refund amount must be positive"

    async def test_fully_refunded_order(self, seeded_repos: Repos) -> None:
        result = await do_process_refund(
            "ORD-003", "r", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is False
        assert result.message == "Order ORD-003 has already been fully refunded"

    async def test_no_completed_payment(self, seeded_repos: Repos) -> None:
        result = await do_process_refund(
            "ORD-002", "r", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is False
        assert result.message == "No completed payment found for this order"

    async def test_rejected_refunds_not_deducted(
        self, seeded_repos: Repos
    ) -> None:
        order = await seeded_repos.order.get_by_number("ORD-001")
        assert order is not None
        await seeded_repos.billing.create_refund(
            Refund(
                id="REF-900",
                order_id=order.id,
                amount=100.00,
                status=RefundStatus.REJECTED,
                reason="outside window",
            )
        )
        result = await do_process_refund(
            "ORD-001", "r", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is True
        assert result.message.startswith("Refund of $249.99 initiated")

    async def test_not_found(self, seeded_repos: Repos) -> None:
        result = await do_process_refund(
            "ORD-404", "r", seeded_repos.order, seeded_repos.billing
        )
        assert result.success is False
        assert result.message == "Order ORD-404 not found"


class TestRepoBillingTools:
    async def test_delegates_to_repositories(
        self, seeded_repos: Repos
    ) -> None:
        tools = RepoBillingTools(seeded_repos.order, seeded_repos.billing)
        assert (await tools.get_invoice_details("INV-002")).success
        assert len(await tools.get_payment_history(DEMO_USER)) == 3
        assert (await tools.check_refund_status("REF-002")).success
        assert (await tools.get_subscription_info(DEMO_USER)).success
        refund = await tools.process_refund("ORD-001", "r", amount=10.0)
        assert refund.success
