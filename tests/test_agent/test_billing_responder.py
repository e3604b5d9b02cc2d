"""Tests for the billing responder's sub-intent rules and replies."""

from __future__ import annotations

import pytest

from supportdesk.agent.responders import BillingResponder
from supportdesk.agent.responders.base import TOOL_FAILURE_REPLY
from supportdesk.agent.responders.billing import (
    PAYMENT_ISSUE_REPLY,
    REFUND_REQUEST_REASON,
)
from supportdesk.agent.schemas import ConversationContext
from supportdesk.agent.tools import RepoBillingTools
from supportdesk.api.dependencies import Repos
from supportdesk.constants import Category, OrderStatus
from tests.conftest import DEMO_USER


def _ctx(user_id: str = DEMO_USER) -> ConversationContext:
    return ConversationContext(
        conversation_id="c1", user_id=user_id, category=Category.BILLING
    )


@pytest.fixture
def responder(seeded_repos: Repos) -> BillingResponder:
    return BillingResponder(
        RepoBillingTools(seeded_repos.order, seeded_repos.billing)
    )


class TestRuleOrder:
    @pytest.mark.parametrize(
        ("message", "intent"),
        [
            ("Where is my refund?", "refund"),
            ("I want my money back", "refund"),
            ("Send me invoice INV-001", "invoice"),
            ("Can I get a receipt?", "invoice"),
            ("My payment failed again", "payment_issue"),
            ("my card was declined", "payment_issue"),
            ("Cancel my subscription", "subscription"),
            ("Can I upgrade my plan?", "subscription"),
        ],
    )
    def test_first_matching_rule(
        self, responder: BillingResponder, message: str, intent: str
    ) -> None:
        matched = responder.match(message)
        assert matched is not None
        assert matched.name == intent

    def test_refund_outranks_invoice(
        self, responder: BillingResponder
    ) -> None:
        matched = responder.match("refund invoice INV-001")
        assert matched is not None
        assert matched.name == "refund"


class TestRefund:
    async def test_refund_status_by_id(
        self, responder: BillingResponder
    ) -> None:
        response = await responder.handle("status of refund REF-002", _ctx())
        assert response.category == Category.BILLING
        assert "Order: ORD-003" in response.content
        assert "Amount: $599.00 USD" in response.content
        assert "Status: APPROVED" in response.content
        (call,) = response.tool_calls
        assert call.name == "check_refund_status"
        assert call.arguments == {"refund_id": "REF-002"}

    async def test_unknown_refund_id(
        self, responder: BillingResponder
    ) -> None:
        response = await responder.handle("refund ref-404?", _ctx())
        assert response.content == "Refund REF-404 not found"
        assert response.reasoning == "Refund not found"
        assert len(response.tool_calls) == 1

    async def test_request_refund_for_order(
        self, responder: BillingResponder, seeded_repos: Repos
    ) -> None:
        response = await responder.handle(
            "I want a refund for ORD-001", _ctx()
        )
        assert response.content.startswith(
            "Refund of $249.99 initiated successfully. Reference: "
        )
        assert response.reasoning == "Refund initiated"
        (call,) = response.tool_calls
        assert call.name == "process_refund"
        assert call.arguments == {
            "order_number": "ORD-001",
            "reason": REFUND_REQUEST_REASON,
        }
        order = await seeded_repos.order.get_by_number("ORD-001")
        assert order is not None
        assert order.status == OrderStatus.REFUNDED

    async def test_request_refund_rejected(
        self, responder: BillingResponder
    ) -> None:
        response = await responder.handle(
            "please process a refund for ORD-003", _ctx()
        )
        assert response.content == (
            "Order ORD-003 has already been fully refunded"
        )
        assert response.reasoning == "Refund request failed"
        assert response.tool_calls[0].success is False

    async def test_order_mention_without_request_lists_refunds(
        self, responder: BillingResponder
    ) -> None:
        response = await responder.handle("refund on ORD-001?", _ctx())
        assert response.tool_calls[0].name == "get_payment_history"
        assert "don't see any refunds" in response.content

    @pytest.mark.parametrize(
        "message",
        [
            "I need an update on my refund for ORD-001",
            "When will I get the refund I want for ORD-001?",
            "Is there a refund issue with ORD-001?",
        ],
    )
    async def test_refund_status_question_does_not_refund(
        self, responder: BillingResponder, seeded_repos: Repos, message: str
    ) -> None:
        response = await responder.handle(message, _ctx())
        assert [c.name for c in response.tool_calls] == [
            "get_payment_history"
        ]
        order = await seeded_repos.order.get_by_number("ORD-001")
        assert order is not None
        assert order.status == OrderStatus.SHIPPED

    async def test_need_a_refund_is_a_request(
        self, responder: BillingResponder
    ) -> None:
        response = await responder.handle(
            "I need a refund for ORD-001", _ctx()
        )
        assert response.tool_calls[0].name == "process_refund"


class TestInvoice:
    async def test_invoice_by_id(self, responder: BillingResponder) -> None:
        response = await responder.handle("invoice INV-003 please", _ctx())
        assert "Order: ORD-003" in response.content
        assert "Payment Method: paypal" in response.content
        assert response.content.endswith(
            "Download: https://invoice.example.com/INV-003"
        )

    async def test_unknown_invoice(self, responder: BillingResponder) -> None:
        response = await responder.handle("invoice INV-999", _ctx())
        assert response.content == "Invoice INV-999 not found"
        assert response.reasoning == "Invoice not found"

    async def test_lists_payments(self, responder: BillingResponder) -> None:
        response = await responder.handle("send me a receipt", _ctx())
        assert response.content.startswith("Your recent payment history:")
        assert "ORD-003 - $599.00 USD - COMPLETED" in response.content

    async def test_no_payments(self, responder: BillingResponder) -> None:
        response = await responder.handle("receipt", _ctx("nobody"))
        assert "INV-001" in response.content
        assert response.reasoning == "No payment history found"


class TestOtherIntents:
    async def test_payment_issue_needs_no_tools(
        self, responder: BillingResponder
    ) -> None:
        response = await responder.handle("my card declined", _ctx())
        assert response.content == PAYMENT_ISSUE_REPLY
        assert response.tool_calls == []

    async def test_subscription(self, responder: BillingResponder) -> None:
        response = await responder.handle("my subscription?", _ctx())
        assert "Plan: Premium" in response.content
        assert "Status: active" in response.content

    async def test_no_subscription(
        self, responder: BillingResponder
    ) -> None:
        response = await responder.handle("monthly plan?", _ctx("nobody"))
        assert "don't see an active subscription" in response.content

    async def test_default_lists_history(
        self, responder: BillingResponder
    ) -> None:
        response = await responder.handle("what do I owe?", _ctx())
        assert response.content.startswith("Your payment history:")
        assert response.content.count("•") == 3


class TestToolFailure:
    async def test_store_error_becomes_apology(
        self, responder: BillingResponder, seeded_repos: Repos
    ) -> None:
        seeded_repos.billing.fail_with = RuntimeError("db down")  # type: ignore[attr-defined]
        response = await responder.handle("invoice INV-001", _ctx())
        assert response.content == TOOL_FAILURE_REPLY
        assert response.category == Category.BILLING
        assert response.reasoning == "invoice lookup failed: RuntimeError"
