"""Billing responder: refunds, invoices, payment issues, subscriptions."""

from __future__ import annotations

import re
from collections.abc import Sequence

from supportdesk.agent.responders.base import (
    Responder,
    SubIntent,
    extract,
    matches,
    tool_call,
)
from supportdesk.agent.schemas import AgentResponse, ConversationContext
from supportdesk.agent.tools.billing_tools import BillingTools
from supportdesk.agent.tools.schemas import PaymentSummary
from supportdesk.constants import (
    INVOICE_ID_PATTERN,
    INVOICE_LIST_DISPLAY,
    ORDER_NUMBER_PATTERN,
    PAYMENT_LIST_DISPLAY,
    REFUND_ID_PATTERN,
    Category,
    PaymentStatus,
)

REFUND_REQUEST_REASON = "Customer requested refund via chat"

_REFUND_REQUEST = re.compile(
    r"\b(request|want|need|process|initiate|issue)\s+"
    r"(a\s+|my\s+|the\s+)?refund",
    re.I,
)
_REFUND_STATUS = re.compile(r"\b(status|update|where|when)\b", re.I)

PAYMENT_ISSUE_REPLY = (
    "I'm sorry to hear you're experiencing a payment issue. Here are "
    "some common solutions:\n\n"
    "1. **Card Declined**: Try a different payment method or contact "
    "your bank\n"
    "2. **Pending Charges**: Some banks show temporary holds - these "
    "usually clear in 1-3 business days\n"
    "3. **Incorrect Information**: Double-check your billing address "
    "matches your card\n\n"
    "If the issue persists, please provide more details about the "
    "error you're seeing."
)


def _payment_line(p: PaymentSummary) -> str:
    return (
        f"• {p.order_number} - ${p.amount:.2f} {p.currency} - "
        f"{p.status} ({p.created_at:%Y-%m-%d})"
    )


class BillingResponder(Responder):
    category = Category.BILLING

    def __init__(self, tools: BillingTools) -> None:
        self._tools = tools

    def sub_intents(self) -> Sequence[SubIntent]:
        return (
            SubIntent(
                "refund",
                matches(
                    r"refund",
                    r"money back",
                    r"get.*money",
                    r"when.*refund",
                ),
                self._refund,
            ),
            SubIntent(
                "invoice",
                matches(
                    r"invoice",
                    r"bill.*me",
                    r"receipt",
                    r"statement",
                ),
                self._invoice,
            ),
            SubIntent(
                "payment_issue",
                matches(
                    r"payment.*fail",
                    r"card.*declined",
                    r"charge.*issue",
                    r"won't.*charge",
                    r"payment.*problem",
                ),
                self._payment_issue,
            ),
            SubIntent(
                "subscription",
                matches(
                    r"subscription",
                    r"monthly",
                    r"annual.*plan",
                    r"change.*plan",
                    r"upgrade.*plan",
                ),
                self._subscription,
            ),
        )

    async def _refund(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        refund_id = extract(REFUND_ID_PATTERN, message)
        if refund_id:
            return await self._refund_status(refund_id)

        order_number = extract(ORDER_NUMBER_PATTERN, message)
        if (
            order_number
            and _REFUND_REQUEST.search(message)
            and not _REFUND_STATUS.search(message)
        ):
            return await self._request_refund(order_number)

        payments = await self._tools.get_payment_history(context.user_id)
        call = tool_call(
            "get_payment_history", True, user_id=context.user_id
        )
        refunded = [p for p in payments if p.status == PaymentStatus.REFUNDED]
        if not refunded:
            return self.reply(
                "I don't see any refunds associated with your account. "
                "Would you like to request a refund for an order?",
                "No refunds found",
                call,
            )
        listing = "\n".join(
            f"• Order {p.order_number} - Refunded ${p.amount:.2f}"
            for p in refunded
        )
        return self.reply(
            f"Here are your refunded payments:\n\n{listing}",
            "Listed refunded payments",
            call,
        )

    async def _refund_status(self, refund_id: str) -> AgentResponse:
        result = await self._tools.check_refund_status(refund_id)
        call = tool_call(
            "check_refund_status", result.success, refund_id=refund_id
        )
        if not result.success or result.data is None:
            return self.reply(
                result.error or f"Refund {refund_id} not found",
                "Refund not found",
                call,
            )
        refund = result.data
        return self.reply(
            f"Refund {refund.id}:\n"
            f"Order: {refund.order_number}\n"
            f"Amount: ${refund.amount:.2f} {refund.currency}\n"
            f"Status: {refund.status}\n"
            f"Reason: {refund.reason or 'Not specified'}\n"
            f"Requested: {refund.created_at:%Y-%m-%d}",
            "Provided refund status",
            call,
        )

    async def _request_refund(self, order_number: str) -> AgentResponse:
        result = await self._tools.process_refund(
            order_number, REFUND_REQUEST_REASON
        )
        outcome = "initiated" if result.success else "request failed"
        content = result.message
        if result.success:
            content += (
                f" Reference: {result.refund_id}. Refunds reach the "
                "original payment method within 5-7 business days."
            )
        return self.reply(
            content,
            f"Refund {outcome}",
            tool_call(
                "process_refund",
                result.success,
                order_number=order_number,
                reason=REFUND_REQUEST_REASON,
            ),
        )

    async def _invoice(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        invoice_id = extract(INVOICE_ID_PATTERN, message)
        if invoice_id:
            result = await self._tools.get_invoice_details(invoice_id)
            call = tool_call(
                "get_invoice_details", result.success, invoice_id=invoice_id
            )
            if not result.success or result.data is None:
                return self.reply(
                    result.error or f"Invoice {invoice_id} not found",
                    "Invoice not found",
                    call,
                )
            inv = result.data
            content = (
                f"Invoice {inv.id}:\n"
                f"Order: {inv.order_number}\n"
                f"Amount: ${inv.amount:.2f} {inv.currency}\n"
                f"Status: {inv.status}\n"
                f"Payment Method: {inv.payment_method}\n"
                f"Date: {inv.created_at:%Y-%m-%d}"
            )
            if inv.invoice_url:
                content += f"\n\nDownload: {inv.invoice_url}"
            return self.reply(content, "Provided invoice details", call)

        payments = await self._tools.get_payment_history(context.user_id)
        call = tool_call(
            "get_payment_history", True, user_id=context.user_id
        )
        if not payments:
            return self.reply(
                "I don't see any payments with invoices on your account "
                "yet. If you have an invoice number (e.g., INV-001), "
                "please share it.",
                "No payment history found",
                call,
            )
        listing = "\n".join(
            _payment_line(p) for p in payments[:INVOICE_LIST_DISPLAY]
        )
        return self.reply(
            f"Your recent payment history:\n\n{listing}\n\n"
            "Would you like more details on any specific payment?",
            "Listed payment history",
            call,
        )

    async def _payment_issue(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        return self.reply(
            PAYMENT_ISSUE_REPLY, "Provided payment issue solutions"
        )

    async def _subscription(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        result = await self._tools.get_subscription_info(context.user_id)
        call = tool_call(
            "get_subscription_info", result.success, user_id=context.user_id
        )
        if not result.success:
            return self.reply(
                "I couldn't retrieve your subscription information. "
                "Please try again later.",
                "Failed to retrieve subscription",
                call,
            )
        if not result.has_subscription:
            return self.reply(
                "I don't see an active subscription on your account. "
                "Would you like to learn about our subscription plans?",
                "No subscription found",
                call,
            )
        next_date = (
            f"{result.next_billing_date:%Y-%m-%d}"
            if result.next_billing_date
            else "N/A"
        )
        return self.reply(
            "Your Subscription:\n"
            f"Plan: {result.plan}\n"
            f"Status: {result.status}\n"
            f"Next Billing Date: {next_date}",
            "Provided subscription info",
            call,
        )

    async def default(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        payments = await self._tools.get_payment_history(context.user_id)
        call = tool_call(
            "get_payment_history", True, user_id=context.user_id
        )
        if not payments:
            return self.reply(
                "I don't see any payment history for your account. "
                "Have you made any purchases?",
                "No payment history found",
                call,
            )
        listing = "\n".join(
            _payment_line(p) for p in payments[:PAYMENT_LIST_DISPLAY]
        )
        return self.reply(
            f"Your payment history:\n\n{listing}\n\n"
            "How can I help you with billing?",
            "Listed payment history",
            call,
        )
