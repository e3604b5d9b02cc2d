"""Demo data: one customer with orders, payments, invoices and refunds.

Seeding goes through the repository protocols, so the same routine
fills a SQLite file from the CLI and the in-memory fakes in tests.
Re-running is a no-op once the demo user exists.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from supportdesk.constants import (
    META_LAST_ORDER_NUMBER,
    Category,
    MessageRole,
    OrderStatus,
    PaymentStatus,
    RefundStatus,
)
from supportdesk.models.billing import Invoice, Payment, Refund
from supportdesk.models.conversation import Conversation, Message
from supportdesk.models.order import Order
from supportdesk.models.user import User
from supportdesk.repositories.protocols import (
    BillingRepository,
    ConversationRepository,
    OrderRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

DEMO_EMAIL = "john@example.com"


@dataclass
class SeedSummary:
    users: int = 0
    orders: int = 0
    payments: int = 0
    invoices: int = 0
    refunds: int = 0
    conversations: int = 0

    def total(self) -> int:
        return (
            self.users
            + self.orders
            + self.payments
            + self.invoices
            + self.refunds
            + self.conversations
        )


_ORDERS = (
    {
        "order_number": "ORD-001",
        "status": OrderStatus.SHIPPED,
        "total": 299.99,
        "tracking_number": "TRK123456789",
        "tracking_url": "https://track.example.com/TRK123456789",
        "items": [
            {"name": "Wireless Headphones", "quantity": 1, "price": 199.99},
            {"name": "Phone Case", "quantity": 2, "price": 49.99},
        ],
        "shipping_address": {
            "street": "123 Main St",
            "city": "New York",
            "state": "NY",
            "zip": "10001",
            "country": "USA",
        },
    },
    {
        "order_number": "ORD-002",
        "status": OrderStatus.PENDING,
        "total": 149.50,
        "items": [{"name": "Smart Watch", "quantity": 1, "price": 149.50}],
        "shipping_address": {
            "street": "456 Oak Ave",
            "city": "Los Angeles",
            "state": "CA",
            "zip": "90001",
            "country": "USA",
        },
    },
    {
        "order_number": "ORD-003",
        "status": OrderStatus.DELIVERED,
        "total": 599.00,
        "items": [
            {"name": "Laptop Stand", "quantity": 1, "price": 79.00},
            {"name": "USB-C Hub", "quantity": 2, "price": 89.99},
        ],
        "shipping_address": {
            "street": "789 Pine Rd",
            "city": "Chicago",
            "state": "IL",
            "zip": "60601",
            "country": "USA",
        },
    },
)

# (order_number, amount, status, method, transaction id, invoice id,
#  invoice status)
_PAYMENTS = (
    ("ORD-001", 299.99, PaymentStatus.COMPLETED, "credit_card",
     "TXN-001", "INV-001", "PAID"),
    ("ORD-002", 149.50, PaymentStatus.PENDING, "credit_card",
     "TXN-002", "INV-002", "PENDING"),
    ("ORD-003", 599.00, PaymentStatus.COMPLETED, "paypal",
     "TXN-003", "INV-003", "PAID"),
)  # fmt: skip

# (refund id, order_number, amount, status, reason)
_REFUNDS = (
    ("REF-001", "ORD-001", 50.00, RefundStatus.PROCESSED, "Partial return"),
    ("REF-002", "ORD-003", 599.00, RefundStatus.APPROVED,
     "Customer request"),
)  # fmt: skip

_CONVERSATIONS = (
    (
        "Order Status Inquiry",
        Category.ORDER,
        {META_LAST_ORDER_NUMBER: "ORD-001"},
        "Hi, I want to check the status of my order ORD-001",
        "Your order ORD-001 is SHIPPED. Tracking number: TRK123456789. "
        "Track it here: https://track.example.com/TRK123456789",
    ),
    (
        "Billing Question",
        Category.BILLING,
        {},
        "I have a question about my payment",
        "Your most recent payment of $299.99 was completed successfully.",
    ),
)


async def seed_demo_data(
    user_repo: UserRepository,
    order_repo: OrderRepository,
    billing_repo: BillingRepository,
    conversation_repo: ConversationRepository,
    user_id: str = "demo-user",
) -> SeedSummary:
    """Insert the demo dataset for *user_id*; returns what was created."""
    summary = SeedSummary()
    if await user_repo.get_by_id(user_id) is not None:
        logger.info("event=seed_skipped user_id=%s", user_id)
        return summary

    await user_repo.create(
        User(id=user_id, email=DEMO_EMAIL, name="John Doe")
    )
    summary.users += 1

    orders: dict[str, Order] = {}
    for spec in _ORDERS:
        order = await order_repo.create(Order(user_id=user_id, **spec))
        orders[order.order_number] = order
        summary.orders += 1

    for number, amount, status, method, txn, inv_id, inv_status in (
        _PAYMENTS
    ):
        payment = await billing_repo.create_payment(
            Payment(
                order_id=orders[number].id,
                amount=amount,
                status=status,
                payment_method=method,
                transaction_id=txn,
            )
        )
        summary.payments += 1
        await billing_repo.create_invoice(
            Invoice(
                id=inv_id,
                payment_id=payment.id,
                invoice_url=f"https://invoice.example.com/{inv_id}",
                amount=amount,
                status=inv_status,
            )
        )
        summary.invoices += 1

    for refund_id, number, amount, status, reason in _REFUNDS:
        await billing_repo.create_refund(
            Refund(
                id=refund_id,
                order_id=orders[number].id,
                amount=amount,
                status=status,
                reason=reason,
            )
        )
        summary.refunds += 1

    for title, category, context, question, answer in _CONVERSATIONS:
        conv = await conversation_repo.create_conversation(
            Conversation(
                user_id=user_id,
                title=title,
                category=category,
                context=dict(context),
            )
        )
        await conversation_repo.add_message(
            Message(
                conversation_id=conv.id,
                role=MessageRole.USER,
                content=question,
            )
        )
        await conversation_repo.add_message(
            Message(
                conversation_id=conv.id,
                role=MessageRole.ASSISTANT,
                content=answer,
                category=category,
            )
        )
        summary.conversations += 1

    logger.info(
        "event=seed_complete user_id=%s rows=%d",
        user_id,
        summary.total(),
    )
    return summary
