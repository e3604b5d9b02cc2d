"""In-memory fake repositories for testing.

Dict-backed implementations of all 4 repository protocols.
No SQLAlchemy, no I/O: instant operations for unit tests.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from supportdesk.constants import (
    DEFAULT_CURRENCY,
    Category,
    OrderStatus,
    PaymentStatus,
    RefundStatus,
)
from supportdesk.models.billing import Invoice, Payment, Refund
from supportdesk.models.conversation import Conversation, Message
from supportdesk.models.order import Order
from supportdesk.models.user import User


def _new_id() -> str:
    return str(uuid.uuid4())


class FakeUserRepository:
    """Dict-backed UserRepository for testing."""

    def __init__(self) -> None:
        self._store: dict[str, User] = {}

    async def get_by_id(self, user_id: str) -> User | None:
        return self._store.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        for user in self._store.values():
            if user.email == email:
                return user
        return None

    async def create(self, user: User) -> User:
        if not user.id:
            user.id = _new_id()
        if user.created_at is None:
            user.created_at = datetime.now(UTC)
        self._store[user.id] = user
        return user


class FakeOrderRepository:
    """Dict-backed OrderRepository for testing."""

    def __init__(self) -> None:
        self._store: dict[str, Order] = {}

    async def get_by_id(self, order_id: str) -> Order | None:
        return self._store.get(order_id)

    async def get_by_number(self, order_number: str) -> Order | None:
        for order in self._store.values():
            if order.order_number == order_number:
                return order
        return None

    async def list_by_user(
        self, user_id: str, limit: int | None = None
    ) -> list[Order]:
        orders = sorted(
            (
                o
                for o in reversed(self._store.values())
                if o.user_id == user_id
            ),
            key=lambda o: o.created_at,
            reverse=True,
        )
        return orders[:limit] if limit is not None else orders

    async def create(self, order: Order) -> Order:
        if not order.id:
            order.id = _new_id()
        now = datetime.now(UTC)
        if order.created_at is None:
            order.created_at = now
        order.updated_at = now
        if order.items is None:
            order.items = []
        if order.currency is None:
            order.currency = DEFAULT_CURRENCY
        if order.status is None:
            order.status = OrderStatus.PENDING
        self._store[order.id] = order
        return order

    async def save(self, order: Order) -> Order:
        order.updated_at = datetime.now(UTC)
        self._store[order.id] = order
        return order


class FakeBillingRepository:
    """Dict-backed BillingRepository for testing.

    Set ``fail_with`` to make every read raise, simulating a store
    outage.
    """

    def __init__(self) -> None:
        self._payments: dict[str, Payment] = {}
        self._invoices: dict[str, Invoice] = {}
        self._refunds: dict[str, Refund] = {}
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def list_payments_for_orders(
        self, order_ids: list[str], limit: int | None = None
    ) -> list[Payment]:
        self._check()
        wanted = set(order_ids)
        payments = sorted(
            (
                p
                for p in reversed(self._payments.values())
                if p.order_id in wanted
            ),
            key=lambda p: p.created_at,
            reverse=True,
        )
        return payments[:limit] if limit is not None else payments

    async def get_payment(self, payment_id: str) -> Payment | None:
        self._check()
        return self._payments.get(payment_id)

    async def create_payment(self, payment: Payment) -> Payment:
        if not payment.id:
            payment.id = _new_id()
        if payment.created_at is None:
            payment.created_at = datetime.now(UTC)
        if payment.currency is None:
            payment.currency = DEFAULT_CURRENCY
        if payment.status is None:
            payment.status = PaymentStatus.PENDING
        self._payments[payment.id] = payment
        return payment

    async def get_invoice(self, invoice_id: str) -> Invoice | None:
        self._check()
        return self._invoices.get(invoice_id)

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        if not invoice.id:
            invoice.id = _new_id()
        if invoice.created_at is None:
            invoice.created_at = datetime.now(UTC)
        if invoice.currency is None:
            invoice.currency = DEFAULT_CURRENCY
        self._invoices[invoice.id] = invoice
        return invoice

    async def get_refund(self, refund_id: str) -> Refund | None:
        self._check()
        return self._refunds.get(refund_id)

    async def list_refunds_for_order(
        self, order_id: str
    ) -> list[Refund]:
        self._check()
        return [
            r for r in self._refunds.values() if r.order_id == order_id
        ]

    async def create_refund(self, refund: Refund) -> Refund:
        if not refund.id:
            refund.id = _new_id()
        now = datetime.now(UTC)
        if refund.created_at is None:
            refund.created_at = now
        refund.updated_at = now
        if refund.currency is None:
            refund.currency = DEFAULT_CURRENCY
        if refund.status is None:
            refund.status = RefundStatus.PENDING
        self._refunds[refund.id] = refund
        return refund


class FakeConversationRepository:
    """Dict-backed ConversationRepository for testing."""

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._messages: dict[str, list[Message]] = {}

    async def list_for_user(
        self, user_id: str, limit: int, offset: int = 0
    ) -> list[Conversation]:
        convs = sorted(
            (
                c
                for c in reversed(self._conversations.values())
                if c.user_id == user_id
            ),
            key=lambda c: c.updated_at,
            reverse=True,
        )
        return convs[offset : offset + limit]

    async def get_conversation(
        self, conversation_id: str
    ) -> Conversation | None:
        return self._conversations.get(conversation_id)

    async def create_conversation(
        self, conversation: Conversation
    ) -> Conversation:
        if not conversation.id:
            conversation.id = _new_id()
        now = datetime.now(UTC)
        if conversation.created_at is None:
            conversation.created_at = now
        if conversation.updated_at is None:
            conversation.updated_at = now
        if conversation.category is None:
            conversation.category = Category.ROUTER
        self._conversations[conversation.id] = conversation
        self._messages.setdefault(conversation.id, [])
        return conversation

    async def save_conversation(
        self, conversation: Conversation
    ) -> Conversation:
        self._conversations[conversation.id] = conversation
        return conversation

    async def delete_conversation(self, conversation_id: str) -> None:
        self._conversations.pop(conversation_id, None)
        self._messages.pop(conversation_id, None)

    async def get_messages(
        self, conversation_id: str, limit: int | None = None
    ) -> list[Message]:
        msgs = list(self._messages.get(conversation_id, []))
        return msgs[:limit] if limit is not None else msgs

    async def get_last_message(
        self, conversation_id: str
    ) -> Message | None:
        msgs = self._messages.get(conversation_id, [])
        return msgs[-1] if msgs else None

    async def count_messages(self, conversation_id: str) -> int:
        return len(self._messages.get(conversation_id, []))

    async def add_message(self, message: Message) -> Message:
        if not message.id:
            message.id = _new_id()
        if message.created_at is None:
            message.created_at = datetime.now(UTC)
        self._messages.setdefault(message.conversation_id, []).append(
            message
        )
        return message
