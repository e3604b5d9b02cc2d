"""Protocol-based repository interfaces.

SQL implementations satisfy these protocols structurally (no inheritance).
Test doubles can be plain classes or mocks matching the same signature.
"""

from typing import Protocol

from supportdesk.models.billing import Invoice, Payment, Refund
from supportdesk.models.conversation import Conversation, Message
from supportdesk.models.order import Order
from supportdesk.models.user import User


class UserRepository(Protocol):
    async def get_by_id(self, user_id: str) -> User | None: ...
    async def get_by_email(self, email: str) -> User | None: ...
    async def create(self, user: User) -> User: ...


class OrderRepository(Protocol):
    async def get_by_id(self, order_id: str) -> Order | None: ...
    async def get_by_number(
        self, order_number: str
    ) -> Order | None: ...
    async def list_by_user(
        self, user_id: str, limit: int | None = None
    ) -> list[Order]: ...
    async def create(self, order: Order) -> Order: ...
    async def save(self, order: Order) -> Order: ...


class BillingRepository(Protocol):
    async def list_payments_for_orders(
        self, order_ids: list[str], limit: int | None = None
    ) -> list[Payment]: ...
    async def get_payment(self, payment_id: str) -> Payment | None: ...
    async def create_payment(self, payment: Payment) -> Payment: ...
    async def get_invoice(self, invoice_id: str) -> Invoice | None: ...
    async def create_invoice(self, invoice: Invoice) -> Invoice: ...
    async def get_refund(self, refund_id: str) -> Refund | None: ...
    async def list_refunds_for_order(
        self, order_id: str
    ) -> list[Refund]: ...
    async def create_refund(self, refund: Refund) -> Refund: ...


class ConversationRepository(Protocol):
    async def list_for_user(
        self, user_id: str, limit: int, offset: int = 0
    ) -> list[Conversation]: ...
    async def get_conversation(
        self, conversation_id: str
    ) -> Conversation | None: ...
    async def create_conversation(
        self, conversation: Conversation
    ) -> Conversation: ...
    async def save_conversation(
        self, conversation: Conversation
    ) -> Conversation: ...
    async def delete_conversation(self, conversation_id: str) -> None: ...
    async def get_messages(
        self, conversation_id: str, limit: int | None = None
    ) -> list[Message]: ...
    async def get_last_message(
        self, conversation_id: str
    ) -> Message | None: ...
    async def count_messages(self, conversation_id: str) -> int: ...
    async def add_message(self, message: Message) -> Message: ...
