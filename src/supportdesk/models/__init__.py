"""SQLAlchemy ORM models."""

from supportdesk.models.base import Base
from supportdesk.models.billing import Invoice, Payment, Refund
from supportdesk.models.conversation import Conversation, Message
from supportdesk.models.order import Order
from supportdesk.models.user import User

__all__ = [
    "Base",
    "Conversation",
    "Invoice",
    "Message",
    "Order",
    "Payment",
    "Refund",
    "User",
]
