"""Category responders: one per routable category."""

from supportdesk.agent.responders.base import Responder, SubIntent
from supportdesk.agent.responders.billing import BillingResponder
from supportdesk.agent.responders.order import OrderResponder
from supportdesk.agent.responders.support import SupportResponder

__all__ = [
    "BillingResponder",
    "OrderResponder",
    "Responder",
    "SubIntent",
    "SupportResponder",
]
