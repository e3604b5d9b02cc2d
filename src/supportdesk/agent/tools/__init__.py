"""Data-tool capabilities consumed by the responders."""

from supportdesk.agent.tools.billing_tools import (
    BillingTools,
    RepoBillingTools,
)
from supportdesk.agent.tools.order_tools import OrderTools, RepoOrderTools
from supportdesk.agent.tools.support_tools import (
    RepoSupportTools,
    SupportTools,
    search_faqs,
)

__all__ = [
    "BillingTools",
    "OrderTools",
    "RepoBillingTools",
    "RepoOrderTools",
    "RepoSupportTools",
    "SupportTools",
    "search_faqs",
]
