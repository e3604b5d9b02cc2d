"""Order responder: tracking, status, cancellation, modification."""

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
from supportdesk.agent.tools.order_tools import OrderTools
from supportdesk.agent.tools.schemas import OrderModification
from supportdesk.constants import (
    META_LAST_ORDER_NUMBER,
    ORDER_NUMBER_PATTERN,
    USER_ORDERS_LIMIT,
    Category,
)

DEFAULT_CANCELLATION_REASON = "Customer requested cancellation"

# First matching pattern names the reason
CANCELLATION_REASONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"changed.*mind", re.I), "Customer changed their mind"),
    (
        re.compile(r"found.*better.*price", re.I),
        "Found better price elsewhere",
    ),
    (re.compile(r"no.*longer.*need", re.I), "No longer need the item"),
    (re.compile(r"wrong.*item", re.I), "Ordered wrong item"),
)

_ADDRESS_CHANGE = re.compile(
    r"change.*address|update.*address|new.*address", re.I
)
ADDRESS_CHANGE_NOTE = (
    "Address change requested - customer to provide new address"
)


def cancellation_reason(message: str) -> str:
    for pattern, reason in CANCELLATION_REASONS:
        if pattern.search(message):
            return reason
    return DEFAULT_CANCELLATION_REASON


def parse_modifications(message: str) -> OrderModification:
    """Only address changes are recognised from free text."""
    if _ADDRESS_CHANGE.search(message):
        return OrderModification(
            shipping_address={"note": ADDRESS_CHANGE_NOTE}
        )
    return OrderModification()


def order_number_for(
    message: str, context: ConversationContext
) -> str | None:
    """Order number from the message, else the one last discussed."""
    found = extract(ORDER_NUMBER_PATTERN, message)
    if found:
        return found
    remembered = context.metadata.get(META_LAST_ORDER_NUMBER)
    return remembered if isinstance(remembered, str) else None


class OrderResponder(Responder):
    category = Category.ORDER

    def __init__(self, tools: OrderTools) -> None:
        self._tools = tools

    def sub_intents(self) -> Sequence[SubIntent]:
        return (
            SubIntent(
                "tracking",
                matches(
                    r"track", r"where.*is.*my", r"delivery status", r"shipped"
                ),
                self._track,
            ),
            SubIntent(
                "status",
                matches(
                    r"status",
                    r"order.*detail",
                    r"what.*order",
                    r"check.*order",
                ),
                self._status,
            ),
            SubIntent(
                "cancellation",
                matches(
                    r"cancel", r"stop.*order", r"don't.*want", r"changed.*mind"
                ),
                self._cancel,
            ),
            SubIntent(
                "modification",
                matches(
                    r"change.*address",
                    r"modify.*order",
                    r"update.*order",
                    r"add.*item",
                    r"remove.*item",
                ),
                self._modify,
            ),
        )

    async def _track(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        order_number = order_number_for(message, context)
        if order_number is None:
            return self.reply(
                "I'd be happy to help you track your order. Could you "
                "please provide your order number (e.g., ORD-001)?",
                "Requesting order number for tracking",
            )

        result = await self._tools.track_order(order_number)
        call = tool_call(
            "track_order", result.success, order_number=order_number
        )
        if result.success and result.tracking_number:
            return self.reply(
                f"Your order {order_number} is {result.status}. "
                f"Tracking number: {result.tracking_number}. "
                f"Track it here: {result.tracking_url}",
                "Provided tracking information",
                call,
            )
        return self.reply(
            result.error or "Unable to retrieve tracking information.",
            "Tracking information not available",
            call,
        )

    async def _status(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        order_number = order_number_for(message, context)
        if order_number is None:
            return self.reply(
                "I can check your order status. Please provide your "
                "order number (e.g., ORD-001).",
                "Requesting order number for status check",
            )

        result = await self._tools.get_order_details(order_number)
        call = tool_call(
            "get_order_details", result.success, order_number=order_number
        )
        if not result.success or result.data is None:
            return self.reply(
                result.error or "Unable to retrieve order details.",
                "Order details not found",
                call,
            )

        order = result.data
        items = ", ".join(
            f"{i.name} (x{i.quantity}) - ${i.price:.2f}" for i in order.items
        )
        return self.reply(
            f"Order {order.order_number} Status: {order.status}\n\n"
            f"Items: {items or 'none'}\n"
            f"Total: ${order.total:.2f} {order.currency}\n"
            f"Placed on: {order.created_at:%Y-%m-%d}",
            "Provided order details",
            call,
        )

    async def _cancel(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        order_number = order_number_for(message, context)
        if order_number is None:
            return self.reply(
                "I can help you cancel your order. Please provide your "
                "order number.",
                "Requesting order number for cancellation",
            )

        reason = cancellation_reason(message)
        result = await self._tools.cancel_order(order_number, reason)
        outcome = "cancelled" if result.success else "cancellation failed"
        return self.reply(
            result.message,
            f"Order {outcome}",
            tool_call(
                "cancel_order",
                result.success,
                order_number=order_number,
                reason=reason,
            ),
        )

    async def _modify(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        order_number = order_number_for(message, context)
        if order_number is None:
            return self.reply(
                "I can help you modify your order. Please provide your "
                "order number first.",
                "Requesting order number for modification",
            )

        modifications = parse_modifications(message)
        if modifications.is_empty():
            return self.reply(
                "What would you like to modify about your order? You can "
                "change the shipping address or add/remove items.",
                "Requesting modification details",
            )

        result = await self._tools.modify_order(order_number, modifications)
        outcome = "completed" if result.success else "failed"
        return self.reply(
            result.message,
            f"Modification {outcome}",
            tool_call(
                "modify_order",
                result.success,
                order_number=order_number,
                modifications=modifications.model_dump(exclude_defaults=True),
            ),
        )

    async def default(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        orders = await self._tools.get_user_orders(
            context.user_id, USER_ORDERS_LIMIT
        )
        call = tool_call("get_user_orders", True, user_id=context.user_id)
        if not orders:
            return self.reply(
                "I don't see any orders associated with your account. "
                "Have you placed an order recently?",
                "No orders found for user",
                call,
            )

        listing = "\n".join(
            f"• {o.order_number} - {o.status} - ${o.total:.2f} "
            f"({o.created_at:%Y-%m-%d})"
            for o in orders
        )
        return self.reply(
            f"Here are your recent orders:\n\n{listing}\n\n"
            "Which order would you like help with?",
            "Listed user orders",
            call,
        )
