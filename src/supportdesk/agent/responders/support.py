"""Support responder: greetings, FAQs, policies and catch-all help."""

from __future__ import annotations

from collections.abc import Sequence

from supportdesk.agent.responders.base import (
    Handler,
    Responder,
    SubIntent,
    matches,
    tool_call,
)
from supportdesk.agent.schemas import AgentResponse, ConversationContext
from supportdesk.agent.tools.support_tools import SupportTools
from supportdesk.constants import SUPPORT_HISTORY_LOOKBACK, Category

GREETING_REPLY = (
    "Hello! Welcome to our customer support. How can I help you today?\n\n"
    "I can assist you with:\n"
    "• Order status and tracking\n"
    "• Billing and payment questions\n"
    "• Refunds and invoices\n"
    "• General product questions\n"
    "• Account assistance\n\n"
    "Just describe what you need help with!"
)

RETURN_POLICY_REPLY = (
    "**Return Policy**\n\n"
    "• 30-day return window for most items\n"
    "• Items must be in original condition with tags\n"
    "• Some items (personalized, final sale) cannot be returned\n\n"
    "To start a return:\n"
    "1. Go to your Order History\n"
    "2. Select the order and items to return\n"
    "3. Choose your return reason\n"
    "4. Print your return label\n\n"
    "Would you like help starting a return?"
)

ACCOUNT_REPLY = (
    "**Account Assistance**\n\n"
    "I can help you with:\n"
    "• Password reset\n"
    "• Email address updates\n"
    "• Account security questions\n"
    "• Two-factor authentication\n\n"
    "What account issue are you experiencing?"
)

CONTACT_REPLY = (
    "**Contact Us**\n\n"
    "• **Email**: support@example.com\n"
    "• **Phone**: 1-800-EXAMPLE (9 AM - 6 PM EST)\n"
    "• **Live Chat**: Available on our website\n"
    "• **Help Center**: help.example.com\n\n"
    "For immediate assistance, I recommend live chat or phone support."
)

PRODUCT_REPLY = (
    "**Product Questions**\n\n"
    "I'd be happy to help with product questions! However, I don't "
    "have access to specific product details.\n\n"
    "For product information, please:\n"
    "1. Visit the product page on our website\n"
    "2. Check the product specifications and reviews\n"
    "3. Contact our sales team for detailed questions\n\n"
    "Is there anything else I can help you with?"
)

_is_greeting = matches(
    r"^\s*(?:hi|hello|hey|good morning|good afternoon|good evening"
    r"|what's up)\b"
)


class SupportResponder(Responder):
    category = Category.SUPPORT

    def __init__(self, tools: SupportTools) -> None:
        self._tools = tools

    def sub_intents(self) -> Sequence[SubIntent]:
        return (
            SubIntent("greeting", _is_greeting, self._greeting),
            SubIntent("faq", self._has_faq, self._faq),
            SubIntent(
                "return_policy",
                matches(
                    r"return",
                    r"exchange",
                    r"send.*back",
                    r"get.*money.*back",
                    r"not.*satisfied",
                ),
                self._fixed(
                    RETURN_POLICY_REPLY, "Provided return policy information"
                ),
            ),
            SubIntent(
                "account",
                matches(
                    r"password",
                    r"login",
                    r"can't.*access",
                    r"locked.*out",
                    r"account.*issue",
                    r"security",
                    r"2fa",
                ),
                self._fixed(
                    ACCOUNT_REPLY, "Provided account assistance options"
                ),
            ),
            SubIntent(
                "contact",
                matches(
                    r"talk.*human",
                    r"speak.*agent",
                    r"call.*you",
                    r"email.*support",
                    r"contact",
                    r"phone.*number",
                ),
                self._fixed(CONTACT_REPLY, "Provided contact information"),
            ),
            SubIntent(
                "product",
                matches(
                    r"product",
                    r"specification",
                    r"feature",
                    r"size",
                    r"color",
                    r"dimension",
                    r"weight",
                    r"compatibility",
                ),
                self._fixed(
                    PRODUCT_REPLY, "Provided product question guidance"
                ),
            ),
        )

    def _fixed(self, content: str, reasoning: str) -> Handler:
        async def _handler(
            message: str, context: ConversationContext
        ) -> AgentResponse:
            return self.reply(content, reasoning)

        return _handler

    def _has_faq(self, message: str) -> bool:
        return bool(self._tools.search_faqs(message))

    async def _greeting(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        return self.reply(
            GREETING_REPLY, "Provided greeting and help options"
        )

    async def _faq(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        best = self._tools.search_faqs(message)[0]
        return self.reply(
            f"**{best.question}**\n\n{best.answer}\n\n"
            f"*Category: {best.category}*\n\n"
            "Is this helpful, or would you like more assistance?",
            f"Matched FAQ: {best.category}",
            tool_call("search_faqs", True, query=message),
        )

    async def default(
        self, message: str, context: ConversationContext
    ) -> AgentResponse:
        history = await self._tools.query_conversation_history(
            context.user_id, SUPPORT_HISTORY_LOOKBACK
        )
        previous = len(history.conversations) if history.success else 0
        context_line = (
            "\n\n*Based on our conversation history, I see you've asked "
            f"about {previous} topics before.*"
            if previous
            else ""
        )
        return self.reply(
            "**I want to make sure I understand your question**\n\n"
            f'Your message: "{message}"{context_line}\n\n'
            "I'm here to help! Here's what I can assist with:\n"
            "• Orders: Status, tracking, modifications\n"
            "• Billing: Payments, refunds, invoices\n"
            "• Troubleshooting: Product issues, account problems\n"
            "• General: FAQs, policies, general questions\n\n"
            "Could you provide more details so I can better assist you?",
            "Provided general assistance options",
            tool_call(
                "query_conversation_history",
                history.success,
                user_id=context.user_id,
                limit=SUPPORT_HISTORY_LOOKBACK,
            ),
        )
