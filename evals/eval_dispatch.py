"""End-to-end reply evaluations against the seeded demo store.

Every case runs on a freshly seeded in-memory store, so write
cases (cancel, refund) never leak into the next one.

Run with: uv run python -m evals.eval_dispatch
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic_evals import Case, Dataset

from evals.evaluators import (
    AnsweredBy,
    NoToolCalls,
    ReplyContains,
    ToolCalled,
)
from supportdesk.agent.coordinator import create_coordinator
from supportdesk.agent.router import KeywordRouter
from supportdesk.agent.schemas import AgentResponse, ConversationContext
from supportdesk.config import Settings
from supportdesk.constants import Category
from supportdesk.repositories.fakes import (
    FakeBillingRepository,
    FakeConversationRepository,
    FakeOrderRepository,
    FakeUserRepository,
)
from supportdesk.seed import seed_demo_data

USER_ID = "demo-user"


@dataclass
class ChatInput:
    message: str
    previous: Category = Category.ROUTER
    metadata: dict[str, Any] = field(default_factory=dict)


async def dispatch(inputs: ChatInput) -> AgentResponse:
    """Seed a fresh store and run one message through the coordinator."""
    users = FakeUserRepository()
    orders = FakeOrderRepository()
    billing = FakeBillingRepository()
    conversations = FakeConversationRepository()
    await seed_demo_data(users, orders, billing, conversations, USER_ID)

    coordinator = create_coordinator(
        order_repo=orders,
        billing_repo=billing,
        conversation_repo=conversations,
        user_repo=users,
        settings=Settings(),
        router=KeywordRouter(),
    )
    context = ConversationContext(
        conversation_id="eval",
        user_id=USER_ID,
        category=inputs.previous,
        metadata=dict(inputs.metadata),
    )
    return await coordinator.process_message(inputs.message, context)


# ── Dataset ──────────────────────────────────────────────

dataset: Dataset[ChatInput, AgentResponse] = Dataset(
    cases=[
        Case(
            name="track_shipped_order",
            inputs=ChatInput("Where is my order ORD-001?"),
            evaluators=[
                AnsweredBy(category=Category.ORDER),
                ToolCalled(name="track_order"),
                ReplyContains(keywords=["TRK123456789"]),
            ],
            metadata={"sub_intent": "tracking"},
        ),
        Case(
            name="cancel_pending_order",
            inputs=ChatInput("Please cancel order ORD-002"),
            evaluators=[
                AnsweredBy(category=Category.ORDER),
                ToolCalled(name="cancel_order"),
                ReplyContains(keywords=["cancelled successfully"]),
            ],
            metadata={"sub_intent": "cancellation"},
        ),
        Case(
            name="cancel_shipped_order_refused",
            inputs=ChatInput("Cancel my order ORD-001"),
            evaluators=[
                AnsweredBy(category=Category.ORDER),
                ReplyContains(keywords=["cannot be cancelled", "SHIPPED"]),
            ],
            metadata={"sub_intent": "cancellation"},
        ),
        Case(
            name="follow_up_uses_remembered_order",
            inputs=ChatInput(
                "has it shipped yet?",
                previous=Category.ORDER,
                metadata={"last_order_number": "ORD-001"},
            ),
            evaluators=[
                AnsweredBy(category=Category.ORDER),
                ToolCalled(name="track_order"),
            ],
            metadata={"sub_intent": "tracking"},
        ),
        Case(
            name="refund_status_lookup",
            inputs=ChatInput("What is the status of refund REF-001?"),
            evaluators=[
                AnsweredBy(category=Category.BILLING),
                ToolCalled(name="check_refund_status"),
                ReplyContains(keywords=["ORD-001", "PROCESSED"]),
            ],
            metadata={"sub_intent": "refund"},
        ),
        Case(
            name="invoice_download_link",
            inputs=ChatInput("Can you send me invoice INV-003?"),
            evaluators=[
                AnsweredBy(category=Category.BILLING),
                ToolCalled(name="get_invoice_details"),
                ReplyContains(keywords=["invoice.example.com/INV-003"]),
            ],
            metadata={"sub_intent": "invoice"},
        ),
        Case(
            name="payment_declined_advice",
            inputs=ChatInput("My card declined when I tried to pay"),
            evaluators=[
                AnsweredBy(category=Category.BILLING),
                NoToolCalls(),
                ReplyContains(keywords=["different payment method"]),
            ],
            metadata={"sub_intent": "payment_issue"},
        ),
        Case(
            name="greeting",
            inputs=ChatInput("Hi there"),
            evaluators=[
                AnsweredBy(category=Category.SUPPORT),
                NoToolCalls(),
                ReplyContains(keywords=["welcome"]),
            ],
            metadata={"sub_intent": "greeting"},
        ),
        Case(
            name="contact_question_answered_from_faq",
            inputs=ChatInput("I need support, can I talk to a human?"),
            evaluators=[
                AnsweredBy(category=Category.SUPPORT),
                ReplyContains(keywords=["support@example.com"]),
            ],
            metadata={"sub_intent": "faq"},
        ),
    ],
)


def main() -> None:
    """Run the end-to-end reply evaluations."""
    print("Support Desk Reply Evaluations (pydantic-evals)")
    print("=" * 50)
    report = dataset.evaluate_sync(dispatch)
    report.print(include_input=True, include_output=True)


if __name__ == "__main__":
    main()
