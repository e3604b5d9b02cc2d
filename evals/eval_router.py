"""Routing evaluations for the keyword router using pydantic-evals.

Run with: uv run python -m evals.eval_router
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_evals import Case, Dataset

from evals.evaluators import ConfidenceAtLeast, RoutedTo
from supportdesk.agent.router import KeywordRouter
from supportdesk.agent.schemas import ConversationContext, RouteDecision
from supportdesk.constants import Category


@dataclass
class RouteInput:
    """A message and the category the conversation is already in."""

    message: str
    previous: Category = Category.ROUTER


_router = KeywordRouter()


async def route(inputs: RouteInput) -> RouteDecision:
    context = ConversationContext(
        conversation_id="eval",
        user_id="eval-user",
        category=inputs.previous,
    )
    return await _router.route(inputs.message, context)


# ── Dataset ──────────────────────────────────────────────

dataset: Dataset[RouteInput, RouteDecision] = Dataset(
    cases=[
        Case(
            name="tracking_question",
            inputs=RouteInput("Where is my order ORD-001?"),
            expected_output=Category.ORDER,
            evaluators=[RoutedTo(), ConfidenceAtLeast(threshold=0.5)],
            metadata={"rule": "keyword"},
        ),
        Case(
            name="cancel_request",
            inputs=RouteInput("Please cancel order ORD-002"),
            expected_output=Category.ORDER,
            evaluators=[RoutedTo()],
            metadata={"rule": "keyword"},
        ),
        Case(
            name="refund_request",
            inputs=RouteInput("I want a refund for my payment"),
            expected_output=Category.BILLING,
            evaluators=[RoutedTo(), ConfidenceAtLeast(threshold=0.5)],
            metadata={"rule": "keyword"},
        ),
        Case(
            name="invoice_lookup",
            inputs=RouteInput("Can you send me invoice INV-001?"),
            expected_output=Category.BILLING,
            evaluators=[RoutedTo()],
            metadata={"rule": "keyword"},
        ),
        Case(
            name="password_reset",
            inputs=RouteInput("I need help to reset my password"),
            expected_output=Category.SUPPORT,
            evaluators=[RoutedTo(), ConfidenceAtLeast(threshold=0.5)],
            metadata={"rule": "keyword"},
        ),
        Case(
            name="greeting_falls_back",
            inputs=RouteInput("Hello there"),
            expected_output=Category.SUPPORT,
            evaluators=[RoutedTo()],
            metadata={"rule": "low_confidence"},
        ),
        Case(
            name="billing_follow_up_stays",
            inputs=RouteInput(
                "and what about the fee?", previous=Category.BILLING
            ),
            expected_output=Category.BILLING,
            evaluators=[RoutedTo(), ConfidenceAtLeast(threshold=0.9)],
            metadata={"rule": "continuity"},
        ),
        Case(
            name="topic_switch_leaves_order",
            inputs=RouteInput(
                "I have a payment question", previous=Category.ORDER
            ),
            expected_output=Category.BILLING,
            evaluators=[RoutedTo()],
            metadata={"rule": "continuity"},
        ),
    ],
)


def main() -> None:
    """Run the routing evaluations."""
    print("Support Desk Routing Evaluations (pydantic-evals)")
    print("=" * 50)
    report = dataset.evaluate_sync(route)
    report.print(include_input=True, include_output=True)


if __name__ == "__main__":
    main()
