"""Custom pydantic-evals evaluators for the support desk.

Routing (output is a RouteDecision):
- RoutedTo: decision category equals the expected category
- ConfidenceAtLeast: decision confidence meets a threshold

Replies (output is an AgentResponse):
- ReplyContains: reply text mentions ALL expected keywords
- AnsweredBy: response category equals the expected category
- ToolCalled: a named data tool was invoked
- NoToolCalls: the reply was produced without touching data tools
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic_evals.evaluators import Evaluator, EvaluatorContext

from supportdesk.agent.schemas import AgentResponse, RouteDecision
from supportdesk.constants import LOW_CONFIDENCE_THRESHOLD, Category


@dataclass
class RoutedTo(Evaluator[Any, RouteDecision]):
    """Decision category matches ``category`` or the case's expected output."""

    category: Category | None = None

    def evaluate(
        self, ctx: EvaluatorContext[Any, RouteDecision]
    ) -> bool:
        expected = self.category or ctx.expected_output
        if expected is None:
            return False
        return ctx.output.category == expected


@dataclass
class ConfidenceAtLeast(Evaluator[Any, RouteDecision]):
    """Pass when the routing confidence is at least ``threshold``."""

    threshold: float = LOW_CONFIDENCE_THRESHOLD

    def evaluate(
        self, ctx: EvaluatorContext[Any, RouteDecision]
    ) -> bool:
        return ctx.output.confidence >= self.threshold


@dataclass
class ReplyContains(Evaluator[Any, AgentResponse]):
    """Check that the reply mentions ALL expected keywords."""

    keywords: list[str] = field(default_factory=list)

    def evaluate(
        self, ctx: EvaluatorContext[Any, AgentResponse]
    ) -> bool:
        content = ctx.output.content.lower()
        return all(k.lower() in content for k in self.keywords)


@dataclass
class AnsweredBy(Evaluator[Any, AgentResponse]):
    """The responder that produced the reply owns ``category``."""

    category: Category = Category.SUPPORT

    def evaluate(
        self, ctx: EvaluatorContext[Any, AgentResponse]
    ) -> bool:
        return ctx.output.category == self.category


@dataclass
class ToolCalled(Evaluator[Any, AgentResponse]):
    """A tool named ``name`` appears in the response's tool calls."""

    name: str = ""

    def evaluate(
        self, ctx: EvaluatorContext[Any, AgentResponse]
    ) -> bool:
        return any(c.name == self.name for c in ctx.output.tool_calls)


@dataclass
class NoToolCalls(Evaluator[Any, AgentResponse]):
    def evaluate(
        self, ctx: EvaluatorContext[Any, AgentResponse]
    ) -> bool:
        return not ctx.output.tool_calls
