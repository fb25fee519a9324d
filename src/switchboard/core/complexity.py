"""Task complexity estimation.

Scores a pending request from the agent's role, the size of its tool set,
the message length and a few lexical cues, then clamps the score back onto
the four complexity levels used for model selection.
"""

from __future__ import annotations

import math
import re
from typing import Optional

from ..models.agent import AgentRole
from ..models.cost import TaskComplexity

ROLE_BASELINE: dict[AgentRole, TaskComplexity] = {
    AgentRole.CONVERSATIONAL: TaskComplexity.SIMPLE,
    AgentRole.RESEARCHER: TaskComplexity.MODERATE,
    AgentRole.ORCHESTRATOR: TaskComplexity.COMPLEX,
    AgentRole.AUTOMATION: TaskComplexity.MODERATE,
}

_SCORES: dict[TaskComplexity, int] = {
    TaskComplexity.SIMPLE: 1,
    TaskComplexity.MODERATE: 2,
    TaskComplexity.COMPLEX: 3,
    TaskComplexity.CRITICAL: 4,
}

MANY_TOOLS = 5
LONG_MESSAGE = 500
SHORT_MESSAGE = 100

_SIMPLE_QUESTION = re.compile(r"^(what|when|where|who)\s")
_SIMPLE_ARITHMETIC = re.compile(r"\d+\s*[+\-*/]\s*\d+")
_SIMPLE_PHRASES = ("what time", "what is")
_PLANNING_KEYWORDS = (
    "plan",
    "strategy",
    "analyze",
    "compare",
    "comprehensive",
    "detailed",
    "coordinate",
    "multi-step",
)
_CRITICAL_KEYWORDS = ("critical", "production", "important decision")


def _baseline(role: AgentRole | str) -> TaskComplexity:
    try:
        return ROLE_BASELINE[AgentRole(role)]
    except ValueError:
        return TaskComplexity.MODERATE


def _is_simple(text: str) -> bool:
    return bool(
        _SIMPLE_QUESTION.match(text)
        or any(phrase in text for phrase in _SIMPLE_PHRASES)
        or _SIMPLE_ARITHMETIC.search(text)
    )


def score_to_complexity(score: int) -> TaskComplexity:
    if score <= 1:
        return TaskComplexity.SIMPLE
    if score == 2:
        return TaskComplexity.MODERATE
    if score == 3:
        return TaskComplexity.COMPLEX
    return TaskComplexity.CRITICAL


def complexity_score(complexity: TaskComplexity) -> int:
    return _SCORES.get(complexity, 2)


def estimate_complexity(
    role: AgentRole | str,
    tool_count: int,
    message_length: int,
    message_text: Optional[str] = None,
) -> TaskComplexity:
    """Estimate how demanding a request is. Pure and deterministic."""
    score = complexity_score(_baseline(role))

    if tool_count > MANY_TOOLS:
        score += 1

    if message_length > LONG_MESSAGE:
        score += 1
    elif message_length < SHORT_MESSAGE:
        score -= 1

    if message_text:
        text = message_text.lower()
        if _is_simple(text):
            score -= 1
        if any(word in text for word in _PLANNING_KEYWORDS):
            score += 1
        if any(word in text for word in _CRITICAL_KEYWORDS):
            score += 2

    return score_to_complexity(score)


def estimate_token_count(text: str) -> int:
    """Rough token estimate at ~4 characters per token."""
    return math.ceil(len(text) / 4)
