"""Tests for core/complexity.py."""

from __future__ import annotations

import pytest

from switchboard.core.complexity import (
    complexity_score,
    estimate_complexity,
    estimate_token_count,
    score_to_complexity,
)
from switchboard.models.agent import AgentRole
from switchboard.models.cost import TaskComplexity


class TestEstimateComplexity:
    def test_simple_arithmetic_question(self):
        text = "What is 15 * 37?"
        result = estimate_complexity(AgentRole.CONVERSATIONAL, 2, len(text), text)
        assert result == TaskComplexity.SIMPLE

    def test_orchestrator_long_message_is_critical(self):
        text = "x" * 600
        result = estimate_complexity(AgentRole.ORCHESTRATOR, 0, len(text), text)
        assert result == TaskComplexity.CRITICAL

    def test_many_tools_raise_score(self):
        assert estimate_complexity(AgentRole.RESEARCHER, 6, 200) == TaskComplexity.COMPLEX
        assert estimate_complexity(AgentRole.RESEARCHER, 5, 200) == TaskComplexity.MODERATE

    def test_short_message_lowers_score(self):
        assert estimate_complexity(AgentRole.RESEARCHER, 0, 50) == TaskComplexity.SIMPLE

    def test_planning_keyword(self):
        text = "Please put together a detailed rollout for the new billing service. " * 2
        assert len(text) >= 100
        result = estimate_complexity(AgentRole.CONVERSATIONAL, 0, len(text), text)
        assert result == TaskComplexity.MODERATE

    def test_critical_keyword_adds_two(self):
        text = "Please review the critical rollout of our billing service next week. " * 2
        assert 100 <= len(text) <= 500
        result = estimate_complexity(AgentRole.CONVERSATIONAL, 0, len(text), text)
        assert result == TaskComplexity.COMPLEX

    def test_keyword_match_is_case_insensitive(self):
        text = "PRODUCTION outage retro for the payments cluster and its downstream consumers, " * 2
        lower = text.lower()
        assert estimate_complexity(AgentRole.CONVERSATIONAL, 0, len(text), text) == estimate_complexity(
            AgentRole.CONVERSATIONAL, 0, len(lower), lower
        )

    def test_unknown_role_uses_moderate_baseline(self):
        assert estimate_complexity("mystery", 0, 200) == TaskComplexity.MODERATE

    def test_role_string_accepted(self):
        assert estimate_complexity("orchestrator", 0, 200) == TaskComplexity.COMPLEX

    def test_deterministic(self):
        text = "Compare the two vendors and analyze the tradeoffs"
        results = {estimate_complexity(AgentRole.AUTOMATION, 3, len(text), text) for _ in range(5)}
        assert len(results) == 1

    @pytest.mark.parametrize("role", list(AgentRole))
    def test_monotone_in_tool_count(self, role):
        levels = [complexity_score(estimate_complexity(role, n, 200)) for n in range(0, 10)]
        assert levels == sorted(levels)

    @pytest.mark.parametrize("role", list(AgentRole))
    def test_monotone_in_message_length(self, role):
        levels = [complexity_score(estimate_complexity(role, 2, n)) for n in (10, 99, 100, 300, 500, 501, 2000)]
        assert levels == sorted(levels)


class TestScoreMapping:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (-3, TaskComplexity.SIMPLE),
            (1, TaskComplexity.SIMPLE),
            (2, TaskComplexity.MODERATE),
            (3, TaskComplexity.COMPLEX),
            (4, TaskComplexity.CRITICAL),
            (9, TaskComplexity.CRITICAL),
        ],
    )
    def test_clamping(self, score, expected):
        assert score_to_complexity(score) == expected

    def test_levels_round_trip(self):
        for level in TaskComplexity:
            assert score_to_complexity(complexity_score(level)) == level


class TestTokenEstimate:
    def test_four_chars_per_token(self):
        assert estimate_token_count("") == 0
        assert estimate_token_count("abcd") == 1
        assert estimate_token_count("abcde") == 2
