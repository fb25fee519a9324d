"""Tests for core/pricing.py."""

from __future__ import annotations

from decimal import Decimal

import pytest

from switchboard.core.errors import UnknownModelError
from switchboard.core.pricing import (
    DEFAULT_MODEL_SELECTION,
    MODEL_CATALOG,
    calculate_cost,
    estimate_request_cost,
    format_cost,
    get_model_info,
    list_models,
    select_model,
)
from switchboard.models.cost import TaskComplexity


class TestCatalog:
    def test_catalog_models(self):
        assert set(MODEL_CATALOG) == {"gpt-4o-nano", "gpt-4o-mini", "gpt-4o", "o4-mini"}
        assert len(list_models()) == 4

    def test_every_complexity_has_a_default(self):
        for level in TaskComplexity:
            assert DEFAULT_MODEL_SELECTION[level] in MODEL_CATALOG

    def test_unknown_model(self):
        with pytest.raises(UnknownModelError) as exc:
            get_model_info("gpt-99")
        assert str(exc.value) == "Unknown model: gpt-99"

    def test_unknown_model_is_key_error(self):
        with pytest.raises(KeyError):
            get_model_info("gpt-99")


class TestCalculateCost:
    def test_per_million_pricing(self):
        cost = calculate_cost("gpt-4o-mini", 1_000_000, 1_000_000)
        assert cost.input_cost == Decimal("0.80")
        assert cost.output_cost == Decimal("3.20")
        assert cost.total_cost == Decimal("4.00")
        assert cost.total_tokens == 2_000_000

    def test_zero_tokens_cost_nothing(self):
        assert calculate_cost("gpt-4o", 0, 0).total_cost == 0

    @pytest.mark.parametrize("model", sorted(MODEL_CATALOG))
    def test_linear_in_tokens(self, model):
        a = calculate_cost(model, 1234, 567)
        b = calculate_cost(model, 4321, 89)
        combined = calculate_cost(model, 1234 + 4321, 567 + 89)
        assert combined.total_cost == a.total_cost + b.total_cost
        assert combined.input_cost == a.input_cost + b.input_cost

    def test_unknown_model_raises(self):
        with pytest.raises(UnknownModelError):
            calculate_cost("mystery-model", 10, 10)

    def test_estimate_uses_fixed_workload(self):
        # 2000 input + 500 output tokens
        assert estimate_request_cost("gpt-4o-nano") == Decimal("0.0008")
        assert estimate_request_cost("gpt-4o") == Decimal("0.012")


class TestSelectModel:
    def test_default_mapping_without_ceiling(self):
        assert select_model(TaskComplexity.SIMPLE) == "gpt-4o-mini"
        assert select_model(TaskComplexity.MODERATE) == "gpt-4o-mini"
        assert select_model(TaskComplexity.COMPLEX) == "gpt-4o"
        assert select_model(TaskComplexity.CRITICAL) == "gpt-4o"

    def test_ceiling_picks_cheapest_recommended(self):
        assert select_model(TaskComplexity.SIMPLE, 0.05) == "gpt-4o-nano"
        assert select_model(TaskComplexity.MODERATE, 0.05) == "gpt-4o-mini"
        assert select_model(TaskComplexity.COMPLEX, 0.05) == "gpt-4o"
        assert select_model(TaskComplexity.CRITICAL, 0.05) == "gpt-4o"

    def test_ceiling_too_low_falls_back_to_default(self):
        assert select_model(TaskComplexity.SIMPLE, 0.0001) == "gpt-4o-mini"
        assert select_model(TaskComplexity.COMPLEX, 0.01) == "gpt-4o"

    @pytest.mark.parametrize("level", list(TaskComplexity))
    @pytest.mark.parametrize("ceiling", ["0.001", "0.005", "0.013", "0.02", "1"])
    def test_selection_fits_ceiling_when_possible(self, level, ceiling):
        limit = Decimal(ceiling)
        chosen = select_model(level, limit)
        fits = [m for m in MODEL_CATALOG.values() if level in m.recommended_for and estimate_request_cost(m.name) <= limit]
        if fits:
            assert estimate_request_cost(chosen) <= limit
            assert level in MODEL_CATALOG[chosen].recommended_for
        else:
            assert chosen == DEFAULT_MODEL_SELECTION[level]


class TestFormatCost:
    def test_tiny(self):
        assert format_cost(Decimal("0.00005")) == "$0.000050"

    def test_small(self):
        assert format_cost(Decimal("0.005")) == "$0.00500"

    def test_regular(self):
        assert format_cost(1.5) == "$1.5000"
