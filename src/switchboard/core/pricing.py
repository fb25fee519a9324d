"""Model catalog, cost-aware model selection and cost calculation.

Prices are per one million tokens and kept as ``Decimal`` so that costs are
exact and linear in token counts; float rounding never reorders candidates
in the selector.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..models.cost import CostInfo, ModelInfo, ModelPricing, TaskComplexity
from .errors import UnknownModelError

TOKENS_PER_UNIT = Decimal(1_000_000)

# Hypothetical workload used to price a model before real usage is known.
# It is an estimate only: an actual turn may cost more than the ceiling.
ESTIMATE_INPUT_TOKENS = 2000
ESTIMATE_OUTPUT_TOKENS = 500


def _model(
    name: str,
    input_cost: str,
    output_cost: str,
    cached_cost: str,
    recommended_for: list[TaskComplexity],
    description: str,
) -> ModelInfo:
    return ModelInfo(
        name=name,
        pricing=ModelPricing(
            input_cost_per_1m=Decimal(input_cost),
            output_cost_per_1m=Decimal(output_cost),
            cached_input_cost_per_1m=Decimal(cached_cost),
        ),
        context_window=128000,
        recommended_for=recommended_for,
        description=description,
    )


MODEL_CATALOG: dict[str, ModelInfo] = {
    m.name: m
    for m in (
        _model(
            "gpt-4o-nano", "0.20", "0.80", "0.05",
            [TaskComplexity.SIMPLE],
            "Fastest and cheapest model for simple tasks",
        ),
        _model(
            "gpt-4o-mini", "0.80", "3.20", "0.20",
            [TaskComplexity.SIMPLE, TaskComplexity.MODERATE],
            "Balance of capability and cost",
        ),
        _model(
            "gpt-4o", "3.00", "12.00", "0.75",
            [TaskComplexity.COMPLEX, TaskComplexity.CRITICAL],
            "Most capable model for complex reasoning",
        ),
        _model(
            "o4-mini", "4.00", "16.00", "1.00",
            [TaskComplexity.CRITICAL],
            "Reasoning model for critical tasks",
        ),
    )
}

DEFAULT_MODEL_SELECTION: dict[TaskComplexity, str] = {
    TaskComplexity.SIMPLE: "gpt-4o-mini",
    TaskComplexity.MODERATE: "gpt-4o-mini",
    TaskComplexity.COMPLEX: "gpt-4o",
    TaskComplexity.CRITICAL: "gpt-4o",
}


def get_model_info(model: str) -> ModelInfo:
    info = MODEL_CATALOG.get(model)
    if info is None:
        raise UnknownModelError(model)
    return info


def list_models() -> list[ModelInfo]:
    return list(MODEL_CATALOG.values())


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> CostInfo:
    """Compute the cost of a completion from its token usage."""
    pricing = get_model_info(model).pricing

    input_cost = Decimal(input_tokens) / TOKENS_PER_UNIT * pricing.input_cost_per_1m
    output_cost = Decimal(output_tokens) / TOKENS_PER_UNIT * pricing.output_cost_per_1m

    return CostInfo(
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=input_tokens + output_tokens,
        input_cost=input_cost,
        output_cost=output_cost,
        total_cost=input_cost + output_cost,
    )


def estimate_request_cost(model: str) -> Decimal:
    return calculate_cost(model, ESTIMATE_INPUT_TOKENS, ESTIMATE_OUTPUT_TOKENS).total_cost


def select_model(
    complexity: TaskComplexity,
    max_cost_per_request: Optional[float | Decimal] = None,
) -> str:
    """Pick a model for ``complexity``, optionally under a cost ceiling.

    With a ceiling, the cheapest (by input price) model recommended for the
    complexity whose estimated cost fits is chosen; if none fits, the default
    mapping is used.
    """
    selected = DEFAULT_MODEL_SELECTION[complexity]

    if max_cost_per_request is None:
        return selected

    ceiling = Decimal(str(max_cost_per_request))
    candidates = sorted(
        (m for m in MODEL_CATALOG.values() if complexity in m.recommended_for),
        key=lambda m: m.pricing.input_cost_per_1m,
    )
    for info in candidates:
        if estimate_request_cost(info.name) <= ceiling:
            return info.name

    return selected


def format_cost(cost: Decimal | float) -> str:
    value = Decimal(str(cost))
    if value < Decimal("0.0001"):
        return f"${value:.6f}"
    if value < Decimal("0.01"):
        return f"${value:.5f}"
    return f"${value:.4f}"
