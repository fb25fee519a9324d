"""Planning tools backed by a single model completion.

``decompose_task`` turns a goal into ordered steps with dependencies and
``validate_goal`` produces a feasibility assessment. Both ask the model for
a JSON object and hand the parsed object back to the calling agent.
"""

from __future__ import annotations

import json
from typing import Optional

from ..models.agent import Message
from ..models.tool import Tool, ToolResult, object_schema
from ..providers.base import BaseProvider

PLANNER_SYSTEM = (
    "You are an expert project planner. Break down complex goals into clear, "
    "actionable steps with proper sequencing and dependencies. Respond with JSON only."
)
VALIDATOR_SYSTEM = (
    "You are an expert analyst who evaluates the feasibility of goals and projects. "
    "Provide realistic, thoughtful assessments. Respond with JSON only."
)


def _extract_json(content: Optional[str]) -> dict:
    if not content:
        raise ValueError("Empty response from planning model")
    text = content.strip()
    # Outermost braces, so fenced or chatty output still parses
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end == -1:
        raise ValueError("Planning model did not return a JSON object")
    parsed = json.loads(text[start:end + 1])
    if not isinstance(parsed, dict):
        raise ValueError("Planning model did not return a JSON object")
    return parsed


def build_decomposition_prompt(goal: str, context: Optional[str], max_steps: int) -> str:
    prefix = f"Additional context: {context}\n\n" if context else ""
    return (
        f"{prefix}Break down the following goal into actionable steps.\n\n"
        f"Goal: {goal}\n\n"
        "Create a step-by-step plan with:\n"
        f"1. Steps ordered logically (max {max_steps} steps)\n"
        "2. Dependencies (which steps must be completed before this one)\n"
        "3. Complexity estimate (low/medium/high)\n"
        "4. Clear success criteria for each step\n"
        "5. Overall estimated timeline\n\n"
        "Format as JSON:\n"
        '{"goal": "restated goal", "steps": [{"step": 1, "description": "...", '
        '"dependencies": [], "estimatedComplexity": "low|medium|high", '
        '"successCriteria": "..."}], "estimatedDuration": "..."}'
    )


def build_validation_prompt(
    goal: str, resources: Optional[str], constraints: Optional[str]
) -> str:
    lines = ["Analyze the feasibility of the following goal.", "", f"Goal: {goal}"]
    if resources:
        lines.append(f"Available resources: {resources}")
    if constraints:
        lines.append(f"Constraints: {constraints}")
    lines += [
        "",
        "Format as JSON:",
        '{"goal": "restated goal", "isFeasible": true, "confidence": "low|medium|high", '
        '"reasoning": "...", "prerequisites": [], "potentialBlockers": [], '
        '"alternativeApproaches": [], "recommendation": "..."}',
    ]
    return "\n".join(lines)


async def _ask_json(
    provider: BaseProvider, model: str, system: str, prompt: str, temperature: float
) -> dict:
    result = await provider.complete_with_retry(
        [Message.system(system), Message.user(prompt)], [], model, temperature
    )
    if not result.success:
        raise RuntimeError(result.error or "Planning model call failed")
    return _extract_json(result.content)


def create_planning_tools(provider: BaseProvider, model: str = "gpt-4o-mini") -> list[Tool]:
    """Build ``decompose_task`` and ``validate_goal`` bound to ``provider``."""

    async def decompose(args: dict) -> ToolResult:
        goal = args.get("goal")
        if not goal:
            return ToolResult.fail("goal is required")
        prompt = build_decomposition_prompt(goal, args.get("context"), int(args.get("maxSteps") or 10))
        try:
            plan = await _ask_json(provider, model, PLANNER_SYSTEM, prompt, 0.4)
        except (RuntimeError, ValueError) as e:
            return ToolResult.fail(str(e))
        plan["totalSteps"] = len(plan.get("steps") or [])
        return ToolResult.ok(plan)

    async def validate(args: dict) -> ToolResult:
        goal = args.get("goal")
        if not goal:
            return ToolResult.fail("goal is required")
        prompt = build_validation_prompt(goal, args.get("availableResources"), args.get("constraints"))
        try:
            return ToolResult.ok(await _ask_json(provider, model, VALIDATOR_SYSTEM, prompt, 0.3))
        except (RuntimeError, ValueError) as e:
            return ToolResult.fail(str(e))

    return [
        Tool(
            name="decompose_task",
            description=(
                "Break down a complex goal or task into ordered, actionable steps with "
                "dependencies. Returns a structured plan with success criteria for each step."
            ),
            parameters=object_schema(
                {
                    "goal": {"type": "string", "description": "The high-level goal or task to decompose"},
                    "context": {"type": "string", "description": "Optional: Additional context or constraints"},
                    "maxSteps": {"type": "number", "description": "Maximum number of steps to generate (default: 10)"},
                },
                required=["goal"],
            ),
            execute=decompose,
        ),
        Tool(
            name="validate_goal",
            description=(
                "Validate whether a goal is feasible and identify missing prerequisites, "
                "potential blockers or alternative approaches."
            ),
            parameters=object_schema(
                {
                    "goal": {"type": "string", "description": "The goal to validate"},
                    "availableResources": {
                        "type": "string",
                        "description": "Optional: What tools, skills, or resources are available",
                    },
                    "constraints": {
                        "type": "string",
                        "description": "Optional: Any constraints (time, budget, technical, etc.)",
                    },
                },
                required=["goal"],
            ),
            execute=validate,
        ),
    ]
