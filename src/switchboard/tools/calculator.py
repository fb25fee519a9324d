"""Calculator tool."""

from __future__ import annotations

import math
from typing import Optional

from ..models.tool import Tool, ToolResult, object_schema

OPERATIONS = ("add", "subtract", "multiply", "divide", "power", "sqrt", "percentage")


def calculate(operation: str, a: float, b: Optional[float] = None) -> float:
    if operation == "add":
        return a + (b if b is not None else 0)
    if operation == "subtract":
        return a - (b if b is not None else 0)
    if operation == "multiply":
        return a * (b if b is not None else 1)
    if operation == "divide":
        if b == 0:
            raise ValueError("Cannot divide by zero")
        return a / (b if b is not None else 1)
    if operation == "power":
        return a ** (b if b is not None else 2)
    if operation == "sqrt":
        if a < 0:
            raise ValueError("Cannot take square root of negative number")
        return math.sqrt(a)
    if operation == "percentage":
        return a / 100 * b if b is not None else a / 100
    raise ValueError(f"Unknown operation: {operation}")


def _number(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{name}' must be a number")
    return value


async def _execute(args: dict) -> ToolResult:
    operation = args.get("operation")
    try:
        a = _number(args.get("a"), "a")
        b = _number(args["b"], "b") if args.get("b") is not None else None
        output = calculate(operation, a, b)
    except (ValueError, OverflowError) as e:
        return ToolResult.fail(str(e))

    if isinstance(output, float) and output.is_integer() and not isinstance(a, float):
        output = int(output)
    shown = f"{operation}({a}{f', {b}' if b is not None else ''}) = {output}"
    return ToolResult.ok({
        "operation": operation,
        "input": {"a": a, "b": b},
        "output": output,
        "formatted": shown,
    })


calculator_tool = Tool(
    name="calculator",
    description=(
        "Perform mathematical calculations. Use this tool whenever you need to "
        "add, subtract, multiply or divide numbers, calculate powers, square roots "
        "or percentages. Do not attempt mental math; always use this calculator."
    ),
    parameters=object_schema(
        {
            "operation": {
                "type": "string",
                "description": "The mathematical operation to perform",
                "enum": list(OPERATIONS),
            },
            "a": {"type": "number", "description": "The first number"},
            "b": {"type": "number", "description": "The second number (not required for sqrt)"},
        },
        required=["operation", "a"],
    ),
    execute=_execute,
)
