"""Tool data models."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, model_validator


class ToolResult(BaseModel):
    """Outcome of one tool execution: a result payload or an error, never both."""

    success: bool
    result: Any = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_tagged(self) -> "ToolResult":
        if self.success and self.error is not None:
            raise ValueError("successful ToolResult cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("failed ToolResult requires an error message")
        return self

    @classmethod
    def ok(cls, result: Any = None) -> "ToolResult":
        return cls(success=True, result=result)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error or "Unknown error occurred")

    def to_message_content(self) -> str:
        """Serialize for a tool-result message sent back to the model."""
        return json.dumps(self.model_dump(exclude_none=True), default=str)


ToolExecutor = Callable[[dict], Awaitable[ToolResult]]


def object_schema(properties: dict, required: Optional[list[str]] = None) -> dict:
    return {
        "type": "object",
        "properties": properties,
        "required": list(required or []),
    }


@dataclass(frozen=True)
class Tool:
    """A named capability the model can request.

    ``parameters`` is a JSON-Schema object (``type``/``properties``/``required``)
    and may nest objects, arrays and enums.
    """

    name: str
    description: str
    execute: ToolExecutor
    parameters: dict = field(default_factory=lambda: object_schema({}))

    def to_schema(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


class ToolCallRequest(BaseModel):
    """A tool call requested by the model. ``arguments`` is a JSON string."""

    id: str
    name: str
    arguments: str = "{}"


class ToolCallInfo(BaseModel):
    tool_name: str
    args: dict = {}
    result: Any = None
    success: bool = True
