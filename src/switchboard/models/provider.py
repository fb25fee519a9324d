"""AI provider data models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .cost import Usage
from .tool import ToolCallRequest


class CompletionResult(BaseModel):
    success: bool
    content: Optional[str] = None
    tool_calls: list[ToolCallRequest] = []
    usage: Optional[Usage] = None
    error: Optional[str] = None
