"""Built-in tools."""

from __future__ import annotations

from ..models.tool import Tool
from ..providers.base import BaseProvider
from .calculator import calculator_tool
from .clock import time_tool
from .external import wrap_external_tools
from .http_fetch import create_http_fetch_tool
from .planner import create_planning_tools
from .summarize import create_summarize_tool


def builtin_tools(config: dict, provider: BaseProvider) -> list[Tool]:
    """Built-in tools configured from the ``tools`` section."""
    fetch_cfg = (config.get("tools") or {}).get("http_fetch") or {}
    default_model = (config.get("runtime") or {}).get("default_model", "gpt-4o-mini")
    return [
        calculator_tool,
        time_tool,
        create_http_fetch_tool(
            timeout_seconds=fetch_cfg.get("timeout_seconds", 20),
            max_chars=fetch_cfg.get("max_chars", 8000),
        ),
        create_summarize_tool(provider, model=default_model),
        *create_planning_tools(provider, model=default_model),
    ]


__all__ = ["builtin_tools", "calculator_tool", "time_tool", "wrap_external_tools"]
