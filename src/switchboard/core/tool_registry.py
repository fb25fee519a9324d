"""Tool registry: name-keyed lookup and structured execution."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Iterable, Optional

from ..models.tool import Tool, ToolResult
from ..utils.sanitize import sanitize_error

logger = logging.getLogger(__name__)

TOOL_CATEGORIES: dict[str, list[str]] = {
    "math": ["calculator"],
    "time": ["get_current_time"],
    "web": ["web_search", "http_fetch", "web_browse"],
    "filesystem": ["read_file", "write_file", "list_directory"],
    "weather": ["get_weather"],
    "knowledge": ["search_knowledgebase"],
    "research": ["web_search", "web_browse", "summarize"],
    "planning": ["decompose_task", "validate_goal"],
    "orchestration": ["delegate_to_agent", "coordinate_agents"],
}


class ToolRegistry:
    """Name-keyed table of tools.

    Registration is expected at startup but may race with lookups; the last
    writer wins and overwrites are logged.
    """

    def __init__(self, tools: Iterable[Tool] = ()):
        self._tools: dict[str, Tool] = {}
        self._lock = threading.Lock()
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        with self._lock:
            if tool.name in self._tools:
                logger.warning('Tool "%s" is already registered. Overwriting.', tool.name)
            self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def list(self) -> list[Tool]:
        with self._lock:
            return list(self._tools.values())

    def names(self) -> list[str]:
        with self._lock:
            return list(self._tools)

    def list_by_names(self, names: Iterable[str]) -> list[Tool]:
        """Tools for ``names`` in request order; unknown names are dropped."""
        found = []
        for name in names:
            tool = self._tools.get(name)
            if tool is not None:
                found.append(tool)
        return found

    def list_by_category(self, category: str) -> list[Tool]:
        return self.list_by_names(TOOL_CATEGORIES.get(category, []))

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    async def execute(self, name: str, args: Optional[dict] = None) -> ToolResult:
        """Run a tool by name. Never raises; failures come back as results."""
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult.fail(f'Tool "{name}" not found')

        args = args or {}
        logger.info("Executing tool: %s args=%s", name, args)
        start = time.perf_counter()
        try:
            result = await tool.execute(args)
            if isinstance(result, dict) and "success" in result:
                result = ToolResult.model_validate(result)
            elif not isinstance(result, ToolResult):
                result = ToolResult.ok(result)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception("Tool %s raised", name)
            result = ToolResult.fail(sanitize_error(f"{type(e).__name__}: {e}"))

        duration_ms = round((time.perf_counter() - start) * 1000)
        logger.info("Tool %s finished in %dms success=%s", name, duration_ms, result.success)
        return result
