"""Tools supplied by an external protocol peer (e.g. an MCP ``ClientSession``).

The session only needs ``list_tools()`` returning an object with ``.tools``
(each with ``name``, ``description``, ``inputSchema``) and
``call_tool(name, arguments)`` returning an object with ``content`` items and
an ``isError`` flag.
"""

from __future__ import annotations

import logging
from typing import Any

from ..models.tool import Tool, ToolResult, object_schema

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "mcp_"


def _content_text(result: Any) -> str:
    parts = []
    for item in getattr(result, "content", None) or []:
        text = getattr(item, "text", None)
        if text is None and isinstance(item, dict):
            text = item.get("text")
        if text:
            parts.append(text)
    return "\n".join(parts)


def wrap_external_tool(session: Any, spec: Any, prefix: str = DEFAULT_PREFIX) -> Tool:
    remote_name = spec.name

    async def execute(args: dict) -> ToolResult:
        result = await session.call_tool(remote_name, args)
        text = _content_text(result)
        if getattr(result, "isError", False):
            return ToolResult.fail(f"Error from external tool '{remote_name}': {text or 'no details'}")
        return ToolResult.ok(text)

    return Tool(
        name=f"{prefix}{remote_name}",
        description=getattr(spec, "description", None) or "",
        parameters=getattr(spec, "inputSchema", None) or object_schema({}),
        execute=execute,
    )


async def wrap_external_tools(session: Any, prefix: str = DEFAULT_PREFIX) -> list[Tool]:
    """List the peer's tools and wrap each one; names get ``prefix``."""
    listing = await session.list_tools()
    tools = [wrap_external_tool(session, spec, prefix) for spec in listing.tools]
    logger.info("Discovered %d external tool(s)", len(tools))
    return tools
