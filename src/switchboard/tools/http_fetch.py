"""HTTP fetch tool."""

from __future__ import annotations

from urllib.parse import urlparse

import httpx

from ..models.tool import Tool, ToolResult, object_schema
from ..utils.sanitize import truncate


def create_http_fetch_tool(timeout_seconds: float = 20, max_chars: int = 8000) -> Tool:
    async def execute(args: dict) -> ToolResult:
        url = args.get("url") or ""
        if urlparse(url).scheme not in ("http", "https"):
            return ToolResult.fail(f"Only http(s) URLs are supported: {url!r}")

        headers = args.get("headers") or {}
        try:
            async with httpx.AsyncClient(timeout=timeout_seconds, follow_redirects=True) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            return ToolResult.fail(f"Request failed: {e}")

        if response.status_code >= 400:
            return ToolResult.fail(f"HTTP {response.status_code} fetching {url}")

        return ToolResult.ok({
            "url": str(response.url),
            "status": response.status_code,
            "contentType": response.headers.get("content-type", ""),
            "body": truncate(response.text, max_chars),
        })

    return Tool(
        name="http_fetch",
        description=(
            "Fetch the contents of a URL over HTTP(S) with a GET request. Returns the "
            "status code, content type and (truncated) response body."
        ),
        parameters=object_schema(
            {
                "url": {"type": "string", "description": "The http(s) URL to fetch"},
                "headers": {
                    "type": "object",
                    "description": "Optional request headers",
                    "additionalProperties": True,
                },
            },
            required=["url"],
        ),
        execute=execute,
    )
