"""Knowledge-base search tool.

The retrieval pipeline (parsing, chunking, embeddings, vector search) lives
outside this package; the engine only sees it through this one tool.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models.tool import Tool, ToolResult, object_schema

NO_RESULTS = "No relevant information found in the knowledge base."


@runtime_checkable
class KnowledgeBase(Protocol):
    async def search(self, query: str, limit: int) -> list[dict]:
        """Return up to ``limit`` hits shaped ``{"content": str, "source": str}``."""
        ...


def format_hits(hits: list[dict]) -> str:
    blocks = [
        f"[Result {i}] (Source: {hit.get('source') or 'Unknown'})\n{hit.get('content', '')}"
        for i, hit in enumerate(hits, start=1)
    ]
    return "Found the following relevant information:\n\n" + "\n\n".join(blocks)


def create_knowledge_tool(knowledge_base: KnowledgeBase, limit: int = 3) -> Tool:
    async def execute(args: dict) -> ToolResult:
        query = (args.get("query") or "").strip()
        if not query:
            return ToolResult.fail("query is required")
        hits = await knowledge_base.search(query, limit)
        if not hits:
            return ToolResult.ok(NO_RESULTS)
        return ToolResult.ok(format_hits(hits))

    return Tool(
        name="search_knowledgebase",
        description=(
            "Search the internal knowledge base for information. Use this when asked "
            "about uploaded documents or internal details."
        ),
        parameters=object_schema(
            {"query": {"type": "string", "description": "The search query to find relevant information"}},
            required=["query"],
        ),
        execute=execute,
    )
