"""Model-backed summarization of long text into a summary and key points."""

from __future__ import annotations

import logging
from typing import Optional

from ..models.tool import Tool, ToolResult, object_schema
from ..providers.base import BaseProvider
from .planner import _ask_json

logger = logging.getLogger(__name__)

SUMMARIZER_SYSTEM = (
    "You are an expert summarizer. Extract the most important information "
    "concisely and accurately. Respond with JSON only."
)
MAX_INPUT_CHARS = 8000


def build_summary_prompt(text: str, focus: Optional[str], max_points: int) -> str:
    if len(text) > MAX_INPUT_CHARS:
        text = text[:MAX_INPUT_CHARS] + "..."
    prefix = f"Focus particularly on: {focus}\n\n" if focus else ""
    return (
        f"{prefix}Summarize the following text.\n\n"
        "Provide:\n"
        "1. A concise 2-3 sentence summary\n"
        f"2. Up to {max_points} key points or important facts\n\n"
        "Format as JSON:\n"
        '{"summary": "brief overview here", "keyPoints": ["point 1", "point 2"]}\n\n'
        f"Text to summarize:\n{text}"
    )


def create_summarize_tool(provider: BaseProvider, model: str = "gpt-4o-mini") -> Tool:
    """Build the ``summarize`` tool bound to ``provider``."""

    async def execute(args: dict) -> ToolResult:
        text = args.get("text")
        if not isinstance(text, str) or not text.strip():
            return ToolResult.fail("text is required")
        max_points = int(args.get("maxBulletPoints") or 5)

        logger.debug("Summarizing %d characters", len(text))
        prompt = build_summary_prompt(text, args.get("focus"), max_points)
        try:
            parsed = await _ask_json(provider, model, SUMMARIZER_SYSTEM, prompt, 0.3)
        except (RuntimeError, ValueError) as e:
            return ToolResult.fail(str(e))

        summary = str(parsed.get("summary") or "")
        key_points = list(parsed.get("keyPoints") or [])[:max_points]
        return ToolResult.ok({
            "summary": summary,
            "keyPoints": key_points,
            "originalLength": len(text),
            "compressionRatio": round(len(text) / max(len(summary), 1), 1),
        })

    return Tool(
        name="summarize",
        description=(
            "Summarize long text content into key points and a concise summary. Useful "
            "for condensing research findings, articles or fetched documents."
        ),
        parameters=object_schema(
            {
                "text": {"type": "string", "description": "The text to summarize"},
                "focus": {
                    "type": "string",
                    "description": 'Optional: What aspect to focus on (e.g. "key findings")',
                },
                "maxBulletPoints": {
                    "type": "number",
                    "description": "Maximum number of key points to extract (default: 5)",
                },
            },
            required=["text"],
        ),
        execute=execute,
    )
