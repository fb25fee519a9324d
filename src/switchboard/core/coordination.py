"""Coordination tool: concurrent fan-out of tasks to several agents.

Each task runs as its own asyncio task and always resolves to a result
record, so one failure never cancels the others. The batch as a whole is
raced against a deadline; when the deadline wins, tasks still running are
cancelled and the call fails without partial results. Cancelling the caller
cancels every member task before the cancellation propagates.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from ..models.agent import AgentContext, Message
from ..models.tool import Tool, ToolResult, object_schema
from .agent_registry import AgentRegistry
from .errors import CoordinationTimeout

logger = logging.getLogger(__name__)

COORDINATION_TOOL_NAME = "coordinate_agents"
DEFAULT_TIMEOUT_MS = 60000


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


async def _run_one(agent_registry: AgentRegistry, agent_id: str, task: str) -> dict:
    start = time.perf_counter()
    agent = agent_registry.get(agent_id)
    if agent is None:
        return {
            "agentId": agent_id,
            "success": False,
            "error": f'Agent "{agent_id}" not found',
            "durationMs": _elapsed_ms(start),
        }

    context = AgentContext(
        messages=[Message.user(task)],
        metadata={
            "coordinated": True,
            "coordinated_at": datetime.now(timezone.utc).isoformat(),
        },
    )
    try:
        response = await agent.run(context)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.warning("Coordinated task for %s failed: %s", agent_id, e)
        return {
            "agentId": agent_id,
            "success": False,
            "error": str(e) or type(e).__name__,
            "durationMs": _elapsed_ms(start),
        }

    return {
        "agentId": agent_id,
        "success": True,
        "response": response.content,
        "durationMs": _elapsed_ms(start),
    }


def summarize_results(results: list[dict]) -> dict:
    successful = sum(1 for r in results if r["success"])
    return {
        "total": len(results),
        "successful": successful,
        "failed": len(results) - successful,
        "totalDuration": max((r["durationMs"] for r in results), default=0),
    }


async def coordinate(
    agent_registry: AgentRegistry,
    tasks: list[dict],
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> dict:
    """Run every ``{agentId, task}`` concurrently and aggregate the outcomes.

    Raises ``CoordinationTimeout`` if the batch does not finish in time.
    """
    logger.info("Coordinating %d agent task(s)", len(tasks))
    running = [
        asyncio.create_task(_run_one(agent_registry, item["agentId"], item["task"]))
        for item in tasks
    ]
    if not running:
        return {"results": [], "summary": summarize_results([])}

    try:
        done, pending = await asyncio.wait(running, timeout=timeout_ms / 1000)
    except asyncio.CancelledError:
        for task in running:
            task.cancel()
        await asyncio.gather(*running, return_exceptions=True)
        raise
    if pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        raise CoordinationTimeout(timeout_ms, len(pending))

    results = [task.result() for task in running]
    summary = summarize_results(results)
    logger.info(
        "Coordination complete: %d/%d successful in %dms",
        summary["successful"], summary["total"], summary["totalDuration"],
    )
    return {"results": results, "summary": summary}


def _validate_tasks(raw) -> list[dict]:
    if not isinstance(raw, list):
        raise ValueError("tasks must be an array of {agentId, task}")
    tasks = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or not item.get("agentId") or not item.get("task"):
            raise ValueError(f"tasks[{i}] must have agentId and task")
        tasks.append({"agentId": str(item["agentId"]), "task": str(item["task"])})
    return tasks


def create_coordination_tool(
    agent_registry: AgentRegistry,
    default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> Tool:
    """Build the ``coordinate_agents`` tool bound to an agent registry."""

    async def execute(args: dict) -> ToolResult:
        try:
            tasks = _validate_tasks(args.get("tasks"))
        except ValueError as e:
            return ToolResult.fail(str(e))

        timeout_ms = args.get("timeout") or default_timeout_ms
        try:
            return ToolResult.ok(await coordinate(agent_registry, tasks, int(timeout_ms)))
        except CoordinationTimeout as e:
            logger.warning("%s", e)
            return ToolResult.fail(str(e))

    return Tool(
        name=COORDINATION_TOOL_NAME,
        description=(
            "Coordinate multiple agents to work on tasks in parallel. Useful when you "
            "need multiple specialized agents to work simultaneously. Returns "
            "aggregated results from all agents."
        ),
        parameters=object_schema(
            {
                "tasks": {
                    "type": "array",
                    "description": "Array of tasks to delegate",
                    "items": {
                        "type": "object",
                        "description": "A coordination task for a specific agent",
                        "properties": {
                            "agentId": {"type": "string", "description": "Agent ID to delegate to"},
                            "task": {"type": "string", "description": "Task for this agent"},
                        },
                        "required": ["agentId", "task"],
                    },
                },
                "timeout": {
                    "type": "number",
                    "description": (
                        f"Optional: Timeout in milliseconds for all agents (default: {default_timeout_ms})"
                    ),
                },
            },
            required=["tasks"],
        ),
        execute=execute,
    )
