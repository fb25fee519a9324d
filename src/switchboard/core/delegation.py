"""Delegation tool: lets one agent hand a sub-task to another.

Cycle detection uses a set of in-flight delegation keys
(``<target-agent-id>:<task prefix>``). A key present in the set means that
exact delegation is currently running, so asking for it again is a cycle.
Keys are released on every exit path.
"""

from __future__ import annotations

import contextvars
import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from ..models.agent import AgentContext, Message
from ..models.tool import Tool, ToolResult, object_schema
from .agent_registry import AgentRegistry
from .errors import AgentNotFoundError, CircularDelegationError, SwitchboardError

logger = logging.getLogger(__name__)

DELEGATION_TOOL_NAME = "delegate_to_agent"
DEFAULT_KEY_LENGTH = 50

# Keys of the delegations enclosing the current task, outermost first
delegation_chain: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar(
    "delegation_chain", default=()
)


class DelegationTracker:
    """Set of in-flight delegation keys shared by every delegation in a runtime."""

    def __init__(self, key_length: int = DEFAULT_KEY_LENGTH):
        self.key_length = key_length
        self._active: set[str] = set()
        self._lock = threading.Lock()

    def key_for(self, agent_id: str, task: str) -> str:
        return f"{agent_id}:{task[: self.key_length]}"

    def is_active(self, key: str) -> bool:
        with self._lock:
            return key in self._active

    def active(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._active)

    def __len__(self) -> int:
        with self._lock:
            return len(self._active)

    @contextmanager
    def track(self, key: str) -> Iterator[tuple[str, ...]]:
        """Hold ``key`` for the duration of the block.

        Check-and-insert is atomic; raises ``CircularDelegationError`` when the
        key is already held. Yields the delegation chain including ``key``.
        """
        with self._lock:
            if key in self._active:
                raise CircularDelegationError(key)
            self._active.add(key)

        try:
            chain = delegation_chain.get() + (key,)
            token = delegation_chain.set(chain)
            try:
                yield chain
            finally:
                delegation_chain.reset(token)
        finally:
            with self._lock:
                self._active.discard(key)


def build_task_message(task: str, context: Optional[str] = None) -> str:
    if context:
        return f"{task}\n\nAdditional context: {context}"
    return task


def create_delegation_tool(
    agent_registry: AgentRegistry,
    tracker: DelegationTracker,
    agent_ids: Optional[list[str]] = None,
) -> Tool:
    """Build the ``delegate_to_agent`` tool bound to a registry and tracker."""

    async def execute(args: dict) -> ToolResult:
        agent_id = args.get("agentId")
        task = args.get("task")
        extra_context = args.get("context")

        if not isinstance(agent_id, str) or not agent_id:
            return ToolResult.fail("agentId is required")
        if not isinstance(task, str) or not task:
            return ToolResult.fail("task is required")

        key = tracker.key_for(agent_id, task)
        if tracker.is_active(key):
            logger.warning("Circular delegation rejected: %s", key)
            return ToolResult.fail(str(CircularDelegationError(key)))

        agent = agent_registry.get(agent_id)
        if agent is None:
            return ToolResult.fail(str(AgentNotFoundError(agent_id, agent_registry.ids())))

        logger.info("Delegating to agent %s: %s", agent_id, task[:80])
        try:
            with tracker.track(key) as chain:
                context = AgentContext(
                    messages=[Message.user(build_task_message(task, extra_context))],
                    metadata={
                        "delegated": True,
                        "delegation_key": key,
                        "delegation_chain": list(chain),
                        "delegated_at": datetime.now(timezone.utc).isoformat(),
                    },
                )
                response = await agent.run(context)
        except CircularDelegationError as e:
            logger.warning("Circular delegation rejected: %s", key)
            return ToolResult.fail(str(e))
        except SwitchboardError as e:
            logger.warning("Delegation to %s failed: %s", agent_id, e)
            return ToolResult.fail(str(e))

        logger.info("Delegation to %s complete (%d chars)", agent_id, len(response.content))
        return ToolResult.ok({
            "agentId": agent_id,
            "task": task,
            "response": response.content,
            "toolsUsed": [call.tool_name for call in response.tool_calls or []],
            "usage": response.usage.model_dump() if response.usage else None,
        })

    agent_id_schema: dict = {
        "type": "string",
        "description": "The ID of the agent to delegate to",
    }
    if agent_ids:
        agent_id_schema["enum"] = list(agent_ids)

    listing = ", ".join(f'"{a}"' for a in agent_ids) if agent_ids else "see the agent registry"
    return Tool(
        name=DELEGATION_TOOL_NAME,
        description=(
            "Delegate a task to another specialized agent. Use this when a task "
            "requires specific expertise (e.g., research, planning). "
            f"Available agents: {listing}. Returns the agent's response."
        ),
        parameters=object_schema(
            {
                "agentId": agent_id_schema,
                "task": {
                    "type": "string",
                    "description": "The task description to give to the agent",
                },
                "context": {
                    "type": "string",
                    "description": "Optional: Additional context for the task",
                },
            },
            required=["agentId", "task"],
        ),
        execute=execute,
    )
