"""Shared fixtures for Switchboard tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from switchboard.core.agent import Agent
from switchboard.core.agent_registry import AgentRegistry
from switchboard.core.delegation import DelegationTracker
from switchboard.core.tool_registry import ToolRegistry
from switchboard.models.agent import AgentConfig, AgentRole, ModelStrategy
from switchboard.models.cost import Usage
from switchboard.models.provider import CompletionResult
from switchboard.models.tool import ToolCallRequest
from switchboard.providers.base import BaseProvider
from switchboard.tools.calculator import calculator_tool
from switchboard.tools.clock import time_tool


class ScriptedProvider(BaseProvider):
    """Replays canned completions and records every request.

    ``scripts`` maps a system prompt to its own queue so several agents can
    share one provider. Queue items may be async callables taking the
    message list, for tests that need to block or inspect mid-run.
    """

    name = "scripted"

    def __init__(self, responses=(), scripts=None):
        super().__init__({}, {"retry_attempts": 1, "retry_delay_seconds": 0})
        self.responses = list(responses)
        self.scripts = {prompt: list(queue) for prompt, queue in (scripts or {}).items()}
        self.calls: list[dict] = []

    async def complete(self, messages, tools, model, temperature):
        self.calls.append({
            "messages": [m.model_copy() for m in messages],
            "tools": tools,
            "model": model,
            "temperature": temperature,
        })
        system = messages[0].content if messages else None
        queue = self.scripts.get(system, self.responses)
        if not queue:
            return CompletionResult(success=False, error="script exhausted")
        item = queue.pop(0)
        if callable(item):
            item = await item(messages)
        return item


def text_reply(content: str, prompt_tokens: int = 10, completion_tokens: int = 5) -> CompletionResult:
    return CompletionResult(
        success=True,
        content=content,
        usage=Usage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        ),
    )


def tool_reply(*calls, prompt_tokens: int = 10, completion_tokens: int = 5) -> CompletionResult:
    """Completion requesting ``calls``, each a ``(name, args)`` pair."""
    return CompletionResult(
        success=True,
        content=None,
        tool_calls=[
            ToolCallRequest(
                id=f"call_{i}",
                name=name,
                arguments=args if isinstance(args, str) else json.dumps(args),
            )
            for i, (name, args) in enumerate(calls, start=1)
        ],
        usage=Usage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        ),
    )


def make_agent(
    agent_id: str,
    provider: BaseProvider,
    tool_registry: ToolRegistry,
    tool_names=(),
    role: AgentRole = AgentRole.CONVERSATIONAL,
    **config,
) -> Agent:
    """Agent whose system prompt is ``agent:<id>`` so scripts can target it."""
    agent_config = AgentConfig(
        id=agent_id,
        name=agent_id.title(),
        role=role,
        system_prompt=f"agent:{agent_id}",
        tools=tool_registry.list_by_names(tool_names),
        model_strategy=config.pop("model_strategy", ModelStrategy.FIXED),
        model=config.pop("model", "gpt-4o-mini"),
        **config,
    )
    return Agent(agent_config, provider, tool_registry)


@pytest.fixture
def tool_registry() -> ToolRegistry:
    return ToolRegistry([calculator_tool, time_tool])


@pytest.fixture
def agent_registry() -> AgentRegistry:
    return AgentRegistry()


@pytest.fixture
def tracker() -> DelegationTracker:
    return DelegationTracker()


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a minimal project directory for config tests."""
    project = tmp_path / "test-project"
    project.mkdir()
    return project


@pytest.fixture
def initialized_project(tmp_project: Path) -> Path:
    """Create a project with .switchboard/config.yaml."""
    sb_dir = tmp_project / ".switchboard"
    sb_dir.mkdir()
    (sb_dir / "config.yaml").write_text(
        "runtime:\n"
        "  max_iterations: 4\n"
        "  coordination_timeout_ms: 1500\n"
        "\n"
        "agents:\n"
        "  switchboard-default:\n"
        "    temperature: 0.2\n"
        "\n"
        "ai:\n"
        "  provider: anthropic\n",
        encoding="utf-8",
    )
    return tmp_project
