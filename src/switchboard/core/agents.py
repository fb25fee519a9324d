"""Agent definitions and factories.

Defines the built-in agents: a general assistant, a researcher, a planner
and an orchestrator that delegates to the others.
"""

from __future__ import annotations

from typing import Optional

from ..models.agent import AgentConfig, AgentRole, ModelStrategy
from ..models.cost import TaskComplexity
from ..models.tool import Tool
from ..providers.base import BaseProvider
from .agent import Agent
from .config import agent_overrides
from .tool_registry import ToolRegistry

DEFAULT_AGENT_ID = "switchboard-default"
RESEARCHER_AGENT_ID = "switchboard-researcher"
PLANNER_AGENT_ID = "switchboard-planner"
ORCHESTRATOR_AGENT_ID = "switchboard-orchestrator"

DEFAULT_PROMPT = """You are Switchboard, a helpful AI assistant with access to tools.

## Guidelines
1. Be helpful, clear, and concise
2. When you use a tool, briefly explain what you're doing
3. For any calculation, always use the calculator tool - never do math in your head
4. If asked about the time or date, always use the time tool
5. If a tool fails, explain the error to the user

Use markdown formatting when helpful."""

RESEARCHER_PROMPT = """You are a Research Agent specialized in gathering, analyzing and synthesizing information.

Work iteratively: reason about what you need, use your tools to gather it,
analyze what you found, refine, then synthesize.

## Guidelines
- Cross-reference information across sources and note discrepancies
- Use the calculator for any numbers you need to derive
- Always cite the sources (URLs, documents) you used

## Response Format
1. **Summary**: Brief overview of findings
2. **Key Points**: Main insights
3. **Sources**: Where the information came from"""

PLANNER_PROMPT = """You are a Planning Agent with expertise in strategic thinking and task decomposition.

## Methodology
1. Validate the goal with validate_goal before planning
2. Break it down with decompose_task
3. Identify dependencies, prerequisites and blockers
4. Give realistic time estimates and define success for each step

## Response Format
1. **Goal Validation**
2. **Prerequisites**
3. **Step-by-Step Plan**
4. **Dependencies**
5. **Timeline**
6. **Risks & Mitigations**"""

ORCHESTRATOR_PROMPT = """You are an Orchestrator Agent that coordinates other AI agents to solve complex tasks.

Analyze the request, decompose it into sub-tasks, route each to the right
agent, then synthesize the results into one answer.

## Available Agents
- switchboard-researcher: information gathering, fact-finding, sources
- switchboard-planner: goal decomposition, feasibility, dependency mapping

## Tools
- delegate_to_agent: send one task to a specialized agent
- coordinate_agents: run several agents in parallel

## Guidelines
- Give agents clear, focused tasks
- Do not delegate what you can answer directly
- If an agent fails, explain it or try another approach
- Label what each agent contributed, then give your synthesis"""

# name, role, prompt, tool categories, extra tool names, complexity hint, temperature.
# A tools value of None binds every registered tool.
AGENT_DEFS: dict[str, dict] = {
    DEFAULT_AGENT_ID: {
        "name": "Switchboard Assistant",
        "role": AgentRole.CONVERSATIONAL,
        "prompt": DEFAULT_PROMPT,
        "categories": None,
        "tools": None,
        "complexity": None,
        "temperature": 0.7,
    },
    RESEARCHER_AGENT_ID: {
        "name": "Switchboard Researcher",
        "role": AgentRole.RESEARCHER,
        "prompt": RESEARCHER_PROMPT,
        "categories": ["research", "knowledge"],
        "tools": ["http_fetch", "calculator", "get_current_time"],
        "complexity": TaskComplexity.MODERATE,
        "temperature": 0.5,
    },
    PLANNER_AGENT_ID: {
        "name": "Switchboard Planner",
        "role": AgentRole.AUTOMATION,
        "prompt": PLANNER_PROMPT,
        "categories": ["planning"],
        "tools": ["calculator", "get_current_time"],
        "complexity": TaskComplexity.COMPLEX,
        "temperature": 0.4,
    },
    ORCHESTRATOR_AGENT_ID: {
        "name": "Switchboard Orchestrator",
        "role": AgentRole.ORCHESTRATOR,
        "prompt": ORCHESTRATOR_PROMPT,
        "categories": ["orchestration"],
        "tools": [],
        "complexity": None,
        "temperature": 0.6,
    },
}

ALL_AGENT_IDS = list(AGENT_DEFS.keys())


def resolve_agent_tools(agent_def: dict, tool_registry: ToolRegistry) -> list[Tool]:
    if agent_def["categories"] is None and agent_def["tools"] is None:
        return tool_registry.list()

    tools: list[Tool] = []
    seen: set[str] = set()
    for category in agent_def["categories"] or []:
        tools.extend(tool_registry.list_by_category(category))
    tools.extend(tool_registry.list_by_names(agent_def["tools"] or []))

    unique = []
    for tool in tools:
        if tool.name not in seen:
            seen.add(tool.name)
            unique.append(tool)
    return unique


def build_agent_config(
    agent_id: str,
    tool_registry: ToolRegistry,
    overrides: Optional[dict] = None,
) -> AgentConfig:
    agent_def = AGENT_DEFS[agent_id]
    overrides = overrides or {}
    complexity = overrides.get("complexity", agent_def["complexity"])
    return AgentConfig(
        id=agent_id,
        name=agent_def["name"],
        role=agent_def["role"],
        system_prompt=overrides.get("system_prompt", agent_def["prompt"]),
        tools=resolve_agent_tools(agent_def, tool_registry),
        model=overrides.get("model"),
        complexity=TaskComplexity(complexity) if complexity else None,
        model_strategy=ModelStrategy(overrides.get("model_strategy", ModelStrategy.AUTO)),
        temperature=overrides.get("temperature", agent_def["temperature"]),
    )


def create_agent(
    agent_id: str,
    config: dict,
    provider: BaseProvider,
    tool_registry: ToolRegistry,
) -> Agent:
    """Build one of the built-in agents with config overrides applied."""
    runtime = config.get("runtime") or {}
    return Agent(
        build_agent_config(agent_id, tool_registry, agent_overrides(config, agent_id)),
        provider,
        tool_registry,
        max_iterations=runtime.get("max_iterations", 10),
        default_model=runtime.get("default_model", "gpt-4o-mini"),
        cost_ceiling=runtime.get("cost_ceiling", 0.05),
    )
