"""Runtime assembly: registries, tracker, tools and agents wired together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..models.agent import AgentContext, AgentResponse, Message
from ..models.tool import Tool
from ..providers.base import BaseProvider
from ..tools import builtin_tools
from ..tools.knowledge import KnowledgeBase, create_knowledge_tool
from .agent_registry import AgentRegistry
from .agents import ALL_AGENT_IDS, create_agent
from .coordination import create_coordination_tool
from .delegation import DelegationTracker, create_delegation_tool
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    config: dict
    provider: BaseProvider
    tools: ToolRegistry
    agents: AgentRegistry
    tracker: DelegationTracker

    async def run(
        self,
        agent_id: str,
        message: str,
        metadata: Optional[dict] = None,
        history: Optional[list[Message]] = None,
    ) -> AgentResponse:
        agent = self.agents.require(agent_id)
        context = AgentContext(
            messages=[*(history or []), Message.user(message)],
            metadata=metadata or {},
        )
        return await agent.run(context)


def build_runtime(
    config: dict,
    provider: BaseProvider,
    knowledge_base: Optional[KnowledgeBase] = None,
    extra_tools: Iterable[Tool] = (),
    agent_ids: Optional[list[str]] = None,
) -> Runtime:
    """Construct registries and register tools, then agents.

    Tools are registered before agents because each agent binds its tool
    subset at construction time. Tools served by an MCP client session are
    passed in as ``extra_tools=await wrap_external_tools(session)`` and end
    up on the default agent.
    """
    runtime_cfg = config.get("runtime") or {}
    tools = ToolRegistry()
    agents = AgentRegistry()
    tracker = DelegationTracker(runtime_cfg.get("delegation_key_length", 50))
    agent_ids = agent_ids or ALL_AGENT_IDS

    for tool in builtin_tools(config, provider):
        tools.register(tool)
    if knowledge_base is not None:
        tools.register(create_knowledge_tool(knowledge_base))
    for tool in extra_tools:
        tools.register(tool)

    tools.register(create_delegation_tool(agents, tracker, agent_ids=list(agent_ids)))
    tools.register(
        create_coordination_tool(agents, runtime_cfg.get("coordination_timeout_ms", 60000))
    )

    for agent_id in agent_ids:
        agents.register(create_agent(agent_id, config, provider, tools))

    logger.info("Runtime ready: %d tools, %d agents", len(tools), len(agents))
    return Runtime(config=config, provider=provider, tools=tools, agents=agents, tracker=tracker)
