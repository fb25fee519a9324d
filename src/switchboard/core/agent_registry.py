"""Agent registry: id-keyed lookup of configured agents."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional

from .agent import Agent
from .errors import AgentNotFoundError

logger = logging.getLogger(__name__)


class AgentRegistry:
    def __init__(self, agents: Iterable[Agent] = ()):
        self._agents: dict[str, Agent] = {}
        self._lock = threading.Lock()
        for agent in agents:
            self.register(agent)

    def register(self, agent: Agent) -> None:
        with self._lock:
            if agent.id in self._agents:
                logger.warning('Agent "%s" is already registered. Overwriting.', agent.id)
            self._agents[agent.id] = agent

    def get(self, agent_id: str) -> Optional[Agent]:
        return self._agents.get(agent_id)

    def require(self, agent_id: str) -> Agent:
        agent = self._agents.get(agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id, self.ids())
        return agent

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._agents)

    def list(self) -> list[Agent]:
        with self._lock:
            return list(self._agents.values())

    def describe(self) -> list[dict]:
        return [agent.describe() for agent in self.list()]

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __len__(self) -> int:
        return len(self._agents)
