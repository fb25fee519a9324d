from .agent import Agent
from .agent_registry import AgentRegistry
from .delegation import DelegationTracker
from .errors import (
    AgentNotFoundError,
    CircularDelegationError,
    CoordinationTimeout,
    IterationLimitExceeded,
    ModelInvocationError,
    SwitchboardError,
    UnknownModelError,
)
from .runtime import Runtime, build_runtime
from .tool_registry import ToolRegistry

__all__ = [
    "Agent",
    "AgentNotFoundError",
    "AgentRegistry",
    "CircularDelegationError",
    "CoordinationTimeout",
    "DelegationTracker",
    "IterationLimitExceeded",
    "ModelInvocationError",
    "Runtime",
    "SwitchboardError",
    "ToolRegistry",
    "UnknownModelError",
    "build_runtime",
]
