"""Error types raised by the agent engine."""

from __future__ import annotations

from typing import Iterable, Optional


class SwitchboardError(Exception):
    """Base class for engine errors."""


class IterationLimitExceeded(SwitchboardError):
    """Raised when a tool-calling loop does not settle within its iteration budget."""

    def __init__(self, agent_id: str, max_iterations: int):
        self.agent_id = agent_id
        self.max_iterations = max_iterations
        super().__init__(
            f"Agent '{agent_id}' exceeded maximum iterations ({max_iterations})"
        )


class ModelInvocationError(SwitchboardError):
    """Raised when the model provider fails after retries."""

    def __init__(self, model: Optional[str], message: str):
        self.model = model
        super().__init__(f"Model invocation failed ({model or 'unknown model'}): {message}")


class UnknownModelError(SwitchboardError, KeyError):
    """Raised when a model is missing from the pricing catalog."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Unknown model: {model}")

    def __str__(self) -> str:
        return self.args[0]


class AgentNotFoundError(SwitchboardError, LookupError):
    def __init__(self, agent_id: str, available: Iterable[str] = ()):
        self.agent_id = agent_id
        self.available = list(available)
        listing = ", ".join(self.available) if self.available else "none"
        super().__init__(f'Agent "{agent_id}" not found. Available agents: {listing}')


class CircularDelegationError(SwitchboardError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(
            "Circular delegation detected. This task is already being processed "
            f"by this agent ({key})."
        )


class CoordinationTimeout(SwitchboardError):
    def __init__(self, timeout_ms: int, pending: int):
        self.timeout_ms = timeout_ms
        self.pending = pending
        super().__init__(
            f"Coordination timeout after {timeout_ms}ms ({pending} task(s) still running)"
        )
