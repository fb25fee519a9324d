"""Agent, conversation and response data models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .cost import CostInfo, TaskComplexity, Usage
from .tool import Tool, ToolCallInfo, ToolCallRequest


class AgentRole(str, Enum):
    CONVERSATIONAL = "conversational"
    RESEARCHER = "researcher"
    ORCHESTRATOR = "orchestrator"
    AUTOMATION = "automation"


class ModelStrategy(str, Enum):
    AUTO = "auto"
    FIXED = "fixed"
    COST_OPTIMIZED = "cost-optimized"


class MessageRole(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class Message(BaseModel):
    role: MessageRole
    content: Optional[str] = None
    tool_calls: Optional[list[ToolCallRequest]] = None
    tool_call_id: Optional[str] = None

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.SYSTEM, content=content)


class AgentContext(BaseModel):
    """Conversation handed to one loop invocation."""

    messages: list[Message] = []
    metadata: dict[str, Any] = {}


class AgentConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    name: str
    role: AgentRole
    system_prompt: str
    tools: list[Tool] = []
    model: Optional[str] = None
    complexity: Optional[TaskComplexity] = None
    model_strategy: ModelStrategy = ModelStrategy.AUTO
    temperature: float = Field(default=0.7, ge=0, le=2)


class AgentResponse(BaseModel):
    content: str = ""
    tool_calls: Optional[list[ToolCallInfo]] = None
    usage: Optional[Usage] = None
    cost_info: Optional[CostInfo] = None
    model: Optional[str] = None
    complexity: Optional[TaskComplexity] = None
    iterations: int = 0
