from .agent import (
    AgentConfig,
    AgentContext,
    AgentResponse,
    AgentRole,
    Message,
    MessageRole,
    ModelStrategy,
)
from .cost import CostInfo, ModelInfo, ModelPricing, TaskComplexity, Usage
from .provider import CompletionResult
from .tool import Tool, ToolCallInfo, ToolCallRequest, ToolResult, object_schema

__all__ = [
    "AgentConfig",
    "AgentContext",
    "AgentResponse",
    "AgentRole",
    "CompletionResult",
    "CostInfo",
    "Message",
    "MessageRole",
    "ModelInfo",
    "ModelPricing",
    "ModelStrategy",
    "TaskComplexity",
    "Tool",
    "ToolCallInfo",
    "ToolCallRequest",
    "ToolResult",
    "Usage",
    "object_schema",
]
