"""Agent: runs the tool-calling loop for one conversation turn.

The loop alternates model invocations and tool execution:

    AwaitingModel -> (ExecutingTools -> AwaitingModel)* -> Done

and raises ``IterationLimitExceeded`` when the model is still asking for
tools after ``max_iterations`` completions. Tool failures are fed back to
the model as structured results; model transport failures propagate.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from ..models.agent import (
    AgentConfig,
    AgentContext,
    AgentResponse,
    Message,
    MessageRole,
    ModelStrategy,
)
from ..models.cost import CostInfo, TaskComplexity, Usage
from ..models.tool import ToolCallInfo, ToolCallRequest, ToolResult
from ..providers.base import BaseProvider
from .complexity import estimate_complexity
from .errors import IterationLimitExceeded, ModelInvocationError, UnknownModelError
from .pricing import calculate_cost, format_cost, select_model
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 10
DEFAULT_MODEL = "gpt-4o-mini"
COST_OPTIMIZED_CEILING = 0.05


def _last_user_message(messages: list[Message]) -> str:
    for msg in reversed(messages):
        if msg.role == MessageRole.USER and msg.content:
            return msg.content
    return ""


def _parse_arguments(call: ToolCallRequest) -> tuple[dict, Optional[str]]:
    try:
        args = json.loads(call.arguments or "{}")
    except json.JSONDecodeError as e:
        return {}, f"Invalid JSON arguments for tool \"{call.name}\": {e.msg}"
    if not isinstance(args, dict):
        return {}, f"Arguments for tool \"{call.name}\" must be a JSON object"
    return args, None


class Agent:
    """A configured role bound to a subset of tools.

    Agents keep no per-conversation state; ``run`` may be called
    concurrently for independent conversations.
    """

    def __init__(
        self,
        config: AgentConfig,
        provider: BaseProvider,
        tool_registry: ToolRegistry,
        *,
        max_iterations: int = MAX_ITERATIONS,
        default_model: str = DEFAULT_MODEL,
        cost_ceiling: float = COST_OPTIMIZED_CEILING,
    ):
        self.config = config
        self.provider = provider
        self.tool_registry = tool_registry
        self.max_iterations = max_iterations
        self.default_model = default_model
        self.cost_ceiling = cost_ceiling
        self._tool_names = {tool.name for tool in config.tools}
        self._tool_schemas = [tool.to_schema() for tool in config.tools]
        logger.debug("Created agent %s (%s)", config.id, config.role.value)

    @property
    def id(self) -> str:
        return self.config.id

    def describe(self) -> dict:
        return {
            "id": self.config.id,
            "name": self.config.name,
            "role": self.config.role.value,
            "tools": [tool.name for tool in self.config.tools],
        }

    def resolve_model(self, messages: list[Message]) -> tuple[str, Optional[TaskComplexity]]:
        """Choose the model for a turn from the agent's strategy."""
        strategy = self.config.model_strategy
        if strategy == ModelStrategy.FIXED:
            return self.config.model or self.default_model, self.config.complexity

        user_message = _last_user_message(messages)
        complexity = self.config.complexity or estimate_complexity(
            self.config.role,
            len(self.config.tools),
            len(user_message),
            user_message,
        )
        ceiling = self.cost_ceiling if strategy == ModelStrategy.COST_OPTIMIZED else None
        return select_model(complexity, ceiling), complexity

    async def _execute_tool(self, call: ToolCallRequest) -> tuple[dict, ToolResult]:
        args, parse_error = _parse_arguments(call)
        if parse_error:
            return args, ToolResult.fail(parse_error)
        if call.name not in self._tool_names:
            return args, ToolResult.fail(f'Tool "{call.name}" not found')
        return args, await self.tool_registry.execute(call.name, args)

    def _cost(self, model: str, usage: Optional[Usage]) -> Optional[CostInfo]:
        if usage is None:
            return None
        try:
            cost = calculate_cost(model, usage.prompt_tokens, usage.completion_tokens)
        except UnknownModelError:
            logger.warning("Could not calculate cost for model: %s", model)
            return None
        logger.info(
            "Cost: %s (%d in, %d out)",
            format_cost(cost.total_cost), cost.input_tokens, cost.output_tokens,
        )
        return cost

    async def run(self, context: AgentContext) -> AgentResponse:
        """Run the tool-calling loop until the model answers without tools."""
        messages: list[Message] = [
            Message.system(self.config.system_prompt),
            *(msg.model_copy() for msg in context.messages),
        ]
        tool_log: list[ToolCallInfo] = []
        usage: Optional[Usage] = None
        model: Optional[str] = None
        complexity: Optional[TaskComplexity] = None

        for iteration in range(1, self.max_iterations + 1):
            if model is None:
                model, complexity = self.resolve_model(context.messages)
                logger.info(
                    "Agent %s: complexity=%s model=%s",
                    self.id, complexity.value if complexity else "-", model,
                )
            logger.debug("Agent %s iteration %d", self.id, iteration)

            result = await self.provider.complete_with_retry(
                messages, self._tool_schemas, model, self.config.temperature
            )
            if not result.success:
                raise ModelInvocationError(model, result.error or "unknown error")

            if result.usage is not None:
                usage = result.usage if usage is None else usage + result.usage

            messages.append(
                Message(
                    role=MessageRole.ASSISTANT,
                    content=result.content,
                    tool_calls=result.tool_calls or None,
                )
            )

            if result.tool_calls:
                logger.info("Agent %s: model requested %d tool call(s)", self.id, len(result.tool_calls))
                # Sequential, in the order the model listed them
                for call in result.tool_calls:
                    args, tool_result = await self._execute_tool(call)
                    tool_log.append(
                        ToolCallInfo(
                            tool_name=call.name,
                            args=args,
                            result=tool_result.result if tool_result.success else tool_result.error,
                            success=tool_result.success,
                        )
                    )
                    messages.append(
                        Message(
                            role=MessageRole.TOOL,
                            tool_call_id=call.id,
                            content=tool_result.to_message_content(),
                        )
                    )
                continue

            logger.info("Agent %s: final response after %d iteration(s)", self.id, iteration)
            return AgentResponse(
                content=result.content or "",
                tool_calls=tool_log or None,
                usage=usage,
                cost_info=self._cost(model, usage),
                model=model,
                complexity=complexity,
                iterations=iteration,
            )

        raise IterationLimitExceeded(self.id, self.max_iterations)
