"""OpenAI Chat Completions provider with function calling."""

from __future__ import annotations

import json
import os
from typing import Optional

import httpx

from ..models.agent import Message, MessageRole
from ..models.cost import Usage
from ..models.provider import CompletionResult
from ..models.tool import ToolCallRequest
from .base import BaseProvider


def to_openai_messages(messages: list[Message]) -> list[dict]:
    converted = []
    for msg in messages:
        item: dict = {"role": msg.role.value, "content": msg.content}
        if msg.role == MessageRole.ASSISTANT and msg.tool_calls:
            item["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.arguments},
                }
                for call in msg.tool_calls
            ]
        if msg.role == MessageRole.TOOL:
            item["tool_call_id"] = msg.tool_call_id
            item["content"] = msg.content or ""
        converted.append(item)
    return converted


def to_openai_tools(tools: list[dict]) -> list[dict]:
    return [{"type": "function", "function": schema} for schema in tools]


def parse_openai_tool_calls(raw_calls: Optional[list]) -> list[ToolCallRequest]:
    calls = []
    for raw in raw_calls or []:
        function = raw.get("function", {})
        arguments = function.get("arguments", "{}")
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments)
        calls.append(
            ToolCallRequest(
                id=raw.get("id") or f"call_{len(calls)}",
                name=function.get("name", ""),
                arguments=arguments or "{}",
            )
        )
    return calls


class OpenAIProvider(BaseProvider):
    name = "openai"
    API_URL = "https://api.openai.com/v1/chat/completions"

    def _get_api_key(self) -> Optional[str]:
        env_var = self.config.get("api_key_env", "OPENAI_API_KEY")
        return os.environ.get(env_var)

    async def complete(
        self,
        messages: list[Message],
        tools: list[dict],
        model: str,
        temperature: float,
    ) -> CompletionResult:
        api_key = self._get_api_key()
        if not api_key:
            env_var = self.config.get("api_key_env", "OPENAI_API_KEY")
            return CompletionResult(
                success=False,
                error=f"API key not found in environment variable: {env_var}",
            )

        url = self.config.get("endpoint") or self.API_URL
        timeout = self.common.get("timeout_seconds", 300)

        body: dict = {
            "model": self._resolve_model(model),
            "temperature": temperature,
            "messages": to_openai_messages(messages),
        }
        if self.config.get("max_tokens"):
            body["max_tokens"] = self.config["max_tokens"]
        if tools:
            body["tools"] = to_openai_tools(tools)

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(url, json=body, headers=headers)
                response.raise_for_status()
                data = response.json()

            choices = data.get("choices") or []
            if not choices:
                return CompletionResult(success=False, error="No response received from OpenAI")
            message = choices[0].get("message", {})

            usage = data.get("usage") or {}
            return CompletionResult(
                success=True,
                content=message.get("content"),
                tool_calls=parse_openai_tool_calls(message.get("tool_calls")),
                usage=Usage(
                    prompt_tokens=usage.get("prompt_tokens", 0),
                    completion_tokens=usage.get("completion_tokens", 0),
                    total_tokens=usage.get("total_tokens", 0),
                ) if usage else None,
            )
        except httpx.HTTPStatusError as e:
            error_body = ""
            try:
                error_body = e.response.text
            except Exception:
                pass
            return CompletionResult(
                success=False,
                error=f"{e.response.status_code} | {error_body}",
            )
        except Exception as e:
            return CompletionResult(success=False, error=str(e))
