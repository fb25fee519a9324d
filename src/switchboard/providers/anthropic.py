"""Anthropic Messages API provider with tool use.

System messages are lifted into the ``system`` field, assistant tool calls
become ``tool_use`` blocks and tool results are sent back as ``tool_result``
blocks inside user turns.
"""

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


def _tool_input(arguments: str) -> dict:
    try:
        parsed = json.loads(arguments or "{}")
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def to_anthropic_messages(messages: list[Message]) -> tuple[str, list[dict]]:
    """Split neutral messages into (system text, Messages API turns)."""
    system_parts: list[str] = []
    turns: list[dict] = []

    for msg in messages:
        if msg.role == MessageRole.SYSTEM:
            if msg.content:
                system_parts.append(msg.content)
            continue

        if msg.role == MessageRole.TOOL:
            block = {
                "type": "tool_result",
                "tool_use_id": msg.tool_call_id,
                "content": msg.content or "",
            }
            # Consecutive tool results share one user turn
            if turns and turns[-1]["role"] == "user" and isinstance(turns[-1]["content"], list) \
                    and all(b.get("type") == "tool_result" for b in turns[-1]["content"]):
                turns[-1]["content"].append(block)
            else:
                turns.append({"role": "user", "content": [block]})
            continue

        if msg.role == MessageRole.ASSISTANT and msg.tool_calls:
            blocks: list[dict] = []
            if msg.content:
                blocks.append({"type": "text", "text": msg.content})
            for call in msg.tool_calls:
                blocks.append({
                    "type": "tool_use",
                    "id": call.id,
                    "name": call.name,
                    "input": _tool_input(call.arguments),
                })
            turns.append({"role": "assistant", "content": blocks})
            continue

        turns.append({"role": msg.role.value, "content": msg.content or ""})

    return "\n\n".join(system_parts), turns


def to_anthropic_tools(tools: list[dict]) -> list[dict]:
    return [
        {
            "name": schema["name"],
            "description": schema.get("description", ""),
            "input_schema": schema.get("parameters") or {"type": "object", "properties": {}},
        }
        for schema in tools
    ]


class AnthropicProvider(BaseProvider):
    name = "anthropic"
    API_URL = "https://api.anthropic.com/v1/messages"

    def _get_api_key(self) -> Optional[str]:
        env_var = self.config.get("api_key_env", "ANTHROPIC_API_KEY")
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
            env_var = self.config.get("api_key_env", "ANTHROPIC_API_KEY")
            return CompletionResult(
                success=False,
                error=f"API key not found in environment variable: {env_var}",
            )

        url = self.config.get("endpoint") or self.API_URL
        timeout = self.common.get("timeout_seconds", 300)
        system, turns = to_anthropic_messages(messages)

        body: dict = {
            "model": self._resolve_model(model),
            "max_tokens": self.config.get("max_tokens", 8000),
            # Messages API caps temperature at 1.0
            "temperature": min(temperature, 1.0),
            "messages": turns,
        }
        if system:
            body["system"] = system
        if tools:
            body["tools"] = to_anthropic_tools(tools)

        headers = {
            "x-api-key": api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(url, json=body, headers=headers)
                response.raise_for_status()
                data = response.json()

            texts: list[str] = []
            calls: list[ToolCallRequest] = []
            for block in data.get("content", []):
                if block.get("type") == "text":
                    texts.append(block.get("text", ""))
                elif block.get("type") == "tool_use":
                    calls.append(
                        ToolCallRequest(
                            id=block.get("id", f"toolu_{len(calls)}"),
                            name=block.get("name", ""),
                            arguments=json.dumps(block.get("input") or {}),
                        )
                    )

            usage = data.get("usage") or {}
            input_tokens = usage.get("input_tokens", 0)
            output_tokens = usage.get("output_tokens", 0)

            return CompletionResult(
                success=True,
                content="\n".join(texts) if texts else None,
                tool_calls=calls,
                usage=Usage(
                    prompt_tokens=input_tokens,
                    completion_tokens=output_tokens,
                    total_tokens=input_tokens + output_tokens,
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
