"""Ollama local inference provider (``/api/chat`` with tools)."""

from __future__ import annotations

import json
from typing import Optional

import httpx

from ..models.agent import Message
from ..models.cost import Usage
from ..models.provider import CompletionResult
from .base import BaseProvider
from .openai_provider import parse_openai_tool_calls, to_openai_messages, to_openai_tools


def _to_ollama_messages(messages: list[Message]) -> list[dict]:
    # Ollama expects tool-call arguments as objects, not JSON strings
    converted = to_openai_messages(messages)
    for item in converted:
        for call in item.get("tool_calls", []):
            arguments = call["function"]["arguments"]
            try:
                call["function"]["arguments"] = json.loads(arguments or "{}")
            except json.JSONDecodeError:
                call["function"]["arguments"] = {}
    return converted


class OllamaProvider(BaseProvider):
    name = "ollama"

    def _resolve_model(self, model: Optional[str]) -> str:
        # Catalog ids are hosted-model names; fall back to the local model
        resolved = super()._resolve_model(model)
        model_map = self.config.get("model_map") or {}
        if model and model not in model_map and not self.config.get("use_requested_model"):
            return self.config.get("model", "llama3.1:70b")
        return resolved

    async def complete(
        self,
        messages: list[Message],
        tools: list[dict],
        model: str,
        temperature: float,
    ) -> CompletionResult:
        endpoint = self.config.get("endpoint", "http://localhost:11434")
        timeout = self.common.get("timeout_seconds", 300)

        body: dict = {
            "model": self._resolve_model(model),
            "messages": _to_ollama_messages(messages),
            "stream": False,
            "options": {"temperature": temperature},
        }
        if tools:
            body["tools"] = to_openai_tools(tools)

        try:
            url = f"{endpoint.rstrip('/')}/api/chat"
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(url, json=body)
                response.raise_for_status()
                data = response.json()

            message = data.get("message", {})
            prompt_tokens = data.get("prompt_eval_count", 0)
            completion_tokens = data.get("eval_count", 0)

            return CompletionResult(
                success=True,
                content=message.get("content") or None,
                tool_calls=parse_openai_tool_calls(message.get("tool_calls")),
                usage=Usage(
                    prompt_tokens=prompt_tokens,
                    completion_tokens=completion_tokens,
                    total_tokens=prompt_tokens + completion_tokens,
                ),
            )
        except Exception as e:
            return CompletionResult(success=False, error=str(e))
