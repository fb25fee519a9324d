"""Tests for the built-in tools in tools/."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from types import SimpleNamespace

import httpx
import pytest

from conftest import ScriptedProvider, text_reply
from switchboard.models.provider import CompletionResult
from switchboard.tools import builtin_tools
from switchboard.tools.calculator import calculate, calculator_tool
from switchboard.tools.clock import time_info, time_tool
from switchboard.tools.external import wrap_external_tools
from switchboard.tools.http_fetch import create_http_fetch_tool
from switchboard.tools.knowledge import NO_RESULTS, create_knowledge_tool
from switchboard.tools.planner import PLANNER_SYSTEM, VALIDATOR_SYSTEM, _extract_json, create_planning_tools
from switchboard.tools.summarize import (
    MAX_INPUT_CHARS,
    SUMMARIZER_SYSTEM,
    build_summary_prompt,
    create_summarize_tool,
)


class TestCalculator:
    @pytest.mark.asyncio
    async def test_multiply(self):
        result = await calculator_tool.execute({"operation": "multiply", "a": 15, "b": 37})
        assert result.success is True
        assert result.result == {
            "operation": "multiply",
            "input": {"a": 15, "b": 37},
            "output": 555,
            "formatted": "multiply(15, 37) = 555",
        }

    @pytest.mark.asyncio
    async def test_sqrt_without_b(self):
        result = await calculator_tool.execute({"operation": "sqrt", "a": 16})
        assert result.result["output"] == 4
        assert result.result["formatted"] == "sqrt(16) = 4"

    @pytest.mark.asyncio
    async def test_divide_by_zero(self):
        result = await calculator_tool.execute({"operation": "divide", "a": 1, "b": 0})
        assert result.success is False
        assert result.error == "Cannot divide by zero"

    @pytest.mark.asyncio
    async def test_non_numeric_input(self):
        result = await calculator_tool.execute({"operation": "add", "a": "two", "b": 2})
        assert result.success is False
        assert "'a' must be a number" in result.error

    @pytest.mark.asyncio
    async def test_unknown_operation(self):
        result = await calculator_tool.execute({"operation": "modulo", "a": 5, "b": 2})
        assert result.success is False
        assert "Unknown operation" in result.error

    def test_percentage_and_power(self):
        assert calculate("percentage", 200, 15) == 30
        assert calculate("power", 2, 10) == 1024
        assert calculate("power", 3) == 9

    def test_negative_sqrt(self):
        with pytest.raises(ValueError):
            calculate("sqrt", -4)


class TestClock:
    def test_time_info_in_timezone(self):
        now = datetime(2024, 3, 15, 12, 30, 0, tzinfo=timezone.utc)
        info = time_info("Asia/Tokyo", now=now)
        assert info["date"] == "2024-03-15"
        assert info["time"] == "21:30:00"
        assert info["dayOfWeek"] == "Friday"
        assert info["timezone"] == "Asia/Tokyo"
        assert info["timestamp"] == str(int(now.timestamp() * 1000))

    @pytest.mark.asyncio
    async def test_default_timezone(self):
        result = await time_tool.execute({})
        assert result.success is True
        assert set(result.result) >= {"formatted", "iso", "date", "time", "dayOfWeek"}

    @pytest.mark.asyncio
    async def test_unknown_timezone(self):
        result = await time_tool.execute({"timezone": "Mars/Olympus_Mons"})
        assert result.success is False
        assert result.error == "Unknown timezone: Mars/Olympus_Mons"


class FakeKnowledgeBase:
    def __init__(self, hits):
        self.hits = hits
        self.queries = []

    async def search(self, query, limit):
        self.queries.append((query, limit))
        return self.hits[:limit]


class TestKnowledgeTool:
    @pytest.mark.asyncio
    async def test_formats_hits(self):
        kb = FakeKnowledgeBase([
            {"content": "Refunds within 30 days.", "source": "policy.pdf"},
            {"content": "Contact support.", "source": None},
        ])
        tool = create_knowledge_tool(kb)
        result = await tool.execute({"query": "refund policy"})

        assert kb.queries == [("refund policy", 3)]
        assert "[Result 1] (Source: policy.pdf)\nRefunds within 30 days." in result.result
        assert "[Result 2] (Source: Unknown)" in result.result

    @pytest.mark.asyncio
    async def test_no_hits(self):
        result = await create_knowledge_tool(FakeKnowledgeBase([])).execute({"query": "anything"})
        assert result.success is True
        assert result.result == NO_RESULTS

    @pytest.mark.asyncio
    async def test_query_required(self):
        result = await create_knowledge_tool(FakeKnowledgeBase([])).execute({"query": "  "})
        assert result.success is False


class FakeSession:
    """Stands in for an MCP client session."""

    def __init__(self):
        self.calls = []

    async def list_tools(self):
        return SimpleNamespace(tools=[
            SimpleNamespace(
                name="lookup_ticket",
                description="Find a ticket",
                inputSchema={"type": "object", "properties": {"id": {"type": "string"}}, "required": ["id"]},
            ),
            SimpleNamespace(name="ping", description=None, inputSchema=None),
        ])

    async def call_tool(self, name, arguments):
        self.calls.append((name, arguments))
        if name == "ping":
            return SimpleNamespace(content=[SimpleNamespace(text="unreachable")], isError=True)
        return SimpleNamespace(content=[SimpleNamespace(text="Ticket 42: open"), {"text": "owner: sam"}], isError=False)


class TestExternalTools:
    @pytest.mark.asyncio
    async def test_wraps_with_prefix(self):
        session = FakeSession()
        tools = await wrap_external_tools(session)

        assert [t.name for t in tools] == ["mcp_lookup_ticket", "mcp_ping"]
        assert tools[0].parameters["required"] == ["id"]
        assert tools[1].parameters == {"type": "object", "properties": {}, "required": []}

        result = await tools[0].execute({"id": "42"})
        assert result.success is True
        assert result.result == "Ticket 42: open\nowner: sam"
        assert session.calls == [("lookup_ticket", {"id": "42"})]

    @pytest.mark.asyncio
    async def test_error_flag_becomes_failure(self):
        tools = await wrap_external_tools(FakeSession(), prefix="ext_")
        result = await tools[1].execute({})
        assert tools[1].name == "ext_ping"
        assert result.success is False
        assert "unreachable" in result.error


class TestPlanningTools:
    def test_extract_json_from_fenced_output(self):
        assert _extract_json('Here you go:\n```json\n{"goal": "x", "steps": []}\n```') == {"goal": "x", "steps": []}

    def test_extract_json_rejects_prose(self):
        with pytest.raises(ValueError):
            _extract_json("no json here")

    @pytest.mark.asyncio
    async def test_decompose(self):
        plan = {"goal": "Launch", "steps": [{"step": 1, "description": "Design"}, {"step": 2, "description": "Build"}]}
        provider = ScriptedProvider(scripts={PLANNER_SYSTEM: [text_reply(json.dumps(plan))]})
        decompose, _ = create_planning_tools(provider)

        result = await decompose.execute({"goal": "Launch the app", "maxSteps": 5})
        assert result.success is True
        assert result.result["totalSteps"] == 2
        prompt = provider.calls[0]["messages"][1].content
        assert "Goal: Launch the app" in prompt
        assert "max 5 steps" in prompt
        assert provider.calls[0]["tools"] == []

    @pytest.mark.asyncio
    async def test_validate(self):
        verdict = {"goal": "Run a marathon", "isFeasible": True, "confidence": "medium"}
        provider = ScriptedProvider(scripts={VALIDATOR_SYSTEM: [text_reply(json.dumps(verdict))]})
        _, validate = create_planning_tools(provider)

        result = await validate.execute({"goal": "Run a marathon", "constraints": "3 months"})
        assert result.result == verdict
        assert "Constraints: 3 months" in provider.calls[0]["messages"][1].content

    @pytest.mark.asyncio
    async def test_model_failure_is_tool_failure(self):
        provider = ScriptedProvider([CompletionResult(success=False, error="API error 400")])
        decompose, _ = create_planning_tools(provider)
        result = await decompose.execute({"goal": "x"})
        assert result.success is False
        assert "400" in result.error

    @pytest.mark.asyncio
    async def test_goal_required(self):
        decompose, validate = create_planning_tools(ScriptedProvider())
        assert (await decompose.execute({})).success is False
        assert (await validate.execute({})).success is False


class TestSummarizeTool:
    @pytest.mark.asyncio
    async def test_summarize(self):
        reply = {"summary": "Short.", "keyPoints": ["one", "two", "three"]}
        provider = ScriptedProvider(scripts={SUMMARIZER_SYSTEM: [text_reply(json.dumps(reply))]})
        tool = create_summarize_tool(provider)

        text = "word " * 60
        result = await tool.execute({"text": text, "focus": "key findings", "maxBulletPoints": 2})
        assert result.success is True
        assert result.result["summary"] == "Short."
        assert result.result["keyPoints"] == ["one", "two"]
        assert result.result["originalLength"] == len(text)
        assert result.result["compressionRatio"] == round(len(text) / len("Short."), 1)

        prompt = provider.calls[0]["messages"][1].content
        assert prompt.startswith("Focus particularly on: key findings")
        assert "Up to 2 key points" in prompt
        assert provider.calls[0]["temperature"] == 0.3

    def test_long_input_truncated_in_prompt(self):
        prompt = build_summary_prompt("x" * (MAX_INPUT_CHARS + 500), None, 5)
        assert "x" * MAX_INPUT_CHARS + "..." in prompt
        assert "x" * (MAX_INPUT_CHARS + 1) not in prompt

    @pytest.mark.asyncio
    async def test_text_required(self):
        result = await create_summarize_tool(ScriptedProvider()).execute({"text": "   "})
        assert result.success is False
        assert result.error == "text is required"

    @pytest.mark.asyncio
    async def test_model_failure_is_tool_failure(self):
        provider = ScriptedProvider([CompletionResult(success=False, error="API error 503")])
        result = await create_summarize_tool(provider).execute({"text": "something long"})
        assert result.success is False
        assert "503" in result.error


class TestHttpFetch:
    @pytest.mark.asyncio
    async def test_rejects_non_http(self):
        result = await create_http_fetch_tool().execute({"url": "file:///etc/passwd"})
        assert result.success is False
        assert "Only http(s)" in result.error

    @pytest.mark.asyncio
    async def test_fetch_truncates(self, monkeypatch):
        real_client = httpx.AsyncClient

        def factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(
                lambda request: httpx.Response(200, text="a" * 50, headers={"content-type": "text/plain"})
            )
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", factory)
        result = await create_http_fetch_tool(max_chars=10).execute({"url": "https://example.com/doc"})

        assert result.success is True
        assert result.result["status"] == 200
        assert result.result["contentType"] == "text/plain"
        assert result.result["body"] == "a" * 10 + "... [truncated 40 chars]"

    @pytest.mark.asyncio
    async def test_http_error_status(self, monkeypatch):
        real_client = httpx.AsyncClient

        def factory(*args, **kwargs):
            kwargs["transport"] = httpx.MockTransport(lambda request: httpx.Response(404))
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", factory)
        result = await create_http_fetch_tool().execute({"url": "https://example.com/missing"})
        assert result.success is False
        assert "HTTP 404" in result.error


class TestBuiltinTools:
    def test_names(self):
        tools = builtin_tools({}, ScriptedProvider())
        assert [t.name for t in tools] == [
            "calculator",
            "get_current_time",
            "http_fetch",
            "summarize",
            "decompose_task",
            "validate_goal",
        ]
