from __future__ import annotations

from typing import Any, Dict

import pytest
from pydantic import BaseModel

from toolkit_dev.errors import ToolUpstreamError
from toolkit_dev.tools.executor import execute_tool
from toolkit_dev.tools.types import ServerTool, ToolFailureClass
from toolkit_dev.tools.usage import InMemoryUsageRecorder


class AddInput(BaseModel):
    a: int
    b: int


class AddOutput(BaseModel):
    total: int


def _tool(callback, message=None) -> ServerTool:
    return ServerTool(
        toolkit_id="math",
        name="add",
        description="Add two numbers.",
        input_model=AddInput,
        output_model=AddOutput,
        callback=callback,
        message=message,
    )


async def _add(args: AddInput) -> Dict[str, Any]:
    return {"total": args.a + args.b}


class BrokenRecorder:
    async def record(self, toolkit_id: str, tool_name: str) -> None:
        raise RuntimeError("usage store down")


class TestExecuteTool:
    @pytest.mark.asyncio
    async def test_success_returns_validated_result(self) -> None:
        recorder = InMemoryUsageRecorder()
        result = await execute_tool(_tool(_add), {"a": 2, "b": 3}, recorder)

        assert result.ok is True
        assert result.tool_name == "math_add"
        assert result.result == {"total": 5}
        assert result.latency_ms is not None
        assert recorder.count("math", "add") == 1
        assert result.to_payload() == {"success": True, "result": {"total": 5}}

    @pytest.mark.asyncio
    async def test_static_and_computed_messages(self) -> None:
        static = await execute_tool(_tool(_add, message="Added."), {"a": 1, "b": 1})
        computed = await execute_tool(_tool(_add, message=lambda r: f"Total is {r['total']}"), {"a": 1, "b": 1})

        assert static.to_payload()["message"] == "Added."
        assert computed.to_payload()["message"] == "Total is 2"

    @pytest.mark.asyncio
    async def test_failing_message_becomes_failure_result(self) -> None:
        recorder = InMemoryUsageRecorder()
        result = await execute_tool(_tool(_add, message=lambda r: r["missing"]), {"a": 1, "b": 1}, recorder)

        assert result.ok is False
        assert result.failure_class == ToolFailureClass.TOOL_INTERNAL_ERROR
        assert result.to_payload()["success"] is False
        assert recorder.count("math", "add") == 0

    @pytest.mark.asyncio
    async def test_bad_input_never_reaches_callback(self) -> None:
        called = []

        async def callback(args):
            called.append(args)
            return {"total": 0}

        result = await execute_tool(_tool(callback), {"a": "x"})

        assert result.ok is False
        assert result.failure_class == ToolFailureClass.TOOL_BAD_INPUT
        assert "a" in result.failure_message
        assert called == []

    @pytest.mark.asyncio
    async def test_callback_error_becomes_failure_result(self) -> None:
        async def callback(args):
            raise ToolUpstreamError("GitHub returned 502")

        recorder = InMemoryUsageRecorder()
        result = await execute_tool(_tool(callback), {"a": 1, "b": 2}, recorder)

        assert result.ok is False
        assert result.failure_class == ToolFailureClass.TOOL_UPSTREAM_ERROR
        assert result.to_payload() == {
            "success": False,
            "message": "GitHub returned 502",
            "error": "TOOL_UPSTREAM_ERROR",
        }
        assert recorder.count("math", "add") == 0

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self) -> None:
        async def callback(args):
            raise KeyError("boom")

        result = await execute_tool(_tool(callback), {"a": 1, "b": 2})
        assert result.failure_class == ToolFailureClass.TOOL_INTERNAL_ERROR

    @pytest.mark.asyncio
    async def test_malformed_output_is_rejected(self) -> None:
        async def callback(args):
            return {"sum": 3}

        result = await execute_tool(_tool(callback), {"a": 1, "b": 2})
        assert result.ok is False
        assert result.failure_class == ToolFailureClass.TOOL_BAD_OUTPUT

    @pytest.mark.asyncio
    async def test_model_instances_are_accepted_as_output(self) -> None:
        async def callback(args):
            return AddOutput(total=args.a * 10)

        result = await execute_tool(_tool(callback), {"a": 4, "b": 0})
        assert result.result == {"total": 40}

    @pytest.mark.asyncio
    async def test_recorder_failure_does_not_fail_the_call(self, caplog) -> None:
        result = await execute_tool(_tool(_add), {"a": 1, "b": 1}, BrokenRecorder())
        assert result.ok is True
        assert "Failed to increment tool usage" in caplog.text
