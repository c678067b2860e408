from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Type, Union

from pydantic import BaseModel


class ToolFailureClass(str, Enum):
    TOOL_NOT_ALLOWED = "TOOL_NOT_ALLOWED"
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    TOOL_BAD_INPUT = "TOOL_BAD_INPUT"
    TOOL_BAD_OUTPUT = "TOOL_BAD_OUTPUT"
    TOOL_UPSTREAM_ERROR = "TOOL_UPSTREAM_ERROR"
    TOOL_INTERNAL_ERROR = "TOOL_INTERNAL_ERROR"


ToolCallback = Callable[[Any], Awaitable[Any]]
ToolMessage = Union[str, Callable[[Dict[str, Any]], str], None]


@dataclass(frozen=True)
class BaseTool:
    """
    Client/server shared half of a tool: what the model sees.

    input_model and output_model are pydantic classes; their JSON schema is
    what gets advertised to the language model.
    """
    description: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]


def create_base_tool(
    description: str,
    input_model: Type[BaseModel],
    output_model: Type[BaseModel],
) -> BaseTool:
    return BaseTool(description=description, input_model=input_model, output_model=output_model)


@dataclass(frozen=True)
class ServerToolConfig:
    """
    Server-only half of a tool.

    callback receives a validated instance of the tool's input_model.
    message is an optional hint returned to the model alongside the result.
    """
    callback: ToolCallback
    message: ToolMessage = None


@dataclass(frozen=True)
class ServerTool:
    """A fully resolved, executable tool owned by one toolkit."""
    toolkit_id: str
    name: str
    description: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    callback: ToolCallback
    message: ToolMessage = None

    @property
    def qualified_name(self) -> str:
        return f"{self.toolkit_id}_{self.name}"

    def parameters_schema(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema()


@dataclass
class ToolResult:
    """
    Canonical result envelope for one tool invocation.

    This is what the agent loop hands back to the model.
    """
    ok: bool
    tool_name: str
    result: Optional[Any] = None
    message: Optional[str] = None

    failure_class: Optional[ToolFailureClass] = None
    failure_message: Optional[str] = None  # Human-safe explanation

    started_at: Optional[str] = None
    ended_at: Optional[str] = None
    latency_ms: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        if not self.ok:
            return {
                "success": False,
                "message": self.failure_message or "An error occurred while executing the tool",
                "error": self.failure_class.value if self.failure_class else None,
            }
        payload: Dict[str, Any] = {"success": True, "result": self.result}
        if self.message:
            payload["message"] = self.message
        return payload

