from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ValidationError

from toolkit_dev.errors import MissingCredentialError, ToolUpstreamError
from toolkit_dev.tools.types import ServerTool, ToolFailureClass, ToolResult
from toolkit_dev.tools.usage import UsageRecorder

logger = logging.getLogger(__name__)


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _fail(tool_name: str, cls: ToolFailureClass, msg: str, started_at: str, t0: float) -> ToolResult:
    return ToolResult(
        ok=False,
        tool_name=tool_name,
        failure_class=cls,
        failure_message=msg,
        started_at=started_at,
        ended_at=_iso_now(),
        latency_ms=int((time.monotonic() - t0) * 1000),
    )


def _validation_summary(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def _coerce_output(tool: ServerTool, raw: Any) -> Dict[str, Any]:
    if isinstance(raw, tool.output_model):
        return raw.model_dump(mode="json")
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    return tool.output_model.model_validate(raw).model_dump(mode="json")


def _resolve_message(tool: ServerTool, result: Dict[str, Any]) -> Optional[str]:
    if tool.message is None:
        return None
    if callable(tool.message):
        return tool.message(result)
    return tool.message


def classify_exception(exc: BaseException) -> Tuple[ToolFailureClass, str]:
    if isinstance(exc, MissingCredentialError):
        return ToolFailureClass.MISSING_CREDENTIAL, str(exc)
    if isinstance(exc, ToolUpstreamError):
        return ToolFailureClass.TOOL_UPSTREAM_ERROR, str(exc)
    return ToolFailureClass.TOOL_INTERNAL_ERROR, str(exc) or "An error occurred while executing the tool"


async def execute_tool(
    tool: ServerTool,
    args: Optional[Dict[str, Any]],
    recorder: Optional[UsageRecorder] = None,
) -> ToolResult:
    """
    Single, canonical tool execution entry point.

    Contract:
    - Input is validated against the tool's input model before the callback runs.
    - Output is validated against the tool's output model before it is returned.
    - Callback failures never propagate; they become ok=False results so the
      remaining tool calls of the same agent turn are unaffected.
    - Usage is recorded only on success; recorder failures are logged and ignored.
    """
    t0 = time.monotonic()
    started = _iso_now()
    name = tool.qualified_name

    try:
        parsed = tool.input_model.model_validate(args or {})
    except ValidationError as exc:
        return _fail(name, ToolFailureClass.TOOL_BAD_INPUT, f"Invalid input: {_validation_summary(exc)}", started, t0)

    try:
        raw = await tool.callback(parsed)
    except Exception as exc:  # noqa: BLE001
        cls, msg = classify_exception(exc)
        logger.warning("Tool %s failed (%s): %s", name, cls.value, msg)
        return _fail(name, cls, msg, started, t0)

    try:
        result = _coerce_output(tool, raw)
    except ValidationError as exc:
        logger.warning("Tool %s returned malformed output: %s", name, exc)
        return _fail(name, ToolFailureClass.TOOL_BAD_OUTPUT, f"Invalid output: {_validation_summary(exc)}", started, t0)

    try:
        message = _resolve_message(tool, result)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Tool %s message failed: %s", name, exc)
        return _fail(name, ToolFailureClass.TOOL_INTERNAL_ERROR, f"Failed to build tool message: {exc}", started, t0)

    if recorder is not None:
        try:
            await recorder.record(tool.toolkit_id, tool.name)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to increment tool usage for %s", name)

    return ToolResult(
        ok=True,
        tool_name=name,
        result=result,
        message=message,
        started_at=started,
        ended_at=_iso_now(),
        latency_ms=int((time.monotonic() - t0) * 1000),
    )
