from __future__ import annotations

from fastapi import APIRouter, Depends

from toolkit_dev.deps import get_usage_recorder, require_api_key
from toolkit_dev.tools.usage import InMemoryUsageRecorder, UsageRecorder
from toolkit_dev.toolkits.registry import list_toolkits

router = APIRouter(
    prefix="/api/toolkits",
    tags=["toolkits"],
    dependencies=[Depends(require_api_key)],
)


@router.get("")
def get_toolkits():
    return {"success": True, "toolkits": list_toolkits()}


@router.get("/usage")
def get_tool_usage(recorder: UsageRecorder = Depends(get_usage_recorder)):
    usage = recorder.snapshot() if isinstance(recorder, InMemoryUsageRecorder) else {}
    return {"success": True, "usage": usage}
