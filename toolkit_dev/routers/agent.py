from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from toolkit_dev.agent.jobs import (
    RUN_AGENT_TASK,
    AgentTaskPayload,
    InProcessJobBackend,
    RunFilter,
    RunNotFoundError,
    RunStatus,
    run_metadata,
)
from toolkit_dev.deps import get_job_backend, require_api_key
from toolkit_dev.rate_limit import rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/agent",
    tags=["agent"],
    dependencies=[Depends(require_api_key)],
)


@router.post("/run", dependencies=[Depends(rate_limit)])
async def trigger_agent_run(
    body: AgentTaskPayload,
    backend: InProcessJobBackend = Depends(get_job_backend),
):
    handle = await backend.trigger(
        RUN_AGENT_TASK,
        body.model_dump(by_alias=True),
        metadata=run_metadata(body),
    )
    return {"success": True, "taskId": handle.id, "handle": handle.to_dict()}


@router.get("/runs")
def list_agent_runs(
    limit: int = Query(50, ge=1, le=100),
    status: Optional[RunStatus] = Query(None),
    cursor: Optional[str] = Query(None),
    backend: InProcessJobBackend = Depends(get_job_backend),
):
    page = backend.runs.list(
        RunFilter(limit=limit, status=[status] if status else None, cursor=cursor)
    )
    return {
        "success": True,
        "runs": [run.to_dict() for run in page.data],
        "pagination": {"hasMore": page.has_more, "nextCursor": page.next_cursor},
    }


@router.get("/runs/{run_id}")
def get_agent_run(run_id: str, backend: InProcessJobBackend = Depends(get_job_backend)):
    try:
        run = backend.runs.retrieve(run_id)
    except RunNotFoundError:
        raise HTTPException(status_code=404, detail="Run not found")
    return {"success": True, "run": run.to_dict()}


@router.post("/runs/{run_id}/cancel")
def cancel_agent_run(run_id: str, backend: InProcessJobBackend = Depends(get_job_backend)):
    try:
        backend.runs.cancel(run_id)
    except RunNotFoundError:
        raise HTTPException(status_code=404, detail="Run not found")
    return {"success": True, "message": "Run cancelled successfully"}
