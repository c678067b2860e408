from __future__ import annotations

import asyncio
import itertools
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from toolkit_dev.agent.config import create_agent_config
from toolkit_dev.agent.runner import run_agent
from toolkit_dev.model_client import ModelClient
from toolkit_dev.toolkits.types import ToolkitContext

logger = logging.getLogger(__name__)

RUN_AGENT_TASK = "run-agent"
DEFAULT_CHAT_MODEL = "openai/gpt-4"


# ----------------------------
# Payload
# ----------------------------


class AgentMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ToolkitSelection(BaseModel):
    id: str
    parameters: Dict[str, Any] = Field(default_factory=dict)


class AgentTaskPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: List[AgentMessage]
    toolkits: List[ToolkitSelection] = Field(default_factory=list)
    selected_chat_model: str = Field(default=DEFAULT_CHAT_MODEL, alias="selectedChatModel")
    system_prompt: Optional[str] = Field(default=None, alias="systemPrompt")
    use_native_search: bool = Field(default=False, alias="useNativeSearch")


# ----------------------------
# Run records
# ----------------------------


class RunStatus(str, Enum):
    QUEUED = "QUEUED"
    EXECUTING = "EXECUTING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"


FINISHED_STATUSES = (RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELED)


class RunNotFoundError(KeyError):
    def __init__(self, run_id: str) -> None:
        super().__init__(run_id)
        self.run_id = run_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AgentRun:
    id: str
    task_id: str
    seq: int
    payload: Dict[str, Any]
    metadata: Dict[str, Any] = field(default_factory=dict)
    status: RunStatus = RunStatus.QUEUED
    created_at: datetime = field(default_factory=_utc_now)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    output: Optional[Any] = None
    error: Optional[Dict[str, Any]] = None

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "taskId": self.id,
            "status": self.status.value,
            "model": self.metadata.get("selectedChatModel", "unknown"),
            "prompt": self.metadata.get("prompt", "No prompt available"),
            "toolkits": list(self.metadata.get("toolkits", [])),
            "createdAt": self.created_at.isoformat(),
            "completedAt": self.finished_at.isoformat() if self.finished_at else None,
            "output": self.output,
            "error": self.error,
        }


@dataclass(frozen=True)
class RunHandle:
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id}


@dataclass(frozen=True)
class RunFilter:
    limit: int = 50
    status: Optional[List[RunStatus]] = None
    cursor: Optional[str] = None


@dataclass
class RunPage:
    data: List[AgentRun]
    has_more: bool = False
    next_cursor: Optional[str] = None


TaskFn = Callable[[Dict[str, Any]], Awaitable[Any]]


# ----------------------------
# In-process backend
# ----------------------------


class RunsAPI:
    """Query and control surface over a backend's runs."""

    def __init__(self, backend: "InProcessJobBackend") -> None:
        self._backend = backend

    def retrieve(self, run_id: str) -> AgentRun:
        run = self._backend._runs.get(run_id)
        if run is None:
            raise RunNotFoundError(run_id)
        return run

    def list(self, run_filter: Optional[RunFilter] = None) -> RunPage:
        """
        Newest first. next_cursor is the id of the last run on the page;
        pass it back as cursor to continue after it.
        """
        f = run_filter or RunFilter()
        runs = sorted(self._backend._runs.values(), key=lambda r: r.seq, reverse=True)
        if f.status:
            wanted = set(f.status)
            runs = [r for r in runs if r.status in wanted]

        if f.cursor:
            ids = [r.id for r in runs]
            if f.cursor in ids:
                runs = runs[ids.index(f.cursor) + 1:]

        limit = max(1, f.limit)
        page = runs[:limit]
        has_more = len(runs) > limit
        return RunPage(
            data=page,
            has_more=has_more,
            next_cursor=page[-1].id if has_more and page else None,
        )

    def cancel(self, run_id: str) -> AgentRun:
        """Cancel a queued or executing run. Finished runs are left as they are."""
        run = self.retrieve(run_id)
        if run.is_finished:
            return run

        task = self._backend._tasks.get(run_id)
        if task is not None and not task.done():
            task.cancel()
        run.status = RunStatus.CANCELED
        run.finished_at = _utc_now()
        logger.info("Run %s canceled", run_id)
        return run


class InProcessJobBackend:
    """
    Runs registered tasks as asyncio tasks on the running event loop.

    Run records live for the lifetime of the process.
    """

    def __init__(self, tasks: Optional[Dict[str, TaskFn]] = None) -> None:
        self._task_fns: Dict[str, TaskFn] = dict(tasks or {})
        self._runs: Dict[str, AgentRun] = {}
        self._tasks: Dict[str, "asyncio.Task[None]"] = {}
        self._seq = itertools.count()
        self.runs = RunsAPI(self)

    def register(self, task_id: str, fn: TaskFn) -> None:
        self._task_fns[task_id] = fn

    async def trigger(
        self,
        task_id: str,
        payload: Dict[str, Any],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RunHandle:
        fn = self._task_fns.get(task_id)
        if fn is None:
            raise KeyError(f"Unknown task: {task_id}")

        run = AgentRun(
            id=f"run_{uuid.uuid4().hex}",
            task_id=task_id,
            seq=next(self._seq),
            payload=dict(payload),
            metadata=dict(metadata or {}),
        )
        self._runs[run.id] = run
        task = asyncio.create_task(self._execute(run, fn))
        # A task cancelled before it starts never enters _execute.
        task.add_done_callback(lambda _: self._tasks.pop(run.id, None))
        self._tasks[run.id] = task
        logger.info("Run %s queued for task %s", run.id, task_id)
        return RunHandle(id=run.id)

    async def _execute(self, run: AgentRun, fn: TaskFn) -> None:
        if run.is_finished:
            return
        run.status = RunStatus.EXECUTING
        run.started_at = _utc_now()
        logger.info("Run %s executing", run.id)
        try:
            output = await fn(run.payload)
        except asyncio.CancelledError:
            run.status = RunStatus.CANCELED
            run.finished_at = run.finished_at or _utc_now()
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Run %s failed", run.id)
            run.status = RunStatus.FAILED
            run.error = {"message": str(exc) or exc.__class__.__name__}
        else:
            run.status = RunStatus.COMPLETED
            run.output = output
            logger.info("Run %s completed", run.id)
        finally:
            run.finished_at = run.finished_at or _utc_now()

    async def wait(self, run_id: str) -> AgentRun:
        """Wait for a run to finish (cancellation included) and return it."""
        run = self.runs.retrieve(run_id)
        task = self._tasks.get(run_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        return run


# ----------------------------
# Tasks
# ----------------------------


def run_metadata(payload: AgentTaskPayload) -> Dict[str, Any]:
    return {
        "selectedChatModel": payload.selected_chat_model,
        "prompt": payload.messages[0].content if payload.messages else "",
        "toolkits": [t.id for t in payload.toolkits],
        "systemPrompt": payload.system_prompt,
        "useNativeSearch": payload.use_native_search,
    }


async def run_agent_task(
    payload: Dict[str, Any],
    client: Optional[ModelClient] = None,
    context: Optional[ToolkitContext] = None,
) -> Dict[str, Any]:
    """
    Background agent run: build the agent config from the payload and
    generate one response, running tools as the model asks for them.

    Failures are reported in the output ({"success": False, "error": ...})
    rather than failing the run.
    """
    request = AgentTaskPayload.model_validate(payload)
    logger.info(
        "Starting agent task: messages=%d toolkits=%d model=%s",
        len(request.messages),
        len(request.toolkits),
        request.selected_chat_model,
    )

    try:
        config = await create_agent_config(
            [t.model_dump() for t in request.toolkits],
            request.selected_chat_model,
            use_native_search=request.use_native_search,
            system_prompt=request.system_prompt,
            context=context,
        )
        logger.info(
            "Agent config created: tools=%d system_prompt_length=%d",
            len(config.tools),
            len(config.system_prompt),
        )

        result = await run_agent(config, [m.model_dump() for m in request.messages], client)
        logger.info(
            "Agent response generated: length=%d finish_reason=%s",
            len(result.text),
            result.finish_reason,
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Agent task failed")
        return {"success": False, "error": str(exc) or "Unknown error"}

    return {
        "success": True,
        "response": result.text,
        "usage": result.usage,
        "finishReason": result.finish_reason,
        "toolResults": result.tool_results,
    }


def create_job_backend() -> InProcessJobBackend:
    return InProcessJobBackend({RUN_AGENT_TASK: run_agent_task})
