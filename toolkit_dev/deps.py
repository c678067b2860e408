from __future__ import annotations

from typing import Callable, Optional

from fastapi import Header, HTTPException

from toolkit_dev.agent.jobs import InProcessJobBackend, create_job_backend
from toolkit_dev.artifacts.documents import DocumentStore
from toolkit_dev.config import load_config
from toolkit_dev.model_client import ModelClient, create_model_client
from toolkit_dev.tools.usage import InMemoryUsageRecorder, UsageRecorder
from toolkit_dev.toolkits.credentials import AccountStore, EnvAccountStore
from toolkit_dev.toolkits.registry import DOCUMENT_STORE


# ----------------------------
# API key dependency
# ----------------------------


def require_api_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    """
    Simple header-based API key check. If TOOLKIT_API_KEY is not set,
    this becomes a no-op (open access).
    """
    api_key = load_config().api_key
    if not api_key:
        return

    if x_api_key != api_key:
        raise HTTPException(status_code=401, detail="Unauthorized")


# ----------------------------
# Shared collaborators
# ----------------------------

_job_backend: Optional[InProcessJobBackend] = None
_usage_recorder = InMemoryUsageRecorder()

ModelFactory = Callable[[Optional[str]], ModelClient]


def get_job_backend() -> InProcessJobBackend:
    global _job_backend
    if _job_backend is None:
        _job_backend = create_job_backend()
    return _job_backend


def get_model_factory() -> ModelFactory:
    return create_model_client


def get_document_store() -> DocumentStore:
    return DOCUMENT_STORE


def get_account_store() -> AccountStore:
    return EnvAccountStore()


def get_usage_recorder() -> UsageRecorder:
    return _usage_recorder
