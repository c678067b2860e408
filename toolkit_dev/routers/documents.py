from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from toolkit_dev.artifacts.documents import DocumentNotFoundError, DocumentStore
from toolkit_dev.artifacts.server import ListDataStream, get_document_handler
from toolkit_dev.artifacts.types import ArtifactKind
from toolkit_dev.deps import ModelFactory, get_document_store, get_model_factory, require_api_key
from toolkit_dev.rate_limit import rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/documents",
    tags=["documents"],
    dependencies=[Depends(require_api_key)],
)


class CreateDocumentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    kind: ArtifactKind = "text"
    chat_id: Optional[str] = Field(default=None, alias="chatId")
    model: Optional[str] = None


class UpdateDocumentRequest(BaseModel):
    description: str = Field(min_length=1)
    model: Optional[str] = None


def _load(store: DocumentStore, document_id: str):
    try:
        return store.get(document_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail="Document not found")


@router.post("", dependencies=[Depends(rate_limit)])
async def create_document(
    body: CreateDocumentRequest,
    store: DocumentStore = Depends(get_document_store),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    handler = get_document_handler(body.kind)
    stream = ListDataStream()
    doc = store.create(title=body.title, kind=body.kind, chat_id=body.chat_id)

    try:
        content = await handler.create(body.title, stream, model_factory(body.model))
    except Exception:
        store.delete(doc.id)
        raise
    doc = store.update_content(doc.id, content)
    logger.info("Created %s document %s (%d chars)", doc.kind, doc.id, len(content))
    return {"success": True, "document": doc.to_dict(), "parts": stream.parts}


@router.get("/{document_id}")
def get_document(document_id: str, store: DocumentStore = Depends(get_document_store)):
    return {"success": True, "document": _load(store, document_id).to_dict()}


@router.post("/{document_id}/update", dependencies=[Depends(rate_limit)])
async def update_document(
    document_id: str,
    body: UpdateDocumentRequest,
    store: DocumentStore = Depends(get_document_store),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    doc = _load(store, document_id)
    handler = get_document_handler(doc.kind)
    stream = ListDataStream()

    content = await handler.update(doc, body.description, stream, model_factory(body.model))
    doc = store.update_content(doc.id, content)
    logger.info("Updated %s document %s (%d chars)", doc.kind, doc.id, len(content))
    return {"success": True, "document": doc.to_dict(), "parts": stream.parts}
