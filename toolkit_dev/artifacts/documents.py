from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .types import ARTIFACT_KINDS, ArtifactDocument, ArtifactKind


class DocumentNotFoundError(KeyError):
    pass


class DocumentStore:
    """
    In-process document storage. Persistence is an external concern; this
    keeps documents for the lifetime of the process only.
    """

    def __init__(self) -> None:
        self._docs: Dict[str, ArtifactDocument] = {}

    def create(
        self,
        title: str,
        kind: ArtifactKind,
        content: str = "",
        chat_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> ArtifactDocument:
        if kind not in ARTIFACT_KINDS:
            raise ValueError(f"Unknown artifact kind: {kind}")
        doc = ArtifactDocument(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            kind=kind,
            chat_id=chat_id,
            user_id=user_id,
        )
        self._docs[doc.id] = doc
        return doc

    def get(self, document_id: str) -> ArtifactDocument:
        doc = self._docs.get(document_id)
        if doc is None:
            raise DocumentNotFoundError(document_id)
        return doc

    def update_content(self, document_id: str, content: str) -> ArtifactDocument:
        doc = self.get(document_id)
        doc.content = content
        doc.updated_at = datetime.now(timezone.utc)
        return doc

    def list_for_chat(self, chat_id: str) -> List[ArtifactDocument]:
        return [d for d in self._docs.values() if d.chat_id == chat_id]

    def delete(self, document_id: str) -> None:
        self._docs.pop(document_id, None)
