from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Protocol

from .types import ArtifactDocument, ArtifactKind

CONTENT_UPDATE = "content-update"


class DataStream(Protocol):
    """Sink for UI stream parts: {"type": ..., "content": ...}."""

    def write_data(self, data: Dict[str, Any]) -> None:
        ...


class ListDataStream:
    """DataStream that keeps every part in order."""

    def __init__(self) -> None:
        self.parts: List[Dict[str, Any]] = []

    def write_data(self, data: Dict[str, Any]) -> None:
        self.parts.append(dict(data))

    def of_type(self, part_type: str) -> List[Dict[str, Any]]:
        return [p for p in self.parts if p.get("type") == part_type]


class TextStreamer(Protocol):
    """
    Anything that can stream generated text as deltas. The returned iterator
    is live and can be consumed once.
    """

    def stream_text(
        self,
        system: str,
        prompt: str,
        prediction: Optional[str] = None,
    ) -> AsyncIterator[str]:
        ...


async def accumulate_deltas(
    deltas: AsyncIterator[str],
    data_stream: DataStream,
    on_delta: Optional[Callable[[str], None]] = None,
) -> str:
    """
    Drain a delta stream into a single string.

    Every delta is forwarded as a content-update part before the next one is
    read. on_delta sees the draft so far (including the new delta) before that
    delta is forwarded. Errors from the stream propagate unchanged; parts
    already forwarded stay forwarded.
    """
    draft: List[str] = []
    async for delta in deltas:
        draft.append(delta)
        if on_delta is not None:
            on_delta("".join(draft))
        data_stream.write_data({"type": CONTENT_UPDATE, "content": delta})
    return "".join(draft)


CreateDocumentFn = Callable[[str, DataStream, TextStreamer], Awaitable[str]]
UpdateDocumentFn = Callable[[ArtifactDocument, str, DataStream, TextStreamer], Awaitable[str]]


@dataclass(frozen=True)
class DocumentHandler:
    kind: ArtifactKind
    on_create_document: CreateDocumentFn
    on_update_document: UpdateDocumentFn

    async def create(self, title: str, data_stream: DataStream, model: TextStreamer) -> str:
        return await self.on_create_document(title, data_stream, model)

    async def update(
        self,
        document: ArtifactDocument,
        description: str,
        data_stream: DataStream,
        model: TextStreamer,
    ) -> str:
        return await self.on_update_document(document, description, data_stream, model)


def create_document_handler(
    kind: ArtifactKind,
    on_create_document: CreateDocumentFn,
    on_update_document: UpdateDocumentFn,
) -> DocumentHandler:
    return DocumentHandler(
        kind=kind,
        on_create_document=on_create_document,
        on_update_document=on_update_document,
    )


def get_document_handler(kind: str) -> DocumentHandler:
    from .registry import DOCUMENT_HANDLERS

    handler = DOCUMENT_HANDLERS.get(kind)
    if handler is None:
        raise KeyError(f"No document handler for kind: {kind}")
    return handler
