"""
Artifacts: documents (text, code, custom) generated from streamed model output.

A document handler consumes a live stream of text deltas exactly once,
forwarding each delta to the UI data stream while accumulating the final
content.
"""
from .types import ARTIFACT_KINDS, ArtifactDocument, ArtifactKind
from .documents import DocumentNotFoundError, DocumentStore
from .server import (
    DataStream,
    DocumentHandler,
    ListDataStream,
    accumulate_deltas,
    create_document_handler,
    get_document_handler,
)
