from __future__ import annotations

from typing import Dict

from .code import code_document_handler
from .custom import custom_document_handler
from .server import DocumentHandler
from .text import text_document_handler

DOCUMENT_HANDLERS: Dict[str, DocumentHandler] = {
    h.kind: h
    for h in (text_document_handler, code_document_handler, custom_document_handler)
}
