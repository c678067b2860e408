from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel

from toolkit_dev.artifacts.documents import DocumentStore
from toolkit_dev.tools.types import ServerToolConfig
from toolkit_dev.toolkits.create_toolkit import create_server_toolkit
from toolkit_dev.toolkits.types import ToolkitContext

from .base import ArtifactTools, CreateArtifactInput, artifacts_toolkit_base


def create_artifact_server(store: DocumentStore, chat_id: Optional[str]) -> ServerToolConfig:
    async def callback(args: CreateArtifactInput) -> Dict[str, Any]:
        doc = store.create(
            title=args.title,
            kind=args.kind,
            content=args.content,
            chat_id=chat_id,
        )
        return {
            "document_id": doc.id,
            "title": doc.title,
            "kind": doc.kind,
            "description": args.description or f"Created {doc.kind} artifact: {doc.title}",
        }

    def message(result: Dict[str, Any]) -> str:
        return (
            f"I've created a {result['kind']} artifact titled \"{result['title']}\". "
            "You can view and edit it in the workspace panel."
        )

    return ServerToolConfig(callback=callback, message=message)


async def _artifact_tools(_params: BaseModel, ctx: ToolkitContext) -> Dict[str, ServerToolConfig]:
    store = ctx.documents if ctx.documents is not None else DocumentStore()
    return {ArtifactTools.CreateArtifact.value: create_artifact_server(store, ctx.chat_id)}


artifacts_toolkit_server = create_server_toolkit(
    artifacts_toolkit_base,
    "You can create artifacts: documents, code and other long-form content that the user "
    "views and edits in a workspace panel. Use them for substantial content only.",
    _artifact_tools,
)
