from __future__ import annotations

from typing import Dict, List, Sequence, TypeVar, Union

from toolkit_dev.artifacts.documents import DocumentStore
from toolkit_dev.errors import ToolkitDefinitionError, UnknownToolkitError
from toolkit_dev.toolkits.create_toolkit import ClientToolkit, ServerToolkit
from toolkit_dev.toolkits.credentials import EnvAccountStore
from toolkit_dev.toolkits.types import ToolkitContext, Toolkits, toolkit_key

from .artifacts import artifacts_toolkit_client, artifacts_toolkit_server
from .github import github_toolkit_client, github_toolkit_server
from .image import image_toolkit_client, image_toolkit_server
from .spotify import spotify_toolkit_client, spotify_toolkit_server
from .twitter import twitter_toolkit_client, twitter_toolkit_server

T = TypeVar("T", ServerToolkit, ClientToolkit)


def _index(toolkits: Sequence[T]) -> Dict[str, T]:
    out: Dict[str, T] = {}
    for tk in toolkits:
        if tk.id in out:
            raise ToolkitDefinitionError(f"Duplicate toolkit id: {tk.id}")
        out[tk.id] = tk

    missing = sorted({t.value for t in Toolkits} - set(out))
    if missing:
        raise ToolkitDefinitionError(f"Toolkits without a registered implementation: {', '.join(missing)}")
    return out


SERVER_TOOLKITS: Dict[str, ServerToolkit] = _index([
    spotify_toolkit_server,
    twitter_toolkit_server,
    github_toolkit_server,
    image_toolkit_server,
    artifacts_toolkit_server,
])

CLIENT_TOOLKITS: Dict[str, ClientToolkit] = _index([
    spotify_toolkit_client,
    twitter_toolkit_client,
    github_toolkit_client,
    image_toolkit_client,
    artifacts_toolkit_client,
])

DOCUMENT_STORE = DocumentStore()


def default_context() -> ToolkitContext:
    """Context for callers that carry no per-user state: env tokens, shared documents."""
    return ToolkitContext(accounts=EnvAccountStore(), documents=DOCUMENT_STORE)


def get_server_toolkit(toolkit_id: Union[Toolkits, str]) -> ServerToolkit:
    key = toolkit_key(toolkit_id)
    try:
        return SERVER_TOOLKITS[key]
    except KeyError:
        raise UnknownToolkitError(key) from None


def get_client_toolkit(toolkit_id: Union[Toolkits, str]) -> ClientToolkit:
    key = toolkit_key(toolkit_id)
    try:
        return CLIENT_TOOLKITS[key]
    except KeyError:
        raise UnknownToolkitError(key) from None


def list_toolkits() -> List[dict]:
    """Catalog of toolkits with their tools, as served to the toolkit picker."""
    catalog: List[dict] = []
    for key, tk in SERVER_TOOLKITS.items():
        cfg = tk.config
        catalog.append(
            {
                "id": key,
                "name": cfg.name,
                "description": cfg.description,
                "requiredProvider": cfg.required_provider,
                "parameters": cfg.parameters.model_json_schema(),
                "tools": [
                    {"name": name, "description": tool.description}
                    for name, tool in cfg.tools.items()
                ],
            }
        )
    return catalog
