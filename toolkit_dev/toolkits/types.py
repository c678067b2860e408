from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional, Type, Union

import httpx
from pydantic import BaseModel, Field

from toolkit_dev.config import ImageConfig, load_image_config
from toolkit_dev.tools.types import BaseTool, ServerToolConfig

if TYPE_CHECKING:
    from toolkit_dev.artifacts.documents import DocumentStore
    from toolkit_dev.toolkits.credentials import AccountStore


class Toolkits(str, Enum):
    Spotify = "spotify"
    Twitter = "twitter"
    Github = "github"
    Image = "image"
    Artifacts = "artifacts"


def toolkit_key(toolkit_id: Union[Toolkits, str]) -> str:
    # str(Enum) renders "Toolkits.X"; tool names need the raw value.
    if isinstance(toolkit_id, Enum):
        return str(toolkit_id.value)
    return str(toolkit_id)


class EmptyParameters(BaseModel):
    """Parameter schema for toolkits that take no configuration."""
    pass


@dataclass(frozen=True)
class ToolkitConfig:
    """
    Client/server shared toolkit descriptor.

    tools maps the toolkit-local tool name to its shared definition.
    parameters is the pydantic model selected parameters must satisfy.
    required_provider names the linked account the server side needs, if any.
    """
    id: Union[Toolkits, str]
    name: str
    description: str
    tools: Dict[str, BaseTool]
    parameters: Type[BaseModel] = EmptyParameters
    required_provider: Optional[str] = None

    @property
    def key(self) -> str:
        return toolkit_key(self.id)

    def tool_names(self) -> List[str]:
        return list(self.tools.keys())


@dataclass
class ToolkitContext:
    """
    Per-request collaborators handed to server toolkit factories.

    transport is injectable so vendor calls can be served by httpx.MockTransport.
    """
    accounts: "AccountStore"
    image: ImageConfig = field(default_factory=load_image_config)
    documents: Optional["DocumentStore"] = None
    chat_id: Optional[str] = None
    transport: Optional[httpx.AsyncBaseTransport] = None

    def http_client(self, **kwargs: Any) -> httpx.AsyncClient:
        if self.transport is not None:
            kwargs.setdefault("transport", self.transport)
        return httpx.AsyncClient(**kwargs)


ToolsFactory = Callable[[BaseModel, ToolkitContext], Awaitable[Dict[str, ServerToolConfig]]]


# ----------------------------
# Client side
# ----------------------------

ViewFn = Callable[[Dict[str, Any]], str]


@dataclass(frozen=True)
class ClientToolConfig:
    """
    Rendering pair for one tool: the in-progress view receives the call
    arguments, the result view receives the validated result payload.
    """
    call_view: ViewFn
    result_view: ViewFn


# ----------------------------
# Request-side selection
# ----------------------------


class SelectedToolkit(BaseModel):
    """
    A toolkit chosen by the user for one conversation, as serialized in the
    chat request payload: `{ id, toolkit, parameters }`.
    """
    id: Toolkits
    toolkit: Optional[Dict[str, Any]] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)
