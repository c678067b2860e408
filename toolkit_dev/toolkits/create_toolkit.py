from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ValidationError

from toolkit_dev.errors import ToolkitDefinitionError, ToolkitParameterError
from toolkit_dev.tools.types import ServerTool
from toolkit_dev.toolkits.types import (
    ClientToolConfig,
    ToolkitConfig,
    ToolkitContext,
    ToolsFactory,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerToolkit:
    """
    Server half of a toolkit: shared descriptor, the prompt fragment that
    describes the toolkit to the model, and a lazy factory that turns
    validated parameters into executable tools.
    """
    config: ToolkitConfig
    system_prompt: str
    factory: ToolsFactory

    @property
    def id(self) -> str:
        return self.config.key

    def validate_parameters(self, parameters: Optional[Mapping[str, Any]]) -> BaseModel:
        try:
            return self.config.parameters.model_validate(dict(parameters or {}))
        except ValidationError as exc:
            raise ToolkitParameterError(self.id, exc.errors(include_url=False, include_context=False)) from exc

    async def get_tools(
        self,
        parameters: Optional[Mapping[str, Any]] = None,
        context: Optional[ToolkitContext] = None,
    ) -> Dict[str, ServerTool]:
        """
        Resolve this toolkit into executable tools.

        Parameters are validated first. The factory then fetches any external
        credential it needs; if that raises, nothing is returned. Only tools the
        descriptor declares may come back.
        """
        params = self.validate_parameters(parameters)
        if context is None:
            from toolkit_dev.toolkits.registry import default_context

            context = default_context()

        server_configs = await self.factory(params, context)

        undeclared = sorted(set(server_configs) - set(self.config.tools))
        if undeclared:
            raise ToolkitDefinitionError(
                f"Toolkit '{self.id}' returned undeclared tools: {', '.join(undeclared)}"
            )

        tools: Dict[str, ServerTool] = {}
        for name in self.config.tools:
            server_config = server_configs.get(name)
            if server_config is None:
                continue
            base = self.config.tools[name]
            tools[name] = ServerTool(
                toolkit_id=self.id,
                name=name,
                description=base.description,
                input_model=base.input_model,
                output_model=base.output_model,
                callback=server_config.callback,
                message=server_config.message,
            )

        logger.debug("Resolved toolkit %s with %d tool(s)", self.id, len(tools))
        return tools


def create_server_toolkit(
    base_config: ToolkitConfig,
    system_prompt: str,
    factory: ToolsFactory,
) -> ServerToolkit:
    return ServerToolkit(config=base_config, system_prompt=system_prompt, factory=factory)


@dataclass(frozen=True)
class ClientToolkit:
    """Client half of a toolkit: descriptor plus per-tool rendering pairs."""
    config: ToolkitConfig
    views: Dict[str, ClientToolConfig]

    @property
    def id(self) -> str:
        return self.config.key

    def get_tool_views(self) -> Dict[str, ClientToolConfig]:
        return dict(self.views)

    def render_call(self, tool_name: str, args: Dict[str, Any]) -> str:
        view = self.views.get(tool_name)
        if view is None:
            return f"Running {self.config.name} {tool_name}..."
        return view.call_view(args)

    def render_result(self, tool_name: str, result: Dict[str, Any]) -> str:
        view = self.views.get(tool_name)
        if view is None:
            return f"{self.config.name} {tool_name} finished."
        return view.result_view(result)


def create_client_toolkit(
    base_config: ToolkitConfig,
    views: Dict[str, ClientToolConfig],
) -> ClientToolkit:
    undeclared = sorted(set(views) - set(base_config.tools))
    if undeclared:
        raise ToolkitDefinitionError(
            f"Client toolkit '{base_config.key}' renders undeclared tools: {', '.join(undeclared)}"
        )
    return ClientToolkit(config=base_config, views=dict(views))
