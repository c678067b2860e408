from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Union

from toolkit_dev.errors import MissingCredentialError, ToolkitDefinitionError
from toolkit_dev.tools.executor import execute_tool
from toolkit_dev.tools.types import ServerTool, ToolFailureClass, ToolResult
from toolkit_dev.tools.usage import UsageRecorder
from toolkit_dev.toolkits.create_toolkit import ServerToolkit
from toolkit_dev.toolkits.registry import get_server_toolkit
from toolkit_dev.toolkits.types import SelectedToolkit, ToolkitContext

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 15

TOOLKITS_HEADER = (
    "\n\n## Available Toolkits\n\n"
    "You have access to the following toolkits and their capabilities:\n\n"
)
FRAGMENT_DELIMITER = "\n\n---\n\n"


def default_base_system_prompt(now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime("%m/%d/%Y, %I:%M:%S %p")
    return (
        f"You are a helpful assistant. The current date and time is {stamp}. "
        "Whenever you are asked to write code, you must include a language with ```"
    )


ExecuteFn = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]


@dataclass(frozen=True)
class SimpleTool:
    """
    A tool reduced to what the agent loop needs.

    parameters is the JSON schema advertised to the model. execute takes raw
    call arguments and returns the payload sent back to the model.
    """
    name: str
    description: str
    parameters: Dict[str, Any]
    execute: ExecuteFn


@dataclass(frozen=True)
class SimpleToolkit:
    id: str
    system_prompt: str
    tools: List[SimpleTool] = field(default_factory=list)


def _new_message_id() -> str:
    return str(uuid.uuid4())


@dataclass
class CoreAgentConfig:
    tools: Dict[str, SimpleTool]
    system_prompt: str
    selected_chat_model: str
    use_native_search: bool = False
    max_steps: int = DEFAULT_MAX_STEPS
    tool_call_streaming: bool = True
    generate_message_id: Callable[[], str] = _new_message_id

    def tool_definitions(self) -> List[Dict[str, Any]]:
        """OpenAI-style function definitions, in registration order."""
        return [
            {
                "type": "function",
                "function": {
                    "name": name,
                    "description": tool.description,
                    "parameters": tool.parameters,
                },
            }
            for name, tool in self.tools.items()
        ]


def create_core_agent_config(
    toolkits: Sequence[SimpleToolkit],
    selected_chat_model: str,
    use_native_search: bool = False,
    system_prompt: Optional[str] = None,
    base_system_prompt: Optional[str] = None,
) -> CoreAgentConfig:
    """
    Namespace every tool as "{toolkit_id}_{tool_name}" and assemble the
    system prompt.

    With no toolkits the base prompt is returned verbatim (the caller suffix
    is only appended under the toolkit section). Toolkits with an empty
    fragment add no text but still contribute their tools.
    """
    base = default_base_system_prompt() if base_system_prompt is None else base_system_prompt

    tools: Dict[str, SimpleTool] = {}
    for toolkit in toolkits:
        for tool in toolkit.tools:
            qualified = f"{toolkit.id}_{tool.name}"
            if qualified in tools:
                raise ToolkitDefinitionError(f"Duplicate tool name: {qualified}")
            tools[qualified] = tool

    full_prompt = base
    if toolkits:
        fragments = [tk.system_prompt for tk in toolkits if tk.system_prompt]
        full_prompt = (
            base
            + TOOLKITS_HEADER
            + FRAGMENT_DELIMITER.join(fragments)
            + "\n\n"
            + (system_prompt or "")
        )

    return CoreAgentConfig(
        tools=tools,
        system_prompt=full_prompt,
        selected_chat_model=selected_chat_model,
        use_native_search=use_native_search,
    )


# ----------------------------
# Server toolkits -> simple toolkits
# ----------------------------


def _dispatch(tool: ServerTool, recorder: Optional[UsageRecorder]) -> ExecuteFn:
    async def execute(args: Dict[str, Any]) -> Dict[str, Any]:
        result = await execute_tool(tool, args, recorder=recorder)
        return result.to_payload()

    return execute


def _credential_stub(toolkit_id: str, tool_name: str, message: str) -> ExecuteFn:
    async def execute(args: Dict[str, Any]) -> Dict[str, Any]:
        return ToolResult(
            ok=False,
            tool_name=f"{toolkit_id}_{tool_name}",
            failure_class=ToolFailureClass.MISSING_CREDENTIAL,
            failure_message=message,
        ).to_payload()

    return execute


async def _simple_toolkit(
    toolkit: ServerToolkit,
    parameters: Mapping[str, Any],
    context: Optional[ToolkitContext],
    recorder: Optional[UsageRecorder],
) -> SimpleToolkit:
    try:
        server_tools = await toolkit.get_tools(parameters, context)
    except MissingCredentialError as exc:
        # The model still sees the tools; every call reports the missing account.
        logger.info("Toolkit %s unavailable: %s", toolkit.id, exc)
        return SimpleToolkit(
            id=toolkit.id,
            system_prompt=toolkit.system_prompt,
            tools=[
                SimpleTool(
                    name=name,
                    description=base.description,
                    parameters=base.input_model.model_json_schema(),
                    execute=_credential_stub(toolkit.id, name, str(exc)),
                )
                for name, base in toolkit.config.tools.items()
            ],
        )

    return SimpleToolkit(
        id=toolkit.id,
        system_prompt=toolkit.system_prompt,
        tools=[
            SimpleTool(
                name=name,
                description=tool.description,
                parameters=tool.parameters_schema(),
                execute=_dispatch(tool, recorder),
            )
            for name, tool in server_tools.items()
        ],
    )


SelectionLike = Union[SelectedToolkit, Mapping[str, Any]]


async def create_agent_config(
    selections: Sequence[SelectionLike],
    selected_chat_model: str,
    use_native_search: bool = False,
    system_prompt: Optional[str] = None,
    base_system_prompt: Optional[str] = None,
    context: Optional[ToolkitContext] = None,
    recorder: Optional[UsageRecorder] = None,
) -> CoreAgentConfig:
    """
    Resolve the user's toolkit selections and build the agent config.

    Toolkits are resolved concurrently; the result keeps selection order.
    Unknown ids raise UnknownToolkitError and invalid parameters raise
    ToolkitParameterError before any tool is built.
    """
    chosen = [
        s if isinstance(s, SelectedToolkit) else SelectedToolkit.model_validate(dict(s))
        for s in selections
    ]
    resolved = [(get_server_toolkit(s.id), s.parameters) for s in chosen]

    simple_toolkits = await asyncio.gather(
        *(_simple_toolkit(tk, params, context, recorder) for tk, params in resolved)
    )

    config = create_core_agent_config(
        list(simple_toolkits),
        selected_chat_model,
        use_native_search=use_native_search,
        system_prompt=system_prompt,
        base_system_prompt=base_system_prompt,
    )
    logger.debug(
        "Agent config for %s: %d toolkit(s), %d tool(s)",
        selected_chat_model,
        len(simple_toolkits),
        len(config.tools),
    )
    return config
