from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from toolkit_dev.agent.config import CoreAgentConfig
from toolkit_dev.model_client import ModelClient, ModelClientError, create_model_client
from toolkit_dev.tools.types import ToolFailureClass

logger = logging.getLogger(__name__)


@dataclass
class AgentResult:
    text: str
    finish_reason: str
    usage: Dict[str, int] = field(default_factory=dict)
    tool_results: List[Dict[str, Any]] = field(default_factory=list)
    steps: int = 0


def provider_model_name(config: CoreAgentConfig) -> str:
    # OpenRouter exposes provider-side web search as a ":search" model variant.
    if config.use_native_search:
        return f"{config.selected_chat_model}:search"
    return config.selected_chat_model


def client_for(config: CoreAgentConfig) -> ModelClient:
    return create_model_client(provider_model_name(config))


def _failure(cls: ToolFailureClass, message: str) -> Dict[str, Any]:
    return {"success": False, "message": message, "error": cls.value}


def _add_usage(total: Dict[str, int], usage: Optional[Dict[str, Any]]) -> None:
    for key in ("prompt_tokens", "completion_tokens", "total_tokens"):
        value = (usage or {}).get(key)
        if isinstance(value, int):
            total[key] = total.get(key, 0) + value


async def _run_tool_call(config: CoreAgentConfig, call: Dict[str, Any]) -> Dict[str, Any]:
    fn = call.get("function") or {}
    name = fn.get("name") or ""
    raw_args = fn.get("arguments") or "{}"

    try:
        args = json.loads(raw_args) if isinstance(raw_args, str) else dict(raw_args)
    except (TypeError, ValueError):
        args = None

    tool = config.tools.get(name)
    if tool is None:
        payload = _failure(ToolFailureClass.TOOL_NOT_ALLOWED, f"Unknown tool: {name}")
    elif not isinstance(args, dict):
        payload = _failure(ToolFailureClass.TOOL_BAD_INPUT, "Tool arguments must be a JSON object")
    else:
        payload = await tool.execute(args)

    return {
        "toolCallId": call.get("id"),
        "toolName": name,
        "args": args,
        "result": payload,
    }


async def run_agent(
    config: CoreAgentConfig,
    messages: List[Dict[str, Any]],
    client: Optional[ModelClient] = None,
) -> AgentResult:
    """
    Tool-calling loop.

    Each step sends the conversation to the model. Tool calls requested in one
    step run concurrently and their payloads are appended as tool messages.
    The loop ends when the model answers without tool calls or after
    config.max_steps steps, whichever comes first.
    """
    client = client or client_for(config)
    tools = config.tool_definitions() or None

    convo: List[Dict[str, Any]] = [{"role": "system", "content": config.system_prompt}]
    convo.extend(messages)

    usage: Dict[str, int] = {}
    tool_results: List[Dict[str, Any]] = []
    text = ""
    finish_reason = "unknown"

    for step in range(1, config.max_steps + 1):
        data = await client.chat(convo, tools=tools)
        _add_usage(usage, data.get("usage"))

        choices = data.get("choices") or []
        if not choices:
            raise ModelClientError("LLM provider returned no choices")

        choice = choices[0]
        message = choice.get("message") or {}
        text = message.get("content") or ""
        finish_reason = choice.get("finish_reason") or "unknown"
        calls = message.get("tool_calls") or []

        if not calls:
            return AgentResult(text, finish_reason, usage, tool_results, step)

        logger.debug("Step %d: %d tool call(s)", step, len(calls))
        convo.append({"role": "assistant", "content": message.get("content"), "tool_calls": calls})

        step_results = await asyncio.gather(*(_run_tool_call(config, c) for c in calls))
        for res in step_results:
            tool_results.append(res)
            convo.append(
                {
                    "role": "tool",
                    "tool_call_id": res["toolCallId"],
                    "content": json.dumps(res["result"]),
                }
            )

    logger.info("Agent stopped after max_steps=%d", config.max_steps)
    return AgentResult(text, finish_reason, usage, tool_results, config.max_steps)
