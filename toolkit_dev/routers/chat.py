from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from toolkit_dev.agent.config import create_agent_config
from toolkit_dev.agent.jobs import AgentTaskPayload
from toolkit_dev.agent.runner import provider_model_name, run_agent
from toolkit_dev.artifacts.documents import DocumentStore
from toolkit_dev.deps import (
    ModelFactory,
    get_account_store,
    get_document_store,
    get_model_factory,
    get_usage_recorder,
    require_api_key,
)
from toolkit_dev.rate_limit import rate_limit
from toolkit_dev.tools.usage import UsageRecorder
from toolkit_dev.toolkits.credentials import AccountStore
from toolkit_dev.toolkits.types import SelectedToolkit, ToolkitContext

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/chat",
    tags=["chat"],
    dependencies=[Depends(require_api_key)],
)


class ChatRequest(AgentTaskPayload):
    toolkits: List[SelectedToolkit] = Field(default_factory=list)
    chat_id: Optional[str] = Field(default=None, alias="chatId")


@router.post("", dependencies=[Depends(rate_limit)])
async def chat(
    body: ChatRequest,
    accounts: AccountStore = Depends(get_account_store),
    documents: DocumentStore = Depends(get_document_store),
    recorder: UsageRecorder = Depends(get_usage_recorder),
    model_factory: ModelFactory = Depends(get_model_factory),
):
    """
    One agent turn: resolve the selected toolkits, let the model call tools
    until it answers, and return the answer with every tool result.
    """
    context = ToolkitContext(accounts=accounts, documents=documents, chat_id=body.chat_id)
    config = await create_agent_config(
        body.toolkits,
        body.selected_chat_model,
        use_native_search=body.use_native_search,
        system_prompt=body.system_prompt,
        context=context,
        recorder=recorder,
    )
    client = model_factory(provider_model_name(config))
    result = await run_agent(config, [m.model_dump() for m in body.messages], client)

    logger.info(
        "Chat turn done: model=%s tools=%d tool_calls=%d steps=%d",
        body.selected_chat_model,
        len(config.tools),
        len(result.tool_results),
        result.steps,
    )
    return {
        "success": True,
        "id": config.generate_message_id(),
        "response": result.text,
        "finishReason": result.finish_reason,
        "usage": result.usage,
        "toolResults": result.tool_results,
    }
