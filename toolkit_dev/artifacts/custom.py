from __future__ import annotations

from .server import DataStream, TextStreamer, accumulate_deltas, create_document_handler
from .types import ArtifactDocument

INFO_UPDATE = "info-update"

CREATE_SYSTEM_PROMPT = """You are a creative AI assistant capable of generating diverse custom content. Generate engaging and unique content based on the user's request.

Key guidelines:
- Adapt your response to the specific context and requirements
- Create content that is both informative and engaging
- Use appropriate formatting and structure
- Support various content types: lists, guides, templates, etc."""

UPDATE_SYSTEM_PROMPT = """You are a creative AI assistant that specializes in enhancing and modifying custom content. You will receive existing content and instructions on how to modify it.

Guidelines:
- Follow the user's specific modification requests
- Enhance the content while preserving its core purpose
- Ensure the modified content is coherent and well-structured

Current content:
{content}"""


def _word_count(text: str) -> int:
    return len(text.split(" "))


async def _create(title: str, data_stream: DataStream, model: TextStreamer) -> str:
    content = await accumulate_deltas(model.stream_text(CREATE_SYSTEM_PROMPT, title), data_stream)
    data_stream.write_data(
        {"type": INFO_UPDATE, "content": f"Custom artifact created with {_word_count(content)} words"}
    )
    return content


async def _update(
    document: ArtifactDocument,
    description: str,
    data_stream: DataStream,
    model: TextStreamer,
) -> str:
    deltas = model.stream_text(
        UPDATE_SYSTEM_PROMPT.format(content=document.content),
        description,
        prediction=document.content,
    )
    content = await accumulate_deltas(deltas, data_stream)
    data_stream.write_data(
        {"type": INFO_UPDATE, "content": f"Custom artifact updated with {_word_count(content)} words"}
    )
    return content


custom_document_handler = create_document_handler("custom", _create, _update)
