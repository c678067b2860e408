from __future__ import annotations

from .server import DataStream, TextStreamer, accumulate_deltas, create_document_handler
from .types import ArtifactDocument

CREATE_SYSTEM_PROMPT = """You are a skilled writer assistant. Generate high-quality written content based on the user's request.

Key guidelines:
- Create well-structured, engaging content
- Use appropriate tone and style for the context
- Include proper formatting with paragraphs and sections
- Make the content comprehensive and valuable
- Support markdown formatting when appropriate"""

UPDATE_SYSTEM_PROMPT = """You are a skilled editor and writer. You will receive existing content and instructions on how to modify it.

Guidelines:
- Preserve the original intent and style unless specifically asked to change it
- Make improvements that enhance clarity, readability, and impact
- Follow the user's specific instructions for modifications
- Maintain proper formatting and structure
- If asked to expand, add valuable and relevant content
- If asked to condense, preserve the most important information

Current content:
{content}"""


async def _create(title: str, data_stream: DataStream, model: TextStreamer) -> str:
    return await accumulate_deltas(model.stream_text(CREATE_SYSTEM_PROMPT, title), data_stream)


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
    return await accumulate_deltas(deltas, data_stream)


text_document_handler = create_document_handler("text", _create, _update)
