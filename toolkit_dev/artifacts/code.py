from __future__ import annotations

import re
from typing import Optional

from .server import DataStream, TextStreamer, accumulate_deltas, create_document_handler
from .types import ArtifactDocument

LANGUAGE_UPDATE = "language-update"

# Minimum draft length before language detection is attempted.
DETECT_AFTER_CHARS = 20

CREATE_SYSTEM_PROMPT = """You are an expert software developer. Generate high-quality, working code based on the user's request.

Key guidelines:
- Write clean, readable, and well-documented code
- Follow best practices and conventions for the target language
- Include helpful comments explaining complex logic
- Make the code functional and ready to run
- Use appropriate error handling where needed
- If multiple languages could work, choose the most appropriate one
- Start with a language detection comment like: // Language: JavaScript

Format your response as clean code without markdown code blocks."""

UPDATE_SYSTEM_PROMPT = """You are an expert software developer and code reviewer. You will receive existing code and instructions on how to modify it.

Guidelines:
- Maintain code quality and best practices
- Preserve working functionality unless specifically asked to change it
- Follow the existing code style and conventions
- Make sure the modified code is functional and ready to run

Current code:
```
{content}
```

Format your response as clean code without markdown code blocks."""

_LANGUAGE_COMMENT = re.compile(r"//\s*language:\s*(\w+)")


def detect_language(code: str) -> Optional[str]:
    content = code.lower().strip()

    match = _LANGUAGE_COMMENT.search(content)
    if match:
        return match.group(1)

    if "def " in content or "import " in content or "print(" in content:
        return "python"
    if "function " in content or "const " in content or "console.log" in content:
        return "javascript"
    if "interface " in content or "type " in content or ": string" in content:
        return "typescript"
    if "<!doctype" in content or "<html" in content:
        return "html"
    if "select " in content or "from " in content or "where " in content:
        return "sql"
    if "{" in content and ":" in content and "}" in content:
        return "json"

    return None


async def _create(title: str, data_stream: DataStream, model: TextStreamer) -> str:
    detected = False

    def _on_delta(draft: str) -> None:
        nonlocal detected
        if detected or len(draft) <= DETECT_AFTER_CHARS:
            return
        language = detect_language(draft)
        if language:
            data_stream.write_data({"type": LANGUAGE_UPDATE, "content": language})
            detected = True

    return await accumulate_deltas(
        model.stream_text(CREATE_SYSTEM_PROMPT, title),
        data_stream,
        on_delta=_on_delta,
    )


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


code_document_handler = create_document_handler("code", _create, _update)
