from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from toolkit_dev.model_client import ModelClient


class FakeModelClient(ModelClient):
    """Scripted model: chat() pops canned responses, stream_text() yields deltas."""

    def __init__(
        self,
        responses: Optional[List[Dict[str, Any]]] = None,
        deltas: Optional[List[str]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.responses = list(responses or [])
        self.deltas = list(deltas or [])
        self.error = error
        self.chat_calls: List[Dict[str, Any]] = []
        self.stream_calls: List[Dict[str, Any]] = []

    async def chat(self, messages, tools=None, temperature=0.5, **kwargs):
        self.chat_calls.append({"messages": [dict(m) for m in messages], "tools": tools})
        if not self.responses:
            return text_response("done")
        return self.responses.pop(0)

    async def stream_text(self, system, prompt, prediction=None):
        self.stream_calls.append({"system": system, "prompt": prompt, "prediction": prediction})
        for delta in self.deltas:
            yield delta
        if self.error is not None:
            raise self.error


def text_response(text: str, finish_reason: str = "stop") -> Dict[str, Any]:
    return {
        "choices": [{"message": {"role": "assistant", "content": text}, "finish_reason": finish_reason}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


def tool_call_response(*calls: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": f"call_{i}",
                            "type": "function",
                            "function": {"name": c["name"], "arguments": json.dumps(c.get("args", {}))},
                        }
                        for i, c in enumerate(calls)
                    ],
                },
                "finish_reason": "tool_calls",
            }
        ],
        "usage": {"prompt_tokens": 20, "completion_tokens": 8, "total_tokens": 28},
    }
