from __future__ import annotations

import asyncio
from typing import Dict, Protocol, Tuple, runtime_checkable


@runtime_checkable
class UsageRecorder(Protocol):
    """
    Counts successful tool executions per (toolkit, tool).
    """

    async def record(self, toolkit_id: str, tool_name: str) -> None:
        ...


class InMemoryUsageRecorder:
    def __init__(self) -> None:
        self._counts: Dict[Tuple[str, str], int] = {}
        self._lock = asyncio.Lock()

    async def record(self, toolkit_id: str, tool_name: str) -> None:
        async with self._lock:
            key = (toolkit_id, tool_name)
            self._counts[key] = self._counts.get(key, 0) + 1

    def count(self, toolkit_id: str, tool_name: str) -> int:
        return self._counts.get((toolkit_id, tool_name), 0)

    def snapshot(self) -> Dict[str, int]:
        return {f"{tk}_{tool}": n for (tk, tool), n in sorted(self._counts.items())}
