from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

ArtifactKind = Literal["text", "code", "custom"]

ARTIFACT_KINDS = ("text", "code", "custom")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ArtifactDocument:
    id: str
    title: str
    content: str
    kind: ArtifactKind
    user_id: Optional[str] = None
    chat_id: Optional[str] = None
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "kind": self.kind,
            "userId": self.user_id,
            "chatId": self.chat_id,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
