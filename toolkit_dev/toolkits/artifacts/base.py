from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from toolkit_dev.artifacts.types import ArtifactKind
from toolkit_dev.tools.types import create_base_tool
from toolkit_dev.toolkits.types import ToolkitConfig, Toolkits


class ArtifactTools(str, Enum):
    CreateArtifact = "create-artifact"


class CreateArtifactInput(BaseModel):
    title: str = Field(min_length=1, description="A clear, descriptive title for the artifact")
    kind: ArtifactKind = Field(description="The type of artifact to create")
    content: str = Field(description="The full content for the artifact")
    description: Optional[str] = Field(
        default=None, description="Optional description of what was created"
    )


class CreateArtifactOutput(BaseModel):
    document_id: str
    title: str
    kind: ArtifactKind
    description: str


CREATE_ARTIFACT_DESCRIPTION = """Create an artifact for content that should be displayed in a workspace-like interface.

Use this tool when the user asks for:
- Text content like essays, emails, documents, or long-form writing
- Code snippets, scripts, or programming examples
- Custom structured content that would benefit from a dedicated workspace

Do not use it for short answers, conversational replies or basic explanations.

The artifact will be rendered in a special interface alongside the chat."""


artifacts_toolkit_base = ToolkitConfig(
    id=Toolkits.Artifacts,
    name="Artifacts",
    description="Create documents and code in a workspace next to the chat.",
    tools={
        ArtifactTools.CreateArtifact.value: create_base_tool(
            CREATE_ARTIFACT_DESCRIPTION,
            CreateArtifactInput,
            CreateArtifactOutput,
        ),
    },
)
