from __future__ import annotations

from toolkit_dev.toolkits.create_toolkit import create_client_toolkit
from toolkit_dev.toolkits.types import ClientToolConfig

from .base import ArtifactTools, artifacts_toolkit_base

artifacts_toolkit_client = create_client_toolkit(
    artifacts_toolkit_base,
    {
        ArtifactTools.CreateArtifact.value: ClientToolConfig(
            call_view=lambda args: f"Creating {args.get('kind', 'text')} artifact: {args.get('title', '')}",
            result_view=lambda result: f"Created artifact \"{result['title']}\"",
        ),
    },
)
