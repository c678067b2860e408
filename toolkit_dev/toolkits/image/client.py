from __future__ import annotations

from toolkit_dev.toolkits.create_toolkit import create_client_toolkit
from toolkit_dev.toolkits.types import ClientToolConfig

from .base import ImageTools, image_toolkit_base

image_toolkit_client = create_client_toolkit(
    image_toolkit_base,
    {
        ImageTools.Generate.value: ClientToolConfig(
            call_view=lambda args: f"Generating image: {args.get('prompt', '')}",
            result_view=lambda result: f"![generated image]({result['url']})",
        ),
    },
)
