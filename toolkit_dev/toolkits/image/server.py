from __future__ import annotations

from typing import Any, Dict

from toolkit_dev.errors import MissingCredentialError, ToolUpstreamError
from toolkit_dev.tools.types import ServerToolConfig
from toolkit_dev.toolkits.create_toolkit import create_server_toolkit
from toolkit_dev.toolkits.http import VendorClient
from toolkit_dev.toolkits.types import ToolkitContext

from .base import GenerateInput, ImageParameters, ImageTools, image_toolkit_base


def generate_server(api: VendorClient, parameters: ImageParameters) -> ServerToolConfig:
    async def callback(args: GenerateInput) -> Dict[str, Any]:
        data = await api.post(
            "/images/generations",
            json_body={"model": parameters.model_id, "prompt": args.prompt, "n": 1},
        ) or {}
        images = data.get("data") or []
        if not images:
            raise ToolUpstreamError("No image generated")
        first = images[0]
        if first.get("url"):
            return {"url": first["url"]}
        if first.get("b64_json"):
            return {"url": f"data:image/png;base64,{first['b64_json']}"}
        raise ToolUpstreamError("Image provider returned neither a URL nor image data")

    return ServerToolConfig(
        callback=callback,
        message="The image is shown to the user in the UI. Do not repeat its URL.",
    )


async def _image_tools(params: ImageParameters, ctx: ToolkitContext) -> Dict[str, ServerToolConfig]:
    if not ctx.image.api_key:
        raise MissingCredentialError(
            "image",
            "Image generation is not configured. Set TOOLKIT_IMAGE_API_KEY to enable it.",
        )
    api = VendorClient(
        "Image provider",
        ctx.image.api_base,
        {"Authorization": f"Bearer {ctx.image.api_key}"},
        ctx,
        timeout=ctx.image.timeout,
    )
    return {ImageTools.Generate.value: generate_server(api, params)}


image_toolkit_server = create_server_toolkit(
    image_toolkit_base,
    "You have access to image generation. When the user asks for a picture, "
    "write a detailed prompt and call the generate tool.",
    _image_tools,
)
