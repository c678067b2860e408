from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from toolkit_dev.tools.types import create_base_tool
from toolkit_dev.toolkits.types import ToolkitConfig, Toolkits

SUPPORTED_IMAGE_PROVIDERS = ("openai",)


class ImageTools(str, Enum):
    Generate = "generate"


class ImageParameters(BaseModel):
    model: str = Field(
        default="openai:dall-e-3",
        description="Image model as '<provider>:<model id>'",
    )

    @field_validator("model")
    @classmethod
    def _provider_supported(cls, value: str) -> str:
        provider, sep, model_id = value.partition(":")
        if not sep or not model_id:
            raise ValueError("model must look like '<provider>:<model id>'")
        if provider not in SUPPORTED_IMAGE_PROVIDERS:
            raise ValueError(f"unsupported image provider '{provider}'")
        return value

    @property
    def model_id(self) -> str:
        return self.model.partition(":")[2]


class GenerateInput(BaseModel):
    prompt: str = Field(min_length=1, description="A detailed description of the image to generate")


class GenerateOutput(BaseModel):
    url: str


image_toolkit_base = ToolkitConfig(
    id=Toolkits.Image,
    name="Image Generation",
    description="Generate images from text prompts.",
    tools={
        ImageTools.Generate.value: create_base_tool(
            "Generate an image from a text prompt.",
            GenerateInput,
            GenerateOutput,
        ),
    },
    parameters=ImageParameters,
)
