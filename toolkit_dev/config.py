from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


# ----------------------------
# Environment & configuration
# ----------------------------


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or "").strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class LLMConfig:
    api_base: str
    api_key: str
    model: str
    timeout: float = 60.0


@dataclass(frozen=True)
class ImageConfig:
    api_base: str
    api_key: str
    timeout: float = 120.0


@dataclass(frozen=True)
class RateLimitConfig:
    max_requests: int = 10
    window_seconds: int = 15 * 60


@dataclass(frozen=True)
class AppConfig:
    api_key: Optional[str]
    llm: LLMConfig
    image: ImageConfig
    rate_limit: RateLimitConfig
    log_level: str = "INFO"


def load_llm_config() -> LLMConfig:
    return LLMConfig(
        api_base=_env("TOOLKIT_LLM_API_BASE", "https://openrouter.ai/api/v1").rstrip("/"),
        api_key=_env("TOOLKIT_LLM_API_KEY"),
        model=_env("TOOLKIT_LLM_MODEL", "openai/gpt-4o"),
    )


def load_image_config() -> ImageConfig:
    return ImageConfig(
        api_base=_env("TOOLKIT_IMAGE_API_BASE", "https://api.openai.com/v1").rstrip("/"),
        api_key=_env("TOOLKIT_IMAGE_API_KEY"),
    )


def load_config() -> AppConfig:
    """
    Read the full service configuration from the environment.

    TOOLKIT_API_KEY unset means the HTTP surface is open (no 401s).
    """
    return AppConfig(
        api_key=_env("TOOLKIT_API_KEY") or None,
        llm=load_llm_config(),
        image=load_image_config(),
        rate_limit=RateLimitConfig(
            max_requests=_env_int("TOOLKIT_RATE_LIMIT_MAX", 10),
            window_seconds=_env_int("TOOLKIT_RATE_LIMIT_WINDOW_SECONDS", 15 * 60),
        ),
        log_level=_env("TOOLKIT_LOG_LEVEL", "INFO").upper(),
    )
