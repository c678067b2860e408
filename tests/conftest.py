from __future__ import annotations

import pytest

from toolkit_dev.toolkits.credentials import Account, InMemoryAccountStore


@pytest.fixture
def accounts() -> InMemoryAccountStore:
    store = InMemoryAccountStore()
    for provider in ("github", "spotify", "twitter"):
        store.link(Account(provider=provider, access_token=f"{provider}-token"))
    return store


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "TOOLKIT_API_KEY",
        "TOOLKIT_LLM_API_KEY",
        "TOOLKIT_IMAGE_API_KEY",
        "GITHUB_ACCESS_TOKEN",
        "SPOTIFY_ACCESS_TOKEN",
        "TWITTER_ACCESS_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
