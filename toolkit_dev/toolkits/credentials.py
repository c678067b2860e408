from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, runtime_checkable

from toolkit_dev.errors import MissingCredentialError


@dataclass(frozen=True)
class Account:
    provider: str
    access_token: str
    refresh_token: Optional[str] = None
    provider_account_id: Optional[str] = None


@runtime_checkable
class AccountStore(Protocol):
    """
    Source of linked third-party accounts (OAuth tokens) for the current user.
    """

    async def get_account_by_provider(self, provider: str) -> Optional[Account]:
        ...


class EnvAccountStore:
    """
    Reads `<PROVIDER>_ACCESS_TOKEN` from the environment. Intended for
    single-user deployments and background runs.
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None) -> None:
        self._environ = environ if environ is not None else os.environ

    async def get_account_by_provider(self, provider: str) -> Optional[Account]:
        key = provider.upper().replace("-", "_")
        token = (self._environ.get(f"{key}_ACCESS_TOKEN") or "").strip()
        if not token:
            return None
        refresh = (self._environ.get(f"{key}_REFRESH_TOKEN") or "").strip() or None
        return Account(provider=provider, access_token=token, refresh_token=refresh)


class InMemoryAccountStore:
    def __init__(self, accounts: Optional[Dict[str, Account]] = None) -> None:
        self._accounts: Dict[str, Account] = dict(accounts or {})

    def link(self, account: Account) -> None:
        self._accounts[account.provider] = account

    async def get_account_by_provider(self, provider: str) -> Optional[Account]:
        return self._accounts.get(provider)


async def require_account(store: AccountStore, provider: str, display_name: Optional[str] = None) -> Account:
    """
    Fetch a linked account or raise MissingCredentialError with a
    user-facing message.
    """
    account = await store.get_account_by_provider(provider)
    if account is None or not account.access_token:
        label = display_name or provider.capitalize()
        raise MissingCredentialError(
            provider,
            f"No {label} account found. Please connect your {label} account first.",
        )
    return account
