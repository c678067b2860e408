from __future__ import annotations

from typing import Any, Dict

from toolkit_dev.toolkits.create_toolkit import create_client_toolkit
from toolkit_dev.toolkits.types import ClientToolConfig

from .base import GithubTools, github_toolkit_base


def _repos(result: Dict[str, Any]) -> str:
    repos = result.get("repositories") or []
    if not repos:
        return "No repositories found."
    return "\n".join(f"- {r['full_name']} ({r.get('stargazers_count', 0)} stars)" for r in repos)


def _user(result: Dict[str, Any]) -> str:
    user = result.get("user") or {}
    name = user.get("name") or user.get("login", "")
    return f"{name} (@{user.get('login', '')}), {user.get('public_repos', 0)} public repos"


github_toolkit_client = create_client_toolkit(
    github_toolkit_base,
    {
        GithubTools.SearchRepos.value: ClientToolConfig(
            call_view=lambda args: f"Searching GitHub for \"{args.get('query', '')}\"...",
            result_view=_repos,
        ),
        GithubTools.UserData.value: ClientToolConfig(
            call_view=lambda args: f"Fetching GitHub user {args.get('username', '')}...",
            result_view=_user,
        ),
        GithubTools.OrgData.value: ClientToolConfig(
            call_view=lambda args: f"Fetching organization {args.get('org', '')}...",
            result_view=lambda result: f"{result['org'].get('login', '')}\n{_repos(result)}",
        ),
    },
)
