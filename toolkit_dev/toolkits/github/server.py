from __future__ import annotations

from typing import Any, Dict, Tuple

from pydantic import BaseModel

from toolkit_dev.tools.types import ServerToolConfig
from toolkit_dev.toolkits.create_toolkit import create_server_toolkit
from toolkit_dev.toolkits.credentials import require_account
from toolkit_dev.toolkits.http import VendorClient
from toolkit_dev.toolkits.types import ToolkitContext

from .base import GithubTools, OrgInput, SearchReposInput, UserDataInput, github_toolkit_base

GITHUB_API_BASE = "https://api.github.com"

_REPO_FIELDS = ("full_name", "description", "html_url", "stargazers_count", "forks_count", "language", "updated_at")
_USER_FIELDS = (
    "login", "name", "avatar_url", "bio", "location", "company", "blog",
    "public_repos", "followers", "following", "created_at",
)
_ORG_FIELDS = ("login", "name", "description", "avatar_url", "html_url", "public_repos", "followers")


def _pick(data: Dict[str, Any], fields: Tuple[str, ...]) -> Dict[str, Any]:
    return {k: data.get(k) for k in fields if data.get(k) is not None}


def search_repos_server(api: VendorClient) -> ServerToolConfig:
    async def callback(args: SearchReposInput) -> Dict[str, Any]:
        data = await api.get(
            "/search/repositories",
            params={"q": args.query, "per_page": args.per_page, "page": args.page},
        ) or {}
        return {
            "total_count": data.get("total_count", 0),
            "repositories": [_pick(r, _REPO_FIELDS) for r in data.get("items") or []],
        }

    return ServerToolConfig(
        callback=callback,
        message=lambda result: f"Found {result['total_count']} repositories",
    )


def user_data_server(api: VendorClient) -> ServerToolConfig:
    async def callback(args: UserDataInput) -> Dict[str, Any]:
        user = await api.get(f"/users/{args.username}") or {}
        return {"user": _pick(user, _USER_FIELDS)}

    return ServerToolConfig(
        callback=callback,
        message=(
            "The user is shown all of the profile data in the UI. Do not reiterate it. "
            "Give a 1-2 sentence summary of the user and ask the user what they would like to do next."
        ),
    )


def org_server(api: VendorClient) -> ServerToolConfig:
    async def callback(args: OrgInput) -> Dict[str, Any]:
        org = await api.get(f"/orgs/{args.org}") or {}
        repos = await api.get(f"/orgs/{args.org}/repos", params={"sort": "updated", "per_page": 10}) or []
        return {
            "org": _pick(org, _ORG_FIELDS),
            "repositories": [_pick(r, _REPO_FIELDS) for r in repos],
        }

    return ServerToolConfig(callback=callback)


async def _github_tools(_params: BaseModel, ctx: ToolkitContext) -> Dict[str, ServerToolConfig]:
    account = await require_account(ctx.accounts, "github", "GitHub")
    api = VendorClient(
        "GitHub",
        GITHUB_API_BASE,
        {
            "Authorization": f"Bearer {account.access_token}",
            "Accept": "application/vnd.github+json",
        },
        ctx,
    )
    return {
        GithubTools.SearchRepos.value: search_repos_server(api),
        GithubTools.UserData.value: user_data_server(api),
        GithubTools.OrgData.value: org_server(api),
    }


github_toolkit_server = create_server_toolkit(
    github_toolkit_base,
    "You have access to the GitHub toolkit. Use it to search repositories and to "
    "look up users and organizations.",
    _github_tools,
)
