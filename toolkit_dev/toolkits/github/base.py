from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from toolkit_dev.tools.types import create_base_tool
from toolkit_dev.toolkits.types import EmptyParameters, ToolkitConfig, Toolkits


class GithubTools(str, Enum):
    SearchRepos = "search-repos"
    UserData = "get-user-data"
    OrgData = "get-org"


class SearchReposInput(BaseModel):
    query: str = Field(min_length=1, description="GitHub repository search query, e.g. 'language:python stars:>1000'")
    per_page: int = Field(default=10, ge=1, le=100, description="Number of repositories to return")
    page: int = Field(default=1, ge=1)


class Repository(BaseModel):
    full_name: str
    description: Optional[str] = None
    html_url: str
    stargazers_count: int = 0
    forks_count: int = 0
    language: Optional[str] = None
    updated_at: Optional[str] = None


class SearchReposOutput(BaseModel):
    total_count: int
    repositories: List[Repository]


class UserDataInput(BaseModel):
    username: str = Field(min_length=1, description="The GitHub username to get profile data for")


class GithubUser(BaseModel):
    login: str
    name: Optional[str] = None
    avatar_url: str
    bio: Optional[str] = None
    location: Optional[str] = None
    company: Optional[str] = None
    blog: Optional[str] = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: str


class UserDataOutput(BaseModel):
    user: GithubUser


class OrgInput(BaseModel):
    org: str = Field(min_length=1, description="The GitHub organization login")


class GithubOrg(BaseModel):
    login: str
    name: Optional[str] = None
    description: Optional[str] = None
    avatar_url: str
    html_url: str
    public_repos: int = 0
    followers: int = 0


class OrgOutput(BaseModel):
    org: GithubOrg
    repositories: List[Repository]


github_toolkit_base = ToolkitConfig(
    id=Toolkits.Github,
    name="GitHub",
    description="Search repositories and look up GitHub users and organizations.",
    tools={
        GithubTools.SearchRepos.value: create_base_tool(
            "Search GitHub repositories.",
            SearchReposInput,
            SearchReposOutput,
        ),
        GithubTools.UserData.value: create_base_tool(
            "Get profile information for a GitHub user.",
            UserDataInput,
            UserDataOutput,
        ),
        GithubTools.OrgData.value: create_base_tool(
            "Get an organization's profile and its most recently updated repositories.",
            OrgInput,
            OrgOutput,
        ),
    },
    parameters=EmptyParameters,
    required_provider="github",
)
