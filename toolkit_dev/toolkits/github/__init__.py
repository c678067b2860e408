"""
GitHub toolkit: repository search, user profiles and organizations.

Requires a linked GitHub account.
"""
from .base import github_toolkit_base, GithubTools
from .server import github_toolkit_server
from .client import github_toolkit_client
