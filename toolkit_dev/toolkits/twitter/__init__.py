"""
Twitter toolkit: read-only access to the Twitter API v2 (search, tweets,
users, timelines, follower graphs).

Requires a linked Twitter account.
"""
from .base import twitter_toolkit_base, TwitterTools
from .server import twitter_toolkit_server
from .client import twitter_toolkit_client
