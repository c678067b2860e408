from __future__ import annotations

from typing import Any, Dict

from toolkit_dev.toolkits.create_toolkit import create_client_toolkit
from toolkit_dev.toolkits.types import ClientToolConfig

from .base import TwitterTools, twitter_toolkit_base


def _tweets(result: Dict[str, Any]) -> str:
    tweets = result.get("tweets") or []
    if not tweets:
        return "No tweets found."
    return "\n".join(f"@{t['author_username'] or '?'}: {t['text']}" for t in tweets)


def _users(result: Dict[str, Any]) -> str:
    users = result.get("users") or []
    if not users:
        return "No users found."
    return "\n".join(f"{u['name']} (@{u['username']})" for u in users)


twitter_toolkit_client = create_client_toolkit(
    twitter_toolkit_base,
    {
        TwitterTools.SearchTweets.value: ClientToolConfig(
            call_view=lambda args: f"Searching tweets for \"{args.get('query', '')}\"...",
            result_view=_tweets,
        ),
        TwitterTools.GetTweet.value: ClientToolConfig(
            call_view=lambda args: f"Fetching tweet {args.get('tweet_id', '')}...",
            result_view=lambda result: _tweets({"tweets": [result["tweet"]]}),
        ),
        TwitterTools.GetUser.value: ClientToolConfig(
            call_view=lambda args: f"Looking up @{str(args.get('username', '')).lstrip('@')}...",
            result_view=lambda result: _users({"users": [result["user"]]}),
        ),
        TwitterTools.GetUserTimeline.value: ClientToolConfig(
            call_view=lambda args: "Reading timeline...",
            result_view=_tweets,
        ),
        TwitterTools.GetUserFollowers.value: ClientToolConfig(
            call_view=lambda args: "Listing followers...",
            result_view=_users,
        ),
        TwitterTools.GetUserFollowing.value: ClientToolConfig(
            call_view=lambda args: "Listing followed accounts...",
            result_view=_users,
        ),
    },
)
