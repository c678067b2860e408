from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel

from toolkit_dev.errors import ToolUpstreamError
from toolkit_dev.tools.types import ServerToolConfig
from toolkit_dev.toolkits.create_toolkit import create_server_toolkit
from toolkit_dev.toolkits.credentials import require_account
from toolkit_dev.toolkits.http import VendorClient
from toolkit_dev.toolkits.types import ToolkitContext

from .base import (
    GetTweetInput,
    GetUserInput,
    GetUserTimelineInput,
    SearchTweetsInput,
    TwitterTools,
    UserGraphInput,
    twitter_toolkit_base,
)

TWITTER_API_BASE = "https://api.twitter.com/2"

TWEET_FIELDS = "created_at,public_metrics,possibly_sensitive,conversation_id,author_id"
USER_FIELDS = "username,name,verified,description,profile_image_url,created_at,public_metrics"


# ----------------------------
# Response mapping
# ----------------------------


def _tweets_from_response(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    tweets = data.get("data") or []
    users = {u.get("id"): u for u in (data.get("includes") or {}).get("users") or []}
    out = []
    for tweet in tweets:
        author = users.get(tweet.get("author_id")) or {}
        out.append(
            {
                "id": tweet.get("id", ""),
                "text": tweet.get("text", ""),
                "author_username": author.get("username", ""),
                "author_name": author.get("name", ""),
                "created_at": tweet.get("created_at", ""),
                "public_metrics": tweet.get("public_metrics") or {},
                "possibly_sensitive": tweet.get("possibly_sensitive"),
                "conversation_id": tweet.get("conversation_id"),
            }
        )
    return out


def _user_from_api(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": user.get("id", ""),
        "username": user.get("username", ""),
        "name": user.get("name", ""),
        "description": user.get("description"),
        "profile_image_url": user.get("profile_image_url"),
        "verified": user.get("verified"),
        "created_at": user.get("created_at"),
        "public_metrics": user.get("public_metrics"),
    }


def _next_token(data: Dict[str, Any]) -> Any:
    return (data.get("meta") or {}).get("next_token")


# ----------------------------
# Tool callbacks
# ----------------------------


def search_tweets_server(api: VendorClient) -> ServerToolConfig:
    async def callback(args: SearchTweetsInput) -> Dict[str, Any]:
        try:
            data = await api.get(
                "/tweets/search/recent",
                params={
                    "query": args.query,
                    "max_results": args.max_results,
                    "sort_order": args.sort_order,
                    "tweet.fields": TWEET_FIELDS,
                    "user.fields": USER_FIELDS,
                    "expansions": "author_id",
                },
            )
        except ToolUpstreamError as exc:
            raise ToolUpstreamError(f"Failed to search tweets: {exc}") from exc
        data = data or {}
        return {"tweets": _tweets_from_response(data), "next_token": _next_token(data)}

    return ServerToolConfig(
        callback=callback,
        message=lambda result: f"Found {len(result['tweets'])} tweets",
    )


def get_tweet_server(api: VendorClient) -> ServerToolConfig:
    async def callback(args: GetTweetInput) -> Dict[str, Any]:
        try:
            data = await api.get(
                f"/tweets/{args.tweet_id}",
                params={"tweet.fields": TWEET_FIELDS, "user.fields": USER_FIELDS, "expansions": "author_id"},
            )
        except ToolUpstreamError as exc:
            raise ToolUpstreamError(f"Failed to get tweet: {exc}") from exc
        data = data or {}
        if not data.get("data"):
            raise ToolUpstreamError(f"Tweet {args.tweet_id} not found")
        wrapped = {"data": [data["data"]], "includes": data.get("includes") or {}}
        return {"tweet": _tweets_from_response(wrapped)[0]}

    return ServerToolConfig(callback=callback)


def get_user_server(api: VendorClient) -> ServerToolConfig:
    async def callback(args: GetUserInput) -> Dict[str, Any]:
        username = args.username.lstrip("@")
        try:
            data = await api.get(f"/users/by/username/{username}", params={"user.fields": USER_FIELDS})
        except ToolUpstreamError as exc:
            raise ToolUpstreamError(f"Failed to get user: {exc}") from exc
        user = (data or {}).get("data")
        if not user:
            raise ToolUpstreamError(f"User @{username} not found")
        return {"user": _user_from_api(user)}

    return ServerToolConfig(
        callback=callback,
        message="The user's profile is shown in the UI. Do not reiterate it; give a one sentence summary.",
    )


def get_user_timeline_server(api: VendorClient) -> ServerToolConfig:
    async def callback(args: GetUserTimelineInput) -> Dict[str, Any]:
        try:
            data = await api.get(
                f"/users/{args.user_id}/tweets",
                params={
                    "max_results": args.max_results,
                    "pagination_token": args.pagination_token,
                    "tweet.fields": TWEET_FIELDS,
                    "user.fields": USER_FIELDS,
                    "expansions": "author_id",
                },
            )
        except ToolUpstreamError as exc:
            raise ToolUpstreamError(f"Failed to get user timeline: {exc}") from exc
        data = data or {}
        return {"tweets": _tweets_from_response(data), "next_token": _next_token(data)}

    return ServerToolConfig(
        callback=callback,
        message=lambda result: f"Retrieved {len(result['tweets'])} tweets from the timeline",
    )


def _user_graph_server(api: VendorClient, edge: str, label: str) -> ServerToolConfig:
    async def callback(args: UserGraphInput) -> Dict[str, Any]:
        try:
            data = await api.get(
                f"/users/{args.user_id}/{edge}",
                params={
                    "max_results": args.max_results,
                    "pagination_token": args.pagination_token,
                    "user.fields": USER_FIELDS,
                },
            )
        except ToolUpstreamError as exc:
            raise ToolUpstreamError(f"Failed to get user {label}: {exc}") from exc
        data = data or {}
        users = [_user_from_api(u) for u in data.get("data") or []]
        return {"users": users, "next_token": _next_token(data)}

    return ServerToolConfig(
        callback=callback,
        message=lambda result: f"Found {len(result['users'])} {label}",
    )


async def _twitter_tools(_params: BaseModel, ctx: ToolkitContext) -> Dict[str, ServerToolConfig]:
    account = await require_account(ctx.accounts, "twitter", "Twitter")
    api = VendorClient(
        "Twitter",
        TWITTER_API_BASE,
        {"Authorization": f"Bearer {account.access_token}"},
        ctx,
    )
    return {
        TwitterTools.SearchTweets.value: search_tweets_server(api),
        TwitterTools.GetTweet.value: get_tweet_server(api),
        TwitterTools.GetUser.value: get_user_server(api),
        TwitterTools.GetUserTimeline.value: get_user_timeline_server(api),
        TwitterTools.GetUserFollowers.value: _user_graph_server(api, "followers", "followers"),
        TwitterTools.GetUserFollowing.value: _user_graph_server(api, "following", "followed accounts"),
    }


twitter_toolkit_server = create_server_toolkit(
    twitter_toolkit_base,
    "You have access to the Twitter toolkit. You can search recent tweets, look up "
    "tweets and users, read a user's timeline and list who they follow or who "
    "follows them. Resolve usernames to user IDs with get-user before using "
    "timeline or follower tools.",
    _twitter_tools,
)
