from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from toolkit_dev.tools.types import create_base_tool
from toolkit_dev.toolkits.types import EmptyParameters, ToolkitConfig, Toolkits


class TwitterTools(str, Enum):
    SearchTweets = "search-tweets"
    GetTweet = "get-tweet"
    GetUser = "get-user"
    GetUserTimeline = "get-user-timeline"
    GetUserFollowers = "get-user-followers"
    GetUserFollowing = "get-user-following"


# ----------------------------
# Shared shapes
# ----------------------------


class PublicMetrics(BaseModel):
    retweet_count: int = 0
    like_count: int = 0
    reply_count: int = 0
    quote_count: int = 0


class Tweet(BaseModel):
    id: str
    text: str
    author_username: str = ""
    author_name: str = ""
    created_at: str = ""
    public_metrics: PublicMetrics = Field(default_factory=PublicMetrics)
    possibly_sensitive: Optional[bool] = None
    conversation_id: Optional[str] = None


class UserMetrics(BaseModel):
    followers_count: int = 0
    following_count: int = 0
    tweet_count: int = 0
    listed_count: int = 0


class TwitterUser(BaseModel):
    id: str
    username: str
    name: str
    description: Optional[str] = None
    profile_image_url: Optional[str] = None
    verified: Optional[bool] = None
    created_at: Optional[str] = None
    public_metrics: Optional[UserMetrics] = None


class TweetList(BaseModel):
    tweets: List[Tweet]
    next_token: Optional[str] = None


class UserList(BaseModel):
    users: List[TwitterUser]
    next_token: Optional[str] = None


# ----------------------------
# Tool inputs
# ----------------------------


class SearchTweetsInput(BaseModel):
    query: str = Field(
        min_length=1,
        description=(
            "Search query using Twitter search operators. Examples: 'from:twitter', "
            "'#AI', 'has:images', 'lang:en', '-is:retweet'"
        ),
    )
    max_results: int = Field(default=10, ge=10, le=100, description="Maximum number of results to return (10-100)")
    sort_order: Literal["recency", "relevancy"] = Field(
        default="recency",
        description="'recency' for newest first, 'relevancy' for most relevant",
    )


class GetTweetInput(BaseModel):
    tweet_id: str = Field(min_length=1, description="The ID of the tweet")


class GetTweetOutput(BaseModel):
    tweet: Tweet


class GetUserInput(BaseModel):
    username: str = Field(min_length=1, description="The username without the leading @")


class GetUserOutput(BaseModel):
    user: TwitterUser


class GetUserTimelineInput(BaseModel):
    user_id: str = Field(min_length=1, description="The ID of the user")
    max_results: int = Field(default=10, ge=5, le=100, description="Maximum number of tweets to return (5-100)")
    pagination_token: Optional[str] = None


class UserGraphInput(BaseModel):
    user_id: str = Field(min_length=1, description="The ID of the user")
    max_results: int = Field(default=100, ge=1, le=1000, description="Maximum number of users to return (1-1000)")
    pagination_token: Optional[str] = None


twitter_tools = {
    TwitterTools.SearchTweets.value: create_base_tool(
        "Search for tweets published in the last 7 days. Returns matching tweets "
        "with text, author, metrics and timestamps.",
        SearchTweetsInput,
        TweetList,
    ),
    TwitterTools.GetTweet.value: create_base_tool(
        "Get a single tweet by ID.",
        GetTweetInput,
        GetTweetOutput,
    ),
    TwitterTools.GetUser.value: create_base_tool(
        "Get a Twitter user's profile by username.",
        GetUserInput,
        GetUserOutput,
    ),
    TwitterTools.GetUserTimeline.value: create_base_tool(
        "Get the most recent tweets posted by a user.",
        GetUserTimelineInput,
        TweetList,
    ),
    TwitterTools.GetUserFollowers.value: create_base_tool(
        "List the accounts that follow a user.",
        UserGraphInput,
        UserList,
    ),
    TwitterTools.GetUserFollowing.value: create_base_tool(
        "List the accounts a user follows.",
        UserGraphInput,
        UserList,
    ),
}


twitter_toolkit_base = ToolkitConfig(
    id=Toolkits.Twitter,
    name="Twitter",
    description="Search tweets and explore Twitter users.",
    tools=twitter_tools,
    parameters=EmptyParameters,
    required_provider="twitter",
)
