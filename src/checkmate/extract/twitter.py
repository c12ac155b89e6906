"""Microblog post extraction using the X/Twitter API v2."""

import logging
import os
from typing import Any

import httpx

from checkmate.data import Platform, TweetContent
from checkmate.errors import ConfigurationError
from checkmate.url import extract_tweet_id

X_TWEET_URL = "https://api.twitter.com/2/tweets/{tweet_id}"

DEFAULT_TITLE = "Twitter Post"

logger = logging.getLogger(__name__)


class TwitterExtractor:
    """Look up a single post and its video attachments.

    Uses the ``GET /2/tweets/{id}`` endpoint with author and media
    expansions. Requires a bearer token.

    Args:
        bearer_token: X API bearer token (defaults to TWITTER_BEARER_TOKEN env var).
    """

    def __init__(self, *, bearer_token: str | None = None) -> None:
        self._bearer_token = bearer_token or os.environ.get("TWITTER_BEARER_TOKEN")
        if not self._bearer_token:
            raise ConfigurationError(
                "X API bearer token required. "
                "Pass bearer_token or set TWITTER_BEARER_TOKEN env var."
            )

    async def extract(self, url: str) -> TweetContent:
        """Fetch the post behind ``url``.

        Args:
            url: Post URL containing ``/status/<id>``.

        Returns:
            Post text, author and highest-bitrate video URLs.
        """
        tweet_id = extract_tweet_id(url)
        params = {
            "expansions": "author_id,attachments.media_keys",
            "tweet.fields": "created_at,public_metrics,text",
            "user.fields": "username,name",
            "media.fields": "type,variants,url",
        }
        headers = {"Authorization": f"Bearer {self._bearer_token}"}
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.get(
                X_TWEET_URL.format(tweet_id=tweet_id), params=params, headers=headers
            )
            response.raise_for_status()
            data = response.json()

        item = data.get("data")
        if not item:
            raise ValueError(f"Post {tweet_id} not found")

        includes = data.get("includes", {})
        users = includes.get("users", [])
        username = users[0].get("username", "") if users else ""
        text = item.get("text", "")

        return TweetContent(
            url=url,
            platform=Platform.TWITTER,
            title=text or DEFAULT_TITLE,
            description=text,
            creator=username,
            content_type="tweet",
            tweet_id=tweet_id,
            body=text,
            video_urls=tuple(_video_urls(includes.get("media", []))),
        )


def _video_urls(media: list[dict[str, Any]]) -> list[str]:
    """Highest-bitrate mp4 variant for each video or GIF attachment."""
    urls: list[str] = []
    for item in media:
        if item.get("type") not in ("video", "animated_gif"):
            continue
        mp4s = [v for v in item.get("variants", []) if v.get("content_type") == "video/mp4"]
        if not mp4s:
            continue
        best = max(mp4s, key=lambda v: v.get("bit_rate", 0))
        urls.append(best["url"])
    return urls
