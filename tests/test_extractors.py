"""Tests for platform content extractors."""

from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from checkmate.data import ArticleContent, Platform, TweetContent, VideoContent
from checkmate.errors import ConfigurationError, ValidationError
from checkmate.extract import TikTokExtractor, TwitterExtractor, WebExtractor
from checkmate.extract.tiktok import _info_to_content, _pick_formats

TIKTOK_URL = "https://www.tiktok.com/@health/video/7234567890123456789"
TWEET_URL = "https://x.com/newsdesk/status/1790000000000000000"


# -- TikTok --


@pytest.fixture
def tiktok_info() -> dict[str, Any]:
    return {
        "title": "Doctor explains vaccine myths",
        "description": "Vaccines do not cause autism #health",
        "uploader": "dr.health",
        "view_count": 1200,
        "like_count": 300,
        "comment_count": 12,
        "repost_count": 4,
        "formats": [
            {"format_id": "download", "url": "https://cdn/wm.mp4", "vcodec": "h264"},
            {"format_id": "540p", "url": "https://cdn/540.mp4", "vcodec": "h264", "height": 540},
            {"format_id": "1080p", "url": "https://cdn/hd.mp4", "vcodec": "h265", "height": 1080},
            {"format_id": "audio", "url": "https://cdn/a.m4a", "vcodec": "none"},
        ],
    }


class TestTikTokExtractor:
    def test_pick_formats(self, tiktok_info: dict[str, Any]) -> None:
        assert _pick_formats(tiktok_info["formats"]) == (
            "https://cdn/540.mp4",
            "https://cdn/hd.mp4",
            "https://cdn/wm.mp4",
        )

    def test_pick_formats_watermark_only(self) -> None:
        formats = [{"format_id": "download", "url": "https://cdn/wm.mp4"}]
        assert _pick_formats(formats) == ("https://cdn/wm.mp4", None, "https://cdn/wm.mp4")

    def test_info_to_content(self, tiktok_info: dict[str, Any]) -> None:
        content = _info_to_content(TIKTOK_URL, tiktok_info)
        assert isinstance(content, VideoContent)
        assert content.platform == Platform.TIKTOK
        assert content.creator == "dr.health"
        assert content.content_type == "video"
        assert content.play_count == 1200
        assert content.share_count == 4
        assert content.text == "Vaccines do not cause autism #health"
        assert content.media_url == "https://cdn/hd.mp4"

    def test_image_post_has_no_media(self) -> None:
        content = _info_to_content(TIKTOK_URL, {"description": "slideshow", "vcodec": "none"})
        assert content.content_type == "image"
        assert content.media_url is None
        assert content.title == "slideshow"

    def test_default_title(self) -> None:
        assert _info_to_content(TIKTOK_URL, {}).title == "TikTok Video"

    async def test_extract_runs_yt_dlp(
        self, monkeypatch: pytest.MonkeyPatch, tiktok_info: dict[str, Any]
    ) -> None:
        extractor = TikTokExtractor(cookie_file="/tmp/cookies.txt")
        assert extractor._options["cookiefile"] == "/tmp/cookies.txt"
        monkeypatch.setattr(extractor, "_extract_info", lambda url: tiktok_info)
        content = await extractor.extract(TIKTOK_URL)
        assert content.url == TIKTOK_URL
        assert content.title == "Doctor explains vaccine myths"

    async def test_extract_empty_info_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        extractor = TikTokExtractor()
        monkeypatch.setattr(extractor, "_extract_info", lambda url: {})
        with pytest.raises(ValueError, match="No metadata"):
            await extractor.extract(TIKTOK_URL)


# -- Twitter --


def _mock_x_api(monkeypatch: pytest.MonkeyPatch, status: int, payload: dict[str, Any]) -> list:
    """Route httpx.AsyncClient through a MockTransport; returns captured requests."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, json=payload)

    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        httpx,
        "AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )
    return requests


class TestTwitterExtractor:
    def test_requires_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TWITTER_BEARER_TOKEN", raising=False)
        with pytest.raises(ConfigurationError):
            TwitterExtractor()

    async def test_extract(self, monkeypatch: pytest.MonkeyPatch) -> None:
        payload = {
            "data": {"id": "1790000000000000000", "text": "Breaking: new study on vaccines"},
            "includes": {
                "users": [{"username": "newsdesk", "name": "News Desk"}],
                "media": [
                    {
                        "type": "video",
                        "variants": [
                            {"content_type": "video/mp4", "bit_rate": 256000, "url": "v/lo"},
                            {"content_type": "video/mp4", "bit_rate": 2176000, "url": "v/hi"},
                            {"content_type": "application/x-mpegURL", "url": "https://v/m3u8"},
                        ],
                    },
                    {"type": "photo", "url": "https://img/1.jpg"},
                ],
            },
        }
        requests = _mock_x_api(monkeypatch, 200, payload)

        content = await TwitterExtractor(bearer_token="token").extract(TWEET_URL)

        assert isinstance(content, TweetContent)
        assert content.tweet_id == "1790000000000000000"
        assert content.creator == "newsdesk"
        assert content.text == "Breaking: new study on vaccines"
        assert content.video_urls == ("v/hi",)
        assert content.media_url == "v/hi"
        assert requests[0].headers["Authorization"] == "Bearer token"
        assert requests[0].url.path == "/2/tweets/1790000000000000000"

    async def test_missing_post(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _mock_x_api(monkeypatch, 200, {"errors": [{"title": "Not Found Error"}]})
        with pytest.raises(ValueError, match="not found"):
            await TwitterExtractor(bearer_token="token").extract(TWEET_URL)

    async def test_http_error_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _mock_x_api(monkeypatch, 503, {})
        with pytest.raises(httpx.HTTPStatusError):
            await TwitterExtractor(bearer_token="token").extract(TWEET_URL)

    async def test_url_without_status_id(self) -> None:
        with pytest.raises(ValidationError):
            await TwitterExtractor(bearer_token="token").extract("https://x.com/newsdesk")


# -- Web --


class TestWebExtractor:
    @pytest.fixture
    def extractor(self) -> WebExtractor:
        extractor = WebExtractor(api_key="fc-test")
        extractor._client = MagicMock()
        return extractor

    def test_requires_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FIRECRAWL_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="API key required"):
            WebExtractor()

    async def test_extract(self, extractor: WebExtractor) -> None:
        extractor._client.scrape_url.return_value = SimpleNamespace(
            markdown="# Headline\n\nBody text<script>track()</script>",
            metadata={
                "title": "Minister announces subsidy",
                "description": "Targeted subsidies start next month",
                "author": "Jane Reporter",
                "ogSiteName": "The Daily",
                "publishedTime": "2026-03-01",
                "language": "en-US",
            },
        )

        content = await extractor.extract("https://www.thedaily.com/news/subsidy")

        assert isinstance(content, ArticleContent)
        assert content.title == "Minister announces subsidy"
        assert content.creator == "Jane Reporter"
        assert content.site_name == "The Daily"
        assert content.language == "en-US"
        assert content.body == "# Headline\n\nBody text"
        assert content.text == content.body
        assert content.media_url is None

    async def test_metadata_fallbacks(self, extractor: WebExtractor) -> None:
        extractor._client.scrape_url.return_value = SimpleNamespace(
            markdown="Some text", metadata={"og:title": ["OG Title"]}
        )
        content = await extractor.extract("https://www.blog.example.com/post")
        assert content.title == "OG Title"
        assert content.creator == "blog.example.com"
        assert content.author is None

    async def test_empty_scrape_raises(self, extractor: WebExtractor) -> None:
        extractor._client.scrape_url.return_value = SimpleNamespace(markdown="", metadata=None)
        with pytest.raises(ValueError, match="no content"):
            await extractor.extract("https://example.com/empty")
