"""Tests for URL utilities."""

import pytest

from checkmate.data import Platform
from checkmate.errors import ValidationError
from checkmate.url import (
    clean_content,
    detect_platform,
    extract_domain,
    extract_tweet_id,
    sanitize_url,
    validate_url,
)


class TestExtractDomain:
    def test_strips_www(self) -> None:
        assert extract_domain("https://www.reuters.com/world/article") == "reuters.com"

    def test_keeps_subdomain(self) -> None:
        assert extract_domain("https://apnews.example.org/x") == "apnews.example.org"

    def test_lowercases(self) -> None:
        assert extract_domain("https://WWW.BBC.co.uk/news") == "bbc.co.uk"

    def test_no_netloc(self) -> None:
        assert extract_domain("not a url") == "Unknown"


class TestValidateUrl:
    def test_valid_url_is_stripped(self) -> None:
        assert validate_url("  https://example.com/a  ") == "https://example.com/a"

    @pytest.mark.parametrize("url", [None, "", "   "])
    def test_missing(self, url: str | None) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_url(url)
        assert exc_info.value.code == "MISSING_URL"
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("url", ["ftp://example.com/file", "example.com", "https://"])
    def test_invalid(self, url: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_url(url)
        assert exc_info.value.code == "INVALID_URL"


class TestDetectPlatform:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.tiktok.com/@user/video/7234567890123456789",
            "https://vm.tiktok.com/ZMabc123/",
            "https://vt.tiktok.com/ZSabc123/",
        ],
    )
    def test_tiktok(self, url: str) -> None:
        assert detect_platform(url) == Platform.TIKTOK

    @pytest.mark.parametrize(
        "url",
        [
            "https://tiktok.com.evil.com/@user/video/1",
            "https://www.tiktok.community/post",
            "https://vm.tiktok.com-redirect.net/ZMabc123/",
        ],
    )
    def test_lookalike_tiktok_hosts_are_web(self, url: str) -> None:
        assert detect_platform(url) == Platform.WEB

    def test_bare_tiktok_host(self) -> None:
        assert detect_platform("https://tiktok.com") == Platform.TIKTOK

    @pytest.mark.parametrize(
        "url",
        [
            "https://twitter.com/user/status/1234567890",
            "https://x.com/user/status/1234567890",
            "https://www.x.com/some_user/status/42",
        ],
    )
    def test_twitter(self, url: str) -> None:
        assert detect_platform(url) == Platform.TWITTER

    def test_twitter_profile_is_web(self) -> None:
        assert detect_platform("https://x.com/user") == Platform.WEB

    def test_everything_else_is_web(self) -> None:
        assert detect_platform("https://www.thestar.com.my/news/nation") == Platform.WEB


class TestSanitizeUrl:
    def test_drops_tracking_params(self) -> None:
        url = "https://example.com/a?id=5&utm_source=x&fbclid=abc&page=2"
        assert sanitize_url(url) == "https://example.com/a?id=5&page=2"

    def test_no_query_unchanged(self) -> None:
        assert sanitize_url("https://example.com/a") == "https://example.com/a"

    def test_only_tracking_params(self) -> None:
        assert sanitize_url("https://example.com/a?utm_medium=social") == "https://example.com/a"


class TestExtractTweetId:
    def test_extracts_id(self) -> None:
        assert extract_tweet_id("https://x.com/user/status/1234567890?s=20") == "1234567890"

    def test_missing_id_raises(self) -> None:
        with pytest.raises(ValidationError):
            extract_tweet_id("https://x.com/user")


class TestCleanContent:
    def test_strips_script_and_iframe(self) -> None:
        text = "before<script>alert(1)</script>middle<iframe src='x'></iframe>after"
        assert clean_content(text) == "beforemiddleafter"

    def test_caps_length(self) -> None:
        assert len(clean_content("a" * 60_000)) == 50_000
