"""URL handling utilities."""

import logging
import re
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from checkmate.data import Platform
from checkmate.errors import ValidationError

logger = logging.getLogger(__name__)

TIKTOK_PATTERN = re.compile(
    r"^https?://(www\.)?(tiktok\.com|vt\.tiktok\.com|vm\.tiktok\.com)(?:[/?#:]|$)"
)
TWITTER_PATTERN = re.compile(r"^https?://(www\.)?(twitter\.com|x\.com)/\w+/status/\d+")
TWEET_ID_PATTERN = re.compile(r"status/(\d+)")

TRACKING_PARAMS = frozenset(
    {
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        "fbclid",
        "gclid",
        "ref_src",
        "ref_url",
        "_nc_ht",
    }
)

MAX_CONTENT_LENGTH = 50_000

_SCRIPT_PATTERN = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_IFRAME_PATTERN = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)


def extract_domain(url: str) -> str:
    """Extract domain name from URL.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The domain name (without 'www.' prefix), or "Unknown" if extraction fails.
    """
    try:
        parsed = urlparse(url)
        domain = parsed.netloc
        if not domain:
            logger.warning(f"Could not get domain from url {url}")
            return "Unknown"
        if domain.startswith("www."):
            domain = domain[4:]
        return domain.lower()
    except ValueError:
        return "Unknown"


def validate_url(url: str | None) -> str:
    """Check that ``url`` is a usable http(s) URL.

    Returns:
        The stripped URL.

    Raises:
        ValidationError: ``MISSING_URL`` or ``INVALID_URL``.
    """
    if url is None or not url.strip():
        raise ValidationError.missing_url()
    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise ValidationError.invalid_url(url) from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError.invalid_url(url)
    return url


def detect_platform(url: str) -> Platform:
    """Classify a validated URL. Anything that isn't a known social post is a web article."""
    if TIKTOK_PATTERN.match(url):
        return Platform.TIKTOK
    if TWITTER_PATTERN.match(url):
        return Platform.TWITTER
    return Platform.WEB


def sanitize_url(url: str) -> str:
    """Drop tracking query parameters, keeping everything else in order."""
    parsed = urlparse(url)
    if not parsed.query:
        return url
    kept = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True)]
    kept = [(k, v) for k, v in kept if k not in TRACKING_PARAMS]
    return urlunparse(parsed._replace(query=urlencode(kept)))


def extract_tweet_id(url: str) -> str:
    """Return the numeric status id from a microblog URL.

    Raises:
        ValidationError: If the URL carries no status id.
    """
    match = TWEET_ID_PATTERN.search(url)
    if not match:
        raise ValidationError.invalid_url(url)
    return match.group(1)


def clean_content(text: str) -> str:
    """Strip script/iframe blocks and cap length before analysis."""
    text = _SCRIPT_PATTERN.sub("", text)
    text = _IFRAME_PATTERN.sub("", text)
    return text[:MAX_CONTENT_LENGTH]
