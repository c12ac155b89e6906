"""Web-article extraction using Firecrawl."""

import asyncio
import logging
import os
from typing import Any

from firecrawl import FirecrawlApp

from checkmate.data import ArticleContent, Platform
from checkmate.errors import ConfigurationError
from checkmate.url import clean_content, extract_domain

logger = logging.getLogger(__name__)


class WebExtractor:
    """Scrape an article to markdown with Firecrawl.

    The Firecrawl client is synchronous, so scraping runs in a worker thread.

    Args:
        api_key: Firecrawl API key (defaults to FIRECRAWL_API_KEY env var).
    """

    def __init__(self, *, api_key: str | None = None) -> None:
        self._api_key = api_key or os.environ.get("FIRECRAWL_API_KEY")
        if not self._api_key:
            raise ConfigurationError(
                "Firecrawl API key required. Pass api_key or set FIRECRAWL_API_KEY env var."
            )
        self._client = FirecrawlApp(api_key=self._api_key)

    async def extract(self, url: str) -> ArticleContent:
        scraped = await asyncio.to_thread(
            self._client.scrape_url,
            url,
            formats=["markdown"],
            only_main_content=True,
        )
        markdown = getattr(scraped, "markdown", None) or ""
        if not markdown:
            raise ValueError(f"Firecrawl returned no content for {url}")

        metadata = _metadata_dict(getattr(scraped, "metadata", None))
        return ArticleContent(
            url=url,
            platform=Platform.WEB,
            title=_first(metadata, "title", "og:title", "ogTitle") or extract_domain(url),
            description=_first(metadata, "description", "og:description", "ogDescription"),
            creator=_first(metadata, "author", "ogSiteName", "og:site_name")
            or extract_domain(url),
            content_type="web_content",
            body=clean_content(markdown),
            author=_first(metadata, "author") or None,
            published_time=_first(metadata, "publishedTime", "article:published_time") or None,
            language=_first(metadata, "language") or None,
            site_name=_first(metadata, "ogSiteName", "og:site_name") or None,
        )


def _metadata_dict(metadata: Any) -> dict[str, Any]:
    """Firecrawl returns metadata as a dict or a model depending on SDK version."""
    if metadata is None:
        return {}
    if isinstance(metadata, dict):
        return metadata
    if hasattr(metadata, "model_dump"):
        return metadata.model_dump(by_alias=True, exclude_none=True)
    return dict(vars(metadata))


def _first(metadata: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = metadata.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        if value:
            return str(value)
    return ""
