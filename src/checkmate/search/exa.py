"""Exa search and content retrieval using the official exa-py SDK."""

import logging
import os

from exa_py import AsyncExa

from checkmate.data import PageContent, SearchHit
from checkmate.errors import ConfigurationError

logger = logging.getLogger(__name__)


class ExaSearcher:
    """Search and retrieve web pages using the Exa API.

    Args:
        api_key: Exa API key (defaults to EXA_API_KEY env var).
    """

    def __init__(self, *, api_key: str | None = None) -> None:
        self._api_key = api_key or os.environ.get("EXA_API_KEY")
        if not self._api_key:
            raise ConfigurationError(
                "Exa API key required. Pass api_key or set EXA_API_KEY env var."
            )
        self._client = AsyncExa(api_key=self._api_key)

    async def search(self, query: str, *, num_results: int = 10) -> list[SearchHit]:
        """Search for pages matching ``query``.

        Args:
            query: Search query text.
            num_results: Maximum hits to return.

        Returns:
            List of hits with URL, title and relevance score.
        """
        response = await self._client.search(query, num_results=num_results)
        hits: list[SearchHit] = []
        for result in response.results:
            hits.append(
                SearchHit(
                    url=result.url,
                    title=result.title or "",
                    score=getattr(result, "score", None),
                    text=getattr(result, "text", None),
                    summary=getattr(result, "summary", None),
                    published_date=result.published_date,
                )
            )
        return hits

    async def fetch_contents(self, urls: list[str]) -> list[PageContent]:
        """Retrieve text, summary and highlights for each URL.

        Args:
            urls: Page URLs, typically the top search hits.

        Returns:
            One entry per page Exa could retrieve.
        """
        if not urls:
            return []
        response = await self._client.get_contents(
            urls,
            text=True,
            summary=True,
            highlights=True,
        )
        pages: list[PageContent] = []
        for result in response.results:
            pages.append(
                PageContent(
                    url=result.url,
                    title=result.title or "",
                    text=getattr(result, "text", None) or "",
                    summary=getattr(result, "summary", None) or "",
                    highlights=tuple(getattr(result, "highlights", None) or ()),
                    published_date=result.published_date,
                )
            )
        logger.debug(f"Exa returned contents for {len(pages)}/{len(urls)} URLs")
        return pages
