from typing import Protocol

from checkmate.data import PageContent, SearchHit


class WebSearcher(Protocol):
    """Interface for search-and-retrieve services used by fact-checking."""

    async def search(self, query: str, *, num_results: int = 10) -> list[SearchHit]:
        """Search the web.

        Args:
            query: Search query text.
            num_results: Maximum hits to return.

        Returns:
            Hits in the service's ranking order.
        """
        ...

    async def fetch_contents(self, urls: list[str]) -> list[PageContent]:
        """Retrieve page text, summary and highlights for ``urls``."""
        ...
