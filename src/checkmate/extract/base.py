from typing import Protocol

from checkmate.data import ExtractedContent


class ContentExtractor(Protocol):
    """Interface for turning a platform URL into normalized content."""

    async def extract(self, url: str) -> ExtractedContent:
        """Extract content from ``url``.

        Args:
            url: A validated, sanitized URL for this extractor's platform.

        Returns:
            Normalized content. Raises on failure.
        """
        ...
