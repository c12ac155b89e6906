from typing import Protocol

from checkmate.data import FactCheckResult


class FactChecker(Protocol):
    """Interface for checking a piece of content against outside sources."""

    async def check(
        self, text: str, *, title: str | None = None, context: str | None = None
    ) -> FactCheckResult:
        """Fact-check ``text``.

        Args:
            text: Content to check (transcript, post body or article text).
            title: Optional title of the content.
            context: Optional extra context such as the creator or platform.

        Returns:
            The fact-check result. Raises when the research services fail.
        """
        ...
