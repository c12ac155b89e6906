from dataclasses import dataclass
from typing import Protocol

from checkmate.data import AnalysisResult, Platform, ProcessingContext
from checkmate.extract import ContentExtractor
from checkmate.resilience import CircuitBreaker
from checkmate.transcribe import Transcriber


class Pipeline(Protocol):
    """Interface for URL verification pipelines."""

    async def process(
        self, url: str, context: ProcessingContext | None = None
    ) -> AnalysisResult:
        """Extract, transcribe, fact-check and score the content at ``url``.

        Args:
            url: Short-video, microblog or web-article URL.
            context: Per-request context. Created from ``url`` when omitted.

        Returns:
            The analysis result. Only validation and extraction failures raise.
        """
        ...


@dataclass(frozen=True)
class PlatformHandler:
    """What differs between platforms: how to extract, and whether to transcribe.

    Args:
        platform: Platform this handler serves.
        extractor: Content extractor for the platform.
        breaker: Breaker guarding the extractor's upstream service.
        transcriber: Transcriber for the platform's media, or None to skip.
    """

    platform: Platform
    extractor: ContentExtractor
    breaker: CircuitBreaker
    transcriber: Transcriber | None = None


@dataclass(frozen=True)
class CreatorStats:
    """A creator's average past rating and number of past analyses."""

    average_rating: float
    total_analyses: int


class CreatorHistory(Protocol):
    """Lookup of a creator's past credibility ratings."""

    async def lookup(self, creator: str, platform: Platform) -> CreatorStats | None:
        """Past stats for ``creator`` on ``platform``, or None if unknown."""
        ...
