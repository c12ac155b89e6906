from typing import Protocol

from checkmate.data import SentimentAnalysis


class SentimentAnalyzer(Protocol):
    """Interface for sentiment, key-phrase and entity analysis."""

    async def analyze(self, text: str, language: str = "en") -> SentimentAnalysis:
        """Analyze ``text``.

        Args:
            text: Text to analyze.
            language: ISO 639-1 language code.

        Returns:
            Overall sentiment, scores, key phrases, entities, intensity and flags.
        """
        ...
