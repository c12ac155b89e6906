from checkmate.sentiment.base import SentimentAnalyzer
from checkmate.sentiment.comprehend import (
    ComprehendSentimentAnalyzer,
    emotional_intensity,
    sentiment_flags,
)

__all__ = [
    "ComprehendSentimentAnalyzer",
    "SentimentAnalyzer",
    "emotional_intensity",
    "sentiment_flags",
]
