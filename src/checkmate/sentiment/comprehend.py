"""Sentiment analysis using AWS Comprehend."""

import asyncio
import logging
from typing import Any

import boto3

from checkmate.data import SentimentAnalysis

logger = logging.getLogger(__name__)

# Comprehend rejects documents above 5000 bytes.
MAX_BYTES = 5000
TRUNCATED_BYTES = 4000

SUPPORTED_LANGUAGES = frozenset({"en", "es", "fr", "de", "it", "pt", "ar", "hi", "ja", "ko", "zh"})

INFLAMMATORY_KEYWORDS = (
    "shocking",
    "outrageous",
    "scandal",
    "exposed",
    "truth they don't want",
    "wake up",
    "sheeple",
    "fake news",
    "mainstream media",
    "cover up",
    "conspiracy",
    "bombshell",
    "stunning",
    "unbelievable",
    "devastating",
    "explosive",
)


class ComprehendSentimentAnalyzer:
    """Detect sentiment, key phrases and entities with AWS Comprehend.

    boto3 is synchronous; the three detect calls run concurrently in worker
    threads. Credentials come from the standard boto3 chain.

    Args:
        region_name: AWS region.
        client: Pre-built Comprehend client (mainly for tests).
    """

    def __init__(self, *, region_name: str = "us-east-1", client: Any = None) -> None:
        self._client = client or boto3.client("comprehend", region_name=region_name)

    async def analyze(self, text: str, language: str = "en") -> SentimentAnalysis:
        text = truncate_for_comprehend(text)
        language = language.lower() if language.lower() in SUPPORTED_LANGUAGES else "en"

        sentiment, phrases, entities = await asyncio.gather(
            asyncio.to_thread(self._client.detect_sentiment, Text=text, LanguageCode=language),
            asyncio.to_thread(self._client.detect_key_phrases, Text=text, LanguageCode=language),
            asyncio.to_thread(self._client.detect_entities, Text=text, LanguageCode=language),
        )

        raw_scores = sentiment.get("SentimentScore", {})
        scores = {
            "positive": float(raw_scores.get("Positive", 0.0)),
            "negative": float(raw_scores.get("Negative", 0.0)),
            "neutral": float(raw_scores.get("Neutral", 0.0)),
            "mixed": float(raw_scores.get("Mixed", 0.0)),
        }
        key_phrases = [
            p["Text"] for p in phrases.get("KeyPhrases", []) if p.get("Score", 0) > 0.8
        ][:10]
        entity_names = [
            e["Text"] for e in entities.get("Entities", []) if e.get("Score", 0) > 0.7
        ][:15]

        intensity = emotional_intensity(scores)
        return SentimentAnalysis(
            overall=sentiment.get("Sentiment", "NEUTRAL"),
            scores=scores,
            key_phrases=tuple(key_phrases),
            entities=tuple(entity_names),
            emotional_intensity=intensity,
            flags=tuple(sentiment_flags(scores, intensity, key_phrases)),
        )


def truncate_for_comprehend(text: str) -> str:
    encoded = text.encode("utf-8")
    if len(encoded) > MAX_BYTES:
        logger.debug(f"Truncating {len(encoded)} bytes for sentiment analysis")
        return encoded[:TRUNCATED_BYTES].decode("utf-8", errors="ignore")
    return text


def emotional_intensity(scores: dict[str, float]) -> float:
    """Strongest polar score; mixed sentiment counts at 80%."""
    return max(
        scores.get("positive", 0.0),
        scores.get("negative", 0.0),
        scores.get("mixed", 0.0) * 0.8,
    )


def sentiment_flags(
    scores: dict[str, float], intensity: float, key_phrases: list[str]
) -> list[str]:
    """Warning flags for emotionally loaded or manipulative text."""
    flags: list[str] = []
    if scores.get("negative", 0.0) > 0.7:
        flags.append("high_negative_sentiment")
    if intensity > 0.8 and scores.get("mixed", 0.0) > 0.3:
        flags.append("emotionally_manipulative")
    lowered = [p.lower() for p in key_phrases]
    if any(k in phrase for phrase in lowered for k in INFLAMMATORY_KEYWORDS):
        flags.append("inflammatory_language")
    if scores.get("positive", 0.0) > 0.85 and intensity > 0.85:
        flags.append("suspiciously_positive")
    if scores.get("neutral", 0.0) > 0.8:
        flags.append("neutral_factual")
    return flags
