"""Creator credibility rating (0-10) from fact-check, history, quality and sentiment.

Each category produces a sub-score that is clamped before weighting, so no
single category can saturate the rating:

    rating = 6.0 + 0.6 * fact_check + 0.2 * history + 0.15 * quality + 0.05 * sentiment

with ``fact_check`` in [-5, 5] and the others in [-3, 3]. Unverifiable
content is capped at 6.0, then the rating is clamped to [0, 10] and rounded
to one decimal. Every adjustment is recorded as a signed factor string.
"""

from dataclasses import dataclass

from checkmate.data import CredibilityRating, FactCheckSource, SentimentAnalysis

BASELINE = 6.0
FACT_CHECK_WEIGHT = 0.6
HISTORY_WEIGHT = 0.2
QUALITY_WEIGHT = 0.15
SENTIMENT_WEIGHT = 0.05

FACT_CHECK_LIMIT = 5.0
CATEGORY_LIMIT = 3.0
UNVERIFIABLE_CAP = 6.0

SUPPORTING_RELEVANCE = 0.6
OPPOSING_RELEVANCE = 0.4
MAJORITY = 0.7

UNVERIFIABLE_VERDICTS = frozenset({"unverifiable", "unverified"})

# verdict -> (sub-score, factor)
VERDICT_SCORES: dict[str, tuple[float, str]] = {
    "true": (3.0, "Content verified as true (+3.0)"),
    "verified": (3.0, "Content verified as true (+3.0)"),
    "partially_true": (1.0, "Content partially true (+1.0)"),
    "false": (-4.0, "Content flagged as false/conspiracy/debunked (-4.0)"),
    "conspiracy": (-4.0, "Content flagged as false/conspiracy/debunked (-4.0)"),
    "debunked": (-4.0, "Content flagged as false/conspiracy/debunked (-4.0)"),
    "misleading": (-3.0, "Content flagged as misleading/exaggerated (-3.0)"),
    "exaggerated": (-3.0, "Content flagged as misleading/exaggerated (-3.0)"),
    "unverifiable": (-1.5, "Content unverifiable (-1.5)"),
    "unverified": (-1.5, "Content unverifiable (-1.5)"),
    "opinion": (0.5, "Content identified as opinion (+0.5)"),
    "satire": (1.0, "Content identified as satire (+1.0)"),
}

PLATFORM_MODIFIERS: dict[str, tuple[float, str]] = {
    "twitter": (-0.5, "Twitter platform modifier (-0.5)"),
    "x": (-0.5, "Twitter platform modifier (-0.5)"),
    "tiktok": (0.3, "TikTok platform modifier (+0.3)"),
    "youtube": (0.8, "YouTube platform modifier (+0.8)"),
    "instagram": (0.2, "Instagram platform modifier (+0.2)"),
}

CONTENT_TYPE_MODIFIERS: dict[str, tuple[float, str]] = {
    "educational": (1.2, "Educational content (+1.2)"),
    "tutorial": (1.2, "Educational content (+1.2)"),
    "news": (1.0, "News/journalism content (+1.0)"),
    "journalism": (1.0, "News/journalism content (+1.0)"),
    "entertainment": (0.3, "Entertainment content (+0.3)"),
    "comedy": (0.3, "Entertainment content (+0.3)"),
    "opinion": (-0.3, "Opinion content (-0.3)"),
}

OVERALL_SENTIMENT_MODIFIERS: dict[str, tuple[float, str]] = {
    "NEUTRAL": (0.5, "Neutral sentiment (+0.5)"),
    "POSITIVE": (0.2, "Positive sentiment (+0.2)"),
    "NEGATIVE": (-0.4, "Negative sentiment (-0.4)"),
    "MIXED": (-0.2, "Mixed sentiment (-0.2)"),
}

SENTIMENT_FLAG_MODIFIERS: tuple[tuple[str, float, str], ...] = (
    ("inflammatory_language", -1.0, "Inflammatory language (-1.0)"),
    ("emotionally_manipulative", -1.2, "Emotionally manipulative content (-1.2)"),
    ("suspiciously_positive", -0.5, "Suspiciously positive (potential clickbait) (-0.5)"),
    ("neutral_factual", 0.8, "Neutral, factual tone (+0.8)"),
)


@dataclass(frozen=True)
class FactCheckSignal:
    """The parts of a fact-check the scorer reads. ``confidence`` is 0-1 or 0-100."""

    verdict: str | None = None
    confidence: float | None = None
    is_verified: bool = False
    sources: tuple[FactCheckSource, ...] = ()


@dataclass(frozen=True)
class ContentMetadata:
    creator: str
    platform: str
    title: str | None = None
    has_transcription: bool = False
    content_type: str | None = None


@dataclass(frozen=True)
class AnalysisMetrics:
    has_news_content: bool = False
    needs_fact_check: bool = False
    content_length: int | None = None
    sentiment: SentimentAnalysis | None = None
    creator_historical_credibility: float | None = None
    total_analyses: int | None = None


def calculate_credibility(
    fact_check: FactCheckSignal | None,
    metadata: ContentMetadata,
    metrics: AnalysisMetrics | None = None,
) -> CredibilityRating:
    """Rate a creator's credibility for one piece of content.

    Pure and deterministic: identical inputs give an identical rating and
    factor list.

    Args:
        fact_check: Fact-check outcome, or None when no check was performed.
        metadata: Creator, platform and content descriptors.
        metrics: Optional quality, sentiment and history signals.

    Returns:
        Rating in [0, 10] rounded to one decimal, with ordered factors.
    """
    metrics = metrics or AnalysisMetrics()
    factors: list[str] = []

    fact_check_score = _clamp(_fact_check_score(fact_check, factors), FACT_CHECK_LIMIT)
    history_score = _clamp(_history_score(metrics, factors), CATEGORY_LIMIT)
    quality_score = _clamp(_quality_score(fact_check, metadata, metrics, factors), CATEGORY_LIMIT)
    sentiment_score = _clamp(_sentiment_score(metrics.sentiment, factors), CATEGORY_LIMIT)

    score = (
        BASELINE
        + fact_check_score * FACT_CHECK_WEIGHT
        + history_score * HISTORY_WEIGHT
        + quality_score * QUALITY_WEIGHT
        + sentiment_score * SENTIMENT_WEIGHT
    )

    verdict = (fact_check.verdict or "").lower() if fact_check else ""
    if verdict in UNVERIFIABLE_VERDICTS:
        score = min(score, UNVERIFIABLE_CAP)
        factors.append("Unverifiable content capped at 6.0/10")

    score = max(0.0, min(10.0, score))
    return CredibilityRating(rating=round(score, 1), factors=tuple(factors))


def _fact_check_score(fact_check: FactCheckSignal | None, factors: list[str]) -> float:
    if fact_check is None:
        return 0.0

    # Relevance stands in for stance: high relevance counts as support.
    sources = [s for s in fact_check.sources if s.url and s.title and s.relevance is not None]
    if sources:
        total = len(sources)
        supporting = sum(1 for s in sources if s.relevance >= SUPPORTING_RELEVANCE)
        opposing = sum(1 for s in sources if s.relevance <= OPPOSING_RELEVANCE)
        support_ratio = supporting / total
        oppose_ratio = opposing / total

        if oppose_ratio > MAJORITY:
            score = -min(5.0, oppose_ratio * 5.0)
            factors.append(f"Most sources oppose claim ({opposing}/{total}) ({score:.1f})")
        elif support_ratio > MAJORITY:
            score = min(5.0, support_ratio * 4.0)
            factors.append(f"Most sources support claim ({supporting}/{total}) (+{score:.1f})")
        else:
            score = -min(5.0, oppose_ratio * 2.5)
            factors.append(
                f"Mixed source support ({supporting} support, {opposing} oppose) ({score:.1f})"
            )

        if fact_check.confidence:
            value = fact_check.confidence
            if value <= 1:
                value *= 100
            normalized = max(50.0, min(70.0, value))
            modifier = (normalized - 60) / 100
            score += modifier
            factors.append(f"Confidence modifier ({normalized:g}%): {modifier:.2f}")
        return score

    entry = VERDICT_SCORES.get((fact_check.verdict or "").lower())
    if entry is None:
        return 0.0
    score, factor = entry
    factors.append(factor)
    return score


def _history_score(metrics: AnalysisMetrics, factors: list[str]) -> float:
    history = metrics.creator_historical_credibility
    total = metrics.total_analyses
    if not history or not total or total <= 1:
        return 0.0

    diminishing = max(0.3, 1 - total / 20)
    if history < 4.0:
        score = -min(3.0, (4.0 - history) * 0.5 * diminishing)
        factors.append(f"Creator history penalty (avg: {history:.1f}/10) ({score:.1f})")
        return score
    if history > 7.0:
        score = min(3.0, (history - 7.0) * 0.3 * diminishing)
        factors.append(f"Creator history bonus (avg: {history:.1f}/10) (+{score:.1f})")
        return score
    return 0.0


def _quality_score(
    fact_check: FactCheckSignal | None,
    metadata: ContentMetadata,
    metrics: AnalysisMetrics,
    factors: list[str],
) -> float:
    score = 0.0
    if metadata.has_transcription:
        score += 1.0
        factors.append("Has transcription/clear content (+1.0)")

    if metrics.has_news_content and metrics.needs_fact_check:
        if fact_check is not None and fact_check.is_verified:
            score += 2.0
            factors.append("News content properly fact-checked (+2.0)")
        else:
            score -= 1.5
            factors.append("News content not properly verified (-1.5)")

    length = metrics.content_length
    if length:
        if length > 200:
            score += 1.0
            factors.append("Substantial content length (+1.0)")
        elif length > 100:
            score += 0.5
            factors.append("Good content length (+0.5)")
        elif length < 20:
            score -= 1.0
            factors.append("Very short content (-1.0)")
        elif length < 50:
            score -= 0.3
            factors.append("Short content (-0.3)")

    for table, key in (
        (PLATFORM_MODIFIERS, metadata.platform),
        (CONTENT_TYPE_MODIFIERS, metadata.content_type),
    ):
        entry = table.get((key or "").lower())
        if entry:
            score += entry[0]
            factors.append(entry[1])
    return score


def _sentiment_score(sentiment: SentimentAnalysis | None, factors: list[str]) -> float:
    if sentiment is None:
        return 0.0

    score = 0.0
    intensity = sentiment.emotional_intensity
    if intensity > 0.8:
        score -= 1.0
        factors.append("High emotional intensity (-1.0)")
    elif intensity > 0.6:
        score -= 0.5
        factors.append("Moderate emotional intensity (-0.5)")
    elif intensity < 0.3:
        score += 0.5
        factors.append("Low emotional intensity (factual) (+0.5)")

    for flag, delta, factor in SENTIMENT_FLAG_MODIFIERS:
        if flag in sentiment.flags:
            score += delta
            factors.append(factor)

    entry = OVERALL_SENTIMENT_MODIFIERS.get((sentiment.overall or "").upper())
    if entry:
        score += entry[0]
        factors.append(entry[1])
    return score


def _clamp(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))
