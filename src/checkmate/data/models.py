"""Core data models for Checkmate."""

import dataclasses
import time
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Platform(StrEnum):
    """Supported content platforms."""

    TIKTOK = "tiktok"
    TWITTER = "twitter"
    WEB = "web"


class Verdict(StrEnum):
    """Categorical fact-check conclusions."""

    VERIFIED = "verified"
    MISLEADING = "misleading"
    FALSE = "false"
    UNVERIFIED = "unverified"
    SATIRE = "satire"
    PARTIALLY_TRUE = "partially_true"
    EXAGGERATED = "exaggerated"
    OUTDATED = "outdated"
    OPINION = "opinion"
    RUMOR = "rumor"
    CONSPIRACY = "conspiracy"
    DEBUNKED = "debunked"


class BiasDirection(StrEnum):
    """Generic political-bias label."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    NONE = "none"


class Tier(StrEnum):
    """Rate-limit identity tiers."""

    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    PREMIUM = "premium"


# ============================================================
# Request context and extracted content
# ============================================================


@dataclass(frozen=True)
class ProcessingContext:
    """Per-request context threaded through every pipeline stage.

    ``tier`` selects the caller's general rate-limit allowance. When unset,
    callers with a ``user_id`` are authenticated and everyone else is
    anonymous.
    """

    request_id: str
    platform: Platform
    url: str
    start_time: float
    user_id: str | None = None
    client_address: str | None = None
    tier: Tier | None = None

    @property
    def effective_tier(self) -> Tier:
        if self.tier is not None:
            return self.tier
        return Tier.AUTHENTICATED if self.user_id else Tier.ANONYMOUS

    @classmethod
    def create(
        cls,
        url: str,
        platform: Platform,
        *,
        user_id: str | None = None,
        client_address: str | None = None,
        tier: Tier | None = None,
    ) -> "ProcessingContext":
        return cls(
            request_id=str(uuid.uuid4()),
            platform=platform,
            url=url,
            start_time=time.time(),
            user_id=user_id,
            client_address=client_address,
            tier=tier,
        )


@dataclass(frozen=True)
class ExtractedContent:
    """Normalized content common to every platform."""

    url: str
    platform: Platform
    title: str = ""
    description: str = ""
    creator: str = ""
    content_type: str = ""

    @property
    def text(self) -> str:
        """Best available text for fact-checking."""
        return self.description or self.title

    @property
    def media_url(self) -> str | None:
        """Media URL to transcribe, if any."""
        return None


@dataclass(frozen=True)
class VideoContent(ExtractedContent):
    """A short-video post."""

    video_url: str | None = None
    video_hd: str | None = None
    video_watermark: str | None = None
    play_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    share_count: int = 0

    @property
    def media_url(self) -> str | None:
        # Only real videos are transcribed; HD gives the cleanest audio.
        if self.content_type != "video":
            return None
        return self.video_hd or self.video_watermark or self.video_url


@dataclass(frozen=True)
class TweetContent(ExtractedContent):
    """A microblog post."""

    tweet_id: str = ""
    body: str = ""
    video_urls: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return self.body or self.title

    @property
    def media_url(self) -> str | None:
        return self.video_urls[0] if self.video_urls else None


@dataclass(frozen=True)
class ArticleContent(ExtractedContent):
    """A scraped web article."""

    body: str = ""
    author: str | None = None
    published_time: str | None = None
    language: str | None = None
    site_name: str | None = None

    @property
    def text(self) -> str:
        return self.body or self.description


@dataclass(frozen=True)
class TranscriptSegment:
    """A timed piece of a transcript (seconds)."""

    start: float
    end: float
    text: str


@dataclass(frozen=True)
class TranscriptionResult:
    """Speech-to-text output for a media URL."""

    text: str
    segments: tuple[TranscriptSegment, ...] = ()
    language: str | None = None


# ============================================================
# Search and fact-checking
# ============================================================


@dataclass(frozen=True)
class SearchHit:
    """A single search result."""

    url: str
    title: str = ""
    score: float | None = None
    text: str | None = None
    summary: str | None = None
    published_date: str | None = None


@dataclass(frozen=True)
class PageContent:
    """Retrieved contents for a URL."""

    url: str
    title: str = ""
    text: str = ""
    summary: str = ""
    highlights: tuple[str, ...] = ()
    published_date: str | None = None


@dataclass(frozen=True)
class FactCheckSource:
    """A source consulted while fact-checking.

    ``credibility`` is on a 0-10 scale for researched sources and 0-100 for
    sources scored by URL heuristics in origin tracing. ``relevance`` is 0-1.
    """

    url: str
    title: str
    credibility: float
    source: str = ""
    relevance: float | None = None


@dataclass(frozen=True)
class FirstSeen:
    """Earliest known appearance of a claim."""

    source: str
    date: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class EvolutionStep:
    """One hop in how a claim travelled or mutated."""

    platform: str
    transformation: str = ""
    date: str | None = None
    impact: str | None = None


@dataclass(frozen=True)
class Reference:
    """A titled link."""

    title: str
    url: str


@dataclass(frozen=True)
class BeliefDriver:
    """A cognitive or social reason an audience may believe a claim."""

    name: str
    description: str = ""
    references: tuple[Reference, ...] = ()


@dataclass(frozen=True)
class OriginTracing:
    """Where a claim likely originated and how it spread."""

    hypothesized_origin: str | None = None
    first_seen: tuple[FirstSeen, ...] = ()
    propagation_paths: tuple[str, ...] = ()
    evolution_steps: tuple[EvolutionStep, ...] = ()


@dataclass(frozen=True)
class SentimentAnalysis:
    """Sentiment, key phrases and entities for a piece of text."""

    overall: str
    scores: dict[str, float] = field(default_factory=dict)
    key_phrases: tuple[str, ...] = ()
    entities: tuple[str, ...] = ()
    emotional_intensity: float = 0.0
    flags: tuple[str, ...] = ()


@dataclass(frozen=True)
class PoliticalBiasResult:
    """Generic bias label plus an optional region-specialized 0-100 score."""

    bias_direction: BiasDirection
    bias_intensity: float
    confidence: float
    explanation: str = ""
    bias_indicators: tuple[str, ...] = ()
    political_topics: tuple[str, ...] = ()
    is_region_specific: bool = False
    region_bias_score: float | None = None
    key_quote: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "bias_intensity", _clamp(self.bias_intensity, 0.0, 1.0))
        object.__setattr__(self, "confidence", _clamp(self.confidence, 0.0, 1.0))
        if self.region_bias_score is not None:
            object.__setattr__(
                self, "region_bias_score", _clamp(self.region_bias_score, 0.0, 100.0)
            )


@dataclass(frozen=True)
class FactCheckResult:
    """Outcome of fact-checking a piece of content. ``confidence`` is 0-100."""

    verdict: Verdict
    confidence: int
    explanation: str
    content: str = ""
    sources: tuple[FactCheckSource, ...] = ()
    flags: tuple[str, ...] = ()
    origin_tracing: OriginTracing | None = None
    belief_drivers: tuple[BeliefDriver, ...] = ()
    political_bias: PoliticalBiasResult | None = None
    sentiment: SentimentAnalysis | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", int(_clamp(round(self.confidence), 0, 100)))


# ============================================================
# Scores and results
# ============================================================


@dataclass(frozen=True)
class CredibilityRating:
    """A 0-10 rating with the ordered, signed factors that produced it."""

    rating: float
    factors: tuple[str, ...] = ()


@dataclass(frozen=True)
class OriginTracingData:
    """Merged origin-tracing view combining parsed and generated extractions."""

    origin_tracing: OriginTracing
    belief_drivers: tuple[BeliefDriver, ...] = ()
    sources: tuple[FactCheckSource, ...] = ()
    verdict: str | None = None
    claim: str | None = None
    all_links: tuple[Reference, ...] = ()


@dataclass(frozen=True)
class GraphNode:
    """A node in the origin-tracing graph."""

    id: str
    type: str
    label: str
    detail: str | None = None


@dataclass(frozen=True)
class GraphEdge:
    """A directed edge in the origin-tracing graph."""

    id: str
    source: str
    target: str
    label: str = ""


@dataclass(frozen=True)
class OriginGraph:
    """Node and edge lists for rendering origin tracing."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()


@dataclass(frozen=True)
class StageTiming:
    """Duration and outcome of one pipeline stage."""

    stage: str
    duration_seconds: float
    succeeded: bool
    error: str | None = None


@dataclass(frozen=True)
class ResultMetadata:
    """Descriptive metadata returned with every analysis."""

    title: str
    description: str
    creator: str
    original_url: str
    platform: Platform


@dataclass(frozen=True)
class AnalysisResult:
    """Final output of ``ContentPipeline.process``."""

    transcription: TranscriptionResult | None
    metadata: ResultMetadata
    fact_check: FactCheckResult | None
    requires_fact_check: bool
    creator_credibility_rating: float | None = None
    credibility_factors: tuple[str, ...] = ()
    origin_tracing_data: OriginTracingData | None = None
    origin_graph: OriginGraph | None = None
    stage_timings: tuple[StageTiming, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation."""
        return dataclasses.asdict(self)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
