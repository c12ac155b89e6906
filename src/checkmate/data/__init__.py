from checkmate.data.models import (
    AnalysisResult,
    ArticleContent,
    BeliefDriver,
    BiasDirection,
    CredibilityRating,
    EvolutionStep,
    ExtractedContent,
    FactCheckResult,
    FactCheckSource,
    FirstSeen,
    GraphEdge,
    GraphNode,
    OriginGraph,
    OriginTracing,
    OriginTracingData,
    PageContent,
    Platform,
    PoliticalBiasResult,
    ProcessingContext,
    Reference,
    ResultMetadata,
    SearchHit,
    SentimentAnalysis,
    StageTiming,
    Tier,
    TranscriptionResult,
    TranscriptSegment,
    TweetContent,
    Verdict,
    VideoContent,
)

__all__ = [
    "AnalysisResult",
    "ArticleContent",
    "BeliefDriver",
    "BiasDirection",
    "CredibilityRating",
    "EvolutionStep",
    "ExtractedContent",
    "FactCheckResult",
    "FactCheckSource",
    "FirstSeen",
    "GraphEdge",
    "GraphNode",
    "OriginGraph",
    "OriginTracing",
    "OriginTracingData",
    "PageContent",
    "Platform",
    "PoliticalBiasResult",
    "ProcessingContext",
    "Reference",
    "ResultMetadata",
    "SearchHit",
    "SentimentAnalysis",
    "StageTiming",
    "Tier",
    "TranscriptSegment",
    "TranscriptionResult",
    "TweetContent",
    "Verdict",
    "VideoContent",
]
