"""Checkmate: verify short-video, microblog and web-article content."""

from checkmate.bias import PoliticalBiasAnalyzer
from checkmate.config import CheckmateConfig, create_from_config, load_config
from checkmate.credibility import calculate_credibility
from checkmate.data import (
    AnalysisResult,
    ArticleContent,
    BiasDirection,
    CredibilityRating,
    FactCheckResult,
    OriginGraph,
    OriginTracingData,
    Platform,
    PoliticalBiasResult,
    ProcessingContext,
    SentimentAnalysis,
    TweetContent,
    Verdict,
    VideoContent,
)
from checkmate.errors import CheckmateError, to_failure
from checkmate.factcheck import FactChecker, WebFactChecker
from checkmate.origin import OriginTracer
from checkmate.pipeline import ContentPipeline, Pipeline
from checkmate.run_logger import RunLogger
from checkmate.url import detect_platform, extract_domain, validate_url

__all__ = [
    # Models
    "AnalysisResult",
    "ArticleContent",
    "BiasDirection",
    "CredibilityRating",
    "FactCheckResult",
    "OriginGraph",
    "OriginTracingData",
    "Platform",
    "PoliticalBiasResult",
    "ProcessingContext",
    "SentimentAnalysis",
    "TweetContent",
    "Verdict",
    "VideoContent",
    # Errors
    "CheckmateError",
    "to_failure",
    # Functions
    "calculate_credibility",
    "detect_platform",
    "extract_domain",
    "validate_url",
    # Protocols
    "FactChecker",
    "Pipeline",
    # Components
    "OriginTracer",
    "PoliticalBiasAnalyzer",
    "WebFactChecker",
    # Pipelines
    "ContentPipeline",
    # Logging
    "RunLogger",
    # Config
    "CheckmateConfig",
    "create_from_config",
    "load_config",
]
