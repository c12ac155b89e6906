"""Configuration module for Checkmate."""

from checkmate.config.factory import create_from_config, create_pipeline
from checkmate.config.loader import get_default_config_path, load_config
from checkmate.config.models import (
    BreakerConfig,
    BreakersConfig,
    CheckmateConfig,
    ClaudeGeneratorConfig,
    ComprehendSentimentConfig,
    ExaSearchConfig,
    ExtractorsConfig,
    GeneratorConfig,
    LoggingConfig,
    NoSentimentConfig,
    NoTranscriberConfig,
    RateLimitConfig,
    RetryConfig,
    SentimentConfig,
    TimeoutsConfig,
    TranscriberConfig,
    WhisperTranscriberConfig,
)

__all__ = [
    "BreakerConfig",
    "BreakersConfig",
    "CheckmateConfig",
    "ClaudeGeneratorConfig",
    "ComprehendSentimentConfig",
    "ExaSearchConfig",
    "ExtractorsConfig",
    "GeneratorConfig",
    "LoggingConfig",
    "NoSentimentConfig",
    "NoTranscriberConfig",
    "RateLimitConfig",
    "RetryConfig",
    "SentimentConfig",
    "TimeoutsConfig",
    "TranscriberConfig",
    "WhisperTranscriberConfig",
    "create_from_config",
    "create_pipeline",
    "get_default_config_path",
    "load_config",
]
