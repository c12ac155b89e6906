"""Pydantic configuration models for Checkmate components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

# ============================================================
# Resilience Configs
# ============================================================


class BreakerConfig(BaseModel):
    """Thresholds for one circuit breaker."""

    failure_threshold: int = Field(default=5, ge=1)
    success_threshold: int = Field(default=2, ge=1)
    timeout_seconds: float = Field(default=60.0, gt=0)

    model_config = {"frozen": True}


class BreakersConfig(BaseModel):
    """One breaker per protected dependency."""

    tiktok: BreakerConfig = Field(default_factory=BreakerConfig)
    twitter: BreakerConfig = Field(default_factory=BreakerConfig)
    scraper: BreakerConfig = Field(
        default_factory=lambda: BreakerConfig(failure_threshold=3, timeout_seconds=30.0)
    )
    transcription: BreakerConfig = Field(
        default_factory=lambda: BreakerConfig(failure_threshold=3, timeout_seconds=60.0)
    )
    fact_check: BreakerConfig = Field(
        default_factory=lambda: BreakerConfig(failure_threshold=3, timeout_seconds=180.0)
    )
    sentiment: BreakerConfig = Field(
        default_factory=lambda: BreakerConfig(failure_threshold=3, timeout_seconds=60.0)
    )
    analysis: BreakerConfig = Field(
        default_factory=lambda: BreakerConfig(failure_threshold=3, timeout_seconds=60.0)
    )

    model_config = {"frozen": True}


class TimeoutsConfig(BaseModel):
    """Overall per-stage budgets in seconds."""

    extraction: float = Field(default=30.0, gt=0)
    transcription: float = Field(default=60.0, gt=0)
    fact_check: float = Field(default=120.0, gt=0)
    sentiment: float = Field(default=15.0, gt=0)
    analysis: float = Field(default=30.0, gt=0)
    generation: float = Field(default=30.0, gt=0)

    model_config = {"frozen": True}


class RetryConfig(BaseModel):
    """Exponential backoff parameters. Delays are in seconds."""

    max_attempts: int = Field(default=3, ge=1)
    initial_delay: float = Field(default=1.0, ge=0)
    backoff_multiplier: float = Field(default=2.0, ge=1)
    max_delay: float = Field(default=30.0, ge=0)

    model_config = {"frozen": True}


# ============================================================
# Rate Limit Config
# ============================================================


class OperationLimitConfig(BaseModel):
    """Fixed-window allowance for one operation."""

    window_seconds: float = Field(default=60.0, gt=0)
    max_requests: int = Field(ge=1)

    model_config = {"frozen": True}


class RateLimitConfig(BaseModel):
    """Tier allowance, shared store and operation limits."""

    enabled: bool = True
    window_seconds: float = Field(default=900.0, gt=0)
    max_requests: int = Field(default=100, ge=1)
    redis_url: str | None = None
    operations: dict[str, OperationLimitConfig] = Field(
        default_factory=lambda: {
            "transcribe": OperationLimitConfig(max_requests=120),
            "fact_check": OperationLimitConfig(max_requests=60),
        }
    )

    model_config = {"frozen": True}


# ============================================================
# Generator Configs
# ============================================================


class PromptParamsConfig(BaseModel):
    """Token budget and temperature for one kind of prompt."""

    max_tokens: int = Field(ge=1)
    temperature: float = Field(default=0.1, ge=0, le=1)

    model_config = {"frozen": True}


class ClaudeGeneratorConfig(BaseModel):
    """Configuration for ClaudeTextGenerator."""

    type: Literal["claude"] = "claude"
    model: str = "claude-haiku-4-5-20251001"
    query: PromptParamsConfig = PromptParamsConfig(max_tokens=100, temperature=0.3)
    analysis: PromptParamsConfig = PromptParamsConfig(max_tokens=2000)
    classify: PromptParamsConfig = PromptParamsConfig(max_tokens=100)
    score: PromptParamsConfig = PromptParamsConfig(max_tokens=10)
    extraction: PromptParamsConfig = PromptParamsConfig(max_tokens=4000)

    model_config = {"frozen": True}


GeneratorConfig = Annotated[
    ClaudeGeneratorConfig,
    Field(discriminator="type"),
]


# ============================================================
# Search Configs
# ============================================================


class ExaSearchConfig(BaseModel):
    """Configuration for ExaSearcher."""

    type: Literal["exa"] = "exa"
    num_results: int = Field(default=10, ge=1)
    contents_limit: int = Field(default=5, ge=1)

    model_config = {"frozen": True}


SearchConfig = Annotated[
    ExaSearchConfig,
    Field(discriminator="type"),
]


# ============================================================
# Extractor Configs
# ============================================================


class YtDlpExtractorConfig(BaseModel):
    """Short-video metadata extraction with yt-dlp."""

    type: Literal["ytdlp"] = "ytdlp"
    cookie_file: str | None = None

    model_config = {"frozen": True}


class XApiExtractorConfig(BaseModel):
    """Microblog extraction with the X API v2."""

    type: Literal["x_api"] = "x_api"

    model_config = {"frozen": True}


class FirecrawlExtractorConfig(BaseModel):
    """Web-article scraping with Firecrawl."""

    type: Literal["firecrawl"] = "firecrawl"

    model_config = {"frozen": True}


class ExtractorsConfig(BaseModel):
    """One extractor per platform."""

    tiktok: YtDlpExtractorConfig = Field(default_factory=YtDlpExtractorConfig)
    twitter: XApiExtractorConfig = Field(default_factory=XApiExtractorConfig)
    web: FirecrawlExtractorConfig = Field(default_factory=FirecrawlExtractorConfig)

    model_config = {"frozen": True}


# ============================================================
# Transcriber Configs
# ============================================================


class WhisperTranscriberConfig(BaseModel):
    """Speech-to-text with OpenAI."""

    type: Literal["whisper"] = "whisper"
    model: str = "whisper-1"

    model_config = {"frozen": True}


class NoTranscriberConfig(BaseModel):
    """Skip transcription; fact-check post text only."""

    type: Literal["none"] = "none"

    model_config = {"frozen": True}


TranscriberConfig = Annotated[
    WhisperTranscriberConfig | NoTranscriberConfig,
    Field(discriminator="type"),
]


# ============================================================
# Sentiment Configs
# ============================================================


class ComprehendSentimentConfig(BaseModel):
    """Sentiment, key phrases and entities with AWS Comprehend."""

    type: Literal["comprehend"] = "comprehend"
    region_name: str = "us-east-1"

    model_config = {"frozen": True}


class NoSentimentConfig(BaseModel):
    """Skip sentiment analysis."""

    type: Literal["none"] = "none"

    model_config = {"frozen": True}


SentimentConfig = Annotated[
    ComprehendSentimentConfig | NoSentimentConfig,
    Field(discriminator="type"),
]


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for per-request run logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class CheckmateConfig(BaseModel):
    """Root configuration for Checkmate."""

    breakers: BreakersConfig = Field(default_factory=BreakersConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    generator: GeneratorConfig = Field(default_factory=ClaudeGeneratorConfig)
    search: SearchConfig = Field(default_factory=ExaSearchConfig)
    extractors: ExtractorsConfig = Field(default_factory=ExtractorsConfig)
    transcriber: TranscriberConfig = Field(default_factory=WhisperTranscriberConfig)
    sentiment: SentimentConfig = Field(default_factory=ComprehendSentimentConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
