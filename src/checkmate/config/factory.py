"""Factory functions to create components from configuration."""

from pathlib import Path

from checkmate.bias import PoliticalBiasAnalyzer
from checkmate.config.models import (
    BreakerConfig,
    BreakersConfig,
    CheckmateConfig,
    ClaudeGeneratorConfig,
    ComprehendSentimentConfig,
    ExaSearchConfig,
    ExtractorsConfig,
    FirecrawlExtractorConfig,
    GeneratorConfig,
    NoSentimentConfig,
    NoTranscriberConfig,
    PromptParamsConfig,
    RateLimitConfig,
    RetryConfig,
    SearchConfig,
    SentimentConfig,
    TimeoutsConfig,
    TranscriberConfig,
    WhisperTranscriberConfig,
    XApiExtractorConfig,
    YtDlpExtractorConfig,
)
from checkmate.data import Platform
from checkmate.extract import ContentExtractor, TikTokExtractor, TwitterExtractor, WebExtractor
from checkmate.factcheck import DomainCredibilityOracle, WebFactChecker
from checkmate.generation import ClaudeTextGenerator, GenerationParams, TextGenerator
from checkmate.origin import OriginTracer
from checkmate.pipeline import ContentPipeline, PlatformHandler, StageTimeouts
from checkmate.ratelimit import RateLimit, RateLimiter, RedisCounterStore, default_tiers
from checkmate.resilience import CircuitBreaker, CircuitBreakers, RetryPolicy
from checkmate.run_logger import RunLogger
from checkmate.search import ExaSearcher, WebSearcher
from checkmate.sentiment import ComprehendSentimentAnalyzer, SentimentAnalyzer
from checkmate.transcribe import Transcriber, WhisperTranscriber


def create_params(config: PromptParamsConfig) -> GenerationParams:
    return GenerationParams(max_tokens=config.max_tokens, temperature=config.temperature)


def create_generator(config: GeneratorConfig, *, timeout: float = 30.0) -> TextGenerator:
    """Create a text generator from config.

    Uses explicit type matching rather than getattr.
    """
    if isinstance(config, ClaudeGeneratorConfig):
        return ClaudeTextGenerator(model=config.model, timeout=timeout)
    msg = f"Unknown generator config type: {type(config)}"
    raise ValueError(msg)


def create_searcher(config: SearchConfig) -> WebSearcher:
    """Create a web searcher from config."""
    if isinstance(config, ExaSearchConfig):
        return ExaSearcher()
    msg = f"Unknown search config type: {type(config)}"
    raise ValueError(msg)


def create_extractor(
    config: YtDlpExtractorConfig | XApiExtractorConfig | FirecrawlExtractorConfig,
) -> ContentExtractor:
    """Create a content extractor from config."""
    if isinstance(config, YtDlpExtractorConfig):
        return TikTokExtractor(cookie_file=config.cookie_file)
    if isinstance(config, XApiExtractorConfig):
        return TwitterExtractor()
    if isinstance(config, FirecrawlExtractorConfig):
        return WebExtractor()
    msg = f"Unknown extractor config type: {type(config)}"
    raise ValueError(msg)


def create_transcriber(config: TranscriberConfig) -> Transcriber | None:
    """Create a transcriber from config. ``none`` disables transcription."""
    if isinstance(config, WhisperTranscriberConfig):
        return WhisperTranscriber(model=config.model)
    if isinstance(config, NoTranscriberConfig):
        return None
    msg = f"Unknown transcriber config type: {type(config)}"
    raise ValueError(msg)


def create_sentiment(config: SentimentConfig) -> SentimentAnalyzer | None:
    """Create a sentiment analyzer from config. ``none`` disables sentiment."""
    if isinstance(config, ComprehendSentimentConfig):
        return ComprehendSentimentAnalyzer(region_name=config.region_name)
    if isinstance(config, NoSentimentConfig):
        return None
    msg = f"Unknown sentiment config type: {type(config)}"
    raise ValueError(msg)


def create_breakers(config: BreakersConfig) -> CircuitBreakers:
    """Create one shared circuit breaker per protected dependency."""

    def breaker(name: str, settings: BreakerConfig) -> CircuitBreaker:
        return CircuitBreaker(
            name,
            failure_threshold=settings.failure_threshold,
            success_threshold=settings.success_threshold,
            timeout=settings.timeout_seconds,
        )

    return CircuitBreakers(
        tiktok=breaker("tiktok", config.tiktok),
        twitter=breaker("twitter", config.twitter),
        scraper=breaker("scraper", config.scraper),
        transcription=breaker("transcription", config.transcription),
        fact_check=breaker("fact_check", config.fact_check),
        sentiment=breaker("sentiment", config.sentiment),
        analysis=breaker("analysis", config.analysis),
    )


def create_rate_limiter(config: RateLimitConfig) -> RateLimiter | None:
    """Create the rate limiter, or None when limiting is disabled.

    A configured ``redis_url`` shares counters across processes; without it
    counters are process-local.
    """
    if not config.enabled:
        return None
    store = RedisCounterStore.from_url(config.redis_url) if config.redis_url else None
    return RateLimiter(
        store,
        tiers=default_tiers(config.window_seconds, config.max_requests),
        operation_limits={
            name: RateLimit(window_seconds=op.window_seconds, max_requests=op.max_requests)
            for name, op in config.operations.items()
        },
    )


def create_retry_policy(config: RetryConfig) -> RetryPolicy:
    return RetryPolicy(
        max_attempts=config.max_attempts,
        initial_delay=config.initial_delay,
        backoff_multiplier=config.backoff_multiplier,
        max_delay=config.max_delay,
    )


def create_timeouts(config: TimeoutsConfig) -> StageTimeouts:
    return StageTimeouts(
        extraction=config.extraction,
        transcription=config.transcription,
        fact_check=config.fact_check,
        sentiment=config.sentiment,
        analysis=config.analysis,
    )


def create_handlers(
    config: ExtractorsConfig,
    breakers: CircuitBreakers,
    transcriber: Transcriber | None,
) -> dict[Platform, PlatformHandler]:
    """One handler per platform. Web articles are never transcribed."""
    return {
        Platform.TIKTOK: PlatformHandler(
            platform=Platform.TIKTOK,
            extractor=create_extractor(config.tiktok),
            breaker=breakers.tiktok,
            transcriber=transcriber,
        ),
        Platform.TWITTER: PlatformHandler(
            platform=Platform.TWITTER,
            extractor=create_extractor(config.twitter),
            breaker=breakers.twitter,
            transcriber=transcriber,
        ),
        Platform.WEB: PlatformHandler(
            platform=Platform.WEB,
            extractor=create_extractor(config.web),
            breaker=breakers.scraper,
        ),
    }


def create_pipeline(
    config: CheckmateConfig,
    run_logger: RunLogger | None = None,
) -> ContentPipeline:
    """Wire every component of the verification pipeline from config."""
    generator = create_generator(config.generator, timeout=config.timeouts.generation)
    breakers = create_breakers(config.breakers)

    search = config.search
    params = config.generator
    fact_checker = WebFactChecker(
        generator,
        create_searcher(search),
        oracle=DomainCredibilityOracle(generator, params=create_params(params.score)),
        num_results=search.num_results,
        contents_limit=search.contents_limit,
        query_params=create_params(params.query),
        analysis_params=create_params(params.analysis),
        classify_params=create_params(params.classify),
    )
    origin_tracer = OriginTracer(generator, params=create_params(params.extraction))

    return ContentPipeline(
        create_handlers(config.extractors, breakers, create_transcriber(config.transcriber)),
        fact_checker,
        breakers=breakers,
        rate_limiter=create_rate_limiter(config.rate_limit),
        retry=create_retry_policy(config.retry),
        timeouts=create_timeouts(config.timeouts),
        sentiment=create_sentiment(config.sentiment),
        bias_analyzer=PoliticalBiasAnalyzer(generator),
        origin_tracer=origin_tracer,
        run_logger=run_logger,
    )


def create_from_config(
    config: CheckmateConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[ContentPipeline, RunLogger | None]:
    """Create a complete pipeline from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (pipeline, run_logger).
        run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    pipeline = create_pipeline(config, run_logger=run_logger)
    return (pipeline, run_logger)
