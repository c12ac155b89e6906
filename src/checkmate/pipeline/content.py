"""Content verification pipeline: extract, transcribe, fact-check, score."""

import asyncio
import dataclasses
import logging
import time
from dataclasses import dataclass
from typing import Any

from checkmate.bias import PoliticalBiasAnalyzer
from checkmate.credibility import (
    AnalysisMetrics,
    ContentMetadata,
    FactCheckSignal,
    calculate_credibility,
)
from checkmate.data import (
    AnalysisResult,
    ArticleContent,
    CredibilityRating,
    ExtractedContent,
    FactCheckResult,
    OriginGraph,
    OriginTracingData,
    Platform,
    PoliticalBiasResult,
    ProcessingContext,
    ResultMetadata,
    SentimentAnalysis,
    StageTiming,
    TranscriptionResult,
    Verdict,
)
from checkmate.errors import CircuitOpen, ExtractionFailed, ValidationError
from checkmate.factcheck import FactChecker
from checkmate.origin import OriginTracer
from checkmate.pipeline.base import CreatorHistory, PlatformHandler
from checkmate.ratelimit import RateLimiter, resolve_identity
from checkmate.resilience import (
    CircuitBreakers,
    RetryPolicy,
    default_should_retry,
    execute_with_resilience,
)
from checkmate.run_logger import RunLogger
from checkmate.sentiment import SentimentAnalyzer
from checkmate.url import detect_platform, sanitize_url, validate_url

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE = "service_unavailable"
TECHNICAL_ERROR = "technical_error"
RATE_LIMITED = "rate_limited"

FALLBACK_EXPLANATIONS = {
    SERVICE_UNAVAILABLE: (
        "Verification service temporarily unavailable. Manual fact-checking recommended."
    ),
    TECHNICAL_ERROR: (
        "Fact-checking failed due to technical error. Manual verification recommended."
    ),
    RATE_LIMITED: "Fact-checking rate limit reached. Manual verification recommended.",
}

DEGRADED_FLAGS = frozenset(FALLBACK_EXPLANATIONS)


@dataclass(frozen=True)
class StageTimeouts:
    """Overall per-stage budgets in seconds, retries included.

    Sentiment runs alongside the fact-check and is also bounded by its
    budget. ``analysis`` bounds each political-bias and origin-tracing call.
    """

    extraction: float = 30.0
    transcription: float = 60.0
    fact_check: float = 120.0
    sentiment: float = 15.0
    analysis: float = 30.0


def fallback_fact_check(text: str, flag: str) -> FactCheckResult:
    """Unverified, zero-confidence result recording why no check happened."""
    return FactCheckResult(
        verdict=Verdict.UNVERIFIED,
        confidence=0,
        explanation=FALLBACK_EXPLANATIONS[flag],
        content=text[:500] + ("..." if len(text) > 500 else ""),
        flags=(flag,),
    )


def fact_check_text(content: ExtractedContent, transcription: TranscriptionResult | None) -> str:
    """Text to fact-check: the post or article text plus any transcript."""
    parts = [content.text.strip()]
    if transcription is not None and transcription.text.strip():
        spoken = transcription.text.strip()
        if spoken not in parts[0]:
            parts.append(spoken)
    return "\n\n".join(p for p in parts if p)


class ContentPipeline:
    """The fixed four-stage verification pipeline shared by every platform.

    Stages run in order: extract, transcribe, fact-check (with sentiment and
    political bias), then credibility and origin tracing. Extraction failure
    is fatal. Every later stage degrades instead of raising: a missing
    transcript falls back to the post text, a failed fact-check becomes an
    unverified result with a flag, and failed scoring is omitted.

    External calls run through ``execute_with_resilience`` with the breaker
    for their dependency. Breakers and the rate limiter are shared across
    requests; everything else is per call.

    Args:
        handlers: Extraction and transcription per platform.
        fact_checker: Research-based fact-checker.
        breakers: Shared circuit breakers.
        rate_limiter: Operation-scoped limiter, or None to disable limiting.
        retry: Backoff policy for every external call.
        timeouts: Per-stage time budgets.
        sentiment: Sentiment analyzer, or None to skip sentiment.
        bias_analyzer: Political-bias analyzer, or None to skip it.
        origin_tracer: Origin tracer, or None to skip origin tracing.
        creator_history: Source of past ratings for the creator, or None.
        run_logger: Optional RunLogger for per-request JSON records.
    """

    def __init__(
        self,
        handlers: dict[Platform, PlatformHandler],
        fact_checker: FactChecker,
        *,
        breakers: CircuitBreakers,
        rate_limiter: RateLimiter | None = None,
        retry: RetryPolicy | None = None,
        timeouts: StageTimeouts | None = None,
        sentiment: SentimentAnalyzer | None = None,
        bias_analyzer: PoliticalBiasAnalyzer | None = None,
        origin_tracer: OriginTracer | None = None,
        creator_history: CreatorHistory | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._handlers = handlers
        self._fact_checker = fact_checker
        self._breakers = breakers
        self._rate_limiter = rate_limiter
        self._retry = retry or RetryPolicy()
        self._timeouts = timeouts or StageTimeouts()
        self._sentiment = sentiment
        self._bias_analyzer = bias_analyzer
        self._origin_tracer = origin_tracer
        self._creator_history = creator_history
        self._run_logger = run_logger

    async def process(
        self, url: str, context: ProcessingContext | None = None
    ) -> AnalysisResult:
        """Verify the content at ``url``.

        Args:
            url: Short-video, microblog or web-article URL.
            context: Per-request context. Created from ``url`` when omitted.

        Returns:
            The analysis result with per-stage timings.

        Raises:
            ValidationError: If the URL is missing, malformed or unsupported.
            RateLimited: If the caller exceeded their tier or per-operation allowance.
            ExtractionFailed: If content could not be extracted.
        """
        url = sanitize_url(validate_url(url))
        platform = detect_platform(url)
        handler = self._handlers.get(platform)
        if handler is None:
            raise ValidationError.unsupported_platform(url)
        if context is None:
            context = ProcessingContext.create(url, platform)
        identity = resolve_identity(context.user_id, context.client_address)

        if self._rate_limiter:
            await self._rate_limiter.enforce_tier(identity, context.effective_tier)
            await self._rate_limiter.enforce_operation(identity, "transcribe")

        logger.info(f"[{context.request_id}] Processing {platform} URL {url}")
        if self._run_logger:
            self._run_logger.start_run(context.request_id, platform, url)
        timings: list[StageTiming] = []
        rating: CredibilityRating | None = None

        try:
            content = await self._extract(handler, url, context, timings)
            transcription = await self._transcribe(handler, content, context, timings)

            text = fact_check_text(content, transcription)
            requires_fact_check = bool(text)
            fact_check: FactCheckResult | None = None
            if requires_fact_check:
                fact_check = await self._fact_check(content, text, identity, context, timings)

            rating = await self._score_credibility(
                content, transcription, fact_check, text, context, timings
            )
            origin_data, origin_graph = await self._trace_origin(
                fact_check, text, context, timings
            )
        finally:
            if self._run_logger:
                self._run_logger.finish_run(
                    context.request_id, rating.rating if rating is not None else None
                )

        logger.info(
            f"[{context.request_id}] Done in {time.time() - context.start_time:.2f}s: "
            f"verdict={fact_check.verdict if fact_check else None}, "
            f"rating={rating.rating if rating else None}"
        )

        return AnalysisResult(
            transcription=transcription,
            metadata=ResultMetadata(
                title=content.title,
                description=content.description,
                creator=content.creator,
                original_url=url,
                platform=platform,
            ),
            fact_check=fact_check,
            requires_fact_check=requires_fact_check,
            creator_credibility_rating=rating.rating if rating is not None else None,
            credibility_factors=rating.factors if rating is not None else (),
            origin_tracing_data=origin_data,
            origin_graph=origin_graph,
            stage_timings=tuple(timings),
        )

    # ------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------

    async def _extract(
        self,
        handler: PlatformHandler,
        url: str,
        context: ProcessingContext,
        timings: list[StageTiming],
    ) -> ExtractedContent:
        t0 = time.monotonic()
        component = type(handler.extractor).__name__
        try:
            content = await execute_with_resilience(
                lambda: handler.extractor.extract(url),
                f"{handler.platform}_extraction",
                breaker=handler.breaker,
                timeout=self._timeouts.extraction,
                retry=self._retry,
            )
        except ValidationError:
            raise
        except Exception as e:
            logger.warning(f"[{context.request_id}] Extraction failed for {url}: {e}")
            self._record(context, timings, "extract", component, url, None, t0, error=str(e))
            raise ExtractionFailed(str(handler.platform), url, e) from e

        self._record(context, timings, "extract", component, url, content, t0)
        return content

    async def _transcribe(
        self,
        handler: PlatformHandler,
        content: ExtractedContent,
        context: ProcessingContext,
        timings: list[StageTiming],
    ) -> TranscriptionResult | None:
        transcriber = handler.transcriber
        media_url = content.media_url
        if transcriber is None or not media_url:
            return None

        t0 = time.monotonic()
        component = type(transcriber).__name__
        try:
            transcription = await execute_with_resilience(
                lambda: transcriber.transcribe(media_url),
                "transcription",
                breaker=self._breakers.transcription,
                timeout=self._timeouts.transcription,
                retry=self._retry,
            )
        except Exception as e:
            logger.warning(f"[{context.request_id}] Transcription failed, using post text: {e}")
            self._record(context, timings, "transcribe", component, media_url, None, t0, str(e))
            return None

        self._record(context, timings, "transcribe", component, media_url, transcription, t0)
        return transcription

    async def _fact_check(
        self,
        content: ExtractedContent,
        text: str,
        identity: str,
        context: ProcessingContext,
        timings: list[StageTiming],
    ) -> FactCheckResult:
        t0 = time.monotonic()
        component = type(self._fact_checker).__name__

        if self._rate_limiter:
            decision = await self._rate_limiter.check_operation(identity, "fact_check")
            if not decision.allowed:
                logger.warning(f"[{context.request_id}] Fact-check rate limit reached")
                result = fallback_fact_check(text, RATE_LIMITED)
                self._record(
                    context, timings, "fact_check", component, text, result, t0, RATE_LIMITED
                )
                return result

        check, sentiment = await asyncio.gather(
            execute_with_resilience(
                lambda: self._fact_checker.check(
                    text, title=content.title or None, context=_describe(content)
                ),
                "fact_check",
                breaker=self._breakers.fact_check,
                timeout=self._timeouts.fact_check,
                retry=self._retry,
            ),
            self._analyze_sentiment(content, text),
            return_exceptions=True,
        )

        error: str | None = None
        if isinstance(check, BaseException):
            if not isinstance(check, Exception):
                raise check
            flag = (
                SERVICE_UNAVAILABLE
                if isinstance(check, CircuitOpen) or default_should_retry(check)
                else TECHNICAL_ERROR
            )
            logger.warning(f"[{context.request_id}] Fact-check failed ({flag}): {check}")
            result = fallback_fact_check(text, flag)
            error = str(check)
        else:
            result = check
        if isinstance(sentiment, BaseException):
            logger.warning(f"[{context.request_id}] Sentiment analysis failed: {sentiment}")
            sentiment = None

        bias = await self._analyze_bias(text, content, context)
        flags = list(result.flags)
        if sentiment is not None:
            flags += [f for f in sentiment.flags if f not in flags]
        result = dataclasses.replace(
            result, flags=tuple(flags), sentiment=sentiment, political_bias=bias
        )

        self._record(context, timings, "fact_check", component, text, result, t0, error)
        return result

    async def _analyze_sentiment(
        self, content: ExtractedContent, text: str
    ) -> SentimentAnalysis | None:
        sentiment = self._sentiment
        if sentiment is None:
            return None
        language = "en"
        if isinstance(content, ArticleContent) and content.language:
            language = content.language.split("-")[0]
        return await execute_with_resilience(
            lambda: sentiment.analyze(text, language),
            "sentiment",
            breaker=self._breakers.sentiment,
            timeout=min(self._timeouts.sentiment, self._timeouts.fact_check),
            retry=self._retry,
        )

    async def _analyze_bias(
        self, text: str, content: ExtractedContent, context: ProcessingContext
    ) -> PoliticalBiasResult | None:
        analyzer = self._bias_analyzer
        if analyzer is None:
            return None
        try:
            return await execute_with_resilience(
                lambda: analyzer.analyze(text, context=_describe(content)),
                "political_bias",
                breaker=self._breakers.analysis,
                timeout=self._timeouts.analysis,
                retry=self._retry,
            )
        except Exception as e:
            logger.warning(f"[{context.request_id}] Political bias analysis failed: {e}")
        try:
            return analyzer.analyze_keywords(text)
        except Exception as e:
            logger.warning(f"[{context.request_id}] Keyword bias analysis failed: {e}")
            return None

    async def _score_credibility(
        self,
        content: ExtractedContent,
        transcription: TranscriptionResult | None,
        fact_check: FactCheckResult | None,
        text: str,
        context: ProcessingContext,
        timings: list[StageTiming],
    ) -> CredibilityRating | None:
        t0 = time.monotonic()
        try:
            history = None
            if self._creator_history is not None and content.creator:
                history = await self._creator_history.lookup(content.creator, content.platform)

            signal = None
            if fact_check is not None:
                degraded = bool(DEGRADED_FLAGS.intersection(fact_check.flags))
                signal = FactCheckSignal(
                    verdict=str(fact_check.verdict),
                    confidence=fact_check.confidence,
                    is_verified=not degraded,
                )
            rating = calculate_credibility(
                signal,
                ContentMetadata(
                    creator=content.creator,
                    platform=str(content.platform),
                    title=content.title or None,
                    has_transcription=transcription is not None,
                    content_type=content.content_type or None,
                ),
                AnalysisMetrics(
                    has_news_content=bool(text),
                    needs_fact_check=bool(text),
                    content_length=len(text),
                    sentiment=fact_check.sentiment if fact_check else None,
                    creator_historical_credibility=history.average_rating if history else None,
                    total_analyses=history.total_analyses if history else None,
                ),
            )
        except Exception as e:
            logger.warning(f"[{context.request_id}] Credibility scoring failed: {e}")
            self._record(context, timings, "credibility", "scorer", None, None, t0, str(e))
            return None

        self._record(context, timings, "credibility", "scorer", fact_check, rating, t0)
        return rating

    async def _trace_origin(
        self,
        fact_check: FactCheckResult | None,
        text: str,
        context: ProcessingContext,
        timings: list[StageTiming],
    ) -> tuple[OriginTracingData | None, OriginGraph | None]:
        if (
            self._origin_tracer is None
            or fact_check is None
            or DEGRADED_FLAGS.intersection(fact_check.flags)
            or not fact_check.explanation
        ):
            return None, None

        t0 = time.monotonic()
        tracer = self._origin_tracer
        component = type(tracer).__name__
        claim = text[:200]
        verdict = str(fact_check.verdict)
        explanation = fact_check.explanation
        try:
            data, graph = await execute_with_resilience(
                lambda: tracer.trace(explanation, claim=claim, verdict=verdict),
                "origin_tracing",
                breaker=self._breakers.analysis,
                timeout=self._timeouts.analysis,
                retry=self._retry,
            )
        except Exception as e:
            logger.warning(f"[{context.request_id}] Origin tracing failed, parsing only: {e}")
            try:
                data, graph = tracer.trace_parsed(explanation, claim=claim, verdict=verdict)
            except Exception as parse_error:
                logger.warning(f"[{context.request_id}] Origin parsing failed: {parse_error}")
                self._record(context, timings, "origin_tracing", component, None, None, t0, str(e))
                return None, None
            self._record(context, timings, "origin_tracing", component, None, graph, t0, str(e))
            return data, graph

        self._record(context, timings, "origin_tracing", component, None, graph, t0)
        return data, graph

    def _record(
        self,
        context: ProcessingContext,
        timings: list[StageTiming],
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        started: float,
        error: str | None = None,
    ) -> None:
        duration = time.monotonic() - started
        timings.append(
            StageTiming(
                stage=stage,
                duration_seconds=round(duration, 4),
                succeeded=error is None,
                error=error,
            )
        )
        if self._run_logger:
            self._run_logger.log_stage(
                context.request_id,
                stage=stage,
                component=component,
                input_data=input_data,
                output_data=output_data,
                duration_seconds=duration,
                error=error,
            )


def _describe(content: ExtractedContent) -> str:
    parts = [f"{content.platform} post"]
    if content.creator:
        parts.append(f"by {content.creator}")
    return " ".join(parts)
