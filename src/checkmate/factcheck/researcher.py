"""Fact-checking by web research: query, search, retrieve, analyze."""

import asyncio
import logging

from checkmate.data import FactCheckResult, FactCheckSource, PageContent, SearchHit, Verdict
from checkmate.factcheck.domain import DomainCredibilityOracle
from checkmate.factcheck.verdict import analyze_verification_status, normalize_verdict
from checkmate.generation import (
    ANALYSIS_PARAMS,
    CLASSIFY_PARAMS,
    QUERY_PARAMS,
    GenerationParams,
    TextGenerator,
)
from checkmate.origin.parser import parse_origin_tracing
from checkmate.search import WebSearcher
from checkmate.url import extract_domain

logger = logging.getLogger(__name__)

MAX_QUERY_INPUT = 1000
MAX_QUERY_LENGTH = 200
PAGE_TEXT_CHARS = 2000
HIT_TEXT_CHARS = 1000
CONTENT_PREVIEW_CHARS = 500
CREDIBLE_SOURCE_SCORE = 8

QUERY_SYSTEM_PROMPT = """\
You are an expert at creating search queries for fact-checking. Create concise, \
specific search queries that will find credible sources to verify or debunk claims.\
"""

QUERY_PROMPT = """\
Create a concise search query (max 10 words) to fact-check the main claim in this \
content. Focus on the core factual assertion. Return only the query, nothing else.

Content: {content}\
"""

ANALYSIS_SYSTEM_PROMPT = """\
You are an expert fact-checker who analyzes content against credible sources to \
determine truthfulness and accuracy.\
"""

ANALYSIS_PROMPT = """\
Fact-check the following content using the search results provided.

Content to check:
{content}
{extra}
Search results:
{search_content}

Write your analysis in markdown with these sections:

## Verdict
One of: verified, misleading, false, unverifiable, satire, opinion. Include a \
line "Claim: <the main claim in one sentence>".

## Evidence
What the sources say, citing them as markdown links.

## Origin Tracing
Where the claim most likely started. Under "### First Seen" list earliest \
appearances as "- [source](url) (YYYY-MM-DD)". Under "### Propagation" list the \
platforms or communities it spread through, one per bullet.

## Why People Believe This
Bullets shaped "- **Name:** description" naming the cognitive or social drivers \
behind belief in the claim.

## Sources
Markdown links to the sources you relied on.\
"""

NO_ANALYSIS = "No analysis available"


class WebFactChecker:
    """Fact-check content with a search service and a text generator.

    The generator writes a search query, the searcher finds and retrieves
    pages, each page's domain is scored for credibility, and the generator
    writes an analysis that is classified into a verdict. Origin tracing
    and belief drivers are parsed out of the analysis text.

    Args:
        generator: Text generator used for queries, analysis and classification.
        searcher: Search-and-retrieve service.
        oracle: Domain credibility oracle. Defaults to the static allow-list.
        num_results: Number of search hits to request.
        contents_limit: Number of top hits whose full contents are fetched.
        query_params: Token budget and temperature for query generation.
        analysis_params: Token budget and temperature for the analysis.
        classify_params: Token budget and temperature for verdict classification.
    """

    def __init__(
        self,
        generator: TextGenerator,
        searcher: WebSearcher,
        *,
        oracle: DomainCredibilityOracle | None = None,
        num_results: int = 10,
        contents_limit: int = 5,
        query_params: GenerationParams = QUERY_PARAMS,
        analysis_params: GenerationParams = ANALYSIS_PARAMS,
        classify_params: GenerationParams = CLASSIFY_PARAMS,
    ) -> None:
        self._generator = generator
        self._searcher = searcher
        self._oracle = oracle or DomainCredibilityOracle()
        self._num_results = num_results
        self._contents_limit = contents_limit
        self._query_params = query_params
        self._analysis_params = analysis_params
        self._classify_params = classify_params

    async def check(
        self, text: str, *, title: str | None = None, context: str | None = None
    ) -> FactCheckResult:
        query = await self._generate_query(text)
        logger.info(f"Fact-check query: {query!r}")

        hits = await self._searcher.search(query, num_results=self._num_results)
        if not hits:
            logger.warning(f"No search results for query {query!r}")
            return FactCheckResult(
                verdict=Verdict.UNVERIFIED,
                confidence=0,
                explanation="No relevant sources were found to verify this content.",
                content=preview(text),
            )

        top = hits[: self._contents_limit]
        pages = await self._fetch_pages([hit.url for hit in top])
        scores = await asyncio.gather(*(self._oracle.score(extract_domain(h.url)) for h in top))

        sources: list[FactCheckSource] = []
        blocks: list[str] = []
        for hit, credibility in zip(top, scores):
            domain = extract_domain(hit.url)
            relevance = min(credibility / 10, hit.score if hit.score is not None else 0.5)
            sources.append(
                FactCheckSource(
                    url=hit.url,
                    title=hit.title or domain,
                    credibility=credibility,
                    source=source_description(credibility),
                    relevance=relevance,
                )
            )
            blocks.append(format_search_block(hit, pages.get(hit.url), domain))
        sources.sort(key=lambda s: s.relevance or 0.0, reverse=True)
        search_content = "\n\n".join(blocks)

        extra = ""
        if title:
            extra += f"\nTitle: {title}"
        if context:
            extra += f"\nContext: {context}"
        analysis = await self._generator.generate(
            ANALYSIS_PROMPT.format(
                content=text, extra=extra + "\n", search_content=search_content
            ),
            system=ANALYSIS_SYSTEM_PROMPT,
            max_tokens=self._analysis_params.max_tokens,
            temperature=self._analysis_params.temperature,
        )
        reasoning = analysis.strip() or search_content

        status, confidence = await analyze_verification_status(
            self._generator, text, reasoning, params=self._classify_params
        )
        verdict = normalize_verdict(status)
        parsed = parse_origin_tracing(reasoning)
        origin = parsed.origin_tracing
        has_origin = bool(
            origin.hypothesized_origin or origin.first_seen or origin.propagation_paths
        )
        logger.info(f"Fact-check verdict: {verdict} ({confidence:.2f}) from {len(sources)} sources")

        return FactCheckResult(
            verdict=verdict,
            confidence=round(confidence * 100),
            explanation=reasoning or NO_ANALYSIS,
            content=preview(text),
            sources=tuple(sources),
            origin_tracing=origin if has_origin else None,
            belief_drivers=parsed.belief_drivers,
        )

    async def _generate_query(self, text: str) -> str:
        try:
            query = await self._generator.generate(
                QUERY_PROMPT.format(content=text[:MAX_QUERY_INPUT]),
                system=QUERY_SYSTEM_PROMPT,
                max_tokens=self._query_params.max_tokens,
                temperature=self._query_params.temperature,
            )
        except Exception as e:
            logger.warning(f"Query generation failed, searching raw text: {e}")
            return text[:MAX_QUERY_LENGTH]
        query = query.strip().strip('"').strip()
        return query[:MAX_QUERY_LENGTH] or text[:MAX_QUERY_LENGTH]

    async def _fetch_pages(self, urls: list[str]) -> dict[str, PageContent]:
        try:
            pages = await self._searcher.fetch_contents(urls)
        except Exception as e:
            logger.warning(f"Content retrieval failed, using search snippets: {e}")
            return {}
        return {page.url: page for page in pages}


def preview(text: str) -> str:
    if len(text) > CONTENT_PREVIEW_CHARS:
        return text[:CONTENT_PREVIEW_CHARS] + "..."
    return text


def source_description(credibility: int) -> str:
    if credibility >= CREDIBLE_SOURCE_SCORE:
        return "Credible news/fact-checking source"
    return "Web source from search results"


def format_search_block(hit: SearchHit, page: PageContent | None, domain: str) -> str:
    """Render one search result for the analysis prompt."""
    lines = [f"Source: {hit.title or domain} ({domain})"]
    if page is not None and page.text:
        lines.append(f"Full Content: {page.text[:PAGE_TEXT_CHARS]}")
        if page.summary:
            lines.append(f"Summary: {page.summary}")
        if page.highlights:
            lines.append(f"Highlights: {'; '.join(page.highlights)}")
        published = page.published_date or hit.published_date
    else:
        if hit.text:
            lines.append(f"Content: {hit.text[:HIT_TEXT_CHARS]}")
        if hit.summary:
            lines.append(f"Summary: {hit.summary}")
        published = hit.published_date
    if published:
        lines.append(f"Published: {published}")
    lines.append(f"URL: {hit.url}")
    return "\n".join(lines)
