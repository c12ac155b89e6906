"""Origin tracing: regex parse plus structured extraction, merged into a graph."""

import logging
from typing import Any

from checkmate.data import (
    BeliefDriver,
    EvolutionStep,
    FactCheckSource,
    FirstSeen,
    OriginGraph,
    OriginTracing,
    OriginTracingData,
    Reference,
)
from checkmate.generation import EXTRACTION_PARAMS, GenerationParams, TextGenerator
from checkmate.json_parser import parse_json_object
from checkmate.origin.merge import build_origin_graph, merge_origin_tracing
from checkmate.origin.parser import ParsedOrigin, parse_origin_tracing

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Extract structured origin-tracing data for visualization. "
    "Be precise and grounded in the text."
)

EXTRACTION_PROMPT = """\
From the fact-check explanation below, extract origin-tracing data as JSON with \
this shape:

{{
  "claim": "the main claim in one sentence",
  "verdict": "verified | misleading | false | unverified | satire",
  "hypothesizedOrigin": "where the claim most likely started",
  "firstSeen": [{{"source": "...", "date": "YYYY-MM-DD or null", "url": "... or null"}}],
  "propagationPaths": ["platform or community"],
  "evolutionSteps": [{{"platform": "...", "transformation": "...", "date": null, \
"impact": null}}],
  "beliefDrivers": [{{"name": "...", "description": "...", \
"references": [{{"title": "...", "url": "..."}}]}}],
  "sources": [{{"title": "...", "url": "...", "source": "publisher"}}]
}}

Only include facts stated in the explanation. Return only the JSON object.

Explanation:
{explanation}\
"""


class OriginTracer:
    """Build origin-tracing data and its graph from a fact-check explanation.

    The explanation is parsed with regexes and, when a generator is given,
    also sent for structured extraction. The two are merged
    deterministically. A failed or malformed extraction leaves the parsed
    result on its own.

    Args:
        generator: Text generator for structured extraction, or None.
        params: Token budget and temperature for the extraction prompt.
    """

    def __init__(
        self,
        generator: TextGenerator | None = None,
        *,
        params: GenerationParams = EXTRACTION_PARAMS,
    ) -> None:
        self._generator = generator
        self._params = params

    async def trace(
        self, explanation: str, *, claim: str = "", verdict: str = ""
    ) -> tuple[OriginTracingData, OriginGraph]:
        generated = await self._extract(explanation)
        return self._build(explanation, generated, claim, verdict)

    def trace_parsed(
        self, explanation: str, *, claim: str = "", verdict: str = ""
    ) -> tuple[OriginTracingData, OriginGraph]:
        """Like :meth:`trace` but from the parsed sections alone."""
        return self._build(explanation, None, claim, verdict)

    def _build(
        self, explanation: str, generated: ParsedOrigin | None, claim: str, verdict: str
    ) -> tuple[OriginTracingData, OriginGraph]:
        parsed = parse_origin_tracing(explanation)
        data = merge_origin_tracing(parsed, generated, explanation)
        graph = build_origin_graph(data, claim=claim, verdict=verdict)
        logger.info(
            f"Origin tracing: {len(graph.nodes)} nodes, {len(graph.edges)} edges "
            f"({'parsed + generated' if generated else 'parsed only'})"
        )
        return data, graph

    async def _extract(self, explanation: str) -> ParsedOrigin | None:
        if self._generator is None:
            return None
        try:
            response = await self._generator.generate(
                EXTRACTION_PROMPT.format(explanation=explanation),
                system=SYSTEM_PROMPT,
                max_tokens=self._params.max_tokens,
                temperature=self._params.temperature,
            )
        except Exception as e:
            logger.warning(f"Origin extraction failed, using parsed sections only: {e}")
            return None
        payload = parse_json_object(response, None)
        if payload is None:
            logger.warning("Origin extraction returned no JSON object")
            return None
        return parsed_from_json(payload)


def parsed_from_json(payload: dict[str, Any]) -> ParsedOrigin:
    """Convert an extraction payload to :class:`ParsedOrigin`, skipping bad entries."""
    first_seen = [
        FirstSeen(source=_text(e.get("source")), date=_opt(e.get("date")), url=_opt(e.get("url")))
        for e in _dicts(payload.get("firstSeen"))
        if _text(e.get("source"))
    ]
    steps = [
        EvolutionStep(
            platform=_text(e.get("platform")),
            transformation=_text(e.get("transformation")),
            date=_opt(e.get("date")),
            impact=_opt(e.get("impact")),
        )
        for e in _dicts(payload.get("evolutionSteps"))
        if _text(e.get("platform")) or _text(e.get("transformation"))
    ]
    paths = [p.strip() for p in _strings(payload.get("propagationPaths")) if p.strip()]
    drivers = [
        BeliefDriver(
            name=_text(d.get("name")),
            description=_text(d.get("description")),
            references=tuple(
                Reference(
                    title=_text(r.get("title")) or _text(r.get("url")), url=_text(r.get("url"))
                )
                for r in _dicts(d.get("references"))
                if _text(r.get("url"))
            ),
        )
        for d in _dicts(payload.get("beliefDrivers"))
        if _text(d.get("name"))
    ]
    sources = [
        FactCheckSource(
            url=_text(s.get("url")),
            title=_text(s.get("title")),
            credibility=0,
            source=_text(s.get("source")),
        )
        for s in _dicts(payload.get("sources"))
        if _text(s.get("url"))
    ]
    return ParsedOrigin(
        origin_tracing=OriginTracing(
            hypothesized_origin=_opt(payload.get("hypothesizedOrigin")),
            first_seen=tuple(first_seen),
            propagation_paths=tuple(paths),
            evolution_steps=tuple(steps),
        ),
        belief_drivers=tuple(drivers),
        sources=tuple(sources),
        verdict=_opt(payload.get("verdict")),
        claim=_opt(payload.get("claim")),
    )


def _dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _strings(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _opt(value: Any) -> str | None:
    text = _text(value)
    return text if text and text.lower() not in ("null", "none", "unknown") else None
