"""Deterministic merge of parsed and generated origin tracing, and graph building.

Both functions are pure: identical inputs always give identical outputs in
the same order, so re-running them on the same explanation is stable.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

from checkmate.data import (
    EvolutionStep,
    FactCheckSource,
    FirstSeen,
    GraphEdge,
    GraphNode,
    OriginGraph,
    OriginTracing,
    OriginTracingData,
)
from checkmate.origin.parser import ParsedOrigin, credibility_from_url, extract_all_links
from checkmate.url import extract_domain

MAX_FIRST_SEEN = 15
MAX_EVOLUTION_STEPS = 10
MAX_PROPAGATION_PATHS = 15
MAX_BELIEF_DRIVERS = 10
MAX_SOURCES = 15

T = TypeVar("T")


def first_seen_key(entry: FirstSeen) -> str:
    return f"{entry.source.strip().lower()}|{entry.date or ''}|{entry.url or ''}"


def merge_origin_tracing(
    parsed: ParsedOrigin,
    generated: ParsedOrigin | None,
    explanation: str = "",
) -> OriginTracingData:
    """Combine regex-parsed and model-extracted origin tracing.

    Generated entries come first wherever both exist. Each category is
    de-duplicated and capped.

    Args:
        parsed: Result of :func:`parse_origin_tracing` on the explanation.
        generated: Structured extraction from the text generator, if any.
        explanation: The explanation text, used to collect all links.

    Returns:
        Merged origin-tracing data.
    """
    ai = generated or ParsedOrigin(origin_tracing=OriginTracing())
    ai_ot = ai.origin_tracing
    parsed_ot = parsed.origin_tracing

    first_seen = _dedupe(
        [*ai_ot.first_seen, *parsed_ot.first_seen], first_seen_key, MAX_FIRST_SEEN
    )

    spread_steps = [
        EvolutionStep(platform=path, transformation=f"Content spread through {path}")
        for path in parsed_ot.propagation_paths
    ]
    evolution_steps = _dedupe(
        [*ai_ot.evolution_steps, *spread_steps],
        lambda s: f"{s.platform.strip().lower()}|{s.transformation.strip().lower()}|{s.date or ''}",
        MAX_EVOLUTION_STEPS,
    )

    propagation_paths = _dedupe(
        [*ai_ot.propagation_paths, *parsed_ot.propagation_paths],
        lambda p: p.strip().lower(),
        MAX_PROPAGATION_PATHS,
    )

    drivers = ai.belief_drivers or parsed.belief_drivers
    belief_drivers = _dedupe(drivers, lambda d: d.name.strip().lower(), MAX_BELIEF_DRIVERS)

    if ai.sources:
        source_pool: Iterable[FactCheckSource] = (
            FactCheckSource(
                url=s.url,
                title=s.title,
                credibility=credibility_from_url(s.url),
                source=s.source or extract_domain(s.url),
            )
            for s in ai.sources
        )
    else:
        source_pool = parsed.sources
    sources = _dedupe(source_pool, lambda s: s.url, MAX_SOURCES)

    return OriginTracingData(
        origin_tracing=OriginTracing(
            hypothesized_origin=ai_ot.hypothesized_origin or parsed_ot.hypothesized_origin,
            first_seen=tuple(first_seen),
            propagation_paths=tuple(propagation_paths),
            evolution_steps=tuple(evolution_steps),
        ),
        belief_drivers=tuple(belief_drivers),
        sources=tuple(sources),
        verdict=ai.verdict or parsed.verdict,
        claim=ai.claim or parsed.claim,
        all_links=tuple(extract_all_links(explanation)),
    )


def build_origin_graph(data: OriginTracingData, claim: str = "", verdict: str = "") -> OriginGraph:
    """Lay merged origin tracing out as nodes and edges.

    The chain runs origin, then timeline entries and evolution steps, then
    the current claim. Belief drivers point at the claim; the claim points
    at each source. Node ids carry a running counter (``origin-0``,
    ``evolution-1`` ...) and edge ids are ``{source}-{target}``.
    """
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []
    counter = 0

    def next_id(prefix: str) -> str:
        nonlocal counter
        node_id = f"{prefix}-{counter}"
        counter += 1
        return node_id

    ot = data.origin_tracing
    previous: str | None = None
    if ot.hypothesized_origin:
        previous = next_id("origin")
        nodes.append(GraphNode(id=previous, type="origin", label=ot.hypothesized_origin))

    steps: list[tuple[str, str | None, str | None]] = [
        (f"{e.source} ({e.date})" if e.date else e.source, e.date, None) for e in ot.first_seen
    ]
    steps.extend(
        (s.transformation or f"Spread via {s.platform}", s.date, s.platform)
        for s in ot.evolution_steps
    )
    if not ot.evolution_steps:
        steps.extend(
            (f"Content spread through {p}", None, p) for p in ot.propagation_paths
        )
    if steps and all(date for _, date, _ in steps):
        steps.sort(key=lambda s: s[1] or "")

    for index, (label, _, platform) in enumerate(steps):
        step_id = next_id("evolution")
        nodes.append(GraphNode(id=step_id, type="evolution", label=label, detail=platform))
        if previous:
            edges.append(
                GraphEdge(
                    id=f"{previous}-{step_id}",
                    source=previous,
                    target=step_id,
                    label="evolves" if index == 0 else "",
                )
            )
        previous = step_id

    claim_id = next_id("claim")
    nodes.append(
        GraphNode(
            id=claim_id,
            type="claim",
            label=data.claim or claim or "Current claim",
            detail=data.verdict or verdict or None,
        )
    )
    if previous:
        edges.append(
            GraphEdge(
                id=f"{previous}-{claim_id}", source=previous, target=claim_id, label="becomes"
            )
        )

    for index, driver in enumerate(data.belief_drivers):
        driver_id = next_id("belief")
        nodes.append(
            GraphNode(
                id=driver_id, type="beliefDriver", label=driver.name, detail=driver.description
            )
        )
        edges.append(
            GraphEdge(
                id=f"{driver_id}-{claim_id}",
                source=driver_id,
                target=claim_id,
                label="influences belief" if index == 0 else "",
            )
        )

    for source in data.sources:
        source_id = next_id("source")
        nodes.append(
            GraphNode(
                id=source_id,
                type="source",
                label=source.source or extract_domain(source.url),
                detail=source.url,
            )
        )
        edges.append(GraphEdge(id=f"{claim_id}-{source_id}", source=claim_id, target=source_id))

    return OriginGraph(nodes=tuple(nodes), edges=tuple(edges))


def _dedupe(items: Iterable[T], key: Callable[[T], str], limit: int) -> list[T]:
    seen: set[str] = set()
    kept: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        kept.append(item)
        if len(kept) >= limit:
            break
    return kept


__all__ = [
    "build_origin_graph",
    "first_seen_key",
    "merge_origin_tracing",
]
