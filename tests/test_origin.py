"""Tests for origin-tracing parsing, merging, graph building and the tracer."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from checkmate.data import BeliefDriver, EvolutionStep, FirstSeen, OriginTracing
from checkmate.origin import (
    OriginTracer,
    ParsedOrigin,
    build_origin_graph,
    credibility_from_url,
    extract_all_links,
    merge_origin_tracing,
    parse_origin_tracing,
)
from checkmate.origin.merge import first_seen_key
from checkmate.origin.tracer import parsed_from_json

EXPLANATION = """\
## Verdict
verified. Claim: Vaccines do not cause autism.

## Origin Tracing
The claim originated from a retracted 1998 paper.

### First Seen
- [The Lancet](https://www.thelancet.com/retracted) (1998-02-28)

### Propagation
- Facebook groups
- Twitter

## Why People Believe This
- **Temporal coincidence:** Autism signs appear around vaccination age.
- Distrust of institutions: People doubt [official sources](https://example.org/trust).

## Sources
- [CDC](https://www.cdc.gov/vaccinesafety)
See also https://www.reuters.com/fact-check/vaccines.
"""


class TestCredibilityFromUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://www.cdc.gov/x", 95),
            ("https://www.ox.ac.uk.edu/y", 95),
            ("https://www.reuters.com/z", 92),
            ("https://someone.substack.com/p", 65),
            ("https://x.com/user/status/1", 55),
            ("https://randomsite.net/a", 60),
        ],
    )
    def test_tiers(self, url: str, expected: int) -> None:
        assert credibility_from_url(url) == expected


class TestParseOriginTracing:
    def test_full_explanation(self) -> None:
        parsed = parse_origin_tracing(EXPLANATION)
        ot = parsed.origin_tracing

        assert ot.hypothesized_origin == "The claim originated from a retracted 1998 paper."
        assert ot.first_seen == (
            FirstSeen(
                source="The Lancet",
                date="1998-02-28",
                url="https://www.thelancet.com/retracted",
            ),
        )
        assert ot.propagation_paths == ("Facebook groups", "Twitter")
        assert [d.name for d in parsed.belief_drivers] == [
            "Temporal coincidence",
            "Distrust of institutions",
        ]
        assert parsed.belief_drivers[1].description == "People doubt official sources."
        assert parsed.belief_drivers[1].references[0].url == "https://example.org/trust"
        assert [s.url for s in parsed.sources] == ["https://www.cdc.gov/vaccinesafety"]
        assert parsed.sources[0].credibility == 95
        assert parsed.claim == "Vaccines do not cause autism."

    def test_legacy_bold_headers(self) -> None:
        text = "**Origin Tracing:**\n- Started on a forum\n\n**Verdict:** False claim"
        parsed = parse_origin_tracing(text)
        assert parsed.origin_tracing.hypothesized_origin == "Started on a forum"
        assert parsed.verdict == "false"

    def test_sources_fall_back_to_all_markdown_links(self) -> None:
        parsed = parse_origin_tracing("See [AP](https://apnews.com/a) for details.")
        assert parsed.sources[0].credibility == 92

    def test_belief_drivers_capped_at_five(self) -> None:
        bullets = "\n".join(f"- Driver {i}: reason {i}" for i in range(8))
        parsed = parse_origin_tracing(f"## Belief Drivers\n{bullets}")
        assert len(parsed.belief_drivers) == 5

    def test_empty_text(self) -> None:
        parsed = parse_origin_tracing("")
        assert parsed.origin_tracing == OriginTracing()
        assert parsed.sources == ()
        assert parsed.verdict is None

    def test_verdict_mapping(self) -> None:
        assert parse_origin_tracing("Verdict: partially true").verdict == "misleading"
        assert parse_origin_tracing("Verdict: unclear").verdict == "unverified"
        assert parse_origin_tracing("Verdict: accurate").verdict == "verified"


class TestExtractAllLinks:
    def test_markdown_then_bare_deduplicated(self) -> None:
        links = extract_all_links(EXPLANATION)
        urls = [link.url for link in links]
        assert urls == [
            "https://www.thelancet.com/retracted",
            "https://example.org/trust",
            "https://www.cdc.gov/vaccinesafety",
            "https://www.reuters.com/fact-check/vaccines",
        ]
        assert links[-1].title == "reuters.com"

    def test_capped_at_fifty(self) -> None:
        text = " ".join(f"https://site{i}.com/a" for i in range(60))
        assert len(extract_all_links(text)) == 50


class TestMergeOriginTracing:
    @pytest.fixture
    def parsed(self) -> ParsedOrigin:
        return parse_origin_tracing(EXPLANATION)

    @pytest.fixture
    def generated(self) -> ParsedOrigin:
        return ParsedOrigin(
            origin_tracing=OriginTracing(
                hypothesized_origin="A 1998 study by Andrew Wakefield",
                first_seen=(
                    FirstSeen(source="the lancet", date="1998-02-28", url=None),
                    FirstSeen(
                        source="The Lancet",
                        date="1998-02-28",
                        url="https://www.thelancet.com/retracted",
                    ),
                ),
                propagation_paths=("twitter", "Anti-vaccine blogs"),
                evolution_steps=(
                    EvolutionStep(platform="Television", transformation="Celebrity endorsement"),
                ),
            ),
            belief_drivers=(BeliefDriver(name="Fear", description="Parents fear harm"),),
            verdict="verified",
            claim="Vaccines cause autism",
        )

    def test_parsed_only(self, parsed: ParsedOrigin) -> None:
        data = merge_origin_tracing(parsed, None, EXPLANATION)
        ot = data.origin_tracing
        assert ot.hypothesized_origin == "The claim originated from a retracted 1998 paper."
        assert [s.transformation for s in ot.evolution_steps] == [
            "Content spread through Facebook groups",
            "Content spread through Twitter",
        ]
        assert [d.name for d in data.belief_drivers] == [
            "Temporal coincidence",
            "Distrust of institutions",
        ]
        assert len(data.all_links) == 4

    def test_generated_first_and_deduplicated(
        self, parsed: ParsedOrigin, generated: ParsedOrigin
    ) -> None:
        data = merge_origin_tracing(parsed, generated, EXPLANATION)
        ot = data.origin_tracing

        assert ot.hypothesized_origin == "A 1998 study by Andrew Wakefield"
        assert [first_seen_key(e) for e in ot.first_seen] == [
            "the lancet|1998-02-28|",
            "the lancet|1998-02-28|https://www.thelancet.com/retracted",
        ]
        assert ot.propagation_paths == ("twitter", "Anti-vaccine blogs", "Facebook groups")
        assert ot.evolution_steps[0].platform == "Television"
        assert len(ot.evolution_steps) == 3
        assert [d.name for d in data.belief_drivers] == ["Fear"]
        assert [s.url for s in data.sources] == ["https://www.cdc.gov/vaccinesafety"]
        assert data.claim == "Vaccines cause autism"

    def test_merge_is_deterministic(self, parsed: ParsedOrigin, generated: ParsedOrigin) -> None:
        first = merge_origin_tracing(parsed, generated, EXPLANATION)
        second = merge_origin_tracing(parsed, generated, EXPLANATION)
        assert first == second

    def test_caps(self) -> None:
        parsed = ParsedOrigin(
            origin_tracing=OriginTracing(
                first_seen=tuple(FirstSeen(source=f"s{i}") for i in range(30)),
                propagation_paths=tuple(f"p{i}" for i in range(30)),
            )
        )
        ot = merge_origin_tracing(parsed, None).origin_tracing
        assert len(ot.first_seen) == 15
        assert len(ot.propagation_paths) == 15
        assert len(ot.evolution_steps) == 10


class TestBuildOriginGraph:
    def test_graph_shape(self) -> None:
        data = merge_origin_tracing(parse_origin_tracing(EXPLANATION), None, EXPLANATION)
        graph = build_origin_graph(data, claim="fallback claim", verdict="verified")

        assert [(n.id, n.type) for n in graph.nodes] == [
            ("origin-0", "origin"),
            ("evolution-1", "evolution"),
            ("evolution-2", "evolution"),
            ("evolution-3", "evolution"),
            ("claim-4", "claim"),
            ("belief-5", "beliefDriver"),
            ("belief-6", "beliefDriver"),
            ("source-7", "source"),
        ]
        assert graph.nodes[1].label == "The Lancet (1998-02-28)"
        assert graph.nodes[4].label == "Vaccines do not cause autism."
        assert graph.nodes[4].detail == "verified"
        assert graph.nodes[7].label == "cdc.gov"
        assert [(e.id, e.label) for e in graph.edges] == [
            ("origin-0-evolution-1", "evolves"),
            ("evolution-1-evolution-2", ""),
            ("evolution-2-evolution-3", ""),
            ("evolution-3-claim-4", "becomes"),
            ("belief-5-claim-4", "influences belief"),
            ("belief-6-claim-4", ""),
            ("claim-4-source-7", ""),
        ]

    def test_dated_steps_sorted(self) -> None:
        data = merge_origin_tracing(
            ParsedOrigin(
                origin_tracing=OriginTracing(
                    first_seen=(
                        FirstSeen(source="Later", date="2021-05-01"),
                        FirstSeen(source="Earlier", date="2020-01-01"),
                    )
                )
            ),
            None,
        )
        graph = build_origin_graph(data)
        assert [n.label for n in graph.nodes] == [
            "Earlier (2020-01-01)",
            "Later (2021-05-01)",
            "Current claim",
        ]

    def test_empty_data_has_only_claim(self) -> None:
        data = merge_origin_tracing(ParsedOrigin(origin_tracing=OriginTracing()), None)
        graph = build_origin_graph(data, claim="Some claim")
        assert [n.id for n in graph.nodes] == ["claim-0"]
        assert graph.nodes[0].label == "Some claim"
        assert graph.edges == ()


class TestParsedFromJson:
    def test_skips_malformed_entries(self) -> None:
        parsed = parsed_from_json(
            {
                "hypothesizedOrigin": "null",
                "firstSeen": [{"source": "4chan", "date": "2020-03-01"}, "bad", {"source": ""}],
                "propagationPaths": ["Telegram", 5, "  "],
                "evolutionSteps": [{"platform": "YouTube", "transformation": "Video remix"}],
                "beliefDrivers": [
                    {
                        "name": "Fear",
                        "references": [{"url": "https://a.org"}, {"title": "no url"}],
                    },
                    {"description": "nameless"},
                ],
                "sources": [{"url": "https://b.org", "title": "B"}, {"title": "no url"}],
            }
        )
        ot = parsed.origin_tracing
        assert ot.hypothesized_origin is None
        assert ot.first_seen == (FirstSeen(source="4chan", date="2020-03-01"),)
        assert ot.propagation_paths == ("Telegram",)
        assert ot.evolution_steps[0].transformation == "Video remix"
        assert parsed.belief_drivers[0].references[0].title == "https://a.org"
        assert len(parsed.belief_drivers) == 1
        assert [s.url for s in parsed.sources] == ["https://b.org"]

    def test_lone_string_path_is_one_path(self) -> None:
        parsed = parsed_from_json({"propagationPaths": "Twitter"})
        assert parsed.origin_tracing.propagation_paths == ("Twitter",)

    @pytest.mark.parametrize("value", [42, {"path": "Twitter"}, None, True])
    def test_non_list_paths_are_ignored(self, value: object) -> None:
        parsed = parsed_from_json({"propagationPaths": value})
        assert parsed.origin_tracing.propagation_paths == ()


class TestOriginTracer:
    async def test_trace_without_generator(self) -> None:
        data, graph = await OriginTracer().trace(EXPLANATION, claim="claim", verdict="verified")
        assert data.origin_tracing.propagation_paths == ("Facebook groups", "Twitter")
        assert graph.nodes[0].type == "origin"

    async def test_trace_merges_generated(self) -> None:
        generator = MagicMock()
        generator.generate = AsyncMock(
            return_value="```json\n"
            + json.dumps(
                {
                    "claim": "Vaccines cause autism",
                    "hypothesizedOrigin": "Wakefield paper",
                    "propagationPaths": ["Telegram"],
                    "sources": [{"url": "https://www.bbc.co.uk/news/health", "title": "BBC"}],
                }
            )
            + "\n```"
        )
        data, graph = await OriginTracer(generator).trace(EXPLANATION)

        assert data.origin_tracing.hypothesized_origin == "Wakefield paper"
        assert data.origin_tracing.propagation_paths[0] == "Telegram"
        assert data.sources[0].credibility == 92
        assert data.sources[0].source == "bbc.co.uk"
        claim_node = next(n for n in graph.nodes if n.type == "claim")
        assert claim_node.label == "Vaccines cause autism"

    async def test_generator_failure_uses_parsed(self) -> None:
        generator = MagicMock()
        generator.generate = AsyncMock(side_effect=RuntimeError("overloaded"))
        data, _ = await OriginTracer(generator).trace(EXPLANATION)
        assert data == merge_origin_tracing(
            parse_origin_tracing(EXPLANATION), None, EXPLANATION
        )

    async def test_non_json_response_uses_parsed(self) -> None:
        generator = MagicMock()
        generator.generate = AsyncMock(return_value="I cannot extract that.")
        data, _ = await OriginTracer(generator).trace(EXPLANATION)
        assert data.origin_tracing.hypothesized_origin == (
            "The claim originated from a retracted 1998 paper."
        )
