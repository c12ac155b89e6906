"""Regex extraction of origin-tracing structure from fact-check explanations.

Explanations are markdown written by the analysis prompt. Sections are
located by header (``## Origin Tracing`` or legacy ``**Origin Tracing:**``)
and their bullets are parsed into first-seen entries, propagation paths,
belief drivers and source links.
"""

import re
from dataclasses import dataclass

from checkmate.data import (
    BeliefDriver,
    FactCheckSource,
    FirstSeen,
    OriginTracing,
    Reference,
)
from checkmate.url import extract_domain

MAX_LINKS = 50
MAX_NAME_LENGTH = 60
MAX_BELIEF_ITEMS = 5

_HEADER = re.compile(r"^(#{1,6})\s+(.+)$|^\*\*([^*]+):?\*\*:?$")
_BULLET = re.compile(r"^(?:[-*•]|\d+[.)])\s+")
_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\((https?://[^)\s]+)\)")
_BARE_URL = re.compile(r"(?<![(\[])\bhttps?://[^\s)\]>\"']+")
_DATE = re.compile(r"\((\d{4}-\d{2}-\d{2})\)")
_BOLD_DRIVER = re.compile(r"^\*\*([^*]+?):?\*\*:?\s*(.*)$")
_VERDICT = re.compile(r"verdict\s*[:\-]\s*\**\s*([a-zA-Z][a-zA-Z _]*)", re.IGNORECASE)
_CLAIM = re.compile(r"claim\s*[:\-]\s*(.+)", re.IGNORECASE)

ORIGIN_TITLES = ("origin tracing", "origin", "original source", "hypothesized origin")
TIMELINE_TITLES = ("first seen", "timeline", "first appearance")
PROPAGATION_TITLES = ("propagation", "spread", "amplification", "platforms")
SOURCES_TITLES = ("sources", "references", "citations", "fact check sources")
BELIEF_TITLES = ("belief drivers", "why people believe", "cognitive biases")

_HIGH_REPUTATION = (
    "reuters.com",
    "apnews.com",
    "associatedpress.com",
    "bbc.com",
    "bbc.co.uk",
    "npr.org",
    "factcheck.org",
    "snopes.com",
    "politifact.com",
    "washingtonpost.com",
    "nytimes.com",
    "nature.com",
    "sciencemag.org",
)
_SOCIAL = ("twitter.com", "x.com", "facebook.com", "tiktok.com", "youtube.com")


@dataclass(frozen=True)
class ParsedOrigin:
    """Everything the regex pass recovers from one explanation."""

    origin_tracing: OriginTracing
    belief_drivers: tuple[BeliefDriver, ...] = ()
    sources: tuple[FactCheckSource, ...] = ()
    verdict: str | None = None
    claim: str | None = None


def credibility_from_url(url: str) -> int:
    """0-100 credibility heuristic for a cited URL."""
    host = extract_domain(url)
    if host == "Unknown":
        host = ""
    if (
        host.endswith((".gov", ".gov.uk", ".edu"))
        or "who.int" in host
        or "nih.gov" in host
        or "cdc.gov" in host
    ):
        return 95
    if host.endswith(_HIGH_REPUTATION):
        return 92
    if "medium.com" in host or "substack.com" in host:
        return 65
    if any(s in host for s in _SOCIAL):
        return 55
    return 60


def extract_markdown_links(text: str) -> list[Reference]:
    """Markdown ``[title](url)`` links, de-duplicated by URL in order."""
    seen: set[str] = set()
    links: list[Reference] = []
    for title, url in _MARKDOWN_LINK.findall(text):
        if url not in seen:
            seen.add(url)
            links.append(Reference(title=title.strip(), url=url))
    return links


def extract_all_links(text: str) -> list[Reference]:
    """Markdown and bare links, de-duplicated by URL, capped at 50."""
    links = extract_markdown_links(text)
    seen = {link.url for link in links}
    for url in _BARE_URL.findall(text):
        url = url.rstrip(".,;:")
        if url not in seen:
            seen.add(url)
            links.append(Reference(title=extract_domain(url), url=url))
    return links[:MAX_LINKS]


def find_section(lines: list[str], titles: tuple[str, ...]) -> list[str] | None:
    """Lines under the first header whose text contains one of ``titles``."""
    for i, raw in enumerate(lines):
        header = _header_text(raw.strip())
        if header is None or not any(t in header for t in titles):
            continue
        end = i + 1
        while end < len(lines) and _header_text(lines[end].strip()) is None:
            end += 1
        return lines[i + 1 : end]
    return None


def parse_verdict(text: str) -> str | None:
    match = _VERDICT.search(text)
    if not match:
        return None
    value = match.group(1).strip().lower()
    if re.search(r"partly|partial|partially|mixed|misleading", value):
        return "misleading"
    if re.search(r"unverified|unverifiable|unknown|unclear", value):
        return "unverified"
    if re.search(r"false|fake|fabricated", value):
        return "false"
    if re.search(r"true|accurate|verified", value):
        return "verified"
    if "satire" in value:
        return "satire"
    return None


def parse_belief_drivers(section: list[str]) -> list[BeliefDriver]:
    """Bullets shaped ``- **Name:** description`` or ``- Name: description``."""
    drivers: list[BeliefDriver] = []
    for raw in section:
        line = raw.strip()
        if not _BULLET.match(line):
            continue
        item = _BULLET.sub("", line).strip()
        if not item:
            continue
        bold = _BOLD_DRIVER.match(item)
        if bold:
            name, description = bold.group(1), bold.group(2)
        else:
            parts = re.split(r"\s*[:–—]\s*|\s+-\s+", item, maxsplit=1)
            name = parts[0]
            description = parts[1] if len(parts) > 1 else item
        references = tuple(extract_markdown_links(description))
        drivers.append(
            BeliefDriver(
                name=name.strip()[:MAX_NAME_LENGTH],
                description=_MARKDOWN_LINK.sub(r"\1", description).strip(),
                references=references,
            )
        )
        if len(drivers) >= MAX_BELIEF_ITEMS:
            break
    return drivers


def parse_origin_tracing(text: str) -> ParsedOrigin:
    """Extract origin-tracing structure from a markdown explanation.

    Args:
        text: Fact-check explanation.

    Returns:
        Parsed origin, first-seen entries, propagation paths, belief
        drivers, cited sources, verdict and claim. Missing sections yield
        empty fields.
    """
    lines = text.split("\n")

    hypothesized_origin = None
    origin = find_section(lines, ORIGIN_TITLES)
    if origin:
        for raw in origin:
            line = _BULLET.sub("", raw.strip()).strip()
            if line:
                hypothesized_origin = line
                break

    first_seen: list[FirstSeen] = []
    timeline = find_section(lines, TIMELINE_TITLES)
    for raw in timeline or []:
        line = raw.strip()
        if not _BULLET.match(line):
            continue
        date = _DATE.search(line)
        link = _MARKDOWN_LINK.search(line)
        source = link.group(1) if link else _BULLET.sub("", line)
        source = re.sub(r"\s*\(.*?\)\s*$", "", source).strip()
        first_seen.append(
            FirstSeen(
                source=source,
                date=date.group(1) if date else None,
                url=link.group(2) if link else None,
            )
        )

    paths: list[str] = []
    propagation = find_section(lines, PROPAGATION_TITLES)
    for raw in propagation or []:
        line = raw.strip()
        if _BULLET.match(line):
            item = _BULLET.sub("", line).strip()
            if item:
                paths.append(item)

    link_pool: list[Reference] = []
    sources_section = find_section(lines, SOURCES_TITLES)
    if sources_section:
        link_pool = extract_markdown_links("\n".join(sources_section))
    if not link_pool:
        link_pool = extract_markdown_links(text)
    sources = tuple(
        FactCheckSource(
            url=link.url,
            title=link.title,
            credibility=credibility_from_url(link.url),
            source=extract_domain(link.url),
        )
        for link in link_pool
    )

    beliefs = find_section(lines, BELIEF_TITLES)
    drivers = tuple(parse_belief_drivers(beliefs or []))

    claim_match = _CLAIM.search(text)
    return ParsedOrigin(
        origin_tracing=OriginTracing(
            hypothesized_origin=hypothesized_origin,
            first_seen=tuple(first_seen),
            propagation_paths=tuple(paths),
        ),
        belief_drivers=drivers,
        sources=sources,
        verdict=parse_verdict(text),
        claim=claim_match.group(1).strip().strip("*").strip() if claim_match else None,
    )


def _header_text(line: str) -> str | None:
    match = _HEADER.match(line)
    if not match:
        return None
    return (match.group(2) or match.group(3) or "").strip().strip("*").lower()
