"""Verdict normalization and verification-status classification."""

import logging
import re

from checkmate.data import Verdict
from checkmate.generation import CLASSIFY_PARAMS, GenerationParams, TextGenerator
from checkmate.json_parser import parse_json_object

logger = logging.getLogger(__name__)

_ALIASES: dict[str, Verdict] = {
    "true": Verdict.VERIFIED,
    "accurate": Verdict.VERIFIED,
    "mostly_true": Verdict.VERIFIED,
    "partly_true": Verdict.PARTIALLY_TRUE,
    "half_true": Verdict.PARTIALLY_TRUE,
    "fake": Verdict.FALSE,
    "incorrect": Verdict.FALSE,
    "not_true": Verdict.FALSE,
}

_INCONCLUSIVE = frozenset({"unverified", "unverifiable", "unknown", "no_verdict", ""})
_VERDICT_VALUES = frozenset(v.value for v in Verdict)

# Checked in order; the first matching cue wins.
_NEGATIVE_CUES: list[tuple[re.Pattern[str], Verdict]] = [
    (re.compile(r"false|debunked|hoax|baseless|fabricated"), Verdict.FALSE),
    (re.compile(r"misleading|missing context|cherry-picked"), Verdict.MISLEADING),
    (re.compile(r"conspiracy"), Verdict.CONSPIRACY),
    (re.compile(r"rumou?r|hearsay"), Verdict.RUMOR),
    (re.compile(r"exaggerated|overstated|overblown"), Verdict.EXAGGERATED),
    (re.compile(r"outdated|no longer accurate"), Verdict.OUTDATED),
    (re.compile(r"satire|parody|humou?r"), Verdict.SATIRE),
]
_OPINION_CUE = re.compile(r"opinion|commentary|personal view|subjective")

VERIFICATION_PROMPT = """\
Analyze the following fact-check research results for the claim: "{claim}"

Research Results:
{research}

Based on the research evidence, determine:
1. Verification Status: Choose ONE of: "verified", "misleading", "unverifiable"
2. Confidence Level: A number from 0.0 to 1.0 representing how confident you are \
in this assessment

Guidelines:
- "verified": The PRIMARY/CORE claim is accurate and supported by evidence, even if \
minor secondary details are inaccurate.
- "misleading": The PRIMARY claim itself is substantially false, lacks critical \
context, or is deceptive.
- "unverifiable": Insufficient credible evidence to make a determination about the \
primary claim.

Base your verdict on the PRIMARY claim, not embellishments or secondary details.

Respond in this exact JSON format:
{{"status": "status_here", "confidence": 0.0}}\
"""


def normalize_verdict(
    raw: str | None,
    *,
    confidence: float | None = None,
    reasoning: str | None = None,
) -> Verdict:
    """Map free-form verdict text onto :class:`Verdict`.

    Exact values and common aliases map directly. Anything else is decided
    from cues in ``reasoning``; inconclusive inputs with no cue stay
    ``unverified`` and unrecognized labels default to ``opinion``.

    Args:
        raw: Verdict label from a model or service.
        confidence: Confidence on a 0-100 scale, if known.
        reasoning: Explanation text to mine for cues.
    """
    label = (raw or "").strip().lower().replace(" ", "_").replace("-", "_")
    if label not in _INCONCLUSIVE and label in _VERDICT_VALUES:
        return Verdict(label)
    if label in _ALIASES:
        return _ALIASES[label]

    text = (reasoning or "").lower()
    if confidence is not None and confidence >= 70:
        if re.search(r"verified|credible|supported|evidence|confirmed", text):
            return Verdict.VERIFIED
        if re.search(r"mixed|partially|somewhat|partly", text):
            return Verdict.PARTIALLY_TRUE

    for pattern, verdict in _NEGATIVE_CUES:
        if pattern.search(text):
            return verdict
    if _OPINION_CUE.search(text):
        return Verdict.OPINION

    return Verdict.UNVERIFIED if label in _INCONCLUSIVE else Verdict.OPINION


def keyword_verification_status(research: str) -> tuple[str, float]:
    """Classify research text by keywords when no generator is available.

    Returns:
        Tuple of (status, confidence 0-1).
    """
    lowered = research.lower()
    if "verified" in lowered or "confirmed" in lowered or "accurate" in lowered:
        return ("verified", 0.7)
    if "misleading" in lowered:
        return ("misleading", 0.7)
    if "unverifiable" in lowered:
        return ("unverifiable", 0.6)
    return ("unverifiable", 0.5)


async def analyze_verification_status(
    generator: TextGenerator | None,
    claim: str,
    research: str,
    *,
    params: GenerationParams = CLASSIFY_PARAMS,
) -> tuple[str, float]:
    """Ask the generator for a verification status, with keyword fallback.

    Args:
        generator: Text generator, or None to use keywords only.
        claim: The claim being checked.
        research: Analysis or research text to judge.
        params: Token budget and temperature for the classification.

    Returns:
        Tuple of (status, confidence 0-1). Status is one of ``verified``,
        ``misleading`` or ``unverifiable``.
    """
    if generator is None:
        return keyword_verification_status(research)

    try:
        response = await generator.generate(
            VERIFICATION_PROMPT.format(claim=claim, research=research),
            max_tokens=params.max_tokens,
            temperature=params.temperature,
        )
    except Exception as e:
        logger.warning(f"Verification status classification failed: {e}")
        return ("unverifiable", 0.5)

    parsed = parse_json_object(response, {})
    status = str(parsed.get("status") or "unverifiable").lower()
    confidence = parsed.get("confidence")
    if not isinstance(confidence, (int, float)) or isinstance(confidence, bool) or not confidence:
        confidence = 0.5
    return (status, max(0.0, min(1.0, float(confidence))))
