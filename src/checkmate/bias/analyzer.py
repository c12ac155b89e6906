"""Political-bias classification: generic left/right plus Malaysia framing score."""

import logging
import re
from dataclasses import dataclass
from typing import Any

from checkmate.bias import keywords as kw
from checkmate.data import BiasDirection, PoliticalBiasResult
from checkmate.generation import GenerationParams, TextGenerator
from checkmate.json_parser import parse_json_object

logger = logging.getLogger(__name__)

BIAS_PARAMS = GenerationParams(max_tokens=500, temperature=0.1)
MAX_PROMPT_CHARS = 4000
MAX_INDICATORS = 5
MAX_TOPICS = 3

NEUTRAL_SCORE = 50.0
PRO_GOVERNMENT_WEIGHT = 7
OPPOSITION_WEIGHT = 7
SARCASM_WEIGHT = 10
RHETORICAL_WEIGHT = 8
CRITICISM_WEIGHT = 12
TARGET_ADJUSTMENT = 20
GOVERNMENT_ONLY_CEILING = 25
OPPOSITION_ONLY_FLOOR = 75
OPPOSITION_BAND = 30
GOVERNMENT_BAND = 70

_SENTENCE_SPLIT = re.compile(r"[.!?\n]+")

GENERIC_PROMPT = """\
Analyze the following content for political bias. Consider language patterns, \
framing, topic selection, and ideological indicators.

Content to analyze:
{content}
{context}
Guidelines:
- "left": Progressive/liberal bias (pro-government intervention, social justice \
focus, anti-conservative framing)
- "right": Conservative bias (pro-traditional values, anti-government overreach, \
pro-business framing)
- "center": Balanced or moderate perspectives
- "none": Non-political content or neutral reporting

Respond in this exact JSON format:
{{
  "biasDirection": "left|right|center|none",
  "biasIntensity": 0.0,
  "confidence": 0.0,
  "explanation": "Detailed analysis of bias patterns found",
  "biasIndicators": ["indicator1", "indicator2"],
  "politicalTopics": ["topic1", "topic2"]
}}\
"""

REGION_PROMPT = """\
You are analyzing Malaysian political content, which may mix Malay and English \
and use local slang or sarcasm.

Score how the content frames the Malaysian federal government on a scale of 0 \
to 100:
- 0-30: opposition-leaning (critical of or mocking the government)
- 31-69: neutral or mixed
- 70-100: pro-government (praising or defending the government, or attacking \
the opposition)

Read sarcasm for its intended meaning, not its literal words.

Content:
{content}

Respond in this exact JSON format:
{{"score": 50, "justification": "one or two sentences", "quote": "short \
representative quote from the content"}}\
"""


@dataclass(frozen=True)
class RegionSignals:
    """Keyword matches used for region detection and fallback scoring."""

    context: tuple[str, ...]
    government_parties: tuple[str, ...]
    opposition_parties: tuple[str, ...]
    government_figures: tuple[str, ...]
    opposition_figures: tuple[str, ...]
    slang: tuple[str, ...]
    sarcasm: tuple[str, ...]
    rhetorical: tuple[str, ...]
    criticism: tuple[str, ...]
    pro_government: tuple[str, ...]
    pro_opposition: tuple[str, ...]

    @property
    def weighted_indicators(self) -> int:
        doubled = (
            len(self.government_parties)
            + len(self.opposition_parties)
            + len(self.government_figures)
            + len(self.opposition_figures)
            + len(self.slang)
            + len(self.sarcasm)
        )
        single = (
            len(self.rhetorical)
            + len(self.criticism)
            + len(self.pro_government)
            + len(self.pro_opposition)
        )
        return 2 * doubled + single

    @property
    def indicators(self) -> tuple[str, ...]:
        return (
            self.government_parties
            + self.opposition_parties
            + self.government_figures
            + self.opposition_figures
            + self.slang
            + self.sarcasm
        )


def region_signals(text: str) -> RegionSignals:
    lowered = text.lower()

    def found(words: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(kw.find_keywords(lowered, words))

    context = found(kw.REGION_CONTEXT)
    government_parties = found(kw.GOVERNMENT_PARTIES)
    opposition_parties = found(kw.OPPOSITION_PARTIES)
    government_figures = found(kw.GOVERNMENT_FIGURES)
    opposition_figures = found(kw.OPPOSITION_FIGURES)

    corroborated = bool(
        context
        or government_figures
        or opposition_figures
        or set(government_parties + opposition_parties) - set(kw.AMBIGUOUS_PARTIES)
    )
    if not corroborated:
        government_parties = tuple(p for p in government_parties if p not in kw.AMBIGUOUS_PARTIES)
        opposition_parties = tuple(p for p in opposition_parties if p not in kw.AMBIGUOUS_PARTIES)

    return RegionSignals(
        context=context,
        government_parties=government_parties,
        opposition_parties=opposition_parties,
        government_figures=government_figures,
        opposition_figures=opposition_figures,
        slang=found(kw.SLANG),
        sarcasm=found(kw.SARCASM_MARKERS),
        rhetorical=found(kw.RHETORICAL_MARKERS),
        criticism=found(kw.CRITICISM_PHRASES),
        pro_government=found(kw.PRO_GOVERNMENT),
        pro_opposition=found(kw.PRO_OPPOSITION),
    )


def detect_region_political(text: str) -> bool:
    """Whether ``text`` is Malaysian political content.

    True when a region-context keyword appears alongside at least one
    political indicator, or when the weighted indicator count reaches 3
    (party, figure, slang and sarcasm matches count twice). Party names that
    are also common words only count when something else places the text
    in Malaysia.
    """
    signals = region_signals(text)
    if signals.context and signals.weighted_indicators >= 1:
        return True
    return signals.weighted_indicators >= 3


def criticism_targets(text: str) -> tuple[bool, bool]:
    """Whether criticism or sarcasm shares a sentence with each side.

    Returns:
        Tuple of (government targeted, opposition targeted).
    """
    government = opposition = False
    tone = kw.CRITICISM_PHRASES + kw.SARCASM_MARKERS
    for sentence in _SENTENCE_SPLIT.split(text.lower()):
        if not kw.find_keywords(sentence, tone):
            continue
        if kw.find_keywords(sentence, kw.GOVERNMENT_ENTITIES):
            government = True
        if kw.find_keywords(sentence, kw.OPPOSITION_ENTITIES):
            opposition = True
    return government, opposition


def region_fallback_score(text: str) -> float:
    """Deterministic 0-100 government-framing score from keyword weights.

    Starts at 50, moves by keyword hits, then shifts 20 points away from
    whichever side is the sole target of criticism. When that side is the
    only one mentioned at all, the score is pinned past the band edge.
    """
    signals = region_signals(text)
    score = NEUTRAL_SCORE
    score += PRO_GOVERNMENT_WEIGHT * len(signals.pro_government)
    score -= OPPOSITION_WEIGHT * len(signals.pro_opposition)
    score -= SARCASM_WEIGHT * len(signals.sarcasm)
    score -= RHETORICAL_WEIGHT * len(signals.rhetorical)
    score -= CRITICISM_WEIGHT * len(signals.criticism)

    lowered = text.lower()
    government_present = bool(kw.find_keywords(lowered, kw.GOVERNMENT_ENTITIES))
    opposition_present = bool(kw.find_keywords(lowered, kw.OPPOSITION_ENTITIES))
    government_targeted, opposition_targeted = criticism_targets(text)

    if government_targeted and not opposition_targeted:
        score -= TARGET_ADJUSTMENT
        if not opposition_present:
            score = min(score, GOVERNMENT_ONLY_CEILING)
    elif opposition_targeted and not government_targeted:
        score += TARGET_ADJUSTMENT
        if not government_present:
            score = max(score, OPPOSITION_ONLY_FLOOR)

    return _clamp(score, 0.0, 100.0)


def label_from_region_score(score: float) -> tuple[BiasDirection, float]:
    """Generic direction and intensity implied by a region score.

    Opposition-leaning scores map to ``left`` and pro-government scores to
    ``right``, with intensity rising from 0.67 at the band edge to 1.0 at
    the extreme. Neutral scores are ``center`` with low intensity.
    """
    score = _clamp(score, 0.0, 100.0)
    if score <= OPPOSITION_BAND:
        return BiasDirection.LEFT, round(0.67 + 0.33 * (OPPOSITION_BAND - score) / 30, 2)
    if score >= GOVERNMENT_BAND:
        return BiasDirection.RIGHT, round(0.67 + 0.33 * (score - GOVERNMENT_BAND) / 30, 2)
    return BiasDirection.CENTER, round(abs(score - NEUTRAL_SCORE) / 100, 2)


def keyword_bias_fallback(text: str) -> PoliticalBiasResult:
    """Left/right classification from symmetric keyword counts."""
    lowered = text.lower()
    left = kw.find_keywords(lowered, kw.LEFT_KEYWORDS)
    right = kw.find_keywords(lowered, kw.RIGHT_KEYWORDS)
    topics = kw.find_keywords(lowered, kw.POLITICAL_TOPICS)
    indicators = [f'Left indicator: "{k}"' for k in left]
    indicators += [f'Right indicator: "{k}"' for k in right]

    direction = BiasDirection.NONE
    intensity = 0.0
    confidence = 0.6
    explanation = "Keyword-based analysis used as fallback. "
    if len(left) > len(right):
        direction = BiasDirection.LEFT
        intensity = min(0.8, len(left) * 0.2)
        explanation += f"Detected {len(left)} left-leaning indicators."
    elif len(right) > len(left):
        direction = BiasDirection.RIGHT
        intensity = min(0.8, len(right) * 0.2)
        explanation += f"Detected {len(right)} right-leaning indicators."
    elif left:
        direction = BiasDirection.CENTER
        intensity = 0.3
        explanation += "Detected balanced political indicators."
    elif topics:
        direction = BiasDirection.CENTER
        intensity = 0.1
        confidence = 0.4
        explanation += "Political topics detected but no clear bias direction."
    else:
        confidence = 0.7
        explanation += "No significant political bias indicators detected."

    return PoliticalBiasResult(
        bias_direction=direction,
        bias_intensity=intensity,
        confidence=confidence,
        explanation=explanation,
        bias_indicators=tuple(indicators[:MAX_INDICATORS]),
        political_topics=tuple(topics[:MAX_TOPICS]),
    )


class PoliticalBiasAnalyzer:
    """Classify political bias with a text generator and keyword fallbacks.

    Malaysian political content gets a 0-100 government-framing score and
    a label derived from it; other content gets a generic left/right/center
    label. Either path falls back to keywords when the generator is missing,
    fails, or returns unparseable output, and every number is clamped.

    Args:
        generator: Text generator, or None for keyword analysis only.
        params: Token budget and temperature for the classification prompts.
    """

    def __init__(
        self,
        generator: TextGenerator | None = None,
        *,
        params: GenerationParams = BIAS_PARAMS,
    ) -> None:
        self._generator = generator
        self._params = params

    async def analyze(self, text: str, *, context: str | None = None) -> PoliticalBiasResult:
        if detect_region_political(text):
            payload = await self._ask(REGION_PROMPT.format(content=text[:MAX_PROMPT_CHARS]))
            return region_result(text, payload)
        return await self._analyze_generic(text, context)

    def analyze_keywords(self, text: str) -> PoliticalBiasResult:
        """Classify with keywords only, without calling the generator."""
        if detect_region_political(text):
            return region_result(text, None)
        return keyword_bias_fallback(text)

    async def _analyze_generic(self, text: str, context: str | None) -> PoliticalBiasResult:
        prompt = GENERIC_PROMPT.format(
            content=text[:MAX_PROMPT_CHARS],
            context=f"\nContext: {context}\n" if context else "",
        )
        payload = await self._ask(prompt)
        if payload is None:
            return keyword_bias_fallback(text)

        return PoliticalBiasResult(
            bias_direction=_direction(payload.get("biasDirection")),
            bias_intensity=_number(payload.get("biasIntensity"), 0.0),
            confidence=_number(payload.get("confidence"), 0.5) or 0.5,
            explanation=str(
                payload.get("explanation")
                or "Political bias analysis completed using AI assessment."
            ),
            bias_indicators=_strings(payload.get("biasIndicators")),
            political_topics=_strings(payload.get("politicalTopics")),
        )

    async def _ask(self, prompt: str) -> dict[str, Any] | None:
        if self._generator is None:
            return None
        try:
            response = await self._generator.generate(
                prompt,
                max_tokens=self._params.max_tokens,
                temperature=self._params.temperature,
            )
        except Exception as e:
            logger.warning(f"Political bias generation failed, using keywords: {e}")
            return None
        return parse_json_object(response, None)


def region_result(text: str, payload: dict[str, Any] | None) -> PoliticalBiasResult:
    """Region-specific result from a generated score, or from keywords without one."""
    signals = region_signals(text)
    raw_score = None if payload is None else payload.get("score")

    if _is_number(raw_score):
        score = _clamp(float(raw_score), 0.0, 100.0)
        confidence = 0.75
        explanation = str(payload.get("justification") or "Region-specific framing analysis.")
        quote = payload.get("quote") if isinstance(payload.get("quote"), str) else None
    else:
        score = region_fallback_score(text)
        confidence = 0.5
        explanation = "Keyword-weighted framing analysis used as fallback."
        quote = None

    direction, intensity = label_from_region_score(score)
    logger.info(f"Region political content scored {score:.0f} ({direction})")
    return PoliticalBiasResult(
        bias_direction=direction,
        bias_intensity=intensity,
        confidence=confidence,
        explanation=explanation,
        bias_indicators=signals.indicators[:MAX_INDICATORS],
        political_topics=(signals.government_parties + signals.opposition_parties)[
            :MAX_TOPICS
        ],
        is_region_specific=True,
        region_bias_score=score,
        key_quote=quote or None,
    )


def _direction(value: Any) -> BiasDirection:
    if isinstance(value, str) and value.lower() in {d.value for d in BiasDirection}:
        return BiasDirection(value.lower())
    return BiasDirection.NONE


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(value: Any, default: float) -> float:
    return float(value) if _is_number(value) else default


def _strings(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if isinstance(v, (str, int, float)))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
