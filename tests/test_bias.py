"""Tests for political-bias classification."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from checkmate.bias import (
    PoliticalBiasAnalyzer,
    detect_region_political,
    keyword_bias_fallback,
    label_from_region_score,
    region_fallback_score,
)
from checkmate.data import BiasDirection

GOVERNMENT_CRITICISM = "Anwar gagal lagi, konon nak reformasi"
OPPOSITION_CRITICISM = "Muhyiddin gagal lagi, konon nak reformasi"


def make_generator(response: str | Exception) -> MagicMock:
    generator = MagicMock()
    if isinstance(response, Exception):
        generator.generate = AsyncMock(side_effect=response)
    else:
        generator.generate = AsyncMock(return_value=response)
    return generator


class TestDetectRegionPolitical:
    def test_sarcastic_criticism_of_prime_minister(self) -> None:
        assert detect_region_political(GOVERNMENT_CRITICISM)

    def test_context_with_one_indicator(self) -> None:
        assert detect_region_political("Rakyat Malaysia tolak UMNO")

    def test_context_alone_is_not_political(self) -> None:
        assert not detect_region_political("Cuti di Penang sangat seronok")

    def test_unrelated_text(self) -> None:
        assert not detect_region_political("The weather is lovely today")

    def test_keywords_need_word_boundaries(self) -> None:
        assert not detect_region_political("A passage about pastel daps")

    @pytest.mark.parametrize(
        "text",
        [
            "My GPS failed again, how come?",
            "The pas de deux failed, isn't it?",
            "Seorang yang amanah",
        ],
    )
    def test_common_word_party_names_need_region_context(self, text: str) -> None:
        assert not detect_region_political(text)

    @pytest.mark.parametrize(
        "text",
        ["DAP menang besar di Penang", "Anwar puji DAP dan GPS"],
    )
    def test_common_word_party_names_count_with_context(self, text: str) -> None:
        assert detect_region_political(text)


class TestRegionFallbackScore:
    def test_government_only_target_pinned_low(self) -> None:
        assert region_fallback_score(GOVERNMENT_CRITICISM) == 8

    def test_opposition_only_target_pinned_high(self) -> None:
        assert region_fallback_score(OPPOSITION_CRITICISM) == 75

    def test_neutral_text_stays_at_fifty(self) -> None:
        assert region_fallback_score("Parlimen bersidang minggu depan") == 50

    def test_pro_government_words_raise_score(self) -> None:
        score = region_fallback_score("Kerajaan Madani bawa kestabilan dan pelaburan")
        assert score == 50 + 7 * 3

    def test_score_is_clamped(self) -> None:
        text = "Anwar gagal, rasuah, tipu, khianat, hipokrit, konon, kononnya, betul tak"
        assert region_fallback_score(text) == 0


class TestLabelFromRegionScore:
    @pytest.mark.parametrize(
        ("score", "direction", "intensity"),
        [
            (0, BiasDirection.LEFT, 1.0),
            (30, BiasDirection.LEFT, 0.67),
            (50, BiasDirection.CENTER, 0.0),
            (60, BiasDirection.CENTER, 0.1),
            (70, BiasDirection.RIGHT, 0.67),
            (100, BiasDirection.RIGHT, 1.0),
            (140, BiasDirection.RIGHT, 1.0),
        ],
    )
    def test_bands(self, score: float, direction: BiasDirection, intensity: float) -> None:
        label, value = label_from_region_score(score)
        assert label == direction
        assert value == pytest.approx(intensity)


class TestKeywordBiasFallback:
    def test_left(self) -> None:
        result = keyword_bias_fallback("We need social justice and climate change action")
        assert result.bias_direction == BiasDirection.LEFT
        assert result.bias_intensity == pytest.approx(0.4)
        assert result.confidence == pytest.approx(0.6)
        assert result.bias_indicators == (
            'Left indicator: "social justice"',
            'Left indicator: "climate change"',
        )

    def test_right(self) -> None:
        result = keyword_bias_fallback("The deep state spreads fake news")
        assert result.bias_direction == BiasDirection.RIGHT

    def test_balanced(self) -> None:
        result = keyword_bias_fallback("A progressive patriot")
        assert result.bias_direction == BiasDirection.CENTER
        assert result.bias_intensity == pytest.approx(0.3)

    def test_topics_only(self) -> None:
        result = keyword_bias_fallback("The election is next week")
        assert result.bias_direction == BiasDirection.CENTER
        assert result.confidence == pytest.approx(0.4)
        assert result.political_topics == ("election",)

    def test_nothing_political(self) -> None:
        result = keyword_bias_fallback("I like pancakes")
        assert result.bias_direction == BiasDirection.NONE
        assert result.bias_intensity == 0.0
        assert result.confidence == pytest.approx(0.7)

    def test_intensity_capped(self) -> None:
        text = "progressive diversity inclusion lgbtq gun control minimum wage"
        assert keyword_bias_fallback(text).bias_intensity == pytest.approx(0.8)


class TestPoliticalBiasAnalyzer:
    async def test_generic_uses_generator(self) -> None:
        generator = make_generator(
            '{"biasDirection": "Left", "biasIntensity": 1.7, "confidence": 0.8, '
            '"explanation": "Framing favours regulation", '
            '"biasIndicators": ["corporate greed"], "politicalTopics": ["economy"]}'
        )
        analyzer = PoliticalBiasAnalyzer(generator)

        result = await analyzer.analyze("Corporate greed is hollowing out towns.")

        assert result.bias_direction == BiasDirection.LEFT
        assert result.bias_intensity == 1.0
        assert result.confidence == pytest.approx(0.8)
        assert result.bias_indicators == ("corporate greed",)
        assert not result.is_region_specific
        assert result.region_bias_score is None

    async def test_generic_passes_context(self) -> None:
        generator = make_generator('{"biasDirection": "none"}')
        await PoliticalBiasAnalyzer(generator).analyze("Some text", context="a tweet")
        prompt = generator.generate.call_args.args[0]
        assert "Context: a tweet" in prompt

    async def test_generic_unknown_direction_is_none(self) -> None:
        generator = make_generator('{"biasDirection": "sideways", "confidence": 0}')
        result = await PoliticalBiasAnalyzer(generator).analyze("Some text")
        assert result.bias_direction == BiasDirection.NONE
        assert result.confidence == pytest.approx(0.5)

    async def test_generic_malformed_output_falls_back(self) -> None:
        generator = make_generator("I would rather not say.")
        result = await PoliticalBiasAnalyzer(generator).analyze("The deep state spreads fake news")
        assert result.bias_direction == BiasDirection.RIGHT
        assert result.explanation.startswith("Keyword-based analysis")

    async def test_generator_failure_falls_back(self) -> None:
        generator = make_generator(RuntimeError("overloaded"))
        result = await PoliticalBiasAnalyzer(generator).analyze("I like pancakes")
        assert result.bias_direction == BiasDirection.NONE

    async def test_without_generator(self) -> None:
        result = await PoliticalBiasAnalyzer().analyze("We need social justice")
        assert result.bias_direction == BiasDirection.LEFT

    async def test_everyday_text_is_not_region_political(self) -> None:
        result = await PoliticalBiasAnalyzer().analyze("My GPS failed again, how come?")
        assert not result.is_region_specific
        assert result.region_bias_score is None
        assert result.bias_direction == BiasDirection.NONE
        assert result.political_topics == ()

    async def test_region_score_from_generator(self) -> None:
        generator = make_generator(
            '{"score": 150, "justification": "Praises the government", "quote": "Madani"}'
        )
        result = await PoliticalBiasAnalyzer(generator).analyze(GOVERNMENT_CRITICISM)

        assert result.is_region_specific
        assert result.region_bias_score == 100
        assert result.bias_direction == BiasDirection.RIGHT
        assert result.confidence == pytest.approx(0.75)
        assert result.explanation == "Praises the government"
        assert result.key_quote == "Madani"
        assert result.bias_indicators == ("anwar", "reformasi", "konon")

    async def test_region_government_criticism_fallback(self) -> None:
        generator = make_generator("not json at all")
        result = await PoliticalBiasAnalyzer(generator).analyze(GOVERNMENT_CRITICISM)

        assert result.is_region_specific
        assert result.region_bias_score <= 25
        assert result.bias_direction == BiasDirection.LEFT
        assert result.confidence == pytest.approx(0.5)
        assert result.key_quote is None

    async def test_region_opposition_criticism_fallback(self) -> None:
        result = await PoliticalBiasAnalyzer().analyze(OPPOSITION_CRITICISM)
        assert result.region_bias_score >= 75
        assert result.bias_direction == BiasDirection.RIGHT

    async def test_region_non_numeric_score_falls_back(self) -> None:
        generator = make_generator('{"score": "eighty", "justification": "x"}')
        result = await PoliticalBiasAnalyzer(generator).analyze(GOVERNMENT_CRITICISM)
        assert result.region_bias_score == 8
