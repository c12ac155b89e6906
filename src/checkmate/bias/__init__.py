from checkmate.bias.analyzer import (
    PoliticalBiasAnalyzer,
    detect_region_political,
    keyword_bias_fallback,
    label_from_region_score,
    region_fallback_score,
)

__all__ = [
    "PoliticalBiasAnalyzer",
    "detect_region_political",
    "keyword_bias_fallback",
    "label_from_region_score",
    "region_fallback_score",
]
