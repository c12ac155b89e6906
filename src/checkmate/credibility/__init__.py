from checkmate.credibility.scorer import (
    AnalysisMetrics,
    ContentMetadata,
    FactCheckSignal,
    calculate_credibility,
)

__all__ = [
    "AnalysisMetrics",
    "ContentMetadata",
    "FactCheckSignal",
    "calculate_credibility",
]
