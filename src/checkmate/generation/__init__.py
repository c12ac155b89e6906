from checkmate.generation.base import (
    ANALYSIS_PARAMS,
    CLASSIFY_PARAMS,
    EXTRACTION_PARAMS,
    QUERY_PARAMS,
    SCORE_PARAMS,
    GenerationParams,
    TextGenerator,
)
from checkmate.generation.claude import ClaudeTextGenerator

__all__ = [
    "ANALYSIS_PARAMS",
    "CLASSIFY_PARAMS",
    "EXTRACTION_PARAMS",
    "QUERY_PARAMS",
    "SCORE_PARAMS",
    "ClaudeTextGenerator",
    "GenerationParams",
    "TextGenerator",
]
