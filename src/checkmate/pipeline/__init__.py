"""Pipeline module for end-to-end content verification."""

from checkmate.pipeline.base import CreatorHistory, CreatorStats, Pipeline, PlatformHandler
from checkmate.pipeline.content import (
    ContentPipeline,
    StageTimeouts,
    fact_check_text,
    fallback_fact_check,
)

__all__ = [
    "ContentPipeline",
    "CreatorHistory",
    "CreatorStats",
    "Pipeline",
    "PlatformHandler",
    "StageTimeouts",
    "fact_check_text",
    "fallback_fact_check",
]
