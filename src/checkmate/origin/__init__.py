from checkmate.origin.merge import build_origin_graph, merge_origin_tracing
from checkmate.origin.parser import (
    ParsedOrigin,
    credibility_from_url,
    extract_all_links,
    parse_origin_tracing,
)
from checkmate.origin.tracer import OriginTracer

__all__ = [
    "OriginTracer",
    "ParsedOrigin",
    "build_origin_graph",
    "credibility_from_url",
    "extract_all_links",
    "merge_origin_tracing",
    "parse_origin_tracing",
]
