from checkmate.search.base import WebSearcher
from checkmate.search.exa import ExaSearcher

__all__ = [
    "ExaSearcher",
    "WebSearcher",
]
