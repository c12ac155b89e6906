from checkmate.factcheck.base import FactChecker
from checkmate.factcheck.domain import DomainCredibilityOracle, static_domain_score
from checkmate.factcheck.researcher import WebFactChecker
from checkmate.factcheck.verdict import (
    analyze_verification_status,
    keyword_verification_status,
    normalize_verdict,
)

__all__ = [
    "DomainCredibilityOracle",
    "FactChecker",
    "WebFactChecker",
    "analyze_verification_status",
    "keyword_verification_status",
    "normalize_verdict",
    "static_domain_score",
]
