"""Domain credibility scoring."""

import logging
import re
from collections import OrderedDict

from checkmate.generation import SCORE_PARAMS, GenerationParams, TextGenerator

logger = logging.getLogger(__name__)

DEFAULT_SCORE = 6
TRUSTED_SCORE = 9
CACHE_SIZE = 1024

_TRUSTED_SUFFIXES = (".gov", ".edu")
_TRUSTED_DOMAINS = ("who.int", "nih.gov", "cdc.gov")

SCORE_PROMPT = """\
Rate the credibility of the news or information source "{domain}" on a scale \
of 1 to 10, where 1 is a known source of misinformation and 10 is a highly \
reputable, fact-checked source. Respond with a single integer only.\
"""


def _is_or_under(domain: str, parent: str) -> bool:
    return domain == parent or domain.endswith("." + parent)


def static_domain_score(domain: str) -> int:
    """Allow-list score used when the oracle is unreachable.

    Listed domains match themselves and their subdomains only, so
    ``who.int.example.com`` is not trusted.
    """
    domain = domain.lower().rstrip(".")
    if domain.endswith(_TRUSTED_SUFFIXES) or any(_is_or_under(domain, d) for d in _TRUSTED_DOMAINS):
        return TRUSTED_SCORE
    return DEFAULT_SCORE


class DomainCredibilityOracle:
    """Score a domain 1-10 with a text generator, falling back to an allow-list.

    Generated scores are kept in a least-recently-used cache of
    ``cache_size`` domains.

    Args:
        generator: Text generator, or None to always use the static list.
        params: Token budget and temperature for the scoring prompt.
        cache_size: Maximum number of cached domains.
    """

    def __init__(
        self,
        generator: TextGenerator | None = None,
        *,
        params: GenerationParams = SCORE_PARAMS,
        cache_size: int = CACHE_SIZE,
    ) -> None:
        self._generator = generator
        self._params = params
        self._cache_size = cache_size
        self._cache: OrderedDict[str, int] = OrderedDict()

    async def score(self, domain: str) -> int:
        """Credibility of ``domain`` in [1, 10]."""
        domain = domain.lower()
        if domain in self._cache:
            self._cache.move_to_end(domain)
            return self._cache[domain]
        if self._generator is None:
            return static_domain_score(domain)

        try:
            response = await self._generator.generate(
                SCORE_PROMPT.format(domain=domain),
                max_tokens=self._params.max_tokens,
                temperature=self._params.temperature,
            )
        except Exception as e:
            logger.warning(f"Domain credibility lookup failed for {domain}: {e}")
            return static_domain_score(domain)

        match = re.search(r"\d+", response)
        value = int(match.group()) if match else DEFAULT_SCORE
        value = max(1, min(10, value))
        self._cache[domain] = value
        if len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)
        return value
