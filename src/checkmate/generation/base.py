from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class GenerationParams:
    """Token budget and sampling temperature for one kind of prompt."""

    max_tokens: int
    temperature: float


QUERY_PARAMS = GenerationParams(max_tokens=100, temperature=0.3)
ANALYSIS_PARAMS = GenerationParams(max_tokens=2000, temperature=0.1)
CLASSIFY_PARAMS = GenerationParams(max_tokens=100, temperature=0.1)
SCORE_PARAMS = GenerationParams(max_tokens=10, temperature=0.1)
EXTRACTION_PARAMS = GenerationParams(max_tokens=4000, temperature=0.1)


class TextGenerator(Protocol):
    """Interface for large-language-model text generation."""

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> str:
        """Generate a completion for ``prompt``.

        Args:
            prompt: User prompt.
            system: Optional system prompt.
            max_tokens: Output token budget.
            temperature: Sampling temperature.

        Returns:
            The generated text.
        """
        ...
