"""Text generation backed by Anthropic's Claude API."""

import logging
import os

import anthropic

logger = logging.getLogger(__name__)


class ClaudeTextGenerator:
    """Generate text using Anthropic's Claude API.

    Args:
        model: Anthropic model ID to use.
        api_key: API key (defaults to CLAUDE_API_KEY env var).
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        *,
        model: str = "claude-haiku-4-5-20251001",
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._model = model
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        self._client = anthropic.AsyncAnthropic(api_key=resolved_key, timeout=timeout)

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> str:
        kwargs: dict[str, object] = {}
        if system:
            kwargs["system"] = system

        response = await self._client.messages.create(
            model=self._model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
            **kwargs,
        )

        text = ""
        for block in response.content:
            if hasattr(block, "text"):
                text += block.text
        logger.debug(
            f"Claude generation: {response.usage.input_tokens} in, "
            f"{response.usage.output_tokens} out"
        )
        return text
