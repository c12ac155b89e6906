"""Speech-to-text using OpenAI's transcription API."""

import logging
import os
from typing import Any

import httpx
from openai import AsyncOpenAI

from checkmate.data import TranscriptionResult, TranscriptSegment
from checkmate.errors import ConfigurationError, TranscriptionFailed

logger = logging.getLogger(__name__)

# The transcription endpoint rejects uploads above 25 MB.
MAX_UPLOAD_BYTES = 25 * 1024 * 1024


class WhisperTranscriber:
    """Download media and transcribe it with OpenAI.

    Args:
        model: Transcription model ID.
        api_key: API key (defaults to OPENAI_API_KEY env var).
    """

    def __init__(
        self,
        *,
        model: str = "whisper-1",
        api_key: str | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self._api_key:
            raise ConfigurationError(
                "OpenAI API key required. Pass api_key or set OPENAI_API_KEY env var."
            )
        self._model = model
        self._client = AsyncOpenAI(api_key=self._api_key)

    async def transcribe(self, media_url: str) -> TranscriptionResult | None:
        """Transcribe the media at ``media_url``.

        Args:
            media_url: Direct media URL.

        Returns:
            Transcript with timed segments, or None if no speech was found.

        Raises:
            TranscriptionFailed: If the media is too large to upload.
        """
        audio = await self._download(media_url)
        if len(audio) > MAX_UPLOAD_BYTES:
            raise TranscriptionFailed(media_url, status_code=413)

        response = await self._client.audio.transcriptions.create(
            model=self._model,
            file=("media.mp4", audio),
            response_format="verbose_json",
            timestamp_granularities=["segment"],
        )

        text = (getattr(response, "text", "") or "").strip()
        if not text:
            logger.info(f"No speech found in {media_url}")
            return None

        return TranscriptionResult(
            text=text,
            segments=tuple(_segment(s) for s in getattr(response, "segments", None) or []),
            language=getattr(response, "language", None),
        )

    async def _download(self, media_url: str) -> bytes:
        async with httpx.AsyncClient(timeout=60.0, follow_redirects=True) as client:
            response = await client.get(media_url)
            response.raise_for_status()
            return response.content


def _segment(raw: Any) -> TranscriptSegment:
    """Segments arrive as SDK objects or plain dicts."""
    if isinstance(raw, dict):
        return TranscriptSegment(
            start=float(raw.get("start", 0.0)),
            end=float(raw.get("end", 0.0)),
            text=str(raw.get("text", "")).strip(),
        )
    return TranscriptSegment(start=float(raw.start), end=float(raw.end), text=raw.text.strip())
