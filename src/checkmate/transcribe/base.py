from typing import Protocol

from checkmate.data import TranscriptionResult


class Transcriber(Protocol):
    """Interface for speech-to-text services."""

    async def transcribe(self, media_url: str) -> TranscriptionResult | None:
        """Transcribe the audio track of ``media_url``.

        Args:
            media_url: Direct URL of a downloadable media file.

        Returns:
            The transcript, or None when the media has no speech.
        """
        ...
