from checkmate.transcribe.base import Transcriber
from checkmate.transcribe.whisper import WhisperTranscriber

__all__ = [
    "Transcriber",
    "WhisperTranscriber",
]
