"""Validation and probing of uploaded audio files."""

import io
import wave

import structlog

logger = structlog.get_logger()


class AudioValidationError(ValueError):
    """Raised when an upload is not an acceptable audio file."""


def validate_audio_file(content_type: str | None, size_bytes: int, max_bytes: int) -> None:
    """Check an upload's declared type and size.

    Args:
        content_type: MIME type reported by the client.
        size_bytes: Payload size.
        max_bytes: Largest accepted payload.

    Raises:
        AudioValidationError: If the type is not audio/* or the size is out of range.
    """
    if not content_type or not content_type.startswith("audio/"):
        raise AudioValidationError(f"Unsupported file type: {content_type or 'unknown'}")
    if size_bytes <= 0:
        raise AudioValidationError("Audio file is empty")
    if size_bytes > max_bytes:
        raise AudioValidationError(
            f"Audio file too large: {size_bytes / 1024 / 1024:.2f} MB "
            f"(limit {max_bytes / 1024 / 1024:.2f} MB)"
        )


def get_audio_duration(data: bytes) -> float | None:
    """Duration in seconds of a WAV payload.

    Returns None for payloads that cannot be probed (non-WAV formats).
    """
    try:
        with wave.open(io.BytesIO(data), "rb") as wf:
            rate = wf.getframerate()
            if rate <= 0:
                return None
            return wf.getnframes() / rate
    except (wave.Error, EOFError):
        logger.debug("audio_duration_unavailable", size=len(data))
        return None
