"""Speech-to-text transcription backends."""

import structlog
from openai import AsyncOpenAI

from grammar_scorer.config import Settings

logger = structlog.get_logger()


class TranscriptionError(RuntimeError):
    """Raised when audio cannot be turned into a transcript."""


# Canned transcripts keyed by a filename fragment
SAMPLE_TRANSCRIPTS: dict[str, str] = {
    "sample1.wav": "The weather is nice today, but I think it will rain tomorrow.",
    "sample2.wav": "I has went to the store yesterday and buyed some groceries.",
    "sample3.wav": "She don't like pizza because it's too greasy for her taste.",
}

DEFAULT_SAMPLE_TRANSCRIPT = (
    "The speaker talks about their experiences in daily life. They mention several "
    "activities and express opinions on various topics. Some grammatical errors were "
    "detected in the speech pattern."
)


class SampleTranscriber:
    """Offline transcriber returning canned text chosen by filename.

    Useful for demos and tests; the audio bytes are ignored.
    """

    async def transcribe(self, audio: bytes, filename: str) -> str:
        name = filename.lower()
        for key, text in SAMPLE_TRANSCRIPTS.items():
            if key in name:
                return text
        return DEFAULT_SAMPLE_TRANSCRIPT


class WhisperTranscriber:
    """Transcribes audio with the OpenAI speech-to-text API.

    Args:
        api_key: OpenAI API key.
        model: Transcription model name.
    """

    def __init__(self, api_key: str, model: str = "whisper-1"):
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def transcribe(self, audio: bytes, filename: str) -> str:
        """Send audio to the API and return the transcript text.

        Args:
            audio: Raw audio file contents.
            filename: Original filename (the API infers the format from it).

        Returns:
            Transcript text.

        Raises:
            TranscriptionError: On any API failure or an empty transcript.
        """
        try:
            response = await self.client.audio.transcriptions.create(
                model=self.model,
                file=(filename, audio),
                language="en",
            )
        except Exception as e:
            logger.exception("transcription_request_failed", filename=filename)
            raise TranscriptionError(f"Transcription failed: {e}") from e

        text = (response.text or "").strip()
        if not text:
            raise TranscriptionError("Transcription returned no text")

        logger.info("transcription_complete", filename=filename, length=len(text))
        return text


def get_transcriber(settings: Settings) -> SampleTranscriber | WhisperTranscriber:
    """Build the transcriber selected in settings."""
    if settings.transcription_backend == "openai":
        if not settings.openai_api_key:
            raise TranscriptionError("OPENAI_API_KEY is required for the openai backend")
        return WhisperTranscriber(
            api_key=settings.openai_api_key,
            model=settings.transcription_model,
        )
    return SampleTranscriber()
