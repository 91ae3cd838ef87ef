"""Processing pipeline: transcription, grammar analysis and scoring."""

import asyncio

import structlog

from grammar_scorer.assessment.rule_based import GrammarAnalyzer
from grammar_scorer.audio.validation import get_audio_duration, validate_audio_file
from grammar_scorer.models.processing import ProcessingReport, ProcessingStage, StageStatus
from grammar_scorer.transcription.client import (
    SampleTranscriber,
    TranscriptionError,
    WhisperTranscriber,
)

logger = structlog.get_logger()


class ScoringPipeline:
    """Runs an uploaded recording through every processing stage.

    Transcription is awaited; analysis is CPU-bound and runs in a worker
    thread so the event loop stays responsive.

    Args:
        transcriber: Backend that turns audio into text.
        max_upload_bytes: Largest accepted audio payload.
        analyzer: Grammar analyzer (a fresh one by default).
    """

    def __init__(
        self,
        transcriber: SampleTranscriber | WhisperTranscriber,
        max_upload_bytes: int,
        analyzer: GrammarAnalyzer | None = None,
    ):
        self.transcriber = transcriber
        self.max_upload_bytes = max_upload_bytes
        self.analyzer = analyzer or GrammarAnalyzer()

    async def process(
        self,
        filename: str,
        audio: bytes,
        content_type: str | None,
    ) -> ProcessingReport:
        """Validate, transcribe and score one recording.

        Analysis detects issues and sub-metrics; scoring combines them into
        the overall score. A failing transcription is marked as errored and
        later stages stay waiting.

        Args:
            filename: Uploaded filename.
            audio: File contents.
            content_type: Declared MIME type.

        Returns:
            ProcessingReport with per-stage statuses.

        Raises:
            AudioValidationError: If the upload is rejected before any stage starts.
        """
        validate_audio_file(content_type, len(audio), self.max_upload_bytes)
        report = ProcessingReport(filename=filename, duration_seconds=get_audio_duration(audio))

        report.mark(ProcessingStage.TRANSCRIPTION, StageStatus.PROCESSING)
        try:
            report.transcript = await self.transcriber.transcribe(audio, filename)
        except TranscriptionError as e:
            logger.warning(
                "processing_failed", filename=filename, stage="transcription", error=str(e)
            )
            report.mark(ProcessingStage.TRANSCRIPTION, StageStatus.ERROR)
            report.error = str(e)
            return report
        report.mark(ProcessingStage.TRANSCRIPTION, StageStatus.COMPLETED)

        report.mark(ProcessingStage.ANALYSIS, StageStatus.PROCESSING)
        issues, metrics = await asyncio.to_thread(self.analyzer.measure, report.transcript)
        report.mark(ProcessingStage.ANALYSIS, StageStatus.COMPLETED)

        report.mark(ProcessingStage.SCORING, StageStatus.PROCESSING)
        result = self.analyzer.score(report.transcript, issues, metrics)
        report.result = result
        report.mark(ProcessingStage.SCORING, StageStatus.COMPLETED)

        logger.info(
            "processing_complete",
            filename=filename,
            score=result.score,
            issues=len(result.issues),
        )
        return report
