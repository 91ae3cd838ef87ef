"""REST API routes for grammar scoring and prediction export."""

import asyncio
import functools

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from pydantic import BaseModel, Field

from grammar_scorer.assessment.calibration import get_full_mapping, get_rubric
from grammar_scorer.assessment.rule_based import GrammarAnalyzer
from grammar_scorer.assessment.scorer import ScoringPipeline
from grammar_scorer.audio.validation import AudioValidationError
from grammar_scorer.config import get_settings
from grammar_scorer.models.analysis import MAX_SCORE, MIN_SCORE, AnalysisResult
from grammar_scorer.models.processing import ProcessingReport
from grammar_scorer.models.submission import PredictionEntry
from grammar_scorer.storage.submissions import EXPORT_FILENAME, SubmissionBook, SubmissionError
from grammar_scorer.transcription.client import TranscriptionError, get_transcriber

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


class AnalyzeRequest(BaseModel):
    transcript: str


class AnalyzeResponse(BaseModel):
    result: AnalysisResult
    rubric: dict[str, str | float]


class SubmissionRequest(BaseModel):
    filename: str = Field(min_length=1)
    score: float = Field(ge=MIN_SCORE, le=MAX_SCORE)


@functools.lru_cache
def get_analyzer() -> GrammarAnalyzer:
    """Shared grammar analyzer."""
    return GrammarAnalyzer()


@functools.lru_cache
def get_pipeline() -> ScoringPipeline:
    """Shared scoring pipeline built from settings.

    Raises:
        HTTPException: 503 if the configured transcription backend is unusable.
    """
    settings = get_settings()
    try:
        transcriber = get_transcriber(settings)
    except TranscriptionError as e:
        logger.warning(
            "transcriber_unavailable", backend=settings.transcription_backend, error=str(e)
        )
        raise HTTPException(status_code=503, detail=str(e))
    return ScoringPipeline(
        transcriber=transcriber,
        max_upload_bytes=settings.max_upload_bytes,
        analyzer=get_analyzer(),
    )


@functools.lru_cache
def get_submission_book() -> SubmissionBook:
    """Process-wide submission book."""
    return SubmissionBook()


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.post("/analyze")
async def analyze_transcript(
    request: AnalyzeRequest,
    analyzer: GrammarAnalyzer = Depends(get_analyzer),
) -> AnalyzeResponse:
    """Score a transcript directly."""
    result = await asyncio.to_thread(analyzer.analyze, request.transcript)
    return AnalyzeResponse(result=result, rubric=get_full_mapping(result.score))


@router.post("/process")
async def process_audio(
    file: UploadFile = File(...),
    pipeline: ScoringPipeline = Depends(get_pipeline),
) -> ProcessingReport:
    """Transcribe and score an uploaded recording."""
    audio = await file.read()
    try:
        report = await pipeline.process(file.filename or "upload", audio, file.content_type)
    except AudioValidationError as e:
        logger.warning("upload_rejected", filename=file.filename, error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    if report.error:
        raise HTTPException(status_code=502, detail=report.error)
    return report


@router.get("/rubric")
async def rubric() -> list[dict]:
    """Score bands from best to worst."""
    return get_rubric()


@router.get("/submissions")
async def list_submissions(
    book: SubmissionBook = Depends(get_submission_book),
) -> list[PredictionEntry]:
    """List queued predictions."""
    return book.entries()


@router.post("/submissions", status_code=201)
async def add_submission(
    request: SubmissionRequest,
    book: SubmissionBook = Depends(get_submission_book),
) -> PredictionEntry:
    """Queue a prediction, replacing any earlier one for the same file."""
    return book.add(request.filename, request.score)


@router.get("/submissions/export")
async def export_submissions(
    book: SubmissionBook = Depends(get_submission_book),
) -> Response:
    """Download queued predictions as CSV."""
    try:
        content = book.to_csv()
    except SubmissionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.delete("/submissions/{entry_id}", status_code=204)
async def delete_submission(
    entry_id: str,
    book: SubmissionBook = Depends(get_submission_book),
) -> Response:
    """Remove a queued prediction."""
    try:
        book.remove(entry_id)
    except SubmissionError:
        raise HTTPException(status_code=404, detail="Prediction not found")
    return Response(status_code=204)
