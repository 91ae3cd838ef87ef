"""Audio processing pipeline models."""

from enum import StrEnum

from pydantic import BaseModel, Field

from grammar_scorer.models.analysis import AnalysisResult


class StageStatus(StrEnum):
    """Lifecycle of a single processing stage."""

    WAITING = "waiting"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class ProcessingStage(StrEnum):
    """Stages an uploaded recording passes through, in order."""

    TRANSCRIPTION = "transcription"
    ANALYSIS = "analysis"
    SCORING = "scoring"


def _initial_stages() -> dict[ProcessingStage, StageStatus]:
    return {stage: StageStatus.WAITING for stage in ProcessingStage}


class ProcessingReport(BaseModel):
    """Progress and outcome of processing one recording."""

    filename: str
    stages: dict[ProcessingStage, StageStatus] = Field(default_factory=_initial_stages)
    transcript: str | None = None
    duration_seconds: float | None = None
    result: AnalysisResult | None = None
    error: str | None = None

    def mark(self, stage: ProcessingStage, status: StageStatus) -> None:
        """Set a stage's status."""
        self.stages[stage] = status

    @property
    def current_stage(self) -> ProcessingStage | None:
        """The stage currently running, if any."""
        for stage, status in self.stages.items():
            if status == StageStatus.PROCESSING:
                return stage
        return None

    @property
    def succeeded(self) -> bool:
        return all(s == StageStatus.COMPLETED for s in self.stages.values())
