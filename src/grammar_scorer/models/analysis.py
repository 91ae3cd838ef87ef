"""Grammar analysis result models."""

import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field

MIN_SCORE = 1.0
MAX_SCORE = 5.0


class MetricName(StrEnum):
    """Sub-metric names, in reporting order."""

    COMPLEXITY = "Complexity"
    COHERENCE = "Coherence"
    FLUENCY = "Fluency"
    SYNTAX = "Syntax"
    VOCABULARY = "Vocabulary"


# Weights for each metric (Fluency and Syntax are the most direct grammar signals)
METRIC_WEIGHTS: dict[MetricName, float] = {
    MetricName.COMPLEXITY: 0.15,
    MetricName.COHERENCE: 0.15,
    MetricName.FLUENCY: 0.30,
    MetricName.SYNTAX: 0.30,
    MetricName.VOCABULARY: 0.10,
}

ISSUE_PENALTY_PER_ISSUE = 0.1
MAX_ISSUE_PENALTY = 0.5
VARIANCE_SPAN = 0.4


class GrammarIssue(BaseModel):
    """A flagged span of the transcript."""

    model_config = ConfigDict(frozen=True)

    text: str
    issue: str
    suggestion: str | None = None


class GrammarMetric(BaseModel):
    """A single named sub-score (1-5)."""

    model_config = ConfigDict(frozen=True)

    name: MetricName
    score: float = Field(ge=MIN_SCORE, le=MAX_SCORE)


def clamp_score(value: float) -> float:
    """Clamp a raw score to 1-5 and round to one decimal."""
    return round(max(MIN_SCORE, min(MAX_SCORE, value)), 1)


def issue_penalty_factor(issue_count: int) -> float:
    """Multiplicative penalty, non-increasing in the number of issues."""
    return 1 - min(MAX_ISSUE_PENALTY, issue_count * ISSUE_PENALTY_PER_ISSUE)


def length_variance(transcript_length: int) -> float:
    """Reproducible adjustment in [-0.2, 0.2] derived from transcript length."""
    return ((math.sin(transcript_length) + 1) / 2) * VARIANCE_SPAN - VARIANCE_SPAN / 2


def compute_overall_score(
    metrics: list[GrammarMetric],
    issue_count: int,
    transcript_length: int,
) -> float:
    """Combine metrics into the overall 1-5 score.

    Args:
        metrics: The five sub-metrics.
        issue_count: Number of detected issues.
        transcript_length: Raw character length of the transcript.

    Returns:
        Weighted, penalised, clamped overall score.
    """
    weighted = sum(METRIC_WEIGHTS[m.name] * m.score for m in metrics)
    adjusted = weighted * issue_penalty_factor(issue_count) + length_variance(transcript_length)
    return clamp_score(adjusted)


class RubricBand(BaseModel):
    """Descriptive band for a range of overall scores."""

    min_score: float
    label: str
    description: str


RUBRIC_BANDS: list[RubricBand] = [
    RubricBand(
        min_score=4.5,
        label="Excellent",
        description="Excellent grammar with high accuracy and complex structures",
    ),
    RubricBand(
        min_score=4.0,
        label="Strong",
        description="Strong grammar with minor errors that don't affect understanding",
    ),
    RubricBand(
        min_score=3.0,
        label="Decent",
        description="Decent grammar with some structural or syntax errors",
    ),
    RubricBand(
        min_score=2.0,
        label="Limited",
        description="Limited grammar with consistent basic errors",
    ),
    RubricBand(
        min_score=MIN_SCORE,
        label="Poor",
        description="Poor grammar with significant structural issues",
    ),
]


def get_rubric_band(score: float) -> RubricBand:
    """Get the rubric band a 1-5 score falls into."""
    for band in RUBRIC_BANDS:
        if score >= band.min_score:
            return band
    return RUBRIC_BANDS[-1]


class AnalysisResult(BaseModel):
    """Outcome of analysing one transcript."""

    model_config = ConfigDict(frozen=True)

    issues: list[GrammarIssue] = Field(default_factory=list)
    metrics: list[GrammarMetric]
    score: float = Field(ge=MIN_SCORE, le=MAX_SCORE)

    @computed_field
    @property
    def rubric(self) -> str:
        """Rubric label for the overall score."""
        return get_rubric_band(self.score).label

    def metric(self, name: MetricName) -> float:
        """Look up a sub-metric score by name."""
        for m in self.metrics:
            if m.name == name:
                return m.score
        raise KeyError(name)
