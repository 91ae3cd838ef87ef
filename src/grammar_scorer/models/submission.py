"""Prediction submission models."""

import uuid

from pydantic import BaseModel, Field

from grammar_scorer.models.analysis import MAX_SCORE, MIN_SCORE


class PredictionEntry(BaseModel):
    """One filename/score pair queued for export."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    filename: str = Field(min_length=1)
    score: float = Field(ge=MIN_SCORE, le=MAX_SCORE)
