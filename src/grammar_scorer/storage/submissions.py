"""Prediction submission book with CSV rendering."""

import csv
import io
import threading

import structlog

from grammar_scorer.models.submission import PredictionEntry

logger = structlog.get_logger()

EXPORT_FILENAME = "predictions.csv"


class SubmissionError(ValueError):
    """Raised for invalid submission operations."""


class SubmissionBook:
    """In-memory list of predictions, at most one per filename."""

    def __init__(self) -> None:
        self._entries: dict[str, PredictionEntry] = {}
        self._lock = threading.Lock()

    def add(self, filename: str, score: float) -> PredictionEntry:
        """Add a prediction, replacing any existing one for the same filename."""
        if not filename:
            raise SubmissionError("Process an audio file first to generate a prediction")
        entry = PredictionEntry(filename=filename, score=score)
        with self._lock:
            self._entries[filename] = entry
        logger.info("prediction_added", filename=filename, score=score)
        return entry

    def remove(self, entry_id: str) -> None:
        with self._lock:
            for filename, entry in self._entries.items():
                if entry.id == entry_id:
                    del self._entries[filename]
                    return
        raise SubmissionError(f"Unknown prediction: {entry_id}")

    def entries(self) -> list[PredictionEntry]:
        with self._lock:
            return list(self._entries.values())

    def to_csv(self) -> str:
        """Render predictions as CSV with a filename,score header.

        Raises:
            SubmissionError: If there is nothing to export.
        """
        entries = self.entries()
        if not entries:
            raise SubmissionError("Add some predictions before exporting")
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(["filename", "score"])
        for entry in entries:
            writer.writerow([entry.filename, f"{entry.score:.2f}"])
        logger.info("predictions_exported", count=len(entries))
        return buf.getvalue()

