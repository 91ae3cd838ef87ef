"""Tests for the prediction submission book."""

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from grammar_scorer.storage.submissions import SubmissionBook, SubmissionError


@pytest.fixture
def book():
    return SubmissionBook()


class TestSubmissionBook:
    def test_add(self, book):
        entry = book.add("sample1.wav", 3.1)
        assert entry.filename == "sample1.wav"
        assert entry.score == 3.1
        assert book.entries() == [entry]

    def test_same_filename_replaces(self, book):
        first = book.add("sample1.wav", 3.1)
        second = book.add("sample1.wav", 4.0)
        assert book.entries() == [second]
        assert first.id != second.id

    def test_missing_filename_rejected(self, book):
        with pytest.raises(SubmissionError):
            book.add("", 3.0)

    def test_score_out_of_range_rejected(self, book):
        with pytest.raises(ValidationError):
            book.add("sample1.wav", 6.0)

    def test_remove(self, book):
        entry = book.add("a.wav", 2.0)
        book.add("b.wav", 3.0)
        book.remove(entry.id)
        assert [e.filename for e in book.entries()] == ["b.wav"]

    def test_remove_unknown(self, book):
        with pytest.raises(SubmissionError):
            book.remove("missing")


class TestCsvExport:
    def test_to_csv(self, book):
        book.add("sample1.wav", 3.1)
        book.add("sample2.wav", 2.25)
        assert book.to_csv() == "filename,score\nsample1.wav,3.10\nsample2.wav,2.25\n"

    def test_empty_export_rejected(self, book):
        with pytest.raises(SubmissionError):
            book.to_csv()

    def test_export_logs_rows_written(self, book):
        book.add("a.wav", 2.0)
        book.add("a.wav", 3.0)
        book.add("b.wav", 4.0)
        with capture_logs() as logs:
            content = book.to_csv()
        assert content.count("\n") == 3
        exported = [log for log in logs if log["event"] == "predictions_exported"]
        assert exported == [{"event": "predictions_exported", "log_level": "info", "count": 2}]
