"""Tests for audio upload validation."""

import io
import wave

import pytest

from grammar_scorer.audio.validation import (
    AudioValidationError,
    get_audio_duration,
    validate_audio_file,
)

MB = 1024 * 1024


def make_wav(seconds: float, sample_rate: int = 16000) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(b"\x00\x00" * int(seconds * sample_rate))
    return buf.getvalue()


class TestValidateAudioFile:
    def test_accepts_audio(self):
        validate_audio_file("audio/wav", 1000, MB)
        validate_audio_file("audio/mpeg", MB, MB)

    @pytest.mark.parametrize("content_type", [None, "", "text/plain", "video/mp4"])
    def test_rejects_non_audio(self, content_type):
        with pytest.raises(AudioValidationError, match="Unsupported file type"):
            validate_audio_file(content_type, 1000, MB)

    def test_rejects_empty(self):
        with pytest.raises(AudioValidationError, match="empty"):
            validate_audio_file("audio/wav", 0, MB)

    def test_rejects_oversized(self):
        with pytest.raises(AudioValidationError, match="too large"):
            validate_audio_file("audio/wav", 2 * MB, MB)


class TestAudioDuration:
    def test_wav_duration(self):
        assert get_audio_duration(make_wav(1.5)) == pytest.approx(1.5)

    def test_non_wav_returns_none(self):
        assert get_audio_duration(b"ID3\x03\x00not really an mp3") is None

    def test_empty_returns_none(self):
        assert get_audio_duration(b"") is None
