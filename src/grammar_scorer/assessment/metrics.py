"""Lexical and structural feature extraction for metric scoring."""

import re
from typing import NamedTuple


class WeightedPattern(NamedTuple):
    """A phrase pattern contributing `weight` per occurrence."""

    pattern: re.Pattern[str]
    weight: float


def _weighted(words: list[str], weight: float) -> WeightedPattern:
    alternation = "|".join(re.escape(w) for w in words)
    return WeightedPattern(re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE), weight)


TRANSITION_WORDS = ["however", "therefore", "consequently", "moreover", "furthermore"]
TRANSITION_PATTERN = re.compile(rf"\b(?:{'|'.join(TRANSITION_WORDS)})\b", re.IGNORECASE)

# Spoken fillers lower fluency
FILLER_PATTERNS: dict[str, WeightedPattern] = {
    "like": _weighted(["like"], -0.05),
    "hesitation": _weighted(["um", "uh"], -0.10),
    "you_know": _weighted(["you know"], -0.05),
    "basically": _weighted(["basically"], -0.03),
    "actually": _weighted(["actually"], -0.02),
    "i_mean": _weighted(["i mean"], -0.04),
}

# Connectives signalling more advanced discourse
ADVANCED_CONNECTIVES: dict[str, WeightedPattern] = {
    "tier_1": _weighted(["nevertheless", "furthermore", "consequently", "moreover"], 0.15),
    "compound": _weighted(
        ["in addition", "as a result", "on the other hand", "in contrast", "for instance"], 0.10
    ),
    "tier_2": _weighted(["however", "therefore", "thus", "hence"], 0.08),
    "concessive": _weighted(["although", "even though", "whereas", "despite"], 0.12),
    "prepositional": _weighted(["in terms of", "with regard to", "in light of", "due to"], 0.08),
}

LONG_WORD_LENGTH = 6


class TextFeatures(NamedTuple):
    """Features derived from a transcript."""

    word_count: int
    sentence_count: int
    avg_words_per_sentence: float
    long_word_ratio: float
    lexical_diversity: float
    transition_count: int
    filler_penalty: float
    advanced_bonus: float
    length: int


def split_sentences(text: str) -> list[str]:
    """Split on sentence punctuation, dropping empty segments."""
    return [s.strip() for s in re.split(r"[.!?]", text) if s.strip()]


def _weighted_sum(text: str, patterns: dict[str, WeightedPattern]) -> float:
    return sum(len(p.pattern.findall(text)) * p.weight for p in patterns.values())


def compute_filler_penalty(text: str) -> float:
    """Sum of (negative) filler weights times occurrences."""
    return _weighted_sum(text, FILLER_PATTERNS)


def compute_advanced_bonus(text: str) -> float:
    """Sum of connective weights times occurrences."""
    return _weighted_sum(text, ADVANCED_CONNECTIVES)


def extract_features(text: str) -> TextFeatures:
    """Compute every feature the metric formulas use.

    Args:
        text: Raw transcript.

    Returns:
        TextFeatures; ratios default to 0 when there are no words or sentences.
    """
    words = text.split()
    sentences = split_sentences(text)

    word_count = len(words)
    sentence_count = len(sentences)
    avg_words = word_count / sentence_count if sentence_count else 0.0

    if word_count:
        long_ratio = sum(1 for w in words if len(w) > LONG_WORD_LENGTH) / word_count
        diversity = len({w.casefold() for w in words}) / word_count
    else:
        long_ratio = 0.0
        diversity = 0.0

    return TextFeatures(
        word_count=word_count,
        sentence_count=sentence_count,
        avg_words_per_sentence=avg_words,
        long_word_ratio=long_ratio,
        lexical_diversity=diversity,
        transition_count=len(TRANSITION_PATTERN.findall(text)),
        filler_penalty=compute_filler_penalty(text),
        advanced_bonus=compute_advanced_bonus(text),
        length=len(text),
    )
