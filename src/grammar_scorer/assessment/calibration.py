"""Calibration of text features into 1-5 sub-metric scores."""

from grammar_scorer.assessment.metrics import TextFeatures
from grammar_scorer.models.analysis import (
    RUBRIC_BANDS,
    GrammarMetric,
    MetricName,
    clamp_score,
    get_rubric_band,
)

BASELINE_SCORE = 2.5


def sentence_variety(sentence_count: int) -> float:
    """Small bonus that varies with sentence count once there are more than 3."""
    if sentence_count > 3:
        return (sentence_count % 5) / 10
    return 0.0


def calibrate_complexity_score(avg_words_per_sentence: float, long_word_ratio: float) -> float:
    """Longer sentences and words suggest more complex structures."""
    score = 3.0
    if avg_words_per_sentence > 12:
        score += 1
    if long_word_ratio > 0.2:
        score += 1
    return clamp_score(score)


def calibrate_coherence_score(
    transition_count: int,
    avg_words_per_sentence: float,
    sentence_count: int,
    advanced_bonus: float,
) -> float:
    """Calibrate discourse connectedness.

    Args:
        transition_count: Occurrences of transition words.
        avg_words_per_sentence: Average sentence length in words.
        sentence_count: Number of sentences.
        advanced_bonus: Weighted advanced-connective bonus.

    Returns:
        Coherence score 1-5.
    """
    score = 3.0
    if transition_count > 0:
        score += 0.5
    if avg_words_per_sentence > 5:
        score += 0.5
    score += sentence_variety(sentence_count)
    score += 0.5 * advanced_bonus
    return clamp_score(score)


def calibrate_fluency_score(length: int, issue_count: int, filler_penalty: float) -> float:
    """Calibrate fluency from text length, issues and filler usage.

    Args:
        length: Raw transcript length in characters.
        issue_count: Number of detected issues.
        filler_penalty: Weighted filler penalty (zero or negative).

    Returns:
        Fluency score 1-5.
    """
    text_complexity = (length % 13) / 10
    return clamp_score(3.5 + text_complexity - 0.3 * issue_count + filler_penalty)


def calibrate_syntax_score(sentence_count: int, issue_count: int) -> float:
    return clamp_score(3.7 + sentence_variety(sentence_count) - 0.4 * issue_count)


def calibrate_vocabulary_score(lexical_diversity: float, advanced_bonus: float) -> float:
    """Higher diversity and advanced connectives mean richer vocabulary."""
    if lexical_diversity > 0.7:
        diversity_score = 1.5
    elif lexical_diversity > 0.5:
        diversity_score = 1.0
    else:
        diversity_score = 0.5
    return clamp_score(2.5 + diversity_score + advanced_bonus)


def compute_metrics(features: TextFeatures, issue_count: int) -> list[GrammarMetric]:
    """Compute the five sub-metrics in reporting order.

    Args:
        features: Extracted text features.
        issue_count: Number of detected issues.

    Returns:
        Complexity, Coherence, Fluency, Syntax, Vocabulary.
    """
    scores = {
        MetricName.COMPLEXITY: calibrate_complexity_score(
            features.avg_words_per_sentence, features.long_word_ratio
        ),
        MetricName.COHERENCE: calibrate_coherence_score(
            features.transition_count,
            features.avg_words_per_sentence,
            features.sentence_count,
            features.advanced_bonus,
        ),
        MetricName.FLUENCY: calibrate_fluency_score(
            features.length, issue_count, features.filler_penalty
        ),
        MetricName.SYNTAX: calibrate_syntax_score(features.sentence_count, issue_count),
        MetricName.VOCABULARY: calibrate_vocabulary_score(
            features.lexical_diversity, features.advanced_bonus
        ),
    }
    return [GrammarMetric(name=name, score=scores[name]) for name in MetricName]


def baseline_metrics() -> list[GrammarMetric]:
    """Fixed metrics for texts too short to analyse."""
    return [GrammarMetric(name=name, score=BASELINE_SCORE) for name in MetricName]


def get_full_mapping(score: float) -> dict[str, str | float]:
    """Get the rubric label and description for an overall score.

    Args:
        score: Overall score 1-5.

    Returns:
        Dict with score, label, description.
    """
    band = get_rubric_band(score)
    return {
        "score": round(score, 1),
        "label": band.label,
        "description": band.description,
    }


def get_rubric() -> list[dict[str, str | float]]:
    """All rubric bands, best first."""
    return [band.model_dump() for band in RUBRIC_BANDS]
