"""Rule-based grammar scoring engine."""

import structlog

from grammar_scorer.assessment.calibration import (
    BASELINE_SCORE,
    baseline_metrics,
    compute_metrics,
)
from grammar_scorer.assessment.issues import detect_issues
from grammar_scorer.assessment.metrics import extract_features
from grammar_scorer.models.analysis import (
    AnalysisResult,
    GrammarIssue,
    GrammarMetric,
    compute_overall_score,
)

logger = structlog.get_logger()

MIN_TEXT_LENGTH = 10


class GrammarAnalyzer:
    """Scores a transcript from detected issues and text features.

    Analysis runs in two steps: `measure` finds issues and sub-metrics,
    `score` combines them into the overall result. `analyze` runs both.

    Stateless: one instance may be shared across threads.
    """

    def analyze(self, text: str) -> AnalysisResult:
        """Analyze a transcript and return issues, metrics and overall score.

        Args:
            text: Transcript to score.

        Returns:
            AnalysisResult. Texts shorter than 10 characters once trimmed get
            the fixed 2.5 baseline.
        """
        issues, metrics = self.measure(text)
        return self.score(text, issues, metrics)

    def measure(self, text: str) -> tuple[list[GrammarIssue], list[GrammarMetric] | None]:
        """Detect issues and calibrate the five sub-metrics.

        Metrics are None when the text is too short to measure or feature
        extraction fails.
        """
        issues = detect_issues(text)

        if len(text.strip()) < MIN_TEXT_LENGTH:
            return issues, None

        try:
            features = extract_features(text)
            metrics = compute_metrics(features, len(issues))
        except Exception:
            logger.exception("feature_extraction_failed", length=len(text))
            return issues, None

        return issues, metrics

    def score(
        self,
        text: str,
        issues: list[GrammarIssue],
        metrics: list[GrammarMetric] | None,
    ) -> AnalysisResult:
        """Combine measured issues and metrics into the overall result."""
        if metrics is None:
            return AnalysisResult(issues=issues, metrics=baseline_metrics(), score=BASELINE_SCORE)

        result = AnalysisResult(
            issues=issues,
            metrics=metrics,
            score=compute_overall_score(metrics, len(issues), len(text)),
        )

        logger.debug(
            "grammar_analysis",
            score=result.score,
            issues=len(issues),
            length=len(text),
        )

        return result


_default_analyzer = GrammarAnalyzer()


def analyze(text: str) -> AnalysisResult:
    """Analyze a transcript with the shared analyzer."""
    return _default_analyzer.analyze(text)
