"""Pattern-based grammar issue detection."""

import re
from typing import NamedTuple

import structlog

from grammar_scorer.models.analysis import GrammarIssue

logger = structlog.get_logger()

SUBJECT_VERB_AGREEMENT = "Subject-verb agreement error"


class IssueRule(NamedTuple):
    """A catalog entry: compiled pattern, category label, suggestion."""

    pattern: re.Pattern[str]
    issue: str
    suggestion: str | None


def _rule(pattern: str, issue: str, suggestion: str | None = None) -> IssueRule:
    return IssueRule(re.compile(pattern, re.IGNORECASE), issue, suggestion)


# Applied in order; earlier rules win the first-seen position
ISSUE_RULES: list[IssueRule] = [
    _rule(
        r"\b(has|have)\s+(went|ran|came|ate|saw)\b",
        "Incorrect usage of present perfect tense",
        "Replace with 'have gone/run/come/eaten/seen'",
    ),
    _rule(
        r"\b(don't|doesn't|didn't)\s+(likes|wants|needs|goes)\b",
        SUBJECT_VERB_AGREEMENT,
        "Use the base form of the verb after negations",
    ),
    _rule(
        r"\b(me|him|her|them|us)\s+(is|are|was|were)\b",
        "Incorrect use of object pronoun as subject",
        "Replace with subject pronoun (I, he, she, they, we)",
    ),
    _rule(
        r"\b(buyed|goed|taked|breaked|teached)\b",
        "Incorrect past tense form for irregular verb",
        "Use the correct irregular form (bought, went, took, broke, taught)",
    ),
    _rule(
        r"\b(more|less)\s+(easier|harder|better|worse|faster|slower)\b",
        "Double comparison",
        "Use either 'more difficult' or 'harder', not both",
    ),
    _rule(
        r"\b(I|we|they|you)\s+(is|was)\b",
        SUBJECT_VERB_AGREEMENT,
        "Use 'am', 'are' or 'were' with I, we, you and they",
    ),
    _rule(
        r"\b(she|he|it)\s+(am|are|were)\b",
        SUBJECT_VERB_AGREEMENT,
        "Use 'is' or 'was' with he, she and it",
    ),
    _rule(
        r"\ba\s+[aeiou][a-z]*\b",
        "Incorrect article usage",
        "Use 'an' before words starting with a vowel sound",
    ),
    _rule(
        r"\ban\s+[b-df-hj-np-tv-z][a-z]*\b",
        "Incorrect article usage",
        "Use 'a' before words starting with a consonant sound",
    ),
    _rule(
        r"\bless\s+(people|things|items|words|mistakes|errors|books|cars|friends"
        r"|students|questions|problems|ideas|hours|days|minutes)\b",
        "Incorrect quantifier with countable noun",
        "Use 'fewer' with countable nouns",
    ),
    _rule(
        r"\bthere\s+(are|were)\b",
        "Possible subject-verb agreement issue - review manually",
    ),
]

# Contextual checks used only when the catalog finds nothing
FALLBACK_RULES: list[IssueRule] = [
    _rule(r"\b(i think|i believe)\b", "Filler phrase - reduces clarity", "State the point directly"),
    _rule(r"\b(very|really)\b", "Vague intensifier", "Use a more precise word"),
]

FALLBACK_MIN_LENGTH = 20


def _append_unique(
    issues: list[GrammarIssue],
    seen: set[tuple[str, str]],
    text: str,
    rule: IssueRule,
) -> None:
    key = (text, rule.issue)
    if key in seen:
        return
    seen.add(key)
    issues.append(GrammarIssue(text=text, issue=rule.issue, suggestion=rule.suggestion))


def detect_issues(transcript: str) -> list[GrammarIssue]:
    """Scan a transcript against the issue catalog.

    Every match of every rule yields one issue per distinct literal span.
    If nothing in the catalog matches and the transcript is long enough, the
    fallback heuristics contribute at most one issue each.

    Args:
        transcript: Text to scan.

    Returns:
        Issues deduplicated by (text, issue), in first-seen order.
    """
    issues: list[GrammarIssue] = []
    seen: set[tuple[str, str]] = set()

    for rule in ISSUE_RULES:
        for match in rule.pattern.finditer(transcript):
            _append_unique(issues, seen, match.group(), rule)

    if not issues and len(transcript) > FALLBACK_MIN_LENGTH:
        for rule in FALLBACK_RULES:
            match = rule.pattern.search(transcript)
            if match:
                _append_unique(issues, seen, match.group(), rule)

    logger.debug("issues_detected", count=len(issues))
    return issues
