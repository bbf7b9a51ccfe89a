"""Comparison of a new evaluation against a user's previous evaluations."""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from repoeval.models.schemas import Comparison, ComparisonLine, EvaluationRecord, ScoreSet

COMPARISON_HEADING = "Compared to your previously analyzed repositories:"

# (dimension, ScoreSet attribute, report label)
DIMENSIONS = (
    ("community", "community_score", "Community support"),
    ("documentation", "doc_quality_score", "Documentation quality"),
    ("activity", "activity_score", "Activity level"),
    ("overall", "overall_score", "Overall score"),
)


def compare_with_history(
    scores: ScoreSet,
    history: Sequence[ScoreSet | EvaluationRecord],
) -> Comparison | None:
    """Compare a new score set against the mean of previous evaluations.

    A dimension is "higher" only when the new score is strictly greater than
    the historical mean; a tie classifies as "lower".

    Args:
        scores: Scores of the new evaluation.
        history: Previous evaluations for the same user, as score sets or
            history records.

    Returns:
        Comparison with one line per dimension, or None if history is empty.
    """
    if not history:
        return None

    previous = [_score_set(entry) for entry in history]
    lines = []
    for dimension, attribute, label in DIMENSIONS:
        average = sum(getattr(entry, attribute) for entry in previous) / len(previous)
        direction = "higher" if getattr(scores, attribute) > average else "lower"
        lines.append(
            ComparisonLine(
                dimension=dimension,
                label=label,
                direction=direction,
                average=average,
            )
        )

    return Comparison(history_size=len(previous), lines=lines)


def format_comparison(comparison: Comparison | None) -> str:
    """Render a comparison as text, one line per dimension.

    Returns an empty string when there is nothing to compare against.
    """
    if comparison is None or not comparison.lines:
        return ""

    rendered = [COMPARISON_HEADING]
    for line in comparison.lines:
        rendered.append(f"- {line.label} is {line.direction} than average ({format_score(line.average)})")
    return "\n".join(rendered)


def _score_set(entry: ScoreSet | EvaluationRecord) -> ScoreSet:
    if isinstance(entry, EvaluationRecord):
        return entry.scores
    return entry


def format_score(value: float) -> str:
    """Format a score to one decimal place, rounding exact halves up.

    Decimal(float) is exact, so 6.25 renders as "6.3" rather than the
    round-half-even "6.2" of the float format spec.
    """
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
