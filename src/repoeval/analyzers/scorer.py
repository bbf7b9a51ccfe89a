"""Score calculator for repository evaluations."""

import math

from repoeval.models.schemas import Band, RepositoryMetrics, ScoreSet

MAX_SCORE = 100.0


class Scorer:
    """Calculates evaluation scores from repository metrics.

    Sub-scores (each 0-100):
    - Community: logarithmic in stars and forks
    - Documentation: README / CONTRIBUTING / issue template checklist
    - Activity: commit cadence plus contributor breadth

    Overall weighting: community 40%, documentation 30%, activity 30%.
    """

    # Star count at which the star term reaches 100
    STAR_SATURATION = 10_000
    # Fork count at which the fork bonus reaches its full weight
    FORK_SATURATION = 1_000
    FORK_BONUS_WEIGHT = 40.0

    # Documentation checklist points
    README_POINTS = 50
    CONTRIBUTING_POINTS = 25
    ISSUE_TEMPLATE_POINTS = 25

    # Activity
    COMMIT_POINTS_PER_DAILY_COMMIT = 20.0
    POINTS_PER_CONTRIBUTOR = 2
    CONTRIBUTOR_CAP = 40

    # Band thresholds (exclusive lower bounds)
    BAND_THRESHOLDS = (
        (80.0, Band.EXCELLENT),
        (60.0, Band.GOOD),
        (40.0, Band.HAS_CHALLENGES),
    )

    def calculate_scores(self, metrics: RepositoryMetrics) -> ScoreSet:
        """Calculate all score components.

        Args:
            metrics: Repository metrics.

        Returns:
            ScoreSet with sub-scores and the derived overall score.
        """
        return ScoreSet(
            community_score=self._calculate_community_score(metrics),
            doc_quality_score=self._calculate_documentation_score(metrics),
            activity_score=self._calculate_activity_score(metrics),
        )

    def band(self, overall_score: float) -> Band:
        """Map an overall score to its qualitative band.

        A score exactly on a threshold falls into the band below it.
        """
        for threshold, band in self.BAND_THRESHOLDS:
            if overall_score > threshold:
                return band
        return Band.LOW

    def _calculate_community_score(self, metrics: RepositoryMetrics) -> float:
        """Calculate community score.

        The star term saturates at 100 for 10k stars; forks add a bonus of up
        to 40 points at 1k forks. The sum is capped at 100.
        """
        star_term = MAX_SCORE * math.log(metrics.stars + 1) / math.log(self.STAR_SATURATION)
        fork_term = (
            self.FORK_BONUS_WEIGHT * math.log(metrics.forks + 1) / math.log(self.FORK_SATURATION)
        )
        return _clamp(star_term + fork_term)

    def _calculate_documentation_score(self, metrics: RepositoryMetrics) -> float:
        """Calculate documentation score from the presence of key files."""
        score = 0.0
        if metrics.has_readme:
            score += self.README_POINTS
        if metrics.has_contributing_guide:
            score += self.CONTRIBUTING_POINTS
        if metrics.has_issue_templates:
            score += self.ISSUE_TEMPLATE_POINTS
        return score

    def _calculate_activity_score(self, metrics: RepositoryMetrics) -> float:
        """Calculate activity score.

        Contributor points are capped at 40 (20 contributors) before being
        added to the commit term; the sum is capped at 100.
        """
        commit_term = self.COMMIT_POINTS_PER_DAILY_COMMIT * metrics.commit_frequency
        contributor_term = min(self.CONTRIBUTOR_CAP, self.POINTS_PER_CONTRIBUTOR * metrics.contributors)
        return _clamp(commit_term + contributor_term)


def _clamp(score: float) -> float:
    """Clamp a score into [0, 100]."""
    return float(max(0.0, min(MAX_SCORE, score)))
