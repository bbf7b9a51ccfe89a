"""Tests for the score calculator."""

import math

import pytest

from repoeval.analyzers.scorer import Scorer
from repoeval.models.schemas import Band, RepositoryMetrics


@pytest.fixture
def scorer() -> Scorer:
    return Scorer()


class TestCommunityScore:
    def test_zero_stars_and_forks_score_zero(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics())
        assert scores.community_score == 0.0

    def test_star_term_follows_log_curve(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(stars=99))
        assert scores.community_score == pytest.approx(100 * math.log(100) / math.log(10000))
        assert scores.community_score == pytest.approx(50.0)

    def test_fork_bonus(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(forks=999))
        assert scores.community_score == pytest.approx(40.0)

    def test_capped_at_100(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(stars=10_000, forks=1_000))
        assert scores.community_score == 100.0

    def test_huge_counts_stay_in_range(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(stars=10**12, forks=10**12))
        assert scores.community_score == 100.0

    def test_monotonic_in_stars(self, scorer):
        previous = -1.0
        for stars in [0, 1, 5, 10, 100, 1_000, 5_000, 10_000, 50_000]:
            score = scorer.calculate_scores(RepositoryMetrics(stars=stars, forks=10)).community_score
            assert score >= previous
            previous = score

    def test_monotonic_in_forks(self, scorer):
        previous = -1.0
        for forks in [0, 1, 10, 100, 999, 5_000]:
            score = scorer.calculate_scores(RepositoryMetrics(stars=500, forks=forks)).community_score
            assert score >= previous
            previous = score


class TestDocumentationScore:
    @pytest.mark.parametrize(
        "readme,contributing,templates,expected",
        [
            (False, False, False, 0),
            (True, False, False, 50),
            (False, True, False, 25),
            (False, False, True, 25),
            (False, True, True, 50),
            (True, True, False, 75),
            (True, False, True, 75),
            (True, True, True, 100),
        ],
    )
    def test_checklist(self, scorer, readme, contributing, templates, expected):
        metrics = RepositoryMetrics(
            has_readme=readme,
            has_contributing_guide=contributing,
            has_issue_templates=templates,
        )
        assert scorer.calculate_scores(metrics).doc_quality_score == expected


class TestActivityScore:
    def test_contributor_term_capped_at_40(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(contributors=500))
        assert scores.activity_score == 40.0

    def test_contributors_below_cap(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(contributors=7))
        assert scores.activity_score == 14.0

    def test_commit_term_alone_can_saturate(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(commit_frequency=5.0, contributors=1))
        assert scores.activity_score == 100.0

    def test_saturates_with_busy_repo(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(commit_frequency=5.0, contributors=20))
        assert scores.activity_score == 100.0

    def test_fractional_frequency(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(commit_frequency=0.5, contributors=3))
        assert scores.activity_score == pytest.approx(16.0)


class TestOverallScore:
    def test_weighted_average(self, scorer):
        metrics = RepositoryMetrics(
            stars=1234,
            forks=56,
            contributors=9,
            commit_frequency=1.3,
            has_readme=True,
            has_issue_templates=True,
        )
        scores = scorer.calculate_scores(metrics)
        expected = (
            0.4 * scores.community_score
            + 0.3 * scores.doc_quality_score
            + 0.3 * scores.activity_score
        )
        assert abs(scores.overall_score - expected) < 1e-9
        assert 0 <= scores.overall_score <= 100

    def test_well_maintained_repository(self, scorer):
        metrics = RepositoryMetrics(
            stars=10_000,
            forks=1_000,
            open_issues=50,
            contributors=25,
            commit_frequency=2,
            has_readme=True,
            has_contributing_guide=True,
            has_issue_templates=True,
        )
        scores = scorer.calculate_scores(metrics)
        assert scores.community_score == 100.0
        assert scores.doc_quality_score == 100.0
        assert scores.activity_score == 80.0
        assert scores.overall_score == pytest.approx(94.0)
        assert scorer.band(scores.overall_score) == Band.EXCELLENT

    def test_readme_only_repository(self, scorer):
        scores = scorer.calculate_scores(RepositoryMetrics(has_readme=True))
        assert scores.community_score == 0.0
        assert scores.doc_quality_score == 50.0
        assert scores.activity_score == 0.0
        assert scores.overall_score == pytest.approx(15.0)
        assert scorer.band(scores.overall_score) == Band.LOW

    def test_negative_input_is_clamped(self, scorer):
        metrics = RepositoryMetrics(stars=-5, forks=-1, contributors=-3, commit_frequency=-2.0)
        scores = scorer.calculate_scores(metrics)
        assert scores.community_score == 0.0
        assert scores.activity_score == 0.0
        assert scores.overall_score == 0.0


class TestBand:
    @pytest.mark.parametrize(
        "overall,expected",
        [
            (100.0, Band.EXCELLENT),
            (80.01, Band.EXCELLENT),
            (80.0, Band.GOOD),
            (60.5, Band.GOOD),
            (60.0, Band.HAS_CHALLENGES),
            (40.1, Band.HAS_CHALLENGES),
            (40.0, Band.LOW),
            (0.0, Band.LOW),
        ],
    )
    def test_boundaries_are_exclusive(self, scorer, overall, expected):
        assert scorer.band(overall) == expected

    def test_summary_sentences(self):
        assert "excellent" in Band.EXCELLENT.summary
        assert Band.LOW.summary.endswith("Consider alternative options.")
