"""Tests for evaluation data models."""

import json
import math

import pytest
from pydantic import ValidationError

from repoeval.models.schemas import EvaluationRecord, RepoRef, RepositoryMetrics, ScoreSet


class TestRepositoryMetrics:
    def test_defaults(self):
        metrics = RepositoryMetrics()
        assert metrics.stars == 0
        assert metrics.commit_frequency == 0.0
        assert metrics.has_readme is False
        assert metrics.last_updated is None

    def test_negative_values_are_clamped(self):
        metrics = RepositoryMetrics(stars=-10, forks=-1, open_issues=-3, contributors=-2, commit_frequency=-0.5)
        assert metrics.stars == 0
        assert metrics.forks == 0
        assert metrics.open_issues == 0
        assert metrics.contributors == 0
        assert metrics.commit_frequency == 0.0
        assert isinstance(metrics.commit_frequency, float)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_frequency_rejected(self, value):
        with pytest.raises(ValidationError):
            RepositoryMetrics(commit_frequency=value)

    def test_immutable(self):
        metrics = RepositoryMetrics(stars=1)
        with pytest.raises(ValidationError):
            metrics.stars = 2


class TestScoreSet:
    def test_overall_is_derived(self):
        scores = ScoreSet(community_score=100, doc_quality_score=100, activity_score=80)
        assert scores.overall_score == pytest.approx(94.0)

    def test_overall_cannot_be_set(self):
        scores = ScoreSet(
            community_score=10, doc_quality_score=0, activity_score=0, overall_score=99
        )
        assert scores.overall_score == pytest.approx(4.0)

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            ScoreSet(community_score=101, doc_quality_score=0, activity_score=0)
        with pytest.raises(ValidationError):
            ScoreSet(community_score=-1, doc_quality_score=0, activity_score=0)

    def test_json_round_trip_is_exact(self):
        scores = ScoreSet(
            community_score=73.12345678901234,
            doc_quality_score=75.0,
            activity_score=1 / 3,
        )
        restored = ScoreSet.model_validate(json.loads(json.dumps(scores.model_dump(mode="json"))))

        assert restored.community_score == scores.community_score
        assert restored.doc_quality_score == scores.doc_quality_score
        assert restored.activity_score == scores.activity_score
        assert restored.overall_score == scores.overall_score


class TestEvaluationRecord:
    def test_from_evaluation(self):
        ref = RepoRef(owner="pallets", repo="flask")
        metrics = RepositoryMetrics(stars=60_000, forks=16_000, open_issues=5, contributors=700, commit_frequency=1.5)
        scores = ScoreSet(community_score=100, doc_quality_score=100, activity_score=70)

        record = EvaluationRecord.from_evaluation(ref, metrics, scores)

        assert record.key == ("pallets", "flask")
        assert record.stars == 60_000
        assert record.commit_frequency == 1.5
        assert record.scores == scores
        assert record.evaluated_at.tzinfo is not None


def test_repo_ref_properties():
    ref = RepoRef(owner="psf", repo="requests")
    assert ref.full_name == "psf/requests"
    assert ref.url == "https://github.com/psf/requests"
