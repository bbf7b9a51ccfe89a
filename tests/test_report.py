"""Tests for markdown report rendering."""

from datetime import datetime, timezone

from repoeval.analyzers.pipeline import EvaluationPipeline
from repoeval.models.schemas import EvaluationRecord, RepoRef, RepoSearchResult, RepositoryMetrics, ScoreSet
from repoeval.report import (
    default_response,
    format_analysis,
    format_previous_evaluations,
    format_search_results,
)
from repoeval.storage.history import InMemoryHistoryStore

METRICS = RepositoryMetrics(
    stars=10_000,
    forks=1_000,
    open_issues=50,
    contributors=25,
    commit_frequency=2,
    has_readme=True,
    has_contributing_guide=False,
    has_issue_templates=True,
    last_updated=datetime(2026, 2, 1, tzinfo=timezone.utc),
)


async def test_format_analysis_without_history():
    pipeline = EvaluationPipeline(store=InMemoryHistoryStore())
    result = await pipeline.evaluate_metrics("alice", RepoRef(owner="big", repo="project"), METRICS)

    report = format_analysis(result)

    assert report.startswith("# Analysis of big/project")
    assert "- **Stars:** 10,000" in report
    assert "- **Last Updated:** 2026-02-01" in report
    assert "- **Community Support:** 100.0/100" in report
    assert "- **Documentation Quality:** 75.0/100" in report
    assert "- **Activity Level:** 80.0/100" in report
    assert "- **Overall Score:** 86.5/100" in report
    assert "- Contributing Guidelines: ❌ Missing" in report
    assert "- README: ✅ Present" in report
    assert "This is an excellent repository" in report
    assert "Comparison with Previously Evaluated Repos" not in report


async def test_format_analysis_with_history():
    pipeline = EvaluationPipeline(store=InMemoryHistoryStore())
    await pipeline.evaluate_metrics("alice", RepoRef(owner="small", repo="tool"), RepositoryMetrics(has_readme=True))
    result = await pipeline.evaluate_metrics("alice", RepoRef(owner="big", repo="project"), METRICS)

    report = format_analysis(result)

    assert "## Comparison with Previously Evaluated Repos" in report
    assert "- Overall score is higher than average (15.0)" in report


def test_format_previous_evaluations():
    records = [
        EvaluationRecord(
            owner="psf",
            repo_name="requests",
            evaluated_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
            stars=52_000,
            scores=ScoreSet(community_score=100, doc_quality_score=75, activity_score=60),
        )
    ]

    text = format_previous_evaluations(records)

    assert "## 1. psf/requests" in text
    assert "- **Evaluated on:** 2026-01-05" in text
    assert "- **Stars:** 52,000" in text
    assert "- **Overall Score:** 80.5/100" in text


def test_format_previous_evaluations_rounds_half_up():
    records = [
        EvaluationRecord(
            owner="acme",
            repo_name="widget",
            evaluated_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
            stars=3,
            scores=ScoreSet(community_score=12.25, doc_quality_score=0.25, activity_score=0),
        )
    ]

    text = format_previous_evaluations(records)

    assert "- **Community Score:** 12.3/100" in text
    assert "- **Documentation Score:** 0.3/100" in text


def test_format_previous_evaluations_empty():
    assert "haven't analyzed" in format_previous_evaluations([])


def test_format_search_results():
    results = [RepoSearchResult(owner="reduxjs", name="redux", stars=60_000, url="https://github.com/reduxjs/redux")]

    text = format_search_results("state management", results)

    assert "## 1. redux (reduxjs)" in text
    assert "- **Description:** No description available" in text
    assert "No repositories found" in format_search_results("nothing", [])


def test_default_response_mentions_usage():
    assert "facebook/react" in default_response()
