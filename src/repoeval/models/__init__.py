"""Data models and schemas."""

from repoeval.models.schemas import (
    Band,
    Comparison,
    ComparisonLine,
    EvaluationRecord,
    RepoRef,
    RepoSearchResult,
    RepositoryMetrics,
    ScoreSet,
)

__all__ = [
    "Band",
    "Comparison",
    "ComparisonLine",
    "EvaluationRecord",
    "RepoRef",
    "RepoSearchResult",
    "RepositoryMetrics",
    "ScoreSet",
]
