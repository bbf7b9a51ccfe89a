"""Analyzers for fetching, scoring and comparing repositories."""

from repoeval.analyzers.comparison import compare_with_history, format_comparison
from repoeval.analyzers.github import GitHubFetcher, parse_repo_ref
from repoeval.analyzers.pipeline import EvaluationPipeline, EvaluationResult
from repoeval.analyzers.scorer import Scorer

__all__ = [
    "EvaluationPipeline",
    "EvaluationResult",
    "GitHubFetcher",
    "Scorer",
    "compare_with_history",
    "format_comparison",
    "parse_repo_ref",
]
