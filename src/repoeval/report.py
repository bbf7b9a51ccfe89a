"""Markdown reports for the chat transcript."""

from collections.abc import Sequence

from repoeval.analyzers.comparison import format_comparison, format_score
from repoeval.analyzers.pipeline import EvaluationResult
from repoeval.models.schemas import EvaluationRecord, RepoSearchResult


def _presence(flag: bool) -> str:
    return "✅ Present" if flag else "❌ Missing"


def format_analysis(result: EvaluationResult) -> str:
    """Render a full repository analysis as markdown."""
    metrics = result.metrics
    scores = result.scores
    last_updated = metrics.last_updated.strftime("%Y-%m-%d") if metrics.last_updated else "unknown"

    sections = [
        f"# Analysis of {result.repo.full_name}",
        "",
        "## Repository Statistics",
        f"- **Stars:** {metrics.stars:,}",
        f"- **Forks:** {metrics.forks:,}",
        f"- **Open Issues:** {metrics.open_issues:,}",
        f"- **Contributors:** {metrics.contributors}",
        f"- **Commit Frequency:** {metrics.commit_frequency:.2f} commits/day",
        f"- **Last Updated:** {last_updated}",
        "",
        "## Evaluation Scores",
        f"- **Community Support:** {format_score(scores.community_score)}/100",
        f"- **Documentation Quality:** {format_score(scores.doc_quality_score)}/100",
        f"- **Activity Level:** {format_score(scores.activity_score)}/100",
        f"- **Overall Score:** {format_score(scores.overall_score)}/100",
        "",
        "## Documentation",
        f"- README: {_presence(metrics.has_readme)}",
        f"- Contributing Guidelines: {_presence(metrics.has_contributing_guide)}",
        f"- Issue Templates: {_presence(metrics.has_issue_templates)}",
        "",
        "## Analysis Summary",
        result.band.summary,
    ]

    comparison = format_comparison(result.comparison)
    if comparison:
        sections += ["", "## Comparison with Previously Evaluated Repos", comparison]

    return "\n".join(sections)


def format_previous_evaluations(records: Sequence[EvaluationRecord]) -> str:
    """Render a user's evaluation history as markdown, in the order given."""
    if not records:
        return "# Previously Analyzed Repositories\n\nYou haven't analyzed any repositories yet."

    lines = [
        "# Previously Analyzed Repositories",
        "",
        "Based on your history, you've analyzed the following repositories:",
    ]
    for index, record in enumerate(records, 1):
        scores = record.scores
        lines += [
            "",
            f"## {index}. {record.owner}/{record.repo_name}",
            f"- **Evaluated on:** {record.evaluated_at.strftime('%Y-%m-%d')}",
            f"- **Stars:** {record.stars:,}",
            f"- **Overall Score:** {format_score(scores.overall_score)}/100",
            f"- **Community Score:** {format_score(scores.community_score)}/100",
            f"- **Documentation Score:** {format_score(scores.doc_quality_score)}/100",
            f"- **Activity Score:** {format_score(scores.activity_score)}/100",
        ]
    return "\n".join(lines)


def format_search_results(query: str, results: Sequence[RepoSearchResult]) -> str:
    """Render repository search results as markdown."""
    if not results:
        return f"# Search: {query}\n\nNo repositories found."

    lines = [f"# Search: {query}", "", "Top repositories by stars:"]
    for index, repo in enumerate(results, 1):
        lines += [
            "",
            f"## {index}. {repo.name} ({repo.owner})",
            f"- **Stars:** {repo.stars:,}",
            f"- **Forks:** {repo.forks:,}",
            f"- **Open Issues:** {repo.open_issues:,}",
            f"- **URL:** {repo.url}",
            f"- **Description:** {repo.description or 'No description available'}",
        ]
    return "\n".join(lines)


def default_response() -> str:
    """Welcome text shown before any evaluation."""
    return (
        "I can help you evaluate open-source projects based on metrics like stars, "
        "activity, community support, and documentation quality.\n\n"
        "To analyze a repository, mention it like 'facebook/react', or search for "
        "projects with a query like 'react state management'."
    )
