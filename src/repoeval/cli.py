"""CLI entry point for repoeval."""

import asyncio
import json
import logging
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from repoeval.analyzers.comparison import format_score
from repoeval.analyzers.github import GitHubFetcher, parse_repo_ref
from repoeval.analyzers.pipeline import EvaluationPipeline, EvaluationResult
from repoeval.config import Settings
from repoeval.errors import InvalidRepositoryError, RepoEvalError
from repoeval.models.schemas import RepoRef, RepositoryMetrics
from repoeval.report import format_analysis, format_previous_evaluations, format_search_results
from repoeval.storage.history import InMemoryHistoryStore, JsonHistoryStore

app = typer.Typer(help="GitHub repository evaluation tool.")

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Evaluate open-source GitHub repositories."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def _settings(user: str | None, data_dir: Path | None) -> Settings:
    return Settings.from_env(user_id=user, data_dir=data_dir)


def _parse_ref(text: str) -> RepoRef:
    repo_ref = parse_repo_ref(text)
    if repo_ref is None:
        console.print(f"[red]{InvalidRepositoryError(text)}[/red]")
        raise typer.Exit(1)
    return repo_ref


def _score_bar(score: float, width: int = 20) -> str:
    """Create a visual score bar."""
    filled = int(score / 100 * width)
    color = "green" if score > 80 else "yellow" if score > 60 else "orange1" if score > 40 else "red"
    return f"[{color}]{'█' * filled}{'░' * (width - filled)}[/{color}]"


def _print_result(result: EvaluationResult, as_json: bool) -> None:
    if as_json:
        payload = {
            "repository": result.repo.full_name,
            "metrics": result.metrics.model_dump(mode="json"),
            "scores": result.scores.model_dump(mode="json"),
            "band": result.band.value,
            "comparison": result.comparison.model_dump(mode="json") if result.comparison else None,
            "saved": result.saved,
        }
        console.print_json(json.dumps(payload))
        return

    scores = result.scores
    table = Table(title=f"{result.repo.full_name}", show_header=False, box=None)
    table.add_column("Score", style="bold")
    table.add_column("Bar")
    table.add_column("Value", justify="right")
    table.add_row("Community", _score_bar(scores.community_score), format_score(scores.community_score))
    table.add_row("Documentation", _score_bar(scores.doc_quality_score), format_score(scores.doc_quality_score))
    table.add_row("Activity", _score_bar(scores.activity_score), format_score(scores.activity_score))
    table.add_row("Overall", _score_bar(scores.overall_score), format_score(scores.overall_score))
    console.print(table)
    console.print()
    console.print(Markdown(format_analysis(result)))


@app.command()
def evaluate(
    repository: str = typer.Argument(..., help="Repository as owner/repo or GitHub URL"),
    user: str | None = typer.Option(None, "--user", "-u", help="User whose history is used"),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Data directory"),
    no_save: bool = typer.Option(False, "--no-save", help="Don't store the evaluation"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Fetch a repository from GitHub and evaluate it."""
    repo_ref = _parse_ref(repository)
    settings = _settings(user, data_dir)
    asyncio.run(_evaluate(settings, repo_ref, not no_save, as_json))


async def _evaluate(settings: Settings, repo_ref: RepoRef, save: bool, as_json: bool) -> None:
    """Async implementation of evaluate."""
    pipeline = EvaluationPipeline(
        store=JsonHistoryStore(settings.data_dir),
        fetcher=GitHubFetcher(settings),
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"Evaluating {repo_ref.full_name}...", total=None)
        try:
            result = await pipeline.evaluate(settings.user_id, repo_ref, save=save)
        except (RepoEvalError, httpx.HTTPError) as e:
            console.print(f"[red]Error evaluating {repo_ref.full_name}: {e}[/red]")
            raise typer.Exit(1)

    _print_result(result, as_json)
    if save and not result.saved:
        console.print("[yellow]Warning: couldn't save evaluation to history[/yellow]")


@app.command()
def score(
    repository: str = typer.Argument("local/repository", help="Repository label as owner/repo"),
    stars: int = typer.Option(0, "--stars", help="Stargazer count"),
    forks: int = typer.Option(0, "--forks", help="Fork count"),
    open_issues: int = typer.Option(0, "--open-issues", help="Open issue count"),
    contributors: int = typer.Option(0, "--contributors", help="Contributor count"),
    commit_frequency: float = typer.Option(0.0, "--commit-frequency", help="Commits per day"),
    readme: bool = typer.Option(False, "--readme", help="Repository has a README"),
    contributing: bool = typer.Option(False, "--contributing", help="Repository has a contributing guide"),
    issue_templates: bool = typer.Option(False, "--issue-templates", help="Repository has issue templates"),
    user: str | None = typer.Option(None, "--user", "-u", help="Compare against this user's history"),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Data directory"),
    save: bool = typer.Option(False, "--save", help="Store the evaluation in history"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Score a repository from metrics given on the command line (no network)."""
    repo_ref = _parse_ref(repository)
    metrics = RepositoryMetrics(
        stars=stars,
        forks=forks,
        open_issues=open_issues,
        contributors=contributors,
        commit_frequency=commit_frequency,
        has_readme=readme,
        has_contributing_guide=contributing,
        has_issue_templates=issue_templates,
    )

    settings = _settings(user, data_dir)
    if user is None and not save:
        store = InMemoryHistoryStore()
    else:
        store = JsonHistoryStore(settings.data_dir)

    pipeline = EvaluationPipeline(store=store)
    result = asyncio.run(pipeline.evaluate_metrics(settings.user_id, repo_ref, metrics, save=save))
    _print_result(result, as_json)


@app.command()
def history(
    user: str | None = typer.Option(None, "--user", "-u", help="User whose history to show"),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Data directory"),
    as_json: bool = typer.Option(False, "--json", help="Print the history as JSON"),
) -> None:
    """Show previously evaluated repositories, most recent first."""
    settings = _settings(user, data_dir)
    records = JsonHistoryStore(settings.data_dir).get(settings.user_id)

    if as_json:
        console.print_json(json.dumps([r.model_dump(mode="json") for r in records]))
        return
    console.print(Markdown(format_previous_evaluations(records)))


@app.command()
def search(
    query: str = typer.Argument(..., help="GitHub search query"),
    limit: int = typer.Option(5, "--limit", "-n", help="Number of repositories to show"),
) -> None:
    """Search GitHub for repositories, most starred first."""
    asyncio.run(_search(Settings.from_env(), query, limit))


async def _search(settings: Settings, query: str, limit: int) -> None:
    """Async implementation of search."""
    fetcher = GitHubFetcher(settings)
    try:
        results = await fetcher.search_repositories(query, limit=limit)
    except (RepoEvalError, httpx.HTTPError) as e:
        console.print(f"[red]Error searching repositories: {e}[/red]")
        raise typer.Exit(1)

    console.print(Markdown(format_search_results(query, results)))


@app.command()
def version() -> None:
    """Show version information."""
    from repoeval import __version__

    console.print(f"repoeval v{__version__}")


if __name__ == "__main__":
    app()
