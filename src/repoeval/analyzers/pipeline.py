"""End-to-end evaluation pipeline for repositories."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone

from repoeval.analyzers.comparison import compare_with_history
from repoeval.analyzers.github import GitHubFetcher
from repoeval.analyzers.scorer import Scorer
from repoeval.errors import HistoryStoreError, RepositoryNotFoundError
from repoeval.models.schemas import (
    Band,
    Comparison,
    EvaluationRecord,
    RepoRef,
    RepositoryMetrics,
    ScoreSet,
)
from repoeval.storage.history import HistoryStore

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Outcome of evaluating one repository for one user."""

    repo: RepoRef
    metrics: RepositoryMetrics
    scores: ScoreSet
    band: Band
    record: EvaluationRecord
    comparison: Comparison | None = None
    saved: bool = False


class EvaluationPipeline:
    """Orchestrates a repository evaluation.

    Pipeline stages:
    1. Fetch repository metrics from GitHub
    2. Calculate scores
    3. Compare against the user's previous evaluations
    4. Save the evaluation to the user's history

    Evaluations of the same repository for the same user are serialized so
    that a re-evaluation never loses a concurrent history update.
    """

    def __init__(
        self,
        store: HistoryStore,
        fetcher: GitHubFetcher | None = None,
        scorer: Scorer | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            store: History store for previous evaluations.
            fetcher: GitHub fetcher. Required only for evaluate().
            scorer: Score calculator. Defaults to Scorer().
        """
        self.store = store
        self.fetcher = fetcher
        self.scorer = scorer or Scorer()
        # Locks are dropped once no evaluation holds or awaits them
        self._key_locks: dict[tuple[str, str, str], asyncio.Lock] = {}
        self._key_users: dict[tuple[str, str, str], int] = {}

    @asynccontextmanager
    async def _key_lock(self, user_id: str, repo_ref: RepoRef) -> AsyncIterator[None]:
        """Serialize evaluations of one repository for one user."""
        key = (user_id, repo_ref.owner, repo_ref.repo)
        lock = self._key_locks.setdefault(key, asyncio.Lock())
        self._key_users[key] = self._key_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._key_users[key] -= 1
            if self._key_users[key] == 0:
                del self._key_users[key]
                del self._key_locks[key]

    async def evaluate(
        self,
        user_id: str,
        repo_ref: RepoRef,
        save: bool = True,
    ) -> EvaluationResult:
        """Fetch, score, compare and store one repository evaluation.

        Args:
            user_id: Identity whose history is read and updated.
            repo_ref: Repository to evaluate.
            save: Whether to store the evaluation in the user's history.

        Returns:
            EvaluationResult.

        Raises:
            RepositoryNotFoundError: If the repository is not accessible.
        """
        if self.fetcher is None:
            raise ValueError("EvaluationPipeline.evaluate() requires a GitHubFetcher")

        async with self._key_lock(user_id, repo_ref):
            logger.info(f"Evaluating {repo_ref.full_name} for {user_id}")
            metrics = await self.fetcher.fetch_metrics(repo_ref)
            if metrics is None:
                raise RepositoryNotFoundError(repo_ref.owner, repo_ref.repo)
            return await self._evaluate(user_id, repo_ref, metrics, save)

    async def evaluate_metrics(
        self,
        user_id: str,
        repo_ref: RepoRef,
        metrics: RepositoryMetrics,
        save: bool = True,
    ) -> EvaluationResult:
        """Score, compare and store an evaluation from already-fetched metrics."""
        async with self._key_lock(user_id, repo_ref):
            return await self._evaluate(user_id, repo_ref, metrics, save)

    async def _evaluate(
        self,
        user_id: str,
        repo_ref: RepoRef,
        metrics: RepositoryMetrics,
        save: bool,
    ) -> EvaluationResult:
        scores = self.scorer.calculate_scores(metrics)
        band = self.scorer.band(scores.overall_score)
        logger.info(
            f"Scored {repo_ref.full_name}: overall {scores.overall_score:.1f} ({band.value})"
        )

        history = await asyncio.to_thread(self.store.get, user_id)
        comparison = compare_with_history(scores, history)

        record = EvaluationRecord.from_evaluation(
            repo_ref, metrics, scores, evaluated_at=datetime.now(timezone.utc)
        )

        saved = False
        if save:
            try:
                await asyncio.to_thread(self.store.upsert, user_id, record)
                saved = True
            except HistoryStoreError as e:
                logger.warning(f"Couldn't save evaluation of {repo_ref.full_name}: {e}")

        return EvaluationResult(
            repo=repo_ref,
            metrics=metrics,
            scores=scores,
            band=band,
            record=record,
            comparison=comparison,
            saved=saved,
        )
