"""Exceptions raised by repoeval."""

from datetime import datetime


class RepoEvalError(Exception):
    """Base class for repoeval errors."""


class InvalidRepositoryError(RepoEvalError):
    """Raised when a repository reference cannot be parsed."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Could not find an 'owner/repo' reference in '{text}'")


class RepositoryNotFoundError(RepoEvalError):
    """Raised when a repository cannot be found or is not accessible."""

    def __init__(self, owner: str, repo: str) -> None:
        self.owner = owner
        self.repo = repo
        super().__init__(
            f"Repository {owner}/{repo} not accessible (may be private, deleted, or renamed)"
        )


class RateLimitExceededError(RepoEvalError):
    """Raised when the GitHub API rate limit is exhausted."""

    def __init__(self, reset_time: datetime | None, remaining: int = 0) -> None:
        self.reset_time = reset_time
        self.remaining = remaining
        when = reset_time.isoformat() if reset_time else "an unknown time"
        super().__init__(f"GitHub rate limit exhausted, resets at {when}")


class HistoryStoreError(RepoEvalError):
    """Raised when evaluation history cannot be read or written."""
