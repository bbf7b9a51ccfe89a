"""Runtime configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_USER = "local"


@dataclass(frozen=True)
class Settings:
    """Explicit configuration passed to the fetcher, store and pipeline.

    Attributes:
        github_token: GitHub personal access token (optional, raises rate limits).
        data_dir: Root directory for persisted evaluation history.
        user_id: Identity whose history is read and written.
        request_timeout: HTTP timeout in seconds for GitHub requests.
        max_contributor_pages: Page cap when counting contributors (100 per page).
    """

    github_token: str | None = None
    data_dir: Path = Path("data")
    user_id: str = DEFAULT_USER
    request_timeout: float = 30.0
    max_contributor_pages: int = 5

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from environment variables.

        Reads GITHUB_TOKEN, REPOEVAL_DATA_DIR, REPOEVAL_USER and
        REPOEVAL_TIMEOUT. Keyword overrides that are not None win.
        """
        values = {
            "github_token": os.environ.get("GITHUB_TOKEN") or None,
            "data_dir": Path(os.environ.get("REPOEVAL_DATA_DIR", "data")),
            "user_id": os.environ.get("REPOEVAL_USER", DEFAULT_USER),
            "request_timeout": float(os.environ.get("REPOEVAL_TIMEOUT", "30")),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
