"""GitHub data fetcher for repository evaluation."""

import logging
import re
from datetime import datetime, timezone

import httpx

from repoeval.config import Settings
from repoeval.errors import RateLimitExceededError
from repoeval.models.schemas import RepoRef, RepoSearchResult, RepositoryMetrics

logger = logging.getLogger(__name__)

# Number of most recent commits used to estimate commit frequency
COMMIT_SAMPLE_SIZE = 100

SECONDS_PER_DAY = 86_400

README_NAMES = ("readme.md", "readme.rst", "readme.txt", "readme")
CONTRIBUTING_NAMES = ("contributing.md", "contributing.rst", "contributing.txt", "contributing")

# owner/repo, optionally as a GitHub URL or SSH remote
REPO_PATTERNS = [
    r"^(?:https?://)?(?:www\.)?github\.com/([\w.-]+)/([\w.-]+?)(?:\.git)?(?:[/#?].*)?$",
    r"^git@github\.com:([\w.-]+)/([\w.-]+?)(?:\.git)?$",
    r"^([\w-]+)/([\w.-]+?)(?:\.git)?$",
]


def parse_repo_ref(text: str) -> RepoRef | None:
    """Parse an owner/repo reference or a GitHub URL.

    Args:
        text: "owner/repo", "https://github.com/owner/repo" or
            "git@github.com:owner/repo.git".

    Returns:
        RepoRef if the text can be parsed, None otherwise.
    """
    if not text:
        return None

    text = text.strip()
    for pattern in REPO_PATTERNS:
        match = re.match(pattern, text)
        if match:
            return RepoRef(owner=match.group(1), repo=match.group(2))
    return None


def estimate_commit_frequency(commit_dates: list[datetime]) -> float:
    """Estimate commits per day from a sample of commit timestamps.

    The span between the oldest and newest commit is counted as at least
    one day.
    """
    if not commit_dates:
        return 0.0
    span_seconds = (max(commit_dates) - min(commit_dates)).total_seconds()
    span_days = max(1.0, span_seconds / SECONDS_PER_DAY)
    return len(commit_dates) / span_days


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GitHubFetcher:
    """Fetches repository metrics from the GitHub API.

    A token is optional but raises the rate limit from 60 to 5000
    requests per hour. Pass an httpx client to share connections (or to
    inject a mock transport in tests).
    """

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            settings: Runtime settings (token, timeout, page caps).
            client: Optional httpx client. If not provided, one is created per request.
        """
        self.settings = settings or Settings()
        self._token = self.settings.github_token
        self._client = client

        # Rate limit tracking
        self.rate_limit_remaining: int | None = None
        self.rate_limit_total: int | None = None
        self.rate_limit_reset: datetime | None = None

    def _headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=self.settings.request_timeout, headers=self._headers())

    def _update_rate_limits(self, response: httpx.Response) -> None:
        """Extract and store rate limit info from response headers."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        limit = response.headers.get("X-RateLimit-Limit")
        reset = response.headers.get("X-RateLimit-Reset")

        if remaining is not None:
            self.rate_limit_remaining = int(remaining)
        if limit is not None:
            self.rate_limit_total = int(limit)
        if reset is not None:
            self.rate_limit_reset = datetime.fromtimestamp(int(reset), tz=timezone.utc)

    def _check_rate_limit(self, response: httpx.Response) -> None:
        """Raise if the response reports an exhausted rate limit."""
        if response.status_code in (403, 429) and self.rate_limit_remaining == 0:
            logger.warning(f"GitHub rate limit exhausted, resets at {self.rate_limit_reset}")
            raise RateLimitExceededError(self.rate_limit_reset, remaining=0)

    async def _fetch(self, path: str, params: dict | None = None) -> dict | list | None:
        """Fetch from GitHub API.

        Returns None if 404, or 204/409 for an empty repository. Raises on
        other errors.
        """
        client = await self._get_client()
        url = f"{self.BASE_URL}{path}"

        try:
            logger.debug(f"GET {path} {params or ''}")
            response = await client.get(url, params=params, headers=self._headers())
            self._update_rate_limits(response)
            if response.status_code in (204, 404, 409):
                return None
            self._check_rate_limit(response)
            response.raise_for_status()
            return response.json()
        finally:
            if self._client is None:
                await client.aclose()

    async def _fetch_all_pages(
        self,
        path: str,
        params: dict | None = None,
        max_pages: int = 10,
    ) -> list:
        """Fetch all pages from a paginated endpoint."""
        client = await self._get_client()
        url = f"{self.BASE_URL}{path}"
        params = dict(params or {})
        params.setdefault("per_page", 100)

        results = []
        page = 1

        try:
            while page <= max_pages:
                params["page"] = page
                response = await client.get(url, params=params, headers=self._headers())
                self._update_rate_limits(response)
                if response.status_code in (204, 404, 409):
                    break
                self._check_rate_limit(response)
                response.raise_for_status()

                data = response.json()
                if not data:
                    break

                results.extend(data)

                # Check if there are more pages
                if len(data) < params["per_page"]:
                    break
                page += 1

            return results
        finally:
            if self._client is None:
                await client.aclose()

    async def fetch_metrics(self, repo_ref: RepoRef) -> RepositoryMetrics | None:
        """Fetch the metrics needed to score a repository.

        Args:
            repo_ref: Reference to the repository.

        Returns:
            RepositoryMetrics, or None if the repository was not found.
        """
        owner = repo_ref.owner
        repo = repo_ref.repo

        data = await self._fetch(f"/repos/{owner}/{repo}")
        if data is None:
            logger.info(f"Repository {owner}/{repo} not found")
            return None

        contributors = await self._fetch_contributor_count(owner, repo)
        commit_frequency = await self._fetch_commit_frequency(owner, repo)
        has_readme, has_contributing, has_issue_templates = await self._fetch_community_files(
            owner, repo
        )

        last_updated = _parse_timestamp(data.get("pushed_at")) or _parse_timestamp(
            data.get("updated_at")
        )

        metrics = RepositoryMetrics(
            stars=data.get("stargazers_count", 0),
            forks=data.get("forks_count", 0),
            open_issues=data.get("open_issues_count", 0),
            contributors=contributors,
            commit_frequency=commit_frequency,
            has_readme=has_readme,
            has_contributing_guide=has_contributing,
            has_issue_templates=has_issue_templates,
            last_updated=last_updated,
        )
        logger.debug(f"Fetched metrics for {owner}/{repo}: {metrics.model_dump()}")
        return metrics

    async def _fetch_contributor_count(self, owner: str, repo: str) -> int:
        """Count contributors, up to the configured page cap."""
        contributors = await self._fetch_all_pages(
            f"/repos/{owner}/{repo}/contributors",
            max_pages=self.settings.max_contributor_pages,
        )
        return len(contributors)

    async def _fetch_commit_frequency(self, owner: str, repo: str) -> float:
        """Estimate commits per day from the most recent commit sample."""
        commits = await self._fetch(
            f"/repos/{owner}/{repo}/commits",
            params={"per_page": COMMIT_SAMPLE_SIZE},
        )
        if not commits or not isinstance(commits, list):
            return 0.0

        dates = []
        for commit in commits:
            date = _parse_timestamp(commit.get("commit", {}).get("committer", {}).get("date"))
            if date is None:
                date = _parse_timestamp(commit.get("commit", {}).get("author", {}).get("date"))
            if date is not None:
                dates.append(date)

        return estimate_commit_frequency(dates)

    async def _fetch_community_files(self, owner: str, repo: str) -> tuple[bool, bool, bool]:
        """Check for README, contributing guide and issue templates.

        Uses the community profile endpoint and falls back to listing the
        repository contents when the profile is unavailable.

        Returns:
            Tuple of (has_readme, has_contributing, has_issue_templates)
        """
        profile = await self._fetch(f"/repos/{owner}/{repo}/community/profile")
        if isinstance(profile, dict) and isinstance(profile.get("files"), dict):
            files = profile["files"]
            return (
                bool(files.get("readme")),
                bool(files.get("contributing")),
                bool(files.get("issue_template")),
            )

        return await self._fetch_community_files_from_contents(owner, repo)

    async def _fetch_community_files_from_contents(
        self, owner: str, repo: str
    ) -> tuple[bool, bool, bool]:
        """Check for community files by listing the root and .github directories."""
        root = await self._fetch(f"/repos/{owner}/{repo}/contents")
        root_files = set()
        if isinstance(root, list):
            root_files = {item.get("name", "").lower() for item in root}

        github_dir = await self._fetch(f"/repos/{owner}/{repo}/contents/.github")
        github_files: dict[str, dict] = {}
        if isinstance(github_dir, list):
            github_files = {item.get("name", "").lower(): item for item in github_dir}

        has_readme = any(name in root_files for name in README_NAMES)
        has_contributing = any(
            name in root_files or name in github_files for name in CONTRIBUTING_NAMES
        )

        # Issue templates may be a single file or a directory
        template_dir = github_files.get("issue_template")
        has_issue_templates = "issue_template.md" in github_files or (
            template_dir is not None and template_dir.get("type") == "dir"
        )

        return has_readme, has_contributing, has_issue_templates

    async def search_repositories(self, query: str, limit: int = 5) -> list[RepoSearchResult]:
        """Search GitHub repositories, most starred first.

        Args:
            query: GitHub search query.
            limit: Maximum number of results.

        Returns:
            List of search results sorted by stars, descending.
        """
        data = await self._fetch(
            "/search/repositories",
            params={"q": query, "sort": "stars", "order": "desc", "per_page": limit},
        )
        if not isinstance(data, dict):
            return []

        results = []
        for item in data.get("items", [])[:limit]:
            owner = (item.get("owner") or {}).get("login", "")
            results.append(
                RepoSearchResult(
                    owner=owner,
                    name=item.get("name", ""),
                    stars=item.get("stargazers_count", 0),
                    forks=item.get("forks_count", 0),
                    open_issues=item.get("open_issues_count", 0),
                    url=item.get("html_url") or f"https://github.com/{owner}/{item.get('name', '')}",
                    description=item.get("description"),
                )
            )

        return sorted(results, key=lambda r: r.stars, reverse=True)
