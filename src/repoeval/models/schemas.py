"""Pydantic models for repository evaluation data."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

# Overall score weights (must sum to 1.0)
COMMUNITY_WEIGHT = 0.4
DOC_QUALITY_WEIGHT = 0.3
ACTIVITY_WEIGHT = 0.3


class Band(str, Enum):
    """Qualitative band derived from the overall score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    HAS_CHALLENGES = "has_challenges"
    LOW = "low"

    @property
    def summary(self) -> str:
        """Human-readable summary sentence for the band."""
        return _BAND_SUMMARIES[self]


_BAND_SUMMARIES = {
    Band.EXCELLENT: "This is an excellent repository with strong community support and documentation.",
    Band.GOOD: "This is a good repository with decent community support.",
    Band.HAS_CHALLENGES: (
        "This repository has some challenges but may still be useful depending on your needs."
    ),
    Band.LOW: (
        "This repository shows signs of low activity or limited documentation. "
        "Consider alternative options."
    ),
}


class RepoRef(BaseModel):
    """Reference to a GitHub repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        """Get the owner/repo form."""
        return f"{self.owner}/{self.repo}"

    @property
    def url(self) -> str:
        """Get the full repository URL."""
        return f"https://github.com/{self.owner}/{self.repo}"


# --- Input Models ---


class RepositoryMetrics(BaseModel):
    """Repository metadata used for scoring.

    Negative counts are clamped to zero so that the scorer always receives
    in-domain values. Non-finite numbers are rejected.
    """

    model_config = ConfigDict(frozen=True)

    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    contributors: int = 0
    commit_frequency: float = Field(default=0.0, allow_inf_nan=False)  # commits per day
    has_readme: bool = False
    has_contributing_guide: bool = False
    has_issue_templates: bool = False
    last_updated: datetime | None = None

    @field_validator("stars", "forks", "open_issues", "contributors", "commit_frequency")
    @classmethod
    def _clamp_negative(cls, value: int | float) -> int | float:
        if value < 0:
            return type(value)(0)
        return value


# --- Scoring Models ---


class ScoreSet(BaseModel):
    """Sub-scores and the derived overall score for one evaluation."""

    model_config = ConfigDict(frozen=True)

    community_score: float = Field(ge=0, le=100, allow_inf_nan=False)
    doc_quality_score: float = Field(ge=0, le=100, allow_inf_nan=False)
    activity_score: float = Field(ge=0, le=100, allow_inf_nan=False)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_score(self) -> float:
        """Weighted combination of the three sub-scores."""
        return (
            COMMUNITY_WEIGHT * self.community_score
            + DOC_QUALITY_WEIGHT * self.doc_quality_score
            + ACTIVITY_WEIGHT * self.activity_score
        )


class EvaluationRecord(BaseModel):
    """A single history entry, keyed by (owner, repo_name)."""

    owner: str
    repo_name: str
    evaluated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    contributors: int = 0
    commit_frequency: float = 0.0
    scores: ScoreSet

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the evaluated repository within a user's history."""
        return (self.owner, self.repo_name)

    @classmethod
    def from_evaluation(
        cls,
        ref: RepoRef,
        metrics: RepositoryMetrics,
        scores: ScoreSet,
        evaluated_at: datetime | None = None,
    ) -> "EvaluationRecord":
        """Build a history record from a completed evaluation."""
        return cls(
            owner=ref.owner,
            repo_name=ref.repo,
            evaluated_at=evaluated_at or datetime.now(timezone.utc),
            stars=metrics.stars,
            forks=metrics.forks,
            open_issues=metrics.open_issues,
            contributors=metrics.contributors,
            commit_frequency=metrics.commit_frequency,
            scores=scores,
        )


# --- Comparison Models ---


class ComparisonLine(BaseModel):
    """Comparison of one score dimension against the historical mean."""

    dimension: str  # community, documentation, activity, overall
    label: str
    direction: str  # higher, lower
    average: float


class Comparison(BaseModel):
    """Per-dimension comparison against a user's previous evaluations."""

    history_size: int
    lines: list[ComparisonLine] = Field(default_factory=list)

    def line_for(self, dimension: str) -> ComparisonLine:
        """Get the comparison line for a dimension."""
        for line in self.lines:
            if line.dimension == dimension:
                return line
        raise KeyError(dimension)


# --- Search Models ---


class RepoSearchResult(BaseModel):
    """A repository returned by a GitHub search."""

    owner: str
    name: str
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    url: str = ""
    description: str | None = None
