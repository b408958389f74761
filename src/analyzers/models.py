"""
Contribution Statistics Data Models.

Defines the counter tables produced by a collection run and handed to the
report renderers. Uses Pydantic for validation and serialization.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

CONTRIBUTOR_FIELDS = (
    "merged_prs",
    "reviews",
    "commits",
    "issues_closed",
    "pr_comments",
    "issue_comments",
    "additions",
    "deletions",
)

ACTIVITY_FIELDS = (
    "merged_prs",
    "reviews",
    "commits",
    "issues_closed",
    "pr_comments",
    "issue_comments",
)

REPOSITORY_FIELDS = ("merged_prs", "open_prs", "closed_issues", "new_issues")


class ContributorStat(BaseModel):
    """Activity counters of one contributor, globally or within one repository."""

    login: str
    merged_prs: int = Field(default=0, ge=0)
    reviews: int = Field(default=0, ge=0)
    commits: int = Field(default=0, ge=0)
    issues_closed: int = Field(default=0, ge=0)
    pr_comments: int = Field(default=0, ge=0)
    issue_comments: int = Field(default=0, ge=0)
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)

    @property
    def activity_total(self) -> int:
        """Sum of the activity counters, line counts excluded."""
        return sum(getattr(self, name) for name in ACTIVITY_FIELDS)

    @property
    def comments(self) -> int:
        return self.pr_comments + self.issue_comments


class RepositoryCounters(BaseModel):
    """Repository level counters, incremented once per qualifying node."""

    merged_prs: int = 0
    open_prs: int = 0
    closed_issues: int = 0
    new_issues: int = 0


class RepoStat(BaseModel):
    """Summary of one processed repository, immutable once built."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    merged_prs: int = 0
    open_prs: int = 0
    closed_issues: int = 0
    new_issues: int = 0


class CollectionResult(BaseModel):
    """
    Final aggregate of a run, consumed read-only by the renderers.

    Attributes:
        month (str): Reporting month, ``YYYY-MM``
        from_iso (str): Window start, inclusive
        to_iso (str): Window end, exclusive
        contributors (Dict[str, ContributorStat]): Global table, login -> stat
        repository_contributors (Dict[str, Dict[str, ContributorStat]]):
            Repository -> login -> stat
        repositories (List[RepoStat]): Repository summaries in processing order
    """

    month: str
    from_iso: str
    to_iso: str
    contributors: Dict[str, ContributorStat]
    repository_contributors: Dict[str, Dict[str, ContributorStat]]
    repositories: List[RepoStat]
