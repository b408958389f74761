"""
Attribution Aggregator Module.

Owns the counter tables of one collection run. Collectors receive the
aggregator by reference and credit contributors through it; every credit
updates the global table and the repository table together, so the global
value of a counter always equals the sum of its per-repository values.
"""

from typing import Dict, List, Optional

from analyzers.models import (
    CONTRIBUTOR_FIELDS,
    REPOSITORY_FIELDS,
    CollectionResult,
    ContributorStat,
    RepoStat,
    RepositoryCounters,
)
from miners.models import TimeWindow


class AttributionAggregator:
    """
    Counter tables for a single run.

    Attributes:
        contributors (Dict[str, ContributorStat]): Global table, login -> stat
        repository_contributors (Dict[str, Dict[str, ContributorStat]]):
            Repository -> login -> stat
        repository_counters (Dict[str, RepositoryCounters]): Repository level counts
        repositories (List[RepoStat]): Summaries of fully processed repositories
    """

    def __init__(self):
        self.contributors: Dict[str, ContributorStat] = {}
        self.repository_contributors: Dict[str, Dict[str, ContributorStat]] = {}
        self.repository_counters: Dict[str, RepositoryCounters] = {}
        self.repositories: List[RepoStat] = []

    def credit(
        self,
        login: str,
        field: str,
        amount: int = 1,
        repository: Optional[str] = None,
    ) -> None:
        """
        Add ``amount`` to a contributor counter.

        The contributor is created with zeroed counters on first reference, in
        the global table and, when ``repository`` is given, in that
        repository's table. Callers are responsible for filtering out
        automation accounts before crediting.

        Args:
            login (str): Contributor login
            field (str): One of CONTRIBUTOR_FIELDS
            amount (int): Non-negative increment
            repository (Optional[str]): Repository full name, or None for global only

        Raises:
            ValueError: For an unknown field or a negative amount
        """
        if field not in CONTRIBUTOR_FIELDS:
            raise ValueError(f"Unknown contributor field: {field}")
        if amount < 0:
            raise ValueError(f"Contributor counters only increase, got {amount}")

        stats = [self.contributors.setdefault(login, ContributorStat(login=login))]
        if repository is not None:
            table = self.repository_contributors.setdefault(repository, {})
            stats.append(table.setdefault(login, ContributorStat(login=login)))

        for stat in stats:
            setattr(stat, field, getattr(stat, field) + amount)

    def increment_repository(self, repository: str, field: str) -> None:
        """Count one qualifying node for a repository level counter."""
        if field not in REPOSITORY_FIELDS:
            raise ValueError(f"Unknown repository field: {field}")
        counters = self.repository_counters.setdefault(repository, RepositoryCounters())
        setattr(counters, field, getattr(counters, field) + 1)

    def counters_for(self, repository: str) -> RepositoryCounters:
        return self.repository_counters.get(repository, RepositoryCounters())

    def record_repository(self, repo_stat: RepoStat) -> None:
        self.repositories.append(repo_stat)

    def result(self, window: TimeWindow) -> CollectionResult:
        """Package the tables as the final collection result."""
        return CollectionResult(
            month=window.month,
            from_iso=window.from_iso,
            to_iso=window.to_iso,
            contributors=self.contributors,
            repository_contributors=self.repository_contributors,
            repositories=self.repositories,
        )
