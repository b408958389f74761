"""
Abstract Base Class for Repository Miners.

Defines the interface for repository contribution miners.
"""

from abc import ABC, abstractmethod

from analyzers.aggregator import AttributionAggregator
from analyzers.models import RepoStat
from miners.models import RepositoryRef


class RepositoryNotFoundError(Exception):
    """Raised when a repository does not exist or is not accessible."""

    def __init__(self, repository: str):
        self.repository = repository
        super().__init__(f"Repository {repository} not found or not accessible")


class RepositoryMiner(ABC):
    """
    Abstract base class for repository miners.

    Implementations should handle:
    - Resolving the repository with the hosting service
    - Running every metric collector for it
    - Crediting the run aggregator
    """

    @abstractmethod
    async def mine_repository(
        self, repository: RepositoryRef, aggregator: AttributionAggregator
    ) -> RepoStat:
        """
        Collect all contribution metrics of a repository.

        Args:
            repository (RepositoryRef): Repository to mine
            aggregator (AttributionAggregator): Counters credited by the collectors

        Returns:
            RepoStat: Repository summary

        Raises:
            RepositoryNotFoundError: If the repository cannot be resolved
        """
        pass
