"""
Multi-Repository Collection Module.

Runs the miner over every configured repository, strictly one repository at a
time, sharing a single aggregator so that global and per-repository tables
stay consistent. Unknown repositories are skipped; any other failure aborts
the run.
"""

from typing import List

from config import logger
from analyzers.aggregator import AttributionAggregator
from analyzers.models import CollectionResult
from miners.base import RepositoryMiner, RepositoryNotFoundError
from miners.models import RepositoryRef, TimeWindow


class MultiRepositoryAnalyzer:
    """
    Coordinates the collection of multiple GitHub repositories.

    Attributes:
        miner (RepositoryMiner): Instance for mining repository data.
        repositories (List[RepositoryRef]): Repositories to collect, in order.
        window (TimeWindow): Collection window.
    """

    def __init__(
        self,
        miner: RepositoryMiner,
        repositories: List[RepositoryRef],
        window: TimeWindow,
    ):
        """Initialize the multi-repository analyzer.

        Args:
            miner (RepositoryMiner): Instance for mining repository data.
            repositories (List[RepositoryRef]): Repositories to collect.
            window (TimeWindow): Collection window.
        """
        self.miner = miner
        self.repositories = repositories
        self.window = window

    async def analyze_repositories(self) -> CollectionResult:
        """
        Collect every configured repository.

        Returns:
            CollectionResult: Global and per-repository contributor tables plus
                repository summaries

        Raises:
            GraphQLClientError: If a query fails; the run is aborted

        Note:
            A repository that cannot be found is logged and skipped; it adds
            nothing to any table.
        """
        aggregator = AttributionAggregator()
        logger.info(
            {
                "message": "Collecting repositories",
                "month": self.window.month,
                "from": self.window.from_iso,
                "to": self.window.to_iso,
                "repositories": [repo.full_name for repo in self.repositories],
            }
        )

        for repository in self.repositories:
            try:
                await self.miner.mine_repository(repository, aggregator)
            except RepositoryNotFoundError as e:
                logger.error(
                    {
                        "message": "Skipping repository",
                        "repository": repository.full_name,
                        "error": str(e),
                    }
                )

        result = aggregator.result(self.window)
        logger.info(
            {
                "message": "Collection finished",
                "contributors": len(result.contributors),
                "repositories": len(result.repositories),
            }
        )
        return result
