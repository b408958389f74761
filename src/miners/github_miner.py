"""
GitHub Contribution Mining Module.

Resolves each repository through the GitHub REST API (PyGithub) and then runs
the GraphQL metric collectors in a fixed order. Repositories are mined one at
a time; the collectors of a repository run one after another.
"""

from github import (
    Github,
    GithubException,
    RateLimitExceededException,
    UnknownObjectException,
)
from github.Repository import Repository

from config import logger
from analyzers.aggregator import AttributionAggregator
from analyzers.models import RepoStat
from miners.base import RepositoryMiner, RepositoryNotFoundError
from miners.collectors import MetricCollectors
from miners.models import RepositoryInfo, RepositoryRef

DEFAULT_BRANCH = "main"
# Forbidden (no access, SAML enforcement) and unavailable for legal reasons
INACCESSIBLE_STATUSES = (403, 451)


class GitHubMiner(RepositoryMiner):
    """
    GitHubMiner collects the monthly contribution metrics of GitHub repositories.

    Attributes:
        github (Github): PyGithub client used for repository resolution
        collectors (MetricCollectors): GraphQL metric collectors
    """

    def __init__(self, github: Github, collectors: MetricCollectors):
        """Initialize the miner.

        Args:
            github (Github): Authenticated PyGithub client.
            collectors (MetricCollectors): Collectors sharing the run's paginator
                and window.
        """
        self.github = github
        self.collectors = collectors

    def resolve_repository(self, repository: RepositoryRef) -> RepositoryInfo:
        """
        Look up the repository URL and default branch.

        Args:
            repository (RepositoryRef): Repository to resolve

        Returns:
            RepositoryInfo: Resolved repository details

        Raises:
            RepositoryNotFoundError: If GitHub reports the repository as unknown
                or the token cannot access it
        """
        try:
            repo: Repository = self.github.get_repo(repository.full_name)
        except UnknownObjectException as e:
            raise RepositoryNotFoundError(repository.full_name) from e
        except RateLimitExceededException:
            raise
        except GithubException as e:
            if e.status not in INACCESSIBLE_STATUSES:
                raise
            logger.warning(
                {
                    "message": "Repository is not accessible",
                    "repository": repository.full_name,
                    "status": e.status,
                }
            )
            raise RepositoryNotFoundError(repository.full_name) from e

        return RepositoryInfo(
            full_name=repository.full_name,
            url=repo.html_url,
            default_branch=repo.default_branch or DEFAULT_BRANCH,
        )

    async def mine_repository(
        self, repository: RepositoryRef, aggregator: AttributionAggregator
    ) -> RepoStat:
        """
        Run every collector for a repository and record its summary.

        Args:
            repository (RepositoryRef): Repository to mine
            aggregator (AttributionAggregator): Counters credited by the collectors

        Returns:
            RepoStat: Repository summary, also recorded on the aggregator

        Raises:
            RepositoryNotFoundError: If the repository cannot be resolved
        """
        logger.info(
            {
                "message": "Starting repository mining",
                "repository": repository.full_name,
            }
        )
        info = self.resolve_repository(repository)
        logger.info(
            {
                "message": "Resolved repository",
                "repository": info.full_name,
                "default_branch": info.default_branch,
            }
        )

        await self.collectors.collect_merged_pull_requests(repository, aggregator)
        await self.collectors.collect_open_pull_requests(repository, aggregator)
        await self.collectors.collect_closed_issues(repository, aggregator)
        await self.collectors.collect_new_issues(repository, aggregator)
        await self.collectors.collect_commits(
            repository, info.default_branch, aggregator
        )
        await self.collectors.collect_pull_request_comments(repository, aggregator)
        await self.collectors.collect_issue_comments(repository, aggregator)

        counters = aggregator.counters_for(info.full_name)
        repo_stat = RepoStat(
            name=info.full_name,
            url=info.url,
            merged_prs=counters.merged_prs,
            open_prs=counters.open_prs,
            closed_issues=counters.closed_issues,
            new_issues=counters.new_issues,
        )
        aggregator.record_repository(repo_stat)

        logger.info(
            {
                "message": "Repository mining completed",
                "repository": repo_stat.name,
                "merged_prs": repo_stat.merged_prs,
                "open_prs": repo_stat.open_prs,
                "closed_issues": repo_stat.closed_issues,
                "new_issues": repo_stat.new_issues,
            }
        )
        return repo_stat
