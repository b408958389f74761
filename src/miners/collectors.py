"""
Metric Collectors Module.

Each collector drains one paginated GraphQL query for a repository, keeps the
nodes whose relevant timestamp falls inside the collection window and credits
the aggregator. Automation accounts are filtered out before every credit.

Credit rules:
- merged PRs: the author gets the PR, its additions and deletions; reviewers
  get in-window reviews; the PR author also gets one closed issue per closing
  issue reference whose own author is a human account
- closed issues: the issue author, falling back to the first assignee
- commits: the GitHub account linked to the commit, if any
- PR and issue comments: the comment author
- open PRs and new issues only feed repository level counters
"""

from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter

from config import logger
from analyzers.aggregator import AttributionAggregator
from analyzers.bot_filter import is_excluded
from miners.models import (
    ClosedIssue,
    Comment,
    Commit,
    IssueDiscussion,
    MergedPullRequest,
    NewIssue,
    OpenPullRequest,
    PullRequestDiscussion,
    RepositoryRef,
    TimeWindow,
    login_of,
)
from miners.pagination import CursorPaginator
from miners import queries


class MetricCollectors:
    """
    Collectors for every tracked metric of a repository.

    Attributes:
        paginator (CursorPaginator): Pagination capability used by every collector
        window (TimeWindow): Collection window
        page_size (int): Nodes requested per page
    """

    def __init__(
        self, paginator: CursorPaginator, window: TimeWindow, page_size: int = 50
    ):
        self.paginator = paginator
        self.window = window
        self.page_size = page_size

    async def _fetch(
        self,
        query: queries.ConnectionQuery,
        model: Any,
        variables: Dict[str, Any],
    ) -> List[Any]:
        nodes = await self.paginator.paginate(query, variables, self.page_size)
        return TypeAdapter(List[model]).validate_python(nodes)

    def _credit(
        self,
        aggregator: AttributionAggregator,
        login: Optional[str],
        field: str,
        repository: str,
        amount: int = 1,
    ) -> bool:
        if is_excluded(login):
            return False
        aggregator.credit(login, field, amount, repository)
        return True

    def _credit_comments(
        self,
        aggregator: AttributionAggregator,
        comments: List[Comment],
        field: str,
        repository: str,
    ) -> int:
        credited = 0
        for comment in comments:
            if self.window.contains(comment.created_at) and self._credit(
                aggregator, login_of(comment.author), field, repository
            ):
                credited += 1
        return credited

    @staticmethod
    def _variables(repository: RepositoryRef) -> Dict[str, Any]:
        return {"owner": repository.owner, "name": repository.name}

    def _log(
        self, repository: RepositoryRef, metric: str, fetched: int, counted: int
    ) -> None:
        logger.info(
            {
                "message": f"Collected {metric}",
                "repository": repository.full_name,
                "fetched": fetched,
                "in_window": counted,
            }
        )

    async def collect_merged_pull_requests(
        self, repository: RepositoryRef, aggregator: AttributionAggregator
    ) -> int:
        """
        Credit pull requests merged inside the window.

        Args:
            repository (RepositoryRef): Repository to collect
            aggregator (AttributionAggregator): Run counters

        Returns:
            int: Number of pull requests merged inside the window
        """
        repo = repository.full_name
        prs = await self._fetch(
            queries.MERGED_PULL_REQUESTS, MergedPullRequest, self._variables(repository)
        )

        merged = 0
        for pr in prs:
            if not self.window.contains(pr.merged_at):
                continue
            merged += 1
            aggregator.increment_repository(repo, "merged_prs")

            author = login_of(pr.author)
            if self._credit(aggregator, author, "merged_prs", repo):
                aggregator.credit(author, "additions", pr.additions or 0, repo)
                aggregator.credit(author, "deletions", pr.deletions or 0, repo)

            for review in pr.reviews:
                if self.window.contains(review.submitted_at):
                    self._credit(aggregator, login_of(review.author), "reviews", repo)

            # Auto-closed issues go to the PR author, gated on the issue's author
            for issue in pr.closing_issues_references:
                if not is_excluded(login_of(issue.author)):
                    self._credit(aggregator, author, "issues_closed", repo)

        self._log(repository, "merged pull requests", len(prs), merged)
        return merged

    async def collect_open_pull_requests(
        self, repository: RepositoryRef, aggregator: AttributionAggregator
    ) -> int:
        """Count pull requests opened inside the window that are still open."""
        prs = await self._fetch(
            queries.OPEN_PULL_REQUESTS, OpenPullRequest, self._variables(repository)
        )

        opened = 0
        for pr in prs:
            if self.window.contains(pr.created_at) and pr.state == "OPEN":
                opened += 1
                aggregator.increment_repository(repository.full_name, "open_prs")

        self._log(repository, "open pull requests", len(prs), opened)
        return opened

    async def collect_closed_issues(
        self, repository: RepositoryRef, aggregator: AttributionAggregator
    ) -> int:
        """
        Credit issues closed inside the window.

        The issue author is credited; when the author is missing or an
        automation account, the first assignee is credited instead.
        """
        repo = repository.full_name
        issues = await self._fetch(
            queries.CLOSED_ISSUES, ClosedIssue, self._variables(repository)
        )

        closed = 0
        for issue in issues:
            if not self.window.contains(issue.closed_at):
                continue
            closed += 1
            aggregator.increment_repository(repo, "closed_issues")

            author = login_of(issue.author)
            if not self._credit(aggregator, author, "issues_closed", repo):
                if issue.assignees:
                    self._credit(
                        aggregator, issue.assignees[0].login, "issues_closed", repo
                    )

        self._log(repository, "closed issues", len(issues), closed)
        return closed

    async def collect_new_issues(
        self, repository: RepositoryRef, aggregator: AttributionAggregator
    ) -> int:
        """Count issues created inside the window."""
        issues = await self._fetch(
            queries.NEW_ISSUES, NewIssue, self._variables(repository)
        )

        created = 0
        for issue in issues:
            if self.window.contains(issue.created_at):
                created += 1
                aggregator.increment_repository(repository.full_name, "new_issues")

        self._log(repository, "new issues", len(issues), created)
        return created

    async def collect_commits(
        self,
        repository: RepositoryRef,
        branch: str,
        aggregator: AttributionAggregator,
    ) -> int:
        """
        Credit commits on the default branch committed inside the window.

        Commits whose git author is not linked to a GitHub account are skipped.

        Args:
            repository (RepositoryRef): Repository to collect
            branch (str): Default branch name
            aggregator (AttributionAggregator): Run counters

        Returns:
            int: Number of commits inside the window
        """
        variables = {
            **self._variables(repository),
            "branch": branch,
            "since": self.window.from_iso,
            "until": self.window.to_iso,
        }
        commits = await self._fetch(queries.COMMITS, Commit, variables)

        counted = 0
        for commit in commits:
            if not self.window.contains(commit.committed_date):
                continue
            counted += 1
            self._credit(aggregator, commit.login, "commits", repository.full_name)

        self._log(repository, "commits", len(commits), counted)
        return counted

    async def collect_pull_request_comments(
        self, repository: RepositoryRef, aggregator: AttributionAggregator
    ) -> int:
        """Credit PR discussion comments and review thread comments."""
        repo = repository.full_name
        prs = await self._fetch(
            queries.PULL_REQUEST_COMMENTS,
            PullRequestDiscussion,
            self._variables(repository),
        )

        credited = 0
        for pr in prs:
            credited += self._credit_comments(
                aggregator, pr.comments, "pr_comments", repo
            )
            for thread in pr.review_threads:
                credited += self._credit_comments(
                    aggregator, thread.comments, "pr_comments", repo
                )

        self._log(repository, "pull request comments", len(prs), credited)
        return credited

    async def collect_issue_comments(
        self, repository: RepositoryRef, aggregator: AttributionAggregator
    ) -> int:
        """Credit issue comments."""
        issues = await self._fetch(
            queries.ISSUE_COMMENTS, IssueDiscussion, self._variables(repository)
        )

        credited = 0
        for issue in issues:
            credited += self._credit_comments(
                aggregator, issue.comments, "issue_comments", repository.full_name
            )

        self._log(repository, "issue comments", len(issues), credited)
        return credited
