"""
Repository Mining Data Models.

Defines the data models shared by the GitHub collectors: repository identity,
the collection time window and the GraphQL node payloads returned by each query.
Uses Pydantic for validation so that timestamps arrive as timezone-aware
datetimes and nested ``{edges: [{node: ...}]}`` connections arrive as plain lists.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


class RepositoryRef(BaseModel):
    """Repository identity as configured, ``owner/name``."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, value: str) -> "RepositoryRef":
        """
        Build a reference from ``owner/name`` or a repository URL.

        Args:
            value (str): ``owner/name``, ``https://github.com/owner/name`` or
                the same URL ending in ``.git``

        Returns:
            RepositoryRef: Parsed repository reference

        Raises:
            ValueError: If owner and name cannot be extracted
        """
        cleaned = value.strip().rstrip("/")
        if cleaned.endswith(".git"):
            cleaned = cleaned[: -len(".git")]
        parts = [part for part in cleaned.split("/") if part]
        if len(parts) < 2:
            raise ValueError(f"Invalid repository reference: {value!r}")
        owner, name = parts[-2:]
        return cls(owner=owner, name=name)

    def __str__(self) -> str:
        return self.full_name


class RepositoryInfo(BaseModel):
    """Repository details resolved once per run."""

    full_name: str
    url: str
    default_branch: str


class TimeWindow(BaseModel):
    """
    Half-open UTC interval ``[start, end)`` covering one calendar month.

    Attributes:
        month (str): Month label, ``YYYY-MM``
        start (datetime): First instant of the month, inclusive
        end (datetime): First instant of the following month, exclusive
    """

    model_config = ConfigDict(frozen=True)

    month: str
    start: datetime
    end: datetime

    @classmethod
    def from_month(cls, month: str) -> "TimeWindow":
        """
        Derive the window for a ``YYYY-MM`` month.

        Args:
            month (str): Calendar month

        Returns:
            TimeWindow: Window from the first of the month to the first of the next
        """
        year, month_number = (int(part) for part in month.split("-"))
        start = datetime(year, month_number, 1, tzinfo=timezone.utc)
        if month_number == 12:
            end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
        else:
            end = datetime(year, month_number + 1, 1, tzinfo=timezone.utc)
        return cls(month=month, start=start, end=end)

    def contains(self, timestamp: Optional[datetime]) -> bool:
        """Return True when the timestamp falls inside ``[start, end)``."""
        if timestamp is None:
            return False
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return self.start <= timestamp < self.end

    @property
    def from_iso(self) -> str:
        return _iso(self.start)

    @property
    def to_iso(self) -> str:
        return _iso(self.end)


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def edge_nodes(value: Any) -> Any:
    """Flatten a GraphQL connection ``{edges: [{node: ...}]}`` into its nodes."""
    if value is None:
        return []
    if isinstance(value, dict):
        edges = value.get("edges") or []
        return [
            edge["node"] for edge in edges if edge and edge.get("node") is not None
        ]
    return value


class GraphQLNode(BaseModel):
    """Base for node payloads, mapping camelCase API fields to snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class Actor(GraphQLNode):
    login: Optional[str] = None


def login_of(actor: Optional[Actor]) -> Optional[str]:
    """Login of an actor, None for deleted or missing accounts."""
    return actor.login if actor is not None else None


class Review(GraphQLNode):
    author: Optional[Actor] = None
    state: Optional[str] = None
    submitted_at: Optional[datetime] = None


class IssueReference(GraphQLNode):
    number: Optional[int] = None
    author: Optional[Actor] = None


class MergedPullRequest(GraphQLNode):
    """Merged pull request with its reviews and the issues it closes."""

    number: int
    title: str = ""
    author: Optional[Actor] = None
    merged_at: Optional[datetime] = None
    additions: Optional[int] = 0
    deletions: Optional[int] = 0
    reviews: Annotated[List[Review], BeforeValidator(edge_nodes)] = []
    closing_issues_references: Annotated[
        List[IssueReference], BeforeValidator(edge_nodes)
    ] = []


class OpenPullRequest(GraphQLNode):
    number: int
    title: str = ""
    author: Optional[Actor] = None
    created_at: Optional[datetime] = None
    state: Optional[str] = None


class ClosedIssue(GraphQLNode):
    number: int
    title: str = ""
    author: Optional[Actor] = None
    closed_at: Optional[datetime] = None
    assignees: Annotated[List[Actor], BeforeValidator(edge_nodes)] = []


class NewIssue(GraphQLNode):
    number: int
    title: str = ""
    author: Optional[Actor] = None
    created_at: Optional[datetime] = None


class CommitAuthor(GraphQLNode):
    """Git author of a commit; ``user`` is set only when linked to an account."""

    user: Optional[Actor] = None


class Commit(GraphQLNode):
    author: Optional[CommitAuthor] = None
    committed_date: Optional[datetime] = None

    @property
    def login(self) -> Optional[str]:
        return login_of(self.author.user) if self.author is not None else None


class Comment(GraphQLNode):
    author: Optional[Actor] = None
    created_at: Optional[datetime] = None


class ReviewThread(GraphQLNode):
    comments: Annotated[List[Comment], BeforeValidator(edge_nodes)] = []


class PullRequestDiscussion(GraphQLNode):
    """Pull request discussion comments and inline review thread comments."""

    number: int
    comments: Annotated[List[Comment], BeforeValidator(edge_nodes)] = []
    review_threads: Annotated[List[ReviewThread], BeforeValidator(edge_nodes)] = []


class IssueDiscussion(GraphQLNode):
    number: int
    comments: Annotated[List[Comment], BeforeValidator(edge_nodes)] = []
