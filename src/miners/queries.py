"""
GraphQL Query Definitions.

Queries are described structurally rather than as hand-edited strings: a
``ConnectionQuery`` knows the path from the query root to the paginated
connection and always declares the ``$first``/``$after`` pagination variables,
so no caller ever has to patch a continuation parameter into query text.

Every collector query selects exactly the node fields its collector consumes.
Nested lists (reviews, closing issue references, comments, review threads,
assignees) are requested with small fixed page sizes since their per-item
volume is bounded in practice.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class Selection:
    """
    One field on the path from the query root to a connection.

    Attributes:
        field (str): Field name
        arguments (str): Argument list without parentheses, may reference variables
        type_condition (Optional[str]): Wrap the children in ``... on <type>``
    """

    field: str
    arguments: str = ""
    type_condition: Optional[str] = None

    def wrap(self, body: str) -> str:
        if self.type_condition:
            body = f"... on {self.type_condition} {{ {body} }}"
        head = f"{self.field}({self.arguments})" if self.arguments else self.field
        return f"{head} {{ {body} }}"


@dataclass(frozen=True)
class ConnectionQuery:
    """
    A query returning one cursor-paginated connection.

    Attributes:
        variables (Dict[str, str]): Caller variable declarations, name -> GraphQL type
        path (Tuple[Selection, ...]): Fields leading to the connection
        connection (str): Name of the paginated connection field
        node_fields (str): Selection set requested for each node
        connection_arguments (str): Extra connection arguments (filters, ordering)
    """

    variables: Dict[str, str]
    path: Tuple[Selection, ...]
    connection: str
    node_fields: str
    connection_arguments: str = ""
    pagination_variables: Dict[str, str] = field(
        default_factory=lambda: {"first": "Int!", "after": "String"}
    )

    @property
    def declared_variables(self) -> Dict[str, str]:
        return {**self.variables, **self.pagination_variables}

    @property
    def edges_path(self) -> str:
        """Dot separated path from the response data to the connection."""
        fields = [selection.field for selection in self.path]
        return ".".join(fields + [self.connection])

    def render(self) -> str:
        """Render the GraphQL document."""
        declarations = ", ".join(
            f"${name}: {type_}" for name, type_ in self.declared_variables.items()
        )
        arguments = "first: $first, after: $after"
        if self.connection_arguments:
            arguments = f"{arguments}, {self.connection_arguments}"

        body = (
            f"{self.connection}({arguments}) "
            f"{{ edges {{ cursor node {{ {self.node_fields} }} }} }}"
        )
        for selection in reversed(self.path):
            body = selection.wrap(body)

        return f"query({declarations}) {{ {body} }}"


REPOSITORY_VARIABLES = {"owner": "String!", "name": "String!"}
REPOSITORY = Selection("repository", "owner: $owner, name: $name")

MERGED_PULL_REQUESTS = ConnectionQuery(
    variables=REPOSITORY_VARIABLES,
    path=(REPOSITORY,),
    connection="pullRequests",
    connection_arguments=(
        "states: [MERGED], "
        "orderBy: {field: UPDATED_AT, direction: DESC}"
    ),
    node_fields="""
        number
        title
        author { login }
        mergedAt
        additions
        deletions
        reviews(first: 100) {
            edges { node { author { login } state submittedAt } }
        }
        closingIssuesReferences(first: 100) {
            edges { node { number author { login } } }
        }
    """,
)

OPEN_PULL_REQUESTS = ConnectionQuery(
    variables=REPOSITORY_VARIABLES,
    path=(REPOSITORY,),
    connection="pullRequests",
    connection_arguments=(
        "states: [OPEN], "
        "orderBy: {field: CREATED_AT, direction: DESC}"
    ),
    node_fields="""
        number
        title
        author { login }
        createdAt
        state
    """,
)

CLOSED_ISSUES = ConnectionQuery(
    variables=REPOSITORY_VARIABLES,
    path=(REPOSITORY,),
    connection="issues",
    connection_arguments=(
        "states: [CLOSED], "
        "orderBy: {field: UPDATED_AT, direction: DESC}"
    ),
    node_fields="""
        number
        title
        author { login }
        closedAt
        assignees(first: 10) {
            edges { node { login } }
        }
    """,
)

NEW_ISSUES = ConnectionQuery(
    variables=REPOSITORY_VARIABLES,
    path=(REPOSITORY,),
    connection="issues",
    connection_arguments=(
        "states: [OPEN, CLOSED], "
        "orderBy: {field: CREATED_AT, direction: DESC}"
    ),
    node_fields="""
        number
        title
        author { login }
        createdAt
    """,
)

COMMITS = ConnectionQuery(
    variables={
        **REPOSITORY_VARIABLES,
        "branch": "String!",
        "since": "GitTimestamp",
        "until": "GitTimestamp",
    },
    path=(
        REPOSITORY,
        Selection("ref", "qualifiedName: $branch"),
        Selection("target", type_condition="Commit"),
    ),
    connection="history",
    connection_arguments="since: $since, until: $until",
    node_fields="""
        author { user { login } }
        committedDate
    """,
)

PULL_REQUEST_COMMENTS = ConnectionQuery(
    variables=REPOSITORY_VARIABLES,
    path=(REPOSITORY,),
    connection="pullRequests",
    connection_arguments="orderBy: {field: UPDATED_AT, direction: DESC}",
    node_fields="""
        number
        comments(first: 10) {
            edges { node { author { login } createdAt } }
        }
        reviewThreads(first: 10) {
            edges {
                node {
                    comments(first: 10) {
                        edges { node { author { login } createdAt } }
                    }
                }
            }
        }
    """,
)

ISSUE_COMMENTS = ConnectionQuery(
    variables=REPOSITORY_VARIABLES,
    path=(REPOSITORY,),
    connection="issues",
    connection_arguments="orderBy: {field: UPDATED_AT, direction: DESC}",
    node_fields="""
        number
        comments(first: 10) {
            edges { node { author { login } createdAt } }
        }
    """,
)
