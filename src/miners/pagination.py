"""
Cursor Pagination Module.

Drains every page of a GraphQL connection. Upstream ordering (most recently
updated or created) never matches the field collectors filter on (merge time,
close time, ...), so pagination cannot stop once items leave the collection
window: every page is fetched and filtering happens on the full list.
"""

from typing import Any, Dict, List, Optional, Protocol

from config import logger
from miners.queries import ConnectionQuery


class QueryExecutor(Protocol):
    async def execute(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]: ...


def extract_edges(data: Any, path: str) -> List[Dict[str, Any]]:
    """
    Navigate a dot separated path to a connection and return its edges.

    A missing or empty segment anywhere on the path yields an empty list.

    Args:
        data (Any): Response ``data`` payload
        path (str): Dot separated path, e.g. ``repository.pullRequests``

    Returns:
        List[Dict[str, Any]]: Edges of the connection
    """
    current = data
    for part in path.split(".") if path else []:
        if isinstance(current, dict) and current.get(part):
            current = current[part]
        else:
            return []

    if not isinstance(current, dict):
        return []
    return current.get("edges") or []


class CursorPaginator:
    """
    Fetch all pages of a connection through a query executor.

    Attributes:
        executor (QueryExecutor): Object executing single GraphQL requests
    """

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    async def paginate(
        self,
        query: ConnectionQuery,
        variables: Dict[str, Any],
        page_size: int = 50,
        path: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Collect the nodes of every page of a connection.

        Args:
            query (ConnectionQuery): Query declaring the paginated connection
            variables (Dict[str, Any]): Query variables, without ``first``/``after``
            page_size (int): Nodes requested per page
            path (Optional[str]): Path to the connection, defaults to
                ``query.edges_path``

        Returns:
            List[Dict[str, Any]]: All nodes, in upstream order

        Raises:
            GraphQLClientError: Propagated from the executor
        """
        document = query.render()
        path = path if path is not None else query.edges_path

        nodes: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        pages = 0

        while True:
            data = await self.executor.execute(
                document, {**variables, "first": page_size, "after": cursor}
            )
            edges = extract_edges(data, path)
            pages += 1
            nodes.extend(
                edge.get("node") for edge in edges if edge.get("node") is not None
            )

            if not edges or not edges[-1].get("cursor"):
                break
            cursor = edges[-1]["cursor"]

        logger.debug(
            {
                "message": "Pagination finished",
                "path": path,
                "pages": pages,
                "nodes": len(nodes),
            }
        )
        return nodes
