"""
Cursor Paginator Test Suite.

Uses an ``AsyncMock`` executor serving canned pages.
"""

from unittest.mock import AsyncMock

import pytest

from miners import queries
from miners.pagination import CursorPaginator, extract_edges


def page(*cursors):
    """A ``repository.pullRequests`` page with one node per cursor."""
    return {
        "repository": {
            "pullRequests": {
                "edges": [{"cursor": cursor, "node": {"number": i}} for i, cursor in cursors]
            }
        }
    }


def serve(nodes, page_size):
    """Executor serving ``nodes`` in pages of ``page_size`` like the real API."""

    async def execute(query, variables):
        start = int(variables["after"]) if variables["after"] else 0
        chunk = nodes[start : start + variables["first"]]
        return page(*[(n, str(start + i + 1)) for i, n in enumerate(chunk)])

    return AsyncMock(side_effect=execute)


@pytest.mark.asyncio
async def test_paginate_follows_cursors():
    """Test pages are fetched until the connection is exhausted."""
    executor = AsyncMock()
    executor.execute.side_effect = [
        page((1, "c1"), (2, "c2")),
        page((3, "c3")),
        page(),
    ]
    paginator = CursorPaginator(executor)

    nodes = await paginator.paginate(
        queries.MERGED_PULL_REQUESTS, {"owner": "test", "name": "repo"}, page_size=2
    )

    assert [n["number"] for n in nodes] == [1, 2, 3]
    calls = executor.execute.await_args_list
    assert len(calls) == 3
    assert calls[0].args[1] == {"owner": "test", "name": "repo", "first": 2, "after": None}
    assert calls[1].args[1]["after"] == "c2"
    assert calls[2].args[1]["after"] == "c3"


@pytest.mark.asyncio
async def test_paginate_renders_query_once():
    """Test every page is requested with the same document."""
    executor = AsyncMock()
    executor.execute.side_effect = [page((1, "c1")), page()]

    await CursorPaginator(executor).paginate(queries.OPEN_PULL_REQUESTS, {}, 10)

    documents = {call.args[0] for call in executor.execute.await_args_list}
    assert documents == {queries.OPEN_PULL_REQUESTS.render()}


@pytest.mark.asyncio
@pytest.mark.parametrize("page_size", [1, 3, 7, 50])
async def test_total_is_independent_of_page_size(page_size):
    nodes = list(range(17))
    executor = AsyncMock()
    executor.execute = serve(nodes, page_size)

    result = await CursorPaginator(executor).paginate(
        queries.MERGED_PULL_REQUESTS, {}, page_size
    )

    assert [n["number"] for n in result] == nodes


@pytest.mark.asyncio
async def test_paginate_stops_without_cursor():
    executor = AsyncMock()
    executor.execute.side_effect = [page((1, "c1"), (2, None))]

    nodes = await CursorPaginator(executor).paginate(queries.MERGED_PULL_REQUESTS, {}, 2)

    assert len(nodes) == 2
    assert executor.execute.await_count == 1


@pytest.mark.asyncio
async def test_missing_path_is_empty_page():
    """Test a null repository ends pagination with no nodes."""
    executor = AsyncMock()
    executor.execute.return_value = {"repository": None}

    nodes = await CursorPaginator(executor).paginate(queries.MERGED_PULL_REQUESTS, {}, 2)

    assert nodes == []
    assert executor.execute.await_count == 1


@pytest.mark.asyncio
async def test_custom_path_overrides_query_path():
    executor = AsyncMock()
    executor.execute.side_effect = [
        {"search": {"edges": [{"cursor": None, "node": {"number": 1}}]}}
    ]

    nodes = await CursorPaginator(executor).paginate(
        queries.MERGED_PULL_REQUESTS, {}, 2, path="search"
    )

    assert nodes == [{"number": 1}]


def test_extract_edges_nested_path():
    data = {"repository": {"ref": {"target": {"history": {"edges": [{"cursor": "a"}]}}}}}
    assert extract_edges(data, "repository.ref.target.history") == [{"cursor": "a"}]
    assert extract_edges({"repository": {"ref": None}}, "repository.ref.target.history") == []
    assert extract_edges({}, "repository.pullRequests") == []
