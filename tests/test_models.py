"""
Collection Model Test Suite.

Covers the month window, repository reference parsing and GraphQL node parsing.
"""

from datetime import datetime, timedelta, timezone

import pytest

from miners.models import (
    ClosedIssue,
    Commit,
    MergedPullRequest,
    RepositoryRef,
    TimeWindow,
)


def test_window_from_month(window):
    """Test the window spans the whole calendar month."""
    assert window.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert window.end == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert window.from_iso == "2024-01-01T00:00:00.000Z"
    assert window.to_iso == "2024-02-01T00:00:00.000Z"


def test_window_december_rolls_over():
    """Test December ends at the first of January of the next year."""
    december = TimeWindow.from_month("2023-12")
    assert december.end == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_window_is_half_open(window):
    """Test the start is included and the end excluded."""
    assert window.contains(window.start)
    assert not window.contains(window.end)
    assert not window.contains(window.start - timedelta(milliseconds=1))
    assert window.contains(window.end - timedelta(milliseconds=1))
    assert not window.contains(None)


def test_window_treats_naive_timestamps_as_utc(window):
    assert window.contains(datetime(2024, 1, 15))


@pytest.mark.parametrize(
    "value",
    [
        "octo/widgets",
        " octo/widgets ",
        "https://github.com/octo/widgets",
        "https://github.com/octo/widgets.git",
        "https://github.com/octo/widgets/",
    ],
)
def test_repository_ref_parse(value):
    ref = RepositoryRef.parse(value)
    assert ref.owner == "octo"
    assert ref.name == "widgets"
    assert ref.full_name == "octo/widgets"


def test_repository_ref_parse_rejects_bare_name():
    with pytest.raises(ValueError):
        RepositoryRef.parse("widgets")


def test_merged_pull_request_flattens_connections():
    """Test nested edges are flattened and timestamps parsed."""
    pr = MergedPullRequest.model_validate(
        {
            "number": 7,
            "title": "Add feature",
            "author": {"login": "alice"},
            "mergedAt": "2024-01-15T00:00:00Z",
            "additions": 10,
            "deletions": 2,
            "reviews": {
                "edges": [
                    {"node": {"author": {"login": "bob"}, "state": "APPROVED",
                              "submittedAt": "2024-01-16T00:00:00Z"}}
                ]
            },
            "closingIssuesReferences": {"edges": []},
        }
    )

    assert pr.merged_at == datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert pr.reviews[0].author.login == "bob"
    assert pr.closing_issues_references == []


def test_missing_connections_default_to_empty():
    issue = ClosedIssue.model_validate(
        {"number": 1, "author": None, "closedAt": None, "assignees": None}
    )
    assert issue.assignees == []
    assert issue.author is None


def test_commit_login_requires_linked_user():
    linked = Commit.model_validate(
        {"author": {"user": {"login": "carol"}}, "committedDate": "2024-01-02T00:00:00Z"}
    )
    unlinked = Commit.model_validate(
        {"author": {"user": None}, "committedDate": "2024-01-02T00:00:00Z"}
    )
    assert linked.login == "carol"
    assert unlinked.login is None
