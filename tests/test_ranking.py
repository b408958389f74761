"""Tests for contributor ordering used by the reports."""

from analyzers.models import ContributorStat
from analyzers.ranking import (
    rank_contributors,
    rank_repository_contributors,
    top_commenters,
    top_pr_authors,
    top_reviewers,
)


def test_rank_breaks_merged_pr_ties_by_commits():
    a = ContributorStat(login="A", merged_prs=5, commits=2)
    b = ContributorStat(login="B", merged_prs=5, commits=8)
    c = ContributorStat(login="C", merged_prs=3, commits=20)

    assert [s.login for s in rank_contributors([a, b, c])] == ["B", "A", "C"]


def test_rank_uses_reviews_last_and_is_stable():
    stats = [
        ContributorStat(login="x", merged_prs=1, commits=1, reviews=1),
        ContributorStat(login="y", merged_prs=1, commits=1, reviews=4),
        ContributorStat(login="z", merged_prs=1, commits=1, reviews=1),
    ]
    assert [s.login for s in rank_contributors(stats)] == ["y", "x", "z"]


def test_top_lists_skip_inactive_contributors():
    stats = [
        ContributorStat(login="alice", merged_prs=3, reviews=1, pr_comments=1),
        ContributorStat(login="bob", reviews=5, issue_comments=7),
        ContributorStat(login="carol", commits=9),
        ContributorStat(login="dave", merged_prs=1, pr_comments=2, issue_comments=2),
        ContributorStat(login="erin", merged_prs=2),
    ]

    assert top_pr_authors(stats) == ["alice", "erin", "dave"]
    assert top_reviewers(stats) == ["bob", "alice"]
    assert top_commenters(stats) == ["bob", "dave", "alice"]
    assert top_pr_authors(stats, limit=1) == ["alice"]


def test_repository_ranking_by_activity_total():
    stats = [
        ContributorStat(login="lines-only", additions=500, deletions=20),
        ContributorStat(login="busy", commits=4, reviews=3),
        ContributorStat(login="quiet", issue_comments=1),
    ]

    assert [s.login for s in rank_repository_contributors(stats)] == ["busy", "quiet"]
