"""
Contributor Ranking Helpers.

Orderings used by the report renderers. All sorts are stable, so contributors
that tie on every key keep their first-credited order.
"""

from typing import Iterable, List

from analyzers.models import ContributorStat


def rank_contributors(stats: Iterable[ContributorStat]) -> List[ContributorStat]:
    """Order by merged PRs, then commits, then reviews, all descending."""
    return sorted(
        stats, key=lambda s: (-s.merged_prs, -s.commits, -s.reviews)
    )


def top_pr_authors(stats: Iterable[ContributorStat], limit: int = 3) -> List[str]:
    return [s.login for s in rank_contributors(stats) if s.merged_prs > 0][:limit]


def top_reviewers(stats: Iterable[ContributorStat], limit: int = 3) -> List[str]:
    reviewers = sorted((s for s in stats if s.reviews > 0), key=lambda s: -s.reviews)
    return [s.login for s in reviewers[:limit]]


def top_commenters(stats: Iterable[ContributorStat], limit: int = 3) -> List[str]:
    commenters = sorted((s for s in stats if s.comments > 0), key=lambda s: -s.comments)
    return [s.login for s in commenters[:limit]]


def rank_repository_contributors(
    stats: Iterable[ContributorStat],
) -> List[ContributorStat]:
    """Contributors with any activity in a repository, most active first."""
    active = [s for s in stats if s.activity_total > 0]
    return sorted(active, key=lambda s: -s.activity_total)
