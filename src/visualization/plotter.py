"""
Contribution Visualization Module.

Creates the charts embedded in the PDF report:
- Activity breakdown of the top contributors
- Repository level counters side by side

The module uses matplotlib with a non-interactive backend so that charts can be
rendered on headless machines.
"""

from typing import List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from analyzers.models import ACTIVITY_FIELDS, ContributorStat, RepoStat  # noqa: E402

ACTIVITY_LABELS = {
    "merged_prs": "Merged PRs",
    "reviews": "Reviews",
    "commits": "Commits",
    "issues_closed": "Issues closed",
    "pr_comments": "PR comments",
    "issue_comments": "Issue comments",
}


class ContributionPlotter:
    """Builds matplotlib figures from collection results."""

    def create_top_contributors_plot(
        self, contributors: List[ContributorStat], title: str
    ) -> plt.Figure:
        """Create a stacked horizontal bar chart of contributor activity.

        Args:
            contributors (List[ContributorStat]): Contributors to plot, in display order
            title (str): Chart title

        Returns:
            plt.Figure: Generated figure
        """
        logins = [c.login for c in contributors][::-1]
        fig, ax = plt.subplots(figsize=(10, max(3, 0.5 * len(logins) + 1)))

        left = [0] * len(logins)
        for field in ACTIVITY_FIELDS:
            values = [getattr(c, field) for c in contributors][::-1]
            ax.barh(logins, values, left=left, label=ACTIVITY_LABELS[field])
            left = [offset + value for offset, value in zip(left, values)]

        ax.set_title(title)
        ax.set_xlabel("Count")
        ax.legend(loc="lower right", fontsize="small")
        ax.grid(True, axis="x")

        plt.tight_layout()
        return fig

    def create_repository_plot(
        self, repositories: List[RepoStat], title: str
    ) -> plt.Figure:
        """Create a grouped bar chart of repository counters.

        Args:
            repositories (List[RepoStat]): Repository summaries
            title (str): Chart title

        Returns:
            plt.Figure: Generated figure
        """
        series = [
            ("Merged PRs", "merged_prs"),
            ("Open PRs", "open_prs"),
            ("Closed issues", "closed_issues"),
            ("New issues", "new_issues"),
        ]
        names = [repo.name for repo in repositories]
        width = 0.8 / len(series)

        fig, ax = plt.subplots(figsize=(max(6, 1.5 * len(names) + 2), 6))
        for index, (label, attr) in enumerate(series):
            positions = [i + index * width for i in range(len(names))]
            values = [getattr(r, attr) for r in repositories]
            ax.bar(positions, values, width, label=label)

        ax.set_xticks([i + width * (len(series) - 1) / 2 for i in range(len(names))])
        ax.set_xticklabels(names)
        ax.set_title(title)
        ax.set_ylabel("Count")
        ax.legend(fontsize="small")
        ax.grid(True, axis="y")
        plt.setp(ax.xaxis.get_majorticklabels(), rotation=45, ha="right")

        plt.tight_layout()
        return fig
