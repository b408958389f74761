"""
Markdown Report Generation Module.

Produces two narrative reports from a collection result:
- a short summary with the repository table and contributor shout-outs
- an enhanced report that adds the collection period and a per-repository
  contributor breakdown
"""

import re
from datetime import datetime, timezone
from typing import List, Optional

from config import logger
from analyzers.models import CollectionResult, RepoStat
from analyzers.ranking import (
    rank_repository_contributors,
    top_commenters,
    top_pr_authors,
    top_reviewers,
)

NONE_THIS_MONTH = "None this month"


def month_name(month: str) -> str:
    """``2024-01`` -> ``January 2024``."""
    return datetime.strptime(month, "%Y-%m").strftime("%B %Y")


def long_date(moment: datetime) -> str:
    return f"{moment.strftime('%B')} {moment.day}, {moment.year}"


def repository_display_name(name: str) -> str:
    """``owner/my-repo`` -> ``My Repo``."""
    short = name.split("/", 1)[-1].replace("-", " ")
    return re.sub(r"\b\w", lambda m: m.group().upper(), short)


def mentions(logins: List[str]) -> str:
    return ", ".join(f"@{login}" for login in logins) or NONE_THIS_MONTH


class MarkdownReportGenerator:
    """Renders the Markdown summary and enhanced reports."""

    def repository_table(self, repositories: List[RepoStat]) -> str:
        """Repository counters with links and a totals row."""
        totals = {
            attr: sum(getattr(repo, attr) for repo in repositories)
            for attr in ("merged_prs", "open_prs", "closed_issues", "new_issues")
        }
        lines = [
            "| Github Repo | Merged PRs | Open PRs | Closed Issues | New Issues |",
            "|---|---:|---:|---:|---:|",
        ]
        for repo in repositories:
            lines.append(
                f"| [{repo.name}]({repo.url}) | {repo.merged_prs} | {repo.open_prs} "
                f"| {repo.closed_issues} | {repo.new_issues} |"
            )
        lines.append(
            f"| **Total** | **{totals['merged_prs']}** | **{totals['open_prs']}** "
            f"| **{totals['closed_issues']}** | **{totals['new_issues']}** |"
        )
        return "\n".join(lines)

    def build_summary(self, result: CollectionResult) -> str:
        contributors = list(result.contributors.values())
        return (
            f"## Github stats ({month_name(result.month).upper()})\n"
            "\n"
            f"{self.repository_table(result.repositories)}\n"
            "\n"
            "Thanks to everyone who contributed this month. "
            "We saw a lot of activity and new contributors.\n"
            "\n"
            f"- **{len(contributors)} contributors** contributed to these repositories.\n"
            f"- **Top PR authors:** {mentions(top_pr_authors(contributors))}\n"
            f"- **Top reviewers:** {mentions(top_reviewers(contributors))}\n"
            f"- **Top commenters:** {mentions(top_commenters(contributors))}\n"
        )

    def repository_breakdown(self, result: CollectionResult) -> str:
        sections = []
        for repo_name, table in result.repository_contributors.items():
            ranked = rank_repository_contributors(table.values())
            if not ranked:
                continue
            lines = [
                f"### {repository_display_name(repo_name)}",
                "",
                "| Username | Merged PRs | Reviews | Commits | Issues Closed "
                "| PR Comments | Issue Comments |",
                "|----------|:----------:|:-------:|:-------:|:-------------:"
                "|:-----------:|:--------------:|",
            ]
            for c in ranked:
                lines.append(
                    f"| @{c.login} | {c.merged_prs} | {c.reviews} | {c.commits} "
                    f"| {c.issues_closed} | {c.pr_comments} | {c.issue_comments} |"
                )
            sections.append("\n".join(lines) + "\n")
        return "\n".join(sections)

    def build_enhanced(
        self, result: CollectionResult, generated_at: Optional[datetime] = None
    ) -> str:
        generated_at = generated_at or datetime.now(timezone.utc)
        period_start = datetime.fromisoformat(result.from_iso.replace("Z", "+00:00"))
        period_end = datetime.fromisoformat(result.to_iso.replace("Z", "+00:00"))
        contributors = list(result.contributors.values())
        name = month_name(result.month)

        return (
            f"# GitHub Stats - {name.upper()}\n"
            "\n"
            f"**Generated:** {long_date(generated_at)} at "
            f"{generated_at.strftime('%H:%M:%S')} UTC  \n"
            f"**Period:** {long_date(period_start)} - {long_date(period_end)}  \n"
            f"**Total Contributors:** {len(contributors)}\n"
            "\n"
            "## Repository Overview\n"
            "\n"
            f"{self.repository_table(result.repositories)}\n"
            "\n"
            f"- **{len(contributors)} contributors** contributed to these repositories.\n"
            "- **The most active Github contributors were:** "
            f"{mentions(top_pr_authors(contributors))}\n"
            "\n"
            "## Per-Repository Contributor Breakdown\n"
            "\n"
            f"{self.repository_breakdown(result)}\n"
            "---\n"
            "\n"
            f"*This report was generated automatically from GitHub data for {name}.*\n"
        )

    def generate_summary_report(
        self, result: CollectionResult, output_path: str
    ) -> None:
        """Write the summary Markdown report."""
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.build_summary(result))
        logger.info({"message": "Markdown report written", "output_path": output_path})

    def generate_enhanced_report(
        self,
        result: CollectionResult,
        output_path: str,
        generated_at: Optional[datetime] = None,
    ) -> None:
        """Write the enhanced Markdown report."""
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.build_enhanced(result, generated_at))
        logger.info(
            {"message": "Enhanced markdown report written", "output_path": output_path}
        )
