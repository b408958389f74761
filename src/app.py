"""
Main Application Entry Point.

This module serves as the primary entry point for the monthly contribution
statistics collector. It orchestrates the workflow, including:
- Client initialization (GitHub REST for repository lookup, GraphQL for metrics)
- Sequential collection of every configured repository
- Report directory management
- Report generation (CSV, JSON, Markdown, PDF)
- Error handling and logging

Any collection failure aborts the run before reports are written.
"""

import asyncio
import os
import shutil
import sys

from github import Auth, Github

from config import settings, logger
from analyzers.models import CollectionResult
from analyzers.multi_repository import MultiRepositoryAnalyzer
from miners.collectors import MetricCollectors
from miners.github_miner import GitHubMiner
from miners.graphql_client import GraphQLClient
from miners.pagination import CursorPaginator
from report.csv_generator import CSVReportGenerator
from report.json_generator import JSONReportGenerator
from report.markdown_generator import MarkdownReportGenerator
from report.pdf_generator import PDFReportGenerator
from visualization.plotter import ContributionPlotter


async def collect() -> CollectionResult:
    """
    Collect contribution statistics for every configured repository.

    Returns:
        CollectionResult: Aggregated counters for the configured month

    Raises:
        GraphQLClientError: If a GitHub query fails
    """
    window = settings.window
    token = settings.github_token.get_secret_value()

    logger.info(
        {
            "message": f"Collecting stats for {window.month}",
            "from": window.from_iso,
            "to": window.to_iso,
        }
    )

    async with GraphQLClient(
        token,
        url=settings.graphql_url,
        timeout=settings.request_timeout,
        default_retry_after=settings.default_retry_after,
        max_retries=settings.max_rate_limit_retries,
    ) as client:
        collectors = MetricCollectors(
            CursorPaginator(client), window, settings.page_size
        )
        miner = GitHubMiner(Github(auth=Auth.Token(token)), collectors)
        analyzer = MultiRepositoryAnalyzer(miner, settings.repositories, window)
        return await analyzer.analyze_repositories()


def write_reports(result: CollectionResult) -> str:
    """
    Render every report for a collection result.

    Args:
        result (CollectionResult): Aggregated counters

    Returns:
        str: Directory containing the reports
    """
    reports_dir = os.path.join(settings.report_output_dir, result.month)
    os.makedirs(reports_dir, exist_ok=True)
    basename = f"{settings.output_basename}-{result.month}"

    CSVReportGenerator().generate_report(
        result, os.path.join(reports_dir, f"{basename}.csv")
    )
    JSONReportGenerator().generate_report(
        result, os.path.join(reports_dir, f"{basename}.json")
    )
    markdown = MarkdownReportGenerator()
    markdown.generate_summary_report(result, os.path.join(reports_dir, "report.md"))
    markdown.generate_enhanced_report(
        result, os.path.join(reports_dir, f"{basename}-enhanced.md")
    )

    if settings.pdf_report:
        temp_plot_dir = os.path.join(reports_dir, "temp_plots")
        try:
            PDFReportGenerator(ContributionPlotter()).generate_report(
                result, os.path.join(reports_dir, f"{basename}.pdf"), temp_plot_dir
            )
        finally:
            shutil.rmtree(temp_plot_dir, ignore_errors=True)

    return reports_dir


async def main() -> int:
    """
    Execute the main application workflow.

    Returns:
        int: Process exit status, 0 on success and 1 when the run aborted
    """
    logger.info("Starting contribution statistics collection...")
    try:
        result = await collect()
        reports_dir = write_reports(result)
    except Exception as e:
        logger.error({"message": "Run aborted", "error": str(e)})
        return 1

    logger.info(
        {
            "message": "All outputs generated successfully",
            "reports_dir": reports_dir,
            "contributors": len(result.contributors),
            "repositories": len(result.repositories),
        }
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
