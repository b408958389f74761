"""
PDF Report Generation Module.

This module handles the generation of the monthly PDF report from a collection
result. Features include:
- Repository overview table with totals
- Ranked contributor table
- Contributor activity and repository charts

Uses ReportLab for PDF generation and handles both tabular data and graphical elements.
"""

import os
from typing import List

import matplotlib.pyplot as plt
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    Image,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from config import logger
from analyzers.models import CollectionResult, RepoStat
from analyzers.ranking import rank_contributors
from report.markdown_generator import month_name
from visualization.plotter import ContributionPlotter

HEADER_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("GRID", (0, 0), (-1, -1), 1, colors.black),
]


class PDFReportGenerator:
    """
    Generates the monthly PDF report.

    Attributes:
        styles (getSampleStyleSheet): ReportLab styles for document formatting.
        plotter (ContributionPlotter): Instance for creating data visualizations.
        top_n (int): Number of contributors listed and plotted.
    """

    def __init__(self, plotter: ContributionPlotter, top_n: int = 20):
        """Initialize the PDF generator with visualization capabilities.

        Args:
            plotter (ContributionPlotter): Instance for creating data visualizations.
            top_n (int): Number of contributors listed and plotted.
        """
        self.styles = getSampleStyleSheet()
        self.plotter = plotter
        self.top_n = top_n

    def _create_repository_table(self, repositories: List[RepoStat]) -> Table:
        """Create the repository overview table with a totals row.

        Args:
            repositories (List[RepoStat]): Repository summaries.

        Returns:
            Table: Formatted ReportLab table.
        """
        data = [["Repository", "Merged PRs", "Open PRs", "Closed Issues", "New Issues"]]
        for repo in repositories:
            data.append(
                [
                    repo.name,
                    repo.merged_prs,
                    repo.open_prs,
                    repo.closed_issues,
                    repo.new_issues,
                ]
            )
        data.append(
            [
                "Total",
                sum(r.merged_prs for r in repositories),
                sum(r.open_prs for r in repositories),
                sum(r.closed_issues for r in repositories),
                sum(r.new_issues for r in repositories),
            ]
        )

        table = Table(data, colWidths=[2.5 * inch] + [1.1 * inch] * 4)
        table.setStyle(
            TableStyle(
                HEADER_STYLE
                + [
                    ("BACKGROUND", (0, 1), (-1, -2), colors.beige),
                    ("BACKGROUND", (0, -1), (-1, -1), colors.lightgrey),
                    ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ]
            )
        )
        return table

    def _create_contributor_table(self, result: CollectionResult) -> Table:
        """Create the ranked contributor table."""
        data = [
            [
                "Contributor",
                "Merged PRs",
                "Reviews",
                "Commits",
                "Issues",
                "Comments",
                "+/-",
            ]
        ]
        for stat in rank_contributors(result.contributors.values())[: self.top_n]:
            data.append(
                [
                    stat.login,
                    stat.merged_prs,
                    stat.reviews,
                    stat.commits,
                    stat.issues_closed,
                    stat.comments,
                    f"+{stat.additions} / -{stat.deletions}",
                ]
            )

        table = Table(data)
        table.setStyle(
            TableStyle(
                HEADER_STYLE
                + [
                    ("FONTSIZE", (0, 0), (-1, -1), 8),
                    *[
                        ("BACKGROUND", (0, i), (-1, i), colors.paleturquoise)
                        for i in range(2, len(data), 2)
                    ],
                ]
            )
        )
        return table

    def _add_figure(
        self, fig: plt.Figure, plot_path: str, title: str, elements: list
    ) -> None:
        fig.savefig(plot_path, format="png", dpi=150, bbox_inches="tight")
        plt.close(fig)
        elements.extend(
            [
                Paragraph(title, self.styles["Heading3"]),
                Spacer(1, 10),
                Image(plot_path, width=7 * inch, height=4.5 * inch),
                Spacer(1, 20),
            ]
        )

    def generate_report(
        self, result: CollectionResult, output_path: str, plots_dir: str
    ) -> None:
        """Generate the monthly PDF report.

        Args:
            result (CollectionResult): Collection result to render.
            output_path (str): Path of the PDF file.
            plots_dir (str): Directory for intermediate chart images.

        Raises:
            Exception: If report generation fails.
        """
        logger.info(
            {"message": "Starting PDF report generation", "output_path": output_path}
        )
        os.makedirs(plots_dir, exist_ok=True)
        plot_paths = []
        try:
            doc = SimpleDocTemplate(output_path, pagesize=letter)
            title = month_name(result.month)
            elements = [
                Paragraph(f"GitHub Stats: {title}", self.styles["Heading1"]),
                Paragraph(
                    f"Period: {result.from_iso} to {result.to_iso} (exclusive)",
                    self.styles["Normal"],
                ),
                Paragraph(
                    f"Total contributors: {len(result.contributors)}",
                    self.styles["Normal"],
                ),
                Spacer(1, 20),
                Paragraph("Repository Overview", self.styles["Heading2"]),
                Spacer(1, 10),
                self._create_repository_table(result.repositories),
                Spacer(1, 30),
                Paragraph("Top Contributors", self.styles["Heading2"]),
                Spacer(1, 10),
                self._create_contributor_table(result),
                Spacer(1, 30),
            ]

            if result.repositories:
                plot_paths.append(
                    os.path.join(plots_dir, f"repositories_{result.month}.png")
                )
                self._add_figure(
                    self.plotter.create_repository_plot(
                        result.repositories, f"Repository activity - {title}"
                    ),
                    plot_paths[-1],
                    "Repository Activity",
                    elements,
                )

            top = rank_contributors(result.contributors.values())[: self.top_n]
            if top:
                plot_paths.append(
                    os.path.join(plots_dir, f"contributors_{result.month}.png")
                )
                self._add_figure(
                    self.plotter.create_top_contributors_plot(
                        top, f"Top contributors - {title}"
                    ),
                    plot_paths[-1],
                    "Contributor Activity",
                    elements,
                )

            doc.build(elements)
            logger.info(
                {
                    "message": "PDF report generated successfully",
                    "output_path": output_path,
                }
            )

        except Exception as e:
            logger.error(
                {
                    "message": "PDF report generation failed",
                    "error": str(e),
                    "output_path": output_path,
                }
            )
            raise
        finally:
            for plot_path in plot_paths:
                if os.path.exists(plot_path):
                    os.remove(plot_path)
