"""
CSV Report Generation Module.

Writes the ranked global contributor table as a delimited file.
"""

import pandas as pd

from config import logger
from analyzers.models import CONTRIBUTOR_FIELDS, CollectionResult
from analyzers.ranking import rank_contributors

CSV_COLUMNS = ["login", *CONTRIBUTOR_FIELDS]


class CSVReportGenerator:
    """Renders contributor statistics as CSV."""

    def build_frame(self, result: CollectionResult) -> pd.DataFrame:
        """Ranked contributor rows with the fixed column order."""
        rows = [
            stat.model_dump()
            for stat in rank_contributors(result.contributors.values())
        ]
        return pd.DataFrame(rows, columns=CSV_COLUMNS)

    def generate_report(self, result: CollectionResult, output_path: str) -> None:
        """Write the CSV report.

        Args:
            result (CollectionResult): Collection result
            output_path (str): Destination file
        """
        self.build_frame(result).to_csv(output_path, index=False)
        logger.info({"message": "CSV written", "output_path": output_path})
