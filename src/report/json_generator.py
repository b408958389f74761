"""
JSON Report Generation Module.

Writes the collection window and the ranked contributor table as a JSON
document.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from config import logger
from analyzers.models import CollectionResult
from analyzers.ranking import rank_contributors


class JSONReportGenerator:
    """Renders contributor statistics as JSON."""

    def build_document(
        self, result: CollectionResult, generated_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        generated_at = generated_at or datetime.now(timezone.utc)
        return {
            "month": result.month,
            "fromISO": result.from_iso,
            "toISO": result.to_iso,
            "generatedAt": generated_at.isoformat(),
            "contributors": [
                stat.model_dump()
                for stat in rank_contributors(result.contributors.values())
            ],
            "repositories": [repo.model_dump() for repo in result.repositories],
        }

    def generate_report(
        self,
        result: CollectionResult,
        output_path: str,
        generated_at: Optional[datetime] = None,
    ) -> None:
        """Write the JSON report.

        Args:
            result (CollectionResult): Collection result
            output_path (str): Destination file
            generated_at (Optional[datetime]): Generation timestamp, defaults to now
        """
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.build_document(result, generated_at), f, indent=2)
        logger.info({"message": "JSON written", "output_path": output_path})
