"""CSV exporter."""

import csv
from pathlib import Path

import pandas as pd

from queryly.db.models import QueryResult
from queryly.export.base import BaseExporter, ExportFormat


class CSVExporter(BaseExporter):
    """Comma-separated values with a header row.

    Fields containing a comma, quote or line break are quoted and inner
    quotes doubled; NULL is written as an empty field.
    """

    @property
    def supported_format(self) -> ExportFormat:
        """Return the CSV format."""
        return ExportFormat.CSV

    def _write(self, result: QueryResult, output_path: Path) -> None:
        frame = pd.DataFrame(
            [[cell.to_text() for cell in row] for row in result.rows],
            columns=result.columns,
            dtype=object,
        )
        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            frame.to_csv(f, index=False, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
