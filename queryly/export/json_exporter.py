"""JSON exporter."""

import json
from pathlib import Path

from queryly.db.models import QueryResult
from queryly.export.base import BaseExporter, ExportFormat


class JSONExporter(BaseExporter):
    """Indented array of row objects keyed by column name; NULL is ``null``."""

    @property
    def supported_format(self) -> ExportFormat:
        """Return the JSON format."""
        return ExportFormat.JSON

    def _write(self, result: QueryResult, output_path: Path) -> None:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(result.records(), f, indent=2, ensure_ascii=False, allow_nan=False, default=str)
