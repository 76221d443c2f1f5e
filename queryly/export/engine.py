"""Export orchestration: pick an exporter and write a whole table."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Type, Union

from queryly.db.base import BaseProvider
from queryly.db.connection import DatabaseConnection
from queryly.db.executor import QueryExecutor
from queryly.exceptions import ExportError
from queryly.export.base import BaseExporter, ExportFormat, ExportResult, export_filename
from queryly.export.csv_exporter import CSVExporter
from queryly.export.json_exporter import JSONExporter

logger = logging.getLogger(__name__)


class ExporterRegistry:
    """Registry mapping export formats to exporter classes."""

    def __init__(self) -> None:
        self._exporters: Dict[ExportFormat, Type[BaseExporter]] = {}

    def register_exporter(self, fmt: ExportFormat, exporter_class: Type[BaseExporter]) -> None:
        """Register an exporter class for a format."""
        self._exporters[ExportFormat(fmt)] = exporter_class

    def get_exporter(self, fmt: Union[ExportFormat, str]) -> BaseExporter:
        """Get an exporter instance for the specified format.

        Raises:
            ExportError: If the format is unknown or has no exporter.
        """
        try:
            fmt = fmt if isinstance(fmt, ExportFormat) else ExportFormat(fmt.strip().lower())
        except ValueError as e:
            raise ExportError(f"Unsupported export format: {fmt}") from e

        if fmt not in self._exporters:
            raise ExportError(f"No exporter registered for format: {fmt.value}")
        return self._exporters[fmt]()

    def list_available_formats(self) -> List[ExportFormat]:
        """Get list of formats with a registered exporter."""
        return list(self._exporters.keys())


exporter_registry = ExporterRegistry()
exporter_registry.register_exporter(ExportFormat.CSV, CSVExporter)
exporter_registry.register_exporter(ExportFormat.JSON, JSONExporter)


def get_exporter(fmt: Union[ExportFormat, str]) -> BaseExporter:
    """Return an exporter for ``fmt`` from the global registry."""
    return exporter_registry.get_exporter(fmt)


def export_table(
    provider: BaseProvider,
    connection: DatabaseConnection,
    table: str,
    fmt: Union[ExportFormat, str],
    output_dir: Union[str, Path] = ".",
    now: Optional[datetime] = None,
) -> ExportResult:
    """Export every row of ``table`` to a timestamped file in ``output_dir``.

    Args:
        provider: Provider matching the connection's engine.
        connection: Open connection.
        table: Table name, optionally schema-qualified.
        fmt: Export format.
        output_dir: Directory for the file; created if missing.
        now: Timestamp used in the file name (defaults to the current time).

    Returns:
        Result of the export. A failed query is reported with ``success=False``.

    Raises:
        ExportError: If the format is not supported.
    """
    exporter = get_exporter(fmt)
    output_path = Path(output_dir) / export_filename(table, exporter.supported_format, now)

    logger.info("Exporting '%s' as %s to %s", table, exporter.supported_format.value, output_path)
    result = QueryExecutor(connection).execute_query(provider.select_all_query(table))
    export_result = exporter.export(result, output_path)

    if export_result.success:
        logger.info("Exported %d row(s) to %s", export_result.row_count, output_path)
    else:
        logger.warning("Export of '%s' failed: %s", table, export_result.error_message)
    return export_result
