"""Writing query results to CSV and JSON files."""

from .base import BaseExporter, ExportFormat, ExportResult, export_filename
from .csv_exporter import CSVExporter
from .json_exporter import JSONExporter
from .engine import ExporterRegistry, export_table, exporter_registry, get_exporter

__all__ = [
    'BaseExporter',
    'ExportFormat',
    'ExportResult',
    'export_filename',
    'CSVExporter',
    'JSONExporter',
    'ExporterRegistry',
    'exporter_registry',
    'get_exporter',
    'export_table',
]
