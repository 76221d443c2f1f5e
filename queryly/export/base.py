"""Base classes and helpers for exporting query results."""

import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from queryly.db.models import QueryResult


class ExportFormat(str, Enum):
    """Supported export formats."""
    CSV = "csv"
    JSON = "json"


@dataclass
class ExportResult:
    """Result of an export."""
    success: bool
    output_path: Optional[Path] = None
    row_count: int = 0
    file_size: Optional[int] = None
    error_message: Optional[str] = None
    generation_time: float = 0.0


_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\s]+')


def export_filename(table: str, fmt: ExportFormat, now: Optional[datetime] = None) -> str:
    """Timestamped file name: ``{table}_{YYYYMMDD_HHMMSS}.{ext}``."""
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    safe_table = _UNSAFE_FILENAME_CHARS.sub("_", table.strip()) or "export"
    return f"{safe_table}_{timestamp}.{ExportFormat(fmt).value}"


class BaseExporter(ABC):
    """Abstract base class for result exporters."""

    @property
    @abstractmethod
    def supported_format(self) -> ExportFormat:
        """Return the format written by this exporter."""
        pass

    @abstractmethod
    def _write(self, result: QueryResult, output_path: Path) -> None:
        """Write the result rows to ``output_path``."""
        pass

    def export(self, result: QueryResult, output_path: Path) -> ExportResult:
        """Write a full (non-paginated) result to a file.

        Args:
            result: A successful query result.
            output_path: Destination file; parent directories are created.

        Returns:
            Result of the export; failures are reported, not raised.
        """
        start_time = time.time()

        if not result.succeeded:
            return ExportResult(
                success=False,
                error_message=result.error_message,
                generation_time=time.time() - start_time,
            )

        try:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            self._write(result, output_path)

            return ExportResult(
                success=True,
                output_path=output_path,
                row_count=result.row_count,
                file_size=self._calculate_file_size(output_path),
                generation_time=time.time() - start_time,
            )

        except (OSError, ValueError, TypeError, ArithmeticError) as e:
            return ExportResult(
                success=False,
                error_message=str(e),
                generation_time=time.time() - start_time,
            )

    @staticmethod
    def _calculate_file_size(file_path: Path) -> Optional[int]:
        if file_path.exists():
            return file_path.stat().st_size
        return None
