"""Shared data model for providers, the executor and renderers."""

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd


class CellKind(str, Enum):
    """Kinds of values a result cell can hold."""
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    TEXT = "text"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    BINARY = "binary"
    OTHER = "other"


@dataclass(frozen=True)
class Cell:
    """A single result value tagged with its kind.

    Renderers and exporters switch on ``kind`` instead of inspecting the
    Python type of ``value`` themselves.
    """
    kind: CellKind
    value: Any = None

    @classmethod
    def of(cls, value: Any) -> "Cell":
        """Classify a raw driver value."""
        if value is None:
            return cls(CellKind.NULL)
        # bool before int, datetime before date: both are subclasses
        if isinstance(value, bool):
            return cls(CellKind.BOOLEAN, value)
        if isinstance(value, int):
            return cls(CellKind.INTEGER, value)
        if isinstance(value, float):
            return cls(CellKind.FLOAT, value)
        if isinstance(value, Decimal):
            return cls(CellKind.DECIMAL, value)
        if isinstance(value, str):
            return cls(CellKind.TEXT, value)
        if isinstance(value, datetime):
            return cls(CellKind.DATETIME, value)
        if isinstance(value, date):
            return cls(CellKind.DATE, value)
        if isinstance(value, time):
            return cls(CellKind.TIME, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(CellKind.BINARY, bytes(value))
        return cls(CellKind.OTHER, value)

    @property
    def is_null(self) -> bool:
        return self.kind is CellKind.NULL

    def to_text(self) -> str:
        """Plain text form used for display and CSV. NULL becomes ''."""
        if self.kind is CellKind.NULL:
            return ""
        if self.kind is CellKind.BINARY:
            return "0x" + self.value.hex()
        if self.kind in (CellKind.DATE, CellKind.TIME, CellKind.DATETIME):
            return self.value.isoformat(sep=" ") if self.kind is CellKind.DATETIME else self.value.isoformat()
        return str(self.value)

    def to_json(self) -> Any:
        """JSON-native form. NULL becomes None, never the string 'NULL'."""
        if self.kind is CellKind.NULL:
            return None
        if self.kind in (CellKind.BOOLEAN, CellKind.INTEGER, CellKind.TEXT):
            return self.value
        # JSON has no NaN or Infinity; those are written as text.
        if self.kind is CellKind.FLOAT:
            return self.value if math.isfinite(self.value) else str(Decimal(self.value))
        if self.kind is CellKind.DECIMAL:
            if not self.value.is_finite():
                return str(self.value)
            if self.value == self.value.to_integral_value():
                return int(self.value)
            approx = float(self.value)
            # Digits a double cannot hold are kept by writing the exact literal.
            return approx if Decimal(repr(approx)) == self.value else str(self.value)
        if self.kind in (CellKind.DATE, CellKind.TIME, CellKind.DATETIME):
            return self.value.isoformat()
        if self.kind is CellKind.BINARY:
            return self.value.hex()
        if isinstance(self.value, (dict, list)):
            return self.value
        return str(self.value)


Row = Tuple[Cell, ...]


class QueryResult:
    """Normalized outcome of running one statement."""

    def __init__(
        self,
        succeeded: bool,
        columns: Optional[List[str]] = None,
        rows: Optional[List[Row]] = None,
        error_message: Optional[str] = None,
        execution_time: Optional[float] = None,
    ) -> None:
        """Initialize query result.

        Args:
            succeeded: Whether the engine accepted the statement.
            columns: Column names in result order; duplicates are kept.
            rows: Result rows as tuples of cells.
            error_message: Engine error text, set only when the query failed.
            execution_time: Wall-clock round trip in seconds.
        """
        self.succeeded = succeeded
        self.columns = columns or []
        self.rows = rows or []
        self.error_message = error_message
        self.execution_time = execution_time or 0.0

    @classmethod
    def success(
        cls,
        columns: Sequence[str],
        raw_rows: Sequence[Sequence[Any]],
        execution_time: float,
    ) -> "QueryResult":
        rows = [tuple(Cell.of(value) for value in row) for row in raw_rows]
        return cls(True, list(columns), rows, None, execution_time)

    @classmethod
    def failure(cls, error_message: str, execution_time: float) -> "QueryResult":
        return cls(False, [], [], error_message or "Unknown error", execution_time)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def execution_time_ms(self) -> float:
        return self.execution_time * 1000

    def values(self) -> List[List[Any]]:
        """Raw Python values, row by row."""
        return [[cell.value for cell in row] for row in self.rows]

    def records(self) -> List[Dict[str, Any]]:
        """Rows as column -> JSON value mappings.

        With duplicate column names the right-most value wins.
        """
        return [
            {column: cell.to_json() for column, cell in zip(self.columns, row)}
            for row in self.rows
        ]

    def to_dataframe(self) -> pd.DataFrame:
        """Rows as an ``object`` DataFrame so NULLs stay ``None``."""
        return pd.DataFrame(self.values(), columns=self.columns, dtype=object)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            'succeeded': self.succeeded,
            'columns': self.columns,
            'rows': [[cell.to_json() for cell in row] for row in self.rows],
            'row_count': self.row_count,
            'error_message': self.error_message,
            'execution_time': self.execution_time,
        }

    def __repr__(self) -> str:
        if not self.succeeded:
            return f"QueryResult(failed: {self.error_message!r})"
        return f"QueryResult(columns={self.columns!r}, rows={self.row_count})"


@dataclass(frozen=True)
class TableDescriptor:
    """A base table and its exact row count."""
    name: str
    row_count: int
    schema: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name


@dataclass(frozen=True)
class ColumnDescriptor:
    """A column as reported by the engine catalog."""
    name: str
    data_type: str
    is_nullable: bool
    is_primary_key: bool = False
    default_value: Optional[str] = None
