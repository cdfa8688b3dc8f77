"""
Data model shared by the reader, registry, merge engine and exporter.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from numbers import Integral, Real
from typing import List, Optional, Union

import numpy as np
import pandas as pd

# A single cell: string, number, boolean or empty (None).
Scalar = Union[str, int, float, bool, None]
Row = List[Scalar]
MergedDataset = List[Row]


class FileKind(str, Enum):
    CSV = "csv"
    SPREADSHEET = "excel"


class FileStatus(str, Enum):
    LOADED = "loaded"
    ERROR = "error"


@dataclass
class FileBlob:
    """An in-memory file handed over by a picker or a drop target."""
    name: str
    data: bytes


@dataclass
class ParsedTable:
    rows: List[Row]
    columns: List[str]
    ignored_sheets: List[str] = field(default_factory=list)


@dataclass
class LoadedFile:
    name: str
    source_path: Optional[str]
    kind: FileKind
    rows: List[Row]
    columns: List[str]
    status: FileStatus = FileStatus.LOADED
    ignored_sheets: List[str] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        """Data rows, header excluded."""
        return max(len(self.rows) - 1, 0)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def is_loaded(self) -> bool:
        return self.status is FileStatus.LOADED


def to_scalar(value) -> Scalar:
    """Coerce a decoder-native cell value into the Scalar union."""
    if isinstance(value, np.generic):
        value = value.item()
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real):
        return None if pd.isna(value) else float(value)
    if pd.isna(value):
        return None
    return str(value)


def stringify_cell(value: Scalar) -> str:
    """
    Text form of a cell, used by the CSV exporter and the UI.

    None and NaN become "", booleans become "true"/"false" and floats holding an
    integral value drop their fractional part (30.0 -> "30").
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if pd.isna(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)
