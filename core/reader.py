"""
Reader module: turns CSV text or workbook bytes into a uniform table of rows
(header row included) plus the cleaned column names.
"""
import io
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

import pandas as pd

from .config import CSV_EXTENSIONS, EXCEL_ENGINES, SUPPORTED_EXTENSIONS
from .errors import EmptyInput, ReadFailure, UnsupportedFileType
from .models import FileBlob, FileKind, LoadedFile, ParsedTable, Row, to_scalar
from .utils import clean_column_name, file_extension

LOGGER = logging.getLogger(__name__)

Source = Union[str, Path, FileBlob]


def parse_csv_line(line: str) -> List[str]:
    """
    Split one CSV line on commas that sit outside double quotes.

    Quotes only toggle the quoted state and are not kept; every field is trimmed.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def read_csv_bytes(data: bytes) -> ParsedTable:
    text = data.decode("utf-8-sig", errors="replace")
    lines = [line for line in text.split("\n") if line.strip()]

    if not lines:
        raise EmptyInput("Empty CSV file")

    rows: List[Row] = [parse_csv_line(line) for line in lines]
    columns = [clean_column_name(col) for col in rows[0]]
    return ParsedTable(rows=rows, columns=columns)


def _trim_leading_columns(frame: pd.DataFrame) -> pd.DataFrame:
    """Start the frame at the sheet's first used column (pandas always starts at A)."""
    used = frame.notna().any(axis=0)
    if not used.any():
        return frame
    first = int(used.to_numpy().argmax())
    return frame.iloc[:, first:]


def _frame_to_rows(frame: pd.DataFrame) -> List[Row]:
    """Array-of-arrays from a header-less sheet frame, skipping blank rows."""
    rows: List[Row] = []
    for values in frame.itertuples(index=False, name=None):
        row = [to_scalar(v) for v in values]
        # pandas pads every row to the sheet width; drop the padding
        while row and row[-1] is None:
            row.pop()
        if row:
            rows.append(row)
    return rows


def read_excel_bytes(data: bytes, extension: str = "xlsx") -> ParsedTable:
    """
    Decode a workbook and read its first sheet only.

    Cell values are kept as the decoder returns them (dates become ISO strings).
    The names of any other sheets are reported back in ``ignored_sheets``.
    """
    engine = EXCEL_ENGINES.get(extension, "openpyxl")

    try:
        with pd.ExcelFile(io.BytesIO(data), engine=engine) as workbook:
            sheet_names = [str(name) for name in workbook.sheet_names]
            frame = (
                workbook.parse(workbook.sheet_names[0], header=None, dtype=object)
                if sheet_names
                else pd.DataFrame()
            )
    except Exception as exc:
        raise ReadFailure(f"Could not decode workbook: {exc}") from exc

    ignored = sheet_names[1:]
    if ignored:
        LOGGER.warning(
            "Workbook has %d sheets; only '%s' was read (ignored: %s)",
            len(sheet_names), sheet_names[0], ", ".join(ignored),
        )

    rows = _frame_to_rows(_trim_leading_columns(frame))
    if not rows:
        raise EmptyInput("Empty Excel file")

    columns = [clean_column_name(col) for col in rows[0]]
    return ParsedTable(rows=rows, columns=columns, ignored_sheets=ignored)


def read_table(data: bytes, kind: FileKind, extension: str = "xlsx") -> ParsedTable:
    if kind is FileKind.CSV:
        return read_csv_bytes(data)
    return read_excel_bytes(data, extension)


def source_name(source: Source) -> str:
    if isinstance(source, FileBlob):
        return source.name
    return Path(source).name


def read_source_bytes(source: Source) -> Tuple[Optional[str], bytes]:
    """Return (source_path, raw bytes); blobs have no path."""
    if isinstance(source, FileBlob):
        return None, source.data

    path = Path(source)
    try:
        return str(path), path.read_bytes()
    except OSError as exc:
        raise ReadFailure(f"Could not read '{path}': {exc}") from exc


def load_source(source: Source) -> LoadedFile:
    """
    Read and parse one path or blob into a LoadedFile.

    Raises:
        UnsupportedFileType: extension is not csv/xlsx/xls.
        ReadFailure: bytes could not be read or decoded.
        EmptyInput: nothing usable after parsing.
    """
    name = source_name(source)
    extension = file_extension(name)
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileType(f"Unsupported file type: '{extension or name}'")

    source_path, data = read_source_bytes(source)
    kind = FileKind.CSV if extension in CSV_EXTENSIONS else FileKind.SPREADSHEET
    table = read_table(data, kind, extension)

    LOGGER.info(
        "Loaded %s: %d data row(s), %d column(s)",
        name, len(table.rows) - 1, len(table.columns),
    )
    return LoadedFile(
        name=name,
        source_path=source_path,
        kind=kind,
        rows=table.rows,
        columns=table.columns,
        ignored_sheets=table.ignored_sheets,
    )
