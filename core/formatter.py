# core/formatter.py
import io
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .config import EXPORT_EXTENSIONS, MERGED_SHEET_NAME
from .errors import WriteFailure
from .models import MergedDataset, stringify_cell

LOGGER = logging.getLogger(__name__)

MAX_COLUMN_WIDTH = 60


# ──────────────────────────────────────────
# Serialization
# ──────────────────────────────────────────

def _quote(value) -> str:
    return '"' + stringify_cell(value).replace('"', '""') + '"'


def to_csv_bytes(dataset: MergedDataset) -> bytes:
    """
    Every cell quoted, quotes doubled, cells joined by "," and rows by "\\n"
    (no trailing newline).
    """
    text = "\n".join(",".join(_quote(cell) for cell in row) for row in dataset)
    return text.encode("utf-8")


def to_excel_bytes(dataset: MergedDataset) -> bytes:
    """Single-sheet workbook ("Merged Data") built from the array-of-arrays."""
    frame = pd.DataFrame(dataset, dtype=object)
    buffer = io.BytesIO()

    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=MERGED_SHEET_NAME, index=False, header=False)
        ws = writer.sheets.get(MERGED_SHEET_NAME)
        if ws is not None:
            style_merged_sheet(ws, dataset)

    return buffer.getvalue()


def style_merged_sheet(ws: Worksheet, dataset: MergedDataset) -> None:
    """Bold header row and column widths fitted to the longest cell."""
    if not dataset or not dataset[0]:
        return

    header_font = Font(bold=True)
    for cell in ws[1]:
        cell.font = header_font

    width = max(len(row) for row in dataset)
    for col_idx in range(width):
        longest = max(
            (len(stringify_cell(row[col_idx])) for row in dataset if col_idx < len(row)),
            default=0,
        )
        letter = get_column_letter(col_idx + 1)
        ws.column_dimensions[letter].width = min(longest + 2, MAX_COLUMN_WIDTH)


def serialize(dataset: MergedDataset, fmt: str) -> bytes:
    if fmt == "csv":
        return to_csv_bytes(dataset)
    if fmt == "excel":
        return to_excel_bytes(dataset)
    raise ValueError(f"Unknown export format '{fmt}' (expected one of {sorted(EXPORT_EXTENSIONS)})")


# ──────────────────────────────────────────
# Delivery
# ──────────────────────────────────────────

@dataclass
class ExportResult:
    location:      str
    fallback_used: bool
    size:          int


class DirectorySink:
    """Fallback delivery into a fixed directory, keeping the file's basename."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def deliver(self, payload: bytes, filename: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / filename
        if target.exists():
            base, ext = os.path.splitext(filename)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            target = self.directory / f"{base}_{timestamp}{ext}"
        target.write_bytes(payload)
        return str(target)


@dataclass
class MemorySink:
    """Fallback delivery that keeps the bytes in process."""
    files: Dict[str, bytes] = field(default_factory=dict)

    def deliver(self, payload: bytes, filename: str) -> str:
        self.files[filename] = payload
        return f"memory://{filename}"


def write_export(
    payload: bytes,
    destination: Union[str, Path],
    fallback: Optional[Union[DirectorySink, MemorySink]] = None,
) -> ExportResult:
    """
    Write payload to destination; on failure hand it to the fallback sink.

    Raises:
        WriteFailure: when the primary write fails and there is no fallback,
            or the fallback fails as well.
    """
    destination = Path(destination)
    try:
        destination.write_bytes(payload)
        LOGGER.info("Exported %d bytes to %s", len(payload), destination)
        return ExportResult(location=str(destination), fallback_used=False, size=len(payload))
    except OSError as exc:
        if fallback is None:
            raise WriteFailure(f"Could not write '{destination}': {exc}") from exc
        LOGGER.warning("Could not write %s (%s); using fallback delivery", destination, exc)

    try:
        location = fallback.deliver(payload, destination.name)
    except OSError as exc:
        raise WriteFailure(f"Fallback delivery of '{destination.name}' failed: {exc}") from exc

    LOGGER.info("Exported %d bytes to %s (fallback)", len(payload), location)
    return ExportResult(location=location, fallback_used=True, size=len(payload))
