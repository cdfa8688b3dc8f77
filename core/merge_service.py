# core/merge_service.py

from dataclasses import dataclass
from typing import Dict, List, Sequence

import pandas as pd

from .models import LoadedFile, MergedDataset, to_scalar


@dataclass
class MergeSummary:
    files_merged: int
    row_count:    int
    column_count: int


def _first_positions(columns: Sequence[str]) -> Dict[str, int]:
    """Map each column name to the first position it occupies."""
    positions: Dict[str, int] = {}
    for idx, name in enumerate(columns):
        positions.setdefault(name, idx)
    return positions


def project_file(file: LoadedFile, shared_columns: Sequence[str]) -> pd.DataFrame:
    """
    Re-project one file's data rows onto the shared columns.

    Columns are keyed by output slot, so a repeated name keeps its own column.
    Names missing from the file, or rows too short to reach a column, give None.
    """
    data_rows = file.rows[1:]
    frame = pd.DataFrame(data_rows, dtype=object)
    positions = _first_positions(file.columns)

    slots = {}
    for slot, name in enumerate(shared_columns):
        pos = positions.get(name)
        if pos is not None and pos in frame.columns:
            slots[slot] = frame[pos]
        else:
            slots[slot] = None
    return pd.DataFrame(slots, index=frame.index, dtype=object)


def merge_files(
    files: Sequence[LoadedFile],
    shared_columns: Sequence[str],
) -> MergedDataset:
    """
    Concatenate every loaded file's data rows, restricted to the shared columns.

    Args:
      files: files in registry order; only LOADED files with rows take part.
      shared_columns: output column order, written as the header row.

    Returns:
      Array-of-arrays whose first row is the header.
    """
    header = list(shared_columns)

    # 1) Project each file on its own
    prepared: List[pd.DataFrame] = []
    for file in files:
        if not file.is_loaded or not file.rows:
            continue
        projected = project_file(file, header)
        if len(projected):
            prepared.append(projected)

    if not prepared:
        return [header]

    # a frame without columns still carries one (empty) row per data row
    if not header:
        return [header] + [[] for frame in prepared for _ in range(len(frame))]

    # 2) Stack in registry order
    merged = pd.concat(prepared, ignore_index=True)

    # 3) Back to plain rows
    body = [[to_scalar(v) for v in row] for row in merged.itertuples(index=False, name=None)]
    return [header] + body


def summarize(merged: MergedDataset, files_merged: int) -> MergeSummary:
    return MergeSummary(
        files_merged=files_merged,
        row_count=max(len(merged) - 1, 0),
        column_count=len(merged[0]) if merged else 0,
    )
