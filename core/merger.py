# core/merger.py

"""
Session facade: owns the loaded files, the shared-column analysis and the
merged dataset, and runs read -> analyze -> merge -> export on request.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .analyzer import find_shared_columns
from .config import EXPORT_DIR
from .errors import ExportError, MergeError
from .formatter import DirectorySink, ExportResult, MemorySink, serialize, write_export
from .merge_service import MergeSummary, merge_files, summarize
from .models import LoadedFile, MergedDataset
from .reader import Source
from .registry import BatchResult, FileRegistry
from .utils import default_export_name

LOGGER = logging.getLogger(__name__)

NOT_ANALYZED_STATUS = "Click 'Analyze Columns' to detect shared columns"


class MergeSession:
    """
    All state for one merge window. Nothing here is shared between sessions.
    """

    def __init__(self, export_dir: Optional[Union[str, Path]] = None) -> None:
        self.registry = FileRegistry()
        # None until analyze() runs; reset whenever files are removed
        self.shared_columns: Optional[List[str]] = None
        self.merged: Optional[MergedDataset] = None
        self.last_summary: Optional[MergeSummary] = None
        self.last_export: Optional[ExportResult] = None
        self.export_dir = Path(export_dir) if export_dir else EXPORT_DIR
        self._dialog_open = False

    # ──────────────────────────────────────────
    # Dialog guard
    # ──────────────────────────────────────────

    @property
    def dialog_open(self) -> bool:
        return self._dialog_open

    @contextmanager
    def begin_dialog(self) -> Iterator[bool]:
        """
        Yields True when the caller may open a file dialog, False when one is
        already open. The flag is always released on exit.
        """
        if self._dialog_open:
            yield False
            return
        self._dialog_open = True
        try:
            yield True
        finally:
            self._dialog_open = False

    # ──────────────────────────────────────────
    # Files
    # ──────────────────────────────────────────

    @property
    def files(self) -> List[LoadedFile]:
        return self.registry.list()

    def add_sources(self, sources: Iterable[Source]) -> BatchResult:
        result = self.registry.add_many(sources)
        LOGGER.info(
            "Batch added: %d loaded, %d skipped, %d failed",
            result.loaded_count, result.skipped_count, result.failed_count,
        )
        return result

    def remove(self, indices: Iterable[int]) -> List[LoadedFile]:
        removed = self.registry.remove(indices)
        self.shared_columns = None
        return removed

    # ──────────────────────────────────────────
    # Pipeline
    # ──────────────────────────────────────────

    def analyze(self) -> List[str]:
        self.shared_columns = find_shared_columns(self.registry.list())
        LOGGER.info("Shared columns (%d): %s", len(self.shared_columns), ", ".join(self.shared_columns))
        return self.shared_columns

    def merge(self) -> MergeSummary:
        loaded = self.registry.loaded()
        if not loaded:
            raise MergeError("No files loaded")
        if not self.shared_columns:
            raise MergeError("No shared columns to merge on; analyze the columns first")

        self.merged = merge_files(loaded, self.shared_columns)
        self.last_summary = summarize(self.merged, files_merged=len(loaded))
        LOGGER.info(
            "Merged %d files: %d rows, %d columns",
            self.last_summary.files_merged, self.last_summary.row_count, self.last_summary.column_count,
        )
        return self.last_summary

    def export(
        self,
        fmt: str,
        destination: Optional[Union[str, Path]] = None,
        fallback: Optional[Union[DirectorySink, MemorySink]] = None,
    ) -> ExportResult:
        """
        Serialize the merged dataset ("csv" or "excel") and write it out.

        Without a destination the file lands in the export directory under the
        generated default name.
        """
        if not self.merged:
            raise ExportError("Please merge files first")

        payload = serialize(self.merged, fmt)
        if destination is None:
            destination = self.export_dir / default_export_name(fmt)
        if fallback is None:
            fallback = DirectorySink(self.export_dir)

        self.last_export = write_export(payload, destination, fallback)
        return self.last_export

    # ──────────────────────────────────────────
    # Button states & status text
    # ──────────────────────────────────────────

    @property
    def can_analyze(self) -> bool:
        return len(self.registry) > 0

    @property
    def can_merge(self) -> bool:
        return bool(self.registry.loaded()) and bool(self.shared_columns)

    @property
    def can_export(self) -> bool:
        return bool(self.merged)

    def upload_status(self) -> str:
        count = len(self.registry)
        if count == 0:
            return "No files uploaded"
        return f"{count} file(s) uploaded"

    def analysis_status(self) -> str:
        if self.shared_columns is None:
            return NOT_ANALYZED_STATUS
        if self.shared_columns:
            return f"Found {len(self.shared_columns)} shared columns"
        return "No shared columns found"

    def merge_status(self) -> str:
        if self.last_summary is None:
            return ""
        s = self.last_summary
        return (
            f"Successfully merged {s.files_merged} files!\n"
            f"Total rows: {s.row_count}\n"
            f"Total columns: {s.column_count}"
        )

    def export_status(self) -> str:
        if self.last_export is None:
            return ""
        return f"Exported to: {self.last_export.location}"


def batch_status(result: BatchResult) -> str:
    """One-line summary of an add batch, including skipped and failed counts."""
    parts = [f"{result.loaded_count} file(s) added"]
    if result.skipped_count:
        parts.append(f"{result.skipped_count} unsupported file(s) skipped")
    if result.failed_count:
        names = ", ".join(name for name, _ in result.failed)
        parts.append(f"{result.failed_count} failed ({names})")
    return "; ".join(parts)
