# core/__init__.py

from .merger        import MergeSession, batch_status
from .registry      import FileRegistry, BatchResult
from .reader        import load_source, parse_csv_line, read_csv_bytes, read_excel_bytes
from .utils         import clean_column_name, default_export_name
from .analyzer      import find_shared_columns
from .merge_service import merge_files, MergeSummary
from .formatter     import to_csv_bytes, to_excel_bytes, write_export, DirectorySink, MemorySink, ExportResult
from .models        import FileBlob, FileKind, FileStatus, LoadedFile, stringify_cell
from .errors        import (
    ConcordError,
    UnsupportedFileType,
    EmptyInput,
    ReadFailure,
    WriteFailure,
    MergeError,
    ExportError,
)

__all__ = [
    "MergeSession",
    "batch_status",
    "FileRegistry",
    "BatchResult",
    "load_source",
    "parse_csv_line",
    "read_csv_bytes",
    "read_excel_bytes",
    "clean_column_name",
    "default_export_name",
    "find_shared_columns",
    "merge_files",
    "MergeSummary",
    "to_csv_bytes",
    "to_excel_bytes",
    "write_export",
    "DirectorySink",
    "MemorySink",
    "ExportResult",
    "FileBlob",
    "FileKind",
    "FileStatus",
    "LoadedFile",
    "stringify_cell",
    "ConcordError",
    "UnsupportedFileType",
    "EmptyInput",
    "ReadFailure",
    "WriteFailure",
    "MergeError",
    "ExportError",
]
