# core/errors.py

class ConcordError(Exception):
    """Base class for every error raised by the merge pipeline."""


class UnsupportedFileType(ConcordError):
    """The file extension is not one of csv, xlsx, xls."""


class EmptyInput(ConcordError):
    """The file parsed to zero usable rows."""


class ReadFailure(ConcordError):
    """The file bytes could not be read or decoded."""


class WriteFailure(ConcordError):
    """Neither the primary nor the fallback sink could store the export."""


class MergeError(ConcordError):
    """A merge was requested before there was anything to merge."""


class ExportError(ConcordError):
    """An export was requested before a merge produced data."""
