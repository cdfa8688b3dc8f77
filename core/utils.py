# core/utils.py
import os
import re
from datetime import datetime, timezone
from typing import Optional

import pandas as pd

from .config import EXPORT_BASENAME, EXPORT_EXTENSIONS, UNNAMED_COLUMN
from .models import stringify_cell

_WHITESPACE_RUN = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE = re.compile(r"\s")


def _is_empty(val) -> bool:
    """True if value is None, NaN, False, zero or an empty string."""
    if val is None:
        return True
    if isinstance(val, bool):
        return not val
    if isinstance(val, float) and pd.isna(val):
        return True
    if isinstance(val, (int, float)) and val == 0:
        return True
    if isinstance(val, str) and val == "":
        return True
    return False


def clean_column_name(value) -> str:
    """
    Turn a raw header cell into a stable column identifier.

    "First Name!" -> "First_Name", "  a   b  " -> "a_b", "" / 0 -> "Unnamed_Column".
    Two different headers may clean to the same name; nothing is deduplicated here.
    """
    if _is_empty(value):
        return UNNAMED_COLUMN

    cleaned = stringify_cell(value).strip()
    cleaned = _WHITESPACE_RUN.sub(" ", cleaned)
    cleaned = _DISALLOWED.sub("", cleaned)
    cleaned = _WHITESPACE.sub("_", cleaned)

    return cleaned or UNNAMED_COLUMN


def file_extension(name: str) -> str:
    """Lower-cased extension without the dot ("Report.XLSX" -> "xlsx")."""
    _, ext = os.path.splitext(name)
    return ext[1:].lower()


def display_name(path: str) -> str:
    return os.path.basename(path) or path


def default_export_name(fmt: str, now: Optional[datetime] = None) -> str:
    """
    Build "merged_data_<timestamp>.<ext>" where the timestamp is the UTC
    ISO-8601 instant truncated to seconds, colons replaced by hyphens.
    """
    if fmt not in EXPORT_EXTENSIONS:
        raise ValueError(f"Unknown export format '{fmt}'")

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H:%M:%S").replace(":", "-")
    return f"{EXPORT_BASENAME}_{stamp}.{EXPORT_EXTENSIONS[fmt]}"
