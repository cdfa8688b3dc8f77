"""
Concord configuration: constants, file-dialog filters, environment overrides.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Input files
# ---------------------------------------------------------------------------
CSV_EXTENSIONS = {"csv"}
SPREADSHEET_EXTENSIONS = {"xlsx", "xls"}
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS | SPREADSHEET_EXTENSIONS

# pandas read_excel engine per spreadsheet extension
EXCEL_ENGINES = {
    "xlsx": "openpyxl",
    "xls": "calamine",
}

OPEN_DIALOG_FILETYPES = [
    ("Excel Files", "*.xlsx *.xls"),
    ("CSV Files", "*.csv"),
    ("All Files", "*.*"),
]

# ---------------------------------------------------------------------------
# Column names
# ---------------------------------------------------------------------------
UNNAMED_COLUMN = "Unnamed_Column"

# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------
MERGED_SHEET_NAME = "Merged Data"
EXPORT_BASENAME = "merged_data"
EXPORT_EXTENSIONS = {
    "csv": "csv",
    "excel": "xlsx",
}
SAVE_DIALOG_FILETYPES = {
    "csv": [("CSV Files", "*.csv")],
    "excel": [("Excel Files", "*.xlsx")],
}


def _default_export_dir() -> Path:
    downloads = Path.home() / "Downloads"
    return downloads if downloads.is_dir() else Path.home()


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------
EXPORT_DIR = Path(os.environ.get("CONCORD_EXPORT_DIR", str(_default_export_dir())))
LOG_LEVEL = os.environ.get("CONCORD_LOG_LEVEL", "INFO").upper()
APPEARANCE_MODE = os.environ.get("CONCORD_APPEARANCE", "dark").lower()
