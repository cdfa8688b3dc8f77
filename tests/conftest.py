import io
import sys
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def xlsx_bytes():
    """Build workbook bytes with one sheet per (sheet_name, DataFrame) pair."""

    def _build(frames):
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            for sheet_name, frame in frames:
                frame.to_excel(writer, sheet_name=sheet_name, index=False)
        return buffer.getvalue()

    return _build


@pytest.fixture
def write_file(tmp_path):
    """Write bytes or text under tmp_path and return the path as a string."""

    def _write(name, content):
        path = tmp_path / name
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return str(path)

    return _write


@pytest.fixture
def people_files(write_file):
    """File A: Name, Age, City. File B: Name, City, Zip. One data row each."""
    file_a = write_file("a.csv", "Name,Age,City\nAlice,30,NYC\n")
    file_b = write_file("b.csv", "Name,City,Zip\nBob,LA,90001\n")
    return file_a, file_b
