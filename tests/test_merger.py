import io
from pathlib import Path

import pandas as pd
import pytest
from openpyxl import load_workbook

from core.errors import ExportError, MergeError
from core.formatter import MemorySink
from core.merger import NOT_ANALYZED_STATUS, MergeSession, batch_status
from core.models import FileBlob


@pytest.fixture
def session(tmp_path):
    return MergeSession(export_dir=tmp_path / "exports")


def test_end_to_end_csv(session, people_files, tmp_path):
    session.add_sources(people_files)

    assert session.analyze() == ["City", "Name"]
    summary = session.merge()
    assert session.merged == [["City", "Name"], ["NYC", "Alice"], ["LA", "Bob"]]
    assert (summary.files_merged, summary.row_count, summary.column_count) == (2, 2, 2)

    target = tmp_path / "merged.csv"
    result = session.export("csv", target)

    assert not result.fallback_used
    assert target.read_bytes() == b'"City","Name"\n"NYC","Alice"\n"LA","Bob"'
    assert session.export_status() == f"Exported to: {target}"


def test_mixed_csv_and_excel(session, write_file, xlsx_bytes):
    csv_path = write_file("a.csv", "Name,Age,City\nAlice,30,NYC\n")
    blob = FileBlob(
        "b.xlsx",
        xlsx_bytes([("Data", pd.DataFrame({"Name": ["Bob"], "City": ["LA"], "Zip": [90001]}))]),
    )

    session.add_sources([csv_path, blob])
    session.analyze()
    session.merge()

    assert session.merged == [["City", "Name"], ["NYC", "Alice"], ["LA", "Bob"]]


def test_export_excel_to_default_location(session):
    session.add_sources([FileBlob("a.csv", b"Key,Value\nk1,v1\nk2,v2\n")])
    session.analyze()
    session.merge()

    result = session.export("excel")

    location = Path(result.location)
    assert location.parent == session.export_dir
    assert location.name.startswith("merged_data_") and location.suffix == ".xlsx"
    wb = load_workbook(io.BytesIO(location.read_bytes()))
    assert wb.sheetnames == ["Merged Data"]
    assert [list(r) for r in wb.active.iter_rows(values_only=True)] == [
        ["Key", "Value"],
        ["k1", "v1"],
        ["k2", "v2"],
    ]


def test_export_fallback(session, tmp_path):
    session.add_sources([FileBlob("a.csv", b"k\n1\n")])
    session.analyze()
    session.merge()
    sink = MemorySink()

    result = session.export("csv", tmp_path / "nope" / "out.csv", fallback=sink)

    assert result.fallback_used
    assert sink.files["out.csv"] == b'"k"\n"1"'


def test_remove_resets_analysis(session, people_files):
    session.add_sources(people_files)
    session.analyze()
    assert session.analysis_status() == "Found 2 shared columns"
    assert session.can_merge

    session.remove([0])

    assert session.shared_columns is None
    assert session.analysis_status() == NOT_ANALYZED_STATUS
    assert not session.can_merge
    assert [f.name for f in session.files] == ["b.csv"]
    assert session.analyze() == ["City", "Name", "Zip"]


def test_no_shared_columns(session):
    session.add_sources([FileBlob("a.csv", b"a\n1\n"), FileBlob("b.csv", b"b\n2\n")])

    assert session.analyze() == []
    assert session.analysis_status() == "No shared columns found"
    assert not session.can_merge
    with pytest.raises(MergeError):
        session.merge()


def test_merge_requires_files_and_analysis(session, people_files):
    with pytest.raises(MergeError):
        session.merge()

    session.add_sources(people_files)
    with pytest.raises(MergeError):
        session.merge()


def test_export_requires_merge(session, people_files):
    session.add_sources(people_files)
    session.analyze()

    assert not session.can_export
    with pytest.raises(ExportError):
        session.export("csv")


def test_status_texts(session, people_files):
    assert session.upload_status() == "No files uploaded"
    assert not session.can_analyze

    session.add_sources(people_files)
    assert session.upload_status() == "2 file(s) uploaded"
    assert session.can_analyze

    session.analyze()
    session.merge()
    assert session.merge_status() == "Successfully merged 2 files!\nTotal rows: 2\nTotal columns: 2"


def test_batch_status_reports_skipped_and_failed(session, write_file):
    result = session.add_sources([
        write_file("ok.csv", "a\n1\n"),
        write_file("skip.txt", "x"),
        write_file("empty.csv", ""),
    ])

    assert batch_status(result) == "1 file(s) added; 1 unsupported file(s) skipped; 1 failed (empty.csv)"


def test_dialog_guard_blocks_reentry_and_always_releases(session):
    with session.begin_dialog() as first:
        assert first
        with session.begin_dialog() as second:
            assert not second
        assert session.dialog_open
    assert not session.dialog_open

    with pytest.raises(RuntimeError):
        with session.begin_dialog():
            raise RuntimeError("dialog crashed")
    assert not session.dialog_open

    with session.begin_dialog() as again:
        assert again
