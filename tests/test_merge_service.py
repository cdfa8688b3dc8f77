from core.merge_service import merge_files, summarize
from core.models import FileKind, FileStatus, LoadedFile
from core.utils import clean_column_name


def make_file(rows, status=FileStatus.LOADED, name="f.csv"):
    return LoadedFile(
        name=name,
        source_path=None,
        kind=FileKind.CSV,
        rows=[list(r) for r in rows],
        columns=[clean_column_name(c) for c in rows[0]] if rows else [],
        status=status,
    )


def test_example_scenario():
    a = make_file([["Name", "Age", "City"], ["Alice", "30", "NYC"]])
    b = make_file([["Name", "City", "Zip"], ["Bob", "LA", "90001"]])

    merged = merge_files([a, b], ["City", "Name"])

    assert merged == [["City", "Name"], ["NYC", "Alice"], ["LA", "Bob"]]


def test_row_and_column_counts():
    a = make_file([["x", "y"], [1, 2], [3, 4], [5, 6]])
    b = make_file([["y", "x", "z"], [7, 8, 9]])
    c = make_file([["x", "y"]])

    merged = merge_files([a, b, c], ["x", "y"])

    assert len(merged) - 1 == a.row_count + b.row_count + c.row_count
    assert all(len(row) == 2 for row in merged)
    assert merged[1:] == [[1, 2], [3, 4], [5, 6], [8, 7]]


def test_rows_keep_registry_and_file_order_without_dedup():
    a = make_file([["k"], ["1"], ["1"]])
    b = make_file([["k"], ["0"]])

    assert merge_files([a, b], ["k"]) == [["k"], ["1"], ["1"], ["0"]]
    assert merge_files([b, a], ["k"]) == [["k"], ["0"], ["1"], ["1"]]


def test_missing_column_and_short_rows_give_empty():
    a = make_file([["a", "b", "c"], ["1", "2"]])

    merged = merge_files([a], ["a", "c", "missing"])

    assert merged == [["a", "c", "missing"], ["1", None, None]]


def test_duplicate_cleaned_names_use_first_position():
    a = make_file([["First Name", "First Name?", "Age"], ["Alice", "ignored", "30"]])

    assert merge_files([a], ["First_Name"]) == [["First_Name"], ["Alice"]]


def test_repeated_shared_name_keeps_row_width():
    a = make_file([["x", "y"], [1, 2], [3]])

    merged = merge_files([a], ["x", "y", "x"])

    assert merged == [["x", "y", "x"], [1, 2, 1], [3, None, 3]]
    assert all(len(row) == 3 for row in merged)


def test_mixed_scalars_are_carried_through():
    a = make_file([["v"], [1], [2.5], [True], [None], ["text"]])

    assert merge_files([a], ["v"])[1:] == [[1], [2.5], [True], [None], ["text"]]


def test_error_files_and_files_without_rows_are_skipped():
    ok = make_file([["v"], ["kept"]])
    broken = make_file([["v"], ["dropped"]], status=FileStatus.ERROR)
    empty = LoadedFile("e.csv", None, FileKind.CSV, rows=[], columns=[])

    assert merge_files([ok, broken, empty], ["v"]) == [["v"], ["kept"]]


def test_no_files_gives_header_only():
    assert merge_files([], ["a"]) == [["a"]]


def test_no_shared_columns_keeps_one_empty_row_per_data_row():
    a = make_file([["a"], ["1"], ["2"]])
    b = make_file([["b"], ["3"]])

    assert merge_files([a, b], []) == [[], [], [], []]


def test_summarize():
    merged = [["a", "b"], [1, 2], [3, 4]]
    summary = summarize(merged, files_merged=2)
    assert (summary.files_merged, summary.row_count, summary.column_count) == (2, 2, 2)
