from cleancsv.merge import check_column_compatibility, merge_files, union_columns
from cleancsv.records import FileData


def _file(name, columns, rows):
    return FileData(rows=rows, columns=columns, filename=name)


# -------------------------------------------------------------------
# merge_files
# -------------------------------------------------------------------


def test_merge_no_files():
    result = merge_files([])

    assert result.data == []
    assert result.columns == []
    assert result.file_count == 0
    assert result.original_count == 0
    assert result.message == "No files to merge"


def test_merge_single_file_is_pass_through():
    rows = [{"a": "1", "b": "2"}]
    result = merge_files([_file("one.csv", ["a", "b"], rows)])

    assert result.data == rows
    assert result.columns == ["a", "b"]
    assert result.file_count == 1
    assert result.new_count == 1
    assert result.message == "Only one file provided"


def test_merge_unions_columns_in_first_seen_order():
    files = [
        _file("a.csv", ["name", "email"], [{"name": "John", "email": "j@x.com"}]),
        _file("b.csv", ["email", "phone"], [{"email": "b@x.com", "phone": "123"}]),
        _file("c.csv", ["city", "name"], [{"city": "Oslo", "name": "Kari"}]),
    ]

    result = merge_files(files)

    assert result.columns == ["name", "email", "phone", "city"]
    assert result.data == [
        {"name": "John", "email": "j@x.com", "phone": "", "city": ""},
        {"name": "", "email": "b@x.com", "phone": "123", "city": ""},
        {"name": "Kari", "email": "", "phone": "", "city": "Oslo"},
    ]


def test_merge_counts_and_message():
    files = [
        _file("a.csv", ["x"], [{"x": "1"}, {"x": "2"}]),
        _file("b.csv", ["y"], [{"y": "3"}]),
    ]

    result = merge_files(files)

    assert result.original_count == 3
    assert result.new_count == 3
    assert result.removed_count == 0
    assert result.modified_count == 0
    assert result.file_count == 2
    assert result.message == "2 files merged, 3 total rows"


def test_merge_keeps_file_then_row_order():
    files = [
        _file("a.csv", ["x"], [{"x": "a1"}, {"x": "a2"}]),
        _file("b.csv", ["x"], [{"x": "b1"}]),
    ]

    assert [r["x"] for r in merge_files(files).data] == ["a1", "a2", "b1"]


def test_merge_does_not_touch_inputs():
    row = {"x": "1"}
    files = [_file("a.csv", ["x"], [row]), _file("b.csv", ["y"], [{"y": "2"}])]

    merge_files(files)

    assert row == {"x": "1"}


def test_union_columns():
    files = [_file("a", ["a", "b"], []), _file("b", ["b", "c", "a"], [])]

    assert union_columns(files) == ["a", "b", "c"]


# -------------------------------------------------------------------
# check_column_compatibility
# -------------------------------------------------------------------


def test_compatibility_fewer_than_two_files():
    result = check_column_compatibility([_file("a", ["x"], [])])

    assert result.compatible
    assert result.missing_columns == {}


def test_compatibility_identical_columns():
    files = [_file("a", ["x", "y"], []), _file("b", ["y", "x"], [])]

    assert check_column_compatibility(files).compatible


def test_compatibility_reports_missing_reference_columns():
    files = [
        _file("a.csv", ["name", "email"], []),
        _file("b.csv", ["email", "phone"], []),
        _file("c.csv", ["name", "email"], []),
    ]

    result = check_column_compatibility(files)

    assert not result.compatible
    assert result.missing_columns == {
        "b.csv": ["name"],
        # "phone" joined the reference set when b.csv was checked.
        "c.csv": ["phone"],
    }
