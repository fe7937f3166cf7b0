import pytest

from cleancsv.formatting import (
    format_text,
    to_lowercase,
    to_title_case,
    to_uppercase,
    trim_whitespace,
)


# -------------------------------------------------------------------
# case mapping
# -------------------------------------------------------------------


def test_to_lowercase_only_touches_requested_columns():
    rows = [
        {"name": "JOHN DOE", "email": "TEST@EXAMPLE.COM"},
        {"name": "Jane Smith", "email": "jane@test.org"},
    ]

    result = to_lowercase(rows, ["name"])

    assert result.data[0] == {"name": "john doe", "email": "TEST@EXAMPLE.COM"}
    assert result.data[1]["name"] == "jane smith"
    assert result.modified_count == 2
    assert result.message == "2 cells formatted to lowercase"


def test_to_lowercase_counts_only_changed_cells():
    rows = [{"name": "JOHN"}, {"name": "jane"}]

    assert to_lowercase(rows, ["name"]).modified_count == 1


def test_no_changes_needed_message():
    result = to_lowercase([{"name": "john"}], ["name"])

    assert result.modified_count == 0
    assert result.message == "No changes needed"


def test_to_uppercase_singular_message():
    result = to_uppercase([{"name": "john"}], ["name"])

    assert result.data[0]["name"] == "JOHN"
    assert result.message == "1 cell formatted to UPPERCASE"


def test_lowercase_then_uppercase_equals_uppercase():
    rows = [{"x": "MiXeD case"}, {"x": "ALL"}, {"x": ""}]

    via_lower = to_uppercase(to_lowercase(rows, ["x"]).data, ["x"]).data

    assert via_lower == to_uppercase(rows, ["x"]).data


# -------------------------------------------------------------------
# title case
# -------------------------------------------------------------------


def test_to_title_case():
    rows = [{"name": "john doe"}, {"name": "JANE SMITH"}, {"name": "john"}]

    result = to_title_case(rows, ["name"])

    assert [r["name"] for r in result.data] == ["John Doe", "Jane Smith", "John"]
    assert result.message == "3 cells formatted to Title Case"


def test_to_title_case_splits_on_spaces_only():
    rows = [{"name": "o'neil-smith  jr."}]

    result = to_title_case(rows, ["name"])

    assert result.data[0]["name"] == "O'neil-smith  Jr."


# -------------------------------------------------------------------
# trim
# -------------------------------------------------------------------


def test_trim_whitespace_strips_and_collapses():
    rows = [{"name": "  john    doe  "}, {"name": "a\t\tb\nc"}]

    result = trim_whitespace(rows, ["name"])

    assert [r["name"] for r in result.data] == ["john doe", "a b c"]
    assert result.message == "2 cells formatted to trimmed"


def test_trim_whitespace_multiple_columns():
    rows = [{"name": "  john  ", "email": "  test@example.com  "}]

    result = trim_whitespace(rows, ["name", "email"])

    assert result.data[0] == {"name": "john", "email": "test@example.com"}
    assert result.modified_count == 2


def test_trim_is_idempotent():
    rows = [{"x": "  a   b "}, {"x": "c"}]

    once = trim_whitespace(rows, ["x"])
    twice = trim_whitespace(once.data, ["x"])

    assert twice.data == once.data
    assert twice.modified_count == 0


# -------------------------------------------------------------------
# missing values / dispatch
# -------------------------------------------------------------------


def test_missing_column_is_filled_and_not_counted():
    rows = [{"name": "john"}]

    result = to_uppercase(rows, ["email"])

    assert result.data == [{"name": "john", "email": ""}]
    assert result.modified_count == 0


def test_input_rows_are_not_mutated():
    rows = [{"name": "john"}]

    to_uppercase(rows, ["name"])

    assert rows == [{"name": "john"}]


def test_format_text_dispatch():
    rows = [{"name": "john doe"}]

    assert format_text(rows, ["name"], "titlecase").data[0]["name"] == "John Doe"
    assert format_text(rows, ["name"], "uppercase").data[0]["name"] == "JOHN DOE"


def test_format_text_unknown_style():
    with pytest.raises(ValueError):
        format_text([{"a": "b"}], ["a"], "sarcasm")
