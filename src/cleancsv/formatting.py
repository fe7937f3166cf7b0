"""
Text formatting operations.

Each formatter takes rows and a list of columns and rewrites those columns
in every row. Only cells whose value actually changes are counted in
``modified_count``.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Mapping, Sequence

from .records import OperationResult, Row, cell, pluralize

_WHITESPACE_RUN = re.compile(r"\s+")


def _title_case(value: str) -> str:
    # Only single spaces separate words; punctuation does not.
    return " ".join(word[:1].upper() + word[1:] for word in value.lower().split(" "))


def _trim(value: str) -> str:
    return _WHITESPACE_RUN.sub(" ", value.strip())


def _apply_format(
    rows: Sequence[Mapping[str, str]],
    columns: Sequence[str],
    format_fn: Callable[[str], str],
    label: str,
) -> OperationResult:
    modified = 0
    new_rows: List[Row] = []

    for row in rows:
        new_row = dict(row)
        for column in columns:
            original = cell(row, column)
            formatted = format_fn(original)
            if formatted != original:
                modified += 1
            new_row[column] = formatted
        new_rows.append(new_row)

    if modified:
        message = f"{pluralize(modified, 'cell')} formatted to {label}"
    else:
        message = "No changes needed"

    return OperationResult(
        data=new_rows,
        original_count=len(rows),
        new_count=len(new_rows),
        removed_count=0,
        modified_count=modified,
        message=message,
    )


def to_lowercase(rows: Sequence[Mapping[str, str]], columns: Sequence[str]) -> OperationResult:
    return _apply_format(rows, columns, str.lower, "lowercase")


def to_uppercase(rows: Sequence[Mapping[str, str]], columns: Sequence[str]) -> OperationResult:
    return _apply_format(rows, columns, str.upper, "UPPERCASE")


def to_title_case(rows: Sequence[Mapping[str, str]], columns: Sequence[str]) -> OperationResult:
    """'jOHN   doe' -> 'John   Doe' (spacing is left alone; use trim for that)."""
    return _apply_format(rows, columns, _title_case, "Title Case")


def trim_whitespace(rows: Sequence[Mapping[str, str]], columns: Sequence[str]) -> OperationResult:
    """Strip both ends and collapse inner whitespace runs to a single space."""
    return _apply_format(rows, columns, _trim, "trimmed")


FORMATTERS: Dict[str, Callable[[Sequence[Mapping[str, str]], Sequence[str]], OperationResult]] = {
    "lowercase": to_lowercase,
    "uppercase": to_uppercase,
    "titlecase": to_title_case,
    "trim": trim_whitespace,
}


def format_text(
    rows: Sequence[Mapping[str, str]],
    columns: Sequence[str],
    style: str,
) -> OperationResult:
    """Dispatch to one of `FORMATTERS` by name."""
    try:
        formatter = FORMATTERS[style]
    except KeyError:
        raise ValueError(
            f"style must be one of {', '.join(sorted(FORMATTERS))}, got {style!r}"
        ) from None
    return formatter(rows, columns)
