"""
Duplicate-related helpers for cleancsv.

Includes:
- count_duplicates_sorted: generic iterable duplicate counter
- find_duplicate_rows: indices of rows whose key value occurs more than once
- deduplicate: drop repeated key values, first occurrence wins
"""

from __future__ import annotations

from collections import Counter
from typing import Hashable, Iterable, List, Mapping, Sequence, Tuple

from .records import OperationResult, Row, cell, pluralize


def count_duplicates_sorted(
    items: Iterable[Hashable],
    threshold: int = 2,
    reverse: bool = True,
) -> List[Tuple[Hashable, int]]:
    """
    Count occurrences in an iterable and return items whose frequency
    is at or above `threshold`, sorted by count.

    Args:
        items:
            Any iterable of hashable items (str, int, tuple, etc.)
        threshold:
            Minimum count to include in output (default: 2).
        reverse:
            Whether to sort in descending order (default: True).

    Returns:
        A list of (item, count) tuples sorted by frequency.
    """
    counter = Counter(items)
    duplicates = [(k, v) for k, v in counter.items() if v >= threshold]
    duplicates.sort(key=lambda x: x[1], reverse=reverse)
    return duplicates


def _row_key(row: Mapping[str, str], column: str, case_sensitive: bool) -> str:
    value = cell(row, column)
    return value if case_sensitive else value.lower()


def find_duplicate_rows(
    rows: Sequence[Mapping[str, str]],
    *,
    column: str,
    case_sensitive: bool = False,
) -> List[int]:
    """
    Return the indices of all rows that participate in duplicates.

    Every occurrence is reported, including the first one (the same
    rows pandas marks with ``duplicated(keep=False)``).

    Args:
        rows:
            Input rows.
        column:
            Column whose value identifies a row.
        case_sensitive:
            Compare values as-is instead of lower-cased (default: False).

    Returns:
        Sorted list of row indices.
    """
    keys = [_row_key(row, column, case_sensitive) for row in rows]
    repeated = {key for key, _ in count_duplicates_sorted(keys)}
    return [i for i, key in enumerate(keys) if key in repeated]


def deduplicate(
    rows: Sequence[Mapping[str, str]],
    *,
    column: str,
    case_sensitive: bool = False,
) -> OperationResult:
    """
    Drop rows whose value in `column` has already been seen.

    Single pass, first occurrence wins, surviving rows keep their order.
    A missing value counts as ``""``, so all rows lacking the column
    collapse into one.

    Args:
        rows:
            Input rows (not modified).
        column:
            Column to check for duplicates.
        case_sensitive:
            If False (default), "A@b.com" and "a@B.com" are the same key.

    Returns:
        OperationResult with the kept rows and a removal summary.
    """
    seen = set()
    unique_rows: List[Row] = []

    for row in rows:
        key = _row_key(row, column, case_sensitive)
        if key in seen:
            continue
        seen.add(key)
        unique_rows.append(dict(row))

    removed = len(rows) - len(unique_rows)
    if removed:
        message = f"{pluralize(removed, 'duplicate')} removed"
    else:
        message = "No duplicates found"

    return OperationResult(
        data=unique_rows,
        original_count=len(rows),
        new_count=len(unique_rows),
        removed_count=removed,
        modified_count=0,
        message=message,
    )
