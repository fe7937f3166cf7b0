"""
Combine several decoded files into one table.

Columns are the union of every file's columns in first-seen order. Rows keep
file order, then row order, and are filled with ``""`` wherever their source
file lacked a column.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .records import FileData, MergeResult, Row, cell, copy_rows


@dataclass(frozen=True)
class ColumnCompatibility:
    compatible: bool
    missing_columns: Dict[str, List[str]] = field(default_factory=dict)


def union_columns(files: Sequence[FileData]) -> List[str]:
    columns: List[str] = []
    seen = set()
    for file in files:
        for column in file.columns:
            if column not in seen:
                seen.add(column)
                columns.append(column)
    return columns


def merge_files(files: Sequence[FileData]) -> MergeResult:
    """
    Merge `files` into a single set of rows.

    Zero files gives an empty result and one file is passed through with
    its own columns. Merging never drops or edits rows, so
    ``removed_count`` and ``modified_count`` are always 0.
    """
    if not files:
        return MergeResult(
            data=[],
            original_count=0,
            new_count=0,
            removed_count=0,
            modified_count=0,
            message="No files to merge",
            columns=[],
            file_count=0,
        )

    if len(files) == 1:
        only = files[0]
        return MergeResult(
            data=copy_rows(only.rows),
            original_count=len(only.rows),
            new_count=len(only.rows),
            removed_count=0,
            modified_count=0,
            message="Only one file provided",
            columns=list(only.columns),
            file_count=1,
        )

    columns = union_columns(files)
    merged: List[Row] = []
    total_original = 0

    for file in files:
        total_original += len(file.rows)
        for row in file.rows:
            merged.append({column: cell(row, column) for column in columns})

    return MergeResult(
        data=merged,
        original_count=total_original,
        new_count=len(merged),
        removed_count=0,
        modified_count=0,
        message=f"{len(files)} files merged, {len(merged)} total rows",
        columns=columns,
        file_count=len(files),
    )


def check_column_compatibility(files: Sequence[FileData]) -> ColumnCompatibility:
    """
    Report, per file after the first, which reference columns it lacks.

    The reference starts as the first file's columns and picks up any new
    column seen along the way, so a later file is also checked against
    columns introduced by the files before it. Advisory only; merging
    incompatible files still works.
    """
    if len(files) < 2:
        return ColumnCompatibility(compatible=True)

    reference: List[str] = list(files[0].columns)
    reference_set = set(reference)
    missing_columns: Dict[str, List[str]] = {}

    for file in files[1:]:
        file_columns = set(file.columns)
        missing = [column for column in reference if column not in file_columns]
        if missing:
            missing_columns[file.filename] = missing

        for column in file.columns:
            if column not in reference_set:
                reference_set.add(column)
                reference.append(column)

    return ColumnCompatibility(
        compatible=not missing_columns,
        missing_columns=missing_columns,
    )
