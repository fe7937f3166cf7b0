"""
Record model shared by every cleancsv operation.

A row is an open ``dict`` of column name -> text. Column sets are only known
at load time and differ between files, so rows are never forced into a fixed
structure. The empty string is the single "no value" marker; a missing key is
read as ``""`` via :func:`cell`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

Row = Dict[str, str]


def cell(row: Mapping[str, str], column: str) -> str:
    """Return the value of `column` in `row`, or ``""`` when it is missing."""
    value = row.get(column)
    if value is None:
        return ""
    return value


def copy_rows(rows: Iterable[Mapping[str, str]]) -> List[Row]:
    return [dict(row) for row in rows]


def pluralize(count: int, word: str) -> str:
    """'1 duplicate' / '3 duplicates'."""
    return f"{count} {word}{'' if count == 1 else 's'}"


@dataclass(frozen=True)
class Table:
    """
    An ordered set of rows with an ordered list of unique column names.

    `filename` and `file_size` describe where the table came from and travel
    with every history snapshot.
    """

    rows: Tuple[Row, ...] = ()
    columns: Tuple[str, ...] = ()
    filename: str = ""
    file_size: int = 0

    @classmethod
    def empty(cls) -> "Table":
        return cls()

    @classmethod
    def build(
        cls,
        rows: Iterable[Mapping[str, str]],
        columns: Sequence[str],
        filename: str = "",
        file_size: int = 0,
    ) -> "Table":
        """Build a table from caller data, copying every row."""
        return cls(
            rows=tuple(copy_rows(rows)),
            columns=tuple(columns),
            filename=filename,
            file_size=file_size,
        )

    def with_rows(self, rows: Iterable[Mapping[str, str]]) -> "Table":
        return replace(self, rows=tuple(copy_rows(rows)))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.columns)


@dataclass(frozen=True)
class FileStats:
    filename: str
    row_count: int
    column_count: int
    columns: Tuple[str, ...]
    file_size: int


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a transform or merge.

    Attributes:
        data:
            The resulting rows. Always a new list; the input rows are never
            modified.
        original_count / new_count:
            Row counts before and after.
        removed_count:
            ``original_count - new_count`` for operations that drop rows.
        modified_count:
            Number of changed cells (formatting only).
        message:
            One-line, singular/plural aware summary for the user.
    """

    data: List[Row]
    original_count: int
    new_count: int
    removed_count: int
    modified_count: int
    message: str


@dataclass(frozen=True)
class MergeResult(OperationResult):
    columns: List[str] = field(default_factory=list)
    file_count: int = 0


@dataclass(frozen=True)
class FileData:
    """One decoded input file, as handed to the merge operation."""

    rows: List[Row]
    columns: List[str]
    filename: str
    file_size: int = 0

    @classmethod
    def from_table(cls, table: Table, default_name: str = "current.csv") -> "FileData":
        return cls(
            rows=list(table.rows),
            columns=list(table.columns),
            filename=table.filename or default_name,
            file_size=table.file_size,
        )


@dataclass(frozen=True)
class HighlightedCells:
    """
    Validation feedback overlay for one column.

    `kind` is "error" (e.g. invalid emails) or "warning" (e.g. duplicates).
    Never stored in history.
    """

    column: str
    row_indices: FrozenSet[int]
    kind: str = "error"

    def __post_init__(self) -> None:
        if self.kind not in ("error", "warning"):
            raise ValueError("kind must be 'error' or 'warning'")

    def __contains__(self, row_index: object) -> bool:
        return row_index in self.row_indices


def highlight(column: str, row_indices: Iterable[int], kind: str = "error") -> Optional[HighlightedCells]:
    """Build an overlay, or return None when there is nothing to highlight."""
    indices = frozenset(row_indices)
    if not indices:
        return None
    return HighlightedCells(column=column, row_indices=indices, kind=kind)
