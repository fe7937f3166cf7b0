"""
CleaningSession: one table, its undo history, and the operations on it.

The session is given its History and FileLoader at construction; every
operation reads the current table from that history and, when accepted,
pushes the result back into it. Merges start a new history (the column
shape changes); transforms extend the existing one.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .duplicates import deduplicate, find_duplicate_rows
from .emails import EmailValidationResult, remove_invalid_emails, validate_emails
from .exceptions import ColumnNotSelectedError, EmptyDataError
from .formatting import format_text
from .history import History
from .io import ParseResult, csv_filename, excel_filename, export_csv, export_excel
from .loader import FileLoader
from .merge import merge_files
from .records import (
    FileData,
    FileStats,
    HighlightedCells,
    MergeResult,
    OperationResult,
    Row,
    Table,
    copy_rows,
    highlight,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _require_column(column: Optional[str], purpose: str) -> str:
    if not column:
        raise ColumnNotSelectedError(f"Select a column: choose which column {purpose}.")
    return column


class CleaningSession:
    """
    Holds the working table and applies cleaning operations to it.

    Args:
        history:
            Undo/redo history to drive. A new one is created if omitted.
        loader:
            File loader used by :meth:`open` and :meth:`merge`.
    """

    def __init__(
        self,
        history: Optional[History] = None,
        loader: Optional[FileLoader] = None,
    ) -> None:
        self.history = history if history is not None else History()
        self.loader = loader if loader is not None else FileLoader()
        self._highlighted: Optional[HighlightedCells] = None

    # -------------------------
    # Current state
    # -------------------------

    @property
    def table(self) -> Table:
        """A copy of the current snapshot; editing it never touches history."""
        current = self.history.current
        return current.with_rows(current.rows)

    @property
    def rows(self) -> List[Row]:
        return copy_rows(self.history.current.rows)

    @property
    def columns(self) -> List[str]:
        return list(self.table.columns)

    @property
    def filename(self) -> str:
        return self.table.filename

    @property
    def file_size(self) -> int:
        return self.table.file_size

    @property
    def is_loaded(self) -> bool:
        return self.history.is_loaded

    @property
    def file_stats(self) -> Optional[FileStats]:
        return self.history.file_stats

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def highlighted_cells(self) -> Optional[HighlightedCells]:
        return self._highlighted

    def clear_highlight(self) -> None:
        self._highlighted = None

    # -------------------------
    # Loading
    # -------------------------

    def load_table(
        self,
        rows: Sequence[Row],
        columns: Sequence[str],
        filename: str = "",
        file_size: int = 0,
    ) -> None:
        """Install `rows` as a fresh table, discarding any undo history."""
        self.history.load(Table.build(rows, columns, filename, file_size))
        self._highlighted = None
        logger.info("Loaded %s: %d rows, %d columns", filename or "<table>", len(rows), len(columns))

    def open(self, path: PathLike) -> Optional[ParseResult]:
        """
        Load a CSV/TSV file as the working table.

        Returns:
            The decoder's ParseResult, or None if the request was dropped
            because another file is still loading.

        Raises:
            FileValidationError, ParseError: from the loader; nothing changes.
            EmptyDataError: the file has a header but no data rows.
        """
        file_path = Path(path)
        result = self.loader.load(file_path)
        if result is None:
            return None
        if not result.rows:
            raise EmptyDataError("Empty file: the file contains no data rows.")

        self.load_table(result.rows, result.columns, file_path.name, file_path.stat().st_size)
        if result.errors:
            logger.warning("%s: %d rows had issues and were skipped", file_path.name, len(result.errors))
        return result

    # -------------------------
    # Transforms
    # -------------------------

    def _commit(self, result: OperationResult, operation: str) -> OperationResult:
        self.history.mutate(result.data)
        self._highlighted = None
        logger.info("%s: %s", operation, result.message)
        return result

    def deduplicate(self, column: Optional[str], *, case_sensitive: bool = False) -> OperationResult:
        column = _require_column(column, "to check for duplicates")
        result = deduplicate(self.rows, column=column, case_sensitive=case_sensitive)
        return self._commit(result, "deduplicate")

    def format_text(self, columns: Union[str, Sequence[str], None], style: str) -> OperationResult:
        """
        Apply a text format to one or more columns.

        `style` is one of "lowercase", "uppercase", "titlecase", "trim".
        """
        if isinstance(columns, str) or columns is None:
            columns = [_require_column(columns, "to format")]
        else:
            columns = [_require_column(c, "to format") for c in columns]
            if not columns:
                _require_column(None, "to format")
        result = format_text(self.rows, columns, style)
        return self._commit(result, f"format {style}")

    def remove_invalid_emails(self, column: Optional[str]) -> OperationResult:
        column = _require_column(column, "contains emails")
        result = remove_invalid_emails(self.rows, column)
        return self._commit(result, "remove invalid emails")

    # -------------------------
    # Feedback overlays
    # -------------------------

    def validate_emails(self, column: Optional[str]) -> EmailValidationResult:
        """Check `column` and highlight invalid cells; the table is not changed."""
        column = _require_column(column, "contains emails")
        result = validate_emails(self.rows, column)
        self._highlighted = highlight(column, result.invalid_reasons, kind="error")
        logger.info(
            "validate emails in %s: %d valid, %d invalid",
            column,
            result.valid_count,
            result.invalid_count,
        )
        return result

    def highlight_duplicates(self, column: Optional[str], *, case_sensitive: bool = False) -> List[int]:
        """Mark every row whose value in `column` repeats; the table is not changed."""
        column = _require_column(column, "to check for duplicates")
        indices = find_duplicate_rows(self.rows, column=column, case_sensitive=case_sensitive)
        self._highlighted = highlight(column, indices, kind="warning")
        return indices

    # -------------------------
    # Merge
    # -------------------------

    def merge_tables(self, files: Sequence[FileData]) -> MergeResult:
        """
        Merge already-decoded files and install the result as a new table.

        Files without rows are skipped. At least two non-empty files are
        required.
        """
        usable = []
        for file in files:
            if not file.rows:
                logger.warning("Skipped empty file: %s", file.filename)
                continue
            usable.append(file)

        if len(usable) < 2:
            raise EmptyDataError("Not enough valid files: at least 2 files with data are required.")

        result = merge_files(usable)
        self.load_table(
            result.data,
            result.columns,
            f"merged_{result.file_count}_files.csv",
            sum(file.file_size for file in usable),
        )
        logger.info("merge: %s", result.message)
        return result

    def merge(self, paths: Sequence[PathLike]) -> MergeResult:
        """
        Merge the files at `paths` into the working table.

        The current table, when one is loaded, takes part as the first file.
        Every path is decoded before anything is installed, so a failure
        leaves the session unchanged.

        Raises:
            FileValidationError, ParseError: a file could not be decoded.
            EmptyDataError: fewer than two non-empty files, or a decode was
                dropped because another file is still loading.
        """
        files: List[FileData] = []
        if self.is_loaded:
            files.append(FileData.from_table(self.table))

        for path in paths:
            file_path = Path(path)
            parsed = self.loader.load(file_path)
            if parsed is None:
                raise EmptyDataError(f"{file_path.name} was not loaded: another file is still loading.")
            files.append(
                FileData(
                    rows=parsed.rows,
                    columns=parsed.columns,
                    filename=file_path.name,
                    file_size=file_path.stat().st_size,
                )
            )

        return self.merge_tables(files)

    # -------------------------
    # History
    # -------------------------

    def undo(self) -> bool:
        moved = self.history.undo()
        if moved:
            self._highlighted = None
        return moved

    def redo(self) -> bool:
        moved = self.history.redo()
        if moved:
            self._highlighted = None
        return moved

    def clear(self) -> None:
        self.history.clear()
        self._highlighted = None

    # -------------------------
    # Export
    # -------------------------

    def export_csv(self) -> bytes:
        return export_csv(self.history.current.rows, self.history.current.columns)

    def export_excel(self) -> bytes:
        return export_excel(self.history.current.rows, self.history.current.columns)

    @property
    def csv_filename(self) -> str:
        return csv_filename(self.filename or "data")

    @property
    def excel_filename(self) -> str:
        return excel_filename(self.filename or "data")
