"""
cleancsv: in-memory CSV cleaning with undo/redo.

Current submodules:
- cleancsv.records (row/table model)
- cleancsv.duplicates
- cleancsv.formatting
- cleancsv.emails
- cleancsv.merge
- cleancsv.history (undo/redo state machine)
- cleancsv.io (decode / export)
- cleancsv.loader (guarded, time-bounded decode)
- cleancsv.session (CleaningSession facade)
"""

from .duplicates import (
    count_duplicates_sorted,
    deduplicate,
    find_duplicate_rows,
)
from .emails import (
    EmailValidationResult,
    check_email,
    is_valid_email,
    remove_invalid_emails,
    validate_emails,
)
from .exceptions import (
    CleanCsvError,
    ColumnNotSelectedError,
    DecodeTimeoutError,
    EmptyDataError,
    FileValidationError,
    ParseError,
)
from .formatting import (
    FORMATTERS,
    format_text,
    to_lowercase,
    to_title_case,
    to_uppercase,
    trim_whitespace,
)
from .history import History, HistoryState
from .io import ParseResult, export_csv, export_excel, parse_csv, validate_file
from .loader import FileLoader
from .merge import check_column_compatibility, merge_files
from .records import FileData, HighlightedCells, MergeResult, OperationResult, Table
from .session import CleaningSession

__all__ = [
    "count_duplicates_sorted",
    "deduplicate",
    "find_duplicate_rows",
    "EmailValidationResult",
    "check_email",
    "is_valid_email",
    "remove_invalid_emails",
    "validate_emails",
    "CleanCsvError",
    "ColumnNotSelectedError",
    "DecodeTimeoutError",
    "EmptyDataError",
    "FileValidationError",
    "ParseError",
    "FORMATTERS",
    "format_text",
    "to_lowercase",
    "to_title_case",
    "to_uppercase",
    "trim_whitespace",
    "History",
    "HistoryState",
    "ParseResult",
    "export_csv",
    "export_excel",
    "parse_csv",
    "validate_file",
    "FileLoader",
    "check_column_compatibility",
    "merge_files",
    "FileData",
    "HighlightedCells",
    "MergeResult",
    "OperationResult",
    "Table",
    "CleaningSession",
]
