"""
Errors raised at the boundaries of cleancsv.

Every error is raised before the history engine is touched, so a failed
load, merge or operation request leaves the session unchanged. The message
of each exception is meant to be shown to the user as-is.
"""

from __future__ import annotations


class CleanCsvError(ValueError):
    """Base class for all cleancsv errors."""


class FileValidationError(CleanCsvError):
    """File rejected before decoding (too large, wrong type, missing)."""


class ColumnNotSelectedError(CleanCsvError):
    """An operation was requested without a target column."""


class ParseError(CleanCsvError):
    """The decoder could not turn the file content into a table."""


class DecodeTimeoutError(ParseError):
    """The decoder did not finish within the configured timeout."""


class EmptyDataError(CleanCsvError):
    """There is no data to work with (empty file, too few files to merge)."""
