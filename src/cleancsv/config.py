"""
Default limits and constants for cleancsv.

These are module-level so callers can read them; the classes that use them
(FileLoader, History) accept keyword overrides.
"""

MAX_FILE_SIZE_MB = 10
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
ACCEPTED_EXTENSIONS = (".csv", ".txt")

MAX_UNDO_STATES = 10

DECODE_TIMEOUT_SECONDS = 30.0

# Delimiters tried when sniffing an input file; "," wins when nothing is clear.
SNIFF_DELIMITERS = (",", "\t", ";", "|")
DEFAULT_DELIMITER = ","

# Leading characters a spreadsheet would evaluate as a formula.
CSV_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")

EXCEL_SHEET_NAME = "Data"
