"""
Reading and writing tables.

- parse_csv: decode CSV/TSV content into rows + columns (pandas)
- validate_file: size / extension gate applied before decoding
- export_csv: BOM-prefixed CSV bytes with formula-injection guarding
- export_excel: single-sheet .xlsx bytes (pandas + openpyxl)
"""

from __future__ import annotations

import csv
import io
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from .config import (
    ACCEPTED_EXTENSIONS,
    CSV_FORMULA_PREFIXES,
    DEFAULT_DELIMITER,
    EXCEL_SHEET_NAME,
    MAX_FILE_SIZE_BYTES,
    SNIFF_DELIMITERS,
)
from .exceptions import FileValidationError, ParseError
from .records import Row, cell

BOM = "\ufeff"


@dataclass(frozen=True)
class ParseResult:
    rows: List[Row]
    columns: List[str]
    errors: List[str] = field(default_factory=list)


# -------------------------
# Decoding
# -------------------------


def _to_text(content: Union[bytes, str]) -> str:
    if isinstance(content, bytes):
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"Failed to parse CSV: {e}") from e
    if content.startswith(BOM):
        return content[1:]
    return content


def sniff_delimiter(text: str) -> str:
    """Guess the delimiter from the first few KB, falling back to a comma."""
    sample = text[:4096]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters="".join(SNIFF_DELIMITERS))
    except csv.Error:
        return DEFAULT_DELIMITER
    return dialect.delimiter


def _unique_columns(names: Sequence[str]) -> List[str]:
    """Trim header names and suffix repeats: ``a, a`` -> ``a, a_1``."""
    seen = set()
    columns = []
    for raw in names:
        name = str(raw).strip()
        candidate, n = name, 1
        while candidate in seen:
            candidate = f"{name}_{n}"
            n += 1
        seen.add(candidate)
        columns.append(candidate)
    return columns


def _long_records(text: str, sep: str, width: int) -> List[str]:
    """Describe data records that carry more than `width` fields."""
    messages = []
    records = (fields for fields in csv.reader(io.StringIO(text), delimiter=sep) if fields)
    next(records, None)
    for index, fields in enumerate(records):
        if len(fields) > width:
            messages.append(
                f"Row {index}: expected {width} fields, saw {len(fields)}; extra fields dropped"
            )
    return messages


def parse_csv(
    content: Union[bytes, str],
    *,
    delimiter: Optional[str] = None,
) -> ParseResult:
    """
    Decode delimited text into rows.

    Args:
        content:
            Raw file bytes (UTF-8, with or without BOM) or already-decoded text.
        delimiter:
            Field separator. If None, it is sniffed among ``, \\t ; |``.

    Returns:
        ParseResult where:
          - columns are the header names with surrounding whitespace removed,
            repeats suffixed ``_1``, ``_2``...
          - rows are dicts of text values; records empty in every field are
            dropped, records with too many fields are cut to the header width
          - errors lists one line per malformed record

    Raises:
        ParseError: content is not UTF-8, has no header, or cannot be tokenized.
    """
    text = _to_text(content)
    sep = delimiter or sniff_delimiter(text)
    long_records = []

    def truncate(fields: List[str]) -> List[str]:
        long_records.append(fields)
        return fields[:width]

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", pd.errors.ParserWarning)
        try:
            header = pd.read_csv(io.StringIO(text), sep=sep, nrows=0, engine="python")
            width = len(header.columns)
            df = pd.read_csv(
                io.StringIO(text),
                sep=sep,
                dtype=str,
                keep_default_na=False,
                na_filter=False,
                skip_blank_lines=True,
                on_bad_lines=truncate,
                engine="python",
            )
        except (pd.errors.EmptyDataError, pd.errors.ParserError, csv.Error) as e:
            raise ParseError(f"Failed to parse CSV: {e}") from e

    errors: List[str] = []
    if long_records and len(sep) == 1:
        errors.extend(_long_records(text, sep, width))
    elif long_records:
        errors.extend(f"Record with {len(fields)} fields cut to {width}" for fields in long_records)
    for w in caught:
        if issubclass(w.category, pd.errors.ParserWarning):
            errors.extend(line.strip() for line in str(w.message).splitlines() if line.strip())

    df.columns = _unique_columns(df.columns)
    # Short records come back with NaN in their missing trailing fields.
    df = df.fillna("")
    if len(df.columns):
        df = df[(df != "").any(axis=1)]

    rows = [{k: str(v) for k, v in record.items()} for record in df.to_dict(orient="records")]
    return ParseResult(rows=rows, columns=list(df.columns), errors=errors)


def validate_file(
    filename: str,
    size: int,
    *,
    max_size: int = MAX_FILE_SIZE_BYTES,
    extensions: Sequence[str] = ACCEPTED_EXTENSIONS,
) -> None:
    """
    Reject files that should not be decoded at all.

    Raises:
        FileValidationError: the file is larger than `max_size` bytes or its
            extension is not one of `extensions`.
    """
    if size > max_size:
        raise FileValidationError(
            f"File too large. Maximum size is {max_size / 1024 / 1024:.0f}MB, "
            f"your file is {size / 1024 / 1024:.1f}MB."
        )

    suffix = Path(filename).suffix.lower()
    if suffix not in {ext.lower() for ext in extensions}:
        raise FileValidationError(
            "Invalid file type. Please upload a CSV file "
            f"({' or '.join(extensions)})."
        )


# -------------------------
# Encoding
# -------------------------


def _csv_field(value: str) -> str:
    if value.startswith(CSV_FORMULA_PREFIXES):
        value = "'" + value
        return '"' + value.replace('"', '""') + '"'
    if "," in value or '"' in value or "\n" in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def export_csv(rows: Sequence[Mapping[str, str]], columns: Sequence[str]) -> bytes:
    """
    Encode rows as UTF-8 CSV bytes for spreadsheet programs.

    The output starts with a BOM, has a comma-joined header line, and joins
    lines with ``\\n``. Cells containing a comma, quote or newline are quoted
    with inner quotes doubled. Cells starting with ``= + - @``, tab or CR
    are also prefixed with ``'`` so they are not evaluated as formulas.
    Missing cells are written empty.
    """
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(_csv_field(cell(row, column)) for column in columns))
    return (BOM + "\n".join(lines)).encode("utf-8")


def csv_filename(filename: str) -> str:
    if filename.lower().endswith(".csv"):
        return filename
    return f"{filename}.csv"


def _excel_value(value: str) -> str:
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def export_excel(
    rows: Sequence[Mapping[str, str]],
    columns: Sequence[str],
    *,
    sheet_name: str = EXCEL_SHEET_NAME,
) -> bytes:
    """
    Encode rows as an .xlsx workbook with a single sheet.

    The first sheet row is the header; every value is written as text, so
    a cell like "=SUM(A1)" stays a string rather than becoming a formula.
    """
    data = [[_excel_value(cell(row, column)) for column in columns] for row in rows]
    df = pd.DataFrame(data, columns=[_excel_value(c) for c in columns], dtype=object)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        worksheet = writer.sheets[sheet_name]
        for sheet_row in worksheet.iter_rows():
            for xl_cell in sheet_row:
                if xl_cell.data_type == "f":
                    xl_cell.data_type = "s"
    return buffer.getvalue()


def excel_filename(filename: str) -> str:
    """'contacts.csv' -> 'contacts.xlsx'."""
    stem = Path(filename).stem if Path(filename).suffix else filename
    return f"{stem or 'data'}.xlsx"
