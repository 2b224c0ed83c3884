from __future__ import annotations

import io
from typing import Any

import pandas as pd

from ..models.row_data import SourceRow
from ..models.schema import EXPECTED_COLUMNS

"""Spreadsheet reader for the bulk item upload.

- Only the first sheet of the workbook is read; other sheets are ignored.
- Row 1 is the header, every following row is a data row.
- Rows whose cells are all blank are skipped.
- The header must contain every column of EXPECTED_COLUMNS.
- Only .xlsx (openpyxl) and legacy .xls (xlrd) files are accepted.

Any ParseError is fatal for the batch: nothing downstream runs.
"""

__all__ = [
    "ParseError",
    "WorkbookDecodeError",
    "EmptySheetError",
    "MissingColumnsError",
    "UnsupportedFileTypeError",
    "SUPPORTED_EXTENSIONS",
    "check_file_type",
    "read_first_sheet",
    "normalize_sheet",
    "parse",
]


class ParseError(Exception):
    """Base class for fatal spreadsheet problems."""


class WorkbookDecodeError(ParseError):
    """Raised when the bytes cannot be decoded as a workbook."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Error parsing Excel file: {reason}")


class EmptySheetError(ParseError):
    """Raised when the first sheet holds no data rows."""

    def __init__(self) -> None:
        super().__init__("Excel file is empty")


class MissingColumnsError(ParseError):
    """Raised when expected columns are absent from the header row."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing columns: {', '.join(missing)}")


class UnsupportedFileTypeError(ParseError):
    """Raised when the selected file is not an Excel workbook."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("Please select a valid Excel file (.xlsx or .xls)")


# .xls は xlrd, .xlsx は openpyxl で pandas が読む
SUPPORTED_EXTENSIONS = (".xlsx", ".xls")


def check_file_type(name: str) -> None:
    if not name.lower().endswith(SUPPORTED_EXTENSIONS):
        raise UnsupportedFileTypeError(name)


def read_first_sheet(file_bytes: bytes) -> pd.DataFrame:
    """Decode the workbook and return its first sheet without header handling."""
    try:
        xls = pd.ExcelFile(io.BytesIO(file_bytes))
        if not xls.sheet_names:
            raise EmptySheetError()
        # ヘッダなしで生読み (normalize_sheet で1行目をヘッダとして適用)
        return xls.parse(xls.sheet_names[0], header=None)
    except ParseError:
        raise
    except Exception as e:
        raise WorkbookDecodeError(str(e)) from e


def _header_name(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def normalize_sheet(df: pd.DataFrame, expected_columns: tuple[str, ...] = EXPECTED_COLUMNS) -> list[SourceRow]:
    """Turn a raw first-sheet DataFrame into SourceRows.

    Steps:
    1. Take row 1 as header
    2. Skip all-blank data rows, map blank cells to None
    3. Fail on empty sheet, then on missing expected columns
    """
    if df.shape[0] == 0:
        raise EmptySheetError()
    columns = [_header_name(c) for c in df.iloc[0].tolist()]

    rows: list[SourceRow] = []
    for offset, (_, raw) in enumerate(df.iloc[1:].iterrows()):
        if raw.isna().all():
            continue
        values: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            if not col:
                continue  # 見出しなし列は無視
            if not isinstance(val, str) and pd.isna(val):
                values[col] = None
            else:
                values[col] = val
        # offset 0 = spreadsheet row 2
        rows.append(SourceRow(row_number=offset + 2, values=values))

    if not rows:
        raise EmptySheetError()

    present = set(columns)
    missing = [c for c in expected_columns if c not in present]
    if missing:
        raise MissingColumnsError(missing)
    return rows


def parse(file_bytes: bytes) -> list[SourceRow]:
    """Decode spreadsheet bytes into ordered SourceRows.

    Raises:
        WorkbookDecodeError: bytes are not a readable workbook
        EmptySheetError: the first sheet has no data rows
        MissingColumnsError: the header lacks expected columns
    """
    return normalize_sheet(read_first_sheet(file_bytes))
