from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

"""SourceRow model for the bulk item upload.

A SourceRow is one data row of the uploaded sheet, keyed by header name, with
values exactly as the spreadsheet codec produced them (no coercion).
"""

__all__ = [
    "SourceRow",
]


@dataclass(frozen=True)
class SourceRow:
    """One parsed, uncoerced spreadsheet row.

    row_number is the 1-based spreadsheet row (the header is row 1, so the
    first data row is 2). Blank cells are stored as None.
    """
    row_number: int
    values: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, column: str) -> Any:
        return self.values.get(column)
