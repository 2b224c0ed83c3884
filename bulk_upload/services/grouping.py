from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..models.product import GroupingWarning, ProductDraft, SizeVariant, WarningKind
from ..models.row_data import SourceRow
from ..models.schema import (
    PRODUCT_NAME_COLUMN,
    PRODUCT_TEXT_COLUMNS,
    SIZE_DECIMAL_COLUMNS,
    SIZE_INT_COLUMNS,
    SIZE_NAME_COLUMN,
    SIZE_TEXT_COLUMNS,
)

"""Row grouping service for the bulk item upload.

Folds the flat sheet rows (one per product/size) into ProductDraft values:

- rows without a product name are skipped silently (blank sheet lines)
- the first row of a product name creates the draft and fixes its
  product-level fields; later rows only add a size
- a row with a size name adds a SizeVariant; numeric cells are coerced
  (quantity -> int, prices/measurements -> float) and fall back to 0
- unparsable numbers and ignored divergent product fields are reported as
  GroupingWarning instead of being dropped silently

Drafts come out in the order their product name was first seen.
"""

__all__ = [
    "GroupingOutcome",
    "group",
    "group_rows",
    "coerce_int",
    "coerce_decimal",
    "cell_text",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupingOutcome:
    drafts: list[ProductDraft]
    warnings: list[GroupingWarning] = field(default_factory=list)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def cell_text(value: Any) -> str | None:
    """Render a cell as text. Blank cells become None.

    Whole floats lose their '.0' so numeric codes (HSN, barcode) read from the
    sheet keep their digits only.
    """
    if _is_blank(value):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_int(value: Any) -> tuple[int, bool]:
    """Parse a quantity cell.

    Returns (value, ok). Blank cells are (0, True); unparsable cells are
    (0, False). Fractional numbers are truncated.
    """
    if _is_blank(value):
        return 0, True
    if isinstance(value, bool):
        return 0, False
    if isinstance(value, int):
        return value, True
    if isinstance(value, float):
        return (int(value), True) if math.isfinite(value) else (0, False)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text), True
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0, False
        return (int(number), True) if math.isfinite(number) else (0, False)
    return 0, False


def coerce_decimal(value: Any) -> tuple[float, bool]:
    """Parse a price or measurement cell. Same contract as coerce_int."""
    if _is_blank(value):
        return 0.0, True
    if isinstance(value, bool):
        return 0.0, False
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0, False
    else:
        return 0.0, False
    if not math.isfinite(number):
        return 0.0, False
    return number, True


class _DraftBuilder:
    """Mutable accumulator for one product while rows are folded."""

    def __init__(self, product_name: str, row: SourceRow) -> None:
        self.product_name = product_name
        self.source_row = row.row_number
        self.fields: dict[str, str | None] = {
            attr: cell_text(row.get(col)) for attr, col in PRODUCT_TEXT_COLUMNS.items()
        }
        self.sizes: list[SizeVariant] = []

    def build(self) -> ProductDraft:
        return ProductDraft(
            product_name=self.product_name,
            sizes=tuple(self.sizes),
            source_row=self.source_row,
            **self.fields,
        )


def _size_variant(row: SourceRow, product_name: str, warnings: list[GroupingWarning]) -> SizeVariant:
    values: dict[str, Any] = {attr: cell_text(row.get(col)) for attr, col in SIZE_TEXT_COLUMNS.items()}
    numeric = [(SIZE_INT_COLUMNS, coerce_int), (SIZE_DECIMAL_COLUMNS, coerce_decimal)]
    for columns, coerce in numeric:
        for attr, col in columns.items():
            raw = row.get(col)
            number, ok = coerce(raw)
            if not ok:
                warnings.append(
                    GroupingWarning(
                        row_number=row.row_number,
                        product_name=product_name,
                        column=col,
                        value=raw,
                        kind=WarningKind.UNPARSABLE_NUMBER,
                    )
                )
            values[attr] = number
    return SizeVariant(size_name=cell_text(row.get(SIZE_NAME_COLUMN)), **values)


def _check_divergence(
    builder: _DraftBuilder, row: SourceRow, warnings: list[GroupingWarning]
) -> None:
    # 先頭行優先: 後続行の値は採用しないが差異は警告として残す
    for attr, col in PRODUCT_TEXT_COLUMNS.items():
        value = cell_text(row.get(col))
        if value is not None and value != builder.fields[attr]:
            warnings.append(
                GroupingWarning(
                    row_number=row.row_number,
                    product_name=builder.product_name,
                    column=col,
                    value=value,
                    kind=WarningKind.DIVERGENT_FIELD,
                )
            )


def group_rows(rows: Iterable[SourceRow]) -> GroupingOutcome:
    """Group rows into drafts and collect coercion/divergence warnings."""
    builders: dict[str, _DraftBuilder] = {}
    warnings: list[GroupingWarning] = []
    skipped = 0

    for row in rows:
        product_name = cell_text(row.get(PRODUCT_NAME_COLUMN))
        if product_name is None:
            skipped += 1
            continue

        builder = builders.get(product_name)
        if builder is None:
            builder = _DraftBuilder(product_name, row)
            builders[product_name] = builder
        else:
            _check_divergence(builder, row, warnings)

        if cell_text(row.get(SIZE_NAME_COLUMN)) is not None:
            builder.sizes.append(_size_variant(row, product_name, warnings))

    drafts = [b.build() for b in builders.values()]
    logger.debug(
        "grouped drafts=%d sizes=%d skipped_rows=%d warnings=%d",
        len(drafts),
        sum(len(d.sizes) for d in drafts),
        skipped,
        len(warnings),
    )
    for w in warnings:
        logger.debug(w.describe())
    return GroupingOutcome(drafts=drafts, warnings=warnings)


def group(rows: Iterable[SourceRow]) -> list[ProductDraft]:
    """Group rows into drafts, discarding warnings."""
    return group_rows(rows).drafts
