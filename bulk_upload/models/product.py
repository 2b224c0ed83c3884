from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Product draft models for the bulk item upload.

ProductDraft is one product grouped from the sheet; each draft owns an ordered
tuple of SizeVariant (sheet row order). Drafts are immutable: grouping builds
them once and every later stage only reads them.
"""

__all__ = [
    "SizeVariant",
    "ProductDraft",
    "WarningKind",
    "GroupingWarning",
]


@dataclass(frozen=True)
class SizeVariant:
    """One size/SKU of a product.

    Numeric fields are already coerced; unparsable cells were stored as 0 and
    reported as GroupingWarning.
    """
    size_name: str | None
    quantity: int = 0
    hsn: str | None = None
    sku: str | None = None
    barcode_no: str | None = None
    regular_price: float = 0.0
    sale_price: float = 0.0
    waist_cm: float = 0.0
    inseam_cm: float = 0.0
    chest_cm: float = 0.0
    front_length_cm: float = 0.0
    across_shoulder_cm: float = 0.0
    waist_in: float = 0.0
    inseam_in: float = 0.0
    chest_in: float = 0.0
    front_length_in: float = 0.0
    across_shoulder_in: float = 0.0
    meta_title: str | None = None
    meta_description: str | None = None
    slug_url: str | None = None


@dataclass(frozen=True)
class ProductDraft:
    """A grouped product prior to remote submission.

    Scalar fields come from the first sheet row carrying product_name.
    source_row is that row's spreadsheet row number (0 when built by hand).
    """
    product_name: str | None
    title: str | None = None
    description: str | None = None
    manufacturing_details: str | None = None
    shipping_returns: str | None = None
    sizes: tuple[SizeVariant, ...] = field(default_factory=tuple)
    source_row: int = 0


class WarningKind(Enum):
    """Kinds of non-fatal findings raised while grouping rows.

    - UNPARSABLE_NUMBER: non-blank numeric cell could not be parsed, stored as 0
    - DIVERGENT_FIELD: product-level cell differs from the product's first row
      and was ignored
    """
    UNPARSABLE_NUMBER = "unparsable_number"
    DIVERGENT_FIELD = "divergent_field"


@dataclass(frozen=True)
class GroupingWarning:
    row_number: int
    product_name: str
    column: str
    value: object
    kind: WarningKind

    def describe(self) -> str:
        if self.kind is WarningKind.UNPARSABLE_NUMBER:
            return (
                f"row {self.row_number}: '{self.column}' value {self.value!r} "
                f"for '{self.product_name}' is not a number, using 0"
            )
        return (
            f"row {self.row_number}: '{self.column}' value {self.value!r} "
            f"for '{self.product_name}' differs from the first row and was ignored"
        )
