from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.product import ProductDraft, SizeVariant
from ..models.validation_report import ValidationReport

"""Draft validation service for the bulk item upload.

Checks every draft and each of its sizes, collecting all failures (no
short-circuit). Messages are user-facing and keep a fixed order:

    product name, title, description, at least one size,
    then per size (1-based): size name, quantity > 0, regular price > 0

Validation is pure; the same drafts always give an equal report.
"""

__all__ = [
    "validate",
    "validate_draft",
]

logger = logging.getLogger(__name__)


def _missing(value: str | None) -> bool:
    return value is None or str(value).strip() == ""


def _validate_size(position: int, size: SizeVariant) -> list[str]:
    errors: list[str] = []
    if _missing(size.size_name):
        errors.append(f"Size {position}: Size name is required")
    if size.quantity <= 0:
        errors.append(f"Size {position}: Quantity must be greater than 0")
    if size.regular_price <= 0:
        errors.append(f"Size {position}: Regular price must be greater than 0")
    return errors


def validate_draft(draft: ProductDraft) -> list[str]:
    """Return the ordered violation messages for one draft."""
    errors: list[str] = []
    if _missing(draft.product_name):
        errors.append("Product name is required")
    if _missing(draft.title):
        errors.append("Title is required")
    if _missing(draft.description):
        errors.append("Description is required")
    if not draft.sizes:
        errors.append("At least one size is required")
    for position, size in enumerate(draft.sizes, start=1):
        errors.extend(_validate_size(position, size))
    return errors


def validate(drafts: Sequence[ProductDraft]) -> ValidationReport:
    """Validate a whole batch; only drafts with violations get an entry."""
    violations: dict[int, tuple[str, ...]] = {}
    for index, draft in enumerate(drafts):
        errors = validate_draft(draft)
        if errors:
            violations[index] = tuple(errors)
    report = ValidationReport(violations=violations)
    logger.debug(
        "validated drafts=%d invalid=%d violations=%d",
        len(drafts),
        len(report),
        report.total_violations,
    )
    return report
