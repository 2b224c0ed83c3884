from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from ..models.product import ProductDraft, SizeVariant
from ..models.upload_result import UploadProgress, UploadResult
from .catalog_client import ItemCreator

"""Upload orchestration for the bulk item upload.

Submits validated drafts to the catalog one at a time:

    for each draft in order:
        build payload -> create_item -> record UploadResult -> publish progress

- Strictly sequential: a draft's call finishes before the next one starts, so
  "completed so far" progress is well defined and the service never sees a
  burst of writes.
- A failing draft becomes UploadResult(success=False) and the loop goes on;
  nothing already created is rolled back.
- The caller must only pass drafts whose validation report is empty; no
  re-validation happens here.
- There is no cancellation: a started run attempts every draft.
"""

__all__ = [
    "PRODUCT_PAYLOAD_FIELDS",
    "SIZE_PAYLOAD_FIELDS",
    "build_payload",
    "progress_percent",
    "iter_upload",
    "upload",
]

logger = logging.getLogger(__name__)

# ProductDraft attribute -> remote payload key
PRODUCT_PAYLOAD_FIELDS: dict[str, str] = {
    "product_name": "productName",
    "title": "title",
    "description": "description",
    "manufacturing_details": "manufacturingDetails",
    "shipping_returns": "shippingAndReturns",
}

# SizeVariant attribute -> remote payload key (リモート側の命名に合わせる)
SIZE_PAYLOAD_FIELDS: dict[str, str] = {
    "size_name": "size",
    "quantity": "quantity",
    "hsn": "hsnCode",
    "sku": "sku",
    "barcode_no": "barcode",
    "regular_price": "regularPrice",
    "sale_price": "salePrice",
    "waist_cm": "fitWaistCm",
    "inseam_cm": "inseamLengthCm",
    "chest_cm": "chestCm",
    "front_length_cm": "frontLengthCm",
    "across_shoulder_cm": "acrossShoulderCm",
    "waist_in": "toFitWaistIn",
    "inseam_in": "inseamLengthIn",
    "chest_in": "chestIn",
    "front_length_in": "frontLengthIn",
    "across_shoulder_in": "acrossShoulderIn",
    "meta_title": "metaTitle",
    "meta_description": "metaDescription",
    "slug_url": "slugUrl",
}

DRAFT_STATUS = "draft"


def _size_payload(size: SizeVariant) -> dict[str, Any]:
    return {remote: getattr(size, attr) for attr, remote in SIZE_PAYLOAD_FIELDS.items()}


def build_payload(draft: ProductDraft) -> dict[str, Any]:
    """Map a draft onto the catalog creation payload."""
    payload: dict[str, Any] = {
        remote: getattr(draft, attr) for attr, remote in PRODUCT_PAYLOAD_FIELDS.items()
    }
    payload["sizes"] = [_size_payload(s) for s in draft.sizes]
    payload["status"] = DRAFT_STATUS
    return payload


def progress_percent(completed: int, total: int) -> int:
    """round(completed / total * 100) with halves rounded up."""
    if total <= 0:
        return 0
    return (completed * 200 + total) // (2 * total)


def iter_upload(drafts: Sequence[ProductDraft], creator: ItemCreator) -> Iterator[UploadProgress]:
    """Upload drafts in order, yielding one UploadProgress per draft.

    The next draft is only submitted when the consumer asks for the next event.
    """
    total = len(drafts)
    for index, draft in enumerate(drafts):
        name = draft.product_name or ""
        try:
            remote_id = creator.create_item(build_payload(draft))
        except Exception as e:
            # 1件の失敗でバッチは止めない
            logger.warning("upload failed product=%s error=%s", name, e)
            result = UploadResult.failed(name, str(e) or type(e).__name__)
        else:
            logger.debug("upload ok product=%s id=%s", name, remote_id)
            result = UploadResult.succeeded(name, remote_id)
        completed = index + 1
        yield UploadProgress(
            index=index,
            result=result,
            completed=completed,
            total=total,
            percent=progress_percent(completed, total),
        )


def upload(
    drafts: Sequence[ProductDraft],
    creator: ItemCreator,
    on_progress: Callable[[int], None] | None = None,
) -> list[UploadResult]:
    """Upload every draft and return the results in draft order.

    on_progress receives the rounded percentage after each draft completes;
    the last call is always 100 for a non-empty batch.
    """
    results: list[UploadResult] = []
    for event in iter_upload(drafts, creator):
        results.append(event.result)
        if on_progress is not None:
            on_progress(event.percent)
    logger.info(
        "upload finished products=%d success=%d failed=%d",
        len(results),
        sum(1 for r in results if r.success),
        sum(1 for r in results if not r.success),
    )
    return results
