from __future__ import annotations

"""Spreadsheet schema for the bulk item upload.

The bulk upload sheet carries one row per product/size combination. The header
row must contain every name in EXPECTED_COLUMNS (order does not matter).
Product-level columns are repeated on each size row; only the first row of a
product is used for them.
"""

__all__ = [
    "EXPECTED_COLUMNS",
    "PRODUCT_NAME_COLUMN",
    "SIZE_NAME_COLUMN",
    "PRODUCT_TEXT_COLUMNS",
    "SIZE_TEXT_COLUMNS",
    "SIZE_INT_COLUMNS",
    "SIZE_DECIMAL_COLUMNS",
]

PRODUCT_NAME_COLUMN = "Product Name"
SIZE_NAME_COLUMN = "Size Name"

EXPECTED_COLUMNS: tuple[str, ...] = (
    "Product Name",
    "Title",
    "Description",
    "Manufacturing Details",
    "Shipping Returns",
    "Size Name",
    "Quantity",
    "HSN Code",
    "SKU",
    "Barcode Number",
    "Regular Price",
    "Sale Price",
    "Waist (CM)",
    "Inseam (CM)",
    "Chest (CM)",
    "Front Length (CM)",
    "Across Shoulder (CM)",
    "Waist (IN)",
    "Inseam (IN)",
    "Chest (IN)",
    "Front Length (IN)",
    "Across Shoulder (IN)",
    "Meta Title",
    "Meta Description",
    "Slug URL",
)

# ProductDraft attribute -> column (product_name は別扱い: グルーピングキー)
PRODUCT_TEXT_COLUMNS: dict[str, str] = {
    "title": "Title",
    "description": "Description",
    "manufacturing_details": "Manufacturing Details",
    "shipping_returns": "Shipping Returns",
}

# SizeVariant attribute -> column, grouped by coercion rule
SIZE_TEXT_COLUMNS: dict[str, str] = {
    "hsn": "HSN Code",
    "sku": "SKU",
    "barcode_no": "Barcode Number",
    "meta_title": "Meta Title",
    "meta_description": "Meta Description",
    "slug_url": "Slug URL",
}

SIZE_INT_COLUMNS: dict[str, str] = {
    "quantity": "Quantity",
}

SIZE_DECIMAL_COLUMNS: dict[str, str] = {
    "regular_price": "Regular Price",
    "sale_price": "Sale Price",
    "waist_cm": "Waist (CM)",
    "inseam_cm": "Inseam (CM)",
    "chest_cm": "Chest (CM)",
    "front_length_cm": "Front Length (CM)",
    "across_shoulder_cm": "Across Shoulder (CM)",
    "waist_in": "Waist (IN)",
    "inseam_in": "Inseam (IN)",
    "chest_in": "Chest (IN)",
    "front_length_in": "Front Length (IN)",
    "across_shoulder_in": "Across Shoulder (IN)",
}
