from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.schema import EXPECTED_COLUMNS

"""Downloadable bulk upload template.

The template carries the expected header plus example rows for several
products with several sizes each, so the sheet author can see that a product
spans one row per size and repeats its product-level columns on every row.
"""

__all__ = [
    "TEMPLATE_FILE_NAME",
    "TEMPLATE_SHEET_NAME",
    "template_rows",
    "build_template",
    "write_template",
]

TEMPLATE_FILE_NAME = "bulk_upload_template.xlsx"
TEMPLATE_SHEET_NAME = "Products"

_EXAMPLE_PRODUCTS: list[dict[str, str]] = [
    {
        "Product Name": "Premium Cotton T-Shirt",
        "Title": "Premium Cotton T-Shirt - Casual Wear",
        "Description": "High quality 100% cotton t-shirt with comfortable fit.",
        "Manufacturing Details": "Made from 100% organic cotton, pre-shrunk, tagless design",
        "Shipping Returns": "Free shipping on orders above 499, 30-day easy returns",
        "HSN Code": "61091000",
        "_slug": "premium-cotton-tshirt",
        "_sku": "TSHIRT-COTTON",
    },
    {
        "Product Name": "Slim Fit Denim Jeans",
        "Title": "Slim Fit Dark Blue Denim Jeans",
        "Description": "Stylish slim fit jeans made from premium denim fabric.",
        "Manufacturing Details": "98% cotton, 2% elastane blend",
        "Shipping Returns": "Free shipping on orders above 999, 15-day exchange policy",
        "HSN Code": "62034200",
        "_slug": "slim-fit-denim-jeans",
        "_sku": "JEANS-SLIM",
    },
    {
        "Product Name": "Comfortable Cotton Hoodie",
        "Title": "Comfortable Cotton Hoodie - Street Wear",
        "Description": "Cozy cotton hoodie with adjustable hood and kangaroo pocket.",
        "Manufacturing Details": "80% cotton, 20% polyester blend, fleece lined interior",
        "Shipping Returns": "Free shipping on orders above 1199, 30-day returns",
        "HSN Code": "61102000",
        "_slug": "comfortable-cotton-hoodie",
        "_sku": "HOODIE-COTTON",
    },
]

# (product index, size, qty, regular, sale, waist/inseam/chest/front/shoulder in cm)
_EXAMPLE_SIZES: list[tuple[int, str, int, int, int, tuple[int, int, int, int, int]]] = [
    (0, "S", 30, 899, 699, (72, 72, 92, 65, 40)),
    (0, "M", 35, 899, 699, (76, 74, 97, 68, 42)),
    (0, "L", 28, 899, 699, (81, 76, 102, 71, 44)),
    (1, "30", 20, 2499, 1999, (76, 81, 0, 0, 0)),
    (1, "32", 25, 2499, 1999, (81, 81, 0, 0, 0)),
    (2, "M", 25, 1899, 1499, (0, 0, 104, 69, 46)),
    (2, "L", 20, 1899, 1499, (0, 0, 110, 72, 48)),
]

_MEASUREMENTS = ("Waist", "Inseam", "Chest", "Front Length", "Across Shoulder")


def template_rows() -> list[dict[str, Any]]:
    """Example rows in sheet order, keyed by EXPECTED_COLUMNS."""
    rows: list[dict[str, Any]] = []
    for n, (pidx, size, qty, regular, sale, cms) in enumerate(_EXAMPLE_SIZES, start=1):
        product = _EXAMPLE_PRODUCTS[pidx]
        row: dict[str, Any] = {k: v for k, v in product.items() if not k.startswith("_")}
        row.update({
            "Size Name": size,
            "Quantity": qty,
            "SKU": f"{product['_sku']}-{size}",
            "Barcode Number": f"{8901234500000 + n}",
            "Regular Price": regular,
            "Sale Price": sale,
            "Meta Title": f"{product['Product Name']} {size}",
            "Meta Description": f"Buy {product['Product Name']} in size {size}.",
            "Slug URL": f"{product['_slug']}-{size.lower()}",
        })
        for name, cm in zip(_MEASUREMENTS, cms, strict=True):
            row[f"{name} (CM)"] = cm
            row[f"{name} (IN)"] = round(cm / 2.54, 1)
        rows.append(row)
    return rows


def build_template() -> bytes:
    """Render the template workbook as xlsx bytes."""
    df = pd.DataFrame(template_rows(), columns=list(EXPECTED_COLUMNS))
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=TEMPLATE_SHEET_NAME, index=False)
    return buf.getvalue()


def write_template(path: Path | None = None) -> Path:
    target = path if path is not None else Path(TEMPLATE_FILE_NAME)
    target.write_bytes(build_template())
    return target
