# Shared pytest fixtures
from __future__ import annotations

import io
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from bulk_upload.logging.init import reset_logging
from bulk_upload.models.row_data import SourceRow
from bulk_upload.models.schema import EXPECTED_COLUMNS


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def make_row() -> Callable[..., dict[str, Any]]:
    """Build one sheet row keyed by column name; unspecified cells are blank."""
    def _make(
        product_name: Any = "Tee",
        size_name: Any = "M",
        quantity: Any = 10,
        regular_price: Any = 499,
        extra: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        row: dict[str, Any] = {col: None for col in EXPECTED_COLUMNS}
        row.update({
            "Product Name": product_name,
            "Title": f"{product_name} title" if product_name else None,
            "Description": f"{product_name} description" if product_name else None,
            "Manufacturing Details": "100% cotton",
            "Shipping Returns": "30-day returns",
            "Size Name": size_name,
            "Quantity": quantity,
            "Regular Price": regular_price,
            "Sale Price": regular_price,
            "SKU": f"{product_name}-{size_name}",
        })
        if extra:
            row.update(extra)
        return row
    return _make


@pytest.fixture()
def source_rows() -> Callable[[list[dict[str, Any]]], list[SourceRow]]:
    """Wrap row dicts as SourceRows numbered like a sheet (first data row = 2)."""
    def _wrap(rows: list[dict[str, Any]]) -> list[SourceRow]:
        return [SourceRow(row_number=i + 2, values=dict(r)) for i, r in enumerate(rows)]
    return _wrap


@pytest.fixture()
def make_workbook() -> Callable[..., bytes]:
    """Write rows to an in-memory xlsx; extra_sheets are appended after the first."""
    def _make(
        rows: list[dict[str, Any]],
        columns: list[str] | None = None,
        extra_sheets: dict[str, list[dict[str, Any]]] | None = None,
    ) -> bytes:
        buf = io.BytesIO()
        cols = columns if columns is not None else list(EXPECTED_COLUMNS)
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            pd.DataFrame(rows, columns=cols).to_excel(writer, sheet_name="Products", index=False)
            for name, extra_rows in (extra_sheets or {}).items():
                pd.DataFrame(extra_rows).to_excel(writer, sheet_name=name, index=False)
        return buf.getvalue()
    return _make


@pytest.fixture()
def write_config(temp_workdir: Path) -> Path:
    cfg = temp_workdir / "config" / "bulk_upload.yml"
    cfg.write_text(
        """catalog:
  base_url: http://catalog.test
  create_path: /api/items/basic-product
  timeout_seconds: 5
logs_directory: ./logs
""",
        encoding="utf-8",
    )
    return cfg
