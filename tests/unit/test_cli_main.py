from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from bulk_upload.cli.app import (
    EXIT_FATAL,
    EXIT_PARTIAL_FAILURE,
    EXIT_SUCCESS_ALL,
    EXIT_VALIDATION_BLOCKED,
    main,
)
from bulk_upload.excel.reader import parse
from bulk_upload.services.catalog_client import CatalogError


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch):
    monkeypatch.delenv("CATALOG_API_BASE_URL", raising=False)
    monkeypatch.delenv("CATALOG_API_TOKEN", raising=False)


def _patched_client(creator: MagicMock):
    mock_cls = MagicMock()
    mock_cls.return_value.__enter__.return_value = creator
    return patch("bulk_upload.cli.app.CatalogClient", mock_cls)


def _error_lines(workdir):
    files = sorted((workdir / "logs").glob("upload-errors-*.log"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]


def test_template_command_writes_workbook(temp_workdir):
    out = temp_workdir / "data" / "template.xlsx"
    assert main(["template", "--output", str(out)]) == EXIT_SUCCESS_ALL
    rows = parse(out.read_bytes())
    assert {r.get("Product Name") for r in rows} == {
        "Premium Cotton T-Shirt",
        "Slim Fit Denim Jeans",
        "Comfortable Cotton Hoodie",
    }


def test_check_valid_file(temp_workdir, make_row, make_workbook, capsys):
    path = temp_workdir / "data" / "ok.xlsx"
    path.write_bytes(make_workbook([make_row("Tee", "S"), make_row("Tee", "M")]))

    assert main(["check", str(path)]) == EXIT_SUCCESS_ALL
    out = capsys.readouterr().out
    assert "INFO product=Tee sizes=2 ok" in out
    assert "SUMMARY products=1 invalid=0 warnings=0" in out


def test_check_invalid_file(temp_workdir, make_row, make_workbook, capsys):
    path = temp_workdir / "data" / "bad.xlsx"
    path.write_bytes(make_workbook([make_row("Tee", "S", regular_price=0)]))

    assert main(["check", str(path)]) == EXIT_VALIDATION_BLOCKED
    out = capsys.readouterr().out
    assert "ERROR product=Tee Size 1: Regular price must be greater than 0" in out
    assert "SUMMARY products=1 invalid=1 warnings=0" in out


def test_check_missing_file(temp_workdir):
    assert main(["check", str(temp_workdir / "data" / "nope.xlsx")]) == EXIT_FATAL


def test_upload_all_success(temp_workdir, write_config, make_row, make_workbook, capsys):
    path = temp_workdir / "data" / "batch.xlsx"
    path.write_bytes(make_workbook([make_row("Tee", "S"), make_row("Tee", "M"), make_row("Cap", "One")]))
    creator = MagicMock()
    creator.create_item.side_effect = ["id-1", "id-2"]

    with _patched_client(creator):
        code = main(["upload", str(path), "--config", str(write_config)])

    assert code == EXIT_SUCCESS_ALL
    assert creator.create_item.call_count == 2
    first_payload = creator.create_item.call_args_list[0].args[0]
    assert first_payload["productName"] == "Tee"
    assert first_payload["status"] == "draft"
    out = capsys.readouterr().out
    assert "INFO created product=Tee id=id-1" in out
    assert "SUMMARY products=2 success=2 failed=0 sizes=3" in out
    assert list((temp_workdir / "logs").glob("upload-errors-*.log")) == []


def test_upload_partial_failure_writes_error_log(temp_workdir, write_config, make_row, make_workbook, capsys):
    path = temp_workdir / "data" / "batch.xlsx"
    path.write_bytes(make_workbook([make_row("Tee", "S"), make_row("Cap", "One")]))
    creator = MagicMock()
    creator.create_item.side_effect = [CatalogError("SKU already exists", 409), "id-2"]

    with _patched_client(creator):
        code = main(["upload", str(path), "--config", str(write_config)])

    assert code == EXIT_PARTIAL_FAILURE
    out = capsys.readouterr().out
    assert "ERROR failed product=Tee error=SKU already exists" in out
    assert "SUMMARY products=2 success=1 failed=1 sizes=1" in out

    records = _error_lines(temp_workdir)
    assert len(records) == 1
    assert records[0]["file"] == "batch.xlsx"
    assert records[0]["product"] == "Tee"
    assert records[0]["position"] == 0
    assert records[0]["error_type"] == "UPLOAD_ERROR"
    assert records[0]["message"] == "SKU already exists"


def test_upload_blocked_by_validation(temp_workdir, write_config, make_row, make_workbook):
    path = temp_workdir / "data" / "batch.xlsx"
    path.write_bytes(make_workbook([make_row("Tee", "S", quantity=0)]))
    creator = MagicMock()

    with _patched_client(creator):
        code = main(["upload", str(path), "--config", str(write_config)])

    assert code == EXIT_VALIDATION_BLOCKED
    creator.create_item.assert_not_called()
    records = _error_lines(temp_workdir)
    assert [r["error_type"] for r in records] == ["VALIDATION_ERROR"]
    assert records[0]["message"] == "Size 1: Quantity must be greater than 0"


def test_upload_unreadable_file_is_fatal(temp_workdir, write_config):
    path = temp_workdir / "data" / "broken.xlsx"
    path.write_bytes(b"not a workbook")

    assert main(["upload", str(path), "--config", str(write_config)]) == EXIT_FATAL
    records = _error_lines(temp_workdir)
    assert records[0]["product"] == "<FILE_LEVEL>"
    assert records[0]["position"] == -1
    assert records[0]["error_type"] == "PARSE_ERROR"
    assert records[0]["message"].startswith("Error parsing Excel file:")


def test_upload_missing_config_is_fatal(temp_workdir, make_row, make_workbook):
    path = temp_workdir / "data" / "batch.xlsx"
    path.write_bytes(make_workbook([make_row()]))
    assert main(["upload", str(path), "--config", str(temp_workdir / "config" / "none.yml")]) == EXIT_FATAL


def test_debug_flag(temp_workdir, capsys):
    out_path = temp_workdir / "data" / "t.xlsx"
    main(["--debug", "template", "--output", str(out_path)])
    assert "DEBUG debug mode enabled" in capsys.readouterr().out


def test_check_prints_each_grouping_warning_once(temp_workdir, make_row, make_workbook, capsys):
    path = temp_workdir / "data" / "b.xlsx"
    path.write_bytes(make_workbook([make_row("Tee", "S", quantity="ten")]))

    assert main(["check", str(path)]) == EXIT_VALIDATION_BLOCKED
    warn = [line for line in capsys.readouterr().out.splitlines() if line.startswith("WARN ")]
    assert warn == ["WARN row 2: 'Quantity' value 'ten' for 'Tee' is not a number, using 0"]


def test_upload_rejects_non_excel_file(temp_workdir, write_config, capsys):
    path = temp_workdir / "data" / "items.csv"
    path.write_text("Product Name,Title\nTee,Tee title\n", encoding="utf-8")

    assert main(["upload", str(path), "--config", str(write_config)]) == EXIT_FATAL
    assert "ERROR parse: Please select a valid Excel file (.xlsx or .xls)" in capsys.readouterr().out
    records = _error_lines(temp_workdir)
    assert records[0]["error_type"] == "PARSE_ERROR"
    assert records[0]["position"] == -1
