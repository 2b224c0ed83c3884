from __future__ import annotations

import json

import jsonschema
import pytest

from bulk_upload.logging.error_log import ERROR_LOG_SCHEMA_PATH
from bulk_upload.models.error_record import ErrorRecord

"""Error log JSON schema contract test."""


def _schema() -> dict:
    return json.loads(ERROR_LOG_SCHEMA_PATH.read_text(encoding="utf-8"))


def test_error_log_schema_valid_example():
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "file": "batch.xlsx",
        "product": "Premium Cotton T-Shirt",
        "position": 2,
        "error_type": "UPLOAD_ERROR",
        "message": "SKU already exists",
    }
    jsonschema.validate(record, _schema())


def test_error_log_schema_rejects_extra_key():
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "file": "batch.xlsx",
        "product": "Tee",
        "position": 0,
        "error_type": "UPLOAD_ERROR",
        "message": "boom",
        "extra": "not allowed",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, _schema())


def test_created_records_match_schema():
    for rec in (
        ErrorRecord.create("b.xlsx", "<FILE_LEVEL>", -1, "PARSE_ERROR", "Missing columns: SKU"),
        ErrorRecord.create("b.xlsx", "Tee", 0, "VALIDATION_ERROR", "Title is required"),
    ):
        jsonschema.validate(json.loads(rec.to_json_line()), _schema())
