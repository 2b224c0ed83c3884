from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the upload error log.

One ErrorRecord per problem found during a bulk run: a parse failure, a
validation violation or a rejected upload. position is the 0-based draft index;
-1 marks file-level errors where no draft exists yet.

The JSON Lines shape is fixed (no extra keys) and mirrored by
bulk_upload/logging/error_log_schema.json.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: uploaded spreadsheet name
        product: product name, or "<FILE_LEVEL>" for file-level errors
        position: draft index (0-based). -1 for file-level errors
        error_type: classification in UPPER_SNAKE_CASE
        message: human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    product: str
    position: int  # 不明な場合 -1
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, product: str, position: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            product=product,
            position=position,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
