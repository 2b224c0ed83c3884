from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

"""ValidationReport model for the bulk item upload.

Maps a draft's position in the batch to its ordered violation messages. Drafts
without violations have no entry, so an empty report means the whole batch is
upload-eligible.
"""

__all__ = [
    "ValidationReport",
]


@dataclass(frozen=True)
class ValidationReport:
    violations: Mapping[int, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # 読み取り専用ビューで保持 (BatchState 経由の書き換えを防ぐ)
        object.__setattr__(self, "violations", MappingProxyType(dict(self.violations)))

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def messages_for(self, index: int) -> tuple[str, ...]:
        return self.violations.get(index, ())

    def is_eligible(self, index: int) -> bool:
        return not self.violations.get(index)

    @property
    def total_violations(self) -> int:
        return sum(len(msgs) for msgs in self.violations.values())

    def __len__(self) -> int:
        return len(self.violations)
