from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Upload progress display with tqdm (TTY only).

A single 0-100 tqdm bar fed by the orchestrator's progress callback. In non-TTY
output (CI, redirected logs) no bar is created so no ANSI control sequences are
written; the last percentage is still tracked.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """tqdm wrapper driven by percentage updates."""

    def __init__(self, total_products: int, *, description: str = "Uploading products") -> None:
        self.total_products = total_products
        self.description = description
        self.percent = 0
        self.updates: list[int] = []

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=100,
                desc=f"{description} ({total_products})",
                unit="%",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def set_percent(self, percent: int) -> None:
        """Move the bar to percent; values never go backwards."""
        self.updates.append(percent)
        step = percent - self.percent
        if step <= 0:
            return
        self.percent = percent
        if self.enabled and self.pbar is not None:
            self.pbar.update(step)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
