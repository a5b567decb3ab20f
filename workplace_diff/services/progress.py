from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

Reading two large register workbooks takes a few seconds; a single tqdm bar
counts snapshot reads. In non-TTY environments (CI, pipes) the bar is disabled
to avoid ANSI control sequences in captured output.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress tracker over a fixed number of steps (snapshot files)."""

    def __init__(self, total: int, *, description: str = "Reading snapshots", unit: str = "file") -> None:
        self.total = total
        self.description = description
        self.current = 0

        # Create tqdm instance only if TTY is enabled
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit=unit,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start(self, name: str) -> None:
        """Show the step currently running (e.g. the file name)."""
        self.current += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({name})")

    def finish(self, **postfix: Any) -> None:
        if self.pbar is not None:
            self.pbar.update(1)
            if postfix:
                self.pbar.set_postfix(**postfix)
            self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
