"""
L1 Domain — Download helpers (pure).

Size formatting and progress throttling.
No I/O, no subprocess.
"""

from __future__ import annotations


def fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


class ProgressThrottle:
    """Decide when a progress line is worth printing (every ``step`` %).

    Unknown totals report every ``step`` MB instead.
    """

    def __init__(self, step: int = 5):
        self.step = step
        self._last = -step

    def should_report(self, done: int, total: int) -> bool:
        if total > 0:
            mark = int(done * 100 / total)
            if mark >= self._last + self.step or (done >= total and mark != self._last):
                self._last = mark
                return True
            return False
        mark = done // (1024 * 1024)
        if mark >= self._last + self.step:
            self._last = mark
            return True
        return False

    def describe(self, done: int, total: int) -> str:
        if total > 0:
            return f"{int(done * 100 / total)}% ({fmt_size(done)} / {fmt_size(total)})"
        return fmt_size(done)
