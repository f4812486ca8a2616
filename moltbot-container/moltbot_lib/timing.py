"""Startup timing utilities.

StartupTimer records how long each bootstrap phase takes; the summary is
logged when the CLI runs with --time.
"""

import time
from contextlib import contextmanager


class StartupTimer:
    """Collects timing data for bootstrap phases."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self.timings: list[tuple[str, float]] = []
        self.start_time: float = time.perf_counter()
        self._phase_start: float | None = None
        self._phase_name: str | None = None

    def start_phase(self, name: str) -> None:
        """Start timing a phase."""
        if not self.enabled:
            return
        self._phase_name = name
        self._phase_start = time.perf_counter()

    def end_phase(self) -> None:
        """End timing the current phase."""
        if not self.enabled or self._phase_start is None:
            return
        elapsed = (time.perf_counter() - self._phase_start) * 1000  # ms
        self.timings.append((self._phase_name, elapsed))
        self._phase_name = None
        self._phase_start = None

    @contextmanager
    def phase(self, name: str):
        """Context manager for timing a phase."""
        self.start_phase(name)
        try:
            yield self
        finally:
            self.end_phase()

    @property
    def total_ms(self) -> float:
        return (time.perf_counter() - self.start_time) * 1000

    def summary_lines(self) -> list[str]:
        """Render the timing table, one line per phase plus a total."""
        if not self.enabled or not self.timings:
            return []

        total_time = self.total_ms
        lines = [f"{'Phase':<20} {'Time (ms)':>10} {'%':>6}"]
        for name, elapsed in self.timings:
            pct = (elapsed / total_time) * 100 if total_time > 0 else 0
            lines.append(f"{name:<20} {elapsed:>10.1f} {pct:>5.1f}%")
        lines.append(f"{'TOTAL':<20} {total_time:>10.1f}")
        return lines
