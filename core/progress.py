"""
Progress reporting for workflow runs.

The controller owns a single ProgressReporter per run. Each step receives a
ProgressBand: a callable taking a 0-1 fraction that maps into the step's
fixed sub-range. The reporter drops any value that is not strictly greater
than the last one, so observed progress never regresses.
"""

from typing import Callable, Optional

ProgressCallback = Callable[[float], None]


class ProgressReporter:
    """Monotonic 0-100 progress sink"""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback
        self.value = 0.0

    def update(self, value: float) -> float:
        """Advance to value if it is higher than the current progress"""
        value = max(0.0, min(100.0, value))
        if value > self.value:
            self.value = value
            if self.callback:
                self.callback(value)
        return self.value

    def band(self, start: float, end: float) -> 'ProgressBand':
        return ProgressBand(self, start, end)

    def reset(self):
        self.value = 0.0


class ProgressBand:
    """A step's slice [start, end] of the overall progress"""

    def __init__(self, reporter: ProgressReporter, start: float, end: float):
        if end < start:
            raise ValueError(f"Invalid progress band {start}-{end}")
        self.reporter = reporter
        self.start = start
        self.end = end

    def __call__(self, fraction: float) -> float:
        return self.report(fraction)

    def report(self, fraction: float) -> float:
        fraction = max(0.0, min(1.0, fraction))
        return self.reporter.update(self.start + (self.end - self.start) * fraction)

    def complete(self) -> float:
        return self.report(1.0)
