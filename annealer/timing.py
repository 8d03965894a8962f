"""Wall-clock measurement of engine runs.

A `SolveTimer` wraps exactly one engine run per measurement and keeps every
elapsed sample, so a batch of instances from the same file can be summarized
as `<size> <avg> <min> <max>`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

import time

from .errors import TimerStateError


class SolveTimer:
    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._samples: List[float] = []
        self._started: Optional[float] = None

    @property
    def samples(self) -> List[float]:
        return list(self._samples)

    @property
    def running(self) -> bool:
        return self._started is not None

    def begin(self) -> None:
        if self._started is not None:
            raise TimerStateError("cannot begin a measurement while the previous one is unfinished")
        self._started = self._clock()

    def finish(self) -> float:
        """Close the open measurement and return its elapsed seconds."""

        if self._started is None:
            raise TimerStateError("cannot finish a measurement that was never begun")
        elapsed = self._clock() - self._started
        self._started = None
        self._samples.append(elapsed)
        return elapsed

    @contextmanager
    def measure(self) -> Iterator[None]:
        """Time the enclosed block; the sample is recorded even if the block raises."""

        self.begin()
        try:
            yield
        finally:
            self.finish()

    def _require_samples(self) -> None:
        if not self._samples:
            raise TimerStateError("no measurements recorded")

    def average(self) -> float:
        self._require_samples()
        return sum(self._samples) / len(self._samples)

    def minimum(self) -> float:
        self._require_samples()
        return min(self._samples)

    def maximum(self) -> float:
        self._require_samples()
        return max(self._samples)

    def summary_line(self, size: float) -> str:
        return f"{size:g} {self.average()} {self.minimum()} {self.maximum()}"
