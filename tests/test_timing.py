import sys
from pathlib import Path

import pytest

# Ensure project root is on PYTHONPATH
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from annealer import SolveTimer, TimerStateError


def _fake_clock(*ticks: float):
    values = iter(ticks)
    return lambda: next(values)


def test_begin_twice_is_an_error():
    timer = SolveTimer()
    timer.begin()
    with pytest.raises(TimerStateError):
        timer.begin()


def test_finish_without_begin_is_an_error():
    with pytest.raises(TimerStateError):
        SolveTimer().finish()


def test_statistics_over_samples():
    timer = SolveTimer(clock=_fake_clock(0.0, 1.5, 10.0, 10.5, 20.0, 23.0))
    for _ in range(3):
        timer.begin()
        timer.finish()

    assert timer.samples == [1.5, 0.5, 3.0]
    assert timer.average() == pytest.approx(5.0 / 3)
    assert timer.minimum() == 0.5
    assert timer.maximum() == 3.0
    assert timer.summary_line(20.0) == f"20 {5.0 / 3} 0.5 3.0"


def test_measure_records_even_when_block_raises():
    timer = SolveTimer(clock=_fake_clock(1.0, 3.0))

    with pytest.raises(RuntimeError):
        with timer.measure():
            raise RuntimeError("boom")

    assert timer.samples == [2.0]
    assert not timer.running


def test_statistics_need_samples():
    timer = SolveTimer()
    with pytest.raises(TimerStateError):
        timer.average()
