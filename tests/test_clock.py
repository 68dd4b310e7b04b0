import time
from datetime import timedelta

from timeseal.clock import FrozenClock, system_clock


def test_system_clock_tracks_real_time():
    assert abs(system_clock() - time.time()) < 5


def test_frozen_clock_does_not_move():
    clock = FrozenClock(100)
    assert clock() == 100
    assert clock() == 100


def test_frozen_clock_advance_and_set():
    clock = FrozenClock(100)
    assert clock.advance(30) == 130
    assert clock.advance(timedelta(minutes=-1)) == 70
    clock.set(5)
    assert clock() == 5


def test_frozen_clock_defaults_to_now():
    assert abs(FrozenClock()() - time.time()) < 5
