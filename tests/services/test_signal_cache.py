from __future__ import annotations

import pytest

from app.services.signals.cache import SignalCache
from tests.helpers.factories import FakeClock, make_signal


def test_get_returns_stored_signal_until_expiry():
    clock = FakeClock()
    cache = SignalCache(ttl_seconds=300, clock=clock)
    signal = make_signal(1)
    cache.set(1, signal)

    clock.advance(299)
    assert cache.get(1) is signal

    clock.advance(1)
    assert cache.get(1) is None
    assert cache.stats == {"hits": 1, "misses": 1}


def test_expired_entries_are_evicted_on_lookup():
    clock = FakeClock()
    cache = SignalCache(ttl_seconds=10, clock=clock)
    cache.set(1, make_signal(1))
    cache.set(2, make_signal(2))

    clock.advance(11)
    assert cache.valid_count() == 0
    cache.get(1)
    cache.set(2, make_signal(2))

    assert cache.valid_count() == 1


def test_invalidate_and_clear():
    cache = SignalCache(clock=FakeClock())
    cache.set(1, make_signal(1))
    cache.set(2, make_signal(2))

    cache.invalidate(1)
    cache.invalidate(42)
    assert cache.get(1) is None
    assert cache.valid_count() == 1

    cache.clear()
    assert cache.valid_count() == 0


def test_set_overwrites_and_restarts_ttl():
    clock = FakeClock()
    cache = SignalCache(ttl_seconds=60, clock=clock)
    cache.set(1, make_signal(1, name="first"))
    clock.advance(50)
    replacement = make_signal(1, name="second")
    cache.set(1, replacement)
    clock.advance(50)

    assert cache.get(1) is replacement


def test_rejects_non_positive_ttl():
    with pytest.raises(ValueError):
        SignalCache(ttl_seconds=0)
