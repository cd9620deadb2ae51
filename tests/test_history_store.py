import math
import threading

import pytest

from history_store import Channel, Sample, TimeSeriesStore


def test_every_channel_starts_with_a_full_window_of_zeros():
    store = TimeSeriesStore()
    for channel in Channel:
        assert store.snapshot(channel) == (0.0,) * 30


def test_sliding_window_keeps_last_thirty_in_order():
    store = TimeSeriesStore(30)
    for i in range(45):
        store.append(Channel.CPU, i)
        assert len(store.snapshot(Channel.CPU)) <= 30
    assert store.snapshot(Channel.CPU) == tuple(float(i) for i in range(15, 45))


def test_append_only_touches_its_channel():
    store = TimeSeriesStore(3)
    store.append_sample(Sample(Channel.PING, 12.5))
    assert store.snapshot(Channel.PING) == (0.0, 0.0, 12.5)
    assert store.snapshot(Channel.TX) == (0.0, 0.0, 0.0)
    assert store.latest(Channel.PING) == 12.5


def test_snapshots_are_detached_copies():
    store = TimeSeriesStore(3)
    before = store.snapshot(Channel.MEMORY)
    everything = store.snapshot_all()
    store.append(Channel.MEMORY, 50)
    assert before == (0.0, 0.0, 0.0)
    assert everything[Channel.MEMORY] == (0.0, 0.0, 0.0)
    with pytest.raises(TypeError):
        everything[Channel.MEMORY] = (1.0,)


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_values_are_rejected(value):
    store = TimeSeriesStore(3)
    with pytest.raises(ValueError):
        store.append(Channel.RX, value)
    assert store.snapshot(Channel.RX) == (0.0, 0.0, 0.0)


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        TimeSeriesStore(0)


def test_concurrent_writers_never_overflow_the_window():
    store = TimeSeriesStore(30)
    seen_lengths = set()

    def writer(channel):
        for i in range(2000):
            store.append(channel, i)

    def reader():
        for _ in range(2000):
            seen_lengths.add(len(store.snapshot(Channel.PING)))

    threads = [threading.Thread(target=writer, args=(Channel.PING,)),
               threading.Thread(target=writer, args=(Channel.PING,)),
               threading.Thread(target=writer, args=(Channel.CPU,)),
               threading.Thread(target=reader)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert seen_lengths == {30}
    assert store.snapshot(Channel.CPU) == tuple(float(i) for i in range(1970, 2000))
