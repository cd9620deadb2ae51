"""
Bounded per-channel history shared by the sampler and the ping probe.
"""

import math
import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from constants import MAX_POINTS


class Channel(Enum):
    CPU = "CPU"
    MEMORY = "Mem"
    TX = "Tx"
    RX = "Rx"
    PING = "Ping"


@dataclass(frozen=True)
class Sample:
    channel: Channel
    value: float


class TimeSeriesStore:
    """
    Fixed-capacity sliding window per channel.

    Every channel starts with `capacity` zeros so a renderer always sees a
    full window. Writers and readers serialise on one lock, so a reader never
    sees a series between its append and its eviction.
    """

    def __init__(self, capacity: int = MAX_POINTS) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._series = {
            channel: deque([0.0] * capacity, maxlen=capacity) for channel in Channel
        }

    def append(self, channel: Channel, value: float) -> None:
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"{channel.value}: refusing non-finite sample {value!r}")
        with self._lock:
            # deque(maxlen) drops the oldest element on the same call
            self._series[channel].append(value)

    def append_sample(self, sample: Sample) -> None:
        self.append(sample.channel, sample.value)

    def snapshot(self, channel: Channel) -> tuple:
        with self._lock:
            return tuple(self._series[channel])

    def snapshot_all(self):
        """Copy every channel under a single lock acquisition."""
        with self._lock:
            copies = {channel: tuple(series) for channel, series in self._series.items()}
        return MappingProxyType(copies)

    def latest(self, channel: Channel) -> float:
        with self._lock:
            series = self._series[channel]
            return series[-1] if series else 0.0
