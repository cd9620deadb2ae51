import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from constants import BYTES_PER_UNIT, REFRESH_MS, UNIT_LABEL
from errors import ErrorKind
from history_store import Channel, TimeSeriesStore
from log_setup import get_logger, report_error
from monitor_core import SampleSource

log = get_logger("scheduler")


def compute_rate(previous: float, current: float, elapsed: float, bytes_per_unit: float = 1.0) -> float:
    """
    Throughput between two cumulative counters, in units per second.
    A counter that went backwards (interface restart) reports 0.
    """
    if elapsed <= 0:
        elapsed = 1.0
    raw = max(0.0, (current - previous) / elapsed)
    return raw / bytes_per_unit


@dataclass
class RawCounterState:
    """Previous-tick counters used to derive Tx/Rx rates."""

    previous_timestamp: Optional[float] = None
    previous_tx: float = 0.0
    previous_rx: float = 0.0
    first_interval: bool = True


@dataclass(frozen=True)
class TickResult:
    cpu: float
    memory: float
    tx_rate: float
    rx_rate: float


# Runs in a separate thread so sampling never waits on the UI.
class SamplingScheduler(threading.Thread):
    def __init__(self, store: TimeSeriesStore, source: Optional[SampleSource] = None,
                 interval: float = REFRESH_MS / 1000.0, bytes_per_unit: float = BYTES_PER_UNIT,
                 clock: Callable[[], float] = time.monotonic):
        super().__init__(name="sampling-scheduler")
        self.store = store
        self.source = source or SampleSource()
        self.interval = interval
        self.bytes_per_unit = bytes_per_unit
        self.counters = RawCounterState()
        self._clock = clock
        self._listeners: List[Callable] = []
        self._stop_event = threading.Event()
        self.daemon = True  # exits with the main program

    def add_listener(self, callback: Callable) -> None:
        """Register a render-refresh callback receiving store.snapshot_all()."""
        self._listeners.append(callback)

    def _read(self, what: str, reader: Callable, failed=0.0):
        """Run one source read; anything it raises degrades to `failed` for this tick."""
        try:
            return reader()
        except Exception as e:
            report_error(ErrorKind.SAMPLE_READ_FAILURE, f"{what} read raised", e)
            return failed

    def _read_percent(self, what: str, reader: Callable) -> float:
        value = self._read(what, lambda: float(reader()))
        if not math.isfinite(value):
            report_error(ErrorKind.SAMPLE_READ_FAILURE, f"{what} read returned {value!r}")
            return 0.0
        return value

    def _network_rates(self, now: float):
        counters = self._read("network counters", self.source.read_network_counters, failed=None)
        state = self.counters

        if counters is None:
            # Read failed: keep the old baseline so recovery does not spike
            return 0.0, 0.0
        tx, rx = counters

        elapsed = 1.0 if state.previous_timestamp is None else now - state.previous_timestamp
        state.previous_timestamp = now

        if state.first_interval:
            # Seed with the current counters to suppress an initial spike
            state.previous_tx = tx
            state.previous_rx = rx
            state.first_interval = False

        tx_rate = compute_rate(state.previous_tx, tx, elapsed, self.bytes_per_unit)
        rx_rate = compute_rate(state.previous_rx, rx, elapsed, self.bytes_per_unit)
        state.previous_tx = tx
        state.previous_rx = rx
        return tx_rate, rx_rate

    def tick(self, now: Optional[float] = None) -> TickResult:
        """Sample every channel once and notify listeners."""
        if now is None:
            now = self._clock()

        cpu = self._read_percent("CPU", self.source.read_cpu_usage)
        self.store.append(Channel.CPU, cpu)

        memory = self._read_percent("memory", self.source.read_memory_usage)
        self.store.append(Channel.MEMORY, memory)

        tx_rate, rx_rate = self._network_rates(now)
        self.store.append(Channel.TX, tx_rate)
        self.store.append(Channel.RX, rx_rate)

        snapshot = self.store.snapshot_all()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                log.exception("Refresh listener %r failed", listener)

        log.debug(
            "CPU: %6.2f%%, Mem: %6.2f%%, Tx: %8.2f %s, Rx: %8.2f %s, Ping: %7.2f ms",
            cpu, memory, tx_rate, UNIT_LABEL, rx_rate, UNIT_LABEL, snapshot[Channel.PING][-1],
        )
        return TickResult(cpu, memory, tx_rate, rx_rate)

    def run(self):
        while not self._stop_event.is_set():
            started = self._clock()
            try:
                self.tick(started)
            except Exception:
                # A broken tick must not end the sampling loop
                log.exception("Sampling tick failed")
            remaining = self.interval - (self._clock() - started)
            self._stop_event.wait(max(0.0, remaining))

    def stop(self, timeout: Optional[float] = None):
        self._stop_event.set()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(timeout=self.interval + 1.0 if timeout is None else timeout)

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()
