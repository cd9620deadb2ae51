import threading

import psutil

from errors import ErrorKind
from log_setup import report_error

# Errors a psutil read may raise on a misbehaving host
_READ_ERRORS = (psutil.Error, OSError, RuntimeError, AttributeError)

# Page classes counted as "used" memory; platforms lacking one report 0
_USED_PAGE_FIELDS = ("active", "inactive", "wired", "compressed")


# ---- Helpers ----
def _core_ticks(core):
    """(user, system, nice, idle) for one psutil per-cpu entry."""
    return (
        float(core.user),
        float(core.system),
        float(getattr(core, "nice", 0.0)),
        float(core.idle),
    )


def cpu_usage_between(previous, current):
    """
    Overall CPU usage in percent between two per-core tick snapshots.

    Each snapshot is a sequence of (user, system, nice, idle) tuples, one per
    logical CPU. A negative delta (counter reset) counts as 0 for that core.
    Returns 0.0 when no ticks elapsed.
    """
    used_total = 0.0
    idle_total = 0.0
    for prev, cur in zip(previous, current):
        user, system, nice, idle = (max(0.0, c - p) for p, c in zip(prev, cur))
        used_total += user + system + nice
        idle_total += idle
    total = used_total + idle_total
    if total <= 0:
        return 0.0
    return 100.0 * used_total / total


# ---- Sample source ----
class SampleSource:
    """
    Reads one scalar per tick for CPU%, memory% and the cumulative network
    byte counters. Every read fails closed: an OS error is reported and the
    read yields 0 (None for the network counters).
    """

    def __init__(self):
        self._previous_cpu = None
        self._cpu_lock = threading.Lock()

    def read_cpu_usage(self) -> float:
        try:
            current = [_core_ticks(core) for core in psutil.cpu_times(percpu=True)]
        except _READ_ERRORS as e:
            report_error(ErrorKind.SAMPLE_READ_FAILURE, "failed to read CPU tick counters", e)
            return 0.0

        with self._cpu_lock:
            previous = self._previous_cpu
            self._previous_cpu = current

        if not previous or len(previous) != len(current):
            # First call, or a core was hot-plugged: rebuild the baseline
            return 0.0
        return min(100.0, cpu_usage_between(previous, current))

    def read_memory_usage(self) -> float:
        try:
            mem = psutil.virtual_memory()
            total = float(mem.total)
            present = [f for f in _USED_PAGE_FIELDS if hasattr(mem, f)]
            if present:
                used = sum(float(getattr(mem, f)) for f in present)
            else:
                used = float(mem.used)
        except _READ_ERRORS as e:
            report_error(ErrorKind.SAMPLE_READ_FAILURE, "failed to read memory statistics", e)
            return 0.0

        if total <= 0:
            report_error(ErrorKind.SAMPLE_READ_FAILURE, f"physical memory total is {total}")
            return 0.0
        return max(0.0, min(100.0, 100.0 * used / total))

    def read_network_counters(self):
        """
        Return (tx_bytes, rx_bytes) summed over every interface present now,
        or None when the counters could not be read.
        """
        try:
            per_nic = psutil.net_io_counters(pernic=True) or {}
            tx = sum(float(c.bytes_sent) for c in per_nic.values())
            rx = sum(float(c.bytes_recv) for c in per_nic.values())
        except _READ_ERRORS as e:
            report_error(ErrorKind.SAMPLE_READ_FAILURE, "failed to read network counters", e)
            return None
        return tx, rx
