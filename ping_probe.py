"""
Continuous latency probe backed by a long-running `ping` process.

The process streams one line per echo request; a reader thread parses each
line and appends the round-trip time (or the timeout sentinel) to the Ping
channel. Restarting always tears the previous session down first.
"""

import math
import platform
import re
import subprocess
import threading
from enum import Enum
from typing import Callable, List, Optional

from constants import PING_INTERVAL, TIMEOUT_SENTINEL
from errors import ErrorKind
from history_store import Channel, TimeSeriesStore
from log_setup import get_logger, report_error

log = get_logger("ping")

_TIMEOUT_MARKERS = ("request timeout", "request timed out", "no answer yet", "unreachable")
_RTT_PATTERN = re.compile(r"time\s*[=<]\s*([\d.]+)\s*ms", re.IGNORECASE)


def parse_ping_line(line: str) -> Optional[float]:
    """
    Round-trip time in ms from one ping output line.

    Timeout/unreachable lines yield TIMEOUT_SENTINEL; lines that carry no RTT
    (headers, statistics, blank lines) or an unusable RTT yield None.
    """
    lowered = line.lower()
    if any(marker in lowered for marker in _TIMEOUT_MARKERS):
        return TIMEOUT_SENTINEL
    match = _RTT_PATTERN.search(line)
    if not match:
        return None
    try:
        value = float(match.group(1))
    except ValueError:
        return None
    # An RTT too long for a float overflows to inf
    return value if math.isfinite(value) else None


def build_ping_command(target: str, interval: float = PING_INTERVAL) -> List[str]:
    """Command line for a ping that runs until terminated, one line per probe."""
    system = platform.system()
    if system == "Windows":
        return ["ping", "-t", target]
    if system == "Linux":
        # -O prints a line for every unanswered request
        return ["ping", "-O", "-i", f"{interval:g}", target]
    return ["ping", "-i", f"{interval:g}", target]


class ProbeState(Enum):
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


class LatencyProbe:
    def __init__(self, store: TimeSeriesStore, interval: float = PING_INTERVAL,
                 command_builder: Callable[[str, float], List[str]] = build_ping_command,
                 on_exit: Optional[Callable[[str, Optional[int]], None]] = None,
                 terminate_timeout: float = 2.0):
        self.store = store
        self.interval = interval
        self.on_exit = on_exit
        self.terminate_timeout = terminate_timeout
        self.command_builder = command_builder
        self._lock = threading.Lock()
        self._state = ProbeState.STOPPED
        self._generation = 0
        self._target: Optional[str] = None
        self._process: Optional[subprocess.Popen] = None
        self._reader: Optional[threading.Thread] = None

    # ---- Properties ----
    @property
    def state(self) -> ProbeState:
        with self._lock:
            return self._state

    @property
    def target(self) -> Optional[str]:
        return self._target

    @property
    def process(self) -> Optional[subprocess.Popen]:
        with self._lock:
            return self._process

    @property
    def is_running(self) -> bool:
        return self.state is ProbeState.RUNNING

    # ---- Lifecycle ----
    def start(self, target: str) -> bool:
        """Spawn a probe for `target`, terminating any live session first."""
        with self._lock:
            stale_reader = self._teardown_locked()
            self._generation += 1
            generation = self._generation
            self._target = target
            self._state = ProbeState.STARTING

            command = self.command_builder(target, self.interval)
            try:
                process = subprocess.Popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.DEVNULL,
                    text=True,
                    bufsize=1,
                    errors="replace",
                )
            except (OSError, ValueError) as e:
                self._state = ProbeState.STOPPED
                report_error(ErrorKind.PROBE_LAUNCH_FAILURE, f"could not start {command[0]!r} for {target}", e)
                launched = False
            else:
                self._process = process
                self._reader = threading.Thread(
                    target=self._consume,
                    args=(process, generation),
                    name=f"ping-reader-{generation}",
                    daemon=True,
                )
                self._state = ProbeState.RUNNING
                self._reader.start()
                launched = True

        self._join_reader(stale_reader)
        if launched:
            log.info("Ping probe running against %s (pid %s)", target, process.pid)
        return launched

    def restart(self, target: str) -> bool:
        return self.start(target)

    def stop(self) -> None:
        with self._lock:
            stale_reader = self._teardown_locked()
            self._generation += 1
            self._state = ProbeState.STOPPED
        self._join_reader(stale_reader)

    def _teardown_locked(self) -> Optional[threading.Thread]:
        """Kill the live process; the caller joins the returned reader outside the lock."""
        process, reader = self._process, self._reader
        self._process = None
        self._reader = None
        if process is None:
            return reader
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=self.terminate_timeout)
            except subprocess.TimeoutExpired:
                log.warning("Ping process %s ignored terminate, killing it", process.pid)
                process.kill()
                process.wait()
        log.debug("Ping process %s stopped (exit %s)", process.pid, process.returncode)
        return reader

    def _join_reader(self, reader: Optional[threading.Thread]) -> None:
        if reader is None or reader is threading.current_thread():
            return
        reader.join(timeout=self.terminate_timeout)
        if reader.is_alive():
            log.warning("Ping reader %s did not finish after teardown", reader.name)

    # ---- Reader thread ----
    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self._state is ProbeState.RUNNING

    def _handle_line(self, generation: int, line: str) -> bool:
        """Append the parsed value; False once this session is no longer current."""
        value = parse_ping_line(line)
        with self._lock:
            if not self._is_current(generation):
                return False
            if value is not None:
                try:
                    self.store.append(Channel.PING, value)
                except ValueError as e:
                    log.debug("Dropped ping sample from %r: %s", line.strip(), e)
        return True

    def _consume(self, process: subprocess.Popen, generation: int) -> None:
        stream = process.stdout
        try:
            for line in stream:
                if not self._handle_line(generation, line):
                    break
        except (OSError, ValueError) as e:
            # Stream closed under us during teardown
            log.debug("Ping reader %s stopped reading: %s", generation, e)
        finally:
            try:
                stream.close()
            except (OSError, ValueError):
                pass

        returncode = process.wait()
        with self._lock:
            unexpected = self._is_current(generation)
            if unexpected:
                self._state = ProbeState.STOPPED
                self._process = None
                self._reader = None
            target = self._target

        if unexpected:
            report_error(ErrorKind.PROBE_PROCESS_EXIT,
                         f"ping for {target} exited unexpectedly with status {returncode}")
            if self.on_exit is not None:
                self.on_exit(target, returncode)
