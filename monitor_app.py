"""
Wires the store, sampler, scheduler, ping probe and renderer together.
"""

import threading
from typing import Optional

from color_policy import classify_all
from config import MonitorConfig
from constants import PROBE_RESTART_DELAY
from data_fetcher import SamplingScheduler
from history_store import TimeSeriesStore
from log_setup import get_logger
from monitor_core import SampleSource
from ping_probe import LatencyProbe
from sparkline_graphics import SparklineRenderer

log = get_logger("app")


class MonitorApp:
    def __init__(self, config: Optional[MonitorConfig] = None, source: Optional[SampleSource] = None,
                 probe_factory=LatencyProbe, auto_restart_probe: bool = True,
                 restart_delay: float = PROBE_RESTART_DELAY):
        self.config = config or MonitorConfig()
        self.store = TimeSeriesStore(self.config.history_length)
        self.source = source or SampleSource()
        self._listeners = []
        self.scheduler = self._build_scheduler()
        self.probe = probe_factory(self.store, on_exit=self._on_probe_exit)
        self.renderer = SparklineRenderer(self.config)
        self.auto_restart_probe = auto_restart_probe
        self.restart_delay = restart_delay
        self._restart_timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._running = False

    def _build_scheduler(self):
        scheduler = SamplingScheduler(
            self.store,
            self.source,
            interval=self.config.interval,
            bytes_per_unit=self.config.bytes_per_unit,
        )
        for callback in self._listeners:
            scheduler.add_listener(callback)
        return scheduler

    def add_refresh_listener(self, callback):
        self._listeners.append(callback)
        self.scheduler.add_listener(callback)

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
            if self.scheduler.ident is not None:
                # A thread only starts once; a restart after stop() gets a new one
                self.scheduler = self._build_scheduler()
        self.probe.start(self.config.ping_target)
        self.scheduler.start()
        log.info("Monitoring started (ping target %s)", self.config.ping_target)

    def stop(self):
        with self._lock:
            was_running = self._running
            self._running = False
            timer, self._restart_timer = self._restart_timer, None
        if timer is not None:
            timer.cancel()
        self.probe.stop()
        self.scheduler.stop()
        if was_running:
            log.info("Monitoring stopped")

    def change_ping_target(self, target: str) -> MonitorConfig:
        target = (target or "").strip()
        if not target or (target == self.config.ping_target and self.probe.is_running):
            return self.config
        self.config = self.config.with_target(target)
        self.probe.restart(target)
        return self.config

    def emphases(self, snapshots=None):
        if snapshots is None:
            snapshots = self.store.snapshot_all()
        return classify_all(snapshots, self.config)

    def render(self, snapshots=None):
        if snapshots is None:
            snapshots = self.store.snapshot_all()
        return self.renderer.render(snapshots, self.emphases(snapshots))

    # ---- Probe exit policy ----
    def _on_probe_exit(self, target, returncode):
        with self._lock:
            if not (self._running and self.auto_restart_probe):
                return
            if self._restart_timer is not None:
                self._restart_timer.cancel()
            self._restart_timer = threading.Timer(self.restart_delay, self._restart_probe, args=(target,))
            self._restart_timer.daemon = True
            self._restart_timer.start()
        log.info("Restarting ping probe for %s in %.0fs", target, self.restart_delay)

    def _restart_probe(self, target):
        with self._lock:
            self._restart_timer = None
            if not self._running or target != self.config.ping_target:
                return
        self.probe.restart(target)
