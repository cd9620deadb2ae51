import json

import main
from config import MonitorConfig
from history_store import TimeSeriesStore
from sparkline_graphics import SparklineRenderer


class HeadlessApp:
    """Drives refresh listeners synchronously from start()."""

    def __init__(self, ticks):
        self.ticks = ticks
        self.config = MonitorConfig()
        self.store = TimeSeriesStore()
        self.renderer = SparklineRenderer(self.config)
        self.listeners = []
        self.stopped = False

    def add_refresh_listener(self, callback):
        self.listeners.append(callback)

    def start(self):
        for _ in range(self.ticks):
            for listener in self.listeners:
                listener(self.store.snapshot_all())

    def stop(self):
        self.stopped = True

    def render(self, snapshot):
        return self.renderer.render(snapshot)


def test_parse_args_defaults():
    args = main.parse_args([])
    assert args.config == "monitor_config.json"
    assert not args.headless
    assert args.ticks == 0


def test_headless_writes_image_and_stops(tmp_path):
    app = HeadlessApp(ticks=3)
    image = tmp_path / "strip.png"
    assert main.run_headless(app, str(image), ticks=2) == 3
    assert image.exists()
    assert app.stopped


def test_ping_target_flag_is_saved(tmp_path, monkeypatch):
    path = tmp_path / "monitor_config.json"
    seen = {}

    def fake_diagnostics(config):
        seen["target"] = config.ping_target

        class Result:
            healthy = True

            def get_colored_text(self):
                return "ok"
        return Result()

    monkeypatch.setattr("debug_core.run_diagnostics", fake_diagnostics)
    assert main.main(["--config", str(path), "--ping-target", "9.9.9.9", "--diagnose"]) == 0
    assert seen["target"] == "9.9.9.9"
    assert json.loads(path.read_text())["ping_target"] == "9.9.9.9"
