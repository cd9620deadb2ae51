import dataclasses
import json

import pytest

from config import MonitorConfig, config_from_dict, load_config, save_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "absent.json"))
    assert config == MonitorConfig()
    assert config.history_length == 30
    assert config.interval == 1.0
    assert config.bytes_per_unit == 1024
    assert config.ping_target == "1.1.1.1"


def test_partial_file_merges_over_defaults(tmp_path):
    path = tmp_path / "monitor_config.json"
    path.write_text(json.dumps({"ping_target": "9.9.9.9", "threshold_network": 0.5, "column_width": "30"}))

    config = load_config(str(path))

    assert config.ping_target == "9.9.9.9"
    assert config.threshold_network == 0.5
    assert config.column_width == 30
    assert config.threshold_computing == 80


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", ""])
def test_unusable_file_falls_back_to_defaults(tmp_path, content):
    path = tmp_path / "monitor_config.json"
    path.write_text(content)
    assert load_config(str(path)) == MonitorConfig()


def test_unknown_and_invalid_keys_are_ignored(caplog):
    config = config_from_dict({"monitor_index": 3, "interval": "fast", "font_size": 9})
    assert config.interval == 1.0
    assert config.font_size == 9
    messages = " ".join(r.getMessage() for r in caplog.records)
    assert "monitor_index" in messages
    assert "interval" in messages


def test_out_of_range_sampling_settings_reset():
    config = config_from_dict({"history_length": 0, "interval": -1})
    assert config.history_length == 30
    assert config.interval == 1.0


def test_config_is_immutable():
    config = MonitorConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.ping_target = "8.8.8.8"
    updated = config.with_target("8.8.8.8")
    assert updated.ping_target == "8.8.8.8"
    assert config.ping_target == "1.1.1.1"


def test_save_then_load(tmp_path):
    path = str(tmp_path / "monitor_config.json")
    original = MonitorConfig(ping_target="example.org", log_file="monitor.log")
    assert save_config(original, path)
    assert load_config(path) == original


def test_save_to_unwritable_path_reports_failure(tmp_path):
    assert save_config(MonitorConfig(), str(tmp_path / "missing-dir" / "cfg.json")) is False
