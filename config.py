"""
Monitor configuration.

Settings live in a JSON file next to the app (see CONFIG_FILE). Missing keys
fall back to DEFAULT_CONFIG and the loaded value is immutable; components
receive it at construction instead of reading globals.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from typing import Optional

from constants import CONFIG_FILE, DEFAULT_CONFIG
from log_setup import get_logger

log = get_logger("config")


@dataclass(frozen=True)
class MonitorConfig:
    history_length: int = DEFAULT_CONFIG["history_length"]
    interval: float = DEFAULT_CONFIG["interval"]
    bytes_per_unit: float = DEFAULT_CONFIG["bytes_per_unit"]
    threshold_computing: float = DEFAULT_CONFIG["threshold_computing"]
    threshold_network: float = DEFAULT_CONFIG["threshold_network"]
    threshold_ping_ms: float = DEFAULT_CONFIG["threshold_ping_ms"]
    graph_max_network: float = DEFAULT_CONFIG["graph_max_network"]
    graph_max_ping_ms: float = DEFAULT_CONFIG["graph_max_ping_ms"]
    ping_target: str = DEFAULT_CONFIG["ping_target"]
    column_width: int = DEFAULT_CONFIG["column_width"]
    graph_height: int = DEFAULT_CONFIG["graph_height"]
    font_size: int = DEFAULT_CONFIG["font_size"]
    accent_color: str = DEFAULT_CONFIG["accent_color"]
    log_level: str = DEFAULT_CONFIG["log_level"]
    log_file: Optional[str] = DEFAULT_CONFIG["log_file"]

    def with_target(self, target: str) -> "MonitorConfig":
        return replace(self, ping_target=target)

    def to_dict(self) -> dict:
        return asdict(self)


def _coerce(key, value):
    default = DEFAULT_CONFIG[key]
    if default is None:
        return None if value is None else str(value)
    if value is None:
        raise ValueError(f"{key} cannot be null")
    return type(default)(value)


def config_from_dict(data: dict) -> MonitorConfig:
    known = {f.name for f in fields(MonitorConfig)}
    values = {}
    for key, value in data.items():
        if key not in known:
            log.warning("Ignoring unknown config key %r", key)
            continue
        try:
            values[key] = _coerce(key, value)
        except (TypeError, ValueError):
            log.warning("Ignoring invalid value %r for %r", value, key)
    config = MonitorConfig(**values)
    if config.history_length < 1 or config.interval <= 0 or config.bytes_per_unit <= 0:
        log.warning("Out-of-range sampling settings in config, using defaults")
        config = replace(config, history_length=DEFAULT_CONFIG["history_length"],
                         interval=DEFAULT_CONFIG["interval"],
                         bytes_per_unit=DEFAULT_CONFIG["bytes_per_unit"])
    return config


def load_config(path: str = CONFIG_FILE) -> MonitorConfig:
    """Reads the configuration from the JSON file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read().strip()
    except FileNotFoundError:
        return MonitorConfig()  # Use defaults
    except OSError as e:
        log.warning("Could not read config %s: %s", path, e)
        return MonitorConfig()

    if not content:
        return MonitorConfig()
    try:
        loaded = json.loads(content)
    except json.JSONDecodeError as e:
        log.warning("Config %s is not valid JSON (%s), using defaults", path, e)
        return MonitorConfig()
    if not isinstance(loaded, dict):
        log.warning("Config %s must hold a JSON object, using defaults", path)
        return MonitorConfig()
    return config_from_dict(loaded)


def save_config(config: MonitorConfig, path: str = CONFIG_FILE) -> bool:
    """Saves the configuration to the JSON file."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
    except OSError as e:
        log.error("Error saving config to %s: %s", path, e)
        return False
    log.info("Configuration saved to %s", path)
    return True
