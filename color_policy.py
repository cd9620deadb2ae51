from enum import Enum

from constants import FILL_ALPHA, THRESHOLD_COMPUTING, THRESHOLD_NETWORK, THRESHOLD_PING_MS
from history_store import Channel


class Emphasis(Enum):
    NORMAL = "normal"
    INVERTED = "inverted"


class ChannelKind(Enum):
    COMPUTING = "computing"
    NETWORK = "network"
    LATENCY = "latency"


_KIND_BY_CHANNEL = {
    Channel.CPU: ChannelKind.COMPUTING,
    Channel.MEMORY: ChannelKind.COMPUTING,
    Channel.TX: ChannelKind.NETWORK,
    Channel.RX: ChannelKind.NETWORK,
    Channel.PING: ChannelKind.LATENCY,
}

_DEFAULT_THRESHOLDS = {
    ChannelKind.COMPUTING: THRESHOLD_COMPUTING,
    ChannelKind.NETWORK: THRESHOLD_NETWORK,
    ChannelKind.LATENCY: THRESHOLD_PING_MS,
}


def kind_of(channel: Channel) -> ChannelKind:
    return _KIND_BY_CHANNEL[channel]


def classify(kind: ChannelKind, latest_value: float, threshold=None) -> Emphasis:
    """
    Busy CPU/memory and slow ping invert at or above the threshold; an idle
    network link inverts at or below it.
    """
    if threshold is None:
        threshold = _DEFAULT_THRESHOLDS[kind]
    if kind is ChannelKind.NETWORK:
        inverted = latest_value <= threshold
    else:
        inverted = latest_value >= threshold
    return Emphasis.INVERTED if inverted else Emphasis.NORMAL


def thresholds_from_config(config):
    return {
        ChannelKind.COMPUTING: config.threshold_computing,
        ChannelKind.NETWORK: config.threshold_network,
        ChannelKind.LATENCY: config.threshold_ping_ms,
    }


def classify_all(snapshots, config=None):
    """Emphasis for the newest value of every channel in a store snapshot."""
    thresholds = thresholds_from_config(config) if config is not None else _DEFAULT_THRESHOLDS
    result = {}
    for channel, series in snapshots.items():
        kind = kind_of(channel)
        latest = series[-1] if series else 0.0
        result[channel] = classify(kind, latest, thresholds[kind])
    return result


# ---- Color mapping helpers for the renderer ----
def hex_to_rgb(value: str):
    value = value.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"expected #RRGGBB, got {value!r}")
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


def complementary_color(rgb):
    return tuple(255 - c for c in rgb)


def color_scheme(emphasis: Emphasis, accent: str):
    """(fill_rgba, line_rgb) for a column: accent normally, its complement when inverted."""
    line = hex_to_rgb(accent)
    if emphasis is Emphasis.INVERTED:
        line = complementary_color(line)
    fill = line + (round(255 * FILL_ALPHA),)
    return fill, line
