import pytest

from color_policy import (
    ChannelKind,
    Emphasis,
    classify,
    classify_all,
    color_scheme,
    complementary_color,
    hex_to_rgb,
    kind_of,
)
from config import MonitorConfig
from history_store import Channel, TimeSeriesStore


@pytest.mark.parametrize("kind, value, threshold, expected", [
    (ChannelKind.COMPUTING, 85, 80, Emphasis.INVERTED),
    (ChannelKind.COMPUTING, 79, 80, Emphasis.NORMAL),
    (ChannelKind.COMPUTING, 80, 80, Emphasis.INVERTED),
    (ChannelKind.NETWORK, 0.5, 1, Emphasis.INVERTED),
    (ChannelKind.NETWORK, 1, 1, Emphasis.INVERTED),
    (ChannelKind.NETWORK, 300, 1, Emphasis.NORMAL),
    (ChannelKind.LATENCY, 100, 100, Emphasis.INVERTED),
    (ChannelKind.LATENCY, 23.4, 100, Emphasis.NORMAL),
])
def test_classify_rule_table(kind, value, threshold, expected):
    assert classify(kind, value, threshold) is expected


def test_classify_default_thresholds():
    assert classify(ChannelKind.COMPUTING, 80) is Emphasis.INVERTED
    assert classify(ChannelKind.NETWORK, 2) is Emphasis.NORMAL
    assert classify(ChannelKind.LATENCY, 9999) is Emphasis.INVERTED


def test_channel_kinds():
    assert kind_of(Channel.CPU) is kind_of(Channel.MEMORY) is ChannelKind.COMPUTING
    assert kind_of(Channel.TX) is kind_of(Channel.RX) is ChannelKind.NETWORK
    assert kind_of(Channel.PING) is ChannelKind.LATENCY


def test_classify_all_uses_latest_value_and_config():
    store = TimeSeriesStore(3)
    store.append(Channel.CPU, 95)
    store.append(Channel.CPU, 10)
    store.append(Channel.TX, 50)
    store.append(Channel.PING, 150)

    emphases = classify_all(store.snapshot_all(), MonitorConfig(threshold_ping_ms=200))

    assert emphases[Channel.CPU] is Emphasis.NORMAL
    assert emphases[Channel.MEMORY] is Emphasis.NORMAL
    assert emphases[Channel.TX] is Emphasis.NORMAL
    # Idle link: nothing received yet
    assert emphases[Channel.RX] is Emphasis.INVERTED
    assert emphases[Channel.PING] is Emphasis.NORMAL


def test_inverted_scheme_uses_complement():
    assert hex_to_rgb("#00FF66") == (0, 255, 102)
    assert complementary_color((0, 255, 102)) == (255, 0, 153)

    fill, line = color_scheme(Emphasis.NORMAL, "#00FF66")
    assert line == (0, 255, 102)
    assert fill == (0, 255, 102, 76)

    _, inverted = color_scheme(Emphasis.INVERTED, "#00FF66")
    assert inverted == (255, 0, 153)


def test_bad_accent_is_rejected():
    with pytest.raises(ValueError):
        hex_to_rgb("green")
