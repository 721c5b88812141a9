from srtcore.congestion_control import (
    AutoRate,
    FixedRate,
    MaxRate,
    MessageStats,
    SenderCongestionControl,
    UnlimitedRate,
    data_rate,
    mean_payload_size,
)
from srtcore.stats import StatsWindow

MS = 1_000
START = 10**9


def _feed_one_window(control, payload):
    control.on_input(START, 0, 0)
    control.on_input(START, 1, payload)
    control.on_input(START + 1_000_000, 0, 0)


def test_data_rate_unlimited():
    control = SenderCongestionControl(UnlimitedRate())
    control.on_input(START, 0, 0)
    for n in range(1, 1001):
        control.on_input(START + n * MS, 2, 2_000)
    assert control.snd_period() == 8


def test_data_rate_fixed():
    fixed_rate = 1_000_000
    fixed_overhead = 100
    expected_data_rate = (fixed_overhead + 100) * fixed_rate // 100
    mean_payload = 1_000_000
    expected_mean_packet_size = mean_payload + 44

    control = SenderCongestionControl(FixedRate(rate=fixed_rate, overhead=fixed_overhead))
    _feed_one_window(control, mean_payload)

    assert control.snd_period() == expected_mean_packet_size * 1_000_000 // expected_data_rate


def test_data_rate_max():
    max_data_rate = 10_000_000
    mean_payload = 1_000_000
    expected_mean_packet_size = mean_payload + 44

    control = SenderCongestionControl(MaxRate(max_data_rate))
    _feed_one_window(control, mean_payload)

    assert control.snd_period() == expected_mean_packet_size * 1_000_000 // max_data_rate


def test_data_rate_auto():
    auto_overhead = 5
    expected_data_rate = ((100 + auto_overhead) * 1_000_000) // 100
    mean_payload = 1_000_000
    expected_mean_packet_size = mean_payload + 44

    control = SenderCongestionControl(AutoRate(overhead=auto_overhead))
    _feed_one_window(control, mean_payload)

    assert control.snd_period() == expected_mean_packet_size * 1_000_000 // expected_data_rate


def test_window_size_default_and_custom():
    assert SenderCongestionControl(UnlimitedRate()).window_size() == 1000
    assert SenderCongestionControl(UnlimitedRate(), 25).window_size() == 25


def test_snd_period_never_below_one():
    control = SenderCongestionControl(AutoRate(overhead=0))
    control.on_input(START, 0, 0)
    control.on_input(START + 1_000_000, 0, 0)
    assert control.current_data_rate == 0
    assert control.snd_period() == 1


def test_message_stats_add():
    stats = MessageStats()
    stats.add((3, 300))
    stats.add((1, 50))
    assert (stats.message_count, stats.packet_count, stats.bytes_total) == (2, 4, 350)


def test_window_helpers_with_empty_window():
    window = StatsWindow(stats=MessageStats(), period=0)
    assert mean_payload_size(window) == 0
    assert data_rate(window) == 0


def test_window_helpers():
    window = StatsWindow(stats=MessageStats(1, 4, 4_000), period=2_000_000)
    assert mean_payload_size(window) == 1_000
    assert data_rate(window) == 2_000