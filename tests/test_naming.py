import re

import pytest

from aeron_exporter.core.naming import sanitize


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Bytes sent", "aeron_bytes_sent"),
        ("Failed offers to ReceiverProxy", "aeron_failed_offers_to_receiverproxy"),
        ("Sender flow control limits, i.e. back-pressure events", "aeron_sender_flow_control_limits_ie_backpressure_events"),
        ("client-heartbeat: 1", "aeron_clientheartbeat_"),
    ],
)
def test_counter_labels_are_renamed_for_prometheus(label, expected):
    assert sanitize(label) == expected


@pytest.mark.parametrize(
    "label",
    [
        "",
        "   ",
        "123",
        "ALL CAPS",
        "tab\tseparated",
        "Ünïcödé label",
        "İstanbul",
        "sender pos: 12 34 aeron:udp?endpoint=localhost:24325",
        "under_score__kept",
        "x" * 1000,
    ],
)
def test_sanitized_names_are_prefixed_lowercase_underscore(label):
    assert re.fullmatch(r"aeron_[a-z_]*", sanitize(label))


def test_labels_differing_only_in_digits_collide():
    assert sanitize("client-heartbeat: 1") == sanitize("client-heartbeat: 2")
