from __future__ import annotations

import re

AERON_PREFIX = "aeron_"

_INVALID_CHARS = re.compile(r"[^A-Za-z_]")
_ASCII_UPPER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")


def sanitize(label: str) -> str:
    """
    Turn an Aeron counter label into a Prometheus sample name.

    "Sender flow control limits, i.e. back-pressure events"
        -> "aeron_sender_flow_control_limits_ie_backpressure_events"

    Digits and punctuation are dropped rather than replaced, so labels that
    differ only in those characters end up with the same name.
    """
    name = (label or "").translate(_ASCII_UPPER).replace(" ", "_")
    return AERON_PREFIX + _INVALID_CHARS.sub("", name)
