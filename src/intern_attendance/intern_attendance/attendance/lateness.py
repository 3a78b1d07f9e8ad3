from __future__ import annotations

from ..common.datetime_utils import parse_hhmm


def is_late(arrival: str, threshold: str) -> bool:
    """True when ``arrival`` is strictly after ``threshold``.

    Both are "HH:MM" strings; "." is accepted as the minute separator.
    """

    return parse_hhmm(arrival) > parse_hhmm(threshold)
