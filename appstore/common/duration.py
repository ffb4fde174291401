"""Duration string parsing.

Intervals are configured as short human strings such as ``"5m"`` or
``"90s"``. A bare number is read as seconds.

Examples
--------
>>> parse_duration("5m")
300.0
>>> parse_duration("250ms")
0.25

"""

from __future__ import annotations

import re

_UNIT_SECONDS: dict[str, float] = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
}

_DURATION_RE = re.compile(r"^\s*(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>ms|s|m|h|d)?\s*$")


def parse_duration(raw: str) -> float:
    """Convert a duration string into seconds.

    Parameters
    ----------
    raw
        Duration such as ``"300"``, ``"45s"``, ``"5m"``, ``"1h"`` or
        ``"250ms"``.

    Returns
    -------
    float
        The duration in seconds; always strictly positive.

    Raises
    ------
    ValueError
        If ``raw`` is not a recognised duration or is zero.

    """
    match = _DURATION_RE.match(raw)
    if match is None:
        msg = f"Invalid duration: {raw!r}"
        raise ValueError(msg)

    seconds = float(match["value"]) * _UNIT_SECONDS[match["unit"] or "s"]
    if seconds <= 0:
        msg = f"Duration must be positive: {raw!r}"
        raise ValueError(msg)
    return seconds
