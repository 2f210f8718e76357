"""Typed coercion of MPD response fields.

MPD sends every value as text. Which Python type a value becomes
depends only on its field name, looked up in the fixed tables below.
"""

import re
import sys
from datetime import UTC, datetime
from typing import Any

INT_KEYS = frozenset(
    {
        "song",
        "artists",
        "albums",
        "songs",
        "uptime",
        "playtime",
        "db_playtime",
        "volume",
        "playlistlength",
        "xfade",
        "pos",
        "id",
        "date",
        "track",
        "disc",
        "outputid",
        "mixrampdelay",
        "bitrate",
        "nextsong",
        "nextsongid",
        "songid",
        "updating_db",
        "priority",
    }
)

FLOAT_KEYS = frozenset({"mixrampdb", "elapsed", "duration"})
BOOL_KEYS = frozenset({"repeat", "random", "single", "consume", "outputenabled"})
SYM_KEYS = frozenset({"command", "state", "changed", "replay_gain_mode", "tagtype"})

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def to_int(value: str) -> int:
    """Parse the leading integer of ``value``, 0 if there is none."""
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else 0


def to_float(value: str) -> float:
    """Parse the leading number of ``value``; ``"nan"`` maps to NaN."""
    if value.strip().lower() == "nan":
        return float("nan")
    match = _FLOAT_PREFIX.match(value)
    return float(match.group(1)) if match else 0.0


def _parse_time(value: str) -> tuple[int | None, int]:
    # "elapsed:total" in status, bare "total" in song records
    if ":" in value:
        elapsed, total = value.split(":", 1)
        return to_int(elapsed), to_int(total)
    return None, to_int(value)


def _parse_timestamp(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def coerce(key: str, value: str) -> Any:
    """Convert a raw field value to its typed form.

    Args:
        key: Lower-cased field name.
        value: Raw text from the wire.

    Returns:
        int, float, bool, interned str, datetime, tuple or the raw text.
    """
    if key in INT_KEYS:
        return to_int(value)
    if key in FLOAT_KEYS:
        return to_float(value)
    if key in BOOL_KEYS:
        return value != "0"
    if key in SYM_KEYS:
        return sys.intern(value)
    if key == "playlist":
        # Queue version in status (non-zero), playlist name elsewhere
        number = to_int(value)
        return number if number else value
    if key == "db_update":
        return datetime.fromtimestamp(to_int(value), tz=UTC)
    if key == "last-modified":
        return _parse_timestamp(value)
    if key == "time":
        return _parse_time(value)
    if key == "audio":
        return tuple(to_int(part) for part in value.split(":"))
    return value


def parse_line(line: str, raw_keys: frozenset[str] = frozenset()) -> tuple[str, Any]:
    """Split a ``key: value`` line into a lower-cased key and typed value.

    Keys listed in ``raw_keys`` keep their raw text.
    """
    key, _, value = line.partition(":")
    if value.startswith(" "):
        value = value[1:]
    key = key.lower()
    value = value.rstrip("\n")
    if key in raw_keys:
        return key, value
    return key, coerce(key, value)
