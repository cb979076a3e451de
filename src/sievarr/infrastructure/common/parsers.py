"""Parsing utilities for sizes and timestamps."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from dateutil import parser as date_parser

_SIZE_RE = re.compile(r"([\d.,]+)\s*([KMGTP]?)(I?B)?", re.IGNORECASE)
_THOUSANDS_RE = re.compile(r"\d{1,3}(,\d{3})+")
_OFFSET_RE = re.compile(r"([+-])(\d{2}):?(\d{2})")
_EPOCH_RE = re.compile(r"\d+(\.\d+)?")
_TTL_PART_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*(seconds?|secs?|s|minutes?|mins?|m|hours?|hrs?|h|"
    r"days?|d|weeks?|w|months?|mo|years?|y)\b",
    re.IGNORECASE,
)

_MULTIPLIERS: dict[str, int] = {
    "": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
    "P": 1024**5,
}

_TTL_SECONDS: dict[str, int] = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 7 * 86400,
    "mo": 30 * 86400,
    "y": 365 * 86400,
}

# Epoch values above this are treated as milliseconds.
_EPOCH_MS_THRESHOLD = 100_000_000_000


def _normalize_decimal(value: str) -> str:
    if "," in value and "." in value:
        return value.replace(",", "")
    if "," in value:
        if _THOUSANDS_RE.fullmatch(value):
            return value.replace(",", "")
        return value.replace(",", ".")
    return value


def parse_size_to_bytes(size_str: str) -> int:
    """Parse size string to bytes.

    Supports formats:
        - "1234" (raw bytes)
        - "4.5 GB" / "4.5 GiB" / "4,5 GB"
        - "500 MB"
        - "1.2 TB"

    Units are binary (1 KB = 1024 bytes).  Unparseable input returns 0.
    """
    if not size_str:
        return 0

    size_str = size_str.strip()
    if size_str.isdigit():
        return int(size_str)

    match = _SIZE_RE.search(size_str)
    if not match:
        return 0

    try:
        value = float(_normalize_decimal(match.group(1)))
    except ValueError:
        return 0

    unit = match.group(2).upper()
    return int(value * _MULTIPLIERS.get(unit, 1))


def parse_timezone_offset(offset: str | None) -> timezone:
    """Turn ``"+0800"`` / ``"-05:00"`` into a fixed ``timezone`` (UTC if unset)."""
    if not offset:
        return timezone.utc

    match = _OFFSET_RE.fullmatch(offset.strip())
    if not match:
        raise ValueError(f"Invalid timezone offset: {offset!r}")

    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    return timezone(-delta if sign == "-" else delta)


def _from_epoch(value: float) -> datetime:
    if value > _EPOCH_MS_THRESHOLD:
        value = value / 1000
    return datetime.fromtimestamp(value, tz=timezone.utc)


def parse_time_with_zone(value: Any, timezone_offset: str = "+0000") -> datetime | None:
    """Normalize a source timestamp into an aware UTC ``datetime``.

    - ``datetime``: naive values are interpreted in *timezone_offset*
    - ``int``/``float``/digit strings: unix epoch (seconds or milliseconds)
    - other strings: parsed with ``dateutil``; naive results are
      interpreted in *timezone_offset*

    Returns ``None`` for empty or unparseable input.
    """
    if value is None or isinstance(value, bool):
        return None

    tz = parse_timezone_offset(timezone_offset)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        return _from_epoch(float(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if _EPOCH_RE.fullmatch(text):
            return _from_epoch(float(text))
        try:
            parsed = date_parser.parse(text)
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed.astimezone(timezone.utc)


def parse_ttl(value: Any, now: datetime | None = None) -> datetime | None:
    """Parse a relative age such as ``"2 days 3 hours ago"``.

    Returns ``now`` minus the summed age as an aware UTC ``datetime``, or
    ``None`` if no age unit was found.
    """
    if not isinstance(value, str):
        return None

    parts = _TTL_PART_RE.findall(value)
    if not parts:
        return None

    seconds = 0.0
    for amount, unit in parts:
        key = unit.lower()
        if key.startswith("mo"):
            key = "mo"
        elif key.startswith("mi") or key == "m":
            key = "m"
        else:
            key = key[0]
        seconds += float(amount) * _TTL_SECONDS[key]

    now = now or datetime.now(timezone.utc)
    return now - timedelta(seconds=seconds)
