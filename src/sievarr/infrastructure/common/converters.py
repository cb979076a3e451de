"""Type conversion utilities."""

from __future__ import annotations

import re
from typing import Any

_INT_RE = re.compile(r"-?\d+")
_FLOAT_RE = re.compile(r"-?\d*\.\d+")
_NUMBER_CHARS_RE = re.compile(r"[^\d.\-]")


def try_to_number(raw: Any) -> Any:
    """Best-effort numeric coercion.

    Numbers pass through, numeric-looking strings become ``int`` or
    ``float``, everything else is returned unchanged:
        - "12" → 12
        - " -3 " → -3
        - "4.5" → 4.5
        - "1,234" → "1,234" (use the ``parseNumber`` filter for separators)
        - None → None
    """
    if raw is None or isinstance(raw, bool):
        return raw

    if isinstance(raw, (int, float)):
        return raw

    if isinstance(raw, str):
        txt = raw.strip()
        if _INT_RE.fullmatch(txt):
            return int(txt)
        if _FLOAT_RE.fullmatch(txt):
            return float(txt)

    return raw


def parse_number(raw: Any) -> int | float | None:
    """Parse a number out of a decorated string.

    Handles thousands separators and surrounding text:
        - "1,234" → 1234
        - "Seeders: 56" → 56
        - "3.5k" → 3.5
        - "" → None
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, (int, float)):
        return raw

    txt = _NUMBER_CHARS_RE.sub("", str(raw))
    if not txt or txt in {"-", ".", "-."}:
        return None

    try:
        return int(txt)
    except ValueError:
        pass
    try:
        return float(txt)
    except ValueError:
        return None
