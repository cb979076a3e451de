"""URL helpers."""

from __future__ import annotations


def url_join(*parts: str) -> str:
    """Concatenate URL parts with exactly one ``/`` between them.

    Unlike ``urllib.parse.urljoin`` this never resolves relative to the
    base's parent, so ``url_join("https://x/base/", "/path")`` is
    ``"https://x/base/path"``.  Parts starting with ``?`` or ``#`` are
    appended without a separator.
    """
    parts = tuple(p for p in parts if p)
    if not parts:
        return ""

    result = parts[0]
    for part in parts[1:]:
        if part.startswith(("?", "#")):
            result = result.rstrip("/") + part
        else:
            result = result.rstrip("/") + "/" + part.lstrip("/")
    return result


def is_absolute_http(url: str) -> bool:
    return url[:4].lower() == "http"
