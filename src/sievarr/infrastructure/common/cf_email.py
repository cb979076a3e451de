"""Cloudflare e-mail obfuscation decoding.

Cloudflare rewrites e-mail addresses into
``<span class="__cf_email__" data-cfemail="HEX">``.  The first byte of the
hex payload is an XOR key for the remaining bytes.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

CF_EMAIL_MARKER = "__cf_email__"


def decode_cf_email(encoded: str) -> str:
    """Decode a ``data-cfemail`` hex payload into the plaintext address."""
    if not encoded or len(encoded) < 2:
        return ""
    key = int(encoded[:2], 16)
    return "".join(
        chr(int(encoded[i : i + 2], 16) ^ key) for i in range(2, len(encoded) - 1, 2)
    )


def unmask_cf_emails(soup: BeautifulSoup) -> int:
    """Replace every obfuscated e-mail span in *soup* in place.

    Returns the number of replaced elements.
    """
    replaced = 0
    for span in soup.select(f".{CF_EMAIL_MARKER}"):
        payload = span.get("data-cfemail")
        if not payload:
            continue
        span.replace_with(decode_cf_email(str(payload)))
        replaced += 1
    return replaced
