"""Rupiah amount parsing and formatting.

Rupiah has no subunit in this system, so both ``.`` and ``,`` are treated as
grouping separators and dropped. That makes the parser lossy for any currency
that uses either character as a decimal mark; do not reuse it for those.
"""

from __future__ import annotations

import re

# "Rp", "rp.", "RP  " ... anywhere in the text.
_CURRENCY_PREFIX_RE = re.compile(r"Rp\.?\s*", re.IGNORECASE)
# Leading integer, as a lenient number parser would read it ("12abc" -> 12).
_LEADING_INT_RE = re.compile(r"[+-]?\d+")


def _clean(text: str) -> str:
    s = _CURRENCY_PREFIX_RE.sub("", text)
    s = s.replace(".", "").replace(",", "")
    return s.strip()


def try_parse_amount(text: str | None) -> int | None:
    """Parse a locale-formatted Rupiah string, or return ``None`` if no number is found.

    >>> try_parse_amount("Rp 1.125.000")
    1125000
    >>> try_parse_amount("abc") is None
    True
    """

    if text is None:
        return None
    m = _LEADING_INT_RE.match(_clean(text))
    if m is None:
        return None
    return int(m.group(0))


def parse_amount(text: str | None) -> int:
    """Parse a Rupiah string; anything unparseable yields ``0``.

    Steps: strip ``Rp``/``Rp.`` prefixes (case-insensitive), drop every ``.``
    and ``,``, then read the leading integer.
    """

    value = try_parse_amount(text)
    return 0 if value is None else value


def format_rupiah(amount: int) -> str:
    """Render ``amount`` the way the id-ID locale does: ``Rp 1.125.000``."""

    sign = "-" if amount < 0 else ""
    grouped = f"{abs(int(amount)):,}".replace(",", ".")
    return f"{sign}Rp {grouped}"


__all__ = ["format_rupiah", "parse_amount", "try_parse_amount"]
