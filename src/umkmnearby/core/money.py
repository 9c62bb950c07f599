"""
Rupiah (IDR) price parsing.

Listing providers send prices in two shapes:
- a single fixed number (sometimes as a numeric string),
- a free-text, display-formatted range such as `"Rp20.000 - Rp50.000"`.

Indonesian formatting uses `.` as the thousands separator and `,` for decimals.
Nothing here raises on bad input; unparseable values come back as `None`.
"""

from __future__ import annotations

import math
import re
from typing import Any

_CURRENCY_RE = re.compile(r"(?i)\b(?:rp|idr)\.?")
_GROUPED_RE = re.compile(r"^\d{1,3}(?:\.\d{3})+(?:,\d+)?$")
_COMMA_DECIMAL_RE = re.compile(r"^\d+(?:,\d+)?$")
_DOT_DECIMAL_RE = re.compile(r"^\d+(?:\.\d+)?$")
_AMOUNT_RE = re.compile(r"\d[\d.]*(?:,\d+)?")


def parse_idr_amount(text: str) -> float | None:
    """Parse one formatted amount (`"Rp 20.000"`, `"20000"`, `"1.250,50"`) into a float."""
    s = _CURRENCY_RE.sub("", str(text)).replace("\u00a0", "").replace(" ", "").strip()
    s = s.rstrip(".")
    if not s:
        return None
    if _GROUPED_RE.match(s):
        return float(s.replace(".", "").replace(",", "."))
    if _COMMA_DECIMAL_RE.match(s):
        return float(s.replace(",", "."))
    if _DOT_DECIMAL_RE.match(s):
        return float(s)
    return None


def parse_price_range(text: str | None) -> tuple[float, float] | None:
    """Derive `(minimum, maximum)` from a free-text price; a single amount yields `(x, x)`."""
    if not text:
        return None
    cleaned = _CURRENCY_RE.sub(" ", str(text))
    amounts = [a for a in (parse_idr_amount(m) for m in _AMOUNT_RE.findall(cleaned)) if a is not None]
    if not amounts:
        return None
    return min(amounts), max(amounts)


def coerce_price(value: Any) -> float | None:
    """Best-effort numeric price; `None` for anything that is not a usable number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        out = float(value)
        return out if math.isfinite(out) else None
    if isinstance(value, str):
        return parse_idr_amount(value)
    return None
