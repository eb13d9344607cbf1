"""Normalization of locale-flavoured numeric strings."""
from __future__ import annotations

import math
import re
from decimal import Decimal

_STRIP_CHARS = re.compile(r'[$,"\s]')
_EDIT_PATTERN = re.compile(r"^\d*\.?\d*$")


def parse_number(value: object) -> float:
    """Parse ``$12,345.67``-style cells into floats; anything unusable is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    s = _STRIP_CHARS.sub("", str(value))
    if not s:
        return 0.0
    try:
        number = float(s)
    except ValueError:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def normalize_edit_input(raw: str) -> str:
    """Keystroke-level normalization: decimal comma to point, else keep raw.

    Interim states such as ``""`` or ``"1."`` are accepted as-is.
    """
    normalized = raw.replace(",", ".", 1)
    if _EDIT_PATTERN.match(normalized):
        return normalized
    return raw


def commit_edit_input(raw: str) -> str:
    """Canonicalize a buffer when editing finishes (focus loss)."""
    if not raw:
        return raw
    try:
        number = float(raw)
    except ValueError:
        return raw
    if not math.isfinite(number):
        return raw
    # positional notation so the buffer stays editable (no "1e-07")
    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
