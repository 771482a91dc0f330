"""US Treasury fractional price notation.

Prices are quoted as ``"<handle>-<32nds><8th>"`` where the last character is
the number of 256ths (``0``-``7``) and ``+`` stands for a half 32nd (4/256).

Examples:
    "100-16+" -> 100 + 16/32 + 4/256 = 100.515625
    "99-317"  -> 99 + 31/32 + 7/256
"""

from __future__ import annotations

import math
import re

from trading_desk.core.domain.errors import MalformedRecordError

_FRACTIONAL_PRICE_RE = re.compile(r"^(?P<handle>\d+)-(?P<x32>[0-2]\d|3[01])(?P<x256>[0-7+])$")

# Absorbs binary representation error when flooring multiples of 1/256.
_EPSILON = 1e-9


def parse_fractional_price(text: str) -> float:
    """Convert a fractional price string into a decimal price."""
    match = _FRACTIONAL_PRICE_RE.match(text.strip())
    if match is None:
        raise MalformedRecordError("invalid fractional price", text)

    x256 = match.group("x256")
    eighths = 4 if x256 == "+" else int(x256)

    return int(match.group("handle")) + int(match.group("x32")) / 32.0 + eighths / 256.0


def format_fractional_price(value: float) -> str:
    """Convert a decimal price into fractional notation.

    Values are truncated (not rounded) to the nearest lower 1/256.
    """
    if value < 0 or math.isnan(value) or math.isinf(value):
        raise ValueError(f"price must be a finite non-negative number, got {value}")

    handle = math.floor(value + _EPSILON)
    total_256ths = max(0, math.floor((value - handle) * 256.0 + _EPSILON))
    x32, x256 = divmod(total_256ths, 8)

    last = "+" if x256 == 4 else str(x256)
    return f"{handle}-{x32:02d}{last}"
