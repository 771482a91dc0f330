"""
Semantic test: fractional price notation.

Invariant:
"<handle>-<32nds><8th>" parses to handle + 32nds/32 + 8th/256 with "+"
meaning 4/256, and formatting truncates to the lower 1/256.
"""

from __future__ import annotations

from itertools import product

import pytest

from trading_desk.core.domain.errors import MalformedRecordError
from trading_desk.core.domain.fractional_price import (
    format_fractional_price,
    parse_fractional_price,
)


def test_plus_sign_is_a_half_thirty_second() -> None:
    assert parse_fractional_price("100-16+") == 100.515625
    assert format_fractional_price(100.515625) == "100-16+"


def test_parse_extremes_of_the_fraction() -> None:
    assert parse_fractional_price("99-000") == 99.0
    assert parse_fractional_price("100-317") == 100 + 31 / 32 + 7 / 256


def test_format_zero_pads_thirty_seconds() -> None:
    assert format_fractional_price(99.0) == "99-000"
    assert format_fractional_price(99 + 1 / 32 + 2 / 256) == "99-012"


def test_format_truncates_below_one_256th() -> None:
    assert format_fractional_price(100.515625 + 1 / 512) == "100-16+"


@pytest.mark.parametrize("text", ["100-32+", "100.5", "100-1", "abc", "100-16x", "-16+"])
def test_malformed_prices_are_rejected(text: str) -> None:
    with pytest.raises(MalformedRecordError):
        parse_fractional_price(text)


def test_negative_price_cannot_be_formatted() -> None:
    with pytest.raises(ValueError):
        format_fractional_price(-0.5)


_GRAMMAR = [
    f"{handle}-{x32:02d}{last}"
    for handle, x32, last in product((0, 1, 99, 100, 150), range(32), "01234567+")
]


@pytest.mark.parametrize("text", _GRAMMAR)
def test_every_notation_survives_parse_and_format(text: str) -> None:
    # "4" and "+" both denote 4/256; formatting always writes "+".
    expected = text[:-1] + "+" if text.endswith("4") else text
    assert format_fractional_price(parse_fractional_price(text)) == expected
