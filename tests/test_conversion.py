"""
test_conversion.py — Building Cash from numbers and text
"""

from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from cash import (
    Cash,
    Currency,
    Interpretation,
    InvalidAmount,
    clean_text,
    from_decimal,
    from_float,
    from_integer,
    from_text,
    set_defaults,
    to_cash,
)


class TestNumbers:

    def test_from_integer(self):
        assert from_integer(100).cents == 100

    def test_from_integer_with_options(self):
        c = from_integer(100, currency="usd", units_per_whole=1)
        assert c.currency == "usd"
        assert str(c) == "100"

    def test_from_integer_whole_units(self):
        assert from_integer(123, interpretation=Interpretation.WHOLE_DECIMAL).cents == 12300

    @pytest.mark.parametrize("value", [1.5, "1", True])
    def test_from_integer_rejects_other_types(self, value):
        with pytest.raises(TypeError):
            from_integer(value)

    def test_from_float(self):
        assert from_float(2.5).cents == 3
        assert from_float(2.5, rounding="half_even").cents == 2

    def test_from_float_rejects_int(self):
        with pytest.raises(TypeError):
            from_float(2)

    def test_from_decimal(self):
        assert from_decimal(Decimal("12345")).cents == 12345

    def test_numbers_ignore_whole_decimal_default(self):
        set_defaults(interpretation="whole_decimal")
        assert from_integer(5).cents == 5
        assert Cash(5).cents == 500


class TestText:

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("123.45", "123.45"),
            ("$1,234.50", "1234.50"),
            ("EUR 12.00 ", "12.00"),
            ("1,000,000", "1000000"),
            ("-5", "5"),
            ("abc", ""),
        ],
    )
    def test_clean_text(self, text, expected):
        assert clean_text(text) == expected

    def test_from_text(self):
        assert from_text("123.45").cents == 12345

    def test_from_text_with_symbols_and_separators(self):
        assert from_text("$1,234.56").cents == 123456

    def test_from_text_rounds_extra_digits(self):
        assert from_text("1.999").cents == 200

    def test_from_text_with_currency_granularity(self):
        c = from_text("¥1,000", currency=Currency.JPY)
        assert c.cents == 1000
        assert str(c) == "1000"

    def test_from_text_minor_units(self):
        assert from_text("12345", interpretation="minor_units").cents == 12345

    def test_from_text_nothing_numeric_raises(self):
        with pytest.raises(InvalidAmount):
            from_text("free")

    def test_from_text_malformed_raises(self):
        with pytest.raises(InvalidAmount):
            from_text("1.2.3")

    def test_round_trip(self):
        c = Cash(12345)
        assert str(c) == "123.45"
        assert from_text(str(c)) == c

    @given(cents=st.integers(min_value=0, max_value=10**12))
    @settings(max_examples=300)
    def test_round_trip_property(self, cents):
        c = Cash(cents)
        assert from_text(c.to_decimal_string()).cents == cents


class TestToCash:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (100, 100),
            (2.5, 3),
            (Decimal("7"), 7),
            ("1.10", 110),
        ],
    )
    def test_dispatch(self, value, expected):
        assert to_cash(value).cents == expected

    def test_options_are_forwarded(self):
        assert to_cash("5", currency=Currency.KWD).cents == 5000

    def test_cash_is_returned_unchanged(self):
        c = Cash(1234, currency="usd")
        assert to_cash(c) is c
        assert to_cash(c, currency="eur") is c

    @pytest.mark.parametrize("value", [None, [1], True])
    def test_unsupported_types_raise(self, value):
        with pytest.raises(TypeError):
            to_cash(value)
