# test_scripts/test_money.py

from __future__ import annotations

from decimal import Decimal

import pytest

from assortment.utils.money import is_valid_amount, net_from_gross, quantize, to_major, vat_on


def test_quantize_rounds_half_up():
    assert quantize(2.345) == 235
    assert quantize(2.344) == 234
    assert quantize("0.005") == 1
    assert quantize(0.004) == 0
    # half-up, not banker's rounding: 0.125 -> 13, 0.135 -> 14
    assert quantize("0.125") == 13
    assert quantize("0.135") == 14


def test_quantize_ignores_binary_float_noise():
    # 1.005 is 1.00499999... as a double; the str() path keeps it a tie
    assert quantize(1.005) == 101
    assert quantize(0.1 + 0.2) == 30


def test_quantize_accepts_ints_decimals_and_strings():
    assert quantize(12) == 1200
    assert quantize(Decimal("19.99")) == 1999
    assert quantize("7") == 700


def test_quantize_preserves_order():
    amounts = ["0.001", "0.004", "0.005", "0.5", "1", "1.234", "1.235", "99.999"]
    minors = [quantize(a) for a in amounts]
    assert minors == sorted(minors)


def test_to_major_round_trips_minor_units():
    assert to_major(1999) == Decimal("19.99")
    assert to_major(5) == Decimal("0.05")
    assert quantize(to_major(123456)) == 123456


@pytest.mark.parametrize("bad", [-1, "-0.01", float("nan"), float("inf"), "abc"])
def test_is_valid_amount_rejects_negative_and_non_finite(bad):
    assert is_valid_amount(bad) is False


def test_is_valid_amount_accepts_zero_and_positive():
    assert is_valid_amount(0)
    assert is_valid_amount("12.50")


def test_net_from_gross_and_vat():
    assert net_from_gross(120, 0.20) == 10000
    assert net_from_gross("100", 0.20) == 8333  # 83.333... -> 83.33
    assert vat_on(8333, 0.20) == 1667  # 16.666 -> 16.67
    assert net_from_gross(50, 0) == 5000

    with pytest.raises(ValueError):
        net_from_gross(100, -0.1)
