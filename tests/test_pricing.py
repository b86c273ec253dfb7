from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from utils.pricing import (
    PricingType,
    billing_units,
    calculate_price,
    default_end,
    hours_between,
)

START = datetime(2026, 11, 1, 10, 0)


def test_daily_rate_for_exactly_one_day():
    quote = calculate_price("daily", Decimal("200"), START, START + timedelta(hours=24))
    assert quote.duration == 24
    assert quote.units == 1
    assert quote.total_price == Decimal("200")


def test_partial_hour_rounds_up_to_a_full_unit():
    quote = calculate_price("hourly", "50", START, datetime(2026, 11, 1, 13, 30))
    assert quote.duration == 4
    assert quote.units == 4
    assert quote.total_price == Decimal("200")


def test_one_hour_and_one_minute_bills_two_hours():
    quote = calculate_price(PricingType.HOURLY, "10", START, START + timedelta(hours=1, minutes=1))
    assert quote.units == 2
    assert quote.total_price == Decimal("20")


def test_daily_rate_spills_into_second_day():
    quote = calculate_price("daily", "200", START, START + timedelta(hours=25))
    assert quote.duration == 25
    assert quote.units == 2
    assert quote.total_price == Decimal("400")


def test_weekly_rate_counts_started_weeks():
    quote = calculate_price("weekly", "1200", START, START + timedelta(days=8))
    assert quote.duration == 192
    assert quote.units == 2
    assert quote.total_price == Decimal("2400")


def test_zero_length_window_still_bills_one_unit():
    quote = calculate_price("daily", "200", START, START)
    assert quote.duration == 0
    assert quote.units == 1
    assert quote.total_price == Decimal("200")


def test_duration_is_hours_regardless_of_unit():
    quote = calculate_price("weekly", "1200", START, START + timedelta(days=3))
    assert quote.duration == 72
    assert quote.units == 1


@pytest.mark.parametrize("price", ["0", "-5", 0])
def test_non_positive_price_is_rejected(price):
    with pytest.raises(ValueError):
        calculate_price("hourly", price, START, START + timedelta(hours=1))


def test_unknown_pricing_type_is_rejected():
    with pytest.raises(ValueError):
        calculate_price("monthly", "100", START, START + timedelta(hours=1))


def test_pricing_type_parse_is_case_insensitive():
    assert PricingType.parse(" Daily ") is PricingType.DAILY
    assert PricingType.WEEKLY.unit_hours == 168


def test_helpers():
    assert hours_between(START, START + timedelta(minutes=1)) == 1
    assert billing_units("daily", 48) == 2
    assert billing_units("hourly", 0) == 1
    assert default_end("daily", START) == START + timedelta(days=1)
    assert default_end("hourly", START) == START + timedelta(hours=1)


def test_float_prices_do_not_leak_binary_noise():
    quote = calculate_price("hourly", 0.1, START, START + timedelta(hours=3))
    assert quote.total_price == Decimal("0.3")
    assert quote.as_dict()["totalPrice"] == "0.3"
