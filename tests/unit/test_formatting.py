from datetime import datetime, timezone
from decimal import Decimal
import pytest
from utils.formatting import (format_currency, calculate_discount_price, get_star_rating,
    to_iso_timestamp, parse_timestamp, format_date_short, format_date_long, format_report_date)


def test_format_currency_groups_thousands():
    assert format_currency(Decimal("1234.5")) == "₹1,234.50"
    assert format_currency(80) == "₹80.00"
    assert format_currency(Decimal("1250000")) == "₹1,250,000.00"


def test_format_currency_rounds_half_up():
    assert format_currency(Decimal("0.005")) == "₹0.01"
    assert format_currency(2.675) == "₹2.68"


def test_format_currency_negative_and_custom_symbol():
    assert format_currency(-5) == "-₹5.00"
    assert format_currency(10, symbol="$") == "$10.00"


def test_calculate_discount_price():
    assert calculate_discount_price(100, 20) == 80
    assert calculate_discount_price(100, 0) == 100
    assert calculate_discount_price(Decimal("2500.00"), 20) == Decimal("2000")


def test_calculate_discount_price_ignores_non_positive_discount():
    assert calculate_discount_price(100, None) == 100
    assert calculate_discount_price(100, -10) == 100


@pytest.mark.parametrize("rating, expected", [
    (4.5, ["full", "full", "full", "full", "half"]),
    (3.2, ["full", "full", "full", "empty", "empty"]),
    (5, ["full"] * 5),
    (0.6, ["half", "empty", "empty", "empty", "empty"]),
    (0, ["empty"] * 5),
])
def test_get_star_rating(rating, expected):
    stars = get_star_rating(rating)

    assert [star["type"] for star in stars] == expected
    assert [star["key"] for star in stars] == [0, 1, 2, 3, 4]


def test_to_iso_timestamp_from_datetime():
    value = datetime(2024, 3, 5, 14, 7, 9, 120000, tzinfo=timezone.utc)
    assert to_iso_timestamp(value) == "2024-03-05T14:07:09.120Z"


def test_to_iso_timestamp_converts_offsets_to_utc():
    assert to_iso_timestamp("2024-03-05T19:37:09+05:30") == "2024-03-05T14:07:09.000Z"


def test_to_iso_timestamp_treats_naive_as_utc():
    assert to_iso_timestamp(datetime(2024, 3, 5, 14, 7, 9)) == "2024-03-05T14:07:09.000Z"
    assert to_iso_timestamp("2024-03-05 14:07:09") == "2024-03-05T14:07:09.000Z"


def test_to_iso_timestamp_defaults_to_now():
    before = datetime.now(timezone.utc).replace(microsecond=0)
    stamp = to_iso_timestamp(None)

    assert stamp.endswith("Z")
    assert parse_timestamp(stamp) >= before


def test_parse_timestamp_rejects_garbage():
    with pytest.raises(ValueError):
        parse_timestamp("not a date")
    with pytest.raises(ValueError):
        parse_timestamp(12345)


def test_short_and_long_dates():
    value = "2023-04-29T13:05:00.000Z"

    assert format_date_short(value) == "Apr 29, 2023"
    assert format_date_long(value) == "April 29th, 2023"


@pytest.mark.parametrize("day, expected", [
    (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
    (11, "11th"), (12, "12th"), (13, "13th"), (22, "22nd"), (31, "31st"),
])
def test_long_date_ordinals(day, expected):
    value = datetime(2023, 1, day, tzinfo=timezone.utc)
    assert format_date_long(value) == f"January {expected}, 2023"


def test_format_report_date():
    assert format_report_date("2023-04-29T13:05:00.000Z") == "2023-04-29 13:05:00"
