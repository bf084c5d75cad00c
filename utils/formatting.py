"""
Display formatting helpers shared by the order, dashboard and product views.
"""

import math
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from core.config import settings

TWO_PLACES = Decimal("0.01")

REPORT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 0.1 don't drag binary noise along
    return Decimal(str(value))


def format_currency(amount, symbol: str | None = None) -> str:
    """
    Format an amount as money: ``₹1,234.50``.

    Rounds half-up to two places and groups thousands.
    """
    if symbol is None:
        symbol = settings.CURRENCY_SYMBOL

    value = _to_decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def calculate_discount_price(price, discount) -> Decimal:
    """
    Price after a percentage discount.

    A discount of zero (or less) leaves the price untouched. Rounding is
    left to format_currency.
    """
    price = _to_decimal(price)
    discount = _to_decimal(discount or 0)

    if discount <= 0:
        return price

    return price * (Decimal(100) - discount) / Decimal(100)


def get_star_rating(rating, max_stars: int = 5) -> list[dict]:
    """
    Break a rating into star entries for display.

    Whole points become full stars, a remainder of at least .5 becomes a
    half star, everything else is empty.

    Returns:
        A list of ``max_stars`` dicts: ``{"key": index, "type": "full" | "half" | "empty"}``
    """
    rating = max(0.0, min(float(rating or 0), float(max_stars)))
    full = math.floor(rating)
    half = 1 if full < max_stars and rating - full >= 0.5 else 0

    stars = []
    for index in range(max_stars):
        if index < full:
            star_type = "full"
        elif index < full + half:
            star_type = "half"
        else:
            star_type = "empty"
        stars.append({"key": index, "type": star_type})

    return stars


def parse_timestamp(value) -> datetime:
    """
    Parse a stored timestamp into an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC) and ISO-8601 strings,
    including a trailing ``Z``. Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso_timestamp(value=None) -> str:
    """
    Canonical timestamp string, e.g. ``2024-03-05T14:07:09.120Z``.

    A missing value means "now".
    """
    dt = datetime.now(timezone.utc) if value is None else parse_timestamp(value)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_date_short(value) -> str:
    """``Apr 29, 2023``"""
    dt = parse_timestamp(value)
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_date_long(value) -> str:
    """``April 29th, 2023``"""
    dt = parse_timestamp(value)
    return f"{dt:%B} {_ordinal(dt.day)}, {dt.year}"


def format_report_date(value) -> str:
    """``2023-04-29 13:05:00``"""
    return parse_timestamp(value).strftime(REPORT_DATE_FORMAT)
