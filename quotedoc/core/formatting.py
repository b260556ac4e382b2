# quotedoc/core/formatting.py
"""
Display formatting for quotation values.

Money and dates are formatted following the conventions of the locale that
belongs to the quotation's currency (USD -> en-US, INR -> en-IN, SEK -> sv-SE
...). Everything here is a pure function of its arguments: no host locale,
no clock, no timezone.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, NamedTuple, Optional

NBSP = "\u00a0"
NBSP_NARROW = "\u202f"

DEFAULT_CURRENCY = "USD"


class LocaleFormat(NamedTuple):
    group: str
    decimal: str
    symbol_after: bool
    symbol_space: bool
    date_pattern: str
    lakh: bool = False


# ---------- Locale conventions ----------

LOCALES: Dict[str, LocaleFormat] = {
    "en-US": LocaleFormat(",", ".", False, False, "{m}/{d}/{y}"),
    "en-GB": LocaleFormat(",", ".", False, False, "{dd}/{mm}/{y}"),
    "en-IN": LocaleFormat(",", ".", False, False, "{d}/{m}/{y}", lakh=True),
    "en-CA": LocaleFormat(",", ".", False, False, "{y}-{mm}-{dd}"),
    "en-AU": LocaleFormat(",", ".", False, False, "{dd}/{mm}/{y}"),
    "de-DE": LocaleFormat(".", ",", True, True, "{d}.{m}.{y}"),
    "de-CH": LocaleFormat("’", ".", False, True, "{d}.{m}.{y}"),
    "fr-FR": LocaleFormat(NBSP_NARROW, ",", True, True, "{dd}/{mm}/{y}"),
    "es-MX": LocaleFormat(",", ".", False, False, "{d}/{m}/{y}"),
    "es-AR": LocaleFormat(".", ",", False, True, "{d}/{m}/{y}"),
    "pt-BR": LocaleFormat(".", ",", False, True, "{dd}/{mm}/{y}"),
    "sv-SE": LocaleFormat(NBSP, ",", True, True, "{y}-{mm}-{dd}"),
    "nb-NO": LocaleFormat(NBSP, ",", True, True, "{d}.{m}.{y}"),
    "da-DK": LocaleFormat(".", ",", True, True, "{d}.{m}.{y}"),
    "pl-PL": LocaleFormat(NBSP, ",", True, True, "{d}.{mm}.{y}"),
    "cs-CZ": LocaleFormat(NBSP, ",", True, True, "{d}. {m}. {y}"),
    "ru-RU": LocaleFormat(NBSP, ",", True, True, "{dd}.{mm}.{y}"),
    "tr-TR": LocaleFormat(".", ",", False, False, "{dd}.{mm}.{y}"),
    "ja-JP": LocaleFormat(",", ".", False, False, "{y}/{m}/{d}"),
    "zh-CN": LocaleFormat(",", ".", False, False, "{y}/{m}/{d}"),
    "ko-KR": LocaleFormat(",", ".", False, False, "{y}. {m}. {d}."),
    "ar-AE": LocaleFormat(",", ".", True, True, "{d}/{m}/{y}"),
}

# code -> (symbol, locale, fraction digits)
CURRENCIES: Dict[str, tuple] = {
    "USD": ("$", "en-US", 2),
    "EUR": ("€", "en-GB", 2),
    "GBP": ("£", "en-GB", 2),
    "JPY": ("¥", "ja-JP", 0),
    "CNY": ("¥", "zh-CN", 2),
    "INR": ("₹", "en-IN", 2),
    "PKR": ("Rs", "en-IN", 2),
    "SGD": ("S$", "en-GB", 2),
    "AED": ("AED", "ar-AE", 2),
    "SAR": ("SAR", "ar-AE", 2),
    "ZAR": ("R", "en-GB", 2),
    "CAD": ("C$", "en-CA", 2),
    "MXN": ("$", "es-MX", 2),
    "BRL": ("R$", "pt-BR", 2),
    "ARS": ("$", "es-AR", 2),
    "AUD": ("A$", "en-AU", 2),
    "NZD": ("NZ$", "en-AU", 2),
    "CHF": ("CHF", "de-CH", 2),
    "NOK": ("kr", "nb-NO", 2),
    "SEK": ("kr", "sv-SE", 2),
    "DKK": ("kr.", "da-DK", 2),
    "PLN": ("zł", "pl-PL", 2),
    "CZK": ("Kč", "cs-CZ", 2),
    "RUB": ("₽", "ru-RU", 2),
    "TRY": ("₺", "tr-TR", 2),
    "KRW": ("₩", "ko-KR", 0),
    "HKD": ("HK$", "en-GB", 2),
}

_ISO_DATE = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})")


def currency_locale(currency: Optional[str]) -> LocaleFormat:
    code = (currency or DEFAULT_CURRENCY).upper()
    entry = CURRENCIES.get(code)
    locale = entry[1] if entry else "en-US"
    return LOCALES[locale]


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _group_digits(int_str: str, sep: str, lakh: bool) -> str:
    """Group the integer part from the right: 1234567 -> 1,234,567 (or 12,34,567)."""
    if len(int_str) <= 3:
        return int_str
    head, tail = int_str[:-3], int_str[-3:]
    size = 2 if lakh else 3
    parts = []
    while head:
        parts.append(head[-size:])
        head = head[:-size]
    return sep.join(reversed(parts)) + sep + tail


def format_number(value: Any, currency: Optional[str] = None, digits: int = 2) -> str:
    """Grouped number without symbol, e.g. 3118.5 -> '3,118.50'. Empty string if not numeric."""
    number = _to_decimal(value)
    if number is None:
        return ""
    loc = currency_locale(currency)
    quant = Decimal(1).scaleb(-digits) if digits else Decimal(1)
    with localcontext() as ctx:
        # room for every integer digit, or quantize overflows the default 28
        ctx.prec = max(ctx.prec, number.adjusted() + digits + 2)
        try:
            rounded = number.quantize(quant, rounding=ROUND_HALF_UP)
        except ArithmeticError:
            return ""
    sign = "-" if rounded < 0 else ""
    text = "{:f}".format(abs(rounded))
    int_part, _, frac_part = text.partition(".")
    out = _group_digits(int_part, loc.group, loc.lakh)
    if digits:
        out += loc.decimal + frac_part
    return sign + out


def format_currency(amount: Any, currency: Optional[str] = None) -> str:
    """
    Format an amount in the quotation's currency.

    2362.5, "USD" -> '$2,362.50'
    2362.5, "SEK" -> '2 362,50 kr'
    Unknown codes keep the code as prefix: 'XYZ 12.00'. None -> ''.
    """
    code = (currency or DEFAULT_CURRENCY).strip().upper() or DEFAULT_CURRENCY
    entry = CURRENCIES.get(code)
    if entry is None:
        body = format_number(amount, code, 2)
        return f"{code} {body}" if body else ""

    symbol, locale, digits = entry
    loc = LOCALES[locale]
    body = format_number(amount, code, digits)
    if not body:
        return ""
    sign = ""
    if body.startswith("-"):
        sign, body = "-", body[1:]
    space = NBSP if loc.symbol_space else ""
    if loc.symbol_after:
        return f"{sign}{body}{space}{symbol}"
    return f"{sign}{symbol}{space}{body}"


def format_percent(value: Any) -> str:
    """10 -> '10%', 12.5 -> '12.5%'."""
    number = _to_decimal(value)
    if number is None:
        return ""
    text = "{:f}".format(number.normalize()) if number != number.to_integral() else str(int(number))
    return f"{text}%"


def parse_date(value: Any) -> Optional[date]:
    """Date part of an ISO-8601 value, ignoring time and offset."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    m = _ISO_DATE.match(value)
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def format_date(value: Any, currency: Optional[str] = None) -> str:
    """
    Locale date for display: '2023-08-15T10:00:00Z' -> '8/15/2023' (en-US).
    Unparseable strings are returned as given; missing values give ''.
    """
    if value is None or value == "":
        return ""
    parsed = parse_date(value)
    if parsed is None:
        return str(value)
    loc = currency_locale(currency)
    return loc.date_pattern.format(
        y=parsed.year,
        m=parsed.month,
        d=parsed.day,
        mm=f"{parsed.month:02d}",
        dd=f"{parsed.day:02d}",
    )
