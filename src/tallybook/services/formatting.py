"""Display formatting for money values."""

from __future__ import annotations

MASK = "••••••"

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def currency_symbol(currency: str) -> str:
    code = (currency or "").upper()
    return CURRENCY_SYMBOLS.get(code, f"{code} " if code else "")


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(value: float, currency: str = "INR") -> str:
    """Round to whole units and group digits the way the currency's locale does."""

    rounded = round(value)
    digits = str(abs(rounded))
    if (currency or "").upper() == "INR":
        grouped = _group_indian(digits)
    else:
        grouped = f"{abs(rounded):,}"
    sign = "-" if rounded < 0 else ""
    return f"{sign}{currency_symbol(currency)}{grouped}"


def format_currency(value: float, currency: str = "INR", show_values: bool = True) -> str:
    if not show_values:
        return MASK
    return format_amount(value, currency)


def format_percentage(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}%"
