"""Display formatting for prices and text."""

from typing import Final

CURRENCY_SYMBOL: Final = "₦"  # Naira


def format_price(price: int | float) -> str:
    """Format a price in NGN without decimals, e.g. ``₦1,500,000``."""
    return f"{CURRENCY_SYMBOL}{round(price):,}"


def format_number(number: int | float) -> str:
    if isinstance(number, float) and not number.is_integer():
        return f"{number:,.3f}".rstrip("0").rstrip(".")
    return f"{int(number):,}"


def truncate_text(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, appending an ellipsis when cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."
