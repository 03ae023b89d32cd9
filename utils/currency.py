from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from utils.constants import CURRENCY_SYMBOLS, DEFAULT_CURRENCY

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce int/float/str/Decimal to a Decimal rounded to cents.

    Floats go through str() so 0.1 becomes Decimal('0.10'), not its binary expansion.
    """
    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value!r}")
    if not d.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount as e.g. '৳1,234.5' (absolute value, at most 2 decimals)."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    text = f"{abs(to_money(amount)):,.2f}".rstrip("0").rstrip(".")
    return f"{symbol}{text}"


def format_signed(amount, currency: str = DEFAULT_CURRENCY) -> str:
    """Format with +/- sign."""
    sign = "+" if to_money(amount) >= 0 else "-"
    return f"{sign}{format_currency(amount, currency)}"


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"
