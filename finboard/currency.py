from decimal import ROUND_HALF_UP, Decimal

from finboard.errors import ConfigurationFailure

SYMBOLS = {
    "eur": "€",
    "usd": "$",
}

CENTS = Decimal("0.01")


def resolve(pref: str) -> str:
    """Display symbol for a stored currency preference code."""
    try:
        return SYMBOLS[pref]
    except (KeyError, TypeError):
        raise ConfigurationFailure(f"Unsupported currency preference {pref!r}") from None


def format_amount(amount: Decimal, symbol: str) -> str:
    rounded = Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,}"
