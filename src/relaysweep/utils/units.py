"""Base-unit formatting for human-facing text."""

from decimal import Decimal, localcontext
from typing import Union


def format_units(amount: Union[int, str], decimals: int = 18) -> str:
    """Format a base-unit integer as a decimal string.

    Trailing zeros are dropped but at least one fractional digit is kept,
    so ``10**18`` renders as ``"1.0"`` and ``1`` with 18 decimals as
    ``"0.000000000000000001"``.

    Args:
        amount: Amount in base units (int or digit string)
        decimals: Decimal places of the asset

    Returns:
        Human-readable amount
    """
    value = int(amount)
    if decimals < 0:
        raise ValueError("decimals must be non-negative")

    with localcontext() as ctx:
        ctx.prec = max(len(str(abs(value))) + decimals, 28)
        scaled = Decimal(value).scaleb(-decimals)
        text = format(scaled, "f")

    if "." not in text:
        return f"{text}.0"
    whole, frac = text.split(".")
    frac = frac.rstrip("0") or "0"
    return f"{whole}.{frac}"
