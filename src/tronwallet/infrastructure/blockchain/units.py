"""Conversion between ledger integers and decimal display amounts."""

from decimal import Decimal, InvalidOperation, localcontext

from tronwallet.core.exceptions import InvalidAmount, PrecisionError

# 1 TRX = 1_000_000 SUN
TRX_DECIMALS = 6

# Enough digits for any uint256 at any scale we use
_PRECISION = 100


def _as_decimal(amount: Decimal | int | float | str) -> Decimal:
    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, float):
        value = Decimal(str(amount))
    else:
        try:
            value = Decimal(amount)
        except (InvalidOperation, TypeError, ValueError) as e:
            raise InvalidAmount(f"not a number: {amount!r}") from e

    if not value.is_finite():
        raise InvalidAmount(f"amount must be finite: {amount!r}")
    if value < 0:
        raise InvalidAmount(f"amount must not be negative: {amount!r}")
    return value


def to_smallest_unit(
    amount: Decimal | int | float | str, decimals: int = TRX_DECIMALS
) -> int:
    """Convert a display amount to smallest units.

    Args:
        amount: Display amount (e.g. TRX)
        decimals: Fixed scale of the unit

    Returns:
        Integer amount in smallest units (e.g. SUN)

    Raises:
        PrecisionError: More than ``decimals`` significant fractional digits
        InvalidAmount: Negative, NaN, infinite or unparseable input
    """
    value = _as_decimal(amount)

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        normalized = value.normalize()
        if normalized.as_tuple().exponent < -decimals:
            raise PrecisionError(
                f"{amount} has more than {decimals} decimal places"
            )
        return int(value.scaleb(decimals))


def to_display(value: int, decimals: int = TRX_DECIMALS) -> Decimal:
    """Convert smallest units to an exact display amount."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(int(value)).scaleb(-decimals)
