"""Decimal arithmetic for conversion results.

Decimal values here follow the conventions of arbitrary-precision decimals in
other languages: the *scale* of a value is the number of digits after the
decimal point (negative for values that end in zeros before the point), and
its *precision* is the number of digits in its coefficient.
"""

import decimal
import math
import numbers
import typing


DEFAULT_PRECISION = 1100
"""The default number of significant digits in intermediate results.

The exact decimal form of any finite double has fewer than 800 digits, so this
value never truncates the result of a floating-point conversion.
"""


class NumericFormatError(ValueError):
    """The value does not represent a finite decimal number."""

    def __init__(self, value: typing.Any) -> None:
        self.value = value

    def __str__(self) -> str:
        return f"Invalid numeric value {self.value!r}"


def context(precision: int=DEFAULT_PRECISION) -> decimal.Context:
    """Create an arithmetic context with the given working precision."""
    return decimal.Context(
        prec=precision,
        rounding=decimal.ROUND_HALF_UP,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
    )


def to_decimal(value: typing.Union[decimal.Decimal, str, numbers.Real]):
    """Convert `value` into a finite decimal number.

    Strings and decimals keep their digits exactly. Floats pass through their
    shortest string form, so that ``0.1`` becomes ``Decimal('0.1')``.

    Raises
    ------
    `~numerical.NumericFormatError`
        The value is not numeric, cannot be parsed, or is not finite.
    """
    if isinstance(value, bool):
        raise NumericFormatError(value)
    if isinstance(value, decimal.Decimal):
        number = value
    elif isinstance(value, str):
        try:
            number = decimal.Decimal(value.strip())
        except decimal.InvalidOperation as err:
            raise NumericFormatError(value) from err
    elif isinstance(value, numbers.Integral):
        number = decimal.Decimal(int(value))
    elif isinstance(value, numbers.Real):
        number = decimal.Decimal(repr(float(value)))
    else:
        raise NumericFormatError(value)
    if not number.is_finite():
        raise NumericFormatError(value)
    return number


def exact(value: float) -> decimal.Decimal:
    """Convert a float into the decimal with exactly the same value."""
    if not math.isfinite(value):
        raise NumericFormatError(value)
    return decimal.Decimal(value)


def scale(value: decimal.Decimal) -> int:
    """The number of digits after the decimal point."""
    return -value.as_tuple().exponent


def precision(value: decimal.Decimal) -> int:
    """The number of digits in the coefficient."""
    return len(value.as_tuple().digits)


def setscale(
    value: decimal.Decimal,
    digits: int,
    ctx: decimal.Context=None,
) -> decimal.Decimal:
    """Round `value` half-up to exactly `digits` digits after the point.

    A negative number of digits rounds to the left of the decimal point. The
    working precision grows as needed to hold every digit of the result.

    Examples
    --------
    >>> numerical.setscale(Decimal('298.149999'), 2)
    Decimal('298.15')
    >>> numerical.setscale(Decimal('1512'), -2)
    Decimal('1.5E+3')
    """
    ctx = ctx or context()
    needed = value.adjusted() + digits + 2
    if needed > ctx.prec:
        ctx = ctx.copy()
        ctx.prec = needed
    quantum = decimal.Decimal(1).scaleb(-digits, context=ctx)
    return value.quantize(
        quantum,
        rounding=decimal.ROUND_HALF_UP,
        context=ctx,
    )


def preserve(
    result: decimal.Decimal,
    reference: decimal.Decimal,
    ctx: decimal.Context=None,
) -> decimal.Decimal:
    """Round `result` to the digits that `reference` supports.

    The search starts from the scale at which `result` would have as many
    significant digits as `reference`, anchors one digit beyond it, and then
    drops trailing digits for as long as doing so leaves the floating-point
    value unchanged. It never drops digits before the decimal point.
    """
    ctx = ctx or context()
    digits = scale(result) + precision(reference) - precision(result)
    current = setscale(result, digits + 1, ctx)
    candidate = setscale(current, digits, ctx)
    while float(current) == float(candidate):
        current = candidate
        if digits > 0:
            digits -= 1
            candidate = setscale(candidate, digits, ctx)
        else:
            break
    return current


def plain(value: decimal.Decimal) -> str:
    """Format `value` without exponential notation."""
    return format(value, 'f')
