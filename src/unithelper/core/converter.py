import decimal
import logging
import typing

from unithelper.core import metric
from unithelper.core import numerical
from unithelper.core import parsing


logger = logging.getLogger(__name__)


class Converter:
    """Convert numerical values between unit expressions.

    The affine conversion itself runs in binary floating point. The result
    then becomes an exact decimal, which this class rounds either to a fixed
    number of digits or to the digits that the input value supports (see
    `~numerical.preserve`).
    """

    def __init__(
        self,
        parser: parsing.Parser,
        ctx: decimal.Context=None,
    ) -> None:
        self.parser = parser
        self.context = ctx or numerical.context()

    def units(self, source: str, target: str) -> typing.Tuple[metric.Unit, ...]:
        """Resolve the source and target expressions."""
        return self.parser.resolve(source), self.parser.resolve(target)

    def convert(
        self,
        source: str,
        target: str,
        value,
        scale: int=None,
    ) -> decimal.Decimal:
        """Convert `value` from `source` units to `target` units.

        Parameters
        ----------
        source : string
            The unit expression of `value`.

        target : string
            The unit expression of the result.

        value : decimal, string, or real number
            The numerical value to convert.

        scale : int, optional
            The exact number of digits after the decimal point in the result,
            rounding half-up. If omitted, the result keeps only the digits
            supported by `value`.

        Raises
        ------
        `~metric.DimensionMismatchError`
            The two expressions measure different quantities.
        `~numerical.NumericFormatError`
            The value is not a finite number, or the result overflows.
        """
        u0, u1 = self.units(source, target)
        number = numerical.to_decimal(value)
        raw = numerical.exact(u0.convert(float(number), u1))
        if scale is not None:
            result = numerical.setscale(raw, int(scale), self.context)
        else:
            result = numerical.preserve(raw, number, self.context)
        logger.debug(
            "Converted %s %r to %s %r",
            number, source, numerical.plain(result), target,
        )
        return result
