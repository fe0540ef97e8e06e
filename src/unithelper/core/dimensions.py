import collections.abc
import enum
import fractions
import numbers
import typing

from unithelper.core import iterables


# References and notes on quantities, dimensions, and units:
# - https://en.wikipedia.org/wiki/International_System_of_Quantities#Base_quantities
# - https://www.nist.gov/pml/weights-and-measures/metric-si/si-units
# - Plane and solid angle are treated as base quantities in their own right
#   (see Kalinin 2019, "On the status of plane and solid in the International
#   System of Units (SI)"), so 'rad' and 'sr' are base units here.
# - The codes follow the conventional single-letter symbols, except that time
#   uses 't' so that 'T' can denote temperature.


class Dimension(enum.Enum):
    """A physical base dimension and its short code.

    The order of definition is fixed and defines both `all_dimensions` and
    the order of factors in a dimension-vector code.
    """

    ELECTRIC_CURRENT = 'I'
    LUMINOUS_INTENSITY = 'J'
    TEMPERATURE = 'T'
    MASS = 'M'
    LENGTH = 'L'
    AMOUNT_OF_SUBSTANCE = 'N'
    TIME = 't'
    PLANE_ANGLE = 'Plane Angle'
    SOLID_ANGLE = 'Solid Angle'
    UNKNOWN = 'X'

    @property
    def code(self) -> str:
        """The short code of this dimension."""
        return self.value

    @property
    def rank(self) -> int:
        """The position of this dimension in the fixed order."""
        return _ORDER[self]


_ORDER = {dimension: i for i, dimension in enumerate(Dimension)}


def code_of(code: typing.Optional[str]) -> Dimension:
    """Find the dimension with the given code.

    This function never raises an exception: ``None`` or an unrecognized code
    produces `Dimension.UNKNOWN`.

    Examples
    --------
    >>> dimensions.code_of('L')
    <Dimension.LENGTH: 'L'>
    >>> dimensions.code_of('l')
    <Dimension.UNKNOWN: 'X'>
    """
    if code is None:
        return Dimension.UNKNOWN
    for dimension in Dimension:
        if dimension.code == code:
            return dimension
    return Dimension.UNKNOWN


def all_dimensions() -> typing.Tuple[Dimension, ...]:
    """All dimensions, in their fixed order."""
    return tuple(Dimension)


def table() -> typing.Dict[str, str]:
    """Map each dimension code to the name of its dimension."""
    return {dimension.code: dimension.name for dimension in all_dimensions()}


class Base(typing.NamedTuple):
    """A base unit's symbol and the dimension it measures."""

    symbol: str
    dimension: Dimension


class Vector(collections.abc.Mapping, iterables.ReprStrMixin):
    """The exponents of base units that define a physical dimension.

    Instances are immutable. Exponents are rational, and factors with a zero
    exponent are dropped, so the empty vector represents a dimensionless
    quantity.
    """

    def __init__(
        self,
        factors: typing.Mapping[Base, numbers.Rational]=None,
    ) -> None:
        self._factors = {
            base: fractions.Fraction(exponent)
            for base, exponent in (factors or {}).items()
            if exponent != 0
        }
        self._code = None

    def __len__(self) -> int:
        return len(self._factors)

    def __iter__(self) -> typing.Iterator[Base]:
        return iter(self.ordered())

    def __getitem__(self, base: Base) -> fractions.Fraction:
        return self._factors[base]

    def ordered(self) -> typing.List[Base]:
        """The base units of this vector, in dimension order."""
        return sorted(
            self._factors,
            key=lambda base: (base.dimension.rank, base.symbol),
        )

    @property
    def code(self) -> str:
        """The string form of this vector, in terms of dimension codes.

        Examples
        --------
        The dimension of force is mass times length over time squared, and the
        empty vector is dimensionless:

        >>> database.standard().parse('N').dimension.code
        'M.L.t-2'
        >>> dimensions.Vector().code
        '1'
        """
        if self._code is None:
            parts = [
                format_factor(base.dimension.code, self._factors[base])
                for base in self.ordered()
            ]
            self._code = '.'.join(parts) or '1'
        return self._code

    @property
    def dimension(self) -> Dimension:
        """The base dimension of this vector, if it has one.

        A vector that consists of a single base raised to the first power
        collapses to that base's dimension. All other vectors, including the
        dimensionless vector, collapse to `Dimension.UNKNOWN`.
        """
        if len(self) == 1:
            base, exponent = next(iter(self._factors.items()))
            if exponent == 1:
                return base.dimension
        return Dimension.UNKNOWN

    @property
    def dimensionless(self) -> bool:
        """True if this vector has no factors."""
        return not self._factors

    def __mul__(self, other):
        """Called for self * other."""
        if not isinstance(other, Vector):
            return NotImplemented
        combined = dict(self._factors)
        for base, exponent in other._factors.items():
            combined[base] = combined.get(base, 0) + exponent
        return type(self)(combined)

    def __truediv__(self, other):
        """Called for self / other."""
        if not isinstance(other, Vector):
            return NotImplemented
        return self * other ** -1

    def __pow__(self, exponent: numbers.Rational):
        """Called for self ** exponent."""
        power = fractions.Fraction(exponent)
        return type(self)(
            {base: value * power for base, value in self._factors.items()}
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self._factors == other._factors

    def __hash__(self) -> int:
        return hash(frozenset(self._factors.items()))

    def __str__(self) -> str:
        return self.code


def format_factor(base: str, exponent: fractions.Fraction) -> str:
    """Format a single factor of a vector code."""
    if exponent == 1:
        return base
    return f"{base}{exponent}"
