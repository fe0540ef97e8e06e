import numbers
import typing

import numpy

from unithelper.core import dimensions
from unithelper.core import iterables


PI = numpy.pi


_prefixes = [
    {'symbol': 'Y', 'name': 'yotta', 'factor': 1e+24},
    {'symbol': 'Z', 'name': 'zetta', 'factor': 1e+21},
    {'symbol': 'E', 'name': 'exa', 'factor': 1e+18},
    {'symbol': 'P', 'name': 'peta', 'factor': 1e+15},
    {'symbol': 'T', 'name': 'tera', 'factor': 1e+12},
    {'symbol': 'G', 'name': 'giga', 'factor': 1e+9},
    {'symbol': 'M', 'name': 'mega', 'factor': 1e+6},
    {'symbol': 'k', 'name': 'kilo', 'factor': 1e+3},
    {'symbol': 'h', 'name': 'hecto', 'factor': 1e+2},
    {'symbol': 'da', 'name': 'deca', 'factor': 1e+1},
    {'symbol': 'd', 'name': 'deci', 'factor': 1e-1},
    {'symbol': 'c', 'name': 'centi', 'factor': 1e-2},
    {'symbol': 'm', 'name': 'milli', 'factor': 1e-3},
    {'symbol': 'µ', 'name': 'micro', 'factor': 1e-6},
    {'symbol': 'μ', 'name': 'micro', 'factor': 1e-6},
    {'symbol': 'u', 'name': 'micro', 'factor': 1e-6},
    {'symbol': 'n', 'name': 'nano', 'factor': 1e-9},
    {'symbol': 'p', 'name': 'pico', 'factor': 1e-12},
    {'symbol': 'f', 'name': 'femto', 'factor': 1e-15},
    {'symbol': 'a', 'name': 'atto', 'factor': 1e-18},
    {'symbol': 'z', 'name': 'zepto', 'factor': 1e-21},
    {'symbol': 'y', 'name': 'yocto', 'factor': 1e-24},
]


class Prefix(typing.NamedTuple):
    """Metadata for a metric order-of-magnitude prefix."""

    symbol: str
    name: str
    factor: float


PREFIXES = tuple(
    sorted(
        (Prefix(**prefix) for prefix in _prefixes),
        key=lambda prefix: len(prefix.symbol),
        reverse=True,
    )
)
"""Metric prefixes, with longer symbols before shorter ones."""


_base_units = [
    {
        'symbol': 'm',
        'name': 'meter',
        'dimension': dimensions.Dimension.LENGTH,
    },
    {
        'symbol': 'kg',
        'name': 'kilogram',
        'dimension': dimensions.Dimension.MASS,
        'prefixable': False,
    },
    {
        'symbol': 's',
        'name': 'second',
        'dimension': dimensions.Dimension.TIME,
    },
    {
        'symbol': 'A',
        'name': 'ampere',
        'dimension': dimensions.Dimension.ELECTRIC_CURRENT,
    },
    {
        'symbol': 'K',
        'name': 'kelvin',
        'dimension': dimensions.Dimension.TEMPERATURE,
    },
    {
        'symbol': 'mol',
        'name': 'mole',
        'dimension': dimensions.Dimension.AMOUNT_OF_SUBSTANCE,
    },
    {
        'symbol': 'cd',
        'name': 'candela',
        'dimension': dimensions.Dimension.LUMINOUS_INTENSITY,
    },
    {
        'symbol': 'rad',
        'name': 'radian',
        'dimension': dimensions.Dimension.PLANE_ANGLE,
    },
    {
        'symbol': 'sr',
        'name': 'steradian',
        'dimension': dimensions.Dimension.SOLID_ANGLE,
    },
]


# Definitions may refer only to units that appear earlier in this list. An
# origin follows '@' and is in units of the definition.
_units = [
    {'symbol': 'g', 'name': 'gram', 'definition': '0.001 kg'},
    {'symbol': 't', 'name': 'tonne', 'definition': '1000 kg'},
    {
        'symbol': 'min',
        'name': 'minute',
        'definition': '60 s',
        'prefixable': False,
    },
    {
        'symbol': 'h',
        'name': 'hour',
        'aliases': ('hr',),
        'definition': '60 min',
        'prefixable': False,
    },
    {
        'symbol': 'd',
        'name': 'day',
        'definition': '24 h',
        'prefixable': False,
    },
    {
        'symbol': 'wk',
        'name': 'week',
        'definition': '7 d',
        'prefixable': False,
    },
    {
        'symbol': 'yr',
        'name': 'year',
        'definition': '365.25 d',
        'prefixable': False,
    },
    {'symbol': 'Hz', 'name': 'hertz', 'plural': 'hertz', 'definition': 's-1'},
    {'symbol': 'N', 'name': 'newton', 'definition': 'kg.m.s-2'},
    {'symbol': 'Pa', 'name': 'pascal', 'definition': 'N/m2'},
    {'symbol': 'J', 'name': 'joule', 'definition': 'N.m'},
    {'symbol': 'W', 'name': 'watt', 'definition': 'J/s'},
    {'symbol': 'C', 'name': 'coulomb', 'definition': 'A.s'},
    {'symbol': 'V', 'name': 'volt', 'definition': 'W/A'},
    {'symbol': 'Ω', 'name': 'ohm', 'definition': 'V/A'},
    {
        'symbol': 'S',
        'name': 'siemens',
        'plural': 'siemens',
        'definition': 'A/V',
    },
    {'symbol': 'F', 'name': 'farad', 'definition': 'C/V'},
    {'symbol': 'Wb', 'name': 'weber', 'definition': 'V.s'},
    {'symbol': 'T', 'name': 'tesla', 'definition': 'Wb/m2'},
    {'symbol': 'H', 'name': 'henry', 'plural': 'henries', 'definition': 'Wb/A'},
    {'symbol': 'lm', 'name': 'lumen', 'definition': 'cd.sr'},
    {'symbol': 'lx', 'name': 'lux', 'plural': 'lux', 'definition': 'lm/m2'},
    {'symbol': 'Bq', 'name': 'becquerel', 'definition': 's-1'},
    {'symbol': 'Gy', 'name': 'gray', 'definition': 'J/kg'},
    {'symbol': 'Sv', 'name': 'sievert', 'definition': 'J/kg'},
    {'symbol': 'kat', 'name': 'katal', 'definition': 'mol/s'},
    {
        'symbol': 'degC',
        'name': 'degree Celsius',
        'plural': 'degrees Celsius',
        'aliases': ('°C', 'celsius'),
        'definition': 'K @ 273.15',
        'prefixable': False,
    },
    {
        'symbol': 'degR',
        'name': 'degree Rankine',
        'plural': 'degrees Rankine',
        'aliases': ('°R', 'rankine'),
        'definition': '5/9 K',
        'prefixable': False,
    },
    {
        'symbol': 'degF',
        'name': 'degree Fahrenheit',
        'plural': 'degrees Fahrenheit',
        'aliases': ('°F', 'fahrenheit'),
        'definition': 'degR @ 459.67',
        'prefixable': False,
    },
    {
        'symbol': 'deg',
        'name': 'degree',
        'aliases': ('°',),
        'definition': f'{PI}/180 rad',
        'prefixable': False,
    },
    {
        'symbol': 'arcmin',
        'name': 'arcminute',
        'definition': 'deg/60',
        'prefixable': False,
    },
    {
        'symbol': 'arcsec',
        'name': 'arcsecond',
        'definition': 'arcmin/60',
        'prefixable': False,
    },
    {
        'symbol': 'L',
        'name': 'liter',
        'aliases': ('l', 'litre'),
        'definition': '0.001 m3',
    },
    {
        'symbol': 'ha',
        'name': 'hectare',
        'definition': '10000 m2',
        'prefixable': False,
    },
    {'name': 'are', 'definition': '100 m2', 'prefixable': False},
    {'name': 'acre', 'definition': '4046.8564224 m2', 'prefixable': False},
    {
        'symbol': 'in',
        'name': 'inch',
        'plural': 'inches',
        'definition': '0.0254 m',
        'prefixable': False,
    },
    {
        'symbol': 'ft',
        'name': 'foot',
        'plural': 'feet',
        'definition': '12 in',
        'prefixable': False,
    },
    {
        'symbol': 'yd',
        'name': 'yard',
        'definition': '3 ft',
        'prefixable': False,
    },
    {
        'symbol': 'mi',
        'name': 'mile',
        'definition': '1609.344 m',
        'prefixable': False,
    },
    {
        'symbol': 'au',
        'name': 'astronomical unit',
        'definition': '149597870700 m',
        'prefixable': False,
    },
    {
        'symbol': 'lb',
        'name': 'pound',
        'definition': '0.45359237 kg',
        'prefixable': False,
    },
    {
        'symbol': 'oz',
        'name': 'ounce',
        'definition': 'lb/16',
        'prefixable': False,
    },
    {'symbol': 'bar', 'name': 'bar', 'definition': '100000 Pa'},
    {
        'symbol': 'atm',
        'name': 'atmosphere',
        'definition': '101325 Pa',
        'prefixable': False,
    },
    {'symbol': 'cal', 'name': 'calorie', 'definition': '4.184 J'},
    {'symbol': 'eV', 'name': 'electronvolt', 'definition': '1.602176634e-19 J'},
    {
        'symbol': '%',
        'name': 'percent',
        'definition': '0.01',
        'prefixable': False,
    },
    {
        'symbol': 'ppm',
        'name': 'parts per million',
        'plural': 'parts per million',
        'definition': '0.000001',
        'prefixable': False,
    },
    {'name': 'count', 'definition': '1', 'prefixable': False},
]


class DimensionMismatchError(Exception):
    """The units of a conversion do not share a physical dimension."""

    def __init__(self, u0: 'Unit', u1: 'Unit') -> None:
        self._from = u0
        self._to = u1

    def __str__(self) -> str:
        return (
            f"Can't convert {str(self._from)!r} to {str(self._to)!r}:"
            f" dimension {self._from.dimensions}"
            f" differs from {self._to.dimensions}"
        )


class Unit(iterables.ReprStrMixin):
    """A unit of measure with an affine relation to coherent base units.

    A value `v` in this unit corresponds to ``scale * v + offset`` in the
    coherent base units that make up its dimension vector. Instances are
    immutable. Arithmetic with other units or numbers produces new anonymous
    units and drops any offset.
    """

    def __init__(
        self,
        vector: dimensions.Vector,
        scale: float=1.0,
        offset: float=0.0,
        name: str=None,
        symbol: str=None,
        plural: str=None,
        bases: typing.Mapping[dimensions.Base, 'BaseUnit']=None,
    ) -> None:
        self._vector = vector
        self._scale = float(scale)
        self._offset = float(offset)
        self._name = name
        self._symbol = symbol
        self._plural = plural
        self._bases = dict(bases or {})
        self._expression = None

    @property
    def dimensions(self) -> dimensions.Vector:
        """The exponents of this unit's base units."""
        return self._vector

    @property
    def dimension(self) -> 'dimensions.Dimension':
        """The base dimension of this unit, or `UNKNOWN`."""
        return self._vector.dimension

    @property
    def scale(self) -> float:
        """The multiplicative factor relative to coherent base units."""
        return self._scale

    @property
    def offset(self) -> float:
        """The additive offset relative to coherent base units."""
        return self._offset

    @property
    def origin(self) -> float:
        """The offset of this unit, in units of this unit."""
        return self._offset / self._scale

    @property
    def name(self) -> typing.Optional[str]:
        """The full name of this unit, if it has one."""
        return self._name

    @property
    def symbol(self) -> typing.Optional[str]:
        """The abbreviated symbol for this unit, if it has one."""
        return self._symbol

    @property
    def plural(self) -> typing.Optional[str]:
        """The plural form of this unit's name, if it has one."""
        return self._plural

    @property
    def bases(self) -> 'typing.Dict[dimensions.Base, BaseUnit]':
        """The base units that appear in this unit's dimension vector."""
        return dict(self._bases)

    @property
    def derived(self) -> 'Unit':
        """This unit without scale or offset, in terms of base units.

        The derived form of a unit whose dimension vector consists of one base
        unit to the first power is that base unit.
        """
        if len(self._vector) == 1:
            base, exponent = next(iter(self._vector.items()))
            if exponent == 1 and base in self._bases:
                return self._bases[base]
        return Unit(self._vector, bases=self._bases)

    @property
    def expression(self) -> str:
        """The canonical string form of this unit.

        Examples
        --------
        >>> db = database.standard()
        >>> db.get('km').expression
        '1000.0 m'
        >>> db.get('degC').expression
        'K @ 273.15'
        """
        if self._expression is None:
            terms = '.'.join(
                dimensions.format_factor(base.symbol, exponent)
                for base, exponent in self._vector.items()
            )
            if not terms:
                string = _format_number(self._scale)
            elif self._scale == 1.0:
                string = terms
            else:
                string = f"{_format_number(self._scale)} {terms}"
            if self._offset != 0.0:
                string = f"{string} @ {_format_number(self.origin)}"
            self._expression = string
        return self._expression

    def convert(self, value: float, target: 'Unit') -> float:
        """Convert a value in this unit to a value in `target`.

        Raises
        ------
        `~metric.DimensionMismatchError`
            The dimension vectors of this unit and `target` differ.
        """
        if self._vector != target.dimensions:
            raise DimensionMismatchError(self, target)
        base = value * self._scale + self._offset
        return (base - target.offset) / target.scale

    def __mul__(self, other):
        """Called for self * other."""
        if isinstance(other, numbers.Real):
            return Unit(
                self._vector,
                scale=self._scale * float(other),
                bases=self._bases,
            )
        if isinstance(other, Unit):
            return Unit(
                self._vector * other.dimensions,
                scale=self._scale * other.scale,
                bases={**self._bases, **other.bases},
            )
        return NotImplemented

    def __rmul__(self, other):
        """Called for other * self."""
        if isinstance(other, numbers.Real):
            return self * other
        return NotImplemented

    def __truediv__(self, other):
        """Called for self / other."""
        if isinstance(other, numbers.Real):
            return self * (1.0 / float(other))
        if isinstance(other, Unit):
            return self * other ** -1
        return NotImplemented

    def __rtruediv__(self, other):
        """Called for other / self."""
        if isinstance(other, numbers.Real):
            return float(other) * self ** -1
        return NotImplemented

    def __pow__(self, exponent: numbers.Real):
        """Called for self ** exponent."""
        if not isinstance(exponent, numbers.Real):
            return NotImplemented
        return Unit(
            self._vector ** exponent,
            scale=self._scale ** float(exponent),
            bases=self._bases,
        )

    def __eq__(self, other) -> bool:
        """True if two units have the same affine relation and dimension."""
        if not isinstance(other, Unit):
            return NotImplemented
        return (
            self._vector == other.dimensions
            and self._scale == other.scale
            and self._offset == other.offset
        )

    def __hash__(self) -> int:
        return hash((self._vector, self._scale, self._offset))

    def __str__(self) -> str:
        return self._symbol or self._name or self.expression


class BaseUnit(Unit):
    """The coherent unit of a single base quantity."""

    def __init__(
        self,
        symbol: str,
        name: str,
        dimension: dimensions.Dimension,
        plural: str=None,
    ) -> None:
        self._base = dimensions.Base(symbol, dimension)
        super().__init__(
            dimensions.Vector({self._base: 1}),
            name=name,
            symbol=symbol,
            plural=plural,
            bases={self._base: self},
        )

    @property
    def base(self) -> dimensions.Base:
        """The key of this unit in dimension vectors."""
        return self._base

    @property
    def derived(self) -> 'BaseUnit':
        return self


class UnknownUnit(BaseUnit):
    """A named placeholder unit with no known physical dimension.

    A placeholder is a base unit of its own, so it converts only to itself.
    """

    def __init__(self, name: str, symbol: str=None) -> None:
        super().__init__(
            symbol or name,
            name,
            dimensions.Dimension.UNKNOWN,
        )
        self._symbol = symbol


def _format_number(value: float) -> str:
    """Format a scale factor or origin for a canonical expression."""
    if value == 1.0:
        return '1'
    return repr(value)
