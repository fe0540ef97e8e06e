import logging
import re
import typing

from unithelper.core import aliased
from unithelper.core import dimensions
from unithelper.core import iterables
from unithelper.core import metric
from unithelper.core import parsing
from unithelper.core import symbolic


logger = logging.getLogger(__name__)


IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
"""The pattern that a new alias must match in full."""


class DatabaseError(Exception):
    """Base class for errors in the unit catalog."""


class UnknownUnitError(DatabaseError, KeyError):
    """The identifier is well formed but names no known unit."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier

    def __str__(self) -> str:
        return f"Unknown unit {self.identifier!r}"


class AliasError(DatabaseError):
    """Can't register an alias."""

    def __init__(self, alias: str, reason: str) -> None:
        self.alias = alias
        self.reason = reason

    def __str__(self) -> str:
        return f"Can't register alias {self.alias!r}: {self.reason}"


class Entry(typing.NamedTuple):
    """A catalog unit and whether it accepts metric prefixes."""

    unit: metric.Unit
    prefixable: bool=True


def _normalize(name: str) -> str:
    """Convert a unit name into a key for case-insensitive look-up."""
    return re.sub(r'\s+', '', name).lower()


class Database:
    """An in-memory catalog of units, prefixes, and aliases.

    Look-up of an identifier proceeds in this order:

    1. an exact symbol or alias (case-sensitive)
    2. a name or plural name (case-insensitive, ignoring whitespace)
    3. a metric prefix followed by a prefixable symbol
    4. a metric prefix followed by a prefixable name

    Iterating over an instance produces every canonical unit exactly once, in
    the order of definition. Prefixed forms and aliases are not included.
    """

    def __init__(self, prefixes: typing.Iterable[metric.Prefix]=None) -> None:
        self._symbols = aliased.MutableMapping()
        self._names = {}
        self._units = []
        self._prefixes = tuple(prefixes or metric.PREFIXES)
        self._parser = symbolic.Parser()
        self._exact = iterables.Guard(self._symbols.__getitem__)
        self._exact.catch(KeyError)
        self._named = iterables.Guard(self._names.__getitem__)
        self._named.catch(KeyError)

    def base(
        self,
        symbol: str,
        name: str,
        dimension: dimensions.Dimension,
        plural: str=None,
        prefixable: bool=True,
    ) -> metric.BaseUnit:
        """Register the coherent unit of a base quantity."""
        unit = metric.BaseUnit(
            symbol,
            name,
            dimension,
            plural=plural or f"{name}s",
        )
        return self._register(unit, (), prefixable)

    def define(
        self,
        name: str,
        definition: str,
        symbol: str=None,
        plural: str=None,
        aliases: typing.Iterable[str]=(),
        prefixable: bool=True,
    ) -> metric.Unit:
        """Register a unit defined in terms of existing units.

        Parameters
        ----------
        name : string
            The full name of the new unit.

        definition : string
            An expression in known units, optionally followed by '@' and the
            origin of the new unit, in units of the expression. For example,
            ``'K @ 273.15'`` defines a unit with the magnitude of a kelvin and
            a zero point at 273.15 K.

        symbol : string, optional
            The abbreviated symbol of the new unit.

        plural : string, optional
            The plural form of `name`. The default is `name` followed by 's'.

        aliases : iterable of strings, optional
            Additional case-sensitive identifiers for the new unit.

        prefixable : bool, default=True
            If true, metric prefixes may combine with this unit.
        """
        expression, _, origin = definition.partition('@')
        reference = self.parse(expression.strip())
        offset = float(origin) * reference.scale if origin.strip() else 0.0
        unit = metric.Unit(
            reference.dimensions,
            scale=reference.scale,
            offset=reference.offset + offset,
            name=name,
            symbol=symbol,
            plural=plural or f"{name}s",
            bases=reference.bases,
        )
        return self._register(unit, aliases, prefixable and not offset)

    def declare(self, name: str, symbol: str=None) -> metric.UnknownUnit:
        """Register a placeholder unit of unknown dimension."""
        unit = metric.UnknownUnit(name, symbol=symbol)
        logger.debug("Declared placeholder unit %r", name)
        return self._register(unit, (), False)

    def _register(self, unit: metric.Unit, aliases, prefixable: bool):
        """Add a new unit to the look-up tables."""
        keys = tuple(key for key in (unit.symbol, *aliases) if key)
        names = [_normalize(n) for n in (unit.name, unit.plural) if n]
        used = [key for key in keys if key in self._symbols]
        used.extend(name for name in names if name in self._names)
        if used:
            raise DatabaseError(
                f"Can't register {unit.name!r}: {used[0]!r} is already in use"
            )
        entry = Entry(unit, prefixable)
        if keys:
            self._symbols[keys] = entry
        for name in names:
            self._names[name] = entry
        self._units.append(unit)
        return unit

    def add_alias(self, alias: str, canonical: str) -> None:
        """Register `alias` as an identifier for the unit `canonical`.

        The canonical target may be any expression, including '1' for
        dimensionless quantities.

        Raises
        ------
        `~database.AliasError`
            The alias is not an identifier, is already in use, or the target
            does not resolve to a unit.
        """
        if not isinstance(alias, str) or not IDENTIFIER.fullmatch(alias):
            raise AliasError(alias, "not a valid identifier")
        if alias in self._symbols or _normalize(alias) in self._names:
            raise AliasError(alias, "already in use")
        try:
            unit = self.parse(canonical)
        except (symbolic.ParsingError, UnknownUnitError) as err:
            raise AliasError(alias, str(err)) from err
        if canonical in self._symbols:
            self._symbols.alias(canonical, alias)
        else:
            self._symbols[alias] = Entry(unit, False)
        logger.debug("Registered alias %r for %r", alias, canonical)

    def get(self, identifier: str) -> metric.Unit:
        """Look up a single unit by symbol, name, or alias.

        Raises
        ------
        `~database.UnknownUnitError`
            No unit matches `identifier`.
        """
        methods = (
            self._exact.call,
            self._named_entry,
            self._prefixed_symbol,
            self._prefixed_name,
        )
        entry = iterables.apply(methods, identifier)
        if entry is None:
            raise UnknownUnitError(identifier)
        return entry.unit

    def _named_entry(self, identifier: str):
        """Look up an entry by full or plural name."""
        return self._named.call(_normalize(identifier))

    def _prefixed_symbol(self, identifier: str):
        """Look up a prefix followed by a unit symbol."""
        for prefix in self._prefixes:
            if identifier.startswith(prefix.symbol):
                rest = identifier[len(prefix.symbol):]
                entry = self._exact.call(rest)
                if entry and entry.prefixable:
                    return self._apply_prefix(prefix, entry.unit, identifier)

    def _prefixed_name(self, identifier: str):
        """Look up a prefix followed by a unit name."""
        key = _normalize(identifier)
        for prefix in self._prefixes:
            if key.startswith(prefix.name):
                entry = self._named.call(key[len(prefix.name):])
                if entry and entry.prefixable:
                    return self._apply_prefix(prefix, entry.unit, None)

    def _apply_prefix(
        self,
        prefix: metric.Prefix,
        unit: metric.Unit,
        symbol: typing.Optional[str],
    ) -> Entry:
        """Create a scaled version of `unit`."""
        if symbol is None and unit.symbol:
            symbol = f"{prefix.symbol}{unit.symbol}"
        scaled = metric.Unit(
            unit.dimensions,
            scale=prefix.factor * unit.scale,
            name=f"{prefix.name}{unit.name}",
            symbol=symbol,
            plural=f"{prefix.name}{unit.plural}" if unit.plural else None,
            bases=unit.bases,
        )
        return Entry(scaled, False)

    def parse(self, expression: str) -> metric.Unit:
        """Convert a unit expression into a unit.

        A lone identifier produces the catalog unit itself, including its name
        and offset. Any other expression produces an anonymous unit with no
        offset.

        Raises
        ------
        `~parsing.SpecificationError`
            The expression is empty, is not a string, or has a zero scale.
        `~symbolic.ParsingError`
            The expression is malformed.
        `~database.UnknownUnitError`
            The expression contains an unknown identifier.
        """
        if not isinstance(expression, str):
            raise parsing.SpecificationError(expression, "expected a string")
        if not expression.strip():
            raise parsing.SpecificationError(expression, "empty expression")
        terms = symbolic.reduce(self._parser.parse(expression))
        if len(terms) == 1:
            term = terms[0]
            if not term.constant and term.exponent == 1:
                return self.get(term.base)
        expr = symbolic.Expression(terms)
        if expr.coefficient == 0:
            raise parsing.SpecificationError(expression, "zero scale factor")
        unit = metric.Unit(dimensions.Vector(), scale=float(expr.coefficient))
        for term in expr.variables:
            unit = unit * self.get(term.base) ** term.exponent
        return unit

    def __iter__(self) -> typing.Iterator[metric.Unit]:
        return iter(tuple(self._units))

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, identifier: str) -> bool:
        """True if `identifier` names a unit in this catalog."""
        entry = iterables.apply(
            (self._exact.call, self._named_entry),
            identifier,
        )
        return entry is not None


def standard() -> Database:
    """Create a catalog of base units, defined units, and metric prefixes."""
    database = Database()
    for unit in metric._base_units:
        database.base(**unit)
    for unit in metric._units:
        database.define(**unit)
    logger.debug("Created a standard catalog of %d units", len(database))
    return database
