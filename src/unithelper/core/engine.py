import decimal
import json
import logging
import typing

from unithelper.core import aliases as aliases_
from unithelper.core import converter
from unithelper.core import database
from unithelper.core import dimensions
from unithelper.core import listing
from unithelper.core import metric
from unithelper.core import numerical
from unithelper.core import parsing
from unithelper.core import results
from unithelper.core import symbolic


logger = logging.getLogger(__name__)


KNOWN_ERRORS = (
    symbolic.ParsingError,
    database.DatabaseError,
    metric.DimensionMismatchError,
    numerical.NumericFormatError,
)
"""Errors whose text may appear in a conversion record."""


UNDEFINED = "undefined unit"
"""The message of a conversion record for an unexpected error."""


class Engine:
    """A unit catalog with registered aliases and conversion tools.

    Instances are fully configured on creation (see `~engine.create`) and
    nothing modifies them afterwards.
    """

    def __init__(
        self,
        catalog: database.Database,
        aliases: typing.Mapping[str, str],
        ctx: decimal.Context=None,
    ) -> None:
        self._catalog = catalog
        self._aliases = dict(aliases)
        self._table = {**self._aliases, **aliases_.ALIASES}
        self._parser = parsing.Parser(catalog)
        self._converter = converter.Converter(self._parser, ctx)
        self._codes = dimensions.table()

    @property
    def catalog(self) -> database.Database:
        """The unit catalog of this engine."""
        return self._catalog

    @property
    def aliases(self) -> typing.Dict[str, str]:
        """The aliases registered in this engine's catalog."""
        return dict(self._aliases)

    def resolve(self, expression: str) -> metric.Unit:
        """Convert an annotated unit expression into a unit."""
        return self._parser.resolve(expression)

    def convert(
        self,
        source: str,
        target: str,
        value,
        scale: int=None,
    ) -> decimal.Decimal:
        """Convert `value` from `source` units to `target` units.

        See `~converter.Converter.convert`.
        """
        return self._converter.convert(source, target, value, scale=scale)

    def attempt(
        self,
        source: str,
        target: str,
        value,
        scale: int=None,
    ) -> results.Outcome:
        """Convert a value and capture the result or the error."""
        return results.attempt(self.convert, source, target, value, scale)

    def convert_to_record(
        self,
        source: str,
        target: str,
        value,
        scale: int=None,
    ) -> typing.Dict[str, str]:
        """Convert a value and summarize the request and its outcome.

        The record echoes the request and contains the converted value only
        when conversion succeeds. This method does not raise an exception.
        """
        record = {
            'unit_from': source,
            'unit_to': target,
            'value_from': _echo(value),
        }
        outcome = self.attempt(source, target, value, scale)
        if outcome.ok:
            record['value_to'] = numerical.plain(outcome.value)
            record['status'] = '0'
            record['message'] = 'successful'
            return record
        record['status'] = '1'
        if outcome.known(*KNOWN_ERRORS):
            record['message'] = outcome.message
        else:
            logger.debug(
                "Unexpected %s converting %r to %r",
                outcome.kind, source, target,
                exc_info=outcome.error,
            )
            record['message'] = UNDEFINED
        return record

    def convert_to_json(
        self,
        source: str,
        target: str,
        value,
        scale: int=None,
    ) -> str:
        """Convert a value and serialize the resulting record."""
        return json.dumps(self.convert_to_record(source, target, value, scale))

    def isvalid(self, expression: str) -> bool:
        """True if `expression` resolves to a unit."""
        return self._parser.isvalid(expression)

    def describe(self, expression: str) -> str:
        """Describe a unit expression, or return an empty string.

        Aliases of pure numbers describe themselves whenever they appear in
        `~aliases.ALIASES` or among the aliases registered here.
        """
        return listing.describe(self._parser, expression, self._table)

    def list_units(self, code: str) -> typing.List[metric.Unit]:
        """Find catalog units of the dimension with the given code."""
        return listing.list_units(self._catalog, code)

    def list_unit_records(
        self,
        code: str,
    ) -> typing.List[typing.Dict[str, str]]:
        """Summarize catalog units of the dimension with the given code."""
        return listing.records(self._catalog, code)

    def list_units_json(self, code: str) -> str:
        """Serialize the records of catalog units of the given dimension."""
        return json.dumps(self.list_unit_records(code))

    def dimension_codes(self) -> typing.Dict[str, str]:
        """Map each dimension code to the name of its dimension."""
        return dict(self._codes)


def _echo(value) -> str:
    """Represent a request value as a string."""
    if isinstance(value, decimal.Decimal):
        return numerical.plain(value)
    return str(value)


def create(
    aliases: typing.Mapping[str, str]=None,
    placeholders: typing.Iterable[str]=(),
    precision: int=None,
) -> Engine:
    """Build a catalog, register aliases, and wrap them in an engine.

    Parameters
    ----------
    aliases : mapping, optional
        Pairs of alias and canonical expression to register after the
        built-in aliases (see `~aliases.ALIASES`).

    placeholders : iterable of strings, optional
        Names of placeholder units to declare before registering aliases.

    precision : int, optional
        The decimal working precision. The default is
        `~numerical.DEFAULT_PRECISION`.
    """
    catalog = database.standard()
    for name in placeholders:
        try:
            catalog.declare(name)
        except database.DatabaseError as err:
            logger.warning("Ignoring placeholder %r: %s", name, err)
    registered = aliases_.register(catalog)
    if aliases:
        registered.update(aliases_.register(catalog, aliases))
    ctx = numerical.context(precision or numerical.DEFAULT_PRECISION)
    return Engine(catalog, registered, ctx)
