import re
import typing

from unithelper.core import aliases
from unithelper.core import database
from unithelper.core import dimensions
from unithelper.core import metric
from unithelper.core import parsing
from unithelper.core import results


def describe(
    parser: parsing.Parser,
    expression: str,
    table: typing.Mapping[str, str]=None,
) -> str:
    """Produce a short description of a unit expression.

    Returns the expression itself for aliases of pure numbers, the name of a
    base unit, and the string form of any other unit. The result is an empty
    string for placeholder units and for expressions that don't resolve.
    """
    if not isinstance(expression, str):
        return ''
    stripped = parsing.strip_comments(expression)
    known = aliases.ALIASES if table is None else table
    if aliases.dimensionless(stripped, known):
        return stripped
    outcome = results.attempt(parser.resolve, stripped)
    if not outcome.ok or outcome.value is None:
        return ''
    unit = outcome.value
    if _placeholder(unit) or _placeholder(unit.derived):
        return ''
    if isinstance(unit, metric.BaseUnit):
        return unit.name
    return str(unit)


def _placeholder(unit: metric.Unit) -> bool:
    """True if `unit` is a unit of unknown dimension."""
    return isinstance(unit, metric.UnknownUnit)


def list_units(
    catalog: database.Database,
    code: str,
) -> typing.List[metric.Unit]:
    """Find the catalog units that measure the dimension with `code`.

    An unrecognized code selects `~dimensions.Dimension.UNKNOWN`, which matches
    placeholder units.
    """
    dimension = dimensions.code_of(code)
    return [
        unit for unit in catalog
        if unit.derived.dimensions.code == dimension.code
    ]


def record(unit: metric.Unit) -> typing.Dict[str, str]:
    """Summarize a unit as a flat dictionary."""
    dimension = dimensions.code_of(unit.derived.dimensions.code)
    symbol = unit.symbol or re.sub(r'\s', '_', str(unit.name or ''))
    return {
        'name': unit.name,
        'type': dimension.name,
        'type_code': dimension.code,
        'expression': unit.expression,
        'symbol': symbol,
    }


def records(
    catalog: database.Database,
    code: str,
) -> typing.List[typing.Dict[str, str]]:
    """Summarize the catalog units that measure the given dimension."""
    return [record(unit) for unit in list_units(catalog, code)]
