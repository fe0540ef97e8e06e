import logging
import typing

from unithelper.core import database


logger = logging.getLogger(__name__)


DIMENSIONLESS = '1'
"""The canonical target of aliases for pure numbers."""


ALIASES = {
    'number': 'count',
    'dap': 'day',
    'doy': 'day',
    'decimal_degree': 'degree',
    'fraction': DIMENSIONLESS,
    'unitless': DIMENSIONLESS,
    'ratio': DIMENSIONLESS,
}
"""Informal unit names and the canonical expressions they stand for."""


def register(
    catalog: database.Database,
    aliases: typing.Mapping[str, str]=None,
) -> typing.Dict[str, str]:
    """Register aliases in `catalog`, skipping any that fail.

    Parameters
    ----------
    catalog : `~database.Database`
        The catalog to extend.

    aliases : mapping, optional
        Pairs of alias and canonical expression. The default is `ALIASES`.

    Returns
    -------
    dict
        The pairs that were successfully registered.
    """
    registered = {}
    for alias, canonical in (ALIASES if aliases is None else aliases).items():
        try:
            catalog.add_alias(alias, canonical)
        except database.DatabaseError as err:
            logger.warning("Ignoring alias %r: %s", alias, err)
        else:
            registered[alias] = canonical
    return registered


def dimensionless(
    expression: str,
    aliases: typing.Mapping[str, str],
) -> bool:
    """True if `expression` is an alias for a pure number."""
    return aliases.get(expression) == DIMENSIONLESS
