import re
import typing

from unithelper.core import results
from unithelper.core import symbolic


_COMMENT = re.compile(r'[./]?\[[^\]]*\]\^?-?\d*')
_WHITESPACE = re.compile(r'\s+')


def strip_comments(expression: str) -> str:
    """Remove bracketed annotations and all whitespace.

    An annotation is a pair of square brackets and everything between them,
    optionally preceded by '.' or '/' and optionally followed by an exponent
    such as '^2', '^-1', or '2'.

    Examples
    --------
    >>> parsing.strip_comments('kg[N] / ha[soil]')
    'kg/ha'
    >>> parsing.strip_comments('mm[H2O].d[season]^-1')
    'mm.d'
    """
    return _WHITESPACE.sub('', _COMMENT.sub('', expression))


class SpecificationError(symbolic.ParsingError):
    """The expression does not specify a unit."""

    def __init__(self, arg: typing.Any, reason: str) -> None:
        super().__init__(arg)
        self.reason = reason

    def __str__(self) -> str:
        return f"Invalid unit specification {self.arg!r}: {self.reason}"


class Parser:
    """Resolve annotated unit expressions against a unit database."""

    def __init__(self, database) -> None:
        self.database = database

    def resolve(self, expression: str):
        """Strip annotations from `expression` and parse the result.

        Raises
        ------
        `~parsing.SpecificationError`
            The expression is not a string, or specifies no unit.
        `~symbolic.ParsingError`
            The expression is malformed.
        `~database.UnknownUnitError`
            The expression contains an unknown identifier.
        """
        if not isinstance(expression, str):
            raise SpecificationError(expression, "expected a string")
        return self.database.parse(strip_comments(expression))

    def isvalid(self, expression: str) -> bool:
        """True if `expression` resolves to a unit."""
        outcome = results.attempt(self.resolve, expression)
        return outcome.ok and outcome.value is not None
