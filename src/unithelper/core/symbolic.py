import collections.abc
import fractions
import functools
import numbers
import re
from operator import attrgetter
import typing

from unithelper.core import iterables


class Term(iterables.ReprStrMixin):
    """A symbolic operand with an irreducible base.

    A term has the form c*b^e, where `c` is a numerical coefficient, `b` is a
    string base, and `e` is a numerical exponent. Constant terms have the base
    '1'.

    Examples include:

    * `'1'`: unity / multiplicative identity
    * `'1000'`: constant scale factor
    * `'m'`: base 'm' with coefficient 1 and exponent 1
    * `'s^-1'`, `'s-1'`, `'s**-1'`: base 's' with exponent -1
    * `'m2'`: base 'm' with exponent 2
    """

    __slots__ = ('coefficient', 'base', 'exponent')

    def __init__(
        self,
        coefficient: numbers.Real=1,
        base: str='1',
        exponent: numbers.Real=1,
    ) -> None:
        self.coefficient = fractions.Fraction(coefficient)
        """The numerical coefficient."""
        self.base = base
        """The base quantity."""
        self.exponent = fractions.Fraction(exponent)
        """The numerical exponent."""

    @property
    def attrs(self):
        """The current coefficient, base, and exponent."""
        return (self.coefficient, self.base, self.exponent)

    @property
    def constant(self) -> bool:
        """True if this term has no variable base."""
        return self.base == '1'

    def __pow__(self, power: numbers.Real):
        """Create a new term, raised to `power`."""
        power = fractions.Fraction(power)
        if self.constant:
            return type(self)(coefficient=self.coefficient ** power)
        return type(self)(
            self.coefficient ** power,
            self.base,
            self.exponent * power,
        )

    def __mul__(self, other: numbers.Real):
        """Create a new term, multiplied by a number."""
        if not isinstance(other, numbers.Real):
            return NotImplemented
        coefficient = self.coefficient * fractions.Fraction(other)
        return type(self)(coefficient, self.base, self.exponent)

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        """True if two terms' attributes are equal."""
        if isinstance(other, str):
            other = OperandFactory().create(other)
        if not isinstance(other, Term):
            return NotImplemented
        return self.attrs == other.attrs

    def __hash__(self) -> int:
        return hash(self.attrs)

    def format(self, style: str=None):
        """Format this term for printing."""
        if self.constant:
            return self._format_number(self.coefficient)
        coefficient = (
            '' if self.coefficient == 1
            else f"{self._format_number(self.coefficient)} "
        )
        exponent = self._format_exponent(style)
        return f"{coefficient}{self.base}{exponent}"

    @staticmethod
    def _format_number(value: fractions.Fraction):
        """Format a rational number for printing."""
        if value.denominator == 1:
            return str(value.numerator)
        return repr(float(value))

    def _format_exponent(self, style: str):
        """Format the current exponent for printing."""
        if self.exponent == 1:
            return ''
        if not style:
            return f"^{self.exponent}"
        if style == 'udunits':
            return f"{self.exponent}"
        raise ValueError(f"Unknown format style {style!r}")

    def __str__(self) -> str:
        return self.format()


class Operator(iterables.ReprStrMixin):
    """An operator in a symbolic expression."""

    def __init__(self, operation: str) -> None:
        self.operation = operation

    def __str__(self) -> str:
        return self.operation

    def __eq__(self, other) -> bool:
        """True if two operators represent the same operation."""
        if isinstance(other, Operator):
            return other.operation == self.operation
        if isinstance(other, str):
            return other == self.operation
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.operation)


class Group(typing.NamedTuple):
    """A parenthesized sub-expression with coefficient and exponent."""

    coefficient: fractions.Fraction
    interior: str
    exponent: fractions.Fraction


class PartMatch(typing.NamedTuple):
    """The result of matching a part at the start of a string."""

    result: typing.Union[Term, Operator, Group]
    end: int
    string: str

    @property
    def remainder(self) -> str:
        """The unparsed portion of `string` after `end`."""
        return self.string[self.end:]


class OperatorFactory:
    """A factory that produces symbolic operators.

    Multiplication may be written as '*' or '.'; a '*' that begins '**' is an
    exponent, not an operator. Division is '/'.
    """

    def __init__(self, multiply: str='*.', divide: str='/') -> None:
        mul = '|'.join(
            r'\*(?!\*)' if token == '*' else re.escape(token)
            for token in multiply
        )
        div = re.escape(divide)
        self.patterns = {
            'multiply': re.compile(fr'\s*(?:{mul})\s*'),
            'divide': re.compile(fr'\s*{div}\s*'),
        }
        """Compiled regular expressions for symbolic operators."""

    def parse(self, string: str) -> typing.Optional[PartMatch]:
        """Extract an operator at the start of `string`, if possible."""
        for key, pattern in self.patterns.items():
            if match := pattern.match(string):
                return PartMatch(Operator(key), match.end(), string)


class OperandFactory:
    """A factory that produces symbolic operands."""

    number = r"""
        [-+]?                    # an optional sign,
        (?:\d+\.?\d*|\.\d+)      # an integer or decimal mantissa,
        (?:[eE][-+]?\d+)?        # and an optional decimal exponent
    """
    base = r"""
        (?:[^\W\d]+              # one or more letters or underscores
        |%                       # OR a percent sign
        |°[^\W\d]*)              # OR a degree sign and optional letters
    """
    exponent = r"""
        (?:(?:\^|\*\*)                    # explicit '^' or '**',
            [-+]?\d+(?:/\d+|\.\d+)?       # then an integer, ratio, or decimal
        |[-+]?\d+)                        # OR a bare signed integer
    """
    raised = r"""
        (?:\^|\*\*)[-+]?\d+(?:/\d+|\.\d+)?
    """

    def __init__(self, opening: str='(', closing: str=')') -> None:
        self.opening = opening
        self.closing = closing
        self.patterns = {
            'variable': re.compile(
                fr'(?P<base>{self.base})'
                fr'(?P<exponent>{self.exponent})?',
                re.VERBOSE,
            ),
            'constant': re.compile(
                fr'(?P<coefficient>{self.number})'
                fr'(?P<exponent>{self.raised})?',
                re.VERBOSE,
            ),
            'exponent': re.compile(self.exponent, re.VERBOSE),
            'coefficient': re.compile(self.number, re.VERBOSE),
        }
        """Compiled regular expressions for symbolic operands."""

    def create(self, string: str) -> Term:
        """Create a single term from a complete string.

        Raises
        ------
        `~symbolic.OperandValueError`
            The string does not represent exactly one simple term.
        """
        match = self.parse(string)
        if match and not match.remainder and isinstance(match.result, Term):
            return match.result
        raise OperandValueError(string)

    def parse(self, string: str) -> typing.Optional[PartMatch]:
        """Extract an operand at the start of `string`, if possible."""
        stripped = string.lstrip()
        methods = (
            self._match_variable,
            self._match_group,
            self._match_constant,
        )
        return iterables.apply(methods, stripped)

    def _match_variable(self, string: str):
        """Attempt to match a variable term at the start of `string`."""
        if match := self.patterns['variable'].match(string):
            term = Term(
                base=match['base'],
                exponent=_exponent(match['exponent']),
            )
            return PartMatch(term, match.end(), string)

    def _match_constant(self, string: str):
        """Attempt to match a constant term at the start of `string`."""
        if match := self.patterns['constant'].match(string):
            value = _coefficient(match['coefficient'])
            power = _exponent(match['exponent'])
            term = Term(coefficient=value) ** power
            return PartMatch(term, match.end(), string)

    def _match_group(self, string: str):
        """Attempt to match a parenthesized group at the start of `string`."""
        coefficient = fractions.Fraction(1)
        i0 = 0
        if match := self.patterns['coefficient'].match(string):
            coefficient = _coefficient(match[0])
            i0 = match.end()
        if not string[i0:].startswith(self.opening):
            return
        bounds = self.find_bounds(string[i0:])
        if not bounds:
            return
        start, end = (i0 + bound for bound in bounds)
        interior = string[start+1:end-1]
        exponent = fractions.Fraction(1)
        if match := self.patterns['exponent'].match(string, end):
            exponent = _exponent(match[0])
            end = match.end()
        return PartMatch(Group(coefficient, interior, exponent), end, string)

    def find_bounds(self, string: str):
        """Find the indices of the first bounded substring, if any.

        Returns
        -------
        tuple of int, or `None`
            The index of the leftmost opening separator and the index of the
            first character beyond its matching closing separator, if there is
            a bounded substring; otherwise, `None`. The convention is such that
            if `start, end = find_bounds(string)`, `string[start:end]` will
            produce the bounded substring with bounds.

        Examples
        --------
        >>> operand = symbolic.OperandFactory()
        >>> operand.find_bounds('(m/s)^2')
        (0, 5)
        >>> operand.find_bounds('3((m/s)^2 kg)')
        (1, 13)
        >>> operand.find_bounds('(m/s') is None
        True
        """
        count = 0
        i0 = None
        for i, c in enumerate(string):
            if c == self.opening:
                count += 1
                if i0 is None:
                    i0 = i
            elif c == self.closing:
                count -= 1
                if count < 0:
                    return
            if i0 is not None and count == 0:
                return i0, i+1


def _coefficient(string: typing.Optional[str]) -> fractions.Fraction:
    """Convert a matched coefficient to a rational number."""
    if not string:
        return fractions.Fraction(1)
    return fractions.Fraction(string)


def _exponent(string: typing.Optional[str]) -> fractions.Fraction:
    """Convert a matched exponent to a rational number."""
    if not string:
        return fractions.Fraction(1)
    return fractions.Fraction(string.lstrip('^*'))


class ParsingError(Exception):
    """Base class for exceptions encountered during symbolic parsing."""

    def __init__(self, arg: typing.Any) -> None:
        self.arg = arg

    def __str__(self) -> str:
        return f"Can't parse {self.arg!r}"


class ParsingValueError(ParsingError, ValueError):
    """Cannot create an expression from the given string."""

    def __init__(self, arg: typing.Any, reason: str=None) -> None:
        super().__init__(arg)
        self.reason = reason

    def __str__(self) -> str:
        if self.reason:
            return f"Can't parse {self.arg!r}: {self.reason}"
        return super().__str__()


class OperandValueError(ParsingValueError):
    """The string does not represent a single operand."""


class Parser:
    """A tool for parsing symbolic unit expressions.

    The parser applies each operator to the operand that immediately follows
    it, so that 'a / b / c' and 'a / b * c' have the same meaning as they would
    under left-to-right evaluation. Adjacent operands with no operator between
    them are multiplied.
    """

    def __init__(
        self,
        multiply: str='*.',
        divide: str='/',
        opening: str='(',
        closing: str=')',
    ) -> None:
        self.operands = OperandFactory(opening, closing)
        self.operators = OperatorFactory(multiply, divide)

    def parse(self, string: str) -> typing.List[Term]:
        """Resolve the given string into individual terms."""
        terms = []
        remainder = string.strip()
        while remainder:
            operator = None
            if parsed := self.operators.parse(remainder):
                operator = parsed.result
                remainder = parsed.remainder
            if not remainder.strip():
                raise ParsingValueError(string, "operator without operand")
            parsed = self.operands.parse(remainder)
            if not parsed:
                raise ParsingValueError(string, f"unexpected {remainder!r}")
            terms.extend(self._evaluate(operator, parsed.result, string))
            remainder = parsed.remainder.strip()
        return terms

    def _evaluate(
        self,
        operator: typing.Optional[Operator],
        operand: typing.Union[Term, Group],
        string: str,
    ) -> typing.List[Term]:
        """Compute the effect of `operator` on `operand`."""
        if isinstance(operand, Group):
            if not operand.interior.strip():
                raise ParsingValueError(string, "empty group")
            inner = self.parse(operand.interior) + [Term(operand.coefficient)]
            terms = [term ** operand.exponent for term in inner]
        else:
            terms = [operand]
        if operator == 'divide':
            return [term ** -1 for term in terms]
        return terms


class Expression(collections.abc.Sequence, iterables.ReprStrMixin):
    """An object representing a reduced symbolic expression.

    If this class is instantiated with an existing instance, the result will be
    the same instance. Otherwise, it will parse the given string, or combine
    the given terms, and reduce the result.
    """

    def __new__(cls, *args, **kwargs):
        if len(args) == 1 and isinstance(args[0], cls):
            return args[0]
        return super().__new__(cls)

    def __init__(
        self,
        expression: typing.Union[str, typing.Iterable[Term], 'Expression'],
        **kwargs
    ) -> None:
        if isinstance(expression, Expression):
            return
        if isinstance(expression, str):
            terms = Parser(**kwargs).parse(expression)
        else:
            terms = list(expression)
        self.terms = reduce(terms)
        """The symbolic terms in this expression."""

    @property
    def coefficient(self) -> fractions.Fraction:
        """The product of all constant factors in this expression."""
        constants = [term.coefficient for term in self if term.constant]
        return constants[0] if constants else fractions.Fraction(1)

    @property
    def variables(self) -> typing.List[Term]:
        """The terms in this expression that have a variable base."""
        return [term for term in self if not term.constant]

    def __iter__(self) -> typing.Iterator[Term]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def __getitem__(self, index):
        """Access terms via standard indexing."""
        return self.terms[index]

    def __str__(self) -> str:
        return self.format()

    def format(self, separator: str=' ', style: str=None):
        """Join symbolic terms into a string."""
        return separator.join(term.format(style=style) for term in self)

    def __hash__(self):
        return hash(tuple(self.terms))

    def __eq__(self, other) -> bool:
        """True if two expressions have the same symbolic terms.

        If `other` is not an instance of this class, this method will first
        attempt to convert it.
        """
        if not isinstance(other, Expression):
            other = type(self)(other)
        key = attrgetter('base', 'exponent', 'coefficient')
        return sorted(self, key=key) == sorted(other, key=key)


def reduce(*groups: typing.Iterable[Term]) -> typing.List[Term]:
    """Algebraically reduce terms with equal bases.

    Parameters
    ----------
    *groups : tuple of iterables
        One or more iterables of `~symbolic.Term` instances. If there are
        multiple groups, this function will combine all terms it finds in the
        full collection of groups.

    Notes
    -----
    This function sorts variable terms from high to low exponent, and
    alphabetically for equal exponents. All coefficients collapse into a single
    leading constant term, which is omitted when it is equal to 1 and at least
    one variable term remains.
    """
    terms = [term for group in groups for term in group]
    exponents = {}
    for term in terms:
        if not term.constant:
            exponents[term.base] = exponents.get(term.base, 0) + term.exponent
    c = functools.reduce(
        lambda x, y: x * y,
        (term.coefficient for term in terms),
        fractions.Fraction(1),
    )
    tmp = [
        Term(base=base, exponent=exponent)
        for base, exponent in exponents.items()
        if exponent != 0
    ]
    variables = sorted(
        sorted(tmp, key=attrgetter('base')),
        key=attrgetter('exponent'),
        reverse=True,
    )
    constant = [Term(coefficient=c)]
    if not variables:
        return constant
    if c == 1:
        return variables
    return constant + variables
