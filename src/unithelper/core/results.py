"""Typed outcomes of operations that may fail.

Functions that must not raise call `attempt` and inspect the outcome, rather
than wrapping their own bodies in ``try`` blocks.
"""

import typing


T = typing.TypeVar('T')


class Success(typing.NamedTuple):
    """The result of an operation that completed."""

    value: typing.Any

    @property
    def ok(self) -> bool:
        """Always true."""
        return True


class Failure(typing.NamedTuple):
    """The error raised by an operation that did not complete."""

    error: Exception

    @property
    def ok(self) -> bool:
        """Always false."""
        return False

    @property
    def kind(self) -> str:
        """The name of the type of error."""
        return type(self.error).__name__

    @property
    def message(self) -> str:
        """The text of the error."""
        return str(self.error)

    def known(self, *kinds: typing.Type[Exception]) -> bool:
        """True if the error is an instance of one of `kinds`."""
        return isinstance(self.error, kinds)


Outcome = typing.Union[Success, Failure]


def attempt(
    __callable: typing.Callable[..., T],
    *args,
    **kwargs
) -> Outcome:
    """Call an object and capture its return value or error."""
    try:
        value = __callable(*args, **kwargs)
    except Exception as err:
        return Failure(err)
    return Success(value)
