import typing


T = typing.TypeVar('T')
R = typing.TypeVar('R')


def apply(
    methods: typing.Iterable[typing.Callable[..., R]],
    *args,
    **kwargs,
) -> typing.Optional[R]:
    """Call each method in turn and return the first non-null result."""
    for method in methods:
        if result := method(*args, **kwargs):
            return result


class ReprStrMixin:
    """A mixin class that derives `__repr__` from `__str__`.

    Subclasses define `__str__`. The representation prefixes that string with
    the qualified name of the class, relative to the top-level package.
    """

    def __repr__(self) -> str:
        """An unambiguous representation of this object."""
        module = self.__module__.replace('unithelper.', '')
        name = self.__class__.__qualname__
        return f"{module}.{name}({self})"


G = typing.TypeVar('G')


class Guard:
    """Substitute default values for exceptions.

    An instance wraps a callable object. Calling it through `~Guard.call`
    returns the value registered for any known exception that the callable
    raises, or for the nearest registered base class of that exception. The
    default substitute is ``None``.

    Examples
    --------
    >>> lookup = iterables.Guard({'m': 1}.__getitem__).catch(KeyError)
    >>> lookup.call('m')
    1
    >>> lookup.call('s') is None
    True
    """

    def __init__(self, __callable: typing.Callable[..., T]) -> None:
        self._call = __callable
        self._substitutes: typing.Dict[typing.Type[Exception], typing.Any] = {}

    def catch(self, exception: typing.Type[Exception], /, value: G=None):
        """Register a known exception and return this instance."""
        self._substitutes[exception] = value
        return self

    def call(self, *args, **kwargs) -> typing.Union[T, G]:
        """Call the guarded object with the given arguments.

        Exceptions unknown to this instance propagate to the caller.
        """
        try:
            return self._call(*args, **kwargs)
        except tuple(self._substitutes) as err:
            known = next(
                cls for cls in type(err).__mro__ if cls in self._substitutes
            )
            return self._substitutes[known]
