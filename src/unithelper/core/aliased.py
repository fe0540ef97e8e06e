import collections.abc
import typing


_KT = typing.TypeVar('_KT')
_VT = typing.TypeVar('_VT')


class Group(collections.abc.Set, typing.Generic[_KT]):
    """A group of associated aliases.

    The first alias is the primary key of the group. Iteration preserves the
    order in which aliases were registered.
    """

    __slots__ = ('_aliases',)

    def __init__(self, *a: _KT) -> None:
        if not a:
            raise TypeError("At least one alias is required") from None
        self._aliases = tuple(dict.fromkeys(a))

    @property
    def primary(self) -> _KT:
        """The first alias in this group."""
        return self._aliases[0]

    def __iter__(self):
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, key) -> bool:
        return key in self._aliases

    def __hash__(self) -> int:
        return hash(self._aliases)

    def __or__(self, other):
        """Create a new group with the aliases in `other` appended."""
        others = other if isinstance(other, Group) else (other,)
        return type(self)(*self._aliases, *others)

    def __str__(self) -> str:
        """A simplified representation of this instance."""
        return ' | '.join(str(k) for k in self._aliases)

    def __repr__(self) -> str:
        """An unambiguous representation of this instance."""
        module = f"{self.__module__.replace('unithelper.', '')}."
        name = self.__class__.__qualname__
        return f"{module}{name}({self})"


class Mapping(collections.abc.Mapping, typing.Generic[_KT, _VT]):
    """A mapping class that supports aliased keys.

    Examples
    --------
    Create an instance from a standard `dict` with strings or tuples of strings
    as keys.

    >>> amap = aliased.Mapping({'m': 1, ('s', 'second'): 2})
    >>> amap['second']
    2
    >>> amap['s'] is amap['second']
    True

    Iterating over keys produces every alias, while `groups` produces one
    `~aliased.Group` per value:

    >>> list(amap)
    ['m', 's', 'second']
    >>> [str(group) for group in amap.groups()]
    ['m', 's | second']

    Notes
    -----
    The length of this object is equal to the number of valid aliases it
    contains, consistent with the many-to-one nature of the mapping.
    """

    def __init__(self, mapping: typing.Mapping=None) -> None:
        self._groups = {
            self._as_group(key): value
            for key, value in (mapping or {}).items()
        }
        self._flat = {}
        self._refresh()

    @staticmethod
    def _as_group(key) -> Group:
        """Convert a single key or tuple of keys to a group."""
        if isinstance(key, Group):
            return key
        if isinstance(key, tuple):
            return Group(*key)
        return Group(key)

    def _refresh(self):
        """Rebuild the flat look-up table from the current groups."""
        flat = {}
        for group in self._groups:
            for alias in group:
                if alias in flat:
                    raise KeyError(
                        f"{alias!r} is already an alias for {str(flat[alias])!r}"
                    ) from None
                flat[alias] = group
        self._flat = flat

    def groups(self) -> typing.Iterator[Group]:
        """Iterate over alias groups in insertion order."""
        yield from self._groups

    def alias(self, key: _KT) -> Group:
        """Get every alias for an existing key."""
        if key in self._flat:
            return self._flat[key]
        raise KeyError(
            f"The key {key!r} does not correspond to a known name or alias"
        ) from None

    def __contains__(self, __o) -> bool:
        return __o in self._flat

    def __iter__(self) -> typing.Iterator[_KT]:
        yield from self._flat

    def __len__(self) -> int:
        return len(self._flat)

    def __getitem__(self, key: _KT) -> _VT:
        """Look up a value by one of its keys."""
        return self._groups[self.alias(key)]

    def __str__(self) -> str:
        """A simplified representation of this instance."""
        return ', '.join(
            f"{str(group)!r}: {value!r}"
            for group, value in self._groups.items()
        )

    def __repr__(self) -> str:
        """An unambiguous representation of this object."""
        module = f"{self.__module__.replace('unithelper.', '')}."
        name = self.__class__.__qualname__
        return f"{module}{name}({self})"


class MutableMapping(Mapping, collections.abc.MutableMapping):
    """A mutable version of `Mapping`.

    Updates and deletions apply to all associated aliases. Attempting to
    register an alias will raise a `KeyError` if it is already an alias for a
    different key.

    >>> mutable = aliased.MutableMapping({('s', 'second'): 1.0})
    >>> mutable.alias('s', 'sec')
    >>> mutable['sec']
    1.0
    >>> mutable.alias('m', 's')
    ...
    KeyError: "'s' is already an alias for 's | second | sec'"
    """

    def __setitem__(self, key, value: _VT):
        """Assign a value to `key` and its aliases."""
        if not isinstance(key, (Group, tuple)) and key in self._flat:
            group = self._flat[key]
        else:
            group = self._as_group(key)
            clashes = [a for a in group if a in self._flat]
            if clashes:
                raise KeyError(
                    f"{clashes[0]!r} is already an alias for"
                    f" {str(self._flat[clashes[0]])!r}"
                ) from None
        self._groups[group] = value
        self._refresh()

    def __delitem__(self, key: _KT):
        """Remove the item corresponding to `key`."""
        group = self.alias(key)
        del self._groups[group]
        self._refresh()

    def alias(self, key: _KT, *aliases: _KT) -> typing.Optional[Group]:
        """Get or set the alias(es) for an existing key.

        Parameters
        ----------
        key : string
            An existing key for which to return or extend aliases.

        *aliases : strings
            Zero or more aliases to associate with `key`, if they are not
            already in use.
        """
        current = super().alias(key)
        if not aliases:
            return current
        for alias in aliases:
            if alias in self._flat:
                raise KeyError(
                    f"{alias!r} is already an alias for"
                    f" {str(self._flat[alias])!r}"
                ) from None
        updated = current | Group(*aliases)
        self._groups = {
            (updated if group is current else group): value
            for group, value in self._groups.items()
        }
        self._refresh()
