import os
import pathlib
import typing


PathLike = typing.Union[str, os.PathLike]


class NonExistentPathError(Exception):

    def __init__(self, path: PathLike=None):
        self._path = path

    @property
    def path(self) -> str:
        if self._path is None:
            self._path = "The requested path"
        return self._path

    def __str__(self):
        return f"{self.path} does not exist."


def full_path(path: PathLike) -> pathlib.Path:
    """Expand and resolve `path`, which must exist."""
    resolved = pathlib.Path(path).expanduser().resolve()
    if not resolved.exists():
        raise NonExistentPathError(resolved)
    return resolved


def search(
    paths: typing.Iterable[typing.Optional[PathLike]],
    file: PathLike,
) -> typing.Optional[pathlib.Path]:
    """Search `paths` for `file`.

    Parameters
    ----------
    paths : iterable of path-like
        The directories to search, in the order given. This function skips
        members that are ``None`` or that do not exist.

    file : path-like
        The file to locate.

    Returns
    -------
    path or `None`
        The full path to the file, if found.
    """
    for p in paths:
        if not p:
            continue
        path = pathlib.Path(p).expanduser()
        if path.is_dir():
            test = path / str(file)
            if test.exists():
                return full_path(test)
