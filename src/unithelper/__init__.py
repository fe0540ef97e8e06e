import collections.abc
import configparser
import functools
import json
import logging
import os
import pathlib

from unithelper.core import engine
from unithelper.core import iotools


# read version from installed package
from importlib.metadata import version
__version__ = version("unithelper")


class Environment(collections.abc.Mapping):
    """A collection of settings from one section of ``unithelper.ini``."""

    def __init__(self, name: str) -> None:
        self.name = name
        """The name of the configuration section to select."""
        self._package = f"{__package__}.{self.name}"
        home = pathlib.Path('~').expanduser()
        paths = [
            pathlib.Path.cwd(), # The current working directory
            home, # The user's home directory
            home / '.config', # Linux standard (local)
            '/etc/unithelper', # Linux standard (global)
            os.environ.get('UNITHELPER_INI'), # A known environment variable
            pathlib.Path(__file__).parent, # The package top
        ]
        config = configparser.ConfigParser()
        config.optionxform = str
        path = iotools.search(paths, 'unithelper.ini')
        if path is not None:
            config.read(path)
        self._config = config[name] if config.has_section(name) else {}
        self.path = path

    def __len__(self) -> int:
        """The number of available parameter values."""
        return len(self._config)

    def __iter__(self):
        """Iterate over available parameter values."""
        yield from self._config

    def __getitem__(self, key: str):
        """Access parameter values by mapping key."""
        if key in self._config:
            return self._config[key]
        raise KeyError(
            f"{self._package} has no value for {key!r}"
        ) from None

    def __str__(self) -> str:
        return json.dumps(
            dict(self._config),
            indent=4,
            sort_keys=True,
        )

    def __repr__(self) -> str:
        return f"{self._package}({self.path}):\n{self}"


def configure() -> dict:
    """Collect keyword arguments for `~engine.create` from the environment."""
    units = Environment('units')
    conversion = Environment('conversion')
    placeholders = [
        name.strip()
        for name in units.get('placeholders', '').split(',')
        if name.strip()
    ]
    precision = conversion.get('precision')
    return {
        'aliases': dict(Environment('aliases')),
        'placeholders': placeholders,
        'precision': int(precision) if precision else None,
    }


@functools.lru_cache(maxsize=None)
def instance() -> engine.Engine:
    """The process-wide engine, created from the environment on first use."""
    level = Environment('logging').get('level')
    if level:
        logging.getLogger(__name__).setLevel(level.upper())
    return engine.create(**configure())
