import pytest

from unithelper.core import database
from unithelper.core import engine


@pytest.fixture
def catalog() -> database.Database:
    """A fresh standard unit catalog."""
    return database.standard()


@pytest.fixture
def converter() -> engine.Engine:
    """An engine with the built-in aliases and no configuration."""
    return engine.create()
