import logging

from unithelper.core import aliases
from unithelper.core import database


def test_table():
    """Map informal names to canonical expressions."""
    assert aliases.ALIASES == {
        'number': 'count',
        'dap': 'day',
        'doy': 'day',
        'decimal_degree': 'degree',
        'fraction': '1',
        'unitless': '1',
        'ratio': '1',
    }


def test_register(catalog: database.Database):
    """Register the built-in aliases."""
    registered = aliases.register(catalog)
    assert registered == aliases.ALIASES
    assert catalog.get('doy') is catalog.get('day')
    assert catalog.get('number') is catalog.get('count')
    assert catalog.get('decimal_degree') is catalog.get('degree')
    assert catalog.get('ratio').dimensions.dimensionless


def test_register_failures(catalog: database.Database, caplog):
    """Log and skip aliases that can't be registered."""
    extra = {
        'bad alias': 'm',
        'kg_ha': 'kg/ha',
        'thing': 'bogus',
        'm': 'km',
    }
    with caplog.at_level(logging.WARNING, logger='unithelper.core.aliases'):
        registered = aliases.register(catalog, extra)
    assert registered == {'kg_ha': 'kg/ha'}
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 3
    assert "Ignoring alias 'thing'" in caplog.text


def test_register_twice(catalog: database.Database, caplog):
    """Skip every alias on a repeated registration."""
    aliases.register(catalog)
    with caplog.at_level(logging.WARNING, logger='unithelper.core.aliases'):
        assert aliases.register(catalog) == {}
    assert len(caplog.records) == len(aliases.ALIASES)


def test_dimensionless():
    """Identify aliases of pure numbers."""
    for name in ('fraction', 'unitless', 'ratio'):
        assert aliases.dimensionless(name, aliases.ALIASES)
    for name in ('dap', 'number', 'm', ''):
        assert not aliases.dimensionless(name, aliases.ALIASES)
