import pytest

from unithelper.core import database
from unithelper.core import dimensions
from unithelper.core import metric
from unithelper.core import parsing
from unithelper.core import symbolic


@pytest.mark.catalog
def test_get_exact(catalog: database.Database):
    """Look up units by symbol and alias."""
    meter = catalog.get('m')
    assert isinstance(meter, metric.BaseUnit)
    assert meter.name == 'meter'
    assert catalog.get('°C') is catalog.get('degC')
    assert catalog.get('l') is catalog.get('L')
    assert catalog.get('Ω').name == 'ohm'


@pytest.mark.catalog
def test_get_named(catalog: database.Database):
    """Look up units by name or plural, ignoring case and whitespace."""
    meter = catalog.get('m')
    for name in ('meter', 'METER', 'Meters', 'meters'):
        assert catalog.get(name) is meter
    assert catalog.get('feet') is catalog.get('ft')
    assert catalog.get('degreeCelsius') is catalog.get('degC')
    assert catalog.get('degree Celsius') is catalog.get('degC')
    assert catalog.get('ohm') is catalog.get('Ω')


@pytest.mark.catalog
def test_get_prefixed(catalog: database.Database):
    """Combine metric prefixes with symbols and names."""
    km = catalog.get('km')
    assert km.scale == 1000.0
    assert km.name == 'kilometer'
    assert km.symbol == 'km'
    assert km.plural == 'kilometers'
    assert catalog.get('mm').scale == 0.001
    assert catalog.get('dam').scale == 10.0
    assert catalog.get('um').scale == 1e-6
    assert catalog.get('µm').scale == 1e-6
    assert catalog.get('mg').scale == pytest.approx(1e-6)
    assert catalog.get('kHz').dimensions.code == 't-1'
    named = catalog.get('Kilometers')
    assert named.scale == 1000.0
    assert named.name == 'kilometer'
    assert named.symbol == 'km'


@pytest.mark.catalog
def test_get_unknown(catalog: database.Database):
    """Raise an exception for unknown identifiers."""
    unknown = ['bogus', 'kdegC', 'kkg', 'kmin', 'Meter_', 'M']
    for identifier in unknown:
        with pytest.raises(database.UnknownUnitError) as err:
            catalog.get(identifier)
        assert str(err.value) == f"Unknown unit {identifier!r}"


def test_parse(catalog: database.Database):
    """Parse expressions into units."""
    speed = catalog.parse('m/s')
    assert speed.dimensions.code == 'L.t-1'
    assert catalog.parse('km/h').scale == pytest.approx(1000 / 3600)
    assert catalog.parse('kg/ha').dimensions.code == 'M.L-2'
    assert catalog.parse('kg.m.s-2') == catalog.get('N')
    assert catalog.parse('kg*m*s^-2') == catalog.get('N')
    assert catalog.parse('(m/s)^2').dimensions.code == 'L2.t-2'
    assert catalog.parse('m^1/2').dimensions.code == 'L1/2'
    assert catalog.parse('1000 m') == catalog.get('km')
    assert catalog.parse('1').dimensions.dimensionless
    assert catalog.parse('%').scale == 0.01
    assert catalog.parse('m/m').dimensions.dimensionless


def test_parse_offset(catalog: database.Database):
    """Keep offsets only for lone identifiers."""
    assert catalog.parse('degC').offset == 273.15
    assert catalog.parse(' degC ').offset == 273.15
    assert catalog.parse('degC^1').offset == 273.15
    assert catalog.parse('degC/s').offset == 0.0
    assert catalog.parse('2 degC').offset == 0.0


def test_parse_errors(catalog: database.Database):
    """Raise the appropriate exception for each kind of failure."""
    for value in ('', '   ', None, 1.5):
        with pytest.raises(parsing.SpecificationError):
            catalog.parse(value)
    with pytest.raises(parsing.SpecificationError) as err:
        catalog.parse('0 m')
    assert 'zero scale factor' in str(err.value)
    for string in ('m/', '(m', 'm^^2'):
        with pytest.raises(symbolic.ParsingError):
            catalog.parse(string)
    with pytest.raises(database.UnknownUnitError):
        catalog.parse('m/bogus')


@pytest.mark.catalog
def test_iterate(catalog: database.Database):
    """Iterate over canonical units exactly once, in definition order."""
    units = list(catalog)
    assert len(units) == len(catalog)
    names = [unit.name for unit in units]
    assert names[:3] == ['meter', 'kilogram', 'second']
    assert len(names) == len(set(names))
    assert 'kilometer' not in names
    assert names == [unit.name for unit in catalog]
    expected = {
        'gram', 'tonne', 'minute', 'hour', 'day', 'week', 'year', 'hertz',
        'newton', 'pascal', 'joule', 'watt', 'coulomb', 'volt', 'ohm',
        'siemens', 'farad', 'weber', 'tesla', 'henry', 'lumen', 'lux',
        'becquerel', 'gray', 'sievert', 'katal', 'degree Celsius',
        'degree Rankine', 'degree Fahrenheit', 'degree', 'arcminute',
        'arcsecond', 'liter', 'hectare', 'are', 'acre', 'inch', 'foot',
        'yard', 'mile', 'astronomical unit', 'pound', 'ounce', 'bar',
        'atmosphere', 'calorie', 'electronvolt', 'percent',
        'parts per million', 'count',
    }
    assert expected <= set(names)


def test_contains(catalog: database.Database):
    """Check membership of exact symbols and names."""
    assert 'm' in catalog
    assert 'meter' in catalog
    assert 'km' not in catalog
    assert 'bogus' not in catalog


def test_add_alias(catalog: database.Database):
    """Register aliases for units and pure numbers."""
    catalog.add_alias('fraction', '1')
    assert catalog.get('fraction').dimensions.dimensionless
    catalog.add_alias('dap', 'day')
    assert catalog.get('dap') is catalog.get('day')
    catalog.add_alias('metre', 'm')
    assert catalog.get('metre') is catalog.get('m')
    assert catalog.get('kmetre').scale == 1000.0
    catalog.add_alias('kg_ha', 'kg/ha')
    assert catalog.parse('kg_ha') == catalog.parse('kg/ha')
    before = [unit.name for unit in catalog]
    catalog.add_alias('unitless', '1')
    assert [unit.name for unit in catalog] == before


def test_add_alias_errors(catalog: database.Database):
    """Reject invalid or conflicting aliases."""
    invalid = {
        'two words': 'm',
        '2m': 'm',
        '': 'm',
        'm': 'km',
        'Meter': 'm',
        'thing': 'bogus',
        'broken': 'm/',
    }
    for alias, canonical in invalid.items():
        with pytest.raises(database.AliasError):
            catalog.add_alias(alias, canonical)
    catalog.add_alias('ratio', '1')
    with pytest.raises(database.AliasError) as err:
        catalog.add_alias('ratio', '1')
    assert str(err.value) == "Can't register alias 'ratio': already in use"
    assert isinstance(err.value, database.DatabaseError)


def test_declare(catalog: database.Database):
    """Declare placeholder units."""
    widget = catalog.declare('widget')
    assert isinstance(widget, metric.UnknownUnit)
    assert catalog.get('widget') is widget
    assert catalog.get('WIDGET') is widget
    assert list(catalog)[-1] is widget
    assert widget.dimension is dimensions.Dimension.UNKNOWN
    with pytest.raises(database.DatabaseError):
        catalog.declare('widget')
    with pytest.raises(metric.DimensionMismatchError):
        widget.convert(1.0, catalog.declare('gadget'))
    assert widget.convert(2.0, widget) == 2.0


def test_define(catalog: database.Database):
    """Define new units in terms of existing units."""
    furlong = catalog.define('furlong', '201.168 m', symbol='fur')
    assert catalog.get('fur') is furlong
    assert catalog.get('furlongs') is furlong
    assert catalog.get('kfur').scale == pytest.approx(201168.0)
    shifted = catalog.define('shifted kelvin', 'K @ 10', symbol='sK')
    assert shifted.offset == 10.0
    with pytest.raises(database.UnknownUnitError):
        catalog.get('ksK')
    with pytest.raises(database.DatabaseError):
        catalog.define('meter', '1 m')


def test_standard_is_independent():
    """Create catalogs that do not share state."""
    first = database.standard()
    second = database.standard()
    first.declare('widget')
    assert 'widget' in first
    assert 'widget' not in second
