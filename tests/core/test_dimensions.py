import fractions

import pytest

from unithelper.core import dimensions


Dimension = dimensions.Dimension


def test_code_of():
    """Look up dimensions by code without raising."""
    assert dimensions.code_of('L') is Dimension.LENGTH
    assert dimensions.code_of('t') is Dimension.TIME
    assert dimensions.code_of('T') is Dimension.TEMPERATURE
    assert dimensions.code_of('Plane Angle') is Dimension.PLANE_ANGLE
    assert dimensions.code_of('X') is Dimension.UNKNOWN
    for code in (None, '', 'l', 'M.L', 'bogus'):
        assert dimensions.code_of(code) is Dimension.UNKNOWN


def test_all_dimensions():
    """Enumerate dimensions in their fixed order."""
    codes = [d.code for d in dimensions.all_dimensions()]
    assert codes == [
        'I', 'J', 'T', 'M', 'L', 'N', 't',
        'Plane Angle', 'Solid Angle', 'X',
    ]
    ranks = [d.rank for d in dimensions.all_dimensions()]
    assert ranks == sorted(ranks)


def test_table():
    """Map codes to dimension names."""
    table = dimensions.table()
    assert len(table) == 10
    assert table['L'] == 'LENGTH'
    assert table['t'] == 'TIME'
    assert table['Solid Angle'] == 'SOLID_ANGLE'


@pytest.fixture
def bases():
    """Base-unit keys for building vectors."""
    return {
        'm': dimensions.Base('m', Dimension.LENGTH),
        'kg': dimensions.Base('kg', Dimension.MASS),
        's': dimensions.Base('s', Dimension.TIME),
        'K': dimensions.Base('K', Dimension.TEMPERATURE),
    }


def test_vector_code(bases):
    """Render vectors in dimension order."""
    m, kg, s = bases['m'], bases['kg'], bases['s']
    force = dimensions.Vector({s: -2, m: 1, kg: 1})
    assert force.code == 'M.L.t-2'
    assert str(force) == 'M.L.t-2'
    assert list(force) == [kg, m, s]
    assert dimensions.Vector({m: 2}).code == 'L2'
    assert dimensions.Vector({m: fractions.Fraction(1, 2)}).code == 'L1/2'
    assert dimensions.Vector({bases['K']: 1, m: -1}).code == 'T.L-1'
    assert dimensions.Vector().code == '1'


def test_vector_dimension(bases):
    """Collapse vectors to a single dimension where possible."""
    m, s = bases['m'], bases['s']
    assert dimensions.Vector({m: 1}).dimension is Dimension.LENGTH
    assert dimensions.Vector({m: 2}).dimension is Dimension.UNKNOWN
    assert dimensions.Vector({m: 1, s: -1}).dimension is Dimension.UNKNOWN
    assert dimensions.Vector().dimension is Dimension.UNKNOWN


def test_vector_arithmetic(bases):
    """Combine vectors by multiplication, division, and powers."""
    m, s = bases['m'], bases['s']
    length = dimensions.Vector({m: 1})
    time = dimensions.Vector({s: 1})
    speed = length / time
    assert speed == dimensions.Vector({m: 1, s: -1})
    assert speed * time == length
    assert (speed ** 2).code == 'L2.t-2'
    ratio = length / length
    assert ratio.dimensionless
    assert ratio == dimensions.Vector()
    assert len(ratio) == 0
    assert dimensions.Vector({m: 0}) == dimensions.Vector()
    assert hash(speed) == hash(dimensions.Vector({s: -1, m: 1}))
