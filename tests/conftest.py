import pytest

from facemap.schemas import InjectionPoint

def make_point(id, muscle, x, y, dosage=4.0, depth="superficial", **kw):
    return InjectionPoint(id=id, muscle=muscle, x=x, y=y, dosage=dosage, depth=depth, **kw)

@pytest.fixture
def point():
    return make_point
