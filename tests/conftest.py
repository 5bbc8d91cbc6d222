import math

import pytest

# Degrees of arc spanning one kilometre on the haversine sphere.
KM_IN_DEGREES = 180.0 / (math.pi * 6371.0)


@pytest.fixture
def unit_square():
    d = KM_IN_DEGREES
    return [(0.0, 0.0), (0.0, d), (d, d), (d, 0.0)]


@pytest.fixture
def city_points():
    return [
        (46.3497, 48.0408),
        (46.3650, 48.0550),
        (46.3300, 48.0100),
        (46.3800, 48.0200),
        (46.3400, 48.0700),
        (46.3550, 47.9950),
        (46.3200, 48.0450),
        (46.3720, 48.0800),
        (46.3610, 48.0310),
        (46.3350, 48.0560),
    ]
