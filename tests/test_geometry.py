import pytest

from gravity_stars.geometry import Bounds, displacement, wrap_point

BOUNDS = Bounds(100.0, 50.0)


def test_displacement_without_bounds_is_direct():
    assert displacement(1, 1, 99, 49) == (98, 48)


def test_displacement_takes_shortest_image():
    dx, dy = displacement(1, 1, 99, 49, BOUNDS)
    assert dx == pytest.approx(-2)
    assert dy == pytest.approx(-2)


def test_displacement_far_outside_box():
    dx, _ = displacement(0, 0, 260, 0, BOUNDS)
    assert dx == pytest.approx(-40)


def test_wrap_point():
    assert wrap_point(101, -1, BOUNDS) == pytest.approx((1, 49))
    assert wrap_point(100, 50, BOUNDS) == (0, 0)
    x, y = wrap_point(-1e-17, 10, BOUNDS)
    assert 0 <= x < BOUNDS.width
