from dataclasses import replace

import math
import pytest

from gravity_stars.body import Body
from gravity_stars.config import DEFAULT_CONFIG
from gravity_stars.forces import accelerations_of, pair_force
from gravity_stars.geometry import Bounds


@pytest.fixture
def newton():
    return replace(DEFAULT_CONFIG, gravity_constant=1.0, softening_eps_px=1e-6, max_force_magnitude=0)


def test_matches_newtonian_gravity_at_distance(newton):
    a = Body(1, (0, 0), 2)
    b = Body(2, (100, 0), 3)
    (a_ax, a_ay), (b_ax, b_ay) = accelerations_of([a, b], newton)
    assert a_ax == pytest.approx(3 / 100**2)
    assert b_ax == pytest.approx(-2 / 100**2)
    assert a_ay == 0 and b_ay == 0


def test_forces_are_equal_and_opposite(newton):
    bodies = [Body(1, (0, 0), 2), Body(2, (30, 40), 5), Body(3, (-10, 25), 1)]
    accels = accelerations_of(bodies, replace(newton, max_force_magnitude=1e-3))
    px = sum(b.mass * ax for b, (ax, _) in zip(bodies, accels))
    py = sum(b.mass * ay for b, (_, ay) in zip(bodies, accels))
    assert px == pytest.approx(0, abs=1e-15)
    assert py == pytest.approx(0, abs=1e-15)


def test_softening_keeps_coincident_bodies_finite():
    a = Body(1, (5, 5), 10)
    b = Body(2, (5, 5), 10)
    for ax, ay in accelerations_of([a, b], DEFAULT_CONFIG):
        assert math.isfinite(ax) and math.isfinite(ay)


def test_softening_limits_close_range_force():
    config = replace(DEFAULT_CONFIG, gravity_constant=1, softening_eps_px=3, max_force_magnitude=0)
    a = Body(1, (0, 0), 1)
    b = Body(2, (4, 0), 1)
    fx, _ = pair_force(a, b, config)
    # r^2 = 16 + 9 = 25
    assert fx == pytest.approx(4 / 125)


def test_force_cap(newton):
    capped = replace(newton, max_force_magnitude=1e-6)
    a = Body(1, (0, 0), 4)
    b = Body(2, (3, 4), 4)
    fx, fy = pair_force(a, b, capped)
    assert math.hypot(fx, fy) == pytest.approx(1e-6)
    assert fy / fx == pytest.approx(4 / 3)
    (ax, ay), _ = accelerations_of([a, b], capped)
    assert math.hypot(ax, ay) == pytest.approx(1e-6 / 4)


def test_minimum_image_pulls_across_the_edge(newton):
    a = Body(1, (1, 50), 1)
    b = Body(2, (99, 50), 1)
    (ax, _), (bx, _) = accelerations_of([a, b], newton, Bounds(100, 100))
    assert ax < 0
    assert bx > 0
    assert ax == pytest.approx(-1 / 4, rel=1e-6)


def test_empty_and_single():
    assert accelerations_of([], DEFAULT_CONFIG) == []
    assert accelerations_of([Body(1, (0, 0), 1)], DEFAULT_CONFIG) == [(0.0, 0.0)]
