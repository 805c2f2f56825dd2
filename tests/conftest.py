from dataclasses import replace

import pytest

from gravity_stars.config import DEFAULT_CONFIG, BoundaryMode


class FakeClock:
    """Manually advanced stand-in for time.perf_counter."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def closed_config():
    """Pure Newtonian setup: no wrap, no clamps, no damping, no merging."""
    return replace(
        DEFAULT_CONFIG,
        boundary_mode=BoundaryMode.NONE,
        max_force_magnitude=0,
        max_speed=0,
        velocity_damping=0,
        enable_merging=False,
        softening_eps_px=0.1,
        max_stars=200,
    )


@pytest.fixture
def clock_factory():
    return FakeClock
