import math
from dataclasses import FrozenInstanceError, replace

import pytest

from gravity_stars.config import (
    DEFAULT_CONFIG,
    SOFTENING_EPS_PX,
    BoundaryMode,
    GravityConfig,
    PhysicsMode,
)
from gravity_stars.simulation import GravitySimulation


def test_defaults_are_valid():
    assert DEFAULT_CONFIG.validated() is DEFAULT_CONFIG
    assert DEFAULT_CONFIG.softening_eps_px > 0
    assert DEFAULT_CONFIG.flick_window == pytest.approx(0.07)


def test_config_is_immutable():
    with pytest.raises(FrozenInstanceError):
        DEFAULT_CONFIG.gravity_constant = 1


def test_validated_repairs_softening():
    config = GravityConfig(softening_eps_px=0).validated()
    assert config.softening_eps_px == SOFTENING_EPS_PX
    config = GravityConfig(softening_eps_px=-2).validated()
    assert config.softening_eps_px == SOFTENING_EPS_PX


def test_validated_clamps_negative_and_fractions():
    config = GravityConfig(
        gravity_constant=-1,
        velocity_damping=-0.5,
        radial_clamp_factor=1.5,
        angular_guidance_strength=2,
        mass_resistance_factor=-0.2,
        max_stars=-3,
    ).validated()
    assert config.gravity_constant == 0
    assert config.velocity_damping == 0
    assert config.radial_clamp_factor == 1.0
    assert config.angular_guidance_strength == 1.0
    assert config.mass_resistance_factor == 0
    assert config.max_stars == 0


def test_validated_fixes_mass_bounds():
    config = GravityConfig(min_mass=5, max_mass=2).validated()
    assert config.max_mass == 5
    config = GravityConfig(min_mass=0).validated()
    assert config.min_mass == DEFAULT_CONFIG.min_mass


def test_validated_replaces_non_finite():
    config = GravityConfig(gravity_constant=float("nan"), flick_s0=float("inf")).validated()
    assert config.gravity_constant == DEFAULT_CONFIG.gravity_constant
    assert config.flick_s0 == DEFAULT_CONFIG.flick_s0


def test_orbit_playground_disables_modifiers():
    config = replace(DEFAULT_CONFIG, physics_mode=PhysicsMode.ORBIT_PLAYGROUND,
                     velocity_damping=0.1, max_speed=100, enable_merging=True)
    assert config.effective_damping == 0
    assert config.speed_limit == 0
    assert not config.merging_enabled

    nbody = replace(config, physics_mode=PhysicsMode.N_BODY)
    assert nbody.effective_damping == 0.1
    assert nbody.speed_limit == 100
    assert nbody.merging_enabled


def test_dict_round_trip():
    config = replace(DEFAULT_CONFIG, boundary_mode=BoundaryMode.NONE, max_stars=12)
    data = config.to_dict()
    assert data["boundary_mode"] == "none"
    assert data["physics_mode"] == "n_body"
    assert GravityConfig.from_dict(data) == config


def test_from_dict_overlays_defaults_and_ignores_unknown():
    config = GravityConfig.from_dict({"gravity_constant": 42, "glowRadiusMultiplier": 2.5,
                                      "physics_mode": "orbit_playground"})
    assert config.gravity_constant == 42
    assert config.physics_mode is PhysicsMode.ORBIT_PLAYGROUND
    assert config.max_mass == DEFAULT_CONFIG.max_mass


def test_from_dict_bad_enum_falls_back():
    config = GravityConfig.from_dict({"boundary_mode": "bounce"})
    assert config.boundary_mode is BoundaryMode.WRAP


def test_validated_caps_damping_at_one(clock):
    config = replace(DEFAULT_CONFIG, velocity_damping=3.0, max_speed=0,
                     boundary_mode=BoundaryMode.NONE)
    assert config.validated().velocity_damping == 1.0

    sim = GravitySimulation(800, 600, config, clock=clock)
    sim.add_body(100, 100, 1, 10, 0)
    for _ in range(1200):
        clock.advance(1 / 60)
        sim.tick(1 / 60)
    (body,) = sim.bodies
    assert (body.vx, body.vy) == (0, 0)
    assert math.isfinite(body.x) and math.isfinite(body.y)


def test_from_dict_converts_strings():
    config = GravityConfig.from_dict({
        "gravity_constant": "5000",
        "softening_eps_px": " 2.5 ",
        "max_stars": "12",
        "enable_merging": "false",
    })
    assert config.gravity_constant == 5000.0
    assert isinstance(config.gravity_constant, float)
    assert config.softening_eps_px == 2.5
    assert config.max_stars == 12
    assert isinstance(config.max_stars, int)
    assert config.enable_merging is False


def test_from_dict_unusable_values_fall_back_to_defaults():
    config = GravityConfig.from_dict({
        "gravity_constant": "heavy",
        "max_force_magnitude": None,
        "max_stars": "nan",
        "enable_merging": "maybe",
        "flick_s0": True,
    })
    assert config.gravity_constant == DEFAULT_CONFIG.gravity_constant
    assert config.max_force_magnitude == DEFAULT_CONFIG.max_force_magnitude
    assert config.max_stars == DEFAULT_CONFIG.max_stars
    assert config.enable_merging is True
    assert config.flick_s0 == DEFAULT_CONFIG.flick_s0


@pytest.mark.parametrize("text,expected", [("TRUE", True), ("on", True), ("0", False), ("No", False)])
def test_from_dict_parses_bool_strings(text, expected):
    assert GravityConfig.from_dict({"enable_merging": text}).enable_merging is expected


def test_float_field_accepts_integer_and_truncates_int_field():
    config = GravityConfig(gravity_constant=7, max_stars=12.9).validated()
    assert config.gravity_constant == 7
    assert config.max_stars == 12


def test_string_config_ticks_without_error(clock):
    config = GravityConfig.from_dict({"gravity_constant": "5000", "boundary_mode": "none"})
    sim = GravitySimulation(800, 600, config, clock=clock)
    sim.add_body(100, 100, 2)
    sim.add_body(200, 100, 2)
    clock.advance(1 / 60)
    sim.tick(1 / 60)
    assert all(math.isfinite(b.vx) for b in sim.bodies)
    assert sim.bodies[0].vx > 0
