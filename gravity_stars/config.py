"""Tunable physics and behaviour parameters.

All defaults live here as module constants so they can be tuned in one
place. A :class:`GravityConfig` bundles them into an immutable value that is
threaded through every call; change it with ``dataclasses.replace`` and hand
the new value to ``GravitySimulation.update_config``.
"""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

# Gravity physics
GRAVITY_CONSTANT = 5000        # G, scaled for pixel units
SOFTENING_EPS_PX = 3           # Plummer softening length (px), must stay > 0
MAX_FORCE_MAGNITUDE = 1000     # 0 = unbounded
VELOCITY_DAMPING = 0           # 0 = energy-conserving

# Mass growth
MIN_MASS = 1
MAX_MASS = 10
HOLD_TO_MAX_SECONDS = 1.5      # Time to hold to reach max mass
RADIUS_POWER = 0.5             # 0.5 = sqrt (2D area), 0.333 = cbrt (3D volume)
RADIUS_SCALE = 1.2             # radius = mass ** RADIUS_POWER * RADIUS_SCALE

# Launch velocity (flick)
FLICK_WINDOW_MS = 70           # Gesture history used for the release velocity
FLICK_S0 = 400                 # Speed compressor scale (px/s)
FLICK_VMAX = 1600              # Compressed speed ceiling (px/s)
LAUNCH_STRENGTH = 1.0
MASS_RESISTANCE_FACTOR = 0.3   # 0-1, higher = heavy stars launch slower

# Angular momentum guidance (launch assist only)
ANGULAR_GUIDANCE_STRENGTH = 0.6
RADIAL_CLAMP_FACTOR = 0.5
ORBITAL_CENTER_SEARCH_RADIUS = 300

# Safety rails
MAX_SPEED = 4000               # px/s, 0 = no ceiling
MAX_TIME_STEP = 0.1            # Largest dt a single tick may advance (s)
MAX_STARS = 60

# Trails and creation feedback
STAR_TRAIL_LENGTH = 15
STAR_TRAIL_FADE_TIME = 0.5     # seconds
TRAIL_SPEED_THRESHOLD = 10     # px/s, slower stars drop their trail
CREATION_RIPPLE_DURATION = 0.3
CREATION_RIPPLE_MAX_RADIUS = 50


class BoundaryMode(enum.Enum):
    WRAP = "wrap"
    NONE = "none"


class PhysicsMode(enum.Enum):
    N_BODY = "n_body"
    # Pure orbits: no damping, no speed ceiling, no merging
    ORBIT_PLAYGROUND = "orbit_playground"


# Fields that must lie in [0, 1]
_FRACTIONS = ("velocity_damping", "mass_resistance_factor", "radial_clamp_factor",
              "angular_guidance_strength")

_SCALAR_TYPES = {"float": float, "int": int, "bool": bool}
_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off", "")


def _coerce_scalar(value, kind):
    """Convert ``value`` to the named field type, or None if it can't be.

    Values already of the right type come back as the same object.
    """
    if kind == "bool":
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _TRUE_STRINGS:
                return True
            if text in _FALSE_STRINGS:
                return False
            return None
        if isinstance(value, (int, float)) and math.isfinite(value):
            return bool(value)
        return None

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
    if not math.isfinite(number):
        return None
    if kind == "int" and not isinstance(number, int):
        return int(number)
    return number


@dataclass(frozen=True)
class GravityConfig:
    gravity_constant: float = GRAVITY_CONSTANT
    softening_eps_px: float = SOFTENING_EPS_PX
    max_force_magnitude: float = MAX_FORCE_MAGNITUDE
    velocity_damping: float = VELOCITY_DAMPING

    min_mass: float = MIN_MASS
    max_mass: float = MAX_MASS
    hold_to_max_seconds: float = HOLD_TO_MAX_SECONDS
    radius_power: float = RADIUS_POWER
    radius_scale: float = RADIUS_SCALE

    flick_window_ms: float = FLICK_WINDOW_MS
    flick_s0: float = FLICK_S0
    flick_vmax: float = FLICK_VMAX
    launch_strength: float = LAUNCH_STRENGTH
    mass_resistance_factor: float = MASS_RESISTANCE_FACTOR

    angular_guidance_strength: float = ANGULAR_GUIDANCE_STRENGTH
    radial_clamp_factor: float = RADIAL_CLAMP_FACTOR
    orbital_center_search_radius: float = ORBITAL_CENTER_SEARCH_RADIUS

    max_stars: int = MAX_STARS
    enable_merging: bool = True
    boundary_mode: BoundaryMode = BoundaryMode.WRAP
    physics_mode: PhysicsMode = PhysicsMode.N_BODY
    max_speed: float = MAX_SPEED
    max_time_step: float = MAX_TIME_STEP

    star_trail_length: int = STAR_TRAIL_LENGTH
    star_trail_fade_time: float = STAR_TRAIL_FADE_TIME
    trail_speed_threshold: float = TRAIL_SPEED_THRESHOLD
    creation_ripple_duration: float = CREATION_RIPPLE_DURATION
    creation_ripple_max_radius: float = CREATION_RIPPLE_MAX_RADIUS

    @property
    def flick_window(self) -> float:
        """Flick window in seconds."""
        return self.flick_window_ms / 1000.0

    @property
    def wraps(self) -> bool:
        return self.boundary_mode is BoundaryMode.WRAP

    @property
    def effective_damping(self) -> float:
        if self.physics_mode is PhysicsMode.ORBIT_PLAYGROUND:
            return 0.0
        return self.velocity_damping

    @property
    def speed_limit(self) -> float:
        """Speed ceiling for the integrator, 0 when the clamp is off."""
        if self.physics_mode is PhysicsMode.ORBIT_PLAYGROUND:
            return 0.0
        return self.max_speed

    @property
    def merging_enabled(self) -> bool:
        return self.enable_merging and self.physics_mode is not PhysicsMode.ORBIT_PLAYGROUND

    def validated(self) -> GravityConfig:
        """Return a copy with every out-of-range field repaired.

        Never raises: values are converted to the field's declared type
        (strings included), bad values are replaced by the nearest sane one
        and each repair is logged as a warning.
        """
        changes: Dict[str, Any] = {}
        defaults = GravityConfig()

        for f in fields(self):
            if f.type not in _SCALAR_TYPES:
                continue
            value = getattr(self, f.name)
            coerced = _coerce_scalar(value, f.type)
            if coerced is None:
                coerced = getattr(defaults, f.name)
            elif f.type != "bool" and coerced < 0:
                coerced = _SCALAR_TYPES[f.type](0)
            if coerced is not value:
                changes[f.name] = coerced

        def current(name):
            return changes.get(name, getattr(self, name))

        if current("softening_eps_px") <= 0:
            changes["softening_eps_px"] = defaults.softening_eps_px
        if current("min_mass") <= 0:
            changes["min_mass"] = defaults.min_mass
        if current("max_mass") < current("min_mass"):
            changes["max_mass"] = current("min_mass")
        for name in _FRACTIONS:
            if current(name) > 1:
                changes[name] = 1.0
        if not isinstance(self.boundary_mode, BoundaryMode):
            changes["boundary_mode"] = _coerce_enum(BoundaryMode, self.boundary_mode, defaults.boundary_mode)
        if not isinstance(self.physics_mode, PhysicsMode):
            changes["physics_mode"] = _coerce_enum(PhysicsMode, self.physics_mode, defaults.physics_mode)

        if not changes:
            return self
        for name, value in changes.items():
            logger.warning("config %s=%r out of range, using %r", name, getattr(self, name), value)
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, enum.Enum) else value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GravityConfig:
        """Overlay the known keys of ``data`` on the defaults."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key not in known:
                logger.debug("ignoring unknown config key %r", key)
                continue
            kwargs[key] = value
        if "boundary_mode" in kwargs:
            kwargs["boundary_mode"] = _coerce_enum(BoundaryMode, kwargs["boundary_mode"], BoundaryMode.WRAP)
        if "physics_mode" in kwargs:
            kwargs["physics_mode"] = _coerce_enum(PhysicsMode, kwargs["physics_mode"], PhysicsMode.N_BODY)
        return cls(**kwargs).validated()


def _coerce_enum(enum_cls, value, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("unknown %s %r, using %s", enum_cls.__name__, value, default.value)
        return default


DEFAULT_CONFIG = GravityConfig()
