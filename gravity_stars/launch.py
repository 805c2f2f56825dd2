"""Turning a press-hold-drag-release gesture into a new star.

How long the pointer is held sets the mass; how fast it moves during the
last few milliseconds (the flick window) sets the launch velocity. The raw
flick speed goes through a soft compressor, is scaled down for heavy stars,
and is finally nudged toward a circular orbit around any nearby mass
(angular guidance, a launch-time assist only).
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .body import Body
from .config import GravityConfig
from .geometry import Bounds, displacement, length

logger = logging.getLogger(__name__)

Vector = Tuple[float, float]


class GestureSample(NamedTuple):
    x: float
    y: float
    t: float


@dataclass
class CreationState:
    start_time: float
    x: float
    y: float
    samples: List[GestureSample] = field(default_factory=list)
    hold_drag_speed: float = 0.0


class OrbitalCenter(NamedTuple):
    x: float
    y: float
    total_mass: float


class GuidanceResult(NamedTuple):
    velocity: Vector
    v_circ: float
    v_esc: float


class LaunchEstimate(NamedTuple):
    vx: float
    vy: float
    raw_speed: float
    compressed_speed: float
    final_speed: float
    v_circ: float = 0.0
    v_esc: float = 0.0


class LaunchResult(NamedTuple):
    x: float
    y: float
    mass: float
    hold_duration: float
    hold_drag_speed: float
    estimate: LaunchEstimate


# --- mass ---

def resolve_mass(hold_duration: float, config: GravityConfig) -> float:
    """Eased growth: mass rises quickly, then levels off at max_mass."""
    if config.hold_to_max_seconds <= 0:
        t = 1.0
    elif not math.isfinite(hold_duration) or hold_duration <= 0:
        t = 0.0
    else:
        t = min(1.0, hold_duration / config.hold_to_max_seconds)
    return config.min_mass + (config.max_mass - config.min_mass) * math.sqrt(t)


def projected_radius(mass: float, config: GravityConfig) -> float:
    return mass ** config.radius_power * config.radius_scale


# --- flick ---

def compress_speed(raw_speed: float, s0: float, vmax: float) -> float:
    """Monotone soft cap: ~linear for small speeds, saturating below vmax."""
    if raw_speed <= 0:
        return 0.0
    if s0 <= 0:
        return vmax
    return vmax * (1 - math.exp(-raw_speed / s0))


def within_window(samples: Sequence[GestureSample], now: float, window: float) -> List[GestureSample]:
    cutoff = now - window
    return [s for s in samples if s.t > cutoff]


def average_velocity(samples: Sequence[GestureSample]) -> Vector:
    """Mean of the per-segment velocities across the samples.

    Segments with no elapsed time contribute nothing but still count
    toward the divisor.
    """
    if len(samples) < 2:
        return 0.0, 0.0
    sum_vx = 0.0
    sum_vy = 0.0
    elapsed = 0.0
    for prev, cur in zip(samples, samples[1:]):
        dt = cur.t - prev.t
        if dt > 0:
            sum_vx += (cur.x - prev.x) / dt
            sum_vy += (cur.y - prev.y) / dt
            elapsed += dt
    if elapsed <= 0:
        return 0.0, 0.0
    segments = len(samples) - 1
    return sum_vx / segments, sum_vy / segments


# --- angular guidance ---

def find_orbital_center(position: Vector, bodies: Sequence[Body], search_radius: float,
                        bounds: Optional[Bounds] = None) -> Optional[OrbitalCenter]:
    """Mass-weighted centre of every star within ``search_radius``.

    None when no star is close enough. Offsets are measured from
    ``position`` so that wrapped space aggregates the nearest images.
    """
    px, py = position
    nearby = []
    for body in bodies:
        dx, dy = displacement(px, py, body.x, body.y, bounds)
        distance = length(dx, dy)
        if distance < search_radius:
            nearby.append((distance, dx, dy, body.mass))
    if not nearby:
        return None

    total_mass = 0.0
    wx = 0.0
    wy = 0.0
    for _, dx, dy, mass in nearby:
        total_mass += mass
        wx += dx * mass
        wy += dy * mass
    if total_mass <= 0:
        return None
    return OrbitalCenter(px + wx / total_mass, py + wy / total_mass, total_mass)


def decompose_velocity(position: Vector, center: Vector, velocity: Vector) -> Tuple[Vector, Vector]:
    """Split ``velocity`` into (radial, tangential) about ``center``."""
    rx = position[0] - center[0]
    ry = position[1] - center[1]
    r_len = length(rx, ry)
    if r_len == 0:
        return (0.0, 0.0), velocity
    ux, uy = rx / r_len, ry / r_len
    radial_mag = velocity[0] * ux + velocity[1] * uy
    radial = (ux * radial_mag, uy * radial_mag)
    tangential = (velocity[0] - radial[0], velocity[1] - radial[1])
    return radial, tangential


def apply_angular_guidance(position: Vector, velocity: Vector, bodies: Sequence[Body],
                           config: GravityConfig,
                           bounds: Optional[Bounds] = None) -> Optional[GuidanceResult]:
    """Bias a launch toward a circular orbit around nearby mass.

    The radial part is damped by (1 - radial_clamp_factor) and the
    tangential speed is blended toward v_circ = sqrt(G M / r). Returns None
    when there is nothing to orbit or the launch point sits on the centre.
    """
    strength = config.angular_guidance_strength
    if strength <= 0 or not bodies:
        return None
    center = find_orbital_center(position, bodies, config.orbital_center_search_radius, bounds)
    if center is None:
        return None

    rx = position[0] - center.x
    ry = position[1] - center.y
    r_len = length(rx, ry)
    if r_len <= 0:
        return None

    radial, tangential = decompose_velocity(position, (center.x, center.y), velocity)
    keep = 1 - config.radial_clamp_factor
    radial = (radial[0] * keep, radial[1] * keep)

    v_circ = math.sqrt(config.gravity_constant * center.total_mass / r_len)
    v_esc = math.sqrt(2) * v_circ

    tangential_speed = length(*tangential)
    target_speed = tangential_speed + (v_circ - tangential_speed) * strength
    if tangential_speed > 0:
        tx, ty = tangential[0] / tangential_speed, tangential[1] / tangential_speed
    else:
        tx, ty = -ry / r_len, rx / r_len

    final = (radial[0] + tx * target_speed, radial[1] + ty * target_speed)
    return GuidanceResult(final, v_circ, v_esc)


def resolve_launch_velocity(samples: Sequence[GestureSample], mass: float, config: GravityConfig,
                            bodies: Sequence[Body], creation_pos: Vector,
                            bounds: Optional[Bounds] = None) -> LaunchEstimate:
    """Launch velocity for a star of ``mass`` released at ``creation_pos``.

    ``samples`` should already be limited to the flick window.
    """
    raw_vx, raw_vy = average_velocity(samples)
    raw_speed = length(raw_vx, raw_vy)

    compressed = compress_speed(raw_speed, config.flick_s0, config.flick_vmax)
    if raw_speed > 0:
        scale = compressed * config.launch_strength / raw_speed
        vx, vy = raw_vx * scale, raw_vy * scale
    else:
        vx, vy = 0.0, 0.0

    max_mass = config.max_mass if config.max_mass > 0 else 1.0
    resistance = max(0.0, 1 - (mass / max_mass) * config.mass_resistance_factor)
    vx *= resistance
    vy *= resistance

    v_circ = 0.0
    v_esc = 0.0
    guided = apply_angular_guidance(creation_pos, (vx, vy), bodies, config, bounds)
    if guided is not None:
        (vx, vy), v_circ, v_esc = guided

    return LaunchEstimate(vx, vy, raw_speed, compressed, length(vx, vy), v_circ, v_esc)


class LaunchEstimator:
    """Tracks the single in-progress creation gesture."""

    def __init__(self):
        self.state: Optional[CreationState] = None

    @property
    def active(self):
        return self.state is not None

    def begin(self, x, y, t, body_count, config: GravityConfig) -> bool:
        if body_count >= config.max_stars:
            logger.debug("creation refused: %d/%d stars", body_count, config.max_stars)
            return False
        self.state = CreationState(start_time=t, x=x, y=y, samples=[GestureSample(x, y, t)])
        return True

    def sample(self, x, y, t, config: GravityConfig) -> None:
        state = self.state
        if state is None:
            return
        state.x = x
        state.y = y
        state.samples.append(GestureSample(x, y, t))
        state.samples = within_window(state.samples, t, config.flick_window)
        if len(state.samples) >= 2:
            state.hold_drag_speed = length(*average_velocity(state.samples))

    def cancel(self) -> None:
        self.state = None

    def preview_mass(self, t, config: GravityConfig) -> Optional[float]:
        if self.state is None:
            return None
        return resolve_mass(t - self.state.start_time, config)

    def end(self, t, config: GravityConfig, bodies: Sequence[Body],
            bounds: Optional[Bounds] = None) -> Optional[LaunchResult]:
        """Resolve the gesture released at ``t`` and clear it."""
        state = self.state
        if state is None:
            return None
        self.state = None

        hold = t - state.start_time
        mass = resolve_mass(hold, config)
        flick = within_window(state.samples, t, config.flick_window)
        estimate = resolve_launch_velocity(flick, mass, config, bodies, (state.x, state.y), bounds)
        return LaunchResult(state.x, state.y, mass, hold, state.hold_drag_speed, estimate)
