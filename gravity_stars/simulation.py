"""The gravity simulation: owns the stars and drives one tick at a time.

Nothing here sleeps or awaits. A host loop calls :meth:`GravitySimulation.tick`
once per frame and feeds pointer input through the ``*_creation`` methods
between ticks. Callers that tick from several threads must serialize every
call behind one lock.
"""
from __future__ import annotations

import itertools
import logging
import math
import time
from typing import Any, Callable, Iterable, List, Mapping, NamedTuple, Optional, Tuple

from . import diagnostics, integrator
from .body import Body, BodySnapshot, make_body
from .collisions import resolve_merges
from .config import DEFAULT_CONFIG, GravityConfig
from .geometry import Bounds
from .launch import LaunchEstimator, projected_radius

logger = logging.getLogger(__name__)


class Ripple(NamedTuple):
    """Decorative ring left where a star was born."""
    x: float
    y: float
    born: float
    duration: float
    max_radius: float

    def progress(self, now):
        if self.duration <= 0:
            return 1.0
        return min(1.0, max(0.0, (now - self.born) / self.duration))


class CreationPreview(NamedTuple):
    x: float
    y: float
    radius: float
    mass: float
    hold_drag_speed: float


class DebugStats(NamedTuple):
    hold_drag_speed: float
    release_flick_speed: float
    compressed_speed: float
    final_launch_speed: float
    estimated_v_circ: float
    estimated_v_esc: float


def _finite(*values):
    return all(math.isfinite(v) for v in values)


class GravitySimulation:
    def __init__(self, width: float, height: float, config: GravityConfig = DEFAULT_CONFIG,
                 clock: Callable[[], float] = time.perf_counter):
        self.width = width
        self.height = height
        self.config = config.validated()
        self.clock = clock
        self._bodies: List[Body] = []
        self._ids = itertools.count(1)
        self._launcher = LaunchEstimator()
        self._ripples: List[Ripple] = []
        self._debug_stats: Optional[DebugStats] = None
        self.sim_time = 0.0

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.width, self.height)

    @property
    def _image_bounds(self) -> Optional[Bounds]:
        return self.bounds if self.config.wraps else None

    # --- configuration ---

    def update_config(self, config: GravityConfig) -> None:
        """Swap the whole config; existing stars keep their mass and velocity."""
        config = config.validated()
        if config != self.config:
            logger.debug("config updated")
        self.config = config

    def resize(self, width: float, height: float) -> None:
        if _finite(width, height) and width > 0 and height > 0:
            self.width = width
            self.height = height

    # --- star creation ---

    @property
    def is_creating(self) -> bool:
        return self._launcher.active

    def begin_creation(self, x: float, y: float) -> bool:
        """Start growing a star under the pointer. False when at max_stars."""
        if not _finite(x, y):
            return False
        started = self._launcher.begin(x, y, self.clock(), len(self._bodies), self.config)
        if started:
            self._debug_stats = None
        return started

    def update_creation(self, x: float, y: float) -> None:
        if not _finite(x, y):
            return
        self._launcher.sample(x, y, self.clock(), self.config)

    def cancel_creation(self) -> None:
        self._launcher.cancel()
        self._debug_stats = None

    def finish_creation(self) -> Optional[Body]:
        """Release the held star and launch it. None if no gesture is active."""
        now = self.clock()
        result = self._launcher.end(now, self.config, self._bodies, self._image_bounds)
        if result is None:
            return None

        estimate = result.estimate
        body = self.add_body(result.x, result.y, result.mass, estimate.vx, estimate.vy)
        if body is None:
            return None

        self._ripples.append(Ripple(result.x, result.y, now,
                                    self.config.creation_ripple_duration,
                                    self.config.creation_ripple_max_radius))
        self._debug_stats = DebugStats(
            hold_drag_speed=result.hold_drag_speed,
            release_flick_speed=estimate.raw_speed,
            compressed_speed=estimate.compressed_speed,
            final_launch_speed=estimate.final_speed,
            estimated_v_circ=estimate.v_circ,
            estimated_v_esc=estimate.v_esc,
        )
        logger.debug("created star %d: mass=%.3g held=%.2fs v=%.1f px/s",
                     body.body_id, body.mass, result.hold_duration, estimate.final_speed)
        return body

    def add_body(self, x: float, y: float, mass: float, vx: float = 0.0, vy: float = 0.0) -> Optional[Body]:
        """Place a star directly. None when full or when the input is not usable."""
        if len(self._bodies) >= self.config.max_stars:
            logger.debug("star refused: %d/%d stars", len(self._bodies), self.config.max_stars)
            return None
        body = make_body(next(self._ids), x, y, mass, vx, vy, self.config)
        if body is None:
            logger.debug("star refused: bad input x=%r y=%r mass=%r v=(%r, %r)", x, y, mass, vx, vy)
            return None
        if self.config.wraps:
            body.wrap_into(self.bounds)
        self._bodies.append(body)
        return body

    def creation_preview(self) -> Optional[CreationPreview]:
        state = self._launcher.state
        if state is None:
            return None
        mass = self._launcher.preview_mass(self.clock(), self.config)
        return CreationPreview(state.x, state.y, projected_radius(mass, self.config), mass,
                               state.hold_drag_speed)

    # --- stepping ---

    def tick(self, dt: float) -> None:
        """Advance one frame: integrate, merge, then drop faded ripples."""
        dt = integrator.clamp_time_step(dt, self.config)
        now = self.clock()
        if dt > 0:
            self.sim_time += dt
            integrator.step(self._bodies, dt, self.config, self.bounds, now=now)
            if self.config.merging_enabled:
                outcome = resolve_merges(self._bodies, self.config, self.bounds, self._ids)
                self._bodies = outcome.bodies
        self._prune_ripples(now)

    def _prune_ripples(self, now):
        self._ripples = [r for r in self._ripples if now - r.born < r.duration]

    # --- read access ---

    @property
    def bodies(self) -> Tuple[BodySnapshot, ...]:
        return tuple(body.snapshot() for body in self._bodies)

    @property
    def body_count(self) -> int:
        return len(self._bodies)

    @property
    def ripples(self) -> Tuple[Ripple, ...]:
        return tuple(self._ripples)

    def debug_stats(self) -> Optional[DebugStats]:
        return self._debug_stats

    def diagnostics(self) -> diagnostics.SystemDiagnostics:
        return diagnostics.snapshot(self._bodies, self.config, self._image_bounds)

    # --- bulk changes ---

    def clear_all_bodies(self) -> None:
        self._bodies = []
        self._ripples = []
        self._debug_stats = None

    def load_universe(self, universe: Mapping[str, Any]) -> int:
        """Replace all stars with stationary ones from a plain mapping.

        ``universe`` looks like ``{"width": w, "height": h, "stars": [{"x", "y",
        "mass"}, ...]}``; positions are rescaled to the current playfield.
        Returns the number of stars placed.
        """
        self.clear_all_bodies()
        self._launcher.cancel()
        try:
            sx = self.width / float(universe.get("width", self.width))
            sy = self.height / float(universe.get("height", self.height))
        except (TypeError, ValueError, ZeroDivisionError):
            logger.warning("universe has unusable dimensions, loading unscaled")
            sx = sy = 1.0
        if not _finite(sx, sy):
            sx = sy = 1.0

        stars = universe.get("stars") or ()
        if isinstance(stars, (str, bytes, Mapping)) or not isinstance(stars, Iterable):
            logger.warning("universe stars is not a list: %r", stars)
            stars = ()

        placed = 0
        for entry in stars:
            try:
                x = float(entry["x"]) * sx
                y = float(entry["y"]) * sy
                mass = float(entry["mass"])
            except (KeyError, TypeError, ValueError):
                logger.warning("skipping malformed universe star %r", entry)
                continue
            if len(self._bodies) >= self.config.max_stars:
                logger.warning("universe truncated at %d stars", self.config.max_stars)
                break
            if self.add_body(x, y, mass) is None:
                logger.warning("skipping universe star %r", entry)
                continue
            placed += 1
        return placed
