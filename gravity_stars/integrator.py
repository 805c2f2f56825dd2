"""Symplectic kick-drift-kick (velocity Verlet) stepping.

One tick, two force evaluations:

1. a(t) from the current positions
2. kick 1 and drift for every body, then damping, speed clamp and wrap
3. a(t + dt) from the new positions of *every* body
4. kick 2, speed clamp again, publish the synced velocity

Pass 2 never starts before pass 1 has finished for all bodies; each body's
``StepPhase`` enforces it.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

from .body import Body
from .config import GravityConfig
from .forces import accelerations_of
from .geometry import Bounds


def clamp_time_step(dt: float, config: GravityConfig) -> float:
    """Bound dt to [0, max_time_step]; a non-finite dt counts as no time."""
    if not math.isfinite(dt) or dt <= 0:
        return 0.0
    if config.max_time_step > 0:
        return min(dt, config.max_time_step)
    return dt


def step(bodies: Sequence[Body], dt: float, config: GravityConfig, bounds: Bounds,
         now: Optional[float] = None) -> None:
    """Advance ``bodies`` in place by ``dt`` seconds.

    ``bounds`` is the playfield size; it is only used when the config wraps.
    Trails are updated when ``now`` (a timestamp) is given.
    """
    if not bodies or dt <= 0:
        return

    image_bounds = bounds if config.wraps else None
    damping = config.effective_damping
    speed_limit = config.speed_limit

    # Pass 1
    for body, (ax, ay) in zip(bodies, accelerations_of(bodies, config, image_bounds)):
        body.begin_step(ax, ay, dt)
        body.damp(damping)
        body.clamp_speed(speed_limit)
        if config.wraps:
            body.wrap_into(bounds)

    # Pass 2
    for body, (ax, ay) in zip(bodies, accelerations_of(bodies, config, image_bounds)):
        body.complete_step(ax, ay, dt, speed_limit)

    if now is not None:
        for body in bodies:
            body.record_trail(now, config)
