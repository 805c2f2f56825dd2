"""Softened, optionally clamped pairwise gravity.

Direct O(n^2) summation: fine for tens to low hundreds of stars.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from .body import Body
from .config import GravityConfig
from .geometry import Bounds, displacement


def pair_force(a: Body, b: Body, config: GravityConfig,
               bounds: Optional[Bounds] = None) -> Tuple[float, float]:
    """Force on ``a`` from ``b``.

    Plummer softening keeps r^2 = dx^2 + dy^2 + eps^2 strictly positive, and
    the magnitude is capped at ``max_force_magnitude`` when that is > 0.
    """
    dx, dy = displacement(a.x, a.y, b.x, b.y, bounds)
    eps = config.softening_eps_px
    r2 = dx * dx + dy * dy + eps * eps
    inv_r = 1.0 / math.sqrt(r2)
    inv_r3 = inv_r * inv_r * inv_r

    magnitude = config.gravity_constant * a.mass * b.mass * inv_r3
    fx = dx * magnitude
    fy = dy * magnitude

    cap = config.max_force_magnitude
    if cap > 0:
        force_len = math.sqrt(fx * fx + fy * fy)
        if force_len > cap:
            scale = cap / force_len
            fx *= scale
            fy *= scale
    return fx, fy


def accelerations_of(bodies: Sequence[Body], config: GravityConfig,
                     bounds: Optional[Bounds] = None) -> List[Tuple[float, float]]:
    """Per-body (ax, ay), in the same order as ``bodies``.

    ``bounds`` switches relative vectors to the minimum-image convention and
    should only be passed when space wraps.
    """
    accelerations = []
    for i, body in enumerate(bodies):
        ax = 0.0
        ay = 0.0
        for j, other in enumerate(bodies):
            if i == j:
                continue
            fx, fy = pair_force(body, other, config, bounds)
            ax += fx / body.mass
            ay += fy / body.mass
        accelerations.append((ax, ay))
    return accelerations
