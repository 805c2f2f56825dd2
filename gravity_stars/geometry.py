"""Plane helpers shared by the force field, integrator and merger.

When space wraps at its edges every relative vector is measured with the
minimum-image convention: of the direct and wrapped-around displacements,
the shortest one wins.
"""
from __future__ import annotations

import math
from typing import NamedTuple, Optional, Tuple


class Bounds(NamedTuple):
    width: float
    height: float


def _nearest_image(d: float, period: float) -> float:
    if period <= 0:
        return d
    if d > 0.5 * period:
        d -= period * math.ceil((d - 0.5 * period) / period)
    elif d < -0.5 * period:
        d += period * math.ceil((-d - 0.5 * period) / period)
    return d


def displacement(x0: float, y0: float, x1: float, y1: float,
                 bounds: Optional[Bounds] = None) -> Tuple[float, float]:
    """Vector from (x0, y0) to (x1, y1); minimum-image when ``bounds`` is given."""
    dx = x1 - x0
    dy = y1 - y0
    if bounds is not None:
        dx = _nearest_image(dx, bounds.width)
        dy = _nearest_image(dy, bounds.height)
    return dx, dy


def wrap_point(x: float, y: float, bounds: Bounds) -> Tuple[float, float]:
    """Fold a point back into [0, width) x [0, height)."""
    if bounds.width > 0:
        x %= bounds.width
        # -1e-17 % w rounds to w
        if x >= bounds.width:
            x = 0.0
    if bounds.height > 0:
        y %= bounds.height
        if y >= bounds.height:
            y = 0.0
    return x, y


def length(x: float, y: float) -> float:
    return math.sqrt(x * x + y * y)
