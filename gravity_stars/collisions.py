"""Inelastic merging of overlapping stars.

Two stars merge once the smaller one's centre lies inside the larger one's
disk: ``distance < r_larger - r_smaller``. Mass and momentum are conserved,
kinetic energy is not.

Scan order is fixed: i ascending, then j ascending from i + 1. The first
overlapping partner wins and a star already consumed this tick takes no
further part in the scan.
"""
from __future__ import annotations

import logging
import math
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from .body import Body, StepPhase
from .config import GravityConfig
from .geometry import Bounds, displacement, wrap_point

logger = logging.getLogger(__name__)


class MergeEvent(NamedTuple):
    parent_ids: Tuple[int, int]
    child: Body


class MergeOutcome(NamedTuple):
    bodies: List[Body]
    merges: List[MergeEvent]


def should_merge(a: Body, b: Body, bounds: Optional[Bounds] = None) -> bool:
    dx, dy = displacement(a.x, a.y, b.x, b.y, bounds)
    distance = math.sqrt(dx * dx + dy * dy)
    ra, rb = a.radius(), b.radius()
    return distance < max(ra, rb) - min(ra, rb)


def merge_pair(a: Body, b: Body, body_id: int, bounds: Optional[Bounds] = None) -> Body:
    """Combine two stars into a new one.

    Position is the mass-weighted centroid and velocity the mass-weighted
    mean. The heavier parent donates its radius shape; on a tie ``a`` does.
    With ``bounds`` the centroid is taken along the minimum-image vector and
    folded back into the playfield.
    """
    total_mass = a.mass + b.mass
    weight_b = b.mass / total_mass

    dx, dy = displacement(a.x, a.y, b.x, b.y, bounds)
    x = a.x + dx * weight_b
    y = a.y + dy * weight_b
    if bounds is not None:
        x, y = wrap_point(x, y, bounds)

    vx_half = (a.vx_half * a.mass + b.vx_half * b.mass) / total_mass
    vy_half = (a.vy_half * a.mass + b.vy_half * b.mass) / total_mass

    shape = a if a.mass >= b.mass else b
    merged = Body(body_id, (x, y), total_mass, (vx_half, vy_half),
                  radius_power=shape.radius_power,
                  radius_scale=shape.radius_scale,
                  trail_length=shape.trail.maxlen)
    # Parents settle before merging, so the synced velocity is the same blend
    if a.phase is StepPhase.SETTLED and b.phase is StepPhase.SETTLED:
        merged.vx = (a.vx * a.mass + b.vx * b.mass) / total_mass
        merged.vy = (a.vy * a.mass + b.vy * b.mass) / total_mass
    return merged


def find_merge_pairs(bodies: Sequence[Body], bounds: Optional[Bounds] = None) -> Iterator[Tuple[int, int]]:
    consumed = set()
    for i in range(len(bodies)):
        if i in consumed:
            continue
        for j in range(i + 1, len(bodies)):
            if j in consumed:
                continue
            if should_merge(bodies[i], bodies[j], bounds):
                consumed.update((i, j))
                yield i, j
                break


def resolve_merges(bodies: Sequence[Body], config: GravityConfig, bounds: Bounds,
                   next_id: Iterator[int]) -> MergeOutcome:
    """Merge every overlapping pair found in one scan.

    Returns the survivors in their original order followed by the merged
    stars in scan order. ``next_id`` supplies ids for the new stars.
    """
    image_bounds = bounds if config.wraps else None
    consumed = set()
    merges = []
    for i, j in find_merge_pairs(bodies, image_bounds):
        a, b = bodies[i], bodies[j]
        child = merge_pair(a, b, next(next_id), image_bounds)
        consumed.update((i, j))
        merges.append(MergeEvent((a.body_id, b.body_id), child))
        logger.debug("merged %d + %d -> %d (mass %.3g)", a.body_id, b.body_id,
                     child.body_id, child.mass)

    if not merges:
        return MergeOutcome(list(bodies), merges)
    survivors = [body for k, body in enumerate(bodies) if k not in consumed]
    return MergeOutcome(survivors + [event.child for event in merges], merges)
