"""Conserved quantities, for the HUD and for checking the integrator."""
from __future__ import annotations

import math
from typing import NamedTuple, Optional, Sequence, Tuple

from .body import Body
from .config import GravityConfig
from .geometry import Bounds, displacement


class SystemDiagnostics(NamedTuple):
    body_count: int
    total_mass: float
    kinetic_energy: float
    potential_energy: float
    momentum: Tuple[float, float]
    center_of_mass: Optional[Tuple[float, float]]

    @property
    def total_energy(self):
        return self.kinetic_energy + self.potential_energy


def total_mass(bodies: Sequence[Body]) -> float:
    return sum(b.mass for b in bodies)


def kinetic_energy(bodies: Sequence[Body]) -> float:
    return sum(b.kinetic_energy() for b in bodies)


def potential_energy(bodies: Sequence[Body], config: GravityConfig,
                     bounds: Optional[Bounds] = None) -> float:
    """Softened pair potential, -G m_i m_j / sqrt(d^2 + eps^2) per pair.

    Ignores the force clamp, so it is only the exact counterpart of the
    force field while no pair is being clamped.
    """
    eps2 = config.softening_eps_px ** 2
    energy = 0.0
    for i in range(len(bodies)):
        a = bodies[i]
        for j in range(i + 1, len(bodies)):
            b = bodies[j]
            dx, dy = displacement(a.x, a.y, b.x, b.y, bounds)
            energy -= config.gravity_constant * a.mass * b.mass / math.sqrt(dx * dx + dy * dy + eps2)
    return energy


def total_energy(bodies: Sequence[Body], config: GravityConfig,
                 bounds: Optional[Bounds] = None) -> float:
    return kinetic_energy(bodies) + potential_energy(bodies, config, bounds)


def total_momentum(bodies: Sequence[Body]) -> Tuple[float, float]:
    px = sum(b.mass * b.vx for b in bodies)
    py = sum(b.mass * b.vy for b in bodies)
    return px, py


def center_of_mass(bodies: Sequence[Body]) -> Optional[Tuple[float, float]]:
    mass = total_mass(bodies)
    if mass <= 0:
        return None
    cx = sum(b.mass * b.x for b in bodies) / mass
    cy = sum(b.mass * b.y for b in bodies) / mass
    return cx, cy


def snapshot(bodies: Sequence[Body], config: GravityConfig,
             bounds: Optional[Bounds] = None) -> SystemDiagnostics:
    return SystemDiagnostics(
        body_count=len(bodies),
        total_mass=total_mass(bodies),
        kinetic_energy=kinetic_energy(bodies),
        potential_energy=potential_energy(bodies, config, bounds),
        momentum=total_momentum(bodies),
        center_of_mass=center_of_mass(bodies),
    )
