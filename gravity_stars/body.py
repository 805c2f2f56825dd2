import enum
import math
from collections import deque
from typing import NamedTuple, Optional, Tuple

from .geometry import Bounds, wrap_point


class StepPhase(enum.Enum):
    SETTLED = "settled"        # velocity is at a full-step boundary
    HALF_STEP = "half_step"    # kicked once and drifted, waiting for kick 2


class StepOrderError(RuntimeError):
    """Raised when a body is kicked out of kick-drift-kick order."""


class TrailPoint(NamedTuple):
    x: float
    y: float
    time: float


class BodySnapshot(NamedTuple):
    """Read-only view of a body handed to renderers."""
    body_id: int
    x: float
    y: float
    vx: float
    vy: float
    mass: float
    radius: float
    age: float
    trail: Tuple[TrailPoint, ...]


class Body:
    def __init__(self, body_id, position, mass, velocity=(0.0, 0.0),
                 radius_power=0.5, radius_scale=1.2, trail_length=15):
        self.body_id = body_id
        self.x, self.y = (float(c) for c in position)
        self.mass = float(mass)
        # Half-step velocity is the only velocity the integrator advances;
        # vx/vy mirror it at full-step boundaries for outside readers.
        self.vx_half, self.vy_half = (float(c) for c in velocity)
        self.vx, self.vy = self.vx_half, self.vy_half
        # Shape is captured at creation so later config swaps don't resize stars
        self.radius_power = radius_power
        self.radius_scale = radius_scale
        self.age = 0.0
        self.trail = deque(maxlen=max(1, int(trail_length)))
        self.phase = StepPhase.SETTLED

    def __repr__(self):
        return (f"<Body id={self.body_id} mass={self.mass:.3g} "
                f"pos=({self.x:.1f}, {self.y:.1f}) v=({self.vx:.1f}, {self.vy:.1f})>")

    def radius(self):
        return self.mass ** self.radius_power * self.radius_scale

    def speed(self):
        return math.sqrt(self.vx**2 + self.vy**2)

    def kinetic_energy(self):
        return 0.5 * self.mass * (self.vx**2 + self.vy**2)

    def momentum(self):
        return self.mass * self.vx, self.mass * self.vy

    def distance_to(self, other):
        dx = other.x - self.x
        dy = other.y - self.y
        return math.sqrt(dx**2 + dy**2)

    # --- kick-drift-kick ---

    def begin_step(self, ax, ay, dt):
        """Kick 1 then drift."""
        if self.phase is not StepPhase.SETTLED:
            raise StepOrderError(f"body {self.body_id} is already mid-step")
        self.vx_half += ax * (dt / 2)
        self.vy_half += ay * (dt / 2)
        self.x += self.vx_half * dt
        self.y += self.vy_half * dt
        self.phase = StepPhase.HALF_STEP

    def complete_step(self, ax, ay, dt, speed_limit=0.0):
        """Kick 2, re-clamp, then publish the settled velocity."""
        if self.phase is not StepPhase.HALF_STEP:
            raise StepOrderError(f"body {self.body_id} has no pending half-step")
        self.vx_half += ax * (dt / 2)
        self.vy_half += ay * (dt / 2)
        self.clamp_speed(speed_limit)
        self.vx, self.vy = self.vx_half, self.vy_half
        self.age += dt
        self.phase = StepPhase.SETTLED

    def damp(self, damping):
        if damping > 0:
            self.vx_half *= (1 - damping)
            self.vy_half *= (1 - damping)

    def clamp_speed(self, limit):
        if limit <= 0:
            return
        speed = math.sqrt(self.vx_half**2 + self.vy_half**2)
        if speed > limit:
            scale = limit / speed
            self.vx_half *= scale
            self.vy_half *= scale

    def wrap_into(self, bounds: Bounds):
        self.x, self.y = wrap_point(self.x, self.y, bounds)

    # --- trail ---

    def record_trail(self, now, config):
        """Keep a short position history while the star moves fast."""
        if self.speed() <= config.trail_speed_threshold:
            self.trail.clear()
            return
        self.trail.append(TrailPoint(self.x, self.y, now))
        cutoff = now - config.star_trail_fade_time
        while self.trail and self.trail[0].time <= cutoff:
            self.trail.popleft()
        limit = max(1, int(config.star_trail_length))
        while len(self.trail) > limit:
            self.trail.popleft()

    def snapshot(self) -> BodySnapshot:
        return BodySnapshot(self.body_id, self.x, self.y, self.vx, self.vy,
                            self.mass, self.radius(), self.age, tuple(self.trail))


def make_body(body_id, x, y, mass, vx, vy, config) -> Optional[Body]:
    """Build a body with the shape and trail settings of ``config``."""
    if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(vx) and math.isfinite(vy)):
        return None
    if not (math.isfinite(mass) and mass > 0):
        return None
    return Body(body_id, (x, y), mass, (vx, vy),
                radius_power=config.radius_power,
                radius_scale=config.radius_scale,
                trail_length=config.star_trail_length)
