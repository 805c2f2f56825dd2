"""Interactive 2-D gravity: hold to grow a star, flick to launch it."""
from .body import Body, BodySnapshot, StepPhase
from .config import DEFAULT_CONFIG, BoundaryMode, GravityConfig, PhysicsMode
from .simulation import CreationPreview, DebugStats, GravitySimulation, Ripple

__all__ = [
    "Body",
    "BodySnapshot",
    "BoundaryMode",
    "CreationPreview",
    "DebugStats",
    "DEFAULT_CONFIG",
    "GravityConfig",
    "GravitySimulation",
    "PhysicsMode",
    "Ripple",
    "StepPhase",
]
