'''Gravitree: hierarchical Keplerian orbit propagation
Body and Rotation definitions'''

import math
from dataclasses import dataclass, field, replace
from .vector import Vector3D

"""
Core dataclasses for bodies placed in a SolarSystem.
Bodies are plain immutable values; the tree that relates them lives in
SolarSystem, keyed by Body.id.
"""


@dataclass(frozen=True)
class Rotation:
    """
    Immutable axis-angle rotation (or angular velocity).

    Attributes
    ----------
    axis : Vector3D
        Rotation axis (default x-axis)
    angle : float
        Rotation angle [rad], or rate [rad/s] when used as angular velocity
    """
    axis: Vector3D = field(default_factory=lambda: Vector3D(1.0, 0.0, 0.0))
    angle: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "axis", Vector3D.coerce(self.axis))
        if not self.axis.is_valid() or not math.isfinite(self.angle):
            raise ValueError(f"Rotation must be finite, got axis={self.axis}, "
                             f"angle={self.angle}")

    def __str__(self):
        return f"Rotation{{{self.axis},{self.angle}}}"

    def __hash__(self):
        # the axis compares with a tolerance, the angle exactly
        return hash(self.angle)


@dataclass(frozen=True)
class Body:
    """
    Immutable physical body.

    Attributes
    ----------
    id : str
        Unique key within a SolarSystem
    mass : float
        Mass [kg]
    angular_velocity : Rotation, optional
        Spin of the body (default no spin)
    """
    id: str
    mass: float
    angular_velocity: Rotation = field(default_factory=Rotation)

    def __post_init__(self):
        #Validate parameters
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"Body id must be a non-empty string, got {self.id!r}")
        if not math.isfinite(self.mass) or self.mass <= 0:
            raise ValueError(f"Mass must be positive, got {self.mass}")

    def __hash__(self):
        return hash((self.id, self.mass))

    def with_angular_velocity(self, angular_velocity: Rotation) -> "Body":
        """Return a copy of this body with a new angular velocity."""
        return replace(self, angular_velocity=angular_velocity)
