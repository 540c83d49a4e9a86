'''Gravitree: hierarchical Keplerian orbit propagation
Position class definition'''

import math
from typing import Sequence
from .vector import Vector3D
from .config import config


class Position:
    """
    Spatial coordinate split into a coarse integer grid cell and a fine offset.

    Interplanetary coordinates (~1e11 m) leave only ~1e-5 m of double
    precision, and sums of such values lose more. Position keeps the bulk of
    each coordinate as an integer count of ``COARSE_METERS`` cells and only
    the remainder as a float, so sums of large offsets stay exact in the
    cell count and sub-meter precise in the remainder.

    Position is immutable: adding or subtracting a Vector3D returns a new,
    re-normalized Position, and subtracting two Positions yields the
    Vector3D between them.

    Parameters
    ----------
    x, y, z : float, optional
        Coordinates in meters (default 0.0)

    Notes
    -----
    The fine offset is kept in [0, COARSE_METERS) on every axis.
    """
    # ========== CLASS CONSTANTS ==========
    COARSE_METERS = 1.0e5

    # ========== CONSTRUCTION ==========
    def __init__(self, x=0.0, y=0.0, z=0.0):
        coords = (float(x), float(y), float(z))
        if not all(math.isfinite(c) for c in coords):
            raise ValueError(f"Position coordinates must be finite, got {coords}")
        coarse = [math.floor(c / self.COARSE_METERS) for c in coords]
        fine = [c - cell * self.COARSE_METERS for c, cell in zip(coords, coarse)]
        self._set_parts(coarse, fine)

    @classmethod
    def from_vector(cls, vector) -> "Position":
        """Create a position from a Vector3D or 3-element array-like."""
        vector = Vector3D.coerce(vector)
        return cls(vector.x, vector.y, vector.z)

    @classmethod
    def _from_parts(cls, coarse: Sequence[int], fine: Sequence[float]) -> "Position":
        """Build a position from cell indices and a (possibly unnormalized) offset."""
        position = cls.__new__(cls)
        position._set_parts(coarse, fine)
        return position

    def _set_parts(self, coarse, fine):
        # move whole cells out of the fine offset so it stays in [0, C)
        cells = list(coarse)
        remainders = []
        for axis in range(3):
            carry, remainder = divmod(fine[axis], self.COARSE_METERS)
            if remainder >= self.COARSE_METERS:
                carry += 1.0
                remainder -= self.COARSE_METERS
            cells[axis] = int(cells[axis]) + int(carry)
            remainders.append(remainder)
        self._coarse = tuple(cells)
        self._fine = Vector3D(*remainders)

    # ========== PROPERTY ACCESS ==========
    @property
    def coarse(self) -> tuple:
        """Cell indices along x, y, z."""
        return self._coarse

    @property
    def fine(self) -> Vector3D:
        """Offset within the cell [m]."""
        return self._fine

    @property
    def x(self) -> float:
        return self._coarse[0] * self.COARSE_METERS + self._fine.x

    @property
    def y(self) -> float:
        return self._coarse[1] * self.COARSE_METERS + self._fine.y

    @property
    def z(self) -> float:
        return self._coarse[2] * self.COARSE_METERS + self._fine.z

    def to_vector(self) -> Vector3D:
        """Collapse to a plain Vector3D (loses the split precision)."""
        return Vector3D(self.x, self.y, self.z)

    # ========== GEOMETRY ==========
    def distance2(self, other: "Position") -> float:
        """Squared distance to another position [m^2]."""
        return (self - other).magnitude2()

    def distance(self, other: "Position") -> float:
        """Distance to another position [m]."""
        return (self - other).magnitude()

    def to_polar_coordinates(self) -> Vector3D:
        """(longitude, latitude, radius) about the origin."""
        return self.to_vector().to_polar_coordinates()

    # ========== ARITHMETIC ==========
    def __add__(self, other):
        if not isinstance(other, Vector3D):
            return NotImplemented
        coarse = list(self._coarse)
        fine = []
        for axis in range(3):
            cells, remainder = divmod(other[axis], self.COARSE_METERS)
            coarse[axis] += int(cells)
            fine.append(self._fine[axis] + remainder)
        return Position._from_parts(coarse, fine)

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Position):
            # cell-wise difference keeps the large parts exact
            coarse = Vector3D(*(a - b for a, b in zip(self._coarse, other._coarse)))
            return (self._fine - other._fine) + coarse * self.COARSE_METERS
        if isinstance(other, Vector3D):
            return self + (-other)
        return NotImplemented

    # ========== SPECIAL METHODS ==========
    def __repr__(self):
        return f"Position({self.x!r}, {self.y!r}, {self.z!r})"

    def __str__(self):
        return (f"Position{{cells={list(self._coarse)} "
                f"fine={self._fine.x} {self._fine.y} {self._fine.z}}}")

    def __eq__(self, other):
        #Equal when the separation is within the absolute tolerance
        if not isinstance(other, Position):
            return NotImplemented
        return (self - other).magnitude() <= config.EQUALITY_ATOL

    __hash__ = None
