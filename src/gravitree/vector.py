'''Gravitree: hierarchical Keplerian orbit propagation
Vector3D class definition'''

import numpy as np
from .config import config


class Vector3D:
    """
    Immutable three-component real vector with a cached squared magnitude.

    Components are held in a read-only numpy array, so a Vector3D can be
    passed straight to numpy routines (``np.asarray(v)``). Every arithmetic
    operation returns a new vector; the cached magnitude is therefore
    always consistent with the components.

    Parameters
    ----------
    x, y, z : float, optional
        Components (default 0.0)
    """

    # numpy scalars defer to our reflected operators instead of broadcasting
    __array_ufunc__ = None

    # ========== CONSTRUCTION ==========
    def __init__(self, x=0.0, y=0.0, z=0.0):
        self._xyz = np.array([x, y, z], dtype=float)
        self._xyz.flags.writeable = False
        self._magnitude2 = float(self._xyz @ self._xyz)

    @classmethod
    def from_numpy(cls, array):
        """
        Create a vector from any 3-element array-like.

        Parameters
        ----------
        array : array-like
            Sequence of three numbers

        Returns
        -------
        Vector3D
        """
        array = np.asarray(array, dtype=float)
        if array.shape != (3,):
            raise ValueError(f"Vector3D requires 3 components, got shape {array.shape}")
        return cls(array[0], array[1], array[2])

    @classmethod
    def coerce(cls, value):
        """Return ``value`` unchanged if it is a Vector3D, otherwise convert it."""
        if isinstance(value, Vector3D):
            return value
        return cls.from_numpy(value)

    # ========== PROPERTY ACCESS ==========
    @property
    def x(self) -> float:
        return float(self._xyz[0])

    @property
    def y(self) -> float:
        return float(self._xyz[1])

    @property
    def z(self) -> float:
        return float(self._xyz[2])

    def to_numpy(self) -> np.ndarray:
        """Writable copy of the components as a numpy array."""
        return self._xyz.copy()

    # ========== VECTOR OPERATIONS ==========
    def magnitude2(self) -> float:
        """Squared length (cached)."""
        return self._magnitude2

    def magnitude(self) -> float:
        return float(np.sqrt(self._magnitude2))

    def dot(self, other) -> float:
        other = Vector3D.coerce(other)
        return float(self._xyz @ other._xyz)

    def cross(self, other) -> "Vector3D":
        other = Vector3D.coerce(other)
        return Vector3D.from_numpy(np.cross(self._xyz, other._xyz))

    def normalized(self) -> "Vector3D":
        """Unit vector in the same direction; the zero vector stays zero."""
        mag = self.magnitude()
        inv_mag = 1.0 / mag if mag != 0.0 else 0.0
        return self * inv_mag

    def distance2(self, other) -> float:
        return (self - Vector3D.coerce(other)).magnitude2()

    def distance(self, other) -> float:
        return (self - Vector3D.coerce(other)).magnitude()

    def to_polar_coordinates(self) -> "Vector3D":
        """
        Convert to polar form.

        Returns
        -------
        Vector3D
            (longitude, latitude, radius): longitude is measured in the
            x-y plane from the x-axis, latitude from the x-y plane, radius
            from the origin. The zero vector maps to the zero vector.
        """
        r = self.magnitude()
        phi = np.arctan2(self._xyz[1], self._xyz[0])
        theta = np.arcsin(self._xyz[2] / r) if r > 0.0 else 0.0
        return Vector3D(phi, theta, r)

    def is_valid(self) -> bool:
        """True when all components are finite."""
        return bool(np.all(np.isfinite(self._xyz)))

    # ========== ARITHMETIC ==========
    def __add__(self, other):
        if not isinstance(other, Vector3D):
            return NotImplemented
        return Vector3D.from_numpy(self._xyz + other._xyz)

    def __sub__(self, other):
        if not isinstance(other, Vector3D):
            return NotImplemented
        return Vector3D.from_numpy(self._xyz - other._xyz)

    def __neg__(self):
        return Vector3D.from_numpy(-self._xyz)

    def __mul__(self, scalar):
        if isinstance(scalar, Vector3D):
            return NotImplemented
        return Vector3D.from_numpy(self._xyz * float(scalar))

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        if isinstance(scalar, Vector3D):
            return NotImplemented
        return Vector3D.from_numpy(self._xyz / float(scalar))

    def __matmul__(self, other):
        # v @ u is the dot product, as for numpy arrays
        if not isinstance(other, Vector3D):
            return NotImplemented
        return self.dot(other)

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        return 3

    def __getitem__(self, key):
        return float(self._xyz[key])

    def __iter__(self):
        return iter(self._xyz.tolist())

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self._xyz.copy()
        return self._xyz.astype(dtype)

    def __repr__(self):
        return f"Vector3D({self.x!r}, {self.y!r}, {self.z!r})"

    def __str__(self):
        return f"Vector3D{{{self.x} {self.y} {self.z}}}"

    def __eq__(self, other):
        #Check equality with tolerance
        if not isinstance(other, Vector3D):
            return NotImplemented
        return bool(np.allclose(self._xyz, other._xyz,
                                rtol=config.EQUALITY_RTOL,
                                atol=config.EQUALITY_ATOL))

    # tolerance equality is not transitive, so no hash can agree with it
    __hash__ = None
