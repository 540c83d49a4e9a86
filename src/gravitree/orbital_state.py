'''Gravitree: hierarchical Keplerian orbit propagation
OrbitalState class definition'''

import copy
import math
import numpy as np
from .config import config
from .vector import Vector3D
from .gravity import Gravity
from .kepler_orbit import KeplerOrbit
from .exceptions import ConvergenceError, DegenerateOrbitError, UndefinedPeriodError
from .utils import validation_error, wrap_angle

# Above this eccentricity Newton's method is seeded at pi instead of M
_HIGH_ECCENTRICITY = 0.8


def _solve_wrapped(mean_anomaly, eccentricity, max_iterations, tolerance):
    """Newton-Raphson on Kepler's equation for a mean anomaly in [0, 2pi)."""
    e = eccentricity
    E = mean_anomaly if e < _HIGH_ECCENTRICITY else np.pi
    for _ in range(max_iterations):
        residual = E - e * np.sin(E) - mean_anomaly
        if abs(residual) < tolerance:
            return float(E)
        E -= residual / (1.0 - e * np.cos(E))

    residual = E - e * np.sin(E) - mean_anomaly
    if not abs(residual) < tolerance:
        validation_error(
            f"Kepler's equation did not converge for M={mean_anomaly}, e={e} "
            f"after {max_iterations} iterations (residual {residual:.3e})",
            ConvergenceError
        )
    return float(E)


def solve_kepler(mean_anomaly, eccentricity, max_iterations=None, tolerance=None):
    """
    Solve Kepler's equation M = E - e sin(E) for the eccentric anomaly.

    Parameters
    ----------
    mean_anomaly : float
        Mean anomaly M [rad], any real value
    eccentricity : float
        Eccentricity, 0 <= e < 1
    max_iterations : int, optional
        Newton-Raphson iteration cap (default config.KEPLER_MAX_ITERATIONS)
    tolerance : float, optional
        Residual tolerance (default config.KEPLER_TOLERANCE)

    Returns
    -------
    float
        Eccentric anomaly E [rad], in the same revolution as M

    Raises
    ------
    ValueError
        If the eccentricity is outside [0, 1)
    ConvergenceError
        If the residual is still above tolerance at the iteration cap
        (a warning instead when config.STRICT_VALIDATION is False)

    Notes
    -----
    The iteration runs on M wrapped to [0, 2pi) and the removed whole
    revolutions are added back to E. The seed is E0 = M, or E0 = pi for
    e >= 0.8, from which Newton's method converges monotonically for any
    e < 1.
    """
    if max_iterations is None:
        max_iterations = config.KEPLER_MAX_ITERATIONS
    if tolerance is None:
        tolerance = config.KEPLER_TOLERANCE
    if not 0.0 <= eccentricity < 1.0:
        raise ValueError(f"Kepler's equation requires 0 <= e < 1, got {eccentricity}")
    wrapped = wrap_angle(mean_anomaly)
    E = _solve_wrapped(wrapped, eccentricity, max_iterations, tolerance)
    return E + (mean_anomaly - wrapped)


class OrbitalState:
    """
    Position of a body along a fixed KeplerOrbit.

    Holds the true, eccentric and mean anomalies and the time since
    periapsis passage, kept mutually consistent through Kepler's equation.
    The only mutation is ``set_time``; the orbit itself never changes.

    For open (hyperbolic) orbits the eccentric anomaly slot holds the
    hyperbolic anomaly F and the mean anomaly is e sinh(F) - F. Such states
    can be built and queried but not propagated with ``set_time``.

    Parameters
    ----------
    orbit : KeplerOrbit
        The orbit being followed
    true_anomaly : float
        Current true anomaly [rad]

    Examples
    --------
    >>> orbit = KeplerOrbit(1.495975e11, 0.016728, 0, 0, 0, 1.9885e30)
    >>> state = OrbitalState(orbit, 0.0)
    >>> state.set_time(orbit.period() / 2)
    >>> state.distance()  # apoapsis
    """

    # ========== CONSTRUCTION ==========
    def __init__(self, orbit: KeplerOrbit, true_anomaly: float):
        if not isinstance(orbit, KeplerOrbit):
            raise TypeError(f"orbit must be a KeplerOrbit, got {type(orbit)}")
        nu = float(true_anomaly)
        if not math.isfinite(nu):
            raise ValueError(f"True anomaly must be finite, got {true_anomaly}")

        self._orbit = orbit
        self._true_anomaly = nu
        e = orbit.eccentricity
        if orbit.is_closed():
            E = np.arctan2(np.sqrt(1.0 - e * e) * np.sin(nu), e + np.cos(nu))
            M = E - e * np.sin(E)
        else:
            # raises for anomalies beyond the asymptotes
            orbit.radius_at(nu)
            E = np.arcsinh(np.sqrt(e * e - 1.0) * np.sin(nu) / (1.0 + e * np.cos(nu)))
            M = e * np.sinh(E) - E
        self._eccentric_anomaly = float(E)
        self._mean_anomaly = float(M)
        # time since periapsis, M * T / 2pi for closed orbits
        self._time = self._mean_anomaly / orbit.mean_motion()

    @classmethod
    def from_vectors(cls, position, velocity, parent_mass: float) -> "OrbitalState":
        """
        Derive the orbit and current state from Cartesian state vectors.

        Parameters
        ----------
        position : Vector3D or array-like
            Position relative to the parent body [m]
        velocity : Vector3D or array-like
            Velocity relative to the parent body [m/s]
        parent_mass : float
            Mass of the parent body [kg]

        Returns
        -------
        OrbitalState

        Raises
        ------
        ValueError
            If the inputs are not finite or the parent mass is not positive
        DegenerateOrbitError
            If position or velocity is zero, the motion is rectilinear
            (angular momentum ~ 0), or the orbit is parabolic (energy ~ 0)

        Notes
        -----
        The ascending node direction is taken from the angular momentum
        vector as atan2(h_x, -h_y). Equatorial orbits (prograde or
        retrograde) have no node; their longitude of the ascending node is
        set to 0 and the argument of periapsis is measured from the x-axis.
        """
        r_vec = Vector3D.coerce(position)
        v_vec = Vector3D.coerce(velocity)
        if not (r_vec.is_valid() and v_vec.is_valid()):
            raise ValueError(f"State vectors contain NaN or Inf: r={r_vec}, v={v_vec}")
        if not (math.isfinite(parent_mass) and parent_mass > 0):
            raise ValueError(f"Parent mass must be positive, got {parent_mass}")

        mu = Gravity.mu(parent_mass)
        r = r_vec.magnitude()
        v2 = v_vec.magnitude2()
        if r == 0.0:
            raise DegenerateOrbitError("Position vector is zero; no orbit is defined")
        if v2 == 0.0:
            raise DegenerateOrbitError("Velocity vector is zero; the motion is a radial fall")

        # calculate angular momentum vector h = r x v
        h_vec = r_vec.cross(v_vec)
        h = h_vec.magnitude()
        if h <= config.DEGENERATE_THRESHOLD * r * np.sqrt(v2):
            raise DegenerateOrbitError(
                f"Angular momentum is ~0 (rectilinear orbit): r={r_vec}, v={v_vec}")

        # find semimajor axis from energy equation
        energy = 0.5 * v2 - mu / r
        if abs(energy) <= config.DEGENERATE_THRESHOLD * (0.5 * v2 + mu / r):
            raise DegenerateOrbitError(
                f"Specific energy is ~0 (parabolic orbit): r={r_vec}, v={v_vec}")
        a = -mu / (2.0 * energy)
        p = h * h / mu

        # eccentricity vector e = (v x h)/mu - r/|r|
        e_vec = v_vec.cross(h_vec) / mu - r_vec / r
        e = e_vec.magnitude()

        hx, hy, hz = h_vec
        i = np.arctan2(np.hypot(hx, hy), hz)
        # find longitude of ascending node, measured from x for equatorial orbits
        if np.hypot(hx, hy) <= config.DEGENERATE_THRESHOLD * h:
            omega = 0.0
        else:
            omega = np.arctan2(hx, -hy)
        # line of nodes and the in-plane vector 90 degrees ahead of it
        n_hat = Vector3D(np.cos(omega), np.sin(omega), 0.0)
        b_hat = h_vec.normalized().cross(n_hat)
        # argument of latitude, split into true anomaly and argument of periapsis
        u = np.arctan2(r_vec.dot(b_hat), r_vec.dot(n_hat))
        nu = np.arctan2(np.sqrt(p / mu) * r_vec.dot(v_vec), p - r)
        w = wrap_angle(u - nu)

        orbit = KeplerOrbit(a, e, i, wrap_angle(omega), w, parent_mass)
        return cls(orbit, nu)

    # ========== PROPAGATION ==========
    def set_time(self, time: float):
        """
        Move the body to an absolute time since periapsis passage.

        Parameters
        ----------
        time : float
            Time [s]

        Raises
        ------
        UndefinedPeriodError
            If the orbit is open
        ConvergenceError
            If Kepler's equation fails to converge
        """
        if not self._orbit.is_closed():
            raise UndefinedPeriodError(
                f"Time propagation requires a closed orbit (e={self._orbit.eccentricity})")
        time = float(time)
        if not math.isfinite(time):
            raise ValueError(f"Time must be finite, got {time}")

        e = self._orbit.eccentricity
        M = time * 2.0 * np.pi / self._orbit.period()
        wrapped = wrap_angle(M)
        E = _solve_wrapped(wrapped, e, config.KEPLER_MAX_ITERATIONS,
                           config.KEPLER_TOLERANCE)
        half = E * 0.5

        self._time = time
        self._mean_anomaly = float(M)
        self._eccentric_anomaly = E + (M - wrapped)
        self._true_anomaly = float(2.0 * np.arctan2(np.sqrt(1.0 + e) * np.sin(half),
                                                    np.sqrt(1.0 - e) * np.cos(half)))

    def advance(self, dt: float):
        """Shortcut for set_time(time + dt)"""
        self.set_time(self._time + dt)

    # ========== PROPERTY ACCESS ==========
    @property
    def orbit(self) -> KeplerOrbit:
        return self._orbit

    @property
    def true_anomaly(self) -> float:
        """True anomaly [rad]"""
        return self._true_anomaly

    @property
    def eccentric_anomaly(self) -> float:
        """Eccentric anomaly [rad] (hyperbolic anomaly for open orbits)"""
        return self._eccentric_anomaly

    @property
    def mean_anomaly(self) -> float:
        """Mean anomaly [rad]"""
        return self._mean_anomaly

    @property
    def time(self) -> float:
        """Time since periapsis passage [s]"""
        return self._time

    # ========== STATE VECTORS ==========
    def distance(self) -> float:
        """Distance from the parent body [m]."""
        a = self._orbit.semimajor_axis
        e = self._orbit.eccentricity
        if self._orbit.is_closed():
            return float(a * (1.0 - e * np.cos(self._eccentric_anomaly)))
        return float(a * (1.0 - e * np.cosh(self._eccentric_anomaly)))

    def _angles(self):
        """Trig terms of the perifocal-to-inertial rotation."""
        orbit = self._orbit
        theta = orbit.argument_of_periapsis + self._true_anomaly
        return (np.cos(orbit.longitude_of_ascending_node),
                np.sin(orbit.longitude_of_ascending_node),
                np.cos(orbit.inclination), np.sin(orbit.inclination),
                np.cos(theta), np.sin(theta))

    def position(self) -> Vector3D:
        """Position relative to the parent body in its inertial frame [m]."""
        cos_W, sin_W, cos_i, sin_i, cos_wv, sin_wv = self._angles()
        r = self.distance()
        return Vector3D(
            r * (cos_W * cos_wv - sin_W * sin_wv * cos_i),
            r * (sin_W * cos_wv + cos_W * sin_wv * cos_i),
            r * (sin_i * sin_wv))

    def velocity(self) -> Vector3D:
        """Velocity relative to the parent body in its inertial frame [m/s]."""
        cos_W, sin_W, cos_i, sin_i, cos_wv, sin_wv = self._angles()
        e = self._orbit.eccentricity
        r = self.distance()
        p = self._orbit.semilatus_rectum()
        h = self._orbit.angular_momentum()

        # radial rate term along r, transverse term along d(r_hat)/d(theta)
        radial = h * e * np.sin(self._true_anomaly) / (r * p)
        transverse = h / r
        return self.position() * radial + Vector3D(
            -cos_W * sin_wv - sin_W * cos_wv * cos_i,
            -sin_W * sin_wv + cos_W * cos_wv * cos_i,
            sin_i * cos_wv) * transverse

    def to_array(self) -> np.ndarray:
        """Cartesian state [x, y, z, vx, vy, vz] (m, m/s)."""
        return np.concatenate([self.position().to_numpy(), self.velocity().to_numpy()])

    # ========== UTILITY METHODS ==========
    def copy(self) -> "OrbitalState":
        """Independent copy sharing the (immutable) orbit."""
        return copy.copy(self)

    def __repr__(self):
        return f"OrbitalState({self._orbit!r}, {self._true_anomaly!r})"

    def __str__(self):
        return (f"Orbital State:\n"
                f"  ν     = {np.degrees(self._true_anomaly):16.6f}°\n"
                f"  E     = {np.degrees(self._eccentric_anomaly):16.6f}°\n"
                f"  M     = {np.degrees(self._mean_anomaly):16.6f}°\n"
                f"  t     = {self._time:16.6f} s\n"
                f"  r     = {self.distance():16.6e} m")
