'''Gravitree: hierarchical Keplerian orbit propagation
KeplerOrbit class definition'''

import math
import numpy as np
from .config import config
from .gravity import Gravity
from .exceptions import UndefinedPeriodError
from .utils import validation_error


class KeplerOrbit:
    """
    Immutable two-body orbit described by five shape/orientation elements
    and the mass of the body being orbited.

    The reference frame is the inertial frame of the parent body: the
    inclination is measured from its x-y plane and the longitude of the
    ascending node from its x-axis. Elliptic orbits (e < 1) have a positive
    semi-major axis, hyperbolic orbits (e > 1) a negative one.

    Parameters
    ----------
    semimajor_axis : float
        Semi-major axis a [m]
    eccentricity : float
        Eccentricity e (>= 0, != 1)
    inclination : float
        Inclination i [rad], in [0, pi]
    longitude_of_ascending_node : float
        Longitude of the ascending node [rad]
    argument_of_periapsis : float
        Argument of periapsis [rad]
    parent_mass : float
        Mass of the orbited body [kg]
    validate : bool, optional
        Whether to validate the elements (default True)

    Examples
    --------
    >>> orbit = KeplerOrbit(1.495975e11, 0.016728, 0.0, 0.0, 0.0, 1.9885e30)
    >>> orbit.period() / 86400
    365.2...
    """

    # ========== CONSTRUCTION ==========
    def __init__(self, semimajor_axis, eccentricity, inclination,
                 longitude_of_ascending_node, argument_of_periapsis,
                 parent_mass, validate=True):
        self._elements = np.array([semimajor_axis, eccentricity, inclination,
                                   longitude_of_ascending_node,
                                   argument_of_periapsis], dtype=float)
        # Ensure immutability of elements array
        self._elements.flags.writeable = False
        self._parent_mass = float(parent_mass)
        self._mu = Gravity.mu(self._parent_mass)
        if validate:
            self._validate()

    @classmethod
    def from_period(cls, semimajor_axis, eccentricity, inclination,
                    longitude_of_ascending_node, argument_of_periapsis,
                    period, validate=True):
        """
        Create a closed orbit when the period is known instead of the parent mass.

        The gravitational parameter follows from Kepler's third law,
        mu = 4 pi^2 a^3 / T^2, and the parent mass from mu / G.

        Parameters
        ----------
        period : float
            Orbital period [s]
        (remaining parameters as for the constructor)

        Returns
        -------
        KeplerOrbit
        """
        if not period > 0:
            raise ValueError(f"Period must be positive, got {period}")
        mu = 4.0 * math.pi**2 * semimajor_axis**3 / period**2
        return cls(semimajor_axis, eccentricity, inclination,
                   longitude_of_ascending_node, argument_of_periapsis,
                   mu / Gravity.G, validate=validate)

    # ========== VALIDATION ==========
    def _validate(self):
        """Check that the elements describe a physical conic."""
        if not np.all(np.isfinite(self._elements)) or not math.isfinite(self._parent_mass):
            validation_error(f"Orbit elements contain NaN or Inf: "
                             f"{self._elements.tolist()}, M={self._parent_mass}")
            return
        a, e, i, _, _ = self._elements
        if self._parent_mass <= 0:
            validation_error(f"Parent mass must be positive, got {self._parent_mass}")
        if e < 0:
            validation_error(f"Eccentricity must be non-negative, got {e}")
        if e == 1:
            validation_error("Parabolic orbits (e=1) have no finite semi-major "
                             "axis and are not supported")
        # Validate a-e combination for physical consistency
        if e < 1 and a <= 0:
            validation_error(f"Elliptic orbit (e={e}) "
                             f"requires positive semi-major axis, got a={a}")
        if e > 1 and a >= 0:
            validation_error(f"Hyperbolic orbit (e={e}) "
                             f"requires negative semi-major axis, got a={a}")
        if i < 0 or i > np.pi:
            validation_error(f"Inclination out of range [0, pi], got {i}")

    # ========== PROPERTY ACCESS ==========
    @property
    def elements(self) -> np.ndarray:
        """Read-only array [a, e, i, Omega, w]."""
        return self._elements

    @property
    def semimajor_axis(self) -> float:
        """Semi-major axis [m]"""
        return float(self._elements[0])

    @property
    def eccentricity(self) -> float:
        return float(self._elements[1])

    @property
    def inclination(self) -> float:
        """Inclination [rad]"""
        return float(self._elements[2])

    @property
    def longitude_of_ascending_node(self) -> float:
        """Longitude of the ascending node [rad]"""
        return float(self._elements[3])

    @property
    def argument_of_periapsis(self) -> float:
        """Argument of periapsis [rad]"""
        return float(self._elements[4])

    @property
    def parent_mass(self) -> float:
        """Mass of the orbited body [kg]"""
        return self._parent_mass

    @property
    def mu(self) -> float:
        """Gravitational parameter [m^3/s^2]"""
        return self._mu

    # ========== ORBITAL PROPERTIES ==========
    def is_closed(self) -> bool:
        """True for elliptic (bound) orbits."""
        return self.eccentricity < 1.0

    def period(self) -> float:
        """
        Calculate orbital period

        Returns period in seconds (only for elliptic orbits)

        Raises
        ------
        UndefinedPeriodError
            If the orbit is parabolic or hyperbolic
        """
        if not self.is_closed():
            raise UndefinedPeriodError(
                f"Orbital period undefined for open orbit (e={self.eccentricity})")
        return 2.0 * np.pi * np.sqrt(self.semimajor_axis**3 / self._mu)

    def mean_motion(self) -> float:
        """
        Mean motion n = sqrt(mu/|a|^3) [rad/s].

        For hyperbolic orbits this is the rate of the hyperbolic mean anomaly.
        """
        return float(np.sqrt(self._mu / abs(self.semimajor_axis)**3))

    def semilatus_rectum(self) -> float:
        """p = a(1 - e^2) [m]"""
        e = self.eccentricity
        return self.semimajor_axis * (1.0 - e * e)

    def angular_momentum(self) -> float:
        """Specific angular momentum h = sqrt(mu p) [m^2/s]"""
        return float(np.sqrt(self._mu * self.semilatus_rectum()))

    def specific_energy(self) -> float:
        """Specific orbital energy -mu/(2a) [J/kg]"""
        return -self._mu / (2.0 * self.semimajor_axis)

    def apoapsis(self) -> float:
        """Distance of apoapsis from the focus [m]; infinite for open orbits."""
        if not self.is_closed():
            return math.inf
        return self.semilatus_rectum() / (1.0 - self.eccentricity)

    def periapsis(self) -> float:
        """Distance of periapsis from the focus [m]"""
        return self.semilatus_rectum() / (1.0 + self.eccentricity)

    def asymptote_anomaly(self) -> float:
        """
        Limiting true anomaly of an open orbit, acos(-1/e) [rad].

        Closed orbits return pi (every anomaly is reachable).
        """
        if self.is_closed():
            return math.pi
        return math.acos(-1.0 / self.eccentricity)

    def radius_at(self, true_anomaly) -> float:
        """Distance from the focus at a true anomaly, p/(1 + e cos(nu)) [m]."""
        denominator = 1.0 + self.eccentricity * np.cos(true_anomaly)
        if denominator <= 0.0:
            raise ValueError(
                f"True anomaly {true_anomaly} is beyond the asymptote of this "
                f"open orbit (limit {self.asymptote_anomaly()})")
        return self.semilatus_rectum() / denominator

    def speed(self, true_anomaly) -> float:
        """Vis-viva speed at a true anomaly [m/s]."""
        r = self.radius_at(true_anomaly)
        return float(np.sqrt(self._mu * (2.0 / r - 1.0 / self.semimajor_axis)))

    # ========== SPECIAL METHODS ==========
    def __repr__(self):
        #Machine-readable representation
        return (f"KeplerOrbit({self.semimajor_axis!r}, {self.eccentricity!r}, "
                f"{self.inclination!r}, {self.longitude_of_ascending_node!r}, "
                f"{self.argument_of_periapsis!r}, {self._parent_mass!r})")

    def __str__(self):
        #Human-readable representation
        a, e, i, omega, w = self._elements
        return (f"Kepler Orbit:\n"
                f"  a     = {a:16.6e} m\n"
                f"  e     = {e:16.8f}\n"
                f"  i     = {np.degrees(i):16.6f}°\n"
                f"  RAAN  = {np.degrees(omega):16.6f}°\n"
                f"  ω     = {np.degrees(w):16.6f}°\n"
                f"  M     = {self._parent_mass:16.6e} kg")

    def __eq__(self, other):
        #Check equality with tolerance
        if not isinstance(other, KeplerOrbit):
            return False
        return (np.allclose(self._elements, other._elements,
                            rtol=config.EQUALITY_RTOL,
                            atol=config.EQUALITY_ATOL) and
                np.isclose(self._mu, other._mu,
                           rtol=config.EQUALITY_RTOL,
                           atol=config.EQUALITY_ATOL))

    # tolerance equality is not transitive, so no hash can agree with it
    __hash__ = None
