"""
Global Configuration for Gravitree Package
==========================================

This module provides package-wide configuration settings that users can modify
to control numerical tolerances, Kepler solver limits, and validation behavior.

Examples
--------
View current configuration:

>>> import gravitree
>>> print(gravitree.config)

Modify settings:

>>> gravitree.config.KEPLER_TOLERANCE = 1e-12  # Tighter anomaly solution
>>> gravitree.config.STRICT_VALIDATION = False  # Warn instead of raise

Reset to defaults:

>>> gravitree.config.reset()

Temporarily modify settings:

>>> with gravitree.temp_config(KEPLER_MAX_ITERATIONS=16):
...     # Fewer Newton iterations for this block only
...     state.set_time(t)

Notes
-----
These settings affect package-wide behavior. Modifying them will impact
all subsequent operations until changed again or reset.
"""

from dataclasses import dataclass
from contextlib import contextmanager


@dataclass
class GravitreeConfig:
    """
    Global configuration for Gravitree package.

    Attributes
    ----------
    EQUALITY_RTOL : float
        Relative tolerance for floating-point equality comparisons.
        Default: 1e-12
    EQUALITY_ATOL : float
        Absolute tolerance for floating-point equality comparisons.
        Default: 1e-14
    KEPLER_MAX_ITERATIONS : int
        Iteration cap for the Newton-Raphson solution of Kepler's equation.
        Default: 512
    KEPLER_TOLERANCE : float
        Residual magnitude below which Kepler's equation counts as solved.
        Default: 1e-8
    DEGENERATE_THRESHOLD : float
        Relative threshold used to reject state vectors that do not define
        an orbit (near-zero position, velocity, angular momentum or energy).
        Default: 1e-10
    STRICT_VALIDATION : bool
        If True, validation failures raise exceptions.
        If False, validation failures issue warnings.
        Default: True
    DEFAULT_COMPILE : bool
        If True, TaylorIntegrator objects compile immediately on construction.
        If False, compilation is deferred until first propagation.
        Default: True
    DEFAULT_LEAPFROG_STEP : float
        Default leap-frog step size in seconds.
        Default: 60.0
    """

    # Numerical tolerance for equality comparisons
    EQUALITY_RTOL: float = 1e-12
    EQUALITY_ATOL: float = 1e-14

    # Kepler's equation solver
    KEPLER_MAX_ITERATIONS: int = 512
    KEPLER_TOLERANCE: float = 1e-8

    # State vector rejection
    DEGENERATE_THRESHOLD: float = 1e-10

    # Validation behavior
    STRICT_VALIDATION: bool = True

    # Integrator defaults
    DEFAULT_COMPILE: bool = True
    DEFAULT_LEAPFROG_STEP: float = 60.0

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import gravitree
        >>> gravitree.config.KEPLER_TOLERANCE = 1e-4  # Modify
        >>> gravitree.config.reset()  # Back to defaults
        >>> gravitree.config.KEPLER_TOLERANCE
        1e-08
        """
        defaults = GravitreeConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["GravitreeConfig:"]
        lines.append("  Numerical Tolerances:")
        lines.append(f"    EQUALITY_RTOL = {self.EQUALITY_RTOL}")
        lines.append(f"    EQUALITY_ATOL = {self.EQUALITY_ATOL}")
        lines.append("  Kepler Solver:")
        lines.append(f"    KEPLER_MAX_ITERATIONS = {self.KEPLER_MAX_ITERATIONS}")
        lines.append(f"    KEPLER_TOLERANCE = {self.KEPLER_TOLERANCE}")
        lines.append(f"    DEGENERATE_THRESHOLD = {self.DEGENERATE_THRESHOLD}")
        lines.append("  Behavior:")
        lines.append(f"    STRICT_VALIDATION = {self.STRICT_VALIDATION}")
        lines.append(f"    DEFAULT_COMPILE = {self.DEFAULT_COMPILE}")
        lines.append(f"    DEFAULT_LEAPFROG_STEP = {self.DEFAULT_LEAPFROG_STEP}")
        return "\n".join(lines)


# Global configuration instance
config = GravitreeConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import gravitree
    >>> with gravitree.temp_config(STRICT_VALIDATION=False):
    ...     # Invalid orbits warn instead of raising
    ...     orbit = gravitree.KeplerOrbit(-1e10, 0.5, 0, 0, 0, 1e30)
    >>> # Original config restored here
    >>> gravitree.config.STRICT_VALIDATION
    True

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(
                f"GravitreeConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
