'''Gravitree: hierarchical Keplerian orbit propagation
Numerical integrators for checking and extending Kepler propagation'''

import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
import numpy as np
import heyoka as hy
from .config import config
from .vector import Vector3D
from .gravity import Gravity

"""
Two independent ways to move a body through a gravity field:

- LeapFrogIntegrator: fixed-step kick-drift-kick (velocity Verlet) scheme
  for any acceleration field given as a callable.
- TaylorIntegrator: heyoka adaptive Taylor integrator for the two-body
  problem, compiled once per instance.
"""


@dataclass(frozen=True)
class KineticStateDelta:
    """Change of position [m] and velocity [m/s] over one step."""
    position: Vector3D
    velocity: Vector3D


class LeapFrogIntegrator:
    """
    Symplectic kick-drift-kick integrator.

    ``gravity`` is any callable mapping a position (Vector3D) to an
    acceleration (Vector3D); ``point_mass`` builds the two-body one.
    """

    @staticmethod
    def point_mass(mass: float) -> Callable[[Vector3D], Vector3D]:
        """Acceleration field of a point mass at the origin."""
        if not (math.isfinite(mass) and mass > 0):
            raise ValueError(f"Mass must be positive, got {mass}")
        return lambda position: Gravity.acceleration(mass, position)

    @staticmethod
    def integrate(position: Vector3D, velocity: Vector3D,
                  gravity: Callable[[Vector3D], Vector3D],
                  step: float) -> KineticStateDelta:
        """
        Take one leap-frog step.

        Parameters
        ----------
        position, velocity : Vector3D
            State at the start of the step [m, m/s]
        gravity : callable
            Acceleration field
        step : float
            Step size [s]

        Returns
        -------
        KineticStateDelta
            Change of position and velocity over the step
        """
        half = 0.5 * step
        # kick
        v_half = velocity + gravity(position) * half
        # drift
        dp = v_half * step
        # kick
        v_end = v_half + gravity(position + dp) * half
        return KineticStateDelta(dp, v_end - velocity)

    @classmethod
    def propagate(cls, position, velocity, gravity, duration: float,
                  step: Optional[float] = None) -> Tuple[Vector3D, Vector3D]:
        """
        Integrate over a duration with fixed steps.

        The last step is shortened to land exactly on ``duration``.

        Parameters
        ----------
        position, velocity : Vector3D or array-like
            Initial state [m, m/s]
        gravity : callable
            Acceleration field
        duration : float
            Total time [s], >= 0
        step : float, optional
            Step size [s] (default config.DEFAULT_LEAPFROG_STEP)

        Returns
        -------
        tuple of (Vector3D, Vector3D)
            Final position and velocity
        """
        if step is None:
            step = config.DEFAULT_LEAPFROG_STEP
        if not step > 0:
            raise ValueError(f"Step must be positive, got {step}")
        if not (math.isfinite(duration) and duration >= 0):
            raise ValueError(f"Duration must be finite and non-negative, got {duration}")

        position = Vector3D.coerce(position)
        velocity = Vector3D.coerce(velocity)
        elapsed = 0.0
        while elapsed < duration:
            dt = min(step, duration - elapsed)
            delta = cls.integrate(position, velocity, gravity, dt)
            position = position + delta.position
            velocity = velocity + delta.velocity
            elapsed += dt
        return position, velocity


class TaylorIntegrator:
    """
    Two-body propagation with heyoka's adaptive Taylor method.

    The gravitational parameter is a runtime parameter (hy.par[0]), so one
    compiled integrator serves a fixed parent mass without recompiling
    between propagations.

    Parameters
    ----------
    parent_mass : float
        Mass of the attracting body [kg]
    compile : bool, optional
        Compile immediately (default config.DEFAULT_COMPILE)
    """

    def __init__(self, parent_mass: float, compile: Optional[bool] = None):
        if not (math.isfinite(parent_mass) and parent_mass > 0):
            raise ValueError(f"Parent mass must be positive, got {parent_mass}")
        self._parent_mass = float(parent_mass)
        self._mu = Gravity.mu(self._parent_mass)
        self._cached_eom = self._build_eom()
        self._cached_integrator = None

        if compile is None:
            compile = config.DEFAULT_COMPILE
        if compile:
            self._compile_integrator()

    @staticmethod
    def _build_eom():
        """Point-mass equations of motion with mu as a runtime parameter."""
        x, y, z, vx, vy, vz = hy.make_vars("x", "y", "z", "vx", "vy", "vz")
        mu = hy.par[0]
        r = hy.sqrt(x**2 + y**2 + z**2)
        return [
            (x, vx),
            (y, vy),
            (z, vz),
            (vx, -mu * x / r**3),
            (vy, -mu * y / r**3),
            (vz, -mu * z / r**3),
        ]

    def _compile_integrator(self):
        if self._cached_integrator is not None:
            return  # Already compiled
        print("Compiling two-body Taylor integrator...")
        self._cached_integrator = hy.taylor_adaptive(
            sys=self._cached_eom,
            state=[1.0, 0.0, 0.0, 0.0, 1.0, 0.0],  # Dummy state
            pars=[self._mu],
        )
        print("✓ Compilation complete")

    def compile(self):
        """
        Explicitly compile integrator if not already compiled.

        Returns
        -------
        self
            Returns self for method chaining
        """
        self._compile_integrator()
        return self

    @property
    def is_compiled(self) -> bool:
        return self._cached_integrator is not None

    @property
    def parent_mass(self) -> float:
        return self._parent_mass

    def propagate(self, position, velocity, duration: float) -> Tuple[Vector3D, Vector3D]:
        """
        Propagate a state relative to the parent body.

        Parameters
        ----------
        position, velocity : Vector3D or array-like
            Initial state [m, m/s]
        duration : float
            Time to propagate [s]

        Returns
        -------
        tuple of (Vector3D, Vector3D)
            Final position and velocity

        Raises
        ------
        ValueError
            If the initial or final state is not finite
        """
        state_array = np.concatenate([Vector3D.coerce(position).to_numpy(),
                                      Vector3D.coerce(velocity).to_numpy()])
        if not np.all(np.isfinite(state_array)):
            raise ValueError(f"Initial state contains NaN or Inf values: {state_array}")
        if not math.isfinite(duration):
            raise ValueError(f"Duration must be finite, got {duration}")

        self._compile_integrator()
        ta = self._cached_integrator
        ta.pars[0] = self._mu
        ta.time = 0.0
        ta.state[:] = state_array
        ta.propagate_until(float(duration))

        # Check for integration failure
        if not np.all(np.isfinite(ta.state)):
            raise ValueError(
                f"Integration failed: state became invalid during propagation.\n"
                f"Initial state: {state_array}\n"
                f"Final time: {ta.time}\n"
                f"Final state: {ta.state}"
            )
        final = np.array(ta.state)
        return Vector3D.from_numpy(final[:3]), Vector3D.from_numpy(final[3:])

    def __repr__(self):
        status = "compiled" if self.is_compiled else "not compiled"
        return f"TaylorIntegrator(parent_mass={self._parent_mass!r}) [{status}]"
