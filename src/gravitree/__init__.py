"""
Gravitree: Hierarchical Keplerian Orbit Propagation

A Python package for modelling star systems as a tree of bodies, each on a
two-body Keplerian orbit about its parent, with precision-preserving
relative positions and numerical integrators for cross-checking.
"""

# Core classes
from .vector import Vector3D
from .position import Position
from .body import Body, Rotation
from .gravity import Gravity
from .kepler_orbit import KeplerOrbit
from .orbital_state import OrbitalState, solve_kepler
from .solar_system import SolarSystem
from .integrators import KineticStateDelta, LeapFrogIntegrator, TaylorIntegrator

# Errors
from .exceptions import (
    GravitreeError,
    UnknownBodyError,
    DuplicateBodyError,
    InvalidOperationError,
    DegenerateOrbitError,
    UndefinedPeriodError,
    ConvergenceError,
)

# Commonly-used celestial bodies
from .defaults import SUN, EARTH, MOON, MARS, inner_solar_system

# Configuration
from .config import config, temp_config

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from gravitree import *"
__all__ = [
    # Classes
    "Vector3D",
    "Position",
    "Body",
    "Rotation",
    "Gravity",
    "KeplerOrbit",
    "OrbitalState",
    "SolarSystem",
    "KineticStateDelta",
    "LeapFrogIntegrator",
    "TaylorIntegrator",
    # Functions
    "solve_kepler",
    "inner_solar_system",
    # Errors
    "GravitreeError",
    "UnknownBodyError",
    "DuplicateBodyError",
    "InvalidOperationError",
    "DegenerateOrbitError",
    "UndefinedPeriodError",
    "ConvergenceError",
    # Constants
    "SUN",
    "EARTH",
    "MOON",
    "MARS",
    # Configuration
    "config",
    "temp_config",
]
