"""
Test suite for the numerical integrators.

Both integrators are checked against closed-form Kepler propagation.
"""

import pytest
import numpy as np

from gravitree import (
    KeplerOrbit,
    KineticStateDelta,
    LeapFrogIntegrator,
    OrbitalState,
    TaylorIntegrator,
    Vector3D,
)


# =============================================================================
# Test Configuration
# =============================================================================

EARTH_MASS = 5.97237e24  # kg

# Fixed-step leap-frog vs exact solution
LEAPFROG_RTOL = 1e-5
# Adaptive Taylor vs exact solution
TAYLOR_RTOL = 1e-8


@pytest.fixture
def leo_state():
    """Slightly eccentric low Earth orbit at periapsis"""
    orbit = KeplerOrbit(7.0e6, 0.01, 0.5, 0.2, 0.3, EARTH_MASS)
    return OrbitalState(orbit, 0.0)


def kepler_reference(state, duration):
    """Exact position and velocity after a duration"""
    future = state.copy()
    future.advance(duration)
    return future.position(), future.velocity()


def relative_error(actual, expected):
    return (actual - expected).magnitude() / expected.magnitude()


# =============================================================================
# Leap-frog
# =============================================================================

class TestLeapFrog:
    """Kick-drift-kick integration"""

    def test_single_step_free_motion(self):
        """Without gravity a step is a straight drift"""
        delta = LeapFrogIntegrator.integrate(Vector3D(), Vector3D(1.0, 2.0, 3.0),
                                             lambda p: Vector3D(), 10.0)
        assert isinstance(delta, KineticStateDelta)
        assert delta.position == Vector3D(10.0, 20.0, 30.0)
        assert delta.velocity == Vector3D()

    def test_single_step_constant_field(self):
        """Constant acceleration is integrated exactly"""
        g = Vector3D(0.0, 0.0, -9.81)
        delta = LeapFrogIntegrator.integrate(Vector3D(), Vector3D(), lambda p: g, 2.0)
        assert delta.position.z == pytest.approx(-0.5 * 9.81 * 4.0)
        assert delta.velocity.z == pytest.approx(-9.81 * 2.0)

    def test_matches_kepler(self, leo_state):
        """Ten minutes of leap-frog agrees with Kepler propagation"""
        gravity = LeapFrogIntegrator.point_mass(EARTH_MASS)
        r, v = LeapFrogIntegrator.propagate(leo_state.position(), leo_state.velocity(),
                                            gravity, 600.0, step=1.0)
        r_ref, v_ref = kepler_reference(leo_state, 600.0)
        assert relative_error(r, r_ref) < LEAPFROG_RTOL
        assert relative_error(v, v_ref) < LEAPFROG_RTOL

    def test_shortened_last_step(self, leo_state):
        """A duration that is not a multiple of the step is hit exactly"""
        gravity = LeapFrogIntegrator.point_mass(EARTH_MASS)
        r, _ = LeapFrogIntegrator.propagate(leo_state.position(), leo_state.velocity(),
                                            gravity, 100.5, step=1.0)
        r_ref, _ = kepler_reference(leo_state, 100.5)
        assert relative_error(r, r_ref) < LEAPFROG_RTOL

    def test_body_at_attractor(self):
        """A body at the attracting mass raises instead of producing NaN"""
        gravity = LeapFrogIntegrator.point_mass(EARTH_MASS)
        with pytest.raises(ValueError, match="zero separation"):
            LeapFrogIntegrator.propagate(Vector3D(), Vector3D(0.0, 1.0, 0.0),
                                         gravity, 10.0, step=1.0)

    def test_zero_duration(self, leo_state):
        """No time, no motion"""
        gravity = LeapFrogIntegrator.point_mass(EARTH_MASS)
        r, v = LeapFrogIntegrator.propagate(leo_state.position(), leo_state.velocity(),
                                            gravity, 0.0)
        assert r == leo_state.position()
        assert v == leo_state.velocity()

    def test_invalid_arguments(self, leo_state):
        """Step and duration are validated"""
        gravity = LeapFrogIntegrator.point_mass(EARTH_MASS)
        with pytest.raises(ValueError, match="Step"):
            LeapFrogIntegrator.propagate(leo_state.position(), leo_state.velocity(),
                                         gravity, 10.0, step=0.0)
        with pytest.raises(ValueError, match="Duration"):
            LeapFrogIntegrator.propagate(leo_state.position(), leo_state.velocity(),
                                         gravity, -10.0)
        with pytest.raises(ValueError, match="Mass"):
            LeapFrogIntegrator.point_mass(-1.0)


# =============================================================================
# Taylor
# =============================================================================

class TestTaylorIntegrator:
    """heyoka two-body integration"""

    @pytest.fixture(scope="class")
    def integrator(self):
        """One compiled integrator shared by the class"""
        return TaylorIntegrator(EARTH_MASS)

    def test_compiled_on_construction(self, integrator):
        """Default configuration compiles eagerly"""
        assert integrator.is_compiled
        assert integrator.parent_mass == EARTH_MASS

    def test_deferred_compilation(self):
        """compile=False defers until requested"""
        integrator = TaylorIntegrator(EARTH_MASS, compile=False)
        assert not integrator.is_compiled
        assert "not compiled" in repr(integrator)

    def test_matches_kepler(self, integrator, leo_state):
        """A full orbit agrees with Kepler propagation"""
        duration = leo_state.orbit.period()
        r, v = integrator.propagate(leo_state.position(), leo_state.velocity(), duration)
        r_ref, v_ref = kepler_reference(leo_state, duration)
        assert relative_error(r, r_ref) < TAYLOR_RTOL
        assert relative_error(v, v_ref) < TAYLOR_RTOL

    def test_reusable(self, integrator, leo_state):
        """Repeated propagations start from the given state"""
        first = integrator.propagate(leo_state.position(), leo_state.velocity(), 300.0)
        second = integrator.propagate(leo_state.position(), leo_state.velocity(), 300.0)
        assert np.allclose(np.asarray(first[0]), np.asarray(second[0]), rtol=1e-12)

    def test_non_finite_state(self, integrator):
        """NaN inputs are rejected"""
        with pytest.raises(ValueError, match="NaN"):
            integrator.propagate(Vector3D(np.nan, 0.0, 0.0), Vector3D(), 10.0)

    def test_invalid_mass(self):
        """Parent mass must be positive"""
        with pytest.raises(ValueError, match="Parent mass"):
            TaylorIntegrator(0.0, compile=False)
