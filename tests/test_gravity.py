"""
Test suite for Gravity and Body.
"""

import pytest
import numpy as np

from gravitree import Body, Gravity, Rotation, Vector3D


# =============================================================================
# Test Configuration
# =============================================================================

RTOL = 1e-5

EARTH_MASS = 5.9722e24  # kg
MOON_MASS = 7.342e22    # kg
EARTH_EQUATORIAL_RADIUS = 6.3781e6  # m


class TestGravity:
    """Newtonian two-body gravity"""

    def test_surface_acceleration(self):
        """Earth equatorial surface gravity"""
        g = Gravity.acceleration(EARTH_MASS, EARTH_EQUATORIAL_RADIUS)
        assert g == pytest.approx(9.79812, rel=RTOL)

    def test_force(self):
        """Earth-Moon force at a fixed separation"""
        f = Gravity.force(EARTH_MASS, MOON_MASS, 3.84399e11)
        assert f == pytest.approx(1.9805e14, rel=RTOL)

    def test_vector_acceleration_points_inward(self):
        """Vector acceleration points back toward the attracting mass"""
        a = Gravity.acceleration(EARTH_MASS, Vector3D(EARTH_EQUATORIAL_RADIUS, 0.0, 0.0))
        assert a.x == pytest.approx(-9.79812, rel=RTOL)
        assert a.y == 0.0
        assert a.z == 0.0

    def test_vector_matches_scalar(self):
        """Vector magnitude equals the scalar overload"""
        separation = Vector3D(3.0e6, -4.0e6, 1.0e6)
        vector = Gravity.force(EARTH_MASS, MOON_MASS, separation)
        scalar = Gravity.force(EARTH_MASS, MOON_MASS, separation.magnitude())
        assert vector.magnitude() == pytest.approx(scalar, rel=1e-12)

    def test_mu(self):
        """Gravitational parameter"""
        assert Gravity.mu(EARTH_MASS) == pytest.approx(3.98589e14, rel=RTOL)

    def test_zero_separation(self):
        """Coincident bodies have no defined force"""
        with pytest.raises(ValueError, match="zero separation"):
            Gravity.force(EARTH_MASS, MOON_MASS, Vector3D())
        with pytest.raises(ValueError, match="zero separation"):
            Gravity.force(EARTH_MASS, MOON_MASS, 0.0)
        with pytest.raises(ValueError, match="zero separation"):
            Gravity.acceleration(EARTH_MASS, Vector3D())


class TestBody:
    """Body and Rotation values"""

    def test_defaults(self):
        """A body defaults to no spin"""
        body = Body("earth", EARTH_MASS)
        assert body.angular_velocity.angle == 0.0
        assert body.angular_velocity.axis == Vector3D(1.0, 0.0, 0.0)

    def test_immutable(self):
        """Bodies are frozen"""
        body = Body("earth", EARTH_MASS)
        with pytest.raises(AttributeError):
            body.mass = 1.0

    def test_with_angular_velocity(self):
        """Replacing the spin returns a new body"""
        body = Body("earth", EARTH_MASS)
        spinning = body.with_angular_velocity(Rotation((0.0, 0.0, 1.0), 7.29e-5))
        assert spinning.angular_velocity.angle == 7.29e-5
        assert spinning.angular_velocity.axis == Vector3D(0.0, 0.0, 1.0)
        assert body.angular_velocity.angle == 0.0
        assert spinning.id == body.id

    @pytest.mark.parametrize("mass", [0.0, -1.0, np.nan, np.inf])
    def test_invalid_mass(self, mass):
        """Mass must be finite and positive"""
        with pytest.raises(ValueError, match="Mass"):
            Body("bad", mass)

    def test_invalid_id(self):
        """Ids must be non-empty strings"""
        with pytest.raises(ValueError, match="id"):
            Body("", EARTH_MASS)

    def test_invalid_rotation(self):
        """Rotation components must be finite"""
        with pytest.raises(ValueError):
            Rotation(Vector3D(0.0, 0.0, 1.0), np.nan)

    def test_hashable(self):
        """Bodies and rotations work as set members and dict keys"""
        spin = Rotation(Vector3D(0.0, 0.0, 1.0), 7.29e-5)
        earth = Body("earth", EARTH_MASS, spin)
        same = Body("earth", EARTH_MASS, Rotation(Vector3D(0.0, 0.0, 1.0 + 1e-15), 7.29e-5))
        assert earth == same
        assert hash(earth) == hash(same)
        assert hash(spin) == hash(same.angular_velocity)
        assert len({earth, same, Body("moon", MOON_MASS)}) == 2
