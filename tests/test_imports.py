"""Smoke tests to verify package imports work."""

def test_package_imports():
    """Test that all main classes can be imported."""
    from gravitree import Vector3D, Position, Body, KeplerOrbit, OrbitalState, SolarSystem
    assert Vector3D is not None
    assert Position is not None
    assert Body is not None
    assert KeplerOrbit is not None
    assert OrbitalState is not None
    assert SolarSystem is not None

def test_version_exists():
    """Test that version is defined."""
    import gravitree
    assert hasattr(gravitree, '__version__')
    assert gravitree.__version__ == "0.1.0"

def test_can_create_kepler_orbit():
    """Test basic KeplerOrbit creation."""
    from gravitree import KeplerOrbit, SUN
    orbit = KeplerOrbit(1.495975e11, 0.016728, 0.0, 0.0, 0.0, SUN.mass)
    assert orbit.semimajor_axis == 1.495975e11

def test_can_create_solar_system():
    """Test basic SolarSystem creation."""
    from gravitree import SolarSystem, SUN
    system = SolarSystem(SUN)
    assert len(system) == 1
    assert system.root.mass == 1.9885e30

def test_errors_are_exported():
    """Test that every error derives from the package base class."""
    import gravitree
    for name in ["UnknownBodyError", "DuplicateBodyError", "InvalidOperationError",
                 "DegenerateOrbitError", "UndefinedPeriodError", "ConvergenceError"]:
        assert issubclass(getattr(gravitree, name), gravitree.GravitreeError)
