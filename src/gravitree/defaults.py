"""
Default Bodies and Solar System Configurations
==============================================

Predefined bodies of the Solar System and a factory for a small
Sun/Earth/Moon/Mars hierarchy. Systems are built on demand, so importing
this module creates nothing heavier than a few Body values.

Examples
--------
>>> from gravitree.defaults import inner_solar_system
>>> system = inner_solar_system()
>>> len(system)
4
"""
from .vector import Vector3D
from .body import Body, Rotation
from .kepler_orbit import KeplerOrbit
from .solar_system import SolarSystem

"""
Predefined Solar System bodies
Masses in kg, rotation rates in rad/s about the body z-axis
(negative for retrograde spin)
"""
_Z_AXIS = Vector3D(0.0, 0.0, 1.0)

SUN = Body("sun", 1.9885e30, Rotation(_Z_AXIS, 2.865e-6))

MERCURY = Body("mercury", 3.3011e23, Rotation(_Z_AXIS, 1.24001e-6))

VENUS = Body("venus", 4.8675e24, Rotation(_Z_AXIS, -2.9926e-7))

EARTH = Body("earth", 5.97237e24, Rotation(_Z_AXIS, 7.2921150e-5))

MOON = Body("moon", 7.342e22, Rotation(_Z_AXIS, 2.661700e-6))

MARS = Body("mars", 6.4171e23, Rotation(_Z_AXIS, 7.0882181e-5))

JUPITER = Body("jupiter", 1.8982e27, Rotation(_Z_AXIS, 1.758518e-4))

# Earth's heliocentric orbit, periapsis on the x-axis
EARTH_ORBIT = KeplerOrbit(1.495975e11, 0.016728, 0.0, 0.0, 0.0, SUN.mass)


def inner_solar_system() -> SolarSystem:
    """
    Sun, Earth, Moon and Mars in one hierarchy.

    Earth starts at periapsis on the +y axis, the Moon 3.626e8 m from Earth
    and Mars near periapsis on the +x axis.

    Returns
    -------
    SolarSystem
        Rooted at SUN; the Moon orbits EARTH
    """
    system = SolarSystem(SUN)
    system.add_body(EARTH, SUN.id,
                    position=Vector3D(0.0, 1.47095e11, 0.0),
                    velocity=Vector3D(3.029e4, 0.0, 0.0))
    system.add_body(MOON, EARTH.id,
                    position=Vector3D(-3.626e8, 0.0, 0.0),
                    velocity=Vector3D(0.0, -1.022e3, 0.0))
    system.add_body(MARS, SUN.id,
                    position=Vector3D(2.067e11, 0.0, 0.0),
                    velocity=Vector3D(0.0, -2.650e4, 0.0))
    return system
