'''Gravitree: hierarchical Keplerian orbit propagation
Gravity helper definition'''

from typing import Union
from .vector import Vector3D


class Gravity:
    """
    Stateless Newtonian two-body gravity.

    Scalar overloads take a center-to-center distance [m]; vector overloads
    take the offset of the attracted body from the attracting one and return
    a vector pointing back toward the attracting body.
    """
    # ========== CLASS CONSTANTS ==========
    # Gravitational constant [m^3 / (kg s^2)]
    G = 6.67408e-11

    @staticmethod
    def mu(mass: float) -> float:
        """Gravitational parameter G*M [m^3/s^2]."""
        return Gravity.G * mass

    @staticmethod
    def force(mass1: float, mass2: float,
              separation: Union[float, Vector3D]) -> Union[float, Vector3D]:
        """
        Force between two bodies.

        Parameters
        ----------
        mass1, mass2 : float
            Masses [kg]
        separation : float or Vector3D
            Distance between the centers of mass [m], or the offset of the
            first body from the second

        Returns
        -------
        float or Vector3D
            Force magnitude [N], or force vector on the first body [N]

        Raises
        ------
        ValueError
            If the separation is zero
        """
        distance2 = (separation.magnitude2() if isinstance(separation, Vector3D)
                     else separation * separation)
        if distance2 == 0.0:
            raise ValueError("Gravity is undefined at zero separation")
        if isinstance(separation, Vector3D):
            return -separation.normalized() * (
                (Gravity.G * mass1 * mass2) / distance2)
        return (Gravity.G * mass1 * mass2) / distance2

    @staticmethod
    def acceleration(mass: float,
                     separation: Union[float, Vector3D]) -> Union[float, Vector3D]:
        """
        Acceleration of a body of negligible mass toward a large mass.

        Parameters
        ----------
        mass : float
            Mass of the attracting body [kg]
        separation : float or Vector3D
            Distance [m], or offset of the small body from the large one

        Returns
        -------
        float or Vector3D
            Acceleration [m/s^2]
        """
        return Gravity.force(1.0, mass, separation)
