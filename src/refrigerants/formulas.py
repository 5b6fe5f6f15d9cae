"""
Drift velocity correlations for vapor droplets in a refrigerant.

The terminal rise (drift) velocity of a droplet is obtained from three
dimensionless criteria evaluated in sequence: the Archimedes criterion
feeds the Reynolds criterion which gives the drift velocity.

None of the functions validate their inputs. NaN or negative values
propagate arithmetically. All of them accept numpy arrays.
"""

from dataclasses import astuple, dataclass

import numpy as np

# Standard gravity [m/s²]
G = 9.80665


@dataclass(frozen=True)
class CriteriaResult:
    """Archimedes criterion, Reynolds criterion and drift velocity [m/s]"""

    archimedes: float
    reynolds: float
    drift_velocity: float

    def __iter__(self):
        return iter(astuple(self))


def archimedes_criterion(
    drop_diameter,
    kinematic_vapor_viscosity,
    liquid_density,
    vapor_density,
):
    """
    Calculate the Archimedes criterion for a droplet

    Parameters
    ----------
    drop_diameter : float
        Droplet diameter [m]
    kinematic_vapor_viscosity : float
        Vapor kinematic viscosity [m²/s]
    liquid_density : float
        Liquid density [kg/m³]
    vapor_density : float
        Vapor density [kg/m³]

    Returns
    -------
    Ar : float
        Archimedes criterion [-]

    Notes
    -----
    Ar = g*d³/ν² * (ρ_l - ρ_v)/ρ_v
    """
    return (G * drop_diameter**3 / kinematic_vapor_viscosity**2) * (
        (liquid_density - vapor_density) / vapor_density
    )


def reynolds_criterion(archimedes):
    """
    Calculate the Reynolds criterion for drift from the Archimedes criterion

    Parameters
    ----------
    archimedes : float
        Archimedes criterion [-]

    Returns
    -------
    Re : float
        Reynolds criterion [-]

    Notes
    -----
    Re = Ar / (18 + 0.61*sqrt(Ar))
    """
    return archimedes / (18 + 0.61 * np.sqrt(archimedes))


def drift_velocity(kinematic_vapor_viscosity, drop_diameter, reynolds):
    """
    Calculate the drift (steam) velocity of a droplet

    Parameters
    ----------
    kinematic_vapor_viscosity : float
        Vapor kinematic viscosity [m²/s]
    drop_diameter : float
        Droplet diameter [m]
    reynolds : float
        Reynolds criterion [-]

    Returns
    -------
    w : float
        Drift velocity [m/s]
    """
    return reynolds * kinematic_vapor_viscosity / drop_diameter


def calculate_criteria(freon, drop_diameter):
    """
    Evaluate the full criteria chain for a refrigerant and droplet size

    Parameters
    ----------
    freon : Freon
        Refrigerant at its ambient temperature
    drop_diameter : float
        Droplet diameter [m]

    Returns
    -------
    CriteriaResult
        (archimedes, reynolds, drift_velocity)
    """
    nu = freon.kinematic_vapor_viscosity
    Ar = archimedes_criterion(
        drop_diameter, nu, freon.liquid_density, freon.vapor_density
    )
    Re = reynolds_criterion(Ar)
    w = drift_velocity(nu, drop_diameter, Re)
    return CriteriaResult(Ar, Re, w)
