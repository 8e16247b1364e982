"""Hazard systems: surge forcing, scenarios and damage integrators."""
from .surge import (
    DistributionalForcing,
    EADScenario,
    PointMass,
    StochasticForcing,
    StochasticScenario,
    gev_distribution,
)
from .hazard import (
    MonteCarloIntegrator,
    QuadratureIntegrator,
    integrate_expected_damage,
    monte_carlo_expected_damage,
    quadrature_expected_damage,
    stochastic_damage,
)

__all__ = [
    "DistributionalForcing",
    "EADScenario",
    "PointMass",
    "StochasticForcing",
    "StochasticScenario",
    "gev_distribution",
    "MonteCarloIntegrator",
    "QuadratureIntegrator",
    "integrate_expected_damage",
    "monte_carlo_expected_damage",
    "quadrature_expected_damage",
    "stochastic_damage",
]
