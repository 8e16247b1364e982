"""
Hazard integration: turning surge distributions into annual damage.

Expected annual damage (EAD) for levers L and surge density f:

    EAD(L) = ∫ f(h) · E[damage | h, L] dh

where E[damage | h, L] already averages over dike failure analytically.
Two interchangeable strategies estimate the integral:

  - QuadratureIntegrator: adaptive Gauss–Kronrod quadrature
    (scipy.integrate.quad) between extreme quantiles of f, or over the full
    support as an improper integral. Deterministic. Zone and dike elevations
    are passed as breakpoints because the damage curve has kinks and a jump
    at the seawall there. The ``limit`` subinterval cap bounds refinement on
    near-discontinuous integrands.
  - MonteCarloIntegrator: mean of E[damage | h_i, L] over N draws h_i ~ f.
    Error shrinks as O(1/√N); reproducible under a seeded Generator.

Stochastic mode instead takes a single realised surge and draws the dike
state explicitly (Bernoulli with the failure probability).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Union

import numpy as np
from scipy import integrate

from ..core.damage import (
    dike_failure_probability,
    effective_surge,
    expected_damage_given_surge,
    total_event_damage,
)
from ..core.defenses import FloodDefenses
from ..core.parameters import CityParameters
from ..core.zones import CityZones, partition
from .surge import SurgeDistribution, is_point_mass, point_value

logger = logging.getLogger("icow_engine.hazard")

_BOUND_MODES = ("quantile", "support")


@dataclass(frozen=True)
class QuadratureIntegrator:
    """Adaptive quadrature settings.

    Attributes:
        rtol:             Relative tolerance passed to quad as ``epsrel``.
        tail_probability: Mass left out at each tail in "quantile" mode.
        bounds:           "quantile" integrates over [ppf(q), ppf(1 − q)];
                          "support" integrates over the full support.
        limit:            Maximum number of quad subintervals.
    """

    rtol: float = 1e-6
    tail_probability: float = 1e-4
    bounds: str = "quantile"
    limit: int = 200

    def __post_init__(self) -> None:
        if self.rtol <= 0.0:
            raise ValueError(f"rtol must be > 0, got {self.rtol}")
        if not 0.0 < self.tail_probability < 0.5:
            raise ValueError(
                f"tail_probability must be in (0, 0.5), got {self.tail_probability}"
            )
        if self.bounds not in _BOUND_MODES:
            raise ValueError(f"bounds must be one of {_BOUND_MODES}, got {self.bounds!r}")
        if self.limit <= 0:
            raise ValueError(f"limit must be > 0, got {self.limit}")


@dataclass(frozen=True)
class MonteCarloIntegrator:
    """Monte Carlo settings.

    Attributes:
        n_samples: Number of surge draws per year (> 0).
    """

    n_samples: int = 1000

    def __post_init__(self) -> None:
        if self.n_samples <= 0:
            raise ValueError(f"n_samples must be > 0, got {self.n_samples}")


Integrator = Union[QuadratureIntegrator, MonteCarloIntegrator]


# --------------------------------------------------------------------------- #
# Quadrature                                                                   #
# --------------------------------------------------------------------------- #


def _breakpoints(
    params: CityParameters,
    defenses: FloodDefenses,
    zones: CityZones,
    lo: float,
    hi: float,
    offset: float,
) -> List[float]:
    """Raw surge heights where the damage integrand has kinks or jumps."""
    effective = {0.0, defenses.dike_base, defenses.dike_crest}
    effective.add(defenses.dike_base + params.t_fail * defenses.D)
    for zone in zones:
        effective.add(zone.low)
        effective.add(zone.high)

    raw = {params.H_seawall}
    raw.update((e + params.H_seawall) / params.f_runup for e in effective)
    return sorted(h - offset for h in raw if lo < h - offset < hi)


def quadrature_expected_damage(
    integrator: QuadratureIntegrator,
    params: CityParameters,
    defenses: FloodDefenses,
    dist: SurgeDistribution,
    offset: float = 0.0,
) -> float:
    """Expected annual damage by adaptive quadrature ($).

    Args:
        integrator: Quadrature settings.
        params:     City parameters.
        defenses:   Built levers (feasible).
        dist:       Surge distribution or PointMass.
        offset:     Sea-level offset added to every surge height (m).

    Returns:
        Expected damage for the year.
    """
    zones = partition(params, defenses)

    if is_point_mass(dist):
        return expected_damage_given_surge(
            point_value(dist) + offset, zones, params, defenses
        )

    if integrator.bounds == "quantile":
        lo = float(dist.ppf(integrator.tail_probability))
        hi = float(dist.ppf(1.0 - integrator.tail_probability))
    else:
        lo, hi = (float(x) for x in dist.support())

    if not hi > lo:
        return expected_damage_given_surge(lo + offset, zones, params, defenses)

    def integrand(h: float) -> float:
        return float(dist.pdf(h)) * expected_damage_given_surge(
            h + offset, zones, params, defenses
        )

    points: Optional[List[float]] = None
    if np.isfinite(lo) and np.isfinite(hi):
        points = _breakpoints(params, defenses, zones, lo, hi, offset) or None

    result = integrate.quad(
        integrand,
        lo,
        hi,
        epsrel=integrator.rtol,
        limit=integrator.limit,
        points=points,
        full_output=1,
    )
    if len(result) > 3:
        logger.warning(
            "Quadrature stopped before reaching rtol=%g (abserr=%.3g): %s",
            integrator.rtol,
            result[1],
            str(result[3]).strip().splitlines()[0],
        )
    return float(result[0])


# --------------------------------------------------------------------------- #
# Monte Carlo                                                                  #
# --------------------------------------------------------------------------- #


def monte_carlo_expected_damage(
    integrator: MonteCarloIntegrator,
    params: CityParameters,
    defenses: FloodDefenses,
    dist: SurgeDistribution,
    rng: np.random.Generator,
    offset: float = 0.0,
) -> float:
    """Expected annual damage by Monte Carlo sampling ($).

    Dike failure is averaged analytically per sample, so no Bernoulli draw
    is made here.
    """
    zones = partition(params, defenses)

    if is_point_mass(dist):
        return expected_damage_given_surge(
            point_value(dist) + offset, zones, params, defenses
        )

    samples = np.asarray(
        dist.rvs(size=integrator.n_samples, random_state=rng), dtype=np.float64
    )
    damages = [
        expected_damage_given_surge(float(h) + offset, zones, params, defenses)
        for h in samples
    ]
    return float(np.mean(damages))


def integrate_expected_damage(
    integrator: Integrator,
    params: CityParameters,
    defenses: FloodDefenses,
    dist: SurgeDistribution,
    rng: Optional[np.random.Generator] = None,
    offset: float = 0.0,
) -> float:
    """Dispatch to the integrator's strategy.

    Args:
        integrator: QuadratureIntegrator or MonteCarloIntegrator.
        params:     City parameters.
        defenses:   Built levers (feasible).
        dist:       Surge distribution for the year.
        rng:        Random source for Monte Carlo (ignored by quadrature).
        offset:     Sea-level offset (m).

    Returns:
        Expected annual damage ($).

    Raises:
        TypeError: If the integrator type is unknown.
        ValueError: If Monte Carlo is requested without a random source.
    """
    if isinstance(integrator, QuadratureIntegrator):
        return quadrature_expected_damage(integrator, params, defenses, dist, offset)
    if isinstance(integrator, MonteCarloIntegrator):
        if rng is None:
            raise ValueError("MonteCarloIntegrator requires a numpy Generator")
        return monte_carlo_expected_damage(
            integrator, params, defenses, dist, rng, offset
        )
    raise TypeError(f"Unknown integrator type: {type(integrator).__name__}")


# --------------------------------------------------------------------------- #
# Stochastic realisation                                                       #
# --------------------------------------------------------------------------- #


def stochastic_damage(
    params: CityParameters,
    defenses: FloodDefenses,
    h_raw: float,
    rng: np.random.Generator,
) -> float:
    """Realised damage for one surge with a sampled dike state ($).

    Args:
        params:   City parameters.
        defenses: Built levers (feasible).
        h_raw:    Raw surge height for the year (m).
        rng:      Random source for the failure draw.

    Returns:
        Event damage including the threshold penalty.
    """
    h_eff = effective_surge(params, h_raw)
    h_at_dike = max(0.0, h_eff - defenses.dike_base)
    p_fail = dike_failure_probability(
        h_at_dike, defenses.D, params.t_fail, params.p_min
    )
    dike_failed = bool(rng.random() < p_fail)

    zones = partition(params, defenses)
    return total_event_damage(zones, h_eff, params, defenses.P, dike_failed)
