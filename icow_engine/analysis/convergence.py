"""
Agreement between the two hazard integrators.

For a fixed lever vector and surge distribution the Monte Carlo estimate of
expected annual damage must approach the quadrature value as the sample
count grows, with error shrinking roughly as 1/√N. This module tabulates
that convergence so it can be checked in tests and from the CLI.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..core.defenses import FloodDefenses
from ..core.parameters import CityParameters
from ..systems.hazard import (
    MonteCarloIntegrator,
    QuadratureIntegrator,
    monte_carlo_expected_damage,
    quadrature_expected_damage,
)
from ..systems.surge import SurgeDistribution


def integrator_convergence(
    params: CityParameters,
    defenses: FloodDefenses,
    dist: SurgeDistribution,
    sample_sizes: Sequence[int] = (1_000, 10_000, 100_000),
    seed: Optional[int] = 0,
    quadrature: Optional[QuadratureIntegrator] = None,
) -> List[Dict[str, Any]]:
    """Compare Monte Carlo estimates at increasing N with quadrature.

    Args:
        params:       City parameters.
        defenses:     Feasible lever vector.
        dist:         Surge distribution.
        sample_sizes: Monte Carlo sample counts to try.
        seed:         Root seed; each sample size draws from its own child.
        quadrature:   Reference integrator (defaults to rtol=1e-8 with 1e-8
                      tail mass left out on each side).

    Returns:
        One row per sample size with keys ``n_samples``, ``monte_carlo``,
        ``quadrature`` and ``relative_error``.
    """
    reference_integrator = (
        quadrature
        if quadrature is not None
        else QuadratureIntegrator(rtol=1e-8, tail_probability=1e-8)
    )
    reference = quadrature_expected_damage(reference_integrator, params, defenses, dist)

    children = np.random.SeedSequence(seed).spawn(len(sample_sizes))
    rows: List[Dict[str, Any]] = []
    for n, child in zip(sample_sizes, children):
        estimate = monte_carlo_expected_damage(
            MonteCarloIntegrator(n_samples=int(n)),
            params,
            defenses,
            dist,
            np.random.default_rng(child),
        )
        if reference != 0.0:
            rel = abs(estimate - reference) / abs(reference)
        else:
            rel = abs(estimate)
        rows.append(
            {
                "n_samples": int(n),
                "monte_carlo": estimate,
                "quadrature": reference,
                "relative_error": rel,
            }
        )
    return rows
