"""Tests for surge forcing, scenarios and the hazard integrators."""

import numpy as np
import pytest
from scipy import stats

from icow_engine.core.damage import (
    effective_surge,
    expected_damage_given_surge,
    total_event_damage,
)
from icow_engine.core.defenses import FloodDefenses
from icow_engine.core.zones import partition
from icow_engine.systems.hazard import (
    MonteCarloIntegrator,
    QuadratureIntegrator,
    integrate_expected_damage,
    monte_carlo_expected_damage,
    quadrature_expected_damage,
    stochastic_damage,
)
from icow_engine.systems.surge import (
    DistributionalForcing,
    EADScenario,
    PointMass,
    StochasticForcing,
    StochasticScenario,
    gev_distribution,
)

LEVERS = FloodDefenses(W=0.0, R=0.0, P=0.0, D=2.55, B=2.55)


# --------------------------------------------------------------------------- #
# Surge model                                                                  #
# --------------------------------------------------------------------------- #


def test_gev_uses_hydrology_shape_sign():
    """ξ > 0 gives a heavy upper tail and a finite lower bound."""
    dist = gev_distribution(1.0, 0.5, 0.1)
    lower, upper = dist.support()
    assert lower == pytest.approx(1.0 - 0.5 / 0.1)
    assert upper == np.inf
    with pytest.raises(ValueError):
        gev_distribution(1.0, 0.0, 0.1)


def test_point_mass_behaves_like_frozen_distribution():
    pm = PointMass(3.0)
    assert pm.ppf(0.5) == 3.0
    np.testing.assert_array_equal(pm.rvs(size=4), [3.0] * 4)
    assert pm.support() == (3.0, 3.0)
    assert pm.mean() == 3.0


def test_distributional_forcing_indexing():
    forcing = DistributionalForcing.stationary(stats.norm(4.0, 1.0), n_years=3)
    assert forcing.n_years == 3
    assert forcing.distribution(1).mean() == 4.0
    with pytest.raises(IndexError):
        forcing.distribution(0)
    with pytest.raises(IndexError):
        forcing.distribution(4)
    with pytest.raises(ValueError):
        DistributionalForcing(distributions=())


def test_stochastic_forcing_shape_and_access():
    forcing = StochasticForcing(np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]))
    assert (forcing.n_scenarios, forcing.n_years) == (2, 3)
    assert forcing.surge(1, 2) == 5.0
    with pytest.raises(IndexError):
        forcing.surge(2, 1)
    with pytest.raises(IndexError):
        forcing.surge(0, 4)
    with pytest.raises(ValueError):
        StochasticForcing(np.zeros(3))


def test_stochastic_forcing_sampling_is_seeded():
    dist = gev_distribution(1.0, 0.5, 0.1)
    a = StochasticForcing.from_distribution(dist, 4, 10, seed=7)
    b = StochasticForcing.from_distribution(dist, 4, 10, seed=7)
    c = StochasticForcing.from_distribution(dist, 4, 10, seed=8)
    np.testing.assert_array_equal(a.surges, b.surges)
    assert not np.array_equal(a.surges, c.surges)


def test_scenarios_apply_sea_level():
    forcing = StochasticForcing(np.array([[1.0, 2.0]]))
    scenario = StochasticScenario(forcing, sea_level=(0.0, 0.5))
    assert scenario.surge(2) == 2.5

    ead = EADScenario(DistributionalForcing.stationary(PointMass(1.0), 2), sea_level=[0.1, 0.2])
    assert ead.sea_level_at(2) == 0.2
    with pytest.raises(ValueError):
        EADScenario(DistributionalForcing.stationary(PointMass(1.0), 2), sea_level=[0.1])


def test_scenario_validation():
    forcing = StochasticForcing(np.ones((2, 3)))
    with pytest.raises(IndexError):
        StochasticScenario(forcing, scenario=2)
    with pytest.raises(ValueError):
        StochasticScenario(forcing, discount_rate=-0.01)


# --------------------------------------------------------------------------- #
# Integrators                                                                  #
# --------------------------------------------------------------------------- #


def test_integrator_settings_validated():
    with pytest.raises(ValueError):
        QuadratureIntegrator(rtol=0.0)
    with pytest.raises(ValueError):
        QuadratureIntegrator(bounds="fixed")
    with pytest.raises(ValueError):
        QuadratureIntegrator(limit=0)
    with pytest.raises(ValueError):
        MonteCarloIntegrator(n_samples=0)


def test_point_mass_short_circuits(params):
    """Both integrators reduce to one evaluation for a certain surge."""
    expected = expected_damage_given_surge(4.0, partition(params, LEVERS), params, LEVERS)
    rng = np.random.default_rng(0)
    assert quadrature_expected_damage(
        QuadratureIntegrator(), params, LEVERS, PointMass(4.0)
    ) == expected
    assert monte_carlo_expected_damage(
        MonteCarloIntegrator(n_samples=10), params, LEVERS, PointMass(4.0), rng
    ) == expected


def test_dirac_at_zero_has_no_damage(params):
    assert quadrature_expected_damage(
        QuadratureIntegrator(), params, LEVERS, PointMass(0.0)
    ) == 0.0


def test_surge_below_seawall_has_no_damage(params):
    dist = stats.uniform(loc=0.0, scale=1.5)
    assert quadrature_expected_damage(QuadratureIntegrator(), params, LEVERS, dist) == 0.0


def test_quadrature_is_deterministic(params):
    dist = stats.norm(4.0, 1.0)
    a = quadrature_expected_damage(QuadratureIntegrator(), params, LEVERS, dist)
    b = quadrature_expected_damage(QuadratureIntegrator(), params, LEVERS, dist)
    assert a == b
    assert a > 0.0


def test_monte_carlo_reproducible_under_seed(params):
    dist = stats.norm(4.0, 1.0)
    mc = MonteCarloIntegrator(n_samples=500)
    a = monte_carlo_expected_damage(mc, params, LEVERS, dist, np.random.default_rng(1))
    b = monte_carlo_expected_damage(mc, params, LEVERS, dist, np.random.default_rng(1))
    c = monte_carlo_expected_damage(mc, params, LEVERS, dist, np.random.default_rng(2))
    assert a == b
    assert a != c


def test_quadrature_and_monte_carlo_agree(params):
    dist = stats.norm(4.0, 1.0)
    quad = quadrature_expected_damage(QuadratureIntegrator(), params, LEVERS, dist)
    mc = monte_carlo_expected_damage(
        MonteCarloIntegrator(n_samples=20_000), params, LEVERS, dist,
        np.random.default_rng(42),
    )
    assert mc == pytest.approx(quad, rel=0.05)


def test_support_bounds_capture_heavy_tail(params):
    """Wider bounds can only add expected damage."""
    dist = gev_distribution(1.0, 0.5, 0.3)
    levers = FloodDefenses(D=3.0)
    narrow = quadrature_expected_damage(
        QuadratureIntegrator(tail_probability=1e-2), params, levers, dist
    )
    wide = quadrature_expected_damage(
        QuadratureIntegrator(tail_probability=1e-6), params, levers, dist
    )
    assert wide > narrow


def test_sea_level_offset_raises_damage(params):
    dist = stats.norm(3.0, 0.5)
    quad = QuadratureIntegrator()
    base = quadrature_expected_damage(quad, params, LEVERS, dist)
    higher = quadrature_expected_damage(quad, params, LEVERS, dist, offset=0.5)
    assert higher > base


def test_dispatch(params):
    dist = PointMass(4.0)
    quad = integrate_expected_damage(QuadratureIntegrator(), params, LEVERS, dist)
    mc = integrate_expected_damage(
        MonteCarloIntegrator(), params, LEVERS, dist, rng=np.random.default_rng(0)
    )
    assert quad == mc
    with pytest.raises(ValueError):
        integrate_expected_damage(MonteCarloIntegrator(), params, LEVERS, dist)
    with pytest.raises(TypeError):
        integrate_expected_damage(object(), params, LEVERS, dist)


def test_stochastic_damage_draws_dike_state(params):
    """Failure certain above the crest, at the floor rate well below it."""
    levers = FloodDefenses(D=5.0)
    zones = partition(params, levers)

    h_high = 7.0
    failed = total_event_damage(zones, effective_surge(params, h_high), params, 0.0, True)
    rng = np.random.default_rng(3)
    assert stochastic_damage(params, levers, h_high, rng) == pytest.approx(failed)

    h_low = 3.0
    h_eff = effective_surge(params, h_low)
    intact = total_event_damage(zones, h_eff, params, 0.0, False)
    failed = total_event_damage(zones, h_eff, params, 0.0, True)
    draws = [stochastic_damage(params, levers, h_low, rng) for _ in range(2000)]
    assert all(d in (intact, failed) for d in draws)
    share_failed = np.mean([d == failed for d in draws])
    assert share_failed == pytest.approx(params.p_min, abs=0.02)
