"""Tests for the policy adapters."""

import numpy as np
import pytest

from icow_engine.agents.policies import (
    MAX_RESISTANCE_FRACTION,
    ScheduledPolicy,
    StaticPolicy,
)
from icow_engine.core.defenses import FloodDefenses, is_feasible
from icow_engine.simulation.annual_step import SimulationState


def test_zero_policy_builds_nothing(params):
    assert StaticPolicy().to_defenses(params) == FloodDefenses.zero()


def test_stick_breaking_decoding(params):
    policy = StaticPolicy(a_frac=0.5, w_frac=0.2, b_frac=0.25, r_frac=0.1, P=0.3)
    levers = policy.to_defenses(params)
    H = params.H_city
    A = 0.5 * H
    assert levers.W == pytest.approx(0.2 * A)
    assert levers.B == pytest.approx(0.25 * 0.8 * A)
    assert levers.D == pytest.approx(0.75 * 0.8 * A)
    assert levers.R == pytest.approx(0.1 * H)
    assert levers.P == 0.3
    assert levers.W + levers.B + levers.D == pytest.approx(A)


def test_partial_budgets_are_always_feasible(params):
    rng = np.random.default_rng(0)
    for _ in range(200):
        frac = rng.uniform(0.0, 1.0, size=5)
        frac[0] *= 0.999
        frac[4] *= MAX_RESISTANCE_FRACTION
        levers = StaticPolicy(*frac).to_defenses(params)
        assert is_feasible(levers, params)


def test_full_withdrawal_is_infeasible(params):
    levers = StaticPolicy(a_frac=1.0, w_frac=1.0).to_defenses(params)
    assert levers.W == params.H_city
    assert not is_feasible(levers, params)


def test_validation():
    with pytest.raises(ValueError):
        StaticPolicy(a_frac=1.5)
    with pytest.raises(ValueError):
        StaticPolicy(r_frac=-0.1)
    with pytest.raises(ValueError):
        StaticPolicy(P=1.0)


def test_static_policy_acts_in_first_year_only(params):
    policy = StaticPolicy(a_frac=0.2, b_frac=0.5)
    state = SimulationState()
    assert policy.action(state, 1, params) == policy.to_defenses(params)
    assert policy.action(state, 2, params) == FloodDefenses.zero()


def test_vector_round_trip_and_clipping():
    policy = StaticPolicy(a_frac=0.3, w_frac=0.1, b_frac=0.5, r_frac=0.2, P=0.4)
    np.testing.assert_array_equal(policy.to_vector(), [0.3, 0.1, 0.5, 0.2, 0.4])
    assert StaticPolicy.from_vector(policy.to_vector()) == policy

    clipped = StaticPolicy.from_vector([1.2, -0.5, 0.5, 0.5, 1.0])
    assert clipped.a_frac == 1.0
    assert clipped.w_frac == 0.0
    assert clipped.P == MAX_RESISTANCE_FRACTION
    with pytest.raises(ValueError):
        StaticPolicy.from_vector([0.1, 0.2])


def test_bounds_match_vector_length():
    bounds = StaticPolicy.bounds()
    assert len(bounds) == len(StaticPolicy().to_vector())
    assert bounds[-1] == (0.0, MAX_RESISTANCE_FRACTION)


def test_scheduled_policy(params):
    policy = ScheduledPolicy({2: FloodDefenses(D=3.0)})
    state = SimulationState()
    assert policy.action(state, 1, params) == FloodDefenses.zero()
    assert policy.action(state, 2, params) == FloodDefenses(D=3.0)
    assert policy.to_dict()[2]["D"] == 3.0
    with pytest.raises(ValueError):
        ScheduledPolicy({0: FloodDefenses()})
