"""Tests for the investment cost engine and dike geometry."""

import numpy as np
import pytest

from icow_engine.core.costs import (
    dike_cost,
    investment_cost,
    resistance_cost,
    resistance_cost_fraction,
    value_after_withdrawal,
    withdrawal_cost,
)
from icow_engine.core.defenses import FloodDefenses
from icow_engine.core.geometry import dike_volume


def test_withdrawal_cost(params):
    assert withdrawal_cost(params, 0.0) == 0.0
    assert withdrawal_cost(params, 2.0) == pytest.approx(1.5e12 * 2.0 / 15.0)
    assert withdrawal_cost(params, 5.0) == pytest.approx(6.25e11)


def test_withdrawal_cost_diverges_at_city_peak(params):
    assert withdrawal_cost(params, 16.999) > withdrawal_cost(params, 16.0) * 100
    with pytest.raises(ValueError):
        withdrawal_cost(params, params.H_city)


def test_value_after_withdrawal(params):
    assert value_after_withdrawal(params, 0.0) == params.V_city
    assert value_after_withdrawal(params, 2.0) == pytest.approx(
        1.5e12 * (1.0 - 0.01 * 2.0 / 17.0)
    )


def test_resistance_cost_fraction_values(params):
    assert resistance_cost_fraction(params, 0.0) == 0.0
    assert resistance_cost_fraction(params, 0.4) == pytest.approx(1.25 * 0.35 * 0.4)
    assert resistance_cost_fraction(params, 0.5) == pytest.approx(0.2475)
    assert resistance_cost_fraction(params, 0.8) == pytest.approx(0.6375)


def test_resistance_cost_fraction_continuous_and_increasing(params):
    """Continuous at t_exp, strictly increasing on [0, 1)."""
    t = params.t_exp
    below = resistance_cost_fraction(params, t - 1e-9)
    above = resistance_cost_fraction(params, t + 1e-9)
    assert above - below == pytest.approx(0.0, abs=1e-7)

    grid = np.linspace(0.0, 0.99, 200)
    values = [resistance_cost_fraction(params, p) for p in grid]
    assert all(b > a for a, b in zip(values, values[1:]))


def test_resistance_cost_fraction_domain(params):
    with pytest.raises(ValueError):
        resistance_cost_fraction(params, 1.0)
    with pytest.raises(ValueError):
        resistance_cost_fraction(params, -0.1)


def test_resistance_cost_without_dike_uses_full_height(params):
    """No dike: cost uses R for both the protected height and the offset."""
    d = FloodDefenses(R=4.0, P=0.5)
    expected = 1.5e12 * 0.2475 * 4.0 * (4.0 / 2.0 + 3.0) / (30.0 * 17.0)
    assert resistance_cost(params, d) == pytest.approx(expected)


def test_resistance_cost_capped_by_dike_base(params):
    """R >= B with a dike: protected height capped at B, offset keeps R."""
    d = FloodDefenses(R=6.0, P=0.5, D=3.0, B=5.0)
    expected = 1.5e12 * 0.2475 * 5.0 * (6.0 - 5.0 / 2.0 + 3.0) / (30.0 * 17.0)
    assert resistance_cost(params, d) == pytest.approx(expected)


def test_resistance_cost_below_dike_base(params):
    d = FloodDefenses(W=2.0, R=3.0, P=0.8, D=5.0, B=4.0)
    V_w = value_after_withdrawal(params, 2.0)
    expected = V_w * 0.6375 * 3.0 * (1.5 + 3.0) / (30.0 * 15.0)
    assert resistance_cost(params, d) == pytest.approx(expected)


def test_dike_volume_geometric_form(params):
    h = 5.0 + 2.0
    slope_width = h / 0.25
    v_main = 43000.0 * h * (3.0 + slope_width)
    v_wings = (h * h / (17.0 / 2000.0)) * (3.0 + 2.0 / 3.0 * slope_width)
    assert dike_volume(params, 5.0) == pytest.approx(v_main + v_wings)


def test_dike_volume_increasing(params):
    heights = np.linspace(0.0, 15.0, 31)
    volumes = [dike_volume(params, h) for h in heights]
    assert all(b > a for a, b in zip(volumes, volumes[1:]))


def test_dike_cost(params):
    assert dike_cost(params, 0.0) == 0.0
    assert dike_cost(params, 5.0) == pytest.approx(dike_volume(params, 5.0) * 10.0)


def test_zero_levers_cost_nothing(params):
    assert investment_cost(params, FloodDefenses.zero()) == 0.0


def test_investment_cost_is_sum_of_parts(params):
    d = FloodDefenses(W=2.0, R=3.0, P=0.8, D=5.0, B=1.0)
    expected = (
        withdrawal_cost(params, 2.0)
        + resistance_cost(params, d)
        + dike_cost(params, 5.0)
    )
    assert investment_cost(params, d) == pytest.approx(expected)
    assert investment_cost(params, d) > 0.0
