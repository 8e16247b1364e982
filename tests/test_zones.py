"""Tests for the five-zone elevation partition."""

import itertools

import pytest

from icow_engine.core.costs import value_after_withdrawal
from icow_engine.core.defenses import FloodDefenses, is_feasible
from icow_engine.core.zones import ZoneKind, partition, zone_boundaries, zone_values


def test_boundaries_with_gap_zone(params):
    """R < B leaves an unprotected gap between resistance and dike base."""
    d = FloodDefenses(W=2.0, R=3.0, P=0.0, D=5.0, B=4.0)
    assert zone_boundaries(params, d) == [
        (0.0, 2.0),
        (2.0, 5.0),
        (5.0, 6.0),
        (6.0, 11.0),
        (11.0, 17.0),
    ]


def test_resistance_reaching_dike_base_collapses_gap(params):
    """R >= B gives a zero-width gap zone with zero value."""
    d = FloodDefenses(W=0.0, R=6.0, P=0.5, D=3.0, B=5.0)
    bounds = zone_boundaries(params, d)
    assert bounds[1] == (0.0, 5.0)
    assert bounds[2] == (5.0, 5.0)
    assert bounds[3] == (5.0, 8.0)
    assert zone_values(params, d)[2] == 0.0


def test_zero_levers_put_everything_above_dike(params):
    """No protection: all value sits in the top zone."""
    zones = partition(params, FloodDefenses.zero())
    for kind in (ZoneKind.WITHDRAWN, ZoneKind.RESISTANT, ZoneKind.UNPROTECTED,
                 ZoneKind.DIKE_PROTECTED):
        assert zones[kind].value == 0.0
        assert zones[kind].height == 0.0
    assert zones[ZoneKind.ABOVE_DIKE].low == 0.0
    assert zones[ZoneKind.ABOVE_DIKE].high == params.H_city
    assert zones[ZoneKind.ABOVE_DIKE].value == pytest.approx(params.V_city)


def test_no_dike_resistance_not_capped(params):
    """Without a dike the resistant zone spans the full resistance height."""
    d = FloodDefenses(W=1.0, R=4.0, P=0.5)
    bounds = zone_boundaries(params, d)
    assert bounds[1] == (1.0, 5.0)
    assert bounds[2] == (5.0, 5.0)
    assert bounds[3] == (5.0, 5.0)
    assert bounds[4] == (5.0, 17.0)

    values = zone_values(params, d)
    V_w = value_after_withdrawal(params, 1.0)
    assert values[1] == pytest.approx(V_w * 4.0 / 16.0)
    assert values[4] == pytest.approx(V_w * 12.0 / 16.0)
    assert sum(values) == pytest.approx(V_w)


def test_no_dike_resistance_capped_at_city_peak(params):
    d = FloodDefenses(W=10.0, R=12.0)
    bounds = zone_boundaries(params, d)
    assert bounds[1] == (10.0, 17.0)
    assert bounds[4] == (17.0, 17.0)


def test_zone_values_use_ratios(params):
    d = FloodDefenses(W=2.0, R=3.0, P=0.0, D=5.0, B=4.0)
    V_w = value_after_withdrawal(params, 2.0)
    values = zone_values(params, d)
    assert values[0] == 0.0
    assert values[1] == pytest.approx(V_w * 0.95 * 3.0 / 15.0)
    assert values[2] == pytest.approx(V_w * 0.95 * 1.0 / 15.0)
    assert values[3] == pytest.approx(V_w * 1.1 * 5.0 / 15.0)
    assert values[4] == pytest.approx(V_w * 6.0 / 15.0)


def test_withdrawal_at_city_peak_rejected(params):
    with pytest.raises(ValueError):
        partition(params, FloodDefenses(W=params.H_city))


_GRID = [0.0, 1.5, 4.0, 7.0]


@pytest.mark.parametrize("W, R, D, B", list(itertools.product(_GRID, repeat=4)))
def test_bands_contiguous_and_cover_city(params, unit_ratio_params, W, R, D, B):
    """Every feasible lever vector tiles [0, H_city] with ordered bands."""
    d = FloodDefenses(W=W, R=R, P=0.3, D=D, B=B)
    if not is_feasible(d, params):
        return

    zones = partition(params, d)
    assert zones[0].low == 0.0
    assert zones[4].high == params.H_city
    for lower, upper in zip(zones.zones, zones.zones[1:]):
        assert lower.high == upper.low
    for zone in zones:
        assert zone.high >= zone.low
        assert zone.value >= 0.0
    assert sum(z.height for z in zones) == pytest.approx(params.H_city)

    # With unit ratios the partition conserves the value after withdrawal
    unit_zones = partition(unit_ratio_params, d)
    assert unit_zones.total_value == pytest.approx(
        value_after_withdrawal(unit_ratio_params, W)
    )
