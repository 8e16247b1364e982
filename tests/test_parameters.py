"""Tests for CityParameters validation and serialisation."""

import pytest

from icow_engine.core.parameters import CityParameters


def test_defaults_match_reference_city():
    """Defaults reproduce the reference configuration."""
    p = CityParameters()
    assert p.V_city == 1.5e12
    assert p.H_city == 17.0
    assert p.D_city == 2000.0
    assert p.W_city == 43000.0
    assert p.H_seawall == 1.75
    assert (p.D_startup, p.w_d, p.s_dike, p.c_d) == (2.0, 3.0, 0.5, 10.0)
    assert (p.f_damage, p.f_intact, p.f_failed) == (0.39, 0.03, 1.5)
    assert (p.t_fail, p.p_min, p.f_runup) == (0.95, 0.05, 1.1)
    assert p.d_thresh == pytest.approx(p.V_city / 375)
    assert (p.f_thresh, p.gamma_thresh) == (1.0, 1.01)


@pytest.mark.parametrize(
    "field, value",
    [
        ("V_city", 0.0),
        ("H_bldg", -1.0),
        ("s_dike", 0.0),
        ("f_adj", 0.0),
        ("H_seawall", -0.1),
        ("c_d", -1.0),
        ("f_l", 1.5),
        ("p_min", -0.1),
        ("t_fail", 1.1),
        ("gamma_thresh", 0.9),
        ("f_runup", 0.99),
        ("f_lin", -0.1),
    ],
)
def test_invalid_values_rejected(field, value):
    """Out-of-range values fail at construction."""
    with pytest.raises(ValueError, match=field):
        CityParameters(**{field: value})


def test_city_must_rise_above_seawall():
    """H_city must exceed H_seawall."""
    with pytest.raises(ValueError, match="H_seawall"):
        CityParameters(H_city=1.5, H_seawall=1.75)


def test_round_trip_through_dict():
    """to_dict/from_dict preserve every field."""
    p = CityParameters(H_city=20.0, f_damage=0.5)
    assert CityParameters.from_dict(p.to_dict()) == p


def test_from_dict_rejects_unknown_fields():
    """Typos in config keys are reported, not ignored."""
    with pytest.raises(ValueError, match="H_cty"):
        CityParameters.from_dict({"H_cty": 17.0})


def test_with_updates_validates():
    """Copies are validated like fresh instances."""
    p = CityParameters()
    assert p.with_updates(H_city=18.0).H_city == 18.0
    with pytest.raises(ValueError):
        p.with_updates(f_runup=0.5)


def test_city_slope():
    p = CityParameters()
    assert p.city_slope == pytest.approx(17.0 / 2000.0)
