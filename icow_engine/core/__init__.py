"""Core valuation components: parameters, levers, zones, costs and damage."""
from .parameters import CityParameters
from .defenses import FloodDefenses, is_feasible
from .zones import CityZones, Zone, ZoneKind, partition, zone_boundaries, zone_values
from .geometry import dike_volume
from .costs import (
    dike_cost,
    investment_cost,
    resistance_cost,
    resistance_cost_fraction,
    value_after_withdrawal,
    withdrawal_cost,
)
from .damage import (
    base_zone_damage,
    dike_failure_probability,
    effective_surge,
    event_damage,
    expected_damage_given_surge,
    threshold_penalty,
    total_event_damage,
    zone_damage,
)

__all__ = [
    "CityParameters",
    "FloodDefenses",
    "is_feasible",
    "CityZones",
    "Zone",
    "ZoneKind",
    "partition",
    "zone_boundaries",
    "zone_values",
    "dike_volume",
    "dike_cost",
    "investment_cost",
    "resistance_cost",
    "resistance_cost_fraction",
    "value_after_withdrawal",
    "withdrawal_cost",
    "base_zone_damage",
    "dike_failure_probability",
    "effective_surge",
    "event_damage",
    "expected_damage_given_surge",
    "threshold_penalty",
    "total_event_damage",
    "zone_damage",
]
