"""
Flood damage engine.

Damage for a single surge event is accumulated zone by zone:

  1. Effective surge:  h_eff = 0 if h_raw <= H_seawall
                       h_eff = h_raw · f_runup − H_seawall otherwise
  2. Base zone damage (wash-over model), with wash = max(0, h_eff − z_low)
     and zone height Δz = z_high − z_low:
        partial  (wash < Δz):  value · wash·(wash/2 + b) / (H_bldg·Δz) · f_damage
        full     (wash >= Δz): value · (b + Δz/2) / H_bldg · f_damage
  3. Zone modifiers:
        WITHDRAWN       → 0
        RESISTANT       × (1 − P)
        DIKE_PROTECTED  × f_failed if the dike failed else f_intact
  4. Threshold penalty: if Σ > d_thresh, add (f_thresh · (Σ − d_thresh))^γ

Dike failure probability is a piecewise ramp in the surge height above the
dike base. The expected damage for a known surge integrates over the dike
state analytically, so no sampling is needed for that inner expectation.
"""

from __future__ import annotations

from .defenses import FloodDefenses
from .parameters import CityParameters
from .zones import CityZones, Zone, ZoneKind, partition


def effective_surge(params: CityParameters, h_raw: float) -> float:
    """Surge height inside the city after seawall blocking and wave run-up (m)."""
    if h_raw <= params.H_seawall:
        return 0.0
    return h_raw * params.f_runup - params.H_seawall


def dike_failure_probability(
    h_surge: float,
    D: float,
    t_fail: float,
    p_min: float,
) -> float:
    """Probability that the dike fails for a surge h_surge above its base.

    p = p_min                            h < t·D
    p = (h − t·D) / (D·(1 − t))          t·D <= h < D
    p = 1                                h >= D

    With no dike (D == 0) failure is certain for any positive surge. With
    t >= 1 the ramp collapses to a step at D.

    Args:
        h_surge: Surge height above the dike base (m, >= 0).
        D:       Dike height (m).
        t_fail:  Failure onset ratio.
        p_min:   Failure probability floor.

    Returns:
        Probability in [p_min, 1] (or exactly 0 < p <= 1 for D == 0).
    """
    if D == 0.0:
        return 1.0 if h_surge > 0.0 else p_min

    if t_fail >= 1.0:
        return 1.0 if h_surge >= D else p_min

    onset = t_fail * D
    if h_surge < onset:
        return p_min
    if h_surge < D:
        # Never drop below the floor at the foot of the ramp
        return max(p_min, (h_surge - onset) / (D * (1.0 - t_fail)))
    return 1.0


def base_zone_damage(
    zone: Zone,
    h_surge: float,
    params: CityParameters,
) -> float:
    """Damage to one zone before modifiers ($).

    Returns 0 when the zone is not reached, holds no value, or has no height.
    """
    wash = max(0.0, h_surge - zone.low)
    zone_height = zone.height
    if wash <= 0.0 or zone.value <= 0.0 or zone_height <= 0.0:
        return 0.0

    if wash < zone_height:
        flood_fraction = (
            wash * (wash / 2.0 + params.b_basement) / (params.H_bldg * zone_height)
        )
    else:
        flood_fraction = (params.b_basement + zone_height / 2.0) / params.H_bldg

    return zone.value * flood_fraction * params.f_damage


def zone_damage(
    zone: Zone,
    h_surge: float,
    params: CityParameters,
    P: float,
    dike_failed: bool,
) -> float:
    """Damage to one zone including its kind-specific modifier ($)."""
    if zone.kind == ZoneKind.WITHDRAWN:
        return 0.0

    damage = base_zone_damage(zone, h_surge, params)
    if zone.kind == ZoneKind.RESISTANT:
        return damage * (1.0 - P)
    if zone.kind == ZoneKind.DIKE_PROTECTED:
        return damage * (params.f_failed if dike_failed else params.f_intact)
    return damage


def threshold_penalty(params: CityParameters, damage: float) -> float:
    """Accelerating extra cost once damage exceeds d_thresh ($)."""
    if damage <= params.d_thresh:
        return 0.0
    excess = damage - params.d_thresh
    return (params.f_thresh * excess) ** params.gamma_thresh


def total_event_damage(
    zones: CityZones,
    h_surge: float,
    params: CityParameters,
    P: float,
    dike_failed: bool,
) -> float:
    """Total damage for one surge event across all five zones ($).

    Args:
        zones:       City partition for the current levers.
        h_surge:     Effective surge height (m).
        params:      City parameters.
        P:           Resistance fraction.
        dike_failed: Dike state for this event.

    Returns:
        Summed zone damage plus threshold penalty.
    """
    total = sum(zone_damage(z, h_surge, params, P, dike_failed) for z in zones)
    return total + threshold_penalty(params, total)


def expected_damage_given_surge(
    h_raw: float,
    zones: CityZones,
    params: CityParameters,
    defenses: FloodDefenses,
) -> float:
    """Expected damage for a known raw surge, averaged over dike failure ($).

    E[damage | h] = p_fail · damage_failed + (1 − p_fail) · damage_intact

    Args:
        h_raw:    Raw storm surge height (m).
        zones:    Partition for ``defenses`` (passed in so integrators can
                  reuse it across many surge evaluations).
        params:   City parameters.
        defenses: Lever vector.

    Returns:
        Expected damage in $.
    """
    h_eff = effective_surge(params, h_raw)
    h_at_dike = max(0.0, h_eff - defenses.dike_base)
    p_fail = dike_failure_probability(
        h_at_dike, defenses.D, params.t_fail, params.p_min
    )

    d_intact = total_event_damage(zones, h_eff, params, defenses.P, False)
    d_failed = total_event_damage(zones, h_eff, params, defenses.P, True)
    return p_fail * d_failed + (1.0 - p_fail) * d_intact


def event_damage(
    h_raw: float,
    params: CityParameters,
    defenses: FloodDefenses,
    dike_failed: bool,
) -> float:
    """Realised damage for a raw surge and a known dike state ($)."""
    zones = partition(params, defenses)
    h_eff = effective_surge(params, h_raw)
    return total_event_damage(zones, h_eff, params, defenses.P, dike_failed)
