"""
Zone partitioning of the city elevation range.

Given levers (W, R, P, D, B) the city [0, H_city] is split into five
contiguous, ordered elevation bands:

  Z0 WITHDRAWN     [0, W)                   relocated, no damage
  Z1 RESISTANT     [W, W + min(R, B))       flood-proofed, below dike base
  Z2 UNPROTECTED   [Z1.high, W + B)         gap between resistance and dike
  Z3 DIKE_PROTECTED[Z2.high, W + B + D)     behind the dike
  Z4 ABOVE_DIKE    [Z3.high, H_city]        above the dike crest

When no dike exists (D == 0 and B == 0) the resistant band extends to the
full resistance height W + R and Z2/Z3 collapse to zero width at its top.

Value after withdrawal V_w = V_city·(1 − f_l·W/H_city) is shared by band
width over the remaining height H_city − W, weighted by r_unprot (Z1, Z2),
r_prot (Z3) and unity (Z4). Without a dike all ratios are unity.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique
from typing import Iterator, List, Tuple

from .costs import value_after_withdrawal
from .defenses import FloodDefenses
from .parameters import CityParameters

N_ZONES: int = 5


@unique
class ZoneKind(IntEnum):
    """The five elevation bands, ordered bottom to top."""

    WITHDRAWN = 0
    RESISTANT = 1
    UNPROTECTED = 2
    DIKE_PROTECTED = 3
    ABOVE_DIKE = 4


@dataclass(frozen=True)
class Zone:
    """One elevation band.

    Attributes:
        kind:  Band type (drives the damage modifier).
        low:   Lower absolute elevation (m).
        high:  Upper absolute elevation (m).
        value: Monetary value located in the band ($, >= 0).
    """

    kind: ZoneKind
    low: float
    high: float
    value: float

    @property
    def height(self) -> float:
        """Band width (m)."""
        return self.high - self.low


@dataclass(frozen=True)
class CityZones:
    """The ordered five-band partition of the city."""

    zones: Tuple[Zone, Zone, Zone, Zone, Zone]

    def __iter__(self) -> Iterator[Zone]:
        return iter(self.zones)

    def __getitem__(self, kind: int) -> Zone:
        return self.zones[kind]

    def __len__(self) -> int:
        return len(self.zones)

    @property
    def total_value(self) -> float:
        """Sum of band values ($)."""
        return sum(z.value for z in self.zones)

    @property
    def bounds(self) -> List[Tuple[float, float]]:
        """Band (low, high) pairs in order."""
        return [(z.low, z.high) for z in self.zones]

    @property
    def values(self) -> List[float]:
        """Band values in order."""
        return [z.value for z in self.zones]


def zone_boundaries(
    params: CityParameters,
    defenses: FloodDefenses,
) -> List[Tuple[float, float]]:
    """Compute the five (low, high) elevation bands.

    Args:
        params:   City parameters (H_city used).
        defenses: Lever vector with W < H_city.

    Returns:
        List of five (low, high) tuples, contiguous and ordered from 0 to H_city.

    Raises:
        ValueError: If W >= H_city.
    """
    H_city = params.H_city
    W, R, B, D = defenses.W, defenses.R, defenses.B, defenses.D
    if W >= H_city:
        raise ValueError(f"W must be < H_city ({H_city}), got {W}")

    z0 = (0.0, W)

    if not defenses.has_dike:
        # Resistance is not capped by a dike base
        top = W + min(R, H_city - W)
        return [z0, (W, top), (top, top), (top, top), (top, H_city)]

    z1 = (W, W + min(R, B))
    z2 = (z1[1], W + B)
    z3 = (z2[1], W + B + D)
    z4 = (z3[1], H_city)
    return [z0, z1, z2, z3, z4]


def zone_values(
    params: CityParameters,
    defenses: FloodDefenses,
) -> List[float]:
    """Compute the monetary value held in each of the five bands.

    Args:
        params:   City parameters.
        defenses: Lever vector with W < H_city.

    Returns:
        List of five non-negative values ($).
    """
    H_city = params.H_city
    W, R, B, D = defenses.W, defenses.R, defenses.B, defenses.D
    if W >= H_city:
        raise ValueError(f"W must be < H_city ({H_city}), got {W}")

    V_w = value_after_withdrawal(params, W)
    remaining = H_city - W

    if not defenses.has_dike:
        R_eff = min(R, remaining)
        return [
            0.0,
            V_w * R_eff / remaining,
            0.0,
            0.0,
            V_w * (remaining - R_eff) / remaining,
        ]

    return [
        0.0,
        V_w * params.r_unprot * min(R, B) / remaining,
        V_w * params.r_unprot * max(0.0, B - R) / remaining,
        V_w * params.r_prot * D / remaining,
        V_w * max(0.0, remaining - B - D) / remaining,
    ]


def partition(params: CityParameters, defenses: FloodDefenses) -> CityZones:
    """Partition the city into five typed, valued elevation bands.

    Args:
        params:   City parameters.
        defenses: Lever vector with W < H_city.

    Returns:
        CityZones with zones ordered WITHDRAWN .. ABOVE_DIKE.
    """
    bounds = zone_boundaries(params, defenses)
    values = zone_values(params, defenses)
    zones = tuple(
        Zone(kind=kind, low=low, high=high, value=value)
        for kind, (low, high), value in zip(ZoneKind, bounds, values)
    )
    return CityZones(zones=zones)
