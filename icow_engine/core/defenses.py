"""
Flood defense levers.

A FloodDefenses value is the five-dimensional decision vector of the city:

  W  — withdrawal elevation (absolute, m)
  R  — resistance (flood-proofing) height above W (m)
  P  — resistance fraction: share of damage prevented in the resistant zone
  D  — dike height (m)
  B  — dike base elevation above W (m)

Derived absolute elevations: dike base = W + B, dike crest = W + B + D.

Levers are immutable; irreversibility across years is expressed by
``maximum``, which returns the componentwise max of two lever vectors.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict

import numpy as np
from numpy.typing import NDArray

from .parameters import CityParameters

# Order of levers in array form
LEVER_NAMES = ("W", "R", "P", "D", "B")


@dataclass(frozen=True)
class FloodDefenses:
    """Immutable lever vector.

    Attributes:
        W: Withdrawal elevation (m, >= 0).
        R: Resistance height relative to W (m, >= 0).
        P: Resistance fraction in [0, 1).
        D: Dike height (m, >= 0).
        B: Dike base elevation relative to W (m, >= 0).
    """

    W: float = 0.0
    R: float = 0.0
    P: float = 0.0
    D: float = 0.0
    B: float = 0.0

    def __post_init__(self) -> None:
        """Reject negative heights and resistance fractions outside [0, 1)."""
        for name in ("W", "R", "D", "B"):
            value = getattr(self, name)
            if not value >= 0.0:
                raise ValueError(f"FloodDefenses.{name} must be >= 0, got {value}")
        if not 0.0 <= self.P < 1.0:
            raise ValueError(f"FloodDefenses.P must be in [0, 1), got {self.P}")

    @classmethod
    def zero(cls) -> "FloodDefenses":
        """No protection in any dimension."""
        return cls()

    # ------------------------------------------------------------------ #
    # Derived elevations                                                   #
    # ------------------------------------------------------------------ #

    @property
    def dike_base(self) -> float:
        """Absolute elevation of the dike base (W + B)."""
        return self.W + self.B

    @property
    def dike_crest(self) -> float:
        """Absolute elevation of the dike crest (W + B + D)."""
        return self.W + self.B + self.D

    @property
    def has_dike(self) -> bool:
        """True unless both dike fields are zero."""
        return not (self.D == 0.0 and self.B == 0.0)

    # ------------------------------------------------------------------ #
    # Irreversibility                                                      #
    # ------------------------------------------------------------------ #

    def maximum(self, other: "FloodDefenses") -> "FloodDefenses":
        """Componentwise max: built protection is never removed."""
        return FloodDefenses(
            W=max(self.W, other.W),
            R=max(self.R, other.R),
            P=max(self.P, other.P),
            D=max(self.D, other.D),
            B=max(self.B, other.B),
        )

    def dominates(self, other: "FloodDefenses") -> bool:
        """True when every lever is at least as large as in ``other``."""
        return all(
            getattr(self, name) >= getattr(other, name) for name in LEVER_NAMES
        )

    def copy_with(self, **kwargs: float) -> "FloodDefenses":
        """Return a copy with specified levers replaced."""
        return replace(self, **kwargs)

    # ------------------------------------------------------------------ #
    # Conversion                                                           #
    # ------------------------------------------------------------------ #

    def to_array(self) -> NDArray[np.float64]:
        """Return levers as a float64 array of shape (5,) in W, R, P, D, B order."""
        return np.array([self.W, self.R, self.P, self.D, self.B], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: NDArray[np.float64]) -> "FloodDefenses":
        """Construct from a length-5 array in W, R, P, D, B order."""
        arr = np.asarray(arr, dtype=np.float64)
        if arr.shape != (5,):
            raise ValueError(
                f"FloodDefenses.from_array expects shape (5,), got {arr.shape}"
            )
        return cls(*(float(x) for x in arr))

    def to_dict(self) -> Dict[str, float]:
        """Serialise to a plain dictionary."""
        return {name: getattr(self, name) for name in LEVER_NAMES}


def is_feasible(defenses: FloodDefenses, params: CityParameters) -> bool:
    """Check the elevation budget of a lever vector.

    Feasible iff W < H_city (strict, withdrawal cost diverges at H_city)
    and the dike crest W + B + D does not exceed H_city.

    Args:
        defenses: Lever vector to check.
        params:   City parameters.

    Returns:
        True if the levers can be built.
    """
    if defenses.W >= params.H_city:
        return False
    return defenses.dike_crest <= params.H_city
