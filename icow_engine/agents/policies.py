"""
Policy adapters.

A policy proposes a lever vector each year; the annual step takes the
componentwise max with what is already built, so proposals can never tear
protection down.

StaticPolicy uses a budget-fraction (stick-breaking) encoding so that any
point of the unit box maps to levers that respect the elevation budget:

    A = a_frac · H_city          total height budget
    W = w_frac · A               withdrawal takes a share of it
    B = b_frac · (A − W)         dike base takes a share of the rest
    D = A − W − B                dike height takes what remains
    R = r_frac · H_city          resistance is independent of the budget
    P ∈ [0, 0.99]                resistance fraction

It builds everything in year 1 and proposes zeros afterwards. A budget of
a_frac = 1 with w_frac = 1 puts W at H_city and is therefore infeasible.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from ..core.defenses import FloodDefenses
from ..core.parameters import CityParameters
from ..simulation.annual_step import SimulationState

# Upper bound on the resistance fraction a policy may request
MAX_RESISTANCE_FRACTION: float = 0.99


class Policy(ABC):
    """Yearly lever proposal."""

    @abstractmethod
    def action(
        self,
        state: SimulationState,
        year: int,
        params: CityParameters,
    ) -> FloodDefenses:
        """Levers proposed for a 1-based ``year`` given the built ``state``."""


@dataclass(frozen=True)
class StaticPolicy(Policy):
    """Build-once policy in budget-fraction form.

    Attributes:
        a_frac: Total height budget as a fraction of H_city [0, 1].
        w_frac: Withdrawal share of the budget [0, 1].
        b_frac: Dike-base share of the budget left after withdrawal [0, 1].
        r_frac: Resistance height as a fraction of H_city [0, 1].
        P:      Resistance fraction [0, 0.99].
    """

    a_frac: float = 0.0
    w_frac: float = 0.0
    b_frac: float = 0.0
    r_frac: float = 0.0
    P: float = 0.0

    def __post_init__(self) -> None:
        for name in ("a_frac", "w_frac", "b_frac", "r_frac"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"StaticPolicy.{name} must be in [0, 1], got {value}")
        if not 0.0 <= self.P <= MAX_RESISTANCE_FRACTION:
            raise ValueError(
                f"StaticPolicy.P must be in [0, {MAX_RESISTANCE_FRACTION}], got {self.P}"
            )

    def to_defenses(self, params: CityParameters) -> FloodDefenses:
        """Decode the fractions into absolute levers for this city."""
        H = params.H_city
        A = self.a_frac * H
        W = self.w_frac * A
        remaining = A - W
        B = self.b_frac * remaining
        D = remaining - B
        return FloodDefenses(W=W, R=self.r_frac * H, P=self.P, D=max(0.0, D), B=B)

    def action(
        self,
        state: SimulationState,
        year: int,
        params: CityParameters,
    ) -> FloodDefenses:
        if year == 1:
            return self.to_defenses(params)
        return FloodDefenses.zero()

    # ------------------------------------------------------------------ #
    # Optimizer interop                                                    #
    # ------------------------------------------------------------------ #

    @staticmethod
    def bounds() -> Tuple[Tuple[float, float], ...]:
        """Box bounds of the parameter vector, in ``to_vector`` order."""
        return ((0.0, 1.0),) * 4 + ((0.0, MAX_RESISTANCE_FRACTION),)

    def to_vector(self) -> NDArray[np.float64]:
        return np.array(
            [self.a_frac, self.w_frac, self.b_frac, self.r_frac, self.P],
            dtype=np.float64,
        )

    @classmethod
    def from_vector(cls, vec: Sequence[float]) -> "StaticPolicy":
        """Build from a length-5 vector, clipping each entry into its bounds."""
        arr = np.asarray(vec, dtype=np.float64)
        if arr.shape != (5,):
            raise ValueError(f"StaticPolicy.from_vector expects shape (5,), got {arr.shape}")
        lows, highs = zip(*cls.bounds())
        arr = np.clip(arr, lows, highs)
        return cls(*(float(x) for x in arr))


@dataclass(frozen=True)
class ScheduledPolicy(Policy):
    """Raw lever vectors proposed in specific years, zeros elsewhere.

    Attributes:
        schedule: Mapping of 1-based year to proposed levers.
    """

    schedule: Mapping[int, FloodDefenses] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for year in self.schedule:
            if year < 1:
                raise ValueError(f"ScheduledPolicy years must be >= 1, got {year}")
        object.__setattr__(self, "schedule", dict(self.schedule))

    def action(
        self,
        state: SimulationState,
        year: int,
        params: CityParameters,
    ) -> FloodDefenses:
        return self.schedule.get(year, FloodDefenses.zero())

    def to_dict(self) -> Dict[int, Dict[str, float]]:
        return {year: d.to_dict() for year, d in sorted(self.schedule.items())}
