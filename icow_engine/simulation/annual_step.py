"""
Annual state transition and outcome aggregation.

Per-year pipeline:
  1. Irreversibility: built = max(previous, action), componentwise.
  2. Feasibility: W < H_city and W + B + D <= H_city, otherwise the year
     records infinite investment and damage and the state still advances.
  3. Marginal investment: max(0, C(built) − C(previous)).
  4. Damage: expected (quadrature / Monte Carlo) or realised (stochastic),
     supplied by the caller as a function of the built levers.
  5. Record (investment, damage, levers) for the year.

Aggregation discounts each year at the end of the year:

    Outcome = Σ_t (investment_t, damage_t) / (1 + r)^t,   t = 1 .. T

The step is pure: state is passed in and returned, never mutated.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Sequence, Tuple

from ..core.costs import investment_cost
from ..core.defenses import FloodDefenses, is_feasible
from ..core.parameters import CityParameters

logger = logging.getLogger("icow_engine.simulation")

# Damage for the year given the built (feasible) levers
DamageFunction = Callable[[FloodDefenses], float]


@dataclass(frozen=True)
class SimulationState:
    """Levers built so far. The only quantity threaded across years."""

    defenses: FloodDefenses = field(default_factory=FloodDefenses.zero)


@dataclass(frozen=True)
class StepRecord:
    """Undiscounted flows for one simulated year.

    Attributes:
        year:       1-based year index.
        investment: Marginal investment cost ($, inf if infeasible).
        damage:     Expected or realised damage ($, inf if infeasible).
        W, R, P, D, B: Levers in place after the year's construction.
    """

    year: int
    investment: float
    damage: float
    W: float
    R: float
    P: float
    D: float
    B: float

    @property
    def feasible(self) -> bool:
        return math.isfinite(self.investment) and math.isfinite(self.damage)

    @property
    def defenses(self) -> FloodDefenses:
        return FloodDefenses(W=self.W, R=self.R, P=self.P, D=self.D, B=self.B)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "investment": self.investment,
            "damage": self.damage,
            "W": self.W,
            "R": self.R,
            "P": self.P,
            "D": self.D,
            "B": self.B,
        }


@dataclass(frozen=True)
class Outcome:
    """Discounted totals over the horizon.

    Attributes:
        investment: Present value of investment ($).
        damage:     Present value of damage ($).
    """

    investment: float
    damage: float

    @property
    def total_cost(self) -> float:
        """Investment plus damage ($)."""
        return self.investment + self.damage

    def to_dict(self) -> Dict[str, float]:
        return {
            "investment": self.investment,
            "damage": self.damage,
            "total_cost": self.total_cost,
        }


def total_cost(outcome: Outcome) -> float:
    """Scalar objective for policy search: discounted investment + damage."""
    return outcome.total_cost


def _record(year: int, investment: float, damage: float, built: FloodDefenses) -> StepRecord:
    return StepRecord(
        year=year,
        investment=investment,
        damage=damage,
        W=built.W,
        R=built.R,
        P=built.P,
        D=built.D,
        B=built.B,
    )


def annual_step(
    state: SimulationState,
    action: FloodDefenses,
    year: int,
    params: CityParameters,
    damage_fn: DamageFunction,
) -> Tuple[SimulationState, StepRecord]:
    """Advance the city by one year.

    Args:
        state:     Levers built before this year.
        action:    Proposed levers for this year.
        year:      1-based year index.
        params:    City parameters.
        damage_fn: Maps the built levers to the year's damage.

    Returns:
        (next_state, record). Infeasible levers give an infinite record
        rather than an exception.
    """
    built = state.defenses.maximum(action)
    next_state = SimulationState(defenses=built)

    if not is_feasible(built, params):
        logger.debug("Year %d: infeasible levers %s", year, built.to_dict())
        return next_state, _record(year, math.inf, math.inf, built)

    cost = investment_cost(params, built) - investment_cost(params, state.defenses)
    damage = damage_fn(built)
    return next_state, _record(year, max(0.0, cost), damage, built)


def apply_discount(value: float, year: int, discount_rate: float) -> float:
    """End-of-year discounting: value / (1 + r)^year."""
    return value / (1.0 + discount_rate) ** year


def compute_outcome(records: Sequence[StepRecord], discount_rate: float) -> Outcome:
    """Aggregate yearly records into discounted totals.

    Args:
        records:       Step records ordered by year.
        discount_rate: Annual discount rate r (>= 0).

    Returns:
        Outcome with present-value investment and damage.
    """
    if discount_rate < 0.0:
        raise ValueError(f"discount_rate must be >= 0, got {discount_rate}")
    investment = 0.0
    damage = 0.0
    for record in records:
        investment += apply_discount(record.investment, record.year, discount_rate)
        damage += apply_discount(record.damage, record.year, discount_rate)
    return Outcome(investment=investment, damage=damage)
