"""
Concrete simulation models.

EADSimulation charges each year its expected annual damage, integrated over
that year's surge distribution. StochasticSimulation charges the damage of
one realised surge path with an explicit dike-failure draw per event.
Both share the annual step and the discounted aggregation.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import numpy as np

from ..core.defenses import FloodDefenses
from ..core.parameters import CityParameters
from ..systems.hazard import (
    Integrator,
    QuadratureIntegrator,
    integrate_expected_damage,
    stochastic_damage,
)
from ..systems.surge import EADScenario, StochasticScenario
from .annual_step import (
    Outcome,
    SimulationState,
    StepRecord,
    annual_step,
    compute_outcome,
)
from .interface import SimulationModel


class _CityModel(SimulationModel):
    """Hooks shared by both modes."""

    def __init__(self, params: CityParameters, scenario) -> None:
        self.params = params
        self.scenario = scenario

    def initialize(self, rng: np.random.Generator) -> SimulationState:
        return SimulationState()

    def time_axis(self) -> Iterable[int]:
        return range(1, self.scenario.n_years + 1)

    def get_action(self, policy, state: SimulationState, year: int) -> FloodDefenses:
        return policy.action(state, year, self.params)

    def compute_outcome(self, records: Sequence[StepRecord]) -> Outcome:
        return compute_outcome(records, self.scenario.discount_rate)


class EADSimulation(_CityModel):
    """Expected-annual-damage mode.

    Attributes:
        params:     City parameters.
        scenario:   EADScenario with one surge distribution per year.
        integrator: Strategy taken from the scenario, quadrature by default.
    """

    def __init__(self, params: CityParameters, scenario: EADScenario) -> None:
        super().__init__(params, scenario)
        self.integrator: Integrator = (
            scenario.integrator
            if scenario.integrator is not None
            else QuadratureIntegrator()
        )

    def run_timestep(
        self,
        state: SimulationState,
        action: FloodDefenses,
        year: int,
        rng: np.random.Generator,
    ) -> Tuple[SimulationState, StepRecord]:
        dist = self.scenario.distribution(year)
        offset = self.scenario.sea_level_at(year)

        def damage_fn(built: FloodDefenses) -> float:
            return integrate_expected_damage(
                self.integrator, self.params, built, dist, rng, offset
            )

        return annual_step(state, action, year, self.params, damage_fn)


class StochasticSimulation(_CityModel):
    """Realised-surge mode with sampled dike failures."""

    scenario: StochasticScenario

    def run_timestep(
        self,
        state: SimulationState,
        action: FloodDefenses,
        year: int,
        rng: np.random.Generator,
    ) -> Tuple[SimulationState, StepRecord]:
        h_raw = self.scenario.surge(year)

        def damage_fn(built: FloodDefenses) -> float:
            return stochastic_damage(self.params, built, h_raw, rng)

        return annual_step(state, action, year, self.params, damage_fn)


def build_model(params: CityParameters, scenario) -> SimulationModel:
    """Pick the model matching the scenario type."""
    if isinstance(scenario, EADScenario):
        return EADSimulation(params, scenario)
    if isinstance(scenario, StochasticScenario):
        return StochasticSimulation(params, scenario)
    raise TypeError(f"Unknown scenario type: {type(scenario).__name__}")
