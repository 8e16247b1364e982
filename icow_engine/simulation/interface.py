"""
Orchestration interface.

Any multi-year driver (the bundled ``simulate`` loop, an optimizer's own
loop, a batch evaluator) interacts with a simulation through five hooks:

  initialize(rng)                          -> SimulationState
  time_axis()                              -> iterable of 1-based years
  get_action(policy, state, year)          -> FloodDefenses
  run_timestep(state, action, year, rng)   -> (SimulationState, StepRecord)
  compute_outcome(records)                 -> Outcome

The valuation mathematics never depends on the driver; models only
implement the hooks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..core.defenses import FloodDefenses
from .annual_step import Outcome, SimulationState, StepRecord

# Post-step hook: hook(state_before, state_after, record) -> None
StepHook = Callable[[SimulationState, SimulationState, StepRecord], None]


class SimulationModel(ABC):
    """A simulation exposed through the five orchestration hooks."""

    @abstractmethod
    def initialize(self, rng: np.random.Generator) -> SimulationState:
        """State before the first year."""

    @abstractmethod
    def time_axis(self) -> Iterable[int]:
        """Years to simulate, starting at 1."""

    @abstractmethod
    def get_action(self, policy, state: SimulationState, year: int) -> FloodDefenses:
        """Levers the policy proposes for ``year``."""

    @abstractmethod
    def run_timestep(
        self,
        state: SimulationState,
        action: FloodDefenses,
        year: int,
        rng: np.random.Generator,
    ) -> Tuple[SimulationState, StepRecord]:
        """Advance one year."""

    @abstractmethod
    def compute_outcome(self, records: Sequence[StepRecord]) -> Outcome:
        """Aggregate yearly records."""


def simulate(
    model: SimulationModel,
    policy,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    post_hooks: Sequence[StepHook] = (),
) -> Tuple[Outcome, List[StepRecord]]:
    """Run a model over its full time axis.

    Args:
        model:      Simulation implementing the five hooks.
        policy:     Policy handed to ``model.get_action``.
        rng:        Random source owned by this run.
        seed:       Seed for a fresh Generator when ``rng`` is None.
        post_hooks: Callables invoked after every year.

    Returns:
        (outcome, records)
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    state = model.initialize(rng)
    records: List[StepRecord] = []
    for year in model.time_axis():
        action = model.get_action(policy, state, year)
        next_state, record = model.run_timestep(state, action, year, rng)
        for hook in post_hooks:
            hook(state, next_state, record)
        records.append(record)
        state = next_state

    return model.compute_outcome(records), records
