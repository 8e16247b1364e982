"""
Simulation runner.

Provides SimulationRunner, a high-level orchestrator that builds the model
matching a scenario, drives the yearly loop through the five hooks and
collects the step records, plus evaluate_batch for policy × scenario grids.

Usage:
    from scipy import stats
    from icow_engine.core.parameters import CityParameters
    from icow_engine.agents.policies import StaticPolicy
    from icow_engine.systems.surge import DistributionalForcing, EADScenario
    from icow_engine.simulation.runner import SimulationRunner

    params = CityParameters()
    forcing = DistributionalForcing.stationary(stats.norm(4.0, 1.0), n_years=50)
    scenario = EADScenario(forcing, discount_rate=0.04)

    runner = SimulationRunner(params=params)
    outcome, records = runner.run(StaticPolicy(a_frac=0.3, b_frac=0.5), scenario)

Each run owns its random source. In a batch every (policy, scenario) pair
gets an independent child of one SeedSequence, so results do not depend on
evaluation order or on the number of worker processes.
"""

from __future__ import annotations

import concurrent.futures
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.parameters import CityParameters
from .annual_step import Outcome, StepRecord
from .interface import StepHook, simulate
from .models import build_model

logger = logging.getLogger("icow_engine.runner")


class SimulationRunner:
    """Runs one policy against one scenario.

    Attributes:
        params: City parameters shared by every run.
    """

    def __init__(self, params: Optional[CityParameters] = None) -> None:
        """Initialise the runner.

        Args:
            params: City parameters (defaults to CityParameters()).
        """
        self.params: CityParameters = (
            params if params is not None else CityParameters()
        )
        self._post_hooks: List[StepHook] = []

    def register_post_hook(self, hook: StepHook) -> None:
        """Call ``hook(state_before, state_after, record)`` after every year."""
        self._post_hooks.append(hook)

    def run(
        self,
        policy,
        scenario,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> Tuple[Outcome, List[StepRecord]]:
        """Simulate every year of the scenario.

        Args:
            policy:   Policy proposing levers each year.
            scenario: EADScenario or StochasticScenario.
            seed:     Seed for a fresh Generator when ``rng`` is None.
            rng:      Random source owned by this run.

        Returns:
            (outcome, records) with one record per year.
        """
        model = build_model(self.params, scenario)
        outcome, records = simulate(
            model, policy, rng=rng, seed=seed, post_hooks=self._post_hooks
        )
        infeasible = sum(1 for r in records if not r.feasible)
        logger.info(
            "Simulated %d years: investment=%.4g damage=%.4g total=%.4g%s",
            len(records),
            outcome.investment,
            outcome.damage,
            outcome.total_cost,
            f" ({infeasible} infeasible years)" if infeasible else "",
        )
        return outcome, records

    def run_headless(
        self,
        policy,
        scenario,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> Outcome:
        """Run and return only the discounted outcome."""
        outcome, _ = self.run(policy, scenario, seed=seed, rng=rng)
        return outcome


def _evaluate_one(
    task: Tuple[CityParameters, object, object, np.random.SeedSequence],
) -> Outcome:
    params, policy, scenario, seed_seq = task
    model = build_model(params, scenario)
    outcome, _ = simulate(model, policy, rng=np.random.default_rng(seed_seq))
    return outcome


def evaluate_batch(
    params: CityParameters,
    policies: Sequence,
    scenarios: Sequence,
    seed: Optional[int] = None,
    max_workers: Optional[int] = 1,
) -> List[List[Outcome]]:
    """Evaluate every policy against every scenario.

    Args:
        params:      City parameters.
        policies:    Policies to evaluate.
        scenarios:   Scenarios to evaluate each policy on.
        seed:        Root seed; each pair receives an independent child.
        max_workers: Worker processes; 1 runs in-process, None uses all CPUs.

    Returns:
        Nested list ``outcomes[i][j]`` for policy i on scenario j.
    """
    n_pairs = len(policies) * len(scenarios)
    children = np.random.SeedSequence(seed).spawn(n_pairs)
    tasks = [
        (params, policy, scenario, children[i * len(scenarios) + j])
        for i, policy in enumerate(policies)
        for j, scenario in enumerate(scenarios)
    ]

    if max_workers == 1:
        flat = [_evaluate_one(task) for task in tasks]
    else:
        with concurrent.futures.ProcessPoolExecutor(max_workers=max_workers) as executor:
            flat = list(executor.map(_evaluate_one, tasks))

    logger.info(
        "Evaluated %d policies x %d scenarios", len(policies), len(scenarios)
    )
    return [
        flat[i * len(scenarios):(i + 1) * len(scenarios)]
        for i in range(len(policies))
    ]
