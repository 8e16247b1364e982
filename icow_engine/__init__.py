"""
icow_engine — Island City On a Wedge flood-defense valuation engine.

Computes the investment cost and flood damage of a coastal city's protective
levers (withdrawal, flood-proofing, dike) under uncertain storm surge, and
aggregates them into discounted multi-year outcomes for policy search.

Quick start
-----------
    from scipy import stats
    from icow_engine import (
        CityParameters, DistributionalForcing, EADScenario,
        SimulationRunner, StaticPolicy,
    )

    params = CityParameters()
    forcing = DistributionalForcing.stationary(stats.norm(4.0, 1.0), n_years=50)
    scenario = EADScenario(forcing, discount_rate=0.04)

    outcome, records = SimulationRunner(params).run(
        StaticPolicy(a_frac=0.3, b_frac=0.5), scenario
    )
    print(outcome.total_cost)

    import gymnasium as gym
    env = gym.make("CoastalDefense-v0")          # via gymnasium registry

Public API
----------
    CityParameters      — immutable parameter pack
    FloodDefenses       — five-lever decision vector
    partition           — five-zone elevation partition
    investment_cost     — withdrawal + resistance + dike cost
    expected_damage_given_surge — damage averaged over dike failure
    QuadratureIntegrator / MonteCarloIntegrator — hazard integrators
    annual_step / compute_outcome — yearly transition and discounting
    SimulationRunner    — high-level run driver
    StaticPolicy        — budget-fraction build-once policy
    CoastalDefenseEnv   — Gymnasium environment
"""

from __future__ import annotations

import gymnasium as gym

from .core.parameters import CityParameters
from .core.defenses import FloodDefenses, is_feasible
from .core.zones import CityZones, Zone, ZoneKind, partition
from .core.costs import investment_cost
from .core.damage import (
    dike_failure_probability,
    effective_surge,
    expected_damage_given_surge,
    total_event_damage,
)
from .systems.surge import (
    DistributionalForcing,
    EADScenario,
    PointMass,
    StochasticForcing,
    StochasticScenario,
    gev_distribution,
)
from .systems.hazard import (
    MonteCarloIntegrator,
    QuadratureIntegrator,
    integrate_expected_damage,
    stochastic_damage,
)
from .simulation.annual_step import (
    Outcome,
    SimulationState,
    StepRecord,
    annual_step,
    compute_outcome,
    total_cost,
)
from .simulation.interface import SimulationModel, simulate
from .simulation.models import EADSimulation, StochasticSimulation
from .simulation.runner import SimulationRunner, evaluate_batch
from .agents.policies import Policy, ScheduledPolicy, StaticPolicy
from .agents.coastal_env import CoastalDefenseEnv
from .analysis.logging import StepLogger
from .analysis.convergence import integrator_convergence

# ── Gymnasium registration ───────────────────────────────────────────────── #
if "CoastalDefense-v0" not in gym.registry:
    gym.register(
        id="CoastalDefense-v0",
        entry_point="icow_engine.agents.coastal_env:CoastalDefenseEnv",
        kwargs={},
    )

__version__ = "1.0.0"

__all__ = [
    "CityParameters",
    "FloodDefenses",
    "is_feasible",
    "CityZones",
    "Zone",
    "ZoneKind",
    "partition",
    "investment_cost",
    "dike_failure_probability",
    "effective_surge",
    "expected_damage_given_surge",
    "total_event_damage",
    "DistributionalForcing",
    "EADScenario",
    "PointMass",
    "StochasticForcing",
    "StochasticScenario",
    "gev_distribution",
    "MonteCarloIntegrator",
    "QuadratureIntegrator",
    "integrate_expected_damage",
    "stochastic_damage",
    "Outcome",
    "SimulationState",
    "StepRecord",
    "annual_step",
    "compute_outcome",
    "total_cost",
    "SimulationModel",
    "simulate",
    "EADSimulation",
    "StochasticSimulation",
    "SimulationRunner",
    "evaluate_batch",
    "Policy",
    "ScheduledPolicy",
    "StaticPolicy",
    "CoastalDefenseEnv",
    "StepLogger",
    "integrator_convergence",
    "__version__",
]
