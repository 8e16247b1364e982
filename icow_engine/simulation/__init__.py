"""Annual step, orchestration hooks, models and runners."""
from .annual_step import (
    Outcome,
    SimulationState,
    StepRecord,
    annual_step,
    apply_discount,
    compute_outcome,
    total_cost,
)
from .interface import SimulationModel, simulate
from .models import EADSimulation, StochasticSimulation, build_model
from .runner import SimulationRunner, evaluate_batch

__all__ = [
    "Outcome",
    "SimulationState",
    "StepRecord",
    "annual_step",
    "apply_discount",
    "compute_outcome",
    "total_cost",
    "SimulationModel",
    "simulate",
    "EADSimulation",
    "StochasticSimulation",
    "build_model",
    "SimulationRunner",
    "evaluate_batch",
]
