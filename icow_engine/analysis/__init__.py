"""Run logging and integrator diagnostics."""
from .logging import StepLogger
from .convergence import integrator_convergence

__all__ = ["StepLogger", "integrator_convergence"]
