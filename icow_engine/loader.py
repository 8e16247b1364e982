"""
loader.py — YAML configuration loader for iCOW simulations.

A config file has four optional sections:

    city:        overrides for CityParameters fields
    surge:       annual surge distribution (gev | normal | point)
    simulation:  mode (ead | stochastic), n_years, discount_rate, seed,
                 integrator settings, n_scenarios / scenario (stochastic)
    policy:      StaticPolicy fractions

Public API:
    load_config(path)              -> raw config dict
    build_parameters(config)       -> CityParameters
    build_surge_distribution(cfg)  -> frozen distribution
    build_integrator(config)       -> QuadratureIntegrator | MonteCarloIntegrator
    build_scenario(config)         -> EADScenario | StochasticScenario
    build_policy(config)           -> StaticPolicy
    load_simulation(path)          -> SimulationConfig
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from scipy import stats

from .agents.policies import StaticPolicy
from .core.parameters import CityParameters
from .systems.hazard import Integrator, MonteCarloIntegrator, QuadratureIntegrator
from .systems.surge import (
    DistributionalForcing,
    EADScenario,
    PointMass,
    StochasticForcing,
    StochasticScenario,
    SurgeDistribution,
    gev_distribution,
)

logger = logging.getLogger("icow_engine.loader")

_SECTIONS = ("city", "surge", "simulation", "policy")
_MODES = ("ead", "stochastic")


# ─────────────────────────────────────────────────────────────────────────── #
# YAML loading + validation                                                    #
# ─────────────────────────────────────────────────────────────────────────── #

def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load and validate a simulation configuration YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path.resolve()}")

    with open(path, "r") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config root must be a mapping, got {type(config).__name__}")

    unknown = sorted(set(config) - set(_SECTIONS))
    if unknown:
        raise ValueError(f"Unknown config sections: {unknown}. Allowed: {list(_SECTIONS)}")

    mode = (config.get("simulation") or {}).get("mode", "ead")
    if mode not in _MODES:
        raise ValueError(f"simulation.mode must be one of {_MODES}, got {mode!r}")

    logger.info("Loaded config %s (mode=%s)", path, mode)
    return config


# ─────────────────────────────────────────────────────────────────────────── #
# Section builders                                                             #
# ─────────────────────────────────────────────────────────────────────────── #

def build_parameters(config: Dict[str, Any]) -> CityParameters:
    """CityParameters with the ``city`` section applied over the defaults."""
    return CityParameters.from_dict(config.get("city", {}) or {})


def build_surge_distribution(config: Dict[str, Any]) -> SurgeDistribution:
    """Frozen surge distribution described by the ``surge`` section."""
    surge = dict(config.get("surge", {}) or {})
    kind = surge.pop("distribution", "gev")

    if kind == "gev":
        return gev_distribution(
            float(surge.get("mu", 1.0)),
            float(surge.get("sigma", 0.5)),
            float(surge.get("xi", 0.1)),
        )
    if kind == "normal":
        return stats.norm(loc=float(surge.get("mu", 1.0)), scale=float(surge.get("sigma", 0.5)))
    if kind == "point":
        return PointMass(float(surge["value"]))
    raise ValueError(f"Unknown surge distribution {kind!r}; use gev, normal or point")


def build_integrator(config: Dict[str, Any]) -> Integrator:
    """Integrator described by ``simulation.integrator``."""
    settings = dict((config.get("simulation") or {}).get("integrator") or {})
    method = settings.pop("method", "quad")
    # PyYAML reads exponents without a dot ("1e-6") as strings
    if method == "quad":
        return QuadratureIntegrator(
            rtol=float(settings.get("rtol", 1e-6)),
            tail_probability=float(settings.get("tail_probability", 1e-4)),
            bounds=str(settings.get("bounds", "quantile")),
            limit=int(settings.get("limit", 200)),
        )
    if method == "monte_carlo":
        return MonteCarloIntegrator(n_samples=int(settings.get("n_samples", 1000)))
    raise ValueError(f"Unknown integrator {method!r}; use quad or monte_carlo")


def build_scenario(config: Dict[str, Any], seed: Optional[int] = None):
    """EAD or stochastic scenario described by the config.

    Args:
        config: Parsed config dict.
        seed:   Seed for pre-generating stochastic surges (defaults to
                ``simulation.seed``).
    """
    sim = config.get("simulation", {}) or {}
    n_years = int(sim.get("n_years", 50))
    discount_rate = float(sim.get("discount_rate", 0.0))
    dist = build_surge_distribution(config)

    if sim.get("mode", "ead") == "stochastic":
        forcing = StochasticForcing.from_distribution(
            dist,
            n_scenarios=int(sim.get("n_scenarios", 1)),
            n_years=n_years,
            seed=seed if seed is not None else sim.get("seed"),
        )
        return StochasticScenario(
            forcing,
            scenario=int(sim.get("scenario", 0)),
            discount_rate=discount_rate,
        )

    return EADScenario(
        DistributionalForcing.stationary(dist, n_years),
        discount_rate=discount_rate,
        integrator=build_integrator(config),
    )


def build_policy(config: Dict[str, Any]) -> StaticPolicy:
    """StaticPolicy from the ``policy`` section (zero policy when absent)."""
    return StaticPolicy(**{k: float(v) for k, v in (config.get("policy", {}) or {}).items()})


@dataclass(frozen=True)
class SimulationConfig:
    """Everything needed to run one configured simulation."""

    params: CityParameters
    scenario: Any
    policy: StaticPolicy
    seed: Optional[int]


def load_simulation(config_path: Union[str, Path]) -> SimulationConfig:
    """Load a YAML file and build parameters, scenario and policy."""
    config = load_config(config_path)
    seed = (config.get("simulation", {}) or {}).get("seed")
    return SimulationConfig(
        params=build_parameters(config),
        scenario=build_scenario(config, seed=seed),
        policy=build_policy(config),
        seed=seed,
    )
