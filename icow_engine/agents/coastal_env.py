"""
Gymnasium-compatible reinforcement learning environment.

CoastalDefenseEnv lets an agent build protection year by year instead of
committing to a single static plan. Each step is one simulated year.

Observation space:
    Box(0, 1, shape=(6,), float32):
      - built W, R, D, B divided by H_city and the resistance fraction P
        (order W, R, P, D, B)
      - elapsed fraction of the horizon

Action space:
    Box(0, 1, shape=(5,), float32) decoded as StaticPolicy fractions
    (a_frac, w_frac, b_frac, r_frac, P). The proposal is merged with what is
    already built, so protection never decreases.

Reward signal:
    r_t = −(investment_t + damage_t) / (1 + r)^t / V_city

    Damage is realised: one surge is drawn per year from the surge
    distribution and the dike state is sampled from its failure probability.

Episode termination:
    - Levers exceed the elevation budget (reward = −infeasible_penalty)

Truncation:
    - n_years elapsed
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import gymnasium as gym
from gymnasium import spaces
import numpy as np
from numpy.typing import NDArray

from ..core.parameters import CityParameters
from ..simulation.annual_step import (
    SimulationState,
    StepRecord,
    annual_step,
    apply_discount,
)
from ..systems.hazard import stochastic_damage
from ..systems.surge import SurgeDistribution, gev_distribution
from .policies import StaticPolicy

_OBS_DIM: int = 6
_ACTION_DIM: int = 5


class CoastalDefenseEnv(gym.Env):
    """Year-by-year adaptive flood protection.

    Attributes:
        params:             City parameters.
        surge_distribution: Annual maximum surge distribution.
        n_years:            Episode horizon.
        discount_rate:      Annual discount rate for rewards.
        infeasible_penalty: Reward penalty (in units of V_city) for breaking
                            the elevation budget.
    """

    metadata: Dict[str, Any] = {"render_modes": []}

    def __init__(
        self,
        params: Optional[CityParameters] = None,
        surge_distribution: Optional[SurgeDistribution] = None,
        n_years: int = 50,
        discount_rate: float = 0.04,
        infeasible_penalty: float = 10.0,
        seed: Optional[int] = None,
    ) -> None:
        """Initialise the environment.

        Args:
            params:             City parameters (defaults to CityParameters()).
            surge_distribution: Frozen scipy distribution of annual surge
                                (defaults to GEV(μ=1.0, σ=0.5, ξ=0.1)).
            n_years:            Number of years per episode (> 0).
            discount_rate:      Annual discount rate (>= 0).
            infeasible_penalty: Penalty applied on an infeasible step (>= 0).
            seed:               Seed for the surge and dike-failure draws.
        """
        if n_years <= 0:
            raise ValueError(f"n_years must be > 0, got {n_years}")
        if discount_rate < 0.0:
            raise ValueError(f"discount_rate must be >= 0, got {discount_rate}")
        if infeasible_penalty < 0.0:
            raise ValueError(
                f"infeasible_penalty must be >= 0, got {infeasible_penalty}"
            )

        self.params: CityParameters = params if params is not None else CityParameters()
        self.surge_distribution: SurgeDistribution = (
            surge_distribution
            if surge_distribution is not None
            else gev_distribution(1.0, 0.5, 0.1)
        )
        self.n_years = n_years
        self.discount_rate = discount_rate
        self.infeasible_penalty = infeasible_penalty

        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(_OBS_DIM,), dtype=np.float32
        )
        self.action_space = spaces.Box(
            low=0.0, high=1.0, shape=(_ACTION_DIM,), dtype=np.float32
        )

        self._state: SimulationState = SimulationState()
        self._year: int = 0
        self._last_record: Optional[StepRecord] = None
        self._rng: np.random.Generator = np.random.default_rng(seed)

    # ------------------------------------------------------------------ #
    # Core API                                                             #
    # ------------------------------------------------------------------ #

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[NDArray[np.float32], Dict[str, Any]]:
        """Reset to an unprotected city at year 0.

        Args:
            seed: If provided, reseeds the surge and failure draws.
            options: Unused.

        Returns:
            (observation, info_dict)
        """
        super().reset(seed=seed)
        if seed is not None:
            self._rng = np.random.default_rng(seed)

        self._state = SimulationState()
        self._year = 0
        self._last_record = None
        return self._get_obs(), self._get_info()

    def step(
        self,
        action: NDArray[np.float32],
    ) -> Tuple[NDArray[np.float32], float, bool, bool, Dict[str, Any]]:
        """Build, then experience one year of storm surge.

        Args:
            action: Length-5 fraction vector in [0, 1].

        Returns:
            (observation, reward, terminated, truncated, info)
        """
        if self._year >= self.n_years:
            raise RuntimeError("Episode is over; call reset() before step()")

        proposal = StaticPolicy.from_vector(np.asarray(action, dtype=np.float64))
        self._year += 1
        h_raw = float(self.surge_distribution.rvs(random_state=self._rng))

        def damage_fn(built):
            return stochastic_damage(self.params, built, h_raw, self._rng)

        self._state, record = annual_step(
            self._state,
            proposal.to_defenses(self.params),
            self._year,
            self.params,
            damage_fn,
        )
        self._last_record = record

        if record.feasible:
            flow = apply_discount(
                record.investment + record.damage, self._year, self.discount_rate
            )
            reward = -flow / self.params.V_city
            terminated = False
        else:
            reward = -self.infeasible_penalty
            terminated = True

        truncated = not terminated and self._year >= self.n_years
        info = self._get_info()
        info["surge"] = h_raw
        return self._get_obs(), float(reward), terminated, truncated, info

    # ------------------------------------------------------------------ #
    # Helpers                                                              #
    # ------------------------------------------------------------------ #

    def _get_obs(self) -> NDArray[np.float32]:
        d = self._state.defenses
        H = self.params.H_city
        obs = np.array(
            [d.W / H, d.R / H, d.P, d.D / H, d.B / H, self._year / self.n_years],
            dtype=np.float64,
        )
        return np.clip(obs, 0.0, 1.0).astype(np.float32)

    def _get_info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "year": self._year,
            "defenses": self._state.defenses.to_dict(),
        }
        if self._last_record is not None:
            info["investment"] = self._last_record.investment
            info["damage"] = self._last_record.damage
            info["feasible"] = self._last_record.feasible
        return info
