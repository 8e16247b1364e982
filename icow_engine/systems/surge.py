"""
Storm surge forcing and scenarios.

Two forms of hazard input drive a simulation:

  - DistributionalForcing: one surge-height distribution per year, consumed
    by the expected-annual-damage (EAD) integrators.
  - StochasticForcing: a pre-generated [n_scenarios, n_years] matrix of
    realised surge heights, consumed by the stochastic mode.

Distributions are scipy.stats frozen distributions (anything exposing
``pdf``, ``ppf``, ``rvs`` and ``support``). A certain surge is expressed with
PointMass, which integrators short-circuit to a single evaluation.

GEV parameters follow the hydrology convention (ξ > 0 heavy upper tail),
which is the negative of scipy's ``genextreme`` shape ``c``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from scipy import stats

# Frozen scipy distribution or PointMass
SurgeDistribution = Any


@dataclass(frozen=True)
class PointMass:
    """Degenerate distribution placing all probability on ``value``."""

    value: float

    def ppf(self, q: Union[float, NDArray[np.float64]]) -> Union[float, NDArray[np.float64]]:
        if np.ndim(q) == 0:
            return self.value
        return np.full(np.shape(q), self.value, dtype=np.float64)

    def rvs(
        self,
        size: Union[int, Tuple[int, ...], None] = None,
        random_state: Optional[np.random.Generator] = None,
    ) -> Union[float, NDArray[np.float64]]:
        if size is None:
            return self.value
        return np.full(size, self.value, dtype=np.float64)

    def support(self) -> Tuple[float, float]:
        return (self.value, self.value)

    def mean(self) -> float:
        return self.value

    def std(self) -> float:
        return 0.0


def is_point_mass(dist: SurgeDistribution) -> bool:
    """True for PointMass or plain numbers used as certain surges."""
    return isinstance(dist, (PointMass, int, float))


def point_value(dist: SurgeDistribution) -> float:
    """Surge height of a point mass."""
    if isinstance(dist, PointMass):
        return dist.value
    return float(dist)


def gev_distribution(mu: float, sigma: float, xi: float) -> SurgeDistribution:
    """Frozen GEV distribution for annual maximum surge.

    Args:
        mu:    Location (m).
        sigma: Scale (m, > 0).
        xi:    Shape; ξ > 0 gives a heavy (Fréchet) upper tail.

    Returns:
        scipy.stats.genextreme frozen with c = −ξ.
    """
    if sigma <= 0.0:
        raise ValueError(f"sigma must be > 0, got {sigma}")
    return stats.genextreme(c=-xi, loc=mu, scale=sigma)


def _sea_level_series(sea_level: Optional[Sequence[float]], n_years: int) -> Tuple[float, ...]:
    if sea_level is None:
        return tuple(0.0 for _ in range(n_years))
    series = tuple(float(x) for x in sea_level)
    if len(series) != n_years:
        raise ValueError(
            f"sea_level must have one entry per year ({n_years}), got {len(series)}"
        )
    return series


# --------------------------------------------------------------------------- #
# Forcing                                                                      #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class DistributionalForcing:
    """One surge distribution per simulated year."""

    distributions: Tuple[SurgeDistribution, ...]

    def __post_init__(self) -> None:
        if len(self.distributions) == 0:
            raise ValueError("DistributionalForcing needs at least one distribution")
        object.__setattr__(self, "distributions", tuple(self.distributions))

    @classmethod
    def stationary(cls, dist: SurgeDistribution, n_years: int) -> "DistributionalForcing":
        """Same distribution in every year."""
        if n_years <= 0:
            raise ValueError(f"n_years must be > 0, got {n_years}")
        return cls(distributions=tuple(dist for _ in range(n_years)))

    @property
    def n_years(self) -> int:
        return len(self.distributions)

    def distribution(self, year: int) -> SurgeDistribution:
        """Distribution for a 1-based year index."""
        if not 1 <= year <= self.n_years:
            raise IndexError(f"year {year} out of range [1, {self.n_years}]")
        return self.distributions[year - 1]


@dataclass(frozen=True, eq=False)
class StochasticForcing:
    """Pre-generated surge realisations, shape [n_scenarios, n_years]."""

    surges: NDArray[np.float64]

    def __post_init__(self) -> None:
        surges = np.asarray(self.surges, dtype=np.float64)
        if surges.ndim != 2:
            raise ValueError(
                f"surges must be 2-D [n_scenarios, n_years], got shape {surges.shape}"
            )
        if surges.shape[0] == 0 or surges.shape[1] == 0:
            raise ValueError("StochasticForcing needs at least one scenario and one year")
        surges.setflags(write=False)
        object.__setattr__(self, "surges", surges)

    @classmethod
    def from_distribution(
        cls,
        dist: SurgeDistribution,
        n_scenarios: int,
        n_years: int,
        seed: Optional[int] = None,
    ) -> "StochasticForcing":
        """Sample an i.i.d. surge matrix from a single distribution."""
        rng = np.random.default_rng(seed)
        surges = np.asarray(
            dist.rvs(size=(n_scenarios, n_years), random_state=rng), dtype=np.float64
        )
        return cls(surges=surges)

    @property
    def n_scenarios(self) -> int:
        return int(self.surges.shape[0])

    @property
    def n_years(self) -> int:
        return int(self.surges.shape[1])

    def surge(self, scenario: int, year: int) -> float:
        """Surge for a 0-based scenario and 1-based year."""
        if not 0 <= scenario < self.n_scenarios:
            raise IndexError(
                f"scenario {scenario} out of range [0, {self.n_scenarios})"
            )
        if not 1 <= year <= self.n_years:
            raise IndexError(f"year {year} out of range [1, {self.n_years}]")
        return float(self.surges[scenario, year - 1])


# --------------------------------------------------------------------------- #
# Scenarios                                                                    #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class EADScenario:
    """Expected-annual-damage scenario.

    Attributes:
        forcing:       Per-year surge distributions.
        discount_rate: Annual discount rate r (>= 0).
        integrator:    QuadratureIntegrator or MonteCarloIntegrator; the
                       runner uses quadrature when None.
        sea_level:     Optional per-year offset added to raw surge (m).
    """

    forcing: DistributionalForcing
    discount_rate: float = 0.0
    integrator: Any = None
    sea_level: Optional[Tuple[float, ...]] = None

    def __post_init__(self) -> None:
        if self.discount_rate < 0.0:
            raise ValueError(f"discount_rate must be >= 0, got {self.discount_rate}")
        object.__setattr__(
            self, "sea_level", _sea_level_series(self.sea_level, self.forcing.n_years)
        )

    @property
    def n_years(self) -> int:
        return self.forcing.n_years

    def distribution(self, year: int) -> SurgeDistribution:
        return self.forcing.distribution(year)

    def sea_level_at(self, year: int) -> float:
        if not 1 <= year <= self.n_years:
            raise IndexError(f"year {year} out of range [1, {self.n_years}]")
        return self.sea_level[year - 1]


@dataclass(frozen=True)
class StochasticScenario:
    """Single realised surge path drawn from a StochasticForcing.

    Attributes:
        forcing:       Surge matrix.
        scenario:      0-based row of the matrix to simulate.
        discount_rate: Annual discount rate r (>= 0).
        sea_level:     Optional per-year offset added to raw surge (m).
    """

    forcing: StochasticForcing
    scenario: int = 0
    discount_rate: float = 0.0
    sea_level: Optional[Tuple[float, ...]] = field(default=None)

    def __post_init__(self) -> None:
        if not 0 <= self.scenario < self.forcing.n_scenarios:
            raise IndexError(
                f"scenario {self.scenario} out of range "
                f"[0, {self.forcing.n_scenarios})"
            )
        if self.discount_rate < 0.0:
            raise ValueError(f"discount_rate must be >= 0, got {self.discount_rate}")
        object.__setattr__(
            self, "sea_level", _sea_level_series(self.sea_level, self.forcing.n_years)
        )

    @property
    def n_years(self) -> int:
        return self.forcing.n_years

    def surge(self, year: int) -> float:
        """Raw surge plus sea-level offset for a 1-based year (m)."""
        return self.forcing.surge(self.scenario, year) + self.sea_level[year - 1]
