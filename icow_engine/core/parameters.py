"""
City parameters for the iCOW (Island City On a Wedge) valuation engine.

All parameters are immutable, named constants. The city is modelled as a
wedge rising from the seawall to its peak elevation H_city over a depth
D_city, with coastline length W_city. The defaults reproduce the reference
configuration used for cross-implementation regression testing:

  - d_thresh = V_city / 375       (catastrophic damage threshold, $4e9)
  - H_city > H_seawall            (seawall cannot overtop the city)
  - f_runup >= 1                  (run-up can only amplify surge)
  - gamma_thresh >= 1             (threshold penalty never sub-linear)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict


@dataclass(frozen=True)
class CityParameters:
    """Immutable, fully validated city parameters.

    Field names follow the published notation so that equations read the
    same in code and on paper.
    """

    # ------------------------------------------------------------------ #
    # Geometry                                                             #
    # ------------------------------------------------------------------ #
    V_city: float = 1.5e12
    """Initial city value ($, > 0)."""

    H_bldg: float = 30.0
    """Building height (m, > 0)."""

    H_city: float = 17.0
    """City peak elevation above the seawall base (m, > H_seawall)."""

    D_city: float = 2000.0
    """City depth from seawall to peak (m, > 0)."""

    W_city: float = 43000.0
    """City coastline length (m, > 0)."""

    H_seawall: float = 1.75
    """Existing seawall height (m, >= 0)."""

    # ------------------------------------------------------------------ #
    # Dike                                                                 #
    # ------------------------------------------------------------------ #
    D_startup: float = 2.0
    """Startup height equivalent for fixed dike costs (m, >= 0)."""

    w_d: float = 3.0
    """Dike top width (m, >= 0)."""

    s_dike: float = 0.5
    """Dike side slope, horizontal run per unit rise (> 0)."""

    c_d: float = 10.0
    """Dike construction cost per unit volume ($/m^3, >= 0)."""

    # ------------------------------------------------------------------ #
    # Zone value ratios                                                    #
    # ------------------------------------------------------------------ #
    r_prot: float = 1.1
    """Value density multiplier for the dike-protected zone (> 0)."""

    r_unprot: float = 0.95
    """Value density multiplier for zones below the dike base (> 0)."""

    # ------------------------------------------------------------------ #
    # Withdrawal                                                           #
    # ------------------------------------------------------------------ #
    f_w: float = 1.0
    """Withdrawal cost factor (> 0)."""

    f_l: float = 0.01
    """Fraction of withdrawn value that leaves rather than relocates [0, 1]."""

    # ------------------------------------------------------------------ #
    # Resistance cost curve                                                #
    # f_cR = f_adj * (f_lin*P + f_exp*max(0, P - t_exp)/(1 - P))          #
    # ------------------------------------------------------------------ #
    f_adj: float = 1.25
    """Resistance cost adjustment factor (> 0)."""

    f_lin: float = 0.35
    """Linear resistance cost factor (>= 0)."""

    f_exp: float = 0.115
    """Exponential resistance cost factor (>= 0)."""

    t_exp: float = 0.4
    """Resistance fraction where the exponential term starts [0, 1]."""

    b_basement: float = 3.0
    """Basement depth (m, >= 0)."""

    # ------------------------------------------------------------------ #
    # Damage                                                               #
    # ------------------------------------------------------------------ #
    f_damage: float = 0.39
    """Fraction of inundated value lost per flood [0, 1]."""

    f_intact: float = 0.03
    """Damage multiplier for the protected zone when the dike holds [0, 1]."""

    f_failed: float = 1.5
    """Damage multiplier for the protected zone when the dike fails (> 0)."""

    t_fail: float = 0.95
    """Surge-to-dike-height ratio at which failure becomes possible [0, 1]."""

    p_min: float = 0.05
    """Floor on dike failure probability [0, 1]."""

    f_runup: float = 1.1
    """Wave run-up amplification of raw surge (>= 1)."""

    # ------------------------------------------------------------------ #
    # Threshold penalty                                                    #
    # D_total += (f_thresh * (D_total - d_thresh))^gamma_thresh           #
    # ------------------------------------------------------------------ #
    d_thresh: float = 4.0e9
    """Catastrophic damage threshold ($, >= 0)."""

    f_thresh: float = 1.0
    """Threshold excess multiplier (> 0)."""

    gamma_thresh: float = 1.01
    """Threshold excess exponent (>= 1)."""

    def __post_init__(self) -> None:
        """Validate every parameter against its admissible range."""
        strictly_positive = {
            "V_city": self.V_city,
            "H_bldg": self.H_bldg,
            "H_city": self.H_city,
            "D_city": self.D_city,
            "W_city": self.W_city,
            "s_dike": self.s_dike,
            "f_w": self.f_w,
            "f_adj": self.f_adj,
            "r_prot": self.r_prot,
            "r_unprot": self.r_unprot,
            "f_failed": self.f_failed,
            "f_thresh": self.f_thresh,
        }
        for name, value in strictly_positive.items():
            if value <= 0.0:
                raise ValueError(f"{name} must be > 0, got {value}")

        non_negative = {
            "H_seawall": self.H_seawall,
            "D_startup": self.D_startup,
            "w_d": self.w_d,
            "c_d": self.c_d,
            "b_basement": self.b_basement,
            "d_thresh": self.d_thresh,
            "f_lin": self.f_lin,
            "f_exp": self.f_exp,
        }
        for name, value in non_negative.items():
            if value < 0.0:
                raise ValueError(f"{name} must be >= 0, got {value}")

        unit_interval = {
            "f_l": self.f_l,
            "f_damage": self.f_damage,
            "t_fail": self.t_fail,
            "p_min": self.p_min,
            "t_exp": self.t_exp,
            "f_intact": self.f_intact,
        }
        for name, value in unit_interval.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")

        if self.gamma_thresh < 1.0:
            raise ValueError(
                f"gamma_thresh must be >= 1, got {self.gamma_thresh}"
            )

        if self.f_runup < 1.0:
            raise ValueError(f"f_runup must be >= 1, got {self.f_runup}")

        if self.H_city <= self.H_seawall:
            raise ValueError(
                f"H_city ({self.H_city}) must exceed H_seawall ({self.H_seawall})"
            )

    # ------------------------------------------------------------------ #
    # Derived quantities                                                   #
    # ------------------------------------------------------------------ #

    @property
    def city_slope(self) -> float:
        """Rise over run of the city wedge (H_city / D_city)."""
        return self.H_city / self.D_city

    def with_updates(self, **kwargs: float) -> "CityParameters":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **kwargs)

    # ------------------------------------------------------------------ #
    # Serialisation                                                        #
    # ------------------------------------------------------------------ #

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CityParameters":
        """Construct from a dictionary, rejecting unknown keys.

        Args:
            data: Mapping of field name to value. Missing fields keep their
                  defaults.

        Raises:
            ValueError: If the mapping contains an unknown field name.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown CityParameters fields: {unknown}")
        return cls(**{k: float(v) for k, v in data.items()})
