"""
Investment cost engine.

Pure cost functions of city parameters and levers:

  Withdrawal       C_W  = V_city · W · f_w / (H_city − W)
  Remaining value  V_w  = V_city · (1 − f_l · W / H_city)
  Resistance frac  f_cR = f_adj · (f_lin·P + f_exp·max(0, P − t_exp)/(1 − P))
  Resistance       C_R  = V_w · f_cR · R·(R/2 + b) / (H_bldg·(H_city − W))      R < B or no dike
                   C_R  = V_w · f_cR · B·(R − B/2 + b) / (H_bldg·(H_city − W))  otherwise
  Dike             C_D  = volume(D) · c_d,   0 when D = 0

Withdrawal and resistance costs diverge as W → H_city and P → 1 respectively;
callers keep W strictly below H_city and P in [0, 1).
"""

from __future__ import annotations

from .defenses import FloodDefenses
from .geometry import dike_volume
from .parameters import CityParameters


def withdrawal_cost(params: CityParameters, W: float) -> float:
    """Cost of relocating everything below elevation W ($).

    Raises:
        ValueError: If W >= H_city.
    """
    if W >= params.H_city:
        raise ValueError(f"W must be < H_city ({params.H_city}), got {W}")
    return params.V_city * W * params.f_w / (params.H_city - W)


def value_after_withdrawal(params: CityParameters, W: float) -> float:
    """City value remaining after withdrawing to elevation W ($)."""
    return params.V_city * (1.0 - params.f_l * W / params.H_city)


def resistance_cost_fraction(params: CityParameters, P: float) -> float:
    """Unitless resistance cost fraction for resistance fraction P.

    Linear below t_exp; a hyperbolic term is added above it, so the
    curve is continuous at P = t_exp and diverges as P → 1.

    Raises:
        ValueError: If P is outside [0, 1).
    """
    if not 0.0 <= P < 1.0:
        raise ValueError(f"P must be in [0, 1), got {P}")
    linear = params.f_lin * P
    exponential = params.f_exp * max(0.0, P - params.t_exp) / (1.0 - P)
    return params.f_adj * (linear + exponential)


def resistance_cost(params: CityParameters, defenses: FloodDefenses) -> float:
    """Cost of flood-proofing buildings up to height R above W ($).

    When a dike exists and R reaches its base, protection is capped at B
    while the construction cost keeps scaling with R. Such levers are
    dominated but still valid.

    Args:
        params:   City parameters.
        defenses: Lever vector with W < H_city and P in [0, 1).

    Returns:
        Resistance cost in $.
    """
    W, R, P, D, B = defenses.W, defenses.R, defenses.P, defenses.D, defenses.B
    if W >= params.H_city:
        raise ValueError(f"W must be < H_city ({params.H_city}), got {W}")

    V_w = value_after_withdrawal(params, W)
    f_cR = resistance_cost_fraction(params, P)
    b = params.b_basement
    denominator = params.H_bldg * (params.H_city - W)

    if R < B or not defenses.has_dike:
        numerator = V_w * f_cR * R * (R / 2.0 + b)
    else:
        numerator = V_w * f_cR * B * (R - B / 2.0 + b)
    return numerator / denominator


def dike_cost(params: CityParameters, D: float) -> float:
    """Cost of building a dike of height D ($). Zero when D == 0."""
    if D == 0.0:
        return 0.0
    return dike_volume(params, D) * params.c_d


def investment_cost(params: CityParameters, defenses: FloodDefenses) -> float:
    """Total cost of the levers: withdrawal + resistance + dike ($).

    Args:
        params:   City parameters.
        defenses: Lever vector with W < H_city.

    Returns:
        Total investment in $.
    """
    return (
        withdrawal_cost(params, defenses.W)
        + resistance_cost(params, defenses)
        + dike_cost(params, defenses.D)
    )
