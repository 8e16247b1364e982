"""
Dike geometry.

The dike runs along the coastline and wraps up the flanks of the wedge.
Its volume is approximated geometrically from a trapezoidal cross-section:

    h_d         = D + D_startup
    S           = H_city / D_city              (city slope)
    slope_width = h_d / s_dike²
    V_main      = W_city · h_d · (w_d + slope_width)
    V_wings     = (h_d² / S) · (w_d + ⅔ · slope_width)
    V           = V_main + V_wings

The closed form from the original paper subtracts nearly equal terms under
a square root and loses all precision for realistic dike heights; this
approximation is stable and preserves cost ordering.
"""

from __future__ import annotations

from .parameters import CityParameters


def dike_volume(params: CityParameters, D: float) -> float:
    """Dike material volume (m³) for a dike of height D.

    D_startup is added to the height so that even a low dike carries the
    fixed cost of mobilisation.

    Args:
        params: City parameters (H_city, D_city, W_city, D_startup, w_d, s_dike).
        D:      Dike height (m, >= 0).

    Returns:
        Volume in m³.
    """
    if D < 0.0:
        raise ValueError(f"D must be >= 0, got {D}")

    h_d = D + params.D_startup
    slope = params.city_slope
    slope_width = h_d / params.s_dike ** 2

    v_main = params.W_city * h_d * (params.w_d + slope_width)
    v_wings = (h_d ** 2 / slope) * (params.w_d + (2.0 / 3.0) * slope_width)
    return v_main + v_wings
