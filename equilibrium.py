import math
from dataclasses import replace
import numpy as np
from scipy.optimize import brentq

from driver_models import CarFollowingModel


def _noise_free(model: CarFollowingModel) -> CarFollowingModel:
    """Copy of the model without acceleration noise; restrictions stay shared."""
    return replace(model, noise_acc=0.0)


def equilibrium_gap(model: CarFollowingModel, v: float, s_max: float = 1e5) -> float:
    """
    Steady-state gap at which a follower at speed v behind an equally fast,
    non-accelerating leader has zero acceleration.

    Args:
        model: car-following model (IDM, IDM+ or ACC).
        v: common speed of follower and leader [m/s].
        s_max: largest gap searched [m].

    Returns:
        equilibrium gap [m]; s0 at standstill, inf if v is at or above the
        effective desired speed or if the gap would exceed s_max.
    """
    if v <= 0.0:
        return float(model.s0)
    if v >= model.v0_eff():
        return math.inf

    quiet = _noise_free(model)

    def acc_at(s: float) -> float:
        return quiet.calc_acc(s, v, v, 0.0)

    s_lo = max(model.s0, 1e-3)
    s_hi = max(2.0 * quiet.desired_gap(v, v), 1.0)
    while acc_at(s_hi) <= 0.0:
        s_hi *= 2.0
        if s_hi > s_max:
            return math.inf
    if acc_at(s_lo) >= 0.0:
        return float(s_lo)
    return float(brentq(acc_at, s_lo, s_hi, xtol=1e-9))


def fundamental_diagram(
    model: CarFollowingModel,
    length: float,
    num_speeds: int = 100,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Steady-state speed, density and flow of a homogeneous single-lane platoon.

    Args:
        model: car-following model.
        length: vehicle length [m].
        num_speeds: number of equidistant speeds in [0, v0eff).

    Returns:
        tuple of (speed [m/s], density [veh/km], flow [veh/h]), ordered by speed.
    """
    if length <= 0:
        raise ValueError("length must be positive.")
    if num_speeds < 2:
        raise ValueError("num_speeds must be at least 2.")

    v0eff = model.v0_eff()
    speeds = np.linspace(0.0, v0eff, num_speeds, endpoint=False)
    gaps = np.array([equilibrium_gap(model, v) for v in speeds], dtype=float)
    spacing = gaps + length
    density = 1000.0 / spacing
    flow = 3600.0 * speeds / spacing
    return speeds, density, flow


def capacity(speeds: np.ndarray, density: np.ndarray, flow: np.ndarray) -> dict:
    """Maximum flow of a sampled fundamental diagram and where it occurs."""
    flow = np.asarray(flow, dtype=float)
    idx = int(np.argmax(flow))
    return {
        "max_flow": float(flow[idx]),
        "density_at_capacity": float(np.asarray(density)[idx]),
        "speed_at_capacity": float(np.asarray(speeds)[idx]),
        "jam_density": float(np.max(density)),
    }
