from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol, Tuple

import numpy as np

V0_EPS = 1e-5
UNRESTRICTED_SPEED = 1000.0  # sentinel: no restriction
NOISE_ACC = 0.3  # sig_speedFluct = noise_acc * sqrt(t * dt / 12)


def my_tanh(x: float) -> float:
    """Hyperbolic tangent from exponentials, saturated beyond |x| > 50."""
    if x > 50:
        return 1.0
    if x < -50:
        return -1.0
    e2x = math.exp(2.0 * x)
    return (e2x - 1.0) / (e2x + 1.0)


@dataclass
class SpeedRestrictions:
    """Transient speed restrictions shared between the stepper and its models."""

    alpha_v0: float = 1.0  # multiplicator for temporary reduction
    speed_limit: float = UNRESTRICTED_SPEED  # effective limit if below v0
    speed_max: float = UNRESTRICTED_SPEED  # vehicle-imposed cap


class LongitudinalModel(Protocol):
    def calc_acc(self, s: float, v: float, vl: float, al: float = 0.0) -> float:
        ...


@dataclass
class CarFollowingModel:
    """Calibration shared by the IDM-family car-following models.

    Units: v0 [m/s], T [s], s0 [m], a and b [m/s^2].
    """

    v0: float
    T: float
    s0: float
    a: float
    b: float
    b_max: float = 16.0
    noise_acc: float = NOISE_ACC
    restrictions: SpeedRestrictions = field(default_factory=SpeedRestrictions)
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.a <= 0:
            raise ValueError("Maximum acceleration a must be positive.")
        if self.b <= 0:
            raise ValueError("Comfortable deceleration b must be positive.")
        if self.s0 < 0:
            raise ValueError("Minimum gap s0 must be non-negative.")
        if self.T < 0:
            raise ValueError("Time gap T must be non-negative.")
        if self.b_max <= 0:
            raise ValueError("b_max must be positive.")
        if self.noise_acc < 0:
            raise ValueError("noise_acc must be non-negative.")

    @property
    def alpha_v0(self) -> float:
        return self.restrictions.alpha_v0

    @alpha_v0.setter
    def alpha_v0(self, value: float) -> None:
        self.restrictions.alpha_v0 = value

    @property
    def speed_limit(self) -> float:
        return self.restrictions.speed_limit

    @speed_limit.setter
    def speed_limit(self, value: float) -> None:
        self.restrictions.speed_limit = value

    @property
    def speed_max(self) -> float:
        return self.restrictions.speed_max

    @speed_max.setter
    def speed_max(self, value: float) -> None:
        self.restrictions.speed_max = value

    def v0_eff(self) -> float:
        """Valid local desired speed; never cached since restrictions change between calls."""
        r = self.restrictions
        return min(self.v0, r.speed_limit, r.speed_max) * r.alpha_v0

    def acc_noise(self) -> float:
        return self.noise_acc * (self.rng.random() - 0.5)

    def desired_gap(self, v: float, vl: float) -> float:
        return self.s0 + max(0.0, v * self.T + 0.5 * v * (v - vl) / math.sqrt(self.a * self.b))

    def idm_terms(self, s: float, v: float, vl: float) -> Tuple[float, float, float]:
        """Return (v0eff, acc_free, acc_int) of the IDM acceleration law."""
        v0eff = self.v0_eff()
        if v0eff < V0_EPS:
            return v0eff, 0.0, 0.0
        if v < v0eff:
            acc_free = self.a * (1.0 - (v / v0eff) ** 4)
        else:
            acc_free = self.a * (1.0 - v / v0eff)
        sstar = self.desired_gap(v, vl)
        gap = max(s, self.s0)
        acc_int = -self.a * (sstar / gap) ** 2 if gap > 0 else -math.inf
        return v0eff, acc_free, acc_int


__all__ = [
    "CarFollowingModel",
    "LongitudinalModel",
    "SpeedRestrictions",
    "my_tanh",
    "NOISE_ACC",
    "UNRESTRICTED_SPEED",
    "V0_EPS",
]
