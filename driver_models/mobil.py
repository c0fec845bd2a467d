from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

PRIORITY_ACC_THRESHOLD = 0.1


class PriorityRuleDisabledError(RuntimeError):
    """Raised when the priority check is requested but target_lane_prio is off."""


@dataclass(frozen=True)
class LaneChangeEvaluation:
    vrel: float
    acc: float
    acc_new: float
    acc_lag_new: float
    to_right: bool
    b_safe_actual: float
    safe: bool
    dacc: Optional[float]  # None if the safety criterion already failed
    decision: bool


LaneChangeObserver = Callable[[LaneChangeEvaluation], None]


@dataclass
class MOBIL:
    """
    Generalized lane-changing model MOBIL with a speed dependent safe deceleration.

    Args:
        b_safe: safe deceleration [m/s^2] at maximum speed v=v0
        b_safe_max: safe deceleration [m/s^2] at speed zero (generally higher)
        p: politeness factor (0 = egoistic driving)
        b_thr: lane-changing threshold [m/s^2]
        b_bias_right: bias [m/s^2] to the right
        target_lane_prio: vehicles on the target lane have priority
        observer: optional hook receiving every LaneChangeEvaluation
    """

    b_safe: float
    b_safe_max: float
    p: float
    b_thr: float
    b_bias_right: float
    target_lane_prio: bool = False
    observer: Optional[LaneChangeObserver] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.b_safe < 0 or self.b_safe_max < 0:
            raise ValueError("Safe decelerations must be non-negative.")
        if self.p < 0:
            raise ValueError("Politeness p must be non-negative.")

    def safe_deceleration(self, vrel: float) -> float:
        """Interpolate between b_safe_max at standstill and b_safe at v=v0."""
        return vrel * self.b_safe + (1 - vrel) * self.b_safe_max

    def realize_lane_change(
        self,
        vrel: float,
        acc: float,
        acc_new: float,
        acc_lag_new: float,
        to_right: bool,
    ) -> bool:
        """
        Whether an immediate lane change is safe and desired.

        Args:
            vrel: v/v0 of the subject vehicle
            acc: own acceleration on the old lane
            acc_new: prospective own acceleration on the new lane
            acc_lag_new: prospective acceleration of the new follower
            to_right: direction of the prospective change
        """
        b_safe_actual = self.safe_deceleration(vrel)
        if acc_lag_new < -b_safe_actual:
            self._notify(vrel, acc, acc_new, acc_lag_new, to_right, b_safe_actual, False, None, False)
            return False

        bias = self.b_bias_right if to_right else -self.b_bias_right
        dacc = acc_new - acc + self.p * acc_lag_new + bias - self.b_thr
        decision = dacc > 0

        if decision:
            logger.debug(
                "positive MOBIL LC decision: vrel=%.2f b_safe_actual=%.2f acc=%.2f "
                "acc_new=%.2f b_bias_right=%.2f b_thr=%.2f",
                vrel, b_safe_actual, acc, acc_new, self.b_bias_right, self.b_thr,
            )
        self._notify(vrel, acc, acc_new, acc_lag_new, to_right, b_safe_actual, True, dacc, decision)
        return decision

    def respect_priority(self, acc_lag: float, acc_lag_new: float) -> bool:
        """
        Whether merging onto a priority lane would obstruct its lag vehicle.

        In contrast to the safety criterion, the criterion is a small critical
        acceleration change. Only applicable with target_lane_prio set.
        """
        if not self.target_lane_prio:
            raise PriorityRuleDisabledError("respect_priority requires target_lane_prio to be set")
        return acc_lag - acc_lag_new > PRIORITY_ACC_THRESHOLD

    def _notify(self, vrel, acc, acc_new, acc_lag_new, to_right, b_safe_actual, safe, dacc, decision) -> None:
        if self.observer is None:
            return
        self.observer(
            LaneChangeEvaluation(
                vrel=vrel,
                acc=acc,
                acc_new=acc_new,
                acc_lag_new=acc_lag_new,
                to_right=bool(to_right),
                b_safe_actual=b_safe_actual,
                safe=safe,
                dacc=dacc,
                decision=decision,
            )
        )


__all__ = [
    "LaneChangeEvaluation",
    "LaneChangeObserver",
    "MOBIL",
    "PRIORITY_ACC_THRESHOLD",
    "PriorityRuleDisabledError",
]
