from __future__ import annotations

import logging
from dataclasses import dataclass

from .longitudinal import CarFollowingModel, V0_EPS, my_tanh

logger = logging.getLogger(__name__)

MIN_GAP = 1e-4  # below this the gap is treated as a collision
CAH_GAP_FLOOR = 0.01
GIVE_WAY_PLACEHOLDER_ACC = -4.0


@dataclass
class ACC(CarFollowingModel):
    """
    Adaptive cruise control model: IDM parameters, but an exactly triangular
    steady state and "cooler" reactions if the gap is too small.

    cool in [0, 1] weights the CAH blend against plain IDM.
    """

    b_max: float = 18.0
    cool: float = 0.99

    def __post_init__(self) -> None:
        super().__post_init__()
        if not 0.0 <= self.cool <= 1.0:
            raise ValueError("cool must lie in [0, 1].")

    def calc_acc(self, s: float, v: float, vl: float, al: float = 0.0) -> float:
        """
        Acceleration [m/s^2] for gap s [m], speed v, leader speed vl [m/s] and
        leader acceleration al [m/s^2].
        """
        if s < MIN_GAP:
            return -self.b_max

        acc_rnd = self.acc_noise()
        v0eff, acc_free, acc_int = self.idm_terms(s, v, vl)
        if v0eff < V0_EPS:
            return 0.0
        acc_idm = acc_free + acc_int

        if vl * (v - vl) < -2 * s * al:
            acc_cah = v * v * al / (vl * vl - 2 * s * al)
        else:
            closing = 1.0 if v > vl else 0.0
            acc_cah = al - (v - vl) ** 2 / (2 * max(s, CAH_GAP_FLOOR)) * closing
        acc_cah = min(acc_cah, self.a)

        if acc_idm > acc_cah:
            acc_mix = acc_idm
        else:
            acc_mix = acc_cah + self.b * my_tanh((acc_idm - acc_cah) / self.b)

        acc_acc = self.cool * acc_mix + (1 - self.cool) * acc_idm
        acc_return = max(-self.b_max, acc_acc + acc_rnd)

        logger.debug(
            "ACC.calc_acc: speed_limit=%.2f s=%.2f v=%.2f vl=%.2f al=%.2f "
            "acc_free=%.3f acc_idm=%.3f acc_cah=%.3f acc_acc=%.3f acc_return=%.3f",
            self.speed_limit, s, v, vl, al, acc_free, acc_idm, acc_cah, acc_acc, acc_return,
        )
        return acc_return

    def calc_acc_give_way(self, s_new: float, v: float, v_prio: float, acc_old: float) -> float:
        """
        Give-way response to a merging vehicle with priority.

        The courtesy-deceleration rule for ACC is still undecided; this always
        returns GIVE_WAY_PLACEHOLDER_ACC. The response to the merged vehicle is
        still evaluated, so the call consumes one noise sample like calc_acc.
        Callers must only invoke it for the first vehicle behind a merging
        priority vehicle. For active merges onto a priority road use
        MOBIL.respect_priority instead.
        """
        acc_new = self.calc_acc(s_new, v, v_prio, 0.0)
        logger.debug(
            "ACC.calc_acc_give_way placeholder used (s_new=%.2f, v=%.2f, acc_old=%.2f, acc_new=%.2f)",
            s_new, v, acc_old, acc_new,
        )
        return GIVE_WAY_PLACEHOLDER_ACC


__all__ = ["ACC", "GIVE_WAY_PLACEHOLDER_ACC", "MIN_GAP"]
