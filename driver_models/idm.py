from __future__ import annotations

from dataclasses import dataclass

from .longitudinal import CarFollowingModel, V0_EPS


@dataclass
class IDM(CarFollowingModel):
    """Intelligent Driver Model.

    The leader acceleration `al` is accepted only for the common interface with ACC.
    """

    b_max: float = 16.0

    def _combine(self, acc_free: float, acc_int: float) -> float:
        return acc_free + acc_int

    def calc_acc(self, s: float, v: float, vl: float, al: float = 0.0) -> float:
        """
        Acceleration [m/s^2] for gap s [m], own speed v and leader speed vl [m/s].

        One noise sample is drawn per call. Returns exactly 0 if the effective
        desired speed vanishes, otherwise the result is floored at -b_max.
        """
        acc_rnd = self.acc_noise()
        v0eff, acc_free, acc_int = self.idm_terms(s, v, vl)
        if v0eff < V0_EPS:
            return 0.0
        return max(-self.b_max, self._combine(acc_free, acc_int) + acc_rnd)

    def calc_acc_give_way(self, s_new: float, v: float, v_prio: float, acc_old: float) -> float:
        """
        Acceleration as though the priority vehicle had already merged in front.

        Falls back to acc_old, the acceleration before this coupling, if the
        response would be an emergency braking (deceleration beyond 2*b).
        """
        acc_new = self.calc_acc(s_new, v, v_prio, 0.0)
        return acc_new if acc_new > -2 * self.b else acc_old


@dataclass
class IDMPlus(IDM):
    """IDM+: the minimum of free-road and interaction terms instead of their sum."""

    def _combine(self, acc_free: float, acc_int: float) -> float:
        return min(acc_free, acc_int + self.a)


__all__ = ["IDM", "IDMPlus"]
