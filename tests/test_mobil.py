import pytest

from driver_models import MOBIL, LaneChangeEvaluation, PriorityRuleDisabledError


def test_reference_decision(mobil):
    # b_safe_actual = 4, dacc = 0.5 + 0 + 0.1 - 0.2 = 0.4
    assert mobil.realize_lane_change(1.0, 0.0, 0.5, -2.0, True) is True


def test_safe_deceleration_interpolates_with_speed(mobil):
    assert mobil.safe_deceleration(1.0) == 4.0
    assert mobil.safe_deceleration(0.0) == 8.0
    assert mobil.safe_deceleration(0.5) == 6.0


def test_unsafe_change_is_rejected_despite_large_incentive(mobil):
    assert mobil.realize_lane_change(1.0, -5.0, 1.0, -4.01, True) is False


def test_low_speed_tolerates_harder_braking(mobil):
    assert mobil.realize_lane_change(0.0, 0.0, 1.0, -7.5, True) is True
    assert mobil.realize_lane_change(1.0, 0.0, 1.0, -7.5, True) is False


def test_safety_boundary_is_exclusive():
    events = []
    mobil = MOBIL(b_safe=4.0, b_safe_max=8.0, p=0.0, b_thr=0.2, b_bias_right=0.1, observer=events.append)

    assert mobil.realize_lane_change(0.5, 0.0, 1.0, -6.0, True) is True
    assert events[-1].safe is True

    assert mobil.realize_lane_change(0.5, 0.0, 1.0, -6.0 - 1e-9, True) is False
    assert events[-1].safe is False


def test_unsafe_change_skips_incentive():
    events = []
    mobil = MOBIL(b_safe=4.0, b_safe_max=8.0, p=0.0, b_thr=0.2, b_bias_right=0.1, observer=events.append)
    mobil.realize_lane_change(1.0, 0.0, 3.0, -5.0, False)
    assert events == [
        LaneChangeEvaluation(
            vrel=1.0,
            acc=0.0,
            acc_new=3.0,
            acc_lag_new=-5.0,
            to_right=False,
            b_safe_actual=4.0,
            safe=False,
            dacc=None,
            decision=False,
        )
    ]


def test_right_bias_sign(mobil):
    # dacc = 0.15 +/- 0.1 - 0.2
    assert mobil.realize_lane_change(1.0, 0.0, 0.15, 0.0, True) is True
    assert mobil.realize_lane_change(1.0, 0.0, 0.15, 0.0, False) is False


def test_politeness_weights_new_follower():
    egoistic = MOBIL(b_safe=4.0, b_safe_max=8.0, p=0.0, b_thr=0.2, b_bias_right=0.0)
    polite = MOBIL(b_safe=4.0, b_safe_max=8.0, p=0.5, b_thr=0.2, b_bias_right=0.0)
    assert egoistic.realize_lane_change(1.0, 0.0, 1.0, -2.0, True) is True
    assert polite.realize_lane_change(1.0, 0.0, 1.0, -2.0, True) is False


def test_threshold_prevents_marginal_changes():
    mobil = MOBIL(b_safe=4.0, b_safe_max=8.0, p=0.0, b_thr=0.2, b_bias_right=0.0)
    assert mobil.realize_lane_change(1.0, 0.0, 0.2, 0.0, True) is False
    assert mobil.realize_lane_change(1.0, 0.0, 0.21, 0.0, True) is True


@pytest.mark.parametrize("acc_lag_new", [-3.9, -1.0, 0.0])
@pytest.mark.parametrize("to_right", [True, False])
def test_incentive_is_monotonic_in_new_acceleration(mobil, acc_lag_new, to_right):
    decisions = [
        mobil.realize_lane_change(0.8, 0.0, 0.05 * k - 1.0, acc_lag_new, to_right) for k in range(60)
    ]
    first_true = decisions.index(True) if True in decisions else len(decisions)
    assert all(decisions[first_true:])
    assert not any(decisions[:first_true])


def test_positive_decision_is_reported_to_observer():
    events = []
    mobil = MOBIL(b_safe=4.0, b_safe_max=8.0, p=0.0, b_thr=0.2, b_bias_right=0.1, observer=events.append)
    mobil.realize_lane_change(1.0, 0.0, 0.5, -2.0, True)
    assert len(events) == 1
    assert events[0].decision is True
    assert events[0].dacc == pytest.approx(0.4)


def test_respect_priority_requires_flag(mobil):
    with pytest.raises(PriorityRuleDisabledError):
        mobil.respect_priority(0.0, -1.0)


def test_respect_priority_threshold():
    mobil = MOBIL(b_safe=4.0, b_safe_max=8.0, p=0.0, b_thr=0.2, b_bias_right=0.0, target_lane_prio=True)
    assert mobil.respect_priority(0.0, -0.2) is True
    assert mobil.respect_priority(0.0, -0.05) is False
    assert mobil.respect_priority(0.5, 0.6) is False


@pytest.mark.parametrize("kwargs", [{"b_safe": -1.0}, {"b_safe_max": -2.0}, {"p": -0.1}])
def test_invalid_parameters_are_rejected(kwargs):
    params = {"b_safe": 4.0, "b_safe_max": 8.0, "p": 0.0, "b_thr": 0.2, "b_bias_right": 0.1}
    params.update(kwargs)
    with pytest.raises(ValueError):
        MOBIL(**params)
