import math

import numpy as np
import pytest

from driver_models import ACC, IDM
from equilibrium import capacity, equilibrium_gap, fundamental_diagram


def test_idm_gap_matches_closed_form(idm):
    v = 20.0
    expected = (2.0 + v * 1.5) / math.sqrt(1.0 - (v / 30.0) ** 4)
    assert equilibrium_gap(idm, v) == pytest.approx(expected, rel=1e-6)


def test_acc_shares_idm_steady_state(idm, acc_model):
    for v in (5.0, 15.0, 25.0):
        assert equilibrium_gap(acc_model, v) == pytest.approx(equilibrium_gap(idm, v), rel=1e-6)


def test_standstill_and_free_flow_limits(idm):
    assert equilibrium_gap(idm, 0.0) == 2.0
    assert equilibrium_gap(idm, 30.0) == math.inf
    assert equilibrium_gap(idm, 35.0) == math.inf


def test_noise_is_ignored_and_model_untouched(idm, rng):
    noisy = IDM(v0=30.0, T=1.5, s0=2.0, a=1.0, b=1.5, rng=rng)
    assert equilibrium_gap(noisy, 20.0) == pytest.approx(equilibrium_gap(idm, 20.0), rel=1e-9)
    assert noisy.noise_acc == 0.3


def test_speed_limit_changes_equilibrium(idm):
    idm.speed_limit = 20.0
    assert equilibrium_gap(idm, 25.0) == math.inf


def test_fundamental_diagram_shape(acc_model):
    speeds, density, flow = fundamental_diagram(acc_model, length=5.0, num_speeds=50)
    assert len(speeds) == len(density) == len(flow) == 50
    assert speeds[0] == 0.0
    assert speeds[-1] < 30.0
    assert density[0] == pytest.approx(1000.0 / 7.0)
    assert np.all(np.diff(density) < 0.0)
    assert np.all(flow >= 0.0)


def test_capacity_statistics(acc_model):
    stats = capacity(*fundamental_diagram(acc_model, length=5.0, num_speeds=60))
    assert 1000.0 < stats["max_flow"] < 3000.0
    assert stats["jam_density"] == pytest.approx(1000.0 / 7.0)
    assert 0.0 < stats["speed_at_capacity"] < 30.0


@pytest.mark.parametrize("kwargs", [{"length": 0.0}, {"length": 5.0, "num_speeds": 1}])
def test_invalid_arguments(kwargs):
    model = ACC(v0=30.0, T=1.5, s0=2.0, a=1.0, b=1.5)
    with pytest.raises(ValueError):
        fundamental_diagram(model, **kwargs)


def test_speed_just_below_desired_speed_has_unbounded_gap(idm):
    assert equilibrium_gap(idm, 30.0 * (1.0 - 1e-9)) == math.inf
    assert math.isfinite(equilibrium_gap(idm, 29.0))
