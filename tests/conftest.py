import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

from driver_models import ACC, IDM, MOBIL


@pytest.fixture
def idm():
    return IDM(v0=30.0, T=1.5, s0=2.0, a=1.0, b=1.5, noise_acc=0.0)


@pytest.fixture
def acc_model():
    return ACC(v0=30.0, T=1.5, s0=2.0, a=1.0, b=1.5, noise_acc=0.0)


@pytest.fixture
def mobil():
    return MOBIL(b_safe=4.0, b_safe_max=8.0, p=0.0, b_thr=0.2, b_bias_right=0.1)


@pytest.fixture
def rng():
    return np.random.default_rng(42)
