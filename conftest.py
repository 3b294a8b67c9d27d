import numpy as np
import pytest

import gpreg


@pytest.fixture
def sin_data():
    """Observations of sin at x = 0, 1, ..., 9."""
    xi = np.arange(10.0).reshape(-1, 1)
    zi = np.sin(xi).reshape(-1)
    return xi, zi


@pytest.fixture
def fixed_options():
    return gpreg.GPROptions(
        signal_variance=1.0, lengthscale=1.0, noise_std=0.1, standardize=False
    )


@pytest.fixture
def data_2d():
    rng = np.random.default_rng(42)
    xi = rng.uniform(-1.0, 1.0, size=(20, 2))
    zi = np.sin(3.0 * xi[:, 0]) + xi[:, 1] ** 2 + 0.05 * rng.standard_normal(20)
    return xi, zi
