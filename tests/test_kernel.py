import numpy as np
import pytest

import gpreg.num as gnp
from gpreg.kernel import (
    squared_exponential_covariance,
    squared_exponential_kernel,
    check_covparam,
    make_covariance,
)
from gpreg.exceptions import InvalidHyperparameter, DimensionMismatch


def _se_reference(x, y, sigma2, rho):
    d2 = np.sum(((x[:, None, :] - y[None, :, :]) / rho) ** 2, axis=2)
    return sigma2 * np.exp(-0.5 * d2)


def test_kernel_at_zero_is_one():
    assert gnp.to_scalar(squared_exponential_kernel(gnp.asarray(0.0))) == 1.0


def test_same_set_symmetric_with_jittered_diagonal():
    x = gnp.asarray(np.random.default_rng(0).uniform(size=(7, 3)))
    K = squared_exponential_covariance(x, None, gnp.asarray([2.5, 0.7]), jitter=1e-6)
    K = gnp.to_np(K)
    assert np.allclose(K, K.T)
    assert np.allclose(np.diag(K), 2.5 + 1e-6)
    assert np.all(np.diag(K) >= 0.0)


def test_y_is_x_is_the_same_set_case():
    x = gnp.asarray(np.linspace(0, 1, 5).reshape(-1, 1))
    K1 = squared_exponential_covariance(x, x, gnp.asarray([1.0, 0.3]), jitter=1e-3)
    K2 = squared_exponential_covariance(x, None, gnp.asarray([1.0, 0.3]), jitter=1e-3)
    assert np.allclose(gnp.to_np(K1), gnp.to_np(K2))
    assert np.allclose(np.diag(gnp.to_np(K1)), 1.0 + 1e-3)


def test_cross_covariance_has_no_jitter():
    rng = np.random.default_rng(1)
    x = rng.uniform(size=(4, 2))
    y = rng.uniform(size=(6, 2))
    K = squared_exponential_covariance(
        gnp.asarray(x), gnp.asarray(y), gnp.asarray([1.3, 0.5]), jitter=1.0
    )
    assert K.shape == (4, 6)
    assert np.allclose(gnp.to_np(K), _se_reference(x, y, 1.3, 0.5))


def test_anisotropic_lengthscales():
    rng = np.random.default_rng(2)
    x = rng.uniform(size=(5, 2))
    y = rng.uniform(size=(3, 2))
    rho = np.array([0.2, 2.0])
    K = squared_exponential_covariance(
        gnp.asarray(x), gnp.asarray(y), gnp.asarray([0.9, 0.2, 2.0])
    )
    assert np.allclose(gnp.to_np(K), _se_reference(x, y, 0.9, rho))


def test_pairwise_matches_diagonal():
    rng = np.random.default_rng(3)
    x = gnp.asarray(rng.uniform(size=(6, 2)))
    param = gnp.asarray([1.7, 0.4])
    v = squared_exponential_covariance(x, None, param, pairwise=True, jitter=1e-8)
    K = squared_exponential_covariance(x, None, param, jitter=1e-8)
    assert v.shape == (6,)
    assert np.allclose(gnp.to_np(v), np.diag(gnp.to_np(K)))

    y = gnp.asarray(rng.uniform(size=(6, 2)))
    v_xy = squared_exponential_covariance(x, y, param, pairwise=True)
    K_xy = squared_exponential_covariance(x, y, param)
    assert np.allclose(gnp.to_np(v_xy), np.diag(gnp.to_np(K_xy)))


def test_gram_matrix_is_psd():
    x = gnp.asarray(np.random.default_rng(4).uniform(size=(30, 2)))
    K = gnp.to_np(squared_exponential_covariance(x, None, gnp.asarray([1.0, 0.5])))
    assert np.min(np.linalg.eigvalsh(K)) > -1e-8


@pytest.mark.parametrize(
    "param",
    [[0.0, 1.0], [-1.0, 1.0], [1.0, 0.0], [1.0, -0.5], [np.nan, 1.0], [1.0, np.inf]],
)
def test_invalid_hyperparameters(param):
    x = gnp.asarray(np.zeros((3, 1)))
    with pytest.raises(InvalidHyperparameter):
        squared_exponential_covariance(x, None, gnp.asarray(param))


def test_wrong_number_of_lengthscales():
    with pytest.raises(InvalidHyperparameter):
        check_covparam(gnp.asarray([1.0, 1.0, 1.0, 1.0]), 2)
    sigma2, invrho = check_covparam(gnp.asarray([2.0, 0.5, 4.0]), 2)
    assert np.allclose(gnp.to_np(invrho), [2.0, 0.25])


def test_cross_covariance_dimension_mismatch():
    x = gnp.asarray(np.zeros((3, 2)))
    y = gnp.asarray(np.zeros((3, 1)))
    with pytest.raises(DimensionMismatch):
        squared_exponential_covariance(x, y, gnp.asarray([1.0, 1.0]))


def test_invalid_hyperparameter_is_value_error():
    err = InvalidHyperparameter("lengthscale", -1.0)
    assert isinstance(err, ValueError)
    assert "lengthscale" in str(err)


def test_make_covariance():
    assert make_covariance("squared_exponential") is squared_exponential_covariance
    assert make_covariance("RBF") is squared_exponential_covariance
    with pytest.raises(ValueError):
        make_covariance("matern")
