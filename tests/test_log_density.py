import numpy as np
import pytest
from scipy.optimize import approx_fprime
from scipy.stats import halfnorm, multivariate_normal

import gpreg
import gpreg.num as gnp
from gpreg.hyperparam import LogDensity, log_prior_half_normal
from gpreg.exceptions import (
    DimensionMismatch,
    InvalidHyperparameter,
    NumericalInstabilityError,
)


def _se(x, y, sigma2, rho):
    d2 = np.sum(((x[:, None, :] - y[None, :, :]) / rho) ** 2, axis=2)
    return sigma2 * np.exp(-0.5 * d2)


def test_half_normal_prior_matches_scipy():
    x = np.array([0.0, 0.3, 1.0, 2.5])
    for scale in (0.5, 1.0, 3.0):
        logp = gnp.to_np(log_prior_half_normal(x, scale))
        assert np.allclose(logp, halfnorm.logpdf(x, scale=scale))
    assert gnp.to_np(log_prior_half_normal(np.array([-1.0]), 1.0))[0] == -np.inf


def test_log_density_is_prior_plus_likelihood(sin_data):
    xi, zi = sin_data
    ld = LogDensity(xi, zi)
    h = np.array([1.3, 0.6, 0.2])

    xs = (xi - xi.mean(axis=0)) / xi.std(axis=0)
    zs = (zi - zi.mean()) / zi.std()
    K = _se(xs, xs, 1.3, 0.6) + (ld.jitter + 0.2**2) * np.eye(10)
    loglik = multivariate_normal.logpdf(zs, mean=np.zeros(10), cov=K)
    logprior = np.sum(halfnorm.logpdf(h, scale=1.0))

    assert np.isclose(float(ld.log_likelihood(h)), loglik)
    assert np.isclose(float(ld.log_prior(h)), logprior)
    assert np.isclose(float(ld(h)), loglik + logprior)


def test_prior_scales_from_options(sin_data):
    xi, zi = sin_data
    options = gpreg.GPROptions(
        signal_prior_scale=2.0, lengthscale_prior_scale=0.5, noise_prior_scale=0.1
    )
    ld = LogDensity(xi, zi, options)
    h = np.array([1.0, 0.4, 0.05])
    expected = (
        halfnorm.logpdf(1.0, scale=2.0)
        + halfnorm.logpdf(0.4, scale=0.5)
        + halfnorm.logpdf(0.05, scale=0.1)
    )
    assert np.isclose(float(ld.log_prior(h)), expected)


def test_unconstrained_scale_adds_log_jacobian(data_2d):
    xi, zi = data_2d
    ld = LogDensity(xi, zi, gpreg.GPROptions(anisotropic=True))
    assert ld.dim == 4
    assert ld.names == ["signal_variance", "lengthscale_0", "lengthscale_1", "noise_std"]
    theta = np.log([0.9, 0.5, 1.2, 0.1])
    expected = float(ld.log_density(np.exp(theta))) + np.sum(theta)
    assert np.isclose(float(ld.log_density_unconstrained(theta)), expected)
    assert np.allclose(gnp.to_np(ld.to_natural(theta)), np.exp(theta))
    assert np.allclose(gnp.to_np(ld.to_unconstrained(np.exp(theta))), theta)


def test_out_of_domain_values_raise(sin_data):
    xi, zi = sin_data
    ld = LogDensity(xi, zi)
    with pytest.raises(InvalidHyperparameter):
        ld([-1.0, 1.0, 0.1])
    with pytest.raises(InvalidHyperparameter):
        ld([1.0, 0.0, 0.1])
    with pytest.raises(InvalidHyperparameter):
        ld([1.0, 1.0, -0.1])
    with pytest.raises(InvalidHyperparameter):
        ld.to_unconstrained([1.0, 0.0, 0.1])


def test_wrong_number_of_hyperparameters(sin_data):
    xi, zi = sin_data
    ld = LogDensity(xi, zi)
    with pytest.raises(DimensionMismatch):
        ld([1.0, 1.0])


def test_empty_training_set_is_rejected():
    with pytest.raises(DimensionMismatch):
        LogDensity(np.zeros((0, 2)), np.zeros(0))


def test_log_target_rejects_failures():
    xi = np.array([[0.0], [0.0], [1.0], [2.0]])
    zi = np.array([0.0, 0.5, 1.0, 0.0])
    ld = LogDensity(xi, zi, gpreg.GPROptions(jitter=0.0))
    with pytest.raises(NumericalInstabilityError):
        ld.log_density_unconstrained(np.array([0.0, 0.0, -800.0]))
    target = ld.log_target()
    assert target(np.array([0.0, 0.0, -800.0])) == -np.inf
    assert target(np.array([np.nan, 0.0, 0.0])) == -np.inf
    value = target(np.array([0.0, 0.0, np.log(0.3)]))
    assert isinstance(value, float)
    assert np.isfinite(value)


def test_gradient(data_2d):
    xi, zi = data_2d
    ld = LogDensity(xi, zi)
    theta = np.log([1.1, 0.7, 0.2])
    value, grad = ld.value_and_grad(theta)
    f = lambda t: float(ld.log_density_unconstrained(t))
    assert np.isclose(float(value), f(theta))
    assert np.allclose(gnp.to_np(grad), approx_fprime(theta, f, 1e-6), rtol=1e-3, atol=1e-3)


def test_evaluations_do_not_mutate(sin_data):
    xi, zi = sin_data
    ld = LogDensity(xi, zi)
    xs, zs = ld.xi.copy(), ld.zi.copy()
    v1 = float(ld([1.0, 1.0, 0.1]))
    ld([2.0, 0.3, 0.5])
    v2 = float(ld([1.0, 1.0, 0.1]))
    assert v1 == v2
    assert np.array_equal(ld.xi, xs) and np.array_equal(ld.zi, zs)
