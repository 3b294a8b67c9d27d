import numpy as np
import pytest

import gpreg.num as gnp
from gpreg.core.posterior import condition, predict
from gpreg.core.sample_paths import (
    sample_paths,
    sample_posterior,
    posterior_predictive_draws,
)
from gpreg.kernel import squared_exponential_covariance as cov
from gpreg.exceptions import DimensionMismatch, NumericalInstabilityError


def test_prior_sample_paths_shape():
    xt = np.linspace(0, 1, 20)
    zsim = sample_paths(cov, [1.0, 0.3], xt, 4)
    assert zsim.shape == (20, 4)
    assert np.all(np.isfinite(zsim))


def test_posterior_samples_follow_predictive_distribution(sin_data):
    xi, zi = sin_data
    xt = np.array([[0.5], [4.5], [8.2]])
    posterior = condition(xi, zi, 0.1, cov, [1.0, 1.0], standardize=False)
    gnp.set_seed(123)
    zsim = sample_posterior(posterior, xt, n_samples=4000)
    mean, covt = predict(posterior, xt, convert_out=True)
    assert zsim.shape == (3, 4000)
    assert np.allclose(zsim.mean(axis=1), mean, atol=0.02)
    assert np.allclose(np.cov(zsim), covt, atol=0.01)


def test_posterior_samples_reproducible_with_seed(sin_data):
    xi, zi = sin_data
    posterior = condition(xi, zi, 0.1, cov, [1.0, 1.0])
    gnp.set_seed(7)
    z1 = sample_posterior(posterior, [[1.5], [2.5]], n_samples=3)
    gnp.set_seed(7)
    z2 = sample_posterior(posterior, [[1.5], [2.5]], n_samples=3)
    assert np.array_equal(z1, z2)


def test_posterior_samples_on_original_scale():
    xi = np.linspace(0, 1, 8)
    zi = 100.0 + np.cos(4 * xi)
    posterior = condition(xi, zi, 0.01, cov, [1.0, 0.5], standardize=True)
    zsim = sample_posterior(posterior, [[0.5]], n_samples=50)
    assert np.all(np.abs(zsim - 100.0) < 3.0)


def test_posterior_predictive_draws(sin_data):
    xi, zi = sin_data
    xt = np.linspace(0, 9, 15)
    draws = np.array([[1.0, 1.0, 0.1], [0.8, 1.5, 0.2], [1.2, 0.7, 0.05]])
    zsim = posterior_predictive_draws(
        xi, zi, xt, draws, cov, samples_per_draw=4, standardize=False
    )
    assert zsim.shape == (15, 12)
    one = posterior_predictive_draws(xi, zi, xt, draws[0], cov, standardize=False)
    assert one.shape == (15, 1)


def test_posterior_predictive_draws_bad_layout(sin_data):
    xi, zi = sin_data
    with pytest.raises(DimensionMismatch):
        posterior_predictive_draws(xi, zi, [[1.0]], np.array([[1.0, 0.1]]), cov)


def test_posterior_samples_fail_on_singular_predictive_covariance(sin_data):
    xi, zi = sin_data
    posterior = condition(xi, zi, 0.1, cov, [1.0, 1.0], jitter=0.0, standardize=False)
    # far from the data, two copies of one point give the rank-one matrix [[1, 1], [1, 1]]
    xt = np.array([[100.0], [100.0]])
    with pytest.raises(NumericalInstabilityError) as excinfo:
        sample_posterior(posterior, xt, n_samples=2)
    assert excinfo.value.matrix_name == "predictive covariance"
    assert excinfo.value.jitter == 0.0
