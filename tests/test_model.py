import numpy as np
import pytest

import gpreg
import gpreg.num as gnp
from gpreg import GPROptions, Model, PosteriorModel
from gpreg.exceptions import DimensionMismatch


def test_fit_predict_fixed_hyperparameters(sin_data, fixed_options):
    xi, zi = sin_data
    posterior = gpreg.fit(xi, zi, fixed_options)
    assert isinstance(posterior, PosteriorModel)
    assert posterior.options is fixed_options
    out = gpreg.predict(posterior, np.array([[0.5]]))
    assert len(out) == 2
    mean, cov = out
    assert abs(mean[0] - 0.479) < 0.3
    assert 0.0 < np.sqrt(cov[0, 0]) < 1.0


def test_predict_with_posterior_samples(sin_data):
    xi, zi = sin_data
    options = GPROptions(
        signal_variance=1.0,
        lengthscale=1.0,
        noise_std=0.1,
        num_posterior_samples=6,
    )
    posterior = gpreg.fit(xi, zi, options)
    xt = np.linspace(0.0, 9.0, 12)
    mean, cov, samples = gpreg.predict(posterior, xt)
    assert mean.shape == (12,)
    assert cov.shape == (12, 12)
    assert samples.shape == (12, 6)
    mean2, cov2 = gpreg.predict(posterior, xt, num_posterior_samples=0)
    assert np.array_equal(mean, mean2)


def test_fit_with_map_selection(sin_data):
    xi, zi = sin_data
    model = Model()
    posterior = model.fit(xi, zi)
    hp = gnp.to_np(model.hyperparameters)
    assert hp.shape == (3,)
    assert np.all(hp > 0.0)
    assert model.selection_info is not None
    mean, var = model.predict(posterior, [[0.5], [4.5]], return_type=0)
    assert np.allclose(mean, np.sin([0.5, 4.5]), atol=0.3)
    assert np.all(var >= 0.0)


def test_fit_anisotropic_fixed(data_2d):
    xi, zi = data_2d
    options = GPROptions(signal_variance=1.0, lengthscale=[0.5, 1.0], noise_std=0.05)
    assert options.anisotropic
    model = Model(options=options)
    posterior = model.fit(xi, zi)
    assert np.allclose(gnp.to_np(model.hyperparameters), [1.0, 0.5, 1.0, 0.05])
    mean, _ = model.predict(posterior, xi, return_type=-1)
    assert np.sqrt(np.mean((mean - zi) ** 2)) < 0.2


def test_scalar_lengthscale_broadcast_when_anisotropic(data_2d):
    options = GPROptions(
        signal_variance=1.0, lengthscale=0.7, noise_std=0.1, anisotropic=True
    )
    assert np.allclose(gnp.to_np(options.hyperparameter_values(2)), [1.0, 0.7, 0.7, 0.1])


def test_model_requires_hyperparameters(sin_data):
    xi, zi = sin_data
    model = Model()
    with pytest.raises(ValueError):
        model.condition(xi, zi)
    with pytest.raises(ValueError):
        model.sample_paths(xi, 2)


def test_model_condition_and_sample_paths(sin_data, fixed_options):
    xi, zi = sin_data
    model = Model(options=fixed_options)
    posterior = model.condition(xi, zi, hyperparameters=[1.0, 2.0, 0.2])
    assert np.allclose(gnp.to_np(posterior.covparam), [1.0, 2.0])
    model.fit(xi, zi)
    assert model.sample_paths(np.linspace(0, 1, 5), 3).shape == (5, 3)
    assert "squared_exponential_covariance" in str(model)


def test_model_log_density(sin_data):
    xi, zi = sin_data
    model = Model()
    ld = model.log_density(xi, zi)
    assert ld.dim == 3
    assert np.isfinite(ld.log_target()(np.zeros(3)))


def test_fit_dimension_mismatch(sin_data, fixed_options):
    xi, zi = sin_data
    with pytest.raises(DimensionMismatch):
        gpreg.fit(xi, zi[:5], fixed_options)
    posterior = gpreg.fit(xi, zi, fixed_options)
    with pytest.raises(DimensionMismatch):
        gpreg.predict(posterior, np.zeros((2, 3)))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"kernel_kind": "matern"},
        {"noise_prior_scale": 0.0},
        {"lengthscale_prior_scale": -1.0},
        {"jitter": -1e-9},
        {"num_posterior_samples": -1},
        {"num_posterior_samples": 1.5},
        {"optimizer": "CG"},
    ],
)
def test_invalid_options(kwargs):
    with pytest.raises(ValueError):
        GPROptions(**kwargs)


def test_default_options():
    options = GPROptions()
    assert options.kernel_kind == "squared_exponential"
    assert options.jitter == 1e-9
    assert options.num_posterior_samples == 0
    assert options.standardize
    assert not options.has_fixed_hyperparameters
    with pytest.raises(ValueError):
        options.hyperparameter_values(1)
    assert np.allclose(gnp.to_np(options.prior_scales(1)), 1.0)
