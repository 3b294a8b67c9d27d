# gpreg/core/sample_paths.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Sampling routines for Gaussian Process models.

This module provides:
- Unconditional sampling of GP paths on a set of points `xt`.
- Sampling from the posterior predictive distribution of a PosteriorModel.
- Posterior predictive sampling over a set of hyperparameter draws, as
  produced by an external sampler.
"""
import gpreg.num as gnp
from gpreg.config import get_default_jitter, get_logger
from . import utils
from .linalg import cholesky_factor
from .posterior import condition, predict

_logger = get_logger()


def sample_paths(covariance, covparam, xt, nb_paths, jitter=None, convert_out=True):
    """Generates ``nb_paths`` sample paths on ``xt`` from the zero-mean GP
    GP(0, k), where k is ``covariance`` with parameters ``covparam``.

    Parameters
    ----------
    covariance : callable
        Covariance function, see :mod:`gpreg.kernel`.
    covparam : array_like
        Natural-scale kernel hyperparameters.
    xt : array_like, shape (nt, d) or (nt,)
        Points where the sample paths are generated.
    nb_paths : int
        Number of sample paths to generate.
    jitter : float, optional
        Diagonal jitter. Defaults to the configured jitter.
    convert_out : bool, optional (default: True)
        Whether to return numpy arrays or keep backend types.

    Returns
    -------
    ndarray, shape (nt, nb_paths)

    Notes
    -----
    K = C Cᵀ, draw as C @ N(0, I).
    """
    _, _, xt_ = utils.ensure_shapes_and_type(xt=xt)
    if jitter is None:
        jitter = get_default_jitter()
    K = covariance(xt_, None, gnp.asarray(covparam).reshape(-1), jitter=jitter)
    C = cholesky_factor(K, "prior covariance", jitter=jitter)
    zsim = gnp.matmul(C, gnp.randn(K.shape[0], nb_paths))
    if convert_out:
        zsim = gnp.to_np(zsim)
    return zsim


def sample_posterior(posterior, xt, n_samples=1, convert_out=True):
    """Draw samples of the latent function at ``xt`` given the data.

    Parameters
    ----------
    posterior : gpreg.core.posterior.PosteriorModel
        Conditioned GP.
    xt : array_like, shape (m, d) or (m,)
        Query points on the original input scale.
    n_samples : int
        Number of samples.
    convert_out : bool, optional (default: True)
        Whether to return numpy arrays or keep backend types.

    Returns
    -------
    ndarray, shape (m, n_samples)

    Raises
    ------
    NumericalInstabilityError
        If the predictive covariance (jitter included) is not positive
        definite.

    Notes
    -----
    Cov = Lp Lpᵀ, draw as mean + Lp @ N(0, I).
    """
    zt_mean, zt_cov = predict(posterior, xt, return_type=1)
    Lp = cholesky_factor(zt_cov, "predictive covariance", jitter=posterior.jitter)
    m = zt_mean.shape[0]
    zsim = zt_mean.reshape(-1, 1) + gnp.matmul(Lp, gnp.randn(m, n_samples))
    if convert_out:
        zsim = gnp.to_np(zsim)
    return zsim


def posterior_predictive_draws(
    xi,
    zi,
    xt,
    draws,
    covariance,
    samples_per_draw=1,
    jitter=None,
    standardize=True,
    convert_out=True,
):
    """Posterior predictive samples integrated over hyperparameter draws.

    For each row of ``draws``, the GP is conditioned on (xi, zi) and
    ``samples_per_draw`` samples are drawn at ``xt``. Each draw owns its own
    Cholesky factors; nothing is shared between draws.

    Parameters
    ----------
    xi, zi : array_like
        Training data.
    xt : array_like, shape (m, d) or (m,)
        Query points.
    draws : array_like, shape (n_draws, 2 + k)
        Natural-scale hyperparameter draws [sigma2, rho_1, ..., rho_k, noise_std].
    covariance : callable
        Covariance function.
    samples_per_draw : int, optional
        Number of latent samples per hyperparameter draw.
    jitter : float, optional
        Diagonal jitter. Defaults to the configured jitter.
    standardize : bool, optional
        Whether the draws refer to standardized data (default True).
    convert_out : bool, optional (default: True)
        Whether to return numpy arrays or keep backend types.

    Returns
    -------
    ndarray, shape (m, n_draws * samples_per_draw)
    """
    draws = gnp.asarray(draws)
    if len(draws.shape) == 1:
        draws = draws.reshape(1, -1)
    xi, zi, xt = utils.ensure_shapes_and_type(xi=xi, zi=zi, xt=xt)

    blocks = []
    for k in range(draws.shape[0]):
        covparam, noise_std = utils.split_hyperparameters(draws[k])
        posterior = condition(
            xi, zi, noise_std, covariance, covparam, jitter=jitter, standardize=standardize
        )
        blocks.append(
            sample_posterior(posterior, xt, n_samples=samples_per_draw, convert_out=False)
        )
    _logger.debug(
        "Drew %d posterior predictive samples from %d hyperparameter draws",
        draws.shape[0] * samples_per_draw,
        draws.shape[0],
    )
    zsim = gnp.hstack(blocks)
    if convert_out:
        zsim = gnp.to_np(zsim)
    return zsim
