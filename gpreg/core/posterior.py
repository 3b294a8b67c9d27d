# gpreg/core/posterior.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
GP posterior solver.

This module conditions a zero-mean Gaussian process on noisy observations
and computes the posterior predictive distribution of the latent function.

Functions
---------
condition(xi, zi, noise_std, covariance, covparam, jitter=None, standardize=True)
    Factorize the regularized training covariance and return a
    PosteriorModel.

predict(posterior, xt, return_type=1)
    Posterior mean and variance (or covariance) at xt.

log_marginal_likelihood(posterior)
    Log density of the (standardized) outputs under N(0, K).

Notes
-----
With K = k(X, X) + (jitter + noise_std²) I = L Lᵀ,

    alpha = L⁻ᵀ L⁻¹ y,        mean(x*) = k(X, x*)ᵀ alpha,
    v = L⁻¹ k(X, x*),         cov(x*) = k(x*, x*) - vᵀ v,

where k(x*, x*) carries the jitter on its diagonal. No matrix is ever
inverted explicitly.
"""
import warnings
from dataclasses import dataclass
from typing import Any, Callable

import gpreg.num as gnp
from gpreg.config import get_default_jitter, get_logger
from . import utils
from .linalg import (
    cholesky_factor,
    cholesky_solve_from_factor,
    solve_lower,
    logdet_from_chol,
)
from .standardize import Standardization

_logger = get_logger()


@dataclass(frozen=True)
class PosteriorModel:
    """GP conditioned on training data, for one hyperparameter value.

    All arrays live in the standardized space when ``standardization`` is
    not the identity.

    Attributes
    ----------
    covariance : callable
        Covariance function ``covariance(x, y, param, pairwise, jitter)``.
    covparam : gnp.array
        Natural-scale kernel hyperparameters [sigma2, rho_1, ..., rho_k].
    noise_std : float or gnp.array
        Observation noise standard deviation.
    jitter : float
        Numerical jitter added on same-set covariance diagonals.
    standardization : Standardization
        Recorded transform of inputs and outputs.
    xi : gnp.array, shape (n, d)
        Standardized training inputs.
    zi : gnp.array, shape (n,)
        Standardized training outputs.
    chol : gnp.array, shape (n, n)
        Lower Cholesky factor of k(xi, xi) + (jitter + noise_std²) I.
    alpha : gnp.array, shape (n,)
        K⁻¹ zi.
    options : GPROptions or None
        Options the model was fitted with, if any.
    """

    covariance: Callable
    covparam: Any
    noise_std: Any
    jitter: float
    standardization: Standardization
    xi: Any
    zi: Any
    chol: Any
    alpha: Any
    options: Any = None

    @property
    def n(self):
        return self.xi.shape[0]

    @property
    def dim(self):
        return self.xi.shape[1]

    def __str__(self):
        try:
            cov_desc = self.covariance.__name__
        except AttributeError:
            cov_desc = str(self.covariance)
        return (
            f"GP Posterior:\n"
            f"  Covariance Function: {cov_desc}\n"
            f"  Covariance Parameters: {gnp.to_np(gnp.detach(self.covparam))}\n"
            f"  Noise std: {gnp.to_scalar(gnp.detach(gnp.asarray(self.noise_std)))}\n"
            f"  Jitter: {self.jitter}\n"
            f"  Training points: {self.n} (dim {self.dim})"
        )


def training_covariance(covariance, xi, covparam, noise_std, jitter):
    """k(xi, xi) + jitter I + noise_std² I."""
    K = covariance(xi, None, covparam, jitter=jitter)
    return K + noise_std**2 * gnp.eye(xi.shape[0])


def condition(
    xi,
    zi,
    noise_std,
    covariance,
    covparam,
    jitter=None,
    standardize=True,
    convert_in=True,
):
    """Condition the GP on the data (xi, zi).

    Parameters
    ----------
    xi : array_like, shape (n, d) or (n,)
        Training inputs.
    zi : array_like, shape (n,) or (n, 1)
        Training outputs.
    noise_std : float
        Observation noise standard deviation (>= 0).
    covariance : callable
        Covariance function, see :mod:`gpreg.kernel`.
    covparam : array_like
        Natural-scale kernel hyperparameters, interpreted in the
        standardized space when ``standardize`` is True.
    jitter : float, optional
        Diagonal jitter. Defaults to the configured jitter (1e-9).
    standardize : bool, optional
        Standardize inputs and outputs before conditioning (default True).
    convert_in : bool, optional
        Convert inputs to backend arrays (default True).

    Returns
    -------
    PosteriorModel

    Raises
    ------
    DimensionMismatch
        If xi and zi are inconsistent.
    InvalidHyperparameter
        If a hyperparameter, the noise, or the jitter is out of its domain.
    NumericalInstabilityError
        If the regularized training covariance is not positive definite.
    """
    xi, zi, _ = utils.ensure_shapes_and_type(xi=xi, zi=zi, convert=convert_in)
    if jitter is None:
        jitter = get_default_jitter()
    utils.check_noise_and_jitter(noise_std, jitter)
    covparam = gnp.asarray(covparam).reshape(-1)

    if standardize:
        standardization = Standardization.from_data(xi, zi)
    else:
        standardization = Standardization.identity(xi.shape[1])
    xs = standardization.transform_inputs(xi)
    zs = standardization.transform_outputs(zi)

    K = training_covariance(covariance, xs, covparam, noise_std, jitter)
    L = cholesky_factor(
        K,
        "training covariance",
        noise_std=gnp.to_scalar(gnp.detach(gnp.asarray(noise_std))),
        jitter=jitter,
    )
    alpha = cholesky_solve_from_factor(L, zs)
    _logger.debug("Conditioned GP on %d points of dimension %d", xs.shape[0], xs.shape[1])

    return PosteriorModel(
        covariance=covariance,
        covparam=covparam,
        noise_std=noise_std,
        jitter=jitter,
        standardization=standardization,
        xi=xs,
        zi=zs,
        chol=L,
        alpha=alpha,
    )


def predict(
    posterior,
    xt,
    return_type=1,
    zero_neg_variances=True,
    convert_in=True,
    convert_out=False,
):
    """Posterior predictive distribution of the latent function at xt.

    Parameters
    ----------
    posterior : PosteriorModel
        Output of :func:`condition`.
    xt : array_like, shape (m, d) or (m,)
        Query points, on the original input scale.
    return_type : int, optional
        Indicator for posterior variance:
          -1: return None,
           0: return marginal variances,
           1: return full covariance (default).
    zero_neg_variances : bool, optional
        Replace negative marginal variances with zeros (return_type 0).
    convert_in : bool, optional
        Convert xt to a backend array (default True).
    convert_out : bool, optional
        Convert outputs to numpy arrays (default False).

    Returns
    -------
    zt_posterior_mean : array, shape (m,)
        Posterior mean on the original output scale.
    zt_posterior_variance : array, shape (m,) or (m, m), or None
        Posterior variance or covariance on the original output scale.

    Raises
    ------
    DimensionMismatch
        If xt does not have the training input dimension.
    """
    _, _, xt = utils.ensure_shapes_and_type(xi=posterior.xi, xt=xt, convert=convert_in)
    st = posterior.standardization
    xts = st.transform_inputs(xt)
    covparam = posterior.covparam

    Kit = posterior.covariance(posterior.xi, xts, covparam)
    zt_mean = gnp.matmul(Kit.T, posterior.alpha)

    if return_type == -1:
        zt_var = None
    elif return_type in (0, 1):
        v = solve_lower(posterior.chol, Kit)
        if return_type == 0:
            zt_prior_variance = posterior.covariance(
                xts, None, covparam, pairwise=True, jitter=posterior.jitter
            )
            zt_var = zt_prior_variance - gnp.sum(v * v, axis=0)
            if bool(gnp.any(zt_var < 0.0)):
                warnings.warn(
                    "Negative variances detected. Consider using jitter.",
                    RuntimeWarning,
                )
                if zero_neg_variances:
                    zt_var = gnp.maximum(zt_var, 0.0)
        else:
            zt_prior_covariance = posterior.covariance(
                xts, None, covparam, jitter=posterior.jitter
            )
            zt_var = zt_prior_covariance - gnp.matmul(v.T, v)
            if bool(gnp.any(gnp.diag(zt_var) < 0.0)):
                warnings.warn(
                    "Negative variances detected on the covariance diagonal. "
                    "Consider using jitter.",
                    RuntimeWarning,
                )
        zt_var = st.inverse_covariance(zt_var)
    else:
        raise ValueError("return_type must be in {-1, 0, 1}")

    zt_mean = st.inverse_outputs(zt_mean)

    if convert_out:
        zt_mean = gnp.to_np(zt_mean)
        zt_var = None if zt_var is None else gnp.to_np(zt_var)
    return zt_mean, zt_var


def log_marginal_likelihood(posterior):
    """Log density of the standardized outputs under N(0, K).

    .. math::
        \\log p(z) = -\\frac12 \\left(z^\\top K^{-1} z + \\log\\det K + n \\log 2\\pi\\right)

    computed from the Cholesky factor stored in ``posterior``.
    """
    n = posterior.n
    norm2 = gnp.einsum("i..., i...", posterior.zi, posterior.alpha)
    ldetK = logdet_from_chol(posterior.chol)
    return (-0.5 * (n * gnp.log(2.0 * gnp.pi) + ldetK + norm2)).reshape(())
