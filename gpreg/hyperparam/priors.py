# gpreg/hyperparam/priors.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Weakly-informative priors on GP regression hyperparameters.

Each hyperparameter (signal variance, lengthscales, noise standard
deviation) receives an independent half-normal prior HN(scale).
"""
import math
import gpreg.num as gnp

_LOG_SQRT_2_OVER_PI = 0.5 * math.log(2.0 / math.pi)


def log_prior_half_normal(x, scale):
    """Log density of a half-normal distribution.

    Parameters
    ----------
    x : array_like
        Values on the natural scale.
    scale : float or array_like
        Positive scale(s) of the half-normal, broadcast against ``x``.

    Returns
    -------
    array_like
        log p(x) = 0.5 log(2/pi) - log(scale) - x² / (2 scale²), elementwise,
        and -inf where x < 0.
    """
    x = gnp.asarray(x)
    scale = gnp.asarray(scale)
    logp = _LOG_SQRT_2_OVER_PI - gnp.log(scale) - 0.5 * (x / scale) ** 2
    return gnp.where(x >= 0.0, logp, gnp.safe_neginf())


def log_prior_hyperparameters(values, scales):
    """Sum of independent half-normal log priors.

    Parameters
    ----------
    values : array_like, shape (p,)
        Natural-scale hyperparameters [sigma2, rho_1, ..., rho_k, noise_std].
    scales : array_like, shape (p,)
        Half-normal scales, same layout.

    Returns
    -------
    scalar
    """
    return gnp.sum(log_prior_half_normal(gnp.asarray(values).reshape(-1), scales))
