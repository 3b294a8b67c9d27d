# gpreg/hyperparam/log_density.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Log posterior density of GP regression hyperparameters.

This module is the seam between the GP posterior solver and any external
inference engine (optimizer, MCMC sampler). For a hyperparameter vector

    h = [sigma2, rho_1, ..., rho_k, noise_std]

on the natural (positive) scale, the log density is

    log p(h | z) = sum_j log HN(h_j; s_j) + log N(z; 0, K(h)) + const

where z are the standardized training outputs and
K(h) = k(X, X) + jitter I + noise_std² I.

Samplers moving in R^d use theta = log h, and the density on that
scale carries the log-Jacobian sum(theta).

Every evaluation rebuilds the covariance matrix and its Cholesky factor;
a LogDensity object never mutates after construction and can be shared
between independent chains.
"""
import gpreg.num as gnp
from gpreg.config import get_logger
from gpreg.core.options import GPROptions
from gpreg.core.posterior import condition, log_marginal_likelihood
from gpreg.core.standardize import Standardization
from gpreg.core import utils
from gpreg.exceptions import (
    DimensionMismatch,
    InvalidHyperparameter,
    NumericalInstabilityError,
)
from gpreg.kernel import make_covariance
from .param import make_gpr_param
from .priors import log_prior_hyperparameters

_logger = get_logger()


class LogDensity:
    """Log posterior density of [sigma2, rho_1..rho_k, noise_std].

    Parameters
    ----------
    xi : array_like, shape (n, d) or (n,)
        Training inputs.
    zi : array_like, shape (n,)
        Training outputs.
    options : GPROptions, optional
        Kernel kind, prior scales, jitter, standardization and isotropy.
    covariance : callable, optional
        Covariance function. Defaults to the one named by
        ``options.kernel_kind``.

    Examples
    --------
    >>> ld = LogDensity(xi, zi)
    >>> ld([1.0, 1.0, 0.1])
    >>> target = ld.log_target()
    >>> target(np.log([1.0, 1.0, 0.1]))
    """

    def __init__(self, xi, zi, options=None, covariance=None):
        self.options = GPROptions() if options is None else options
        xi, zi, _ = utils.ensure_shapes_and_type(xi=xi, zi=zi)
        if self.options.standardize:
            self.standardization = Standardization.from_data(xi, zi)
        else:
            self.standardization = Standardization.identity(xi.shape[1])
        self.xi = self.standardization.transform_inputs(xi)
        self.zi = self.standardization.transform_outputs(zi)
        self.covariance = (
            make_covariance(self.options.kernel_kind)
            if covariance is None
            else covariance
        )
        self.jitter = self.options.jitter
        d = self.xi.shape[1]
        self.param = make_gpr_param(d, self.options.anisotropic)
        self.prior_scales = self.options.prior_scales(d)

    @property
    def dim(self):
        """Number of hyperparameters."""
        return self.param.dim

    @property
    def names(self):
        return self.param.names

    def _check_values(self, values):
        values = gnp.asarray(values).reshape(-1)
        if values.shape[0] != self.dim:
            raise DimensionMismatch(
                f"expected {self.dim} hyperparameters {self.names}, "
                f"got {values.shape[0]}"
            )
        return values

    def log_prior(self, values):
        """Sum of half-normal log priors at natural-scale ``values``."""
        values = self._check_values(values)
        return log_prior_hyperparameters(values, self.prior_scales)

    def log_likelihood(self, values):
        """GP log marginal likelihood of the standardized outputs."""
        values = self._check_values(values)
        covparam, noise_std = utils.split_hyperparameters(values)
        posterior = condition(
            self.xi,
            self.zi,
            noise_std,
            self.covariance,
            covparam,
            jitter=self.jitter,
            standardize=False,
            convert_in=False,
        )
        return log_marginal_likelihood(posterior)

    def log_density(self, values):
        """Log posterior density at natural-scale ``values``.

        Raises
        ------
        InvalidHyperparameter
            If a value is out of its domain.
        NumericalInstabilityError
            If the training covariance cannot be factorized.
        DimensionMismatch
            If ``values`` does not have ``dim`` entries.
        """
        values = self._check_values(values)
        return self.log_likelihood(values) + self.log_prior(values)

    __call__ = log_density

    def log_density_unconstrained(self, theta):
        """Log density of theta = log(values), log-Jacobian included."""
        theta = self._check_values(theta)
        values = self.param.denormalize(theta)
        return self.log_density(values) + self.param.log_abs_det_jacobian(theta)

    def to_natural(self, theta):
        return self.param.denormalize(theta)

    def to_unconstrained(self, values):
        values = self._check_values(values)
        if not bool(gnp.all(values > 0.0)):
            raise InvalidHyperparameter(
                "hyperparameters",
                gnp.to_np(gnp.detach(values)).tolist(),
                "must be positive to be mapped to the log scale",
            )
        return gnp.log(values)

    def value_and_grad(self, theta):
        """Value and gradient of :meth:`log_density_unconstrained`."""
        return gnp.value_and_grad(self.log_density_unconstrained, theta)

    def log_target(self):
        """Sampler-facing log density on the unconstrained scale.

        Proposals that are out of the domain, or for which the training
        covariance cannot be factorized, get a log density of -inf so that
        the sampler rejects them.

        Returns
        -------
        callable
            ``f(theta) -> float``.
        """

        def f(theta):
            try:
                return float(
                    gnp.to_scalar(gnp.detach(self.log_density_unconstrained(theta)))
                )
            except (NumericalInstabilityError, InvalidHyperparameter) as exc:
                _logger.debug("Proposal rejected: %s", exc)
                return float("-inf")

        return f
