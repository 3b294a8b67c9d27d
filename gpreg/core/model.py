# gpreg/core/model.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Gaussian Process regression model class, and the fit/predict entry points.
"""
import dataclasses
import gpreg.num as gnp
from gpreg.config import get_logger
from gpreg.kernel import make_covariance

from . import posterior as gp_posterior
from . import sample_paths as sample_paths
from . import utils
from .options import GPROptions

_logger = get_logger()


class Model:
    """Gaussian Process regression model.

    A Model bundles a covariance function, a set of options and,
    once fitted, the hyperparameters

        h = [sigma2, rho_1, ..., rho_k, noise_std]

    on the natural scale. The GP has a zero prior mean on the
    standardized outputs.

    Attributes
    ----------
    covariance : callable
        Covariance function, called as

        K = self.covariance(x, y, covparam, pairwise, jitter),

        where y is None (or x itself) in the same-set case.
    options : GPROptions
        Model options.
    hyperparameters : gnp.array or None
        Natural-scale hyperparameters, set by :meth:`fit` or given by the
        user through the options.

    Public API (methods)
    --------------------
    condition
        Condition the GP on data for given hyperparameters.
    fit
        Condition on data, selecting hyperparameters if needed.
    predict
        Posterior mean/covariance at target points, and optional samples.
    log_density
        Log posterior density of the hyperparameters given data.
    sample_paths
        Unconditional GP sample paths on xt.

    Examples
    --------
    >>> import numpy as np
    >>> import gpreg
    >>> options = gpreg.GPROptions(signal_variance=1.0, lengthscale=1.0,
    ...                            noise_std=0.1, standardize=False)
    >>> model = gpreg.core.Model(options=options)
    >>> xi = np.arange(10.0)
    >>> posterior = model.fit(xi, np.sin(xi))
    >>> zt_mean, zt_cov = model.predict(posterior, [[0.5]])
    """

    def __init__(self, covariance=None, options=None):
        self.options = GPROptions() if options is None else options
        self.covariance = (
            make_covariance(self.options.kernel_kind)
            if covariance is None
            else covariance
        )
        self.hyperparameters = None
        self.selection_info = None

    def __repr__(self):
        output = str("<gpreg.core.Model object> " + hex(id(self)))
        return output

    def __str__(self):
        try:
            cov_desc = self.covariance.__name__
        except AttributeError:
            cov_desc = str(self.covariance)
        hp = (
            None
            if self.hyperparameters is None
            else gnp.to_np(gnp.detach(self.hyperparameters))
        )
        return (
            f"GP Model:\n"
            f"  Covariance Function: {cov_desc}\n"
            f"  Hyperparameters: {hp}\n"
            f"  Standardize: {self.options.standardize}\n"
            f"  Jitter: {self.options.jitter}"
        )

    def condition(self, xi, zi, hyperparameters=None, convert_in=True):
        """Condition the GP on (xi, zi).

        Parameters
        ----------
        xi : array_like, shape (n, d) or (n,)
            Training inputs.
        zi : array_like, shape (n,) or (n, 1)
            Training outputs.
        hyperparameters : array_like, optional
            Natural-scale [sigma2, rho_1, ..., rho_k, noise_std]. Defaults to
            ``self.hyperparameters``.

        Returns
        -------
        PosteriorModel
        """
        if hyperparameters is None:
            hyperparameters = self.hyperparameters
        if hyperparameters is None:
            raise ValueError("Hyperparameters are not set; call fit() first.")
        covparam, noise_std = utils.split_hyperparameters(hyperparameters)
        posterior = gp_posterior.condition(
            xi,
            zi,
            noise_std,
            self.covariance,
            covparam,
            jitter=self.options.jitter,
            standardize=self.options.standardize,
            convert_in=convert_in,
        )
        return dataclasses.replace(posterior, options=self.options)

    def fit(self, xi, zi, **kwargs):
        """Fit the model to (xi, zi).

        Fixed hyperparameters from the options are used as is. Otherwise,
        they are selected by maximizing their log posterior density.

        Parameters
        ----------
        xi : array_like, shape (n, d) or (n,)
            Training inputs.
        zi : array_like, shape (n,) or (n, 1)
            Training outputs.
        **kwargs
            Passed to :func:`gpreg.hyperparam.select_hyperparameters_map`.

        Returns
        -------
        PosteriorModel
        """
        xi, zi, _ = utils.ensure_shapes_and_type(xi=xi, zi=zi)
        if self.options.has_fixed_hyperparameters:
            self.hyperparameters = self.options.hyperparameter_values(xi.shape[1])
        else:
            from gpreg.hyperparam import select_hyperparameters_map

            param, self.selection_info = select_hyperparameters_map(
                xi, zi, self.options, covariance=self.covariance, info=True, **kwargs
            )
            self.hyperparameters = gnp.asarray(param.denormalized_values)
            _logger.info("Selected hyperparameters: %s", param.to_simple_dict())
        return self.condition(xi, zi, convert_in=False)

    def predict(
        self,
        posterior,
        xt,
        return_type=1,
        num_posterior_samples=None,
        zero_neg_variances=True,
        convert_out=True,
    ):
        """Posterior predictive distribution at xt.

        Parameters
        ----------
        posterior : PosteriorModel
            Output of :meth:`fit` or :meth:`condition`.
        xt : array_like, shape (m, d) or (m,)
            Query points.
        return_type : int, optional
            -1: no variance, 0: marginal variances, 1: full covariance
            (default).
        num_posterior_samples : int, optional
            Number of posterior predictive samples. Defaults to
            ``options.num_posterior_samples``.
        zero_neg_variances : bool, optional
            Replace negative variances with zeros (return_type 0).
        convert_out : bool, optional
            Whether to convert outputs to numpy arrays (default True).

        Returns
        -------
        zt_posterior_mean : array, shape (m,)
        zt_posterior_variance : array, shape (m,) or (m, m), or None
        zt_samples : array, shape (m, num_posterior_samples)
            Only returned if num_posterior_samples > 0.
        """
        if num_posterior_samples is None:
            num_posterior_samples = self.options.num_posterior_samples
        zt_mean, zt_var = gp_posterior.predict(
            posterior,
            xt,
            return_type=return_type,
            zero_neg_variances=zero_neg_variances,
            convert_out=convert_out,
        )
        if num_posterior_samples > 0:
            zt_samples = sample_paths.sample_posterior(
                posterior, xt, n_samples=num_posterior_samples, convert_out=convert_out
            )
            return zt_mean, zt_var, zt_samples
        return zt_mean, zt_var

    def log_density(self, xi, zi):
        """Log posterior density of the hyperparameters given (xi, zi).

        Returns
        -------
        gpreg.hyperparam.LogDensity
        """
        from gpreg.hyperparam import LogDensity

        return LogDensity(xi, zi, options=self.options, covariance=self.covariance)

    def sample_paths(self, xt, nb_paths, convert_out=True):
        """Unconditional sample paths on xt (hyperparameters must be set)."""
        if self.hyperparameters is None:
            raise ValueError("Hyperparameters are not set; call fit() first.")
        covparam, _ = utils.split_hyperparameters(self.hyperparameters)
        return sample_paths.sample_paths(
            self.covariance,
            covparam,
            xt,
            nb_paths,
            jitter=self.options.jitter,
            convert_out=convert_out,
        )


def fit(xi, zi, options=None, **kwargs):
    """Fit a GP regression model and return its posterior.

    Parameters
    ----------
    xi : array_like, shape (n, d) or (n,)
        Training inputs.
    zi : array_like, shape (n,) or (n, 1)
        Training outputs.
    options : GPROptions, optional
        Model options. Hyperparameters not given in the options are
        selected by MAP.

    Returns
    -------
    PosteriorModel
        The posterior, carrying the options it was fitted with.
    """
    model = Model(options=options)
    return model.fit(xi, zi, **kwargs)


def predict(posterior, xt, num_posterior_samples=None, return_type=1, convert_out=True):
    """Posterior predictive mean and covariance at xt.

    Parameters
    ----------
    posterior : PosteriorModel
        Output of :func:`fit`.
    xt : array_like, shape (m, d) or (m,)
        Query points.
    num_posterior_samples : int, optional
        Number of posterior predictive samples. Defaults to the value in the
        options the posterior was fitted with (0 if none).
    return_type : int, optional
        -1: no variance, 0: marginal variances, 1: full covariance (default).
    convert_out : bool, optional
        Whether to convert outputs to numpy arrays (default True).

    Returns
    -------
    (mean, covariance) or (mean, covariance, samples)
        Samples, of shape (m, num_posterior_samples), are returned only if
        num_posterior_samples > 0.
    """
    if num_posterior_samples is None:
        num_posterior_samples = (
            0 if posterior.options is None else posterior.options.num_posterior_samples
        )
    zt_mean, zt_var = gp_posterior.predict(
        posterior, xt, return_type=return_type, convert_out=convert_out
    )
    if num_posterior_samples > 0:
        zt_samples = sample_paths.sample_posterior(
            posterior, xt, n_samples=num_posterior_samples, convert_out=convert_out
        )
        return zt_mean, zt_var, zt_samples
    return zt_mean, zt_var
