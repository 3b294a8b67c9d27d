# gpreg/hyperparam/selection.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Maximum a posteriori selection of GP regression hyperparameters.

The negative log posterior density on the log scale is minimized with
scipy.optimize.minimize. The optimizer keeps a history of visited points
and returns the best one.
"""
import math
import time
import numpy as np
from scipy.optimize import minimize

import gpreg.num as gnp
from gpreg.config import get_logger
from gpreg.exceptions import InvalidHyperparameter, NumericalInstabilityError
from .log_density import LogDensity
from .param import make_gpr_param

_logger = get_logger()


def autoselect_parameters(
    p0,
    criterion,
    gradient,
    bounds=None,
    bounds_auto=True,
    bounds_delta=10.0,
    silent=True,
    info=False,
    method="L-BFGS-B",
    method_options=None,
):
    """
    Minimize a scalar selection criterion with SciPy.

    Parameters
    ----------
    p0 : array_like
        Initial parameter vector.
    criterion : callable
        Objective function ``criterion(p) -> scalar``.
    gradient : callable
        Gradient function ``gradient(p) -> array_like``.
    bounds : sequence of tuple, optional
        Bounds passed to SciPy.
    bounds_auto : bool, default=True
        If True and ``bounds`` is None, use local bounds ``p0 ± bounds_delta``.
    bounds_delta : float, default=10.0
        Half-width of the automatic local bounds.
    silent : bool, default=True
        If False, enable SLSQP solver output and log a summary of the
        optimization.
    info : bool, default=False
        If True, return the SciPy result object.
    method : {"L-BFGS-B", "SLSQP"}, default="L-BFGS-B"
        Optimization method.
    method_options : dict, optional
        Additional options passed to SciPy ``minimize``.

    Returns
    -------
    p_opt : ndarray
        Best parameter vector found.
    info_ret : scipy.optimize.OptimizeResult or None
        Diagnostics if ``info=True``, else None.

    Notes
    -----
    Failures of the criterion caused by an out-of-domain value or a failed
    Cholesky factorization are mapped to ``+inf`` (and a zero gradient) so
    that the line search backs off. Other exceptions propagate.

    If the final SciPy iterate is worse than the best visited point, the
    best visited point is returned and ``best_value_returned`` is False.

    Added fields in the returned ``OptimizeResult``: ``history_params``,
    ``history_criterion``, ``initial_params``, ``final_params``,
    ``bounds``, ``total_time`` and ``best_value_returned``.
    """
    if method_options is None:
        method_options = {}
    tic = time.time()
    p0 = np.asarray(gnp.to_np(p0), dtype=float).reshape(-1)

    safe_lower, safe_upper = -500, 500
    if bounds is None and bounds_auto:
        bounds = [
            (
                max(param - bounds_delta, safe_lower),
                min(param + bounds_delta, safe_upper),
            )
            for param in p0
        ]

    history_params, history_criterion = [], []
    best_params, best_criterion = None, float("inf")

    def record(p, J):
        nonlocal best_params, best_criterion
        history_params.append(p.copy())
        history_criterion.append(J)
        if J < best_criterion:
            best_criterion, best_params = J, p.copy()

    def criterion_with_history(p):
        try:
            J = float(criterion(p))
        except (NumericalInstabilityError, InvalidHyperparameter) as exc:
            _logger.debug("Criterion failed at %s: %s", p, exc)
            J = np.inf
        record(p, J)
        return J

    def gradient_guarded(p):
        try:
            return np.asarray(gnp.to_np(gradient(p)), dtype=float)
        except (NumericalInstabilityError, InvalidHyperparameter):
            return np.zeros_like(p)

    if method == "L-BFGS-B":
        options = dict(
            maxcor=20,
            ftol=1e-6,
            gtol=1e-5,
            eps=1e-8,
            maxfun=15000,
            maxiter=15000,
            maxls=40,
        )
    elif method == "SLSQP":
        options = dict(ftol=1e-6, eps=1e-8, maxiter=15000, disp=not silent)
    else:
        raise ValueError("Optimization method not implemented.")
    options.update(method_options)

    r = minimize(
        criterion_with_history,
        p0,
        method=method,
        jac=gradient_guarded,
        bounds=bounds,
        options=options,
    )

    # ensure returning best seen
    if best_params is not None and r.fun > best_criterion:
        r.x, r.fun, r.best_value_returned = best_params, best_criterion, False
    else:
        r.best_value_returned = True

    r.history_params = history_params
    r.history_criterion = history_criterion
    r.initial_params = p0
    r.final_params = r.x
    r.bounds = bounds
    r.total_time = time.time() - tic

    if not silent:
        _logger.info(
            "%s: %s (criterion %.6g after %d evaluations)",
            method,
            r.message,
            r.fun,
            len(history_criterion),
        )

    return (r.x, r) if info else (r.x, None)


def initial_guess(log_density):
    """Initial hyperparameters on the log scale.

    The lengthscale follows the radius of the unit-volume ball scaled by
    the input range, the signal variance is the output variance, and the
    noise standard deviation is a tenth of the output standard deviation.
    """
    xi, zi = log_density.xi, log_density.zi
    d = xi.shape[1]
    delta = gnp.to_np(gnp.max(xi, axis=0) - gnp.min(xi, axis=0))
    delta = np.where(delta > 0.0, delta, 1.0)
    rho = math.exp(math.lgamma(d / 2 + 1) / d) / math.sqrt(math.pi) * delta
    if not log_density.options.anisotropic:
        rho = np.array([np.exp(np.mean(np.log(rho)))])
    sigma2 = float(gnp.to_scalar(gnp.mean(zi**2)))
    if not sigma2 > 0.0:
        sigma2 = 1.0
    noise_std = 0.1 * math.sqrt(sigma2)
    return np.log(np.concatenate(([sigma2], rho, [noise_std])))


def select_from_log_density(log_density, theta0=None, info=False, **kwargs):
    """MAP hyperparameters for a given :class:`LogDensity`.

    See :func:`select_hyperparameters_map` for parameters and returns.
    """
    if theta0 is None:
        theta0 = initial_guess(log_density)

    def criterion(theta):
        return -gnp.to_scalar(
            gnp.detach(log_density.log_density_unconstrained(gnp.asarray(theta)))
        )

    def gradient(theta):
        _, g = log_density.value_and_grad(gnp.asarray(theta))
        return -g

    method = kwargs.pop("method", log_density.options.optimizer)
    theta_opt, r = autoselect_parameters(
        theta0, criterion, gradient, method=method, info=True, **kwargs
    )

    param = make_gpr_param(
        log_density.xi.shape[1], log_density.options.anisotropic, values=theta_opt
    )
    _logger.info(
        "Hyperparameter selection (%s): log density %.4g -> %.4g, %d evaluations",
        method,
        -r.history_criterion[0] if r.history_criterion else float("nan"),
        -r.fun,
        len(r.history_criterion),
    )
    _logger.debug("Selected hyperparameters:\n%s", param)
    return (param, r) if info else (param, None)


def select_hyperparameters_map(
    xi, zi, options=None, covariance=None, theta0=None, info=False, **kwargs
):
    """Select hyperparameters by maximizing the log posterior density.

    Parameters
    ----------
    xi, zi : array_like
        Training data.
    options : GPROptions, optional
        Model options (prior scales, jitter, optimizer, ...).
    covariance : callable, optional
        Covariance function.
    theta0 : array_like, optional
        Starting point on the log scale. Defaults to :func:`initial_guess`.
    info : bool, optional
        If True, return the SciPy result object as second output.
    **kwargs
        Passed to :func:`autoselect_parameters`.

    Returns
    -------
    param : Param
        Selected hyperparameters (log-normalized values).
    info_ret : scipy.optimize.OptimizeResult or None
    """
    log_density = LogDensity(xi, zi, options=options, covariance=covariance)
    return select_from_log_density(log_density, theta0=theta0, info=info, **kwargs)
