# gpreg/mcmc/param_posterior.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
MCMC sampling from the posterior of GP regression hyperparameters.

Convention
----------
The sampler moves on theta = log(h), h = [sigma2, rho_1..rho_k, noise_std],
with the log target ``LogDensity.log_target()``, which returns -inf for
proposals that cannot be evaluated. Draws are returned on the natural
scale, ready for :func:`gpreg.core.posterior_predictive_draws`.
"""

from typing import Optional

import numpy as np

import gpreg.num as gnp
from gpreg.hyperparam.selection import select_from_log_density

from .mh import MHOptions, MetropolisHastings


def _normalize_initial_states(param_initial_states, n_chains: int, dim: int):
    theta = np.asarray(gnp.to_np(param_initial_states), dtype=float)
    if theta.ndim == 1:
        theta = np.tile(theta, (n_chains, 1))
    elif theta.ndim != 2:
        raise ValueError("param_initial_states must be 1D or 2D.")
    if theta.shape != (n_chains, dim):
        raise ValueError(f"param_initial_states must have shape ({n_chains}, {dim}).")
    return theta


def sample_hyperparameters(
    log_density,
    param_initial_states=None,
    n_steps_total: int = 5_000,
    burnin_period: int = 2_000,
    n_chains: int = 2,
    proposal_variance: float = 0.1,
    seed: Optional[int] = None,
    silent: bool = False,
):
    """Sample hyperparameters from their posterior with Metropolis–Hastings.

    Parameters
    ----------
    log_density : gpreg.hyperparam.LogDensity
        Log posterior density of the hyperparameters.
    param_initial_states : array_like, optional
        Initial states on the log scale, shape (dim,) or (n_chains, dim).
        Defaults to the MAP point.
    n_steps_total : int
        Number of steps per chain, burn-in included.
    burnin_period : int
        Number of burn-in steps, during which proposals are adapted.
    n_chains : int
        Number of independent chains.
    proposal_variance : float
        Initial variance of the random-walk proposal on the log scale.
    seed : int, optional
        Seed of the sampler's random generator.
    silent : bool
        If False, log acceptance diagnostics.

    Returns
    -------
    draws : ndarray, shape (n_chains, n_steps_total - burnin_period, dim)
        Post-burn-in draws on the natural scale.
    mh : MetropolisHastings
        The sampler, holding the full chains on the log scale.
    """
    if n_steps_total <= burnin_period:
        raise ValueError("n_steps_total must be greater than burnin_period.")
    dim = log_density.dim
    if param_initial_states is None:
        param, _ = select_from_log_density(log_density)
        param_initial_states = gnp.to_np(param.values)
    theta0 = _normalize_initial_states(param_initial_states, n_chains, dim)

    options = MHOptions(
        dim=dim,
        n_chains=n_chains,
        target_acceptance=0.3,
        proposal_distribution_param_init=proposal_variance * np.ones(dim),
        adaptation_interval=50,
        discard_burnin=True,
        seed=seed,
        init_msg=(
            None if silent else "Sampling from posterior distribution of GP hyperparameters..."
        ),
    )
    mh = MetropolisHastings(log_target=log_density.log_target(), options=options)
    theta_samples = mh.scheduler(
        chains_state_initial=theta0,
        n_steps_total=n_steps_total,
        burnin_period=burnin_period,
    )

    if not silent:
        mh.check_acceptance_rates()

    return np.exp(theta_samples), mh
