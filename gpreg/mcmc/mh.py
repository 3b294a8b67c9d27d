# gpreg/mcmc/mh.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Random-walk Metropolis–Hastings sampler

The sampler consumes any ``log_target(theta) -> float`` on R^dim and runs
independent chains with Gaussian random-walk proposals. During burn-in the
per-chain proposal variances are adapted by Robbins–Monro so that the
acceptance rate approaches a target; they are frozen afterwards.

Proposals with a log target of -inf (out-of-domain values, failed
factorizations) are always rejected.
"""

import time
import math
import numpy as np
from typing import Callable, Tuple, Dict, Union, Optional
from dataclasses import dataclass, field

from gpreg.config import get_logger

_logger = get_logger()


@dataclass
class MHOptions:
    """
    Configuration for the Metropolis–Hastings sampler.
    """

    dim: int = 1
    n_chains: int = 1
    target_acceptance: float = 0.3
    acceptance_tol: float = 0.15
    proposal_distribution_param_init: Union[np.ndarray, None] = field(default=None)
    adaptation_interval: int = 50
    discard_burnin: bool = False
    RM_adapt_factor: float = 1.0
    RM_diminishing: bool = True
    seed: Optional[int] = None
    init_msg: Union[str, None] = field(default="Sampling from target distribution...")

    def __post_init__(self):
        if self.dim < 1 or self.n_chains < 1:
            raise ValueError("dim and n_chains must be positive")
        if not 0.0 < self.target_acceptance < 1.0:
            raise ValueError("target_acceptance must be in (0, 1)")
        if self.adaptation_interval < 1:
            raise ValueError("adaptation_interval must be positive")
        if self.proposal_distribution_param_init is None:
            self.proposal_distribution_param_init = np.ones(self.dim, dtype=float)
        else:
            self.proposal_distribution_param_init = np.asarray(
                self.proposal_distribution_param_init, dtype=float
            )
        self.acceptance_min = self.target_acceptance - self.acceptance_tol
        self.acceptance_max = self.target_acceptance + self.acceptance_tol


class MetropolisHastings:
    """
    Metropolis–Hastings sampler with Robbins–Monro adaptation of a diagonal
    Gaussian random-walk proposal:

        proposal_params[c] *= exp(gamma * (rate_c - target))

    after each block of ``adaptation_interval`` steps of burn-in, with a
    cosine-decaying gamma when ``RM_diminishing`` is set.

    Attributes
    ----------
    x : ndarray, shape (n_chains, 1 + n_steps, dim)
        Chain history, initial states included.
    accept : ndarray, shape (n_chains, 1 + n_steps)
        Acceptance indicators.
    """

    def __init__(
        self,
        log_target: Callable[[np.ndarray], float],
        options: MHOptions = None,
    ):
        self.options = options or MHOptions()
        self.log_target = log_target
        self.rng = np.random.default_rng(self.options.seed)

        self.n_chains = self.options.n_chains
        self.dim = self.options.dim
        self.target_acceptance = self.options.target_acceptance

        # diagonal proposal variances, one vector per chain
        self.proposal_distribution_params = None

        self.x = None
        self.accept = None
        self.logp = None

        self.burnin_period = 0
        self.global_iter = 0

    def _initialize_proposal_distribution_params(self, p_init: np.ndarray) -> list:
        """
        Convert the initial proposal variances into a list, one per chain.
        """
        if p_init.ndim == 0:
            return [p_init * np.ones(self.dim) for _ in range(self.n_chains)]
        if p_init.ndim == 1 and p_init.shape[0] == self.dim:
            return [p_init.copy() for _ in range(self.n_chains)]
        if p_init.ndim == 2 and p_init.shape == (self.n_chains, self.dim):
            return [p_init[i].copy() for i in range(self.n_chains)]
        raise ValueError("Invalid proposal_distribution_param_init shape.")

    def _diminishing_adaptation_schedule(
        self,
        n: int,
        n_total: int,
        base: float,
        final_frac: float = 0.1,
    ) -> float:
        """Cosine schedule: base at step 0, base * final_frac at step n_total."""
        cosine_component = math.cos(math.pi * min(n, n_total) / max(n_total, 1))
        return base * (final_frac + (1 - final_frac) * 0.5 * (1 + cosine_component))

    def prop_rnd(self, x: np.ndarray, chain_idx: int) -> np.ndarray:
        """Gaussian random walk with diagonal covariance."""
        scale = np.sqrt(self.proposal_distribution_params[chain_idx])
        return x + scale * self.rng.standard_normal(self.dim)

    def mhstep(
        self, x_current: np.ndarray, logp_current: float, chain_idx: int
    ) -> Tuple[np.ndarray, float, bool]:
        """
        Single Metropolis–Hastings update for chain chain_idx.
        """
        y = self.prop_rnd(x_current, chain_idx)
        logp_y = float(self.log_target(y))
        log_a = logp_y - logp_current
        if np.isnan(log_a):
            log_a = -np.inf
        accept = np.log(self.rng.random()) < log_a
        if accept:
            return y, logp_y, True
        return x_current, logp_current, False

    def run_samples(self, n_steps: int) -> np.ndarray:
        """
        Run n_steps of MCMC sampling and return the acceptance rates.
        """
        i0 = self.global_iter + 1
        i1 = self.global_iter + 1 + n_steps
        for t in range(i0, i1):
            for c in range(self.n_chains):
                self.x[c, t], self.logp[c, t], self.accept[c, t] = self.mhstep(
                    self.x[c, t - 1], self.logp[c, t - 1], c
                )
            self.global_iter += 1
        return np.mean(self.accept[:, i0:i1], axis=1)

    def run_adaptive_RM(self, n_block_size: int, diminishing: bool = True):
        """
        Run one block of Robbins–Monro adaptation.
        """
        gamma_base = self.options.RM_adapt_factor
        rates = self.run_samples(n_block_size)
        if diminishing:
            gamma = self._diminishing_adaptation_schedule(
                self.global_iter, self.burnin_period, gamma_base, final_frac=0.1
            )
        else:
            gamma = gamma_base
        for c in range(self.n_chains):
            self.proposal_distribution_params[c] *= np.exp(
                gamma * (rates[c] - self.target_acceptance)
            )

    def run_burnin(self, burnin_period: int) -> None:
        """
        Run the burn-in phase block by block, adapting proposals.
        """
        block = self.options.adaptation_interval
        n_blocks, remainder = divmod(burnin_period, block)
        for _ in range(n_blocks):
            self.run_adaptive_RM(block, diminishing=self.options.RM_diminishing)
        if remainder:
            self.run_adaptive_RM(remainder, diminishing=self.options.RM_diminishing)

    def scheduler(
        self,
        chains_state_initial: np.ndarray,
        n_steps_total: int,
        burnin_period: int,
        replicate_initial_state: bool = True,
    ) -> np.ndarray:
        """
        Run burn-in with adaptation, then sampling with frozen proposals.

        Parameters
        ----------
        chains_state_initial : ndarray, shape (n_chains, dim) or (dim,)
            Initial states.
        n_steps_total : int
            Number of steps per chain, burn-in included.
        burnin_period : int
            Number of burn-in steps.
        replicate_initial_state : bool, optional
            Replicate a single initial state across chains (default True).

        Returns
        -------
        ndarray, shape (n_chains, n_kept, dim)
            Chain states; burn-in states are dropped if
            ``options.discard_burnin`` is set.
        """
        chains_state_initial = np.atleast_2d(np.asarray(chains_state_initial, dtype=float))
        if (
            chains_state_initial.shape == (1, self.dim)
            and replicate_initial_state
            and self.n_chains > 1
        ):
            chains_state_initial = np.tile(chains_state_initial, (self.n_chains, 1))
        if chains_state_initial.shape != (self.n_chains, self.dim):
            raise ValueError(
                f"chains_state_initial must have shape ({self.n_chains}, {self.dim})"
                + f" or be 1D if replicate_initial_state=True. Got {chains_state_initial.shape}."
            )
        if n_steps_total < burnin_period:
            raise ValueError("Total steps < burnin")

        self.proposal_distribution_params = (
            self._initialize_proposal_distribution_params(
                self.options.proposal_distribution_param_init
            )
        )
        self.x = np.empty((self.n_chains, 1 + n_steps_total, self.dim), dtype=float)
        self.accept = np.empty((self.n_chains, 1 + n_steps_total), dtype=bool)
        self.logp = np.empty((self.n_chains, 1 + n_steps_total), dtype=float)
        self.burnin_period = burnin_period
        self.global_iter = 0
        tic = time.time()
        self.x[:, 0, :] = chains_state_initial
        self.accept[:, 0] = True
        for c in range(self.n_chains):
            self.logp[c, 0] = float(self.log_target(self.x[c, 0]))
        if not np.all(np.isfinite(self.logp[:, 0])):
            raise ValueError("log_target is not finite at the initial states.")

        if self.options.init_msg:
            _logger.info(self.options.init_msg)
        _logger.info(
            "  dim=%d, steps=%d, burn-in=%d, chains=%d",
            self.dim,
            n_steps_total,
            burnin_period,
            self.n_chains,
        )

        self.run_burnin(burnin_period)
        self.run_samples(n_steps_total - burnin_period)

        _logger.info(
            "  Done in %.3fs, %d proposals",
            time.time() - tic,
            n_steps_total * self.n_chains,
        )

        return (
            self.x[:, self.burnin_period + 1 :]
            if self.options.discard_burnin
            else self.x
        )

    def acceptance_rates(self, burnin_period: Optional[int] = None) -> np.ndarray:
        """Per-chain acceptance rate after burn-in."""
        if burnin_period is None:
            burnin_period = self.burnin_period
        if self.accept is None:
            raise ValueError("No chain data available.")
        i0 = burnin_period + 1
        i1 = self.global_iter + 1
        if i1 <= i0:
            raise ValueError("Not enough samples to compute acceptance rates.")
        return np.mean(self.accept[:, i0:i1], axis=1)

    def check_acceptance_rates(
        self,
        burnin_period: Optional[int] = None,
        low_threshold: Optional[float] = None,
        high_threshold: Optional[float] = None,
    ) -> Dict[str, Union[float, bool]]:
        """
        Compare post-burn-in acceptance rates with thresholds, and log a
        warning when they are out of range.

        Returns
        -------
        dict
            Keys "min_ar", "max_ar" and "ok".
        """
        if low_threshold is None:
            low_threshold = self.options.acceptance_min
        if high_threshold is None:
            high_threshold = self.options.acceptance_max
        rates = self.acceptance_rates(burnin_period)
        min_ar, max_ar = float(rates.min()), float(rates.max())
        ok = (min_ar >= low_threshold) and (max_ar <= high_threshold)
        if not ok:
            _logger.warning(
                "Acceptance rates out of [%.2f, %.2f]: min=%.3f, max=%.3f",
                low_threshold,
                high_threshold,
                min_ar,
                max_ar,
            )
        else:
            _logger.info("Acceptance rates: min=%.3f, max=%.3f", min_ar, max_ar)
        return {"min_ar": min_ar, "max_ar": max_ar, "ok": ok}

    def compute_gelman_rubin_rhat(
        self, burnin_period: Optional[int] = None
    ) -> np.ndarray:
        """
        Gelman-Rubin R-hat statistic of the post-burn-in states.

        Returns
        -------
        ndarray, shape (dim,)
        """
        if burnin_period is None:
            burnin_period = self.burnin_period
        if self.x is None:
            raise ValueError("No chain data available.")
        if self.n_chains < 2:
            raise ValueError("At least 2 chains are required.")
        block = self.x[:, burnin_period + 1 : self.global_iter + 1, :]
        n_block = block.shape[1]
        if n_block <= 1:
            raise ValueError("Not enough samples to compute Gelman-Rubin diagnostic.")
        chain_means = np.mean(block, axis=1)
        chain_vars = np.var(block, axis=1, ddof=1)
        W = np.mean(chain_vars, axis=0)  # within-chain variance
        B = n_block * np.var(chain_means, axis=0, ddof=1)
        var_post = ((n_block - 1) / n_block) * W + (1.0 / n_block) * B
        return np.sqrt(var_post / W)
