# gpreg/core/options.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Configuration of a GP regression fit.
"""
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import gpreg.num as gnp
from gpreg.config import get_default_jitter
from gpreg.kernel import make_covariance


@dataclass
class GPROptions:
    """
    Configuration for fitting and predicting with a GP regression model.

    Hyperparameters (``signal_variance``, ``lengthscale``, ``noise_std``)
    refer to the standardized data when ``standardize`` is True. If all of
    them are given, they are used as is; if any is None, they are selected
    by maximizing the log posterior density.
    """

    kernel_kind: str = "squared_exponential"
    signal_variance: Optional[float] = None
    lengthscale: Optional[Union[float, Sequence[float]]] = None
    noise_std: Optional[float] = None
    signal_prior_scale: float = 1.0
    lengthscale_prior_scale: float = 1.0
    noise_prior_scale: float = 1.0
    jitter: float = field(default_factory=get_default_jitter)
    num_posterior_samples: int = 0
    standardize: bool = True
    anisotropic: bool = False
    optimizer: str = "L-BFGS-B"

    def __post_init__(self):
        # raises ValueError on unknown kinds
        make_covariance(self.kernel_kind)
        for name in ("signal_prior_scale", "lengthscale_prior_scale", "noise_prior_scale"):
            if not getattr(self, name) > 0.0:
                raise ValueError(f"{name} must be positive")
        if not self.jitter >= 0.0:
            raise ValueError("jitter must be nonnegative")
        if int(self.num_posterior_samples) != self.num_posterior_samples or self.num_posterior_samples < 0:
            raise ValueError("num_posterior_samples must be a nonnegative integer")
        if self.optimizer not in ("L-BFGS-B", "SLSQP"):
            raise ValueError("optimizer must be 'L-BFGS-B' or 'SLSQP'")
        if self.lengthscale is not None and not gnp.isscalar(self.lengthscale):
            self.anisotropic = True

    @property
    def has_fixed_hyperparameters(self):
        return (
            self.signal_variance is not None
            and self.lengthscale is not None
            and self.noise_std is not None
        )

    def n_lengthscales(self, d):
        return d if self.anisotropic else 1

    def hyperparameter_values(self, d):
        """Fixed hyperparameters as [sigma2, rho_1, ..., rho_k, noise_std]."""
        if not self.has_fixed_hyperparameters:
            raise ValueError("signal_variance, lengthscale and noise_std must all be set")
        k = self.n_lengthscales(d)
        rho = gnp.asarray(self.lengthscale, dtype=float).reshape(-1)
        if rho.shape[0] == 1 and k > 1:
            rho = rho * gnp.ones((k,))
        return gnp.concatenate(
            (
                gnp.asarray([float(self.signal_variance)]),
                rho,
                gnp.asarray([float(self.noise_std)]),
            )
        )

    def prior_scales(self, d):
        """Half-normal prior scales, laid out as the hyperparameter vector."""
        k = self.n_lengthscales(d)
        return gnp.asarray(
            [self.signal_prior_scale]
            + [self.lengthscale_prior_scale] * k
            + [self.noise_prior_scale]
        )
