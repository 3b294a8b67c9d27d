# gpreg/kernel/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Gaussian Process kernels.

Covariance functions share the calling convention

    K = covariance(x, y, param, pairwise=False, jitter=None)

where ``param`` holds natural-scale hyperparameters
``[sigma2, rho_1, ..., rho_k]`` and ``y is None`` (or ``y is x``) selects the
same-set case, in which the jitter is added on the diagonal.

Modules
-------
squared_exponential
    Squared-exponential (Gaussian, RBF) kernel.

Public API
-----------
- squared_exponential_kernel
- squared_exponential_covariance
- check_covparam
- make_covariance
"""

from .squared_exponential import (
    squared_exponential_kernel,
    squared_exponential_covariance,
    check_covparam,
)

KERNEL_KINDS = {
    "squared_exponential": squared_exponential_covariance,
    "se": squared_exponential_covariance,
    "rbf": squared_exponential_covariance,
}


def make_covariance(kernel_kind="squared_exponential"):
    """Return the covariance function registered under ``kernel_kind``."""
    try:
        return KERNEL_KINDS[kernel_kind.lower()]
    except (KeyError, AttributeError):
        raise ValueError(
            f"Unknown kernel kind {kernel_kind!r}. "
            f"Supported kinds are {sorted(KERNEL_KINDS)}."
        ) from None


__all__ = [
    "squared_exponential_kernel",
    "squared_exponential_covariance",
    "check_covparam",
    "make_covariance",
    "KERNEL_KINDS",
]
