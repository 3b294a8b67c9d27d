# gpreg/core/linalg.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Linear-algebra utilities shared across gpreg.core modules.

This file isolates small, backend-agnostic helpers (built on top of
`gpreg.num as gnp`) so they can be reused by the posterior solver, the
sampling routines, and the likelihood code without import cycles.
"""
import gpreg.num as gnp
from gpreg.exceptions import NumericalInstabilityError


def cholesky_factor(K, matrix_name="covariance matrix", noise_std=None, jitter=None):
    """Lower Cholesky factor L of K, with K = L Lᵀ.

    Parameters
    ----------
    K : array_like, shape (n, n)
        Symmetric positive definite matrix.
    matrix_name : str
        Name reported in the error message.
    noise_std, jitter : float, optional
        Diagonal terms used to build K, reported in the error message.

    Returns
    -------
    L : array_like, shape (n, n)

    Raises
    ------
    NumericalInstabilityError
        If K is not numerically positive definite. The backend exception
        is chained.
    """
    n = K.shape[0]
    try:
        L = gnp.cholesky(K)
    except Exception as exc:
        if gnp._is_linalg_exception(exc):
            raise NumericalInstabilityError(matrix_name, n, noise_std, jitter) from exc
        raise
    # some LAPACK builds return NaNs instead of raising
    if bool(gnp.any(gnp.isnan(L))):
        raise NumericalInstabilityError(matrix_name, n, noise_std, jitter)
    return L


def solve_lower(L, B):
    """Forward substitution: return L⁻¹ B."""
    return gnp.solve_triangular(L, B, lower=True)


def cholesky_solve_from_factor(L, b):
    """Return K⁻¹ b = L⁻ᵀ (L⁻¹ b) by two triangular solves."""
    y = gnp.solve_triangular(L, b, lower=True)
    return gnp.solve_triangular(L.T, y, lower=False)


def logdet_from_chol(L):
    """log det K = 2 Σ log L_ii."""
    return 2.0 * gnp.sum(gnp.log(gnp.diag(L)))
