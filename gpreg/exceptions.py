# gpreg/exceptions.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Exceptions raised by gpreg.

All exceptions derive from :class:`GPRegError`, so that callers can catch
every package-specific failure with a single except clause. Each class also
derives from the closest builtin exception.

Classes
-------
GPRegError
    Root of the hierarchy.
InvalidHyperparameter
    A kernel or noise hyperparameter is out of its domain. A sampler
    proposing such a value should reject the proposal.
NumericalInstabilityError
    A Cholesky factorization failed. Raised to the caller, never retried
    inside gpreg; increasing noise or jitter is the caller's decision.
DimensionMismatch
    Inconsistent array shapes. Always fatal to the call.
"""


class GPRegError(Exception):
    """Base class for all exceptions in the gpreg package."""


class InvalidHyperparameter(GPRegError, ValueError):
    """Raised when a hyperparameter is outside its domain.

    Parameters
    ----------
    name : str
        Name of the offending hyperparameter.
    value : object
        Offending value.
    reason : str, optional
        Constraint that was violated.
    """

    def __init__(self, name, value, reason="must be positive and finite"):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid hyperparameter {name}={value!r}: {reason}.")


class NumericalInstabilityError(GPRegError, ArithmeticError):
    """Raised when a covariance matrix cannot be Cholesky-factorized.

    Parameters
    ----------
    matrix_name : str
        Which matrix failed (e.g. "training covariance").
    size : int
        Dimension of the square matrix.
    noise_std : float, optional
        Observation noise standard deviation used on the diagonal.
    jitter : float, optional
        Numerical jitter used on the diagonal.
    """

    def __init__(self, matrix_name, size, noise_std=None, jitter=None):
        self.matrix_name = matrix_name
        self.size = size
        self.noise_std = noise_std
        self.jitter = jitter
        msg = (
            f"Cholesky factorization of the {matrix_name} ({size}x{size}) failed: "
            "matrix is not positive definite"
        )
        details = []
        if noise_std is not None:
            details.append(f"noise_std={noise_std:g}")
        if jitter is not None:
            details.append(f"jitter={jitter:g}")
        if details:
            msg += " (" + ", ".join(details) + ")"
        msg += ". Increase noise or jitter, or check for duplicate inputs."
        super().__init__(msg)


class DimensionMismatch(GPRegError, ValueError):
    """Raised when input arrays have inconsistent shapes."""
