# gpreg/core/utils.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Small utilities used across `gpreg.core` modules.

This file hosts:
- Shape/type validation & conversion helpers for (xi, zi, xt)
- Noise/jitter validation
- Splitting of a hyperparameter vector into kernel and noise parts
"""
import gpreg.num as gnp
from gpreg.exceptions import DimensionMismatch, InvalidHyperparameter


def _as_2d_inputs(x, name):
    if len(x.shape) == 1:
        return x.reshape(-1, 1)
    if len(x.shape) != 2:
        raise DimensionMismatch(
            f"{name} should be a 1D or 2D array, got shape {tuple(x.shape)}"
        )
    return x


def ensure_shapes_and_type(
    *,
    xi=None,
    zi=None,
    xt=None,
    convert: bool = True,
):
    """Validate and adjust shapes/types of input arrays.

    Parameters
    ----------
    xi : array_like, optional
        Observation points (n, d), or (n,) for scalar inputs.
    zi : array_like, optional
        Observed values (n,) or (n, 1).
    xt : array_like, optional
        Prediction points (m, d), or (m,) for scalar inputs.
    convert : bool, optional
        Convert arrays to backend type (default True).

    Returns
    -------
    tuple
        (xi, zi, xt) with proper shapes and types.

    Raises
    ------
    DimensionMismatch
        If an array has the wrong number of dimensions, if xi has no
        rows, if xi and zi have different numbers of rows, or if xi and
        xt have different numbers of columns.
    """
    if convert:
        if xi is not None:
            xi = gnp.asarray(xi)
        if zi is not None:
            zi = gnp.asarray(zi)
        if xt is not None:
            xt = gnp.asarray(xt)

    if xi is not None:
        xi = _as_2d_inputs(xi, "xi")
        if xi.shape[0] == 0:
            raise DimensionMismatch("xi must hold at least one observation, got 0 rows")

    if zi is not None:
        if len(zi.shape) == 2:
            if zi.shape[1] != 1:
                raise DimensionMismatch(
                    f"zi should only have one column if it's a 2D array, got shape {tuple(zi.shape)}"
                )
            zi = zi.reshape(-1)  # (n,1) -> (n,)
        elif len(zi.shape) != 1:
            raise DimensionMismatch(
                f"zi should be 1D or a 2D column array, got shape {tuple(zi.shape)}"
            )

    if xt is not None:
        xt = _as_2d_inputs(xt, "xt")

    if xi is not None and zi is not None and xi.shape[0] != zi.shape[0]:
        raise DimensionMismatch(
            f"xi and zi must have the same number of rows, got {xi.shape[0]} and {zi.shape[0]}"
        )
    if xi is not None and xt is not None and xi.shape[1] != xt.shape[1]:
        raise DimensionMismatch(
            f"xi and xt must have the same number of columns, got {xi.shape[1]} and {xt.shape[1]}"
        )

    return xi, zi, xt


def check_noise_and_jitter(noise_std, jitter):
    """Validate the observation noise and the numerical jitter.

    Raises
    ------
    InvalidHyperparameter
        If noise_std or jitter is negative or not finite.
    """
    noise = gnp.asarray(noise_std).reshape(-1)
    if noise.shape[0] != 1:
        raise InvalidHyperparameter("noise_std", gnp.to_np(gnp.detach(noise)).tolist(), "must be a scalar")
    if not bool(gnp.all(gnp.isfinite(noise))) or not bool(gnp.all(noise >= 0.0)):
        raise InvalidHyperparameter(
            "noise_std", gnp.to_scalar(gnp.detach(noise)), "must be nonnegative and finite"
        )
    if not (jitter >= 0.0) or jitter == float("inf"):
        raise InvalidHyperparameter("jitter", jitter, "must be nonnegative and finite")


def split_hyperparameters(values):
    """Split [sigma2, rho_1, ..., rho_k, noise_std] into (covparam, noise_std).

    Parameters
    ----------
    values : array_like, shape (2 + k,)
        Natural-scale hyperparameters, noise standard deviation last.

    Returns
    -------
    covparam : gnp.array, shape (1 + k,)
    noise_std : gnp.array, shape ()
    """
    values = gnp.asarray(values).reshape(-1)
    if values.shape[0] < 3:
        raise DimensionMismatch(
            "hyperparameter vector must hold [sigma2, rho_1, ..., rho_k, noise_std], "
            f"got {values.shape[0]} values"
        )
    return values[:-1], values[-1]
