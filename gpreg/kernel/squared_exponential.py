# gpreg/kernel/squared_exponential.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
import gpreg.num as gnp
from gpreg.config import get_default_jitter
from gpreg.exceptions import InvalidHyperparameter, DimensionMismatch


def squared_exponential_kernel(h2):
    """Squared-exponential kernel.

    .. math::
        k(h) = \\exp(-h^2 / 2)

    Parameters
    ----------
    h2 : gnp.array
        Squared scaled distances between points.

    Returns
    -------
    gnp.array
        Kernel values.
    """
    return gnp.exp(-0.5 * h2)


def check_covparam(param, d):
    """Validate a natural-scale covariance parameter vector.

    Parameters
    ----------
    param : gnp.array, shape (2,) or (1 + d,)
        [sigma2, rho] (isotropic) or [sigma2, rho_1, ..., rho_d].
    d : int
        Input dimension.

    Returns
    -------
    sigma2 : gnp.array, shape ()
    invrho : gnp.array, shape (1,) or (d,)

    Raises
    ------
    InvalidHyperparameter
        If sigma2 or a lengthscale is not positive and finite, or if the
        number of lengthscales is neither 1 nor d.
    """
    param = gnp.asarray(param).reshape(-1)
    n_rho = param.shape[0] - 1
    if n_rho != 1 and n_rho != d:
        raise InvalidHyperparameter(
            "lengthscale",
            n_rho,
            f"expected 1 or {d} lengthscales for inputs of dimension {d}",
        )
    sigma2 = param[0]
    rho = param[1:]
    if not bool(gnp.isfinite(sigma2)) or not bool(sigma2 > 0.0):
        raise InvalidHyperparameter("signal_variance", gnp.to_scalar(gnp.detach(sigma2)))
    if not bool(gnp.all(gnp.isfinite(rho))) or not bool(gnp.all(rho > 0.0)):
        raise InvalidHyperparameter("lengthscale", gnp.to_np(gnp.detach(rho)).tolist())
    return sigma2, 1.0 / rho


def squared_exponential_covariance_ii_or_tt(x, param, pairwise=False, jitter=None):
    """Covariance between observations or predictands at x.

    .. math::
        K_{ij} = \\sigma^2 k(h_{ij}) + \\epsilon \\delta_{ij}

    where :math:`\\epsilon` is the jitter.

    Parameters
    ----------
    x : gnp.array, shape (n, d)
    param : gnp.array, shape (2,) or (1 + d,)
        [sigma2, rho] or [sigma2, rho_1, ..., rho_d], natural scale.
    pairwise : bool
        If True, return diag vector; else full covariance.
    jitter : float, optional
        Diagonal jitter. Defaults to the configured jitter.

    Returns
    -------
    gnp.array
        (n,n) matrix or (n,) vector if pairwise.
    """
    if jitter is None:
        jitter = get_default_jitter()
    sigma2, invrho = check_covparam(param, x.shape[1])
    if pairwise:
        return (sigma2 + jitter) * gnp.ones((x.shape[0],))
    H2 = gnp.scaled_sqdistance(invrho, x, x)
    return sigma2 * squared_exponential_kernel(H2) + jitter * gnp.eye(x.shape[0])


def squared_exponential_covariance_it(x, y, param, pairwise=False):
    """Cross-covariance between observations x and prediction points y.

    Parameters
    ----------
    x : gnp.array, shape (nx, d)
    y : gnp.array, shape (ny, d)
    param : gnp.array, shape (2,) or (1 + d,)
    pairwise : bool
        If True, return elementwise k(x_i,y_i); else (nx,ny).

    Returns
    -------
    gnp.array
        (nx,ny) matrix or (n,) vector if pairwise.
    """
    if x.shape[1] != y.shape[1]:
        raise DimensionMismatch(
            f"x has {x.shape[1]} columns but y has {y.shape[1]} columns"
        )
    sigma2, invrho = check_covparam(param, x.shape[1])
    if pairwise:
        if x.shape[0] != y.shape[0]:
            raise DimensionMismatch(
                f"pairwise covariance needs as many rows in x ({x.shape[0]}) "
                f"as in y ({y.shape[0]})"
            )
        H2 = gnp.scaled_sqdistance_elementwise(invrho, x, y)
    else:
        H2 = gnp.scaled_sqdistance(invrho, x, y)
    return sigma2 * squared_exponential_kernel(H2)


def squared_exponential_covariance(x, y, param, pairwise=False, jitter=None):
    """Squared-exponential covariance. Wrapper.

    The jitter is added on the diagonal only in the same-set case, that is
    when ``y is None`` or ``y is x``.

    Parameters
    ----------
    x : gnp.array, shape (nx, d)
    y : gnp.array or None
    param : gnp.array, shape (2,) or (1 + d,)
    pairwise : bool
    jitter : float, optional

    Returns
    -------
    gnp.array
    """
    if y is x or y is None:
        return squared_exponential_covariance_ii_or_tt(x, param, pairwise, jitter)
    return squared_exponential_covariance_it(x, y, param, pairwise)
