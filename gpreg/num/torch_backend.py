# gpreg/num/torch_backend.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""PyTorch numerical backend for GPreg.

Torch implementation of the gpreg.num API. Gradients of the log density
are obtained by automatic differentiation.
"""

import builtins
from typing import Any, Optional, Tuple
from gpreg.config import get_config, init_backend, get_logger

ArrayLike = Any

_gpreg_backend_: str = init_backend()
_config = get_config()
_logger = get_logger()
_logger.debug("Using backend: %s", _gpreg_backend_)

_LINALG_ERROR_KEYWORDS = (
    "singular",
    "not positive definite",
    "not positive-definite",
    "cholesky",
    "lapack",
    "cusolver",
)


# -----------------------------------------------------
#
#                      TORCH
#
# -----------------------------------------------------

import torch
import numpy

_torch_dtype = torch.float64
torch.set_default_dtype(_torch_dtype)
_config.dtype_resolved = _torch_dtype

ndarray = torch.Tensor

from torch import (
    where,
    isnan,
    isfinite,
    hstack,
    concatenate,
    diag,
    einsum,
    matmul,
    pi,
)
from torch.linalg import cholesky


def safe_neginf():
    return torch.tensor(-float("inf"), requires_grad=True)


def _is_linalg_exception(exc: Exception) -> bool:
    if isinstance(exc, torch.linalg.LinAlgError):
        return True
    msg = str(exc).lower()
    return builtins.any(keyword in msg for keyword in _LINALG_ERROR_KEYWORDS)


# ..................................................


def _resolve_dtype(dtype):
    if dtype is None or isinstance(dtype, torch.dtype):
        return dtype
    if dtype is float:
        return _torch_dtype
    if dtype is int:
        return torch.long
    if dtype is bool:
        return torch.bool
    raise TypeError(f"Unsupported dtype {dtype!r} on the torch backend.")


def asarray(x, dtype=None):
    dtype = _resolve_dtype(dtype)
    if isinstance(x, (int, float)):
        return torch.tensor([x], dtype=dtype or _torch_dtype)
    x_ = torch.as_tensor(x)
    if dtype is None and x_.is_floating_point():
        dtype = _torch_dtype
    return x_ if dtype is None or x_.dtype == dtype else x_.to(dtype=dtype)


def array(x, dtype=None):
    return asarray(x, dtype=dtype).clone()


def zeros(shape):
    return torch.zeros(shape, dtype=_torch_dtype)


def ones(shape):
    return torch.ones(shape, dtype=_torch_dtype)


def eye(n):
    return torch.eye(n, dtype=_torch_dtype)


def to_np(x):
    if torch.is_tensor(x):
        return x.detach().cpu().numpy()
    return x


def to_scalar(x):
    return asarray(x).reshape(-1)[0].item()


def isscalar(x):
    if torch.is_tensor(x):
        return x.numel() == 1
    return numpy.isscalar(x)


def detach(x):
    return x.detach() if torch.is_tensor(x) else x


def allclose(x, y, rtol=1e-05, atol=1e-08):
    x = asarray(x)
    y = asarray(y).to(dtype=x.dtype)
    return torch.allclose(x, y, rtol=rtol, atol=atol)


# ..................................................


def _tensor_in(f):
    def f_(x):
        if torch.is_tensor(x):
            return f(x)
        return f(torch.as_tensor(x, dtype=_torch_dtype))

    return f_


exp = _tensor_in(torch.exp)
log = _tensor_in(torch.log)


def _axis_to_dim(f):
    def f_(x, axis=None, **kwargs):
        x = asarray(x)
        return f(x, **kwargs) if axis is None else f(x, dim=axis, **kwargs)

    return f_


sum = _axis_to_dim(torch.sum)
mean = _axis_to_dim(torch.mean)
any = _axis_to_dim(torch.any)
all = _axis_to_dim(torch.all)


def std(x, axis=None):
    # population standard deviation, as numpy.std
    x = asarray(x)
    if axis is None:
        return torch.std(x, correction=0)
    return torch.std(x, dim=axis, correction=0)


def min(x, axis=None):
    x = asarray(x)
    return torch.min(x) if axis is None else torch.min(x, dim=axis).values


def max(x, axis=None):
    x = asarray(x)
    return torch.max(x) if axis is None else torch.max(x, dim=axis).values


def maximum(x1, x2):
    return torch.maximum(asarray(x1), asarray(x2))


# ..................................................


def value_and_grad(f, x) -> Tuple[ArrayLike, ArrayLike]:
    """Return (f(x), grad f(x)) for a scalar-valued f, by autograd.

    A non-finite value gets a zero gradient.
    """
    with torch.enable_grad():
        x_ = asarray(x).detach().clone().reshape(-1).requires_grad_(True)
        y = f(x_)
        if not torch.is_tensor(y) or y.numel() != 1:
            raise ValueError("f(x) must return a scalar tensor.")
        y = y.reshape(())
        if not torch.isfinite(y):
            return y.detach(), torch.zeros_like(x_).detach()
        (g,) = torch.autograd.grad(y, x_, allow_unused=True)
    if g is None:
        g = torch.zeros_like(x_)
    return y.detach(), g.detach()


# ..................................................


def _sqdist(x, y):
    x_norm = (x**2).sum(1).view(-1, 1)
    y_norm = (y**2).sum(1).view(1, -1)
    return (x_norm + y_norm - 2.0 * x @ y.t()).clamp(min=0.0)


def scaled_sqdistance(invrho, x, y: Optional[ArrayLike]):
    """Squared Euclidean distances between rows of x * invrho and y * invrho."""
    xs = invrho * x
    if y is x or y is None:
        d = _sqdist(xs, xs)
        return d.masked_fill(torch.eye(d.size(0), dtype=torch.bool), 0.0)
    return _sqdist(xs, invrho * y)


def scaled_sqdistance_elementwise(invrho, x, y: Optional[ArrayLike]):
    if x is y or y is None:
        return zeros((x.shape[0],))
    return torch.sum((invrho * (x - y)) ** 2, dim=1)


def solve_triangular(A, B, trans=0, lower=False):
    """Solve op(A) X = B for triangular A, with scipy.linalg's signature."""
    if trans in (1, "T", "t"):
        A = A.mT
        lower = not lower
    elif trans not in (0, "N", "n"):
        raise ValueError(f"Invalid trans={trans!r}; expected 0/1 or 'N'/'T'.")
    B = asarray(B)
    if B.dim() == 1:
        return torch.linalg.solve_triangular(A, B.reshape(-1, 1), upper=not lower).reshape(-1)
    return torch.linalg.solve_triangular(A, B, upper=not lower)


# ..................................................

_torch_gen = torch.Generator()
_torch_gen.manual_seed(_config.seed)


def set_seed(seed):
    """Reseed the generator used by :func:`randn`."""
    global _torch_gen
    _torch_gen = torch.Generator()
    _torch_gen.manual_seed(seed)


def randn(*shape):
    return torch.randn(shape, generator=_torch_gen)
