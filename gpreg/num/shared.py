# gpreg/num/shared.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""Backend-independent helpers for gpreg.num."""

from typing import Callable, Union, Any

Scalar = Union[int, float]
ArrayLike = Any


def derivative_finite_diff(
    f: Callable[[Scalar], ArrayLike], x: Scalar, h: Scalar
) -> ArrayLike:
    """
    5-point central difference derivative of f w.r.t. scalar x.
    f(x) must return a scalar or an array of fixed shape.
    """
    f_x_p2 = f(x + 2 * h)
    f_x_p1 = f(x + h)
    f_x_m1 = f(x - h)
    f_x_m2 = f(x - 2 * h)
    return (-f_x_p2 + 8 * f_x_p1 - 8 * f_x_m1 + f_x_m2) / (12.0 * h)
