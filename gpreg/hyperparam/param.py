# gpreg/hyperparam/param.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Param: named hyperparameter vector on the log scale

For GP regression the layout is

    [signal_variance, lengthscale(s)..., noise_std]

Every entry is stored as the logarithm of its natural value, so that
samplers and optimizers work on R^d while the kernel sees positive
values.
"""

from typing import List, Union, Optional
import gpreg.num as gnp


class Param:
    """Log-normalized hyperparameter vector with names.

    Parameters
    ----------
    values : array_like
        Log-scale values.
    names : list of str
        One name per value.
    """

    def __init__(self, values: Union[List[float], gnp.ndarray], names: List[str]):
        self.values = gnp.array(values, dtype=float).reshape(-1)
        if len(names) != self.dim:
            raise ValueError(
                f"Got {len(names)} names for {self.dim} hyperparameter values."
            )
        self.names: List[str] = list(names)

    @property
    def dim(self) -> int:
        return self.values.shape[0]

    @property
    def denormalized_values(self) -> gnp.ndarray:
        return gnp.exp(self.values)

    def denormalize(self, values):
        """Map log-scale values (possibly carrying gradients) to the natural scale."""
        values = gnp.asarray(values).reshape(-1)
        if values.shape[0] != self.dim:
            raise ValueError(f"Expected {self.dim} values, got {values.shape[0]}.")
        return gnp.exp(values)

    def log_abs_det_jacobian(self, values):
        """log |d denormalize / d values| = sum of the log-scale values."""
        return gnp.sum(gnp.asarray(values).reshape(-1))

    def to_simple_dict(self) -> dict:
        return {
            name: float(gnp.to_scalar(val))
            for name, val in zip(self.names, self.denormalized_values)
        }

    def __repr__(self) -> str:
        denorm = self.denormalized_values
        rows = [
            (
                name + ":",
                f"{float(gnp.to_scalar(v)):.4g}",
                f"{float(gnp.to_scalar(dv)):.4g}",
            )
            for name, v, dv in zip(self.names, self.values, denorm)
        ]
        headers = ("Name:", "Log", "Value")
        widths = [
            max([len(h)] + [len(row[j]) for row in rows])
            for j, h in enumerate(headers)
        ]
        lines = ["    ".join(h.rjust(w) for h, w in zip(headers, widths))]
        for row in rows:
            lines.append("    ".join(val.rjust(w) for val, w in zip(row, widths)))
        return "\n".join(lines)


def make_gpr_param(
    d: int = 1,
    anisotropic: bool = False,
    values: Optional[Union[List[float], gnp.ndarray]] = None,
) -> Param:
    """
    Build a Param for [signal_variance, lengthscale(s), noise_std].

    If `values` is provided, it holds log-scale values and its length
    must be 2 + (d if anisotropic else 1). If not, all values are 0,
    that is, every hyperparameter equals 1 on the natural scale.
    """
    k = d if anisotropic else 1
    if k == 1:
        rho_names = ["lengthscale"]
    else:
        rho_names = [f"lengthscale_{i}" for i in range(k)]
    names = ["signal_variance"] + rho_names + ["noise_std"]
    if values is None:
        values = gnp.zeros((k + 2,))
    return Param(values=values, names=names)
