# gpreg/core/standardize.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Affine standardization of training data.

Inputs are centered and scaled column by column, outputs are centered
and scaled globally. The transform is recorded so that query points can
be mapped to the standardized space and predictions mapped back.
"""
from dataclasses import dataclass
from typing import Any

import gpreg.num as gnp


def _safe_scale(s):
    """Replace zero scales (constant columns) by one."""
    return gnp.where(s > 0.0, s, gnp.ones(s.shape))


@dataclass(frozen=True)
class Standardization:
    """Recorded affine transform of inputs and outputs.

    Attributes
    ----------
    x_mean, x_std : gnp.array, shape (d,)
        Column means and standard deviations of the training inputs.
    z_mean, z_std : float
        Mean and standard deviation of the training outputs.
    """

    x_mean: Any
    x_std: Any
    z_mean: float
    z_std: float

    @classmethod
    def identity(cls, d):
        return cls(gnp.zeros((d,)), gnp.ones((d,)), 0.0, 1.0)

    @classmethod
    def from_data(cls, xi, zi):
        """Fit the transform on training inputs (n, d) and outputs (n,)."""
        x_mean = gnp.mean(xi, axis=0)
        x_std = _safe_scale(gnp.std(xi, axis=0))
        z_mean = gnp.to_scalar(gnp.mean(zi))
        z_std = gnp.to_scalar(gnp.std(zi))
        if not z_std > 0.0:
            z_std = 1.0
        return cls(x_mean, x_std, z_mean, z_std)

    def transform_inputs(self, x):
        return (x - self.x_mean) / self.x_std

    def transform_outputs(self, z):
        return (z - self.z_mean) / self.z_std

    def inverse_outputs(self, z):
        return z * self.z_std + self.z_mean

    def inverse_covariance(self, v):
        """Map a (co)variance from the standardized output scale back."""
        return v * self.z_std**2
