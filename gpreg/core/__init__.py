# gpreg/core/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------

"""
Core components of the gpreg package.

This subpackage contains the GP posterior solver (conditioning,
prediction, log marginal likelihood), sampling routines, input/output
standardization and supporting linear algebra.

Public API
----------
Model : class
    GP regression model façade.
GPROptions : class
    Model options.
PosteriorModel : class
    GP conditioned on data.
fit, predict : functions
    Entry points.
"""

from .options import GPROptions
from .posterior import (
    PosteriorModel,
    condition,
    log_marginal_likelihood,
)
from .sample_paths import sample_posterior, posterior_predictive_draws
from .model import Model, fit, predict

__all__ = [
    "Model",
    "GPROptions",
    "PosteriorModel",
    "condition",
    "log_marginal_likelihood",
    "sample_posterior",
    "posterior_predictive_draws",
    "fit",
    "predict",
]
