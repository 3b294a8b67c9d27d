# gpreg/hyperparam/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Hyperparameter interface of GP regression models.

Modules
-------
param
    Named hyperparameter vector on the log scale.
priors
    Half-normal priors.
log_density
    Log posterior density exposed to external samplers.
selection
    MAP selection with SciPy.
"""
from .param import Param, make_gpr_param
from .priors import log_prior_half_normal, log_prior_hyperparameters
from .log_density import LogDensity
from .selection import (
    autoselect_parameters,
    initial_guess,
    select_from_log_density,
    select_hyperparameters_map,
)

__all__ = [
    "Param",
    "make_gpr_param",
    "log_prior_half_normal",
    "log_prior_hyperparameters",
    "LogDensity",
    "autoselect_parameters",
    "initial_guess",
    "select_from_log_density",
    "select_hyperparameters_map",
]
