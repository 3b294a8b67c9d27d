# gpreg/mcmc/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""
Reference MCMC sampler for GP regression hyperparameters.

Any sampler consuming ``LogDensity.log_target()`` can replace it.

Public API
----------
MHOptions, MetropolisHastings
    Metropolis-Hastings configuration and sampler.
sample_hyperparameters
    Posterior hyperparameter sampling from a LogDensity.
"""
from __future__ import annotations

import importlib

__all__ = [
    "MHOptions",
    "MetropolisHastings",
    "sample_hyperparameters",
]

_EXPORT_TO_MODULE = {
    "MHOptions": "mh",
    "MetropolisHastings": "mh",
    "sample_hyperparameters": "param_posterior",
}


def __getattr__(name: str):
    module_name = _EXPORT_TO_MODULE.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = importlib.import_module(f"{__name__}.{module_name}")
    obj = getattr(module, name)
    globals()[name] = obj
    return obj


def __dir__():
    return sorted(set(globals().keys()) | set(__all__))
