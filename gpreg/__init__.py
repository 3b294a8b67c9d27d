# gpreg/__init__.py

from . import config
from . import num
from . import exceptions
from . import kernel
from . import core
from . import hyperparam
from . import mcmc
from .core import Model, GPROptions, PosteriorModel, fit, predict
from .hyperparam import LogDensity
from .exceptions import (
    GPRegError,
    InvalidHyperparameter,
    NumericalInstabilityError,
    DimensionMismatch,
)

__version__ = config.__version__

__all__ = [
    "num",
    "kernel",
    "core",
    "hyperparam",
    "mcmc",
    "Model",
    "GPROptions",
    "PosteriorModel",
    "LogDensity",
    "fit",
    "predict",
    "GPRegError",
    "InvalidHyperparameter",
    "NumericalInstabilityError",
    "DimensionMismatch",
    "__version__",
]
