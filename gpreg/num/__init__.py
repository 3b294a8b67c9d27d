# gpreg/num/__init__.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
"""Numerical backend dispatcher for GPreg."""

from gpreg.config import init_backend

_gpreg_backend_ = init_backend()

if _gpreg_backend_ == "numpy":
    from . import numpy_backend as _backend
elif _gpreg_backend_ == "torch":
    from . import torch_backend as _backend
else:
    raise RuntimeError(
        "Please set the GPREG_BACKEND environment variable to 'numpy' or 'torch'."
    )

# Re-export backend API.
for _name in dir(_backend):
    if _name.startswith("__"):
        continue
    globals()[_name] = getattr(_backend, _name)
