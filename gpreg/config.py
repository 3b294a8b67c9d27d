# gpreg/config.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
import os
import logging
from importlib.util import find_spec

# Read version from VERSION file
_version_file = os.path.join(os.path.dirname(__file__), "..", "VERSION")
try:
    with open(os.path.abspath(_version_file), "r") as f:
        __version__ = f.read().strip()
except FileNotFoundError:
    __version__ = "0.0.0"

_BACKENDS = ("numpy", "torch")


class _GPRegConfig:
    def __init__(self):
        self.version = __version__
        self.backend = None
        self.dtype = float
        self.dtype_resolved = None
        self.seed = 1234
        # numerical jitter on same-set covariance diagonals, independent of noise
        self.jitter = 1e-9
        # logger lives in config
        self.logger = logging.getLogger("gpreg")
        if not self.logger.handlers:
            h = logging.StreamHandler()
            h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
            self.logger.addHandler(h)
        self.logger.setLevel(logging.INFO)

    def __str__(self):
        return (
            f"GPRegConfig("
            f"version={self.version}, "
            f"backend={self.backend}, "
            f"dtype={self.dtype}, "
            f"seed={self.seed}, "
            f"jitter={self.jitter})"
        )

    def __repr__(self):
        return (
            f"<GPRegConfig "
            f"version={self.version!r}, "
            f"backend={self.backend!r}, "
            f"dtype={self.dtype!r}, "
            f"seed={self.seed!r}, "
            f"jitter={self.jitter!r}>"
        )

    def update(self, **kwargs):
        for k, v in kwargs.items():
            if not hasattr(self, k):
                raise AttributeError(f"Unknown configuration field: {k}")
            setattr(self, k, v)
        return self


_config = _GPRegConfig()


def get_config():
    return _config


def _detect_backend():
    env = os.environ.get("GPREG_BACKEND")
    if env in _BACKENDS:
        return env
    return "numpy"


def init_backend():
    """Idempotent. Detect and store backend, set env for downstream imports."""
    if _config.backend is None:
        backend = _detect_backend()
        if backend == "torch" and find_spec("torch") is None:
            raise RuntimeError(
                "GPREG_BACKEND=torch requested but torch is not installed."
            )
        _config.backend = backend
        os.environ["GPREG_BACKEND"] = backend
    return _config.backend


def set_backend(backend: str):
    """Force a backend ('numpy'|'torch') before importing gpreg.num."""
    if backend not in _BACKENDS:
        raise ValueError("backend must be 'numpy' or 'torch'")
    _config.backend = backend
    os.environ["GPREG_BACKEND"] = backend


def get_backend():
    """Return current backend; triggers detection if not set."""
    return _config.backend or init_backend()


def get_default_jitter():
    return _config.jitter


def set_default_jitter(jitter: float):
    if not jitter >= 0.0:
        raise ValueError("jitter must be nonnegative")
    _config.jitter = float(jitter)


def get_logger():
    return _config.logger


def set_log_level(level):
    _config.logger.setLevel(level)
