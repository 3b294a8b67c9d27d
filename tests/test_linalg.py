import numpy as np
import pytest

import gpreg.num as gnp
from gpreg.core.linalg import (
    cholesky_factor,
    cholesky_solve_from_factor,
    solve_lower,
    logdet_from_chol,
)
from gpreg.exceptions import NumericalInstabilityError, GPRegError


def _random_spd(n, seed=0):
    rng = np.random.default_rng(seed)
    A = rng.standard_normal((n, n))
    return A @ A.T + n * np.eye(n)


def test_cholesky_round_trip():
    K = _random_spd(8)
    L = gnp.to_np(cholesky_factor(gnp.asarray(K)))
    assert np.allclose(L, np.tril(L))
    assert np.allclose(L @ L.T, K)


def test_solves_and_logdet():
    K = _random_spd(6, seed=1)
    b = np.random.default_rng(2).standard_normal(6)
    L = cholesky_factor(gnp.asarray(K))
    x = gnp.to_np(cholesky_solve_from_factor(L, gnp.asarray(b)))
    assert np.allclose(K @ x, b)
    v = gnp.to_np(solve_lower(L, gnp.asarray(np.eye(6))))
    assert np.allclose(gnp.to_np(L) @ v, np.eye(6))
    assert np.isclose(gnp.to_scalar(logdet_from_chol(L)), np.linalg.slogdet(K)[1])


def test_failure_names_matrix():
    K = np.array([[1.0, 2.0], [2.0, 1.0]])
    with pytest.raises(NumericalInstabilityError) as excinfo:
        cholesky_factor(gnp.asarray(K), "training covariance", noise_std=0.0, jitter=0.0)
    err = excinfo.value
    assert isinstance(err, GPRegError)
    assert isinstance(err, ArithmeticError)
    assert err.matrix_name == "training covariance"
    assert err.size == 2
    assert "training covariance (2x2)" in str(err)
    assert "noise_std=0" in str(err)
