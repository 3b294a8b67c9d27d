import numpy as np
import pytest

import gpreg.num as gnp
from gpreg.hyperparam.param import Param, make_gpr_param


def test_basic_construction():
    p = Param(values=[0.0, 1.0, -1.0], names=["sigma2", "rho", "noise"])
    assert p.dim == 3
    assert gnp.allclose(
        p.denormalized_values, gnp.asarray([1.0, np.exp(1.0), np.exp(-1.0)])
    )


def test_inconsistent_fields():
    with pytest.raises(ValueError):
        Param(values=[0.0, 1.0], names=["only_one"])
    p = make_gpr_param(1)
    with pytest.raises(ValueError):
        p.denormalize([0.0, 0.0])


def test_gpr_param_isotropic_layout():
    p = make_gpr_param(3)
    assert p.names == ["signal_variance", "lengthscale", "noise_std"]
    assert gnp.allclose(p.denormalized_values, gnp.ones(3))


def test_gpr_param_anisotropic_layout():
    p = make_gpr_param(2, anisotropic=True, values=np.log([1.5, 0.2, 3.0, 0.1]))
    assert p.names == ["signal_variance", "lengthscale_0", "lengthscale_1", "noise_std"]
    assert np.allclose(gnp.to_np(p.denormalize(p.values)), [1.5, 0.2, 3.0, 0.1])
    assert np.isclose(
        gnp.to_scalar(p.log_abs_det_jacobian(p.values)), np.sum(np.log([1.5, 0.2, 3.0, 0.1]))
    )
    d = p.to_simple_dict()
    assert np.isclose(d["lengthscale_1"], 3.0)
    assert "lengthscale_1" in repr(p)


def test_values_are_copied():
    theta = np.log([2.0, 0.5, 0.1])
    p = make_gpr_param(1, values=theta)
    theta[0] = 0.0
    assert np.isclose(p.to_simple_dict()["signal_variance"], 2.0)
