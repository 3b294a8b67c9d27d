import json
import os
import subprocess
import sys

import numpy as np
import pytest

from gpreg.core.posterior import condition, predict
from gpreg.kernel import squared_exponential_covariance as cov
from gpreg.hyperparam import LogDensity

pytest.importorskip("torch")

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# The backend is chosen once per process, so the torch run needs its own interpreter.
SCRIPT = """
import json
import numpy as np
import gpreg
import gpreg.num as gnp
from gpreg.core.posterior import condition, predict
from gpreg.kernel import squared_exponential_covariance as cov
from gpreg.hyperparam import LogDensity

xi = np.arange(10.0).reshape(-1, 1)
zi = np.sin(xi).reshape(-1)
posterior = condition(xi, zi, 0.1, cov, [1.0, 1.0], standardize=False)
mean, var = predict(posterior, np.array([[0.5], [3.3]]), return_type=0, convert_out=True)
value, grad = LogDensity(xi, zi).value_and_grad(np.log([1.0, 1.0, 0.1]))
print(json.dumps({
    "backend": gpreg.config.get_backend(),
    "array_type": type(posterior.chol).__module__,
    "mean": np.asarray(mean).tolist(),
    "var": np.asarray(var).tolist(),
    "value": float(gnp.to_scalar(value)),
    "grad": gnp.to_np(grad).tolist(),
}))
"""


def _run_with_torch():
    env = dict(os.environ)
    env["GPREG_BACKEND"] = "torch"
    env["PYTHONPATH"] = ROOT + os.pathsep + env.get("PYTHONPATH", "")
    out = subprocess.run(
        [sys.executable, "-c", SCRIPT],
        env=env,
        cwd=ROOT,
        capture_output=True,
        text=True,
        check=True,
    )
    return json.loads(out.stdout.strip().splitlines()[-1])


def test_torch_backend_matches_numpy(sin_data):
    result = _run_with_torch()
    assert result["backend"] == "torch"
    assert result["array_type"].startswith("torch")

    xi, zi = sin_data
    posterior = condition(xi, zi, 0.1, cov, [1.0, 1.0], standardize=False)
    mean, var = predict(posterior, np.array([[0.5], [3.3]]), return_type=0, convert_out=True)
    assert np.allclose(result["mean"], mean, atol=1e-8)
    assert np.allclose(result["var"], var, atol=1e-8)

    ld = LogDensity(xi, zi)
    theta = np.log([1.0, 1.0, 0.1])
    value, grad = ld.value_and_grad(theta)
    assert np.isclose(result["value"], float(value), atol=1e-8)
    # autograd on torch, finite differences on numpy
    assert np.allclose(result["grad"], grad, rtol=1e-4, atol=1e-5)
