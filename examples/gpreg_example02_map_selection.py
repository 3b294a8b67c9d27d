'''
Gaussian process regression in 2D with hyperparameters selected by MAP.

Inputs and outputs are standardized; the signal variance, one
lengthscale per input dimension and the noise standard deviation receive
half-normal priors and are selected by maximizing their log posterior
density.

----
Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)
'''
import numpy as np
import gpreg


def branin(x):
    """Branin function on [-5, 10] x [0, 15]."""
    x1, x2 = x[:, 0], x[:, 1]
    a, b, c = 1.0, 5.1 / (4 * np.pi**2), 5 / np.pi
    r, s, t = 6.0, 10.0, 1 / (8 * np.pi)
    return a * (x2 - b * x1**2 + c * x1 - r) ** 2 + s * (1 - t) * np.cos(x1) + s


def generate_data(ni, nt, noise_std):
    rng = np.random.default_rng(1)
    box = np.array([[-5.0, 0.0], [10.0, 15.0]])
    xi = box[0] + (box[1] - box[0]) * rng.random((ni, 2))
    zi = branin(xi) + noise_std * rng.standard_normal(ni)
    xt = box[0] + (box[1] - box[0]) * rng.random((nt, 2))
    zt = branin(xt)
    return xt, zt, xi, zi


def main():
    xt, zt, xi, zi = generate_data(ni=40, nt=200, noise_std=1.0)

    options = gpreg.GPROptions(anisotropic=True)
    model = gpreg.Model(options=options)
    posterior = model.fit(xi, zi)
    print(model)
    print(model.selection_info.message)

    zt_mean, zt_var = model.predict(posterior, xt, return_type=0)
    rmse = np.sqrt(np.mean((zt_mean - zt) ** 2))
    coverage = np.mean(np.abs(zt_mean - zt) <= 1.96 * np.sqrt(zt_var))
    print(f"Test RMSE: {rmse:.3f} (output std {np.std(zt):.3f})")
    print(f"Coverage of 95% intervals: {coverage:.2f}")


if __name__ == "__main__":
    main()
