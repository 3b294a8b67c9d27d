'''
Gaussian process regression in 1D with fixed hyperparameters.

The latent function sin(x) is observed at x = 0, 1, ..., 9 with noise.
The GP has a squared-exponential covariance with signal variance 1,
lengthscale 1 and noise standard deviation 0.1. We compute the posterior
mean and standard deviation of the latent function on a grid, and a few
posterior sample paths.

----
Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)
'''
import numpy as np
import gpreg


def generate_data(noise_std):
    """Observations of sin on a regular grid."""
    rng = np.random.default_rng(0)
    xi = np.arange(10.0).reshape(-1, 1)
    zi = np.sin(xi).reshape(-1) + noise_std * rng.standard_normal(xi.shape[0])
    xt = np.linspace(-1.0, 10.0, 111).reshape(-1, 1)
    zt = np.sin(xt).reshape(-1)
    return xt, zt, xi, zi


def main():
    noise_std = 0.1
    xt, zt, xi, zi = generate_data(noise_std)

    options = gpreg.GPROptions(
        signal_variance=1.0,
        lengthscale=1.0,
        noise_std=noise_std,
        standardize=False,
        num_posterior_samples=5,
    )
    posterior = gpreg.fit(xi, zi, options)
    print(posterior)

    zt_mean, zt_cov, zt_samples = gpreg.predict(posterior, xt)
    zt_std = np.sqrt(np.maximum(np.diag(zt_cov), 0.0))

    rmse = np.sqrt(np.mean((zt_mean - zt) ** 2))
    print(f"RMSE of the posterior mean on the grid: {rmse:.3f}")
    print(f"Posterior std: min {zt_std.min():.3f}, max {zt_std.max():.3f}")
    print(f"Sample paths: {zt_samples.shape[1]} on {zt_samples.shape[0]} points")

    m, cov = gpreg.predict(posterior, np.array([[0.5]]))
    print(f"Prediction at 0.5: {m[0]:.3f} +/- {np.sqrt(cov[0, 0]):.3f} "
          f"(sin(0.5) = {np.sin(0.5):.3f})")


if __name__ == "__main__":
    main()
