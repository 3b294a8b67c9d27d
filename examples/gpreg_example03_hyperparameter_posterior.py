'''
Posterior predictive distribution integrated over GP hyperparameters.

The log posterior density of [sigma2, rho, noise_std] is handed to a
random-walk Metropolis-Hastings sampler. Each retained draw conditions
the GP on the data and contributes posterior predictive samples. Any
sampler consuming LogDensity.log_target() could be used instead.

----
Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
Copyright (c) 2022-2026, CentraleSupelec
License: GPLv3 (see LICENSE)
'''
import numpy as np
import gpreg


def generate_data(noise_std):
    rng = np.random.default_rng(2)
    xi = np.sort(rng.uniform(-3.0, 3.0, 15)).reshape(-1, 1)
    zi = np.sin(2.0 * xi).reshape(-1) + noise_std * rng.standard_normal(15)
    xt = np.linspace(-3.5, 3.5, 71).reshape(-1, 1)
    return xt, xi, zi


def main():
    xt, xi, zi = generate_data(noise_std=0.2)

    log_density = gpreg.LogDensity(xi, zi)
    draws, mh = gpreg.mcmc.sample_hyperparameters(
        log_density, n_steps_total=1500, burnin_period=500, n_chains=2, seed=0
    )
    print("Posterior medians:")
    for name, med in zip(log_density.names, np.median(draws.reshape(-1, log_density.dim), axis=0)):
        print(f"  {name}: {med:.3g}")

    thinned = draws.reshape(-1, log_density.dim)[::100]
    zsim = gpreg.core.posterior_predictive_draws(
        xi, zi, xt, thinned, log_density.covariance, samples_per_draw=5
    )
    print(f"Posterior predictive samples: {zsim.shape}")
    band = np.percentile(zsim, [2.5, 97.5], axis=1)
    print(f"Mean width of the 95% band: {np.mean(band[1] - band[0]):.3f}")


if __name__ == "__main__":
    main()
