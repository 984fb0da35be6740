#########################################################################################
##
##               epifit example: recovering SIQRD rate constants
##
##  Model:   SIQRD compartments (susceptible, infected, quarantined,
##           recovered, dead) with five rate constants
##  Fit:     all five rates from 40 days of synthetic daily observations,
##           once with BFGS and once with the conjugate gradient method
##
#########################################################################################

# IMPORTS ===============================================================================

import logging
import warnings

import numpy as np
import matplotlib.pyplot as plt

from epifit import LoggerManager
from epifit.models import SIQRD
from epifit.solvers import Heun, TrajectorySolver
from epifit.opt import Observations, fit_siqrd
from epifit.exceptions import LineSearchStallWarning


# SYNTHETIC DATA ========================================================================

# rates used to generate the observations
true_params = dict(alpha=0.02, beta=0.5, gamma=0.1, delta=0.2, mu=0.01)

no_days = 40
ratio   = 8     # integration steps per day

model = SIQRD(**true_params, initial_condition=[9900.0, 100.0, 0.0, 0.0, 0.0])

solver = TrajectorySolver(
    step_count=(no_days - 1) * ratio,
    horizon=float(no_days - 1),
    Scheme=Heun,
)


# Run Example ===========================================================================

if __name__ == '__main__':

    LoggerManager().configure(level=logging.INFO)

    trajectory = solver.solve(model)

    # daily samples with 0.5% multiplicative noise
    rng = np.random.default_rng(0)
    daily = trajectory[:, ::ratio] * (1.0 + 0.005 * rng.standard_normal((5, no_days)))
    daily[:, 0] = trajectory[:, 0]

    observations = Observations(
        time=np.arange(no_days),
        data=daily,
        name="synthetic outbreak",
        labels=SIQRD.labels,
    )

    # start 10% off in every rate
    start = model.parameters() * np.array([1.1, 0.9, 1.1, 0.9, 1.1])

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", LineSearchStallWarning)

        result_bfgs = fit_siqrd(observations, start, tolerance=1e-8, method="bfgs")
        result_cgm = fit_siqrd(
            observations, start, tolerance=1e-8,
            method="cgm", formula="PR", max_iter=200,
        )

    for name, result in [("BFGS", result_bfgs), ("CGM (PR)", result_cgm)]:
        print(f"{name}: {result.optimizer_result}")
        for key, value in zip(SIQRD.param_names, result.parameters):
            print(f"    {key:6s} = {value:.5f}   (true {true_params[key]:.5f})")

    ax = result_bfgs.plot(title="SIQRD fit with BFGS")
    ax.set_yscale("symlog")
    plt.show()
