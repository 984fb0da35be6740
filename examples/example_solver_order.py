#########################################################################################
##
##               epifit example: convergence order of the integration schemes
##
##  Model:   50 decoupled cubic relaxations dx/dt = -10 (x - k)^3 with a
##           closed form solution
##  Study:   error at t = 1 over the step size for forward euler,
##           backward euler and heun's method
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np
import matplotlib.pyplot as plt

from epifit.models import CubicRelaxation
from epifit.solvers import ExplicitEuler, ImplicitEuler, Heun, TrajectorySolver


# SETUP =================================================================================

model   = CubicRelaxation()
horizon = 1.0
exact   = model.analytic_solution(horizon)

step_counts = [1000, 2000, 4000, 8000, 16000]


# Run Example ===========================================================================

if __name__ == '__main__':

    fig, ax = plt.subplots(figsize=(6, 5), tight_layout=True)

    for Scheme in [ExplicitEuler, ImplicitEuler, Heun]:

        errors = []
        for n in step_counts:
            trajectory = TrajectorySolver(n, horizon, Scheme=Scheme).solve(model)
            errors.append(np.max(np.abs(trajectory[:, -1] - exact)))

        dts = horizon / np.array(step_counts)
        observed = np.polyfit(np.log(dts), np.log(errors), 1)[0]

        print(f"{Scheme.method_name:5s} expected order {Scheme.order}, observed {observed:.2f}")

        ax.loglog(dts, errors, "o-", label=f"{Scheme.__name__} (order {observed:.2f})")

    ax.set_xlabel("step size dt")
    ax.set_ylabel("max error at t=1")
    ax.grid(True, which="both")
    ax.legend()

    plt.show()
