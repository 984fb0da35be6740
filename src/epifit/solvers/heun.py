#########################################################################################
##
##                        HEUN PREDICTOR-CORRECTOR METHOD (RK2)
##                                  (solvers/heun.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from ._scheme import Scheme


# SOLVERS ===============================================================================

class Heun(Scheme):
    """Heun's method, explicit euler predictor with trapezoidal corrector.

    .. math::

        \\begin{aligned}
        p &= x_n + \\Delta t \\, f(x_n) \\\\
        x_{n+1} &= x_n + \\frac{\\Delta t}{2} \\left(f(x_n) + f(p)\\right)
        \\end{aligned}

    Characteristics
    ---------------
    * Order: 2
    * Stages: 2
    * Explicit, conditionally stable
    """

    method_name = "heun"
    order = 2

    def _allocate(self, dim):
        self._k1 = np.empty(dim)
        self._k2 = np.empty(dim)
        self._predictor = np.empty(dim)


    def advance(self, model, old, new):
        self._check_states(model, old, new)

        #predictor
        model.derivative(old, self._k1)
        np.multiply(self._k1, self.dt, out=self._predictor)
        self._predictor += old

        #corrector
        model.derivative(self._predictor, self._k2)
        new[:] = old + self.dt * (0.5 * self._k1 + 0.5 * self._k2)
        return new
