#########################################################################################
##
##                     DECOUPLED CUBIC RELAXATION TEST SYSTEM
##                                 (models/cubic.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from ._model import VectorField


# MODEL =================================================================================

class CubicRelaxation(VectorField):
    """Decoupled polynomial system with closed form solution, used to check
    the order of the integration schemes.

    .. math::

        \\dot{x}_n = -10 (x_n - k_n)^3, \\quad k_n = 0.1 n, \\quad n = 0, \\dots, 49

    with initial condition :math:`x_n(0) = 0.01 (n + 1)`.
    """

    dim = 50
    n_params = 0

    def __init__(self):
        super().__init__(0.01 * np.arange(1, self.dim + 1))
        self._k = 0.1 * np.arange(self.dim)


    def analytic_solution(self, t):
        """Exact state at time 't'.

        Integrating gives :math:`(x_n - k_n)^{-2} = 20 t + (x_n(0) - k_n)^{-2}`,
        the sign of :math:`x_n - k_n` is preserved. Components starting at
        their equilibrium stay there.
        """
        x0 = self.initial_condition()
        diff = x0 - self._k

        out = self._k.copy()
        moving = np.abs(diff) >= np.finfo(float).eps
        c = 1.0 / diff[moving]**2
        out[moving] = self._k[moving] + np.sign(diff[moving]) * np.sqrt(1.0 / (20.0 * t + c))
        return out


    def _evaluate(self, x, out):
        out[:] = -10.0 * (np.asarray(x) - self._k)**3


    def _fill_jacobian(self, x, out):
        np.fill_diagonal(out, -30.0 * (np.asarray(x) - self._k)**2)
