#########################################################################################
##
##                           EXPLICIT AND IMPLICIT EULER METHODS
##                                  (solvers/euler.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from scipy.linalg import lu_factor, lu_solve

from ._scheme import Scheme
from .._constants import TOLERANCE_NEWTON, MAX_ITER_NEWTON
from ..exceptions import IntegratorNonConvergence
from ..utils.logger import LoggerManager


_logger = LoggerManager().get_logger("solvers.euler")


# SOLVERS ===============================================================================

class ExplicitEuler(Scheme):
    """Forward Euler method, first order and explicit.

    .. math::

        x_{n+1} = x_n + \\Delta t \\, f(x_n)

    Characteristics
    ---------------
    * Order: 1
    * Stages: 1
    * Explicit, conditionally stable
    """

    method_name = "fwe"
    order = 1

    def _allocate(self, dim):
        self._slope = np.empty(dim)


    def advance(self, model, old, new):
        self._check_states(model, old, new)
        model.derivative(old, self._slope)
        np.multiply(self._slope, self.dt, out=self._slope)
        np.add(old, self._slope, out=new)
        return new


class ImplicitEuler(Scheme):
    """Backward Euler method, first order and implicit.

    Solves

    .. math::

        x_{n+1} - x_n - \\Delta t \\, f(x_{n+1}) = 0

    by newton iterations started at :math:`x_n`. Each iteration evaluates
    the residual :math:`r = (x_n - x) + \\Delta t f(x)` and stops once
    :math:`\\|r\\|_\\infty / \\|x_n\\|_1` drops below ``tolerance``. Otherwise
    the system :math:`(\\Delta t J(x) - I) \\, s = r` is solved by LU
    factorization with partial pivoting and :math:`x \\leftarrow x - s`.

    Characteristics
    ---------------
    * Order: 1
    * Implicit, A-stable
    * One newton solve per step, jacobian recomputed every iteration

    Parameters
    ----------
    step_count : int
        number of steps that cover the horizon
    horizon : float
        final time of the integration
    tolerance : float
        relative residual tolerance of the newton iteration
    max_iter : int
        newton iteration cap, exceeding it raises
        :class:`IntegratorNonConvergence`
    """

    method_name = "bwe"
    order = 1
    is_implicit = True

    def __init__(
        self,
        step_count,
        horizon,
        tolerance=TOLERANCE_NEWTON,
        max_iter=MAX_ITER_NEWTON,
        ):
        super().__init__(step_count, horizon)

        self.tolerance = tolerance
        self.max_iter = max_iter

        #iterations used by the last call to 'advance'
        self.last_iterations = 0


    def _allocate(self, dim):
        self._residual = np.empty(dim)
        self._slope = np.empty(dim)
        self._jac = np.zeros((dim, dim))
        self._eye = np.eye(dim)


    def residual(self, model, old, new):
        """Implicit step residual '(old - new) + dt * f(new)'."""
        self._check_states(model, old, new)
        model.derivative(new, self._slope)
        return (old - new) + self.dt * self._slope


    def advance(self, model, old, new):
        self._check_states(model, old, new)

        norm = np.linalg.norm(old, 1)
        if norm == 0.0:
            norm = 1.0

        new[:] = old
        res = np.inf

        for i in range(self.max_iter):

            #residual of the implicit equation
            model.derivative(new, self._slope)
            np.subtract(old, new, out=self._residual)
            self._residual += self.dt * self._slope

            res = np.linalg.norm(self._residual, np.inf) / norm
            if not np.isfinite(res):
                self.last_iterations = i + 1
                raise IntegratorNonConvergence(
                    i + 1, res, f"newton iteration diverged after {i + 1} iterations"
                    )

            if res < self.tolerance:
                self.last_iterations = i + 1
                _logger.debug("newton converged in %d iterations (residual=%.3e)", i + 1, res)
                return new

            #newton matrix 'dt * J - I'
            model.jacobian(new, self._jac)
            self._jac *= self.dt
            self._jac -= self._eye

            lu = lu_factor(self._jac, overwrite_a=True, check_finite=False)
            new -= lu_solve(lu, self._residual, check_finite=False)

        self.last_iterations = self.max_iter
        raise IntegratorNonConvergence(self.max_iter, res)
