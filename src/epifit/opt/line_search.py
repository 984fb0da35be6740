#########################################################################################
##
##                      BACKTRACKING LINE SEARCH (WOLFE CONDITIONS)
##                               (opt/line_search.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import warnings

import numpy as np

from .._constants import WOLFE_C1, WOLFE_C2, MAX_HALVINGS
from ..exceptions import (
    PreconditionViolation,
    IntegratorNonConvergence,
    LineSearchStallWarning,
    )
from ..utils.logger import LoggerManager


_logger = LoggerManager().get_logger("opt.line_search")


# CLASS =================================================================================

class LineSearch:
    """Approximate line search by step halving.

    Starting from ``initial_step`` the step :math:`s` is halved until the
    trial point :math:`p + s d` satisfies

    .. math::

        F(p + s d) \\leq F(p) + c_1 s \\, \\nabla F(p) \\cdot d

    .. math::

        -d \\cdot \\nabla F(p + s d) \\leq -c_2 \\, \\nabla F(p) \\cdot d

    or until ``max_halvings`` halvings were spent or the step dropped to
    ``min_step``. In the latter case the last trial step is returned, a
    :class:`LineSearchStallWarning` is emitted and :attr:`stalled` is set.

    Trials whose evaluation fails with :class:`IntegratorNonConvergence`
    count as infinite objective values and are rejected.

    Parameters
    ----------
    dim : int
        length of the parameter vector
    min_step : float
        smallest step worth trying
    c1 : float
        sufficient decrease constant
    c2 : float
        curvature constant
    max_halvings : int
        halving budget

    Attributes
    ----------
    stalled : bool
        True if the last search ended without satisfying both conditions
    iterations : int
        number of halvings of the last search
    value : float
        objective value at the returned step
    gradient : np.ndarray
        objective gradient at the returned step (valid if not stalled)
    """

    def __init__(self, dim, min_step, c1=WOLFE_C1, c2=WOLFE_C2, max_halvings=MAX_HALVINGS):
        self.dim = int(dim)
        self.min_step = min_step
        self.c1 = c1
        self.c2 = c2
        self.max_halvings = max_halvings

        self.stalled = False
        self.iterations = 0
        self.value = np.nan

        #scratch buffers
        self.gradient = np.empty(self.dim)
        self._trial = np.empty(self.dim)


    def __repr__(self):
        return (
            f"LineSearch(dim={self.dim}, min_step={self.min_step}, "
            f"c1={self.c1}, c2={self.c2})"
            )


    @staticmethod
    def _safe_evaluate(objective, point):
        """Objective value at 'point', infinite if the integration fails."""
        try:
            with np.errstate(all="ignore"):
                return objective(point)
        except IntegratorNonConvergence as err:
            _logger.debug("rejected trial point: %s", err)
            return np.inf


    def _safe_gradient(self, objective, point, value):
        try:
            with np.errstate(all="ignore"):
                objective.gradient(point, value, self.gradient)
            return True
        except IntegratorNonConvergence as err:
            _logger.debug("rejected trial point, gradient failed: %s", err)
            return False


    def __call__(self, position, direction, value, gradient, objective, initial_step):
        """Search along 'direction' starting at 'position'.

        Parameters
        ----------
        position : np.ndarray
            current point
        direction : np.ndarray
            search direction
        value : float
            objective value at 'position'
        gradient : np.ndarray
            objective gradient at 'position'
        objective : Objective
            callable objective with a ``gradient(x, value, out)`` method
        initial_step : float
            first trial step

        Returns
        -------
        step : float
            chosen step size
        """

        shape = (self.dim,)
        if np.shape(position) != shape or np.shape(direction) != shape \
                or np.shape(gradient) != shape:
            raise PreconditionViolation(
                f"line search vectors must have shape {shape}, got "
                f"{np.shape(position)}, {np.shape(direction)}, {np.shape(gradient)}"
                )

        slope = float(np.dot(direction, gradient))

        #right hand side of the curvature condition
        rhs_curvature = -self.c2 * slope

        step = float(initial_step)
        np.multiply(direction, step, out=self._trial)
        self._trial += position
        trial_value = self._safe_evaluate(objective, self._trial)

        accepted = False

        i = 0
        while i < self.max_halvings and step > self.min_step:

            #sufficient decrease first, the trial gradient is only needed if it holds
            if trial_value <= value + self.c1 * step * slope:
                if self._safe_gradient(objective, self._trial, trial_value):
                    if -np.dot(direction, self.gradient) <= rhs_curvature:
                        accepted = True
                        break

            step = step / 2
            np.multiply(direction, step, out=self._trial)
            self._trial += position
            trial_value = self._safe_evaluate(objective, self._trial)
            i += 1

        self.iterations = i
        self.value = trial_value
        self.stalled = not accepted

        if accepted:
            _logger.debug("chosen step size in %d iterations: %.6e", i, step)
        else:
            _logger.debug("line search stalled after %d iterations at step %.6e", i, step)
            warnings.warn(
                f"line search did not satisfy the Wolfe conditions, "
                f"returning step {step:.3e} after {i} halvings",
                LineSearchStallWarning,
                stacklevel=2,
                )

        return step


    search = __call__
