#########################################################################################
##
##                     NONLINEAR CONJUGATE GRADIENT OPTIMIZER
##                                 (opt/cgm.py)
##
##      Includes the Fletcher-Reeves and Polak-Ribiere formulas for the
##      direction blending coefficient.
##
#########################################################################################

# IMPORTS ===============================================================================

import warnings

import numpy as np

from ._objective import evaluation_count
from .line_search import LineSearch
from .result import OptimizerResult
from .._constants import MAX_ITER_OPT, MAX_STEP_CGM
from ..exceptions import (
    PreconditionViolation,
    IntegratorNonConvergence,
    OptimizerNonConvergenceWarning,
    )
from ..utils.logger import LoggerManager


_logger = LoggerManager().get_logger("opt.cgm")


# DIRECTION COEFFICIENTS ================================================================

class FletcherReeves:
    """Fletcher-Reeves coefficient :math:`\\|g_k\\|^2 / \\|g_{k-1}\\|^2`."""

    name = "FR"

    @staticmethod
    def coefficient(grad, grad_old):
        return (np.linalg.norm(grad) / np.linalg.norm(grad_old))**2


class PolakRibiere:
    """Polak-Ribiere coefficient :math:`g_k \\cdot (g_k - g_{k-1}) / \\|g_{k-1}\\|^2`."""

    name = "PR"

    @staticmethod
    def coefficient(grad, grad_old):
        return np.dot(grad, grad - grad_old) / np.linalg.norm(grad_old)**2


FORMULAS = {
    FletcherReeves.name: FletcherReeves,
    PolakRibiere.name: PolakRibiere,
    }


def get_formula(formula):
    """Resolve a coefficient formula from its short name ('FR', 'PR') or class."""
    if isinstance(formula, str):
        try:
            return FORMULAS[formula.upper()]
        except KeyError:
            raise ValueError(
                f"unknown formula '{formula}', expected one of {sorted(FORMULAS)}"
                ) from None
    if not hasattr(formula, "coefficient"):
        raise TypeError("formula must provide a 'coefficient(grad, grad_old)' method")
    return formula


# OPTIMIZER =============================================================================

def cgm(
    objective,
    x0,
    tolerance,
    formula=FletcherReeves,
    max_iter=MAX_ITER_OPT,
    max_step=MAX_STEP_CGM,
    min_step=None,
    ):
    """Minimize 'objective' with the nonlinear conjugate gradient method.

    Every ``dim``-th iteration restarts with the steepest descent direction
    :math:`d = -\\nabla F`, the other iterations blend in the previous
    direction :math:`d = -\\nabla F + \\nu \\, d_{old}` with the coefficient
    :math:`\\nu` from ``formula``. The step :math:`s` comes from
    :class:`LineSearch` starting at ``max_step``.

    If :math:`s \\|d\\|_2 / \\|x\\|_2 < \\mathrm{tolerance}` on a blended
    iteration, the search is repeated along the pure steepest descent
    direction and that result decides about convergence. This keeps a
    degenerate conjugate direction from ending the run early.

    Parameters
    ----------
    objective : Objective
        callable objective with a ``gradient(x, value, out)`` method
    x0 : array_like
        starting variables
    tolerance : float
        relative step tolerance of the convergence test
    formula : str, type
        'FR' (Fletcher-Reeves), 'PR' (Polak-Ribiere) or a class with a
        ``coefficient(grad, grad_old)`` method
    max_iter : int
        iteration cap
    max_step : float
        initial step of every line search
    min_step : float, None
        line search minimum step, ``tolerance`` if not provided

    Returns
    -------
    result : OptimizerResult
        best known variables and convergence information; a step test
        passed on a stalled line search counts as failure (``success`` is
        False) and emits :class:`OptimizerNonConvergenceWarning`
    """

    formula = get_formula(formula)

    variables = np.array(x0, dtype=float)
    dim = variables.size

    if variables.ndim != 1 or dim == 0:
        raise PreconditionViolation("starting variables must be a non empty 1D vector")

    if min_step is None:
        min_step = tolerance

    line_search = LineSearch(dim, min_step)

    nfev_start = evaluation_count(objective)

    #working buffers
    direction = np.zeros(dim)
    grad = np.zeros(dim)
    grad_old = np.zeros(dim)
    previous = variables.copy()

    _logger.info(
        f"starting CGM ({getattr(formula, 'name', formula)}) with {dim} variables, "
        f"tolerance {tolerance:g}"
        )

    converged = False
    stalled_exit = False
    stalls = 0
    message = ""
    value = np.nan

    k = 0
    for k in range(max_iter):

        #norm of the variables in this iteration
        p_norm = np.linalg.norm(variables) or 1.0

        #objective and gradient at the current variables
        grad_old[:] = grad
        try:
            value = objective(variables)
            objective.gradient(variables, value, grad)
        except IntegratorNonConvergence as err:
            if k == 0:
                raise
            variables = previous
            grad[:] = grad_old
            message = f"evaluation failed at the new iterate ({err})"
            break

        #new direction
        restart = k % dim == 0
        if restart:
            np.negative(grad, out=direction)
        else:
            nu = formula.coefficient(grad, grad_old)
            direction *= nu
            direction -= grad

        step = line_search(variables, direction, value, grad, objective, max_step)
        stalls += line_search.stalled

        res = step * np.linalg.norm(direction) / p_norm
        if res < tolerance and not restart:

            #seemingly converged, retry along the steepest descent direction
            np.negative(grad, out=direction)
            step = line_search(variables, direction, value, grad, objective, max_step)
            stalls += line_search.stalled
            res = step * np.linalg.norm(direction) / p_norm

        #real convergence check, a stalled search returns a tiny step without progress
        if res < tolerance:
            stalled_exit = line_search.stalled
            converged = not stalled_exit
            break

        _logger.debug("CGM residual in iteration %d: %.6e", k, res)

        #new values for the variables
        previous[:] = variables
        variables += step * direction
        #value at the new variables, reported if the iteration cap ends the loop
        value = line_search.value

        _logger.debug("CGM new variables %s", variables)

    nit = k + 1 if max_iter > 0 else 0
    nfev = evaluation_count(objective) - nfev_start

    if converged:
        message = f"converged in {k} iterations"
        _logger.info(f"CGM converged in {k} iterations, final variables {variables}")
    else:
        if stalled_exit:
            message = f"converged after line search stall in {k} iterations"
        elif not message:
            message = f"iteration limit ({max_iter}) reached"
        _logger.warning(f"CGM did NOT converge: {message}, variables are {variables}")
        warnings.warn(
            f"CGM did not converge: {message}",
            OptimizerNonConvergenceWarning,
            stacklevel=2,
            )

    return OptimizerResult(
        x=variables.copy(),
        fun=float(value),
        nit=nit,
        nfev=int(nfev),
        success=converged,
        message=message,
        line_search_stalls=int(stalls),
        )
