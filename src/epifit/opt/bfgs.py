#########################################################################################
##
##                         BFGS QUASI-NEWTON OPTIMIZER
##                                 (opt/bfgs.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import warnings

import numpy as np

from scipy.linalg import lu_factor, lu_solve

from ._objective import evaluation_count
from .line_search import LineSearch
from .result import OptimizerResult
from .._constants import MAX_ITER_OPT, MAX_STEP_BFGS
from ..exceptions import (
    PreconditionViolation,
    IntegratorNonConvergence,
    OptimizerNonConvergenceWarning,
    )
from ..utils.logger import LoggerManager


_logger = LoggerManager().get_logger("opt.bfgs")


# OPTIMIZER =============================================================================

def bfgs(
    objective,
    x0,
    tolerance,
    hessian=None,
    max_iter=MAX_ITER_OPT,
    max_step=MAX_STEP_BFGS,
    min_step=None,
    ):
    """Minimize 'objective' with the BFGS quasi-newton method.

    Every iteration solves :math:`H d = -\\nabla F` for the direction by LU
    factorization, chooses the step :math:`s` by :class:`LineSearch`
    starting at ``max_step`` and stops once

    .. math::

        s \\, \\|d\\|_2 / \\|x\\|_2 < \\mathrm{tolerance}

    Otherwise the variables move by :math:`s d` and the hessian
    approximation is updated with :math:`y = \\nabla F_{new} - \\nabla F_{old}`

    .. math::

        H \\leftarrow H - \\frac{(H d)(d^T H)}{d^T H d}
                        + \\frac{y y^T}{(d \\cdot y) \\, s}

    which is the standard rank two update written for the unscaled
    direction :math:`d`. The update is skipped if one of the denominators
    vanishes.

    Parameters
    ----------
    objective : Objective
        callable objective with a ``gradient(x, value, out)`` method
    x0 : array_like
        starting variables
    tolerance : float
        relative step tolerance of the convergence test
    hessian : array_like, None
        initial hessian approximation, identity if not provided (copied)
    max_iter : int
        iteration cap
    max_step : float
        initial step of every line search
    min_step : float, None
        line search minimum step, ``100 * tolerance`` if not provided

    Returns
    -------
    result : OptimizerResult
        best known variables and convergence information; a step test
        passed on a stalled line search counts as failure (``success`` is
        False) and emits :class:`OptimizerNonConvergenceWarning`
    """

    variables = np.array(x0, dtype=float)
    dim = variables.size

    if variables.ndim != 1:
        raise PreconditionViolation("starting variables must be a 1D vector")

    if hessian is None:
        hessian = np.eye(dim)
    else:
        hessian = np.array(hessian, dtype=float)
        if hessian.shape != (dim, dim):
            raise PreconditionViolation(
                f"hessian must have shape ({dim}, {dim}), got {hessian.shape}"
                )

    if min_step is None:
        min_step = tolerance * 100

    line_search = LineSearch(dim, min_step)

    nfev_start = evaluation_count(objective)

    #working buffers
    direction = np.zeros(dim)
    grad = np.empty(dim)
    grad_old = np.empty(dim)

    _logger.info(f"starting BFGS with {dim} variables, tolerance {tolerance:g}")

    value = objective(variables)
    objective.gradient(variables, value, grad)

    converged = False
    stalled_exit = False
    stalls = 0
    message = ""

    k = 0
    for k in range(max_iter):

        _logger.debug(
            "BFGS iteration %d, variables %s, gradient %s, value %.6e",
            k, variables, grad, value,
            )

        #new direction from 'H d = -grad'
        lu = lu_factor(hessian, check_finite=False)
        direction[:] = lu_solve(lu, -grad, check_finite=False)

        step = line_search(variables, direction, value, grad, objective, max_step)
        stalls += line_search.stalled

        #convergence check
        scale = np.linalg.norm(variables) or 1.0
        res = step * np.linalg.norm(direction) / scale
        if res < tolerance:
            #a stalled search returns a tiny step that passes the test without progress
            stalled_exit = line_search.stalled
            converged = not stalled_exit
            break

        _logger.debug("BFGS residual in iteration %d: %.6e", k, res)

        #move and evaluate at the new point
        previous = variables.copy()
        variables += step * direction
        grad_old[:] = grad
        try:
            value = objective(variables)
            objective.gradient(variables, value, grad)
        except IntegratorNonConvergence as err:
            variables = previous
            grad[:] = grad_old
            message = f"evaluation failed at the new iterate ({err})"
            break

        #hessian update
        y = grad - grad_old
        hs = hessian @ direction
        sh = direction @ hessian
        shd = np.dot(sh, direction)
        dy = np.dot(direction, y) * step

        if shd == 0.0 or dy == 0.0 or not np.isfinite(shd * dy):
            _logger.debug("BFGS iteration %d: degenerate curvature, hessian update skipped", k)
            continue

        hessian += -np.outer(hs, sh) / shd + np.outer(y, y) / dy

    nit = k + 1 if max_iter > 0 else 0
    nfev = evaluation_count(objective) - nfev_start

    if converged:
        message = f"converged in {k} iterations"
        _logger.info(f"BFGS converged in {k} iterations, final variables {variables}")
    else:
        if stalled_exit:
            message = f"converged after line search stall in {k} iterations"
        elif not message:
            message = f"iteration limit ({max_iter}) reached"
        _logger.warning(f"BFGS did NOT converge: {message}, variables are {variables}")
        warnings.warn(
            f"BFGS did not converge: {message}",
            OptimizerNonConvergenceWarning,
            stacklevel=2,
            )

    return OptimizerResult(
        x=variables.copy(),
        fun=float(value),
        nit=nit,
        nfev=nfev,
        success=converged,
        message=message,
        line_search_stalls=int(stalls),
        )
