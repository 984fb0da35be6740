#########################################################################################
##
##                         BASE CLASS FOR SCALAR OBJECTIVES
##                               (opt/_objective.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from .._constants import FD_STEP
from ..exceptions import PreconditionViolation


# BASE OBJECTIVE CLASS ==================================================================

class Objective:
    """Scalar function of a fixed length parameter vector, as consumed by the
    line search and the optimizers.

    Subclasses implement :meth:`evaluate`. The default :meth:`gradient` is a
    one sided forward finite difference that reuses a single perturbation
    buffer: coordinate ``i`` is shifted by ``fd_step``, evaluated and
    restored before coordinate ``i + 1`` is shifted, so every entry is an
    independent difference quotient.

    Parameters
    ----------
    n_params : int
        length of the parameter vector
    fd_step : float
        finite difference step
    """

    def __init__(self, n_params, fd_step=FD_STEP):
        self.n_params = int(n_params)
        self.fd_step = fd_step

        #number of evaluations so far
        self.nfev = 0

        self._params_temp = np.empty(self.n_params)


    def __call__(self, params):
        return self.evaluate(params)


    def _check_params(self, params, name="parameter vector"):
        if np.shape(params) != (self.n_params,):
            raise PreconditionViolation(
                f"{type(self).__name__}: {name} must have shape "
                f"({self.n_params},), got {np.shape(params)}"
                )


    def evaluate(self, params):
        """Return the objective value at 'params'."""
        raise NotImplementedError


    def gradient(self, params, value=None, out=None):
        """Forward difference gradient.

        Parameters
        ----------
        params : array_like
            point of evaluation
        value : float, None
            objective value at 'params', evaluated if not provided
        out : np.ndarray, None
            buffer receiving the gradient

        Returns
        -------
        out : np.ndarray
            gradient estimate
        """

        params = np.asarray(params, dtype=float)
        self._check_params(params)

        if out is None:
            out = np.empty(self.n_params)
        else:
            self._check_params(out, "gradient buffer")

        if value is None:
            value = self.evaluate(params)

        eps = self.fd_step
        temp = self._params_temp
        temp[:] = params

        for i in range(self.n_params):
            if i > 0:
                temp[i - 1] = params[i - 1]
            temp[i] += eps
            out[i] = (self.evaluate(temp) - value) / eps

        temp[-1] = params[-1]

        return out


# HELPERS ===============================================================================

def evaluation_count(objective):
    """Number of evaluations of 'objective' so far, 0 for plain callables."""
    return int(getattr(objective, "nfev", 0))
