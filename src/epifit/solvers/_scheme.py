#########################################################################################
##
##                      BASE CLASS FOR FIXED STEP INTEGRATION SCHEMES
##                                (solvers/_scheme.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from ..exceptions import PreconditionViolation


# BASE SCHEME CLASS =====================================================================

class Scheme:
    """Base class for one step integration schemes on a uniform grid.

    A scheme is built for a fixed number of steps over a fixed horizon, the
    step size is ``dt = horizon / step_count``. Each call to :meth:`advance`
    maps the state at one grid point to the next one. Schemes hold no
    integration state between calls, only reusable scratch buffers.

    Parameters
    ----------
    step_count : int
        number of steps that cover the horizon
    horizon : float
        final time of the integration (starting at zero)

    Attributes
    ----------
    method_name : str
        short identifier used in output file names
    order : int
        global order of accuracy
    is_implicit : bool
        True if every step requires a nonlinear solve
    """

    method_name = None
    order = None
    is_implicit = False

    def __init__(self, step_count, horizon):

        if int(step_count) <= 0:
            raise PreconditionViolation(f"step_count must be positive, got {step_count}")
        if not horizon > 0:
            raise PreconditionViolation(f"horizon must be positive, got {horizon}")

        self.step_count = int(step_count)
        self.horizon = float(horizon)
        self.dt = self.horizon / self.step_count

        #scratch buffers, allocated for the dimension of the first model seen
        self._dim = None


    def __str__(self):
        return self.method_name


    def __repr__(self):
        return (
            f"{type(self).__name__}(step_count={self.step_count}, "
            f"horizon={self.horizon})"
            )


    def _check_states(self, model, old, new):
        shape = (model.dim,)
        if np.shape(old) != shape or np.shape(new) != shape:
            raise PreconditionViolation(
                f"{type(self).__name__}: states must have shape {shape}, "
                f"got {np.shape(old)} and {np.shape(new)}"
                )
        if self._dim != model.dim:
            self._allocate(model.dim)
            self._dim = model.dim


    def _allocate(self, dim):
        """Allocate scratch buffers for state dimension 'dim'."""
        pass


    def advance(self, model, old, new):
        """Compute the state one step after 'old' and write it into 'new'.

        Parameters
        ----------
        model : VectorField
            right hand side of the ODE
        old : np.ndarray
            state at the current grid point
        new : np.ndarray
            buffer receiving the state at the next grid point

        Returns
        -------
        new : np.ndarray
            the filled buffer
        """
        raise NotImplementedError
