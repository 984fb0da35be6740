#########################################################################################
##
##                       FIXED STEP TRAJECTORY SOLVER
##                          (solvers/trajectory.py)
##
##      Drives a one step scheme across a uniform grid and fills a preallocated
##      (state x time) buffer column by column.
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from .heun import Heun
from ..exceptions import PreconditionViolation
from ..utils.logger import LoggerManager


_logger = LoggerManager().get_logger("solvers.trajectory")


# CLASS =================================================================================

class TrajectorySolver:
    """Integrate a model over a fixed number of uniform steps.

    Column 0 of the trajectory buffer receives the initial condition of the
    model, column ``j`` the state after ``j`` steps. Every column depends
    only on the previous one.

    Parameters
    ----------
    step_count : int
        number of integration steps
    horizon : float
        final integration time
    Scheme : type
        integration scheme class, e.g. ``ExplicitEuler``, ``ImplicitEuler``
        or ``Heun``
    debug : bool, None
        seed the buffer with NaN before solving and check that every cell
        was written afterwards, follows the logger level if None
    scheme_kwargs : dict
        additional arguments for the scheme (e.g. newton tolerance)

    Example
    -------
    .. code-block:: python

        solver = TrajectorySolver(step_count=800, horizon=100.0, Scheme=Heun)
        buffer = solver.allocate(model)
        solver.solve(model, buffer)
    """

    def __init__(self, step_count, horizon, Scheme=Heun, debug=None, **scheme_kwargs):
        self.scheme = Scheme(step_count, horizon, **scheme_kwargs)
        self.debug = debug


    def __repr__(self):
        return f"TrajectorySolver({self.scheme!r})"


    @property
    def step_count(self):
        return self.scheme.step_count


    @property
    def horizon(self):
        return self.scheme.horizon


    @property
    def dt(self):
        return self.scheme.dt


    def times(self):
        """Time grid matching the trajectory columns."""
        return np.linspace(0.0, self.horizon, self.step_count + 1)


    def allocate(self, model):
        """Return a (dim, step_count + 1) buffer with contiguous columns."""
        return np.empty((model.dim, self.step_count + 1), order="F")


    def _debug_enabled(self):
        if self.debug is None:
            return LoggerManager().is_debug("solvers.trajectory")
        return bool(self.debug)


    def solve(self, model, buffer=None):
        """Fill the trajectory buffer by integrating 'model'.

        Parameters
        ----------
        model : VectorField
            model providing the initial condition and right hand side
        buffer : np.ndarray, None
            caller owned buffer of shape ``(model.dim, step_count + 1)``,
            allocated if not provided

        Returns
        -------
        buffer : np.ndarray
            the filled trajectory
        """

        if buffer is None:
            buffer = self.allocate(model)

        expected = (model.dim, self.step_count + 1)
        if np.shape(buffer) != expected:
            raise PreconditionViolation(
                f"trajectory buffer must have shape {expected}, got {np.shape(buffer)}"
                )

        debug = self._debug_enabled()
        if debug:
            buffer.fill(np.nan)
            _logger.debug(f"solving {type(model).__name__} using '{self.scheme}'")

        buffer[:, 0] = model.initial_condition()

        n = self.step_count
        report = max(n // 10, 1)

        for step in range(n):
            self.scheme.advance(model, buffer[:, step], buffer[:, step + 1])

            if debug and step % report == report - 1:
                _logger.debug(f"done {step + 1} of {n} steps")

        if debug and not np.all(np.isfinite(buffer)):
            _logger.warning(
                f"trajectory of {type(model).__name__} contains non-finite values "
                f"using '{self.scheme}'"
                )

        return buffer
