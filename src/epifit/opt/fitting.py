#########################################################################################
##
##                          SIQRD PARAMETER FIT DRIVER
##                                (opt/fitting.py)
##
##      Builds the least squares objective, runs one of the optimizers and
##      re-simulates the fitted model on the fine grid.
##
#########################################################################################

# IMPORTS ===============================================================================

from dataclasses import dataclass

import numpy as np
import matplotlib.pyplot as plt

from .bfgs import bfgs
from .cgm import cgm
from .objective import LeastSquaresObjective
from .observations import Observations
from .result import OptimizerResult
from .._constants import RATIO, FD_STEP
from ..models.siqrd import SIQRD
from ..solvers import TrajectorySolver, get_scheme
from ..utils.io import read_parameters, save_results
from ..utils.logger import LoggerManager


_logger = LoggerManager().get_logger("opt.fitting")

_METHODS = ("bfgs", "cgm")


# RESULT ================================================================================

@dataclass
class FitResult:
    """Fitted parameters together with the re-simulated trajectory."""

    parameters: np.ndarray
    trajectory: np.ndarray
    dt: float
    optimizer_result: OptimizerResult
    observations: Observations


    def __repr__(self) -> str:
        return (
            f"FitResult(parameters={self.parameters}, "
            f"steps={self.trajectory.shape[1] - 1}, dt={self.dt:g}, "
            f"success={self.optimizer_result.success})"
        )


    @property
    def success(self):
        return self.optimizer_result.success


    def times(self):
        """Time grid of the trajectory columns."""
        return self.dt * np.arange(self.trajectory.shape[1])


    def plot(self, ax=None, title=None):
        """Overlay the fitted trajectory on the observations.

        Returns
        -------
        ax : matplotlib.axes.Axes
        """

        if ax is None:
            _, ax = plt.subplots(figsize=(8, 4))

        self.observations.plot(ax=ax)

        t = self.times()
        for i, label in enumerate(self.observations.labels):
            ax.plot(t, self.trajectory[i], linewidth=1.5, label=f"{label} (fit)")

        ax.set_title(title or f"Fit: {self.observations.name}")
        ax.legend()

        return ax


# HELPERS ===============================================================================

def output_file_name(scheme, model):
    """File name '<method>_<beta>_<mu>_<gamma>_<alpha>_<delta>.out' of a simulation."""
    return f"{scheme.method_name}_{model.to_string()}.out"


def _resolve_observations(observations):
    if isinstance(observations, Observations):
        return observations
    return Observations.from_file(observations, dim=SIQRD.dim, labels=SIQRD.labels)


def _resolve_parameters(parameters):
    if isinstance(parameters, (str, bytes)) or hasattr(parameters, "__fspath__"):
        params, _ = read_parameters(parameters, includes_initial_conds=False)
        return params
    return np.array(parameters, dtype=float)


# DRIVER ================================================================================

def fit_siqrd(
    observations,
    starting_parameters,
    tolerance,
    scheme="heun",
    method="bfgs",
    formula="FR",
    output=None,
    fd_step=FD_STEP,
    **optimizer_kwargs,
    ):
    """Fit SIQRD rate constants to daily observations.

    Parameters
    ----------
    observations : Observations, str, Path
        observation set or observation file
    starting_parameters : array_like, str, Path
        starting parameters ``[alpha, beta, gamma, delta, mu]`` or a
        parameter file (rate constants only)
    tolerance : float
        optimizer tolerance
    scheme : str, type
        integration scheme ('fwe', 'bwe', 'heun') or scheme class
    method : str
        'bfgs' or 'cgm'
    formula : str, type
        coefficient formula of the conjugate gradient method
    output : str, Path, None
        if given, the re-simulated trajectory is written to this file
    fd_step : float
        finite difference step of the objective gradient
    optimizer_kwargs : dict
        forwarded to the optimizer

    Returns
    -------
    result : FitResult

    Example
    -------
    .. code-block:: python

        result = fit_siqrd(
            "inputs/observations1.in",
            "inputs/parameters_observations1.in",
            tolerance=1e-10,
            method="cgm",
            formula="PR",
            )
        result.plot()
    """

    if method not in _METHODS:
        raise ValueError(f"unknown method '{method}', expected one of {_METHODS}")

    Scheme = get_scheme(scheme) if isinstance(scheme, str) else scheme

    observations = _resolve_observations(observations)
    start = _resolve_parameters(starting_parameters)

    model = SIQRD(*start, initial_condition=observations.initial_condition)
    objective = LeastSquaresObjective(observations, model, Scheme=Scheme, fd_step=fd_step)

    _logger.info(
        f"fitting {observations.name} with {method.upper()} and "
        f"'{Scheme.method_name}', starting at {start}"
        )

    if method == "bfgs":
        opt_result = bfgs(objective, start, tolerance, **optimizer_kwargs)
    else:
        opt_result = cgm(objective, start, tolerance, formula=formula, **optimizer_kwargs)

    #simulate again with the fitted parameters, one extra day past the last observation
    fitted = SIQRD(*opt_result.x, initial_condition=observations.initial_condition)
    solver = TrajectorySolver(
        step_count=observations.length * RATIO,
        horizon=float(observations.length),
        Scheme=Scheme,
        )
    trajectory = solver.solve(fitted)

    if output is not None:
        save_results(solver.dt, trajectory, output)

    _logger.info(f"{method.upper()} found parameters {opt_result.x}")

    return FitResult(
        parameters=opt_result.x,
        trajectory=trajectory,
        dt=solver.dt,
        optimizer_result=opt_result,
        observations=observations,
        )
