from importlib import metadata

try:
    __version__ = metadata.version("epifit")
except Exception:
    __version__ = "unknown"

from .exceptions import (
    PreconditionViolation,
    IntegratorNonConvergence,
    OptimizerNonConvergenceWarning,
    LineSearchStallWarning,
    )
from .utils.logger import LoggerManager
from .models import SIQRD, CubicRelaxation
from .solvers import ExplicitEuler, ImplicitEuler, Heun, TrajectorySolver
from .opt import Observations, LeastSquaresObjective, bfgs, cgm, fit_siqrd
