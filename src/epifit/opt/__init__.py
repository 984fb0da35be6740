#########################################################################################
##
##                          FITTING TOOLKIT - PUBLIC API
##                               (opt/__init__.py)
##
#########################################################################################

from ._objective import Objective
from .observations import Observations
from .objective import LeastSquaresObjective
from .line_search import LineSearch
from .result import OptimizerResult
from .bfgs import bfgs
from .cgm import cgm, FletcherReeves, PolakRibiere, get_formula
from .fitting import fit_siqrd, FitResult, output_file_name
