#########################################################################################
##
##                           OPTIMIZER RESULT CONTAINER
##                                 (opt/result.py)
##
#########################################################################################

# IMPORTS ===============================================================================

from dataclasses import dataclass

import numpy as np


# RESULT ================================================================================

@dataclass
class OptimizerResult:
    """Outcome of a quasi-newton or conjugate gradient run.

    ``x`` holds the best known variables also if the iteration cap was hit,
    in that case ``success`` is False.
    """

    x: np.ndarray
    fun: float
    nit: int
    nfev: int
    success: bool
    message: str
    line_search_stalls: int = 0


    def __repr__(self) -> str:
        status = "SUCCESS" if self.success else "FAILED"
        return (
            f"OptimizerResult({status}, fun={self.fun:.4g}, "
            f"nit={self.nit}, nfev={self.nfev}, x={self.x})"
        )
