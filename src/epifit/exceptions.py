#########################################################################################
##
##                             ERRORS AND WARNINGS
##                               (exceptions.py)
##
#########################################################################################


# ERRORS ================================================================================

class PreconditionViolation(ValueError):
    """Raised on shape or dimension mismatch between models, buffers and
    vectors. Not meant to be recovered from.
    """


class IntegratorNonConvergence(RuntimeError):
    """Raised when the newton iteration of an implicit scheme exceeds its
    iteration cap.

    Objectives let it propagate, the line search rejects the trial that
    triggered it.

    Parameters
    ----------
    iterations : int
        number of newton iterations performed
    residual : float
        last relative residual
    """

    def __init__(self, iterations, residual, message=None):
        self.iterations = iterations
        self.residual = residual
        if message is None:
            message = (
                f"newton iteration did not converge in {iterations} "
                f"iterations (residual={residual:.3e})"
                )
        super().__init__(message)


# WARNINGS ==============================================================================

class OptimizerNonConvergenceWarning(RuntimeWarning):
    """Optimizer reached its iteration cap, best known variables returned."""


class LineSearchStallWarning(RuntimeWarning):
    """Backtracking exhausted its budget without satisfying both descent
    conditions, the last trial step is returned.
    """
