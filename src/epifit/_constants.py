#########################################################################################
##
##                                NUMERICAL DEFAULTS
##                                 (_constants.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np


# INTEGRATION ===========================================================================

#relative residual tolerance of the newton solve in implicit schemes
TOLERANCE_NEWTON = float(np.finfo(float).eps) * 100.0

#iteration cap of the newton solve in implicit schemes
MAX_ITER_NEWTON = 1000


# OBJECTIVE =============================================================================

#number of integration steps per observation interval
RATIO = 8

#forward finite difference step for the objective gradient
FD_STEP = 1e-5


# LINE SEARCH ===========================================================================

#sufficient decrease (armijo) constant
WOLFE_C1 = 1e-4

#curvature constant
WOLFE_C2 = 0.9

#maximum number of step halvings
MAX_HALVINGS = 100


# OPTIMIZERS ============================================================================

MAX_ITER_OPT = 1000

#initial line search step of the quasi-newton method
MAX_STEP_BFGS = 1.0

#initial line search step of the conjugate gradient method
MAX_STEP_CGM = 0.01
