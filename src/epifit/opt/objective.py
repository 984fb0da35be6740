#########################################################################################
##
##                      LEAST SQUARES FITTING OBJECTIVE (SIQRD)
##                                (opt/objective.py)
##
##      Compares a coarse daily observation series against a simulation on a grid
##      that is RATIO times finer. Trajectory buffers are allocated once and reused
##      for every evaluation.
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from ._objective import Objective
from .observations import Observations
from .._constants import RATIO, FD_STEP
from ..exceptions import PreconditionViolation
from ..models.siqrd import SIQRD
from ..solvers import Heun, TrajectorySolver
from ..utils.logger import LoggerManager


_logger = LoggerManager().get_logger("opt.objective")


# CLASS =================================================================================

class LeastSquaresObjective(Objective):
    """Normalized squared distance between simulated and observed states.

    For parameters :math:`p` the model is integrated from the day 0
    observation over ``(no_days - 1) * ratio`` steps on the horizon
    ``no_days - 1``; every ``ratio``-th column is compared to the matching
    observation

    .. math::

        F(p) = \\frac{1}{n_d \\, P^2} \\sum_{d=0}^{n_d - 1}
               \\| x(d; p) - y_d \\|_2^2

    with :math:`P` the sum of all compartments on day 0. The value is non
    negative and zero only if the simulation reproduces every observation.

    Evaluation errors of the integration scheme (e.g.
    :class:`IntegratorNonConvergence` from implicit schemes) propagate to
    the caller.

    Parameters
    ----------
    observations : Observations
        observed daily states
    model : VectorField, optional
        model to fit, a fresh :class:`SIQRD` if not provided; its
        parameters are overwritten on every evaluation
    Scheme : type
        integration scheme class
    ratio : int
        integration steps per observation interval
    fd_step : float
        finite difference step of the gradient
    scheme_kwargs : dict
        additional arguments for the scheme

    Example
    -------
    .. code-block:: python

        obs = Observations.from_file("inputs/observations1.in", dim=5)
        model = SIQRD.from_file("inputs/parameters1.in", includes_initial_conds=False)
        objective = LeastSquaresObjective(obs, model, Scheme=Heun)

        p0 = model.parameters()
        f0 = objective(p0)
        g0 = objective.gradient(p0, f0)
    """

    def __init__(
        self,
        observations,
        model=None,
        Scheme=Heun,
        ratio=RATIO,
        fd_step=FD_STEP,
        **scheme_kwargs,
        ):

        if model is None:
            model = SIQRD()

        if not isinstance(observations, Observations):
            raise TypeError("observations must be an 'Observations' instance")

        if observations.dim != model.dim:
            raise PreconditionViolation(
                f"observations have dimension {observations.dim}, "
                f"model expects {model.dim}"
                )

        super().__init__(model.n_params, fd_step)

        self.observations = observations
        self.model = model
        self.ratio = int(ratio)

        self._init_cond = observations.initial_condition
        self._observed = np.asfortranarray(observations.data.T)
        self._normalizer = self.no_days * observations.population**2

        self.solver = TrajectorySolver(
            step_count=(self.no_days - 1) * self.ratio,
            horizon=float(self.no_days - 1),
            Scheme=Scheme,
            **scheme_kwargs,
            )

        #scratch space for the fine trajectory
        self._trajectory = self.solver.allocate(model)


    @classmethod
    def from_files(cls, observation_file, parameter_file, Scheme=Heun, **kwargs):
        """Build the objective from an observation and a parameter file.

        The parameter file provides the starting rate constants only, the
        initial condition is always taken from the observations.
        """
        observations = Observations.from_file(observation_file, dim=SIQRD.dim)
        model = SIQRD.from_file(parameter_file, includes_initial_conds=False)
        return cls(observations, model, Scheme=Scheme, **kwargs)


    def __repr__(self):
        return (
            f"LeastSquaresObjective(model={type(self.model).__name__}, "
            f"scheme={self.solver.scheme}, no_days={self.no_days}, "
            f"ratio={self.ratio})"
            )


    @property
    def no_days(self):
        return self.observations.length


    @property
    def step_count(self):
        """Number of fine integration steps."""
        return self.solver.step_count


    @property
    def horizon(self):
        return self.solver.horizon


    @property
    def trajectory(self):
        """Fine trajectory of the last evaluation (scratch buffer, do not keep)."""
        return self._trajectory


    def simulate(self, params, out=None):
        """Integrate the model for 'params' from the day 0 observation.

        Returns the fine trajectory, written into 'out' if provided and into
        a fresh array otherwise.
        """
        params = np.asarray(params, dtype=float)
        self._check_params(params)

        self.model.set_initial_condition(self._init_cond)
        self.model.set_parameters(params)

        if out is None:
            out = self.solver.allocate(self.model)
        return self.solver.solve(self.model, out)


    def evaluate(self, params):
        params = np.asarray(params, dtype=float)
        self._check_params(params)

        self.nfev += 1

        self.model.set_initial_condition(self._init_cond)
        self.model.set_parameters(params)
        self.solver.solve(self.model, self._trajectory)

        lse = 0.0
        for day in range(self.no_days):
            diff = self._trajectory[:, day * self.ratio] - self._observed[:, day]
            lse += np.dot(diff, diff)

        lse /= self._normalizer

        _logger.debug("objective %.6e at %s", lse, params)

        return float(lse)
