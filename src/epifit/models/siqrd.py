#########################################################################################
##
##                         SIQRD COMPARTMENTAL EPIDEMIC MODEL
##                                 (models/siqrd.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from ._model import VectorField
from ..utils.io import read_parameters


# MODEL =================================================================================

class SIQRD(VectorField):
    """Susceptible, infected, quarantined, recovered and dead compartments.

    .. math::

        \\begin{aligned}
        \\dot{S} &= -\\beta S \\frac{I}{N} + \\mu R \\\\
        \\dot{I} &= I \\left(\\beta \\frac{S}{N} - \\gamma - \\delta - \\alpha\\right) \\\\
        \\dot{Q} &= \\delta I - (\\gamma + \\alpha) Q \\\\
        \\dot{R} &= \\gamma (I + Q) - \\mu R \\\\
        \\dot{D} &= \\alpha (I + Q)
        \\end{aligned}

    with the population proxy :math:`N = S + I + R`. All terms move mass
    between compartments, so :math:`S + I + Q + R + D` is conserved.

    Parameters
    ----------
    alpha : float
        death rate of infected and quarantined
    beta : float
        infection rate
    gamma : float
        recovery rate
    delta : float
        quarantine rate
    mu : float
        rate of immunity loss
    initial_condition : array_like, None
        initial state ``[S, I, Q, R, D]``

    Example
    -------
    .. code-block:: python

        model = SIQRD(alpha=0.01, beta=0.5, gamma=0.1, delta=0.2, mu=0.01,
                      initial_condition=[1000, 5, 0, 0, 0])
        dx = model.derivative(model.initial_condition())
    """

    dim = 5
    n_params = 5

    labels = ("S", "I", "Q", "R", "D")
    param_names = ("alpha", "beta", "gamma", "delta", "mu")

    def __init__(
        self,
        alpha=np.nan,
        beta=np.nan,
        gamma=np.nan,
        delta=np.nan,
        mu=np.nan,
        initial_condition=None,
        ):
        super().__init__(initial_condition)
        self.set_parameters([alpha, beta, gamma, delta, mu])


    @classmethod
    def from_file(cls, path, includes_initial_conds=True):
        """Build the model from a parameter file.

        The file holds 'beta mu gamma alpha delta' optionally followed by
        'S0 I0'. Q, R and D start at zero, missing initial values stay NaN.
        """
        params, initial = read_parameters(path, includes_initial_conds)
        model = cls(*params)
        if initial is not None:
            model.set_initial_condition([initial[0], initial[1], 0.0, 0.0, 0.0])
        return model


    # named access ----------------------------------------------------------------------

    @property
    def alpha(self):
        return self._params[0]

    @property
    def beta(self):
        return self._params[1]

    @property
    def gamma(self):
        return self._params[2]

    @property
    def delta(self):
        return self._params[3]

    @property
    def mu(self):
        return self._params[4]


    def __repr__(self):
        values = ", ".join(f"{n}={v}" for n, v in zip(self.param_names, self._params))
        return f"SIQRD({values})"


    def to_string(self):
        """Parameter tag 'beta_mu_gamma_alpha_delta', each as floor(100 * value)."""
        ordered = (self.beta, self.mu, self.gamma, self.alpha, self.delta)
        return "_".join(str(int(np.floor(v * 100))) for v in ordered)


    # vector field ----------------------------------------------------------------------

    def _evaluate(self, x, out):
        alpha, beta, gamma, delta, mu = self._params
        S, I, Q, R = x[0], x[1], x[2], x[3]
        N = S + I + R

        out[0] = -beta * S * (I / N) + mu * R
        out[1] = I * (beta * (S / N) - gamma - delta - alpha)
        out[2] = delta * I - (gamma + alpha) * Q
        out[3] = gamma * (I + Q) - mu * R
        out[4] = alpha * (I + Q)


    def _fill_jacobian(self, x, out):
        alpha, beta, gamma, delta, mu = self._params
        S, I, R = x[0], x[1], x[3]
        N = S + I + R
        bsi = beta * S * I / N**2

        #S equation
        out[0, 0] = -beta * (I / N) + bsi
        out[0, 1] = -beta * (S / N) + bsi
        out[0, 3] = mu + bsi

        #I equation
        out[1, 0] = I * (beta / N - beta * S / N**2)
        out[1, 1] = -bsi + (beta * (S / N) - gamma - delta - alpha)
        out[1, 3] = -bsi

        #Q equation
        out[2, 1] = delta
        out[2, 2] = -(gamma + alpha)

        #R equation
        out[3, 1] = gamma
        out[3, 2] = gamma
        out[3, 3] = -mu

        #D equation, no equation depends on D so column 4 stays zero
        out[4, 1] = alpha
        out[4, 2] = alpha
