#########################################################################################
##
##                          BASE CLASS FOR ODE VECTOR FIELDS
##                                (models/_model.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from ..exceptions import PreconditionViolation


# BASE MODEL CLASS ======================================================================

class VectorField:
    """Base class for right hand sides 'dx/dt = f(x)' of autonomous ODE systems
    with a fixed state dimension.

    Subclasses set the class attributes ``dim`` (state dimension) and
    ``n_params`` (length of the parameter vector) and implement
    :meth:`_evaluate` and :meth:`_fill_jacobian`. The public methods validate
    shapes and handle the in-place variants.

    Parameters
    ----------
    initial_condition : array_like, None
        initial state, NaN filled if not provided
    """

    dim = None
    n_params = 0

    def __init__(self, initial_condition=None):
        self._x0 = np.full(self.dim, np.nan)
        self._params = np.zeros(self.n_params)

        if initial_condition is not None:
            self.set_initial_condition(initial_condition)


    def __len__(self):
        return self.dim


    def __call__(self, x, out=None):
        return self.derivative(x, out)


    def __repr__(self):
        return f"{type(self).__name__}(params={self._params.tolist()})"


    # validation ------------------------------------------------------------------------

    def _check_vector(self, v, size, name):
        if np.shape(v) != (size,):
            raise PreconditionViolation(
                f"{type(self).__name__}: {name} must have shape ({size},), "
                f"got {np.shape(v)}"
                )


    # state and parameters --------------------------------------------------------------

    def initial_condition(self):
        """Return a copy of the initial state."""
        return self._x0.copy()


    def set_initial_condition(self, x0):
        """Replace the initial state.

        Parameters
        ----------
        x0 : array_like
            state vector of length ``dim``
        """
        x0 = np.asarray(x0, dtype=float)
        self._check_vector(x0, self.dim, "initial condition")
        self._x0[:] = x0


    def parameters(self):
        """Return a copy of the parameter vector."""
        return self._params.copy()


    def set_parameters(self, params):
        """Replace the parameter vector.

        Parameters
        ----------
        params : array_like
            parameter vector of length ``n_params``
        """
        params = np.asarray(params, dtype=float)
        self._check_vector(params, self.n_params, "parameter vector")
        self._params[:] = params


    # evaluation ------------------------------------------------------------------------

    def derivative(self, x, out=None):
        """Evaluate the vector field at state 'x'.

        Parameters
        ----------
        x : array_like
            state vector of length ``dim``
        out : np.ndarray, None
            if provided, the result is written into this buffer

        Returns
        -------
        out : np.ndarray
            time derivative of the state
        """
        self._check_vector(x, self.dim, "state")
        if out is None:
            out = np.empty(self.dim)
        else:
            self._check_vector(out, self.dim, "output vector")
        self._evaluate(x, out)
        return out


    def jacobian(self, x, out=None):
        """Evaluate the jacobian 'df/dx' at state 'x'.

        Parameters
        ----------
        x : array_like
            state vector of length ``dim``
        out : np.ndarray, None
            if provided, the (dim, dim) matrix is overwritten in place

        Returns
        -------
        out : np.ndarray
            jacobian matrix, row i holds the partials of the i-th equation
        """
        self._check_vector(x, self.dim, "state")
        if out is None:
            out = np.zeros((self.dim, self.dim))
        elif np.shape(out) != (self.dim, self.dim):
            raise PreconditionViolation(
                f"{type(self).__name__}: jacobian buffer must have shape "
                f"({self.dim}, {self.dim}), got {np.shape(out)}"
                )
        else:
            out.fill(0.0)
        self._fill_jacobian(x, out)
        return out


    def _evaluate(self, x, out):
        raise NotImplementedError


    def _fill_jacobian(self, x, out):
        raise NotImplementedError
