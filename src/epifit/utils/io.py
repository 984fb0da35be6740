#########################################################################################
##
##                         PARAMETER / OBSERVATION FILE I/O
##                                  (utils/io.py)
##
##      Plain whitespace separated text formats. Parameter files list the rate
##      constants as 'beta mu gamma alpha delta [S0 I0]', observation files start
##      with a 'no_days dim' header followed by one 'label x_1 .. x_dim' row per day.
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np

from ..exceptions import PreconditionViolation
from .logger import LoggerManager


_logger = LoggerManager().get_logger("utils.io")

#file order -> model order [alpha, beta, gamma, delta, mu]
_FILE_ORDER = ("beta", "mu", "gamma", "alpha", "delta")
_MODEL_ORDER = ("alpha", "beta", "gamma", "delta", "mu")


# HELPERS ===============================================================================

def _read_tokens(path):
    with open(path, "r") as file:
        return file.read().split()


# READERS ===============================================================================

def read_parameters(path, includes_initial_conds=True):
    """Read epidemic model rate constants from a parameter file.

    Parameters
    ----------
    path : str, Path
        parameter file
    includes_initial_conds : bool
        file additionally holds 'S0 I0' after the rate constants

    Returns
    -------
    params : np.ndarray
        rate constants in model order ``[alpha, beta, gamma, delta, mu]``
    initial : tuple[float, float], None
        ``(S0, I0)`` if requested, else None
    """

    tokens = _read_tokens(path)
    expected = len(_FILE_ORDER) + (2 if includes_initial_conds else 0)

    if len(tokens) < expected:
        raise PreconditionViolation(
            f"parameter file '{path}' holds {len(tokens)} values, expected {expected}"
            )

    values = dict(zip(_FILE_ORDER, map(float, tokens[:len(_FILE_ORDER)])))
    params = np.array([values[name] for name in _MODEL_ORDER], dtype=float)

    initial = None
    if includes_initial_conds:
        initial = (float(tokens[5]), float(tokens[6]))

    _logger.debug(f"read parameters {dict(zip(_MODEL_ORDER, params))} from '{path}'")

    return params, initial


def read_observations(path, dim=None):
    """Read an observation file.

    Parameters
    ----------
    path : str, Path
        observation file
    dim : int, None
        expected state dimension, checked against the header if given

    Returns
    -------
    labels : np.ndarray
        per row label (day index), shape ``(no_days,)``
    data : np.ndarray
        measurements, shape ``(no_days, dim)``
    """

    tokens = _read_tokens(path)
    if len(tokens) < 2:
        raise PreconditionViolation(f"observation file '{path}' has no header")

    no_days, file_dim = int(float(tokens[0])), int(float(tokens[1]))

    if dim is not None and file_dim != dim:
        raise PreconditionViolation(
            f"observation file '{path}' has dimension {file_dim}, expected {dim}"
            )

    body = tokens[2:]
    if len(body) < no_days * (file_dim + 1):
        raise PreconditionViolation(
            f"observation file '{path}' announces {no_days} rows of "
            f"{file_dim + 1} values, got {len(body)} values"
            )

    rows = np.array(body[:no_days * (file_dim + 1)], dtype=float)
    rows = rows.reshape(no_days, file_dim + 1)

    _logger.debug(f"read {no_days} observations of dimension {file_dim} from '{path}'")

    return rows[:, 0].copy(), rows[:, 1:].copy()


# WRITERS ===============================================================================

def save_results(dt, trajectory, path):
    """Write a trajectory matrix as a time indexed table.

    Each column of ``trajectory`` becomes one line: the time (starting at
    zero, incremented by ``dt``) followed by the state values, tab separated.

    Parameters
    ----------
    dt : float
        time increment between columns
    trajectory : np.ndarray
        state matrix of shape ``(dim, n_steps + 1)``
    path : str, Path
        output file
    """

    trajectory = np.asarray(trajectory, dtype=float)
    if trajectory.ndim != 2:
        raise PreconditionViolation("trajectory must be a 2D (state x time) matrix")

    _logger.info(f"writing results to '{path}'")

    with open(path, "w") as file:
        for j in range(trajectory.shape[1]):
            values = "\t".join(repr(float(v)) for v in trajectory[:, j])
            file.write(f"{j * dt!r}\t{values}\n")
