#########################################################################################
##
##                          OBSERVATION SET CONTAINER
##                             (opt/observations.py)
##
#########################################################################################

# IMPORTS ===============================================================================

import numpy as np
import matplotlib.pyplot as plt

from ..exceptions import PreconditionViolation
from ..utils.io import read_observations


# CLASS =================================================================================

class Observations:

    """Immutable set of daily state observations.

    Stores the day labels and the observed states, one row per day. Row 0 is
    the state on day 0 and serves as initial condition of the fit.

    Parameters
    ----------
    time : array_like
        day labels of shape (no_days,), strictly increasing
    data : array_like
        observed states of shape (no_days, dim) or (dim, no_days), the
        input is transposed automatically if time is aligned on axis 1
    name : str, optional
        name used for display and plotting
    unit : str, optional
        time unit label used for plotting
    labels : sequence of str, optional
        compartment names used for plotting

    Notes
    -----
    The underlying arrays are flagged read only, an observation set is never
    modified after loading.
    """

    def __init__(self, time, data, name="observations", unit="day", labels=None):
        t = np.array(time, dtype=float).reshape(-1)
        y = np.array(data, dtype=float)

        if y.ndim != 2:
            raise PreconditionViolation("Observations require 2D (day x state) data")

        if y.shape[0] == t.size:
            pass
        elif y.shape[1] == t.size:
            y = y.T.copy()
        else:
            raise PreconditionViolation("Observations require data to align with time on one axis")

        if t.size < 2:
            raise PreconditionViolation("Observations require at least 2 days")
        if not np.all(np.diff(t) > 0):
            raise PreconditionViolation("Observations require strictly increasing time")

        t.flags.writeable = False
        y.flags.writeable = False

        self.time = t
        self.data = y
        self.name = str(name)
        self.unit = unit
        self.labels = tuple(labels) if labels is not None else tuple(
            f"x{i}" for i in range(y.shape[1])
            )


    @classmethod
    def from_file(cls, path, dim=None, **kwargs):
        """Load an observation file with a 'no_days dim' header.

        Parameters
        ----------
        path : str, Path
            observation file
        dim : int, optional
            expected state dimension
        kwargs : dict
            forwarded to the constructor
        """
        labels, data = read_observations(path, dim)
        kwargs.setdefault("name", str(path))
        return cls(labels, data, **kwargs)


    def __len__(self):
        return self.length


    def __repr__(self):
        return f"Observations(name={self.name!r}, no_days={self.length}, dim={self.dim})"


    @property
    def length(self):
        """Number of observed days."""
        return self.time.size


    @property
    def dim(self):
        """State dimension."""
        return self.data.shape[1]


    @property
    def duration(self):
        """Observation span in time units."""
        return float(self.time[-1] - self.time[0])


    @property
    def initial_condition(self):
        """Observed state on day 0."""
        return self.data[0].copy()


    @property
    def population(self):
        """Sum of all compartments on day 0."""
        return float(np.sum(self.data[0]))


    def plot(self, ax=None, marker="o", markersize=4.0, linestyle="none", alpha=0.8):
        """Plot every compartment over time.

        Parameters
        ----------
        ax : matplotlib.axes.Axes, optional
            axes to draw into, a new figure is created if not provided
        marker, markersize, linestyle, alpha :
            passed to `matplotlib.pyplot.plot`

        Returns
        -------
        ax : matplotlib.axes.Axes
        """

        if ax is None:
            _, ax = plt.subplots(figsize=(8, 4))

        for i, label in enumerate(self.labels):
            ax.plot(
                self.time, self.data[:, i],
                marker=marker, markersize=markersize,
                linestyle=linestyle, alpha=alpha, label=label,
                )

        ax.set_xlabel(f"Time ({self.unit})")
        ax.set_ylabel("Compartment size")
        ax.set_title(f"Observations: {self.name}")
        ax.legend()
        ax.grid(True)

        return ax
