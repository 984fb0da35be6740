from ._scheme import Scheme
from .euler import ExplicitEuler, ImplicitEuler
from .heun import Heun
from .trajectory import TrajectorySolver


#lookup of schemes by their short name
SCHEMES = {
    ExplicitEuler.method_name: ExplicitEuler,
    ImplicitEuler.method_name: ImplicitEuler,
    Heun.method_name: Heun,
    }


def get_scheme(name):
    """Return the scheme class registered under 'name' ('fwe', 'bwe', 'heun')."""
    try:
        return SCHEMES[name]
    except KeyError:
        raise ValueError(
            f"unknown scheme '{name}', expected one of {sorted(SCHEMES)}"
            ) from None
