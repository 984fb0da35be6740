from ._model import VectorField
from .siqrd import SIQRD
from .cubic import CubicRelaxation
