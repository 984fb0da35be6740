from .logger import LoggerManager
from .io import read_parameters, read_observations, save_results
