#########################################################################################
##
##                          CENTRALIZED LOGGING CONFIGURATION
##                                 (utils/logger.py)
##
##      Singleton that owns the 'epifit' logger hierarchy. Modules request child
##      loggers by name, verbosity is configured at runtime instead of through
##      scattered debug switches.
##
#########################################################################################

# IMPORTS ===============================================================================

import sys
import logging


# CLASS =================================================================================

class LoggerManager:
    """Singleton managing the logging configuration of the package.

    All loggers handed out are children of the ``"epifit"`` root logger, so a
    single call to :meth:`configure` or :meth:`set_level` controls the output
    of every module.

    Levels used across the package

    - ``INFO``: optimizer start and convergence summaries, fit progress
    - ``DEBUG``: per iteration optimizer state, line search steps, newton
      iteration counts, trajectory solver progress

    Example
    -------
    .. code-block:: python

        import logging
        from epifit import LoggerManager

        mgr = LoggerManager()
        mgr.configure(level=logging.DEBUG)
        mgr.set_level(logging.WARNING, module="solvers")
    """

    _instance = None
    _initialized = False

    ROOT_NAME = "epifit"
    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DEFAULT_DATE_FORMAT = "%H:%M:%S"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance


    def __init__(self):
        if LoggerManager._initialized:
            return
        LoggerManager._initialized = True

        self.root_logger = logging.getLogger(self.ROOT_NAME)
        self.root_logger.propagate = False
        self._handler = None

        self.configure(enabled=True, output=None, level=logging.WARNING)


    def configure(
        self,
        enabled=True,
        output=None,
        level=logging.WARNING,
        format=None,
        date_format=None,
        ):
        """Set up the handler of the root logger.

        Parameters
        ----------
        enabled : bool
            if False, all output is discarded
        output : str, None
            file path to log into, stdout if None
        level : int
            logging level of the root logger
        format : str, None
            record format, defaults to ``DEFAULT_FORMAT``
        date_format : str, None
            time format, defaults to ``DEFAULT_DATE_FORMAT``
        """

        #remove previous handler
        if self._handler is not None:
            self.root_logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None

        self.root_logger.setLevel(level)

        if not enabled:
            self._handler = logging.NullHandler()
        elif output is None:
            self._handler = logging.StreamHandler(sys.stdout)
        else:
            self._handler = logging.FileHandler(output, mode="a")

        self._handler.setFormatter(
            logging.Formatter(
                fmt=format or self.DEFAULT_FORMAT,
                datefmt=date_format or self.DEFAULT_DATE_FORMAT,
                )
            )
        self.root_logger.addHandler(self._handler)


    def get_logger(self, name):
        """Return a child logger of the package root logger.

        Parameters
        ----------
        name : str
            dotted name relative to the root, e.g. ``"opt.bfgs"``
        """
        if name.startswith(self.ROOT_NAME + "."):
            name = name[len(self.ROOT_NAME) + 1:]
        return self.root_logger.getChild(name)


    def set_level(self, level, module=None):
        """Set the level of the root logger or of a single module logger."""
        if module is None:
            self.root_logger.setLevel(level)
        else:
            self.get_logger(module).setLevel(level)


    def is_debug(self, name=None):
        """True if the (module) logger emits DEBUG records."""
        logger = self.root_logger if name is None else self.get_logger(name)
        return logger.isEnabledFor(logging.DEBUG)
