from enum import Enum


class LogLevel(Enum):
    """
    The available log levels, with the values of the python logging module.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    """
    Something unexpected happened, such as a region without any raster
    cells, but the computation continues.
    """
    ERROR = 40
    CRITICAL = 50
