from enum import Enum
from typing import Union

import regionstat

from .ilogger import ILogger
from .loglevel import LogLevel
from .logurulogger import LoguruLogger
from .nulllogger import NullLogger
from .pythonlogger import PythonLogger


class LoggerType(Enum):
    """
    The available logging frameworks.
    """

    PYTHON = PythonLogger.__name__
    """
    Standard library logging, with a logger named "regionstat".
    """
    LOGURU = LoguruLogger.__name__
    """
    The loguru logging framework.
    """
    NULL = NullLogger.__name__
    """
    Discards all messages. The default.
    """


def _create_logger(
    logger_type: LoggerType,
    log_level: LogLevel,
    add_default_stream_handler: bool,
    add_default_file_handler: bool,
) -> ILogger:
    match logger_type:
        case LoggerType.PYTHON:
            return PythonLogger(
                log_level, add_default_stream_handler, add_default_file_handler
            )
        case LoggerType.LOGURU:
            return LoguruLogger(
                log_level, add_default_stream_handler, add_default_file_handler
            )
        case _:
            return NullLogger()


def configure(
    logger_type: Union[LoggerType, str],
    log_level: LogLevel = LogLevel.WARNING,
    add_default_stream_handler: bool = True,
    add_default_file_handler: bool = False,
) -> None:
    """
    Select the logging framework and its log level.

    Parameters
    ----------
    logger_type : LoggerType or str
        The logging framework to be used. Strings are the member names:
        "python", "loguru" or "null".
    log_level : LogLevel
        The log level to be set. WARNING by default.
    add_default_stream_handler : bool
        Whether to log to stdout. True by default.
    add_default_file_handler : bool
        Whether to log to ``regionstat.log`` in the working directory.
        False by default.
    """
    if isinstance(logger_type, str):
        try:
            logger_type = LoggerType[logger_type.upper()]
        except KeyError:
            raise ValueError(
                f'Unknown logger type "{logger_type}", available: '
                f'{", ".join(member.name.lower() for member in LoggerType)}'
            )
    regionstat.logging.logger.instance = _create_logger(
        logger_type, log_level, add_default_stream_handler, add_default_file_handler
    )
