import sys
from typing import Optional

from loguru import logger

from regionstat.logging.ilogger import ILogger
from regionstat.logging.loglevel import LogLevel
from regionstat.logging.pythonlogger import LOGFILE


def _depth_level(additional_depth: Optional[int]) -> int:
    """
    Depth passed to loguru, so that the reported file and line number are
    those of the caller of the regionstat logger.
    """
    default_depth = 2
    if additional_depth is not None:
        return default_depth + additional_depth
    return default_depth


class LoguruLogger(ILogger):
    """
    Logs messages with the loguru logging framework.
    """

    def __init__(
        self,
        log_level: LogLevel,
        add_default_stream_handler: bool,
        add_default_file_handler: bool,
    ) -> None:
        # Remove default handler set by loguru
        logger.remove()

        if add_default_stream_handler:
            logger.add(sys.stdout, level=log_level.value)
        if add_default_file_handler:
            logger.add(LOGFILE, level=log_level.value)

    def debug(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).debug(message)

    def info(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).info(message)

    def warning(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).warning(message)

    def error(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).error(message)

    def critical(self, message: str, additional_depth: Optional[int] = None) -> None:
        logger.opt(depth=_depth_level(additional_depth)).critical(message)
