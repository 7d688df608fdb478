from regionstat.logging.ilogger import ILogger
from regionstat.logging.nulllogger import NullLogger


class _LoggerHolder(ILogger):
    """
    Forwards every call to the logger instance it holds.

    Modules grab :data:`regionstat.logging.logger` at import time, before a
    user had the chance to call :func:`regionstat.logging.configure`. Since
    ``configure`` only swaps the instance inside this holder, those early
    references pick up the configured back end as well.

    >>> import regionstat
    >>> from regionstat.logging import LoggerType
    >>>
    >>> def foo(logger: ILogger = regionstat.logging.logger):
    >>>     logger.info("message")
    >>>
    >>> regionstat.logging.configure(LoggerType.LOGURU)
    >>> foo()  # logged by loguru
    """

    def __init__(self) -> None:
        self._instance = NullLogger()

    @property
    def instance(self) -> ILogger:
        """
        Contains the actual ILogger object
        """
        return self._instance

    @instance.setter
    def instance(self, value: ILogger) -> None:
        self._instance = value

    def debug(self, message: str, additional_depth: int = 0) -> None:
        self.instance.debug(message, additional_depth)

    def info(self, message: str, additional_depth: int = 0) -> None:
        self.instance.info(message, additional_depth)

    def warning(self, message: str, additional_depth: int = 0) -> None:
        self.instance.warning(message, additional_depth)

    def error(self, message: str, additional_depth: int = 0) -> None:
        self.instance.error(message, additional_depth)

    def critical(self, message: str, additional_depth: int = 0) -> None:
        self.instance.critical(message, additional_depth)
