from typing import Optional

from regionstat.logging.ilogger import ILogger


class NullLogger(ILogger):
    """
    Discards every message. Used until a logger is configured.
    """

    def debug(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass

    def info(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass

    def warning(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass

    def error(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass

    def critical(self, message: str, additional_depth: Optional[int] = None) -> None:
        pass
