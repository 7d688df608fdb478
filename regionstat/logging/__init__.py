"""
Logging support for regionstat.

Nothing is logged until a logger is configured. The library logs through
:data:`regionstat.logging.logger`, which forwards to whichever back end was
selected last.

Examples
--------

Log to stdout with the python logging framework:

>>> import regionstat
>>> from regionstat.logging import LoggerType, LogLevel
>>>
>>> regionstat.logging.configure(LoggerType.PYTHON, LogLevel.INFO)

Log to stdout and to ``regionstat.log`` with loguru:

>>> regionstat.logging.configure(
>>>     LoggerType.LOGURU, LogLevel.DEBUG, add_default_file_handler=True
>>> )

Integrate into an existing python logging setup, without default handlers:

>>> import logging
>>>
>>> regionstat.logging.configure(
>>>     LoggerType.PYTHON,
>>>     LogLevel.INFO,
>>>     add_default_stream_handler=False,
>>>     add_default_file_handler=False,
>>> )
>>> logging.basicConfig(level=logging.INFO, handlers=[logging.StreamHandler()])
"""

from regionstat.logging._loggerholder import _LoggerHolder
from regionstat.logging.config import LoggerType, configure
from regionstat.logging.ilogger import ILogger  # noqa: I001
from regionstat.logging.logging_decorators import standard_log_decorator
from regionstat.logging.loglevel import LogLevel

logger = _LoggerHolder()
