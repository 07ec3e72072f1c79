# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# native lib
import logging
import os
import sys
from datetime import datetime
from enum import Enum


class LogFormat(Enum):
    """The Enum class of the log format.

    Example:
        - ``LogFormat.simple``: simple time | tag | level | msg
        - ``LogFormat.internal``: simple time | component | level | msg
    """
    simple = 1
    internal = 2


FORMAT_NAME_TO_FILE_FORMAT = {
    LogFormat.simple: logging.Formatter(
        fmt='%(asctime)s | %(tag)s | %(levelname)s | %(message)s', datefmt='%H:%M:%S'),
    LogFormat.internal: logging.Formatter(
        fmt='%(asctime)s | %(component)s | %(levelname)s | %(message)s', datefmt='%H:%M:%S')
}

level_map = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARN,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def msgformat(logfunc):
    """The decorator used to construct the log msg."""

    def _msgformatter(self, msg, *args):
        if args:
            logfunc(self, "%s %s", isinstance(msg, str) and msg or repr(msg), repr(args))
        else:
            logfunc(self, "%s", isinstance(msg, str) and msg or repr(msg))

    return _msgformatter


class Logger(object):
    """A simple wrapper for logging.

    The Logger hosts a stdout handler and, if ``dump_folder`` is given, a file handler.
    The file handler is set to ``DEBUG`` level and will dump all the logging info to
    ``dump_folder``. The logging level of the stdout handler is decided by the ``stdout_level``,
    and can be redirected by setting the environment variable ``LOG_LEVEL``.
    Supported ``LOG_LEVEL`` includes: ``DEBUG``, ``INFO``, ``WARN``, ``ERROR``, ``CRITICAL``.

    Example:
        ``$ export LOG_LEVEL=DEBUG``

    Args:
        tag (str): Log tag for stream and file output.
        format_ (LogFormat): Predefined formatter. Defaults to ``LogFormat.simple``.
        dump_folder (str): Log dumped folder. Defaults to None, which disables the file handler.
            The full path of the dumped log file is `dump_folder/tag.log`.
        dump_mode (str): Write log file mode. Defaults to ``w``. Use ``a`` to append log.
        extension_name (str): Final dumped file extension name. Defaults to `log`.
        auto_timestamp (bool): Add a timestamp to the dumped log file name or not.
            E.g: `tag.1574953673.137387.log`.
        stdout_level (str): the logging level of the stdout handler. Defaults to ``WARN``.
    """

    def __init__(
        self, tag: str, format_: LogFormat = LogFormat.simple, dump_folder: str = None, dump_mode: str = 'w',
        extension_name: str = 'log', auto_timestamp: bool = False, stdout_level: str = "WARN"
    ):
        self._file_format = FORMAT_NAME_TO_FILE_FORMAT[format_]
        self._stdout_level = level_map.get(os.environ.get('LOG_LEVEL') or stdout_level, logging.WARN)
        self._logger = logging.getLogger(tag)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False
        self._extension_name = extension_name

        # Loggers are shared by tag, avoid stacking handlers on re-creation.
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        if dump_folder is not None:
            os.makedirs(dump_folder, exist_ok=True)

            if auto_timestamp:
                filename = f'{tag}.{datetime.now().timestamp()}'
            else:
                filename = f'{tag}'

            filename += f'.{self._extension_name}'

            # File handler
            fh = logging.FileHandler(
                filename=f'{os.path.join(dump_folder, filename)}', mode=dump_mode, encoding="utf-8"
            )
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(self._file_format)
            self._logger.addHandler(fh)

        # Stdout handler
        sh = logging.StreamHandler(sys.stdout)
        sh.setLevel(self._stdout_level)
        sh.setFormatter(self._file_format)
        self._logger.addHandler(sh)

        self._extra = {'tag': tag}

    @property
    def logger(self) -> logging.Logger:
        """logging.Logger: The wrapped standard logger."""
        return self._logger

    @msgformat
    def debug(self, msg, *args):
        """Add a log with ``DEBUG`` level."""
        self._logger.debug(msg, *args, extra=self._extra)

    @msgformat
    def info(self, msg, *args):
        """Add a log with ``INFO`` level."""
        self._logger.info(msg, *args, extra=self._extra)

    @msgformat
    def warn(self, msg, *args):
        """Add a log with ``WARN`` level."""
        self._logger.warning(msg, *args, extra=self._extra)


class SchedulerLogger:
    """An internal logger for the scheduler modules.

    It maintains a singleton logger shared by all scheduler modules. The logger is inited
    at the first logging call, so importing the package does not touch any handler.
    The component name is the module name given at construction.
    """

    class _SchedulerLogger(Logger):
        def __init__(self):
            super().__init__(tag="mipsched", format_=LogFormat.internal)

    _logger = None

    def __init__(self, name: str):
        self.name = name
        self._extra = {"component": name}

    def passive_init(self) -> None:
        """Init the shared ``_SchedulerLogger`` if it does not exist."""
        if not SchedulerLogger._logger:
            SchedulerLogger._logger = self._SchedulerLogger()

    def debug(self, message: str) -> None:
        """``logger.debug()`` with passive init.

        Args:
            message (str): logged message.
        """
        self.passive_init()
        self._logger.logger.debug(message, extra=self._extra)

    def info(self, message: str) -> None:
        """``logger.info()`` with passive init.

        Args:
            message (str): logged message.
        """
        self.passive_init()
        self._logger.logger.info(message, extra=self._extra)

    def warning(self, message: str) -> None:
        """``logger.warning()`` with passive init.

        Args:
            message (str): logged message.
        """
        self.passive_init()
        self._logger.logger.warning(message, extra=self._extra)
