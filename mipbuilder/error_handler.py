# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

# gendoc: ignore

from mipbuilder.utils import MipBuilderException, get_logger


def mipbuilder_fatal(msg, *args):
    raise MipBuilderException(msg, *args)


class InfoLevel(object):
    # ordered output levels, the lower the more verbose
    TRACE, INFO, WARNING, ERROR, FATAL = 0, 1, 2, 3, 4

    _level_by_name = {"trace": TRACE, "debug": TRACE,
                      "info": INFO,
                      "warning": WARNING, "warn": WARNING,
                      "error": ERROR,
                      "fatal": FATAL, "quiet": FATAL}

    @classmethod
    def parse(cls, arg, default_level=INFO):
        if arg is None:
            return default_level
        if isinstance(arg, int) and cls.TRACE <= arg <= cls.FATAL:
            return arg
        return cls._level_by_name.get(str(arg).lower(), default_level)


class DefaultErrorHandler(object):
    """ Routes modeling messages to the ``mipbuilder`` logger.

    Messages below this handler's output level are dropped here, the shared
    logger itself lets every level through.
    ``fatal`` always logs and raises a :class:`MipBuilderException`.
    """

    def __init__(self, output_level="info", logger_name="mipbuilder"):
        self._output_level = InfoLevel.parse(output_level)
        self._logger = get_logger(logger_name)
        self._number_of_errors = 0
        self._number_of_warnings = 0

    def get_output_level(self):
        return self._output_level

    def set_output_level(self, output_level):
        self._output_level = InfoLevel.parse(output_level, self._output_level)

    @property
    def number_of_errors(self):
        return self._number_of_errors

    @property
    def number_of_warnings(self):
        return self._number_of_warnings

    def _is_printed(self, level):
        return level >= self._output_level

    @staticmethod
    def _format(msg, args):
        if not args:
            return msg
        elif msg.find('{') >= 0:
            return msg.format(*args)
        else:
            return msg % args

    def trace(self, msg, args=None):
        if self._is_printed(InfoLevel.TRACE):
            self._logger.debug(self._format(msg, args))

    def info(self, msg, args=None):
        if self._is_printed(InfoLevel.INFO):
            self._logger.info(self._format(msg, args))

    def warning(self, msg, args=None):
        self._number_of_warnings += 1
        if self._is_printed(InfoLevel.WARNING):
            self._logger.warning(self._format(msg, args))

    def error(self, msg, args=None):
        self._number_of_errors += 1
        if self._is_printed(InfoLevel.ERROR):
            self._logger.error(self._format(msg, args))

    def fatal(self, msg, args=None):
        self._number_of_errors += 1
        resolved = self._format(msg, args)
        self._logger.critical(resolved)
        raise MipBuilderException(resolved)
