# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------


# gendoc: ignore

import logging
import numbers

import numpy as np


def is_number(s):
    if isinstance(s, bool):
        return False
    return isinstance(s, numbers.Number) or _is_numpy_ndslot(s)


def _is_numpy_ndslot(s):
    # returns True if the argument is a numpy number
    # wrapped in a zero-dimensional ndarray
    return type(s) is np.ndarray and s.shape == () and np.issubdtype(s.dtype, np.number)


def is_string(e):
    return isinstance(e, str)


class MipBuilderException(Exception):
    """ Base class for modeling exceptions
    """
    DEFAULT_MSG = 'mipbuilder exception raised'

    def __init__(self, msg, *args):
        Exception.__init__(self, msg)
        self.__msg = msg or self.__class__.DEFAULT_MSG
        self.__edited_message = None
        self.__args = args
        self._resolve_message()

    def _resolve_message(self):
        self.__edited_message = None
        if self.__args:
            if self.__msg.find('%') >= 0:
                self.__edited_message = self.__msg % self.__args
            elif self.__msg.find('{') >= 0:
                self.__edited_message = self.__msg.format(*self.__args)

    @property
    def message(self):
        return self.__edited_message or self.__msg

    def __str__(self):
        return self.message


class SolverError(MipBuilderException):
    """ Raised when an engine entry point returns a non-zero status.

    Attributes:
        code: the raw status code returned by the engine.
        operation: the name of the engine entry point that failed.
    """

    def __init__(self, code, operation):
        MipBuilderException.__init__(self, "Engine call {0} failed with status {1}", operation, code)
        self.code = code
        self.operation = operation


class ModelEndedError(MipBuilderException):
    def __init__(self, model_name):
        MipBuilderException.__init__(self, "Model {0} has been ended and cannot be used", model_name)
        self.model_name = model_name


class UnknownVariableError(MipBuilderException):
    def __init__(self, var, ct):
        MipBuilderException.__init__(self, "Constraint {0!s} references variable {1!s} which is not in the model",
                                     ct, var)
        self.var = var
        self.constraint = ct


class DuplicateEntityError(MipBuilderException):
    def __init__(self, descr, mobj):
        MipBuilderException.__init__(self, "{0} {1!s} is already in the model", descr, mobj)
        self.entity = mobj


def str_holo(arg, maxlen):
    """ Returns a truncated string representation of arg

    If maxlen is positive (or null), returns str(arg) up to maxlen chars.

    :param arg:
    :param maxlen:
    :return:
    """
    s = str(arg)
    if maxlen < 0 or len(s) <= maxlen:
        return s
    else:
        return "{}..".format(s[:maxlen])


MIPBUILDER_CONSOLE_HANDLER = None


def get_logger(name):
    # output levels are filtered by each error handler, the logger passes everything
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    global MIPBUILDER_CONSOLE_HANDLER

    if MIPBUILDER_CONSOLE_HANDLER is None:
        MIPBUILDER_CONSOLE_HANDLER = logging.StreamHandler()
        MIPBUILDER_CONSOLE_HANDLER.setLevel(logging.DEBUG)

    if MIPBUILDER_CONSOLE_HANDLER not in logger.handlers:
        logger.addHandler(MIPBUILDER_CONSOLE_HANDLER)

    return logger
