# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

import os
import sys
import warnings

from copy import deepcopy

from mipbuilder.utils import MipBuilderException, is_string


_BOOLEAN_STATES = {'1': True, 'yes': True, 'true': True, 'on': True,
                   '0': False, 'no': False, 'false': False, 'off': False}


def _convert_to_bool(value):
    if value is None:
        return None
    svalue = str(value).lower()
    if svalue == "none":
        return None
    if svalue not in _BOOLEAN_STATES:
        raise ValueError('Not a boolean: %s' % value)
    return _BOOLEAN_STATES[svalue]


def _convert_to_float(value):
    if value is None or str(value).lower() == 'none':
        return None
    return float(value)


class BaseContext(dict):
    # Class for handling the list of parameters.
    def __init__(self, **kwargs):
        """ Create a new context.

        Args:
            List of ``key=value`` to initialize context with.
        """
        super(BaseContext, self).__init__()
        for k, v in kwargs.items():
            self.set_attribute(k, v)

    def __setattr__(self, name, value):
        self.set_attribute(name, value)

    def __getattr__(self, name):
        return self.get_attribute(name)

    def set_attribute(self, name, value):
        self[name] = value

    def get_attribute(self, name, default=None):
        if name.startswith('__'):
            raise AttributeError
        if name in self:
            return self[name]
        raise AttributeError("'{0}' object has no attribute '{1}'".format(type(self).__name__, name))

    def __deepcopy__(self, memo):
        result = self.__class__.__new__(self.__class__)
        memo[id(self)] = result
        for k, v in self.items():
            result[k] = deepcopy(v, memo)
        return result


class SolverContext(BaseContext):
    # for internal use
    def __init__(self, **kwargs):
        super(SolverContext, self).__init__(**kwargs)
        self.agent = None
        self.log_output = False
        self.time_limit = None
        self.mip_gap = None

    def get_engine_parameters(self):
        """ Returns the engine parameters defined in this context, as a dict.

        Only parameters with a value are returned.
        """
        params = {}
        log_output = self.log_output
        if is_string(log_output):
            log_output = _convert_to_bool(log_output)
        params["log_output"] = bool(log_output)
        time_limit = _convert_to_float(self.time_limit)
        if time_limit is not None:
            params["time_limit"] = time_limit
        mip_gap = _convert_to_float(self.mip_gap)
        if mip_gap is not None:
            params["mip_gap"] = mip_gap
        return params


class Context(BaseContext):
    """ The context used to control the behavior of solve engines.

    Attributes:
        solver.agent: The key of the engine used by models, ``highs`` by default.
            Other keys are ``nosolve``, ``zero`` and ``fail``.
        solver.log_output: If True, engine logs are printed.
        solver.time_limit: A time limit in seconds, forwarded to the engine.
        solver.mip_gap: A relative MIP gap, forwarded to the engine.
        output_level: The output level of the model error handler:
            ``trace``, ``info``, ``warning``, ``error`` or ``fatal``.
    """

    def __init__(self, **kwargs):
        super(Context, self).__init__(solver=SolverContext(),
                                      output_level="info")
        self.update(kwargs, create_missing_nodes=True)

    @staticmethod
    def make_default_context(file_list=None, logger=None, **kwargs):
        """Creates a default context.

        If `file_list` is a string, then it is considered to be the name
        of a config file to be read.

        If `file_list` is a list, it is considered to be a list of names
        of a config files to be read.

        if `file_list` is None or not specified, the following files are
        read if they exist:

            * the PYTHONPATH is searched for ``mipbuilder_config.py``
            * ``~/.mipbuilderrc``

        A ``.mipbuilderrc`` file holds ``=`` or ``:`` separated ``key, value`` pairs.
        Python files are evaluated with a `context` object in the current
        scope, and you set values from this context::

            context.solver.agent = 'highs'
            context.solver.time_limit = 60

        Args:
            file_list: The list of config files to read.
            kwargs: context parameters to override. See :func:`mipbuilder.context.Context.update`
        """
        context = Context()
        context.read_settings(file_list=file_list, logger=logger)
        context.update(kwargs)
        return context

    def copy(self):
        # Makes a deep copy of the context.
        return deepcopy(self)

    def update_from_list(self, values, logger=None):
        # For each pair of `(name, value)` in values, try to set the
        # attribute.
        for name, value in values:
            try:
                self._set_value(self, name, value)
            except AttributeError:
                if logger is not None:
                    logger.warning("Ignoring undefined attribute : {0}".format(name))

    def _set_value(self, root, property_spec, property_value):
        property_list = property_spec.split('.')
        property_chain = property_list[:-1]
        to_be_set = property_list[-1]
        o = root
        for c in property_chain:
            o = getattr(o, c)
        setattr(o, to_be_set, property_value)

    def update(self, kwargs, create_missing_nodes=False):
        """ Updates this context from child parameters specified in ``kwargs``.

        The following keys are recognized:

            - agent: Changes the ``context.solver.agent`` parameter.
            - log_output: Changes the ``context.solver.log_output`` parameter.
            - time_limit: Changes the ``context.solver.time_limit`` parameter.
            - mip_gap: Changes the ``context.solver.mip_gap`` parameter.
            - output_level: Changes the ``context.output_level`` parameter.
            - override: a dict of ``dotted.name: value`` pairs.

        Args:
            kwargs: A ``dict`` containing keyword args to use to update this context.
            create_missing_nodes: When a keyword arg specify a parameter that is not already member of this context,
                creates the parameter if ``create_missing_nodes`` is True.
        """
        for k in kwargs:
            value = kwargs.get(k)
            if value is not None:
                self.update_key_value(k, value,
                                      create_missing_nodes=create_missing_nodes)

    def update_key_value(self, k, value, create_missing_nodes=False):
        if k in ('agent', 'log_output', 'time_limit', 'mip_gap'):
            self.solver[k] = value
        elif k == 'output_level':
            self.output_level = value
        elif k == 'override':
            self.update_from_list(value.items())
        else:
            if create_missing_nodes:
                self[k] = value
            else:
                warnings.warn("Unknown quick-setting in Context: {0:s}, value: {1!s}".format(k, value),
                              stacklevel=2)

    @staticmethod
    def _default_settings_files():
        # mipbuilder_config.py along sys.path, then the user's rc file
        candidates = [os.path.join(d, "mipbuilder_config.py") for d in sys.path]
        candidates.append(os.path.join(os.path.expanduser("~"), ".mipbuilderrc"))
        found = []
        for candidate in candidates:
            path = os.path.abspath(candidate)
            if os.path.isfile(path) and path not in found:
                found.append(path)
        return found

    def read_settings(self, file_list=None, logger=None):
        """Reads settings for a list of files.

        If `file_list` is None, ``mipbuilder_config.py`` files on the PYTHONPATH and
        ``~/.mipbuilderrc`` are read if they exist.

        Args:
            file_list: The list of config files to read.
        """
        if file_list is None:
            file_list = self._default_settings_files()
        elif is_string(file_list):
            file_list = [file_list]

        for f in file_list:
            if os.path.isfile(f):
                if logger:
                    logger.info("Reading settings from {0}", (f,))
                if f.endswith(".py"):
                    self.read_from_python_file(f)
                else:
                    self.read_from_rcfile(f, logger)

    def read_from_python_file(self, filename):
        # Evaluates the content of a Python file containing code to set up a
        # context.
        if os.path.isfile(filename):
            with open(filename, 'r') as f:
                source = f.read()
            # the file sees this instance as `context`
            exec(compile(source, filename, 'exec'), {'context': self})
        return self

    @staticmethod
    def _iter_logical_lines(lines):
        # yields (line number, text), a trailing backslash joins a line with the next one
        joined = ""
        lineno = 0
        for lineno, raw in enumerate(lines, 1):
            text = raw.strip()
            if text.endswith("\\"):
                joined += text[:-1]
            else:
                yield lineno, joined + text
                joined = ""
        if joined:
            yield lineno, joined

    def read_from_rcfile(self, filename, logger=None):
        # Reads `name=value` or `name: value` settings, one per logical line:
        #
        #   solver.agent = highs
        #   solver.time_limit: 30  # seconds
        settings = []
        with open(filename, 'r') as f:
            for lineno, line in self._iter_logical_lines(f):
                setting = line.partition("#")[0].strip()
                if not setting:
                    continue
                name, sep, value = setting.partition("=")
                if not sep:
                    name, sep, value = setting.partition(":")
                if not sep:
                    raise MipBuilderException("Syntax error in line {0} of {1}", lineno, filename)
                settings.append((name.strip(), value.strip()))
        self.update_from_list(settings, logger=logger)
