# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2016
# --------------------------------------------------------------------------

"""
Representation of the mipbuilder solving environment.

An environment holds the solver-global configuration, as a
:class:`mipbuilder.context.Context`, and hands out one engine per model::

    from mipbuilder import Environment, Model

    env = Environment(time_limit=30)
    with Model(env, name="diet") as mdl:
        ...

The engine is chosen by the ``solver.agent`` key of the context (``highs`` by default).
Engine parameters of the context (``log_output``, ``time_limit``, ``mip_gap``) are
forwarded to each engine when it is created.
"""

from mipbuilder.context import Context
from mipbuilder.engine_factory import EngineFactory
from mipbuilder.utils import SolverError


class Environment(object):
    """ The solver environment shared by models.

    Args:
        context (optional): The context to use. If no ``context`` is
            passed, a default context is created, reading config files if present.
        agent (optional): The ``context.solver.agent`` is initialized with this string.
        log_output (optional): if ``True``, engine logs are output to stdout.
        time_limit (optional): a time limit in seconds.
        mip_gap (optional): a relative MIP gap.
        output_level (optional): the output level of the model error handlers.
    """

    def __init__(self, context=None, **kwargs):
        if context is None:
            self._context = Context.make_default_context(**kwargs)
        else:
            self._context = context.copy()
            self._context.update(kwargs)

    @property
    def context(self):
        return self._context

    @property
    def solver_agent(self):
        return self._context.solver.agent

    @property
    def output_level(self):
        return self._context.output_level

    def new_engine(self, model_name=None):
        """ Creates a new engine, configured from this environment's context.

        Raises:
            SolverError: if the engine rejects one of the context parameters.
        """
        engine = EngineFactory.new_engine(self.solver_agent, model_name)
        for name, value in self._context.solver.get_engine_parameters().items():
            status = engine.set_parameter(name, value)
            if status:
                engine.end()
                raise SolverError(status, "set_parameter")
        return engine

    def __repr__(self):
        return "mipbuilder.environment.Environment(agent={0!r})".format(self.solver_agent or "highs")
