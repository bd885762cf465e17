# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

# gendoc: ignore

from mipbuilder.engine import NoSolveEngine, ZeroSolveEngine, FakeFailEngine
from mipbuilder.utils import MipBuilderException


class EngineFactory(object):
    """ A factory class that manages creation of engine instances.
    """
    _engine_types_by_key = {"local":   NoSolveEngine,
                            "nosolve": NoSolveEngine,
                            "zero":    ZeroSolveEngine,
                            "fail":    FakeFailEngine}

    highs_engine_type = None

    @classmethod
    def _get_highs_engine_type(cls):
        if not cls.highs_engine_type:
            from mipbuilder.highs_engine import HighsEngine

            cls.highs_engine_type = HighsEngine
            cls._engine_types_by_key["highs"] = HighsEngine
        return cls.highs_engine_type

    @classmethod
    def _get_engine_by_code(cls, code):
        if code is None or code.lower() == "highs":
            return cls._get_highs_engine_type()
        else:
            return cls._engine_types_by_key.get(code.lower())

    @classmethod
    def engine_keys(cls):
        return sorted(set(cls._engine_types_by_key) | {"highs"})

    @classmethod
    def new_engine(cls, solver_agent, model_name=None):
        """ Returns a new engine instance from a key.

        Args:
            solver_agent: an engine key, None means ``highs``.
            model_name: the name of the model the engine is created for.

        Returns:
            An instance of :class:`mipbuilder.engine.IEngine`.
        """
        engine_type = cls._get_engine_by_code(solver_agent)
        if not engine_type:
            raise MipBuilderException("Cannot build engine from key: {0!r}, expecting one of: {1}",
                                      solver_agent, ", ".join(cls.engine_keys()))
        return engine_type(model_name)
