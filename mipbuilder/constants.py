# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

from enum import Enum, IntEnum

from mipbuilder.error_handler import mipbuilder_fatal
from mipbuilder.utils import is_string

# bounds at or beyond this value are considered infinite by the engines
INFINITY = 1e+20


class ComparisonType(Enum):
    """This enumerated class defines the various types of linear constraints:

        - LE for expr <= rhs constraints

        - EQ for expr == rhs constraints

        - GE for expr >= rhs constraints
    """
    LE = 1, "<=", "L"
    EQ = 2, "==", "E"
    GE = 3, ">=", "G"

    def __new__(cls, code, operator_symbol, engine_kw):
        obj = object.__new__(cls)
        # predefined
        obj._value_ = code
        obj._engine_code = engine_kw
        obj._op_symbol = operator_symbol
        return obj

    # NOTE: Never add a static field in an enum class: it would be interpreted as an other enum

    @property
    def engine_code(self):
        return self._engine_code

    @property
    def operator_symbol(self):
        """ Returns a string operator for the constraint.

        Example:
            Returns string "<=" for a expr <= rhs constraint.

        Returns:
            string: A string describing the logical operator used in the constraint.
        """
        return self._op_symbol

    @classmethod
    def parse(cls, arg):
        # INTERNAL
        # noinspection PyTypeChecker
        for cmp in cls:
            if arg is cmp or arg == cmp.value:
                return cmp
            elif is_string(arg):
                if arg == cmp._op_symbol \
                        or arg.lower() == cmp.name.lower() \
                        or arg == cmp._engine_code:
                    return cmp
        if arg == '=':
            return cls.EQ
        mipbuilder_fatal("cannot convert this to a comparison type: {0!r}".format(arg))


class ObjectiveSense(Enum):
    """
    This enumerated class defines the two types of objectives, `Minimize` and `Maximize`.

    Values are those of the ``ModelSense`` integer attribute.
    """
    Minimize, Maximize = 1, -1

    @staticmethod
    def parse(arg, logger=None):
        if isinstance(arg, ObjectiveSense):
            return arg
        elif is_string(arg):
            lower_text = arg.lower()
            if lower_text in {"minimize", "min"}:
                return ObjectiveSense.Minimize
            elif lower_text in {"maximize", "max"}:
                return ObjectiveSense.Maximize
            msg = "Text is not recognized as objective sense: {0}, expecting \"min\" or \"max\""
        elif arg == 1:
            return ObjectiveSense.Minimize
        elif -1 == arg:
            return ObjectiveSense.Maximize
        else:
            msg = "cannot convert: <{0!r}> to objective sense"
        if logger:
            logger.fatal(msg, (arg,))
        else:
            mipbuilder_fatal(msg.format(arg))


class ModelStatus(IntEnum):
    """ Raw model status codes, as reported by the ``Status`` attribute.

    The numbering follows the HiGHS model status table; the in-memory engines use the same codes.
    """
    NotSet = 0
    LoadError = 1
    ModelError = 2
    PresolveError = 3
    SolveError = 4
    PostsolveError = 5
    ModelEmpty = 6
    Optimal = 7
    Infeasible = 8
    UnboundedOrInfeasible = 9
    Unbounded = 10
    ObjectiveBound = 11
    ObjectiveTarget = 12
    TimeLimit = 13
    IterationLimit = 14
    Unknown = 15
    SolutionLimit = 16
    Interrupt = 17
    MemoryLimit = 18


class ErrorCode(IntEnum):
    """ Non-zero status codes returned by the engines shipped with mipbuilder.
    """
    InvalidArgument = 10003
    DataNotAvailable = 10005
    IndexOutOfRange = 10006
    FileWriteError = 10013
    IISNotInfeasible = 10015
    NotSupported = 10017
    EngineFailure = 10020


class IntAttr(object):
    ModelSense = "ModelSense"
    Status = "Status"
    NumVars = "NumVars"
    NumConstrs = "NumConstrs"
    IsMIP = "IsMIP"


class DblAttr(object):
    ObjVal = "ObjVal"


class VarAttr(object):
    LB = "LB"
    UB = "UB"
    Obj = "Obj"
    VType = "VType"
    VarName = "VarName"
    X = "X"


class ConstrAttr(object):
    RHS = "RHS"
    Sense = "Sense"
    ConstrName = "ConstrName"
    IISConstr = "IISConstr"
