# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

import math

from mipbuilder.constants import INFINITY
from mipbuilder.error_handler import mipbuilder_fatal
from mipbuilder.utils import is_number, is_string


class VarType(object):
    """VarType()

    This abstract class is the parent class for all types of decision variables.

    This class must never be instantiated.
    Specialized sub-classes are defined for each type of decision variable.

    """

    def __init__(self, short_name, lb, ub, engine_typecode):
        self._short_name = short_name
        self._lb = lb
        self._ub = ub
        self._engine_typecode = engine_typecode

    def _check_number(self, arg):
        if not is_number(arg):
            raise ValueError('Variable bound expects number, got: {0!s}'.format(arg))

    @property
    def engine_typecode(self):
        """ The one-character type code passed to the engine: 'C', 'I' or 'B'.
        """
        return self._engine_typecode

    @property
    def short_name(self):
        """ This property returns a short name string for the type.
        """
        return self._short_name

    @property
    def default_lb(self):
        """  This property returns the default lower bound for the type.
        """
        return self._lb

    @property
    def default_ub(self):
        """  This property returns the default upper bound for the type.
        """
        return self._ub

    def resolve_lb(self, candidate_lb):
        if candidate_lb is None:
            return self._lb
        else:
            return self.compute_lb(candidate_lb)

    def resolve_ub(self, candidate_ub):
        if candidate_ub is None:
            return self._ub
        else:
            return self.compute_ub(candidate_ub)

    def compute_lb(self, candidate_lb):
        # INTERNAL
        raise NotImplementedError  # pragma: no cover

    def compute_ub(self, candidate_ub):
        # INTERNAL
        raise NotImplementedError  # pragma: no cover

    def is_discrete(self):
        """ Checks if this is a discrete type.

        Returns:
            Boolean: True if the type is a discrete type.
        """
        raise NotImplementedError  # pragma: no cover

    def to_string(self):
        return "VarType_%s" % self.short_name

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return "mipbuilder.vartype.{0}()".format(type(self).__name__)

    def __eq__(self, other):
        return type(other) == type(self)

    def __ne__(self, other):
        return type(other) != type(self)

    def __hash__(self):
        return hash(self._engine_typecode)


class BinaryVarType(VarType):
    """BinaryVarType()

        This class models the binary variable type.
    """

    def __init__(self):
        VarType.__init__(self, short_name="binary", lb=0, ub=1, engine_typecode='B')

    def compute_lb(self, candidate_lb):
        # INTERNAL
        self._check_number(candidate_lb)
        return 0 if candidate_lb <= 0 else 1

    def compute_ub(self, candidate_ub):
        # INTERNAL
        self._check_number(candidate_ub)
        return 1 if candidate_ub >= 1 else 0

    def is_discrete(self):
        return True


class ContinuousVarType(VarType):
    """ContinuousVarType()

        This class models the continuous variable type.
    """

    def __init__(self, plus_infinity=INFINITY):
        VarType.__init__(self, short_name="float", lb=0, ub=plus_infinity, engine_typecode='C')
        self._plus_infinity = plus_infinity
        self._minus_infinity = - plus_infinity

    def compute_ub(self, candidate_ub):
        self._check_number(candidate_ub)
        return self._plus_infinity if candidate_ub > self._plus_infinity else float(candidate_ub)

    def compute_lb(self, candidate_lb):
        self._check_number(candidate_lb)
        return self._minus_infinity if candidate_lb < self._minus_infinity else float(candidate_lb)

    def is_discrete(self):
        return False


class IntegerVarType(VarType):
    """IntegerVarType()

        This class models the integer variable type.
        Bounds are rounded towards the inside of the domain.
    """

    def __init__(self, plus_infinity=INFINITY):
        VarType.__init__(self, short_name="int", lb=0, ub=plus_infinity, engine_typecode='I')
        self._plus_infinity = plus_infinity

    def compute_ub(self, candidate_ub):
        self._check_number(candidate_ub)
        if candidate_ub >= self._plus_infinity:
            return self._plus_infinity
        return int(math.floor(candidate_ub))

    def compute_lb(self, candidate_lb):
        self._check_number(candidate_lb)
        if candidate_lb <= -self._plus_infinity:
            return -self._plus_infinity
        return int(math.ceil(candidate_lb))

    def is_discrete(self):
        return True


_vartype_by_key = {}
for _vt in (ContinuousVarType(), IntegerVarType(), BinaryVarType()):
    _vartype_by_key[_vt.engine_typecode] = _vt
    _vartype_by_key[_vt.short_name] = _vt
_vartype_by_key["continuous"] = _vartype_by_key["C"]
_vartype_by_key["integer"] = _vartype_by_key["I"]


def parse_vartype(arg):
    """ Converts a type code ('C', 'I', 'B'), a name or a VarType instance to a VarType.
    """
    if isinstance(arg, VarType):
        return arg
    elif is_string(arg):
        vt = _vartype_by_key.get(arg) or _vartype_by_key.get(arg.lower()) or _vartype_by_key.get(arg.upper())
        if vt is not None:
            return vt
    mipbuilder_fatal("Cannot convert to variable type: {0!r} - expecting 'C', 'I' or 'B'".format(arg))
