# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

from mipbuilder.constants import ComparisonType
from mipbuilder.error_handler import mipbuilder_fatal
from mipbuilder.linear import LinearExpr
from mipbuilder.utils import is_number, is_string, str_holo


class LinearConstraint(object):
    """ The class that models all constraints of the form `<expr> <OP> <rhs>`,
    where rhs is a number.

    Args:
        expr: A linear expression, or a variable.
        sense: A :class:`ComparisonType`, an operator string ('<=', '>=', '=='),
            or an engine code ('L', 'G', 'E').
        rhs: The right-hand side, a number.
        name: An optional name.
    """
    __slots__ = ("_expr", "_ctype", "_rhs", "_name", "__weakref__")

    def __init__(self, expr, sense, rhs, name=None):
        if name is not None and not is_string(name):
            mipbuilder_fatal("Constraint name accepts only strings or None, got: {0!r}", name)
        if not is_number(rhs):
            raise TypeError("Constraint right-hand side must be a number, got: {0!r}".format(rhs))
        self._expr = LinearExpr._to_expr(expr, "LinearConstraint")
        self._ctype = ComparisonType.parse(sense)
        self._rhs = float(rhs)
        self._name = name

    @property
    def name(self):
        return self._name

    def has_name(self):
        return self._name is not None

    @property
    def expr(self):
        """ This property returns the linear expression of the constraint.
        """
        return self._expr

    @property
    def type(self):
        """ This property returns the type of the constraint; type is an enumerated value
        of type :class:`ComparisonType`, with three possible values:

        - LE for expr <= rhs constraints

        - EQ for expr == rhs constraints

        - GE for expr >= rhs constraints
        """
        return self._ctype

    sense = type

    @property
    def sense_code(self):
        return self._ctype.engine_code

    @property
    def rhs(self):
        return self._rhs

    def number_of_terms(self):
        return self._expr.number_of_terms()

    def iter_variables(self):
        return self._expr.iter_variables()

    def to_string(self):
        return "{0} {1} {2:g}".format(self._expr.to_string(), self._ctype.operator_symbol, self._rhs)

    def __str__(self):
        if self._name:
            return "{0}: {1}".format(self._name, self.to_string())
        return self.to_string()

    def __repr__(self):
        return "mipbuilder.constr.LinearConstraint[{0}]({1})" \
            .format(self._name or '', str_holo(self.to_string(), 60))
