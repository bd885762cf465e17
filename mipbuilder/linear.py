# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

from collections import OrderedDict

from mipbuilder.error_handler import mipbuilder_fatal
from mipbuilder.utils import is_number, is_string, str_holo
from mipbuilder.vartype import parse_vartype


def _check_name(name, descr):
    if name is not None and not is_string(name):
        mipbuilder_fatal("{0} name accepts only strings or None, got: {1!r}", descr, name)


def _to_coef(k, caller):
    if not is_number(k):
        raise TypeError("{0} expects a numeric coefficient, got: {1!r}".format(caller, k))
    return float(k)


class Var(object):
    """Var(lb=None, ub=None, vartype='C', obj=0, name=None)

    This class models decision variables.

    A variable is a plain descriptor: it does not know which models it belongs to.
    Models keep track of the index they assigned to each variable.

    Args:
        lb: The lower bound, default is the type's default lower bound (0).
        ub: The upper bound, default is the type's default upper bound.
        vartype: A type code ('C', 'I', 'B'), a type name or a :class:`VarType` instance.
        obj: The coefficient of the variable in the objective.
        name: An optional name, a string or None.
    """
    __slots__ = ("_vartype", "_lb", "_ub", "_obj", "_name", "__weakref__")

    def __init__(self, lb=None, ub=None, vartype='C', obj=0, name=None):
        _check_name(name, "Variable")
        self._vartype = parse_vartype(vartype)
        self._name = name
        self._obj = _to_coef(obj, "Var")
        used_lb = self._vartype.resolve_lb(lb)
        used_ub = self._vartype.resolve_ub(ub)
        if used_lb > used_ub:
            mipbuilder_fatal("Variable: {0} has empty domain: [{1}..{2}]", name, lb, ub)
        self._lb = used_lb
        self._ub = used_ub

    @property
    def name(self):
        return self._name

    def has_name(self):
        return self._name is not None

    @property
    def lb(self):
        return self._lb

    @property
    def ub(self):
        return self._ub

    @property
    def vartype(self):
        """ This property returns the variable type, an instance of :class:`VarType`.
        """
        return self._vartype

    @property
    def typecode(self):
        return self._vartype.engine_typecode

    @property
    def obj(self):
        """ The coefficient of this variable in the objective.
        """
        return self._obj

    def is_binary(self):
        return self.typecode == 'B'

    def is_integer(self):
        return self.typecode == 'I'

    def is_continuous(self):
        return self.typecode == 'C'

    def is_discrete(self):
        return self._vartype.is_discrete()

    def to_linear_expr(self):
        return LinearExpr({self: 1.0})

    def __add__(self, e):
        return self.to_linear_expr().plus(e)

    def __radd__(self, e):
        return self.to_linear_expr().__radd__(e)

    def __sub__(self, e):
        return self.to_linear_expr().minus(e)

    def __rsub__(self, e):
        return self.to_linear_expr().negate().plus(e)

    def __neg__(self):
        return LinearExpr({self: -1.0})

    def __mul__(self, e):
        return self.to_linear_expr().times(e)

    def __rmul__(self, e):
        return self.to_linear_expr().times(e)

    def __le__(self, rhs):
        return self.to_linear_expr().le(rhs)

    def __ge__(self, rhs):
        return self.to_linear_expr().ge(rhs)

    def __str__(self):
        return self._name or "_x{0}".format(id(self))

    def __repr__(self):
        return "mipbuilder.linear.Var(name={0!r},lb={1},ub={2},type={3},obj={4})" \
            .format(self._name, self._lb, self._ub, self.typecode, self._obj)


class LinearExpr(object):
    """LinearExpr(terms=None)

    This class models linear expressions: a mapping from variables to coefficients.

    Expressions are immutable; arithmetic operators return new expressions.
    Terms keep the order in which variables were first met, and each variable
    appears at most once: coefficients of repeated variables are summed.
    Terms with a zero coefficient are dropped.

    Args:
        terms: A variable, a dict of variable to coefficient, or an iterable of (variable, coefficient) pairs.
    """
    __slots__ = ("_terms",)

    def __init__(self, terms=None):
        self_terms = OrderedDict()
        if terms is None:
            pass
        elif isinstance(terms, Var):
            self_terms[terms] = 1.0
        elif isinstance(terms, LinearExpr):
            self_terms.update(terms._terms)
        else:
            pairs = terms.items() if isinstance(terms, dict) else terms
            for pair in pairs:
                try:
                    v, k = pair
                except (TypeError, ValueError):
                    raise TypeError("LinearExpr expects (variable, coefficient) pairs, got: {0!r}".format(pair))
                if not isinstance(v, Var):
                    raise TypeError("LinearExpr expects a variable, got: {0!r}".format(v))
                self_terms[v] = self_terms.get(v, 0.0) + _to_coef(k, "LinearExpr")
            for v in [v for v, k in self_terms.items() if k == 0]:
                del self_terms[v]
        self._terms = self_terms

    @staticmethod
    def _to_expr(e, caller):
        if isinstance(e, LinearExpr):
            return e
        elif isinstance(e, Var):
            return e.to_linear_expr()
        else:
            raise TypeError("{0}: cannot convert to linear expression: {1!r}".format(caller, e))

    def iter_terms(self):
        """ Iterates over the (variable, coefficient) pairs, in term order.
        """
        return iter(self._terms.items())

    def iter_variables(self):
        return iter(self._terms)

    def number_of_terms(self):
        return len(self._terms)

    def __len__(self):
        return len(self._terms)

    def __contains__(self, dvar):
        return dvar in self._terms

    def __getitem__(self, dvar):
        return self._terms.get(dvar, 0.0)

    def get_coef(self, dvar):
        return self._terms.get(dvar, 0.0)

    def is_empty(self):
        return not self._terms

    def negate(self):
        return LinearExpr([(v, -k) for v, k in self._terms.items()])

    def plus(self, e):
        other = self._to_expr(e, "plus")
        merged = list(self._terms.items())
        merged.extend(other._terms.items())
        return LinearExpr(merged)

    def minus(self, e):
        return self.plus(self._to_expr(e, "minus").negate())

    def times(self, k):
        if not is_number(k):
            raise TypeError("Cannot multiply a linear expression by: {0!r}".format(k))
        return LinearExpr([(v, c * k) for v, c in self._terms.items()])

    def __add__(self, e):
        return self.plus(e)

    def __radd__(self, e):
        # allows sum() over variables and expressions
        if is_number(e) and 0 == e:
            return self
        return self.plus(e)

    def __sub__(self, e):
        return self.minus(e)

    def __rsub__(self, e):
        return self.negate().plus(e)

    def __neg__(self):
        return self.negate()

    def __mul__(self, k):
        return self.times(k)

    def __rmul__(self, k):
        return self.times(k)

    def le(self, rhs, name=None):
        """ Builds the constraint `self <= rhs`.
        """
        from mipbuilder.constr import LinearConstraint
        return LinearConstraint(self, '<=', rhs, name)

    def ge(self, rhs, name=None):
        """ Builds the constraint `self >= rhs`.
        """
        from mipbuilder.constr import LinearConstraint
        return LinearConstraint(self, '>=', rhs, name)

    def eq(self, rhs, name=None):
        """ Builds the constraint `self == rhs`.
        """
        from mipbuilder.constr import LinearConstraint
        return LinearConstraint(self, '==', rhs, name)

    def __le__(self, rhs):
        return self.le(rhs)

    def __ge__(self, rhs):
        return self.ge(rhs)

    def to_string(self):
        if not self._terms:
            return "0"
        parts = []
        for v, k in self._terms.items():
            if k == 1:
                term = str(v)
            elif k == -1:
                term = "-{0!s}".format(v)
            else:
                term = "{0:g}{1!s}".format(k, v)
            if parts and not term.startswith('-'):
                parts.append('+')
            parts.append(term)
        return "".join(parts)

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return "mipbuilder.linear.LinearExpr({0})".format(str_holo(self.to_string(), 60))


def sum_expr(args):
    """ Sums variables and expressions into a new linear expression.
    """
    terms = []
    for a in args:
        terms.extend(LinearExpr._to_expr(a, "sum_expr").iter_terms())
    return LinearExpr(terms)


def scal_prod(dvars, coefs):
    """ Returns the linear expression sum(coefs[i] * dvars[i]).
    """
    return LinearExpr(list(zip(dvars, coefs)))
