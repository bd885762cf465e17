# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

import itertools
import weakref

import numpy as np

from mipbuilder.constants import ObjectiveSense, IntAttr, DblAttr, VarAttr, ConstrAttr
from mipbuilder.constr import LinearConstraint
from mipbuilder.environment import Environment
from mipbuilder.error_handler import DefaultErrorHandler
from mipbuilder.linear import Var
from mipbuilder.utils import SolverError, ModelEndedError, UnknownVariableError, DuplicateEntityError


def _end_engine(engine):
    # INTERNAL: must not hold a reference to the model
    engine.end()


class Model(object):
    """ This is the main class to build a linear or mixed-integer model.

    Variables and constraints are first queued; :func:`update` commits them to the
    engine, variables first, then constraints. A queue holding exactly one entity is
    committed with a single-item engine call, a longer queue with one batched call.
    Both give the same indices and attributes.

    A model owns its engine. Use it in a ``with`` block, or call :func:`end`,
    to release the engine::

        with Model(Environment(), name="production") as mdl:
            x = mdl.continuous_var(ub=10, obj=2, name="x")
            ...

    Args:
        env (optional): The :class:`mipbuilder.environment.Environment` the engine is taken from.
            If no environment is passed, a default one is created.
        name (optional): The name of the model.
    """

    _name_counter = itertools.count(1)

    def __init__(self, env=None, name=None):
        if env is None:
            env = Environment()
        if name is None:
            name = "model_{0}".format(next(Model._name_counter))
        self._name = name
        self._environment = env
        self.__error_handler = DefaultErrorHandler(env.output_level)

        # committed, index is position
        self.__allvars = []
        self.__allcts = []
        self.__var_indices = {}
        self.__ct_indices = {}
        self.__vars_by_name = {}
        self._var_count = 0

        self.__pending_vars = []
        self.__pending_cts = []

        self.__engine = env.new_engine(name)
        self._finalizer = weakref.finalize(self, _end_engine, self.__engine)
        self.trace("Model {0} created with engine: {1}", name, self.__engine.name())

    @property
    def name(self):
        """ This property returns the name of the model.
        """
        return self._name

    @property
    def environment(self):
        return self._environment

    @property
    def error_handler(self):
        return self.__error_handler

    def fatal(self, msg, *args):
        self.__error_handler.fatal(msg, args)

    def error(self, msg, *args):
        self.__error_handler.error(msg, args)

    def warning(self, msg, *args):
        self.__error_handler.warning(msg, args)

    def info(self, msg, *args):
        self.__error_handler.info(msg, args)

    def trace(self, msg, *args):
        self.__error_handler.trace(msg, args)

    def get_output_level(self):
        return self.__error_handler.get_output_level()

    def set_output_level(self, output_level):
        self.__error_handler.set_output_level(output_level)

    # --- lifecycle

    def is_ended(self):
        return not self._finalizer.alive

    def _check_alive(self):
        if not self._finalizer.alive:
            raise ModelEndedError(self._name)

    def get_engine(self):
        # INTERNAL
        self._check_alive()
        return self.__engine

    def end(self):
        """ Terminates a model instance.

        The engine is released; the model must not be used after this call.
        Calling ``end`` again has no effect.
        """
        if self._finalizer.alive:
            self.trace("Ending model {0}", self._name)
            self._finalizer()

    # with protocol
    def __enter__(self):
        return self

    def __exit__(self, atype, avalue, atraceback):
        # terminate the model upon exiting a 'with' block.
        self.end()

    def _check_status(self, status, operation):
        if status:
            self.error("Engine call {0} failed with status {1} in model {2}", operation, int(status), self._name)
            raise SolverError(int(status), operation)

    # --- admission

    def add(self, entity):
        """ Queues a variable or a constraint.

        Nothing is sent to the engine until :func:`update` is called.

        Args:
            entity: An instance of :class:`mipbuilder.linear.Var` or
                :class:`mipbuilder.constr.LinearConstraint`.

        Returns:
            The entity.

        Raises:
            TypeError: if the entity is neither a variable nor a constraint.
        """
        if isinstance(entity, Var):
            return self.add_var(entity)
        elif isinstance(entity, LinearConstraint):
            return self.add_constraint(entity)
        else:
            raise TypeError("Model.add expects a variable or a constraint, got: {0!r}".format(entity))

    def add_var(self, var):
        """ Queues a variable.

        Returns:
            The variable.
        """
        self._check_alive()
        if not isinstance(var, Var):
            raise TypeError("Model.add_var expects a variable, got: {0!r}".format(var))
        self.__pending_vars.append(var)
        return var

    def add_constraint(self, ct):
        """ Queues a linear constraint.

        Returns:
            The constraint.
        """
        self._check_alive()
        if not isinstance(ct, LinearConstraint):
            raise TypeError("Model.add_constraint expects a linear constraint, got: {0!r}".format(ct))
        self.__pending_cts.append(ct)
        return ct

    def __iadd__(self, e):
        # implements the "+=" dialect a la PulP
        self.add(e)
        return self

    def continuous_var(self, lb=None, ub=None, obj=0, name=None):
        """ Creates and queues a continuous variable.

        Args:
            lb: The lower bound, 0 by default.
            ub: The upper bound, infinity by default.
            obj: The objective coefficient.
            name: An optional name.

        Returns:
            An instance of :class:`mipbuilder.linear.Var`.
        """
        return self.add_var(Var(lb, ub, 'C', obj, name))

    def integer_var(self, lb=None, ub=None, obj=0, name=None):
        """ Creates and queues an integer variable.

        Returns:
            An instance of :class:`mipbuilder.linear.Var`.
        """
        return self.add_var(Var(lb, ub, 'I', obj, name))

    def binary_var(self, obj=0, name=None):
        return self.add_var(Var(0, 1, 'B', obj, name))

    def linear_constraint(self, lhs, sense, rhs, name=None):
        """ Creates and queues a linear constraint `lhs <sense> rhs`.

        Args:
            lhs: A linear expression or a variable.
            sense: A comparison type, an operator string or a sense code ('L', 'G', 'E').
            rhs: A number.
            name: An optional name.

        Returns:
            An instance of :class:`mipbuilder.constr.LinearConstraint`.
        """
        return self.add_constraint(LinearConstraint(lhs, sense, rhs, name))

    # --- flush

    def update(self):
        """ Commits all queued variables and constraints to the engine.

        Variables are committed before constraints. Each queue is cleared only when
        its engine call succeeds: after a failure, the queue is left as it was and
        calling ``update`` again retries it.

        Raises:
            DuplicateEntityError: if a queued entity is already in the model, or queued twice.
            UnknownVariableError: if a queued constraint uses a variable which is not in the model.
            SolverError: if an engine call fails.
        """
        self._check_alive()
        self._flush_variables()
        self._flush_constraints()
        self._check_status(self.__engine.update_model(), "update_model")

    def _validate_pending_vars(self, pending):
        seen = set()
        for v in pending:
            if v in self.__var_indices or v in seen:
                raise DuplicateEntityError("Variable", v)
            seen.add(v)

    def _validate_pending_cts(self, pending):
        seen = set()
        var_indices = self.__var_indices
        for ct in pending:
            if ct in self.__ct_indices or ct in seen:
                raise DuplicateEntityError("Constraint", ct)
            seen.add(ct)
            for v in ct.iter_variables():
                if v not in var_indices:
                    raise UnknownVariableError(v, ct)

    def _flush_variables(self):
        pending = self.__pending_vars
        if not pending:
            return
        self._validate_pending_vars(pending)
        engine = self.__engine
        count = len(pending)
        if 1 == count:
            v = pending[0]
            self._check_status(engine.add_var(v.obj, v.lb, v.ub, v.typecode, v.name), "add_var")
        else:
            objs = np.fromiter((v.obj for v in pending), dtype=np.float64, count=count)
            lbs = np.fromiter((v.lb for v in pending), dtype=np.float64, count=count)
            ubs = np.fromiter((v.ub for v in pending), dtype=np.float64, count=count)
            vtypes = [v.typecode for v in pending]
            names = [v.name for v in pending]
            self._check_status(engine.add_vars(count, objs, lbs, ubs, vtypes, names), "add_vars")

        first = self._var_count
        for offset, v in enumerate(pending):
            self.__var_indices[v] = first + offset
            self.__allvars.append(v)
            if v.name is not None and v.name not in self.__vars_by_name:
                self.__vars_by_name[v.name] = v
        self._var_count += count
        self.__pending_vars = []
        self.trace("Committed {0} variable(s) to model {1}", count, self._name)

    def _encode_terms(self, expr):
        # INTERNAL: index and coefficient buffers of one expression, in term order
        var_indices = self.__var_indices
        nnz = expr.number_of_terms()
        ind = np.empty(nnz, dtype=np.int32)
        val = np.empty(nnz, dtype=np.float64)
        for pos, (v, k) in enumerate(expr.iter_terms()):
            ind[pos] = var_indices[v]
            val[pos] = k
        return ind, val

    def _encode_rows(self, cts):
        # INTERNAL: compressed sparse rows, beg[i] is the number of terms before row i
        var_indices = self.__var_indices
        nnz = sum(ct.number_of_terms() for ct in cts)
        beg = np.empty(len(cts), dtype=np.int32)
        ind = np.empty(nnz, dtype=np.int32)
        val = np.empty(nnz, dtype=np.float64)
        pos = 0
        for i, ct in enumerate(cts):
            beg[i] = pos
            for v, k in ct.expr.iter_terms():
                ind[pos] = var_indices[v]
                val[pos] = k
                pos += 1
        return beg, ind, val

    def _flush_constraints(self):
        pending = self.__pending_cts
        if not pending:
            return
        self._validate_pending_cts(pending)
        engine = self.__engine
        count = len(pending)
        if 1 == count:
            ct = pending[0]
            ind, val = self._encode_terms(ct.expr)
            self._check_status(engine.add_constr(len(ind), ind, val, ct.sense_code, ct.rhs, ct.name),
                               "add_constr")
        else:
            beg, ind, val = self._encode_rows(pending)
            senses = [ct.sense_code for ct in pending]
            rhss = np.fromiter((ct.rhs for ct in pending), dtype=np.float64, count=count)
            names = [ct.name for ct in pending]
            self._check_status(engine.add_constrs(count, len(ind), beg, ind, val, senses, rhss, names),
                               "add_constrs")

        first = len(self.__allcts)
        for offset, ct in enumerate(pending):
            self.__ct_indices[ct] = first + offset
            self.__allcts.append(ct)
        self.__pending_cts = []
        self.trace("Committed {0} constraint(s) to model {1}", count, self._name)

    # --- introspection

    @property
    def number_of_variables(self):
        """ This property returns the number of committed variables.
        """
        return len(self.__allvars)

    @property
    def number_of_constraints(self):
        """ This property returns the number of committed constraints.
        """
        return len(self.__allcts)

    @property
    def number_of_pending_variables(self):
        return len(self.__pending_vars)

    @property
    def number_of_pending_constraints(self):
        return len(self.__pending_cts)

    def iter_variables(self):
        """ Iterates over the committed variables, in index order.
        """
        return iter(self.__allvars)

    def iter_constraints(self):
        """ Iterates over the committed constraints, in index order.
        """
        return iter(self.__allcts)

    def get_var_index(self, var):
        """ Returns the index of a committed variable, or None if the variable is not committed.
        """
        return self.__var_indices.get(var)

    def get_constraint_index(self, ct):
        """ Returns the index of a committed constraint, or None if the constraint is not committed.
        """
        return self.__ct_indices.get(ct)

    def get_var_by_name(self, name):
        """ Searches for a committed variable from a name.

        Returns a variable if it finds one with exactly this name, or None.
        """
        return self.__vars_by_name.get(name)

    def _committed_var_index(self, var):
        index = self.__var_indices.get(var)
        if index is None:
            self.fatal("Variable {0!s} is not committed in model {1}", var, self._name)
        return index

    def _committed_ct_index(self, ct):
        index = self.__ct_indices.get(ct)
        if index is None:
            self.fatal("Constraint {0!s} is not committed in model {1}", ct, self._name)
        return index

    # --- solve and query

    def set_sense(self, sense):
        """ Sets the optimization direction.

        Args:
            sense: An :class:`ObjectiveSense`, a string ("min", "max") or an integer (1, -1).
        """
        self._check_alive()
        objsense = ObjectiveSense.parse(sense, self.error_handler)
        self._check_status(self.__engine.set_int_attr(IntAttr.ModelSense, objsense.value), "set_int_attr")

    def get_sense(self):
        """ Returns the optimization direction, an :class:`ObjectiveSense`.
        """
        self._check_alive()
        status, value = self.__engine.get_int_attr(IntAttr.ModelSense)
        self._check_status(status, "get_int_attr")
        return ObjectiveSense(value)

    def optimize(self):
        """ Commits queued entities, then solves the model.

        Raises:
            SolverError: if an engine call fails.
        """
        self.update()
        self.trace("Optimizing model {0}: {1} variable(s), {2} constraint(s)",
                   self._name, self.number_of_variables, self.number_of_constraints)
        self._check_status(self.__engine.optimize(), "optimize")

    def status(self):
        """ Returns the raw model status code, as reported by the engine.

        Engines shipped with mipbuilder use the codes of :class:`ModelStatus`.
        """
        self._check_alive()
        status, value = self.__engine.get_int_attr(IntAttr.Status)
        self._check_status(status, "get_int_attr")
        return value

    def compute_iis(self):
        """ Asks the engine for an irreducible inconsistent subsystem.

        Use :func:`iis_constraints` to get the constraints in the subsystem.
        """
        self._check_alive()
        self._check_status(self.__engine.compute_iis(), "compute_iis")

    def iis_constraints(self):
        """ Returns the list of committed constraints flagged by the last :func:`compute_iis`.
        """
        return [ct for ct in self.__allcts if self.get_constraint_attribute(ct, ConstrAttr.IISConstr)]

    def objective_value(self):
        """ Returns the objective value of the last solve.

        Raises:
            SolverError: if no objective value is available, for instance before a solve.
        """
        self._check_alive()
        status, value = self.__engine.get_dbl_attr(DblAttr.ObjVal)
        self._check_status(status, "get_dbl_attr")
        return value

    def value(self, var):
        """ Returns the solution value of a committed variable.
        """
        return self.get_var_attribute(var, VarAttr.X)

    def get_var_attribute(self, var, attr):
        """ Reads an attribute of a committed variable from the engine.

        Args:
            var: A committed variable.
            attr: One of ``LB``, ``UB``, ``Obj``, ``VType``, ``VarName``, ``X``.
        """
        self._check_alive()
        status, value = self.__engine.get_var_attr(attr, self._committed_var_index(var))
        self._check_status(status, "get_var_attr")
        return value

    def get_constraint_attribute(self, ct, attr):
        """ Reads an attribute of a committed constraint from the engine.

        Args:
            ct: A committed constraint.
            attr: One of ``RHS``, ``Sense``, ``ConstrName``, ``IISConstr``.
        """
        self._check_alive()
        status, value = self.__engine.get_constr_attr(attr, self._committed_ct_index(ct))
        self._check_status(status, "get_constr_attr")
        return value

    def write(self, filename):
        """ Writes the model to a file; the engine picks the format from the extension.
        """
        self._check_alive()
        self._check_status(self.__engine.write(filename), "write")

    def __str__(self):
        return "mipbuilder.model.Model[{0}]".format(self._name)

    def __repr__(self):
        return "mipbuilder.model.Model(name={0!r}, variables={1}, constraints={2})" \
            .format(self._name, self.number_of_variables, self.number_of_constraints)
