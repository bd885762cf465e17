# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

import numpy as np

from mipbuilder.constants import ErrorCode, ModelStatus, IntAttr, DblAttr, VarAttr, ConstrAttr
from mipbuilder.lp_printer import LPModelPrinter

# gendoc: ignore

VALID_TYPECODES = frozenset(['C', 'I', 'B'])
VALID_SENSES = frozenset(['L', 'G', 'E'])


def _to_list(seq):
    if seq is None:
        return None
    elif isinstance(seq, np.ndarray):
        return seq.tolist()
    else:
        return list(seq)


class IEngine(object):
    """ Interface for all engine facades.

    Status-returning methods return 0 on success and a non-zero code otherwise.
    Value-returning methods return a ``(status, value)`` pair; the value is None
    when the status is not 0.
    """

    def name(self):
        """ Returns the code used to refer to this engine """
        raise NotImplementedError  # pragma: no cover

    def add_var(self, obj, lb, ub, vtype, name):
        raise NotImplementedError  # pragma: no cover

    def add_vars(self, count, objs, lbs, ubs, vtypes, names):
        """ Adds `count` columns at once.

        Args:
            count: the number of columns.
            objs, lbs, ubs: numeric sequences of length `count`.
            vtypes: a sequence of type codes ('C', 'I', 'B').
            names: a sequence of names (None permitted), or None.
        """
        raise NotImplementedError  # pragma: no cover

    def add_constr(self, nnz, ind, val, sense, rhs, name):
        raise NotImplementedError  # pragma: no cover

    def add_constrs(self, count, nnz, beg, ind, val, senses, rhss, names):
        """ Adds `count` rows at once, in compressed sparse row format.

        Args:
            count: the number of rows.
            nnz: the total number of non-zeros.
            beg: row start offsets into `ind` and `val`, of length `count`.
            ind, val: column indices and coefficients, of length `nnz`.
            senses: a sequence of sense codes ('L', 'G', 'E').
            rhss: right-hand sides.
            names: a sequence of names (None permitted), or None.
        """
        raise NotImplementedError  # pragma: no cover

    def update_model(self):
        raise NotImplementedError  # pragma: no cover

    def optimize(self):
        raise NotImplementedError  # pragma: no cover

    def compute_iis(self):
        raise NotImplementedError  # pragma: no cover

    def write(self, filename):
        raise NotImplementedError  # pragma: no cover

    def get_int_attr(self, attr):
        raise NotImplementedError  # pragma: no cover

    def set_int_attr(self, attr, value):
        raise NotImplementedError  # pragma: no cover

    def get_dbl_attr(self, attr):
        raise NotImplementedError  # pragma: no cover

    def get_var_attr(self, attr, index):
        raise NotImplementedError  # pragma: no cover

    def get_constr_attr(self, attr, index):
        raise NotImplementedError  # pragma: no cover

    def set_parameter(self, name, value):
        """ Changes a parameter value in the engine.

        Known names are ``log_output``, ``time_limit`` and ``mip_gap``.
        """
        raise NotImplementedError  # pragma: no cover

    def end(self):
        """ Releases the engine resources.
        """
        raise NotImplementedError  # pragma: no cover


class IndexerEngine(IEngine):
    """
    An engine which stores columns and rows in memory, without solving.

    Arguments are checked as a native engine would: length mismatches, unknown codes
    and out-of-range column indices are rejected with an error code, and nothing is stored.
    Every call is recorded in a call log for inspection.

    Subclasses backed by a solver library override the ``_native_*`` methods;
    the stored data is then a mirror of the native model, updated only when
    the native call succeeded.
    """

    def __init__(self, model_name=None, record_calls=True):
        self._model_name = model_name
        self._columns = []
        self._rows = []
        self._sense = 1
        self._parameters = {}
        self._call_log = [] if record_calls else None
        self._ended = False
        self._clear_solution()

    def _clear_solution(self):
        self._status = ModelStatus.NotSet
        self._objective_value = None
        self._values = None
        self._iis = None

    def _record(self, operation, **payload):
        if self._call_log is not None:
            self._call_log.append((operation, payload))

    def _injected_failure(self, operation):
        # subclasses return a non-zero code to fail an operation
        return 0

    @property
    def call_log(self):
        return list(self._call_log or ())

    def calls(self, operation):
        """ Returns the payloads of the recorded calls to `operation`, in call order.
        """
        return [payload for op, payload in self.call_log if op == operation]

    def number_of_calls(self, operation):
        return len(self.calls(operation))

    def clear_call_log(self):
        if self._call_log is not None:
            self._call_log = []

    # --- native hooks, called once arguments are checked

    def _native_add_var(self, obj, lb, ub, vtype, name):
        return 0

    def _native_add_vars(self, count, objs, lbs, ubs, vtypes, names):
        return 0

    def _native_add_constr(self, ind, val, sense, rhs, name):
        return 0

    def _native_add_constrs(self, count, beg, ind, val, senses, rhss, names):
        return 0

    def _native_set_sense(self, sense):
        return 0

    @property
    def parameters(self):
        return dict(self._parameters)

    def is_ended(self):
        return self._ended

    @property
    def number_of_columns(self):
        return len(self._columns)

    @property
    def number_of_rows(self):
        return len(self._rows)

    # --- building

    @staticmethod
    def _check_names(names, count):
        return names is None or len(names) == count

    def _check_indices(self, ind):
        ncols = len(self._columns)
        for i in ind:
            if not 0 <= i < ncols:
                return False
        return True

    def add_var(self, obj, lb, ub, vtype, name):
        self._record("add_var", obj=obj, lb=lb, ub=ub, vtype=vtype, name=name)
        failure = self._injected_failure("add_var")
        if failure:
            return failure
        if vtype not in VALID_TYPECODES:
            return ErrorCode.InvalidArgument
        status = self._native_add_var(obj, lb, ub, vtype, name)
        if status:
            return status
        self._columns.append((float(obj), float(lb), float(ub), vtype, name))
        self._clear_solution()
        return 0

    def add_vars(self, count, objs, lbs, ubs, vtypes, names):
        objs, lbs, ubs = _to_list(objs), _to_list(lbs), _to_list(ubs)
        vtypes, names = _to_list(vtypes), _to_list(names)
        self._record("add_vars", count=count, objs=objs, lbs=lbs, ubs=ubs, vtypes=vtypes, names=names)
        failure = self._injected_failure("add_vars")
        if failure:
            return failure
        if count < 0 or not (len(objs) == len(lbs) == len(ubs) == len(vtypes) == count):
            return ErrorCode.InvalidArgument
        if not self._check_names(names, count):
            return ErrorCode.InvalidArgument
        if any(vt not in VALID_TYPECODES for vt in vtypes):
            return ErrorCode.InvalidArgument
        if names is None:
            names = [None] * count
        status = self._native_add_vars(count, objs, lbs, ubs, vtypes, names)
        if status:
            return status
        for i in range(count):
            self._columns.append((float(objs[i]), float(lbs[i]), float(ubs[i]), vtypes[i], names[i]))
        self._clear_solution()
        return 0

    def add_constr(self, nnz, ind, val, sense, rhs, name):
        ind, val = _to_list(ind), _to_list(val)
        self._record("add_constr", nnz=nnz, ind=ind, val=val, sense=sense, rhs=rhs, name=name)
        failure = self._injected_failure("add_constr")
        if failure:
            return failure
        if len(ind) != nnz or len(val) != nnz or sense not in VALID_SENSES:
            return ErrorCode.InvalidArgument
        if not self._check_indices(ind):
            return ErrorCode.IndexOutOfRange
        status = self._native_add_constr(ind, val, sense, rhs, name)
        if status:
            return status
        self._rows.append((ind, [float(v) for v in val], sense, float(rhs), name))
        self._clear_solution()
        return 0

    def add_constrs(self, count, nnz, beg, ind, val, senses, rhss, names):
        beg, ind, val = _to_list(beg), _to_list(ind), _to_list(val)
        senses, rhss, names = _to_list(senses), _to_list(rhss), _to_list(names)
        self._record("add_constrs", count=count, nnz=nnz, beg=beg, ind=ind, val=val,
                     senses=senses, rhss=rhss, names=names)
        failure = self._injected_failure("add_constrs")
        if failure:
            return failure
        if count < 0 or not (len(beg) == len(senses) == len(rhss) == count):
            return ErrorCode.InvalidArgument
        if len(ind) != nnz or len(val) != nnz or not self._check_names(names, count):
            return ErrorCode.InvalidArgument
        if any(s not in VALID_SENSES for s in senses):
            return ErrorCode.InvalidArgument
        ends = beg[1:] + [nnz]
        for start, end in zip(beg, ends):
            if start < 0 or start > end:
                return ErrorCode.InvalidArgument
        if not self._check_indices(ind):
            return ErrorCode.IndexOutOfRange
        if names is None:
            names = [None] * count
        status = self._native_add_constrs(count, beg, ind, val, senses, rhss, names)
        if status:
            return status
        for r in range(count):
            start, end = beg[r], ends[r]
            self._rows.append((ind[start:end], [float(v) for v in val[start:end]],
                               senses[r], float(rhss[r]), names[r]))
        self._clear_solution()
        return 0

    def update_model(self):
        self._record("update_model")
        return self._injected_failure("update_model")

    # --- solving

    def optimize(self):
        self._record("optimize")
        failure = self._injected_failure("optimize")
        if failure:
            return failure
        return self._solve()

    def _solve(self):
        return ErrorCode.NotSupported

    def compute_iis(self):
        self._record("compute_iis")
        failure = self._injected_failure("compute_iis")
        if failure:
            return failure
        return ErrorCode.NotSupported

    def write(self, filename):
        self._record("write", filename=filename)
        failure = self._injected_failure("write")
        if failure:
            return failure
        if not str(filename).lower().endswith(".lp"):
            return ErrorCode.NotSupported
        try:
            with open(filename, "w") as out:
                LPModelPrinter().print_model_to_stream(out, self._model_name, self._columns,
                                                       self._rows, self._sense)
        except (IOError, OSError):
            return ErrorCode.FileWriteError
        return 0

    # --- attributes

    def get_int_attr(self, attr):
        failure = self._injected_failure("get_int_attr")
        if failure:
            return failure, None
        if attr == IntAttr.ModelSense:
            return 0, self._sense
        elif attr == IntAttr.Status:
            return 0, int(self._status)
        elif attr == IntAttr.NumVars:
            return 0, len(self._columns)
        elif attr == IntAttr.NumConstrs:
            return 0, len(self._rows)
        elif attr == IntAttr.IsMIP:
            return 0, int(any(c[3] != 'C' for c in self._columns))
        return ErrorCode.InvalidArgument, None

    def set_int_attr(self, attr, value):
        self._record("set_int_attr", attr=attr, value=value)
        failure = self._injected_failure("set_int_attr")
        if failure:
            return failure
        if attr == IntAttr.ModelSense and value in (1, -1):
            if value != self._sense:
                status = self._native_set_sense(value)
                if status:
                    return status
                self._sense = value
                self._clear_solution()
            return 0
        return ErrorCode.InvalidArgument

    def get_dbl_attr(self, attr):
        failure = self._injected_failure("get_dbl_attr")
        if failure:
            return failure, None
        if attr != DblAttr.ObjVal:
            return ErrorCode.InvalidArgument, None
        elif self._objective_value is None:
            return ErrorCode.DataNotAvailable, None
        return 0, self._objective_value

    _var_attr_positions = {VarAttr.Obj: 0, VarAttr.LB: 1, VarAttr.UB: 2,
                           VarAttr.VType: 3, VarAttr.VarName: 4}

    def get_var_attr(self, attr, index):
        failure = self._injected_failure("get_var_attr")
        if failure:
            return failure, None
        if not 0 <= index < len(self._columns):
            return ErrorCode.IndexOutOfRange, None
        if attr == VarAttr.X:
            if self._values is None:
                return ErrorCode.DataNotAvailable, None
            return 0, self._values[index]
        pos = self._var_attr_positions.get(attr)
        if pos is None:
            return ErrorCode.InvalidArgument, None
        return 0, self._columns[index][pos]

    def get_constr_attr(self, attr, index):
        failure = self._injected_failure("get_constr_attr")
        if failure:
            return failure, None
        if not 0 <= index < len(self._rows):
            return ErrorCode.IndexOutOfRange, None
        _, _, sense, rhs, name = self._rows[index]
        if attr == ConstrAttr.RHS:
            return 0, rhs
        elif attr == ConstrAttr.Sense:
            return 0, sense
        elif attr == ConstrAttr.ConstrName:
            return 0, name
        elif attr == ConstrAttr.IISConstr:
            if self._iis is None:
                return ErrorCode.DataNotAvailable, None
            return 0, int(index in self._iis)
        return ErrorCode.InvalidArgument, None

    def set_parameter(self, name, value):
        """ Changes the parameter value in the engine.

        For this limited type of engine, the value is only stored.
        """
        self._record("set_parameter", name=name, value=value)
        failure = self._injected_failure("set_parameter")
        if failure:
            return failure
        self._parameters[name] = value
        return 0

    def end(self):
        self._record("end")
        self._ended = True
        return 0


class NoSolveEngine(IndexerEngine):
    # INTERNAL: an engine that builds but cannot solve.

    def name(self):
        return "nosolve"


class ZeroSolveEngine(IndexerEngine):
    # INTERNAL: an engine that says it can solve
    # but ignores constraints and sets each variable to
    # the value of its domain nearest to zero.

    def name(self):
        return "zero"

    def _solve(self):
        values = [min(max(0.0, lb), ub) for _, lb, ub, _, _ in self._columns]
        self._values = values
        self._objective_value = sum(c[0] * v for c, v in zip(self._columns, values))
        self._status = ModelStatus.Optimal
        return 0


class FakeFailEngine(ZeroSolveEngine):
    # INTERNAL: an engine whose operations can be told to fail
    # with a given code, this is for testing.

    def __init__(self, model_name=None):
        ZeroSolveEngine.__init__(self, model_name)
        self._failures = {}

    def name(self):
        return "fail"

    def fail_on(self, operation, code=ErrorCode.EngineFailure, times=None):
        """ Makes `operation` fail with `code`.

        Args:
            operation: an engine method name, e.g. ``add_vars``.
            code: the status returned by the failing calls.
            times: the number of calls to fail, None to fail until cleared.
        """
        self._failures[operation] = [code, times]

    def clear_failures(self):
        self._failures = {}

    def _injected_failure(self, operation):
        failure = self._failures.get(operation)
        if failure is None:
            return 0
        code, times = failure
        if times is not None:
            if times <= 1:
                del self._failures[operation]
            else:
                failure[1] = times - 1
        return code
