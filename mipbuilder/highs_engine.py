# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

# gendoc: ignore

import numpy as np

from highspy import Highs, HighsStatus, HighsVarType, ObjSense, kHighsInf

from mipbuilder.constants import ErrorCode, ModelStatus
from mipbuilder.engine import IndexerEngine

_EMPTY_INDEX = np.empty(0, dtype=np.int32)
_EMPTY_VALUE = np.empty(0, dtype=np.float64)

# engine parameter name -> HiGHS option name
_highs_option_names = {"log_output": "output_flag",
                       "time_limit": "time_limit",
                       "mip_gap": "mip_rel_gap"}

_infeasible_statuses = frozenset([ModelStatus.Infeasible, ModelStatus.UnboundedOrInfeasible])
_no_solution_statuses = _infeasible_statuses | frozenset([ModelStatus.Unbounded])


def _failed(highs_status):
    # HiGHS warnings do not abort an operation
    return highs_status == HighsStatus.kError


def _row_bounds(sense, rhs):
    if sense == 'L':
        return -kHighsInf, rhs
    elif sense == 'G':
        return rhs, kHighsInf
    else:
        return rhs, rhs


def _col_bounds(vtype, lb, ub):
    if vtype == 'B':
        return max(lb, 0.0), min(ub, 1.0)
    return lb, ub


def _new_silent_highs():
    h = Highs()
    h.setOptionValue("output_flag", False)
    return h


class HighsEngine(IndexerEngine):
    """ An engine backed by the HiGHS solver, through ``highspy``.

    Columns and rows are sent to HiGHS as they are added; a mirror of the model
    data is kept for attribute queries and IIS computation.

    A multi-step native add (columns, integrality, names) is all-or-nothing: when a
    follow-up step fails, the columns or rows added by the first step are deleted
    before the error code is returned.
    """

    def __init__(self, model_name=None):
        IndexerEngine.__init__(self, model_name, record_calls=False)
        self._highs = _new_silent_highs()

    def name(self):
        return "highs"

    @property
    def highs(self):
        """ The underlying ``highspy.Highs`` instance.
        """
        return self._highs

    # --- building

    def _rollback_cols(self, first, count):
        self._highs.deleteCols(count, np.arange(first, first + count, dtype=np.int32))

    def _rollback_rows(self, first, count):
        self._highs.deleteRows(count, np.arange(first, first + count, dtype=np.int32))

    def _native_add_var(self, obj, lb, ub, vtype, name):
        index = self._highs.getNumCol()
        lb, ub = _col_bounds(vtype, lb, ub)
        if _failed(self._highs.addCol(obj, lb, ub, 0, _EMPTY_INDEX, _EMPTY_VALUE)):
            return ErrorCode.EngineFailure
        ok = True
        if vtype != 'C':
            ok = not _failed(self._highs.changeColIntegrality(index, HighsVarType.kInteger))
        if ok and name is not None:
            ok = not _failed(self._highs.passColName(index, str(name)))
        if not ok:
            self._rollback_cols(index, 1)
            return ErrorCode.EngineFailure
        return 0

    def _native_add_vars(self, count, objs, lbs, ubs, vtypes, names):
        first = self._highs.getNumCol()
        lbs = list(lbs)
        ubs = list(ubs)
        for i, vt in enumerate(vtypes):
            lbs[i], ubs[i] = _col_bounds(vt, lbs[i], ubs[i])
        status = self._highs.addCols(count,
                                     np.asarray(objs, dtype=np.float64),
                                     np.asarray(lbs, dtype=np.float64),
                                     np.asarray(ubs, dtype=np.float64),
                                     0, _EMPTY_INDEX, _EMPTY_INDEX, _EMPTY_VALUE)
        if _failed(status):
            return ErrorCode.EngineFailure
        ok = True
        discrete = np.asarray([first + i for i, vt in enumerate(vtypes) if vt != 'C'], dtype=np.int32)
        if len(discrete):
            integrality = np.full(len(discrete), HighsVarType.kInteger, dtype=np.uint8)
            ok = not _failed(self._highs.changeColsIntegrality(len(discrete), discrete, integrality))
        for i, name in enumerate(names):
            if not ok:
                break
            if name is not None:
                ok = not _failed(self._highs.passColName(first + i, str(name)))
        if not ok:
            self._rollback_cols(first, count)
            return ErrorCode.EngineFailure
        return 0

    def _native_add_constr(self, ind, val, sense, rhs, name):
        index = self._highs.getNumRow()
        lower, upper = _row_bounds(sense, rhs)
        status = self._highs.addRow(lower, upper, len(ind),
                                    np.asarray(ind, dtype=np.int32),
                                    np.asarray(val, dtype=np.float64))
        if _failed(status):
            return ErrorCode.EngineFailure
        if name is not None and _failed(self._highs.passRowName(index, str(name))):
            self._rollback_rows(index, 1)
            return ErrorCode.EngineFailure
        return 0

    def _native_add_constrs(self, count, beg, ind, val, senses, rhss, names):
        first = self._highs.getNumRow()
        bounds = [_row_bounds(s, r) for s, r in zip(senses, rhss)]
        status = self._highs.addRows(count,
                                     np.asarray([b[0] for b in bounds], dtype=np.float64),
                                     np.asarray([b[1] for b in bounds], dtype=np.float64),
                                     len(ind),
                                     np.asarray(beg, dtype=np.int32),
                                     np.asarray(ind, dtype=np.int32),
                                     np.asarray(val, dtype=np.float64))
        if _failed(status):
            return ErrorCode.EngineFailure
        for i, name in enumerate(names):
            if name is not None and _failed(self._highs.passRowName(first + i, str(name))):
                self._rollback_rows(first, count)
                return ErrorCode.EngineFailure
        return 0

    def _native_set_sense(self, sense):
        highs_sense = ObjSense.kMinimize if sense == 1 else ObjSense.kMaximize
        if _failed(self._highs.changeObjectiveSense(highs_sense)):
            return ErrorCode.EngineFailure
        return 0

    def update_model(self):
        # HiGHS applies changes as they come
        return 0

    # --- solving

    def _solve(self):
        self._clear_solution()
        if _failed(self._highs.run()):
            self._status = int(self._highs.getModelStatus())
            return ErrorCode.EngineFailure
        self._status = int(self._highs.getModelStatus())
        solution = self._highs.getSolution()
        if solution.value_valid and self._status not in _no_solution_statuses:
            self._values = list(solution.col_value)
            self._objective_value = self._highs.getInfo().objective_function_value
        return 0

    def _is_feasible(self, row_indices):
        # solves the feasibility problem restricted to the given rows
        h = _new_silent_highs()
        ncols = len(self._columns)
        if ncols:
            lbs = np.asarray([c[1] for c in self._columns], dtype=np.float64)
            ubs = np.asarray([c[2] for c in self._columns], dtype=np.float64)
            h.addCols(ncols, np.zeros(ncols), lbs, ubs, 0, _EMPTY_INDEX, _EMPTY_INDEX, _EMPTY_VALUE)
            discrete = np.asarray([j for j, c in enumerate(self._columns) if c[3] != 'C'], dtype=np.int32)
            if len(discrete):
                h.changeColsIntegrality(len(discrete), discrete,
                                        np.full(len(discrete), HighsVarType.kInteger, dtype=np.uint8))
        for r in row_indices:
            ind, val, sense, rhs, _ = self._rows[r]
            lower, upper = _row_bounds(sense, rhs)
            h.addRow(lower, upper, len(ind), np.asarray(ind, dtype=np.int32), np.asarray(val, dtype=np.float64))
        h.run()
        return int(h.getModelStatus()) not in _infeasible_statuses

    def compute_iis(self):
        """ Computes an IIS with a deletion filter over the rows.

        Each row is tentatively dropped; it is kept in the IIS only if the
        remaining rows become feasible without it. Variable bounds are never dropped.
        """
        if self._is_feasible(range(len(self._rows))):
            self._iis = None
            return ErrorCode.IISNotInfeasible
        iis = list(range(len(self._rows)))
        pos = 0
        while pos < len(iis):
            trial = iis[:pos] + iis[pos + 1:]
            if self._is_feasible(trial):
                pos += 1
            else:
                iis = trial
        self._iis = set(iis)
        return 0

    def write(self, filename):
        if _failed(self._highs.writeModel(str(filename))):
            return ErrorCode.FileWriteError
        return 0

    def set_parameter(self, name, value):
        option = _highs_option_names.get(name, name)
        if option == "output_flag":
            value = bool(value)
        if _failed(self._highs.setOptionValue(option, value)):
            return ErrorCode.InvalidArgument
        self._parameters[name] = value
        return 0

    def end(self):
        self._ended = True
        self._highs = None
        return 0
