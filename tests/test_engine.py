import numpy as np
import pytest

from mipbuilder import ErrorCode, ModelStatus, IntAttr, DblAttr, VarAttr, ConstrAttr, MipBuilderException
from mipbuilder.engine import NoSolveEngine, ZeroSolveEngine, FakeFailEngine
from mipbuilder.engine_factory import EngineFactory


@pytest.fixture
def engine():
    eng = NoSolveEngine("engine_test")
    assert 0 == eng.add_vars(3, [1, 2, 3], [0, 0, 0], [10, 10, 1], ['C', 'I', 'B'], ["x", None, "b"])
    return eng


def test_factory_keys():
    assert isinstance(EngineFactory.new_engine("nosolve"), NoSolveEngine)
    assert isinstance(EngineFactory.new_engine("local"), NoSolveEngine)
    assert isinstance(EngineFactory.new_engine("ZERO"), ZeroSolveEngine)
    assert isinstance(EngineFactory.new_engine("fail"), FakeFailEngine)
    assert "highs" in EngineFactory.engine_keys()


def test_factory_rejects_unknown_key():
    with pytest.raises(MipBuilderException):
        EngineFactory.new_engine("cplex")


def test_columns_are_stored(engine):
    assert engine.number_of_columns == 3
    assert engine.get_var_attr(VarAttr.Obj, 1) == (0, 2.0)
    assert engine.get_var_attr(VarAttr.VType, 2) == (0, 'B')
    assert engine.get_var_attr(VarAttr.VarName, 1) == (0, None)
    assert engine.get_int_attr(IntAttr.IsMIP) == (0, 1)


def test_add_vars_rejects_length_mismatch(engine):
    assert ErrorCode.InvalidArgument == engine.add_vars(2, [1.0], [0, 0], [1, 1], ['C', 'C'], None)
    assert engine.number_of_columns == 3


def test_add_var_rejects_unknown_type(engine):
    assert ErrorCode.InvalidArgument == engine.add_var(0, 0, 1, 'S', None)
    assert engine.number_of_columns == 3


def test_add_constr_checks_indices(engine):
    assert ErrorCode.IndexOutOfRange == engine.add_constr(2, [0, 3], [1.0, 1.0], 'L', 4, None)
    assert ErrorCode.InvalidArgument == engine.add_constr(1, [0], [1.0], 'X', 4, None)
    assert engine.number_of_rows == 0


def test_add_constrs_slices_rows(engine):
    status = engine.add_constrs(2, 3, np.array([0, 2], dtype=np.int32),
                                np.array([0, 1, 2], dtype=np.int32), np.array([1.0, -1.0, 5.0]),
                                ['G', 'E'], np.array([1.0, 0.0]), ["r0", None])
    assert 0 == status
    assert engine.number_of_rows == 2
    assert engine.get_constr_attr(ConstrAttr.Sense, 1) == (0, 'E')
    assert engine.get_constr_attr(ConstrAttr.ConstrName, 0) == (0, "r0")
    assert engine.get_constr_attr(ConstrAttr.RHS, 0) == (0, 1.0)


def test_add_constrs_rejects_decreasing_offsets(engine):
    status = engine.add_constrs(2, 2, [1, 0], [0, 1], [1.0, 1.0], ['L', 'L'], [1.0, 1.0], None)
    assert ErrorCode.InvalidArgument == status
    assert engine.number_of_rows == 0


def test_attribute_errors(engine):
    assert engine.get_int_attr("Nope") == (ErrorCode.InvalidArgument, None)
    assert engine.get_var_attr(VarAttr.LB, 7) == (ErrorCode.IndexOutOfRange, None)
    assert engine.get_var_attr(VarAttr.X, 0) == (ErrorCode.DataNotAvailable, None)
    assert engine.get_dbl_attr(DblAttr.ObjVal) == (ErrorCode.DataNotAvailable, None)
    assert engine.set_int_attr(IntAttr.ModelSense, 3) == ErrorCode.InvalidArgument


def test_nosolve_engine_cannot_optimize(engine):
    assert ErrorCode.NotSupported == engine.optimize()
    assert engine.get_int_attr(IntAttr.Status) == (0, ModelStatus.NotSet)


def test_zero_engine_solution():
    eng = ZeroSolveEngine()
    eng.add_vars(2, [2.0, 3.0], [1.0, -5.0], [4.0, -1.0], ['C', 'I'], None)
    assert 0 == eng.optimize()
    assert eng.get_int_attr(IntAttr.Status) == (0, ModelStatus.Optimal)
    assert eng.get_var_attr(VarAttr.X, 0) == (0, 1.0)
    assert eng.get_var_attr(VarAttr.X, 1) == (0, -1.0)
    assert eng.get_dbl_attr(DblAttr.ObjVal) == (0, -1.0)


def test_adding_columns_clears_solution():
    eng = ZeroSolveEngine()
    eng.add_var(1.0, 0.0, 1.0, 'C', None)
    eng.optimize()
    eng.add_var(1.0, 0.0, 1.0, 'C', None)
    assert eng.get_int_attr(IntAttr.Status) == (0, ModelStatus.NotSet)
    assert eng.get_dbl_attr(DblAttr.ObjVal)[0] == ErrorCode.DataNotAvailable


def test_fail_engine_fails_given_number_of_times():
    eng = FakeFailEngine()
    eng.fail_on("add_var", code=42, times=2)
    assert 42 == eng.add_var(0, 0, 1, 'C', None)
    assert 42 == eng.add_var(0, 0, 1, 'C', None)
    assert 0 == eng.add_var(0, 0, 1, 'C', None)
    assert eng.number_of_columns == 1
    assert eng.number_of_calls("add_var") == 3


def test_call_log_keeps_payloads(engine):
    engine.clear_call_log()
    engine.add_constr(2, np.array([0, 2], dtype=np.int32), np.array([1.0, 4.0]), 'L', 3.0, "c")
    assert engine.calls("add_constr") == [dict(nnz=2, ind=[0, 2], val=[1.0, 4.0], sense='L', rhs=3.0, name="c")]


def test_parameters_are_stored(engine):
    assert 0 == engine.set_parameter("time_limit", 2.5)
    assert engine.parameters == {"time_limit": 2.5}


def test_write_lp_file(engine, tmp_path):
    engine.add_constr(2, [0, 2], [1.0, -1.0], 'G', 1.0, "link")
    engine.set_int_attr(IntAttr.ModelSense, -1)
    path = tmp_path / "model.lp"
    assert 0 == engine.write(str(path))
    text = path.read_text()
    assert text.startswith("\\Problem name: engine_test")
    assert "Maximize\n obj: x + 2 x2 + 3 b\n" in text
    assert " link: x - b >= 1\n" in text
    assert " 0 <= x <= 10\n" in text
    assert "Binaries\n b\n" in text
    assert "Generals\n x2\n" in text
    assert text.endswith("End\n")


def test_write_unknown_format(engine, tmp_path):
    assert ErrorCode.NotSupported == engine.write(str(tmp_path / "model.mps"))
