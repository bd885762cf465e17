import pytest

from conftest import make_env
from mipbuilder import Model, ObjectiveSense, ModelStatus, SolverError, ErrorCode, MipBuilderException


def test_optimize_updates_first(zero_model):
    engine = zero_model.get_engine()
    x = zero_model.continuous_var(lb=1, ub=4, obj=2, name="x")
    zero_model.add(x <= 3)
    zero_model.optimize()
    ops = [op for op, _ in engine.call_log]
    assert ops[-4:] == ["add_var", "add_constr", "update_model", "optimize"]
    assert zero_model.status() == ModelStatus.Optimal
    assert zero_model.objective_value() == 2.0
    assert zero_model.value(x) == 1.0


def test_status_is_raw_integer(zero_model):
    status = zero_model.status()
    assert type(status) is int
    assert status == ModelStatus.NotSet


def test_set_sense(zero_model):
    assert zero_model.get_sense() is ObjectiveSense.Minimize
    zero_model.set_sense("max")
    assert zero_model.get_sense() is ObjectiveSense.Maximize
    zero_model.set_sense(ObjectiveSense.Minimize)
    assert zero_model.get_sense() is ObjectiveSense.Minimize
    zero_model.set_sense(-1)
    assert zero_model.get_engine().calls("set_int_attr")[-1] == dict(attr="ModelSense", value=-1)


def test_set_sense_rejects_unknown_values(zero_model):
    with pytest.raises(MipBuilderException):
        zero_model.set_sense("sideways")
    with pytest.raises(MipBuilderException):
        zero_model.set_sense(0)
    assert zero_model.get_sense() is ObjectiveSense.Minimize


def test_write_lp(zero_model, tmp_path):
    x = zero_model.continuous_var(ub=10, obj=2, name="x")
    y = zero_model.integer_var(ub=3, obj=3, name="y")
    zero_model.add((x + y).le(10, name="cap"))
    zero_model.set_sense("max")
    zero_model.update()
    path = tmp_path / "zero.lp"
    zero_model.write(str(path))
    assert path.read_text() == ("\\Problem name: zero_test\n\n"
                                "Maximize\n"
                                " obj: 2 x + 3 y\n"
                                "Subject To\n"
                                " cap: x + y <= 10\n"
                                "\n"
                                "Bounds\n"
                                " 0 <= x <= 10\n"
                                " 0 <= y <= 3\n"
                                "\n"
                                "Generals\n"
                                " y\n"
                                "End\n")


def test_write_unsupported_format(zero_model, tmp_path):
    with pytest.raises(SolverError) as err:
        zero_model.write(str(tmp_path / "zero.sav"))
    assert err.value.code == ErrorCode.NotSupported


def test_engine_parameters_from_environment():
    with Model(make_env("zero", time_limit=20, mip_gap=0.001)) as mdl:
        assert mdl.get_engine().parameters == {"log_output": False, "time_limit": 20.0, "mip_gap": 0.001}
