import pytest

from highspy import HighsStatus

from conftest import make_env
from mipbuilder import Model, Var, ModelStatus, ObjectiveSense, SolverError, ErrorCode, VarAttr
from mipbuilder.highs_engine import HighsEngine


def test_default_agent_is_highs():
    with Model(make_env(None)) as mdl:
        assert isinstance(mdl.get_engine(), HighsEngine)


def test_minimize_nonnegative_costs(highs_model):
    x = highs_model.add(Var(0, 10, 'C', 2, "x"))
    y = highs_model.add(Var(0, 10, 'C', 3, "y"))
    highs_model.update()
    assert highs_model.get_var_index(x) == 0
    assert highs_model.get_var_index(y) == 1

    highs_model.add(x + y <= 10)
    highs_model.set_sense(ObjectiveSense.Minimize)
    highs_model.optimize()
    assert highs_model.status() == ModelStatus.Optimal
    assert highs_model.objective_value() == pytest.approx(0.0)


def test_maximize(highs_model):
    x = highs_model.continuous_var(ub=10, obj=2, name="x")
    y = highs_model.continuous_var(ub=10, obj=3, name="y")
    highs_model.add(x + y <= 10)
    highs_model.set_sense("max")
    highs_model.optimize()
    assert highs_model.status() == ModelStatus.Optimal
    assert highs_model.objective_value() == pytest.approx(30.0)
    assert highs_model.value(x) == pytest.approx(0.0)
    assert highs_model.value(y) == pytest.approx(10.0)


def test_integer_variables(highs_model):
    x = highs_model.integer_var(ub=10, obj=1, name="x")
    y = highs_model.integer_var(ub=10, obj=1, name="y")
    highs_model.add((2 * x + 2 * y).le(5, name="cap"))
    highs_model.set_sense("max")
    highs_model.optimize()
    assert highs_model.status() == ModelStatus.Optimal
    assert highs_model.objective_value() == pytest.approx(2.0)


def test_binary_knapsack(highs_model):
    values = [10, 13, 7, 8]
    weights = [5, 6, 4, 3]
    items = [highs_model.binary_var(obj=v, name="item%d" % i) for i, v in enumerate(values)]
    highs_model.add(sum(w * b for w, b in zip(weights, items)) <= 10)
    highs_model.set_sense("max")
    highs_model.optimize()
    assert highs_model.objective_value() == pytest.approx(21.0)
    assert [round(highs_model.value(b)) for b in items] == [0, 1, 0, 1]


def _solve(mdl, batched):
    x = Var(0, 4, 'C', -1, "x")
    y = Var(0, 4, 'I', -2, "y")
    if batched:
        mdl.add(x)
        mdl.add(y)
        mdl.add(x + y <= 5)
        mdl.add((x - y).ge(-2, name="gap"))
        mdl.update()
    else:
        for e in (x, y):
            mdl.add(e)
            mdl.update()
        mdl.add(x + y <= 5)
        mdl.update()
        mdl.add((x - y).ge(-2, name="gap"))
        mdl.update()
    mdl.optimize()
    return mdl.objective_value(), mdl.value(x), mdl.value(y), \
        [mdl.get_var_attribute(v, VarAttr.VType) for v in (x, y)]


def test_single_and_batched_give_same_solution():
    with Model(make_env("highs")) as single, Model(make_env("highs")) as batched:
        obj1, x1, y1, types1 = _solve(single, False)
        obj2, x2, y2, types2 = _solve(batched, True)
        assert obj1 == pytest.approx(-8.0)
        assert obj2 == pytest.approx(-8.0)
        assert (x1, y1) == pytest.approx((x2, y2))
        assert types1 == types2 == ['C', 'I']
        assert single.get_engine().highs.getNumRow() == batched.get_engine().highs.getNumRow() == 2


def test_infeasible_model_and_iis(highs_model):
    x = highs_model.continuous_var(ub=10, name="x")
    y = highs_model.continuous_var(ub=10, name="y")
    low = highs_model.linear_constraint(x, 'G', 8, name="low")
    high = highs_model.linear_constraint(x, 'L', 3, name="high")
    free = highs_model.add((y + x).le(15, name="free"))
    highs_model.optimize()
    assert highs_model.status() in (ModelStatus.Infeasible, ModelStatus.UnboundedOrInfeasible)
    with pytest.raises(SolverError):
        highs_model.objective_value()

    highs_model.compute_iis()
    assert highs_model.iis_constraints() == [low, high]
    assert free not in highs_model.iis_constraints()


def test_iis_on_feasible_model(highs_model):
    x = highs_model.continuous_var(ub=1, name="x")
    highs_model.add(x <= 1)
    with pytest.raises(SolverError) as err:
        highs_model.compute_iis()
    assert err.value.code == ErrorCode.IISNotInfeasible


def test_objective_value_before_solve(highs_model):
    highs_model.continuous_var(obj=1)
    highs_model.update()
    with pytest.raises(SolverError) as err:
        highs_model.objective_value()
    assert err.value.code == ErrorCode.DataNotAvailable


def test_write_model(highs_model, tmp_path):
    x = highs_model.continuous_var(ub=10, obj=2, name="x")
    highs_model.add(x.to_linear_expr().ge(1, name="c0"))
    highs_model.update()
    path = tmp_path / "model.lp"
    highs_model.write(str(path))
    assert path.exists()
    assert "c0" in path.read_text()


def test_parameters_are_forwarded():
    with Model(make_env("highs", time_limit=30, mip_gap=0.01)) as mdl:
        assert mdl.get_engine().parameters == {"log_output": False, "time_limit": 30.0, "mip_gap": 0.01}


def test_native_failure_rolls_back_columns(highs_model, monkeypatch):
    engine = highs_model.get_engine()
    monkeypatch.setattr(engine.highs, "passColName", lambda index, name: HighsStatus.kError)
    highs_model.continuous_var(name="x")
    highs_model.continuous_var(name="y")
    with pytest.raises(SolverError) as err:
        highs_model.update()
    assert err.value.operation == "add_vars"
    assert engine.highs.getNumCol() == 0
    assert highs_model.number_of_pending_variables == 2

    monkeypatch.undo()
    highs_model.update()
    assert engine.highs.getNumCol() == 2
    assert highs_model.number_of_variables == 2
