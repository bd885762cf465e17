import pytest

from mipbuilder import Context, Environment, Model


def make_env(agent, **kwargs):
    # an explicit context keeps user config files out of the tests
    return Environment(Context(agent=agent, **kwargs))


@pytest.fixture
def nosolve_model():
    mdl = Model(make_env("nosolve"), name="nosolve_test")
    yield mdl
    mdl.end()


@pytest.fixture
def zero_model():
    mdl = Model(make_env("zero"), name="zero_test")
    yield mdl
    mdl.end()


@pytest.fixture
def fail_model():
    mdl = Model(make_env("fail"), name="fail_test")
    yield mdl
    mdl.end()


@pytest.fixture
def highs_model():
    mdl = Model(make_env("highs"), name="highs_test")
    yield mdl
    mdl.end()
