# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

# gendoc: ignore
"""
This is the mipbuilder package: incremental, batched building of
linear and mixed-integer models on top of a solver engine.
"""

from mipbuilder.version import mipbuilder_version_major, mipbuilder_version_minor, mipbuilder_version_micro, \
    mipbuilder_version_string

from mipbuilder.constants import ComparisonType, ObjectiveSense, ModelStatus, ErrorCode, \
    IntAttr, DblAttr, VarAttr, ConstrAttr, INFINITY
from mipbuilder.constr import LinearConstraint
from mipbuilder.context import Context
from mipbuilder.environment import Environment
from mipbuilder.linear import Var, LinearExpr, sum_expr, scal_prod
from mipbuilder.model import Model
from mipbuilder.utils import MipBuilderException, SolverError, ModelEndedError, \
    UnknownVariableError, DuplicateEntityError

__version_info__ = (mipbuilder_version_major, mipbuilder_version_minor, mipbuilder_version_micro)
__version__ = mipbuilder_version_string
