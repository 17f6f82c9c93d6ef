"""Differentiable constraint functions.

This module provides:
- DifferentiableSparseFunction: value and sparse Jacobian contract
- EnvCollisionConstraint: body hulls against static environment hulls
- SelfCollisionConstraint: body hulls against body hulls
- scipy adapters (scipinize, as_nonlinear_constraint)
"""

from posegen.constraints.base import as_nonlinear_constraint
from posegen.constraints.base import DifferentiableSparseFunction
from posegen.constraints.base import scipinize
from posegen.constraints.collision import EnvCollision
from posegen.constraints.collision import EnvCollisionConstraint
from posegen.constraints.collision import SelfCollision
from posegen.constraints.collision import SelfCollisionConstraint
from posegen.constraints.sparse import full_jacobian_sparse
from posegen.constraints.sparse import sparse_row_entries


__all__ = [
    'DifferentiableSparseFunction',
    'scipinize',
    'as_nonlinear_constraint',
    'EnvCollision',
    'EnvCollisionConstraint',
    'SelfCollision',
    'SelfCollisionConstraint',
    'sparse_row_entries',
    'full_jacobian_sparse',
]
