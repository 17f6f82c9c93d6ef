"""Collision avoidance constraints.

Each output of a constraint is the signed distance between a pair of hulls
attached to bodies of the mechanism (or to the environment), and each
Jacobian row is its gradient with respect to the parameter vector of a
shared :class:`posegen.data.PostureData`.
"""

from dataclasses import dataclass
from logging import getLogger

import numpy as np
import scipy.sparse

from posegen.collision.geometry import ConvexHull
from posegen.collision.pair import CollisionPair
from posegen.constraints.base import DifferentiableSparseFunction
from posegen.constraints.sparse import full_jacobian_sparse
from posegen.constraints.sparse import sparse_row_entries
from posegen.model.kinematics import BodyJacobian


logger = getLogger(__name__)

_degenerate_eps = 1e-12


@dataclass
class EnvCollision:
    """Hull attached to a body, tested against a static environment hull.

    Parameters
    ----------
    body : str
        Body name.
    body_transform : numpy.ndarray (4, 4)
        Pose of the hull in the body frame.
    body_hull : ConvexHull
        Hull attached to the body.
    env_hull : ConvexHull
        Environment hull, in world frame.
    """
    body: str
    body_transform: np.ndarray
    body_hull: ConvexHull
    env_hull: ConvexHull


@dataclass
class SelfCollision:
    """Two hulls attached to bodies of the same mechanism."""
    body1: str
    body1_transform: np.ndarray
    body1_hull: ConvexHull
    body2: str
    body2_transform: np.ndarray
    body2_hull: ConvexHull


def _residual(dist, squared):
    if squared:
        return np.copysign(dist * dist, dist)
    return dist


def _gradient_coefficient(dist, diff, squared):
    """Scale turning ``diff = p1 - p2`` into the gradient of the residual
    with respect to ``p1``."""
    if squared:
        return np.copysign(2.0, dist)
    norm = np.linalg.norm(diff)
    if norm < _degenerate_eps:
        logger.warning('witness points coincide, distance gradient set to 0')
        return 0.0
    return np.copysign(1.0, dist) / norm


def _hull_pose(data, body_index, body_transform):
    return np.asarray(data.fk.body_pos_w[body_index]).dot(body_transform)


def _body_point(data, body_index, point):
    X_0_b = np.asarray(data.fk.body_pos_w[body_index])
    return X_0_b[:3, :3].T.dot(point - X_0_b[:3, 3])


class _EnvCollisionData(object):

    def __init__(self, body_index, body_transform, jac, pair):
        self.body_index = body_index
        self.body_transform = body_transform
        self.jac = jac
        self.jac_mat = np.zeros((1, jac.dof))
        self.pair = pair


class _SelfCollisionData(object):

    def __init__(self, body1_index, body1_transform, jac1,
                 body2_index, body2_transform, jac2, pair):
        self.body1_index = body1_index
        self.body1_transform = body1_transform
        self.jac1 = jac1
        self.jac1_mat = np.zeros((1, jac1.dof))
        self.body2_index = body2_index
        self.body2_transform = body2_transform
        self.jac2 = jac2
        self.jac2_mat = np.zeros((1, jac2.dof))
        self.pair = pair


class EnvCollisionConstraint(DifferentiableSparseFunction):
    """Distance between body hulls and static environment hulls.

    Parameters
    ----------
    data : posegen.data.PostureData
        Kinematic state shared with the other constraints.
    collisions : list[EnvCollision]
        Monitored pairs, one output each.
    squared : bool
        If True, the outputs are the signed squared distances
        ``copysign(dist ** 2, dist)``. Signed distances otherwise.
    name : str
        Function name.

    Raises
    ------
    posegen.model.UnknownBodyError
        If a body name is not in the mechanism.
    NotImplementedError
        If the distance between a pair of hulls is not supported.

    Examples
    --------
    >>> constr = EnvCollisionConstraint(
    ...     data, [EnvCollision('arm', np.eye(4), arm_hull, ground)])
    >>> constr.compute(x)
    >>> constr.jacobian(x).toarray()
    """

    def __init__(self, data, collisions, squared=False,
                 name='EnvCollision'):
        super(EnvCollisionConstraint, self).__init__(
            data.pb_size, len(collisions), name)
        self._data = data
        self._squared = squared

        mechanism = data.mechanism
        self._cols = []
        for c in collisions:
            body_index = mechanism.body_index_by_name(c.body)
            self._cols.append(_EnvCollisionData(
                body_index,
                np.asarray(c.body_transform, dtype=np.float64),
                BodyJacobian(mechanism, c.body),
                CollisionPair(c.body_hull, c.env_hull)))
        self.nr_non_zero = sum(col.jac.dof for col in self._cols)
        logger.debug('%s: %d pairs, %d non zeros', name, len(self._cols),
                     self.nr_non_zero)

    @property
    def data(self):
        return self._data

    @property
    def squared(self):
        return self._squared

    def impl_compute(self, x):
        self._data.set_x(x)
        values = np.zeros(self.output_size)
        for i, col in enumerate(self._cols):
            col.pair.set_transform(
                0, _hull_pose(self._data, col.body_index, col.body_transform))
            values[i] = _residual(col.pair.distance(), self._squared)
        return values

    def impl_jacobian(self, x):
        data = self._data
        data.set_x(x)
        mechanism = data.mechanism

        rows = np.zeros(self.nr_non_zero, dtype=np.int64)
        cols = np.zeros(self.nr_non_zero, dtype=np.int64)
        values = np.zeros(self.nr_non_zero)
        pos = 0
        for i, col in enumerate(self._cols):
            col.pair.set_transform(
                0, _hull_pose(data, col.body_index, col.body_transform))
            dist, p_body, p_env = col.pair.closest_points()
            diff = p_body - p_env

            col.jac.point(_body_point(data, col.body_index, p_body))
            jac_mat = col.jac.jacobian(
                mechanism, data.fk, data.quaternion_norm)
            coef = _gradient_coefficient(dist, diff, self._squared)
            col.jac_mat[0] = coef * diff.dot(jac_mat[3:])

            r, c, v = sparse_row_entries(
                col.jac, col.jac_mat, (i, data.q_params_begin))
            rows[pos:pos + len(r)] = r
            cols[pos:pos + len(c)] = c
            values[pos:pos + len(v)] = v
            pos += len(r)
        return scipy.sparse.csr_matrix(
            (values, (rows, cols)),
            shape=(self.output_size, self.input_size))


class SelfCollisionConstraint(DifferentiableSparseFunction):
    """Distance between hulls attached to two bodies of the mechanism.

    Parameters
    ----------
    data : posegen.data.PostureData
        Kinematic state shared with the other constraints.
    collisions : list[SelfCollision]
        Monitored pairs, one output each.
    squared : bool
        If True, the outputs are the signed squared distances
        ``copysign(dist ** 2, dist)``. Signed distances otherwise.
    name : str
        Function name.
    """

    def __init__(self, data, collisions, squared=False,
                 name='SelfCollision'):
        super(SelfCollisionConstraint, self).__init__(
            data.pb_size, len(collisions), name)
        self._data = data
        self._squared = squared

        mechanism = data.mechanism
        self._cols = []
        for c in collisions:
            self._cols.append(_SelfCollisionData(
                mechanism.body_index_by_name(c.body1),
                np.asarray(c.body1_transform, dtype=np.float64),
                BodyJacobian(mechanism, c.body1),
                mechanism.body_index_by_name(c.body2),
                np.asarray(c.body2_transform, dtype=np.float64),
                BodyJacobian(mechanism, c.body2),
                CollisionPair(c.body1_hull, c.body2_hull)))
        self.nr_non_zero = sum(col.jac1.dof + col.jac2.dof
                               for col in self._cols)
        logger.debug('%s: %d pairs, %d non zeros', name, len(self._cols),
                     self.nr_non_zero)

    @property
    def data(self):
        return self._data

    @property
    def squared(self):
        return self._squared

    def _place(self, col):
        col.pair.set_transform(
            0, _hull_pose(self._data, col.body1_index, col.body1_transform))
        col.pair.set_transform(
            1, _hull_pose(self._data, col.body2_index, col.body2_transform))

    def impl_compute(self, x):
        self._data.set_x(x)
        values = np.zeros(self.output_size)
        for i, col in enumerate(self._cols):
            self._place(col)
            values[i] = _residual(col.pair.distance(), self._squared)
        return values

    def impl_jacobian(self, x):
        data = self._data
        data.set_x(x)
        mechanism = data.mechanism
        shape = (self.output_size, self.input_size)

        jac = scipy.sparse.csr_matrix(shape)
        for i, col in enumerate(self._cols):
            self._place(col)
            dist, p1, p2 = col.pair.closest_points()
            diff = p1 - p2
            coef = _gradient_coefficient(dist, diff, self._squared)

            col.jac1.point(_body_point(data, col.body1_index, p1))
            col.jac2.point(_body_point(data, col.body2_index, p2))
            jac1_mat = col.jac1.jacobian(
                mechanism, data.fk, data.quaternion_norm)
            jac2_mat = col.jac2.jacobian(
                mechanism, data.fk, data.quaternion_norm)
            col.jac1_mat[0] = coef * diff.dot(jac1_mat[3:])
            col.jac2_mat[0] = coef * diff.dot(jac2_mat[3:])

            offset = (i, data.q_params_begin)
            jac = jac + (
                full_jacobian_sparse(col.jac1, col.jac1_mat, shape, offset)
                - full_jacobian_sparse(col.jac2, col.jac2_mat, shape, offset))
        return jac
