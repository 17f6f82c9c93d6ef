"""Forward kinematics and body Jacobians of a :class:`Mechanism`.

Forward kinematics is written against a backend so that it can run on
traced JAX arrays. The Jacobians are evaluated numerically with NumPy from a
forward kinematics result.
"""

from collections import namedtuple

import numpy as np

from posegen.backend import get_backend
from posegen.backend.math_utils import make_transform
from posegen.backend.math_utils import quaternion_to_matrix
from posegen.backend.math_utils import rodrigues_rotation
from posegen.backend.math_utils import skew_symmetric


ForwardKinematics = namedtuple(
    'ForwardKinematics',
    ['q', 'body_pos_w', 'parent_to_son', 'joint_pos_w'])
ForwardKinematics.__doc__ = """Result of :func:`forward_kinematics`.

q : list[list[float]]
    Joint coordinates the result was computed for.
body_pos_w : list[array (4, 4)]
    World pose of every body.
parent_to_son : list[array (4, 4)]
    Pose of every body in the frame of its parent body (in the world frame
    for the root body).
joint_pos_w : list[array (4, 4)]
    World pose of every joint frame, before the joint motion is applied.
"""


def joint_motion(backend, joint, q):
    """Transform from the joint frame to the child body frame.

    Parameters
    ----------
    backend : NumpyBackend or JaxBackend
        Backend to use for computation.
    joint : posegen.model.Joint
        Joint.
    q : list
        Joint coordinates, ``joint.params`` values.

    Returns
    -------
    transform : array (4, 4)
        Homogeneous transform.
    """
    if joint.joint_type == 'fixed':
        return backend.eye(4)
    if joint.joint_type == 'revolute':
        rot = rodrigues_rotation(backend, backend.array(joint.axis), q[0])
        return make_transform(backend, rot, backend.zeros(3))
    if joint.joint_type == 'prismatic':
        return make_transform(
            backend, backend.eye(3), backend.array(joint.axis) * q[0])
    rot = quaternion_to_matrix(backend, q[:4])
    return make_transform(backend, rot, backend.array(q[4:7]))


def forward_kinematics(backend, mechanism, q):
    """Compute the world pose of every body.

    Parameters
    ----------
    backend : NumpyBackend or JaxBackend
        Backend to use for computation.
    mechanism : posegen.model.Mechanism
        Mechanism description.
    q : list[list]
        Per-joint coordinates.

    Returns
    -------
    fk : ForwardKinematics
        Body and joint poses.

    Examples
    --------
    >>> from posegen.backend import get_backend
    >>> from posegen.model.kinematics import forward_kinematics
    >>> backend = get_backend('numpy')
    >>> fk = forward_kinematics(backend, mb, [[], [0.3]])
    >>> fk.body_pos_w[1][:3, 3]
    """
    body_pos_w = []
    parent_to_son = []
    joint_pos_w = []
    for i, joint in enumerate(mechanism.joints):
        X_p_j = backend.array(joint.transform)
        X_p_s = backend.matmul(X_p_j, joint_motion(backend, joint, q[i]))
        parent = mechanism.parents[i]
        if parent == -1:
            X_0_j = X_p_j
            X_0_s = X_p_s
        else:
            X_0_j = backend.matmul(body_pos_w[parent], X_p_j)
            X_0_s = backend.matmul(body_pos_w[parent], X_p_s)
        joint_pos_w.append(X_0_j)
        parent_to_son.append(X_p_s)
        body_pos_w.append(X_0_s)
    return ForwardKinematics(q, body_pos_w, parent_to_son, joint_pos_w)


def quaternion_kinematic_matrix(q):
    """Map from quaternion rate to angular velocity.

    For a unit quaternion ``q = [w, x, y, z]`` rotating a child frame into
    its parent frame, the angular velocity expressed in the parent frame is
    ``omega = 2 * H(q) * dq/dt``. ``H(q) q = 0``, so only the part of a
    quaternion perturbation tangent to the unit sphere has an effect.
    """
    w, x, y, z = q
    return np.array([
        [-x, w, -z, y],
        [-y, z, w, -x],
        [-z, -y, x, w]])


class BodyJacobian(object):
    """Jacobian of a point attached to a body.

    The columns of the Jacobian are the parameters of the joints on the
    path from the root to the body, in path order. ``param_indices`` maps
    them to columns of the joint parameter vector.

    Parameters
    ----------
    mechanism : posegen.model.Mechanism
        Mechanism description.
    body_name : str
        Name of the body the point is attached to.
    point : array-like (3,), optional
        Point in the body frame. Origin of the body if None.
    """

    def __init__(self, mechanism, body_name, point=None):
        self._body_index = mechanism.body_index_by_name(body_name)
        self._joints_path = mechanism.joints_path(self._body_index)

        param_indices = []
        for j in self._joints_path:
            start = mechanism.joint_pos_in_param[j]
            param_indices.extend(
                range(start, start + mechanism.joint(j).params))
        self._param_indices = np.array(param_indices, dtype=np.int64)
        self._jac = np.zeros((6, len(param_indices)))
        if point is None:
            point = np.zeros(3)
        self._point = np.array(point, dtype=np.float64)
        self._backend = get_backend('numpy')

    @property
    def body_index(self):
        return self._body_index

    @property
    def joints_path(self):
        return self._joints_path

    @property
    def dof(self):
        """Number of Jacobian columns."""
        return len(self._param_indices)

    @property
    def param_indices(self):
        return self._param_indices

    def point(self, p=None):
        """Return the evaluation point, or set it if ``p`` is given."""
        if p is None:
            return self._point
        self._point = np.array(p, dtype=np.float64)
        return self._point

    def jacobian(self, mechanism, fk, quaternion_norm=1.0):
        """Compute the Jacobian at the current evaluation point.

        Parameters
        ----------
        mechanism : posegen.model.Mechanism
            Mechanism description.
        fk : ForwardKinematics
            Forward kinematics of the configuration.
        quaternion_norm : float
            Norm of the free joint quaternion parameters before they were
            normalized. The quaternion columns are divided by it so that
            they differentiate with respect to the raw parameters.

        Returns
        -------
        jac : numpy.ndarray (6, dof)
            Angular velocity rows followed by the linear velocity rows of
            the point, in world frame. The array is reused by the next call.
        """
        X_0_b = np.asarray(fk.body_pos_w[self._body_index])
        p = X_0_b[:3, :3].dot(self._point) + X_0_b[:3, 3]

        jac = self._jac
        jac[:] = 0.0
        col = 0
        for j in self._joints_path:
            joint = mechanism.joint(j)
            X_0_j = np.asarray(fk.joint_pos_w[j])
            rot = X_0_j[:3, :3]
            if joint.joint_type == 'revolute':
                axis = rot.dot(joint.axis)
                jac[:3, col] = axis
                jac[3:, col] = np.cross(axis, p - X_0_j[:3, 3])
            elif joint.joint_type == 'prismatic':
                jac[3:, col] = rot.dot(joint.axis)
            elif joint.joint_type == 'free':
                quat = np.asarray(fk.q[j][:4], dtype=np.float64)
                ang = (2.0 / quaternion_norm) * rot.dot(
                    quaternion_kinematic_matrix(quat))
                center = np.asarray(fk.body_pos_w[j])[:3, 3]
                jac[:3, col:col + 4] = ang
                jac[3:, col:col + 4] = -skew_symmetric(
                    self._backend, p - center).dot(ang)
                jac[3:, col + 4:col + 7] = rot
            col += joint.params
        return jac
