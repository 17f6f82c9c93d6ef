"""Static inverse dynamics of a :class:`Mechanism`.

At rest the generalized force each joint has to provide only balances the
weight of the subtree it carries and the external forces acting on it:

    tau_i = S_i^T F_i

where ``F_i`` is the wrench transmitted from the parent body to the child
body through joint ``i``. The backward pass below sums the gravity and
external wrenches of every subtree at the world origin, so it runs with any
backend, including traced JAX arrays.
"""

from collections import namedtuple

import numpy as np


InverseDynamics = namedtuple('InverseDynamics', ['torque', 'joint_wrench'])
InverseDynamics.__doc__ = """Result of :func:`inverse_dynamics`.

torque : list[array]
    Generalized force of every joint. Empty for fixed joints, one value for
    revolute and prismatic joints, and the couple followed by the force in
    the child body frame for a free joint.
joint_wrench : list[array (6,)]
    Couple about the world origin followed by the force, in world frame,
    applied by the parent body on the child body through every joint.
"""


def inverse_dynamics(backend, mechanism, fk, body_forces=None, gravity=None):
    """Compute joint torques keeping the mechanism at rest.

    Parameters
    ----------
    backend : NumpyBackend or JaxBackend
        Backend to use for computation.
    mechanism : posegen.model.Mechanism
        Mechanism description.
    fk : posegen.model.kinematics.ForwardKinematics
        Forward kinematics of the configuration.
    body_forces : list[array (6,)], optional
        External couple and force applied on every body, in the body frame
        and with the couple taken about the body origin.
    gravity : array-like (3,), optional
        Gravity acceleration in world frame. Default: [0, 0, -9.81]

    Returns
    -------
    result : InverseDynamics
        Joint torques and joint wrenches.

    Examples
    --------
    >>> from posegen.backend import get_backend
    >>> backend = get_backend('numpy')
    >>> fk = forward_kinematics(backend, mb, q)
    >>> inverse_dynamics(backend, mb, fk).torque
    """
    if gravity is None:
        gravity = np.array([0.0, 0.0, -9.81])
    gravity = backend.array(gravity)

    nr_bodies = mechanism.nr_bodies
    couples = []
    forces = []
    for i in range(nr_bodies):
        X_0_b = fk.body_pos_w[i]
        rot = X_0_b[:3, :3]
        pos = X_0_b[:3, 3]
        body = mechanism.body(i)

        com = backend.matmul(rot, backend.array(body.center_of_mass)) + pos
        force = body.mass * gravity
        couple = backend.cross(com, force)
        if body_forces is not None:
            f_ext = backend.matmul(rot, body_forces[i][3:])
            couple = (couple + backend.matmul(rot, body_forces[i][:3])
                      + backend.cross(pos, f_ext))
            force = force + f_ext
        couples.append(couple)
        forces.append(force)

    # children have larger indices than their parent
    for i in reversed(range(nr_bodies)):
        parent = mechanism.parents[i]
        if parent != -1:
            couples[parent] = couples[parent] + couples[i]
            forces[parent] = forces[parent] + forces[i]

    torque = []
    joint_wrench = []
    for i, joint in enumerate(mechanism.joints):
        couple = -couples[i]
        force = -forces[i]
        joint_wrench.append(backend.concatenate([couple, force]))

        X_0_j = fk.joint_pos_w[i]
        origin = X_0_j[:3, 3]
        if joint.joint_type == 'fixed':
            torque.append(backend.zeros(0))
        elif joint.joint_type == 'revolute':
            axis = backend.matmul(X_0_j[:3, :3], backend.array(joint.axis))
            moment = couple - backend.cross(origin, force)
            torque.append(backend.stack([backend.dot(axis, moment)]))
        elif joint.joint_type == 'prismatic':
            axis = backend.matmul(X_0_j[:3, :3], backend.array(joint.axis))
            torque.append(backend.stack([backend.dot(axis, force)]))
        else:
            X_0_c = fk.body_pos_w[i]
            rot_t = X_0_c[:3, :3].T
            moment = couple - backend.cross(X_0_c[:3, 3], force)
            torque.append(backend.concatenate(
                [backend.matmul(rot_t, moment),
                 backend.matmul(rot_t, force)]))
    return InverseDynamics(torque, joint_wrench)
