from collections import namedtuple
from logging import getLogger

import numpy as np

from posegen.construct import FloatConstruct
from posegen.model.dynamics import inverse_dynamics
from posegen.model.kinematics import forward_kinematics


logger = getLogger(__name__)


class SizeMismatchError(ValueError):
    """Parameter vector length differs from the expected size."""


PostureState = namedtuple(
    'PostureState', ['q', 'fk', 'body_forces', 'forces', 'ellipses'])
PostureState.__doc__ = """Quantities derived from a parameter vector.

q : list[list]
    Per-joint coordinates.
fk : posegen.model.kinematics.ForwardKinematics
    Forward kinematics.
body_forces : list[array (6,)]
    Net couple and force applied on every body, in the body frame.
forces : list[list[array (3,)]]
    Force of every point of every force descriptor, in the point frame.
ellipses : list[tuple]
    ``(x, y, theta, r1, r2)`` of every ellipse descriptor.
"""


class ForceData(object):
    """Contact forces applied on a body.

    Parameters
    ----------
    body_index : int
        Index of the body the forces are applied on.
    points : list[numpy.ndarray]
        4x4 pose of every application point in the body frame.
    forces : list[numpy.ndarray], optional
        Force at every point, expressed in the point frame. Overwritten by
        the force parameters on every update. Zeros if None.
    mu : float
        Friction coefficient.
    """

    def __init__(self, body_index, points, forces=None, mu=1.0):
        self.body_index = body_index
        self.points = [np.array(p, dtype=np.float64) for p in points]
        if forces is None:
            forces = [np.zeros(3) for _ in self.points]
        self.forces = [np.array(f, dtype=np.float64) for f in forces]
        self.mu = mu

    def __repr__(self):
        return '<{} body {} with {} points>'.format(
            self.__class__.__name__, self.body_index, len(self.points))


class EllipseData(object):
    """Ellipse drawn on a surface of a body.

    ``theta`` is the angle between the x axis and the first axis of the
    ellipse, ``r1`` and ``r2`` its radii.
    """

    def __init__(self, body_index, x=0.0, y=0.0, theta=0.0, r1=0.0, r2=0.0):
        self.body_index = body_index
        self.x = x
        self.y = y
        self.theta = theta
        self.r1 = r1
        self.r2 = r2

    def __str__(self):
        # matplotlib.patches.Ellipse(xy, width, height, angle)
        return 'ellipse = Ellipse(({}, {}), {}, {}, {})\n'.format(
            self.x, self.y, 2 * self.r1, 2 * self.r2,
            np.rad2deg(self.theta))


class PostureData(object):
    """Kinematic state shared by the constraints of a posture problem.

    The parameter vector is made of the joint parameters, followed by 3
    force components per force point and 5 shape parameters per ellipse.
    Forward kinematics and body forces are updated on every change of the
    parameter vector. Inverse dynamics is only computed when requested.

    Parameters
    ----------
    mechanism : posegen.model.Mechanism
        Mechanism description.
    gravity : array-like (3,)
        Gravity acceleration in world frame.
    construct : FloatConstruct or AutoDiffConstruct, optional
        Evaluation policy. ``FloatConstruct()`` if None.

    Examples
    --------
    >>> data = PostureData(mb, [0.0, 0.0, -9.81])
    >>> data.set_x(x)
    >>> data.fk.body_pos_w[1]
    >>> data.inverse_dynamics().torque
    """

    def __init__(self, mechanism, gravity, construct=None):
        self._mechanism = mechanism
        self._gravity = np.array(gravity, dtype=np.float64)
        if construct is None:
            construct = FloatConstruct()
        self._construct = construct

        self._force_datas = []
        self._ellipse_datas = []
        self._nr_force_points = 0

        self._x = np.zeros(mechanism.nr_params)
        self._quaternion_norm = 1.0
        self._x_stamp = 1
        self._id_stamp = 1
        self._id = None
        self.update()

    @property
    def mechanism(self):
        return self._mechanism

    @property
    def gravity(self):
        return self._gravity

    @property
    def construct(self):
        return self._construct

    @property
    def x(self):
        """Current parameter vector. Do not modify it in place."""
        return self._x

    @property
    def q(self):
        return self._q

    @property
    def fk(self):
        return self._fk

    @property
    def body_forces(self):
        return self._body_forces

    @property
    def force_datas(self):
        return self._force_datas

    @property
    def ellipse_datas(self):
        return self._ellipse_datas

    @property
    def quaternion_norm(self):
        """Norm of the free joint quaternion given to the last :meth:`set_x`.

        1 when the mechanism has no free joint or the quaternion was zero.
        """
        return self._quaternion_norm

    @property
    def x_stamp(self):
        return self._x_stamp

    @property
    def id_stamp(self):
        return self._id_stamp

    @property
    def nr_force_points(self):
        return self._nr_force_points

    @property
    def pb_size(self):
        """Size of the parameter vector."""
        return (self._mechanism.nr_params + 3 * self._nr_force_points
                + 5 * len(self._ellipse_datas))

    @property
    def q_params_begin(self):
        return 0

    @property
    def force_params_begin(self):
        return self._mechanism.nr_params

    @property
    def ellipse_params_begin(self):
        return self._mechanism.nr_params + 3 * self._nr_force_points

    def set_x(self, x):
        """Set the parameter vector.

        The quaternion of a free root joint is normalized before the vector
        is stored. Nothing is recomputed if the normalized vector equals the
        current one.

        Parameters
        ----------
        x : array-like (pb_size,)
            Parameter vector.

        Raises
        ------
        SizeMismatchError
            If ``len(x) != pb_size``.
        """
        x = np.array(x, dtype=np.float64)
        if x.shape != (self.pb_size,):
            raise SizeMismatchError(
                'parameter vector of size {} expected, got shape {}'.format(
                    self.pb_size, x.shape))

        if self._mechanism.is_free_base:
            norm = np.linalg.norm(x[:4])
            if norm == 0.0:
                logger.warning(
                    'free joint quaternion has zero norm, '
                    'it is left unnormalized')
                self._quaternion_norm = 1.0
            else:
                x[:4] /= norm
                self._quaternion_norm = norm

        if np.array_equal(x, self._x):
            return
        self._x = x
        self._x_stamp += 1
        self.update()

    def set_forces(self, force_datas):
        """Replace the force descriptors.

        The parameter vector is reset to zeros of the new size.
        """
        self._force_datas = list(force_datas)
        self._nr_force_points = sum(
            len(fd.points) for fd in self._force_datas)
        self._reset_x()

    def set_ellipses(self, ellipse_datas):
        """Replace the ellipse descriptors.

        The parameter vector is reset to zeros of the new size.
        """
        self._ellipse_datas = list(ellipse_datas)
        self._reset_x()

    def _reset_x(self):
        self._x = np.zeros(self.pb_size)
        self._quaternion_norm = 1.0
        self._x_stamp += 1
        self.update()

    def evaluate(self, x):
        """Compute the quantities derived from a parameter vector.

        The cache is left untouched. ``x`` is not normalized.

        Parameters
        ----------
        x : array (pb_size,)
            Parameter vector. Can be a JAX tracer with
            :class:`posegen.construct.AutoDiffConstruct`.

        Returns
        -------
        state : PostureState
            Derived quantities.
        """
        construct = self._construct
        backend = construct.backend
        mechanism = self._mechanism
        size = len(x)

        pos = 0
        q = []
        for joint in mechanism.joints:
            q.append([construct(size, pos + k, x[pos + k])
                      for k in range(joint.params)])
            pos += joint.params
        fk = forward_kinematics(backend, mechanism, q)

        body_forces = [backend.zeros(6) for _ in range(mechanism.nr_bodies)]
        forces = []
        for fd in self._force_datas:
            point_forces = []
            for X_b_p in fd.points:
                force = backend.stack(
                    [construct(size, pos + k, x[pos + k]) for k in range(3)])
                force_b = backend.matmul(backend.array(X_b_p[:3, :3]), force)
                couple_b = backend.cross(
                    backend.array(X_b_p[:3, 3]), force_b)
                body_forces[fd.body_index] = (
                    body_forces[fd.body_index]
                    + backend.concatenate([couple_b, force_b]))
                point_forces.append(force)
                pos += 3
            forces.append(point_forces)

        ellipses = []
        for _ in self._ellipse_datas:
            ellipses.append(tuple(
                construct(size, pos + k, x[pos + k]) for k in range(5)))
            pos += 5
        return PostureState(q, fk, body_forces, forces, ellipses)

    def update(self):
        """Recompute the derived quantities from the current vector."""
        logger.debug('update posture data at stamp %d', self._x_stamp)
        state = self.evaluate(self._x)
        self._q = state.q
        self._fk = state.fk
        self._body_forces = state.body_forces
        for fd, point_forces in zip(self._force_datas, state.forces):
            fd.forces = [np.asarray(f, dtype=np.float64)
                         for f in point_forces]
        for ed, values in zip(self._ellipse_datas, state.ellipses):
            ed.x, ed.y, ed.theta, ed.r1, ed.r2 = [float(v) for v in values]

    def inverse_dynamics(self):
        """Return the inverse dynamics of the current state.

        Recomputed only if the parameter vector changed since the last call.

        Returns
        -------
        result : posegen.model.dynamics.InverseDynamics
            Joint torques and joint wrenches.
        """
        if self._id is None or self._id_stamp != self._x_stamp:
            logger.debug('inverse dynamics at stamp %d', self._x_stamp)
            self._id = inverse_dynamics(
                self._construct.backend, self._mechanism, self._fk,
                self._body_forces, self._gravity)
            self._id_stamp = self._x_stamp
        return self._id
