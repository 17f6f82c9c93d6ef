from logging import getLogger

import numpy as np


logger = getLogger(__name__)

_joint_params = {
    'fixed': 0,
    'revolute': 1,
    'prismatic': 1,
    'free': 7,
}

_joint_dof = {
    'fixed': 0,
    'revolute': 1,
    'prismatic': 1,
    'free': 6,
}


class UnknownBodyError(KeyError):
    """A body name does not exist in the mechanism."""


def _wrap_axis(axis):
    if isinstance(axis, str):
        if axis in ['x', 'xx']:
            axis = [1, 0, 0]
        elif axis in ['y', 'yy']:
            axis = [0, 1, 0]
        elif axis in ['z', 'zz']:
            axis = [0, 0, 1]
        elif axis in ['-x']:
            axis = [-1, 0, 0]
        elif axis in ['-y']:
            axis = [0, -1, 0]
        elif axis in ['-z']:
            axis = [0, 0, -1]
        else:
            raise ValueError('axis {} is not supported'.format(axis))
    axis = np.array(axis, dtype=np.float64)
    norm = np.linalg.norm(axis)
    if norm == 0.0:
        raise ValueError('joint axis must not be a zero vector')
    return axis / norm


class Body(object):

    def __init__(self, name, mass=0.0, center_of_mass=None):
        self.name = name
        self.mass = float(mass)
        if center_of_mass is None:
            center_of_mass = np.zeros(3)
        self.center_of_mass = np.array(center_of_mass, dtype=np.float64)

    def __repr__(self):
        return '<{} "{}">'.format(self.__class__.__name__, self.name)


class Joint(object):
    """Joint connecting a parent body to a child body.

    Parameters
    ----------
    name : str
        Joint name.
    joint_type : str
        One of 'fixed', 'revolute', 'prismatic' or 'free'.
    parent : str or None
        Parent body name. None means the world.
    child : str
        Child body name.
    axis : str or list[float]
        Rotation axis of a revolute joint or translation axis of a
        prismatic joint, expressed in the joint frame.
    transform : numpy.ndarray or None
        Static 4x4 pose of the joint frame in the parent body frame.
        Identity if None.
    """

    def __init__(self, name, joint_type, parent, child, axis='z',
                 transform=None):
        if joint_type not in _joint_params:
            raise ValueError('joint type {} is not supported'.format(
                joint_type))
        self.name = name
        self.joint_type = joint_type
        self.parent = parent
        self.child = child
        self.axis = _wrap_axis(axis)
        if transform is None:
            transform = np.eye(4)
        self.transform = np.array(transform, dtype=np.float64)

    @property
    def params(self):
        """Number of entries of this joint in the parameter vector."""
        return _joint_params[self.joint_type]

    @property
    def dof(self):
        return _joint_dof[self.joint_type]

    def zero_parameters(self):
        """Parameters of the joint at its identity configuration."""
        if self.joint_type == 'free':
            return [1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]
        return [0.0] * self.params

    def __repr__(self):
        return '<{} {} "{}">'.format(
            self.__class__.__name__, self.joint_type, self.name)


class Mechanism(object):
    """Tree of bodies connected by joints.

    Joint ``i`` has body ``i`` as its child, and the parent body of joint
    ``i`` has a smaller index than ``i``. Joint 0 is attached to the world
    and is the only joint allowed to be free.

    Examples
    --------
    >>> from posegen.model import Body, Joint, Mechanism
    >>> mb = Mechanism(
    ...     [Body('base'), Body('arm', mass=1.0)],
    ...     [Joint('root', 'fixed', None, 'base'),
    ...      Joint('shoulder', 'revolute', 'base', 'arm', axis='z')])
    >>> mb.nr_params
    1
    """

    def __init__(self, bodies, joints):
        if len(bodies) != len(joints):
            raise ValueError(
                'number of bodies ({}) and joints ({}) differ'.format(
                    len(bodies), len(joints)))
        if len(bodies) == 0:
            raise ValueError('mechanism needs at least one body')
        self._bodies = list(bodies)
        self._joints = list(joints)
        self._body_index = {}
        for i, body in enumerate(self._bodies):
            if body.name in self._body_index:
                raise ValueError('duplicated body name {}'.format(body.name))
            self._body_index[body.name] = i

        self._parents = []
        for i, joint in enumerate(self._joints):
            if joint.child != self._bodies[i].name:
                raise ValueError(
                    'joint {} must have body {} as child, got {}'.format(
                        joint.name, self._bodies[i].name, joint.child))
            if joint.joint_type == 'free' and i != 0:
                raise ValueError(
                    'free joint {} is only supported as the root joint'
                    .format(joint.name))
            if joint.parent is None:
                if i != 0:
                    raise ValueError(
                        'only the root joint can be attached to the world, '
                        'got {}'.format(joint.name))
                self._parents.append(-1)
                continue
            parent_index = self.body_index_by_name(joint.parent)
            if parent_index >= i:
                raise ValueError(
                    'parent body {} of joint {} must precede its child'
                    .format(joint.parent, joint.name))
            self._parents.append(parent_index)

        self._joint_pos_in_param = []
        pos = 0
        for joint in self._joints:
            self._joint_pos_in_param.append(pos)
            pos += joint.params
        self._nr_params = pos
        logger.debug('mechanism with %d bodies and %d params',
                     len(self._bodies), self._nr_params)

    @property
    def nr_bodies(self):
        return len(self._bodies)

    @property
    def nr_joints(self):
        return len(self._joints)

    @property
    def nr_params(self):
        return self._nr_params

    @property
    def nr_dof(self):
        return sum(joint.dof for joint in self._joints)

    @property
    def parents(self):
        return self._parents

    @property
    def joint_pos_in_param(self):
        return self._joint_pos_in_param

    @property
    def bodies(self):
        return self._bodies

    @property
    def joints(self):
        return self._joints

    @property
    def is_free_base(self):
        return self._joints[0].joint_type == 'free'

    def body(self, index):
        return self._bodies[index]

    def joint(self, index):
        return self._joints[index]

    def body_index_by_name(self, name):
        """Return the index of a body.

        Raises
        ------
        UnknownBodyError
            If no body has this name.
        """
        try:
            return self._body_index[name]
        except KeyError:
            raise UnknownBodyError(
                'body {} is not in the mechanism'.format(name))

    def joints_path(self, body_index):
        """Indices of the joints from the root to ``body_index``."""
        path = []
        index = body_index
        while index != -1:
            path.append(index)
            index = self._parents[index]
        return path[::-1]

    def zero_parameters(self):
        """Joint parameter vector of the identity configuration."""
        x = []
        for joint in self._joints:
            x.extend(joint.zero_parameters())
        return np.array(x, dtype=np.float64)
