"""Small mechanisms used by the examples and the tests."""

import numpy as np

from posegen.model.mechanism import Body
from posegen.model.mechanism import Joint
from posegen.model.mechanism import Mechanism


def _translation(x, y, z):
    T = np.eye(4)
    T[:3, 3] = [x, y, z]
    return T


def planar_arm():
    """Fixed base carrying one link rotating about z.

    The rotation axis goes through the world origin.
    """
    bodies = [
        Body('base', mass=1.0),
        Body('arm', mass=1.0, center_of_mass=[0.5, 0.0, 0.0]),
    ]
    joints = [
        Joint('root', 'fixed', None, 'base'),
        Joint('shoulder', 'revolute', 'base', 'arm', axis='z'),
    ]
    return Mechanism(bodies, joints)


def free_flyer():
    """Floating torso carrying an arm with a revolute and a prismatic joint.
    """
    rot = np.array([[0.0, -1.0, 0.0],
                    [1.0, 0.0, 0.0],
                    [0.0, 0.0, 1.0]])
    elbow = _translation(0.5, 0.0, 0.0)
    elbow[:3, :3] = rot
    bodies = [
        Body('torso', mass=2.0, center_of_mass=[0.0, 0.0, 0.1]),
        Body('arm', mass=1.0, center_of_mass=[0.3, 0.0, 0.0]),
        Body('forearm', mass=0.5, center_of_mass=[0.1, 0.0, 0.0]),
    ]
    joints = [
        Joint('root', 'free', None, 'torso'),
        Joint('shoulder', 'revolute', 'torso', 'arm', axis='y',
              transform=_translation(0.2, 0.0, 0.3)),
        Joint('slider', 'prismatic', 'arm', 'forearm', axis=[1.0, 1.0, 0.0],
              transform=elbow),
    ]
    return Mechanism(bodies, joints)


def branched_arm():
    """Fixed base, a rotating trunk and two arms sharing it."""
    bodies = [
        Body('base', mass=1.0),
        Body('trunk', mass=1.0, center_of_mass=[0.0, 0.0, 0.2]),
        Body('left', mass=0.5, center_of_mass=[0.0, 0.0, 0.3]),
        Body('right', mass=0.5, center_of_mass=[0.0, 0.0, 0.3]),
    ]
    joints = [
        Joint('root', 'fixed', None, 'base'),
        Joint('waist', 'revolute', 'base', 'trunk', axis='z',
              transform=_translation(0.0, 0.0, 0.2)),
        Joint('left_shoulder', 'revolute', 'trunk', 'left', axis='x',
              transform=_translation(0.0, 0.3, 0.5)),
        Joint('right_shoulder', 'revolute', 'trunk', 'right', axis='-x',
              transform=_translation(0.0, -0.3, 0.5)),
    ]
    return Mechanism(bodies, joints)
