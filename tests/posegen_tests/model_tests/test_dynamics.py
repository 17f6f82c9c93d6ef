import unittest

import numpy as np
from numpy import testing

from posegen.backend import get_backend
from posegen.model import Body
from posegen.model import forward_kinematics
from posegen.model import inverse_dynamics
from posegen.model import Joint
from posegen.model import Mechanism
from posegen.model.samples import free_flyer
from posegen.model.samples import planar_arm


class TestInverseDynamics(unittest.TestCase):

    def setUp(self):
        self.backend = get_backend('numpy')
        self.gravity = np.array([0.0, 0.0, -9.81])

    def test_pendulum(self):
        mb = Mechanism(
            [Body('base'), Body('link', mass=2.0,
                                center_of_mass=[0.5, 0.0, 0.0])],
            [Joint('root', 'fixed', None, 'base'),
             Joint('pitch', 'revolute', 'base', 'link', axis='y')])
        q = 0.3
        fk = forward_kinematics(self.backend, mb, [[], [q]])
        result = inverse_dynamics(self.backend, mb, fk, gravity=self.gravity)

        self.assertEqual(len(result.torque), 2)
        self.assertEqual(len(result.torque[0]), 0)
        # holding torque balances m * g * l * cos(q)
        testing.assert_almost_equal(
            result.torque[1], [-2.0 * 9.81 * 0.5 * np.cos(q)])
        testing.assert_almost_equal(
            result.joint_wrench[1][3:], [0.0, 0.0, 2.0 * 9.81])

    def test_vertical_slider(self):
        mb = Mechanism(
            [Body('base'), Body('carriage', mass=3.0)],
            [Joint('root', 'fixed', None, 'base'),
             Joint('lift', 'prismatic', 'base', 'carriage', axis='z')])
        fk = forward_kinematics(self.backend, mb, [[], [0.4]])
        result = inverse_dynamics(self.backend, mb, fk, gravity=self.gravity)
        testing.assert_almost_equal(result.torque[1], [3.0 * 9.81])

    def test_planar_arm_about_gravity(self):
        mb = planar_arm()
        fk = forward_kinematics(self.backend, mb, [[], [1.2]])
        result = inverse_dynamics(self.backend, mb, fk)
        testing.assert_almost_equal(result.torque[1], [0.0])

    def test_free_flyer(self):
        mb = free_flyer()
        fk = forward_kinematics(
            self.backend, mb,
            [[1.0, 0.0, 0.0, 0.0, 0.3, 0.1, 0.2], [0.0], [0.0]])
        result = inverse_dynamics(self.backend, mb, fk, gravity=self.gravity)
        total_mass = sum(body.mass for body in mb.bodies)

        self.assertEqual(len(result.torque[0]), 6)
        testing.assert_almost_equal(
            result.torque[0][3:], [0.0, 0.0, total_mass * 9.81])
        # gravity moment of the whole mechanism about the torso origin
        origin = fk.body_pos_w[0][:3, 3]
        moment = np.zeros(3)
        for i, body in enumerate(mb.bodies):
            X_0_b = fk.body_pos_w[i]
            com = X_0_b[:3, :3].dot(body.center_of_mass) + X_0_b[:3, 3]
            moment += np.cross(com - origin, body.mass * self.gravity)
        testing.assert_almost_equal(result.torque[0][:3], -moment)

    def test_body_forces(self):
        mb = Mechanism(
            [Body('base'), Body('link')],
            [Joint('root', 'fixed', None, 'base'),
             Joint('pitch', 'revolute', 'base', 'link', axis='y')])
        fk = forward_kinematics(self.backend, mb, [[], [0.0]])
        # downward unit force at (1, 0, 0) of the massless link
        body_forces = [np.zeros(6),
                       np.array([0.0, 1.0, 0.0, 0.0, 0.0, -1.0])]
        result = inverse_dynamics(self.backend, mb, fk, body_forces,
                                  gravity=self.gravity)
        testing.assert_almost_equal(result.torque[1], [-1.0])
