import copy
import unittest

import numpy as np
from numpy import testing

from posegen.backend import get_backend
from posegen.model import BodyJacobian
from posegen.model import forward_kinematics
from posegen.model import UnknownBodyError
from posegen.model.kinematics import quaternion_kinematic_matrix
from posegen.model.samples import branched_arm
from posegen.model.samples import free_flyer
from posegen.model.samples import planar_arm


def jacobian_test_util(func, x0, decimal=5):
    # test jacobian by comparing the resulting and numerical jacobian
    f0, jac = func(x0)
    n_dim = len(x0)

    eps = 1e-7
    jac_numerical = np.zeros(jac.shape)
    for idx in range(n_dim):
        x1 = copy.copy(x0)
        x1[idx] += eps
        f1, _ = func(x1)
        jac_numerical[:, idx] = (f1 - f0) / eps
    testing.assert_almost_equal(jac, jac_numerical, decimal=decimal)


def split_parameters(mb, x):
    x = np.array(x, dtype=np.float64)
    if mb.is_free_base:
        x[:4] /= np.linalg.norm(x[:4])
    q = []
    for i, joint in enumerate(mb.joints):
        start = mb.joint_pos_in_param[i]
        q.append(list(x[start:start + joint.params]))
    return q


def free_flyer_parameters():
    quat = np.array([0.9, 0.1, -0.2, 0.3])
    quat /= np.linalg.norm(quat)
    return np.hstack((quat, [0.1, -0.2, 0.5], [0.4, 0.2]))


class TestForwardKinematics(unittest.TestCase):

    def setUp(self):
        self.backend = get_backend('numpy')

    def test_planar_arm(self):
        mb = planar_arm()
        fk = forward_kinematics(self.backend, mb, [[], [np.pi / 2]])
        testing.assert_almost_equal(fk.body_pos_w[0], np.eye(4))
        testing.assert_almost_equal(
            fk.body_pos_w[1][:3, :3].dot([1.0, 0.0, 0.0]), [0, 1, 0])
        testing.assert_almost_equal(fk.joint_pos_w[1], np.eye(4))
        testing.assert_almost_equal(fk.parent_to_son[1], fk.body_pos_w[1])

    def test_free_flyer(self):
        mb = free_flyer()
        x = free_flyer_parameters()
        q = split_parameters(mb, x)
        fk = forward_kinematics(self.backend, mb, q)
        testing.assert_almost_equal(fk.body_pos_w[0][:3, 3], x[4:7])

        # body poses compose along the tree
        for i in range(1, mb.nr_bodies):
            parent = mb.parents[i]
            testing.assert_almost_equal(
                fk.body_pos_w[i],
                fk.body_pos_w[parent].dot(fk.parent_to_son[i]))
            testing.assert_almost_equal(
                fk.joint_pos_w[i],
                fk.body_pos_w[parent].dot(mb.joint(i).transform))

        # the slider translates the forearm along its axis
        X_0_j = fk.joint_pos_w[2]
        testing.assert_almost_equal(
            fk.body_pos_w[2][:3, 3],
            X_0_j[:3, 3] + X_0_j[:3, :3].dot(mb.joint(2).axis) * x[8])


class TestBodyJacobian(unittest.TestCase):

    def setUp(self):
        self.backend = get_backend('numpy')

    def test_columns(self):
        mb = branched_arm()
        jac = BodyJacobian(mb, 'left')
        self.assertEqual(jac.body_index, 2)
        self.assertEqual(jac.joints_path, [0, 1, 2])
        self.assertEqual(jac.dof, 2)
        testing.assert_equal(jac.param_indices, [0, 1])
        testing.assert_equal(BodyJacobian(mb, 'right').param_indices, [0, 2])

        jac = BodyJacobian(free_flyer(), 'forearm')
        self.assertEqual(jac.dof, 9)
        testing.assert_equal(jac.param_indices, np.arange(9))

    def test_unknown_body(self):
        with self.assertRaises(UnknownBodyError):
            BodyJacobian(planar_arm(), 'head')

    def test_point(self):
        jac = BodyJacobian(planar_arm(), 'arm')
        testing.assert_equal(jac.point(), np.zeros(3))
        jac.point([1.0, 0.0, 0.0])
        testing.assert_equal(jac.point(), [1.0, 0.0, 0.0])

    def test_planar_arm(self):
        mb = planar_arm()
        jac = BodyJacobian(mb, 'arm', point=[1.0, 0.0, 0.0])
        fk = forward_kinematics(self.backend, mb, [[], [0.0]])
        testing.assert_almost_equal(
            jac.jacobian(mb, fk), [[0], [0], [1], [0], [1], [0]])

    def check_linear_jacobian(self, mb, body_name, point, x0):
        jac = BodyJacobian(mb, body_name, point=point)
        nr_params = mb.nr_params

        def func(x):
            fk = forward_kinematics(self.backend, mb, split_parameters(mb, x))
            X_0_b = fk.body_pos_w[jac.body_index]
            p = X_0_b[:3, :3].dot(point) + X_0_b[:3, 3]
            full = np.zeros((3, nr_params))
            full[:, jac.param_indices] = jac.jacobian(mb, fk)[3:]
            return p, full

        jacobian_test_util(func, x0)

    def check_angular_jacobian(self, mb, body_name, x0):
        jac = BodyJacobian(mb, body_name)
        fk = forward_kinematics(self.backend, mb, split_parameters(mb, x0))
        rot0 = fk.body_pos_w[jac.body_index][:3, :3]
        analytic = jac.jacobian(mb, fk)[:3]

        eps = 1e-7
        for col, idx in enumerate(jac.param_indices):
            x1 = copy.copy(x0)
            x1[idx] += eps
            fk1 = forward_kinematics(
                self.backend, mb, split_parameters(mb, x1))
            rot1 = fk1.body_pos_w[jac.body_index][:3, :3]
            omega = (rot1.dot(rot0.T) - np.eye(3)) / eps
            numerical = [omega[2, 1], omega[0, 2], omega[1, 0]]
            testing.assert_almost_equal(analytic[:, col], numerical,
                                        decimal=5)

    def test_linear_jacobian(self):
        self.check_linear_jacobian(
            planar_arm(), 'arm', [1.0, 0.2, 0.1], np.array([0.3]))
        mb = branched_arm()
        x0 = np.array([0.3, -0.5, 0.7])
        self.check_linear_jacobian(mb, 'left', [0.0, 0.1, 0.4], x0)
        self.check_linear_jacobian(mb, 'right', [0.2, 0.0, 0.4], x0)

    def test_free_flyer_jacobian(self):
        mb = free_flyer()
        x0 = free_flyer_parameters()
        for body_name in ['torso', 'arm', 'forearm']:
            self.check_linear_jacobian(mb, body_name, [0.1, 0.2, -0.3], x0)
            self.check_angular_jacobian(mb, body_name, x0)

    def test_quaternion_kinematic_matrix(self):
        q = np.array([0.9, 0.1, -0.2, 0.3])
        q /= np.linalg.norm(q)
        H = quaternion_kinematic_matrix(q)
        testing.assert_almost_equal(H.dot(q), np.zeros(3))
        testing.assert_almost_equal(H.dot(H.T), np.eye(3))

    def test_quaternion_norm(self):
        mb = free_flyer()
        fk = forward_kinematics(
            self.backend, mb, split_parameters(mb, free_flyer_parameters()))
        jac = BodyJacobian(mb, 'forearm', point=[0.1, 0.0, 0.0])
        unit = jac.jacobian(mb, fk).copy()
        scaled = jac.jacobian(mb, fk, quaternion_norm=2.0)
        testing.assert_almost_equal(scaled[:, :4], unit[:, :4] / 2.0)
        testing.assert_equal(scaled[:, 4:], unit[:, 4:])
