"""Tests for posegen.backend module."""

import unittest

import numpy as np
from numpy import testing

from posegen.backend import get_backend
from posegen.backend import list_backends
from posegen.backend import use_backend
from posegen.backend.math_utils import make_transform
from posegen.backend.math_utils import quaternion_to_matrix
from posegen.backend.math_utils import rodrigues_rotation
from posegen.backend.math_utils import skew_symmetric
from posegen.backend.registry import BackendRegistry
from posegen.pycompat import HAS_JAX


def requires_jax(test_func):
    """Decorator to skip tests if JAX is not available."""
    return unittest.skipUnless(HAS_JAX, "JAX not available")(test_func)


class TestBackendRegistry(unittest.TestCase):

    def test_numpy_backend(self):
        backend = get_backend('numpy')
        self.assertEqual(backend.name, 'numpy')
        self.assertIs(backend, get_backend('numpy'))

    def test_default_backend_is_numpy(self):
        self.assertEqual(get_backend().name, 'numpy')

    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            get_backend('torch')
        with self.assertRaises(ValueError):
            BackendRegistry.set_default('torch')

    def test_list_backends(self):
        self.assertIn('numpy', list_backends())

    def test_use_backend_restores_default(self):
        old_default = BackendRegistry._default
        with use_backend('numpy') as backend:
            self.assertEqual(backend.name, 'numpy')
            self.assertEqual(BackendRegistry._default, 'numpy')
        self.assertEqual(BackendRegistry._default, old_default)

    @requires_jax
    def test_jax_backend(self):
        backend = get_backend('jax')
        self.assertEqual(backend.name, 'jax')
        self.assertIn('jax', list_backends())


class TestMathUtils(unittest.TestCase):

    def setUp(self):
        self.backend = get_backend('numpy')

    def test_rodrigues_rotation(self):
        rot = rodrigues_rotation(
            self.backend, self.backend.array([0.0, 0.0, 1.0]), np.pi / 2)
        testing.assert_almost_equal(rot.dot([1.0, 0.0, 0.0]), [0, 1, 0])

    def test_skew_symmetric(self):
        v = np.array([0.1, -0.4, 0.7])
        u = np.array([1.0, 2.0, -3.0])
        testing.assert_almost_equal(
            skew_symmetric(self.backend, v).dot(u), np.cross(v, u))

    def test_quaternion_to_matrix(self):
        testing.assert_almost_equal(
            quaternion_to_matrix(self.backend, [1.0, 0.0, 0.0, 0.0]),
            np.eye(3))
        angle = 0.8
        q = [np.cos(angle / 2), np.sin(angle / 2), 0.0, 0.0]
        testing.assert_almost_equal(
            quaternion_to_matrix(self.backend, q),
            rodrigues_rotation(
                self.backend, self.backend.array([1.0, 0.0, 0.0]), angle))

    def test_make_transform(self):
        rot = rodrigues_rotation(
            self.backend, self.backend.array([0.0, 1.0, 0.0]), 0.4)
        T = make_transform(self.backend, rot, [1.0, 2.0, 3.0])
        self.assertEqual(T.shape, (4, 4))
        testing.assert_equal(T[:3, :3], rot)
        testing.assert_equal(T[:3, 3], [1.0, 2.0, 3.0])
        testing.assert_equal(T[3], [0.0, 0.0, 0.0, 1.0])
