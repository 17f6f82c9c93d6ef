import unittest

import numpy as np
import scipy.optimize
import scipy.sparse
from numpy import testing

from posegen.constraints import as_nonlinear_constraint
from posegen.constraints import DifferentiableSparseFunction
from posegen.constraints import scipinize
from posegen.data import SizeMismatchError


class Product(DifferentiableSparseFunction):

    def __init__(self):
        super(Product, self).__init__(3, 2, 'product')
        self.nr_non_zero = 3

    def impl_compute(self, x):
        return [x[0] * x[0], x[1] * x[2]]

    def impl_jacobian(self, x):
        return scipy.sparse.coo_matrix(
            ([2 * x[0], x[2], x[1]], ([0, 1, 1], [0, 1, 2])), shape=(2, 3))


class WrongShape(DifferentiableSparseFunction):

    def __init__(self):
        super(WrongShape, self).__init__(3, 2)

    def impl_compute(self, x):
        return [0.0]

    def impl_jacobian(self, x):
        return scipy.sparse.csr_matrix((1, 3))


class TestDifferentiableSparseFunction(unittest.TestCase):

    def test_contract(self):
        func = Product()
        x = np.array([2.0, 3.0, 4.0])
        self.assertEqual(func.input_size, 3)
        self.assertEqual(func.output_size, 2)
        self.assertEqual(func.nr_non_zero, 3)
        self.assertEqual(func.name, 'product')
        testing.assert_equal(func.compute(x), [4.0, 12.0])
        testing.assert_equal(func(x), [4.0, 12.0])

        jac = func.jacobian(x)
        self.assertIsInstance(jac, scipy.sparse.csr_matrix)
        testing.assert_equal(jac.toarray(), [[4, 0, 0], [0, 4, 3]])
        testing.assert_equal(func.gradient(x, 1), [0, 4, 3])

        value, jac = func.value_and_jacobian(x)
        testing.assert_equal(value, [4.0, 12.0])
        self.assertEqual(jac.shape, (2, 3))

    def test_shape_check(self):
        func = WrongShape()
        self.assertEqual(func.name, 'WrongShape')
        with self.assertRaises(ValueError):
            func.compute(np.zeros(3))
        with self.assertRaises(ValueError):
            func.jacobian(np.zeros(3))

    def test_input_size(self):
        func = Product()
        with self.assertRaises(SizeMismatchError):
            func.compute(np.zeros(2))
        with self.assertRaises(SizeMismatchError):
            func.jacobian(np.zeros(4))
        with self.assertRaises(ValueError):
            func.gradient(np.zeros((3, 1)), 0)

    def test_not_implemented(self):
        func = DifferentiableSparseFunction(1, 1)
        with self.assertRaises(NotImplementedError):
            func.compute(np.zeros(1))


class TestScipyAdapters(unittest.TestCase):

    def test_scipinize(self):
        func = Product()
        f, jac = scipinize(func.value_and_jacobian)
        x = np.array([1.0, 2.0, 3.0])
        testing.assert_equal(f(x), [1.0, 6.0])
        testing.assert_equal(jac(x).toarray(), [[2, 0, 0], [0, 3, 2]])

    def test_nonlinear_constraint(self):
        func = Product()
        constraint = as_nonlinear_constraint(func, lb=1.0)
        self.assertIsInstance(constraint, scipy.optimize.NonlinearConstraint)
        x = np.array([1.0, 2.0, 3.0])
        testing.assert_equal(constraint.fun(x), [1.0, 6.0])
        testing.assert_equal(constraint.jac(x).toarray(),
                             [[2, 0, 0], [0, 3, 2]])
        self.assertEqual(constraint.lb, 1.0)
        self.assertEqual(constraint.ub, np.inf)
