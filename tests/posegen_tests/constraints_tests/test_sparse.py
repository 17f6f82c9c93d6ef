import unittest

import numpy as np
import scipy.sparse
from numpy import testing

from posegen.constraints import full_jacobian_sparse
from posegen.constraints import sparse_row_entries
from posegen.model import BodyJacobian
from posegen.model.samples import branched_arm


class TestSparseAssembly(unittest.TestCase):

    def setUp(self):
        self.jac = BodyJacobian(branched_arm(), 'right')

    def test_sparse_row_entries(self):
        rows, cols, data = sparse_row_entries(
            self.jac, np.array([[1.5, -2.0]]), (1, 3))
        testing.assert_equal(rows, [1, 1])
        testing.assert_equal(cols, [3, 5])
        testing.assert_equal(data, [1.5, -2.0])

    def test_full_jacobian_sparse(self):
        row = full_jacobian_sparse(
            self.jac, np.array([[1.5, -2.0]]), (2, 6), (1, 3))
        self.assertTrue(scipy.sparse.issparse(row))
        self.assertEqual(row.shape, (2, 6))
        testing.assert_equal(row.toarray(),
                             [[0, 0, 0, 0, 0, 0],
                              [0, 0, 0, 1.5, 0, -2.0]])

    def test_overlapping_rows(self):
        left = BodyJacobian(branched_arm(), 'left')
        shape = (1, 3)
        merged = (full_jacobian_sparse(left, [[1.0, 2.0]], shape, (0, 0))
                  - full_jacobian_sparse(self.jac, [[1.0, 4.0]], shape,
                                         (0, 0)))
        testing.assert_equal(merged.toarray(), [[0.0, 2.0, -4.0]])
