"""Scatter a body gradient row into a sparse Jacobian."""

import numpy as np
import scipy.sparse


def sparse_row_entries(jac, row_gradient, offset):
    """Triplets of a body gradient row in the full parameter space.

    Parameters
    ----------
    jac : posegen.model.kinematics.BodyJacobian
        Jacobian helper whose ``param_indices`` give the columns of the row.
    row_gradient : numpy.ndarray (1, dof) or (dof,)
        Gradient with respect to the parameters of the joints on the body
        path.
    offset : tuple[int, int]
        Row of the output and first column of the joint parameters.

    Returns
    -------
    rows : numpy.ndarray (dof,)
    cols : numpy.ndarray (dof,)
    data : numpy.ndarray (dof,)
    """
    data = np.asarray(row_gradient, dtype=np.float64).ravel()
    row, col_offset = offset
    cols = jac.param_indices + col_offset
    rows = np.full(len(cols), row, dtype=np.int64)
    return rows, cols, data


def full_jacobian_sparse(jac, row_gradient, shape, offset):
    """Body gradient row as a sparse matrix of the full Jacobian shape.

    Examples
    --------
    >>> row = full_jacobian_sparse(body_jac, grad, (1, data.pb_size), (0, 0))
    >>> row.toarray()
    """
    rows, cols, data = sparse_row_entries(jac, row_gradient, offset)
    return scipy.sparse.csr_matrix((data, (rows, cols)), shape=shape)
