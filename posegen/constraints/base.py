from logging import getLogger

import numpy as np
import scipy.optimize

from posegen.data import SizeMismatchError


logger = getLogger(__name__)


def scipinize(fun):
    """Scipinize a function returning both f and jac

    For the detail this issue may help:
    https://github.com/scipy/scipy/issues/12692

    Parameters
    ----------
    fun: function
        function maps numpy.ndarray(n_dim,) to tuple[numpy.ndarray(m_dim,),
        jacobian(m_dim, n_dim)], where the returned tuples is
        composed of function value(vector) and the corresponding jacobian.
    Returns
    -------
    fun_scipinized : function
        function maps numpy.ndarray(n_dim,) to a value numpy.ndarray(m_dim,).
    fun_scipinized_jac : function
        function maps numpy.ndarray(n_dim,) to the jacobian computed by
        the last call of ``fun_scipinized``.
    """

    closure_member = {'jac_cache': None}

    def fun_scipinized(x):
        f, jac = fun(x)
        closure_member['jac_cache'] = jac
        return f

    def fun_scipinized_jac(x):
        return closure_member['jac_cache']
    return fun_scipinized, fun_scipinized_jac


class DifferentiableSparseFunction(object):
    """Vector function with a sparse Jacobian.

    Subclasses implement :meth:`impl_compute` and :meth:`impl_jacobian`.

    Parameters
    ----------
    input_size : int
        Size of the parameter vector.
    output_size : int
        Number of function values.
    name : str
        Function name.
    """

    def __init__(self, input_size, output_size, name=None):
        self._input_size = input_size
        self._output_size = output_size
        if name is None:
            name = self.__class__.__name__
        self.name = name
        self._nr_non_zero = 0

    @property
    def input_size(self):
        return self._input_size

    @property
    def output_size(self):
        return self._output_size

    @property
    def nr_non_zero(self):
        """Upper bound of the number of nonzeros of the Jacobian."""
        return self._nr_non_zero

    @nr_non_zero.setter
    def nr_non_zero(self, value):
        self._nr_non_zero = value

    def compute(self, x):
        """Evaluate the function.

        Returns
        -------
        value : numpy.ndarray (output_size,)
            Function values.

        Raises
        ------
        posegen.data.SizeMismatchError
            If ``len(x) != input_size``, e.g. for a function built before
            the size of its parameter vector changed.
        """
        self._check_input(x)
        value = np.asarray(self.impl_compute(x), dtype=np.float64)
        if value.shape != (self._output_size,):
            raise ValueError(
                '{} returned shape {}, expected ({},)'.format(
                    self.name, value.shape, self._output_size))
        return value

    def __call__(self, x):
        return self.compute(x)

    def jacobian(self, x):
        """Evaluate the Jacobian.

        Returns
        -------
        jac : scipy.sparse.csr_matrix (output_size, input_size)
            Jacobian.
        """
        self._check_input(x)
        jac = self.impl_jacobian(x).tocsr()
        if jac.shape != (self._output_size, self._input_size):
            raise ValueError(
                '{} returned jacobian shape {}, expected {}'.format(
                    self.name, jac.shape,
                    (self._output_size, self._input_size)))
        return jac

    def _check_input(self, x):
        if np.shape(x) != (self._input_size,):
            raise SizeMismatchError(
                '{} expects a parameter vector of size {}, got shape {}'
                .format(self.name, self._input_size, np.shape(x)))

    def gradient(self, x, function_id):
        """Dense gradient of one function value."""
        return self.jacobian(x)[function_id].toarray().ravel()

    def value_and_jacobian(self, x):
        return self.compute(x), self.jacobian(x)

    def impl_compute(self, x):
        raise NotImplementedError

    def impl_jacobian(self, x):
        raise NotImplementedError

    def __repr__(self):
        return '<{} "{}" {} -> {}>'.format(
            self.__class__.__name__, self.name, self._input_size,
            self._output_size)


def as_nonlinear_constraint(function, lb=0.0, ub=np.inf):
    """Wrap a function as a ``scipy.optimize.NonlinearConstraint``.

    Parameters
    ----------
    function : DifferentiableSparseFunction
        Constraint function.
    lb : float or numpy.ndarray
        Lower bound of the function values.
    ub : float or numpy.ndarray
        Upper bound of the function values.

    Returns
    -------
    constraint : scipy.optimize.NonlinearConstraint
        Constraint usable with ``scipy.optimize.minimize``
        (``method='trust-constr'``).
    """
    logger.debug('nonlinear constraint from %s', function.name)
    return scipy.optimize.NonlinearConstraint(
        function.compute, lb, ub, jac=function.jacobian)
