"""Evaluation policies of :class:`posegen.data.PostureData`.

A construct policy is called for every parameter slot read by the cache
update as ``construct(size, index, value)``, where ``index`` is the position
of the slot in a parameter vector of length ``size``. It returns the scalar
the derived quantities are computed from, and names the backend they are
computed with.
"""

from posegen.backend import get_backend


class FloatConstruct(object):
    """Plain numeric evaluation with the NumPy backend."""

    backend_name = 'numpy'

    @property
    def backend(self):
        return get_backend(self.backend_name)

    def __call__(self, size, index, value):
        return float(value)

    def __repr__(self):
        return '{}()'.format(self.__class__.__name__)


class AutoDiffConstruct(FloatConstruct):
    """Evaluation with the JAX backend.

    Slots are passed through unchanged, so calling
    :meth:`PostureData.evaluate` inside ``jax.jacfwd`` gives the derivative
    of every derived quantity with respect to the parameter vector.

    Examples
    --------
    >>> import jax
    >>> data = PostureData(mb, gravity, construct=AutoDiffConstruct())
    >>> jac = jax.jacfwd(
    ...     lambda x: data.evaluate(x).fk.body_pos_w[1][:3, 3])(x0)
    """

    backend_name = 'jax'

    def __call__(self, size, index, value):
        return value
