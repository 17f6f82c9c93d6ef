"""Backend abstraction for array operations.

This module provides a unified interface for the NumPy backend (plain
numeric evaluation) and the JAX backend (automatic differentiation).

Example
-------
>>> from posegen.backend import get_backend
>>> backend = get_backend('numpy')
>>> x = backend.array([1.0, 2.0, 3.0])
>>> backend.norm(x)
3.7416573867739413
"""

from posegen.backend.numpy_backend import NumpyBackend
from posegen.backend.registry import BackendRegistry
from posegen.backend.registry import get_backend
from posegen.backend.registry import list_backends
from posegen.backend.registry import set_default_backend
from posegen.backend.registry import use_backend


BackendRegistry.register('numpy', NumpyBackend)


def _register_optional_backends():
    """Register optional backends if their dependencies are available."""
    try:
        from posegen.backend.jax_backend import JaxBackend
        BackendRegistry.register('jax', JaxBackend)
    except ImportError:
        pass


_register_optional_backends()


__all__ = [
    'BackendRegistry',
    'get_backend',
    'set_default_backend',
    'list_backends',
    'use_backend',
]
