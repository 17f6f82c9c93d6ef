"""JAX backend implementation.

Arrays are JAX arrays, so every computation written against this backend
can be differentiated with ``jax.jacfwd``.
"""

import os
import platform
from typing import List
from typing import Tuple
from typing import Union


# Ensure CPU backend on Mac before JAX imports
if platform.system() == 'Darwin':
    if 'JAX_PLATFORMS' not in os.environ:
        os.environ['JAX_PLATFORMS'] = 'cpu'

# Lazy import JAX to avoid import errors when JAX is not installed
_jax = None
_jnp = None


def _ensure_jax():
    """Ensure JAX is imported."""
    global _jax, _jnp
    if _jax is None:
        import jax
        import jax.numpy as jnp

        _jax = jax
        _jnp = jnp

        jax.config.update("jax_enable_x64", True)


class JaxBackend:
    """JAX backend for differentiable array operations.

    Parameters
    ----------
    enable_x64 : bool
        Enable 64-bit floating point precision. Default is True.
    """

    def __init__(self, enable_x64: bool = True):
        _ensure_jax()
        if enable_x64:
            _jax.config.update("jax_enable_x64", True)

    @property
    def name(self) -> str:
        """Backend name."""
        return 'jax'

    # === Array Creation ===

    def array(self, data):
        """Convert data to JAX array."""
        return _jnp.asarray(data)

    def zeros(self, shape: Union[int, Tuple[int, ...]]):
        """Create array of zeros."""
        return _jnp.zeros(shape)

    def eye(self, n: int):
        """Create identity matrix."""
        return _jnp.eye(n)

    # === Array Manipulation ===

    def concatenate(self, arrays: List, axis: int = 0):
        """Concatenate arrays along axis."""
        return _jnp.concatenate(arrays, axis=axis)

    def stack(self, arrays: List, axis: int = 0):
        """Stack arrays along new axis."""
        return _jnp.stack(arrays, axis=axis)

    # === Math Operations ===

    def matmul(self, a, b):
        """Matrix multiplication."""
        return _jnp.matmul(a, b)

    def dot(self, a, b):
        """Dot product."""
        return _jnp.dot(a, b)

    def sin(self, arr):
        """Sine."""
        return _jnp.sin(arr)

    def cos(self, arr):
        """Cosine."""
        return _jnp.cos(arr)

    def norm(self, arr, axis=None):
        """Vector/matrix norm."""
        return _jnp.linalg.norm(arr, axis=axis)

    def cross(self, a, b):
        """Cross product of two 3D vectors."""
        return _jnp.cross(a, b)
