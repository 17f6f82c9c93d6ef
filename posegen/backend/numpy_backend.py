"""NumPy backend implementation.

This is the backend used for plain numeric evaluation.
"""

from typing import List
from typing import Tuple
from typing import Union

import numpy as np


class NumpyBackend:
    """NumPy backend for array operations.

    Parameters
    ----------
    dtype : numpy.dtype, optional
        Default data type for arrays. Default is float64.

    Examples
    --------
    >>> from posegen.backend.numpy_backend import NumpyBackend
    >>> backend = NumpyBackend()
    >>> backend.norm(backend.array([3.0, 4.0]))
    5.0
    """

    def __init__(self, dtype=np.float64):
        self._dtype = dtype

    @property
    def name(self) -> str:
        """Backend name."""
        return 'numpy'

    # === Array Creation ===

    def array(self, data) -> np.ndarray:
        """Convert data to numpy array."""
        return np.asarray(data, dtype=self._dtype)

    def zeros(self, shape: Union[int, Tuple[int, ...]]) -> np.ndarray:
        """Create array of zeros."""
        return np.zeros(shape, dtype=self._dtype)

    def eye(self, n: int) -> np.ndarray:
        """Create identity matrix."""
        return np.eye(n, dtype=self._dtype)

    # === Array Manipulation ===

    def concatenate(
        self,
        arrays: List[np.ndarray],
        axis: int = 0,
    ) -> np.ndarray:
        """Concatenate arrays along axis."""
        return np.concatenate(arrays, axis=axis)

    def stack(
        self,
        arrays: List[np.ndarray],
        axis: int = 0,
    ) -> np.ndarray:
        """Stack arrays along new axis."""
        return np.stack(arrays, axis=axis)

    # === Math Operations ===

    def matmul(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Matrix multiplication."""
        return np.matmul(a, b)

    def dot(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Dot product."""
        return np.dot(a, b)

    def sin(self, arr: np.ndarray) -> np.ndarray:
        """Sine."""
        return np.sin(arr)

    def cos(self, arr: np.ndarray) -> np.ndarray:
        """Cosine."""
        return np.cos(arr)

    def norm(self, arr: np.ndarray, axis=None) -> np.ndarray:
        """Vector/matrix norm."""
        return np.linalg.norm(arr, axis=axis)

    def cross(self, a: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Cross product of two 3D vectors."""
        return np.cross(a, b)
