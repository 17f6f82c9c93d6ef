"""Registry of array backends.

The kinematic cache evaluates its derived quantities through a backend so
that the same update code runs on plain NumPy arrays or on traced JAX
arrays.
"""

from contextlib import contextmanager
from typing import Dict
from typing import List
from typing import Optional
from typing import Type


class BackendRegistry:
    """Registry for managing array backends.

    Examples
    --------
    >>> from posegen.backend import get_backend, set_default_backend
    >>> backend = get_backend('numpy')
    >>> set_default_backend('numpy')
    >>> backend = get_backend()  # Now returns the NumPy backend
    """

    _backends: Dict[str, Type] = {}
    _default: Optional[str] = None
    _instance_cache: Dict[str, object] = {}

    @classmethod
    def register(cls, name: str, backend_class: Type) -> None:
        """Register a backend implementation.

        Parameters
        ----------
        name : str
            Name of the backend (e.g., 'numpy', 'jax').
        backend_class : type
            Backend class.
        """
        cls._backends[name] = backend_class

    @classmethod
    def get(cls, name: Optional[str] = None, **kwargs) -> object:
        """Get a backend instance.

        Parameters
        ----------
        name : str, optional
            Name of the backend. If None, returns the default backend.
        **kwargs
            Additional arguments passed to the backend constructor.

        Returns
        -------
        backend : NumpyBackend or JaxBackend
            Backend instance.

        Raises
        ------
        ValueError
            If the backend is not registered.
        ImportError
            If the backend's dependencies cannot be imported.
        """
        if name is None:
            name = cls._default or cls._auto_select()

        if name not in cls._backends:
            available = list(cls._backends.keys())
            raise ValueError(
                f"Unknown backend: '{name}'. "
                f"Available backends: {available}"
            )

        if not kwargs and name in cls._instance_cache:
            return cls._instance_cache[name]

        try:
            instance = cls._backends[name](**kwargs)
        except (ImportError, AttributeError, TypeError) as e:
            raise ImportError(
                f"Backend '{name}' is registered but its dependencies "
                f"are not available: {e}"
            )
        if not kwargs:
            cls._instance_cache[name] = instance
        return instance

    @classmethod
    def set_default(cls, name: str) -> None:
        """Set the default backend.

        Raises
        ------
        ValueError
            If the backend is not registered.
        """
        if name not in cls._backends:
            available = list(cls._backends.keys())
            raise ValueError(
                f"Unknown backend: '{name}'. "
                f"Available backends: {available}"
            )
        cls._default = name

    @classmethod
    def available(cls) -> List[str]:
        """Names of the registered backends whose dependencies import."""
        available = []
        for name in cls._backends:
            try:
                cls.get(name)
                available.append(name)
            except ImportError:
                pass
        return available

    @classmethod
    def _auto_select(cls) -> str:
        # Numeric evaluation is the common case, jax is opt-in.
        return 'numpy'


def get_backend(name: Optional[str] = None, **kwargs):
    """Get a backend instance.

    Parameters
    ----------
    name : str, optional
        Name of the backend ('numpy', 'jax').
        If None, returns the default backend.

    Examples
    --------
    >>> from posegen.backend import get_backend
    >>> backend = get_backend('numpy')
    >>> backend.cross(backend.array([1., 0., 0.]), backend.array([0., 1., 0.]))
    array([0., 0., 1.])
    """
    return BackendRegistry.get(name, **kwargs)


def set_default_backend(name: str) -> None:
    """Set the default backend."""
    BackendRegistry.set_default(name)


def list_backends() -> List[str]:
    """Get list of available backends.

    Examples
    --------
    >>> from posegen.backend import list_backends
    >>> list_backends()
    ['numpy', 'jax']
    """
    return BackendRegistry.available()


@contextmanager
def use_backend(name: str, **kwargs):
    """Context manager for temporarily using a different backend.

    Examples
    --------
    >>> from posegen.backend import use_backend
    >>> with use_backend('numpy') as backend:
    ...     x = backend.zeros(3)
    """
    old_default = BackendRegistry._default
    try:
        BackendRegistry.set_default(name)
        yield BackendRegistry.get(name, **kwargs)
    finally:
        BackendRegistry._default = old_default
