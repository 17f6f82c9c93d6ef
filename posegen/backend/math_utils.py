"""Backend-agnostic math utilities.

These helpers build rotations and homogeneous transforms with whatever
backend they are given, so the forward kinematics and inverse dynamics
written on top of them run on NumPy arrays as well as on traced JAX arrays.
"""


def rodrigues_rotation(backend, axis, angle):
    """Compute rotation matrix from axis-angle using Rodrigues' formula.

    R = I + sin(θ)K + (1-cos(θ))K²

    where K is the skew-symmetric matrix of the normalized axis.

    Parameters
    ----------
    backend : NumpyBackend or JaxBackend
        Backend to use for computation.
    axis : array, shape (3,)
        Rotation axis (will be normalized).
    angle : float or array
        Rotation angle in radians.

    Returns
    -------
    rotation : array, shape (3, 3)
        Rotation matrix.

    Examples
    --------
    >>> from posegen.backend import get_backend
    >>> from posegen.backend.math_utils import rodrigues_rotation
    >>> backend = get_backend('numpy')
    >>> axis = backend.array([0.0, 0.0, 1.0])
    >>> R = rodrigues_rotation(backend, axis, 0.5)
    """
    axis = axis / (backend.norm(axis) + 1e-10)
    K = skew_symmetric(backend, axis)
    return (backend.eye(3)
            + backend.sin(angle) * K
            + (1.0 - backend.cos(angle)) * backend.matmul(K, K))


def skew_symmetric(backend, v):
    """Create skew-symmetric matrix from a 3D vector.

    The skew-symmetric matrix [v]_× satisfies: [v]_× @ u = v × u
    """
    return backend.array([
        [0.0, -v[2], v[1]],
        [v[2], 0.0, -v[0]],
        [-v[1], v[0], 0.0]
    ])


def quaternion_to_matrix(backend, q):
    """Rotation matrix of a unit quaternion given in [w, x, y, z] order.

    Examples
    --------
    >>> from posegen.backend import get_backend
    >>> backend = get_backend('numpy')
    >>> quaternion_to_matrix(backend, [1.0, 0.0, 0.0, 0.0])
    array([[1., 0., 0.],
           [0., 1., 0.],
           [0., 0., 1.]])
    """
    q0, q1, q2, q3 = q[0], q[1], q[2], q[3]
    return backend.array([
        [q0 * q0 + q1 * q1 - q2 * q2 - q3 * q3,
         2 * (q1 * q2 - q0 * q3),
         2 * (q1 * q3 + q0 * q2)],
        [2 * (q1 * q2 + q0 * q3),
         q0 * q0 - q1 * q1 + q2 * q2 - q3 * q3,
         2 * (q2 * q3 - q0 * q1)],
        [2 * (q1 * q3 - q0 * q2),
         2 * (q2 * q3 + q0 * q1),
         q0 * q0 - q1 * q1 - q2 * q2 + q3 * q3],
    ])


def make_transform(backend, rotation, translation):
    """Assemble a 4x4 homogeneous transform from rotation and translation."""
    top = backend.concatenate(
        [rotation, backend.array(translation)[:, None]], axis=1)
    bottom = backend.array([[0.0, 0.0, 0.0, 1.0]])
    return backend.concatenate([top, bottom], axis=0)
