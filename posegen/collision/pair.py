from logging import getLogger

import numpy as np

from posegen.collision.distance import closest_points
from posegen.collision.distance import is_supported


logger = getLogger(__name__)


class CollisionPair(object):
    """Proximity query between two hulls.

    The hulls are referenced, not copied. Each side is placed in the world
    by its own transform, identity until :meth:`set_transform` is called.

    Parameters
    ----------
    hull1 : posegen.collision.geometry.ConvexHull
        Hull of side 0, in its own frame.
    hull2 : posegen.collision.geometry.ConvexHull
        Hull of side 1, in its own frame.

    Raises
    ------
    NotImplementedError
        If the distance between the two hull types is not supported.

    Examples
    --------
    >>> pair = CollisionPair(Sphere.from_center_and_radius([0, 0, 0], 0.5),
    ...                      HalfSpace.ground_plane())
    >>> pair.set_transform(0, T)
    >>> dist, p1, p2 = pair.closest_points()
    """

    def __init__(self, hull1, hull2):
        if not is_supported(hull1, hull2):
            raise NotImplementedError(
                'Distance computation not implemented for {}-{} pair'.format(
                    type(hull1).__name__, type(hull2).__name__))
        self._hulls = (hull1, hull2)
        self._transforms = [np.eye(4), np.eye(4)]
        logger.debug('collision pair %s-%s', type(hull1).__name__,
                     type(hull2).__name__)

    @property
    def hulls(self):
        return self._hulls

    def transform(self, k):
        """World transform of side ``k``."""
        return self._transforms[k]

    def set_transform(self, k, T):
        """Set the 4x4 world transform of side ``k`` (0 or 1)."""
        if k not in (0, 1):
            raise ValueError('side must be 0 or 1, got {}'.format(k))
        self._transforms[k] = np.asarray(T, dtype=np.float64)

    def _placed(self):
        return (self._hulls[0].transform_by(self._transforms[0]),
                self._hulls[1].transform_by(self._transforms[1]))

    def closest_points(self):
        """Return ``(distance, p1, p2)`` with witness points in world frame."""
        return closest_points(*self._placed())

    def distance(self):
        """Signed distance between the placed hulls."""
        return self.closest_points()[0]
