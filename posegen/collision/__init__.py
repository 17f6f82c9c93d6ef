"""Convex hulls and proximity queries.

Hull Primitives
---------------
- Sphere, Capsule, Box (oriented), HalfSpace

Distance Functions
------------------
- closest_points: signed distance and witness points, dispatched on the
  hull types
- signed_distance: signed distance only
- is_supported: whether a hull combination can be queried

Pair Handle
-----------
- CollisionPair: two hulls placed by their own world transforms

Example
-------
>>> from posegen.collision import Sphere, signed_distance
>>> import numpy as np
>>> s1 = Sphere(center=np.array([0.0, 0.0, 0.0]), radius=0.5)
>>> s2 = Sphere(center=np.array([2.0, 0.0, 0.0]), radius=0.5)
>>> dist = signed_distance(s1, s2)  # returns 1.0
"""

from posegen.collision.distance import box_halfspace_closest_points
from posegen.collision.distance import capsule_capsule_closest_points
from posegen.collision.distance import capsule_halfspace_closest_points
from posegen.collision.distance import closest_points
from posegen.collision.distance import is_supported
from posegen.collision.distance import signed_distance
from posegen.collision.distance import sphere_box_closest_points
from posegen.collision.distance import sphere_capsule_closest_points
from posegen.collision.distance import sphere_halfspace_closest_points
from posegen.collision.distance import sphere_sphere_closest_points
from posegen.collision.geometry import Box
from posegen.collision.geometry import Capsule
from posegen.collision.geometry import ConvexHull
from posegen.collision.geometry import HalfSpace
from posegen.collision.geometry import Sphere
from posegen.collision.pair import CollisionPair


__all__ = [
    # Hull primitives
    'ConvexHull',
    'Sphere',
    'Capsule',
    'Box',
    'HalfSpace',
    # Distance functions
    'closest_points',
    'signed_distance',
    'is_supported',
    'sphere_sphere_closest_points',
    'sphere_capsule_closest_points',
    'capsule_capsule_closest_points',
    'sphere_box_closest_points',
    'sphere_halfspace_closest_points',
    'capsule_halfspace_closest_points',
    'box_halfspace_closest_points',
    # Pair handle
    'CollisionPair',
]
