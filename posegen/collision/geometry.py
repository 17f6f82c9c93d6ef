"""Convex hull primitives.

Hulls are described in their own frame and placed in the world by a
:class:`posegen.collision.pair.CollisionPair`.

Example
-------
>>> import numpy as np
>>> from posegen.collision import Sphere, signed_distance
>>> s1 = Sphere(center=np.array([0.0, 0.0, 0.0]), radius=0.5)
>>> s2 = Sphere(center=np.array([2.0, 0.0, 0.0]), radius=0.5)
>>> signed_distance(s1, s2)
1.0
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class ConvexHull:
    """Base class for convex hulls."""

    def transform(self, position, rotation):
        """Return the hull moved by a rigid transform.

        Parameters
        ----------
        position : numpy.ndarray (3,)
            Translation vector.
        rotation : numpy.ndarray (3, 3)
            Rotation matrix.

        Returns
        -------
        ConvexHull
            Transformed hull.
        """
        raise NotImplementedError

    def transform_by(self, T):
        """Return the hull moved by a 4x4 homogeneous transform."""
        T = np.asarray(T, dtype=np.float64)
        return self.transform(T[:3, 3], T[:3, :3])


@dataclass
class Sphere(ConvexHull):
    """Sphere.

    Parameters
    ----------
    center : numpy.ndarray (3,)
        Center position.
    radius : float
        Radius.
    """
    center: np.ndarray
    radius: float

    def transform(self, position, rotation):
        return Sphere(center=position + rotation.dot(self.center),
                      radius=self.radius)

    @classmethod
    def from_center_and_radius(cls, center, radius):
        return cls(center=np.asarray(center, dtype=np.float64),
                   radius=float(radius))


@dataclass
class Capsule(ConvexHull):
    """Capsule, the set of points within ``radius`` of a segment.

    Parameters
    ----------
    p1 : numpy.ndarray (3,)
        First endpoint.
    p2 : numpy.ndarray (3,)
        Second endpoint.
    radius : float
        Capsule radius.
    """
    p1: np.ndarray
    p2: np.ndarray
    radius: float

    def transform(self, position, rotation):
        return Capsule(p1=position + rotation.dot(self.p1),
                       p2=position + rotation.dot(self.p2),
                       radius=self.radius)

    @property
    def height(self):
        """Distance between endpoints."""
        return np.linalg.norm(self.p2 - self.p1)

    @property
    def center(self):
        return (self.p1 + self.p2) / 2

    @classmethod
    def from_center_height_axis(cls, center, height, axis, radius):
        """Create capsule from center, height, axis and radius.

        Parameters
        ----------
        center : array-like (3,)
            Center position.
        height : float
            Distance between endpoints.
        axis : array-like (3,)
            Capsule axis direction (will be normalized).
        radius : float
            Capsule radius.

        Returns
        -------
        Capsule
            Capsule instance.
        """
        center = np.asarray(center, dtype=np.float64)
        axis = np.asarray(axis, dtype=np.float64)
        axis = axis / np.linalg.norm(axis)
        p1 = center - height / 2 * axis
        p2 = center + height / 2 * axis
        return cls(p1=p1, p2=p2, radius=float(radius))

    @classmethod
    def from_endpoints(cls, p1, p2, radius):
        return cls(p1=np.asarray(p1, dtype=np.float64),
                   p2=np.asarray(p2, dtype=np.float64),
                   radius=float(radius))


@dataclass
class Box(ConvexHull):
    """Oriented box.

    Parameters
    ----------
    center : numpy.ndarray (3,)
        Box center.
    half_extents : numpy.ndarray (3,)
        Half width, half height and half depth.
    rotation : numpy.ndarray (3, 3), optional
        Orientation of the box axes. Axis-aligned if None.
    """
    center: np.ndarray
    half_extents: np.ndarray
    rotation: Optional[np.ndarray] = None

    def transform(self, position, rotation):
        if self.rotation is not None:
            new_rotation = rotation.dot(self.rotation)
        else:
            new_rotation = rotation
        return Box(center=position + rotation.dot(self.center),
                   half_extents=self.half_extents,
                   rotation=new_rotation)

    @property
    def orientation(self):
        """Rotation matrix of the box, identity when axis-aligned."""
        if self.rotation is None:
            return np.eye(3)
        return self.rotation

    @classmethod
    def from_center_and_extents(cls, center, extents, rotation=None):
        """Create box from center and full extents.

        Parameters
        ----------
        center : array-like (3,)
            Box center.
        extents : array-like (3,)
            Full extents (width, height, depth).
        rotation : array-like (3, 3), optional
            Rotation matrix.

        Returns
        -------
        Box
            Box instance.
        """
        if rotation is not None:
            rotation = np.asarray(rotation, dtype=np.float64)
        return cls(center=np.asarray(center, dtype=np.float64),
                   half_extents=np.asarray(extents, dtype=np.float64) / 2,
                   rotation=rotation)


@dataclass
class HalfSpace(ConvexHull):
    """Half-space bounded by a plane.

    Points are inside the half-space if ``(x - point) . normal < 0``.

    Parameters
    ----------
    point : numpy.ndarray (3,)
        A point on the plane.
    normal : numpy.ndarray (3,)
        Unit outward normal of the plane.
    """
    point: np.ndarray
    normal: np.ndarray

    def transform(self, position, rotation):
        return HalfSpace(point=position + rotation.dot(self.point),
                         normal=rotation.dot(self.normal))

    @classmethod
    def from_point_and_normal(cls, point, normal):
        normal = np.asarray(normal, dtype=np.float64)
        return cls(point=np.asarray(point, dtype=np.float64),
                   normal=normal / np.linalg.norm(normal))

    @classmethod
    def ground_plane(cls, height=0.0):
        """Half-space below ``z = height``."""
        return cls(point=np.array([0.0, 0.0, height]),
                   normal=np.array([0.0, 0.0, 1.0]))
