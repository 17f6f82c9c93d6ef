"""Signed distance and witness points between convex hulls.

Every function returns ``(distance, p1, p2)`` where ``distance`` is
negative when the hulls overlap and positive when they are separated, and
``p1``, ``p2`` are the witness points on the first and second hull. They
satisfy ``p1 - p2 = -distance * n`` with ``n`` the unit normal pointing
from the first hull towards the second one.

Example
-------
>>> import numpy as np
>>> from posegen.collision import Sphere, closest_points
>>> s1 = Sphere(center=np.array([0.0, 0.0, 0.0]), radius=0.5)
>>> s2 = Sphere(center=np.array([2.0, 0.0, 0.0]), radius=0.5)
>>> dist, p1, p2 = closest_points(s1, s2)  # 1.0, [0.5, 0, 0], [1.5, 0, 0]
"""

import numpy as np

from posegen.collision.geometry import Box
from posegen.collision.geometry import Capsule
from posegen.collision.geometry import HalfSpace
from posegen.collision.geometry import Sphere


_eps = 1e-12


def _closest_segment_point(a, b, point):
    segment = b - a
    length_sq = segment.dot(segment)
    if length_sq <= _eps:
        return a
    t = np.clip((point - a).dot(segment) / length_sq, 0.0, 1.0)
    return a + t * segment


def _closest_segment_segment(p1, q1, p2, q2):
    d1 = q1 - p1
    d2 = q2 - p2
    r = p1 - p2
    a = d1.dot(d1)
    e = d2.dot(d2)
    f = d2.dot(r)
    if a <= _eps and e <= _eps:
        return p1, p2
    if a <= _eps:
        return p1, p2 + np.clip(f / e, 0.0, 1.0) * d2
    c = d1.dot(r)
    if e <= _eps:
        return p1 + np.clip(-c / a, 0.0, 1.0) * d1, p2

    b = d1.dot(d2)
    denom = a * e - b * b
    # parallel segments: any s works, pick the start of segment 1
    s = np.clip((b * f - c * e) / denom, 0.0, 1.0) if denom > _eps else 0.0
    t = (b * s + f) / e
    if t < 0.0:
        t = 0.0
        s = np.clip(-c / a, 0.0, 1.0)
    elif t > 1.0:
        t = 1.0
        s = np.clip((b - c) / a, 0.0, 1.0)
    return p1 + s * d1, p2 + t * d2


def _point_point(c1, r1, c2, r2):
    diff = c2 - c1
    norm = np.linalg.norm(diff)
    if norm <= _eps:
        normal = np.array([0.0, 0.0, 1.0])
    else:
        normal = diff / norm
    return norm - r1 - r2, c1 + r1 * normal, c2 - r2 * normal


def sphere_sphere_closest_points(s1, s2):
    """Closest points between two spheres.

    Parameters
    ----------
    s1 : Sphere
        First sphere.
    s2 : Sphere
        Second sphere.

    Returns
    -------
    tuple
        ``(distance, p1, p2)``.
    """
    return _point_point(s1.center, s1.radius, s2.center, s2.radius)


def sphere_capsule_closest_points(sphere, capsule):
    closest = _closest_segment_point(capsule.p1, capsule.p2, sphere.center)
    return _point_point(
        sphere.center, sphere.radius, closest, capsule.radius)


def capsule_capsule_closest_points(c1, c2):
    closest1, closest2 = _closest_segment_segment(c1.p1, c1.p2, c2.p1, c2.p2)
    return _point_point(closest1, c1.radius, closest2, c2.radius)


def sphere_box_closest_points(sphere, box):
    """Closest points between a sphere and a box.

    When the center of the sphere is inside the box, the penetration is
    measured to the nearest face of the box.
    """
    rotation = box.orientation
    center = rotation.T.dot(sphere.center - box.center)
    half = box.half_extents

    if np.any(np.abs(center) > half):
        closest = np.clip(center, -half, half)
        diff = closest - center
        norm = np.linalg.norm(diff)
        normal = diff / norm
        dist = norm - sphere.radius
        p1 = center + sphere.radius * normal
        p2 = closest
    else:
        face_dists = half - np.abs(center)
        k = int(np.argmin(face_dists))
        outward = np.zeros(3)
        outward[k] = 1.0 if center[k] >= 0.0 else -1.0
        dist = -face_dists[k] - sphere.radius
        p1 = center - sphere.radius * outward
        p2 = center.copy()
        p2[k] = outward[k] * half[k]
    return (dist,
            box.center + rotation.dot(p1),
            box.center + rotation.dot(p2))


def sphere_halfspace_closest_points(sphere, halfspace):
    return _point_halfspace(sphere.center, sphere.radius, halfspace)


def capsule_halfspace_closest_points(capsule, halfspace):
    h1 = (capsule.p1 - halfspace.point).dot(halfspace.normal)
    h2 = (capsule.p2 - halfspace.point).dot(halfspace.normal)
    lowest = capsule.p1 if h1 <= h2 else capsule.p2
    return _point_halfspace(lowest, capsule.radius, halfspace)


def box_halfspace_closest_points(box, halfspace):
    signs = np.array([
        [-1, -1, -1],
        [-1, -1, +1],
        [-1, +1, -1],
        [-1, +1, +1],
        [+1, -1, -1],
        [+1, -1, +1],
        [+1, +1, -1],
        [+1, +1, +1],
    ])
    corners = box.center + (box.half_extents * signs).dot(box.orientation.T)
    heights = (corners - halfspace.point).dot(halfspace.normal)
    k = int(np.argmin(heights))
    return _point_halfspace(corners[k], 0.0, halfspace)


def _point_halfspace(center, radius, halfspace):
    height = (center - halfspace.point).dot(halfspace.normal)
    return (height - radius,
            center - radius * halfspace.normal,
            center - height * halfspace.normal)


_closest_points_functions = {
    (Sphere, Sphere): sphere_sphere_closest_points,
    (Sphere, Capsule): sphere_capsule_closest_points,
    (Capsule, Capsule): capsule_capsule_closest_points,
    (Sphere, Box): sphere_box_closest_points,
    (Sphere, HalfSpace): sphere_halfspace_closest_points,
    (Capsule, HalfSpace): capsule_halfspace_closest_points,
    (Box, HalfSpace): box_halfspace_closest_points,
}


def _lookup(geom1, geom2):
    func = _closest_points_functions.get((type(geom1), type(geom2)))
    if func is not None:
        return func, False
    func = _closest_points_functions.get((type(geom2), type(geom1)))
    if func is not None:
        return func, True
    return None, False


def is_supported(geom1, geom2):
    """Return True if the distance between the two hulls can be computed."""
    func, _ = _lookup(geom1, geom2)
    return func is not None


def closest_points(geom1, geom2):
    """Compute signed distance and witness points between two hulls.

    Parameters
    ----------
    geom1 : ConvexHull
        First hull, in world frame.
    geom2 : ConvexHull
        Second hull, in world frame.

    Returns
    -------
    distance : float
        Signed distance. Positive = separated, negative = penetrating.
    p1 : numpy.ndarray (3,)
        Witness point on ``geom1``.
    p2 : numpy.ndarray (3,)
        Witness point on ``geom2``.

    Raises
    ------
    NotImplementedError
        If the hull pair is not supported.
    """
    func, swapped = _lookup(geom1, geom2)
    if func is None:
        raise NotImplementedError(
            'Distance computation not implemented for {}-{} pair'.format(
                type(geom1).__name__, type(geom2).__name__))
    if swapped:
        dist, p2, p1 = func(geom2, geom1)
    else:
        dist, p1, p2 = func(geom1, geom2)
    return float(dist), p1, p2


def signed_distance(geom1, geom2):
    """Compute signed distance between two hulls.

    Positive = separated, negative = penetrating.
    """
    return closest_points(geom1, geom2)[0]
