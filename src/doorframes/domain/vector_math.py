"""Plane and vector helpers for frame geometry.

All functions are pure and operate on plain ``(x, y, z)`` tuples in
millimetres so they can be shared by the domain engine and the in-memory
boundary-representation library.
"""

from __future__ import annotations

from math import sqrt

Vector3 = tuple[float, float, float]

# Below this length a vector is treated as zero.
EPSILON = 1.0e-6


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def subtract(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(vector: Vector3, factor: float) -> Vector3:
    return (vector[0] * factor, vector[1] * factor, vector[2] * factor)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(vector: Vector3) -> float:
    return sqrt(dot(vector, vector))


def normalize(vector: Vector3) -> Vector3:
    """Return the unit vector, or the zero vector for near-zero input."""
    size = length(vector)
    if size <= EPSILON:
        return (0.0, 0.0, 0.0)
    return (vector[0] / size, vector[1] / size, vector[2] / size)


def signed_distance(normal: Vector3, plane_point: Vector3, test_point: Vector3) -> float:
    """Signed distance from ``test_point`` to the plane through ``plane_point``.

    The normal does not need to be unit length. When it is degenerate
    (shorter than ``EPSILON``) the raw dot product is returned instead of
    dividing by zero.

    Args:
        normal: Plane normal, any length.
        plane_point: A point on the plane.
        test_point: The point to classify.

    Returns:
        Positive on the side the normal points to, negative on the other.
    """
    offset = dot(subtract(test_point, plane_point), normal)
    normal_length = length(normal)
    if normal_length <= EPSILON:
        return offset
    return offset / normal_length


def plane_basis(normal: Vector3) -> tuple[Vector3, Vector3]:
    """Build two unit vectors spanning the plane with the given normal.

    The reference axis is picked from the dominant component of the normal
    so the basis stays well defined for axis-aligned normals.

    Returns:
        Tuple ``(u, v)`` with ``v = normal x u``.
    """
    n = normalize(normal)
    if abs(n[0]) > abs(n[2]):
        u = normalize((-n[1], n[0], 0.0))
    else:
        u = normalize((0.0, -n[2], n[1]))
    if length(u) <= EPSILON:
        u = (1.0, 0.0, 0.0)
    v = normalize(cross(n, u))
    return u, v


def centroid(points: list[Vector3]) -> Vector3:
    count = len(points)
    if count == 0:
        return (0.0, 0.0, 0.0)
    return (
        sum(p[0] for p in points) / count,
        sum(p[1] for p in points) / count,
        sum(p[2] for p in points) / count,
    )


def polygon_normal(points: list[Vector3]) -> Vector3:
    """Unnormalized polygon normal by Newell's method.

    Its length is twice the polygon area, so a zero result means the
    polygon is degenerate.
    """
    nx = ny = nz = 0.0
    count = len(points)
    for index in range(count):
        x0, y0, z0 = points[index]
        x1, y1, z1 = points[(index + 1) % count]
        nx += (y0 - y1) * (z0 + z1)
        ny += (z0 - z1) * (x0 + x1)
        nz += (x0 - x1) * (y0 + y1)
    return (nx, ny, nz)
