"""In-memory boundary representation: vertices, edges, faces, solids.

A ``BrepSolid`` plays the role of a host CAD group: it owns planar faces
bounded by ordered vertex loops, the edges between them, a translation that
places it in the document, and attribute dictionaries for metadata.

Vertices are merged by position, so faces added with shared corner points
share topology. Geometry is stored in local coordinates; ``bounds`` reports
world coordinates with the translation applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from doorframes.contracts.errors import DegenerateFaceError, GeometryError
from doorframes.domain.vector_math import (
    EPSILON,
    Vector3,
    add,
    cross,
    dot,
    length,
    normalize,
    plane_basis,
    polygon_normal,
    scale,
    signed_distance,
    subtract,
)

logger = logging.getLogger(__name__)

# Points closer than this share a vertex.
MERGE_TOLERANCE_MM = 1.0e-6
# Vertices within this distance of a plane are classified as on it.
PLANE_TOLERANCE_MM = 1.0e-6
# Largest distance of a face point from the face plane.
COPLANAR_TOLERANCE_MM = 1.0e-3


class BrepVertex:
    """A vertex identified by object identity."""

    __slots__ = ("position",)

    def __init__(self, position: Vector3) -> None:
        self.position = position

    def __repr__(self) -> str:
        x, y, z = self.position
        return f"BrepVertex({x:.4f}, {y:.4f}, {z:.4f})"


class BrepEdge:
    """An edge between two vertices plus the faces bounded by it."""

    __slots__ = ("start", "end", "faces")

    def __init__(self, start: BrepVertex, end: BrepVertex) -> None:
        self.start = start
        self.end = end
        self.faces: list[BrepFace] = []

    @property
    def vertices(self) -> tuple[BrepVertex, BrepVertex]:
        return (self.start, self.end)

    def other_vertex(self, vertex: BrepVertex) -> BrepVertex:
        return self.end if vertex is self.start else self.start

    def __repr__(self) -> str:
        return f"BrepEdge({self.start!r} -> {self.end!r}, faces={len(self.faces)})"


class BrepFace:
    """A planar face bounded by a single counter-clockwise vertex loop."""

    __slots__ = ("vertices", "material")

    def __init__(self, vertices: list[BrepVertex], material: Any = None) -> None:
        self.vertices = vertices
        self.material = material

    @property
    def positions(self) -> list[Vector3]:
        return [vertex.position for vertex in self.vertices]

    @property
    def normal(self) -> Vector3:
        """Unit outward normal following the right-hand rule on the loop."""
        return normalize(polygon_normal(self.positions))

    @property
    def area(self) -> float:
        return length(polygon_normal(self.positions)) / 2.0

    def reverse(self) -> None:
        self.vertices.reverse()

    def __repr__(self) -> str:
        return f"BrepFace({len(self.vertices)} vertices, normal={self.normal})"


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box."""

    minimum: Vector3
    maximum: Vector3

    @property
    def size(self) -> Vector3:
        return subtract(self.maximum, self.minimum)

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def depth(self) -> float:
        return self.size[1]

    @property
    def height(self) -> float:
        return self.size[2]

    @property
    def diagonal(self) -> float:
        return length(self.size)

    @property
    def center(self) -> Vector3:
        return scale(add(self.minimum, self.maximum), 0.5)

    @classmethod
    def from_points(cls, points: Sequence[Vector3]) -> Bounds:
        if not points:
            return cls((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        return cls(
            (
                min(p[0] for p in points),
                min(p[1] for p in points),
                min(p[2] for p in points),
            ),
            (
                max(p[0] for p in points),
                max(p[1] for p in points),
                max(p[2] for p in points),
            ),
        )

    def union(self, other: Bounds) -> Bounds:
        return Bounds.from_points([self.minimum, self.maximum, other.minimum, other.maximum])


def point_in_polygon(point: Vector3, polygon: Sequence[Vector3], normal: Vector3) -> bool:
    """Even-odd test of a point against a planar polygon, after projection."""
    u, v = plane_basis(normal)
    origin = polygon[0]

    def project(p: Vector3) -> tuple[float, float]:
        offset = subtract(p, origin)
        return dot(offset, u), dot(offset, v)

    px, py = project(point)
    projected = [project(p) for p in polygon]
    inside = False
    count = len(projected)
    for index in range(count):
        x0, y0 = projected[index]
        x1, y1 = projected[(index + 1) % count]
        if (y0 > py) != (y1 > py):
            crossing = x0 + (py - y0) * (x1 - x0) / (y1 - y0)
            if px < crossing:
                inside = not inside
    return inside


class BrepSolid:
    """A group of faces and edges placed in a document by a translation.

    Attributes:
        name: Display name.
        tag: Layer/tag the solid is assigned to.
        material: Material applied to the solid as a whole.
        translation: Offset from local to world coordinates.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.tag: str | None = None
        self.material: Any = None
        self.translation: Vector3 = (0.0, 0.0, 0.0)
        self._attributes: dict[str, dict[str, Any]] = {}
        self._vertices: list[BrepVertex] = []
        self._edges: dict[frozenset[BrepVertex], BrepEdge] = {}
        self._faces: list[BrepFace] = []
        self._erased = False

    def __repr__(self) -> str:
        return (
            f"BrepSolid(name={self.name!r}, faces={len(self._faces)}, "
            f"edges={len(self._edges)})"
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def faces(self) -> list[BrepFace]:
        return list(self._faces)

    @property
    def edges(self) -> list[BrepEdge]:
        return list(self._edges.values())

    @property
    def vertices(self) -> list[BrepVertex]:
        return list(self._vertices)

    def face_edges(self, face: BrepFace) -> list[BrepEdge]:
        loop = face.vertices
        return [
            self._edges[frozenset((loop[index], loop[(index + 1) % len(loop)]))]
            for index in range(len(loop))
        ]

    def to_world(self, point: Vector3) -> Vector3:
        return add(point, self.translation)

    @property
    def local_bounds(self) -> Bounds:
        return Bounds.from_points([vertex.position for vertex in self._vertices])

    @property
    def bounds(self) -> Bounds:
        return Bounds.from_points(
            [self.to_world(vertex.position) for vertex in self._vertices]
        )

    @property
    def volume(self) -> float:
        """Enclosed volume by the divergence theorem over fan triangles."""
        total = 0.0
        for face in self._faces:
            points = face.positions
            for index in range(1, len(points) - 1):
                total += dot(points[0], cross(points[index], points[index + 1]))
        return total / 6.0

    def is_valid(self) -> bool:
        return not self._erased

    def is_manifold(self) -> bool:
        """True when every edge borders exactly two faces."""
        if len(self._faces) < 4:
            return False
        return all(len(edge.faces) == 2 for edge in self._edges.values())

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def attribute_dictionary(self, name: str) -> dict[str, Any] | None:
        return self._attributes.get(name)

    def set_attribute(self, dictionary: str, key: str, value: Any) -> None:
        self._attributes.setdefault(dictionary, {})[key] = value

    def get_attribute(self, dictionary: str, key: str, default: Any = None) -> Any:
        return self._attributes.get(dictionary, {}).get(key, default)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def vertex_at(self, position: Vector3) -> BrepVertex:
        """Return the vertex at ``position``, creating it when missing."""
        for vertex in self._vertices:
            if length(subtract(vertex.position, position)) <= MERGE_TOLERANCE_MM:
                return vertex
        vertex = BrepVertex((float(position[0]), float(position[1]), float(position[2])))
        self._vertices.append(vertex)
        return vertex

    def _edge_between(self, start: BrepVertex, end: BrepVertex) -> BrepEdge:
        key = frozenset((start, end))
        edge = self._edges.get(key)
        if edge is None:
            edge = BrepEdge(start, end)
            self._edges[key] = edge
        return edge

    def add_edge(self, start: Vector3, end: Vector3) -> BrepEdge:
        first = self.vertex_at(start)
        second = self.vertex_at(end)
        if first is second:
            raise GeometryError("Edge endpoints coincide")
        return self._edge_between(first, second)

    def add_face(self, points: Sequence[Vector3], material: Any = None) -> BrepFace:
        """Create a planar face from ordered points.

        Consecutive duplicate points are merged. An identical existing face
        (same vertex set) is returned instead of creating a second one.

        Raises:
            DegenerateFaceError: If fewer than three distinct points remain,
                the points are collinear, or they are not coplanar.
        """
        loop: list[BrepVertex] = []
        for point in points:
            vertex = self.vertex_at(point)
            if loop and loop[-1] is vertex:
                continue
            loop.append(vertex)
        if len(loop) > 1 and loop[0] is loop[-1]:
            loop.pop()
        if len(loop) < 3 or len(set(loop)) != len(loop):
            raise DegenerateFaceError("Face needs at least three distinct points")
        return self._create_face(loop, material)

    def _create_face(self, loop: list[BrepVertex], material: Any = None) -> BrepFace:
        positions = [vertex.position for vertex in loop]
        raw_normal = polygon_normal(positions)
        if length(raw_normal) <= EPSILON:
            raise DegenerateFaceError("Face points are collinear")
        origin = positions[0]
        if any(
            abs(signed_distance(raw_normal, origin, p)) > COPLANAR_TOLERANCE_MM
            for p in positions
        ):
            raise DegenerateFaceError("Face points are not coplanar")

        existing = self._find_face(loop)
        if existing is not None:
            return existing

        face = BrepFace(loop, material)
        for index in range(len(loop)):
            edge = self._edge_between(loop[index], loop[(index + 1) % len(loop)])
            edge.faces.append(face)
        self._faces.append(face)
        return face

    def _find_face(self, loop: list[BrepVertex]) -> BrepFace | None:
        wanted = set(loop)
        for face in self._faces:
            if len(face.vertices) == len(loop) and set(face.vertices) == wanted:
                return face
        return None

    def pushpull(self, face: BrepFace, distance: float) -> BrepFace:
        """Extrude a face along its normal into a closed prism.

        A positive distance moves along the face normal. The original face
        becomes the base (reversed when the extrusion runs along its normal)
        so every face of the prism points outward.

        Returns:
            The face at the far end of the extrusion.
        """
        if face not in self._faces:
            raise GeometryError("Face does not belong to this solid")
        if abs(distance) <= EPSILON:
            raise GeometryError("Push/pull distance must be non-zero")

        base = face.positions
        material = face.material
        offset = scale(face.normal, distance)
        top = [add(point, offset) for point in base]
        self.erase_face(face)

        count = len(base)
        if distance > 0:
            self.add_face(list(reversed(base)), material)
            far_face = self.add_face(top, material)
            for index in range(count):
                nxt = (index + 1) % count
                self.add_face([base[index], base[nxt], top[nxt], top[index]], material)
        else:
            self.add_face(base, material)
            far_face = self.add_face(list(reversed(top)), material)
            for index in range(count):
                nxt = (index + 1) % count
                self.add_face([base[index], top[index], top[nxt], base[nxt]], material)
        return far_face

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def erase_face(self, face: BrepFace) -> None:
        """Remove a face; its edges stay, possibly without faces."""
        if face not in self._faces:
            return
        for edge in self.face_edges(face):
            edge.faces = [other for other in edge.faces if other is not face]
        self._faces = [other for other in self._faces if other is not face]

    def erase_edge(self, edge: BrepEdge) -> None:
        """Remove an edge together with every face it bounds."""
        for face in list(edge.faces):
            self.erase_face(face)
        self._edges.pop(frozenset(edge.vertices), None)
        self._prune_vertices()

    def _prune_vertices(self) -> None:
        used: set[BrepVertex] = set()
        for edge in self._edges.values():
            used.update(edge.vertices)
        self._vertices = [vertex for vertex in self._vertices if vertex in used]

    def erase_loose_edges(self) -> int:
        """Remove every edge that borders no face.

        Returns:
            Number of edges removed.
        """
        loose = [edge for edge in self._edges.values() if not edge.faces]
        for edge in loose:
            self._edges.pop(frozenset(edge.vertices), None)
        if loose:
            self._prune_vertices()
        return len(loose)

    def clear(self) -> None:
        self._vertices = []
        self._edges = {}
        self._faces = []

    def mark_erased(self) -> None:
        self._erased = True

    # ------------------------------------------------------------------
    # Placement and state
    # ------------------------------------------------------------------

    def transform(self, translation: Vector3) -> None:
        self.translation = add(self.translation, translation)

    def snapshot(self) -> dict[str, Any]:
        """Capture geometry, placement and metadata."""
        return {
            "faces": [(face.positions, face.material) for face in self._faces],
            "edges": [
                (edge.start.position, edge.end.position)
                for edge in self._edges.values()
                if not edge.faces
            ],
            "translation": self.translation,
            "name": self.name,
            "tag": self.tag,
            "material": self.material,
            "attributes": {key: dict(value) for key, value in self._attributes.items()},
        }

    def restore(self, state: dict[str, Any]) -> None:
        """Rebuild the solid from a ``snapshot()`` result."""
        self.clear()
        for positions, material in state["faces"]:
            self._create_face([self.vertex_at(p) for p in positions], material)
        for start, end in state["edges"]:
            self.add_edge(start, end)
        self.translation = state["translation"]
        self.name = state["name"]
        self.tag = state["tag"]
        self.material = state["material"]
        self._attributes = {key: dict(value) for key, value in state["attributes"].items()}
        self._erased = False

    # ------------------------------------------------------------------
    # Plane splitting
    # ------------------------------------------------------------------

    def split_edge(self, edge: BrepEdge, position: Vector3) -> BrepVertex:
        """Insert a vertex on ``edge`` and update the faces that use it."""
        vertex = self.vertex_at(position)
        if vertex is edge.start or vertex is edge.end:
            return vertex
        start, end = edge.start, edge.end
        faces = list(edge.faces)
        self._edges.pop(frozenset((start, end)), None)
        first = self._edge_between(start, vertex)
        second = self._edge_between(vertex, end)
        for face in faces:
            loop = face.vertices
            for index in range(len(loop)):
                a = loop[index]
                b = loop[(index + 1) % len(loop)]
                if {a, b} == {start, end}:
                    loop.insert(index + 1, vertex)
                    break
            first.faces.append(face)
            second.faces.append(face)
        return vertex

    def split_face(self, face: BrepFace, first: int, second: int) -> BrepEdge:
        """Split a face along the chord between two of its loop positions.

        Returns:
            The chord edge shared by the two new faces.
        """
        loop = face.vertices
        low, high = sorted((first, second))
        one = loop[low : high + 1]
        two = loop[high:] + loop[: low + 1]
        material = face.material
        self.erase_face(face)
        self._create_face(one, material)
        self._create_face(two, material)
        return self._edges[frozenset((loop[low], loop[high]))]

    def split_by_plane(
        self,
        plane_point: Vector3,
        normal: Vector3,
        boundary: Sequence[Vector3] | None = None,
    ) -> list[BrepEdge]:
        """Insert edges where the plane crosses this solid's faces.

        Only crossings that fall inside ``boundary`` (a polygon lying in the
        plane) are used when a boundary is given. Faces that do not split
        into exactly two pieces along the plane are left alone.

        Returns:
            The new chord edges lying in the plane.
        """

        def distance(vertex: BrepVertex) -> float:
            return signed_distance(normal, plane_point, vertex.position)

        for edge in list(self._edges.values()):
            start_distance = distance(edge.start)
            end_distance = distance(edge.end)
            crosses = (
                start_distance < -PLANE_TOLERANCE_MM and end_distance > PLANE_TOLERANCE_MM
            ) or (
                start_distance > PLANE_TOLERANCE_MM and end_distance < -PLANE_TOLERANCE_MM
            )
            if not crosses:
                continue
            t = start_distance / (start_distance - end_distance)
            point = add(
                edge.start.position,
                scale(subtract(edge.end.position, edge.start.position), t),
            )
            if boundary is not None and not point_in_polygon(point, boundary, normal):
                continue
            self.split_edge(edge, point)

        chords: list[BrepEdge] = []
        for face in list(self._faces):
            distances = [distance(vertex) for vertex in face.vertices]
            if not (
                any(d > PLANE_TOLERANCE_MM for d in distances)
                and any(d < -PLANE_TOLERANCE_MM for d in distances)
            ):
                continue
            on_plane = [i for i, d in enumerate(distances) if abs(d) <= PLANE_TOLERANCE_MM]
            count = len(face.vertices)
            if len(on_plane) != 2:
                logger.debug(f"Face with {len(on_plane)} on-plane vertices not split")
                continue
            first, second = on_plane
            if second - first in (1, count - 1):
                logger.debug("On-plane vertices are adjacent; face not split")
                continue
            chords.append(self.split_face(face, first, second))
        return chords
