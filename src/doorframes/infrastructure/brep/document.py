"""In-memory geometry document owning solids and solid operations.

Boundary imprinting (``intersect_with``) works directly on the polygonal
topology. Solid subtraction goes through trimesh: both operands are
triangulated, differenced by the manifold engine, and the result's coplanar
facets are turned back into polygonal faces.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import mapbox_earcut
import numpy as np
import trimesh

from doorframes.contracts.errors import BooleanOperationError, DegenerateFaceError
from doorframes.domain.corner_join import trace_boundary_loops
from doorframes.domain.vector_math import Vector3, add, cross, dot, plane_basis, subtract

from .solid import BrepEdge, BrepSolid

logger = logging.getLogger(__name__)

BOOLEAN_ENGINE = "manifold"
# The boolean engine works in single precision; result coordinates this close
# to an operand coordinate are snapped back to it.
SNAP_TOLERANCE_MM = 1.0e-3


def _triangulate_face(positions: list[Vector3], normal: Vector3) -> list[tuple[int, int, int]]:
    """Ear-clip a planar face into triangles wound like the face."""
    if len(positions) == 3:
        return [(0, 1, 2)]
    u, v = plane_basis(normal)
    coords = np.array([(dot(p, u), dot(p, v)) for p in positions], dtype=np.float64)
    rings = np.array([len(positions)], dtype=np.uint32)
    indices = mapbox_earcut.triangulate_float64(coords, rings).reshape(-1, 3)
    triangles = []
    for a, b, c in indices.tolist():
        winding = cross(subtract(positions[b], positions[a]), subtract(positions[c], positions[a]))
        triangles.append((a, b, c) if dot(winding, normal) >= 0 else (a, c, b))
    return triangles


def solid_to_trimesh(solid: BrepSolid, offset: Vector3 = (0.0, 0.0, 0.0)) -> trimesh.Trimesh:
    """Triangulate a solid's faces into a trimesh.

    Each face is ear-clipped in its own plane, so non-convex faces are
    covered exactly, and every triangle keeps the face's outward winding.

    Args:
        solid: Solid to convert.
        offset: Added to every local vertex position.

    Returns:
        A mesh with shared vertices, in ``solid``-local coordinates plus
        ``offset``.
    """
    index_of = {id(vertex): i for i, vertex in enumerate(solid.vertices)}
    vertices = np.array(
        [add(vertex.position, offset) for vertex in solid.vertices], dtype=np.float64
    ).reshape(-1, 3)
    triangles = []
    for face in solid.faces:
        loop = [index_of[id(vertex)] for vertex in face.vertices]
        for a, b, c in _triangulate_face(face.positions, face.normal):
            triangles.append((loop[a], loop[b], loop[c]))
    faces = np.array(triangles, dtype=np.int64).reshape(-1, 3)
    return trimesh.Trimesh(vertices=vertices, faces=faces, process=True)


def snap_vertices(vertices: np.ndarray, reference: np.ndarray, tolerance: float) -> np.ndarray:
    """Snap each coordinate to the nearest reference coordinate on that axis.

    Only coordinates within ``tolerance`` of a reference value move.
    """
    snapped = np.array(vertices, dtype=np.float64)
    if len(snapped) == 0 or len(reference) == 0:
        return snapped
    for axis in range(3):
        values = np.unique(reference[:, axis])
        gaps = np.abs(snapped[:, axis, None] - values[None, :])
        nearest = np.argmin(gaps, axis=1)
        close = gaps[np.arange(len(snapped)), nearest] <= tolerance
        snapped[close, axis] = values[nearest[close]]
    return snapped


class BrepDocument:
    """A host document: a flat list of solids plus transactions.

    Args:
        supports_solid_booleans: Whether ``subtract`` is offered in this
            session. When False, calling ``subtract`` raises.
        name: Document title used in log messages.
    """

    def __init__(self, supports_solid_booleans: bool = True, name: str = "Untitled") -> None:
        self.supports_solid_booleans = supports_solid_booleans
        self.name = name
        self.committed_operations: list[str] = []
        self._solids: list[BrepSolid] = []
        self._transaction_depth = 0

    def __repr__(self) -> str:
        return f"BrepDocument(name={self.name!r}, solids={len(self._solids)})"

    @property
    def entities(self) -> list[BrepSolid]:
        return list(self._solids)

    def add_solid(self, name: str = "") -> BrepSolid:
        solid = BrepSolid(name)
        self._solids.append(solid)
        return solid

    def erase(self, solid: BrepSolid) -> None:
        if solid in self._solids:
            self._solids = [other for other in self._solids if other is not solid]
        solid.mark_erased()

    def contains(self, solid: BrepSolid) -> bool:
        return any(other is solid for other in self._solids)

    @contextmanager
    def transaction(self, name: str) -> Iterator[None]:
        """Run a block as one undoable operation.

        The solid list and every solid's geometry are captured up front. An
        exception escaping the block restores both and re-raises. Nested
        transactions join the outermost one.
        """
        if self._transaction_depth:
            yield
            return

        saved = [(solid, solid.snapshot()) for solid in self._solids]
        self._transaction_depth += 1
        try:
            yield
        except Exception:
            logger.warning(f"Operation '{name}' aborted; rolling back document")
            self._solids = [solid for solid, _ in saved]
            for solid, state in saved:
                solid.restore(state)
            raise
        else:
            self.committed_operations.append(name)
            logger.debug(f"Operation '{name}' committed")
        finally:
            self._transaction_depth -= 1

    def intersect_with(self, target: BrepSolid, cutter: BrepSolid) -> list[BrepEdge]:
        """Imprint the cutter's faces onto the target's boundary.

        Each cutter face plane splits the target faces it crosses, limited to
        crossings inside that cutter face.

        Returns:
            The new edges added to ``target``, in target-local coordinates.
        """
        offset = subtract(cutter.translation, target.translation)
        added: list[BrepEdge] = []
        for face in cutter.faces:
            boundary = [add(point, offset) for point in face.positions]
            added.extend(target.split_by_plane(boundary[0], face.normal, boundary))
        logger.debug(f"Intersection added {len(added)} edges to {target.name!r}")
        return added

    def subtract(self, target: BrepSolid, cutter: BrepSolid) -> BrepSolid | None:
        """Compute ``target - cutter`` as a new solid in this document.

        The operands are left untouched. The result keeps the target's name
        and placement and may consist of several closed shells.

        Returns:
            The new solid, or None when the cutter swallows the target.

        Raises:
            BooleanOperationError: If booleans are unsupported, an operand is
                erased or open, the boolean engine fails, or its result is not
                a closed solid.
        """
        if not self.supports_solid_booleans:
            raise BooleanOperationError("Solid booleans are not supported in this session")
        for operand in (target, cutter):
            if not operand.is_valid():
                raise BooleanOperationError(f"Operand {operand.name!r} was erased")
            if not operand.is_manifold():
                raise BooleanOperationError(f"Operand {operand.name!r} is not a closed solid")

        target_mesh = solid_to_trimesh(target)
        cutter_mesh = solid_to_trimesh(
            cutter, subtract(cutter.translation, target.translation)
        )
        try:
            difference = trimesh.boolean.difference(
                [target_mesh, cutter_mesh], engine=BOOLEAN_ENGINE
            )
        except Exception as error:
            raise BooleanOperationError(f"Boolean engine failed: {error}") from error

        if difference.is_empty or len(difference.faces) == 0:
            logger.debug(f"Cutter swallowed {target.name!r}")
            return None
        if not difference.is_watertight:
            raise BooleanOperationError("Boolean result is not watertight")

        reference = np.vstack([target_mesh.vertices, cutter_mesh.vertices])
        vertices = snap_vertices(difference.vertices, reference, SNAP_TOLERANCE_MM)
        return self._solid_from_mesh(target, difference, vertices)

    def _solid_from_mesh(
        self, template: BrepSolid, mesh: trimesh.Trimesh, vertices: np.ndarray
    ) -> BrepSolid:
        """Rebuild polygonal faces from a triangle mesh.

        Each coplanar facet becomes one face bounded by its outline; triangles
        outside any facet become faces of their own.
        """
        points = [tuple(float(c) for c in vertex) for vertex in vertices]
        result = self.add_solid(template.name)
        result.translation = template.translation

        grouped: set[int] = set()
        try:
            for facet, boundary, normal in zip(
                mesh.facets, mesh.facets_boundary, mesh.facets_normal
            ):
                grouped.update(int(index) for index in facet)
                loops = trace_boundary_loops([(int(a), int(b)) for a, b in boundary])
                if len(loops) != 1:
                    raise DegenerateFaceError(
                        f"Facet outline has {len(loops)} loops; faces need exactly one"
                    )
                face = result.add_face([points[i] for i in loops[0]], template.material)
                if dot(face.normal, tuple(float(c) for c in normal)) < 0:
                    face.reverse()
            for index, triangle in enumerate(mesh.faces):
                if index not in grouped:
                    result.add_face([points[int(i)] for i in triangle], template.material)
        except DegenerateFaceError as error:
            self.erase(result)
            raise BooleanOperationError(f"Boolean result could not be rebuilt: {error}") from error

        if not result.is_manifold():
            self.erase(result)
            raise BooleanOperationError("Boolean result is not a closed solid")
        logger.debug(
            f"Subtraction rebuilt {template.name!r} with {len(result.faces)} faces"
        )
        return result
