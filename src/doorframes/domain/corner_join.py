"""Corner joinery: cutting frame members with a plane.

Each mitered corner is produced by cutting a member with a plane and keeping
one half-space. Two strategies exist:

- boolean: subtract a slab-shaped cutter solid with the host library's solid
  boolean, replacing the member with the result
- intersect: imprint the plane onto the member's boundary, delete the faces on
  the discarded side, and re-cap the open boundary loops left on the plane

The boolean path is preferred when the host supports it. A failed boolean
cut falls back to the intersection path for that corner only, and the
``JoinContext`` records the mode used and any warnings for the whole build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, Iterable, TypeVar

from ..contracts import (
    BooleanOperationError,
    GeometryDocumentProtocol,
    GeometryError,
    SolidProtocol,
)
from .members import FRAME_DICTIONARY
from .vector_math import (
    EPSILON,
    Vector3,
    add,
    cross,
    dot,
    length,
    normalize,
    plane_basis,
    scale,
    signed_distance,
    subtract,
)

logger = logging.getLogger(__name__)

# Vertices closer than this to a cut plane are on it.
PLANE_TOLERANCE_MM = 0.02
# A keep point must be further than this from the plane to decide the side.
KEEP_SIDE_TOLERANCE_MM = 0.1
# Cutter slab extent and depth, as a multiple of the member's bounding diagonal.
CUTTER_SCALE = 4.0
MIN_CUTTER_EXTENT_MM = 1.0

BOOLEANS_UNAVAILABLE_WARNING = (
    "Solid boolean operations unavailable; used geometric intersection for miters."
)
BOOLEAN_FAILED_WARNING = (
    "Solid boolean subtraction failed; reverted to geometric intersection for miters."
)
CUT_FAILED_WARNING = "Corner cut failed; a member was left uncut at one or more corners."


class KeepSide(str, Enum):
    """Half-space of a cutting plane that survives a cut."""

    POSITIVE = "positive"
    NEGATIVE = "negative"

    @property
    def sign(self) -> float:
        return 1.0 if self == KeepSide.POSITIVE else -1.0


class JoinMode(str, Enum):
    """Strategy used to cut a corner."""

    BOOLEAN = "boolean"
    INTERSECT = "intersect"


@dataclass(frozen=True)
class CuttingPlane:
    """A plane through ``point`` with a (not necessarily unit) ``normal``.

    Raises:
        ValueError: If the normal is shorter than ``EPSILON``.
    """

    point: Vector3
    normal: Vector3

    def __post_init__(self) -> None:
        if length(self.normal) <= EPSILON:
            raise ValueError("Cutting plane normal must be non-zero")

    @classmethod
    def from_points(cls, a: Vector3, b: Vector3, c: Vector3) -> CuttingPlane | None:
        """Plane through three points with ``normal = (b - a) x (c - a)``.

        Returns:
            None when the points are collinear.
        """
        normal = cross(subtract(b, a), subtract(c, a))
        if length(normal) <= EPSILON:
            return None
        return cls(point=a, normal=normal)

    @property
    def unit_normal(self) -> Vector3:
        return normalize(self.normal)

    def signed_distance(self, point: Vector3) -> float:
        return signed_distance(self.normal, self.point, point)


def resolve_keep_side(
    plane: CuttingPlane,
    keep: KeepSide | None = None,
    keep_point: Vector3 | None = None,
) -> KeepSide:
    """Pick the half-space to keep.

    A keep point clearly off the plane wins. Otherwise the explicit ``keep``
    flag applies, and without one the positive side is kept.
    """
    if keep_point is not None:
        distance = plane.signed_distance(keep_point)
        if abs(distance) > KEEP_SIDE_TOLERANCE_MM:
            return KeepSide.NEGATIVE if distance < 0 else KeepSide.POSITIVE
    return keep if keep is not None else KeepSide.POSITIVE


V = TypeVar("V", bound=Hashable)


def trace_boundary_loops(edges: Iterable[tuple[V, V]]) -> list[list[V]]:
    """Chain edges sharing endpoints into closed vertex loops.

    Each edge is claimed by at most one loop. Open chains are dropped, and
    disjoint loops stay separate.

    Args:
        edges: ``(start, end)`` vertex pairs in any order and direction.

    Returns:
        Ordered vertex loops; the closing edge back to the first vertex is
        implied.
    """
    edge_list = list(edges)
    adjacency: dict[V, list[int]] = {}
    for index, (start, end) in enumerate(edge_list):
        adjacency.setdefault(start, []).append(index)
        adjacency.setdefault(end, []).append(index)

    claimed: set[int] = set()
    loops: list[list[V]] = []
    for index, (start, end) in enumerate(edge_list):
        if index in claimed:
            continue
        claimed.add(index)
        chain = [start, end]
        closed = False
        while True:
            current = chain[-1]
            following = next((i for i in adjacency[current] if i not in claimed), None)
            if following is None:
                break
            claimed.add(following)
            first, second = edge_list[following]
            vertex = second if first == current else first
            if vertex == chain[0]:
                closed = True
                break
            chain.append(vertex)
        if closed:
            loops.append(chain)
        else:
            logger.debug(f"Dropped open edge chain of {len(chain)} vertices")
    return loops


@dataclass(frozen=True)
class CutReport:
    """What happened during one corner cut.

    ``mode`` is the strategy that ran last. When every strategy failed,
    ``restored`` is set and the member was put back uncut.
    """

    member_name: str
    mode: JoinMode
    plane_point: Vector3
    plane_normal: Vector3
    keep: KeepSide
    volume_before: float
    volume_after: float
    new_edges_count: int = 0
    cap_count: int = 0
    fallback_reason: str | None = None
    restored: bool = False


@dataclass
class JoinContext:
    """Per-build state shared by every corner cut.

    Attributes:
        booleans_available: Capability checked once for the build.
        warnings: Ordered warning messages without duplicates.
        miter_mode: Mode of the first attempted cut, degraded to
            ``INTERSECT`` once any boolean cut fails.
        reports: One entry per executed cut.
    """

    booleans_available: bool
    warnings: list[str] = field(default_factory=list)
    miter_mode: JoinMode | None = None
    reports: list[CutReport] = field(default_factory=list)

    def warn(self, message: str) -> None:
        if message in self.warnings:
            return
        logger.warning(message)
        self.warnings.append(message)

    def resolved_miter_mode(self) -> JoinMode:
        if self.miter_mode is not None:
            return self.miter_mode
        return JoinMode.BOOLEAN if self.booleans_available else JoinMode.INTERSECT


class CornerJoinEngine:
    """Cuts members with planes through a host geometry document.

    Args:
        document: Host document owning the members.
        context: Build-wide mode and warning state.
    """

    def __init__(self, document: GeometryDocumentProtocol, context: JoinContext) -> None:
        self.document = document
        self.context = context

    def cut_with_plane_points(
        self,
        member: SolidProtocol,
        a: Vector3,
        b: Vector3,
        c: Vector3,
        keep_point: Vector3 | None = None,
        keep: KeepSide | None = None,
    ) -> SolidProtocol:
        """Cut a member with the plane through three reference points.

        Collinear reference points describe no corner; the member is returned
        untouched.
        """
        plane = CuttingPlane.from_points(a, b, c)
        if plane is None:
            logger.debug(f"Collinear reference points; skipped cut of {member.name!r}")
            return member
        return self.cut_with_plane(member, plane, resolve_keep_side(plane, keep, keep_point))

    def cut_with_plane(
        self,
        member: SolidProtocol,
        plane: CuttingPlane,
        keep: KeepSide = KeepSide.POSITIVE,
    ) -> SolidProtocol:
        """Cut a member, keeping the ``keep`` half-space of ``plane``.

        Returns:
            The solid now representing the member. The boolean path returns a
            new solid and erases the original; the intersection path edits the
            member in place. If every strategy fails the member is restored
            and returned uncut.
        """
        if not member.is_valid():
            return member

        name = member.name
        volume_before = member.volume
        state = member.snapshot()
        fallback_reason: str | None = None
        new_edges = caps = 0
        mode = JoinMode.INTERSECT
        restored = False
        try:
            if self.context.booleans_available:
                if self.context.miter_mode is None:
                    self.context.miter_mode = JoinMode.BOOLEAN
                try:
                    result = self._cut_with_boolean(member, plane, keep)
                    mode = JoinMode.BOOLEAN
                except Exception as error:
                    fallback_reason = str(error) or type(error).__name__
                    logger.warning(f"Boolean cut of {name!r} failed: {fallback_reason}")
                    self.context.miter_mode = JoinMode.INTERSECT
                    self.context.warn(BOOLEAN_FAILED_WARNING)
                    result, new_edges, caps = self._cut_with_intersection(member, plane, keep)
            else:
                if self.context.miter_mode is None:
                    self.context.miter_mode = JoinMode.INTERSECT
                self.context.warn(BOOLEANS_UNAVAILABLE_WARNING)
                result, new_edges, caps = self._cut_with_intersection(member, plane, keep)
        except Exception as error:
            logger.exception(f"Cut of {name!r} failed; restoring member")
            member.restore(state)
            self.context.warn(CUT_FAILED_WARNING)
            fallback_reason = str(error) or type(error).__name__
            result = member
            restored = True

        self.context.reports.append(
            CutReport(
                member_name=name,
                mode=mode,
                plane_point=plane.point,
                plane_normal=plane.unit_normal,
                keep=keep,
                volume_before=volume_before,
                volume_after=result.volume,
                new_edges_count=new_edges,
                cap_count=caps,
                fallback_reason=fallback_reason,
                restored=restored,
            )
        )
        if not restored:
            logger.debug(
                f"Cut {name!r} via {mode.value}: volume {volume_before:.1f} -> {result.volume:.1f}"
            )
        return result

    # ------------------------------------------------------------------
    # Cutter
    # ------------------------------------------------------------------

    def _build_cutter(
        self, member: SolidProtocol, plane: CuttingPlane, keep: KeepSide
    ) -> SolidProtocol:
        """Create a slab on the discard side of the plane, placed like ``member``."""
        extent = max(member.local_bounds.diagonal, MIN_CUTTER_EXTENT_MM) * CUTTER_SCALE
        u, v = plane_basis(plane.normal)
        u = scale(u, extent)
        v = scale(v, extent)
        origin = plane.point
        corners = [
            add(add(origin, u), v),
            add(subtract(origin, u), v),
            subtract(subtract(origin, u), v),
            subtract(add(origin, u), v),
        ]
        cutter = self.document.add_solid("Corner Cutter")
        try:
            face = cutter.add_face(corners)
            if dot(face.normal, plane.normal) < 0:
                face.reverse()
            cutter.pushpull(face, -keep.sign * extent)
            cutter.transform(member.translation)
        except Exception:
            self.document.erase(cutter)
            raise
        return cutter

    # ------------------------------------------------------------------
    # Boolean path
    # ------------------------------------------------------------------

    def _cut_with_boolean(
        self, member: SolidProtocol, plane: CuttingPlane, keep: KeepSide
    ) -> SolidProtocol:
        cutter = self._build_cutter(member, plane, keep)
        try:
            result = self.document.subtract(member, cutter)
        finally:
            self.document.erase(cutter)

        if result is None:
            raise BooleanOperationError("Boolean subtraction returned no solid")
        if result is member or not result.is_valid():
            if result is not member and self.document.contains(result):
                self.document.erase(result)
            raise BooleanOperationError("Boolean subtraction did not produce a new solid")

        _transfer_metadata(member, result)
        self.document.erase(member)
        return result

    # ------------------------------------------------------------------
    # Intersection path
    # ------------------------------------------------------------------

    def _cut_with_intersection(
        self, member: SolidProtocol, plane: CuttingPlane, keep: KeepSide
    ) -> tuple[SolidProtocol, int, int]:
        cutter = self._build_cutter(member, plane, keep)
        try:
            new_edges = self.document.intersect_with(member, cutter)
        finally:
            self.document.erase(cutter)

        self._remove_discarded_faces(member, plane, keep)
        self._remove_plane_faces(member, plane)
        caps = self._add_cap_faces(member, plane, keep)
        self._purge_loose_edges(member)
        return member, len(new_edges), caps

    def _remove_discarded_faces(
        self, member: SolidProtocol, plane: CuttingPlane, keep: KeepSide
    ) -> int:
        # A face goes when no vertex is on the kept side and at least one
        # vertex is clearly on the discarded side.
        removed = 0
        for face in member.faces:
            distances = [
                keep.sign * plane.signed_distance(vertex.position) for vertex in face.vertices
            ]
            if any(d > PLANE_TOLERANCE_MM for d in distances):
                continue
            if any(d < -PLANE_TOLERANCE_MM for d in distances):
                member.erase_face(face)
                removed += 1
        logger.debug(f"Removed {removed} faces beyond the cut on {member.name!r}")
        return removed

    def _remove_plane_faces(self, member: SolidProtocol, plane: CuttingPlane) -> int:
        removed = 0
        for face in member.faces:
            if all(
                abs(plane.signed_distance(vertex.position)) <= PLANE_TOLERANCE_MM
                for vertex in face.vertices
            ):
                member.erase_face(face)
                removed += 1
        return removed

    def _add_cap_faces(
        self, member: SolidProtocol, plane: CuttingPlane, keep: KeepSide
    ) -> int:
        """Close each open boundary loop lying on the plane with a face.

        Caps face the discarded half-space, which is outward for the kept
        piece. Loops that cannot form a face are skipped.
        """
        boundary = [
            (edge.start, edge.end)
            for edge in member.edges
            if len(edge.faces) == 1
            and abs(plane.signed_distance(edge.start.position)) <= PLANE_TOLERANCE_MM
            and abs(plane.signed_distance(edge.end.position)) <= PLANE_TOLERANCE_MM
        ]
        outward = scale(plane.normal, -keep.sign)
        caps = 0
        for loop in trace_boundary_loops(boundary):
            if len(loop) < 3:
                continue
            try:
                face = member.add_face([vertex.position for vertex in loop])
            except GeometryError as error:
                logger.warning(f"Skipped cap on {member.name!r}: {error}")
                continue
            if dot(face.normal, outward) < 0:
                face.reverse()
            caps += 1
        return caps

    def _purge_loose_edges(self, member: SolidProtocol) -> int:
        loose = [edge for edge in member.edges if not edge.faces]
        for edge in loose:
            member.erase_edge(edge)
        return len(loose)


def _transfer_metadata(source: SolidProtocol, target: SolidProtocol) -> None:
    target.name = source.name
    target.tag = source.tag
    target.material = source.material
    dictionary = source.attribute_dictionary(FRAME_DICTIONARY)
    for key, value in (dictionary or {}).items():
        target.set_attribute(FRAME_DICTIONARY, key, value)

