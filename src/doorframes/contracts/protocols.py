"""Host geometry library protocols.

The corner join engine and the frame assembler never talk to a concrete
geometry library. They depend on these protocols, which describe the
boundary-representation primitives a host CAD document has to offer:
closed polygonal faces, push/pull extrusion, solid subtraction, boundary
intersection, topology enumeration, deletion, and rigid translation.

The in-memory implementation lives in ``doorframes.infrastructure.brep``.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Protocol, Sequence, runtime_checkable

Point3 = tuple[float, float, float]


class VertexProtocol(Protocol):
    """A topological vertex with a local position."""

    @property
    def position(self) -> Point3: ...


class FaceProtocol(Protocol):
    """A planar face bounded by one ordered vertex loop."""

    material: Any

    @property
    def vertices(self) -> Sequence[VertexProtocol]: ...

    @property
    def normal(self) -> Point3: ...

    def reverse(self) -> None:
        """Flip the vertex loop so the normal points the other way."""
        ...


class EdgeProtocol(Protocol):
    """An edge between two vertices and the faces that use it."""

    @property
    def start(self) -> VertexProtocol: ...

    @property
    def end(self) -> VertexProtocol: ...

    @property
    def faces(self) -> Sequence[FaceProtocol]: ...


class BoundsProtocol(Protocol):
    """Axis-aligned bounds in world coordinates."""

    @property
    def minimum(self) -> Point3: ...

    @property
    def maximum(self) -> Point3: ...

    @property
    def diagonal(self) -> float: ...


class SolidProtocol(Protocol):
    """A group of faces and edges with a translation and metadata."""

    name: str
    tag: str | None
    material: Any
    translation: Point3

    @property
    def faces(self) -> list[FaceProtocol]: ...

    @property
    def edges(self) -> list[EdgeProtocol]: ...

    @property
    def bounds(self) -> BoundsProtocol: ...

    @property
    def local_bounds(self) -> BoundsProtocol: ...

    @property
    def volume(self) -> float: ...

    def is_valid(self) -> bool: ...

    def add_face(self, points: Sequence[Point3]) -> FaceProtocol: ...

    def pushpull(self, face: FaceProtocol, distance: float) -> FaceProtocol: ...

    def erase_face(self, face: FaceProtocol) -> None: ...

    def erase_edge(self, edge: EdgeProtocol) -> None: ...

    def transform(self, translation: Point3) -> None: ...

    def attribute_dictionary(self, name: str) -> dict[str, Any] | None: ...

    def set_attribute(self, dictionary: str, key: str, value: Any) -> None: ...

    def snapshot(self) -> Any:
        """Capture the geometry so it can be restored after a failed edit."""
        ...

    def restore(self, state: Any) -> None: ...


@runtime_checkable
class GeometryDocumentProtocol(Protocol):
    """The host document owning solids and providing solid operations.

    ``supports_solid_booleans`` advertises whether ``subtract`` performs
    true solid-boolean difference in this session.
    """

    supports_solid_booleans: bool

    @property
    def entities(self) -> list[SolidProtocol]: ...

    def add_solid(self, name: str = "") -> SolidProtocol: ...

    def erase(self, solid: SolidProtocol) -> None: ...

    def contains(self, solid: SolidProtocol) -> bool: ...

    def transaction(self, name: str) -> AbstractContextManager[None]:
        """Start an atomic operation: commit on exit, roll back on error."""
        ...

    def intersect_with(
        self, target: SolidProtocol, cutter: SolidProtocol
    ) -> list[EdgeProtocol]:
        """Insert the intersection of ``cutter`` with ``target``'s boundary.

        Returns:
            The edges added to ``target``.
        """
        ...

    def subtract(
        self, target: SolidProtocol, cutter: SolidProtocol
    ) -> SolidProtocol | None:
        """Return ``target - cutter`` as a new solid in the document."""
        ...
