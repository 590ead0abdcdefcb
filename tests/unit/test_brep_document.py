"""Unit tests for the in-memory geometry document.

These tests verify:
- Solid ownership and erasure
- Transactions commit on success and roll back on error
- Boundary intersection imprints cutter planes
- Solid subtraction through trimesh and its failure modes
"""

import pytest

from doorframes.contracts import BooleanOperationError, GeometryDocumentProtocol
from doorframes.infrastructure.brep import BrepDocument


class TestEntities:
    """Tests for solid ownership."""

    def test_document_satisfies_protocol(self, document: BrepDocument) -> None:
        assert isinstance(document, GeometryDocumentProtocol)

    def test_add_and_erase(self, document: BrepDocument) -> None:
        solid = document.add_solid("Part")
        assert document.contains(solid)
        assert document.entities == [solid]

        document.erase(solid)

        assert not document.contains(solid)
        assert not solid.is_valid()
        assert document.entities == []


# =============================================================================
# Transactions
# =============================================================================


class TestTransaction:
    """Tests for transaction commit and rollback."""

    def test_commit_records_operation(self, document: BrepDocument) -> None:
        with document.transaction("Add Part"):
            document.add_solid("Part")

        assert document.committed_operations == ["Add Part"]
        assert len(document.entities) == 1

    def test_nested_transactions_join_outermost(self, document: BrepDocument) -> None:
        with document.transaction("Outer"):
            with document.transaction("Inner"):
                document.add_solid("Part")

        assert document.committed_operations == ["Outer"]

    def test_error_rolls_back_solid_list(self, document: BrepDocument, make_box) -> None:
        existing = make_box(document, "Existing", (0, 0, 0), (1, 1, 1))

        with pytest.raises(RuntimeError):
            with document.transaction("Broken"):
                document.add_solid("New")
                document.erase(existing)
                raise RuntimeError("boom")

        assert document.entities == [existing]
        assert existing.is_valid()
        assert document.committed_operations == []

    def test_error_rolls_back_geometry(self, document: BrepDocument, make_box) -> None:
        box = make_box(document, "Box", (0, 0, 0), (10, 10, 10))

        with pytest.raises(RuntimeError):
            with document.transaction("Broken"):
                box.erase_face(box.faces[0])
                box.transform((5.0, 0.0, 0.0))
                raise RuntimeError("boom")

        assert len(box.faces) == 6
        assert box.is_manifold()
        assert box.translation == (0.0, 0.0, 0.0)
        assert box.volume == pytest.approx(1000.0)


# =============================================================================
# Intersection
# =============================================================================


class TestIntersectWith:
    """Tests for intersect_with."""

    def test_imprints_cutter_face_plane(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (5, -5, -5), (15, 20, 20))

        edges = document.intersect_with(target, cutter)

        assert len(edges) == 4
        assert len(target.faces) == 10
        assert target.volume == pytest.approx(1000.0)
        for edge in edges:
            assert edge.start.position[0] == pytest.approx(5.0)
            assert edge.end.position[0] == pytest.approx(5.0)

    def test_uses_relative_placement(self, document: BrepDocument, make_box) -> None:
        """The cutter's translation is expressed in the target's local frame."""
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        target.transform((100.0, 0.0, 0.0))
        cutter = make_box(document, "Cutter", (5, -5, -5), (15, 20, 20))
        cutter.transform((100.0, 0.0, 0.0))

        edges = document.intersect_with(target, cutter)

        assert len(edges) == 4


# =============================================================================
# Subtraction
# =============================================================================


class TestSubtract:
    """Tests for subtract."""

    def test_partial_overlap(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (5, -5, -5), (15, 20, 20))

        result = document.subtract(target, cutter)

        assert result is not None
        assert result is not target
        assert document.contains(result)
        assert result.name == "Target"
        assert result.volume == pytest.approx(500.0)
        assert result.bounds.maximum[0] == pytest.approx(5.0)
        assert result.is_manifold()

    def test_operands_are_untouched(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (5, -5, -5), (15, 20, 20))

        document.subtract(target, cutter)

        assert target.volume == pytest.approx(1000.0)
        assert cutter.volume == pytest.approx(15.0 * 20.0 * 20.0)

    def test_no_overlap_copies_target(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (50, 0, 0), (10, 10, 10))

        result = document.subtract(target, cutter)

        assert result is not None
        assert result is not target
        assert result.volume == pytest.approx(1000.0)

    def test_swallowed_target_returns_none(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (-5, -5, -5), (20, 20, 20))

        assert document.subtract(target, cutter) is None

    def test_two_pieces(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (4, -5, -5), (2, 20, 20))

        result = document.subtract(target, cutter)

        assert result is not None
        assert result.volume == pytest.approx(800.0)
        assert result.is_manifold()

    def test_non_convex_target(self, document: BrepDocument, make_box) -> None:
        target = document.add_solid("Target")
        face = target.add_face(
            [(0, 0, 0), (10, 0, 0), (10, 5, 0), (5, 5, 0), (5, 10, 0), (0, 10, 0)]
        )
        target.pushpull(face, 10)
        cutter = make_box(document, "Cutter", (-5, -5, -5), (20, 7, 20))

        result = document.subtract(target, cutter)

        assert result is not None
        assert result.volume == pytest.approx(550.0)
        assert result.bounds.minimum[1] == 2.0
        assert result.is_manifold()

    def test_notched_result_cuts_again(self, document: BrepDocument, make_box) -> None:
        """A notch leaves non-convex faces that a second cut must handle."""
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        slot = make_box(document, "Slot", (4, -5, 5), (2, 20, 10))
        notched = document.subtract(target, slot)
        assert notched is not None
        assert notched.volume == pytest.approx(900.0)

        floor = make_box(document, "Floor", (-5, -5, -5), (20, 20, 7))
        result = document.subtract(notched, floor)

        assert result is not None
        assert result.volume == pytest.approx(700.0)
        assert result.is_manifold()

    def test_result_keeps_operand_coordinates(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (5, -5, -5), (15, 20, 20))

        result = document.subtract(target, cutter)

        assert result is not None
        xs = {vertex.position[0] for vertex in result.vertices}
        assert xs == {0.0, 5.0}

    def test_result_is_placed_like_target(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        target.transform((100.0, 0.0, 0.0))
        cutter = make_box(document, "Cutter", (105, -5, -5), (15, 20, 20))

        result = document.subtract(target, cutter)

        assert result is not None
        assert result.translation == target.translation
        assert result.bounds.minimum[0] == pytest.approx(100.0)
        assert result.bounds.maximum[0] == pytest.approx(105.0)

    def test_open_operand_raises(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (5, -5, -5), (15, 20, 20))
        cutter.erase_face(cutter.faces[0])

        with pytest.raises(BooleanOperationError):
            document.subtract(target, cutter)

    def test_erased_operand_raises(self, document: BrepDocument, make_box) -> None:
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (5, -5, -5), (15, 20, 20))
        document.erase(cutter)

        with pytest.raises(BooleanOperationError):
            document.subtract(target, cutter)

    def test_unsupported_session_raises(
        self, document_without_booleans: BrepDocument, make_box
    ) -> None:
        document = document_without_booleans
        target = make_box(document, "Target", (0, 0, 0), (10, 10, 10))
        cutter = make_box(document, "Cutter", (5, -5, -5), (15, 20, 20))

        with pytest.raises(BooleanOperationError):
            document.subtract(target, cutter)
