"""Unit tests for frame parameters and the frame assembler.

These tests verify:
- FrameParameters validation and defaults
- Cope-and-stick member layout with and without solid booleans
- Mitered frames through both cut strategies
- Idempotent rebuilds and transaction rollback
"""

import pytest

from doorframes.domain import (
    OPERATION_NAME,
    CopingMode,
    FrameAssembler,
    FrameConfigurationError,
    FrameParameters,
    JoinMode,
    JointType,
    MemberRole,
    member_role,
)
from doorframes.contracts import BooleanOperationError
from doorframes.domain.corner_join import BOOLEAN_FAILED_WARNING, BOOLEANS_UNAVAILABLE_WARNING
from doorframes.domain.frame_assembler import SQUARE_RAIL_ENDS_WARNING
from doorframes.infrastructure.brep import BrepDocument


def _names(solids) -> list[str]:
    return [solid.name for solid in solids]


class ThirdSubtractFailsDocument(BrepDocument):
    """Fails the third boolean subtraction and succeeds otherwise."""

    def __init__(self) -> None:
        super().__init__(name="Test")
        self.subtract_calls = 0

    def subtract(self, target, cutter):
        self.subtract_calls += 1
        if self.subtract_calls == 3:
            raise BooleanOperationError("engine gave up")
        return super().subtract(target, cutter)


# =============================================================================
# Parameters
# =============================================================================


class TestFrameParameters:
    """Tests for FrameParameters validation."""

    def test_outside_dimensions(self, cope_parameters: FrameParameters) -> None:
        assert cope_parameters.outside_width_mm == pytest.approx(614.0)
        assert cope_parameters.outside_height_mm == pytest.approx(814.0)

    def test_rail_width_defaults_to_stile_width(self) -> None:
        parameters = FrameParameters(opening_width_mm=500, opening_height_mm=700, stile_width_mm=60)
        assert parameters.rail_width_mm == 60.0

    def test_non_positive_rail_width_falls_back(self) -> None:
        parameters = FrameParameters(
            opening_width_mm=500, opening_height_mm=700, stile_width_mm=60, rail_width_mm=0
        )
        assert parameters.rail_width_mm == 60.0

    def test_joint_type_string_is_coerced(self) -> None:
        parameters = FrameParameters(opening_width_mm=500, opening_height_mm=700, joint_type="miter")
        assert parameters.joint_type is JointType.MITER

    def test_unknown_joint_type_raises(self) -> None:
        with pytest.raises(FrameConfigurationError) as exc_info:
            FrameParameters(opening_width_mm=500, opening_height_mm=700, joint_type="dovetail")
        assert "dovetail" in str(exc_info.value)

    def test_unknown_profile_raises(self) -> None:
        with pytest.raises(FrameConfigurationError):
            FrameParameters(opening_width_mm=500, opening_height_mm=700, inside_profile_id="ogee")

    @pytest.mark.parametrize(
        "field", ["opening_width_mm", "opening_height_mm", "stile_width_mm", "door_thickness_mm"]
    )
    def test_non_positive_dimensions_raise(self, field: str) -> None:
        values = {"opening_width_mm": 500.0, "opening_height_mm": 700.0, field: 0.0}
        with pytest.raises(FrameConfigurationError) as exc_info:
            FrameParameters(**values)
        assert "must be positive" in str(exc_info.value)

    def test_non_numeric_dimension_raises(self) -> None:
        with pytest.raises(FrameConfigurationError):
            FrameParameters(opening_width_mm="wide", opening_height_mm=700)  # type: ignore[arg-type]

    def test_configuration_error_is_value_error(self) -> None:
        assert issubclass(FrameConfigurationError, ValueError)


# =============================================================================
# Cope and stick
# =============================================================================


class TestCopeStick:
    """Tests for cope-and-stick frames."""

    def test_member_layout(self, document: BrepDocument, cope_parameters: FrameParameters) -> None:
        result = FrameAssembler(document).build(cope_parameters)
        left, right = result.stiles
        bottom, top = result.rails

        assert _names(result.stiles) == ["Stile-L", "Stile-R"]
        assert _names(result.rails) == ["Rail-Bottom", "Rail-Top"]
        assert left.bounds.minimum[0] == pytest.approx(0.0)
        assert right.bounds.minimum[0] == pytest.approx(557.0)
        assert right.bounds.maximum[0] == pytest.approx(614.0)
        assert bottom.bounds.minimum[0] == pytest.approx(57.0)
        assert bottom.bounds.maximum[0] == pytest.approx(557.0)
        assert bottom.bounds.minimum[2] == pytest.approx(0.0)
        assert top.bounds.minimum[2] == pytest.approx(757.0)
        assert top.bounds.maximum[2] == pytest.approx(814.0)

    def test_envelope(self, document: BrepDocument, cope_parameters: FrameParameters) -> None:
        envelope = FrameAssembler(document).build(cope_parameters).bounds()

        assert envelope.width == pytest.approx(614.0)
        assert envelope.height == pytest.approx(814.0)
        assert envelope.thickness == pytest.approx(19.0)

    def test_with_booleans_has_no_warnings(
        self, document: BrepDocument, cope_parameters: FrameParameters
    ) -> None:
        result = FrameAssembler(document).build(cope_parameters)

        assert result.joint_type == JointType.COPE_STICK
        assert result.miter_mode is None
        assert result.coping_mode == CopingMode.BOOLEAN_SUBTRACT
        assert result.warnings == ()
        assert not result.has_warnings

    def test_without_booleans_warns_square_rail_ends(
        self, document_without_booleans: BrepDocument, cope_parameters: FrameParameters
    ) -> None:
        result = FrameAssembler(document_without_booleans).build(cope_parameters)

        assert result.coping_mode == CopingMode.SQUARE_FALLBACK
        assert result.warnings == (SQUARE_RAIL_ENDS_WARNING,)
        assert result.bounds().width == pytest.approx(614.0)

    def test_metadata(self, document: BrepDocument) -> None:
        parameters = FrameParameters(
            opening_width_mm=500, opening_height_mm=700, frame_material="Cherry", tag="Doors"
        )
        result = FrameAssembler(document).build(parameters)

        assert [member_role(m) for m in result.members] == [
            MemberRole.STILE,
            MemberRole.STILE,
            MemberRole.RAIL,
            MemberRole.RAIL,
        ]
        assert all(member.tag == "Doors" for member in result.members)
        assert all(member.material == "Cherry" for member in result.members)

    def test_shaker_profile_volume(self, document: BrepDocument, cope_parameters: FrameParameters) -> None:
        """Each stile loses the bevel triangle along its full height."""
        from doorframes.domain.profiles import SHAKER_PROFILE_RUN_MM

        result = FrameAssembler(document).build(cope_parameters)
        area = 57.0 * 19.0 - SHAKER_PROFILE_RUN_MM * 6.0 / 2.0

        assert result.stiles[0].volume == pytest.approx(area * 814.0)
        assert result.rails[0].volume == pytest.approx(area * 500.0)

    def test_thin_stock_clamps_profile_depth(self, document: BrepDocument) -> None:
        parameters = FrameParameters(
            opening_width_mm=500, opening_height_mm=700, door_thickness_mm=4.0
        )
        result = FrameAssembler(document).build(parameters)

        assert result.bounds().thickness == pytest.approx(4.0)
        assert all(member.volume > 0 for member in result.members)


# =============================================================================
# Miter
# =============================================================================


class TestMiter:
    """Tests for mitered frames."""

    def test_boolean_miter(self, document: BrepDocument, miter_parameters: FrameParameters) -> None:
        result = FrameAssembler(document).build(miter_parameters)

        assert result.joint_type == JointType.MITER
        assert result.miter_mode == JoinMode.BOOLEAN
        assert result.coping_mode is None
        assert result.warnings == ()
        assert len(result.reports) == 8
        assert len(document.entities) == 4

    def test_intersection_miter(
        self, document_without_booleans: BrepDocument, miter_parameters: FrameParameters
    ) -> None:
        result = FrameAssembler(document_without_booleans).build(miter_parameters)

        assert result.miter_mode == JoinMode.INTERSECT
        assert result.warnings == (BOOLEANS_UNAVAILABLE_WARNING,)
        assert all(member.is_manifold() for member in result.members)
        assert len(document_without_booleans.entities) == 4

    def test_one_failed_boolean_cut_degrades_miter_mode(
        self, miter_parameters: FrameParameters
    ) -> None:
        document = ThirdSubtractFailsDocument()
        result = FrameAssembler(document).build(miter_parameters)

        modes = [report.mode for report in result.reports]
        assert modes[:4] == [JoinMode.BOOLEAN, JoinMode.BOOLEAN, JoinMode.INTERSECT, JoinMode.BOOLEAN]
        assert modes[4:] == [JoinMode.BOOLEAN] * 4
        assert result.reports[2].fallback_reason == "engine gave up"
        assert not any(report.restored for report in result.reports)
        assert result.miter_mode == JoinMode.INTERSECT
        assert result.warnings == (BOOLEAN_FAILED_WARNING,)
        assert len(document.entities) == 4
        for stile in result.stiles:
            assert stile.volume == pytest.approx(19.0 * 57.0 * (814.0 - 57.0))
        for rail in result.rails:
            assert rail.volume == pytest.approx(19.0 * 57.0 * (614.0 - 57.0))
            assert rail.is_manifold()

    @pytest.mark.parametrize("booleans", [True, False])
    def test_envelope(self, booleans: bool, miter_parameters: FrameParameters) -> None:
        document = BrepDocument(supports_solid_booleans=booleans)
        envelope = FrameAssembler(document).build(miter_parameters).bounds()

        assert envelope.width == pytest.approx(614.0)
        assert envelope.height == pytest.approx(814.0)
        assert envelope.thickness == pytest.approx(19.0)

    @pytest.mark.parametrize("booleans", [True, False])
    def test_member_volumes(self, booleans: bool, miter_parameters: FrameParameters) -> None:
        """Each end loses a right triangle of stile width by rail width."""
        document = BrepDocument(supports_solid_booleans=booleans)
        result = FrameAssembler(document).build(miter_parameters)

        for stile in result.stiles:
            assert stile.volume == pytest.approx(19.0 * 57.0 * (814.0 - 57.0))
        for rail in result.rails:
            assert rail.volume == pytest.approx(19.0 * 57.0 * (614.0 - 57.0))

    def test_placement(self, document: BrepDocument, miter_parameters: FrameParameters) -> None:
        result = FrameAssembler(document).build(miter_parameters)
        right = result.stiles[1]
        top = result.rails[1]

        assert right.bounds.minimum[0] == pytest.approx(557.0)
        assert top.bounds.minimum[2] == pytest.approx(757.0)
        assert top.bounds.maximum[0] == pytest.approx(614.0)

    def test_shaker_miter_builds(self, document_without_booleans: BrepDocument) -> None:
        parameters = FrameParameters(
            opening_width_mm=500, opening_height_mm=700, joint_type=JointType.MITER
        )
        result = FrameAssembler(document_without_booleans).build(parameters)

        assert result.bounds().width == pytest.approx(614.0)
        assert all(member.volume > 0 for member in result.members)


# =============================================================================
# Rebuilds and transactions
# =============================================================================


class TestRebuild:
    """Tests for rebuild and rollback behavior."""

    def test_rebuild_replaces_previous_frame(
        self, document: BrepDocument, cope_parameters: FrameParameters
    ) -> None:
        assembler = FrameAssembler(document)
        first = assembler.build(cope_parameters)
        second = assembler.build(cope_parameters)

        assert len(document.entities) == 4
        assert all(not member.is_valid() for member in first.members)
        assert all(document.contains(member) for member in second.members)

    def test_rebuild_keeps_unrelated_solids(
        self, document: BrepDocument, cope_parameters: FrameParameters
    ) -> None:
        panel = document.add_solid("Panel")
        FrameAssembler(document).build(cope_parameters)

        assert document.contains(panel)
        assert len(document.entities) == 5

    def test_build_is_one_operation(
        self, document: BrepDocument, cope_parameters: FrameParameters
    ) -> None:
        FrameAssembler(document).build(cope_parameters)
        assert document.committed_operations == [OPERATION_NAME]

    def test_failure_rolls_back(
        self,
        document: BrepDocument,
        cope_parameters: FrameParameters,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        first = FrameAssembler(document).build(cope_parameters)

        def broken_rail(*args, **kwargs):
            raise RuntimeError("rail failed")

        monkeypatch.setattr("doorframes.domain.frame_assembler.build_rail", broken_rail)

        with pytest.raises(RuntimeError):
            FrameAssembler(document).build(cope_parameters)

        assert document.entities == list(first.members)
        assert all(member.is_valid() for member in first.members)
        assert document.committed_operations == [OPERATION_NAME]
