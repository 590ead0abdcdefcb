"""Five-piece frame assembly.

Builds the two stiles and two rails of a door or drawer front frame inside
one document transaction and joins them either cope-and-stick (continuous
stiles, rails spanning the clear opening) or mitered (every member full
length, all four corners cut at the stile/rail diagonal).

Frame coordinates: X runs across the frame, Y into the material with the
front face at ``y == 0``, Z up. The outside bottom-left-front corner sits at
the origin.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..contracts import GeometryDocumentProtocol, SolidProtocol
from .capabilities import solid_booleans_available
from .corner_join import CornerJoinEngine, JoinContext
from .members import (
    MemberRole,
    apply_member_metadata,
    build_rail,
    build_stile,
    remove_existing_frame_members,
    translate_member,
)
from .profiles import (
    MIN_DIMENSION_MM,
    SHAKER_PROFILE_DEPTH_MM,
    SHAKER_PROFILE_RUN_MM,
    ProfileKind,
    clamp_dimension,
    profile_kind_for,
    rail_profile,
    stile_profile,
)
from .results import CopingMode, JoinResult, JointType

logger = logging.getLogger(__name__)

OPERATION_NAME = "Build Five-Piece Frame"

DEFAULT_STILE_WIDTH_MM = 57.0
DEFAULT_DOOR_THICKNESS_MM = 19.0
DEFAULT_INSIDE_PROFILE_ID = "shaker_inside"
DEFAULT_FRONTS_TAG = "Fronts"

STILE_LEFT_NAME = "Stile-L"
STILE_RIGHT_NAME = "Stile-R"
RAIL_BOTTOM_NAME = "Rail-Bottom"
RAIL_TOP_NAME = "Rail-Top"

SQUARE_RAIL_ENDS_WARNING = (
    "Solid boolean operations unavailable; generated square rail ends."
)


class FrameConfigurationError(ValueError):
    """Raised when frame parameters cannot describe a buildable frame."""


def _positive_length(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise FrameConfigurationError(f"{name} must be a number, got {value!r}") from None
    if not number > MIN_DIMENSION_MM:
        raise FrameConfigurationError(f"{name} must be positive, got {value!r}")
    return number


@dataclass(frozen=True)
class FrameParameters:
    """Validated dimensions and options for one frame.

    ``joint_type`` accepts a ``JointType`` or its string value. A missing or
    non-positive ``rail_width_mm`` falls back to the stile width.

    Raises:
        FrameConfigurationError: On non-positive dimensions, an unknown joint
            type or an unsupported inside profile.
    """

    opening_width_mm: float
    opening_height_mm: float
    stile_width_mm: float = DEFAULT_STILE_WIDTH_MM
    rail_width_mm: float | None = None
    door_thickness_mm: float = DEFAULT_DOOR_THICKNESS_MM
    joint_type: JointType = JointType.COPE_STICK
    inside_profile_id: str = DEFAULT_INSIDE_PROFILE_ID
    frame_material: str | None = None
    tag: str | None = DEFAULT_FRONTS_TAG

    def __post_init__(self) -> None:
        try:
            joint_type = JointType(self.joint_type)
        except ValueError:
            raise FrameConfigurationError(
                f"Unsupported joint_type {self.joint_type!r}; "
                'expected "cope_stick" or "miter"'
            ) from None
        object.__setattr__(self, "joint_type", joint_type)

        try:
            profile_kind_for(self.inside_profile_id)
        except ValueError as error:
            raise FrameConfigurationError(str(error)) from None

        for name in ("opening_width_mm", "opening_height_mm", "stile_width_mm", "door_thickness_mm"):
            object.__setattr__(self, name, _positive_length(getattr(self, name), name))

        rail_width = self.rail_width_mm
        if not isinstance(rail_width, (int, float)) or isinstance(rail_width, bool):
            rail_width = None
        if rail_width is None or rail_width <= MIN_DIMENSION_MM:
            rail_width = self.stile_width_mm
        object.__setattr__(self, "rail_width_mm", float(rail_width))

    @property
    def outside_width_mm(self) -> float:
        return self.opening_width_mm + 2.0 * self.stile_width_mm

    @property
    def outside_height_mm(self) -> float:
        return self.opening_height_mm + 2.0 * self.rail_width_mm

    @property
    def profile_kind(self) -> ProfileKind:
        return profile_kind_for(self.inside_profile_id)


@dataclass(frozen=True)
class _ProfileDimensions:
    depth: float
    stile_run: float
    rail_run: float

    @classmethod
    def for_parameters(cls, parameters: FrameParameters) -> _ProfileDimensions:
        return cls(
            depth=clamp_dimension(SHAKER_PROFILE_DEPTH_MM, parameters.door_thickness_mm),
            stile_run=clamp_dimension(SHAKER_PROFILE_RUN_MM, parameters.stile_width_mm),
            rail_run=clamp_dimension(SHAKER_PROFILE_RUN_MM, parameters.rail_width_mm),
        )


class FrameAssembler:
    """Builds five-piece frames into a geometry document.

    Rebuilding replaces any frame members already in the document, so calling
    ``build`` repeatedly leaves exactly one frame behind.

    Args:
        document: Host document receiving the members.
    """

    def __init__(self, document: GeometryDocumentProtocol) -> None:
        self.document = document

    def build(self, parameters: FrameParameters) -> JoinResult:
        """Build a frame, replacing any previous one.

        The whole build is one document transaction. Corner cut failures are
        recovered and reported as warnings; anything else aborts the
        transaction and leaves the document unchanged.

        Args:
            parameters: Validated frame parameters.

        Returns:
            The members, the joint and cut modes used, and any warnings.
        """
        context = JoinContext(booleans_available=solid_booleans_available(self.document))
        logger.info(
            f"Building {parameters.joint_type.value} frame "
            f"{parameters.outside_width_mm:.1f} x {parameters.outside_height_mm:.1f} mm"
        )

        with self.document.transaction(OPERATION_NAME):
            remove_existing_frame_members(self.document)
            dimensions = _ProfileDimensions.for_parameters(parameters)
            if parameters.joint_type == JointType.COPE_STICK:
                result = self._build_cope_stick(parameters, dimensions, context)
            elif parameters.joint_type == JointType.MITER:
                result = self._build_miter(parameters, dimensions, context)
            else:
                raise FrameConfigurationError(f"Unsupported joint_type {parameters.joint_type!r}")

        for warning in result.warnings:
            logger.info(f"Frame warning: {warning}")
        return result

    # ------------------------------------------------------------------
    # Member construction
    # ------------------------------------------------------------------

    def _stile(
        self,
        parameters: FrameParameters,
        dimensions: _ProfileDimensions,
        inside_edge: str,
        name: str,
    ) -> SolidProtocol:
        profile = stile_profile(
            parameters.stile_width_mm,
            parameters.door_thickness_mm,
            dimensions.depth,
            dimensions.stile_run,
            inside_edge=inside_edge,
            kind=parameters.profile_kind,
        )
        return build_stile(self.document, profile, parameters.outside_height_mm, name)

    def _rail(
        self,
        parameters: FrameParameters,
        dimensions: _ProfileDimensions,
        length: float,
        inside_edge: str,
        name: str,
    ) -> SolidProtocol:
        profile = rail_profile(
            parameters.rail_width_mm,
            parameters.door_thickness_mm,
            dimensions.depth,
            dimensions.rail_run,
            inside_edge=inside_edge,
            kind=parameters.profile_kind,
        )
        return build_rail(self.document, profile, length, name)

    def _finish(
        self,
        parameters: FrameParameters,
        solid: SolidProtocol,
        role: MemberRole,
        name: str,
    ) -> None:
        apply_member_metadata(
            solid,
            role=role,
            name=name,
            tag=parameters.tag,
            material=parameters.frame_material,
        )

    # ------------------------------------------------------------------
    # Cope and stick
    # ------------------------------------------------------------------

    def _build_cope_stick(
        self,
        parameters: FrameParameters,
        dimensions: _ProfileDimensions,
        context: JoinContext,
    ) -> JoinResult:
        sw = parameters.stile_width_mm
        rw = parameters.rail_width_mm
        width = parameters.outside_width_mm
        height = parameters.outside_height_mm
        clear_span = width - 2.0 * sw

        left = self._stile(parameters, dimensions, "right", STILE_LEFT_NAME)
        right = self._stile(parameters, dimensions, "left", STILE_RIGHT_NAME)
        translate_member(right, x=width - sw)

        bottom = self._rail(parameters, dimensions, clear_span, "top", RAIL_BOTTOM_NAME)
        translate_member(bottom, x=sw)
        top = self._rail(parameters, dimensions, clear_span, "bottom", RAIL_TOP_NAME)
        translate_member(top, x=sw, z=height - rw)

        if context.booleans_available:
            coping_mode = CopingMode.BOOLEAN_SUBTRACT
        else:
            coping_mode = CopingMode.SQUARE_FALLBACK
            context.warn(SQUARE_RAIL_ENDS_WARNING)

        self._finish(parameters, left, MemberRole.STILE, STILE_LEFT_NAME)
        self._finish(parameters, right, MemberRole.STILE, STILE_RIGHT_NAME)
        self._finish(parameters, bottom, MemberRole.RAIL, RAIL_BOTTOM_NAME)
        self._finish(parameters, top, MemberRole.RAIL, RAIL_TOP_NAME)

        return JoinResult(
            stiles=(left, right),
            rails=(bottom, top),
            joint_type=JointType.COPE_STICK,
            coping_mode=coping_mode,
            warnings=tuple(context.warnings),
        )

    # ------------------------------------------------------------------
    # Miter
    # ------------------------------------------------------------------

    def _build_miter(
        self,
        parameters: FrameParameters,
        dimensions: _ProfileDimensions,
        context: JoinContext,
    ) -> JoinResult:
        engine = CornerJoinEngine(self.document, context)
        sw = parameters.stile_width_mm
        rw = parameters.rail_width_mm
        t = parameters.door_thickness_mm
        width = parameters.outside_width_mm
        height = parameters.outside_height_mm

        # Cuts are made in member-local coordinates, before translation.
        stile_keep = (sw * 0.5, t * 0.5, height * 0.5)

        left = self._stile(parameters, dimensions, "right", STILE_LEFT_NAME)
        left = engine.cut_with_plane_points(
            left, (0.0, 0.0, 0.0), (0.0, t, 0.0), (sw, 0.0, rw), keep_point=stile_keep
        )
        left = engine.cut_with_plane_points(
            left, (0.0, 0.0, height), (0.0, t, height), (sw, 0.0, height - rw), keep_point=stile_keep
        )

        right = self._stile(parameters, dimensions, "left", STILE_RIGHT_NAME)
        right = engine.cut_with_plane_points(
            right, (sw, 0.0, 0.0), (sw, t, 0.0), (0.0, 0.0, rw), keep_point=stile_keep
        )
        right = engine.cut_with_plane_points(
            right, (sw, 0.0, height), (sw, t, height), (0.0, 0.0, height - rw), keep_point=stile_keep
        )
        translate_member(right, x=width - sw)

        bottom = self._miter_rail(parameters, dimensions, engine, "top", RAIL_BOTTOM_NAME)
        top = self._miter_rail(parameters, dimensions, engine, "bottom", RAIL_TOP_NAME)
        translate_member(top, z=height - rw)

        self._finish(parameters, left, MemberRole.STILE, STILE_LEFT_NAME)
        self._finish(parameters, right, MemberRole.STILE, STILE_RIGHT_NAME)
        self._finish(parameters, bottom, MemberRole.RAIL, RAIL_BOTTOM_NAME)
        self._finish(parameters, top, MemberRole.RAIL, RAIL_TOP_NAME)

        return JoinResult(
            stiles=(left, right),
            rails=(bottom, top),
            joint_type=JointType.MITER,
            miter_mode=context.resolved_miter_mode(),
            warnings=tuple(context.warnings),
            reports=tuple(context.reports),
        )

    def _miter_rail(
        self,
        parameters: FrameParameters,
        dimensions: _ProfileDimensions,
        engine: CornerJoinEngine,
        inside_edge: str,
        name: str,
    ) -> SolidProtocol:
        sw = parameters.stile_width_mm
        rw = parameters.rail_width_mm
        t = parameters.door_thickness_mm
        width = parameters.outside_width_mm

        # The inside edge carries the profile; the outer edge is the frame edge.
        inside_z = rw if inside_edge == "top" else 0.0
        outer_z = 0.0 if inside_edge == "top" else rw
        keep_point = (width * 0.5, t * 0.5, (inside_z + outer_z) * 0.5)

        rail = self._rail(parameters, dimensions, width, inside_edge, name)
        rail = engine.cut_with_plane_points(
            rail, (0.0, 0.0, outer_z), (0.0, t, outer_z), (sw, 0.0, inside_z), keep_point=keep_point
        )
        rail = engine.cut_with_plane_points(
            rail,
            (width, 0.0, outer_z),
            (width, t, outer_z),
            (width - sw, 0.0, inside_z),
            keep_point=keep_point,
        )
        return rail
