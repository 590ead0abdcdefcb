"""Domain layer - frame geometry and corner joinery."""

from .capabilities import solid_booleans_available
from .corner_join import (
    CornerJoinEngine,
    CutReport,
    CuttingPlane,
    JoinContext,
    JoinMode,
    KeepSide,
    resolve_keep_side,
    trace_boundary_loops,
)
from .frame_assembler import (
    OPERATION_NAME,
    FrameAssembler,
    FrameConfigurationError,
    FrameParameters,
)
from .members import (
    FRAME_DICTIONARY,
    MemberRole,
    apply_member_metadata,
    build_rail,
    build_stile,
    member_role,
    remove_existing_frame_members,
    translate_member,
)
from .profiles import (
    DegenerateProfileError,
    Profile,
    ProfileKind,
    rail_profile,
    shaker_profile_run,
    stile_profile,
)
from .results import CopingMode, FrameEnvelope, JoinResult, JointType

__all__ = [
    "FRAME_DICTIONARY",
    "OPERATION_NAME",
    "CopingMode",
    "CornerJoinEngine",
    "CutReport",
    "CuttingPlane",
    "DegenerateProfileError",
    "FrameAssembler",
    "FrameConfigurationError",
    "FrameEnvelope",
    "FrameParameters",
    "JoinContext",
    "JoinMode",
    "JoinResult",
    "JointType",
    "KeepSide",
    "MemberRole",
    "Profile",
    "ProfileKind",
    "apply_member_metadata",
    "build_rail",
    "build_stile",
    "member_role",
    "rail_profile",
    "remove_existing_frame_members",
    "resolve_keep_side",
    "shaker_profile_run",
    "solid_booleans_available",
    "stile_profile",
    "trace_boundary_loops",
    "translate_member",
]
