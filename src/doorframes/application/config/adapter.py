"""Adapter converting FrameConfiguration into domain FrameParameters."""

from doorframes.application.config.schema import FrameConfiguration
from doorframes.domain.frame_assembler import FrameParameters


def config_to_parameters(config: FrameConfiguration) -> FrameParameters:
    """Convert a validated configuration into frame parameters.

    Args:
        config: A validated FrameConfiguration.

    Returns:
        FrameParameters ready for the FrameAssembler.

    Raises:
        FrameConfigurationError: If the values describe an unbuildable frame.
    """
    frame = config.frame
    return FrameParameters(
        opening_width_mm=frame.opening_width,
        opening_height_mm=frame.opening_height,
        stile_width_mm=frame.stile_width,
        rail_width_mm=frame.rail_width,
        door_thickness_mm=frame.door_thickness,
        joint_type=frame.joint_type,
        inside_profile_id=frame.inside_profile_id,
        frame_material=frame.frame_material,
        tag=frame.tag,
    )
