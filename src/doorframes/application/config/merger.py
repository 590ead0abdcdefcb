"""Configuration merging utilities for CLI override support.

Precedence: CLI args > config values > defaults. Only non-None CLI
arguments override configuration values.
"""

from pathlib import Path
from typing import Any

from doorframes.application.config.schema import (
    FrameConfig,
    FrameConfiguration,
    GeometryConfig,
    OutputConfig,
)


def merge_config_with_cli(
    config: FrameConfiguration,
    *,
    opening_width: float | None = None,
    opening_height: float | None = None,
    stile_width: float | None = None,
    rail_width: float | None = None,
    door_thickness: float | None = None,
    joint_type: str | None = None,
    inside_profile_id: str | None = None,
    frame_material: str | None = None,
    output_format: str | None = None,
    stl_file: str | Path | None = None,
    solid_booleans: bool | None = None,
) -> FrameConfiguration:
    """Merge CLI arguments with configuration values.

    Args:
        config: The base FrameConfiguration to merge with
        opening_width: Override for frame.opening_width (if not None)
        opening_height: Override for frame.opening_height (if not None)
        stile_width: Override for frame.stile_width (if not None)
        rail_width: Override for frame.rail_width (if not None)
        door_thickness: Override for frame.door_thickness (if not None)
        joint_type: Override for frame.joint_type (if not None)
        inside_profile_id: Override for frame.inside_profile_id (if not None)
        frame_material: Override for frame.frame_material (if not None)
        output_format: Override for output.format (if not None)
        stl_file: Override for output.stl_file (if not None)
        solid_booleans: Override for geometry.solid_booleans (if not None)

    Returns:
        A new, re-validated FrameConfiguration with merged values

    Example:
        >>> merged = merge_config_with_cli(config, joint_type="miter")
        >>> merged.frame.joint_type
        <JointType.MITER: 'miter'>
    """
    overrides = {
        "opening_width": opening_width,
        "opening_height": opening_height,
        "stile_width": stile_width,
        "rail_width": rail_width,
        "door_thickness": door_thickness,
        "joint_type": joint_type,
        "inside_profile_id": inside_profile_id,
        "frame_material": frame_material,
    }
    frame_data: dict[str, Any] = config.frame.model_dump()
    frame_data.update({key: value for key, value in overrides.items() if value is not None})

    output_data = _build_output_data(config, output_format, stl_file)

    geometry_data = config.geometry.model_dump()
    if solid_booleans is not None:
        geometry_data["solid_booleans"] = solid_booleans

    return FrameConfiguration(
        schema_version=config.schema_version,
        frame=FrameConfig.model_validate(frame_data),
        output=OutputConfig.model_validate(output_data),
        geometry=GeometryConfig.model_validate(geometry_data),
    )


def _build_output_data(
    config: FrameConfiguration,
    output_format: str | None,
    stl_file: str | Path | None,
) -> dict[str, Any]:
    output = config.output

    output_data: dict[str, Any] = {
        "format": output_format if output_format is not None else output.format,
    }

    if stl_file is not None:
        output_data["stl_file"] = str(stl_file) if isinstance(stl_file, Path) else stl_file
    elif output.stl_file is not None:
        output_data["stl_file"] = output.stl_file

    return output_data
