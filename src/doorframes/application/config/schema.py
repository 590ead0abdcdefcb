"""Pydantic models for frame configuration files.

A configuration file describes one five-piece frame, the output options for
reports and exports, and the geometry session used to build it. All lengths
are millimetres.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from doorframes.domain.frame_assembler import (
    DEFAULT_DOOR_THICKNESS_MM,
    DEFAULT_FRONTS_TAG,
    DEFAULT_INSIDE_PROFILE_ID,
    DEFAULT_STILE_WIDTH_MM,
)
from doorframes.domain.profiles import SUPPORTED_PROFILE_IDS
from doorframes.domain.results import JointType

# Version 1.0: Initial schema (frame, output, geometry sections)
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class FrameConfig(BaseModel):
    """Frame dimensions and joinery.

    Attributes:
        opening_width: Clear opening width between the stiles.
        opening_height: Clear opening height between the rails.
        stile_width: Width of each stile.
        rail_width: Width of each rail; defaults to the stile width.
        door_thickness: Material thickness of the frame.
        joint_type: "cope_stick" or "miter".
        inside_profile_id: Inside edge profile identifier.
        frame_material: Material name assigned to every member.
        tag: Tag (layer) assigned to every member.
    """

    model_config = ConfigDict(extra="forbid")

    opening_width: float = Field(..., gt=0, description="Clear opening width in mm")
    opening_height: float = Field(..., gt=0, description="Clear opening height in mm")
    stile_width: float = Field(default=DEFAULT_STILE_WIDTH_MM, gt=0)
    rail_width: float | None = Field(
        default=None, gt=0, description="Rail width in mm (defaults to stile width)"
    )
    door_thickness: float = Field(default=DEFAULT_DOOR_THICKNESS_MM, gt=0)
    joint_type: JointType = JointType.COPE_STICK
    inside_profile_id: str = DEFAULT_INSIDE_PROFILE_ID
    frame_material: str | None = Field(default=None, min_length=1)
    tag: str | None = DEFAULT_FRONTS_TAG

    @field_validator("inside_profile_id")
    @classmethod
    def validate_profile_id(cls, v: str) -> str:
        if v not in SUPPORTED_PROFILE_IDS:
            raise ValueError(
                f"Unsupported inside profile '{v}'. "
                f"Supported profiles: {sorted(SUPPORTED_PROFILE_IDS)}"
            )
        return v


class OutputConfig(BaseModel):
    """Report format and optional STL export path."""

    model_config = ConfigDict(extra="forbid")

    format: Literal["text", "json"] = "text"
    stl_file: str | None = None


class GeometryConfig(BaseModel):
    """Geometry session options."""

    model_config = ConfigDict(extra="forbid")

    solid_booleans: bool = Field(
        default=True,
        description="Whether the geometry document offers solid boolean subtraction",
    )


class FrameConfiguration(BaseModel):
    """Root configuration model.

    Example:
        >>> config = FrameConfiguration(
        ...     schema_version="1.0",
        ...     frame=FrameConfig(opening_width=500, opening_height=700),
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    frame: FrameConfig
    output: OutputConfig = Field(default_factory=OutputConfig)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minor versions of them."""
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )
