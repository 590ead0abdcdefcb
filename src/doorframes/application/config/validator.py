"""Validation structures and woodworking advisory checks for frames."""

from dataclasses import dataclass, field
from typing import Any

from doorframes.application.config.adapter import config_to_parameters
from doorframes.application.config.schema import FrameConfiguration
from doorframes.domain import FrameConfigurationError, JointType, ProfileKind
from doorframes.domain.profiles import SHAKER_PROFILE_DEPTH_MM


@dataclass
class ValidationError:
    """Represents a blocking validation error.

    Attributes:
        path: JSON path to the invalid field (e.g., "frame.stile_width")
        message: Human-readable description of the error
        value: The invalid value that caused the error
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """Represents a non-blocking validation warning.

    Attributes:
        path: JSON path to the concerning field
        message: Human-readable description of the concern
        suggestion: Optional suggested remediation
    """

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Container for validation errors and warnings."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """Get the CLI exit code based on validation status.

        Returns:
            0 if valid with no warnings
            1 if there are errors
            2 if valid but has warnings
        """
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0


def validate_config(config: FrameConfiguration) -> ValidationResult:
    """Check a schema-valid configuration for buildability and advisories.

    Args:
        config: A configuration that already passed schema validation.

    Returns:
        ValidationResult with blocking errors and woodworking advisories.
    """
    result = ValidationResult()

    try:
        parameters = config_to_parameters(config)
    except FrameConfigurationError as e:
        result.errors.append(ValidationError(path="frame", message=str(e)))
        return result

    if (
        parameters.joint_type == JointType.MITER
        and abs(parameters.stile_width_mm - parameters.rail_width_mm) > 1e-6
    ):
        result.warnings.append(
            ValidationWarning(
                path="frame.rail_width",
                message=(
                    f"Stile width {parameters.stile_width_mm:g} mm and rail width "
                    f"{parameters.rail_width_mm:g} mm differ; miters will not be 45 degrees"
                ),
                suggestion="Use equal stile and rail widths for true 45 degree miters",
            )
        )

    if (
        parameters.profile_kind == ProfileKind.SHAKER
        and parameters.door_thickness_mm < SHAKER_PROFILE_DEPTH_MM
    ):
        result.warnings.append(
            ValidationWarning(
                path="frame.door_thickness",
                message=(
                    f"Door thickness {parameters.door_thickness_mm:g} mm is less than the "
                    f"{SHAKER_PROFILE_DEPTH_MM:g} mm shaker profile depth; the bevel will be "
                    "clamped to the full thickness"
                ),
                suggestion="Use square_inside or thicker stock",
            )
        )

    if parameters.joint_type == JointType.COPE_STICK and not config.geometry.solid_booleans:
        result.warnings.append(
            ValidationWarning(
                path="geometry.solid_booleans",
                message="Solid booleans are disabled; cope-and-stick rails get square ends",
            )
        )

    return result
