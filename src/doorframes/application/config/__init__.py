"""Configuration schema and loading for frame builds.

Public API:
    - FrameConfiguration: Root configuration model
    - FrameConfig: Frame dimensions and joinery
    - OutputConfig: Report format and STL export path
    - GeometryConfig: Geometry session options
    - load_config: Load configuration from a JSON file
    - load_config_from_dict: Load configuration from a dictionary
    - ConfigError: Exception for configuration errors
    - config_to_parameters: Convert a configuration to FrameParameters
    - merge_config_with_cli: Apply CLI overrides to a configuration
    - validate_config: Buildability checks and woodworking advisories

Example:
    >>> from pathlib import Path
    >>> from doorframes.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("door.json"))
    ...     print(f"Opening: {config.frame.opening_width}x{config.frame.opening_height}")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from doorframes.application.config.adapter import config_to_parameters
from doorframes.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from doorframes.application.config.merger import merge_config_with_cli
from doorframes.application.config.schema import (
    SUPPORTED_VERSIONS,
    FrameConfig,
    FrameConfiguration,
    GeometryConfig,
    OutputConfig,
)
from doorframes.application.config.validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate_config,
)

__all__ = [
    "SUPPORTED_VERSIONS",
    "ConfigError",
    "FrameConfig",
    "FrameConfiguration",
    "GeometryConfig",
    "OutputConfig",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "config_to_parameters",
    "load_config",
    "load_config_from_dict",
    "merge_config_with_cli",
    "validate_config",
]
