"""Frame configuration file loading.

A configuration file is a JSON object with a required ``frame`` section and
optional ``output`` and ``geometry`` sections. Every way loading can fail is
reported as a ``ConfigError`` whose ``error_type`` tells the CLI how to
present it, and whose ``details`` point at the offending frame field with a
hint on how to fix it.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from doorframes.application.config.schema import (
    SUPPORTED_VERSIONS,
    FrameConfig,
    FrameConfiguration,
    GeometryConfig,
    OutputConfig,
)
from doorframes.domain.profiles import SUPPORTED_PROFILE_IDS
from doorframes.domain.results import JointType

ROOT_PATH = "(root)"

# Sections whose unknown keys get a "known fields" hint.
SECTION_MODELS: dict[str, type[BaseModel]] = {
    ROOT_PATH: FrameConfiguration,
    "frame": FrameConfig,
    "output": OutputConfig,
    "geometry": GeometryConfig,
}

FIELD_HINTS: dict[str, str] = {
    "schema_version": f"Use one of {sorted(SUPPORTED_VERSIONS)}",
    "frame": "Add a 'frame' section with opening_width and opening_height",
    "frame.opening_width": "Clear width between the stiles, in mm",
    "frame.opening_height": "Clear height between the rails, in mm",
    "frame.joint_type": f"Use one of {[joint.value for joint in JointType]}",
    "frame.inside_profile_id": f"Use one of {sorted(SUPPORTED_PROFILE_IDS)}",
    "output.format": "Use 'text' or 'json'",
}


class ConfigError(Exception):
    """Raised when a frame configuration cannot be loaded.

    Attributes:
        message: The primary error message
        error_type: One of file_not_found, permission_denied, file_read_error,
            json_parse or validation
        path: Path to the configuration file (None for dictionaries)
        details: For json_parse, the line, column and message. For validation,
            one entry per failing field with path, message, value, error_type
            and an optional hint
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a Pydantic location tuple as a JSON path string.

    Args:
        loc: Path segments, strings for keys and ints for list indices.

    Returns:
        A dotted path like ``frame.stile_width``, or ``(root)`` for an empty
        location.

    Examples:
        >>> _format_json_path(("frame", "stile_width"))
        'frame.stile_width'
        >>> _format_json_path(())
        '(root)'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts) or ROOT_PATH


def _hint_for(path: str, error_type: str) -> str | None:
    if error_type == "extra_forbidden":
        section = path.rpartition(".")[0] or ROOT_PATH
        model = SECTION_MODELS.get(section)
        if model is not None:
            return f"Known fields: {', '.join(sorted(model.model_fields))}"
        return None
    if error_type == "greater_than":
        return "Lengths are millimetres and must be positive"
    return FIELD_HINTS.get(path)


def _extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    """Turn a Pydantic ValidationError into per-field error details.

    Args:
        error: The error raised by ``FrameConfiguration.model_validate``.

    Returns:
        One dictionary per failure with path, message, value, error_type
        and hint.
    """
    details: list[dict[str, Any]] = []
    for err in error.errors():
        path = _format_json_path(err["loc"])
        details.append(
            {
                "path": path,
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
                "hint": _hint_for(path, err["type"]),
            }
        )
    return details


def _format_validation_error_message(details: list[dict[str, Any]]) -> str:
    # Section-sized inputs (a whole dict) are left out of the message.
    lines = ["Configuration validation failed:"]
    for detail in details:
        path = detail["path"]
        message = detail["message"]
        value = detail.get("value")
        if value is not None and not isinstance(value, dict):
            lines.append(f"  - {path}: {message} (got: {value!r})")
        else:
            lines.append(f"  - {path}: {message}")
    return "\n".join(lines)


def _validate(data: Any, path: Path | None) -> FrameConfiguration:
    if not isinstance(data, dict):
        details = [
            {
                "path": ROOT_PATH,
                "message": "Configuration must be a JSON object",
                "value": data,
                "error_type": "dict_type",
                "hint": FIELD_HINTS["frame"],
            }
        ]
        raise ConfigError(
            message=_format_validation_error_message(details),
            error_type="validation",
            path=path,
            details=details,
        )

    try:
        return FrameConfiguration.model_validate(data)
    except PydanticValidationError as e:
        details = _extract_validation_errors(e)
        raise ConfigError(
            message=_format_validation_error_message(details),
            error_type="validation",
            path=path,
            details=details,
        )


def load_config(path: Path) -> FrameConfiguration:
    """Load and validate a frame configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file

    Returns:
        A validated FrameConfiguration instance

    Raises:
        ConfigError: If the file cannot be loaded or validated.
            The error_type attribute indicates the specific error category:
            - "file_not_found": File does not exist
            - "permission_denied": File exists but cannot be read
            - "file_read_error": Any other read failure
            - "json_parse": Invalid JSON syntax
            - "validation": The JSON does not describe a valid frame

    Example:
        >>> try:
        ...     config = load_config(Path("door.json"))
        ... except ConfigError as e:
        ...     for detail in e.details:
        ...         print(f"{detail['path']}: {detail['message']}")
    """
    if not path.exists():
        raise ConfigError(
            message=f"Config file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            message=f"Permission denied reading config file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            message=f"Error reading config file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in config file: {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[
                {
                    "line": e.lineno,
                    "column": e.colno,
                    "message": e.msg,
                }
            ],
        )

    return _validate(data, path)


def load_config_from_dict(data: dict[str, Any]) -> FrameConfiguration:
    """Load and validate a frame configuration from a dictionary.

    Args:
        data: Parsed configuration, e.g. assembled by a caller in code.

    Returns:
        A validated FrameConfiguration instance

    Raises:
        ConfigError: With error_type "validation" if the data does not
            describe a valid frame.
    """
    return _validate(data, None)
