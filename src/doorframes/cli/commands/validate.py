"""Validate command for frame configuration files.

Loads a configuration, runs the buildability checks and woodworking
advisories, and prints a summary of the frame that would be built.
"""

from pathlib import Path
from typing import Annotated

import typer

from doorframes.application.config import (
    ConfigError,
    FrameConfiguration,
    ValidationResult,
    config_to_parameters,
    load_config,
    validate_config,
)


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON frame configuration to validate"),
    ],
) -> None:
    """Validate a frame configuration file.

    Checks the configuration file for:
    - Read errors (missing file, permissions) and JSON syntax errors
    - Schema errors in the frame, output and geometry sections
    - Unbuildable frames and woodworking advisories (miter angles, profile
      depth, cope-and-stick rail ends without solid booleans)

    Exit codes:
        0 - Configuration is valid with no warnings
        1 - Configuration has errors (cannot be used)
        2 - Configuration is valid but has warnings

    Example:
        doorframes validate my-door.json
    """
    typer.echo(f"Validating {config_file}...")
    typer.echo()

    try:
        config = load_config(config_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    result = validate_config(config)
    if result.is_valid:
        _display_frame_summary(config)
    _display_validation_result(result)

    raise typer.Exit(code=result.exit_code)


def _display_load_error(error: ConfigError) -> None:
    """Print why a configuration could not be loaded.

    Args:
        error: The ConfigError raised by ``load_config``.
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "permission_denied":
        typer.echo(f"  Permission denied: {error.path}", err=True)
        typer.echo("    Suggestion: Check that the file is readable by the current user", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            typer.echo(f"  {detail.get('path', 'unknown')}: {detail.get('message')}", err=True)
            value = detail.get("value")
            if value is not None and not isinstance(value, dict):
                typer.echo(f"    Value: {value!r}", err=True)
            if detail.get("hint"):
                typer.echo(f"    Hint: {detail['hint']}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)

    typer.echo()
    typer.echo("Validation failed.", err=True)


def _display_frame_summary(config: FrameConfiguration) -> None:
    """Print the frame a valid configuration describes.

    Args:
        config: A configuration that passed ``validate_config`` without errors.
    """
    parameters = config_to_parameters(config)
    booleans = "on" if config.geometry.solid_booleans else "off"

    typer.echo("Frame:")
    typer.echo(
        f"  Outside:   {parameters.outside_width_mm:g} x {parameters.outside_height_mm:g} "
        f"x {parameters.door_thickness_mm:g} mm"
    )
    typer.echo(
        f"  Members:   stiles {parameters.stile_width_mm:g} mm, "
        f"rails {parameters.rail_width_mm:g} mm"
    )
    typer.echo(f"  Joint:     {parameters.joint_type.value}")
    typer.echo(f"  Profile:   {parameters.inside_profile_id}")
    typer.echo(f"  Booleans:  {booleans}")
    typer.echo()


def _display_validation_result(result: ValidationResult) -> None:
    if result.errors:
        typer.echo("Errors:", err=True)
        for error in result.errors:
            typer.echo(f"  {error.path}: {error.message}", err=True)
        typer.echo()

    if result.warnings:
        typer.echo("Warnings:")
        for warning in result.warnings:
            typer.echo(f"  {warning.path}: {warning.message}")
            if warning.suggestion:
                typer.echo(f"    Suggestion: {warning.suggestion}")
        typer.echo()

    if result.errors:
        typer.echo(f"Validation failed: {len(result.errors)} error(s)", err=True)
    elif result.warnings:
        typer.echo(f"Validation passed with {len(result.warnings)} warning(s)")
    else:
        typer.echo("Validation passed. Configuration is valid.")
