"""Typer CLI for five-piece door frame generation."""

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from doorframes.application import BuildFrameCommand
from doorframes.application.config import (
    ConfigError,
    FrameConfiguration,
    config_to_parameters,
    load_config,
    load_config_from_dict,
    merge_config_with_cli,
)
from doorframes.domain import FrameConfigurationError
from doorframes.infrastructure import FrameReportFormatter, JsonExporter, StlExporter
from doorframes.cli.commands import validate_command


app = typer.Typer(
    name="doorframes",
    help="Build five-piece cabinet door frames with cope-and-stick or mitered corners.",
)

# Register validate command
app.command(name="validate")(validate_command)


def _config_from_options(
    opening_width: float | None,
    opening_height: float | None,
) -> FrameConfiguration:
    """Create a minimal configuration for CLI-only mode."""
    if opening_width is None or opening_height is None:
        typer.echo(
            "Error: --opening-width and --opening-height are required when --config is not provided",
            err=True,
        )
        raise typer.Exit(code=1)

    data: dict[str, Any] = {
        "schema_version": "1.0",
        "frame": {"opening_width": opening_width, "opening_height": opening_height},
    }
    try:
        return load_config_from_dict(data)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def build(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to JSON configuration file"),
    ] = None,
    opening_width: Annotated[
        float | None,
        typer.Option("--opening-width", "-w", help="Clear opening width in mm"),
    ] = None,
    opening_height: Annotated[
        float | None,
        typer.Option("--opening-height", "-h", help="Clear opening height in mm"),
    ] = None,
    stile_width: Annotated[
        float | None,
        typer.Option("--stile-width", help="Stile width in mm"),
    ] = None,
    rail_width: Annotated[
        float | None,
        typer.Option("--rail-width", help="Rail width in mm (defaults to stile width)"),
    ] = None,
    thickness: Annotated[
        float | None,
        typer.Option("--thickness", "-t", help="Door thickness in mm"),
    ] = None,
    joint: Annotated[
        str | None,
        typer.Option("--joint", "-j", help="Corner joint: cope_stick or miter"),
    ] = None,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-p", help="Inside profile: shaker_inside or square_inside"),
    ] = None,
    material: Annotated[
        str | None,
        typer.Option("--material", "-m", help="Material name applied to every member"),
    ] = None,
    no_booleans: Annotated[
        bool,
        typer.Option(
            "--no-booleans",
            help="Build without solid boolean subtraction (geometric intersection miters)",
        ),
    ] = False,
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Report format: text or json"),
    ] = None,
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the frame members to this STL file"),
    ] = None,
    show_cuts: Annotated[
        bool,
        typer.Option("--show-cuts", help="List every corner cut in the text report"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Build a five-piece door frame and print a report.

    Examples:
        doorframes build --opening-width 500 --opening-height 700
        doorframes build --config my-door.json --joint miter
        doorframes build -c my-door.json -o door.stl --format json
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config_file is not None:
        try:
            config = load_config(config_file)
        except ConfigError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)
    else:
        config = _config_from_options(opening_width, opening_height)

    try:
        config = merge_config_with_cli(
            config,
            opening_width=opening_width,
            opening_height=opening_height,
            stile_width=stile_width,
            rail_width=rail_width,
            door_thickness=thickness,
            joint_type=joint,
            inside_profile_id=profile,
            frame_material=material,
            output_format=output_format,
            stl_file=output_file,
            solid_booleans=False if no_booleans else None,
        )
    except ValidationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        parameters = config_to_parameters(config)
    except FrameConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    output = BuildFrameCommand().execute(
        parameters, solid_booleans=config.geometry.solid_booleans
    )

    if not output.is_valid:
        typer.echo("Errors:", err=True)
        for error in output.errors:
            typer.echo(f"  - {error}", err=True)
        raise typer.Exit(code=1)

    if config.output.format == "json":
        typer.echo(JsonExporter().export(output))
    else:
        typer.echo(FrameReportFormatter(include_cuts=show_cuts).format(output))

    if config.output.stl_file:
        assert output.result is not None
        StlExporter().export_to_file(output.result, config.output.stl_file)
        if config.output.format != "json":
            typer.echo(f"\nSTL exported to: {config.output.stl_file}")


if __name__ == "__main__":
    app()
