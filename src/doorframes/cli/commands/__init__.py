"""CLI command implementations for the doorframes application.

This package contains subcommands for the doorframes CLI, including:
- validate: Validate a configuration file
"""

from doorframes.cli.commands.validate import validate_command

__all__ = ["validate_command"]
