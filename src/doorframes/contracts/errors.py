"""Exceptions raised by host geometry libraries."""

from __future__ import annotations


class GeometryError(Exception):
    """Base class for failures inside the geometry library."""


class DegenerateFaceError(GeometryError):
    """Raised when a face cannot be created from the given points.

    Typical causes are fewer than three distinct points, collinear points,
    or points that do not lie in one plane.
    """


class BooleanOperationError(GeometryError):
    """Raised when a solid boolean operation cannot produce a valid solid."""
