"""Cross-section profiles for frame stiles and rails.

A profile is the closed polygon a member is extruded from. Coordinates are
``(across, depth)`` pairs in the member's cross-section plane: ``across``
runs over the member width, ``depth`` runs into the material thickness with
the front face at ``depth == 0``.

Two inside profiles are supported:
- square: a plain rectangle
- shaker: the rectangle with the front corner of the inside long edge
  beveled by ``run`` across and ``depth`` into the thickness
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from math import hypot, radians, tan

MIN_DIMENSION_MM = 1.0e-3
SHAKER_PROFILE_DEPTH_MM = 6.0
SHAKER_PROFILE_ANGLE_DEGREES = 18.0

# Consecutive profile points closer than this are considered coincident.
POINT_TOLERANCE_MM = 1.0e-6


class ProfileKind(str, Enum):
    """Inside-edge treatment of a frame member."""

    SQUARE = "square"
    SHAKER = "shaker"


SUPPORTED_PROFILE_IDS: dict[str, ProfileKind] = {
    "square_inside": ProfileKind.SQUARE,
    "shaker_inside": ProfileKind.SHAKER,
    "shaker_bevel": ProfileKind.SHAKER,
    "shaker": ProfileKind.SHAKER,
}


class DegenerateProfileError(ValueError):
    """Raised when a profile polygon cannot bound a face."""


def profile_kind_for(inside_profile_id: str) -> ProfileKind:
    """Map an inside profile identifier to its profile kind.

    Raises:
        ValueError: If the identifier is not supported.
    """
    try:
        return SUPPORTED_PROFILE_IDS[str(inside_profile_id)]
    except KeyError:
        supported = ", ".join(sorted(SUPPORTED_PROFILE_IDS))
        raise ValueError(
            f"Unsupported inside_profile_id: {inside_profile_id!r} "
            f"(expected one of: {supported})"
        ) from None


def shaker_profile_run(
    depth: float = SHAKER_PROFILE_DEPTH_MM,
    bevel_angle_degrees: float = SHAKER_PROFILE_ANGLE_DEGREES,
) -> float:
    """Horizontal run of the shaker bevel for a given depth and angle.

    The run is ``depth * tan(angle)``, capped at ``depth`` so the bevel never
    exceeds the material depth, and never smaller than ``MIN_DIMENSION_MM``.
    A non-positive run from a degenerate angle falls back to ``depth``.
    """
    run = depth * tan(radians(bevel_angle_degrees))
    if run > depth:
        run = depth
    if run <= 0:
        run = depth
    return max(run, MIN_DIMENSION_MM)


SHAKER_PROFILE_RUN_MM = shaker_profile_run()


def clamp_dimension(value: float, limit: float) -> float:
    """Clamp ``value`` to ``limit`` from above and ``MIN_DIMENSION_MM`` from below."""
    return max(min(value, limit), MIN_DIMENSION_MM)


@dataclass(frozen=True)
class Profile:
    """Closed cross-section polygon of a frame member.

    Attributes:
        points: Ordered ``(across, depth)`` points; the closing edge is implied.
        kind: Profile kind the points were built for.
    """

    points: tuple[tuple[float, float], ...]
    kind: ProfileKind = ProfileKind.SHAKER

    def __post_init__(self) -> None:
        if len(self.points) < 3:
            raise DegenerateProfileError("Profile needs at least 3 points")
        count = len(self.points)
        for index in range(count):
            x0, y0 = self.points[index]
            x1, y1 = self.points[(index + 1) % count]
            if hypot(x1 - x0, y1 - y0) <= POINT_TOLERANCE_MM:
                raise DegenerateProfileError(
                    f"Profile points {index} and {(index + 1) % count} coincide"
                )
        if abs(self.signed_area) <= POINT_TOLERANCE_MM:
            raise DegenerateProfileError("Profile has zero area")

    @property
    def signed_area(self) -> float:
        """Shoelace area, positive for counter-clockwise points."""
        total = 0.0
        count = len(self.points)
        for index in range(count):
            x0, y0 = self.points[index]
            x1, y1 = self.points[(index + 1) % count]
            total += x0 * y1 - x1 * y0
        return total / 2.0


def _base_points(
    width: float,
    thickness: float,
    profile_depth: float,
    profile_run: float,
    kind: ProfileKind,
) -> list[tuple[float, float]]:
    # Inside edge at across == width.
    if kind == ProfileKind.SQUARE:
        return [(0.0, 0.0), (width, 0.0), (width, thickness), (0.0, thickness)]
    points = [
        (0.0, 0.0),
        (width - profile_run, 0.0),
        (width, profile_depth),
        (width, thickness),
        (0.0, thickness),
    ]
    # A bevel as deep as the stock or as wide as the member collapses a corner.
    return _drop_coincident(points)


def _drop_coincident(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    kept: list[tuple[float, float]] = []
    for point in points:
        if kept and hypot(point[0] - kept[-1][0], point[1] - kept[-1][1]) <= POINT_TOLERANCE_MM:
            continue
        kept.append(point)
    if len(kept) > 1 and hypot(kept[0][0] - kept[-1][0], kept[0][1] - kept[-1][1]) <= POINT_TOLERANCE_MM:
        kept.pop()
    return kept


def stile_profile(
    width: float,
    thickness: float,
    profile_depth: float,
    profile_run: float,
    inside_edge: str = "right",
    kind: ProfileKind = ProfileKind.SHAKER,
) -> Profile:
    """Build the cross-section of a stile.

    Args:
        width: Stile width (across the frame).
        thickness: Door thickness.
        profile_depth: Bevel depth into the thickness.
        profile_run: Bevel run across the width.
        inside_edge: ``"right"`` for a left stile, ``"left"`` for a right stile.
        kind: Inside profile kind.

    Returns:
        The stile profile with ``across`` measured along frame X.
    """
    if inside_edge not in ("left", "right"):
        raise ValueError("Stile inside_edge must be 'left' or 'right'")
    points = _base_points(width, thickness, profile_depth, profile_run, kind)
    if inside_edge == "left":
        points = [(width - across, depth) for across, depth in reversed(points)]
    return Profile(points=tuple(points), kind=kind)


def rail_profile(
    width: float,
    thickness: float,
    profile_depth: float,
    profile_run: float,
    inside_edge: str = "top",
    kind: ProfileKind = ProfileKind.SHAKER,
) -> Profile:
    """Build the cross-section of a rail.

    ``across`` is measured along frame Z. A bottom rail carries its inside
    profile on the top edge; a top rail is mirrored so the profile sits on
    its bottom edge.
    """
    if inside_edge not in ("top", "bottom"):
        raise ValueError("Rail inside_edge must be 'top' or 'bottom'")
    points = _base_points(width, thickness, profile_depth, profile_run, kind)
    if inside_edge == "bottom":
        points = [(width - across, depth) for across, depth in reversed(points)]
    return Profile(points=tuple(points), kind=kind)
