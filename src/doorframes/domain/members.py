"""Stile and rail solids built from cross-section profiles.

Members are extruded at the origin and positioned afterwards with a
translation, so one profile routine serves both stiles and both rails.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from ..contracts import FaceProtocol, GeometryDocumentProtocol, SolidProtocol
from .profiles import Profile

logger = logging.getLogger(__name__)

FRAME_DICTIONARY = "FivePieceFrame"
ROLE_KEY = "role"


class MemberRole(str, Enum):
    """Role of a frame member."""

    STILE = "stile"
    RAIL = "rail"


def _orient(face: FaceProtocol, axis: int) -> None:
    # Extrusion runs along the face normal; make it point along +axis.
    if face.normal[axis] < 0:
        face.reverse()


def build_stile(
    document: GeometryDocumentProtocol,
    profile: Profile,
    height: float,
    name: str = "",
) -> SolidProtocol:
    """Extrude a stile profile from the XY plane up along +Z.

    Args:
        document: Document that will own the solid.
        profile: Stile cross-section; ``across`` maps to X, ``depth`` to Y.
        height: Extrusion length along Z.
        name: Initial display name.

    Returns:
        The stile solid spanning ``z`` from 0 to ``height``.
    """
    solid = document.add_solid(name)
    face = solid.add_face([(across, depth, 0.0) for across, depth in profile.points])
    _orient(face, axis=2)
    solid.pushpull(face, height)
    logger.debug(f"Built stile {name!r}: height={height:.3f}")
    return solid


def build_rail(
    document: GeometryDocumentProtocol,
    profile: Profile,
    length: float,
    name: str = "",
) -> SolidProtocol:
    """Extrude a rail profile from the YZ plane along +X.

    Args:
        document: Document that will own the solid.
        profile: Rail cross-section; ``across`` maps to Z, ``depth`` to Y.
        length: Extrusion length along X.
        name: Initial display name.

    Returns:
        The rail solid spanning ``x`` from 0 to ``length``.
    """
    solid = document.add_solid(name)
    face = solid.add_face([(0.0, depth, across) for across, depth in profile.points])
    _orient(face, axis=0)
    solid.pushpull(face, length)
    logger.debug(f"Built rail {name!r}: length={length:.3f}")
    return solid


def translate_member(solid: SolidProtocol, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
    if x == 0.0 and y == 0.0 and z == 0.0:
        return
    solid.transform((x, y, z))


def apply_member_metadata(
    solid: SolidProtocol,
    role: MemberRole,
    name: str,
    tag: str | None = None,
    material: Any = None,
) -> None:
    """Attach role, display name, tag and material to a member.

    The role is written to the ``FRAME_DICTIONARY`` attribute dictionary,
    which is how later rebuilds find and remove the member.
    """
    solid.set_attribute(FRAME_DICTIONARY, ROLE_KEY, role.value)
    solid.name = name
    if tag is not None:
        solid.tag = tag
    if material is not None:
        solid.material = material
        for face in solid.faces:
            face.material = material


def member_role(solid: SolidProtocol) -> MemberRole | None:
    dictionary = solid.attribute_dictionary(FRAME_DICTIONARY)
    if not dictionary or not dictionary.get(ROLE_KEY):
        return None
    return MemberRole(dictionary[ROLE_KEY])


def remove_existing_frame_members(document: GeometryDocumentProtocol) -> int:
    """Erase every solid tagged as a frame member.

    Returns:
        Number of solids erased.
    """
    removed = 0
    for solid in document.entities:
        if member_role(solid) is not None:
            document.erase(solid)
            removed += 1
    if removed:
        logger.info(f"Removed {removed} existing frame members")
    return removed
