"""In-memory boundary-representation geometry library.

Implements the host geometry protocols from ``doorframes.contracts`` so the
frame assembler and corner join engine can run without a CAD application.
"""

from .document import BrepDocument, solid_to_trimesh
from .solid import (
    Bounds,
    BrepEdge,
    BrepFace,
    BrepSolid,
    BrepVertex,
    point_in_polygon,
)

__all__ = [
    "Bounds",
    "BrepDocument",
    "BrepEdge",
    "BrepFace",
    "BrepSolid",
    "BrepVertex",
    "point_in_polygon",
    "solid_to_trimesh",
]
