"""Contracts module - host geometry protocols and errors.

The domain layer depends on these protocols rather than on a concrete
geometry library, so any boundary-representation host that provides the
same primitives can drive the frame assembler.
"""

from .errors import (
    BooleanOperationError as BooleanOperationError,
    DegenerateFaceError as DegenerateFaceError,
    GeometryError as GeometryError,
)
from .protocols import (
    BoundsProtocol as BoundsProtocol,
    EdgeProtocol as EdgeProtocol,
    FaceProtocol as FaceProtocol,
    GeometryDocumentProtocol as GeometryDocumentProtocol,
    Point3 as Point3,
    SolidProtocol as SolidProtocol,
    VertexProtocol as VertexProtocol,
)
