"""Infrastructure layer - geometry kernel, exporters and formatters."""

from .brep import Bounds, BrepDocument, BrepSolid
from .formatters import FrameReportFormatter, JsonExporter
from .stl_exporter import StlExporter, StlMeshBuilder

__all__ = [
    "Bounds",
    "BrepDocument",
    "BrepSolid",
    "FrameReportFormatter",
    "JsonExporter",
    "StlExporter",
    "StlMeshBuilder",
]
