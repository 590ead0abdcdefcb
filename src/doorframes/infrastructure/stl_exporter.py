"""STL export functionality using numpy-stl."""

from pathlib import Path

import numpy as np
from stl import mesh

from doorframes.contracts import SolidProtocol
from doorframes.domain import JoinResult


class StlMeshBuilder:
    """Builds STL meshes from boundary-representation solids.

    Coordinate System Transformation:
    The frame uses Z-up coordinates (X=width, Y=thickness, Z=height). Many
    STL viewers use Y-up coordinates, so vertices are written as:
    - x' = x (width unchanged)
    - y' = z (frame height becomes viewer vertical)
    - z' = y (material thickness becomes viewer depth)
    """

    def build_solid_mesh(self, solid: SolidProtocol) -> mesh.Mesh:
        """Create an STL mesh for one solid in world coordinates.

        Each planar face is fan-triangulated from its first vertex, which is
        exact for the convex faces frame members are made of.

        Args:
            solid: The solid to convert.

        Returns:
            A numpy-stl Mesh object with one triangle per fan segment.
        """
        tx, ty, tz = solid.translation
        triangles: list[list[tuple[float, float, float]]] = []
        for face in solid.faces:
            points = [
                (x + tx, z + tz, y + ty)
                for x, y, z in (vertex.position for vertex in face.vertices)
            ]
            # The axis swap mirrors the mesh; reversed winding keeps normals outward.
            for index in range(1, len(points) - 1):
                triangles.append([points[0], points[index + 1], points[index]])

        solid_mesh = mesh.Mesh(np.zeros(len(triangles), dtype=mesh.Mesh.dtype))
        for i, triangle in enumerate(triangles):
            solid_mesh.vectors[i] = np.array(triangle)
        return solid_mesh

    def combine_meshes(self, meshes: list[mesh.Mesh]) -> mesh.Mesh:
        """Combine multiple meshes into a single mesh.

        Args:
            meshes: List of meshes to combine.

        Returns:
            A single combined mesh containing all faces.
        """
        if not meshes:
            return mesh.Mesh(np.zeros(0, dtype=mesh.Mesh.dtype))

        total_faces = sum(m.vectors.shape[0] for m in meshes)
        combined = mesh.Mesh(np.zeros(total_faces, dtype=mesh.Mesh.dtype))

        offset = 0
        for m in meshes:
            num_faces = m.vectors.shape[0]
            combined.vectors[offset : offset + num_faces] = m.vectors
            offset += num_faces

        return combined


class StlExporter:
    """Exports built frames to STL format."""

    def __init__(self, mesh_builder: StlMeshBuilder | None = None) -> None:
        self.mesh_builder = mesh_builder or StlMeshBuilder()

    def export(self, result: JoinResult) -> mesh.Mesh:
        """Export every member of a frame to one STL mesh."""
        meshes = [self.mesh_builder.build_solid_mesh(member) for member in result.members]
        return self.mesh_builder.combine_meshes(meshes)

    def export_to_file(self, result: JoinResult, filepath: Path | str) -> None:
        """Export a frame to an STL file.

        Args:
            result: The built frame.
            filepath: Path where the STL file will be saved.
        """
        combined_mesh = self.export(result)
        combined_mesh.save(str(filepath))
