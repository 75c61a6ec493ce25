"""
Mesh-level plane slicing into upper and lower hulls.

Walks every triangle of the input mesh in index order, splits it against the
cutting plane, and accumulates the fragments into two triangle lists plus the
cross-section point list. Each non-empty list is then rebuilt into a fresh
triangle-list mesh with unshared vertices and recomputed normals.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import numpy as np
import trimesh

from hull_slicer.contracts import MeshData, SliceConfig, to_vec3
from hull_slicer.normals import NormalFunction, get_normal_function
from hull_slicer.plane import Plane, SideOfPlane
from hull_slicer.triangle import IntersectionResult, Triangle

logger = logging.getLogger(__name__)

_SIDE_BY_CODE = {side.value: side for side in SideOfPlane}


@dataclass
class HullMesh:
    """Rebuilt hull: 3 unshared vertices per triangle, sequential indices."""
    vertices: np.ndarray  # (3T, 3)
    uvs: np.ndarray       # (3T, 2)
    indices: np.ndarray   # (3T,)
    normals: np.ndarray   # (3T, 3)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    @property
    def faces(self) -> np.ndarray:
        return self.indices.reshape(-1, 3)

    def to_trimesh(self) -> trimesh.Trimesh:
        """Wrap as a trimesh.Trimesh without merging vertices."""
        return trimesh.Trimesh(
            vertices=self.vertices.copy(),
            faces=self.faces.copy(),
            vertex_normals=self.normals.copy(),
            visual=trimesh.visual.TextureVisuals(uv=self.uvs.copy()),
            process=False,
        )


@dataclass
class SlicedHull:
    """Result of one slice: up to two hull meshes and the cut points."""
    upper_hull: Optional[HullMesh]
    lower_hull: Optional[HullMesh]
    cross_section: np.ndarray  # (M, 3) intersection points, unordered
    stats: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "stats": dict(self.stats),
            "has_upper_hull": self.upper_hull is not None,
            "has_lower_hull": self.lower_hull is not None,
            "cross_section": [to_vec3(p) for p in self.cross_section],
        }


def slice_mesh(
    mesh: Union[MeshData, trimesh.Trimesh, None],
    plane: Plane,
    config: Optional[SliceConfig] = None,
    recompute_normals: Optional[NormalFunction] = None,
) -> Optional[SlicedHull]:
    """Slice *mesh* with *plane* into upper and lower hulls.

    Args:
        mesh: MeshData or trimesh.Trimesh. Indices are trusted.
        plane: Cutting plane; ABOVE goes to the upper hull.
        config: Slice parameters. ``config.epsilon`` overrides the plane's
            ON tolerance when set.
        recompute_normals: Optional ``f(vertices, indices) -> normals``;
            defaults to the function named by ``config.normal_mode``.

    Returns:
        SlicedHull, or None when the mesh is missing or has no triangles.
        A hull that received no triangles is None inside the result.
    """
    if config is None:
        config = SliceConfig()

    if mesh is None:
        logger.debug("Slice skipped: no mesh")
        return None
    if isinstance(mesh, trimesh.Trimesh):
        mesh = MeshData.from_trimesh(mesh)
    if mesh.triangle_count == 0:
        logger.debug("Slice skipped: mesh has no triangles")
        return None

    if config.epsilon is not None and config.epsilon != plane.epsilon:
        plane = Plane(normal=plane.normal, distance=plane.distance, epsilon=config.epsilon)
    if recompute_normals is None:
        recompute_normals = get_normal_function(config.normal_mode, config.smooth_digits)

    vertices = mesh.vertices
    uvs = mesh.uvs
    indices = mesh.indices

    # each vertex classified once, shared by every triangle that uses it
    vertex_sides = [_SIDE_BY_CODE[code] for code in plane.classify_points(vertices).tolist()]

    # reused for every triangle; contents are only valid until the next split
    result = IntersectionResult()

    upper: List[Triangle] = []
    lower: List[Triangle] = []
    cross: List[np.ndarray] = []
    split_count = 0

    for index in range(0, mesh.triangle_count * 3, 3):
        tri_idx = indices[index:index + 3]
        tri = Triangle(vertices[tri_idx], uvs[tri_idx])
        sides = [vertex_sides[i] for i in tri_idx.tolist()]

        if tri.split(plane, result, sides):
            split_count += 1
            upper.extend(result.upper())
            lower.extend(result.lower())
            cross.extend(result.points())
        else:
            # first vertex decides; ON counts as upper
            if sides[0] is SideOfPlane.BELOW:
                lower.append(tri)
            else:
                upper.append(tri)

    upper_hull = create_from(upper, recompute_normals)
    lower_hull = create_from(lower, recompute_normals)

    stats = {
        "source_triangles": mesh.triangle_count,
        "split_triangles": split_count,
        "upper_triangles": len(upper),
        "lower_triangles": len(lower),
        "cross_section_points": len(cross),
    }
    logger.debug(
        "Sliced %d triangles (%d split): upper=%d lower=%d cross=%d",
        stats["source_triangles"], split_count,
        len(upper), len(lower), len(cross),
    )

    cross_section = np.array(cross, dtype=np.float64).reshape(-1, 3)
    return SlicedHull(
        upper_hull=upper_hull,
        lower_hull=lower_hull,
        cross_section=cross_section,
        stats=stats,
    )


def create_from(
    hull: List[Triangle],
    recompute_normals: Optional[NormalFunction] = None,
) -> Optional[HullMesh]:
    """Rebuild a triangle list into a mesh; None for an empty list."""
    count = len(hull)
    if count <= 0:
        return None
    if recompute_normals is None:
        recompute_normals = get_normal_function("flat")

    vertices = np.empty((count * 3, 3), dtype=np.float64)
    uvs = np.empty((count * 3, 2), dtype=np.float64)
    for i, tri in enumerate(hull):
        vertices[i * 3:i * 3 + 3] = tri.positions
        uvs[i * 3:i * 3 + 3] = tri.uvs
    indices = np.arange(count * 3, dtype=np.int64)

    normals = recompute_normals(vertices, indices)
    return HullMesh(vertices=vertices, uvs=uvs, indices=indices, normals=normals)
