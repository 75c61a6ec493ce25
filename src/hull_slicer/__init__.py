"""Public API for the plane slicing kernel."""

from hull_slicer.contracts import MeshData, SliceConfig
from hull_slicer.plane import Plane, SideOfPlane
from hull_slicer.slicer import HullMesh, SlicedHull, slice_mesh
from hull_slicer.triangle import IntersectionResult, Triangle

__all__ = [
    "HullMesh",
    "IntersectionResult",
    "MeshData",
    "Plane",
    "SideOfPlane",
    "SliceConfig",
    "SlicedHull",
    "Triangle",
    "slice_mesh",
]
