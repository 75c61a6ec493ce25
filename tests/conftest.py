"""
Shared test fixtures for the plane slicing kernel.
"""
import sys
from pathlib import Path

import numpy as np
import pytest
import trimesh

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hull_slicer.contracts import MeshData
from hull_slicer.plane import Plane


@pytest.fixture
def unit_triangle_mesh():
    """Single triangle (0,0,0),(1,0,0),(0,1,0) with UVs matching x/y."""
    return MeshData(
        vertices=np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]),
        uvs=np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]),
        indices=np.array([0, 1, 2]),
    )


@pytest.fixture
def welded_quad_mesh():
    """Unit square in the XY plane as two triangles sharing an edge."""
    return MeshData(
        vertices=np.array([
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [1.0, 1.0, 0.0],
            [0.0, 1.0, 0.0],
        ]),
        uvs=np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]),
        indices=np.array([0, 1, 2, 0, 2, 3]),
    )


@pytest.fixture
def box_mesh():
    """A 100x100x100mm box centred at the origin."""
    return trimesh.creation.box(extents=[100, 100, 100])


@pytest.fixture
def x_half_plane():
    """Plane x = 0.5 facing +X."""
    return Plane(normal=np.array([1.0, 0.0, 0.0]), distance=0.5)


@pytest.fixture
def box_mesh_file(box_mesh, tmp_path) -> str:
    path = tmp_path / "box.stl"
    box_mesh.export(str(path))
    return str(path)
