"""
Per-vertex normal recomputation for rebuilt hull meshes.

Hull meshes never share vertices between triangles, so the default is flat
per-face normals. ``smooth_normals`` welds coincident positions for the
purpose of averaging only; the vertex buffer itself is left unshared.
"""
import functools
import logging
from typing import Callable, Dict

import numpy as np
import trimesh

logger = logging.getLogger(__name__)

NormalFunction = Callable[[np.ndarray, np.ndarray], np.ndarray]


def face_normals(vertices: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Unit normal per triangle; zero-area faces give a zero vector."""
    mesh = trimesh.Trimesh(
        vertices=vertices,
        faces=indices.reshape(-1, 3),
        process=False,
    )
    return np.array(mesh.face_normals, dtype=np.float64)


def flat_normals(vertices: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Each vertex takes the normal of the face that references it."""
    normals = np.zeros((len(vertices), 3), dtype=np.float64)
    if len(indices) == 0:
        return normals
    per_face = face_normals(vertices, indices)
    normals[indices.reshape(-1, 3)] = per_face[:, None, :]
    return normals


def smooth_normals(
    vertices: np.ndarray,
    indices: np.ndarray,
    digits: int = 6,
) -> np.ndarray:
    """Weighted average of face normals over coincident positions.

    Positions are matched after rounding to *digits* decimals; the averaging
    itself is trimesh's vertex normal computation on the welded mesh.
    """
    if len(indices) == 0:
        return np.zeros((len(vertices), 3), dtype=np.float64)

    unique, inverse = trimesh.grouping.unique_rows(vertices, digits=digits)
    welded = trimesh.Trimesh(
        vertices=vertices[unique],
        faces=inverse[indices].reshape(-1, 3),
        process=False,
    )
    logger.debug(
        "Smoothed normals over %d vertices (%d welded positions)",
        len(vertices), len(unique),
    )
    return np.array(welded.vertex_normals, dtype=np.float64)[inverse]


# mode -> factory taking the weld precision
_NORMAL_MODES: Dict[str, Callable[[int], NormalFunction]] = {
    "flat": lambda digits: flat_normals,
    "smooth": lambda digits: functools.partial(smooth_normals, digits=digits),
}


def get_normal_function(mode: str, digits: int = 6) -> NormalFunction:
    """Resolve a normal recomputation strategy by name."""
    if mode not in _NORMAL_MODES:
        raise ValueError(
            f"Unknown normal mode '{mode}'; expected one of {sorted(_NORMAL_MODES)}"
        )
    return _NORMAL_MODES[mode](digits)
