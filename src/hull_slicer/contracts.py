"""Contracts shared by the plane slicing kernel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

Vec3 = Tuple[float, float, float]

DEFAULT_EPSILON = 1e-4


@dataclass(frozen=True)
class SliceConfig:
    """Configuration for a single mesh slice."""

    # Overrides the plane's ON tolerance when set
    epsilon: Optional[float] = None
    normal_mode: str = "flat"  # "flat" | "smooth"
    smooth_digits: int = 6


@dataclass
class MeshData:
    """Triangle-list mesh: positions, per-vertex UVs and a flat index buffer.

    ``indices`` are assumed to be valid offsets into ``vertices`` and ``uvs``.
    The slicing kernel does not check this; call ``validate`` at the boundary
    when the input is untrusted.
    """

    vertices: np.ndarray  # (N, 3)
    uvs: np.ndarray       # (N, 2)
    indices: np.ndarray   # (3T,)

    def __post_init__(self):
        self.vertices = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        self.indices = np.asarray(self.indices, dtype=np.int64).reshape(-1)
        if self.uvs is None:
            self.uvs = np.zeros((len(self.vertices), 2), dtype=np.float64)
        else:
            self.uvs = np.asarray(self.uvs, dtype=np.float64).reshape(-1, 2)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    @classmethod
    def from_trimesh(cls, mesh) -> "MeshData":
        """Build from a ``trimesh.Trimesh``; missing UVs become zeros."""
        uv = getattr(mesh.visual, "uv", None)
        if uv is not None and len(uv) != len(mesh.vertices):
            uv = None
        return cls(
            vertices=np.array(mesh.vertices, dtype=np.float64),
            uvs=None if uv is None else np.array(uv, dtype=np.float64),
            indices=np.array(mesh.faces, dtype=np.int64).reshape(-1),
        )

    @classmethod
    def from_arrays(
        cls,
        vertices: Sequence[Sequence[float]],
        indices: Sequence[int],
        uvs: Optional[Sequence[Sequence[float]]] = None,
    ) -> "MeshData":
        return cls(vertices=np.asarray(vertices), uvs=uvs, indices=np.asarray(indices))

    def validate(self) -> List[str]:
        """Check buffer consistency.

        Returns list of issue strings (empty = ok).
        """
        issues = []
        if len(self.indices) % 3 != 0:
            issues.append(f"Index count {len(self.indices)} is not a multiple of 3")
        if len(self.uvs) != len(self.vertices):
            issues.append(
                f"UV count {len(self.uvs)} does not match vertex count {len(self.vertices)}"
            )
        if len(self.indices) > 0:
            lo = int(self.indices.min())
            hi = int(self.indices.max())
            if lo < 0 or hi >= len(self.vertices):
                issues.append(
                    f"Index range [{lo}, {hi}] outside vertex buffer of {len(self.vertices)}"
                )
        if not np.all(np.isfinite(self.vertices)):
            issues.append("Vertex buffer contains non-finite coordinates")
        return issues


def to_vec3(values: Sequence[float]) -> Vec3:
    return (float(values[0]), float(values[1]), float(values[2]))
