"""
Infinite cutting plane with epsilon-tolerant side classification.

The plane is stored in normal/offset form (n . p = d) with a unit normal.
Classification is a pure function of the plane and the point, so slicing the
same mesh twice always produces the same hulls.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

import numpy as np

from hull_slicer.contracts import DEFAULT_EPSILON


class SideOfPlane(Enum):
    """Which half-space a point falls in."""
    ABOVE = 1
    BELOW = -1
    ON = 0


@dataclass(frozen=True, eq=False)
class Plane:
    """Oriented plane n . p = d; ABOVE is the side the normal points to."""
    normal: np.ndarray                         # (3,) unit normal
    distance: float = 0.0                      # signed distance from origin
    epsilon: float = DEFAULT_EPSILON

    def __post_init__(self):
        n = np.asarray(self.normal, dtype=np.float64).reshape(3)
        length = float(np.linalg.norm(n))
        if length < 1e-12 or not np.isfinite(length):
            raise ValueError(f"Plane normal must be non-zero, got {n.tolist()}")
        n = n / length
        n.setflags(write=False)
        # frozen dataclass: bypass __setattr__ to store the normalised copy
        object.__setattr__(self, "normal", n)
        object.__setattr__(self, "distance", float(self.distance))
        object.__setattr__(self, "epsilon", float(self.epsilon))

    # ─── Construction ────────────────────────────────────────────────────────

    @classmethod
    def from_point_normal(
        cls,
        point: Sequence[float],
        normal: Sequence[float],
        epsilon: float = DEFAULT_EPSILON,
    ) -> "Plane":
        """Plane through *point* facing *normal*."""
        n = np.asarray(normal, dtype=np.float64)
        norm = np.linalg.norm(n)
        if norm < 1e-12:
            raise ValueError("Plane normal must be non-zero")
        n = n / norm
        return cls(normal=n, distance=float(np.dot(n, point)), epsilon=epsilon)

    @classmethod
    def from_points(
        cls,
        a: Sequence[float],
        b: Sequence[float],
        c: Sequence[float],
        epsilon: float = DEFAULT_EPSILON,
    ) -> "Plane":
        """Plane through three points; normal follows the a->b->c winding."""
        a = np.asarray(a, dtype=np.float64)
        n = np.cross(np.asarray(b, dtype=np.float64) - a,
                     np.asarray(c, dtype=np.float64) - a)
        if np.linalg.norm(n) < 1e-12:
            raise ValueError("Cannot build a plane from collinear points")
        return cls.from_point_normal(a, n, epsilon=epsilon)

    def transformed(self, matrix: np.ndarray) -> "Plane":
        """Map the plane through a 4x4 affine transform.

        Typical use is passing the inverse of an object's world matrix so a
        world-space cut can be applied to the object's local-space mesh.
        """
        m = np.asarray(matrix, dtype=np.float64).reshape(4, 4)
        point = m[:3, :3] @ (self.normal * self.distance) + m[:3, 3]
        normal = np.linalg.inv(m[:3, :3]).T @ self.normal
        return Plane.from_point_normal(point, normal, epsilon=self.epsilon)

    def flipped(self) -> "Plane":
        """Same plane with opposite orientation (upper and lower swap)."""
        return Plane(normal=-self.normal, distance=-self.distance, epsilon=self.epsilon)

    # ─── Queries ─────────────────────────────────────────────────────────────

    def signed_distance(self, point: Sequence[float]) -> float:
        return float(np.dot(self.normal, point)) - self.distance

    def classify_side(self, point: Sequence[float]) -> SideOfPlane:
        """ABOVE / BELOW, or ON when within epsilon of the plane."""
        dist = self.signed_distance(point)
        if abs(dist) < self.epsilon:
            return SideOfPlane.ON
        return SideOfPlane.ABOVE if dist > 0.0 else SideOfPlane.BELOW

    def signed_distances(self, points: np.ndarray) -> np.ndarray:
        """Vectorised signed distance for an (N, 3) array."""
        return np.asarray(points, dtype=np.float64).reshape(-1, 3) @ self.normal - self.distance

    def classify_points(self, points: np.ndarray) -> np.ndarray:
        """Vectorised classification; returns SideOfPlane values as ints (1, -1, 0).

        Agrees with ``classify_side`` point for point, NaN distances included
        (they come out BELOW).
        """
        dists = self.signed_distances(points)
        sides = np.where(dists > 0.0, SideOfPlane.ABOVE.value,
                         SideOfPlane.BELOW.value).astype(np.int8)
        sides[np.abs(dists) < self.epsilon] = SideOfPlane.ON.value
        return sides

    def intersect_segment(
        self,
        a: np.ndarray,
        b: np.ndarray,
    ) -> Tuple[float, np.ndarray]:
        """Solve for t where lerp(a, b, t) lies on the plane.

        Returns:
            (t, point). A segment parallel to the plane yields a non-finite t;
            callers only pass segments whose ends are on opposite sides.
        """
        a = np.asarray(a, dtype=np.float64)
        b = np.asarray(b, dtype=np.float64)
        da = np.dot(self.normal, a) - self.distance
        db = np.dot(self.normal, b) - self.distance
        t = da / (da - db)
        return float(t), (1.0 - t) * a + t * b
