"""
Triangle primitive and the per-triangle split against a cutting plane.

A straddling triangle is cut along the two edges that cross the plane. The
new vertices get both position and UV from the same interpolation parameter,
so the texture mapping stays continuous across the cut.
"""
from typing import List, Optional, Sequence, Tuple

import numpy as np

from hull_slicer.plane import Plane, SideOfPlane


class Triangle:
    """Three (position, uv) pairs in fixed winding order. Never mutated."""

    __slots__ = ("positions", "uvs")

    def __init__(self, positions: np.ndarray, uvs: Optional[np.ndarray] = None):
        self.positions = np.asarray(positions, dtype=np.float64).reshape(3, 3)
        if uvs is None:
            self.uvs = np.zeros((3, 2), dtype=np.float64)
        else:
            self.uvs = np.asarray(uvs, dtype=np.float64).reshape(3, 2)

    @classmethod
    def from_vertices(
        cls,
        a: Sequence[float],
        b: Sequence[float],
        c: Sequence[float],
        uv_a: Sequence[float] = (0.0, 0.0),
        uv_b: Sequence[float] = (0.0, 0.0),
        uv_c: Sequence[float] = (0.0, 0.0),
    ) -> "Triangle":
        return cls(np.array([a, b, c]), np.array([uv_a, uv_b, uv_c]))

    @property
    def position_a(self) -> np.ndarray:
        return self.positions[0]

    @property
    def position_b(self) -> np.ndarray:
        return self.positions[1]

    @property
    def position_c(self) -> np.ndarray:
        return self.positions[2]

    @property
    def uv_a(self) -> np.ndarray:
        return self.uvs[0]

    @property
    def uv_b(self) -> np.ndarray:
        return self.uvs[1]

    @property
    def uv_c(self) -> np.ndarray:
        return self.uvs[2]

    def area(self) -> float:
        a, b, c = self.positions
        return 0.5 * float(np.linalg.norm(np.cross(b - a, c - a)))

    def __repr__(self) -> str:
        return f"Triangle({self.positions.tolist()})"

    def split(
        self,
        plane: Plane,
        result: "IntersectionResult",
        sides: Optional[Sequence[SideOfPlane]] = None,
    ) -> bool:
        """Cut this triangle with *plane*, writing fragments into *result*.

        Returns False (and leaves *result* untouched) when the vertices do not
        fall on both sides of the plane. Vertices ON the plane never count as
        crossing; when the triangle does straddle, they are folded into the
        ABOVE side.

        On a split the isolated vertex I (alone on its side) keeps the
        triangle (I, p, q) and the opposite side gets the quad (p, J, K, q)
        as two triangles, where p and q are the crossings of edges I->J and
        I->K. An edge ending at an ON vertex is cut at that vertex. Every
        fragment keeps the source winding.

        Args:
            sides: Precomputed classification of the three vertices against
                *plane*; computed here when omitted.
        """
        if sides is None:
            sides = [plane.classify_side(p) for p in self.positions]

        if SideOfPlane.ABOVE not in sides or SideOfPlane.BELOW not in sides:
            return False

        folded = [SideOfPlane.BELOW if s is SideOfPlane.BELOW else SideOfPlane.ABOVE
                  for s in sides]
        below_count = folded.count(SideOfPlane.BELOW)
        isolated_side = SideOfPlane.BELOW if below_count == 1 else SideOfPlane.ABOVE
        i = folded.index(isolated_side)
        j = (i + 1) % 3
        k = (i + 2) % 3

        pos = self.positions
        uv = self.uvs

        p, uv_p = _edge_crossing(plane, pos[i], pos[j], uv[i], uv[j], sides[j])
        q, uv_q = _edge_crossing(plane, pos[i], pos[k], uv[i], uv[k], sides[k])

        single = Triangle(np.array([pos[i], p, q]), np.array([uv[i], uv_p, uv_q]))
        quad_a = Triangle(np.array([p, pos[j], pos[k]]), np.array([uv_p, uv[j], uv[k]]))
        quad_b = Triangle(np.array([p, pos[k], q]), np.array([uv_p, uv[k], uv_q]))

        result.clear()
        if isolated_side is SideOfPlane.ABOVE:
            result.add_upper_hull(single)
            result.add_lower_hull(quad_a)
            result.add_lower_hull(quad_b)
        else:
            result.add_lower_hull(single)
            result.add_upper_hull(quad_a)
            result.add_upper_hull(quad_b)
        result.add_intersection_point(p)
        result.add_intersection_point(q)
        return True


class IntersectionResult:
    """Reusable scratch buffer for one Triangle.split call.

    Holds up to two triangles per hull and up to two new intersection
    points. Contents are overwritten by the next split; consume them first.
    """

    CAPACITY = 2

    def __init__(self):
        self.upper_hull: List[Optional[Triangle]] = [None] * self.CAPACITY
        self.lower_hull: List[Optional[Triangle]] = [None] * self.CAPACITY
        self.intersection_points: List[Optional[np.ndarray]] = [None] * self.CAPACITY
        self.upper_hull_count = 0
        self.lower_hull_count = 0
        self.intersection_point_count = 0

    def clear(self) -> "IntersectionResult":
        self.upper_hull_count = 0
        self.lower_hull_count = 0
        self.intersection_point_count = 0
        return self

    def add_upper_hull(self, tri: Triangle) -> "IntersectionResult":
        self.upper_hull[self.upper_hull_count] = tri
        self.upper_hull_count += 1
        return self

    def add_lower_hull(self, tri: Triangle) -> "IntersectionResult":
        self.lower_hull[self.lower_hull_count] = tri
        self.lower_hull_count += 1
        return self

    def add_intersection_point(self, point: np.ndarray) -> "IntersectionResult":
        self.intersection_points[self.intersection_point_count] = point
        self.intersection_point_count += 1
        return self

    @property
    def is_valid(self) -> bool:
        return self.upper_hull_count > 0 or self.lower_hull_count > 0

    def upper(self) -> List[Triangle]:
        return self.upper_hull[:self.upper_hull_count]

    def lower(self) -> List[Triangle]:
        return self.lower_hull[:self.lower_hull_count]

    def points(self) -> List[np.ndarray]:
        return self.intersection_points[:self.intersection_point_count]


def _lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return (1.0 - t) * a + t * b


def _edge_crossing(
    plane: Plane,
    start: np.ndarray,
    end: np.ndarray,
    uv_start: np.ndarray,
    uv_end: np.ndarray,
    end_side: SideOfPlane,
) -> Tuple[np.ndarray, np.ndarray]:
    """Position and UV where the edge start->end meets the plane.

    An ON end vertex is the crossing itself. Otherwise t is clamped to
    [0, 1] so the new vertex never leaves the edge.
    """
    if end_side is SideOfPlane.ON:
        return end.copy(), uv_end.copy()
    t, _ = plane.intersect_segment(start, end)
    t = min(max(t, 0.0), 1.0)
    return _lerp(start, end, t), _lerp(uv_start, uv_end, t)
