"""Core data structures for the octree center search."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

Offset = Tuple[int, int, int]
PointCloud = np.ndarray

LATTICE_SIZE = 3
LATTICE_VERTICES = LATTICE_SIZE ** 3
CORNER_INDICES = (0, 2)
SUB_CUBE_OFFSETS: Tuple[Offset, ...] = tuple(
    (x, y, z) for x in range(2) for y in range(2) for z in range(2)
)


class InvalidInputError(ValueError):
    """Raised when a search is requested with an unusable cloud or round count."""


class CorruptDataError(ValueError):
    """Raised when a persisted cloud fails the sanity check."""


@dataclass(frozen=True)
class Point:
    """Immutable 3D coordinate."""

    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "z", float(self.z))

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def midpoint(self, other: "Point") -> "Point":
        return Point((self.x + other.x) / 2, (self.y + other.y) / 2, (self.z + other.z) / 2)


ORIGIN = Point(0.0, 0.0, 0.0)


def as_cloud_array(points) -> PointCloud:
    """Return ``points`` as a read-only ``(N, 3)`` float64 array.

    Accepts an existing array or any sequence of :class:`Point` instances or
    coordinate triples.
    """

    try:
        if isinstance(points, np.ndarray):
            array = np.asarray(points, dtype=np.float64)
        else:
            rows = [p.as_tuple() if isinstance(p, Point) else tuple(p) for p in points]
            array = np.asarray(rows, dtype=np.float64).reshape(len(rows), -1) if rows else np.empty((0, 3))
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"point cloud must have shape (N, 3): {exc}") from exc
    if array.ndim != 2 or array.shape[1] != 3:
        raise InvalidInputError(f"point cloud must have shape (N, 3), got {array.shape}")
    view = array.view()
    view.flags.writeable = False
    return view


@dataclass
class CandidateVertex:
    """Lattice vertex whose distance-sum is computed once per batch."""

    coord: Point = ORIGIN
    distance: float = 0.0
    processed: bool = False

    def record(self, distance: float) -> None:
        if self.processed:
            raise RuntimeError(f"vertex at {self.coord} was already processed")
        self.distance = float(distance)
        self.processed = True

    def clone(self) -> "CandidateVertex":
        return replace(self)


def lattice_index(x: int, y: int, z: int) -> int:
    """Map lattice coordinates in ``{0, 1, 2}`` to the flat arena index ``9x + 3y + z``."""

    if not (0 <= x < LATTICE_SIZE and 0 <= y < LATTICE_SIZE and 0 <= z < LATTICE_SIZE):
        raise IndexError(f"lattice position ({x}, {y}, {z}) out of range")
    return (x * LATTICE_SIZE + y) * LATTICE_SIZE + z


def lattice_position(index: int) -> Offset:
    """Inverse of :func:`lattice_index`."""

    if not 0 <= index < LATTICE_VERTICES:
        raise IndexError(f"lattice index {index} out of range")
    x, rest = divmod(index, LATTICE_SIZE * LATTICE_SIZE)
    y, z = divmod(rest, LATTICE_SIZE)
    return (x, y, z)


def _corner_positions() -> List[Offset]:
    return [(x, y, z) for x in CORNER_INDICES for y in CORNER_INDICES for z in CORNER_INDICES]


@dataclass
class CubeState:
    """One level of the search cube: a 3x3x3 lattice plus its half-side-length.

    Positions with every component in ``{0, 2}`` are the cube corners; the
    remaining 19 are edge midpoints, face centers and the cube center.
    """

    half_side: float
    vertices: List[CandidateVertex] = field(
        default_factory=lambda: [CandidateVertex() for _ in range(LATTICE_VERTICES)]
    )

    def __post_init__(self) -> None:
        if len(self.vertices) != LATTICE_VERTICES:
            raise ValueError(f"cube state needs {LATTICE_VERTICES} vertices, got {len(self.vertices)}")

    @classmethod
    def unit(cls, half_side: float = 0.5) -> "CubeState":
        """Lattice of the cube ``[0, 2*half_side]^3`` with only the corners placed."""

        state = cls(half_side=half_side)
        for x, y, z in _corner_positions():
            state.vertex(x, y, z).coord = Point(x * half_side, y * half_side, z * half_side)
        return state

    def vertex(self, x: int, y: int, z: int) -> CandidateVertex:
        return self.vertices[lattice_index(x, y, z)]

    @property
    def lower_corner(self) -> Point:
        return self.vertex(0, 0, 0).coord

    def corners(self) -> List[CandidateVertex]:
        return [self.vertex(*pos) for pos in _corner_positions()]

    def place_pending(self) -> List[CandidateVertex]:
        """Assign ``lower_corner + index * half_side`` to every unprocessed vertex."""

        lower = self.lower_corner
        placed = []
        for index, vertex in enumerate(self.vertices):
            if vertex.processed:
                continue
            x, y, z = lattice_position(index)
            vertex.coord = Point(
                lower.x + x * self.half_side,
                lower.y + y * self.half_side,
                lower.z + z * self.half_side,
            )
            placed.append(vertex)
        return placed

    def sub_cube_vertices(self, offset: Offset) -> List[CandidateVertex]:
        ox, oy, oz = offset
        if not all(component in (0, 1) for component in offset):
            raise IndexError(f"sub-cube offset {offset} out of range")
        return [
            self.vertex(ox + dx, oy + dy, oz + dz)
            for dx in range(2)
            for dy in range(2)
            for dz in range(2)
        ]

    def sub_cube_cost(self, offset: Offset) -> float:
        # fsum is order independent, so mirrored sub-cubes tie exactly
        return math.fsum(v.distance for v in self.sub_cube_vertices(offset))

    def sub_cube_costs(self) -> List[Tuple[Offset, float]]:
        return [(offset, self.sub_cube_cost(offset)) for offset in SUB_CUBE_OFFSETS]

    def select_sub_cube(self, costs: Optional[Sequence[Tuple[Offset, float]]] = None) -> Tuple[Offset, float]:
        """Return the cheapest sub-cube.

        Ties resolve to the offset that comes first in ascending ``(x, y, z)``
        enumeration order.
        """

        if costs is None:
            costs = self.sub_cube_costs()
        best_offset, best_cost = costs[0]
        for offset, cost in costs[1:]:
            if cost < best_cost:
                best_offset, best_cost = offset, cost
        return best_offset, best_cost

    def shrink(self, offset: Offset) -> "CubeState":
        """Build the next lattice from the sub-cube at ``offset``."""

        ox, oy, oz = offset
        nxt = CubeState(half_side=self.half_side / 2)
        for x, y, z in _corner_positions():
            source = self.vertex(ox + x // 2, oy + y // 2, oz + z // 2)
            nxt.vertices[lattice_index(x, y, z)] = source.clone()
        return nxt

    def center(self) -> Point:
        return self.vertex(0, 0, 0).coord.midpoint(self.vertex(2, 2, 2).coord)


@dataclass
class RoundRecord:
    """Outcome of a single refinement round."""

    round_index: int
    offset: Offset
    cost: float
    costs: List[Tuple[Offset, float]]
    half_side: float
    lower_corner: Point


@dataclass
class SearchResult:
    center: Point
    iterations: int
    rounds: List[RoundRecord] = field(default_factory=list)
    workers: int = 1
    elapsed_s: float = 0.0


__all__ = [
    "CORNER_INDICES",
    "CandidateVertex",
    "CorruptDataError",
    "CubeState",
    "InvalidInputError",
    "LATTICE_SIZE",
    "LATTICE_VERTICES",
    "Offset",
    "ORIGIN",
    "Point",
    "PointCloud",
    "RoundRecord",
    "SUB_CUBE_OFFSETS",
    "SearchResult",
    "as_cloud_array",
    "lattice_index",
    "lattice_position",
]
